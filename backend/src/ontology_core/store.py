"""In-memory index of ontology artifacts.

The store is a pure index: it performs no validation beyond refusing to
file an artifact under a scope other than its own. Lookups are always
scope-qualified, so a name that exists in another scope is simply absent.

It is not internally synchronized. Build it (or ``load`` it from a
repository) once per validation run and treat it as a read-only snapshot
while validators run against it.
"""

import asyncio
from typing import TYPE_CHECKING, Iterable, Optional, TypeVar

import structlog

from .errors import OntologyLoadError
from .models import (
    AliasDef,
    ArtifactKind,
    EntityDef,
    EnumDef,
    PropertyDef,
    RelationDef,
    ShapeDef,
)
from .scope import TenantScope

if TYPE_CHECKING:
    from .repository import OntologyRepository

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class OntologyStore:
    """Scope-partitioned index of entities, properties, relations, enums, aliases and shapes.

    Keys:
        entities, relations, enums: (scope, local_name)
        properties: (scope, owner_entity, local_name)
        shapes: (scope, applies_to_entity)
        aliases: (scope, canonical, locale)

    Upserting an existing key replaces the artifact in place; it never
    duplicates. Enumeration order is first-insertion order per scope.

    Example:
        store = OntologyStore()
        store.upsert_entities(scope, [EntityDef.create(scope, "Order")])
        store.get_entity(scope, "Order")
    """

    def __init__(self) -> None:
        self._entities: dict[TenantScope, dict[str, EntityDef]] = {}
        self._properties: dict[TenantScope, dict[tuple[str, str], PropertyDef]] = {}
        self._relations: dict[TenantScope, dict[str, RelationDef]] = {}
        self._enums: dict[TenantScope, dict[str, EnumDef]] = {}
        self._aliases: dict[TenantScope, dict[tuple[str, Optional[str]], AliasDef]] = {}
        self._shapes: dict[TenantScope, dict[str, ShapeDef]] = {}

    @staticmethod
    def _check_scope(scope: TenantScope, artifacts: Iterable[T]) -> list[T]:
        batch = list(artifacts)
        for artifact in batch:
            scope.ensure_same(artifact.scope)  # type: ignore[attr-defined]
        return batch

    # Entities

    def upsert_entities(self, scope: TenantScope, entities: Iterable[EntityDef]) -> None:
        batch = self._check_scope(scope, entities)
        index = self._entities.setdefault(scope, {})
        for entity in batch:
            index[entity.local_name] = entity

    def get_entity(self, scope: TenantScope, local_name: str) -> Optional[EntityDef]:
        return self._entities.get(scope, {}).get(local_name)

    def list_entities(self, scope: TenantScope) -> list[EntityDef]:
        return list(self._entities.get(scope, {}).values())

    def delete_entity(self, scope: TenantScope, local_name: str) -> bool:
        return self._entities.get(scope, {}).pop(local_name, None) is not None

    # Properties

    def upsert_properties(self, scope: TenantScope, properties: Iterable[PropertyDef]) -> None:
        batch = self._check_scope(scope, properties)
        index = self._properties.setdefault(scope, {})
        for prop in batch:
            index[(prop.owner_entity, prop.local_name)] = prop

    def get_property(
        self, scope: TenantScope, owner_entity: str, local_name: str
    ) -> Optional[PropertyDef]:
        return self._properties.get(scope, {}).get((owner_entity, local_name))

    def list_properties(self, scope: TenantScope) -> list[PropertyDef]:
        return list(self._properties.get(scope, {}).values())

    def delete_property(self, scope: TenantScope, owner_entity: str, local_name: str) -> bool:
        removed = self._properties.get(scope, {}).pop((owner_entity, local_name), None)
        return removed is not None

    # Relations

    def upsert_relations(self, scope: TenantScope, relations: Iterable[RelationDef]) -> None:
        batch = self._check_scope(scope, relations)
        index = self._relations.setdefault(scope, {})
        for relation in batch:
            index[relation.local_name] = relation

    def get_relation(self, scope: TenantScope, local_name: str) -> Optional[RelationDef]:
        return self._relations.get(scope, {}).get(local_name)

    def list_relations(self, scope: TenantScope) -> list[RelationDef]:
        return list(self._relations.get(scope, {}).values())

    def delete_relation(self, scope: TenantScope, local_name: str) -> bool:
        return self._relations.get(scope, {}).pop(local_name, None) is not None

    # Enums

    def upsert_enums(self, scope: TenantScope, enums: Iterable[EnumDef]) -> None:
        batch = self._check_scope(scope, enums)
        index = self._enums.setdefault(scope, {})
        for enum_def in batch:
            index[enum_def.local_name] = enum_def

    def get_enum(self, scope: TenantScope, local_name: str) -> Optional[EnumDef]:
        return self._enums.get(scope, {}).get(local_name)

    def list_enums(self, scope: TenantScope) -> list[EnumDef]:
        return list(self._enums.get(scope, {}).values())

    def delete_enum(self, scope: TenantScope, local_name: str) -> bool:
        return self._enums.get(scope, {}).pop(local_name, None) is not None

    # Aliases

    def upsert_aliases(self, scope: TenantScope, aliases: Iterable[AliasDef]) -> None:
        batch = self._check_scope(scope, aliases)
        index = self._aliases.setdefault(scope, {})
        for alias in batch:
            index[(alias.canonical, alias.locale)] = alias

    def get_alias(
        self, scope: TenantScope, canonical: str, locale: Optional[str] = None
    ) -> Optional[AliasDef]:
        return self._aliases.get(scope, {}).get((canonical, locale))

    def list_aliases(self, scope: TenantScope) -> list[AliasDef]:
        return list(self._aliases.get(scope, {}).values())

    def delete_alias(
        self, scope: TenantScope, canonical: str, locale: Optional[str] = None
    ) -> bool:
        return self._aliases.get(scope, {}).pop((canonical, locale), None) is not None

    # Shapes

    def upsert_shapes(self, scope: TenantScope, shapes: Iterable[ShapeDef]) -> None:
        batch = self._check_scope(scope, shapes)
        index = self._shapes.setdefault(scope, {})
        for shape in batch:
            index[shape.applies_to_entity] = shape

    def get_shape(self, scope: TenantScope, applies_to_entity: str) -> Optional[ShapeDef]:
        return self._shapes.get(scope, {}).get(applies_to_entity)

    def list_shapes(self, scope: TenantScope) -> list[ShapeDef]:
        return list(self._shapes.get(scope, {}).values())

    def delete_shape(self, scope: TenantScope, applies_to_entity: str) -> bool:
        return self._shapes.get(scope, {}).pop(applies_to_entity, None) is not None

    # Snapshots

    def scopes(self) -> list[TenantScope]:
        """Return every scope that has at least one artifact."""
        seen: dict[TenantScope, None] = {}
        for index in (
            self._entities,
            self._properties,
            self._relations,
            self._enums,
            self._aliases,
            self._shapes,
        ):
            for scope, artifacts in index.items():
                if artifacts:
                    seen[scope] = None
        return list(seen)

    def counts(self, scope: TenantScope) -> dict[ArtifactKind, int]:
        return {
            ArtifactKind.ENTITY: len(self._entities.get(scope, {})),
            ArtifactKind.PROPERTY: len(self._properties.get(scope, {})),
            ArtifactKind.RELATION: len(self._relations.get(scope, {})),
            ArtifactKind.ENUM: len(self._enums.get(scope, {})),
            ArtifactKind.ALIAS: len(self._aliases.get(scope, {})),
            ArtifactKind.SHAPE: len(self._shapes.get(scope, {})),
        }

    def snapshot(self, scope: TenantScope) -> "OntologyStore":
        """Copy one scope into a new, independent store.

        Artifacts are immutable, so only the indexes are copied.
        """
        copy = OntologyStore()
        copy.upsert_entities(scope, self.list_entities(scope))
        copy.upsert_properties(scope, self.list_properties(scope))
        copy.upsert_relations(scope, self.list_relations(scope))
        copy.upsert_enums(scope, self.list_enums(scope))
        copy.upsert_aliases(scope, self.list_aliases(scope))
        copy.upsert_shapes(scope, self.list_shapes(scope))
        return copy

    @classmethod
    async def load(cls, repository: "OntologyRepository", scope: TenantScope) -> "OntologyStore":
        """Build a fresh store for one scope from the persistence collaborator.

        All six kinds are fetched concurrently. The returned store is a
        snapshot: later repository writes are not reflected in it.

        Args:
            repository: Ontology persistence collaborator
            scope: The scope to load

        Returns:
            A populated OntologyStore

        Raises:
            OntologyLoadError: If the repository fails
            ScopeMismatchError: If the repository returns a foreign-scope artifact
        """
        try:
            (
                entities,
                properties,
                relations,
                enums,
                aliases,
                shapes,
            ) = await asyncio.gather(
                repository.list_entities(scope),
                repository.list_properties(scope),
                repository.list_relations(scope),
                repository.list_enums(scope),
                repository.list_aliases(scope),
                repository.list_shapes(scope),
            )
        except Exception as exc:
            logger.error(
                "ontology_store_load_failed",
                tenant_id=scope.tenant_id,
                package=scope.package,
                channel=scope.channel,
                error=str(exc),
            )
            raise OntologyLoadError(str(scope), str(exc)) from exc

        store = cls()
        store.upsert_entities(scope, entities)
        store.upsert_properties(scope, properties)
        store.upsert_relations(scope, relations)
        store.upsert_enums(scope, enums)
        store.upsert_aliases(scope, aliases)
        store.upsert_shapes(scope, shapes)

        logger.info(
            "ontology_store_loaded",
            tenant_id=scope.tenant_id,
            package=scope.package,
            channel=scope.channel,
            **{f"{kind.value}_count": count for kind, count in store.counts(scope).items()},
        )
        return store
