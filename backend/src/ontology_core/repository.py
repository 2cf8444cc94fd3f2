"""Ontology persistence contract and an in-memory reference implementation."""

from typing import Iterable, Optional, Protocol

from .models import AliasDef, EntityDef, EnumDef, PropertyDef, RelationDef, ShapeDef
from .scope import TenantScope
from .store import OntologyStore


class OntologyRepository(Protocol):
    """Authoritative persistence for ontology artifacts.

    Every method takes an explicit scope; implementations must never read
    or write across scopes.
    """

    async def upsert_entities(self, scope: TenantScope, entities: Iterable[EntityDef]) -> None:
        ...

    async def get_entity(self, scope: TenantScope, local_name: str) -> Optional[EntityDef]:
        ...

    async def list_entities(self, scope: TenantScope) -> list[EntityDef]:
        ...

    async def delete_entity(self, scope: TenantScope, local_name: str) -> None:
        ...

    async def upsert_properties(
        self, scope: TenantScope, properties: Iterable[PropertyDef]
    ) -> None:
        ...

    async def get_property(
        self, scope: TenantScope, owner_entity: str, local_name: str
    ) -> Optional[PropertyDef]:
        ...

    async def list_properties(self, scope: TenantScope) -> list[PropertyDef]:
        ...

    async def delete_property(
        self, scope: TenantScope, owner_entity: str, local_name: str
    ) -> None:
        ...

    async def upsert_relations(
        self, scope: TenantScope, relations: Iterable[RelationDef]
    ) -> None:
        ...

    async def get_relation(self, scope: TenantScope, local_name: str) -> Optional[RelationDef]:
        ...

    async def list_relations(self, scope: TenantScope) -> list[RelationDef]:
        ...

    async def delete_relation(self, scope: TenantScope, local_name: str) -> None:
        ...

    async def upsert_enums(self, scope: TenantScope, enums: Iterable[EnumDef]) -> None:
        ...

    async def get_enum(self, scope: TenantScope, local_name: str) -> Optional[EnumDef]:
        ...

    async def list_enums(self, scope: TenantScope) -> list[EnumDef]:
        ...

    async def delete_enum(self, scope: TenantScope, local_name: str) -> None:
        ...

    async def upsert_aliases(self, scope: TenantScope, aliases: Iterable[AliasDef]) -> None:
        ...

    async def list_aliases(self, scope: TenantScope) -> list[AliasDef]:
        ...

    async def delete_alias(
        self, scope: TenantScope, canonical: str, locale: Optional[str] = None
    ) -> None:
        ...

    async def upsert_shapes(self, scope: TenantScope, shapes: Iterable[ShapeDef]) -> None:
        ...

    async def list_shapes(self, scope: TenantScope) -> list[ShapeDef]:
        ...

    async def delete_shape(self, scope: TenantScope, applies_to_entity: str) -> None:
        ...


class InMemoryOntologyRepository:
    """OntologyRepository backed by a process-local OntologyStore.

    Useful for tests and for validating bundle files without a database.
    ``OntologyStore.load`` against this repository still produces an
    independent snapshot.
    """

    def __init__(self) -> None:
        self._store = OntologyStore()

    async def upsert_entities(self, scope: TenantScope, entities: Iterable[EntityDef]) -> None:
        self._store.upsert_entities(scope, entities)

    async def get_entity(self, scope: TenantScope, local_name: str) -> Optional[EntityDef]:
        return self._store.get_entity(scope, local_name)

    async def list_entities(self, scope: TenantScope) -> list[EntityDef]:
        return self._store.list_entities(scope)

    async def delete_entity(self, scope: TenantScope, local_name: str) -> None:
        self._store.delete_entity(scope, local_name)

    async def upsert_properties(
        self, scope: TenantScope, properties: Iterable[PropertyDef]
    ) -> None:
        self._store.upsert_properties(scope, properties)

    async def get_property(
        self, scope: TenantScope, owner_entity: str, local_name: str
    ) -> Optional[PropertyDef]:
        return self._store.get_property(scope, owner_entity, local_name)

    async def list_properties(self, scope: TenantScope) -> list[PropertyDef]:
        return self._store.list_properties(scope)

    async def delete_property(
        self, scope: TenantScope, owner_entity: str, local_name: str
    ) -> None:
        self._store.delete_property(scope, owner_entity, local_name)

    async def upsert_relations(
        self, scope: TenantScope, relations: Iterable[RelationDef]
    ) -> None:
        self._store.upsert_relations(scope, relations)

    async def get_relation(self, scope: TenantScope, local_name: str) -> Optional[RelationDef]:
        return self._store.get_relation(scope, local_name)

    async def list_relations(self, scope: TenantScope) -> list[RelationDef]:
        return self._store.list_relations(scope)

    async def delete_relation(self, scope: TenantScope, local_name: str) -> None:
        self._store.delete_relation(scope, local_name)

    async def upsert_enums(self, scope: TenantScope, enums: Iterable[EnumDef]) -> None:
        self._store.upsert_enums(scope, enums)

    async def get_enum(self, scope: TenantScope, local_name: str) -> Optional[EnumDef]:
        return self._store.get_enum(scope, local_name)

    async def list_enums(self, scope: TenantScope) -> list[EnumDef]:
        return self._store.list_enums(scope)

    async def delete_enum(self, scope: TenantScope, local_name: str) -> None:
        self._store.delete_enum(scope, local_name)

    async def upsert_aliases(self, scope: TenantScope, aliases: Iterable[AliasDef]) -> None:
        self._store.upsert_aliases(scope, aliases)

    async def list_aliases(self, scope: TenantScope) -> list[AliasDef]:
        return self._store.list_aliases(scope)

    async def delete_alias(
        self, scope: TenantScope, canonical: str, locale: Optional[str] = None
    ) -> None:
        self._store.delete_alias(scope, canonical, locale)

    async def upsert_shapes(self, scope: TenantScope, shapes: Iterable[ShapeDef]) -> None:
        self._store.upsert_shapes(scope, shapes)

    async def list_shapes(self, scope: TenantScope) -> list[ShapeDef]:
        return self._store.list_shapes(scope)

    async def delete_shape(self, scope: TenantScope, applies_to_entity: str) -> None:
        self._store.delete_shape(scope, applies_to_entity)
