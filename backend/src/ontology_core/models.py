"""Data models for scoped ontology artifacts.

Artifacts are plain frozen dataclasses. They do not validate their own
cross-references; that is the job of ``ontology_core.validation``. The
``create`` factories only reject blank required names and compute the
canonical URI, so hand-built instances can still carry bad data for the
validators to report.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .curie import CurieRegistry
from .errors import ArtifactDefinitionError
from .scope import TenantScope


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require(kind: str, field_name: str, value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ArtifactDefinitionError(kind, field_name)
    return value.strip()


def _canonical_uri(local_name: str, curies: Optional[CurieRegistry]) -> str:
    return (curies or CurieRegistry()).expand(f"ldm:{local_name}")


class ArtifactKind(str, Enum):
    """The six kinds of ontology artifact."""

    ENTITY = "entity"
    PROPERTY = "property"
    RELATION = "relation"
    ENUM = "enum"
    ALIAS = "alias"
    SHAPE = "shape"


class PublicationStatus(str, Enum):
    """Lifecycle status of an artifact. Descriptive only; never gates validation."""

    PROPOSED = "proposed"
    PUBLISHED = "published"
    DEPRECATED = "deprecated"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ProvenanceRef:
    """Where an artifact definition came from.

    Attributes:
        source_uri: Document or endpoint the definition was derived from
        retrieved_at: When the source was read
        agent: Person or process that produced the definition
        retrieval_score: Relevance of the source (0.0-1.0)
        notes: Free-form notes
    """

    source_uri: str
    retrieved_at: datetime = field(default_factory=_utcnow)
    agent: Optional[str] = None
    retrieval_score: float = 1.0
    notes: Optional[str] = None


@dataclass(frozen=True)
class Governance:
    """Governance and quality facet carried by every artifact.

    Attributes:
        confidence: 0.0-1.0 confidence that the definition is correct
        complexity: Small positive score, 1 = simple
        depth: Small positive score, 1 = shallow
        status: Publication status
        version: Semantic or opaque version identifier
        provenance: Optional provenance reference
        created_at: Creation timestamp (UTC)
        updated_at: Last update timestamp (UTC)
    """

    confidence: float = 1.0
    complexity: int = 1
    depth: int = 1
    status: PublicationStatus = PublicationStatus.PROPOSED
    version: str = "0.1.0"
    provenance: Optional[ProvenanceRef] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


class RangeKind(str, Enum):
    """What a property's range points at."""

    XSD_DATATYPE = "xsd_datatype"
    ENTITY_REF = "entity_ref"


@dataclass(frozen=True)
class PropertyRange:
    """Range of a property.

    For ``XSD_DATATYPE`` the value is a datatype CURIE such as ``xsd:string``;
    for ``ENTITY_REF`` it is the local name of the target entity.
    """

    kind: RangeKind
    value: str

    @classmethod
    def string(cls) -> "PropertyRange":
        return cls(RangeKind.XSD_DATATYPE, "xsd:string")

    @classmethod
    def integer(cls) -> "PropertyRange":
        return cls(RangeKind.XSD_DATATYPE, "xsd:integer")

    @classmethod
    def boolean(cls) -> "PropertyRange":
        return cls(RangeKind.XSD_DATATYPE, "xsd:boolean")

    @classmethod
    def date_time(cls) -> "PropertyRange":
        return cls(RangeKind.XSD_DATATYPE, "xsd:dateTime")

    @classmethod
    def decimal(cls) -> "PropertyRange":
        return cls(RangeKind.XSD_DATATYPE, "xsd:decimal")

    @classmethod
    def entity(cls, target_entity: str) -> "PropertyRange":
        return cls(RangeKind.ENTITY_REF, target_entity)


@dataclass(frozen=True)
class EntityDef:
    """A class in the ontology.

    Attributes:
        scope: Owning tenant scope
        local_name: Name unique within the scope (e.g. "Person")
        canonical_uri: Expanded URI of ``ldm:<local_name>``
        label: Optional display label
        description: Optional description
        parents: Local names of parent entities in the same scope
        annotations: Lightweight key/value annotations
        governance: Governance facet
    """

    scope: TenantScope
    local_name: str
    canonical_uri: str = ""
    label: Optional[str] = None
    description: Optional[str] = None
    parents: list[str] = field(default_factory=list)
    annotations: dict[str, str] = field(default_factory=dict)
    governance: Governance = field(default_factory=Governance)

    @classmethod
    def create(
        cls,
        scope: TenantScope,
        local_name: str,
        label: Optional[str] = None,
        description: Optional[str] = None,
        parents: Optional[list[str]] = None,
        curies: Optional[CurieRegistry] = None,
    ) -> "EntityDef":
        name = _require("Entity", "local_name", local_name)
        return cls(
            scope=scope,
            local_name=name,
            canonical_uri=_canonical_uri(name, curies),
            label=label,
            description=description,
            parents=list(parents or []),
        )


@dataclass(frozen=True)
class PropertyDef:
    """A data property owned by exactly one entity.

    Attributes:
        scope: Owning tenant scope
        owner_entity: Local name of the owning entity
        local_name: Property name, unique per owner entity
        canonical_uri: Expanded URI of ``ldm:<local_name>``
        label: Optional display label
        description: Optional description
        range: Datatype or entity reference
        min_cardinality: Minimum number of values (>= 0)
        max_cardinality: Maximum number of values, None for unbounded
        annotations: Lightweight key/value annotations
        governance: Governance facet
    """

    scope: TenantScope
    owner_entity: str
    local_name: str
    canonical_uri: str = ""
    label: Optional[str] = None
    description: Optional[str] = None
    range: PropertyRange = field(default_factory=PropertyRange.string)
    min_cardinality: int = 0
    max_cardinality: Optional[int] = 1
    annotations: dict[str, str] = field(default_factory=dict)
    governance: Governance = field(default_factory=Governance)

    @property
    def required(self) -> bool:
        return self.min_cardinality > 0

    @classmethod
    def create(
        cls,
        scope: TenantScope,
        owner_entity: str,
        local_name: str,
        range: Optional[PropertyRange] = None,
        min_cardinality: int = 0,
        max_cardinality: Optional[int] = 1,
        label: Optional[str] = None,
        description: Optional[str] = None,
        curies: Optional[CurieRegistry] = None,
    ) -> "PropertyDef":
        owner = _require("Property", "owner_entity", owner_entity)
        name = _require("Property", "local_name", local_name)
        return cls(
            scope=scope,
            owner_entity=owner,
            local_name=name,
            canonical_uri=_canonical_uri(name, curies),
            label=label,
            description=description,
            range=range or PropertyRange.string(),
            min_cardinality=min_cardinality,
            max_cardinality=max_cardinality,
        )


@dataclass(frozen=True)
class RelationDef:
    """A named edge type between two entities.

    Attributes:
        scope: Owning tenant scope
        local_name: Relation name, unique within the scope
        from_entity: Local name of the subject entity
        to_entity: Local name of the object entity
        canonical_uri: Expanded URI of ``ldm:<local_name>``
        label: Optional display label
        description: Optional description
        min_cardinality: Minimum number of edges (>= 0)
        max_cardinality: Maximum number of edges, None for unbounded
        annotations: Lightweight key/value annotations
        governance: Governance facet
    """

    scope: TenantScope
    local_name: str
    from_entity: str
    to_entity: str
    canonical_uri: str = ""
    label: Optional[str] = None
    description: Optional[str] = None
    min_cardinality: int = 0
    max_cardinality: Optional[int] = 1
    annotations: dict[str, str] = field(default_factory=dict)
    governance: Governance = field(default_factory=Governance)

    @classmethod
    def create(
        cls,
        scope: TenantScope,
        local_name: str,
        from_entity: str,
        to_entity: str,
        min_cardinality: int = 0,
        max_cardinality: Optional[int] = 1,
        label: Optional[str] = None,
        description: Optional[str] = None,
        curies: Optional[CurieRegistry] = None,
    ) -> "RelationDef":
        name = _require("Relation", "local_name", local_name)
        source = _require("Relation", "from_entity", from_entity)
        target = _require("Relation", "to_entity", to_entity)
        return cls(
            scope=scope,
            local_name=name,
            from_entity=source,
            to_entity=target,
            canonical_uri=_canonical_uri(name, curies),
            label=label,
            description=description,
            min_cardinality=min_cardinality,
            max_cardinality=max_cardinality,
        )


@dataclass(frozen=True)
class EnumDef:
    """A closed set of string values."""

    scope: TenantScope
    local_name: str
    values: list[str] = field(default_factory=list)
    canonical_uri: str = ""
    label: Optional[str] = None
    description: Optional[str] = None
    governance: Governance = field(default_factory=Governance)

    @classmethod
    def create(
        cls,
        scope: TenantScope,
        local_name: str,
        values: Optional[list[str]] = None,
        label: Optional[str] = None,
        description: Optional[str] = None,
        curies: Optional[CurieRegistry] = None,
    ) -> "EnumDef":
        name = _require("Enum", "local_name", local_name)
        return cls(
            scope=scope,
            local_name=name,
            values=list(values or []),
            canonical_uri=_canonical_uri(name, curies),
            label=label,
            description=description,
        )


@dataclass(frozen=True)
class AliasDef:
    """Alternate names for a canonical term, optionally per locale.

    Used for display and lookup only; never checked against other artifacts.
    """

    scope: TenantScope
    canonical: str
    aliases: list[str] = field(default_factory=list)
    locale: Optional[str] = None
    notes: Optional[str] = None
    governance: Governance = field(default_factory=Governance)

    @classmethod
    def create(
        cls,
        scope: TenantScope,
        canonical: str,
        aliases: Optional[list[str]] = None,
        locale: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> "AliasDef":
        name = _require("Alias", "canonical", canonical)
        return cls(
            scope=scope,
            canonical=name,
            aliases=list(aliases or []),
            locale=locale if locale and locale.strip() else None,
            notes=notes,
        )


@dataclass(frozen=True)
class PropertyConstraint:
    """Cardinality bounds for one property of a shape's target entity.

    ``expected_range``, ``pattern`` and ``allowed_values`` are carried as
    metadata for downstream consumers; they are not enforced here.
    """

    property: str
    min_cardinality: int = 0
    max_cardinality: Optional[int] = 1
    expected_range: Optional[str] = None
    pattern: Optional[str] = None
    allowed_values: Optional[list[str]] = None


@dataclass(frozen=True)
class ShapeDef:
    """A constraint bundle applied to one entity."""

    scope: TenantScope
    applies_to_entity: str
    property_constraints: list[PropertyConstraint] = field(default_factory=list)
    governance: Governance = field(default_factory=Governance)

    @classmethod
    def create(
        cls,
        scope: TenantScope,
        applies_to_entity: str,
        property_constraints: Optional[list[PropertyConstraint]] = None,
    ) -> "ShapeDef":
        target = _require("Shape", "applies_to_entity", applies_to_entity)
        return cls(
            scope=scope,
            applies_to_entity=target,
            property_constraints=list(property_constraints or []),
        )
