"""Ontology bundle files.

A bundle is a JSON or YAML document describing one scope's artifacts.
It is parsed into pydantic models, then turned into scoped dataclass
artifacts in an ``InMemoryOntologyRepository``.

Example bundle (YAML)::

    entities:
      - name: Order
      - name: PriorityOrder
        parents: [Order]
    properties:
      - owner: Order
        name: status
        range: xsd:string
        min: 1
    enums:
      - name: OrderStatus
        values: [open, closed]
"""

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Union

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .curie import CurieRegistry
from .errors import OntologyBundleError
from .models import (
    AliasDef,
    EntityDef,
    EnumDef,
    Governance,
    PropertyConstraint,
    PropertyDef,
    PropertyRange,
    PublicationStatus,
    RangeKind,
    RelationDef,
    ShapeDef,
)
from .repository import InMemoryOntologyRepository
from .scope import TenantScope

logger = structlog.get_logger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class GovernanceModel(BaseModel):
    """Optional governance scores for a bundle artifact."""

    model_config = ConfigDict(extra="forbid")

    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    complexity: int = Field(default=1, ge=1)
    depth: int = Field(default=1, ge=1)
    status: PublicationStatus = PublicationStatus.PROPOSED
    version: str = "0.1.0"

    def to_governance(self) -> Governance:
        return Governance(
            confidence=self.confidence,
            complexity=self.complexity,
            depth=self.depth,
            status=self.status,
            version=self.version,
        )


class _ArtifactModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    governance: GovernanceModel = Field(default_factory=GovernanceModel)


class EntityModel(_ArtifactModel):
    name: str
    label: Optional[str] = None
    description: Optional[str] = None
    parents: list[str] = Field(default_factory=list)


class PropertyModel(_ArtifactModel):
    """A property; ``range`` is an ``xsd:`` datatype or an entity name."""

    owner: str
    name: str
    range: str = "xsd:string"
    min_cardinality: int = Field(default=0, alias="min")
    max_cardinality: Optional[int] = Field(default=1, alias="max")
    label: Optional[str] = None
    description: Optional[str] = None


class RelationModel(_ArtifactModel):
    name: str
    from_entity: str = Field(alias="from")
    to_entity: str = Field(alias="to")
    min_cardinality: int = Field(default=0, alias="min")
    max_cardinality: Optional[int] = Field(default=1, alias="max")
    label: Optional[str] = None
    description: Optional[str] = None


class EnumModel(_ArtifactModel):
    name: str
    values: list[str] = Field(default_factory=list)
    label: Optional[str] = None
    description: Optional[str] = None


class AliasModel(_ArtifactModel):
    canonical: str
    aliases: list[str] = Field(default_factory=list)
    locale: Optional[str] = None
    notes: Optional[str] = None


class ConstraintModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    property: str
    min_cardinality: int = Field(default=0, alias="min")
    max_cardinality: Optional[int] = Field(default=1, alias="max")
    expected_range: Optional[str] = None
    pattern: Optional[str] = None
    allowed_values: Optional[list[str]] = Field(default=None, alias="in")


class ShapeModel(_ArtifactModel):
    applies_to: str
    constraints: list[ConstraintModel] = Field(default_factory=list)


class OntologyBundle(BaseModel):
    """Top-level bundle document."""

    model_config = ConfigDict(extra="forbid")

    entities: list[EntityModel] = Field(default_factory=list)
    properties: list[PropertyModel] = Field(default_factory=list)
    relations: list[RelationModel] = Field(default_factory=list)
    enums: list[EnumModel] = Field(default_factory=list)
    aliases: list[AliasModel] = Field(default_factory=list)
    shapes: list[ShapeModel] = Field(default_factory=list)


def parse_bundle(raw: Any, source: str = "<memory>") -> OntologyBundle:
    """Validate an already-decoded bundle document.

    Raises:
        OntologyBundleError: If the document does not match the bundle schema
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise OntologyBundleError(source, "top-level document must be a mapping")
    try:
        return OntologyBundle.model_validate(raw)
    except ValidationError as exc:
        raise OntologyBundleError(source, str(exc)) from exc


def load_bundle(path: Union[str, Path]) -> OntologyBundle:
    """Read and validate a JSON or YAML bundle file.

    The format is chosen by suffix: ``.yaml``/``.yml`` are YAML, anything
    else is JSON.

    Raises:
        OntologyBundleError: If the file is unreadable, malformed or invalid
    """
    bundle_path = Path(path)
    try:
        text = bundle_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise OntologyBundleError(str(bundle_path), str(exc)) from exc

    try:
        if bundle_path.suffix.lower() in YAML_SUFFIXES:
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise OntologyBundleError(str(bundle_path), str(exc)) from exc

    bundle = parse_bundle(raw, str(bundle_path))
    logger.info(
        "ontology_bundle_loaded",
        path=str(bundle_path),
        entities=len(bundle.entities),
        properties=len(bundle.properties),
        relations=len(bundle.relations),
        enums=len(bundle.enums),
        aliases=len(bundle.aliases),
        shapes=len(bundle.shapes),
    )
    return bundle


def _property_range(value: str) -> PropertyRange:
    if value.startswith("xsd:"):
        return PropertyRange(RangeKind.XSD_DATATYPE, value)
    return PropertyRange.entity(value)


def _with_governance(artifact, model: _ArtifactModel):
    return replace(artifact, governance=model.governance.to_governance())


async def bundle_to_repository(
    bundle: OntologyBundle,
    scope: TenantScope,
    curies: Optional[CurieRegistry] = None,
    repository: Optional[InMemoryOntologyRepository] = None,
) -> InMemoryOntologyRepository:
    """Populate an in-memory repository with a bundle's artifacts for ``scope``.

    Raises:
        ArtifactDefinitionError: If an artifact has a blank required name
    """
    repo = repository or InMemoryOntologyRepository()

    await repo.upsert_entities(
        scope,
        [
            _with_governance(
                EntityDef.create(
                    scope,
                    entity.name,
                    label=entity.label,
                    description=entity.description,
                    parents=entity.parents,
                    curies=curies,
                ),
                entity,
            )
            for entity in bundle.entities
        ],
    )
    await repo.upsert_properties(
        scope,
        [
            _with_governance(
                PropertyDef.create(
                    scope,
                    prop.owner,
                    prop.name,
                    range=_property_range(prop.range),
                    min_cardinality=prop.min_cardinality,
                    max_cardinality=prop.max_cardinality,
                    label=prop.label,
                    description=prop.description,
                    curies=curies,
                ),
                prop,
            )
            for prop in bundle.properties
        ],
    )
    await repo.upsert_relations(
        scope,
        [
            _with_governance(
                RelationDef.create(
                    scope,
                    relation.name,
                    relation.from_entity,
                    relation.to_entity,
                    min_cardinality=relation.min_cardinality,
                    max_cardinality=relation.max_cardinality,
                    label=relation.label,
                    description=relation.description,
                    curies=curies,
                ),
                relation,
            )
            for relation in bundle.relations
        ],
    )
    await repo.upsert_enums(
        scope,
        [
            _with_governance(
                EnumDef.create(
                    scope,
                    enum_model.name,
                    values=enum_model.values,
                    label=enum_model.label,
                    description=enum_model.description,
                    curies=curies,
                ),
                enum_model,
            )
            for enum_model in bundle.enums
        ],
    )
    await repo.upsert_aliases(
        scope,
        [
            _with_governance(
                AliasDef.create(
                    scope,
                    alias.canonical,
                    aliases=alias.aliases,
                    locale=alias.locale,
                    notes=alias.notes,
                ),
                alias,
            )
            for alias in bundle.aliases
        ],
    )
    await repo.upsert_shapes(
        scope,
        [
            _with_governance(
                ShapeDef.create(
                    scope,
                    shape.applies_to,
                    property_constraints=[
                        PropertyConstraint(
                            property=constraint.property,
                            min_cardinality=constraint.min_cardinality,
                            max_cardinality=constraint.max_cardinality,
                            expected_range=constraint.expected_range,
                            pattern=constraint.pattern,
                            allowed_values=constraint.allowed_values,
                        )
                        for constraint in shape.constraints
                    ],
                ),
                shape,
            )
            for shape in bundle.shapes
        ],
    )
    return repo
