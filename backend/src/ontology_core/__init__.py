"""Tenant-scoped ontology core.

Holds ontology artifacts per (tenant, package, channel) scope, validates
them for referential integrity and cardinality, and checks runtime
preconditions against a tenant's graph.

Example:
    from ontology_core import (
        EntityDef,
        OntologyStore,
        OntologyValidator,
        TenantScope,
    )

    scope = TenantScope("acme", "orders", "dev")
    store = OntologyStore()
    store.upsert_entities(scope, [EntityDef.create(scope, "Order")])
    result = OntologyValidator.validate(store, scope)
    assert result.is_valid
"""

from .curie import CurieRegistry
from .errors import (
    AppError,
    ArtifactDefinitionError,
    ErrorCode,
    GraphReadError,
    GraphTimeoutError,
    InfrastructureError,
    InvalidScopeError,
    OntologyBundleError,
    OntologyLoadError,
    PreconditionDefinitionError,
    ScopeMismatchError,
)
from .graph import GraphReader
from .mapping import DefaultPropertyKeyMapper, PropertyKeyMapper, local_name_from_predicate
from .models import (
    AliasDef,
    ArtifactKind,
    EntityDef,
    EnumDef,
    Governance,
    PropertyConstraint,
    PropertyDef,
    PropertyRange,
    ProvenanceRef,
    PublicationStatus,
    RangeKind,
    RelationDef,
    ShapeDef,
)
from .preconditions import (
    GraphPreconditionsService,
    KeySource,
    Precondition,
    PreconditionKind,
    PreconditionResult,
    PreconditionsReport,
)
from .repository import InMemoryOntologyRepository, OntologyRepository
from .scope import TenantScope
from .store import OntologyStore
from .validation import OntologyValidationResult, OntologyValidator

__all__ = [
    "AliasDef",
    "AppError",
    "ArtifactDefinitionError",
    "ArtifactKind",
    "CurieRegistry",
    "DefaultPropertyKeyMapper",
    "EntityDef",
    "EnumDef",
    "ErrorCode",
    "Governance",
    "GraphPreconditionsService",
    "GraphReadError",
    "GraphReader",
    "GraphTimeoutError",
    "InMemoryOntologyRepository",
    "InfrastructureError",
    "InvalidScopeError",
    "KeySource",
    "OntologyBundleError",
    "OntologyLoadError",
    "OntologyRepository",
    "OntologyStore",
    "OntologyValidationResult",
    "OntologyValidator",
    "Precondition",
    "PreconditionDefinitionError",
    "PreconditionKind",
    "PreconditionResult",
    "PreconditionsReport",
    "PropertyConstraint",
    "PropertyDef",
    "PropertyKeyMapper",
    "PropertyRange",
    "ProvenanceRef",
    "PublicationStatus",
    "RangeKind",
    "RelationDef",
    "ScopeMismatchError",
    "ShapeDef",
    "TenantScope",
    "local_name_from_predicate",
]
