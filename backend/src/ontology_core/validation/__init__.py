"""Ontology validation: per-artifact checks and the collect-all driver."""

from .validator import OntologyValidationResult, OntologyValidator
from .validators import (
    ValidationIssue,
    ValidationIssueKind,
    validate_entity,
    validate_enum,
    validate_property,
    validate_relation,
    validate_shape,
)

__all__ = [
    "OntologyValidationResult",
    "OntologyValidator",
    "ValidationIssue",
    "ValidationIssueKind",
    "validate_entity",
    "validate_enum",
    "validate_property",
    "validate_relation",
    "validate_shape",
]
