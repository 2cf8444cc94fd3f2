"""Per-artifact validators.

Each public ``validate_*`` function takes the ambient scope, one artifact
and the store, and returns an ordered list of error messages (empty means
valid). Checks run in the artifact's field declaration order so that
validating unchanged input always yields identical output.

Data problems are reported, never raised. The only exception is a scope
mismatch between the ambient scope and the artifact, which is a caller bug
and raises ``ScopeMismatchError``.

The ``check_*`` variants return tagged ``ValidationIssue`` objects; the
aggregate validator uses them so callers can classify messages without
parsing text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models import EntityDef, EnumDef, PropertyDef, RangeKind, RelationDef, ShapeDef
from ..scope import TenantScope
from ..store import OntologyStore


class ValidationIssueKind(str, Enum):
    """Category of a validation message."""

    MISSING_NAME = "missing_name"
    REFERENTIAL_INTEGRITY = "referential_integrity"
    CARDINALITY = "cardinality"
    ENUM_VALUES = "enum_values"


@dataclass(frozen=True)
class ValidationIssue:
    """One validation message with its category."""

    kind: ValidationIssueKind
    message: str

    def __str__(self) -> str:
        return self.message


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _missing_name(message: str) -> ValidationIssue:
    return ValidationIssue(ValidationIssueKind.MISSING_NAME, message)


def _unresolved(message: str) -> ValidationIssue:
    return ValidationIssue(ValidationIssueKind.REFERENTIAL_INTEGRITY, message)


def _cardinality_issues(
    prefix: str, min_cardinality: int, max_cardinality: Optional[int]
) -> list[ValidationIssue]:
    issues = []
    if min_cardinality < 0:
        issues.append(
            ValidationIssue(
                ValidationIssueKind.CARDINALITY, f"{prefix} MinCardinality cannot be negative."
            )
        )
    if max_cardinality is not None and max_cardinality < 0:
        issues.append(
            ValidationIssue(
                ValidationIssueKind.CARDINALITY, f"{prefix} MaxCardinality cannot be negative."
            )
        )
    if max_cardinality is not None and min_cardinality > max_cardinality:
        issues.append(
            ValidationIssue(
                ValidationIssueKind.CARDINALITY, f"{prefix} MinCardinality > MaxCardinality."
            )
        )
    return issues


def check_entity(
    scope: TenantScope, entity: EntityDef, store: OntologyStore
) -> list[ValidationIssue]:
    scope.ensure_same(entity.scope)
    issues = []

    if _blank(entity.local_name):
        issues.append(_missing_name("Entity.LocalName is required."))

    for parent in entity.parents:
        if store.get_entity(scope, parent) is None:
            issues.append(
                _unresolved(f"Entity '{entity.local_name}' references missing parent '{parent}'.")
            )

    return issues


def check_property(
    scope: TenantScope, prop: PropertyDef, store: OntologyStore
) -> list[ValidationIssue]:
    scope.ensure_same(prop.scope)
    issues = []

    if store.get_entity(scope, prop.owner_entity) is None:
        issues.append(
            _unresolved(
                f"Property '{prop.local_name}' owner entity '{prop.owner_entity}' not found."
            )
        )

    issues.extend(_cardinality_issues("Property", prop.min_cardinality, prop.max_cardinality))

    if (
        prop.range.kind == RangeKind.ENTITY_REF
        and store.get_entity(scope, prop.range.value) is None
    ):
        issues.append(
            _unresolved(
                f"Property '{prop.local_name}' range entity '{prop.range.value}' not found."
            )
        )

    return issues


def check_relation(
    scope: TenantScope, relation: RelationDef, store: OntologyStore
) -> list[ValidationIssue]:
    scope.ensure_same(relation.scope)
    issues = []

    if store.get_entity(scope, relation.from_entity) is None:
        issues.append(
            _unresolved(
                f"Relation '{relation.local_name}' from entity '{relation.from_entity}' not found."
            )
        )
    if store.get_entity(scope, relation.to_entity) is None:
        issues.append(
            _unresolved(
                f"Relation '{relation.local_name}' to entity '{relation.to_entity}' not found."
            )
        )

    issues.extend(
        _cardinality_issues("Relation", relation.min_cardinality, relation.max_cardinality)
    )
    return issues


def check_enum(
    scope: TenantScope, enum_def: EnumDef, store: Optional[OntologyStore] = None
) -> list[ValidationIssue]:
    """Enum checks stop at the first failure; each enum yields at most one message.

    Enums reference no other artifact, so ``store`` is not read.
    """
    scope.ensure_same(enum_def.scope)

    if _blank(enum_def.local_name):
        return [_missing_name("Enum.LocalName is required.")]
    if not enum_def.values:
        return [
            ValidationIssue(
                ValidationIssueKind.ENUM_VALUES, f"Enum '{enum_def.local_name}' has no values."
            )
        ]
    if len(set(enum_def.values)) != len(enum_def.values):
        return [
            ValidationIssue(
                ValidationIssueKind.ENUM_VALUES,
                f"Enum '{enum_def.local_name}' has duplicate values.",
            )
        ]
    return []


def check_shape(
    scope: TenantScope, shape: ShapeDef, store: OntologyStore
) -> list[ValidationIssue]:
    scope.ensure_same(shape.scope)
    issues = []

    if store.get_entity(scope, shape.applies_to_entity) is None:
        issues.append(_unresolved(f"Shape applies to missing entity '{shape.applies_to_entity}'."))

    for constraint in shape.property_constraints:
        # Ownership matters: a same-named property on another entity does not count.
        if store.get_property(scope, shape.applies_to_entity, constraint.property) is None:
            issues.append(
                _unresolved(
                    f"Shape references missing property '{constraint.property}' "
                    f"on entity '{shape.applies_to_entity}'."
                )
            )
            continue

        issues.extend(
            _cardinality_issues(
                f"Shape property '{constraint.property}'",
                constraint.min_cardinality,
                constraint.max_cardinality,
            )
        )

    return issues


def _messages(issues: list[ValidationIssue]) -> list[str]:
    return [issue.message for issue in issues]


def validate_entity(scope: TenantScope, entity: EntityDef, store: OntologyStore) -> list[str]:
    """Check name presence and that every parent resolves in ``scope``."""
    return _messages(check_entity(scope, entity, store))


def validate_property(scope: TenantScope, prop: PropertyDef, store: OntologyStore) -> list[str]:
    """Check owner entity, cardinality bounds, then entity range."""
    return _messages(check_property(scope, prop, store))


def validate_relation(
    scope: TenantScope, relation: RelationDef, store: OntologyStore
) -> list[str]:
    """Check from/to entities, then cardinality bounds."""
    return _messages(check_relation(scope, relation, store))


def validate_enum(
    scope: TenantScope, enum_def: EnumDef, store: Optional[OntologyStore] = None
) -> list[str]:
    """Check name presence, non-empty values and ordinal uniqueness of values."""
    return _messages(check_enum(scope, enum_def, store))


def validate_shape(scope: TenantScope, shape: ShapeDef, store: OntologyStore) -> list[str]:
    """Check target entity, then each constrained property and its bounds."""
    return _messages(check_shape(scope, shape, store))
