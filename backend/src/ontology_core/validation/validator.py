"""Aggregate ontology validation over one scope of a store."""

from collections import Counter
from dataclasses import dataclass, field

import structlog

from ..models import ArtifactKind
from ..scope import TenantScope
from ..store import OntologyStore
from .validators import (
    ValidationIssue,
    ValidationIssueKind,
    check_entity,
    check_enum,
    check_property,
    check_relation,
    check_shape,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OntologyValidationResult:
    """Ordered validation report for one scope.

    Attributes:
        scope: The validated scope
        issues: Every issue, in kind order (entities, properties, relations,
            enums, shapes) and store order within a kind
    """

    scope: TenantScope
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        """Plain-text messages in report order."""
        return [issue.message for issue in self.issues]

    @property
    def is_valid(self) -> bool:
        return not self.issues

    def by_kind(self, kind: ValidationIssueKind) -> list[str]:
        return [issue.message for issue in self.issues if issue.kind == kind]

    def to_dict(self) -> dict:
        return {
            "scope": str(self.scope),
            "valid": self.is_valid,
            "error_count": len(self.issues),
            "errors": [
                {"kind": issue.kind.value, "message": issue.message} for issue in self.issues
            ],
        }


class OntologyValidator:
    """Runs every per-kind validator over every artifact of a scope.

    Validation is collect-all: a bad artifact never stops the remaining
    artifacts from being checked. Aliases are not validated.

    Example:
        result = OntologyValidator.validate(store, scope)
        for message in result.errors:
            print(message)
    """

    @staticmethod
    def validate(store: OntologyStore, scope: TenantScope) -> OntologyValidationResult:
        """Validate all artifacts of ``scope`` held by ``store``.

        Args:
            store: The store snapshot to validate
            scope: The scope to validate

        Returns:
            OntologyValidationResult with every issue found

        Raises:
            ScopeMismatchError: If the store filed an artifact under a foreign scope
        """
        issues: list[ValidationIssue] = []
        checked: Counter[str] = Counter()

        for entity in store.list_entities(scope):
            issues.extend(check_entity(scope, entity, store))
            checked[ArtifactKind.ENTITY.value] += 1

        for prop in store.list_properties(scope):
            issues.extend(check_property(scope, prop, store))
            checked[ArtifactKind.PROPERTY.value] += 1

        for relation in store.list_relations(scope):
            issues.extend(check_relation(scope, relation, store))
            checked[ArtifactKind.RELATION.value] += 1

        for enum_def in store.list_enums(scope):
            issues.extend(check_enum(scope, enum_def, store))
            checked[ArtifactKind.ENUM.value] += 1

        for shape in store.list_shapes(scope):
            issues.extend(check_shape(scope, shape, store))
            checked[ArtifactKind.SHAPE.value] += 1

        issue_counts = Counter(issue.kind.value for issue in issues)
        logger.info(
            "ontology_validation_completed",
            tenant_id=scope.tenant_id,
            package=scope.package,
            channel=scope.channel,
            checked=dict(checked),
            error_count=len(issues),
            issue_counts=dict(issue_counts),
        )
        return OntologyValidationResult(scope=scope, issues=issues)
