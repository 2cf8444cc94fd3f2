"""Error types for the ontology core.

Data-quality problems in ontology artifacts are never raised; validators
return them as messages. The exceptions here cover caller bugs (scope
mismatches, malformed definitions) and infrastructure faults (graph reads
that failed or timed out), which must stay distinguishable from a
precondition that simply did not hold.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Standardized error codes for the ontology core."""

    SCOPE_MISMATCH = "scope_mismatch"
    INVALID_SCOPE = "invalid_scope"
    ARTIFACT_DEFINITION = "artifact_definition"
    PRECONDITION_DEFINITION = "precondition_definition"
    ONTOLOGY_BUNDLE_INVALID = "ontology_bundle_invalid"
    ONTOLOGY_LOAD_FAILED = "ontology_load_failed"
    GRAPH_READ_FAILED = "graph_read_failed"
    GRAPH_TIMEOUT = "graph_timeout"


class AppError(Exception):
    """
    Structured ontology core error.

    Attributes:
        code: Error code from ErrorCode enum
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert error to a structured dictionary.

        Returns:
            Dictionary with code, title, detail and optional errors
        """
        problem: dict[str, Any] = {
            "code": self.code.value,
            "title": self.code.value.replace("_", " ").title(),
            "detail": self.message,
        }
        if self.details:
            problem["errors"] = self.details
        return problem


class ScopeMismatchError(AppError):
    """Error when an artifact or operand belongs to a different scope."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            code=ErrorCode.SCOPE_MISMATCH,
            message=f"Cross-scope operation denied. Expected {expected}, got {actual}.",
            details={"expected": expected, "actual": actual},
        )


class InvalidScopeError(AppError):
    """Error when a tenant scope cannot be constructed."""

    def __init__(self, reason: str, value: Optional[str] = None) -> None:
        details = {}
        if value is not None:
            details["value"] = value
        super().__init__(
            code=ErrorCode.INVALID_SCOPE,
            message=f"Invalid tenant scope: {reason}",
            details=details,
        )


class ArtifactDefinitionError(AppError):
    """Error when an ontology artifact is created with missing fields."""

    def __init__(self, kind: str, field_name: str) -> None:
        super().__init__(
            code=ErrorCode.ARTIFACT_DEFINITION,
            message=f"{kind}.{field_name} is required.",
            details={"kind": kind, "field": field_name},
        )


class PreconditionDefinitionError(AppError):
    """Error when a precondition cannot be built from its inputs."""

    def __init__(self, reason: str, predicate: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.PRECONDITION_DEFINITION,
            message=f"Invalid precondition: {reason}",
            details={"predicate": predicate} if predicate else {},
        )


class OntologyBundleError(AppError):
    """Error when an ontology bundle file cannot be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            code=ErrorCode.ONTOLOGY_BUNDLE_INVALID,
            message=f"Invalid ontology bundle '{path}': {reason}",
            details={"path": path},
        )


class OntologyLoadError(AppError):
    """Error when the ontology repository fails while loading a store."""

    def __init__(self, scope: str, reason: str) -> None:
        super().__init__(
            code=ErrorCode.ONTOLOGY_LOAD_FAILED,
            message=f"Failed to load ontology for scope {scope}: {reason}",
            details={"scope": scope},
        )


class InfrastructureError(AppError):
    """Base class for faults in external collaborators.

    These are never a logical answer to a precondition; callers must not
    treat them as a failed check.
    """


class GraphReadError(InfrastructureError):
    """Graph collaborator raised while reading a vertex property."""

    def __init__(self, subject_id: str, property_key: str, reason: str) -> None:
        super().__init__(
            code=ErrorCode.GRAPH_READ_FAILED,
            message=f"Graph read failed for {subject_id}.{property_key}: {reason}",
            details={"subject_id": subject_id, "property_key": property_key},
        )


class GraphTimeoutError(InfrastructureError):
    """Graph collaborator did not answer within the configured timeout."""

    def __init__(self, subject_id: str, property_key: str, timeout_seconds: float) -> None:
        super().__init__(
            code=ErrorCode.GRAPH_TIMEOUT,
            message=(
                f"Graph read timed out after {timeout_seconds}s "
                f"for {subject_id}.{property_key}"
            ),
            details={
                "subject_id": subject_id,
                "property_key": property_key,
                "timeout_seconds": timeout_seconds,
            },
        )
