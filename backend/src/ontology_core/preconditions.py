"""Runtime precondition checks against the tenant graph.

A precondition is phrased in ontology terms (a CURIE predicate and an
optional expected value). The service resolves the predicate to a graph
property key, reads that single property and compares it.

Logical failures come back as ``PreconditionResult`` values. Faults in the
graph collaborator are raised as ``InfrastructureError`` subclasses so a
graph outage is never mistaken for a denied precondition.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

import structlog

from .errors import GraphReadError, GraphTimeoutError, PreconditionDefinitionError
from .graph import GraphReader
from .mapping import DefaultPropertyKeyMapper, PropertyKeyMapper, local_name_from_predicate
from .scope import TenantScope

if TYPE_CHECKING:
    from .config import Settings

logger = structlog.get_logger(__name__)

LABEL_KEY = "label"
NULL_SENTINEL = "<null>"
DEFAULT_GRAPH_READ_TIMEOUT_SECONDS = 10.0

_EQUALS_OPS = frozenset({"eq", "equals"})
_NON_EMPTY_OPS = frozenset({"exists", "non_empty", "nonempty"})


class PreconditionKind(str, Enum):
    """Shape of a precondition."""

    EXISTS = "exists"
    EQUALS = "equals"
    NON_EMPTY = "non_empty"


class KeySource(str, Enum):
    """Where a resolved graph property key came from."""

    EXPLICIT = "explicit"
    FALLBACK = "fallback"
    DEFAULT = "default"


@dataclass(frozen=True)
class Precondition:
    """A single check against one subject.

    Use the ``exists``/``equals``/``non_empty`` constructors rather than
    building instances by hand.

    Attributes:
        kind: Which check to run
        predicate: Ontology predicate (CURIE or URI); empty for EXISTS
        expected: Expected value for EQUALS; None otherwise
    """

    kind: PreconditionKind
    predicate: str = ""
    expected: Optional[str] = None

    @classmethod
    def exists(cls) -> "Precondition":
        return cls(kind=PreconditionKind.EXISTS)

    @classmethod
    def equals(cls, predicate: str, expected: str) -> "Precondition":
        if expected is None:
            raise PreconditionDefinitionError("equals requires an expected value", predicate)
        return cls(kind=PreconditionKind.EQUALS, predicate=predicate or "", expected=expected)

    @classmethod
    def non_empty(cls, predicate: str) -> "Precondition":
        if not predicate or not predicate.strip():
            raise PreconditionDefinitionError("non_empty requires a predicate")
        return cls(kind=PreconditionKind.NON_EMPTY, predicate=predicate)

    @classmethod
    def from_fields(
        cls,
        predicate: Optional[str] = None,
        equals: Optional[str] = None,
        op: Optional[str] = None,
    ) -> "Precondition":
        """Build a precondition from loose tool-call fields.

        Args:
            predicate: Ontology predicate, if any
            equals: Expected value, if any
            op: Optional operator hint (``eq``, ``equals``, ``exists``, ``non_empty``)

        Returns:
            The matching precondition variant

        Raises:
            PreconditionDefinitionError: If the fields are ambiguous or the
                operator is unknown
        """
        has_predicate = bool(predicate and predicate.strip())
        normalized_op = (op or "").strip().lower()

        if normalized_op and normalized_op not in _EQUALS_OPS | _NON_EMPTY_OPS:
            raise PreconditionDefinitionError(f"unknown operator '{op}'", predicate)

        if equals is not None:
            if normalized_op in _NON_EMPTY_OPS:
                raise PreconditionDefinitionError(
                    f"operator '{op}' does not take an expected value", predicate
                )
            return cls.equals(predicate or "", equals)

        if normalized_op in _NON_EMPTY_OPS:
            return cls.non_empty(predicate or "")
        if normalized_op in _EQUALS_OPS:
            return cls.equals(predicate or "", "")
        if not has_predicate:
            return cls.exists()

        raise PreconditionDefinitionError(
            "predicate given without an expected value or operator", predicate
        )


@dataclass(frozen=True)
class PreconditionResult:
    """Outcome of one precondition evaluation.

    Attributes:
        ok: True if the precondition held
        reason: Failure reason; None when ok
        key: Graph property key that was read, if any
        key_source: How ``key`` was resolved
    """

    ok: bool
    reason: Optional[str] = None
    key: Optional[str] = None
    key_source: Optional[KeySource] = None

    @classmethod
    def passed(cls, key: Optional[str] = None, key_source: Optional[KeySource] = None):
        return cls(ok=True, key=key, key_source=key_source)

    @classmethod
    def failed(
        cls, reason: str, key: Optional[str] = None, key_source: Optional[KeySource] = None
    ):
        return cls(ok=False, reason=reason, key=key, key_source=key_source)


@dataclass(frozen=True)
class PreconditionsReport:
    """All violations found for one subject, in precondition order."""

    subject_label: str
    subject_id: str
    violations: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


class GraphPreconditionsService:
    """Evaluates preconditions for subjects already scoped to the tenant.

    The service is stateless between calls. Each evaluation issues at most
    one graph read; ``evaluate_all`` runs preconditions strictly in order
    and stops at the first failure.

    Example:
        service = GraphPreconditionsService(scope, graph, mapper)
        result = await service.evaluate_all(
            "Order",
            "v1",
            [Precondition.exists(), Precondition.equals("ldm:status", "open")],
        )
        if not result.ok:
            print(result.reason)
    """

    def __init__(
        self,
        scope: TenantScope,
        graph: GraphReader,
        mapper: PropertyKeyMapper,
        timeout_seconds: float = DEFAULT_GRAPH_READ_TIMEOUT_SECONDS,
    ) -> None:
        self.scope = scope
        self.graph = graph
        self.mapper = mapper
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(
        cls,
        scope: TenantScope,
        graph: GraphReader,
        settings: "Settings",
    ) -> "GraphPreconditionsService":
        """Wire the service with the configured key maps and read timeout."""
        return cls(
            scope,
            graph,
            DefaultPropertyKeyMapper.from_settings(settings),
            timeout_seconds=settings.graph_read_timeout_seconds,
        )

    def map_property_key(self, predicate: Optional[str]) -> str:
        """Resolve a predicate to a graph property key."""
        key, _ = self.resolve_property_key(predicate)
        return key

    def resolve_property_key(self, predicate: Optional[str]) -> tuple[str, KeySource]:
        """Resolve a predicate to a graph key and report how it was found.

        Explicit mappings win. Otherwise the local name after the last
        ``:``, ``/`` or ``#`` is used, and an empty predicate maps to the
        generic label key.
        """
        if not predicate or not predicate.strip():
            return LABEL_KEY, KeySource.DEFAULT

        found, key = self.mapper.try_map_property_key(predicate)
        if found and key:
            return key, KeySource.EXPLICIT

        key = local_name_from_predicate(predicate.strip())
        logger.info(
            "precondition_key_fallback",
            tenant_id=self.scope.tenant_id,
            package=self.scope.package,
            channel=self.scope.channel,
            predicate=predicate,
            key=key,
        )
        return key, KeySource.FALLBACK

    async def evaluate(
        self, subject_label: str, subject_id: str, precondition: Precondition
    ) -> PreconditionResult:
        """Evaluate one precondition against one subject.

        Raises:
            GraphTimeoutError: If the graph read exceeded the timeout
            GraphReadError: If the graph collaborator raised
        """
        if precondition.kind == PreconditionKind.EXISTS:
            value = await self._read(subject_id, LABEL_KEY)
            if _is_empty(value):
                return self._fail(
                    subject_label,
                    subject_id,
                    f"{subject_label}/{subject_id} not found",
                    LABEL_KEY,
                    KeySource.DEFAULT,
                )
            return PreconditionResult.passed(LABEL_KEY, KeySource.DEFAULT)

        key, source = self.resolve_property_key(precondition.predicate)
        actual = await self._read(subject_id, key)

        if precondition.kind == PreconditionKind.NON_EMPTY:
            if _is_empty(actual):
                return self._fail(
                    subject_label,
                    subject_id,
                    f"Precondition failed: {key} is empty on {subject_label}/{subject_id}",
                    key,
                    source,
                )
            return PreconditionResult.passed(key, source)

        expected = precondition.expected or ""
        if actual is None or actual.casefold() != expected.casefold():
            shown = NULL_SENTINEL if actual is None else actual
            return self._fail(
                subject_label,
                subject_id,
                f"Precondition failed: {key} != {expected} (actual: {shown})",
                key,
                source,
            )
        return PreconditionResult.passed(key, source)

    async def evaluate_all(
        self,
        subject_label: str,
        subject_id: str,
        preconditions: Iterable[Precondition],
    ) -> PreconditionResult:
        """Evaluate preconditions in order and return the first failure."""
        for precondition in preconditions:
            result = await self.evaluate(subject_label, subject_id, precondition)
            if not result.ok:
                return result
        return PreconditionResult.passed()

    async def check_all(
        self,
        subject_label: str,
        subject_id: str,
        preconditions: Iterable[Precondition],
    ) -> PreconditionsReport:
        """Evaluate every precondition and collect all violations."""
        violations = []
        for precondition in preconditions:
            result = await self.evaluate(subject_label, subject_id, precondition)
            if not result.ok and result.reason:
                violations.append(result.reason)
        return PreconditionsReport(
            subject_label=subject_label,
            subject_id=subject_id,
            violations=violations,
        )

    def _fail(
        self,
        subject_label: str,
        subject_id: str,
        message: str,
        key: str,
        source: KeySource,
    ) -> PreconditionResult:
        reason = f"[{self.scope}] {message}"
        logger.info(
            "precondition_failed",
            tenant_id=self.scope.tenant_id,
            package=self.scope.package,
            channel=self.scope.channel,
            subject_label=subject_label,
            subject_id=subject_id,
            key=key,
            key_source=source.value,
        )
        return PreconditionResult.failed(reason, key, source)

    async def _read(self, subject_id: str, property_key: str) -> Optional[str]:
        try:
            if self.timeout_seconds <= 0:
                return await self.graph.get_vertex_property(subject_id, property_key)
            return await asyncio.wait_for(
                self.graph.get_vertex_property(subject_id, property_key),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "graph_read_timeout",
                tenant_id=self.scope.tenant_id,
                subject_id=subject_id,
                property_key=property_key,
                timeout_seconds=self.timeout_seconds,
            )
            raise GraphTimeoutError(subject_id, property_key, self.timeout_seconds) from exc
        except Exception as exc:
            logger.error(
                "graph_read_failed",
                tenant_id=self.scope.tenant_id,
                subject_id=subject_id,
                property_key=property_key,
                error=str(exc),
            )
            raise GraphReadError(subject_id, property_key, str(exc)) from exc


def _is_empty(value: Optional[str]) -> bool:
    return value is None or value == ""
