"""Tests for GraphPreconditionsService.

These tests verify:
- Predicate to key resolution (explicit, fallback, default)
- Existence and equality checks against a mocked graph reader
- Ordered short-circuit evaluation and collect-all checking
- Infrastructure faults raise instead of failing the precondition
"""

import asyncio
from unittest.mock import AsyncMock, call

import pytest
from structlog.testing import capture_logs

from ontology_core import (
    DefaultPropertyKeyMapper,
    GraphPreconditionsService,
    GraphReadError,
    GraphTimeoutError,
    InfrastructureError,
    KeySource,
    Precondition,
    PreconditionDefinitionError,
    PreconditionKind,
)


def _graph_with(values: dict[tuple[str, str], str]) -> AsyncMock:
    graph = AsyncMock()

    async def get_vertex_property(subject_id: str, property_key: str):
        return values.get((subject_id, property_key))

    graph.get_vertex_property = AsyncMock(side_effect=get_vertex_property)
    return graph


@pytest.fixture
def service_factory(scope, mapper):
    def _build(graph, timeout_seconds: float = 10.0) -> GraphPreconditionsService:
        return GraphPreconditionsService(scope, graph, mapper, timeout_seconds=timeout_seconds)

    return _build


# =============================================================================
# Precondition construction
# =============================================================================


class TestPreconditionFromFields:
    """Tests for building preconditions from loose fields."""

    def test_nothing_is_exists(self) -> None:
        """Test that no predicate and no value is an existence check."""
        assert Precondition.from_fields() == Precondition.exists()
        assert Precondition.from_fields(predicate="  ").kind == PreconditionKind.EXISTS

    def test_expected_value_is_equals(self) -> None:
        """Test that an expected value makes an equality check."""
        precondition = Precondition.from_fields("ldm:status", "open")
        assert precondition.kind == PreconditionKind.EQUALS
        assert precondition.predicate == "ldm:status"
        assert precondition.expected == "open"

    def test_exists_op_is_non_empty(self) -> None:
        """Test that an exists operator on a predicate is a non-empty check."""
        precondition = Precondition.from_fields("ldm:status", op="exists")
        assert precondition == Precondition.non_empty("ldm:status")

    def test_eq_op_without_value(self) -> None:
        """Test that eq without a value compares against the empty string."""
        precondition = Precondition.from_fields("ldm:status", op="eq")
        assert precondition == Precondition.equals("ldm:status", "")

    def test_predicate_alone_is_rejected(self) -> None:
        """Test that the ambiguous predicate-only case cannot be built."""
        with pytest.raises(PreconditionDefinitionError, match="without an expected value"):
            Precondition.from_fields("ldm:status")

    def test_unknown_operator(self) -> None:
        """Test that unknown operators are rejected."""
        with pytest.raises(PreconditionDefinitionError, match="unknown operator"):
            Precondition.from_fields("ldm:status", "open", op="gt")

    def test_non_empty_with_value_is_rejected(self) -> None:
        """Test conflicting operator and value."""
        with pytest.raises(PreconditionDefinitionError):
            Precondition.from_fields("ldm:status", "open", op="non_empty")

    def test_non_empty_requires_predicate(self) -> None:
        """Test that non_empty needs a predicate."""
        with pytest.raises(PreconditionDefinitionError):
            Precondition.non_empty("")


# =============================================================================
# Key resolution
# =============================================================================


class TestMapPropertyKey:
    """Tests for predicate to key resolution."""

    def test_explicit_mapping(self, service_factory, mock_graph) -> None:
        """Test that explicit mappings win."""
        service = service_factory(mock_graph)
        assert service.resolve_property_key("ldm:orderStatus") == ("status", KeySource.EXPLICIT)

    def test_fallback_without_mapping(self, scope, mock_graph) -> None:
        """Test fallback keys with no explicit mapping at all."""
        service = GraphPreconditionsService(scope, mock_graph, DefaultPropertyKeyMapper())
        assert service.map_property_key("ldm:status") == "status"
        assert service.map_property_key("https://example/ns#Kind") == "Kind"
        assert service.map_property_key("") == "label"

    def test_key_sources(self, service_factory, mock_graph) -> None:
        """Test that fallback and default keys are flagged distinctly."""
        service = service_factory(mock_graph)
        assert service.resolve_property_key("ldm:kind") == ("kind", KeySource.FALLBACK)
        assert service.resolve_property_key(None) == ("label", KeySource.DEFAULT)

    def test_fallback_is_logged(self, service_factory, mock_graph) -> None:
        """Test that a fallback-derived key emits its own event."""
        service = service_factory(mock_graph)
        with capture_logs() as logs:
            service.map_property_key("ldm:kind")
            service.map_property_key("ldm:orderStatus")
        fallbacks = [log for log in logs if log["event"] == "precondition_key_fallback"]
        assert len(fallbacks) == 1
        assert fallbacks[0]["predicate"] == "ldm:kind"
        assert fallbacks[0]["key"] == "kind"


# =============================================================================
# Evaluate
# =============================================================================


class TestEvaluate:
    """Tests for single precondition evaluation."""

    @pytest.mark.asyncio
    async def test_existence_check_passes(self, service_factory) -> None:
        """Test that a subject with a label exists."""
        graph = _graph_with({("v1", "label"): "Order"})
        result = await service_factory(graph).evaluate("Order", "v1", Precondition.exists())
        assert result.ok is True
        assert result.reason is None
        graph.get_vertex_property.assert_awaited_once_with("v1", "label")

    @pytest.mark.asyncio
    async def test_existence_check_fails(self, service_factory) -> None:
        """Test that a subject without a label is not found."""
        graph = _graph_with({("v1", "label"): "Order"})
        result = await service_factory(graph).evaluate("Order", "v2", Precondition.exists())
        assert result.ok is False
        assert "v2" in result.reason
        assert "not found" in result.reason
        assert result.reason == "[acme::orders::dev] Order/v2 not found"

    @pytest.mark.asyncio
    async def test_whitespace_label_counts_as_present(self, service_factory) -> None:
        """Test that only a null or empty label means the subject is absent."""
        graph = _graph_with({("v1", "label"): " "})
        result = await service_factory(graph).evaluate("Order", "v1", Precondition.exists())
        assert result.ok is True
        assert result.reason is None

    @pytest.mark.asyncio
    async def test_empty_label_is_not_found(self, service_factory) -> None:
        """Test that an empty label counts as absent."""
        graph = _graph_with({("v1", "label"): ""})
        result = await service_factory(graph).evaluate("Order", "v1", Precondition.exists())
        assert result.ok is False
        assert result.reason == "[acme::orders::dev] Order/v1 not found"

    @pytest.mark.asyncio
    async def test_equality_is_case_insensitive(self, service_factory) -> None:
        """Test case-insensitive comparison."""
        graph = _graph_with({("v1", "status"): "OPEN"})
        result = await service_factory(graph).evaluate(
            "Order", "v1", Precondition.equals("ldm:orderStatus", "open")
        )
        assert result.ok is True
        assert result.key == "status"
        assert result.key_source == KeySource.EXPLICIT

    @pytest.mark.asyncio
    async def test_equality_mismatch(self, service_factory) -> None:
        """Test the mismatch reason names key, expected and actual."""
        graph = _graph_with({("v1", "status"): "closed"})
        result = await service_factory(graph).evaluate(
            "Order", "v1", Precondition.equals("ldm:orderStatus", "open")
        )
        assert result.ok is False
        assert result.reason == (
            "[acme::orders::dev] Precondition failed: status != open (actual: closed)"
        )

    @pytest.mark.asyncio
    async def test_missing_actual_uses_null_sentinel(self, service_factory) -> None:
        """Test that an absent value is shown as <null>."""
        graph = _graph_with({})
        result = await service_factory(graph).evaluate(
            "Order", "v1", Precondition.equals("ldm:kind", "retail")
        )
        assert result.ok is False
        assert result.reason.endswith("Precondition failed: kind != retail (actual: <null>)")
        assert result.key_source == KeySource.FALLBACK

    @pytest.mark.asyncio
    async def test_empty_predicate_reads_label(self, service_factory) -> None:
        """Test that an equality check without a predicate reads the label key."""
        graph = _graph_with({("v1", "label"): "Order"})
        result = await service_factory(graph).evaluate(
            "Order", "v1", Precondition.equals("", "order")
        )
        assert result.ok is True
        graph.get_vertex_property.assert_awaited_once_with("v1", "label")

    @pytest.mark.asyncio
    async def test_non_empty(self, service_factory) -> None:
        """Test the non-empty variant."""
        graph = _graph_with({("v1", "status"): "open"})
        service = service_factory(graph)
        assert (await service.evaluate("Order", "v1", Precondition.non_empty("ldm:orderStatus"))).ok
        result = await service.evaluate("Order", "v1", Precondition.non_empty("ldm:kind"))
        assert result.ok is False
        assert "kind is empty on Order/v1" in result.reason

    @pytest.mark.asyncio
    async def test_non_empty_accepts_whitespace(self, service_factory) -> None:
        """Test that a whitespace value is not an empty value."""
        graph = _graph_with({("v1", "status"): " ", ("v1", "kind"): ""})
        service = service_factory(graph)
        assert (await service.evaluate("Order", "v1", Precondition.non_empty("ldm:orderStatus"))).ok
        result = await service.evaluate("Order", "v1", Precondition.non_empty("ldm:kind"))
        assert result.ok is False

    @pytest.mark.asyncio
    async def test_one_read_per_evaluation(self, service_factory) -> None:
        """Test that each evaluation issues exactly one graph read."""
        graph = _graph_with({("v1", "status"): "open"})
        await service_factory(graph).evaluate(
            "Order", "v1", Precondition.equals("ldm:orderStatus", "open")
        )
        assert graph.get_vertex_property.await_count == 1


# =============================================================================
# EvaluateAll / check_all
# =============================================================================


class TestEvaluateAll:
    """Tests for ordered evaluation."""

    @pytest.mark.asyncio
    async def test_short_circuits_on_first_failure(self, service_factory) -> None:
        """Test that P2 is never read once P1 fails."""
        graph = _graph_with({("v1", "status"): "closed", ("v1", "kind"): "retail"})
        p1 = Precondition.equals("ldm:orderStatus", "open")
        p2 = Precondition.equals("ldm:kind", "retail")

        result = await service_factory(graph).evaluate_all("Order", "v1", [p1, p2])

        assert result.ok is False
        assert "status != open" in result.reason
        assert graph.get_vertex_property.await_count == 1
        graph.get_vertex_property.assert_awaited_once_with("v1", "status")

    @pytest.mark.asyncio
    async def test_all_pass(self, service_factory) -> None:
        """Test that every precondition is read when all pass."""
        graph = _graph_with(
            {("v1", "label"): "Order", ("v1", "status"): "open", ("v1", "kind"): "retail"}
        )
        result = await service_factory(graph).evaluate_all(
            "Order",
            "v1",
            [
                Precondition.exists(),
                Precondition.equals("ldm:orderStatus", "open"),
                Precondition.equals("ldm:kind", "retail"),
            ],
        )
        assert result.ok is True
        assert graph.get_vertex_property.await_args_list == [
            call("v1", "label"),
            call("v1", "status"),
            call("v1", "kind"),
        ]

    @pytest.mark.asyncio
    async def test_empty_list_passes(self, service_factory, mock_graph) -> None:
        """Test that no preconditions means pass without reads."""
        result = await service_factory(mock_graph).evaluate_all("Order", "v1", [])
        assert result.ok is True
        mock_graph.get_vertex_property.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_check_all_collects_every_violation(self, service_factory) -> None:
        """Test the accumulating wrapper."""
        graph = _graph_with({("v1", "label"): "Order", ("v1", "status"): "closed"})
        report = await service_factory(graph).check_all(
            "Order",
            "v1",
            [
                Precondition.equals("ldm:orderStatus", "open"),
                Precondition.exists(),
                Precondition.equals("ldm:kind", "retail"),
            ],
        )
        assert report.ok is False
        assert len(report.violations) == 2
        assert "status != open" in report.violations[0]
        assert "kind != retail" in report.violations[1]
        assert graph.get_vertex_property.await_count == 3


# =============================================================================
# Infrastructure faults
# =============================================================================


class TestInfrastructureFaults:
    """Tests that graph faults are not turned into failed preconditions."""

    @pytest.mark.asyncio
    async def test_graph_error_raises(self, service_factory, mock_graph) -> None:
        """Test that a collaborator exception surfaces as GraphReadError."""
        mock_graph.get_vertex_property.side_effect = ConnectionError("gremlin down")
        with pytest.raises(GraphReadError, match="gremlin down") as exc_info:
            await service_factory(mock_graph).evaluate("Order", "v1", Precondition.exists())
        assert isinstance(exc_info.value, InfrastructureError)

    @pytest.mark.asyncio
    async def test_timeout_raises(self, service_factory, mock_graph) -> None:
        """Test that a slow graph read raises GraphTimeoutError."""

        async def slow(subject_id: str, property_key: str):
            await asyncio.sleep(1)
            return "Order"

        mock_graph.get_vertex_property.side_effect = slow
        service = service_factory(mock_graph, timeout_seconds=0.01)
        with pytest.raises(GraphTimeoutError):
            await service.evaluate_all("Order", "v1", [Precondition.exists()])

    @pytest.mark.asyncio
    async def test_timeout_disabled(self, service_factory) -> None:
        """Test that a non-positive timeout awaits the read directly."""
        graph = _graph_with({("v1", "label"): "Order"})
        result = await service_factory(graph, timeout_seconds=0).evaluate(
            "Order", "v1", Precondition.exists()
        )
        assert result.ok is True

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, service_factory, mock_graph) -> None:
        """Test that cancellation is not reported as a failure or a read error."""
        mock_graph.get_vertex_property.side_effect = asyncio.CancelledError()
        with pytest.raises(asyncio.CancelledError):
            await service_factory(mock_graph).evaluate("Order", "v1", Precondition.exists())


class TestFromSettings:
    """Tests for settings-driven wiring."""

    @pytest.mark.asyncio
    async def test_uses_configured_maps_and_timeout(self, scope, monkeypatch) -> None:
        """Test that the key map and timeout come from settings."""
        from ontology_core.config import load_settings

        monkeypatch.setenv("PROPERTY_KEY_MAP_JSON", '{"ldm:kind": "vertexKind"}')
        monkeypatch.setenv("GRAPH_READ_TIMEOUT_SECONDS", "3")
        graph = _graph_with({("v1", "vertexKind"): "retail"})

        service = GraphPreconditionsService.from_settings(scope, graph, load_settings())

        assert service.timeout_seconds == 3.0
        result = await service.evaluate("Order", "v1", Precondition.equals("ldm:kind", "Retail"))
        assert result.ok is True
        assert result.key_source == KeySource.EXPLICIT
