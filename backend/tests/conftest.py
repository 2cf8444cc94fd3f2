"""pytest fixtures for ontology core tests."""

import os

# Set environment variables BEFORE any imports
os.environ.setdefault("ONTOLOGY_DEFAULT_PACKAGE", "default")
os.environ.setdefault("ONTOLOGY_DEFAULT_CHANNEL", "dev")

from unittest.mock import AsyncMock

import pytest

from ontology_core import (
    DefaultPropertyKeyMapper,
    EntityDef,
    OntologyStore,
    PropertyDef,
    PropertyRange,
    TenantScope,
)


@pytest.fixture
def scope():
    """Provide the primary tenant scope."""
    return TenantScope("acme", "orders", "dev")


@pytest.fixture
def other_scope():
    """Provide a scope for a different tenant with the same package and channel."""
    return TenantScope("globex", "orders", "dev")


@pytest.fixture
def store():
    """Provide an empty ontology store."""
    return OntologyStore()


@pytest.fixture
def order_store(store, scope):
    """Store with an Order entity owning a required status property."""
    store.upsert_entities(scope, [EntityDef.create(scope, "Order")])
    store.upsert_properties(
        scope,
        [
            PropertyDef.create(
                scope,
                "Order",
                "status",
                range=PropertyRange.string(),
                min_cardinality=1,
                max_cardinality=1,
            )
        ],
    )
    return store


@pytest.fixture
def mock_graph():
    """Mock graph reader; set ``side_effect`` or ``return_value`` per test."""
    graph = AsyncMock()
    graph.get_vertex_property = AsyncMock(return_value=None)
    return graph


@pytest.fixture
def mapper():
    """Mapper with a couple of explicit predicate mappings."""
    return DefaultPropertyKeyMapper(
        property_map={"ldm:label": "label", "ldm:orderStatus": "status"},
        edge_map={"ldm:placedBy": "PLACED_BY"},
    )
