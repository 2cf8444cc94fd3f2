"""Graph read collaborator contract."""

from typing import Optional, Protocol


class GraphReader(Protocol):
    """Read-only access to vertex properties on the tenant's graph.

    Implementations enforce tenant isolation themselves; callers pass
    only a local vertex id. Cancellation is asyncio task cancellation.
    """

    async def get_vertex_property(self, subject_id: str, property_key: str) -> Optional[str]:
        """Return the property value, or None when the vertex or property is absent."""
        ...
