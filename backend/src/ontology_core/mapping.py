"""Mapping of ontology predicates to concrete graph keys and edge labels."""

from typing import TYPE_CHECKING, Mapping, Optional, Protocol

if TYPE_CHECKING:
    from .config import Settings

# Predicate separators, checked by position: whichever occurs last wins.
PREDICATE_SEPARATORS = (":", "/", "#")


class PropertyKeyMapper(Protocol):
    """Resolves ontology predicates to graph storage names."""

    def try_map_property_key(self, predicate: str) -> tuple[bool, Optional[str]]:
        ...

    def try_map_edge_label(self, predicate: str) -> tuple[bool, Optional[str]]:
        ...


class _CaseInsensitiveMap:
    def __init__(self, source: Optional[Mapping[str, str]]) -> None:
        self._data = {key.casefold(): value for key, value in (source or {}).items()}

    def lookup(self, key: str) -> tuple[bool, Optional[str]]:
        if key is None:
            return False, None
        value = self._data.get(key.casefold())
        return (value is not None), value

    def __len__(self) -> int:
        return len(self._data)


class DefaultPropertyKeyMapper:
    """In-memory mapper backed by two case-insensitive dictionaries.

    Example:
        mapper = DefaultPropertyKeyMapper(
            property_map={"ldm:label": "label", "ldm:status": "status"},
            edge_map={"kg:relatedTo": "RELATED_TO"},
        )
        mapper.try_map_property_key("LDM:Status")  # (True, "status")
    """

    def __init__(
        self,
        property_map: Optional[Mapping[str, str]] = None,
        edge_map: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._properties = _CaseInsensitiveMap(property_map)
        self._edges = _CaseInsensitiveMap(edge_map)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DefaultPropertyKeyMapper":
        """Build a mapper from PROPERTY_KEY_MAP_JSON and EDGE_LABEL_MAP_JSON."""
        return cls(settings.property_key_map, settings.edge_label_map)

    def try_map_property_key(self, predicate: str) -> tuple[bool, Optional[str]]:
        return self._properties.lookup(predicate)

    def try_map_edge_label(self, predicate: str) -> tuple[bool, Optional[str]]:
        return self._edges.lookup(predicate)


def local_name_from_predicate(predicate: str) -> str:
    """Best-effort local name of a CURIE or URI.

    Takes the text after the last separator (``:``, ``/`` or ``#``),
    or the whole string when none is present.

    Examples:
        "ldm:status" -> "status"
        "https://example/ns#Kind" -> "Kind"
        "status" -> "status"
    """
    cut = max(predicate.rfind(separator) for separator in PREDICATE_SEPARATORS)
    if cut < 0:
        return predicate
    tail = predicate[cut + 1 :]
    # A trailing separator would leave nothing; keep the input instead.
    return tail or predicate
