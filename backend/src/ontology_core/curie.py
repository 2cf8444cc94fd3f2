"""CURIE expansion and compaction.

A registry instance is passed explicitly wherever canonical URIs are built,
so prefix overrides for one scope never leak into another.
"""

from typing import Mapping, Optional
from urllib.parse import urlparse

DEFAULT_LDM_NAMESPACE = "https://ontology.example.org/"

STANDARD_PREFIXES: dict[str, str] = {
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
    "owl": "http://www.w3.org/2002/07/owl#",
}


def _is_absolute_uri(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc)


class CurieRegistry:
    """Prefix table used to expand ``prefix:local`` names into URIs.

    Example:
        curies = CurieRegistry()
        curies.expand("xsd:string")
        # "http://www.w3.org/2001/XMLSchema#string"
    """

    def __init__(
        self,
        ldm_namespace: str = DEFAULT_LDM_NAMESPACE,
        extra_prefixes: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._prefixes: dict[str, str] = {}
        self.register_prefix("ldm", ldm_namespace)
        self._prefixes.update(STANDARD_PREFIXES)
        for prefix, base_uri in (extra_prefixes or {}).items():
            self.register_prefix(prefix, base_uri)

    def register_prefix(self, prefix: str, base_uri: str) -> None:
        """Register or override a prefix.

        Args:
            prefix: The CURIE prefix (e.g. "schema")
            base_uri: Namespace URI; "#" is appended if it ends with neither "#" nor "/"

        Raises:
            ValueError: If prefix or base URI is blank
        """
        if not prefix or not prefix.strip():
            raise ValueError("Prefix is required.")
        if not base_uri or not base_uri.strip():
            raise ValueError("Base URI is required.")
        if not base_uri.endswith(("#", "/")):
            base_uri += "#"
        self._prefixes[prefix] = base_uri

    def prefixes(self) -> dict[str, str]:
        return dict(self._prefixes)

    def expand(self, curie_or_uri: str) -> str:
        """Expand a CURIE to an absolute URI; absolute URIs pass through.

        Raises:
            ValueError: If the value is blank, has no prefix, or the prefix is unknown
        """
        if not curie_or_uri or not curie_or_uri.strip():
            raise ValueError("Value is required.")
        if _is_absolute_uri(curie_or_uri):
            return curie_or_uri

        idx = curie_or_uri.find(":")
        if idx <= 0:
            raise ValueError(f"Not a CURIE or absolute URI: {curie_or_uri}")
        prefix, local = curie_or_uri[:idx], curie_or_uri[idx + 1 :]
        base_uri = self._prefixes.get(prefix)
        if base_uri is None:
            raise ValueError(
                f"Unknown CURIE prefix '{prefix}' in '{curie_or_uri}'. "
                "Register it with CurieRegistry.register_prefix()."
            )
        return base_uri + local

    def compact(self, uri: str) -> str:
        """Compact an absolute URI using the longest matching namespace.

        Returns the URI unchanged when no registered namespace matches.
        """
        if not uri or not uri.strip():
            raise ValueError("URI is required.")
        best: Optional[tuple[str, str]] = None
        for prefix, base_uri in self._prefixes.items():
            if uri.startswith(base_uri) and (best is None or len(base_uri) > len(best[1])):
                best = (prefix, base_uri)
        if best is None:
            return uri
        return f"{best[0]}:{uri[len(best[1]):]}"
