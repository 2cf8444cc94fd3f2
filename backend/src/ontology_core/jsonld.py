"""JSON-LD ``@context`` generation for a scoped ontology channel."""

import json
from typing import Any, Mapping, Optional

from .curie import STANDARD_PREFIXES
from .scope import TenantScope

DEFAULT_NAMESPACE_TEMPLATE = "https://ontology.example.org/{tenant}/{package}/{channel}#"


def ensure_namespace(namespace: str) -> str:
    """Append "#" unless the namespace already ends with "#" or "/"."""
    if namespace.endswith(("#", "/")):
        return namespace
    return namespace + "#"


def build_jsonld_context(
    scope: TenantScope,
    base_namespace: Optional[str] = None,
    extra_prefixes: Optional[Mapping[str, str]] = None,
) -> dict[str, Any]:
    """Build the ``@context`` object for one scope.

    Entity and property terms resolve through ``@vocab``; no per-term
    mappings are emitted.

    Args:
        scope: Scope the context is built for
        base_namespace: Scope namespace, also bound to the ``ldm`` prefix.
            Defaults to the scope rendered into DEFAULT_NAMESPACE_TEMPLATE
        extra_prefixes: Additional or overriding prefixes

    Returns:
        The context dictionary (without the ``@context`` wrapper)
    """
    namespace = ensure_namespace(
        base_namespace or scope.base_namespace(DEFAULT_NAMESPACE_TEMPLATE)
    )
    context: dict[str, Any] = {"@vocab": namespace, "ldm": namespace}
    context.update(STANDARD_PREFIXES)
    context.update(extra_prefixes or {})
    return context


def build_jsonld_context_json(
    scope: TenantScope,
    base_namespace: Optional[str] = None,
    extra_prefixes: Optional[Mapping[str, str]] = None,
) -> str:
    context = build_jsonld_context(scope, base_namespace, extra_prefixes)
    return json.dumps({"@context": context}, indent=2)
