"""Export a scope's ontology as a JSON-LD document or an RDF graph."""

import json
from typing import Any, Optional
from urllib.parse import quote

from rdflib import OWL, RDF, RDFS, XSD, Graph, Literal, Namespace, URIRef

from .jsonld import DEFAULT_NAMESPACE_TEMPLATE, build_jsonld_context, ensure_namespace
from .models import RangeKind
from .scope import TenantScope
from .store import OntologyStore

XSD_NAMESPACE = Namespace(str(XSD))


def export_jsonld(
    store: OntologyStore, scope: TenantScope, base_namespace: Optional[str] = None
) -> dict[str, Any]:
    """Serialize one scope of the store as a JSON-LD document.

    Args:
        store: Loaded store
        scope: Scope to export
        base_namespace: Scope namespace; defaults to the rendered template

    Returns:
        JSON-serializable document with ``@context`` and one list per kind
    """
    namespace = ensure_namespace(
        base_namespace or scope.base_namespace(DEFAULT_NAMESPACE_TEMPLATE)
    )
    return {
        "@context": build_jsonld_context(scope, namespace),
        "scope": str(scope),
        "entities": [entity.local_name for entity in store.list_entities(scope)],
        "properties": [
            {
                "owner": prop.owner_entity,
                "name": prop.local_name,
                "range": prop.range.value,
                "required": prop.required,
            }
            for prop in store.list_properties(scope)
        ],
        "relations": [
            {
                "name": relation.local_name,
                "from": relation.from_entity,
                "to": relation.to_entity,
                "min": relation.min_cardinality,
                "max": relation.max_cardinality,
            }
            for relation in store.list_relations(scope)
        ],
        "enums": [
            {"name": enum_def.local_name, "values": list(enum_def.values)}
            for enum_def in store.list_enums(scope)
        ],
        "aliases": [
            {"canonical": alias.canonical, "locale": alias.locale, "aliases": list(alias.aliases)}
            for alias in store.list_aliases(scope)
        ],
        "shapes": [
            {
                "appliesTo": shape.applies_to_entity,
                "constraints": [
                    {
                        "property": constraint.property,
                        "expectedRange": constraint.expected_range,
                        "min": constraint.min_cardinality,
                        "max": constraint.max_cardinality,
                        "pattern": constraint.pattern,
                        "in": (
                            list(constraint.allowed_values)
                            if constraint.allowed_values is not None
                            else None
                        ),
                    }
                    for constraint in shape.property_constraints
                ],
            }
            for shape in store.list_shapes(scope)
        ],
    }


def export_jsonld_string(
    store: OntologyStore,
    scope: TenantScope,
    base_namespace: Optional[str] = None,
    indent: Optional[int] = 2,
) -> str:
    return json.dumps(export_jsonld(store, scope, base_namespace), indent=indent)


def _ldm_term(ldm: Namespace, name: str) -> URIRef:
    return ldm[quote(name, safe="") or "Value"]


def _xsd_term(value: str) -> URIRef:
    if value.startswith("xsd:"):
        return XSD_NAMESPACE[value[len("xsd:") :]]
    if value.startswith(XSD_NAMESPACE):
        return URIRef(value)
    return XSD.string


def build_rdf_graph(
    store: OntologyStore, scope: TenantScope, base_namespace: Optional[str] = None
) -> Graph:
    """Build an rdflib graph of one scope.

    Entities become ``rdfs:Class``, properties ``rdf:Property`` with domain
    and range, relations ``owl:ObjectProperty`` and enum values individuals
    of their enum class, labelled with the raw value. Local names are
    percent-encoded into the scope namespace. This is not a complete OWL
    export.
    """
    ldm = Namespace(
        ensure_namespace(base_namespace or scope.base_namespace(DEFAULT_NAMESPACE_TEMPLATE))
    )
    graph = Graph()
    graph.bind("ldm", ldm)
    graph.bind("rdf", RDF)
    graph.bind("rdfs", RDFS)
    graph.bind("xsd", XSD)
    graph.bind("owl", OWL)

    for entity in store.list_entities(scope):
        graph.add((_ldm_term(ldm, entity.local_name), RDF.type, RDFS.Class))

    for prop in store.list_properties(scope):
        prop_iri = _ldm_term(ldm, prop.local_name)
        if prop.range.kind == RangeKind.XSD_DATATYPE:
            range_iri = _xsd_term(prop.range.value)
        else:
            range_iri = _ldm_term(ldm, prop.range.value)
        graph.add((prop_iri, RDF.type, RDF.Property))
        graph.add((prop_iri, RDFS.domain, _ldm_term(ldm, prop.owner_entity)))
        graph.add((prop_iri, RDFS.range, range_iri))

    for relation in store.list_relations(scope):
        relation_iri = _ldm_term(ldm, relation.local_name)
        graph.add((relation_iri, RDF.type, OWL.ObjectProperty))
        graph.add((relation_iri, RDFS.domain, _ldm_term(ldm, relation.from_entity)))
        graph.add((relation_iri, RDFS.range, _ldm_term(ldm, relation.to_entity)))

    for enum_def in store.list_enums(scope):
        enum_class = _ldm_term(ldm, enum_def.local_name)
        graph.add((enum_class, RDF.type, RDFS.Class))
        for value in enum_def.values:
            individual = _ldm_term(ldm, value)
            graph.add((individual, RDF.type, enum_class))
            graph.add((individual, RDFS.label, Literal(value)))

    return graph


def export_turtle(
    store: OntologyStore, scope: TenantScope, base_namespace: Optional[str] = None
) -> str:
    """Serialize one scope as Turtle."""
    return build_rdf_graph(store, scope, base_namespace).serialize(format="turtle")
