"""Tests for JSON-LD context building and ontology export."""

import json

from rdflib import OWL, RDF, RDFS, XSD, Graph, Literal, Namespace, URIRef

from ontology_core import (
    AliasDef,
    EntityDef,
    EnumDef,
    PropertyConstraint,
    PropertyDef,
    PropertyRange,
    RelationDef,
    ShapeDef,
)
from ontology_core.export import export_jsonld, export_jsonld_string, export_turtle
from ontology_core.jsonld import build_jsonld_context, build_jsonld_context_json

NAMESPACE = "https://ontology.example.org/acme/orders/dev#"


class TestJsonLdContext:
    """Tests for @context generation."""

    def test_vocab_and_prefixes(self, scope) -> None:
        """Test that @vocab and ldm share the scope namespace."""
        context = build_jsonld_context(scope, NAMESPACE)
        assert context["@vocab"] == NAMESPACE
        assert context["ldm"] == NAMESPACE
        assert context["xsd"] == "http://www.w3.org/2001/XMLSchema#"
        assert set(context) >= {"rdf", "rdfs", "owl"}

    def test_namespace_terminator_added(self, scope) -> None:
        """Test that a bare namespace gets '#'."""
        context = build_jsonld_context(scope, "https://example.org/ns")
        assert context["@vocab"] == "https://example.org/ns#"

    def test_default_namespace_from_scope(self, scope) -> None:
        """Test the template default."""
        assert build_jsonld_context(scope)["@vocab"] == NAMESPACE

    def test_extra_prefixes_override(self, scope) -> None:
        """Test that extra prefixes are added and can override."""
        context = build_jsonld_context(
            scope, NAMESPACE, {"schema": "https://schema.org/", "xsd": "urn:xsd#"}
        )
        assert context["schema"] == "https://schema.org/"
        assert context["xsd"] == "urn:xsd#"

    def test_json_document(self, scope) -> None:
        """Test the wrapped JSON document."""
        document = json.loads(build_jsonld_context_json(scope, NAMESPACE))
        assert document["@context"]["@vocab"] == NAMESPACE


class TestExport:
    """Tests for JSON-LD and Turtle export."""

    def _populate(self, store, scope) -> None:
        store.upsert_entities(
            scope, [EntityDef.create(scope, "Order"), EntityDef.create(scope, "Customer")]
        )
        store.upsert_properties(
            scope,
            [
                PropertyDef.create(scope, "Order", "status", min_cardinality=1),
                PropertyDef.create(
                    scope, "Order", "customer", range=PropertyRange.entity("Customer")
                ),
            ],
        )
        store.upsert_relations(scope, [RelationDef.create(scope, "placedBy", "Order", "Customer")])
        store.upsert_enums(scope, [EnumDef.create(scope, "OrderStatus", ["open", "on-hold"])])
        store.upsert_aliases(scope, [AliasDef.create(scope, "Order", ["Purchase"], locale="en")])
        store.upsert_shapes(
            scope,
            [
                ShapeDef.create(
                    scope, "Order", [PropertyConstraint("status", allowed_values=["open"])]
                )
            ],
        )

    def test_jsonld_document(self, store, scope, other_scope) -> None:
        """Test the exported document layout."""
        self._populate(store, scope)
        store.upsert_entities(other_scope, [EntityDef.create(other_scope, "Widget")])

        document = export_jsonld(store, scope, NAMESPACE)

        assert document["scope"] == "acme::orders::dev"
        assert document["entities"] == ["Order", "Customer"]
        assert document["properties"][0] == {
            "owner": "Order",
            "name": "status",
            "range": "xsd:string",
            "required": True,
        }
        assert document["relations"] == [
            {"name": "placedBy", "from": "Order", "to": "Customer", "min": 0, "max": 1}
        ]
        assert document["aliases"] == [
            {"canonical": "Order", "locale": "en", "aliases": ["Purchase"]}
        ]
        assert document["shapes"][0]["constraints"][0]["in"] == ["open"]
        json.loads(export_jsonld_string(store, scope, NAMESPACE))

    def test_turtle(self, store, scope) -> None:
        """Test that the Turtle snapshot parses back into the expected triples."""
        self._populate(store, scope)

        graph = Graph().parse(data=export_turtle(store, scope, NAMESPACE), format="turtle")

        ldm = Namespace(NAMESPACE)
        assert (ldm.Customer, RDF.type, RDFS.Class) in graph
        assert (ldm.status, RDF.type, RDF.Property) in graph
        assert (ldm.status, RDFS.domain, ldm.Order) in graph
        assert (ldm.status, RDFS.range, XSD.string) in graph
        assert (ldm.customer, RDFS.range, ldm.Customer) in graph
        assert (ldm.placedBy, RDF.type, OWL.ObjectProperty) in graph
        assert (ldm["on-hold"], RDF.type, ldm.OrderStatus) in graph
        assert (ldm["on-hold"], RDFS.label, Literal("on-hold")) in graph

    def test_turtle_other_scope_excluded(self, store, scope, other_scope) -> None:
        """Test that only the requested scope is rendered."""
        self._populate(store, scope)
        store.upsert_entities(other_scope, [EntityDef.create(other_scope, "Widget")])

        graph = Graph().parse(data=export_turtle(store, scope, NAMESPACE), format="turtle")

        assert (Namespace(NAMESPACE).Widget, RDF.type, RDFS.Class) not in graph

    def test_turtle_names_with_spaces(self, store, scope) -> None:
        """Test that names that are not valid local names still serialize."""
        store.upsert_entities(scope, [EntityDef.create(scope, "Sales Order")])

        graph = Graph().parse(data=export_turtle(store, scope, NAMESPACE), format="turtle")

        assert (URIRef(NAMESPACE + "Sales%20Order"), RDF.type, RDFS.Class) in graph

    def test_turtle_enum_values_stay_distinct(self, store, scope) -> None:
        """Test that values differing only in punctuation map to separate individuals."""
        store.upsert_enums(scope, [EnumDef.create(scope, "Status", ["on-hold", "onhold"])])

        graph = Graph().parse(data=export_turtle(store, scope, NAMESPACE), format="turtle")

        individuals = set(graph.subjects(RDF.type, Namespace(NAMESPACE).Status))
        assert individuals == {
            URIRef(NAMESPACE + "on-hold"),
            URIRef(NAMESPACE + "onhold"),
        }
