"""Tests for :mod:`mdgraph.metadata.walker`."""

from __future__ import annotations

import types

from mdgraph.graph.model import EdgeType, GraphEdge, NodeType, NodeVariant
from mdgraph.metadata.model import (
    Attribute,
    Configuration,
    MDObject,
    MDOType,
    Subsystem,
    ValueTypeDescription,
)
from mdgraph.metadata.walker import MetadataWalker


def test_nodes_cover_configuration_children_and_nested_subsystems(shop_configuration, wire):
    nodes = list(MetadataWalker(shop_configuration).nodes())

    assert nodes[0].variant is NodeVariant.CONFIGURATION
    assert nodes[0].id == wire.vid(1)
    assert {node.name for node in nodes} == {
        "Shop", "Goods", "Partners", "Order", "Sales", "Orders", "Manager", "UseOrders", "Full", "OnWrite",
    }
    assert all(node.name != "Logo" for node in nodes)
    assert len({node.id for node in nodes}) == len(nodes)


def test_edges_follow_the_documented_order(shop_configuration, wire):
    v = wire.vid
    edges = list(MetadataWalker(shop_configuration).edges())

    assert edges == [
        GraphEdge.children(v(5), v(6)),
        GraphEdge.contains(v(5), v(2)),
        GraphEdge.contains(v(5), v(4)),
        GraphEdge.contains(v(6), v(4)),
        GraphEdge.access(v(7), v(2), "Read, Update"),
        GraphEdge.contains(v(8), v(4)),
        GraphEdge.contains(v(9), v(2)),
        GraphEdge.contains(v(10), v(4)),
        GraphEdge.attribute(v(2), v(3), "Owner"),
        GraphEdge.attribute(v(2), v(3), "Prices.Partner"),
        GraphEdge.attribute(v(4), v(2), "Goods"),
    ]


def test_every_edge_endpoint_is_an_emitted_node(shop_configuration):
    walker = MetadataWalker(shop_configuration)
    ids = {node.id for node in walker.nodes()}
    for edge in walker.edges():
        assert edge.source_id in ids and edge.target_id in ids


def test_walk_is_idempotent(shop_configuration):
    walker = MetadataWalker(shop_configuration)
    assert set(walker.nodes()) == set(walker.nodes())
    assert set(walker.edges()) == set(walker.edges())
    assert set(MetadataWalker(shop_configuration).edges()) == set(walker.edges())


def test_walk_is_lazy(shop_configuration):
    walker = MetadataWalker(shop_configuration)
    assert isinstance(walker.nodes(), types.GeneratorType)
    assert isinstance(walker.edges(), types.GeneratorType)


def test_self_referencing_catalog():
    catalog = MDObject(
        uuid="cat1",
        name="Items",
        kind=MDOType.CATALOG,
        attributes=[Attribute(name="Parent", value_type=ValueTypeDescription.of("CatalogRef.Items"))],
    )
    configuration = Configuration(uuid="cfg", name="Cfg", children=[catalog])
    walker = MetadataWalker(configuration)

    nodes = list(walker.nodes())
    edges = list(walker.edges())

    assert [node.type for node in nodes] == [NodeType.CONFIGURATION, NodeType.CATALOG]
    assert len(edges) == 1
    assert edges[0].type is EdgeType.ATTRIBUTE
    assert edges[0].source_id == edges[0].target_id == nodes[1].id
    assert edges[0].attribute_name == "Parent"


def test_nested_subsystem_without_content():
    sub2 = Subsystem(uuid="sub2", name="Inner")
    catalog = MDObject(uuid="cat1", name="Goods", kind=MDOType.CATALOG)
    sub1 = Subsystem(uuid="sub1", name="Outer", content=["Catalog.Goods"], subsystems=[sub2])
    configuration = Configuration(uuid="cfg", name="Cfg", children=[sub1, catalog])
    walker = MetadataWalker(configuration)

    ids = {node.uid: node.id for node in walker.nodes()}
    edges = list(walker.edges())

    assert set(ids) == {"cfg", "sub1", "sub2", "cat1"}
    assert edges == [
        GraphEdge.children(ids["sub1"], ids["sub2"]),
        GraphEdge.contains(ids["sub1"], ids["cat1"]),
    ]


def test_references_to_skipped_kinds_do_not_produce_edges():
    picture = MDObject(uuid="pic", name="Logo", kind=MDOType.COMMON_PICTURE)
    subsystem = Subsystem(uuid="sub", name="Main", content=["CommonPicture.Logo"])
    configuration = Configuration(uuid="cfg", name="Cfg", children=[picture, subsystem])

    assert list(MetadataWalker(configuration).edges()) == []


def test_resolve_accepts_member_names_and_ignores_garbage(shop_configuration):
    walker = MetadataWalker(shop_configuration)
    assert walker.resolve("CATALOG.Goods").name == "Goods"
    assert walker.resolve("catalog.goods").name == "Goods"
    assert walker.resolve("Goods") is None
    assert walker.resolve("Nothing.Goods") is None
    assert walker.resolve(None) is None
