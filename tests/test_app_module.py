"""Tests for :mod:`mdgraph.api`."""

from __future__ import annotations

import json
import logging

import pytest

from mdgraph import api
from mdgraph.api import MetadataGraphApp, search_query
from mdgraph.exec.adapters.local import LocalGraphClient
from mdgraph.graph.model import EdgeType, NodeType


@pytest.fixture()
def client() -> LocalGraphClient:
    return LocalGraphClient()


@pytest.fixture()
def app(client) -> MetadataGraphApp:
    return MetadataGraphApp.with_client(client)


def test_handle_requires_action(app):
    with pytest.raises(KeyError):
        app.handle({"params": {}})


def test_export_metadata_from_file(app, client, tmp_path, shop_dump):
    path = tmp_path / "shop.json"
    path.write_text(json.dumps(shop_dump), encoding="utf-8")

    response = app.handle({"action": "export_metadata", "params": {"path": str(path)}})

    assert response["ok"] is True
    assert response["result"]["nodesCount"] == 10
    assert response["result"]["edgesCount"] == 11
    assert len(client.statements) == 21


def test_search_builds_query_from_request(app, client, wire):
    client.respond("RETURN n", wire.rows(["n"], [wire.node("a", name="Goods")]))

    response = app.handle(
        {"action": "search", "params": {"nodeTypes": ["catalog"], "properties": {"name": "Goods"}, "limit": 5}}
    )

    assert response["result"]["totalCount"] == 1
    assert response["result"]["nodes"][0]["properties"]["name"] == "Goods"
    assert client.statements[0] == (
        'MATCH (n:MDObject) WHERE n.type == "CATALOG" AND n.name == "Goods" RETURN n LIMIT 5'
    )


def test_search_request_defaults():
    query = search_query({"edgeTypes": ["access"]})
    assert query.limit == 100
    assert query.offset == 0
    assert query.node_types is None
    assert query.edge_types == {EdgeType.ACCESS}


def test_search_rejects_unknown_type_names(app):
    with pytest.raises(ValueError):
        app.handle({"action": "search", "params": {"nodeTypes": ["spaceship"]}})


def test_nodes_by_type_and_default_listing(app, client, wire):
    client.respond("RETURN n", wire.rows(["n"], [wire.node("r", type="ROLE")]))

    by_type = app.handle({"action": "nodes", "params": {"type": "role"}})
    listing = app.handle({"action": "nodes", "params": {}})

    assert by_type["result"][0]["type"] == NodeType.ROLE.value
    assert [item["id"] for item in listing["result"]] == ["r"]
    assert client.statements[0] == 'MATCH (n:MDObject) WHERE n.type == "ROLE" RETURN n'
    assert client.statements[1] == "MATCH (n:MDObject) RETURN n LIMIT 100"


def test_related_and_edges(app, client, wire):
    client.respond(
        "RETURN DISTINCT related, ref", wire.rows(["related", "ref"], [wire.node("b"), wire.edge("a", "b", "CHILDREN")])
    )
    client.respond("RETURN e", wire.rows(["e"], [wire.edge("a", "b", "ATTRIBUTE", name="Owner")]))

    related = app.handle({"action": "related", "params": {"nodeId": "a"}})
    edges = app.handle({"action": "edges", "params": {"sourceId": "a", "targetId": "b"}})

    assert related["result"]["nodes"][0]["id"] == "b"
    assert related["result"]["edges"] == [
        {"sourceId": "a", "targetId": "b", "type": "CHILDREN", "properties": {}}
    ]
    assert edges["result"] == [
        {"sourceId": "a", "targetId": "b", "type": "ATTRIBUTE", "properties": {"name": "Owner"}}
    ]


def test_related_with_zero_depth_is_empty(app, client):
    response = app.handle({"action": "related", "params": {"nodeId": "a", "depth": 0}})
    assert response["result"] == {"nodes": [], "edges": [], "totalCount": 0}
    assert client.statements == []


def test_edges_require_both_endpoints(app):
    with pytest.raises(KeyError, match="targetId"):
        app.handle({"action": "edges", "params": {"sourceId": "a"}})


def test_stats_payload(app, client, wire):
    client.respond("AS vertexCount", wire.rows(["vertexCount"], [wire.integer(4)]))
    client.respond("AS edgeCount", wire.rows(["edgeCount"], [wire.integer(3)]))
    client.respond(
        "type(e) AS type", wire.rows(["type", "count"], [wire.string("CONTAINS"), wire.integer(3)])
    )

    response = app.handle({"action": "stats", "params": {}})

    assert response["result"] == {
        "totalNodes": 4,
        "totalEdges": 3,
        "nodesByType": {},
        "edgesByType": {"CONTAINS": 3},
    }


class FakeNebulaClient(LocalGraphClient):
    """Stands in for the cluster client; ``reachable`` decides ``connect``."""

    reachable = True
    created: list = []

    def __init__(self, settings):
        super().__init__()
        self.settings = settings
        FakeNebulaClient.created.append(self)

    def connect(self):
        self.connected = self.reachable
        return self.connected


@pytest.fixture()
def nebula(monkeypatch):
    monkeypatch.setattr(api, "NebulaGraphClient", FakeNebulaClient)
    monkeypatch.setattr(api, "_APP", None)
    monkeypatch.setattr(FakeNebulaClient, "created", [])
    monkeypatch.setattr(FakeNebulaClient, "reachable", True)
    return FakeNebulaClient


def test_default_app_connects_to_the_configured_cluster(nebula, monkeypatch):
    monkeypatch.setenv("MDGRAPH_DEFAULT_LIMIT", "7")

    app = MetadataGraphApp()

    assert isinstance(app.repository.client, nebula)
    assert app.repository.default_limit == 7
    assert app.repository.is_connected() is True


def test_handle_request_writes_through_the_cluster_client(nebula, shop_dump):
    response = api.handle_request({"action": "export_metadata", "params": {"configuration": shop_dump}})

    assert response["result"]["success"] is True
    assert response["result"]["nodesCount"] == 10
    assert len(nebula.created) == 1
    assert len(nebula.created[0].statements) == 21

    api.handle_request({"action": "stats", "params": {}})
    assert len(nebula.created) == 1


def test_handle_request_reconnects_while_the_cluster_is_unreachable(nebula, caplog):
    nebula.reachable = False

    with caplog.at_level(logging.ERROR):
        first = api.handle_request({"action": "stats", "params": {}})
    nebula.reachable = True
    api.handle_request({"action": "stats", "params": {}})

    assert first["result"]["totalNodes"] == 0
    assert "not reachable" in caplog.text
    assert len(nebula.created) == 2
    assert api._APP.repository.client is nebula.created[1]
