"""Graph export utilities."""
from __future__ import annotations

import io
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Literal

import networkx as nx

from ..graph.mapper import to_properties_map
from ..graph.model import GraphEdge, GraphNode, GraphSearchResult


def node_payload(node: GraphNode) -> Dict[str, Any]:
    """Serialize ``node`` as a ``GraphNodeResponse``."""

    return {
        "id": node.id,
        "type": node.type.value,
        "properties": to_properties_map(node),
        "labels": [node.type.value],
    }


def edge_payload(edge: GraphEdge) -> Dict[str, Any]:
    """Serialize ``edge`` as a ``GraphEdgeResponse``."""

    return {
        "sourceId": edge.source_id,
        "targetId": edge.target_id,
        "type": edge.type.value,
        "properties": to_properties_map(edge),
    }


def search_payload(result: GraphSearchResult) -> Dict[str, Any]:
    return {
        "nodes": [node_payload(node) for node in result.nodes],
        "edges": [edge_payload(edge) for edge in result.edges],
        "totalCount": result.total_count,
    }


@dataclass
class GraphExporter:
    """Serialize walked entities to a portable representation.

    Nodes and edges are kept in a :class:`networkx.MultiDiGraph` keyed by
    node id and edge type, so re-adding an entity replaces it.
    """

    graph: nx.MultiDiGraph = field(default_factory=nx.MultiDiGraph)

    @classmethod
    def from_entities(cls, nodes: Iterable[GraphNode], edges: Iterable[GraphEdge]) -> "GraphExporter":
        exporter = cls()
        for node in nodes:
            exporter.add_node(node)
        for edge in edges:
            exporter.add_edge(edge)
        return exporter

    def add_node(self, node: GraphNode) -> None:
        self.graph.add_node(node.id, node=node, **to_properties_map(node))

    def add_edge(self, edge: GraphEdge) -> None:
        self.graph.add_edge(
            edge.source_id,
            edge.target_id,
            key=edge.type.value,
            edge=edge,
            type=edge.type.value,
            **to_properties_map(edge),
        )

    def nodes(self) -> List[GraphNode]:
        return [data["node"] for _, data in self.graph.nodes(data=True) if "node" in data]

    def edges(self) -> List[GraphEdge]:
        return [data["edge"] for _, _, data in self.graph.edges(data=True)]

    def to_payload(self) -> Dict[str, Any]:
        nodes = self.nodes()
        return search_payload(GraphSearchResult(nodes=nodes, edges=self.edges(), total_count=len(nodes)))

    def _graphml(self) -> str:
        # GraphML only carries scalar attributes.
        plain = nx.MultiDiGraph()
        for node_key, data in self.graph.nodes(data=True):
            plain.add_node(node_key, **{key: value for key, value in data.items() if key != "node"})
        for source, target, key, data in self.graph.edges(keys=True, data=True):
            plain.add_edge(source, target, key=key, **{name: value for name, value in data.items() if name != "edge"})
        buffer = io.BytesIO()
        nx.write_graphml(plain, buffer)
        return buffer.getvalue().decode("utf-8")

    def export(self, *, format: Literal["graphml", "json"] = "json") -> str:
        """Export the graph to the requested ``format``."""

        if format == "graphml":
            return self._graphml()
        if format == "json":
            return json.dumps(self.to_payload(), ensure_ascii=False, indent=2)
        raise ValueError(f"Unsupported export format: {format}")


__all__ = ["GraphExporter", "edge_payload", "node_payload", "search_payload"]
