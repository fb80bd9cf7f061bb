"""Graph repository backed by an execution client."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..exec.client import GraphClient, ResultRows
from .decode import ValueDecoder
from .mapper import edge_from_decoded, node_from_vertex, to_properties_map
from .model import (
    EdgeType,
    GraphEdge,
    GraphNode,
    GraphQuery,
    GraphSearchResult,
    GraphStatistics,
    NodeType,
)
from .query import (
    DEFAULT_LIMIT,
    NODE_TAG,
    build_count_edges,
    build_count_edges_by_type,
    build_count_nodes,
    build_count_nodes_by_type,
    build_delete_edge,
    build_delete_vertex,
    build_edges_between_query,
    build_edges_query,
    build_fetch_vertex,
    build_nodes_by_properties_query,
    build_nodes_by_type_query,
    build_nodes_query,
    build_related_nodes_query,
    build_update_vertex,
)

LOGGER = logging.getLogger(__name__)


def _column(row: Mapping[str, Any], name: str) -> Any:
    if name in row:
        return row[name]
    return next(iter(row.values()), None)


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass
class GraphRepository:
    """Store and query metadata graph entities.

    The repository holds no state between calls and never retries. Any
    failure raised by the client or while rebuilding entities is logged and
    turned into ``False`` or an empty result.
    """

    client: GraphClient
    decoder: ValueDecoder = field(default_factory=ValueDecoder)
    logger: logging.Logger = field(default_factory=lambda: LOGGER)
    default_limit: int = DEFAULT_LIMIT

    def is_connected(self) -> bool:
        return self.client.is_connected()

    # -- writes ------------------------------------------------------------

    def save_node(self, node: GraphNode) -> bool:
        try:
            return self.client.insert_vertex(NODE_TAG, node.id, to_properties_map(node))
        except Exception as exc:
            self.logger.error("Failed to save node %s: %s", node.id, exc)
            return False

    def save_edge(self, edge: GraphEdge) -> bool:
        try:
            return self.client.insert_edge(
                edge.type.value, edge.source_id, edge.target_id, to_properties_map(edge)
            )
        except Exception as exc:
            self.logger.error(
                "Failed to save edge %s -> %s (%s): %s", edge.source_id, edge.target_id, edge.type.value, exc
            )
            return False

    def delete_node(self, node_id: str) -> bool:
        return self._run_mutation(build_delete_vertex(node_id), "delete node %s" % node_id)

    def delete_edge(self, source_id: str, target_id: str, edge_type: EdgeType) -> bool:
        statement = build_delete_edge(edge_type, source_id, target_id)
        return self._run_mutation(statement, "delete edge %s -> %s" % (source_id, target_id))

    def update_node_properties(self, node_id: str, properties: Mapping[str, Any]) -> bool:
        if not properties:
            self.logger.warning("No properties given to update node %s", node_id)
            return False
        return self._run_mutation(build_update_vertex(node_id, properties), "update node %s" % node_id)

    def _run_mutation(self, statement: str, description: str) -> bool:
        try:
            self.client.execute(statement)
        except Exception as exc:
            self.logger.error("Failed to %s: %s", description, exc)
            return False
        return True

    # -- reads -------------------------------------------------------------

    def _rows(self, statement: str) -> List[Dict[str, Any]]:
        result: ResultRows = self.client.execute(statement)
        return [self.decoder.decode_row(result.column_names, values) for values in result.rows]

    def _nodes(self, rows: Iterable[Mapping[str, Any]], column: str = "n") -> List[GraphNode]:
        nodes: Dict[str, GraphNode] = {}
        for row in rows:
            node = node_from_vertex(_column(row, column), NODE_TAG)
            if node is None:
                self.logger.debug("Skipping row without a %s vertex", NODE_TAG)
                continue
            nodes.setdefault(node.id, node)
        return list(nodes.values())

    def _edges(self, records: Iterable[Any]) -> List[GraphEdge]:
        edges: Dict[tuple, GraphEdge] = {}
        for record in records:
            edge = edge_from_decoded(record)
            if edge is not None:
                edges.setdefault(edge.key, edge)
        return list(edges.values())

    def find_nodes(self, query: GraphQuery) -> GraphSearchResult:
        """Return the matching nodes and the edges running between them."""

        statement = build_nodes_query(query, self.default_limit)
        edge_types = set(query.edge_types or ())
        try:
            nodes = self._nodes(self._rows(statement))
            edges: List[GraphEdge] = []
            if nodes:
                ids = [node.id for node in nodes]
                rows = self._rows(build_edges_between_query(ids, edge_types or None))
                edges = self._contained_edges(self._edges(_column(row, "e") for row in rows), ids)
                if edge_types:
                    edges = [edge for edge in edges if edge.type in edge_types]
        except Exception as exc:
            self.logger.error("Failed to find nodes: %s", exc)
            return GraphSearchResult.empty()
        self.logger.debug("Found %s nodes and %s edges", len(nodes), len(edges))
        return GraphSearchResult(nodes=nodes, edges=edges, total_count=len(nodes))

    @staticmethod
    def _contained_edges(edges: Sequence[GraphEdge], node_ids: Iterable[str]) -> List[GraphEdge]:
        allowed = set(node_ids)
        return [edge for edge in edges if edge.source_id in allowed and edge.target_id in allowed]

    def find_nodes_by_type(self, node_type: NodeType) -> List[GraphNode]:
        try:
            return self._nodes(self._rows(build_nodes_by_type_query(node_type)))
        except Exception as exc:
            self.logger.error("Failed to find nodes of type %s: %s", NodeType.parse(node_type).value, exc)
            return []

    def find_nodes_by_properties(self, properties: Mapping[str, Any]) -> List[GraphNode]:
        if not properties:
            return []
        try:
            return self._nodes(self._rows(build_nodes_by_properties_query(properties)))
        except Exception as exc:
            self.logger.error("Failed to find nodes by properties %s: %s", dict(properties), exc)
            return []

    def find_related_nodes(self, node_id: str, depth: int = 1) -> GraphSearchResult:
        """Return nodes reachable from ``node_id`` within ``depth`` hops.

        The anchor itself is never part of the result. Edges are kept when
        both endpoints are the anchor or one of the returned nodes.
        """

        statement = build_related_nodes_query(node_id, depth)
        if statement is None:
            return GraphSearchResult.empty()
        try:
            rows = self._rows(statement)
            nodes = [node for node in self._nodes(rows, "related") if node.id != node_id]
            records: List[Any] = []
            for row in rows:
                records.extend(_as_list(row.get("ref")))
            edges = self._contained_edges(self._edges(records), [node_id, *(node.id for node in nodes)])
        except Exception as exc:
            self.logger.error("Failed to find nodes related to %s: %s", node_id, exc)
            return GraphSearchResult.empty()
        return GraphSearchResult(nodes=nodes, edges=edges, total_count=len(nodes))

    def find_edges(self, source_id: str, target_id: str, edge_type: Optional[EdgeType] = None) -> List[GraphEdge]:
        try:
            rows = self._rows(build_edges_query(source_id, target_id, edge_type))
            return self._edges(_column(row, "e") for row in rows)
        except Exception as exc:
            self.logger.error("Failed to find edges %s -> %s: %s", source_id, target_id, exc)
            return []

    def node_exists(self, node_id: str) -> bool:
        try:
            return bool(self._nodes(self._rows(build_fetch_vertex(node_id))))
        except Exception as exc:
            self.logger.error("Failed to check node %s: %s", node_id, exc)
            return False

    # -- statistics --------------------------------------------------------

    def get_graph_statistics(self) -> GraphStatistics:
        try:
            total_nodes = self._count(build_count_nodes(), "vertexCount")
            total_edges = self._count(build_count_edges(), "edgeCount")
        except Exception as exc:
            self.logger.error("Failed to read graph statistics: %s", exc)
            return GraphStatistics()

        return GraphStatistics(
            total_nodes=total_nodes,
            total_edges=total_edges,
            nodes_by_type=self._grouped(build_count_nodes_by_type(), NodeType.parse),
            edges_by_type=self._grouped(build_count_edges_by_type(), EdgeType.parse),
        )

    def _count(self, statement: str, column: str) -> int:
        rows = self._rows(statement)
        if not rows:
            return 0
        return _as_int(_column(rows[0], column))

    def _grouped(self, statement: str, parse) -> Dict[Any, int]:
        try:
            rows = self._rows(statement)
        except Exception as exc:
            self.logger.warning("Grouped count unavailable: %s", exc)
            return {}
        counts: Dict[Any, int] = {}
        for row in rows:
            try:
                key = parse(row.get("type"))
            except ValueError:
                continue
            counts[key] = counts.get(key, 0) + _as_int(row.get("count"))
        return counts


__all__ = ["GraphRepository"]
