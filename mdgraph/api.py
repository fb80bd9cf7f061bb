"""Public API surface for the metadata graph."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from mdgraph.config import NebulaSettings
from mdgraph.exec.adapters.nebula import NebulaGraphClient
from mdgraph.exec.client import GraphClient
from mdgraph.graph.model import EdgeType, GraphQuery, GraphStatistics, NodeType
from mdgraph.graph.query import DEFAULT_LIMIT
from mdgraph.graph.repository import GraphRepository
from mdgraph.metadata.exporter import MetadataExporter
from mdgraph.metadata.loader import load_configuration, load_configuration_file
from mdgraph.persist.export import edge_payload, node_payload, search_payload
from mdgraph.router import ActionRouter

LOGGER = logging.getLogger(__name__)


def parse_node_type(name: str) -> NodeType:
    """Strict lookup used for caller supplied type names."""

    return NodeType(str(name).strip().upper())


def parse_edge_type(name: str) -> EdgeType:
    return EdgeType(str(name).strip().upper())


def statistics_payload(statistics: GraphStatistics) -> dict:
    return {
        "totalNodes": statistics.total_nodes,
        "totalEdges": statistics.total_edges,
        "nodesByType": {key.value: value for key, value in statistics.nodes_by_type.items()},
        "edgesByType": {key.value: value for key, value in statistics.edges_by_type.items()},
    }


def search_query(params: Mapping[str, Any]) -> GraphQuery:
    """Build a :class:`GraphQuery` from a search request payload."""

    node_types = params.get("nodeTypes")
    edge_types = params.get("edgeTypes")
    return GraphQuery(
        node_types={parse_node_type(item) for item in node_types} if node_types else None,
        edge_types={parse_edge_type(item) for item in edge_types} if edge_types else None,
        properties=params.get("properties") or None,
        limit=params.get("limit", DEFAULT_LIMIT),
        offset=params.get("offset", 0),
    )


def connect_repository(settings: Optional[NebulaSettings] = None) -> GraphRepository:
    """Open a NebulaGraph client from the environment and wrap it in a repository."""

    settings = settings or NebulaSettings.from_env()
    client = NebulaGraphClient(settings=settings)
    if not client.connect():
        LOGGER.error("NebulaGraph is not reachable at %s", settings.addresses)
    return GraphRepository(client=client, default_limit=settings.default_limit)


@dataclass
class MetadataGraphApp:
    """Container wiring together repository, exporter and action router."""

    repository: GraphRepository = field(default_factory=connect_repository)
    router: ActionRouter = field(default_factory=ActionRouter)
    exporter: Optional[MetadataExporter] = None
    logger: logging.Logger = field(default_factory=lambda: LOGGER)

    def __post_init__(self) -> None:
        if self.exporter is None:
            self.exporter = MetadataExporter(repository=self.repository)
        self._register_default_actions()

    @classmethod
    def with_client(cls, client: GraphClient, settings: Optional[NebulaSettings] = None) -> "MetadataGraphApp":
        default_limit = settings.default_limit if settings is not None else DEFAULT_LIMIT
        return cls(repository=GraphRepository(client=client, default_limit=default_limit))

    def handle(self, payload: dict) -> dict:
        """Dispatch an API payload and return a canonical response."""

        action = payload.get("action")
        if not action:
            raise KeyError("payload must include 'action'")
        params = payload.get("params")
        result = self.router.dispatch(action, params)
        self.logger.info("Executed action '%s'", action)
        return {"ok": True, "result": result.get("result", {})}

    def _register_default_actions(self) -> None:
        self.router.register("export_metadata", self._handle_export_metadata)
        self.router.register("search", self._handle_search)
        self.router.register("nodes", self._handle_nodes)
        self.router.register("related", self._handle_related)
        self.router.register("edges", self._handle_edges)
        self.router.register("stats", self._handle_stats)

    # ------------------------------------------------------------------
    # Action handlers
    # ------------------------------------------------------------------

    def _handle_export_metadata(self, params: dict) -> dict:
        if "configuration" in params:
            configuration = load_configuration(params["configuration"])
        elif "path" in params:
            configuration = load_configuration_file(params["path"])
        else:
            raise KeyError("'configuration' or 'path' is required")
        result = self.exporter.export_metadata(configuration)
        return {"result": result.to_payload()}

    def _handle_search(self, params: dict) -> dict:
        result = self.repository.find_nodes(search_query(params))
        return {"result": search_payload(result)}

    def _handle_nodes(self, params: dict) -> dict:
        node_type = params.get("type")
        if node_type:
            nodes: Iterable = self.repository.find_nodes_by_type(parse_node_type(node_type))
        else:
            nodes = self.repository.find_nodes(GraphQuery(limit=DEFAULT_LIMIT)).nodes
        return {"result": [node_payload(node) for node in nodes]}

    def _handle_related(self, params: dict) -> dict:
        node_id = params.get("nodeId")
        if not node_id:
            raise KeyError("'nodeId' is required")
        result = self.repository.find_related_nodes(node_id, int(params.get("depth", 1)))
        return {"result": search_payload(result)}

    def _handle_edges(self, params: dict) -> dict:
        try:
            source_id, target_id = params["sourceId"], params["targetId"]
        except KeyError as exc:
            raise KeyError(f"'{exc.args[0]}' is required") from exc
        edges = self.repository.find_edges(source_id, target_id)
        return {"result": [edge_payload(edge) for edge in edges]}

    def _handle_stats(self, params: dict) -> dict:
        return {"result": statistics_payload(self.repository.get_graph_statistics())}


_APP: Optional[MetadataGraphApp] = None


def handle_request(payload: dict) -> dict:
    """Entry point exposed to external callers.

    The shared app talks to the NebulaGraph cluster configured in the
    environment and is rebuilt while the cluster is unreachable.
    """

    global _APP
    if _APP is None or not _APP.repository.is_connected():
        _APP = MetadataGraphApp()
    return _APP.handle(payload)


__all__ = [
    "MetadataGraphApp",
    "connect_repository",
    "handle_request",
    "parse_edge_type",
    "parse_node_type",
    "search_query",
    "statistics_payload",
]
