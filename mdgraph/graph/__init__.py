"""Graph subpackage containing the model, statement builders and repository."""

from .decode import ValueDecoder, decode_value
from .model import (
    EdgeType,
    ExportResult,
    GraphEdge,
    GraphNode,
    GraphQuery,
    GraphSearchResult,
    GraphStatistics,
    NodeType,
)
from .repository import GraphRepository

__all__ = [
    "EdgeType",
    "ExportResult",
    "GraphEdge",
    "GraphNode",
    "GraphQuery",
    "GraphRepository",
    "GraphSearchResult",
    "GraphStatistics",
    "NodeType",
    "ValueDecoder",
    "decode_value",
]
