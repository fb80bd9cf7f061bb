"""Mapping between graph entities and their stored property sets."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from .model import EdgeType, EdgeVariant, GraphEdge, GraphNode, NodeType, NodeVariant

NODE_PROPERTIES: Tuple[str, ...] = ("uid", "name", "synonym", "type")

_NODE_PROPERTIES: Dict[NodeVariant, Tuple[str, ...]] = {
    NodeVariant.CONFIGURATION: NODE_PROPERTIES,
    NodeVariant.MD_OBJECT: NODE_PROPERTIES,
}

_EDGE_PROPERTIES: Dict[EdgeVariant, Tuple[str, ...]] = {
    EdgeVariant.ATTRIBUTE: ("name",),
    EdgeVariant.ACCESS: ("name",),
}

_EDGE_VARIANTS: Dict[EdgeType, EdgeVariant] = {
    EdgeType.ATTRIBUTE: EdgeVariant.ATTRIBUTE,
    EdgeType.ACCESS: EdgeVariant.ACCESS,
}


def node_properties(variant: NodeVariant | GraphNode) -> Tuple[str, ...]:
    """Return the ordered property names persisted for a node variant."""

    if isinstance(variant, GraphNode):
        variant = variant.variant
    return _NODE_PROPERTIES.get(variant, ())


def node_values(node: GraphNode) -> Tuple[str, ...]:
    """Return the property values of ``node`` aligned with :func:`node_properties`."""

    if node.variant not in _NODE_PROPERTIES:
        return ()
    return node.uid, node.name, node.synonym, node.type.value


def edge_variant_for(edge_type: EdgeType) -> EdgeVariant:
    return _EDGE_VARIANTS.get(edge_type, EdgeVariant.BASE)


def edge_properties(variant: EdgeVariant | EdgeType | GraphEdge) -> Tuple[str, ...]:
    """Return the ordered property names persisted for an edge variant."""

    if isinstance(variant, GraphEdge):
        variant = variant.variant
    elif isinstance(variant, EdgeType):
        variant = edge_variant_for(variant)
    return _EDGE_PROPERTIES.get(variant, ())


def edge_values(edge: GraphEdge) -> Tuple[str, ...]:
    if edge.variant is EdgeVariant.ATTRIBUTE:
        return (edge.attribute_name,)
    if edge.variant is EdgeVariant.ACCESS:
        return (edge.rights,)
    return ()


def to_properties_map(entity: GraphNode | GraphEdge) -> Dict[str, Any]:
    """Zip property names and values of ``entity`` into a mapping."""

    if isinstance(entity, GraphNode):
        return dict(zip(node_properties(entity), node_values(entity)))
    return dict(zip(edge_properties(entity), edge_values(entity)))


def _as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def node_from_properties(vid: Any, properties: Mapping[str, Any]) -> GraphNode:
    """Rebuild a node from its vertex id and decoded tag properties."""

    vid_text = _as_text(vid)
    uid = _as_text(properties.get("uid"), vid_text) or vid_text
    node_type = NodeType.parse(properties.get("type", NodeType.UNKNOWN.value))
    variant = NodeVariant.CONFIGURATION if node_type is NodeType.CONFIGURATION else NodeVariant.MD_OBJECT
    return GraphNode(
        id=vid_text or uid,
        uid=uid,
        name=_as_text(properties.get("name")),
        synonym=_as_text(properties.get("synonym")),
        type=node_type,
        variant=variant,
    )


def node_from_vertex(vertex: Any, tag: str) -> Optional[GraphNode]:
    """Rebuild a node from a decoded vertex record; ``None`` if it lacks ``tag``."""

    if not isinstance(vertex, Mapping):
        return None
    tags = vertex.get("tags")
    if not isinstance(tags, Mapping):
        return None
    properties = tags.get(tag)
    if not isinstance(properties, Mapping):
        return None
    vid = vertex.get("vid")
    if vid is None:
        return None
    return node_from_properties(vid, properties)


def edge_from_decoded(record: Any) -> Optional[GraphEdge]:
    """Rebuild an edge from a decoded edge record; ``None`` if malformed.

    An edge walked against its stored direction arrives with a negative
    ``type`` and swapped endpoints; the stored direction is restored.
    """

    if not isinstance(record, Mapping):
        return None
    source_id = record.get("src")
    target_id = record.get("dst")
    if source_id is None or target_id is None:
        return None
    source_id, target_id = str(source_id), str(target_id)
    direction = record.get("type")
    if isinstance(direction, int) and direction < 0:
        source_id, target_id = target_id, source_id
    name = _as_text(record.get("name")).upper()
    props = record.get("props")
    carried = _as_text(props.get("name")) if isinstance(props, Mapping) else ""

    if name == EdgeType.ATTRIBUTE.value:
        return GraphEdge.attribute(source_id, target_id, carried)
    if name == EdgeType.ACCESS.value:
        return GraphEdge.access(source_id, target_id, carried)
    if name == EdgeType.CHILDREN.value:
        return GraphEdge.children(source_id, target_id)
    if name == EdgeType.CONTAINS.value:
        return GraphEdge.contains(source_id, target_id)
    return GraphEdge.related(source_id, target_id)


__all__ = [
    "NODE_PROPERTIES",
    "edge_from_decoded",
    "edge_properties",
    "edge_values",
    "edge_variant_for",
    "node_from_properties",
    "node_from_vertex",
    "node_properties",
    "node_values",
    "to_properties_map",
]
