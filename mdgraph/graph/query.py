"""nGQL statement builders for the metadata graph.

All node variants share the single ``MDObject`` tag; the node kind lives in
the ``type`` property so one tag scan serves every variant. The builders are
pure functions of their arguments and perform no I/O.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from .model import EdgeType, GraphQuery, NodeType

NODE_TAG = "MDObject"
DEFAULT_LIMIT = 100


def format_value(value: Any) -> str:
    """Render ``value`` as a filter literal.

    Strings are double quoted without escaping embedded quotes.
    """

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, NodeType | EdgeType):
        value = value.value
    return f'"{value}"'


def format_insert_value(value: Any) -> str:
    """Render ``value`` as an INSERT literal (single quoted strings)."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, NodeType | EdgeType):
        value = value.value
    return f"'{value}'"


def _type_name(value: NodeType | EdgeType | str) -> str:
    return value.value if isinstance(value, NodeType | EdgeType) else str(value)


def node_type_filter(node_types: Iterable[NodeType | str], alias: str = "n") -> str:
    """Return a disjunction matching any of ``node_types``."""

    names = [_type_name(item) for item in node_types]
    if not names:
        return ""
    clause = " OR ".join(f'{alias}.type == "{name}"' for name in names)
    return f"({clause})" if len(names) > 1 else clause


def property_filter(properties: Mapping[str, Any], alias: str = "n") -> str:
    """Return a conjunction of equality comparisons for ``properties``."""

    return " AND ".join(f"{alias}.{key} == {format_value(value)}" for key, value in properties.items())


def edge_type_filter(edge_types: Optional[Iterable[EdgeType | str]]) -> str:
    """Return the ``:A|B`` relationship restriction, or ``""`` for any edge."""

    names = [_type_name(item) for item in (edge_types or ())]
    if not names:
        return ""
    return ":" + "|".join(names)


def _id_list(node_ids: Iterable[str]) -> str:
    return ",".join(f"'{item}'" for item in node_ids)


def _paging(limit: Optional[int], offset: Optional[int]) -> str:
    parts = []
    if offset:
        parts.append(f"SKIP {offset}")
    if limit is not None:
        parts.append(f"LIMIT {limit}")
    return (" " + " ".join(parts)) if parts else ""


def build_nodes_query(query: GraphQuery, default_limit: int = DEFAULT_LIMIT) -> str:
    """Translate ``query`` into a node MATCH statement."""

    clauses = []
    node_types = list(query.node_types or ())
    if node_types:
        clauses.append(node_type_filter(node_types))
    if query.properties:
        clauses.append(property_filter(query.properties))

    if not clauses:
        limit = query.limit if query.limit is not None else default_limit
        return f"MATCH (n:{NODE_TAG}) RETURN n{_paging(limit, query.offset)}"

    where = " AND ".join(clauses)
    return f"MATCH (n:{NODE_TAG}) WHERE {where} RETURN n{_paging(query.limit, query.offset)}"


def build_nodes_by_type_query(node_type: NodeType | str) -> str:
    return f"MATCH (n:{NODE_TAG}) WHERE {node_type_filter([node_type])} RETURN n"


def build_nodes_by_properties_query(properties: Mapping[str, Any]) -> str:
    return f"MATCH (n:{NODE_TAG}) WHERE {property_filter(properties)} RETURN n"


def build_edges_between_query(
    node_ids: Sequence[str], edge_types: Optional[Iterable[EdgeType]] = None
) -> str:
    """Return edges whose both endpoints belong to ``node_ids``."""

    ids = _id_list(node_ids)
    return (
        f"MATCH (n)-[e{edge_type_filter(edge_types)}]->(m) "
        f"WHERE id(n) IN [{ids}] AND id(m) IN [{ids}] RETURN e"
    )


def build_edges_query(source_id: str, target_id: str, edge_type: Optional[EdgeType] = None) -> str:
    edge_filter = edge_type_filter([edge_type] if edge_type else None)
    return (
        f"MATCH (src)-[e{edge_filter}]->(dst) "
        f"WHERE id(src) == '{source_id}' AND id(dst) == '{target_id}' RETURN e"
    )


def build_related_nodes_query(node_id: str, depth: int) -> Optional[str]:
    """Return the bounded-depth neighbourhood query, ``None`` for ``depth <= 0``.

    Both forms return the neighbour vertex as ``related`` and the traversed
    relationship(s) as ``ref``.
    """

    if depth <= 0:
        return None
    if depth == 1:
        return f'MATCH (related)-[ref]-(start) WHERE id(start) == "{node_id}" RETURN DISTINCT related, ref'
    return (
        f'MATCH (start) WHERE id(start) == "{node_id}" WITH start '
        f"MATCH p = (start)-[*1..{depth}]-(related) WHERE related <> start "
        f"RETURN DISTINCT related, relationships(p) AS ref"
    )


# -- mutations --------------------------------------------------------------


def build_insert_vertex(tag: str, vid: str, names: Sequence[str], values: Sequence[Any]) -> str:
    if not names:
        return f"INSERT VERTEX {tag} VALUES '{vid}'"
    rendered = ", ".join(format_insert_value(item) for item in values)
    return f"INSERT VERTEX {tag} ({', '.join(names)}) VALUES '{vid}':({rendered})"


def build_insert_edge(
    edge_name: str, source_id: str, target_id: str, names: Sequence[str], values: Sequence[Any]
) -> str:
    rendered = ", ".join(format_insert_value(item) for item in values)
    return (
        f"INSERT EDGE {edge_name}({', '.join(names)}) "
        f"VALUES '{source_id}'->'{target_id}':({rendered})"
    )


def build_delete_vertex(vid: str) -> str:
    return f"DELETE VERTEX '{vid}' WITH EDGE"


def build_delete_edge(edge_type: EdgeType | str, source_id: str, target_id: str) -> str:
    return f"DELETE EDGE {_type_name(edge_type)} '{source_id}'->'{target_id}'"


def build_update_vertex(vid: str, properties: Mapping[str, Any], tag: str = NODE_TAG) -> str:
    assignments = ", ".join(f"{key} = {format_insert_value(value)}" for key, value in properties.items())
    return f"UPDATE VERTEX ON {tag} '{vid}' SET {assignments}"


def build_fetch_vertex(vid: str, tag: str = NODE_TAG) -> str:
    return f"FETCH PROP ON {tag} '{vid}' YIELD vertex AS n"


# -- statistics -------------------------------------------------------------


def build_count_nodes() -> str:
    return f"MATCH (n:{NODE_TAG}) RETURN count(n) AS vertexCount"


def build_count_edges() -> str:
    return "MATCH ()-[e]->() RETURN count(e) AS edgeCount"


def build_count_nodes_by_type() -> str:
    return f"MATCH (n:{NODE_TAG}) RETURN n.type AS type, count(n) AS count"


def build_count_edges_by_type() -> str:
    return "MATCH ()-[e]->() RETURN type(e) AS type, count(e) AS count"


__all__ = [
    "DEFAULT_LIMIT",
    "NODE_TAG",
    "build_count_edges",
    "build_count_edges_by_type",
    "build_count_nodes",
    "build_count_nodes_by_type",
    "build_delete_edge",
    "build_delete_vertex",
    "build_edges_between_query",
    "build_edges_query",
    "build_fetch_vertex",
    "build_insert_edge",
    "build_insert_vertex",
    "build_nodes_by_properties_query",
    "build_nodes_by_type_query",
    "build_nodes_query",
    "build_related_nodes_query",
    "build_update_vertex",
    "edge_type_filter",
    "format_insert_value",
    "format_value",
    "node_type_filter",
    "property_filter",
]
