"""Schema statements for the metadata graph space."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .ids import VID_LENGTH
from .mapper import NODE_PROPERTIES, edge_properties
from .model import EdgeType
from .query import NODE_TAG


@dataclass(frozen=True)
class SpaceOptions:
    partition_num: int = 10
    replica_factor: int = 1


def create_space_statement(space: str, options: SpaceOptions = SpaceOptions()) -> str:
    return (
        f"CREATE SPACE IF NOT EXISTS {space} ("
        f"partition_num = {options.partition_num}, "
        f"replica_factor = {options.replica_factor}, "
        f"vid_type = FIXED_STRING({VID_LENGTH}))"
    )


def create_tag_statement() -> str:
    columns = ",".join(f"{name} string" for name in NODE_PROPERTIES)
    return f"CREATE TAG IF NOT EXISTS {NODE_TAG} ({columns})"


def create_edge_statement(edge_type: EdgeType) -> str:
    columns = ", ".join(f"{name} string" for name in edge_properties(edge_type))
    return f"CREATE EDGE IF NOT EXISTS {edge_type.value} ({columns})"


def schema_statements() -> List[str]:
    """Return the tag and edge-type statements, tag first."""

    return [create_tag_statement(), *(create_edge_statement(item) for item in EdgeType)]


__all__ = [
    "SpaceOptions",
    "create_edge_statement",
    "create_space_statement",
    "create_tag_statement",
    "schema_statements",
]
