"""Execution primitive used by the graph repository."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Protocol, Sequence


class GraphClientError(RuntimeError):
    """Raised when the graph service rejects or fails to run a statement."""

    def __init__(self, message: str, statement: str | None = None) -> None:
        super().__init__(message)
        self.statement = statement


@dataclass
class ResultRows:
    """Raw result of one statement: column names plus rows of wire values."""

    column_names: List[str] = field(default_factory=list)
    rows: List[Sequence[Any]] = field(default_factory=list)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        for row in self.rows:
            yield dict(zip(self.column_names, row))

    def __len__(self) -> int:
        return len(self.rows)

    def is_empty(self) -> bool:
        return not self.rows


class GraphClient(Protocol):
    """Protocol implemented by execution adapters."""

    def is_connected(self) -> bool:
        """Return ``True`` when statements can be executed."""

    def execute(self, statement: str) -> ResultRows:
        """Run ``statement``; raise :class:`GraphClientError` on failure."""

    def insert_vertex(self, tag: str, vid: str, properties: Mapping[str, Any]) -> bool:
        """Upsert one vertex."""

    def insert_edge(self, edge_name: str, source_id: str, target_id: str, properties: Mapping[str, Any]) -> bool:
        """Upsert one edge keyed by ``(source_id, target_id, edge_name)``."""


__all__ = ["GraphClient", "GraphClientError", "ResultRows"]
