"""In-process adapter that records statements instead of sending them."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional

from ...graph.query import build_insert_edge, build_insert_vertex
from ..client import GraphClientError, ResultRows

LOGGER = logging.getLogger(__name__)

Responder = Callable[[str], Optional[ResultRows]]


@dataclass
class LocalGraphClient:
    """Adapter answering statements from registered responders.

    Every statement is appended to :attr:`statements`. Responders are tried in
    registration order; the first one returning a :class:`ResultRows` wins and
    a statement nobody answers yields an empty result. A responder may raise
    :class:`GraphClientError` to simulate a failing store.
    """

    responders: List[Responder] = field(default_factory=list)
    statements: List[str] = field(default_factory=list)
    connected: bool = True
    logger: logging.Logger = field(default_factory=lambda: LOGGER)

    def register(self, responder: Responder) -> None:
        """Register a callable consulted for every executed statement."""

        self.responders.append(responder)

    def respond(self, fragment: str, rows: ResultRows) -> None:
        """Answer statements containing ``fragment`` with ``rows``."""

        self.register(lambda statement: rows if fragment in statement else None)

    def fail_on(self, fragment: str, message: str = "statement rejected") -> None:
        """Raise :class:`GraphClientError` for statements containing ``fragment``."""

        def _fail(statement: str) -> Optional[ResultRows]:
            if fragment in statement:
                raise GraphClientError(message, statement)
            return None

        self.register(_fail)

    def is_connected(self) -> bool:
        return self.connected

    def execute(self, statement: str) -> ResultRows:
        self.statements.append(statement)
        self.logger.debug("Executing statement: %s", statement)
        if not self.connected:
            raise GraphClientError("no active session", statement)
        for responder in self.responders:
            result = responder(statement)
            if result is not None:
                return result
        return ResultRows()

    def insert_vertex(self, tag: str, vid: str, properties: Mapping[str, Any]) -> bool:
        statement = build_insert_vertex(tag, vid, list(properties), list(properties.values()))
        try:
            self.execute(statement)
        except GraphClientError as exc:
            self.logger.error("Failed to insert vertex %s: %s", vid, exc)
            return False
        return True

    def insert_edge(self, edge_name: str, source_id: str, target_id: str, properties: Mapping[str, Any]) -> bool:
        statement = build_insert_edge(edge_name, source_id, target_id, list(properties), list(properties.values()))
        try:
            self.execute(statement)
        except GraphClientError as exc:
            self.logger.error("Failed to insert edge %s -> %s: %s", source_id, target_id, exc)
            return False
        return True


__all__ = ["LocalGraphClient", "Responder"]
