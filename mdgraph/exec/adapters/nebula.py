"""Adapter executing statements against a NebulaGraph cluster."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from nebula3.Config import Config
from nebula3.gclient.net import ConnectionPool
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from ...config import NebulaSettings
from ...graph.query import build_insert_edge, build_insert_vertex
from ...graph.schema import create_space_statement, schema_statements
from ..client import GraphClientError, ResultRows

logger = logging.getLogger(__name__)


@dataclass
class NebulaGraphClient:
    """Own a connection pool and one session bound to the configured space.

    Connection problems are logged and leave the client disconnected; every
    statement executed while disconnected raises :class:`GraphClientError`.
    """

    settings: NebulaSettings = field(default_factory=NebulaSettings.from_env)
    pool_factory: Callable[[], Any] = ConnectionPool
    logger: logging.Logger = field(default_factory=lambda: logger)

    def __post_init__(self) -> None:
        self._pool: Optional[Any] = None
        self._session: Optional[Any] = None
        self._connected = False

    def __enter__(self) -> "NebulaGraphClient":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- lifecycle ---------------------------------------------------------

    def connect(self) -> bool:
        """Open the pool, start a session and switch to the configured space.

        A missing space is created together with the graph schema.
        """

        settings = self.settings
        self.logger.info(
            "Connecting to NebulaGraph %s as %s, space %s",
            settings.addresses,
            settings.username,
            settings.space,
        )
        config = Config()
        config.max_connection_pool_size = settings.max_conn_size
        config.min_connection_pool_size = settings.min_conn_size
        config.timeout = settings.timeout_ms

        try:
            pool = self.pool_factory()
            if not pool.init(list(settings.addresses), config):
                raise GraphClientError("failed to initialise the connection pool")
            self._pool = pool
            self._session = pool.get_session(settings.username, settings.password)
            self._connected = True
            try:
                self._run(f"USE {settings.space}")
            except GraphClientError:
                self.logger.warning("Space %s is not available, creating it", settings.space)
                self._run(create_space_statement(settings.space))
                self._use_space()
                self._create_schema()
        except Exception as exc:
            self.logger.error("Failed to connect to NebulaGraph: %s", exc)
            self.close()
            return False

        self.logger.info("Connected to NebulaGraph")
        return True

    @retry(
        stop=stop_after_attempt(11),
        wait=wait_fixed(1),
        retry=retry_if_exception_type(GraphClientError),
        before_sleep=before_sleep_log(logger, logging.INFO),
        reraise=True,
    )
    def _use_space(self) -> None:
        # Freshly created spaces become usable after the next heartbeat.
        self._run(f"USE {self.settings.space}")

    def _create_schema(self) -> None:
        tag_statement, *edge_statements = schema_statements()
        self._run(tag_statement)
        for statement in edge_statements:
            try:
                self._run(statement)
            except GraphClientError as exc:
                self.logger.warning("Failed to create edge type: %s", exc)

    def close(self) -> None:
        """Release the session and close the pool."""

        if self._session is not None:
            try:
                self._session.release()
            except Exception as exc:  # pragma: no cover - network dependent
                self.logger.warning("Failed to release NebulaGraph session: %s", exc)
        if self._pool is not None:
            try:
                self._pool.close()
            except Exception as exc:  # pragma: no cover - network dependent
                self.logger.warning("Failed to close NebulaGraph pool: %s", exc)
        self._session = None
        self._pool = None
        self._connected = False

    # -- execution ---------------------------------------------------------

    def is_connected(self) -> bool:
        return self._connected and self._session is not None

    def _run(self, statement: str):
        if not self.is_connected():
            raise GraphClientError("no active NebulaGraph session", statement)
        self.logger.debug("Executing statement: %s", statement)
        try:
            result = self._session.execute(statement)
        except Exception as exc:
            raise GraphClientError(str(exc), statement) from exc
        if not result.is_succeeded():
            raise GraphClientError(result.error_msg(), statement)
        return result

    def execute(self, statement: str) -> ResultRows:
        result = self._run(statement)
        if result.is_empty():
            return ResultRows(column_names=list(result.keys()))
        return ResultRows(
            column_names=list(result.keys()),
            rows=[list(row.values) for row in result.rows()],
        )

    def insert_vertex(self, tag: str, vid: str, properties: Mapping[str, Any]) -> bool:
        statement = build_insert_vertex(tag, vid, list(properties), list(properties.values()))
        try:
            self._run(statement)
        except GraphClientError as exc:
            self.logger.error("Failed to insert vertex %s: %s", vid, exc)
            return False
        self.logger.debug("Inserted vertex %s", vid)
        return True

    def insert_edge(self, edge_name: str, source_id: str, target_id: str, properties: Mapping[str, Any]) -> bool:
        statement = build_insert_edge(edge_name, source_id, target_id, list(properties), list(properties.values()))
        try:
            self._run(statement)
        except GraphClientError as exc:
            self.logger.error("Failed to insert edge '%s'->'%s': %s", source_id, target_id, exc)
            return False
        self.logger.debug("Inserted edge '%s'->'%s'", source_id, target_id)
        return True


__all__ = ["NebulaGraphClient"]
