"""Tests for :mod:`mdgraph.exec.adapters.nebula` against a fake pool."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import pytest

from mdgraph.config import NebulaSettings
from mdgraph.exec.adapters.nebula import NebulaGraphClient
from mdgraph.exec.client import GraphClientError


@dataclass
class FakeRow:
    values: list


@dataclass
class FakeResult:
    error: str = ""
    columns: List[str] = field(default_factory=list)
    data: List[list] = field(default_factory=list)

    def is_succeeded(self):
        return not self.error

    def error_msg(self):
        return self.error

    def keys(self):
        return self.columns

    def rows(self):
        return [FakeRow(values=row) for row in self.data]

    def is_empty(self):
        return not self.data


@dataclass
class FakeSession:
    failures: dict = field(default_factory=dict)
    answers: dict = field(default_factory=dict)
    executed: List[str] = field(default_factory=list)
    released: bool = False

    def execute(self, statement):
        self.executed.append(statement)
        remaining = self.failures.get(statement, 0)
        if remaining:
            self.failures[statement] = remaining - 1
            return FakeResult(error="SpaceNotFound")
        return self.answers.get(statement, FakeResult())

    def release(self):
        self.released = True


@dataclass
class FakePool:
    session: FakeSession
    accept: bool = True
    closed: bool = False
    init_args: tuple = ()

    def init(self, addresses, config):
        self.init_args = (addresses, config)
        return self.accept

    def get_session(self, username, password):
        return self.session

    def close(self):
        self.closed = True


SETTINGS = NebulaSettings(addresses=[("graphd", 9669)], space="meta", max_conn_size=4, timeout_ms=500)


def make_client(session, accept=True):
    pool = FakePool(session=session, accept=accept)
    return NebulaGraphClient(settings=SETTINGS, pool_factory=lambda: pool), pool


def test_connect_uses_existing_space():
    session = FakeSession()
    client, pool = make_client(session)

    assert client.connect() is True
    assert client.is_connected()
    assert session.executed == ["USE meta"]
    addresses, config = pool.init_args
    assert addresses == [("graphd", 9669)]
    assert config.max_connection_pool_size == 4
    assert config.timeout == 500


def test_connect_creates_missing_space_and_schema():
    session = FakeSession(failures={"USE meta": 1})
    client, _ = make_client(session)

    assert client.connect() is True
    assert session.executed[0] == "USE meta"
    assert session.executed[1].startswith("CREATE SPACE IF NOT EXISTS meta")
    assert session.executed[2] == "USE meta"
    assert session.executed[3].startswith("CREATE TAG IF NOT EXISTS MDObject")
    assert sum(statement.startswith("CREATE EDGE") for statement in session.executed) == 5


def test_failed_pool_init_leaves_client_disconnected():
    session = FakeSession()
    client, pool = make_client(session, accept=False)

    assert client.connect() is False
    assert client.is_connected() is False
    with pytest.raises(GraphClientError):
        client.execute("MATCH (n) RETURN n")


def test_execute_returns_rows_and_raises_on_errors():
    session = FakeSession(answers={"RETURN 1 AS x": FakeResult(columns=["x"], data=[[1]])})
    client, _ = make_client(session)
    client.connect()

    rows = client.execute("RETURN 1 AS x")
    assert rows.column_names == ["x"]
    assert list(rows) == [{"x": 1}]

    session.failures["BROKEN"] = 1
    with pytest.raises(GraphClientError, match="SpaceNotFound"):
        client.execute("BROKEN")


def test_inserts_report_failures_as_false():
    session = FakeSession()
    client, _ = make_client(session)
    client.connect()

    assert client.insert_edge("CONTAINS", "a", "b", {}) is True
    session.failures["INSERT VERTEX MDObject (name) VALUES 'v1':('x')"] = 1
    assert client.insert_vertex("MDObject", "v1", {"name": "x"}) is False


def test_context_manager_releases_resources():
    session = FakeSession()
    client, pool = make_client(session)

    with client as connected:
        assert connected.is_connected()

    assert session.released is True
    assert pool.closed is True
    assert client.is_connected() is False
