"""Tests for :mod:`mdgraph.config`."""

from __future__ import annotations

import pytest

from mdgraph import config


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    config._load_environment.cache_clear()
    for key in (
        "NEBULA_ADDRESSES",
        "NEBULA_USER",
        "NEBULA_PASSWORD",
        "NEBULA_SPACE",
        "NEBULA_MAX_CONN",
        "NEBULA_MIN_CONN",
        "NEBULA_TIMEOUT",
        "MDGRAPH_DEFAULT_LIMIT",
    ):
        monkeypatch.setenv(key, "")
    yield
    config._load_environment.cache_clear()


def test_get_env_prefers_process_environment(monkeypatch):
    """Explicit environment variables should win over the file contents."""

    monkeypatch.setenv("NEBULA_SPACE", "in-memory")
    assert config.get_env("NEBULA_SPACE") == "in-memory"


def test_get_env_returns_default_when_missing(monkeypatch):
    monkeypatch.delenv("MDGRAPH_DOES_NOT_EXIST", raising=False)
    assert config.get_env("MDGRAPH_DOES_NOT_EXIST", default="fallback") == "fallback"


def test_settings_defaults_when_variables_are_blank():
    settings = config.NebulaSettings.from_env()
    assert settings.addresses == [("127.0.0.1", 9669)]
    assert settings.username == "root"
    assert settings.space == "context"
    assert settings.default_limit == 100


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("NEBULA_ADDRESSES", "graphd1:9669, graphd2")
    monkeypatch.setenv("NEBULA_SPACE", "metadata")
    monkeypatch.setenv("NEBULA_MAX_CONN", "20")
    monkeypatch.setenv("MDGRAPH_DEFAULT_LIMIT", "25")

    settings = config.NebulaSettings.from_env()

    assert settings.addresses == [("graphd1", 9669), ("graphd2", 9669)]
    assert settings.space == "metadata"
    assert settings.max_conn_size == 20
    assert settings.default_limit == 25


def test_invalid_integer_is_reported(monkeypatch):
    monkeypatch.setenv("NEBULA_TIMEOUT", "soon")
    with pytest.raises(ValueError, match="NEBULA_TIMEOUT"):
        config.NebulaSettings.from_env()
