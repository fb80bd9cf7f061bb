"""Execution layer running graph statements."""

from .client import GraphClient, GraphClientError, ResultRows

__all__ = ["GraphClient", "GraphClientError", "ResultRows"]
