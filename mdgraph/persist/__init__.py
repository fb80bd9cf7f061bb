"""Offline export utilities for mdgraph."""

from .export import GraphExporter

__all__ = ["GraphExporter"]
