"""Adapters bridging mdgraph with graph execution engines."""

from .local import LocalGraphClient
from .nebula import NebulaGraphClient

__all__ = [
    "LocalGraphClient",
    "NebulaGraphClient",
]
