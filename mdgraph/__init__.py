"""mdgraph package initialization.

Exports configuration metadata into a NebulaGraph property graph and answers
traversal queries against it. :class:`MetadataGraphApp` is the primary entry
point used by external callers.
"""

from .api import MetadataGraphApp, handle_request

__all__ = ["MetadataGraphApp", "handle_request"]
