"""Bulk export of a metadata configuration into the graph store."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..graph.ids import node_id
from ..graph.model import ExportResult
from ..graph.repository import GraphRepository
from .model import Configuration
from .walker import MetadataWalker

LOGGER = logging.getLogger(__name__)


@dataclass
class MetadataExporter:
    """Persist every node, then every edge, produced by a walk."""

    repository: GraphRepository
    logger: logging.Logger = field(default_factory=lambda: LOGGER)

    def export_metadata(self, configuration: Configuration) -> ExportResult:
        nodes_count = 0
        edges_count = 0
        warnings = []
        try:
            walker = MetadataWalker(configuration, logger=self.logger)
            for node in walker.nodes():
                if self.repository.save_node(node):
                    nodes_count += 1
                else:
                    warnings.append(f"Node {node.uid} ({node.type.value}) was not saved")
            for edge in walker.edges():
                if self.repository.save_edge(edge):
                    edges_count += 1
                else:
                    warnings.append(
                        f"Edge {edge.type.value} {edge.source_id} -> {edge.target_id} was not saved"
                    )
        except Exception as exc:
            self.logger.exception("Export of configuration %s failed", configuration.name)
            return ExportResult(
                success=False,
                nodes_count=nodes_count,
                edges_count=edges_count,
                errors=[str(exc)],
                warnings=warnings,
            )

        self.logger.info(
            "Exported configuration %s: %s nodes, %s edges", configuration.name, nodes_count, edges_count
        )
        return ExportResult(
            success=True,
            configuration_id=node_id(configuration.uuid),
            nodes_count=nodes_count,
            edges_count=edges_count,
            warnings=warnings,
        )


__all__ = ["MetadataExporter"]
