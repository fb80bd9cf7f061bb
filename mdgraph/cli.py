"""Command line entry point: ``mdgraph <command>``."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from mdgraph.api import MetadataGraphApp
from mdgraph.config import NebulaSettings, get_env
from mdgraph.exec.adapters.local import LocalGraphClient
from mdgraph.exec.adapters.nebula import NebulaGraphClient
from mdgraph.metadata.loader import MetadataLoadError, load_configuration_file
from mdgraph.metadata.walker import MetadataWalker
from mdgraph.persist.export import GraphExporter

LOGGER = logging.getLogger("mdgraph")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdgraph", description="Metadata graph export and queries")
    parser.add_argument("--log-level", default=None, help="Logging level (default: MDGRAPH_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    export_parser = subparsers.add_parser("export", help="Export a configuration dump into the graph")
    export_parser.add_argument("config", help="Path to the configuration JSON dump")
    export_parser.add_argument("--dry-run", action="store_true", help="Record statements without a graph service")
    export_parser.add_argument("--graphml", metavar="PATH", help="Also write the walked graph as GraphML")

    nodes_parser = subparsers.add_parser("nodes", help="List nodes")
    nodes_parser.add_argument("--type", dest="node_type", help="Only nodes of this type")

    related_parser = subparsers.add_parser("related", help="Show nodes related to a node")
    related_parser.add_argument("node_id", help="Vertex id of the anchor node")
    related_parser.add_argument("--depth", type=int, default=1, help="Maximum number of hops")

    subparsers.add_parser("stats", help="Show graph statistics")
    return parser


def _configure_logging(level: Optional[str]) -> None:
    level = (level or get_env("MDGRAPH_LOG_LEVEL", "INFO") or "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _print(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _export(app: MetadataGraphApp, args: argparse.Namespace) -> int:
    configuration = load_configuration_file(args.config)
    if args.graphml:
        walker = MetadataWalker(configuration)
        exporter = GraphExporter.from_entities(walker.nodes(), walker.edges())
        Path(args.graphml).write_text(exporter.export(format="graphml"), encoding="utf-8")
        LOGGER.info("Wrote GraphML to %s", args.graphml)
    result = app.exporter.export_metadata(configuration)
    _print(result.to_payload())
    return 0 if result.success else 1


def _run(app: MetadataGraphApp, args: argparse.Namespace) -> int:
    if args.command == "export":
        return _export(app, args)
    if args.command == "nodes":
        params = {"type": args.node_type} if args.node_type else {}
        _print(app.handle({"action": "nodes", "params": params})["result"])
    elif args.command == "related":
        params = {"nodeId": args.node_id, "depth": args.depth}
        _print(app.handle({"action": "related", "params": params})["result"])
    elif args.command == "stats":
        _print(app.handle({"action": "stats", "params": {}})["result"])
    return 0


def _guarded(app: MetadataGraphApp, args: argparse.Namespace) -> int:
    try:
        return _run(app, args)
    except MetadataLoadError as exc:
        LOGGER.error("%s", exc)
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 2
    _configure_logging(args.log_level)

    if getattr(args, "dry_run", False):
        client = LocalGraphClient()
        code = _guarded(MetadataGraphApp.with_client(client), args)
        LOGGER.info("Dry run recorded %s statements", len(client.statements))
        return code

    settings = NebulaSettings.from_env()
    with NebulaGraphClient(settings=settings) as client:
        if not client.is_connected():
            LOGGER.error("NebulaGraph is not reachable at %s", settings.addresses)
            return 1
        return _guarded(MetadataGraphApp.with_client(client, settings), args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
