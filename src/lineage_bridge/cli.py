#!/usr/bin/env python3
"""
CLI tool for the lineage bridge.

Usage:
    lineage-bridge replay events.yaml --catalog catalog.yaml --dry-run
    lineage-bridge replay events.yaml --catalog catalog.yaml --config bridge.yaml
    lineage-bridge qualify s3a://lake/sales/orders/part-0.parquet
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from colorama import Fore, Style, init as colorama_init

from .catalog.loader import CatalogLoader
from .catalog.registry import CatalogNotFoundError, InMemoryCatalog
from .config import Config, ConfigError
from .entities.builders import path_to_entity
from .entities.uri import FileSystemDefaults, UriResolutionError, UriResolver
from .events.processor import CatalogEventProcessor, Outcome
from .events.types import (
    CatalogEvent,
    CreateDatabaseEvent,
    CreateDatabasePreEvent,
    CreateTableEvent,
    CreateTablePreEvent,
    DropDatabaseEvent,
    DropTableEvent,
    RenameTableEvent,
    event_from_dict,
)
from .repository import InMemoryRepository, RepositoryError, create_repository


logger = logging.getLogger(__name__)

OUTCOME_COLORS = {
    Outcome.CREATE: Fore.GREEN,
    Outcome.UPDATE: Fore.CYAN,
    Outcome.DELETE: Fore.YELLOW,
    Outcome.DELETE_CASCADE: Fore.YELLOW,
    Outcome.NO_OP: Style.DIM,
    Outcome.IGNORED: Style.DIM,
}


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}"


def print_json(data: Any, indent: int = 2) -> None:
    """Print JSON."""
    print(json.dumps(data, indent=indent, default=str))


def load_events(path: str | Path) -> list[tuple[CatalogEvent, dict[str, Any]]]:
    """
    Load a replay file: a YAML list of events.

    Each item is an event mapping (see `event_from_dict`) and may carry a
    `definition` in catalog-loader format, registered with the catalog
    when its create event is replayed:

    ```yaml
    - event: CreateTablePreEvent
      database: sales
      table: orders
      definition:
        storage: {location: hdfs:///warehouse/sales.db/orders}
    - event: CreateTableEvent
      database: sales
      table: orders
    ```
    """
    with open(path, "r", encoding="utf-8") as f:
        items = yaml.safe_load(f) or []
    if not isinstance(items, list):
        raise ValueError(f"Replay file {path} must hold a list of events")

    events = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Replay item {position} in {path} is not an event mapping: {item!r}")
        extra = {"definition": item.pop("definition", None)}
        events.append((event_from_dict(item), extra))
    return events


def apply_to_catalog(catalog: InMemoryCatalog, event: CatalogEvent, extra: dict[str, Any]) -> None:
    """Make the change an event announces, as the live catalog would have."""
    loader = CatalogLoader()
    definition = extra.get("definition")

    try:
        if definition is not None and isinstance(event, (CreateDatabasePreEvent, CreateDatabaseEvent)):
            catalog.register_database(loader.parse_database(event.database, definition))
        elif definition is not None and isinstance(event, (CreateTablePreEvent, CreateTableEvent)):
            catalog.register_table(loader.parse_table(event.database, event.table, definition))
        elif isinstance(event, DropTableEvent):
            catalog.drop_table(event.database, event.table)
        elif isinstance(event, DropDatabaseEvent):
            catalog.drop_database(event.database)
        elif isinstance(event, RenameTableEvent):
            catalog.rename_table(event.database, event.table, event.new_name)
    except CatalogNotFoundError as e:
        logger.debug(f"Catalog change for {event!r} skipped: {e}")


def cmd_replay(args) -> int:
    """Replay a file of catalog events against a catalog snapshot."""
    config = Config.load(args.config)
    if args.cluster:
        config.cluster.cluster_name = args.cluster
    if args.dry_run:
        config.repository.dry_run = True

    catalog = CatalogLoader().load_file(args.catalog) if args.catalog else InMemoryCatalog()
    repository = create_repository(config.repository)
    processor = CatalogEventProcessor(repository=repository, catalog=catalog, config=config)

    failures = 0
    for event, extra in load_events(args.events):
        apply_to_catalog(catalog, event, extra)

        try:
            outcome = processor.process(event)
        except RepositoryError as e:
            failures += 1
            print(colorize(f"FAILED  {event!r}: {e}", Fore.RED), file=sys.stderr)
            continue

        label = f"{outcome.value:<15}"
        print(f"{colorize(label, OUTCOME_COLORS[outcome])} {event!r}")

    if isinstance(repository, InMemoryRepository):
        print(colorize("\nRepository calls:", Style.BRIGHT))
        for call in repository.calls:
            print(f"  {call.operation:<7} {call.kind.value:<18} {call.qualified_name}")

    print(colorize("\nCorrelation cache:", Style.BRIGHT), processor.cache.stats)
    return 1 if failures else 0


def cmd_qualify(args) -> int:
    """Print the entity graph for a location."""
    config = Config.load(args.config)
    resolver = UriResolver(FileSystemDefaults.from_config(config.filesystem))

    try:
        graph = path_to_entity(args.path, resolver)
    except UriResolutionError as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 1

    print(colorize("\nQualified name:", Style.BRIGHT), graph.qualified_name)
    print(colorize("Entities (creation order):", Style.BRIGHT))
    print_json([entity.to_dict() for entity in graph.flatten()])
    return 0


def main(argv: list[str] | None = None) -> int:
    colorama_init()

    parser = argparse.ArgumentParser(
        description="Mirror table catalog events into a metadata repository",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", help="Bridge configuration file (YAML or JSON)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # replay command
    replay_parser = subparsers.add_parser("replay", help="Replay a file of catalog events")
    replay_parser.add_argument("events", help="YAML list of events")
    replay_parser.add_argument("--catalog", help="Catalog snapshot (YAML or JSON)")
    replay_parser.add_argument("--cluster", help="Override the cluster name")
    replay_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Record repository calls instead of sending them",
    )

    # qualify command
    qualify_parser = subparsers.add_parser("qualify", help="Show the entities of a location")
    qualify_parser.add_argument("path", help="Location URI or path")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "replay":
            return cmd_replay(args)
        elif args.command == "qualify":
            return cmd_qualify(args)
    except (ConfigError, ValueError, FileNotFoundError) as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
