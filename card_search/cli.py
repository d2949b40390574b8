"""CLI interface for the card search client."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from card_search.client import CardSearchParams, HearthstoneClient
from card_search.config import AppConfig, load_config
from card_search.enrich import enrich_cards
from card_search.errors import CardSearchError
from card_search.models import EnrichedCard
from card_search.pipeline import SearchPipeline

console = Console()


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        config = _load_app_config(args)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        sys.exit(2)

    try:
        args.func(args, config)
    except CardSearchError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        sys.exit(1)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        sys.exit(2)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="card-search",
        description="Search Hearthstone cards and show a random sample",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug)",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to config.yaml (default: config.yaml)",
    )
    parser.add_argument("--client-id", type=str, default=None, help="API client ID")
    parser.add_argument("--client-secret", type=str, default=None, help="API client secret")

    subparsers = parser.add_subparsers(title="commands", dest="command")

    # sample
    sample_parser = subparsers.add_parser("sample", help="Run the configured searches and sample cards")
    sample_parser.add_argument("--size", type=int, default=None, help="Number of cards to show")
    sample_parser.add_argument("--seed", type=int, default=None, help="Seed for a repeatable sample")
    sample_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    sample_parser.set_defaults(func=_cmd_sample)

    # metadata
    metadata_parser = subparsers.add_parser("metadata", help="Show metadata collection sizes")
    metadata_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    metadata_parser.set_defaults(func=_cmd_metadata)

    # search
    search_parser = subparsers.add_parser("search", help="Run a single card search")
    search_parser.add_argument("--class", dest="card_class", type=str, default=None)
    search_parser.add_argument("--rarity", type=str, default=None)
    search_parser.add_argument(
        "--mana-cost",
        type=str,
        default=None,
        help="Comma-separated mana costs (e.g., 7,8,9)",
    )
    search_parser.add_argument("--set", dest="card_set", type=str, default=None)
    search_parser.add_argument("--locale", type=str, default=None)
    search_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    search_parser.set_defaults(func=_cmd_search)

    return parser


def _load_app_config(args: argparse.Namespace) -> AppConfig:
    """Load config, applying CLI overrides."""
    return load_config(
        args.config,
        client_id=args.client_id,
        client_secret=args.client_secret,
    )


def _make_client(config: AppConfig) -> HearthstoneClient:
    api = config.api
    return HearthstoneClient(
        api.client_id,
        api.client_secret,
        region=api.region,
        locale=api.locale,
        max_retries=api.max_retries,
        retry_backoff=api.retry_backoff,
        timeout=api.timeout,
        debug=api.debug,
    )


def _print_cards(cards: Sequence[EnrichedCard], title: str, as_json: bool) -> None:
    if as_json:
        console.print_json(json.dumps([c.as_dict() for c in cards]))
        return

    table = Table(title=title)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Rarity", style="magenta")
    table.add_column("Set")
    table.add_column("Class", style="green")
    for card in cards:
        table.add_row(card.id, card.name, card.type, card.rarity, card.set, card.card_class)
    console.print(table)


# ------------------------------------------------------------------
# Command handlers
# ------------------------------------------------------------------


def _cmd_sample(args: argparse.Namespace, config: AppConfig) -> None:
    size = args.size if args.size is not None else config.sample.size
    seed = args.seed if args.seed is not None else config.sample.seed
    if size < 0:
        raise ValueError(f"Sample size must be >= 0, got {size}")

    async def run():
        async with _make_client(config) as client:
            return await SearchPipeline(client, config.searches, size, seed=seed).run()

    result = asyncio.run(run())
    _print_cards(
        result.sample,
        f"{len(result.sample)} of {len(result.enriched)} cards",
        args.json,
    )


def _cmd_metadata(args: argparse.Namespace, config: AppConfig) -> None:
    async def run():
        async with _make_client(config) as client:
            return await client.get_metadata()

    summary = asyncio.run(run()).summary()
    if args.json:
        console.print_json(json.dumps(summary))
        return

    table = Table(title=f"Metadata ({config.api.locale})")
    table.add_column("Collection", style="cyan")
    table.add_column("Entries", justify="right", style="green")
    for name, count in summary.items():
        table.add_row(name, str(count))
    console.print(table)


def _cmd_search(args: argparse.Namespace, config: AppConfig) -> None:
    mana_cost = ()
    if args.mana_cost:
        mana_cost = tuple(int(m) for m in args.mana_cost.split(",") if m.strip())
    params = CardSearchParams(
        locale=args.locale or config.api.locale,
        card_class=args.card_class,
        rarity=args.rarity,
        mana_cost=mana_cost,
        set=args.card_set,
    )

    async def run():
        async with _make_client(config) as client:
            result = await client.search_cards(params)
            metadata = await client.get_metadata()
            return result, enrich_cards(result.cards, metadata)

    result, enriched = asyncio.run(run())
    title = f"{result.card_count} matching cards (page {result.page}/{result.page_count})"
    _print_cards(enriched, title, args.json)
