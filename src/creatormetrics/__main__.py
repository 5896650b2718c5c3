"""CLI entry-point: ``python -m creatormetrics summary|detailed|top|song``."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from pydantic import BaseModel, TypeAdapter

from creatormetrics import config
from creatormetrics.aggregator import MetricsAggregator
from creatormetrics.clients import CommerceClient, IdentityClient, RatingClient
from creatormetrics.errors import MetricsError
from creatormetrics.models import SongMetrics
from creatormetrics.store import CatalogStore

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _build_aggregator(seed: int | None = None) -> MetricsAggregator:
    return MetricsAggregator(
        store=CatalogStore(db_path=config.CATALOG_DB),
        identity=IdentityClient(config.USER_SERVICE_URL, timeout=config.HTTP_TIMEOUT),
        ratings=RatingClient(config.RATING_SERVICE_URL, timeout=config.HTTP_TIMEOUT),
        commerce=CommerceClient(config.COMMERCE_SERVICE_URL, timeout=config.HTTP_TIMEOUT),
        seed=config.DISTRIBUTION_SEED if seed is None else seed,
    )


def _print(report: BaseModel | list[SongMetrics]) -> None:
    if isinstance(report, BaseModel):
        sys.stdout.write(report.model_dump_json(indent=2))
    else:
        sys.stdout.write(TypeAdapter(list[SongMetrics]).dump_json(report, indent=2).decode())
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="creatormetrics",
        description="Creator performance reports from catalog, ratings and orders.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── summary ────────────────────────────────────────────────────────
    summary_parser = sub.add_parser("summary", help="Totals and growth for a creator.")
    summary_parser.add_argument("--creator", type=int, required=True, help="Creator id.")

    # ── detailed ───────────────────────────────────────────────────────
    detailed_parser = sub.add_parser("detailed", help="Daily series for a date range.")
    detailed_parser.add_argument("--creator", type=int, required=True, help="Creator id.")
    detailed_parser.add_argument("--start", type=date.fromisoformat, required=True, help="YYYY-MM-DD")
    detailed_parser.add_argument("--end", type=date.fromisoformat, required=True, help="YYYY-MM-DD")
    detailed_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help=f"Seed for the synthetic series (default: {config.DISTRIBUTION_SEED}).",
    )

    # ── top ────────────────────────────────────────────────────────────
    top_parser = sub.add_parser("top", help="A creator's most played songs.")
    top_parser.add_argument("--creator", type=int, required=True, help="Creator id.")
    top_parser.add_argument("--limit", type=int, default=10, help="How many songs (default: 10).")

    # ── song ───────────────────────────────────────────────────────────
    song_parser = sub.add_parser("song", help="Metrics for a single song.")
    song_parser.add_argument("--id", type=int, required=True, help="Song id.")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    _setup_logging()
    aggregator = _build_aggregator(getattr(args, "seed", None))

    try:
        if args.command == "summary":
            _print(aggregator.get_metrics_summary(args.creator))
        elif args.command == "detailed":
            _print(aggregator.get_metrics_detailed(args.creator, args.start, args.end))
        elif args.command == "top":
            _print(aggregator.get_top_items(args.creator, args.limit))
        elif args.command == "song":
            _print(aggregator.get_item_metrics(args.id))
    except MetricsError as exc:
        logger.error("%s failed: %s", args.command, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
