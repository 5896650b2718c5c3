"""Play-count ranking within a creator's catalog."""

from __future__ import annotations

import logging

from creatormetrics.errors import NotFound
from creatormetrics.models import CatalogItem

logger = logging.getLogger(__name__)


def sort_by_plays(items: list[CatalogItem]) -> list[CatalogItem]:
    """Sort items descending by plays; equal plays keep catalog order."""
    return sorted(items, key=lambda i: i.plays, reverse=True)


def catalog_ranks(items: list[CatalogItem]) -> dict[int, int]:
    """Map every item id to its 1-based position in the play-sorted catalog."""
    return {item.item_id: position for position, item in enumerate(sort_by_plays(items), start=1)}


def rank_in_catalog(item_id: int, items: list[CatalogItem]) -> int:
    """Return the 1-based position of *item_id* in the play-sorted catalog."""
    ranks = catalog_ranks(items)
    if item_id not in ranks:
        raise NotFound(f"Item {item_id} is not in the catalog being ranked")
    return ranks[item_id]


def top_items(items: list[CatalogItem], limit: int) -> list[CatalogItem]:
    """The *limit* most played items, best first."""
    if limit <= 0:
        return []
    ranked = sort_by_plays(items)[:limit]
    logger.debug("Top %d of %d items selected", len(ranked), len(items))
    return ranked
