"""Order matching and sales folding.

An order counts only when it was delivered; a line item counts only when it
is a song belonging to the identifier set being aggregated. Everything is a
pure fold over the orders: the inputs are never touched and each step
returns a fresh :class:`SalesStats`.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from functools import reduce

from creatormetrics.models import DELIVERED, SONG, Order, OrderItem, SalesStats

WINDOW_DAYS = 30


def is_order_eligible(order: Order) -> bool:
    """Only ``DELIVERED`` orders (exact match) carry sales."""
    return order.status == DELIVERED


def match_line_item(item: OrderItem, item_ids: set[int] | frozenset[int]) -> bool:
    """True when *item* is a song line whose identifier is in *item_ids*."""
    return item.item_type.upper() == SONG and item.item_id in item_ids


def line_units(item: OrderItem) -> int:
    return item.quantity if item.quantity is not None else 1


def line_revenue(item: OrderItem) -> Decimal:
    price = item.price if item.price is not None else Decimal("0")
    return price * line_units(item)


def _in_window(order: Order, cutoff: datetime | None) -> bool:
    if cutoff is None or order.created_at is None:
        return False
    created = order.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=UTC)
    return created > cutoff


def _fold_order(
    stats: SalesStats,
    order: Order,
    item_ids: frozenset[int],
    cutoff: datetime | None,
) -> SalesStats:
    if not is_order_eligible(order):
        return stats.model_copy(update={"orders_skipped": stats.orders_skipped + 1})

    matched = [item for item in order.items if match_line_item(item, item_ids)]
    units = sum(line_units(item) for item in matched)
    revenue = sum((line_revenue(item) for item in matched), Decimal("0"))

    update: dict[str, object] = {
        "orders_seen": stats.orders_seen + 1,
        "items_matched": stats.items_matched + len(matched),
        "total_units": stats.total_units + units,
        "total_revenue": stats.total_revenue + revenue,
    }
    if matched and _in_window(order, cutoff):
        update["units_last_30_days"] = stats.units_last_30_days + units
        update["revenue_last_30_days"] = stats.revenue_last_30_days + revenue
    return stats.model_copy(update=update)


def aggregate_sales(
    item_ids: Iterable[int],
    orders: Iterable[Order],
    now: datetime | None = None,
) -> SalesStats:
    """Fold *orders* into totals and trailing-30-day figures for *item_ids*.

    The window holds orders created strictly after ``now - 30 days``; orders
    without a creation timestamp only count toward the totals.
    """
    ids = frozenset(item_ids)
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    cutoff = now - timedelta(days=WINDOW_DAYS)
    return reduce(lambda acc, order: _fold_order(acc, order, ids, cutoff), orders, SalesStats())


def aggregate_item_sales(item_id: int, orders: Iterable[Order]) -> SalesStats:
    """Single-item variant of :func:`aggregate_sales` with no rolling window."""
    ids = frozenset({item_id})
    return reduce(lambda acc, order: _fold_order(acc, order, ids, None), orders, SalesStats())
