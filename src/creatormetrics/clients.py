"""Thin read-only clients for the identity, ratings and commerce services."""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Any, TypeVar

import requests
from pydantic import ValidationError

from creatormetrics.errors import UpstreamUnavailable
from creatormetrics.models import Order, OrderItem, RatingStats, UserProfile

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Raised while mapping a payload whose shape or values are not what we expect.
_MALFORMED = (KeyError, TypeError, AttributeError, ValueError, InvalidOperation, ValidationError)


class _ServiceClient:
    """Shared ``GET`` plumbing: one session, one timeout, no retries."""

    service = "service"

    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        if not base_url:
            raise ValueError(f"{self.service} base URL is required but was empty.")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def _get(self, path: str) -> Any:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise UpstreamUnavailable(self.service, f"GET {path} failed: {exc}") from exc
        if resp.status_code != 200:
            raise UpstreamUnavailable(
                self.service, f"GET {path} returned {resp.status_code}: {resp.text[:500]}"
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamUnavailable(self.service, f"GET {path} returned invalid JSON") from exc

    def _get_mapped(self, path: str, build: Callable[[Any], T]) -> T:
        raw = self._get(path)
        try:
            return build(raw)
        except _MALFORMED as exc:
            raise UpstreamUnavailable(self.service, f"GET {path} returned a malformed payload: {exc}") from exc


class IdentityClient(_ServiceClient):
    service = "identity"

    def get_user(self, user_id: int) -> UserProfile:
        return self._get_mapped(f"/api/users/{user_id}", lambda raw: _user(raw, user_id))


class RatingClient(_ServiceClient):
    service = "ratings"

    def get_entity_rating_stats(self, entity_type: str, entity_id: int) -> RatingStats:
        return self._get_mapped(f"/api/ratings/entity/{entity_type}/{entity_id}/stats", _rating_stats)

    def get_creator_rating_stats(self, creator_id: int) -> RatingStats:
        return self._get_mapped(f"/api/ratings/artist/{creator_id}/stats", _rating_stats)


class CommerceClient(_ServiceClient):
    service = "commerce"

    def get_all_orders(self) -> list[Order]:
        """Every order the commerce service knows about; filtering is ours."""
        orders = self._get_mapped("/api/orders", _orders)
        logger.info("Fetched %d orders from commerce", len(orders))
        return orders


# ── payload mapping ────────────────────────────────────────────────────────
def _rating_stats(raw: dict[str, Any] | None) -> RatingStats:
    raw = raw or {}
    return RatingStats(
        average_rating=raw.get("averageRating"),
        total_ratings=raw.get("totalRatings"),
    )


def _orders(raw: list[dict[str, Any]] | None) -> list[Order]:
    return [_order(o) for o in raw or []]


def _order(raw: dict[str, Any]) -> Order:
    return Order(
        order_id=raw["id"],
        status=raw.get("status"),
        created_at=raw.get("createdAt"),
        items=[_order_item(i) for i in raw.get("items") or []],
    )


def _order_item(raw: dict[str, Any]) -> OrderItem:
    price = raw.get("price")
    return OrderItem(
        item_type=raw.get("itemType") or "",
        item_id=raw.get("itemId"),
        quantity=raw.get("quantity"),
        # str() keeps JSON floats like 9.99 exact
        price=Decimal(str(price)) if price is not None else None,
    )
