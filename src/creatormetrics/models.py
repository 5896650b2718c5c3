"""Domain models used across the aggregation engine."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

SONG = "SONG"
ALBUM = "ALBUM"
DELIVERED = "DELIVERED"
ACCEPTED = "ACCEPTED"


# ── Catalog ────────────────────────────────────────────────────────────────
class CatalogItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: int
    creator_id: int
    title: str
    plays: int = Field(default=0, ge=0)
    published: bool = True
    cover_image_url: str = ""
    kind: str = SONG  # SONG or ALBUM


class Collaboration(BaseModel):
    collaboration_id: int
    item_id: int
    creator_id: int
    status: str = "PENDING"


class UserProfile(BaseModel):
    user_id: int
    username: str
    artist_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.artist_name or self.username


# ── Commerce ───────────────────────────────────────────────────────────────
class OrderItem(BaseModel):
    item_type: str = ""
    item_id: int | None = None
    quantity: int | None = None
    price: Decimal | None = None


class Order(BaseModel):
    order_id: int
    status: str | None = None
    created_at: datetime | None = None
    items: list[OrderItem] = Field(default_factory=list)


# ── Ratings ────────────────────────────────────────────────────────────────
class RatingStats(BaseModel):
    average_rating: float | None = None
    total_ratings: int | None = None

    @property
    def average(self) -> float:
        return self.average_rating or 0.0

    @property
    def count(self) -> int:
        return self.total_ratings or 0


# ── Aggregates ─────────────────────────────────────────────────────────────
class SalesStats(BaseModel):
    """Result of folding orders against a set of catalog identifiers."""

    model_config = ConfigDict(frozen=True)

    total_units: int = 0
    total_revenue: Decimal = Decimal("0")
    units_last_30_days: int = 0
    revenue_last_30_days: Decimal = Decimal("0")
    # diagnostics
    orders_seen: int = 0
    orders_skipped: int = 0
    items_matched: int = 0


class MetricsSummary(BaseModel):
    creator_id: int
    creator_name: str
    generated_at: datetime

    total_plays: int = 0
    plays_last_30_days: int = 0
    plays_growth_percentage: float = 0.0

    average_rating: float = 0.0
    total_ratings: int = 0
    ratings_growth_percentage: float = 0.0

    total_sales: int = 0
    sales_last_30_days: int = 0
    sales_growth_percentage: float = 0.0

    total_revenue: Decimal = Decimal("0")
    revenue_last_30_days: Decimal = Decimal("0")
    revenue_growth_percentage: float = 0.0

    total_comments: int = 0
    comments_last_30_days: int = 0
    comments_growth_percentage: float = 0.0

    total_songs: int = 0
    total_albums: int = 0
    total_collaborations: int = 0

    most_played_song_id: int | None = None
    most_played_song_name: str = "N/A"
    most_played_song_plays: int = 0


class DailyMetric(BaseModel):
    date: date
    plays: int = 0
    sales: int = 0
    revenue: Decimal = Decimal("0.00")
    comments: int = 0
    average_rating: float = 0.0


class MetricsDetailed(BaseModel):
    creator_id: int
    creator_name: str
    start_date: date
    end_date: date
    daily_metrics: list[DailyMetric] = Field(default_factory=list)
    total_plays: int = 0
    total_sales: int = 0
    total_revenue: Decimal = Decimal("0")
    total_comments: int = 0
    average_rating: float = 0.0


class SongMetrics(BaseModel):
    song_id: int
    song_name: str
    artist_name: str
    total_plays: int = 0
    average_rating: float = 0.0
    total_ratings: int = 0
    total_comments: int = 0
    total_sales: int = 0
    total_revenue: Decimal = Decimal("0")
    rank_in_catalog: int = 0
