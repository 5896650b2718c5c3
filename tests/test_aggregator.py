"""Tests for report orchestration with in-memory collaborators."""

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

from creatormetrics.aggregator import MetricsAggregator
from creatormetrics.errors import InvalidRange, NotFound, UpstreamUnavailable
from creatormetrics.models import (
    CatalogItem,
    Collaboration,
    Order,
    OrderItem,
    RatingStats,
    UserProfile,
)
from creatormetrics.store import CatalogStore

CREATOR = 1


class FakeIdentity:
    def __init__(self) -> None:
        self.calls: list[int] = []

    def get_user(self, user_id: int) -> UserProfile:
        self.calls.append(user_id)
        return UserProfile(user_id=user_id, username="seven", artist_name=None)


class FakeRatings:
    def __init__(self, per_song: dict[int, RatingStats], creator: RatingStats) -> None:
        self._per_song = per_song
        self._creator = creator
        self.calls: list[tuple[str, int]] = []

    def get_entity_rating_stats(self, entity_type: str, entity_id: int) -> RatingStats:
        self.calls.append((entity_type, entity_id))
        return self._per_song.get(entity_id, RatingStats())

    def get_creator_rating_stats(self, creator_id: int) -> RatingStats:
        self.calls.append(("ARTIST", creator_id))
        return self._creator


class FakeCommerce:
    def __init__(self, orders: list[Order], fail: bool = False) -> None:
        self._orders = orders
        self._fail = fail
        self.calls = 0

    def get_all_orders(self) -> list[Order]:
        self.calls += 1
        if self._fail:
            raise UpstreamUnavailable("commerce", "timed out")
        return self._orders


class FailingIdentity(FakeIdentity):
    def get_user(self, user_id: int) -> UserProfile:
        raise UpstreamUnavailable("identity", "connection refused")


class FailingRatings(FakeRatings):
    def get_entity_rating_stats(self, entity_type: str, entity_id: int) -> RatingStats:
        raise UpstreamUnavailable("ratings", "timed out")

    def get_creator_rating_stats(self, creator_id: int) -> RatingStats:
        raise UpstreamUnavailable("ratings", "timed out")


def _song(item_id: int, plays: int, creator_id: int = CREATOR) -> CatalogItem:
    return CatalogItem(item_id=item_id, creator_id=creator_id, title=f"song-{item_id}", plays=plays)


def _orders() -> list[Order]:
    now = datetime.now(UTC)
    return [
        Order(
            order_id=1,
            status="DELIVERED",
            created_at=now - timedelta(days=1),
            items=[OrderItem(item_type="SONG", item_id=10, quantity=2, price=Decimal("9.99"))],
        ),
        Order(
            order_id=2,
            status="DELIVERED",
            created_at=now - timedelta(days=60),
            items=[OrderItem(item_type="SONG", item_id=11, quantity=1, price=Decimal("1.50"))],
        ),
        Order(
            order_id=3,
            status="PENDING",
            created_at=now,
            items=[OrderItem(item_type="SONG", item_id=10, quantity=100, price=Decimal("9.99"))],
        ),
    ]


@pytest.fixture
def store(tmp_path: Path) -> CatalogStore:
    store = CatalogStore(db_path=tmp_path / "catalog.sqlite3")
    store.upsert_many(
        [
            _song(10, 120),
            _song(11, 30),
            _song(12, 120),
            CatalogItem(item_id=20, creator_id=CREATOR, title="album", kind="ALBUM"),
            _song(30, 999, creator_id=2),
        ]
    )
    store.add_collaboration(Collaboration(collaboration_id=1, item_id=10, creator_id=CREATOR, status="ACCEPTED"))
    store.add_collaboration(Collaboration(collaboration_id=2, item_id=11, creator_id=CREATOR, status="PENDING"))
    return store


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def ratings() -> FakeRatings:
    return FakeRatings(
        per_song={
            10: RatingStats(average_rating=4.0, total_ratings=10),
            11: RatingStats(average_rating=3.0, total_ratings=7),
            12: RatingStats(average_rating=None, total_ratings=None),
        },
        creator=RatingStats(average_rating=4.5, total_ratings=20),
    )


@pytest.fixture
def commerce() -> FakeCommerce:
    return FakeCommerce(_orders())


@pytest.fixture
def aggregator(
    store: CatalogStore, identity: FakeIdentity, ratings: FakeRatings, commerce: FakeCommerce
) -> MetricsAggregator:
    return MetricsAggregator(store, identity, ratings, commerce)  # type: ignore[arg-type]


class TestSummary:
    def test_totals(self, aggregator: MetricsAggregator) -> None:
        summary = aggregator.get_metrics_summary(CREATOR)
        assert summary.creator_name == "seven"
        assert summary.total_plays == 270
        assert summary.plays_last_30_days == 67
        assert summary.plays_growth_percentage == 15.0
        assert summary.average_rating == 4.5
        assert summary.total_ratings == 20
        assert summary.ratings_growth_percentage == pytest.approx(3.0)

    def test_sales(self, aggregator: MetricsAggregator) -> None:
        summary = aggregator.get_metrics_summary(CREATOR)
        assert summary.total_sales == 3
        assert summary.total_revenue == Decimal("21.48")
        assert summary.sales_last_30_days == 2
        assert summary.revenue_last_30_days == Decimal("19.98")
        assert summary.sales_growth_percentage == pytest.approx(0.45)
        assert summary.revenue_growth_percentage == summary.sales_growth_percentage

    def test_comments_are_estimated_from_ratings(self, aggregator: MetricsAggregator) -> None:
        summary = aggregator.get_metrics_summary(CREATOR)
        # floor(10*0.3) + floor(7*0.3) + 0
        assert summary.total_comments == 5
        assert summary.comments_last_30_days == 0

    def test_counts_and_top_song(self, aggregator: MetricsAggregator) -> None:
        summary = aggregator.get_metrics_summary(CREATOR)
        assert summary.total_songs == 3
        assert summary.total_albums == 1
        assert summary.total_collaborations == 1
        # 10 and 12 tie; first in catalog wins
        assert summary.most_played_song_id == 10
        assert summary.most_played_song_plays == 120

    def test_empty_catalog(
        self, tmp_path: Path, identity: FakeIdentity, ratings: FakeRatings
    ) -> None:
        empty = MetricsAggregator(
            CatalogStore(db_path=tmp_path / "empty.sqlite3"), identity, ratings, FakeCommerce([])  # type: ignore[arg-type]
        )
        summary = empty.get_metrics_summary(CREATOR)
        assert summary.total_plays == 0
        assert summary.most_played_song_id is None
        assert summary.most_played_song_name == "N/A"

    def test_upstream_failure_aborts(
        self, store: CatalogStore, identity: FakeIdentity, ratings: FakeRatings
    ) -> None:
        broken = MetricsAggregator(store, identity, ratings, FakeCommerce([], fail=True))  # type: ignore[arg-type]
        with pytest.raises(UpstreamUnavailable):
            broken.get_metrics_summary(CREATOR)


class TestDetailed:
    def test_daily_series_reconciles(self, aggregator: MetricsAggregator) -> None:
        report = aggregator.get_metrics_detailed(CREATOR, date(2026, 9, 1), date(2026, 9, 30))
        assert len(report.daily_metrics) == 30
        assert sum(m.plays for m in report.daily_metrics) == report.total_plays == 270
        assert sum(m.sales for m in report.daily_metrics) == report.total_sales == 3
        assert report.total_revenue == Decimal("21.48")
        assert report.total_comments == sum(m.comments for m in report.daily_metrics)

    def test_average_over_rated_songs(self, aggregator: MetricsAggregator) -> None:
        report = aggregator.get_metrics_detailed(CREATOR, date(2026, 9, 1), date(2026, 9, 1))
        assert report.average_rating == pytest.approx(3.5)

    def test_reproducible(self, aggregator: MetricsAggregator) -> None:
        first = aggregator.get_metrics_detailed(CREATOR, date(2026, 9, 1), date(2026, 9, 10))
        second = aggregator.get_metrics_detailed(CREATOR, date(2026, 9, 1), date(2026, 9, 10))
        assert first.model_dump_json() == second.model_dump_json()

    def test_invalid_range_makes_no_calls(
        self,
        aggregator: MetricsAggregator,
        identity: FakeIdentity,
        ratings: FakeRatings,
        commerce: FakeCommerce,
    ) -> None:
        with pytest.raises(InvalidRange):
            aggregator.get_metrics_detailed(CREATOR, date(2026, 9, 2), date(2026, 9, 1))
        assert identity.calls == []
        assert ratings.calls == []
        assert commerce.calls == 0


class TestTopItems:
    def test_sorted_and_truncated(self, aggregator: MetricsAggregator, commerce: FakeCommerce) -> None:
        top = aggregator.get_top_items(CREATOR, 2)
        assert [m.song_id for m in top] == [10, 12]
        assert [m.rank_in_catalog for m in top] == [1, 2]
        assert commerce.calls == 1

    def test_limit_zero(self, aggregator: MetricsAggregator) -> None:
        assert aggregator.get_top_items(CREATOR, 0) == []


class TestItemMetrics:
    def test_song_metrics(self, aggregator: MetricsAggregator) -> None:
        metrics = aggregator.get_item_metrics(11)
        assert metrics.song_name == "song-11"
        assert metrics.artist_name == "seven"
        assert metrics.total_plays == 30
        assert metrics.average_rating == 3.0
        assert metrics.total_ratings == 7
        assert metrics.total_comments == 2
        assert metrics.total_sales == 1
        assert metrics.total_revenue == Decimal("1.50")
        assert metrics.rank_in_catalog == 3

    def test_missing_item(self, aggregator: MetricsAggregator) -> None:
        with pytest.raises(NotFound):
            aggregator.get_item_metrics(404)

    def test_albums_are_not_songs(self, aggregator: MetricsAggregator) -> None:
        with pytest.raises(NotFound):
            aggregator.get_item_metrics(20)


_OPERATIONS = {
    "summary": lambda agg: agg.get_metrics_summary(CREATOR),
    "detailed": lambda agg: agg.get_metrics_detailed(CREATOR, date(2026, 9, 1), date(2026, 9, 7)),
    "top": lambda agg: agg.get_top_items(CREATOR, 2),
    "item": lambda agg: agg.get_item_metrics(10),
}


class TestUpstreamFailure:
    @pytest.mark.parametrize("operation", sorted(_OPERATIONS))
    @pytest.mark.parametrize("failing", ["identity", "ratings", "commerce"])
    def test_any_collaborator_failure_aborts(
        self,
        store: CatalogStore,
        identity: FakeIdentity,
        ratings: FakeRatings,
        commerce: FakeCommerce,
        operation: str,
        failing: str,
    ) -> None:
        collaborators = {"identity": identity, "ratings": ratings, "commerce": commerce}
        collaborators[failing] = {
            "identity": FailingIdentity(),
            "ratings": FailingRatings({}, RatingStats()),
            "commerce": FakeCommerce([], fail=True),
        }[failing]
        agg = MetricsAggregator(store, **collaborators)  # type: ignore[arg-type]

        with pytest.raises(UpstreamUnavailable) as info:
            _OPERATIONS[operation](agg)
        assert info.value.service == failing
