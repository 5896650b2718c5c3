"""Report orchestration: catalog + identity + ratings + orders → metrics reports."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime

from creatormetrics import events
from creatormetrics.clients import CommerceClient, IdentityClient, RatingClient
from creatormetrics.distribution import DEFAULT_SEED, synthesize_daily_metrics
from creatormetrics.errors import InvalidRange, NotFound
from creatormetrics.growth import estimate_growth
from creatormetrics.models import (
    ALBUM,
    SONG,
    CatalogItem,
    MetricsDetailed,
    MetricsSummary,
    Order,
    RatingStats,
    SalesStats,
    SongMetrics,
)
from creatormetrics.rank import catalog_ranks, rank_in_catalog, top_items
from creatormetrics.ratings import average_rating, estimate_comments, total_estimated_comments
from creatormetrics.sales import aggregate_item_sales, aggregate_sales
from creatormetrics.store import CatalogStore

logger = logging.getLogger(__name__)


class MetricsAggregator:
    """Builds creator and song reports from the catalog and remote services.

    Every request is independent. Collaborator calls run sequentially and
    any failure aborts the whole report.
    """

    def __init__(
        self,
        store: CatalogStore,
        identity: IdentityClient,
        ratings: RatingClient,
        commerce: CommerceClient,
        seed: int = DEFAULT_SEED,
    ) -> None:
        self._store = store
        self._identity = identity
        self._ratings = ratings
        self._commerce = commerce
        self._seed = seed

    # ── public ──────────────────────────────────────────────────────────

    def get_metrics_summary(self, creator_id: int) -> MetricsSummary:
        """Totals, 30-day figures and growth estimates for one creator.

        Sales and revenue use a real 30-day window over order dates. Plays
        and comments have no dated source, so their 30-day figures are
        fixed fractions of the totals (``/4`` and ``/6``).
        """
        logger.info("Calculating metrics summary for creator %d", creator_id)

        creator_name = self._creator_name(creator_id)
        songs = self._store.items_by_creator(creator_id, SONG)
        albums = self._store.items_by_creator(creator_id, ALBUM)
        collaborations = self._store.accepted_collaborations(creator_id)

        total_plays = sum(song.plays for song in songs)
        top = top_items(songs, 1)
        most_played = top[0] if top else None

        creator_stats = self._ratings.get_creator_rating_stats(creator_id)
        sales = self._sales_for(creator_id, songs, self._commerce.get_all_orders())
        song_stats = self._song_rating_stats(songs)
        total_comments = total_estimated_comments(song_stats)
        sales_growth = estimate_growth(sales.total_units)

        return MetricsSummary(
            creator_id=creator_id,
            creator_name=creator_name,
            generated_at=datetime.now(UTC),
            total_plays=total_plays,
            plays_last_30_days=total_plays // 4,
            plays_growth_percentage=estimate_growth(total_plays),
            average_rating=creator_stats.average,
            total_ratings=creator_stats.count,
            ratings_growth_percentage=estimate_growth(creator_stats.count),
            total_sales=sales.total_units,
            sales_last_30_days=sales.units_last_30_days,
            sales_growth_percentage=sales_growth,
            total_revenue=sales.total_revenue,
            revenue_last_30_days=sales.revenue_last_30_days,
            revenue_growth_percentage=sales_growth,
            total_comments=total_comments,
            comments_last_30_days=total_comments // 6,
            comments_growth_percentage=estimate_growth(total_comments),
            total_songs=len(songs),
            total_albums=len(albums),
            total_collaborations=len(collaborations),
            most_played_song_id=most_played.item_id if most_played else None,
            most_played_song_name=most_played.title if most_played else "N/A",
            most_played_song_plays=most_played.plays if most_played else 0,
        )

    def get_metrics_detailed(
        self,
        creator_id: int,
        start_date: date,
        end_date: date,
        seed: int | None = None,
    ) -> MetricsDetailed:
        """Synthetic daily series for *start_date*..*end_date* plus range totals.

        Range plays and sales are the creator's current totals; the daily
        series is reconstructed from them and always sums back exactly.
        """
        if start_date > end_date:
            raise InvalidRange(f"Start date {start_date} is after end date {end_date}")

        logger.info(
            "Calculating detailed metrics for creator %d from %s to %s",
            creator_id,
            start_date,
            end_date,
        )

        creator_name = self._creator_name(creator_id)
        songs = self._store.items_by_creator(creator_id, SONG)
        total_plays = sum(song.plays for song in songs)
        sales = self._sales_for(creator_id, songs, self._commerce.get_all_orders())
        avg_rating = average_rating(self._song_rating_stats(songs))

        daily = synthesize_daily_metrics(
            total_plays,
            sales.total_units,
            start_date,
            end_date,
            avg_rating,
            seed=self._seed if seed is None else seed,
        )
        total_comments = sum(day.comments for day in daily)

        events.emit(
            "daily_series_built",
            creator_id=creator_id,
            days=len(daily),
            plays=total_plays,
            sales=sales.total_units,
            revenue=sales.total_revenue,
            comments=total_comments,
            average_rating=round(avg_rating, 3),
        )

        return MetricsDetailed(
            creator_id=creator_id,
            creator_name=creator_name,
            start_date=start_date,
            end_date=end_date,
            daily_metrics=daily,
            total_plays=total_plays,
            total_sales=sales.total_units,
            total_revenue=sales.total_revenue,
            total_comments=total_comments,
            average_rating=avg_rating,
        )

    def get_top_items(self, creator_id: int, limit: int) -> list[SongMetrics]:
        """The creator's *limit* most played songs, best first."""
        logger.info("Getting top %d songs for creator %d", limit, creator_id)

        songs = self._store.items_by_creator(creator_id, SONG)
        chosen = top_items(songs, limit)
        if not chosen:
            return []

        creator_name = self._creator_name(creator_id)
        orders = self._commerce.get_all_orders()
        ranks = catalog_ranks(songs)
        return [self._song_metrics(song, ranks[song.item_id], creator_name, orders) for song in chosen]

    def get_item_metrics(self, item_id: int) -> SongMetrics:
        song = self._store.item_by_id(item_id)
        if song is None or song.kind != SONG:
            raise NotFound(f"Song not found: {item_id}")

        creator_name = self._creator_name(song.creator_id)
        catalog = self._store.items_by_creator(song.creator_id, SONG)
        rank = rank_in_catalog(song.item_id, catalog)
        return self._song_metrics(song, rank, creator_name, self._commerce.get_all_orders())

    # ── private ─────────────────────────────────────────────────────────

    def _creator_name(self, creator_id: int) -> str:
        return self._identity.get_user(creator_id).display_name

    def _song_rating_stats(self, songs: list[CatalogItem]) -> list[RatingStats]:
        stats = [self._ratings.get_entity_rating_stats(SONG, song.item_id) for song in songs]
        for song, s in zip(songs, stats):
            events.debug("song_rating", song_id=song.item_id, average=s.average, ratings=s.count)
        return stats

    def _sales_for(self, creator_id: int, songs: list[CatalogItem], orders: list[Order]) -> SalesStats:
        stats = aggregate_sales((song.item_id for song in songs), orders)
        events.emit(
            "sales_aggregated",
            creator_id=creator_id,
            songs=len(songs),
            orders=len(orders),
            delivered=stats.orders_seen,
            skipped=stats.orders_skipped,
            matched_items=stats.items_matched,
            units=stats.total_units,
            revenue=stats.total_revenue,
        )
        return stats

    def _song_metrics(
        self,
        song: CatalogItem,
        rank: int,
        creator_name: str,
        orders: list[Order],
    ) -> SongMetrics:
        stats = self._ratings.get_entity_rating_stats(SONG, song.item_id)
        sales = aggregate_item_sales(song.item_id, orders)
        return SongMetrics(
            song_id=song.item_id,
            song_name=song.title,
            artist_name=creator_name,
            total_plays=song.plays,
            average_rating=stats.average,
            total_ratings=stats.count,
            total_comments=estimate_comments(stats),
            total_sales=sales.total_units,
            total_revenue=sales.total_revenue,
            rank_in_catalog=rank,
        )
