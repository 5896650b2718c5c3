"""Synthetic day-by-day series built from aggregate totals.

No per-day history exists, so the totals are spread over the most recent
days of the requested range. The output is reproducible: one seeded
generator drives every random draw of a call, and whatever is left in a
pool lands on the last day so the daily sums always equal the totals.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from creatormetrics.errors import InvalidRange
from creatormetrics.models import DailyMetric

DEFAULT_SEED = 42
MAX_WINDOW_DAYS = 7
SPARSE_THRESHOLD = 10
# Stand-in unit price; there is no per-day price lookup.
UNIT_PRICE = Decimal("0.99")
RATING_JITTER = 0.2
MAX_RATING = 5.0
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class _Pool:
    total: int
    remaining: int

    def draw(self, window: int, rng: random.Random) -> int:
        if self.total < SPARSE_THRESHOLD:
            # Low volume is bursty: all of it on one day or nothing.
            return self.remaining if rng.random() < 0.5 else 0
        return self.remaining // window

    def take(self, amount: int) -> _Pool:
        return _Pool(self.total, self.remaining - amount)


def days_in_range(start: date, end: date) -> int:
    return (end - start).days + 1


def daily_revenue(sales: int) -> Decimal:
    return (UNIT_PRICE * sales).quantize(_CENTS, rounding=ROUND_HALF_UP)


def _daily_rating(avg_rating: float, rng: random.Random) -> float:
    if avg_rating <= 0:
        return 0.0
    jittered = avg_rating + rng.uniform(-RATING_JITTER, RATING_JITTER)
    return max(0.0, min(MAX_RATING, jittered))


def synthesize_daily_metrics(
    total_plays: int,
    total_sales: int,
    start: date,
    end: date,
    avg_rating: float = 0.0,
    seed: int = DEFAULT_SEED,
) -> list[DailyMetric]:
    """Return one :class:`DailyMetric` per day from *start* to *end* inclusive.

    Only the trailing ``min(days, 7)`` days get activity. Per day and per
    metric: totals under 10 go out whole on a coin flip, larger totals go
    out as ``remaining // window``. Revenue is ``sales * 0.99``; comments
    and the rating jitter are drawn from the same seeded generator.
    """
    if start > end:
        raise InvalidRange(f"Start date {start} is after end date {end}")

    rng = random.Random(seed)
    window = min(days_in_range(start, end), MAX_WINDOW_DAYS)
    plays = _Pool(total_plays, total_plays)
    sales = _Pool(total_sales, total_sales)

    metrics: list[DailyMetric] = []
    current = start
    while current <= end:
        recent = (end - current).days < window
        day_plays = 0
        day_sales = 0

        if recent and plays.remaining > 0:
            day_plays = plays.draw(window, rng)
            plays = plays.take(day_plays)
        if recent and sales.remaining > 0:
            day_sales = sales.draw(window, rng)
            sales = sales.take(day_sales)

        if current == end:
            day_plays += plays.remaining
            day_sales += sales.remaining
            plays = plays.take(plays.remaining)
            sales = sales.take(sales.remaining)

        metrics.append(
            DailyMetric(
                date=current,
                plays=day_plays,
                sales=day_sales,
                revenue=daily_revenue(day_sales),
                comments=rng.randrange(3),
                average_rating=_daily_rating(avg_rating, rng),
            )
        )
        current += timedelta(days=1)

    return metrics
