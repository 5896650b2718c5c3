"""Rating folding and the comment-count estimate derived from it."""

from __future__ import annotations

import math
from collections.abc import Iterable

from creatormetrics.models import RatingStats

# Comments are not tracked anywhere; they are inferred from rating volume.
COMMENT_RATIO = 0.3


def average_rating(stats: Iterable[RatingStats]) -> float:
    """Mean of the item averages that exist and are above zero.

    Unrated items are left out so they do not drag the creator average
    toward zero. Returns 0.0 when no item qualifies.
    """
    rated = [s.average_rating for s in stats if s.average_rating is not None and s.average_rating > 0]
    if not rated:
        return 0.0
    return sum(rated) / len(rated)


def estimate_comments(stats: RatingStats) -> int:
    """Synthetic comment count: 30% of the rating count, rounded down."""
    return math.floor(stats.count * COMMENT_RATIO)


def total_estimated_comments(stats: Iterable[RatingStats]) -> int:
    return sum(estimate_comments(s) for s in stats)
