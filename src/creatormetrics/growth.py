"""Growth estimate from a single point-in-time total."""

from __future__ import annotations

_SATURATION = 100.0
_MAX_GROWTH = 15.0


def estimate_growth(current_value: int | float) -> float:
    """Map a raw total to a growth percentage in ``[0, 15]``.

    No historical snapshot is kept, so this is not a period-over-period
    delta. Larger totals simply earn more confidence in a positive trend,
    saturating at 100.
    """
    if current_value <= 0:
        return 0.0
    factor = min(current_value / _SATURATION, 1.0)
    return factor * _MAX_GROWTH
