"""Structured event emission, kept apart from the computation modules."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger("creatormetrics.events")


def _render(fields: dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in fields.items())


def emit(event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Log *event* with its ``key=value`` fields.

    The raw fields are also attached to the record as ``event`` / ``fields``
    so a structured handler can pick them up without parsing the message.
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, "%s %s", event, _render(fields), extra={"event": event, "fields": fields})


def debug(event: str, **fields: Any) -> None:
    emit(event, level=logging.DEBUG, **fields)
