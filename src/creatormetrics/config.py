"""Centralised configuration loaded from environment variables and dotenv."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Paths ──────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[2]
CATALOG_DB: Path = Path(os.getenv("CATALOG_DB", str(PROJECT_ROOT / "var" / "catalog.sqlite3")))

# ── Remote collaborators ───────────────────────────────────────────────────
USER_SERVICE_URL: str = os.getenv("USER_SERVICE_URL", "http://localhost:9001")
RATING_SERVICE_URL: str = os.getenv("RATING_SERVICE_URL", "http://localhost:9002")
COMMERCE_SERVICE_URL: str = os.getenv("COMMERCE_SERVICE_URL", "http://localhost:9003")
HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "30"))

# ── Synthetic series ───────────────────────────────────────────────────────
DISTRIBUTION_SEED: int = int(os.getenv("DISTRIBUTION_SEED", "42"))

# ── Logging ────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
