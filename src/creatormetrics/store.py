"""SQLite-backed catalog store: items and collaborations per creator."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from creatormetrics.models import ACCEPTED, SONG, CatalogItem, Collaboration

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS items (
    seq             INTEGER PRIMARY KEY AUTOINCREMENT,
    item_id         INTEGER NOT NULL UNIQUE,
    creator_id      INTEGER NOT NULL,
    title           TEXT NOT NULL,
    plays           INTEGER NOT NULL DEFAULT 0,
    published       INTEGER NOT NULL DEFAULT 1,
    cover_image_url TEXT NOT NULL DEFAULT '',
    kind            TEXT NOT NULL DEFAULT 'SONG'
);
CREATE INDEX IF NOT EXISTS items_creator ON items (creator_id, kind);

CREATE TABLE IF NOT EXISTS collaborations (
    collaboration_id INTEGER PRIMARY KEY,
    item_id          INTEGER NOT NULL,
    creator_id       INTEGER NOT NULL,
    status           TEXT NOT NULL DEFAULT 'PENDING'
);
"""

_ITEM_COLUMNS = "item_id, creator_id, title, plays, published, cover_image_url, kind"


class CatalogStore:
    """Read access to a creator's catalog, plus the writes needed to seed it."""

    def __init__(self, db_path: Path) -> None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db_path = db_path
        self._init_db()

    # ── public ──────────────────────────────────────────────────────────

    def items_by_creator(self, creator_id: int, kind: str = SONG) -> list[CatalogItem]:
        """Return the creator's items of *kind* in catalog (first insertion) order.

        Re-upserting an item keeps its original position.
        """
        con = self._connect()
        try:
            cur = con.execute(
                f"SELECT {_ITEM_COLUMNS} FROM items WHERE creator_id = ? AND kind = ? ORDER BY seq",
                (creator_id, kind),
            )
            return [self._to_item(row) for row in cur.fetchall()]
        finally:
            con.close()

    def item_by_id(self, item_id: int) -> CatalogItem | None:
        con = self._connect()
        try:
            cur = con.execute(f"SELECT {_ITEM_COLUMNS} FROM items WHERE item_id = ?", (item_id,))
            row = cur.fetchone()
        finally:
            con.close()
        return self._to_item(row) if row else None

    def accepted_collaborations(self, creator_id: int) -> list[Collaboration]:
        con = self._connect()
        try:
            cur = con.execute(
                """
                SELECT collaboration_id, item_id, creator_id, status
                FROM collaborations
                WHERE creator_id = ? AND status = ?
                ORDER BY collaboration_id
                """,
                (creator_id, ACCEPTED),
            )
            return [
                Collaboration(collaboration_id=r[0], item_id=r[1], creator_id=r[2], status=r[3])
                for r in cur.fetchall()
            ]
        finally:
            con.close()

    def upsert_item(self, item: CatalogItem) -> None:
        self.upsert_many([item])

    def upsert_many(self, items: list[CatalogItem]) -> int:
        """Insert or replace items; return the number of rows written."""
        rows = [
            (
                item.item_id,
                item.creator_id,
                item.title,
                item.plays,
                int(item.published),
                item.cover_image_url,
                item.kind,
            )
            for item in items
        ]
        con = self._connect()
        try:
            con.executemany(
                f"""
                INSERT INTO items ({_ITEM_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(item_id) DO UPDATE SET
                    creator_id = excluded.creator_id,
                    title = excluded.title,
                    plays = excluded.plays,
                    published = excluded.published,
                    cover_image_url = excluded.cover_image_url,
                    kind = excluded.kind
                """,
                rows,
            )
            con.commit()
        finally:
            con.close()
        logger.debug("Upserted %d catalog items", len(rows))
        return len(rows)

    def add_collaboration(self, collaboration: Collaboration) -> None:
        con = self._connect()
        try:
            con.execute(
                """
                INSERT OR REPLACE INTO collaborations
                    (collaboration_id, item_id, creator_id, status)
                VALUES (?, ?, ?, ?)
                """,
                (
                    collaboration.collaboration_id,
                    collaboration.item_id,
                    collaboration.creator_id,
                    collaboration.status,
                ),
            )
            con.commit()
        finally:
            con.close()

    # ── private ─────────────────────────────────────────────────────────

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self._db_path))

    def _init_db(self) -> None:
        con = self._connect()
        con.executescript(_SCHEMA)
        con.close()

    @staticmethod
    def _to_item(row: tuple) -> CatalogItem:
        return CatalogItem(
            item_id=row[0],
            creator_id=row[1],
            title=row[2],
            plays=row[3],
            published=bool(row[4]),
            cover_image_url=row[5],
            kind=row[6],
        )
