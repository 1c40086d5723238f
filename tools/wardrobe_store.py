"""Wardrobe storage abstractions and SQLite implementation."""
from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from logic.errors import DuplicateWardrobeItemError, WardrobeItemNotFoundError
from models.color_theory import normalize_color_name
from models.taxonomy import normalize_category, normalize_season, normalize_style
from models.wardrobe import RankedWardrobe, Wardrobe
from models.wardrobe_item import WardrobeItem


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class WardrobeStore:
    """Persistence interface for wardrobe items and leaderboard rows."""

    def create_item(self, item: WardrobeItem) -> WardrobeItem:
        raise NotImplementedError

    def get_item(self, user_id: str, item_id: str) -> Optional[WardrobeItem]:
        raise NotImplementedError

    def list_items_for_user(self, user_id: str) -> List[WardrobeItem]:
        raise NotImplementedError

    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[WardrobeItem]:
        raise NotImplementedError

    def delete_item(self, user_id: str, item_id: str) -> bool:
        raise NotImplementedError

    def search_items(self, user_id: str, filters: Dict[str, object]) -> List[WardrobeItem]:
        raise NotImplementedError

    def record_wear(self, user_id: str, item_id: str, worn_at: Optional[datetime] = None) -> WardrobeItem:
        raise NotImplementedError

    def list_wardrobes(self) -> List[Wardrobe]:
        raise NotImplementedError

    def get_wardrobe(self, user_id: str) -> Optional[Wardrobe]:
        raise NotImplementedError

    def save_rankings(self, ranked: Iterable[RankedWardrobe], updated_at: Optional[datetime] = None) -> int:
        raise NotImplementedError

    def log_recommendation_request(
        self, user_id: str, request_params: Dict[str, object], items_count: int, results_count: int
    ) -> None:
        raise NotImplementedError


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed store for wardrobe items and rankings."""

    def __init__(self, database_path: str | Path = "data/lookbook.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS wardrobe_items (
                    user_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    name TEXT,
                    category TEXT NOT NULL,
                    color TEXT NOT NULL,
                    style TEXT,
                    season TEXT,
                    material TEXT,
                    description TEXT,
                    image_url TEXT,
                    last_worn TEXT,
                    wear_count INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT,
                    PRIMARY KEY (user_id, item_id)
                );
                CREATE TABLE IF NOT EXISTS wardrobes (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    wardrobe_id TEXT NOT NULL UNIQUE,
                    user_id TEXT NOT NULL UNIQUE,
                    ranking_position INTEGER,
                    ranking_score REAL,
                    updated_at TEXT
                );
                CREATE TABLE IF NOT EXISTS recommendation_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    request_params TEXT,
                    items_count INTEGER,
                    results_count INTEGER,
                    created_at TEXT
                );
                """
            )

    def _ensure_wardrobe(self, conn: sqlite3.Connection, user_id: str) -> None:
        conn.execute(
            "INSERT OR IGNORE INTO wardrobes (wardrobe_id, user_id, updated_at) VALUES (?, ?, ?)",
            (uuid.uuid4().hex, user_id, _iso(_utcnow())),
        )

    _ITEM_COLUMNS = """
        user_id, item_id, name, category, color, style, season, material,
        description, image_url, last_worn, wear_count, created_at
    """

    @staticmethod
    def _item_row(item: WardrobeItem) -> tuple:
        return (
            item.user_id,
            item.item_id,
            item.name,
            item.category,
            item.color,
            item.style,
            item.season,
            item.material,
            item.description,
            item.image_url,
            _iso(item.last_worn),
            item.wear_count,
            _iso(item.created_at),
        )

    def create_item(self, item: WardrobeItem) -> WardrobeItem:
        """Insert a new item; an existing ``(user_id, item_id)`` is never overwritten."""

        if item.created_at is None:
            item.created_at = _utcnow()
        try:
            with self._connect() as conn:
                self._ensure_wardrobe(conn, item.user_id)
                conn.execute(
                    f"INSERT INTO wardrobe_items ({self._ITEM_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    self._item_row(item),
                )
        except sqlite3.IntegrityError as exc:
            raise DuplicateWardrobeItemError(item.user_id, item.item_id) from exc
        return item

    def _row_to_item(self, row: sqlite3.Row) -> WardrobeItem:
        return WardrobeItem(
            item_id=row["item_id"],
            user_id=row["user_id"],
            name=row["name"],
            category=row["category"],
            color=row["color"],
            style=row["style"],
            season=row["season"],
            material=row["material"],
            description=row["description"],
            image_url=row["image_url"],
            last_worn=row["last_worn"],
            wear_count=row["wear_count"],
            created_at=row["created_at"],
        )

    def get_item(self, user_id: str, item_id: str) -> Optional[WardrobeItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM wardrobe_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            row = cursor.fetchone()
            return self._row_to_item(row) if row else None

    def list_items_for_user(self, user_id: str) -> List[WardrobeItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM wardrobe_items WHERE user_id = ? ORDER BY created_at, item_id",
                (user_id,),
            )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[WardrobeItem]:
        current = self.get_item(user_id, item_id)
        if not current:
            return None

        values = current.to_dict()
        for key, value in updated_fields.items():
            if key in {"user_id", "item_id", "created_at"}:
                continue
            if key in values:
                values[key] = value

        validated = WardrobeItem(**values)
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE wardrobe_items
                SET name = ?, category = ?, color = ?, style = ?, season = ?, material = ?,
                    description = ?, image_url = ?, last_worn = ?, wear_count = ?
                WHERE user_id = ? AND item_id = ?
                """,
                (*self._item_row(validated)[2:12], user_id, item_id),
            )
        return validated

    def delete_item(self, user_id: str, item_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM wardrobe_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            return cursor.rowcount > 0

    def search_items(self, user_id: str, filters: Dict[str, object]) -> List[WardrobeItem]:
        items = self.list_items_for_user(user_id)
        filters = filters or {}
        category = normalize_category(str(filters["category"])) if filters.get("category") else None
        colors = {normalize_color_name(str(c)) for c in (filters.get("colors", []) or [])}
        styles = {normalize_style(str(tag)) for tag in (filters.get("styles", []) or [])}
        seasons = {normalize_season(str(tag)) for tag in (filters.get("seasons", []) or [])}

        def matches(item: WardrobeItem) -> bool:
            if category and item.slot != category:
                return False
            if colors and item.canonical_color not in colors:
                return False
            if styles and item.style not in styles:
                return False
            if seasons and (item.season or "all") not in seasons:
                return False
            return True

        return [item for item in items if matches(item)]

    def record_wear(self, user_id: str, item_id: str, worn_at: Optional[datetime] = None) -> WardrobeItem:
        worn_at = worn_at or _utcnow()
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE wardrobe_items
                SET wear_count = wear_count + 1, last_worn = ?
                WHERE user_id = ? AND item_id = ?
                """,
                (_iso(worn_at), user_id, item_id),
            )
        item = self.get_item(user_id, item_id)
        if item is None:
            raise WardrobeItemNotFoundError(user_id, item_id)
        return item

    @staticmethod
    def _row_to_wardrobe(row: sqlite3.Row) -> Wardrobe:
        return Wardrobe(
            wardrobe_id=row["wardrobe_id"],
            user_id=row["user_id"],
            item_count=row["item_count"],
            ranking_position=row["ranking_position"],
            ranking_score=row["ranking_score"],
            updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None,
        )

    _WARDROBE_QUERY = """
        SELECT w.wardrobe_id, w.user_id, w.ranking_position, w.ranking_score, w.updated_at,
               COUNT(i.item_id) AS item_count
        FROM wardrobes w
        LEFT JOIN wardrobe_items i ON i.user_id = w.user_id
        {where}
        GROUP BY w.seq
        ORDER BY w.seq
    """

    def list_wardrobes(self) -> List[Wardrobe]:
        with self._connect() as conn:
            cursor = conn.execute(self._WARDROBE_QUERY.format(where=""))
            return [self._row_to_wardrobe(row) for row in cursor.fetchall()]

    def get_wardrobe(self, user_id: str) -> Optional[Wardrobe]:
        with self._connect() as conn:
            cursor = conn.execute(self._WARDROBE_QUERY.format(where="WHERE w.user_id = ?"), (user_id,))
            row = cursor.fetchone()
            return self._row_to_wardrobe(row) if row else None

    def save_rankings(self, ranked: Iterable[RankedWardrobe], updated_at: Optional[datetime] = None) -> int:
        stamp = _iso(updated_at or _utcnow())
        rows = [(entry.ranking_position, entry.ranking_score, stamp, entry.wardrobe_id) for entry in ranked]
        with self._connect() as conn:
            conn.executemany(
                "UPDATE wardrobes SET ranking_position = ?, ranking_score = ?, updated_at = ? WHERE wardrobe_id = ?",
                rows,
            )
        return len(rows)

    def log_recommendation_request(
        self, user_id: str, request_params: Dict[str, object], items_count: int, results_count: int
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO recommendation_logs (user_id, request_params, items_count, results_count, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, json.dumps(request_params, default=str), items_count, results_count, _iso(_utcnow())),
            )

    def list_recommendation_logs(self, user_id: str) -> List[Dict[str, object]]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM recommendation_logs WHERE user_id = ? ORDER BY id",
                (user_id,),
            )
            return [
                {
                    "user_id": row["user_id"],
                    "request_params": json.loads(row["request_params"] or "{}"),
                    "items_count": row["items_count"],
                    "results_count": row["results_count"],
                    "created_at": row["created_at"],
                }
                for row in cursor.fetchall()
            ]


__all__ = ["WardrobeStore", "SQLiteWardrobeStore"]
