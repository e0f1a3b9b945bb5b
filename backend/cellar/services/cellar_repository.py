"""
Cellar repository with SQLite backend.

Stores one row per cellar entry. Drink-window years are clamped on every
write; classification happens on read and is never stored.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..db import BaseRepository
from ..models.enums import CellarSort
from .drink_window import DrinkWindow, clamp_year, is_drink_now, is_inverted

logger = logging.getLogger(__name__)

WINE_COLUMNS = (
    "id", "producer", "name", "vintage", "location", "quantity", "rating",
    "price", "purchase_date", "photo_path", "drink_from_year", "drink_to_year",
    "created_at",
)
EDITABLE_COLUMNS = frozenset(WINE_COLUMNS) - {"id", "created_at"}

# Ties in every sort come out newest first
_NEWEST_FIRST = "created_at DESC, id DESC"

_ORDER_BY = {
    CellarSort.CREATED: _NEWEST_FIRST,
    CellarSort.RATING: f"COALESCE(rating, 0) DESC, {_NEWEST_FIRST}",
    CellarSort.PRODUCER: f"LOWER(COALESCE(producer, '')) ASC, {_NEWEST_FIRST}",
    CellarSort.LOCATION: f"LOWER(COALESCE(location, '')) ASC, {_NEWEST_FIRST}",
}


@dataclass
class WineRecord:
    """A wine in the cellar."""
    id: int
    producer: str
    name: str
    vintage: Optional[int] = None
    location: Optional[str] = None
    quantity: int = 0
    rating: Optional[int] = None
    price: Optional[float] = None
    purchase_date: Optional[str] = None
    photo_path: Optional[str] = None
    drink_from_year: Optional[int] = None
    drink_to_year: Optional[int] = None
    created_at: Optional[str] = None

    @property
    def drink_window(self) -> DrinkWindow:
        return DrinkWindow(start=self.drink_from_year, end=self.drink_to_year)

    @property
    def display_name(self) -> str:
        vintage = f" ({self.vintage})" if self.vintage else ""
        return f"{self.producer} – {self.name}{vintage}"


class CellarRepository(BaseRepository):
    """
    Thread-safe SQLite repository for cellar entries.

    Schema is owned by Alembic; call ensure_schema() before first use.
    """

    def _clean(self, fields: dict) -> dict:
        """Drop unknown columns, trim text and clamp drink-window years."""
        unknown = set(fields) - EDITABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown wine fields: {sorted(unknown)}")

        cleaned = dict(fields)
        for key in ("producer", "name"):
            if key in cleaned and cleaned[key] is not None:
                cleaned[key] = cleaned[key].strip()
        for key in ("location", "purchase_date", "photo_path"):
            if key in cleaned:
                cleaned[key] = (cleaned[key] or "").strip() or None
        for key in ("drink_from_year", "drink_to_year"):
            if key in cleaned:
                cleaned[key] = clamp_year(cleaned[key])
        if "quantity" in cleaned:
            cleaned["quantity"] = max(0, int(cleaned["quantity"] or 0))
        return cleaned

    def _warn_if_inverted(self, wine_id: int, start: Optional[int], end: Optional[int]) -> None:
        if is_inverted(DrinkWindow(start=start, end=end)):
            logger.warning(f"Wine {wine_id}: drink window {start}-{end} is inverted (from > to)")

    def add_wine(self, producer: str, name: str, **fields) -> int:
        """Insert a wine and return its id."""
        values = self._clean({"producer": producer, "name": name, **fields})
        columns = list(values)
        placeholders = ", ".join("?" for _ in columns)
        with self._transaction() as cursor:
            cursor.execute(
                f"INSERT INTO wines ({', '.join(columns)}) VALUES ({placeholders})",
                [values[c] for c in columns],
            )
            wine_id = cursor.lastrowid

        self._warn_if_inverted(wine_id, values.get("drink_from_year"), values.get("drink_to_year"))
        logger.info(f"Added wine {wine_id}: {values['producer']} – {values['name']}")
        return wine_id

    def get(self, wine_id: int) -> Optional[WineRecord]:
        """Find a wine by id."""
        cursor = self._get_connection().cursor()
        cursor.execute(f"SELECT {', '.join(WINE_COLUMNS)} FROM wines WHERE id = ?", (wine_id,))
        row = cursor.fetchone()
        return self._row_to_record(row) if row else None

    def update(self, wine_id: int, **fields) -> bool:
        """Update the given columns. Returns False when the wine does not exist."""
        if not fields:
            return self.get(wine_id) is not None

        values = self._clean(fields)
        assignments = ", ".join(f"{c} = ?" for c in values)
        with self._transaction() as cursor:
            cursor.execute(
                f"UPDATE wines SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                [*values.values(), wine_id],
            )
            updated = cursor.rowcount > 0

        if updated and ("drink_from_year" in values or "drink_to_year" in values):
            record = self.get(wine_id)
            self._warn_if_inverted(wine_id, record.drink_from_year, record.drink_to_year)
        return updated

    def delete(self, wine_id: int) -> bool:
        """Delete a wine. Returns False when it did not exist."""
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM wines WHERE id = ?", (wine_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"Deleted wine {wine_id}")
        return deleted

    def list_wines(self, sort_by: CellarSort = CellarSort.CREATED) -> list[WineRecord]:
        """All wines in the requested order."""
        order = _ORDER_BY[CellarSort(sort_by)]
        cursor = self._get_connection().cursor()
        cursor.execute(f"SELECT {', '.join(WINE_COLUMNS)} FROM wines ORDER BY {order}")
        return [self._row_to_record(row) for row in cursor.fetchall()]

    def drink_now(self, year: int) -> list[WineRecord]:
        """
        Wines in stock whose drink window includes `year`.

        Sorted by rating (desc), then producer, then name.
        """
        cursor = self._get_connection().cursor()
        cursor.execute(f"SELECT {', '.join(WINE_COLUMNS)} FROM wines WHERE quantity > 0")
        wines = [
            record for record in map(self._row_to_record, cursor.fetchall())
            if is_drink_now(record.drink_window, year)
        ]
        wines.sort(key=lambda w: (-(w.rating or 0), (w.producer or "").lower(), (w.name or "").lower()))
        return wines

    def set_quantity(self, wine_id: int, quantity: int) -> Optional[int]:
        """Set bottle count (floored at 0). Returns the stored value, None if missing."""
        qty = max(0, int(quantity))
        if not self.update(wine_id, quantity=qty):
            return None
        return qty

    def take_one(self, wine_id: int) -> Optional[int]:
        """
        Remove one bottle if any are left.

        Returns the remaining count, None if the wine does not exist.
        """
        with self._transaction() as cursor:
            cursor.execute(
                "UPDATE wines SET quantity = quantity - 1, updated_at = CURRENT_TIMESTAMP "
                "WHERE id = ? AND quantity > 0",
                (wine_id,),
            )
        record = self.get(wine_id)
        return record.quantity if record else None

    def count(self) -> int:
        cursor = self._get_connection().cursor()
        cursor.execute("SELECT COUNT(*) FROM wines")
        return cursor.fetchone()[0]

    @staticmethod
    def _row_to_record(row) -> WineRecord:
        return WineRecord(**{column: row[column] for column in WINE_COLUMNS})


_cellar_repo: Optional[CellarRepository] = None


def get_cellar_repository() -> CellarRepository:
    """Get or create the cellar repository singleton (schema migrated on first use)."""
    global _cellar_repo
    if _cellar_repo is None:
        from ..config import Config
        from ..db import ensure_schema
        ensure_schema(Config.database_path())
        _cellar_repo = CellarRepository(Config.database_path())
    return _cellar_repo
