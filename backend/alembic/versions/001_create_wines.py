"""Initial schema - cellar wines table.

Revision ID: 001
Revises: None
Create Date: 2026-10-19

Creates the wines table holding one row per cellar entry, including the
optional drink window (drink_from_year / drink_to_year, inclusive).
"""
from typing import Sequence, Union

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS wines (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        producer TEXT NOT NULL,
        name TEXT NOT NULL,
        vintage INTEGER,
        location TEXT,
        quantity INTEGER NOT NULL DEFAULT 1,
        rating INTEGER,
        price REAL,
        purchase_date TEXT,
        photo_path TEXT,
        drink_from_year INTEGER,
        drink_to_year INTEGER,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_wines_producer ON wines(LOWER(producer))",
    "CREATE INDEX IF NOT EXISTS idx_wines_created_at ON wines(created_at)",
]


def upgrade() -> None:
    for statement in SCHEMA_STATEMENTS:
        op.execute(statement)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wines")
