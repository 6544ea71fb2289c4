# lms_chat/core/migrations.py
"""Idempotent schema evolution applied on every start."""
import logging
from typing import List, Tuple
from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

from ..models import Base

logger = logging.getLogger(__name__)

# (table, column, DDL fragment) added to databases that predate attachments and push
COLUMN_MIGRATIONS: List[Tuple[str, str, str]] = [
    ("messages", "is_read", "BOOLEAN NOT NULL DEFAULT FALSE"),
    ("messages", "attachment_file_id", "INTEGER REFERENCES files(file_id)"),
    ("users", "fcm_token", "TEXT"),
]


def _apply(connection: Connection) -> List[str]:
    # Creates only what is missing, existing tables are left alone
    Base.metadata.create_all(connection)

    inspector = inspect(connection)
    applied = []
    for table, column, ddl in COLUMN_MIGRATIONS:
        existing = {col["name"] for col in inspector.get_columns(table)}
        if column in existing:
            continue
        connection.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl}"))
        applied.append(f"{table}.{column}")

    _create_missing_indexes(connection)
    return applied


def _create_missing_indexes(connection: Connection):
    # create_all skips indexes of tables that already existed
    inspector = inspect(connection)
    for table in Base.metadata.sorted_tables:
        existing = {index["name"] for index in inspector.get_indexes(table.name)}
        for index in table.indexes:
            if index.name in existing:
                continue
            index.create(connection)
            logger.info(f"Created index {index.name} on {table.name}")


async def run_migrations(engine: AsyncEngine) -> List[str]:
    """Create missing tables and add missing columns; returns the columns added"""
    try:
        async with engine.begin() as conn:
            applied = await conn.run_sync(_apply)
    except Exception as e:
        logger.error(f"Migration Error: {e}")
        raise

    if applied:
        logger.info(f"Migrations applied: added {', '.join(applied)}")
    return applied
