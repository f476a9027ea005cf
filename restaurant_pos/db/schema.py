"""Idempotent schema bootstrap for the embedded store."""

from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from restaurant_pos.core.errors import SchemaError
from restaurant_pos.db.base import Base

logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine) -> list[str]:
    """Create missing tables and return the names of those created.

    Every table is created with "if not exists" semantics, so the call is safe
    on every startup. The first failure aborts the whole sequence.
    """
    created: list[str] = []
    try:
        with engine.begin() as connection:
            existing: set[str] = set(inspect(connection).get_table_names())
            for table in Base.metadata.sorted_tables:
                try:
                    table.create(bind=connection, checkfirst=True)
                except SQLAlchemyError as exc:
                    raise SchemaError(f"Could not create table {table.name}") from exc
                if table.name not in existing:
                    created.append(table.name)
    except SQLAlchemyError as exc:
        raise SchemaError("Could not inspect the store schema") from exc

    if created:
        logger.info("[BOOTSTRAP] created tables: %s", ", ".join(created))
    return created
