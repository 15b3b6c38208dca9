"""Database helpers: JSON column coding for raw SQL and sync bulk loading."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from daycare.config import settings

logger = logging.getLogger(__name__)


def dump_json(value: Any) -> str | None:
    """Serialize a value for a JSON/JSONB column bound through ``text()``."""
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def load_json(value: Any, default: Any = None) -> Any:
    """Decode a JSON column value; drivers hand back either text or Python objects."""
    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        if not value:
            return default
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Stored JSON value could not be decoded: %r", value[:80])
            return default
    return value


def iso_timestamp(value: Any) -> str | None:
    """Render a timestamp column as ISO text whatever the driver returned."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def load_json_data(file_path: Path | str) -> Any:
    """Load data from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        JSONDecodeError: If the file contains invalid JSON
    """
    try:
        with open(file_path, "r", encoding="utf-8") as file:
            return json.load(file)
    except FileNotFoundError:
        logger.error("JSON file not found: %s", file_path)
        raise
    except json.JSONDecodeError:
        logger.error("Invalid JSON format in file: %s", file_path)
        raise


def get_sync_database_url() -> str:
    """Convert the async database URL to its sync driver form."""
    return (
        str(settings.DATABASE_URI)
        .replace("postgresql+asyncpg://", "postgresql://")
        .replace("sqlite+aiosqlite://", "sqlite://")
    )


def get_engine() -> Engine:
    connect_args = settings.get_sync_db_connect_args if settings.is_postgres else {}
    return create_engine(get_sync_database_url(), connect_args=connect_args)


def batch_insert(
    engine: Engine, table_name: str, records: list[dict[str, Any]], batch_size: int = 100
) -> None:
    """Insert records in batches inside one transaction."""
    if not records:
        logger.warning("No records to insert into %s", table_name)
        return

    columns = list(records[0].keys())
    placeholders = [f":{col}" for col in columns]
    insert_query = f"""
        INSERT INTO {table_name} ({', '.join(columns)})
        VALUES ({', '.join(placeholders)})
    """

    with engine.begin() as conn:
        for i in range(0, len(records), batch_size):
            batch = records[i : i + batch_size]
            try:
                conn.execute(text(insert_query), batch)
            except SQLAlchemyError as e:
                logger.error(
                    "Error inserting batch starting at index %d: %s", i, str(e)
                )
                raise
