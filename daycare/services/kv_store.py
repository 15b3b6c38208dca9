"""Key-value storage for state that lives outside the entity tables.

The schedule template and the report basket only need ``get`` and ``set`` by
key, so they take any ``KeyValueStore``. Requests use the SQL-backed store;
tests and scripts can use the in-memory one.
"""

import copy
from typing import Any, Protocol

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.utils.db import dump_json, load_json

REPORT_BASKET_KEY = "reportBasket"


def fixed_schedule_key(class_id: int) -> str:
    return f"fixedSchedule_{class_id}"


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(initial or {})

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class SQLKeyValueStore:
    """Stores JSON values in the ``client_state`` table of the request's session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Any | None:
        result = await self.db.execute(
            text("SELECT value FROM client_state WHERE key = :key"), {"key": key}
        )
        row = result.mappings().first()
        return load_json(row["value"]) if row else None

    async def set(self, key: str, value: Any) -> None:
        await self.db.execute(
            text("""
                INSERT INTO client_state (key, value, updated_at)
                VALUES (:key, :value, CURRENT_TIMESTAMP)
                ON CONFLICT (key) DO UPDATE
                SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
            """),
            {"key": key, "value": dump_json(value)},
        )
