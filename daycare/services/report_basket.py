"""Ordered list of observations pinned for the next development report."""

from daycare.exceptions import ValidationError
from daycare.services.kv_store import REPORT_BASKET_KEY, KeyValueStore


class ReportBasket:
    def __init__(self, store: KeyValueStore):
        self.store = store

    async def items(self) -> list[dict]:
        saved = await self.store.get(REPORT_BASKET_KEY) or []
        items = [item for item in saved if isinstance(item, dict) and "id" in item]
        return sorted(items, key=lambda item: item.get("order", 0))

    async def pinned_ids(self) -> list[int]:
        return [item["id"] for item in await self.items()]

    async def pin(self, observation_id: int) -> list[dict]:
        items = await self.items()
        if any(item["id"] == observation_id for item in items):
            return items
        next_order = max((item.get("order", 0) for item in items), default=-1) + 1
        items.append({"id": observation_id, "order": next_order})
        await self.store.set(REPORT_BASKET_KEY, items)
        return items

    async def unpin(self, observation_id: int) -> list[dict]:
        items = [item for item in await self.items() if item["id"] != observation_id]
        await self.store.set(REPORT_BASKET_KEY, items)
        return items

    async def move(self, from_index: int, to_index: int) -> list[dict]:
        """Drag one item to a new position; orders become list positions."""
        items = await self.items()
        for index in (from_index, to_index):
            if not 0 <= index < len(items):
                raise ValidationError(f"Index {index} is out of range", "INVALID_INDEX")
        item = items.pop(from_index)
        items.insert(to_index, item)
        for position, entry in enumerate(items):
            entry["order"] = position
        await self.store.set(REPORT_BASKET_KEY, items)
        return items
