"""Parent-record lookups used by handlers before they write."""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.exceptions import ValidationError


async def class_exists(db: AsyncSession, class_id: int) -> bool:
    result = await db.execute(
        text("SELECT id FROM classes WHERE id = :id"), {"id": class_id}
    )
    return result.first() is not None


async def get_child(db: AsyncSession, child_id: int) -> dict[str, Any] | None:
    result = await db.execute(
        text("SELECT id, name, birthdate, class_id FROM children WHERE id = :id"),
        {"id": child_id},
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def resolve_class_id(db: AsyncSession, class_id: int | None) -> int:
    """Use the given class, or fall back to the first class on record."""
    if class_id is not None:
        if not await class_exists(db, class_id):
            raise ValidationError("Class not found", "CLASS_NOT_FOUND")
        return class_id

    result = await db.execute(text("SELECT id FROM classes ORDER BY id LIMIT 1"))
    row = result.first()
    if row is None:
        raise ValidationError(
            "No class has been set up yet. Create a class first.", "NO_CLASSES_FOUND"
        )
    return row[0]
