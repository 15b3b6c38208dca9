import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.exceptions import DatabaseError, NotFoundError
from daycare.services.lookups import get_child

logger = structlog.get_logger()

# Dependent tables, deleted in this order before the child row.
CASCADE_TABLES = (
    ("development_evaluations", "development_evaluations"),
    ("observation_logs", "observation_logs"),
    ("observations", "observations"),
    ("daily_observations", "daily_child_observations"),
)


async def _delete_dependents(db: AsyncSession, table: str, child_id: int) -> int:
    result = await db.execute(
        text(f"DELETE FROM {table} WHERE child_id = :child_id"), {"child_id": child_id}
    )
    return result.rowcount or 0


async def _delete_child_row(db: AsyncSession, child_id: int) -> None:
    await db.execute(text("DELETE FROM children WHERE id = :id"), {"id": child_id})


async def delete_child_cascade(db: AsyncSession, child_id: int) -> tuple[dict, dict]:
    """Delete a child and every record that points at it, all or nothing.

    Returns the deleted child row and the per-table deletion counts.
    """
    child = await get_child(db, child_id)
    if child is None:
        raise NotFoundError("Child not found", "CHILD_NOT_FOUND", resource_type="child")

    counts = {}
    try:
        for key, table in CASCADE_TABLES:
            counts[key] = await _delete_dependents(db, table, child_id)
        await _delete_child_row(db, child_id)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(
            "Child cascade delete rolled back",
            child_id=child_id,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise DatabaseError(
            f"Failed to delete child: {str(e)}", operation="delete_child"
        )

    logger.info("Child deleted", child_id=child_id, **counts)
    return child, counts
