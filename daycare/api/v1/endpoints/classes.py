from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.database import get_db
from daycare.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from daycare.schemas.classes import (
    ClassCreate,
    ClassDeleteResponse,
    ClassResponse,
    ClassUpdate,
)
from daycare.utils.params import parse_id

router = APIRouter()
logger = structlog.get_logger()


async def _get_class(db: AsyncSession, class_id: int) -> ClassResponse:
    result = await db.execute(
        text("SELECT id, age, class_name FROM classes WHERE id = :id"), {"id": class_id}
    )
    row = result.mappings().first()
    if not row:
        raise NotFoundError("Class not found", "CLASS_NOT_FOUND", resource_type="class")
    return ClassResponse.model_validate(dict(row))


@router.get("", response_model=ClassResponse | list[ClassResponse])
async def get_classes(
    id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Get one class by id, or every class when no id is given"""
    if id is not None:
        return await _get_class(db, parse_id(id, "INVALID_ID"))

    result = await db.execute(text("SELECT id, age, class_name FROM classes ORDER BY id"))
    return [ClassResponse.model_validate(dict(row)) for row in result.mappings().all()]


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
async def create_class(class_data: ClassCreate, db: AsyncSession = Depends(get_db)):
    """Create a new class"""
    query = text("""
        INSERT INTO classes (age, class_name)
        VALUES (:age, :class_name)
        RETURNING id, age, class_name
    """)

    try:
        result = await db.execute(
            query, {"age": class_data.age, "class_name": class_data.class_name}
        )
        row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error("Database error in create_class", error=str(e))
        raise DatabaseError(f"Failed to create class: {str(e)}", operation="create_class")

    logger.info("Class created", class_id=row["id"])
    return ClassResponse.model_validate(dict(row))


@router.put("", response_model=ClassResponse)
async def update_class(
    class_data: ClassUpdate,
    id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Update age and/or class name"""
    class_id = parse_id(id, "INVALID_ID")
    await _get_class(db, class_id)

    fields = class_data.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No fields to update", "NO_FIELDS_TO_UPDATE")

    assignments = ", ".join(f"{column} = :{column}" for column in fields)
    try:
        result = await db.execute(
            text(f"""
                UPDATE classes SET {assignments}
                WHERE id = :id
                RETURNING id, age, class_name
            """),
            {**fields, "id": class_id},
        )
        row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(f"Failed to update class: {str(e)}", operation="update_class")

    return ClassResponse.model_validate(dict(row))


@router.delete("", response_model=ClassDeleteResponse)
async def delete_class(id: Optional[str] = Query(None), db: AsyncSession = Depends(get_db)):
    """Delete a class. Children and logs are not cascaded."""
    class_id = parse_id(id, "INVALID_ID")
    existing = await _get_class(db, class_id)

    for table in ("children", "childcare_logs", "activity_plans", "daily_child_observations"):
        result = await db.execute(
            text(f"SELECT 1 FROM {table} WHERE class_id = :id LIMIT 1"), {"id": class_id}
        )
        if result.first():
            raise ConflictError(
                f"Class is still referenced by {table}", "CLASS_IN_USE"
            )

    try:
        await db.execute(text("DELETE FROM classes WHERE id = :id"), {"id": class_id})
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(f"Failed to delete class: {str(e)}", operation="delete_class")

    return ClassDeleteResponse(message="Class deleted successfully", deleted_class=existing)
