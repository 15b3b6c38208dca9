from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.database import get_db
from daycare.exceptions import DatabaseError, NotFoundError, ValidationError
from daycare.schemas.children import (
    ChildCreate,
    ChildDeleteResponse,
    ChildResponse,
    ChildUpdate,
    DeletedRecordCounts,
)
from daycare.services.children import delete_child_cascade
from daycare.services.lookups import class_exists, get_child
from daycare.utils.params import parse_optional_id

router = APIRouter()
logger = structlog.get_logger()


@router.get("", response_model=list[ChildResponse])
async def get_children(
    classId: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Get all children with their class name and age"""
    class_id = parse_optional_id(classId, "INVALID_CLASS_ID", "classId")
    where = "WHERE c.class_id = :class_id" if class_id is not None else ""
    query = text(f"""
        SELECT
            c.id,
            c.name,
            c.birthdate,
            c.class_id,
            cl.class_name,
            cl.age AS class_age
        FROM children c
        JOIN classes cl ON c.class_id = cl.id
        {where}
        ORDER BY c.id
    """)

    try:
        result = await db.execute(query, {"class_id": class_id})
        return [ChildResponse.model_validate(dict(row)) for row in result.mappings().all()]
    except Exception as e:
        logger.exception("Error in get_children", error=str(e), error_type=type(e).__name__)
        raise DatabaseError(
            f"Failed to retrieve children: {type(e).__name__}: {str(e)}",
            operation="get_children",
        )


@router.post("", response_model=ChildResponse, status_code=status.HTTP_201_CREATED)
async def create_child(child_data: ChildCreate, db: AsyncSession = Depends(get_db)):
    """Create a new child in an existing class"""
    if not await class_exists(db, child_data.class_id):
        raise ValidationError("Class not found", "CLASS_NOT_FOUND")

    query = text("""
        INSERT INTO children (name, birthdate, class_id)
        VALUES (:name, :birthdate, :class_id)
        RETURNING id, name, birthdate, class_id
    """)

    try:
        result = await db.execute(
            query,
            {
                "name": child_data.name,
                "birthdate": child_data.birthdate,
                "class_id": child_data.class_id,
            },
        )
        child_row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(
            "Database error in create_child",
            error=str(e),
            error_type=type(e).__name__,
            child_name=child_data.name,
        )
        raise DatabaseError(f"Failed to create child: {str(e)}", operation="create_child")

    return ChildResponse.model_validate(dict(child_row))


@router.put("/{child_id}", response_model=ChildResponse)
async def update_child(
    child_id: int,
    child_data: ChildUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a child"""
    if await get_child(db, child_id) is None:
        raise NotFoundError("Child not found", "CHILD_NOT_FOUND", resource_type="child")

    fields = child_data.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No fields to update", "NO_FIELDS_TO_UPDATE")
    if "class_id" in fields and not await class_exists(db, fields["class_id"]):
        raise ValidationError("Class not found", "CLASS_NOT_FOUND")

    assignments = ", ".join(f"{column} = :{column}" for column in fields)
    try:
        result = await db.execute(
            text(f"""
                UPDATE children SET {assignments}
                WHERE id = :child_id
                RETURNING id, name, birthdate, class_id
            """),
            {**fields, "child_id": child_id},
        )
        child_row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(f"Failed to update child: {str(e)}", operation="update_child")

    return ChildResponse.model_validate(dict(child_row))


@router.delete("/{child_id}", response_model=ChildDeleteResponse)
async def delete_child(child_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a child together with its evaluations, logs and observations"""
    if child_id <= 0:
        raise ValidationError("Valid child ID is required", "INVALID_ID")

    child, counts = await delete_child_cascade(db, child_id)
    return ChildDeleteResponse(
        message="Child and related records deleted successfully",
        deleted_child=ChildResponse.model_validate(child),
        deleted_record_counts=DeletedRecordCounts(**counts),
    )
