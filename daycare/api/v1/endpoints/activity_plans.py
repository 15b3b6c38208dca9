from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.database import get_db
from daycare.exceptions import DatabaseError, NotFoundError, ValidationError
from daycare.schemas.activity_plans import (
    ActivityPlanCreate,
    ActivityPlanDeleteResponse,
    ActivityPlanResponse,
    ActivityPlanUpdate,
)
from daycare.services.activity_plans import (
    PLAN_COLUMNS,
    SORT_COLUMNS,
    insert_plan,
    plan_from_row,
)
from daycare.services.lookups import class_exists
from daycare.utils.db import dump_json
from daycare.utils.params import ensure_range, parse_bounded_int, parse_id, parse_optional_id

router = APIRouter()
logger = structlog.get_logger()


async def _get_plan(db: AsyncSession, plan_id: int) -> ActivityPlanResponse:
    result = await db.execute(
        text(f"SELECT {PLAN_COLUMNS} FROM activity_plans WHERE id = :id"), {"id": plan_id}
    )
    row = result.mappings().first()
    if not row:
        raise NotFoundError("Activity plan not found", "PLAN_NOT_FOUND")
    return plan_from_row(row)


@router.get("", response_model=list[ActivityPlanResponse])
async def get_activity_plans(
    classId: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    sort: str = Query("createdAt"),
    order: str = Query("desc"),
    db: AsyncSession = Depends(get_db),
):
    """List plans, optionally for one class, paged and sorted"""
    class_id = parse_optional_id(classId, "INVALID_CLASS_ID", "classId")
    page_size = parse_bounded_int(
        limit, default=10, minimum=1, maximum=100, code="INVALID_LIMIT", label="limit"
    )
    skip = parse_bounded_int(
        offset, default=0, minimum=0, maximum=None, code="INVALID_OFFSET", label="offset"
    )
    if sort not in SORT_COLUMNS:
        raise ValidationError(
            f"sort must be one of: {', '.join(SORT_COLUMNS)}", "INVALID_SORT"
        )
    if order not in ("asc", "desc"):
        raise ValidationError("order must be asc or desc", "INVALID_ORDER")

    where = "WHERE class_id = :class_id" if class_id is not None else ""
    query = text(f"""
        SELECT {PLAN_COLUMNS} FROM activity_plans
        {where}
        ORDER BY {SORT_COLUMNS[sort]} {order.upper()}, id {order.upper()}
        LIMIT :limit OFFSET :offset
    """)
    result = await db.execute(
        query, {"class_id": class_id, "limit": page_size, "offset": skip}
    )
    return [plan_from_row(row) for row in result.mappings().all()]


@router.post("", response_model=ActivityPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_activity_plan(
    plan_data: ActivityPlanCreate, db: AsyncSession = Depends(get_db)
):
    """Create a plan entered by hand"""
    if not await class_exists(db, plan_data.class_id):
        raise ValidationError("Class not found", "CLASS_NOT_FOUND")

    try:
        plan = await insert_plan(
            db,
            class_id=plan_data.class_id,
            theme=plan_data.theme,
            start_date=plan_data.start_date,
            end_date=plan_data.end_date,
            age=plan_data.age,
            plans=plan_data.plans,
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to create activity plan: {str(e)}", operation="create_activity_plan"
        )

    logger.info("Activity plan created", plan_id=plan.id, class_id=plan.class_id)
    return plan


@router.put("", response_model=ActivityPlanResponse)
async def update_activity_plan(
    plan_data: ActivityPlanUpdate,
    id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Replace the given fields of a plan"""
    plan_id = parse_id(id, "INVALID_ID")
    existing = await _get_plan(db, plan_id)

    fields = plan_data.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No fields to update", "NO_FIELDS_TO_UPDATE")
    ensure_range(
        fields.get("start_date", existing.start_date),
        fields.get("end_date", existing.end_date),
    )
    if "class_id" in fields and not await class_exists(db, fields["class_id"]):
        raise ValidationError("Class not found", "CLASS_NOT_FOUND")
    if "plans" in fields:
        fields["plans"] = dump_json(fields["plans"])

    assignments = ", ".join(f"{column} = :{column}" for column in fields)
    try:
        result = await db.execute(
            text(f"""
                UPDATE activity_plans
                SET {assignments}, created_at = CURRENT_TIMESTAMP
                WHERE id = :id
                RETURNING {PLAN_COLUMNS}
            """),
            {**fields, "id": plan_id},
        )
        row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to update activity plan: {str(e)}", operation="update_activity_plan"
        )

    return plan_from_row(row)


@router.delete("", response_model=ActivityPlanDeleteResponse)
async def delete_activity_plan(
    id: Optional[str] = Query(None), db: AsyncSession = Depends(get_db)
):
    plan_id = parse_id(id, "INVALID_ID")
    existing = await _get_plan(db, plan_id)

    try:
        await db.execute(text("DELETE FROM activity_plans WHERE id = :id"), {"id": plan_id})
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to delete activity plan: {str(e)}", operation="delete_activity_plan"
        )

    return ActivityPlanDeleteResponse(
        message="Activity plan deleted successfully", deleted_record=existing
    )
