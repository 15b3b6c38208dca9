from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.database import get_db
from daycare.exceptions import DatabaseError, NotFoundError, ValidationError
from daycare.schemas.observation_logs import (
    ObservationLogCreate,
    ObservationLogDeleteResponse,
    ObservationLogResponse,
    ObservationLogUpdate,
)
from daycare.services.lookups import get_child
from daycare.services.observation_logs import (
    LOG_COLUMNS,
    list_observation_logs,
    observation_log_from_row,
)
from daycare.utils.dates import is_valid_month
from daycare.utils.params import ensure_range, parse_id

router = APIRouter()
logger = structlog.get_logger()


def _month_param(value: Optional[str], label: str) -> Optional[str]:
    if value and not is_valid_month(value):
        raise ValidationError(f"{label} must be in YYYY-MM format", "INVALID_MONTH")
    return value or None


async def _get_log(db: AsyncSession, log_id: int) -> ObservationLogResponse:
    result = await db.execute(
        text(f"SELECT {LOG_COLUMNS} FROM observation_logs WHERE id = :id"), {"id": log_id}
    )
    row = result.mappings().first()
    if not row:
        raise NotFoundError("Observation log not found", "LOG_NOT_FOUND")
    return observation_log_from_row(row)


@router.get("", response_model=list[ObservationLogResponse])
async def get_observation_logs(
    childId: Optional[str] = Query(None),
    startMonth: Optional[str] = Query(None),
    endMonth: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    child_id = parse_id(childId, "INVALID_CHILD_ID", "childId")
    start = _month_param(startMonth, "startMonth")
    end = _month_param(endMonth, "endMonth")
    ensure_range(start, end, "INVALID_MONTH_RANGE")
    return await list_observation_logs(db, child_id, start, end)


@router.post("", response_model=ObservationLogResponse, status_code=status.HTTP_201_CREATED)
async def create_observation_log(
    data: ObservationLogCreate, db: AsyncSession = Depends(get_db)
):
    if await get_child(db, data.child_id) is None:
        raise NotFoundError("Child not found", "CHILD_NOT_FOUND", resource_type="child")

    try:
        result = await db.execute(
            text(f"""
                INSERT INTO observation_logs (child_id, month, keywords, content)
                VALUES (:child_id, :month, :keywords, :content)
                RETURNING {LOG_COLUMNS}
            """),
            data.model_dump(),
        )
        row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to create observation log: {str(e)}",
            operation="create_observation_log",
        )

    return observation_log_from_row(row)


@router.put("", response_model=ObservationLogResponse)
async def update_observation_log(
    data: ObservationLogUpdate,
    id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    log_id = parse_id(id, "INVALID_ID")
    await _get_log(db, log_id)

    fields = data.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No fields to update", "NO_FIELDS_TO_UPDATE")

    assignments = ", ".join(f"{column} = :{column}" for column in fields)
    try:
        result = await db.execute(
            text(f"""
                UPDATE observation_logs SET {assignments}
                WHERE id = :id
                RETURNING {LOG_COLUMNS}
            """),
            {**fields, "id": log_id},
        )
        row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to update observation log: {str(e)}",
            operation="update_observation_log",
        )

    return observation_log_from_row(row)


@router.delete("", response_model=ObservationLogDeleteResponse)
async def delete_observation_log(
    id: Optional[str] = Query(None), db: AsyncSession = Depends(get_db)
):
    log_id = parse_id(id, "INVALID_ID")
    existing = await _get_log(db, log_id)

    try:
        await db.execute(text("DELETE FROM observation_logs WHERE id = :id"), {"id": log_id})
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to delete observation log: {str(e)}",
            operation="delete_observation_log",
        )

    return ObservationLogDeleteResponse(
        message="Observation log deleted successfully", deleted=existing
    )
