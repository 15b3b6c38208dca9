from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.database import get_db
from daycare.exceptions import DatabaseError, NotFoundError, ValidationError
from daycare.schemas.daily_observations import (
    DailyObservationCreate,
    DailyObservationCreated,
    DailyObservationResponse,
    DailyObservationUpdate,
    SuccessResponse,
)
from daycare.services.lookups import class_exists, get_child
from daycare.utils.db import iso_timestamp
from daycare.utils.params import parse_date, parse_id

router = APIRouter()
logger = structlog.get_logger()


@router.get("", response_model=list[DailyObservationResponse])
async def get_daily_observations(
    date: Optional[str] = Query(None),
    classId: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Observations of every child in a class for one day"""
    day = parse_date(
        date,
        missing_code="MISSING_DATE",
        format_code="INVALID_DATE_FORMAT",
        invalid_code="INVALID_DATE",
    )
    if classId is None or classId == "":
        raise ValidationError("classId is required", "MISSING_CLASS_ID")
    class_id = parse_id(classId, "INVALID_CLASS_ID", "classId")

    result = await db.execute(
        text("""
            SELECT
                o.id,
                o.class_id,
                o.date,
                o.child_id,
                c.name AS child_name,
                o.observation,
                o.created_at
            FROM daily_child_observations o
            LEFT JOIN children c ON o.child_id = c.id
            WHERE o.date = :date AND o.class_id = :class_id
            ORDER BY o.child_id, o.id
        """),
        {"date": day, "class_id": class_id},
    )
    return [
        DailyObservationResponse.model_validate(
            {**row, "created_at": iso_timestamp(row["created_at"])}
        )
        for row in result.mappings().all()
    ]


@router.post(
    "", response_model=DailyObservationCreated, status_code=status.HTTP_201_CREATED
)
async def create_daily_observation(
    data: DailyObservationCreate, db: AsyncSession = Depends(get_db)
):
    if not await class_exists(db, data.class_id):
        raise ValidationError("Class not found", "CLASS_NOT_FOUND")
    if await get_child(db, data.child_id) is None:
        raise ValidationError("Child not found", "CHILD_NOT_FOUND")

    try:
        result = await db.execute(
            text("""
                INSERT INTO daily_child_observations (class_id, date, child_id, observation)
                VALUES (:class_id, :date, :child_id, :observation)
                RETURNING id
            """),
            data.model_dump(),
        )
        new_id = result.scalar_one()
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to create daily observation: {str(e)}",
            operation="create_daily_observation",
        )

    return DailyObservationCreated(id=new_id)


async def _require_record(db: AsyncSession, observation_id: int) -> None:
    result = await db.execute(
        text("SELECT id FROM daily_child_observations WHERE id = :id"),
        {"id": observation_id},
    )
    if result.first() is None:
        raise NotFoundError("Daily observation not found", "RECORD_NOT_FOUND")


@router.put("/{observation_id}", response_model=SuccessResponse)
async def update_daily_observation(
    observation_id: int,
    data: DailyObservationUpdate,
    db: AsyncSession = Depends(get_db),
):
    await _require_record(db, observation_id)
    try:
        await db.execute(
            text("""
                UPDATE daily_child_observations SET observation = :observation
                WHERE id = :id
            """),
            {"observation": data.observation, "id": observation_id},
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to update daily observation: {str(e)}",
            operation="update_daily_observation",
        )
    return SuccessResponse()


@router.delete("/{observation_id}", response_model=SuccessResponse)
async def delete_daily_observation(
    observation_id: int, db: AsyncSession = Depends(get_db)
):
    await _require_record(db, observation_id)
    try:
        await db.execute(
            text("DELETE FROM daily_child_observations WHERE id = :id"),
            {"id": observation_id},
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to delete daily observation: {str(e)}",
            operation="delete_daily_observation",
        )
    return SuccessResponse()
