from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.database import get_db
from daycare.exceptions import DatabaseError, NotFoundError, ValidationError
from daycare.schemas.observations import (
    DOMAIN_VALUES,
    ObservationCreate,
    ObservationDeleteResponse,
    ObservationListResponse,
    ObservationMetrics,
    ObservationResponse,
    ObservationUpdate,
)
from daycare.services.kv_store import SQLKeyValueStore
from daycare.services.lookups import get_child
from daycare.services.observations import (
    OBSERVATION_COLUMNS,
    get_observation,
    observation_from_row,
    observation_metrics,
    search_observations,
)
from daycare.services.report_basket import ReportBasket
from daycare.utils.dates import is_valid_month
from daycare.utils.db import dump_json
from daycare.utils.params import parse_bounded_int, parse_id

router = APIRouter()
logger = structlog.get_logger()

JSON_COLUMNS = ("tags", "media", "follow_ups")


async def _require_child(db: AsyncSession, child_id: int) -> None:
    if await get_child(db, child_id) is None:
        raise NotFoundError("Child not found", "CHILD_NOT_FOUND", resource_type="child")


def _month(month: Optional[str]) -> Optional[str]:
    if month and not is_valid_month(month):
        raise ValidationError("month must be in YYYY-MM format", "INVALID_MONTH_FORMAT")
    return month or None


async def _require_observation(db: AsyncSession, observation_id: int) -> ObservationResponse:
    observation = await get_observation(db, observation_id)
    if observation is None:
        raise NotFoundError("Observation not found", "OBSERVATION_NOT_FOUND")
    return observation


@router.get("", response_model=ObservationListResponse)
async def get_observations(
    childId: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    domain: str = Query("all"),
    tags: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Observations of one child with per-day counts for the calendar"""
    child_id = parse_id(childId, "INVALID_CHILD_ID", "childId")
    month = _month(month)
    if domain != "all" and domain not in DOMAIN_VALUES:
        raise ValidationError(
            f"domain must be all or one of: {', '.join(DOMAIN_VALUES)}", "INVALID_DOMAIN"
        )
    await _require_child(db, child_id)

    tag_list = [tag.strip() for tag in (tags or "").split(",") if tag.strip()]
    daily_counts, total, entries = await search_observations(
        db,
        child_id=child_id,
        month=month,
        domain=domain,
        tags=tag_list,
        search=search.strip() if search else None,
        limit=parse_bounded_int(
            limit, default=50, minimum=1, maximum=100, code="INVALID_LIMIT", label="limit"
        ),
        offset=parse_bounded_int(
            offset, default=0, minimum=0, maximum=None, code="INVALID_OFFSET", label="offset"
        ),
    )
    return ObservationListResponse(daily_counts=daily_counts, total_count=total, entries=entries)


@router.get("/metrics", response_model=ObservationMetrics)
async def get_observation_metrics(
    childId: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    goal: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Dashboard figures: volume, domain balance, top tags and report readiness"""
    child_id = parse_id(childId, "INVALID_CHILD_ID", "childId")
    month = _month(month)
    target = parse_bounded_int(
        goal, default=20, minimum=1, maximum=None, code="INVALID_GOAL", label="goal"
    )
    await _require_child(db, child_id)

    _, _, entries = await search_observations(db, child_id=child_id, month=month, limit=None)
    pinned = set(await ReportBasket(SQLKeyValueStore(db)).pinned_ids())
    return observation_metrics(entries, pinned, goal=target)


@router.get("/{observation_id}", response_model=ObservationResponse)
async def get_observation_by_id(observation_id: int, db: AsyncSession = Depends(get_db)):
    return await _require_observation(db, observation_id)


@router.post("", response_model=ObservationResponse, status_code=status.HTTP_201_CREATED)
async def create_observation(data: ObservationCreate, db: AsyncSession = Depends(get_db)):
    await _require_child(db, data.child_id)

    values = data.model_dump()
    for column in JSON_COLUMNS:
        values[column] = dump_json(values[column])

    try:
        result = await db.execute(
            text(f"""
                INSERT INTO observations (
                    child_id, date, time, domain, tags, summary, detail,
                    media, author, follow_ups, linked_to_report
                )
                VALUES (
                    :child_id, :date, :time, :domain, :tags, :summary, :detail,
                    :media, :author, :follow_ups, :linked_to_report
                )
                RETURNING {OBSERVATION_COLUMNS}
            """),
            values,
        )
        row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to create observation: {str(e)}", operation="create_observation"
        )

    logger.info("Observation created", observation_id=row["id"], child_id=data.child_id)
    return observation_from_row(row)


@router.put("", response_model=ObservationResponse)
async def update_observation(
    data: ObservationUpdate,
    id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    observation_id = parse_id(id, "INVALID_ID")
    await _require_observation(db, observation_id)

    fields = data.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No fields to update", "NO_FIELDS_TO_UPDATE")
    if "child_id" in fields:
        await _require_child(db, fields["child_id"])
    for column in JSON_COLUMNS:
        if column in fields:
            fields[column] = dump_json(fields[column] or [])

    assignments = ", ".join(f"{column} = :{column}" for column in fields)
    try:
        result = await db.execute(
            text(f"""
                UPDATE observations
                SET {assignments}, updated_at = CURRENT_TIMESTAMP
                WHERE id = :id
                RETURNING {OBSERVATION_COLUMNS}
            """),
            {**fields, "id": observation_id},
        )
        row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to update observation: {str(e)}", operation="update_observation"
        )

    return observation_from_row(row)


@router.delete("", response_model=ObservationDeleteResponse)
async def delete_observation(id: Optional[str] = Query(None), db: AsyncSession = Depends(get_db)):
    observation_id = parse_id(id, "INVALID_ID")
    existing = await _require_observation(db, observation_id)

    try:
        await db.execute(text("DELETE FROM observations WHERE id = :id"), {"id": observation_id})
        await ReportBasket(SQLKeyValueStore(db)).unpin(observation_id)
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to delete observation: {str(e)}", operation="delete_observation"
        )

    return ObservationDeleteResponse(message="Observation deleted successfully", deleted=existing)
