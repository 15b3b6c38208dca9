from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.database import get_db
from daycare.exceptions import NotFoundError
from daycare.schemas.childcare_logs import (
    ChildcareLogCreate,
    ChildcareLogResponse,
    EvaluationContentCreate,
    EvaluationContentResponse,
    ScheduleEditRequest,
    ScheduleResponse,
)
from daycare.services import childcare_logs as logs_service
from daycare.services.kv_store import SQLKeyValueStore
from daycare.services.lookups import resolve_class_id
from daycare.utils.params import (
    ensure_range,
    parse_bounded_int,
    parse_date,
    parse_id,
    parse_optional_id,
)

router = APIRouter()
logger = structlog.get_logger()


def _path_date(date: str) -> str:
    return parse_date(date, format_code="INVALID_DATE_FORMAT", invalid_code="INVALID_DATE")


def _set_status(response: Response, created: bool) -> None:
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK


@router.get("", response_model=list[ChildcareLogResponse])
async def get_childcare_logs(
    classId: Optional[str] = Query(None),
    startDate: Optional[str] = Query(None),
    endDate: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """List logs, newest date first"""
    class_id = parse_optional_id(classId, "INVALID_CLASS_ID", "classId")
    start = parse_date(startDate, format_code="INVALID_START_DATE", label="startDate")
    end = parse_date(endDate, format_code="INVALID_END_DATE", label="endDate")
    ensure_range(start, end)
    return await logs_service.list_logs(
        db,
        class_id=class_id,
        start_date=start,
        end_date=end,
        limit=parse_bounded_int(
            limit, default=50, minimum=1, maximum=100, code="INVALID_LIMIT", label="limit"
        ),
        offset=parse_bounded_int(
            offset, default=0, minimum=0, maximum=None, code="INVALID_OFFSET", label="offset"
        ),
    )


@router.post("", response_model=ChildcareLogResponse)
async def save_childcare_log(
    log_data: ChildcareLogCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Create the log for (classId, date), or update it when it already exists"""
    log, created = await logs_service.save_log(
        db,
        SQLKeyValueStore(db),
        class_id=log_data.class_id,
        date=log_data.date,
        keywords=log_data.keywords,
        evaluation=log_data.evaluation,
        support_plan=log_data.support_plan,
        schedule=log_data.schedule,
    )
    _set_status(response, created)
    return log


@router.get("/weekly", response_model=list[ChildcareLogResponse])
async def get_weekly_logs(
    startDate: Optional[str] = Query(None),
    endDate: Optional[str] = Query(None),
    classId: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Logs in an inclusive date range, oldest date first"""
    start = parse_date(
        startDate,
        missing_code="MISSING_START_DATE",
        format_code="INVALID_START_DATE_FORMAT",
        invalid_code="INVALID_START_DATE",
        label="startDate",
    )
    end = parse_date(
        endDate,
        missing_code="MISSING_END_DATE",
        format_code="INVALID_END_DATE_FORMAT",
        invalid_code="INVALID_END_DATE",
        label="endDate",
    )
    ensure_range(start, end)
    class_id = parse_optional_id(classId, "INVALID_CLASS_ID", "classId")
    return await logs_service.list_logs(
        db, class_id=class_id, start_date=start, end_date=end, ascending=True
    )


@router.get("/{date}", response_model=list[ChildcareLogResponse])
async def get_logs_for_date(
    date: str,
    classId: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    day = _path_date(date)
    class_id = parse_optional_id(classId, "INVALID_CLASS_ID", "classId")
    return await logs_service.list_logs(
        db, class_id=class_id, start_date=day, end_date=day
    )


@router.get("/{date}/evaluation", response_model=EvaluationContentResponse)
async def get_evaluation_content(
    date: str,
    classId: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """The saved AI evaluation of a day"""
    day = _path_date(date)
    class_id = await resolve_class_id(
        db, parse_optional_id(classId, "INVALID_CLASS_ID", "classId")
    )
    log = await logs_service.get_log(db, class_id, day)
    if log is None:
        raise NotFoundError("Childcare log not found", "LOG_NOT_FOUND")
    return EvaluationContentResponse(evaluation_content=log.evaluation_content)


@router.post("/{date}/evaluation", response_model=ChildcareLogResponse)
async def save_evaluation_content(
    date: str,
    payload: EvaluationContentCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    day = _path_date(date)
    class_id = await resolve_class_id(db, payload.class_id)
    log, created = await logs_service.save_evaluation_content(
        db, class_id, day, payload.evaluation_content
    )
    _set_status(response, created)
    return log


@router.get("/{date}/schedule", response_model=ScheduleResponse)
async def get_schedule(
    date: str,
    classId: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """The day's schedule, or the class's default template when none is saved"""
    day = _path_date(date)
    class_id = parse_id(classId, "INVALID_CLASS_ID", "classId")
    editor, saved = await logs_service.load_schedule(db, SQLKeyValueStore(db), class_id, day)
    return ScheduleResponse(date=day, class_id=class_id, saved=saved, schedule=editor.rows)


@router.post("/{date}/schedule/edits", response_model=ChildcareLogResponse)
async def edit_schedule(
    date: str,
    payload: ScheduleEditRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Apply schedule editor operations in order and save the result"""
    day = _path_date(date)
    log, created = await logs_service.edit_schedule(
        db,
        SQLKeyValueStore(db),
        payload.class_id,
        day,
        [operation.model_dump() for operation in payload.operations],
    )
    _set_status(response, created)
    return log
