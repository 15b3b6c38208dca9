"""Childcare log persistence.

A log is unique per (class, date). A save first tries
``INSERT ... ON CONFLICT DO NOTHING``; the caller whose insert returns a row
created the log, every other caller updates it. Concurrent writers for the
same key never produce two rows, only one of them is told it created the
log, and the last writer wins.
"""

from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.exceptions import DatabaseError, NotFoundError, ValidationError
from daycare.schemas.childcare_logs import (
    ChildcareLogResponse,
    ScheduleItem,
    schedule_row_problem,
)
from daycare.services.kv_store import KeyValueStore
from daycare.services.lookups import class_exists
from daycare.services.schedule import ScheduleEditor
from daycare.services.schedule_templates import initial_schedule, snapshot_fixed_rows
from daycare.utils.db import dump_json, iso_timestamp, load_json

logger = structlog.get_logger()

LOG_COLUMNS = (
    "id, class_id, date, keywords, evaluation, support_plan, schedule, "
    "evaluation_content, created_at"
)

# Values used when an evaluation is saved for a day that has no log yet.
GENERATED_LOG_DEFAULTS = {
    "keywords": "Generated evaluation",
    "evaluation": "Auto-generated evaluation content",
    "support_plan": "Generated support plan",
}


def log_from_row(row: Any) -> ChildcareLogResponse:
    data = dict(row)
    data["schedule"] = load_json(data["schedule"])
    data["created_at"] = iso_timestamp(data["created_at"])
    data["keywords"] = data["keywords"] or ""
    data["evaluation"] = data["evaluation"] or ""
    data["support_plan"] = data["support_plan"] or ""
    return ChildcareLogResponse.model_validate(data)


async def require_class(db: AsyncSession, class_id: int) -> None:
    if not await class_exists(db, class_id):
        raise NotFoundError("Class not found", "CLASS_NOT_FOUND", resource_type="class")


async def get_log(db: AsyncSession, class_id: int, date: str) -> ChildcareLogResponse | None:
    result = await db.execute(
        text(f"""
            SELECT {LOG_COLUMNS} FROM childcare_logs
            WHERE class_id = :class_id AND date = :date
        """),
        {"class_id": class_id, "date": date},
    )
    row = result.mappings().first()
    return log_from_row(row) if row else None


async def upsert_log(
    db: AsyncSession,
    class_id: int,
    date: str,
    insert_values: dict[str, Any],
    update_columns: list[str],
) -> tuple[ChildcareLogResponse, bool]:
    """Insert the log for (class, date) or update ``update_columns`` of it.

    Returns the stored log and whether this call created the row. The insert
    yields a row only when it won the (class_id, date) key; otherwise the
    existing row is updated.
    """
    values = dict(insert_values)
    if "schedule" in values:
        values["schedule"] = dump_json(values["schedule"])
    params = {**values, "class_id": class_id, "date": date}

    columns = ["class_id", "date", *values]
    inserted = await db.execute(
        text(f"""
            INSERT INTO childcare_logs ({', '.join(columns)})
            VALUES ({', '.join(f':{column}' for column in columns)})
            ON CONFLICT (class_id, date) DO NOTHING
            RETURNING {LOG_COLUMNS}
        """),
        params,
    )
    row = inserted.mappings().first()
    created = row is not None

    if not created:
        assignments = ", ".join(f"{column} = :{column}" for column in update_columns)
        updated = await db.execute(
            text(f"""
                UPDATE childcare_logs SET {assignments}
                WHERE class_id = :class_id AND date = :date
                RETURNING {LOG_COLUMNS}
            """),
            params,
        )
        row = updated.mappings().first()

    logger.info("Childcare log saved", class_id=class_id, date=date, created=created)
    return log_from_row(row), created


def _check_rows(editor: ScheduleEditor) -> None:
    for row in editor.rows:
        problem = schedule_row_problem(row.model_dump(by_alias=True))
        if problem:
            raise ValidationError(problem[1], problem[0])


async def save_log(
    db: AsyncSession,
    store: KeyValueStore,
    *,
    class_id: int,
    date: str,
    keywords: str,
    evaluation: str,
    support_plan: str,
    schedule: list[ScheduleItem] | None,
) -> tuple[ChildcareLogResponse, bool]:
    """Save the day's log from the log form.

    Labels are normalized and fixed rows become the class's schedule
    template. An omitted schedule leaves a stored one untouched.
    """
    await require_class(db, class_id)

    insert_values: dict[str, Any] = {
        "keywords": keywords,
        "evaluation": evaluation,
        "support_plan": support_plan,
        "schedule": None,
    }
    update_columns = ["keywords", "evaluation", "support_plan"]
    editor = None
    if schedule is not None:
        editor = ScheduleEditor(schedule)
        editor.normalize_labels()
        insert_values["schedule"] = [row.model_dump(by_alias=True) for row in editor.rows]
        update_columns.append("schedule")

    try:
        log, created = await upsert_log(db, class_id, date, insert_values, update_columns)
        if editor is not None:
            await snapshot_fixed_rows(store, class_id, editor)
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(f"Failed to save childcare log: {str(e)}", operation="save_log")
    return log, created


async def save_evaluation_content(
    db: AsyncSession, class_id: int, date: str, content: str
) -> tuple[ChildcareLogResponse, bool]:
    try:
        log, created = await upsert_log(
            db,
            class_id,
            date,
            {**GENERATED_LOG_DEFAULTS, "evaluation_content": content},
            ["evaluation_content"],
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to save evaluation content: {str(e)}", operation="save_evaluation"
        )
    return log, created


async def load_schedule(
    db: AsyncSession, store: KeyValueStore, class_id: int, date: str
) -> tuple[ScheduleEditor, bool]:
    """The saved schedule of the day, or the class's initial template."""
    await require_class(db, class_id)
    log = await get_log(db, class_id, date)
    if log and log.schedule:
        return ScheduleEditor(log.schedule), True
    return await initial_schedule(store, class_id), False


async def edit_schedule(
    db: AsyncSession,
    store: KeyValueStore,
    class_id: int,
    date: str,
    operations: list[dict[str, Any]],
) -> tuple[ChildcareLogResponse, bool]:
    """Apply editor operations in order and save the resulting schedule.

    Every row must have a label and an activity once all operations ran.
    """
    editor, _ = await load_schedule(db, store, class_id, date)
    for operation in operations:
        editor.apply(operation["op"], operation.get("index"), operation.get("value"))
    _check_rows(editor)

    try:
        log, created = await upsert_log(
            db,
            class_id,
            date,
            {
                "keywords": "",
                "evaluation": "",
                "support_plan": "",
                "schedule": [row.model_dump(by_alias=True) for row in editor.rows],
            },
            ["schedule"],
        )
        await snapshot_fixed_rows(store, class_id, editor)
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(f"Failed to save schedule: {str(e)}", operation="edit_schedule")
    return log, created


async def list_logs(
    db: AsyncSession,
    *,
    class_id: int | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    limit: int | None = None,
    offset: int = 0,
    ascending: bool = False,
) -> list[ChildcareLogResponse]:
    """Logs filtered by class and inclusive date bounds.

    Newest dates first unless ``ascending``; same-date rows newest first.
    """
    conditions = []
    params: dict[str, Any] = {"offset": offset}
    if class_id is not None:
        conditions.append("class_id = :class_id")
        params["class_id"] = class_id
    if start_date:
        conditions.append("date >= :start_date")
        params["start_date"] = start_date
    if end_date:
        conditions.append("date <= :end_date")
        params["end_date"] = end_date

    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    paging = ""
    if limit is not None:
        paging = "LIMIT :limit OFFSET :offset"
        params["limit"] = limit
    query = text(f"""
        SELECT {LOG_COLUMNS} FROM childcare_logs
        {where}
        ORDER BY date {'ASC' if ascending else 'DESC'}, created_at DESC, id DESC
        {paging}
    """)
    result = await db.execute(query, params)
    return [log_from_row(row) for row in result.mappings().all()]
