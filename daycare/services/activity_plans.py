from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.schemas.activity_plans import ActivityPlanResponse
from daycare.utils.db import dump_json, iso_timestamp, load_json

PLAN_COLUMNS = "id, class_id, theme, start_date, end_date, age, plans, created_at"

# Public sort keys mapped to columns; anything else is rejected upstream.
SORT_COLUMNS = {
    "theme": "theme",
    "startDate": "start_date",
    "endDate": "end_date",
    "age": "age",
    "createdAt": "created_at",
}


def plan_from_row(row: Any) -> ActivityPlanResponse:
    data = dict(row)
    data["plans"] = load_json(data["plans"], default=[])
    data["created_at"] = iso_timestamp(data["created_at"])
    return ActivityPlanResponse.model_validate(data)


async def insert_plan(
    db: AsyncSession,
    *,
    class_id: int,
    theme: str,
    start_date: str,
    end_date: str,
    age: str,
    plans: list,
) -> ActivityPlanResponse:
    result = await db.execute(
        text(f"""
            INSERT INTO activity_plans (class_id, theme, start_date, end_date, age, plans)
            VALUES (:class_id, :theme, :start_date, :end_date, :age, :plans)
            RETURNING {PLAN_COLUMNS}
        """),
        {
            "class_id": class_id,
            "theme": theme,
            "start_date": start_date,
            "end_date": end_date,
            "age": age,
            "plans": dump_json(plans),
        },
    )
    return plan_from_row(result.mappings().first())


async def find_plan_covering(
    db: AsyncSession, class_id: int, day: str
) -> ActivityPlanResponse | None:
    """Most recent plan of the class whose period includes ``day``."""
    result = await db.execute(
        text(f"""
            SELECT {PLAN_COLUMNS} FROM activity_plans
            WHERE class_id = :class_id AND start_date <= :day AND end_date >= :day
            ORDER BY created_at DESC, id DESC
            LIMIT 1
        """),
        {"class_id": class_id, "day": day},
    )
    row = result.mappings().first()
    return plan_from_row(row) if row else None
