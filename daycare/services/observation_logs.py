from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.schemas.observation_logs import ObservationLogResponse
from daycare.utils.db import iso_timestamp

LOG_COLUMNS = "id, child_id, month, keywords, content, created_at"


def observation_log_from_row(row: Any) -> ObservationLogResponse:
    return ObservationLogResponse.model_validate(
        {**row, "created_at": iso_timestamp(row["created_at"])}
    )


async def list_observation_logs(
    db: AsyncSession,
    child_id: int,
    start_month: str | None = None,
    end_month: str | None = None,
    ascending: bool = False,
) -> list[ObservationLogResponse]:
    """A child's logs within an inclusive month range."""
    conditions = ["child_id = :child_id"]
    params: dict[str, Any] = {"child_id": child_id}
    if start_month:
        conditions.append("month >= :start_month")
        params["start_month"] = start_month
    if end_month:
        conditions.append("month <= :end_month")
        params["end_month"] = end_month

    direction = "ASC" if ascending else "DESC"
    result = await db.execute(
        text(f"""
            SELECT {LOG_COLUMNS} FROM observation_logs
            WHERE {' AND '.join(conditions)}
            ORDER BY month {direction}, id {direction}
        """),
        params,
    )
    return [observation_log_from_row(row) for row in result.mappings().all()]
