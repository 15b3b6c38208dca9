from datetime import date
from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.exceptions import DatabaseError, NotFoundError
from daycare.schemas.development_evaluations import (
    DevelopmentEvaluationCreate,
    DevelopmentEvaluationResponse,
)
from daycare.schemas.observation_logs import ObservationLogResponse
from daycare.services.lookups import get_child
from daycare.services.observation_logs import list_observation_logs
from daycare.utils.dates import months_between
from daycare.utils.db import iso_timestamp

logger = structlog.get_logger()

EVALUATION_COLUMNS = (
    "id, child_id, period, overall_characteristics, parent_message, observations, "
    "age_at_evaluation, created_at, updated_at"
)


def evaluation_from_row(row: Any) -> DevelopmentEvaluationResponse:
    return DevelopmentEvaluationResponse.model_validate(
        {
            **row,
            "created_at": iso_timestamp(row["created_at"]),
            "updated_at": iso_timestamp(row["updated_at"]),
        }
    )


def age_label(birthdate: str, on_date: date | None = None) -> str:
    return f"{months_between(birthdate, on_date)}개월"


def aggregate_observations(logs: list[ObservationLogResponse]) -> str:
    return "\n\n".join(f"키워드: {log.keywords}\n내용: {log.content}" for log in logs)


async def create_evaluation(
    db: AsyncSession,
    data: DevelopmentEvaluationCreate,
    today: date | None = None,
) -> DevelopmentEvaluationResponse:
    """Store a report with the child's age and its observation logs folded in."""
    child = await get_child(db, data.child_id)
    if child is None:
        raise NotFoundError("Child not found", "CHILD_NOT_FOUND", resource_type="child")

    logs = await list_observation_logs(
        db, data.child_id, data.start_month, data.end_month, ascending=True
    )

    try:
        result = await db.execute(
            text(f"""
                INSERT INTO development_evaluations (
                    child_id, period, overall_characteristics, parent_message,
                    observations, age_at_evaluation
                )
                VALUES (
                    :child_id, :period, :overall_characteristics, :parent_message,
                    :observations, :age_at_evaluation
                )
                RETURNING {EVALUATION_COLUMNS}
            """),
            {
                "child_id": data.child_id,
                "period": data.period,
                "overall_characteristics": data.overall_characteristics,
                "parent_message": data.parent_message,
                "observations": aggregate_observations(logs),
                "age_at_evaluation": age_label(child["birthdate"], today),
            },
        )
        row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to create development evaluation: {str(e)}",
            operation="create_evaluation",
        )

    logger.info(
        "Development evaluation created",
        evaluation_id=row["id"],
        child_id=data.child_id,
        aggregated_logs=len(logs),
    )
    return evaluation_from_row(row)
