from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.database import get_db
from daycare.exceptions import DatabaseError, NotFoundError, ValidationError
from daycare.schemas.development_evaluations import (
    DevelopmentEvaluationCreate,
    DevelopmentEvaluationDeleteResponse,
    DevelopmentEvaluationResponse,
    DevelopmentEvaluationUpdate,
)
from daycare.services.development_evaluations import (
    EVALUATION_COLUMNS,
    create_evaluation,
    evaluation_from_row,
)
from daycare.utils.params import parse_id

router = APIRouter()
logger = structlog.get_logger()


async def _get_evaluation(db: AsyncSession, evaluation_id: int) -> DevelopmentEvaluationResponse:
    result = await db.execute(
        text(f"SELECT {EVALUATION_COLUMNS} FROM development_evaluations WHERE id = :id"),
        {"id": evaluation_id},
    )
    row = result.mappings().first()
    if not row:
        raise NotFoundError("Development evaluation not found", "EVALUATION_NOT_FOUND")
    return evaluation_from_row(row)


@router.get("", response_model=list[DevelopmentEvaluationResponse])
async def get_development_evaluations(
    childId: Optional[str] = Query(None),
    period: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """A child's reports, newest first"""
    child_id = parse_id(childId, "INVALID_CHILD_ID", "childId")
    period_filter = "AND period = :period" if period else ""
    result = await db.execute(
        text(f"""
            SELECT {EVALUATION_COLUMNS} FROM development_evaluations
            WHERE child_id = :child_id {period_filter}
            ORDER BY created_at DESC, id DESC
        """),
        {"child_id": child_id, "period": period},
    )
    return [evaluation_from_row(row) for row in result.mappings().all()]


@router.post(
    "", response_model=DevelopmentEvaluationResponse, status_code=status.HTTP_201_CREATED
)
async def create_development_evaluation(
    data: DevelopmentEvaluationCreate, db: AsyncSession = Depends(get_db)
):
    return await create_evaluation(db, data)


@router.put("", response_model=DevelopmentEvaluationResponse)
async def update_development_evaluation(
    data: DevelopmentEvaluationUpdate,
    id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    evaluation_id = parse_id(id, "INVALID_ID")
    await _get_evaluation(db, evaluation_id)

    fields = data.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No fields to update", "NO_FIELDS_TO_UPDATE")

    assignments = ", ".join(f"{column} = :{column}" for column in fields)
    try:
        result = await db.execute(
            text(f"""
                UPDATE development_evaluations
                SET {assignments}, updated_at = CURRENT_TIMESTAMP
                WHERE id = :id
                RETURNING {EVALUATION_COLUMNS}
            """),
            {**fields, "id": evaluation_id},
        )
        row = result.mappings().first()
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to update development evaluation: {str(e)}",
            operation="update_development_evaluation",
        )

    return evaluation_from_row(row)


@router.delete("", response_model=DevelopmentEvaluationDeleteResponse)
async def delete_development_evaluation(
    id: Optional[str] = Query(None), db: AsyncSession = Depends(get_db)
):
    evaluation_id = parse_id(id, "INVALID_ID")
    existing = await _get_evaluation(db, evaluation_id)

    try:
        await db.execute(
            text("DELETE FROM development_evaluations WHERE id = :id"), {"id": evaluation_id}
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise DatabaseError(
            f"Failed to delete development evaluation: {str(e)}",
            operation="delete_development_evaluation",
        )

    return DevelopmentEvaluationDeleteResponse(
        message="Development evaluation deleted successfully", deleted=existing
    )
