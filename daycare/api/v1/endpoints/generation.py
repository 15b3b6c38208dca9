import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from daycare.database import get_db
from daycare.schemas.generation import (
    ActivityPlanGenerateRequest,
    ActivityPlanGenerateResponse,
    ChildObservationGenerateRequest,
    ChildObservationGenerateResponse,
    EvaluationGenerateRequest,
    EvaluationGenerateResponse,
)
from daycare.services import generation
from daycare.services.lookups import resolve_class_id

router = APIRouter()
logger = structlog.get_logger()


@router.post("/generate-activity-plan", response_model=ActivityPlanGenerateResponse)
async def generate_activity_plan(
    data: ActivityPlanGenerateRequest, db: AsyncSession = Depends(get_db)
):
    """Generate a weekly activity plan for a theme and store it."""
    class_id = await resolve_class_id(db, data.class_id)
    result = await generation.generate_activity_plan(
        db,
        class_id=class_id,
        theme=data.theme,
        start_date=data.start_date,
        end_date=data.end_date,
        age_group=data.age_group,
    )
    return ActivityPlanGenerateResponse(**result)


@router.post("/generate-evaluation", response_model=EvaluationGenerateResponse)
async def generate_evaluation(
    data: EvaluationGenerateRequest, db: AsyncSession = Depends(get_db)
):
    """Draft the day's evaluation and support plan from keywords."""
    class_id = await resolve_class_id(db, data.class_id)
    result = await generation.generate_evaluation(
        db,
        class_id=class_id,
        keywords=data.keywords,
        date=data.date,
        age_group=data.age_group,
    )
    return EvaluationGenerateResponse(**result)


@router.post("/generate-child-observation", response_model=ChildObservationGenerateResponse)
async def generate_child_observation(data: ChildObservationGenerateRequest):
    observation = await generation.generate_child_observation(
        child_name=data.child_name,
        age_group=data.age_group,
        keywords=data.keywords,
        curriculum=data.curriculum,
        date=data.date,
    )
    return ChildObservationGenerateResponse(observation=observation)
