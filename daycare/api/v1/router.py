from fastapi import APIRouter

from daycare.api.v1.endpoints import (
    activity_plans,
    childcare_logs,
    children,
    classes,
    daily_observations,
    development_evaluations,
    generation,
    health,
    observation_logs,
    observations,
    report_basket,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(classes.router, prefix="/classes", tags=["Classes"])
api_router.include_router(children.router, prefix="/children", tags=["Children"])
api_router.include_router(
    activity_plans.router, prefix="/activity-plans", tags=["Activity Plans"]
)
api_router.include_router(
    childcare_logs.router, prefix="/childcare-logs", tags=["Childcare Logs"]
)
api_router.include_router(
    daily_observations.router, prefix="/daily-observations", tags=["Daily Observations"]
)
api_router.include_router(observations.router, prefix="/observations", tags=["Observations"])
api_router.include_router(
    observation_logs.router, prefix="/observation-logs", tags=["Observation Logs"]
)
api_router.include_router(
    development_evaluations.router,
    prefix="/development-evaluations",
    tags=["Development Evaluations"],
)
api_router.include_router(report_basket.router, prefix="/report-basket", tags=["Report Basket"])
api_router.include_router(generation.router, tags=["Generation"])
