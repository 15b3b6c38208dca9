from typing import Any, Optional

from pydantic import Field, field_validator

from daycare.schemas.common import (
    CamelModel,
    CamelRequest,
    fail,
    optional_text,
    require_date,
    require_id,
    require_text,
)
from daycare.utils.dates import is_valid_time

EXECUTION_VALUES: tuple[str, ...] = ("", "o", "x", "확장", "축소", "대체")


class ScheduleItem(CamelModel):
    """One time block of the daily schedule.

    ``time`` is the display label, which carries `` (start ~ end)`` once both
    times are known.
    """

    time: str = ""
    start_time: str = ""
    end_time: str = ""
    activity: str = ""
    execution: str = ""
    fixed: bool = False


def schedule_row_problem(item: Any) -> tuple[str, str] | None:
    """Return ``(code, message)`` for the first defect in a raw row, else None."""
    if not isinstance(item, dict):
        return "INVALID_ACTIVITY_FORMAT", "Each schedule item must be an object"
    label = item.get("time")
    if not isinstance(label, str) or not label.strip():
        return "MISSING_ACTIVITY_TIME", "Each schedule item requires a time label"
    activity = item.get("activity")
    if not isinstance(activity, str) or not activity.strip():
        return "MISSING_ACTIVITY_NAME", "Each schedule item requires an activity"
    for key in ("startTime", "endTime"):
        value = item.get(key)
        if value not in (None, "") and not is_valid_time(value):
            return "INVALID_TIME_FORMAT", f"{key} must be in HH:MM format"
    if item.get("execution") not in EXECUTION_VALUES + (None,):
        return "INVALID_EXECUTION", "execution must be one of o, x, 확장, 축소, 대체"
    if "fixed" in item and not isinstance(item["fixed"], bool):
        return "INVALID_ACTIVITY_FORMAT", "fixed must be a boolean"
    return None


class ChildcareLogCreate(CamelRequest):
    """Upsert payload keyed by (classId, date)."""

    class_id: Any = None
    date: Any = None
    keywords: Any = None
    evaluation: Any = None
    support_plan: Any = None
    schedule: Optional[list[ScheduleItem]] = None

    @field_validator("class_id", mode="before")
    @classmethod
    def check_class_id(cls, v):
        return require_id(v, "classId", missing="MISSING_CLASS_ID", invalid="INVALID_CLASS_ID")

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v):
        return require_date(
            v,
            "date",
            missing="MISSING_DATE",
            invalid_format="INVALID_DATE_FORMAT",
            invalid_date="INVALID_DATE",
        )

    @field_validator("keywords", "evaluation", "support_plan", mode="before")
    @classmethod
    def check_text(cls, v, info):
        return optional_text(v, info.field_name, invalid="INVALID_FIELD_TYPE") or ""

    @field_validator("schedule", mode="before")
    @classmethod
    def check_schedule(cls, v):
        if v is None:
            return None
        if not isinstance(v, list):
            raise fail("INVALID_SCHEDULE_FORMAT", "schedule must be an array")
        for item in v:
            problem = schedule_row_problem(item)
            if problem:
                raise fail(*problem)
        return [{**item, "execution": item.get("execution") or ""} for item in v]


class EvaluationContentCreate(CamelRequest):
    class_id: Any = None
    evaluation_content: Any = None

    @field_validator("class_id", mode="before")
    @classmethod
    def check_class_id(cls, v):
        if v is None or v == "":
            return None
        return require_id(v, "classId", missing="INVALID_CLASS_ID", invalid="INVALID_CLASS_ID")

    @field_validator("evaluation_content", mode="before")
    @classmethod
    def check_content(cls, v):
        return require_text(
            v,
            "evaluationContent",
            missing="MISSING_EVALUATION_CONTENT",
            invalid="INVALID_EVALUATION_CONTENT",
            empty="MISSING_EVALUATION_CONTENT",
        )


class ScheduleOperation(CamelModel):
    op: str
    index: Optional[int] = None
    value: Optional[str] = None


class ScheduleEditRequest(CamelRequest):
    class_id: Any = None
    operations: list[ScheduleOperation] = Field(default_factory=list)

    @field_validator("class_id", mode="before")
    @classmethod
    def check_class_id(cls, v):
        return require_id(v, "classId", missing="MISSING_CLASS_ID", invalid="INVALID_CLASS_ID")


class ChildcareLogResponse(CamelModel):
    id: int
    class_id: int
    date: str
    keywords: str
    evaluation: str
    support_plan: str
    schedule: Optional[list[ScheduleItem]] = None
    evaluation_content: Optional[str] = None
    created_at: Optional[str] = None


class EvaluationContentResponse(CamelModel):
    evaluation_content: Optional[str] = None


class ScheduleResponse(CamelModel):
    date: str
    class_id: int
    saved: bool
    schedule: list[ScheduleItem]
