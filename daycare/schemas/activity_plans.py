from typing import Any, Optional

from pydantic import field_validator, model_validator

from daycare.schemas.common import (
    CamelModel,
    CamelRequest,
    fail,
    require_date,
    require_id,
    require_text,
)

PLAN_FIELDS = ("week", "area", "name", "content", "materials")


def _class_id(v: Any) -> int:
    return require_id(
        v, "classId", missing="MISSING_CLASS_ID", invalid="INVALID_CLASS_ID_TYPE"
    )


def _theme(v: Any) -> str:
    return require_text(v, "theme", missing="INVALID_THEME")


def _age(v: Any) -> str:
    return require_text(v, "age", missing="INVALID_AGE")


def _plan_date(v: Any, label: str, prefix: str) -> str:
    if v is None or not isinstance(v, str) or not v.strip():
        raise fail(f"INVALID_{prefix}", f"{label} is required")
    return require_date(
        v,
        label,
        missing=f"INVALID_{prefix}",
        invalid_format=f"INVALID_{prefix}_FORMAT",
    )


def _plans(v: Any) -> list[dict]:
    """Non-empty list of entries with every plan field a non-empty string."""
    if not isinstance(v, list) or not v:
        raise fail("INVALID_PLANS", "plans must be a non-empty array")
    cleaned = []
    for index, entry in enumerate(v):
        if not isinstance(entry, dict):
            raise fail("INVALID_PLAN_STRUCTURE", f"Plan at index {index} must be an object")
        item = dict(entry)
        for field in PLAN_FIELDS:
            value = entry.get(field)
            if field == "week" and isinstance(value, int) and not isinstance(value, bool):
                continue
            if not isinstance(value, str) or not value.strip():
                raise fail(
                    "INVALID_PLAN_FIELD",
                    f"Plan at index {index} requires a non-empty '{field}'",
                )
            item[field] = value.strip()
        cleaned.append(item)
    return cleaned


class ActivityPlanCreate(CamelRequest):
    class_id: Any = None
    theme: Any = None
    start_date: Any = None
    end_date: Any = None
    age: Any = None
    plans: Any = None

    @field_validator("class_id", mode="before")
    @classmethod
    def check_class_id(cls, v):
        return _class_id(v)

    @field_validator("theme", mode="before")
    @classmethod
    def check_theme(cls, v):
        return _theme(v)

    @field_validator("start_date", mode="before")
    @classmethod
    def check_start_date(cls, v):
        return _plan_date(v, "startDate", "START_DATE")

    @field_validator("end_date", mode="before")
    @classmethod
    def check_end_date(cls, v):
        return _plan_date(v, "endDate", "END_DATE")

    @field_validator("age", mode="before")
    @classmethod
    def check_age(cls, v):
        return _age(v)

    @field_validator("plans", mode="before")
    @classmethod
    def check_plans(cls, v):
        return _plans(v)

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date > self.end_date:
            raise fail("INVALID_DATE_RANGE", "endDate must not be before startDate")
        return self


class ActivityPlanUpdate(CamelModel):
    class_id: Optional[int] = None
    theme: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    age: Optional[str] = None
    plans: Optional[list[dict]] = None

    @field_validator("class_id", mode="before")
    @classmethod
    def check_class_id(cls, v):
        return _class_id(v)

    @field_validator("theme", mode="before")
    @classmethod
    def check_theme(cls, v):
        return _theme(v)

    @field_validator("start_date", mode="before")
    @classmethod
    def check_start_date(cls, v):
        return _plan_date(v, "startDate", "START_DATE")

    @field_validator("end_date", mode="before")
    @classmethod
    def check_end_date(cls, v):
        return _plan_date(v, "endDate", "END_DATE")

    @field_validator("age", mode="before")
    @classmethod
    def check_age(cls, v):
        return _age(v)

    @field_validator("plans", mode="before")
    @classmethod
    def check_plans(cls, v):
        return _plans(v)


class ActivityPlanResponse(CamelModel):
    id: int
    class_id: int
    theme: str
    start_date: str
    end_date: str
    age: str
    plans: list[Any]
    created_at: Optional[str] = None


class ActivityPlanDeleteResponse(CamelModel):
    message: str
    deleted_record: ActivityPlanResponse
