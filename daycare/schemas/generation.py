from typing import Any, Optional

from pydantic import field_validator, model_validator

from daycare.prompts.curriculum import AGE_GROUPS
from daycare.schemas.common import CamelModel, CamelRequest, fail, require_date, require_text


def _age_group(value: Any) -> str:
    if value not in AGE_GROUPS:
        raise fail("INVALID_AGE_GROUP", 'Age group must be either "0-2" or "3-5"')
    return value


def _optional_class_id(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise fail("INVALID_CLASS_ID", "classId must be a positive integer")
    return value


class ActivityPlanGenerateRequest(CamelRequest):
    theme: Any = None
    start_date: Any = None
    end_date: Any = None
    age_group: Any = None
    class_id: Optional[int] = None

    @field_validator("theme", mode="before")
    @classmethod
    def check_theme(cls, v):
        return require_text(v, "theme", missing="INVALID_THEME")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def check_dates(cls, v, info):
        return require_date(
            v, info.field_name, missing="INVALID_DATE_FORMAT", invalid_format="INVALID_DATE_FORMAT"
        )

    @field_validator("age_group", mode="before")
    @classmethod
    def check_age_group(cls, v):
        return _age_group(v)

    @field_validator("class_id", mode="before")
    @classmethod
    def check_class_id(cls, v):
        return _optional_class_id(v)

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date > self.end_date:
            raise fail("INVALID_DATE_RANGE", "startDate must not be after endDate")
        return self


class EvaluationGenerateRequest(CamelRequest):
    keywords: Any = None
    date: Any = None
    age_group: Any = None
    class_id: Optional[int] = None

    @field_validator("keywords", mode="before")
    @classmethod
    def check_keywords(cls, v):
        return require_text(v, "keywords", missing="INVALID_KEYWORDS")

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v):
        return require_date(
            v, "date", missing="INVALID_DATE_FORMAT", invalid_format="INVALID_DATE_FORMAT"
        )

    @field_validator("age_group", mode="before")
    @classmethod
    def check_age_group(cls, v):
        return _age_group(v)

    @field_validator("class_id", mode="before")
    @classmethod
    def check_class_id(cls, v):
        return _optional_class_id(v)


class ChildObservationGenerateRequest(CamelRequest):
    child_name: Any = None
    age_group: Any = None
    keywords: Any = None
    date: Optional[str] = None
    curriculum: Any = None

    @field_validator("child_name", mode="before")
    @classmethod
    def check_child_name(cls, v):
        return require_text(v, "childName", missing="INVALID_CHILD_NAME")

    @field_validator("keywords", mode="before")
    @classmethod
    def check_keywords(cls, v):
        return require_text(v, "keywords", missing="INVALID_KEYWORDS")

    @field_validator("age_group", mode="before")
    @classmethod
    def check_age_group(cls, v):
        return _age_group(v)

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v):
        if v is None or v == "":
            return None
        return require_date(
            v, "date", missing="INVALID_DATE_FORMAT", invalid_format="INVALID_DATE_FORMAT"
        )

    @field_validator("curriculum", mode="before")
    @classmethod
    def check_curriculum(cls, v):
        return require_text(v, "curriculum", missing="INVALID_CURRICULUM")


class WeekRange(CamelModel):
    week: int
    start: str
    end: str


class ActivityPlanGenerateResponse(CamelModel):
    success: bool = True
    plan: list[Any]
    parsed: bool
    weeks: list[WeekRange]
    activity_plan_id: int


class EvaluationGenerateResponse(CamelModel):
    success: bool = True
    evaluation: str
    evaluation_section: str
    child_observation_section: str


class ChildObservationGenerateResponse(CamelModel):
    success: bool = True
    observation: str
