from typing import Any, Optional

from pydantic import field_validator, model_validator

from daycare.schemas.common import (
    CamelModel,
    CamelRequest,
    fail,
    optional_text,
    require_id,
    require_month,
    require_text,
)


class DevelopmentEvaluationCreate(CamelRequest):
    """Report payload; observation logs in the optional month range are aggregated."""

    child_id: Any = None
    period: Any = None
    overall_characteristics: Any = None
    parent_message: Any = None
    start_month: Optional[str] = None
    end_month: Optional[str] = None

    @field_validator("child_id", mode="before")
    @classmethod
    def check_child_id(cls, v):
        return require_id(v, "childId", missing="MISSING_CHILD_ID", invalid="INVALID_CHILD_ID")

    @field_validator("period", mode="before")
    @classmethod
    def check_period(cls, v):
        return require_text(v, "period", missing="MISSING_PERIOD", invalid="INVALID_PERIOD")

    @field_validator("overall_characteristics", mode="before")
    @classmethod
    def check_overall(cls, v):
        return require_text(
            v,
            "overallCharacteristics",
            missing="MISSING_OVERALL_CHARACTERISTICS",
            invalid="INVALID_OVERALL_CHARACTERISTICS",
        )

    @field_validator("parent_message", mode="before")
    @classmethod
    def check_parent_message(cls, v):
        return require_text(
            v,
            "parentMessage",
            missing="MISSING_PARENT_MESSAGE",
            invalid="INVALID_PARENT_MESSAGE",
        )

    @field_validator("start_month", "end_month", mode="before")
    @classmethod
    def check_month(cls, v, info):
        if v is None or v == "":
            return None
        return require_month(v, info.field_name, missing="INVALID_MONTH", invalid="INVALID_MONTH")

    @model_validator(mode="after")
    def check_range(self):
        if self.start_month and self.end_month and self.start_month > self.end_month:
            raise fail("INVALID_MONTH_RANGE", "startMonth must not be after endMonth")
        return self


class DevelopmentEvaluationUpdate(CamelModel):
    period: Optional[str] = None
    overall_characteristics: Optional[str] = None
    parent_message: Optional[str] = None
    observations: Optional[str] = None
    age_at_evaluation: Optional[str] = None

    @field_validator("period", mode="before")
    @classmethod
    def check_period(cls, v):
        return require_text(v, "period", missing="INVALID_PERIOD")

    @field_validator("overall_characteristics", mode="before")
    @classmethod
    def check_overall(cls, v):
        return require_text(
            v, "overallCharacteristics", missing="INVALID_OVERALL_CHARACTERISTICS"
        )

    @field_validator("parent_message", mode="before")
    @classmethod
    def check_parent_message(cls, v):
        return require_text(v, "parentMessage", missing="INVALID_PARENT_MESSAGE")

    @field_validator("observations", mode="before")
    @classmethod
    def check_observations(cls, v):
        return optional_text(v, "observations", invalid="INVALID_OBSERVATIONS")

    @field_validator("age_at_evaluation", mode="before")
    @classmethod
    def check_age(cls, v):
        return require_text(v, "ageAtEvaluation", missing="INVALID_AGE_AT_EVALUATION")


class DevelopmentEvaluationResponse(CamelModel):
    id: int
    child_id: int
    period: str
    overall_characteristics: str
    parent_message: str
    observations: Optional[str] = None
    age_at_evaluation: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class DevelopmentEvaluationDeleteResponse(CamelModel):
    message: str
    deleted: DevelopmentEvaluationResponse
