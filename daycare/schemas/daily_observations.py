from typing import Any, Optional

from pydantic import field_validator

from daycare.schemas.common import (
    CamelModel,
    CamelRequest,
    require_date,
    require_id,
    require_text,
)


def _observation(v: Any) -> str:
    return require_text(
        v, "observation", missing="MISSING_OBSERVATION", invalid="INVALID_OBSERVATION"
    )


class DailyObservationCreate(CamelRequest):
    class_id: Any = None
    date: Any = None
    child_id: Any = None
    observation: Any = None

    @field_validator("class_id", mode="before")
    @classmethod
    def check_class_id(cls, v):
        return require_id(
            v, "classId", missing="MISSING_CLASS_ID", invalid="INVALID_CLASS_ID_TYPE", strict=True
        )

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v):
        return require_date(
            v,
            "date",
            missing="MISSING_DATE",
            invalid_type="INVALID_DATE_TYPE",
            invalid_format="INVALID_DATE_FORMAT",
            invalid_date="INVALID_DATE",
        )

    @field_validator("child_id", mode="before")
    @classmethod
    def check_child_id(cls, v):
        return require_id(
            v, "childId", missing="MISSING_CHILD_ID", invalid="INVALID_CHILD_ID_TYPE", strict=True
        )

    @field_validator("observation", mode="before")
    @classmethod
    def check_observation(cls, v):
        return _observation(v)


class DailyObservationUpdate(CamelRequest):
    observation: Any = None

    @field_validator("observation", mode="before")
    @classmethod
    def check_observation(cls, v):
        return require_text(v, "observation", missing="INVALID_OBSERVATION")


class DailyObservationResponse(CamelModel):
    id: int
    class_id: int
    date: str
    child_id: int
    child_name: Optional[str] = None
    observation: str
    created_at: Optional[str] = None


class DailyObservationCreated(CamelModel):
    success: bool = True
    id: int


class SuccessResponse(CamelModel):
    success: bool = True
