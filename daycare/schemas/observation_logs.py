from typing import Any, Optional

from pydantic import field_validator

from daycare.schemas.common import (
    CamelModel,
    CamelRequest,
    require_id,
    require_month,
    require_text,
)


class ObservationLogCreate(CamelRequest):
    child_id: Any = None
    month: Any = None
    keywords: Any = None
    content: Any = None

    @field_validator("child_id", mode="before")
    @classmethod
    def check_child_id(cls, v):
        return require_id(v, "childId", missing="MISSING_CHILD_ID", invalid="INVALID_CHILD_ID")

    @field_validator("month", mode="before")
    @classmethod
    def check_month(cls, v):
        return require_month(v, "month", missing="MISSING_MONTH", invalid="INVALID_MONTH")

    @field_validator("keywords", mode="before")
    @classmethod
    def check_keywords(cls, v):
        return require_text(v, "keywords", missing="MISSING_KEYWORDS", invalid="INVALID_KEYWORDS")

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, v):
        return require_text(v, "content", missing="MISSING_CONTENT", invalid="INVALID_CONTENT")


class ObservationLogUpdate(CamelModel):
    month: Optional[str] = None
    keywords: Optional[str] = None
    content: Optional[str] = None

    @field_validator("month", mode="before")
    @classmethod
    def check_month(cls, v):
        return require_month(v, "month", missing="INVALID_MONTH", invalid="INVALID_MONTH")

    @field_validator("keywords", mode="before")
    @classmethod
    def check_keywords(cls, v):
        return require_text(v, "keywords", missing="INVALID_KEYWORDS")

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, v):
        return require_text(v, "content", missing="INVALID_CONTENT")


class ObservationLogResponse(CamelModel):
    id: int
    child_id: int
    month: str
    keywords: str
    content: str
    created_at: Optional[str] = None


class ObservationLogDeleteResponse(CamelModel):
    message: str
    deleted: ObservationLogResponse
