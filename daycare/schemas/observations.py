from enum import Enum
from typing import Any, Optional

from pydantic import field_validator

from daycare.schemas.common import (
    CamelModel,
    CamelRequest,
    fail,
    optional_text,
    require_date,
    require_id,
    require_text,
    string_list,
)
from daycare.utils.dates import is_valid_time


class ObservationDomain(str, Enum):
    GENERAL = "전반"
    PHYSICAL = "신체"
    COMMUNICATION = "의사소통"
    SOCIAL = "사회"
    ART = "예술"
    NATURE = "자연"


DOMAIN_VALUES = tuple(domain.value for domain in ObservationDomain)


class MediaItem(CamelModel):
    type: str
    url: str
    alt: Optional[str] = None


def _child_id(v: Any) -> int:
    return require_id(v, "childId", missing="MISSING_CHILD_ID", invalid="INVALID_CHILD_ID")


def _date(v: Any) -> str:
    return require_date(v, "date", missing="MISSING_DATE", invalid_format="INVALID_DATE_FORMAT")


def _time(v: Any) -> Optional[str]:
    if v is None or v == "":
        return None
    if not is_valid_time(v):
        raise fail("INVALID_TIME_FORMAT", "time must be in HH:MM format")
    return v


def _domain(v: Any) -> str:
    if v is None or v == "":
        raise fail("MISSING_DOMAIN", "domain is required")
    if v not in DOMAIN_VALUES:
        raise fail("INVALID_DOMAIN", f"domain must be one of: {', '.join(DOMAIN_VALUES)}")
    return v


def _media(v: Any) -> list[dict]:
    if v is None:
        return []
    if not isinstance(v, list):
        raise fail("INVALID_MEDIA_FORMAT", "media must be an array")
    for item in v:
        if (
            not isinstance(item, dict)
            or not isinstance(item.get("type"), str)
            or not isinstance(item.get("url"), str)
        ):
            raise fail("INVALID_MEDIA_FORMAT", "Each media item requires type and url")
    return v


def _linked(v: Any) -> bool:
    if v is None:
        return False
    if not isinstance(v, bool):
        raise fail("INVALID_LINKED_TO_REPORT", "linkedToReport must be a boolean")
    return v


class ObservationCreate(CamelRequest):
    child_id: Any = None
    date: Any = None
    time: Optional[str] = None
    domain: Any = None
    tags: list[str] = []
    summary: Any = None
    detail: Optional[str] = None
    media: list[MediaItem] = []
    author: Any = None
    follow_ups: list[str] = []
    linked_to_report: bool = False

    @field_validator("child_id", mode="before")
    @classmethod
    def check_child_id(cls, v):
        return _child_id(v)

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v):
        return _date(v)

    @field_validator("time", mode="before")
    @classmethod
    def check_time(cls, v):
        return _time(v)

    @field_validator("domain", mode="before")
    @classmethod
    def check_domain(cls, v):
        return _domain(v)

    @field_validator("tags", mode="before")
    @classmethod
    def check_tags(cls, v):
        return string_list(v, "tags", invalid="INVALID_TAGS_FORMAT")

    @field_validator("summary", mode="before")
    @classmethod
    def check_summary(cls, v):
        return require_text(v, "summary", missing="MISSING_SUMMARY", empty="EMPTY_SUMMARY")

    @field_validator("detail", mode="before")
    @classmethod
    def check_detail(cls, v):
        return optional_text(v, "detail", invalid="INVALID_DETAIL") or None

    @field_validator("media", mode="before")
    @classmethod
    def check_media(cls, v):
        return _media(v)

    @field_validator("author", mode="before")
    @classmethod
    def check_author(cls, v):
        return require_text(v, "author", missing="MISSING_AUTHOR", empty="EMPTY_AUTHOR")

    @field_validator("follow_ups", mode="before")
    @classmethod
    def check_follow_ups(cls, v):
        return string_list(v, "followUps", invalid="INVALID_FOLLOWUPS_FORMAT")

    @field_validator("linked_to_report", mode="before")
    @classmethod
    def check_linked(cls, v):
        return _linked(v)


class ObservationUpdate(CamelModel):
    """Partial update; only the fields present in the body change."""

    child_id: Optional[int] = None
    date: Optional[str] = None
    time: Optional[str] = None
    domain: Optional[str] = None
    tags: Optional[list[str]] = None
    summary: Optional[str] = None
    detail: Optional[str] = None
    media: Optional[list[MediaItem]] = None
    author: Optional[str] = None
    follow_ups: Optional[list[str]] = None
    linked_to_report: Optional[bool] = None

    @field_validator("child_id", mode="before")
    @classmethod
    def check_child_id(cls, v):
        return _child_id(v)

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v):
        return _date(v)

    @field_validator("time", mode="before")
    @classmethod
    def check_time(cls, v):
        return _time(v)

    @field_validator("domain", mode="before")
    @classmethod
    def check_domain(cls, v):
        return _domain(v)

    @field_validator("tags", mode="before")
    @classmethod
    def check_tags(cls, v):
        return string_list(v, "tags", invalid="INVALID_TAGS_FORMAT")

    @field_validator("summary", mode="before")
    @classmethod
    def check_summary(cls, v):
        return require_text(v, "summary", missing="EMPTY_SUMMARY")

    @field_validator("detail", mode="before")
    @classmethod
    def check_detail(cls, v):
        return optional_text(v, "detail", invalid="INVALID_DETAIL") or None

    @field_validator("media", mode="before")
    @classmethod
    def check_media(cls, v):
        return _media(v)

    @field_validator("author", mode="before")
    @classmethod
    def check_author(cls, v):
        return require_text(v, "author", missing="EMPTY_AUTHOR")

    @field_validator("follow_ups", mode="before")
    @classmethod
    def check_follow_ups(cls, v):
        return string_list(v, "followUps", invalid="INVALID_FOLLOWUPS_FORMAT")

    @field_validator("linked_to_report", mode="before")
    @classmethod
    def check_linked(cls, v):
        return _linked(v)


class ObservationResponse(CamelModel):
    id: int
    child_id: int
    date: str
    time: Optional[str] = None
    domain: str
    tags: list[str]
    summary: str
    detail: Optional[str] = None
    media: list[MediaItem]
    author: str
    follow_ups: list[str]
    linked_to_report: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ObservationListResponse(CamelModel):
    daily_counts: dict[str, int]
    total_count: int
    entries: list[ObservationResponse]


class ObservationDeleteResponse(CamelModel):
    message: str
    deleted: ObservationResponse


class TagCount(CamelModel):
    tag: str
    count: int


class ObservationMetrics(CamelModel):
    total_count: int
    weekly_average: float
    domain_counts: dict[str, int]
    top_tags: list[TagCount]
    days_since_last: Optional[int] = None
    pinned_count: int
    goal: int
    report_readiness: int
