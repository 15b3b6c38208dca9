from typing import Any, Optional

from pydantic import field_validator

from daycare.schemas.common import CamelModel, CamelRequest, require_date, require_id, require_text


def _name(v: Any) -> str:
    return require_text(
        v, "name", missing="MISSING_NAME", invalid="INVALID_NAME_TYPE", empty="EMPTY_NAME"
    )


def _birthdate(v: Any) -> str:
    return require_date(
        v,
        "birthdate",
        missing="MISSING_BIRTHDATE",
        invalid_format="INVALID_BIRTHDATE_FORMAT",
        invalid_date="INVALID_BIRTHDATE",
    )


def _class_id(v: Any) -> int:
    return require_id(v, "classId", missing="INVALID_CLASS_ID", invalid="INVALID_CLASS_ID")


class ChildCreate(CamelRequest):
    """Schema for creating a new child"""

    name: Any = None
    birthdate: Any = None
    class_id: Any = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        return _name(v)

    @field_validator("birthdate", mode="before")
    @classmethod
    def check_birthdate(cls, v):
        return _birthdate(v)

    @field_validator("class_id", mode="before")
    @classmethod
    def check_class_id(cls, v):
        return _class_id(v)


class ChildUpdate(CamelModel):
    """Schema for updating a child"""

    name: Optional[str] = None
    birthdate: Optional[str] = None
    class_id: Optional[int] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v):
        return _name(v)

    @field_validator("birthdate", mode="before")
    @classmethod
    def check_birthdate(cls, v):
        return _birthdate(v)

    @field_validator("class_id", mode="before")
    @classmethod
    def check_class_id(cls, v):
        return _class_id(v)


class ChildResponse(CamelModel):
    """Schema for child response"""

    id: int
    name: str
    birthdate: str
    class_id: int
    class_name: Optional[str] = None
    class_age: Optional[str] = None


class DeletedRecordCounts(CamelModel):
    development_evaluations: int
    observation_logs: int
    observations: int
    daily_observations: int


class ChildDeleteResponse(CamelModel):
    message: str
    deleted_child: ChildResponse
    deleted_record_counts: DeletedRecordCounts
