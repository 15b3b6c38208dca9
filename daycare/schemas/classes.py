from typing import Any, Optional

from pydantic import field_validator

from daycare.schemas.common import CamelModel, CamelRequest, require_text


def _class_text(value: Any, label: str) -> str:
    return require_text(
        value,
        label,
        missing="MISSING_REQUIRED_FIELD",
        invalid="INVALID_FIELD_TYPE",
        empty="EMPTY_FIELD",
    )


class ClassCreate(CamelRequest):
    age: Any = None
    class_name: Any = None

    @field_validator("age", mode="before")
    @classmethod
    def check_age(cls, v):
        return _class_text(v, "age")

    @field_validator("class_name", mode="before")
    @classmethod
    def check_class_name(cls, v):
        return _class_text(v, "className")


class ClassUpdate(CamelModel):
    """Partial update; omitted fields keep their value."""

    age: Optional[str] = None
    class_name: Optional[str] = None

    @field_validator("age", mode="before")
    @classmethod
    def check_age(cls, v):
        return _class_text(v, "age")

    @field_validator("class_name", mode="before")
    @classmethod
    def check_class_name(cls, v):
        return _class_text(v, "className")


class ClassResponse(CamelModel):
    id: int
    age: str
    class_name: str


class ClassDeleteResponse(CamelModel):
    message: str
    deleted_class: ClassResponse
