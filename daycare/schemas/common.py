"""Shared request-model plumbing.

Validators raise ``PydanticCustomError`` whose error type is the API error
code, so the request validation handler can surface ``{error, code}`` for the
first failing field without a second lookup table.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from daycare.utils.dates import has_iso_date_format, is_valid_iso_date, is_valid_month
from daycare.utils.params import is_digits


class CamelModel(BaseModel):
    """Base for API models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelRequest(CamelModel):
    """Base for create payloads; defaults are validated so missing fields get codes."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, validate_default=True
    )


def fail(code: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(code, message)


def require_text(
    value: Any,
    label: str,
    *,
    missing: str,
    invalid: str | None = None,
    empty: str | None = None,
) -> str:
    """Return ``value`` stripped, or raise the code matching how it is wrong."""
    if value is None:
        raise fail(missing, f"{label} is required")
    if not isinstance(value, str):
        raise fail(invalid or missing, f"{label} must be a string")
    stripped = value.strip()
    if not stripped:
        raise fail(empty or invalid or missing, f"{label} cannot be empty")
    return stripped


def optional_text(value: Any, label: str, *, invalid: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise fail(invalid, f"{label} must be a string")
    return value.strip()


def require_id(
    value: Any,
    label: str,
    *,
    missing: str,
    invalid: str,
    strict: bool = False,
) -> int:
    """Positive integer id. Digit strings are accepted unless ``strict``."""
    if value is None or value == "":
        raise fail(missing, f"{label} is required")
    if isinstance(value, bool):
        raise fail(invalid, f"{label} must be a positive integer")
    if isinstance(value, int):
        parsed = value
    elif not strict and isinstance(value, str) and is_digits(value.strip()):
        parsed = int(value.strip())
    else:
        raise fail(invalid, f"{label} must be a positive integer")
    if parsed <= 0:
        raise fail(invalid, f"{label} must be a positive integer")
    return parsed


def require_date(
    value: Any,
    label: str,
    *,
    missing: str,
    invalid_format: str,
    invalid_date: str | None = None,
    invalid_type: str | None = None,
) -> str:
    """``YYYY-MM-DD`` naming a real calendar day."""
    if value is None or value == "":
        raise fail(missing, f"{label} is required")
    if not isinstance(value, str):
        raise fail(invalid_type or invalid_format, f"{label} must be a string")
    value = value.strip()
    if not has_iso_date_format(value):
        raise fail(invalid_format, f"{label} must be in YYYY-MM-DD format")
    if not is_valid_iso_date(value):
        raise fail(invalid_date or invalid_format, f"{label} is not a valid date")
    return value


def require_month(value: Any, label: str, *, missing: str, invalid: str) -> str:
    if value is None or value == "":
        raise fail(missing, f"{label} is required")
    if not is_valid_month(value):
        raise fail(invalid, f"{label} must be in YYYY-MM format")
    return value


def string_list(value: Any, label: str, *, invalid: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise fail(invalid, f"{label} must be an array of strings")
    return [v.strip() for v in value if v.strip()]


class MessageResponse(CamelModel):
    message: str
