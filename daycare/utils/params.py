"""Query-string parsing that fails with the API's error codes."""

import re

from daycare.exceptions import ValidationError
from daycare.utils.dates import has_iso_date_format, is_valid_iso_date

# ASCII only; str.isdigit() also accepts digits int() cannot parse, such as "²".
DIGITS_RE = re.compile(r"[0-9]+")
SIGNED_DIGITS_RE = re.compile(r"-?[0-9]+")


def is_digits(value: str) -> bool:
    return DIGITS_RE.fullmatch(value) is not None


def parse_id(value: str | None, code: str, label: str = "ID") -> int:
    """Parse a required positive integer id from the query string."""
    parsed = parse_optional_id(value, code, label)
    if parsed is None:
        raise ValidationError(f"Valid {label} is required", code)
    return parsed


def parse_optional_id(value: str | None, code: str, label: str = "ID") -> int | None:
    if value is None or value == "":
        return None
    stripped = value.strip()
    if not is_digits(stripped) or int(stripped) <= 0:
        raise ValidationError(f"{label} must be a positive integer", code)
    return int(stripped)


def parse_date(
    value: str | None,
    *,
    missing_code: str | None = None,
    format_code: str,
    invalid_code: str | None = None,
    label: str = "date",
) -> str | None:
    """Validate an optional ``YYYY-MM-DD`` query value.

    Returns None for an absent value unless ``missing_code`` is given.
    """
    if value is None or value == "":
        if missing_code:
            raise ValidationError(f"{label} is required", missing_code)
        return None
    if not has_iso_date_format(value):
        raise ValidationError(f"{label} must be in YYYY-MM-DD format", format_code)
    if not is_valid_iso_date(value):
        raise ValidationError(f"{label} is not a valid date", invalid_code or format_code)
    return value


def parse_bounded_int(
    value: str | None,
    *,
    default: int,
    minimum: int,
    maximum: int | None,
    code: str,
    label: str,
) -> int:
    """Parse limit/offset style values; values above ``maximum`` are clamped."""
    if value is None or value == "":
        return default
    stripped = value.strip()
    if not SIGNED_DIGITS_RE.fullmatch(stripped):
        raise ValidationError(f"{label} must be an integer", code)
    parsed = int(stripped)
    if parsed < minimum:
        raise ValidationError(f"{label} must be at least {minimum}", code)
    if maximum is not None and parsed > maximum:
        return maximum
    return parsed


def ensure_range(start: str | None, end: str | None, code: str = "INVALID_DATE_RANGE"):
    """Reject ranges whose start falls after their end; ISO strings compare in order."""
    if start and end and start > end:
        raise ValidationError("Start must not be after end", code)
