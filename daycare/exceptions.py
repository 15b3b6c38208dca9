"""
Custom exceptions and error handling utilities for the daycare application.
"""

import re
from typing import Any, Dict, Optional


class DaycareException(Exception):
    """Base exception class for all daycare application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__
        super().__init__(message)


class ValidationError(DaycareException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        field: Optional[str] = None,
    ):
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details, error_code=code)


class NotFoundError(DaycareException):
    """Raised when a resource is not found."""

    def __init__(
        self,
        message: str = "Resource not found",
        code: str = "NOT_FOUND",
        resource_type: Optional[str] = None,
    ):
        details = {"resource_type": resource_type} if resource_type else {}
        super().__init__(message, status_code=404, details=details, error_code=code)


class ConflictError(DaycareException):
    """Raised when there's a conflict with the current state."""

    def __init__(self, message: str = "Resource conflict", code: str = "CONFLICT"):
        super().__init__(message, status_code=409, error_code=code)


class DatabaseError(DaycareException):
    """Raised when database operations fail."""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
    ):
        details = {"operation": operation} if operation else {}
        super().__init__(
            message, status_code=500, details=details, error_code="DATABASE_ERROR"
        )


class ExternalServiceError(DaycareException):
    """Raised when the text generation provider fails or returns nothing usable."""

    def __init__(
        self, message: str = "AI generation failed", service: Optional[str] = None
    ):
        details = {"service": service} if service else {}
        super().__init__(
            message,
            status_code=500,
            details=details,
            error_code="AI_GENERATION_FAILED",
        )


def extract_sql_error_message(exception: Exception) -> tuple[str, str]:
    """
    Extract meaningful error message from SQLAlchemy exceptions.

    Returns:
        tuple: (user_friendly_message, technical_details)
    """
    error_str = str(exception)
    lowered = error_str.lower()

    if "column" in lowered and ("does not exist" in lowered or "no such column" in lowered):
        match = re.search(r'column "([^"]*)" does not exist', error_str)
        if match:
            return f"Database column '{match.group(1)}' does not exist", error_str
        return "Database column does not exist", error_str

    elif ("relation" in lowered and "does not exist" in lowered) or "no such table" in lowered:
        match = re.search(r'relation "([^"]*)" does not exist', error_str)
        if match:
            return f"Database table '{match.group(1)}' does not exist", error_str
        return "Database table does not exist", error_str

    elif "syntax error" in lowered:
        return "SQL syntax error in query", error_str

    elif "duplicate key" in lowered or "unique constraint" in lowered:
        return "Duplicate record - this data already exists", error_str

    elif "foreign key constraint" in lowered:
        return "Invalid reference - related record not found", error_str

    elif "not null constraint" in lowered:
        return "Required field is missing", error_str

    return "Database query failed", error_str
