from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv

# Load .env file before importing app modules
load_dotenv()

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import (
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
)

from daycare.api.v1.router import api_router
from daycare.config import settings
from daycare.exceptions import DaycareException, extract_sql_error_message
from daycare.utils.logger import configure_logger

configure_logger()
logger = structlog.get_logger()


def error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "code": code})


def validation_error_code(error: dict) -> str:
    """Map the first pydantic error to an API error code.

    Schema validators raise custom errors whose type already is the code.
    """
    error_type = error.get("type", "")
    if error_type.isupper():
        return error_type
    if error_type == "json_invalid":
        return "INVALID_JSON"
    loc = error.get("loc") or ()
    if loc and loc[0] == "path":
        return "INVALID_ID"
    return "VALIDATION_ERROR"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application."""
    logger.info("Starting up FastAPI application", environment=settings.ENVIRONMENT)
    try:
        yield
    finally:
        logger.info("Shutting down FastAPI application")


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)


# Exception handlers
@app.exception_handler(DaycareException)
async def daycare_exception_handler(
    request: Request, exc: DaycareException
) -> JSONResponse:
    """Handle application exceptions raised by handlers and services."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Application error",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        path=request.url.path,
        method=request.method,
    )

    message = exc.message
    # Database failures carry driver text that stays in the logs.
    if exc.status_code >= 500 and exc.error_code == "DATABASE_ERROR":
        message = "Database operation failed"
    return error_response(exc.status_code, message, exc.error_code)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first invalid field of a request with its error code."""
    errors = exc.errors()
    logger.warning(
        "Request validation error",
        errors=[{"loc": e.get("loc"), "type": e.get("type")} for e in errors],
        path=request.url.path,
        method=request.method,
    )

    if not errors:
        return error_response(400, "Input validation failed", "VALIDATION_ERROR")
    first = errors[0]
    code = validation_error_code(first)
    if code == "INVALID_JSON":
        message = "Request body is not valid JSON"
    else:
        message = first.get("msg", "Input validation failed")
    return error_response(400, message, code)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(
    request: Request, exc: PydanticValidationError
) -> JSONResponse:
    """Handle validation errors raised while building models inside handlers."""
    logger.error(
        "Validation error",
        errors=exc.errors(),
        path=request.url.path,
        method=request.method,
    )
    first = exc.errors()[0] if exc.errors() else {}
    return error_response(
        400, first.get("msg", "Input validation failed"), validation_error_code(first)
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Handle database integrity errors (unique constraints, foreign keys, etc.)."""
    error_msg = str(exc.orig) if exc.orig else str(exc)
    logger.error(
        "Database integrity error",
        error=error_msg,
        path=request.url.path,
        method=request.method,
    )

    lowered = error_msg.lower()
    if "unique" in lowered:
        message = "A record with this information already exists"
    elif "foreign key" in lowered:
        message = "Referenced record does not exist"
    elif "not null" in lowered:
        message = "Required field is missing"
    else:
        message = "Data integrity error"

    return error_response(400, message, "INTEGRITY_ERROR")


@app.exception_handler(OperationalError)
async def operational_error_handler(
    request: Request, exc: OperationalError
) -> JSONResponse:
    """Handle database operational errors (connection issues, etc.)."""
    logger.error(
        "Database operational error",
        error=str(exc.orig) if exc.orig else str(exc),
        path=request.url.path,
        method=request.method,
    )
    return error_response(
        503,
        "Database is temporarily unavailable. Please try again later.",
        "DATABASE_UNAVAILABLE",
    )


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Handle other SQLAlchemy database errors."""
    user_message, technical_details = extract_sql_error_message(exc)
    logger.exception(
        "Database error",
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        technical_details=technical_details,
    )
    return error_response(500, user_message, "DATABASE_ERROR")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTPExceptions."""
    logger.warning(
        "HTTP error",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method,
    )
    return error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for all unhandled exceptions."""
    logger.exception(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
    )
    return error_response(
        500, "An unexpected error occurred. Please try again later.", "INTERNAL_ERROR"
    )


# Set CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)
