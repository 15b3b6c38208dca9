import logging
import ssl
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from daycare.config import settings

logger = logging.getLogger(__name__)


def unverified_ssl_context() -> ssl.SSLContext:
    """TLS context for the hosted Postgres, which presents a self-signed chain."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def async_connect_args() -> dict:
    """asyncpg options; other drivers (SQLite in tests) take none."""
    if not settings.is_postgres:
        return {}

    args: dict = {"timeout": 30, "command_timeout": 30}
    if settings.ENVIRONMENT == "prod":
        args["ssl"] = unverified_ssl_context()
        args["server_settings"] = {
            "application_name": "daycare_api",
            "client_encoding": "utf8",
        }
    return args


engine = create_async_engine(
    settings.DATABASE_URI,
    echo=settings.DB_ECHO_QUERIES,
    poolclass=NullPool,
    connect_args=async_connect_args(),
)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session, committed when the handler returns cleanly."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error("Request transaction rolled back: %s", e)
            raise
