"""Alembic entry point; runs migrations through the app's async engine settings."""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

import daycare.models  # noqa: F401
from alembic import context
from daycare.config import settings
from daycare.database import Base, unverified_ssl_context

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URI)
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _configure(**kwargs) -> None:
    context.configure(target_metadata=Base.metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    use_ssl = settings.is_postgres and settings.ENVIRONMENT == "prod"
    section["connect_args"] = {"ssl": unverified_ssl_context()} if use_ssl else {}

    engine = async_engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(lambda conn: _configure(connection=conn))
    await engine.dispose()


if context.is_offline_mode():
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_migrate_online())
