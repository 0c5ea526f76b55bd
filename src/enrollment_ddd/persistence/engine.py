"""Engine and session factory construction."""

from __future__ import annotations

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import DatabaseSettings
from .models import Base

logger = logging.getLogger("enrollment_ddd.persistence.engine")


def create_engine(settings: DatabaseSettings | None = None) -> AsyncEngine:
    settings = settings or DatabaseSettings()
    logger.debug(
        "Creating engine for %s",
        make_url(settings.url).render_as_string(hide_password=True),
    )
    return create_async_engine(settings.url, echo=settings.echo)


def create_session_factory(
    engine: AsyncEngine, settings: DatabaseSettings | None = None
) -> async_sessionmaker[AsyncSession]:
    settings = settings or DatabaseSettings()
    return async_sessionmaker(engine, expire_on_commit=settings.expire_on_commit)


async def init_schema(engine: AsyncEngine) -> None:
    """Create every table of the package's models that does not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
