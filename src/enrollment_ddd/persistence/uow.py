"""Unit of work over a SQLAlchemy ``AsyncSession``."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

from ..exceptions import SessionManagementError, UnitOfWorkError
from ..ports.unit_of_work import UnitOfWork

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger("enrollment_ddd.uow")


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    Transaction scope for the repositories.

    Pass ``session`` to run inside a session the caller already holds (tests
    do this), or ``session_factory`` to open a session on enter and close it
    on exit::

        factory = create_session_factory(engine)
        async with SQLAlchemyUnitOfWork(session_factory=factory) as uow:
            await students.add(student, uow=uow)
    """

    def __init__(
        self,
        session: AsyncSession | None = None,
        session_factory: Callable[[], AsyncSession] | None = None,
    ) -> None:
        if (session is None) == (session_factory is None):
            which = "both" if session is not None else "neither"
            raise SessionManagementError(
                f"Pass exactly one of 'session' and 'session_factory', got {which}"
            )
        self._session = session
        self._session_factory = session_factory

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise UnitOfWorkError("No session yet; enter the unit of work first")
        return self._session

    async def __aenter__(self) -> SQLAlchemyUnitOfWork:
        if self._session_factory is not None:
            try:
                self._session = self._session_factory()
            except Exception as e:
                logger.error("Could not open session", exc_info=True)
                raise SessionManagementError(f"Could not open session: {e}") from e
        if not self.session.in_transaction():
            await self.session.begin()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            await super().__aexit__(exc_type, exc_val, exc_tb)
        finally:
            # Only a session this unit of work opened is closed here
            if self._session_factory is not None and self._session is not None:
                session, self._session = self._session, None
                await session.close()

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except Exception as e:
            logger.error("Commit failed", exc_info=True)
            with contextlib.suppress(Exception):
                await self.session.rollback()
            raise UnitOfWorkError(f"Commit failed: {e}") from e

    async def rollback(self) -> None:
        if not self.session.in_transaction():
            return
        try:
            await self.session.rollback()
        except Exception as e:
            logger.error("Rollback failed", exc_info=True)
            raise UnitOfWorkError(f"Rollback failed: {e}") from e
