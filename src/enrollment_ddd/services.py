from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .domain.entities import Student
    from .filters import StudentFilter
    from .ports.repository import IStudentRepository
    from .ports.unit_of_work import UnitOfWork

logger = logging.getLogger("enrollment_ddd.service")


class StudentService:
    """Read access to students, optionally narrowed by a :class:`StudentFilter`."""

    def __init__(self, repository: IStudentRepository) -> None:
        self._repository = repository

    async def find_all(
        self,
        student_filter: StudentFilter | None = None,
        uow: UnitOfWork | None = None,
    ) -> list[Student]:
        if student_filter is None:
            logger.debug("Listing all students")
            return await self._repository.list_all(uow=uow)
        logger.debug(
            "Searching students with %s",
            student_filter.model_dump(exclude_none=True),
        )
        return await self._repository.search(
            student_filter.to_specification(), uow=uow
        )
