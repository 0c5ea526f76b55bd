"""Repository protocols."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable
from uuid import UUID

from ..domain.aggregate import AggregateRoot

if TYPE_CHECKING:
    from ..domain.entities import Student
    from ..domain.specification import ISpecification
    from .unit_of_work import UnitOfWork

T = TypeVar("T", bound=AggregateRoot[Any])
# Explicitly list constraints to satisfy mypy
ID = TypeVar("ID", str, int, UUID)


@runtime_checkable
class IRepository(Protocol[T, ID]):
    """
    Generic repository interface for state-stored aggregates.

    ``search`` accepts an ``ISpecification[T]`` and returns every match,
    fully materialized, in storage order.
    """

    async def add(self, entity: T, uow: UnitOfWork | None = None) -> ID: ...

    async def get(self, entity_id: ID, uow: UnitOfWork | None = None) -> T | None: ...

    async def require(self, entity_id: ID, uow: UnitOfWork | None = None) -> T: ...

    async def update(self, entity: T, uow: UnitOfWork | None = None) -> ID: ...

    async def delete(self, entity_id: ID, uow: UnitOfWork | None = None) -> ID: ...

    async def list_all(
        self, entity_ids: list[ID] | None = None, uow: UnitOfWork | None = None
    ) -> list[T]: ...

    async def search(
        self,
        specification: ISpecification[T],
        uow: UnitOfWork | None = None,
    ) -> list[T]: ...


@runtime_checkable
class IStudentRepository(IRepository["Student", int], Protocol):
    """Student repository with the eager enrollment query."""

    async def find_with_enrollments(
        self, uow: UnitOfWork | None = None
    ) -> list[Student]: ...
