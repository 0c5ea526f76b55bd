"""InMemoryRepository: dict-backed fake for unit tests."""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Any

from ...domain.aggregate import ID, AggregateRoot
from ...domain.entities import Student
from ...exceptions import EntityNotFoundError
from ...ports.repository import IRepository

if TYPE_CHECKING:
    import builtins

    from ...domain.specification import ISpecification
    from ...ports.unit_of_work import UnitOfWork


class InMemoryRepository(IRepository[Any, ID]):
    """In-memory implementation of ``IRepository[T, ID]``.

    Stores aggregates in a plain dict keyed by their ``id``, in insertion
    order. Aggregates added without an ``id`` get the next integer id.
    Specifications are evaluated with ``is_satisfied_by``.
    """

    def __init__(self) -> None:
        self._store: dict[ID, AggregateRoot[ID]] = {}
        self._ids = itertools.count(1)

    async def add(
        self,
        entity: AggregateRoot[ID],
        uow: UnitOfWork | None = None,  # noqa: ARG002
    ) -> ID:
        if entity.id is None:
            object.__setattr__(entity, "id", self._next_id())
        self._store[entity.id] = entity  # type: ignore[index]
        return entity.id  # type: ignore[return-value]

    async def get(
        self,
        entity_id: ID,
        uow: UnitOfWork | None = None,  # noqa: ARG002
    ) -> AggregateRoot[ID] | None:
        return self._store.get(entity_id)

    async def require(
        self, entity_id: ID, uow: UnitOfWork | None = None
    ) -> AggregateRoot[ID]:
        entity = await self.get(entity_id, uow=uow)
        if entity is None:
            raise EntityNotFoundError("Aggregate", entity_id)
        return entity

    async def update(
        self,
        entity: AggregateRoot[ID],
        uow: UnitOfWork | None = None,  # noqa: ARG002
    ) -> ID:
        if entity.id is None:
            raise ValueError("Cannot update an aggregate without an id")
        self._store[entity.id] = entity
        return entity.id

    async def delete(
        self,
        entity_id: ID,
        uow: UnitOfWork | None = None,  # noqa: ARG002
    ) -> ID:
        self._store.pop(entity_id, None)
        return entity_id

    async def list_all(
        self,
        entity_ids: list[ID] | None = None,
        uow: UnitOfWork | None = None,  # noqa: ARG002
    ) -> builtins.list[AggregateRoot[ID]]:
        if entity_ids is None:
            return list(self._store.values())
        return [
            entity
            for entity_id, entity in self._store.items()
            if entity_id in entity_ids
        ]

    async def search(
        self,
        specification: ISpecification[AggregateRoot[ID]],
        uow: UnitOfWork | None = None,  # noqa: ARG002
    ) -> builtins.list[AggregateRoot[ID]]:
        """Search for entities matching the specification (in-memory filtering)."""
        return [
            entity
            for entity in self._store.values()
            if specification.is_satisfied_by(entity)
        ]

    # ── Test helpers ─────────────────────────────────────────────

    def _next_id(self) -> Any:
        candidate = next(self._ids)
        while candidate in self._store:
            candidate = next(self._ids)
        return candidate

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


class InMemoryStudentRepository(InMemoryRepository[int]):
    """Student fake; enrollments are whatever the stored students carry."""

    async def find_with_enrollments(
        self,
        uow: UnitOfWork | None = None,  # noqa: ARG002
    ) -> list[Student]:
        return [
            entity
            for entity in self._store.values()
            if isinstance(entity, Student) and entity.enrollments
        ]
