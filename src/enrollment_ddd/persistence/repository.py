from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import joinedload, selectinload

from ..domain.aggregate import AggregateRoot
from ..domain.entities import Course, Enrollment, Student
from ..exceptions import EntityNotFoundError
from ..ports.repository import IRepository
from .compiler import apply_specification
from .hooks import relationship_count_hook
from .mapper import ModelMapper
from .models import CourseModel, EnrollmentModel, StudentModel
from .uow import SQLAlchemyUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy import Select

    from ..domain.specification import ISpecification
    from ..ports.unit_of_work import UnitOfWork
    from .hooks import ResolutionHook

ID = TypeVar("ID", str, int, UUID)
T = TypeVar("T", bound=AggregateRoot[Any])
UnitOfWorkFactory = Callable[[], SQLAlchemyUnitOfWork]

logger = logging.getLogger("enrollment_ddd.persistence.repository")


class SQLAlchemyRepository(IRepository[T, ID], Generic[T, ID]):
    """
    Async CRUD and specification search for one aggregate type.

    Rows of ``db_model_cls`` are turned into ``entity_cls`` aggregates by a
    :class:`ModelMapper`. Every method takes an optional ``uow``; without
    one, ``uow_factory`` supplies the unit of work whose session is used.
    """

    def __init__(
        self,
        entity_cls: type[T],
        db_model_cls: type[Any],
        uow_factory: UnitOfWorkFactory | None = None,
        *,
        hooks: Sequence[ResolutionHook] | None = None,
        relationship_depth: int = 0,
    ) -> None:
        self.entity_cls = entity_cls
        self.db_model_cls = db_model_cls
        self._uow_factory = uow_factory
        self._hooks = list(hooks or [])
        self._mapper = ModelMapper(
            entity_cls,
            db_model_cls,
            relationship_depth=relationship_depth,
        )

    def _require_uow(self, uow: UnitOfWork | None = None) -> SQLAlchemyUnitOfWork:
        if uow is not None:
            return cast("SQLAlchemyUnitOfWork", uow)
        if self._uow_factory is None:
            raise ValueError("No UnitOfWork provided or configured.")
        return self._uow_factory()

    # -- queries ------------------------------------------------------------

    def _select(self) -> Select[Any]:
        """Base statement for every read. Subclasses add eager loads here."""
        return select(self.db_model_cls)

    # -- CRUD ---------------------------------------------------------------

    async def add(self, entity: T, uow: UnitOfWork | None = None) -> ID:
        active_uow = self._require_uow(uow)
        model = self._mapper.to_model(entity)
        active_uow.session.add(model)
        if entity.id is None:
            await active_uow.session.flush()
            object.__setattr__(entity, "id", model.id)
        return model.id  # type: ignore[no-any-return]

    async def get(self, entity_id: Any, uow: UnitOfWork | None = None) -> T | None:
        active_uow = self._require_uow(uow)
        result = await active_uow.session.execute(
            self._select().where(self.db_model_cls.id == entity_id)
        )
        model = result.scalars().first()
        if model is None:
            return None
        return self._mapper.from_model(model)

    async def require(self, entity_id: Any, uow: UnitOfWork | None = None) -> T:
        entity = await self.get(entity_id, uow=uow)
        if entity is None:
            raise EntityNotFoundError(self.entity_cls.__name__, entity_id)
        return entity

    async def update(self, entity: T, uow: UnitOfWork | None = None) -> ID:
        if entity.id is None:
            raise ValueError(
                f"Cannot update {self.entity_cls.__name__} without an id"
            )
        active_uow = self._require_uow(uow)
        merged = await active_uow.session.merge(self._mapper.to_model(entity))
        return merged.id  # type: ignore[no-any-return]

    async def delete(self, entity_id: Any, uow: UnitOfWork | None = None) -> ID:
        active_uow = self._require_uow(uow)
        await active_uow.session.execute(
            delete(self.db_model_cls).where(self.db_model_cls.id == entity_id)
        )
        return entity_id  # type: ignore[no-any-return]

    async def list_all(
        self,
        entity_ids: list[Any] | None = None,
        uow: UnitOfWork | None = None,
    ) -> list[T]:
        active_uow = self._require_uow(uow)
        query = self._select()
        if entity_ids is not None:
            query = query.where(self.db_model_cls.id.in_(entity_ids))
        result = await active_uow.session.execute(query)
        return [self._mapper.from_model(m) for m in result.scalars().all()]

    # -- search -------------------------------------------------------------

    async def search(
        self,
        specification: ISpecification[T],
        uow: UnitOfWork | None = None,
    ) -> list[T]:
        """Return every aggregate satisfying ``specification``, without duplicates."""
        active_uow = self._require_uow(uow)
        stmt = apply_specification(
            self._select(),
            self.db_model_cls,
            specification.to_dict(),
            hooks=self._hooks,
        )
        logger.debug("Searching %s", self.entity_cls.__name__)
        result = await active_uow.session.execute(stmt)
        return [self._mapper.from_model(m) for m in result.scalars().all()]


class StudentRepository(SQLAlchemyRepository[Student, int]):
    """
    Student persistence.

    Filters may compare the virtual ``enrollments_count`` field, which is
    resolved to a correlated count of the student's enrollments.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory | None = None) -> None:
        super().__init__(
            Student,
            StudentModel,
            uow_factory,
            hooks=[relationship_count_hook("enrollments_count", "enrollments")],
            relationship_depth=2,
        )

    def _select(self) -> Select[Any]:
        # Reads return students with enrollments and courses; the async
        # session cannot lazy-load them after the query.
        return (
            select(StudentModel)
            .options(
                selectinload(StudentModel.enrollments).selectinload(
                    EnrollmentModel.course
                )
            )
            .execution_options(populate_existing=True)
        )

    async def find_with_enrollments(
        self, uow: UnitOfWork | None = None
    ) -> list[Student]:
        """
        Students with at least one enrollment, each carrying its enrollments
        and their courses, loaded in a single round trip.
        """
        active_uow = self._require_uow(uow)
        stmt = (
            select(StudentModel)
            .where(StudentModel.enrollments.any())
            .options(
                joinedload(StudentModel.enrollments).joinedload(
                    EnrollmentModel.course
                )
            )
            .execution_options(populate_existing=True)
        )
        result = await active_uow.session.execute(stmt)
        models = result.unique().scalars().all()
        return [self._mapper.from_model(m) for m in models]


class CourseRepository(SQLAlchemyRepository[Course, int]):
    def __init__(self, uow_factory: UnitOfWorkFactory | None = None) -> None:
        super().__init__(Course, CourseModel, uow_factory)


class EnrollmentRepository(SQLAlchemyRepository[Enrollment, int]):
    def __init__(self, uow_factory: UnitOfWorkFactory | None = None) -> None:
        super().__init__(Enrollment, EnrollmentModel, uow_factory, relationship_depth=1)
