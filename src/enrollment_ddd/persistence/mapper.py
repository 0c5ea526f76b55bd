"""
ModelMapper: bidirectional mapper between Pydantic aggregates and
SQLAlchemy ``DeclarativeBase`` models.

- Only columns defined in ``__table__`` are written to the DB model;
  relationships are never written (related rows have their own
  repositories).
- ``from_model`` traverses *only* already-loaded relationships, so no
  lazy load (and no implicit IO under ``AsyncSession``) is triggered.
- Bidirectional relationship loops are broken by tracking the ``id(obj)``
  of the objects on the current path.
- ``relationship_depth=0`` (default) ignores relationships entirely.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

from ..exceptions import MappingError

logger = logging.getLogger("enrollment_ddd.persistence.mapper")

T_Entity = TypeVar("T_Entity")


class ModelMapper(Generic[T_Entity]):
    """
    Parameters
    ----------
    entity_cls:
        The Pydantic ``AggregateRoot`` subclass.
    db_model_cls:
        The SQLAlchemy model class for the table.
    relationship_depth:
        Maximum depth for traversing loaded relationships during
        ``from_model()``.
    """

    def __init__(
        self,
        entity_cls: type[T_Entity],
        db_model_cls: type[Any],
        *,
        relationship_depth: int = 0,
    ) -> None:
        self.entity_cls = entity_cls
        self.db_model_cls = db_model_cls
        self._relationship_depth = relationship_depth
        self._columns: frozenset[str] = frozenset(
            db_model_cls.__table__.columns.keys()
        )

    # ------------------------------------------------------------------
    # Domain → DB
    # ------------------------------------------------------------------

    def to_model(self, entity: T_Entity) -> Any:
        """Build a DB model ready for ``session.add()`` / ``session.merge()``."""
        data = entity.model_dump(mode="python")  # type: ignore[attr-defined]
        data = {key: value for key, value in data.items() if key in self._columns}
        return self.db_model_cls(**data)

    # ------------------------------------------------------------------
    # DB → Domain
    # ------------------------------------------------------------------

    def from_model(self, model: Any) -> T_Entity:
        data = self._extract(
            model, depth=self._relationship_depth, ancestors=frozenset()
        )
        try:
            return self.entity_cls.model_validate(data)  # type: ignore[attr-defined,no-any-return]
        except Exception as e:  # noqa: BLE001
            model_info = f"{type(model).__name__}(id={getattr(model, 'id', None)})"
            raise MappingError(
                f"Failed to map DB model {model_info} to domain entity "
                f"{self.entity_cls.__name__}: {e}"
            ) from e

    def from_models(self, models: list[Any]) -> list[T_Entity]:
        return [self.from_model(model) for model in models]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _extract(
        self, model: Any, *, depth: int, ancestors: frozenset[int]
    ) -> dict[str, Any]:
        """Build a dict from *model* without triggering lazy loads."""
        ancestors = ancestors | {id(model)}
        unloaded = self._get_unloaded(model)
        mapper = sa_inspect(type(model))

        data: dict[str, Any] = {
            col.key: getattr(model, col.key)
            for col in mapper.column_attrs
            if col.key not in unloaded
        }
        if depth <= 0:
            return data

        for rel in mapper.relationships:
            if rel.key in unloaded:
                continue
            value = getattr(model, rel.key)
            if value is None:
                data[rel.key] = None
            elif isinstance(value, list):
                data[rel.key] = [
                    self._extract(item, depth=depth - 1, ancestors=ancestors)
                    for item in value
                    if id(item) not in ancestors
                ]
            elif id(value) not in ancestors:
                data[rel.key] = self._extract(
                    value, depth=depth - 1, ancestors=ancestors
                )
        return data

    @staticmethod
    def _get_unloaded(model: Any) -> frozenset[str]:
        try:
            return frozenset(sa_inspect(model).unloaded)
        except NoInspectionAvailable:
            logger.debug("No inspection available for %s", type(model).__name__)
            return frozenset()
