"""Aggregate Root base class with Generic ID support."""

from __future__ import annotations

from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

ID = TypeVar("ID", str, int, UUID)


class AggregateRoot(BaseModel, Generic[ID]):
    """Base class for all Aggregate Roots.

    Generic over ``ID`` to support UUID, int, or str primary keys.
    ``id`` is ``None`` until the storage engine assigns an identity;
    once assigned it must not change.

    Usage::

        class Course(AggregateRoot[int]):
            name: str

        course = Course(name="Mathematics")  # id assigned on add()
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: ID | None = None
