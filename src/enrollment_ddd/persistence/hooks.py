"""
Virtual fields for the SQL compiler.

A resolution hook maps ``(target, attr)`` to a SQL expression, or returns
``None`` to let the compiler look up a real column. ``target`` is the
mapped class or the alias the attribute is being resolved against.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy import and_, func, inspect, select
from sqlalchemy.orm import aliased

ResolutionHook = Callable[[Any, str], Any]


def relationship_count_hook(field_name: str, relationship: str) -> ResolutionHook:
    """
    Resolve ``field_name`` to the number of rows in the one-to-many
    ``relationship`` of the target::

        (SELECT count(*) FROM enrollments AS enrollments_2
         WHERE enrollments_2.student_id = students.id)

    The subquery counts a fresh alias of the related table, so joins the
    outer statement adds for row filtering never change the count.
    """

    def resolve(target: Any, attr: str) -> Any:
        if attr != field_name:
            return None
        prop = inspect(target).mapper.relationships.get(relationship)
        if prop is None:
            return None
        counted = aliased(prop.mapper.class_)
        correlation = [
            getattr(counted, remote.key) == getattr(target, local.key)
            for local, remote in prop.local_remote_pairs
        ]
        return (
            select(func.count())
            .select_from(counted)
            .where(and_(*correlation))
            .correlate(target)
            .scalar_subquery()
        )

    return resolve
