"""
Compile a specification dict (``spec.to_dict()``) onto a ``Select``.

- Dotted paths (``course.name``) become ``LEFT OUTER JOIN``s against
  ``aliased()`` targets. Within one scope a relationship path is joined
  once and every predicate on it shares that join.
- Each ``any`` node opens its own scope with a fresh alias, so its nested
  predicates must hold for one related row, independently of any other
  ``any`` node on the same relationship.
- ``DISTINCT`` is applied because a one-to-many join multiplies rows.
- Resolution hooks run before column lookup and may turn a virtual field
  into any SQL expression (see ``relationship_count_hook``).
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, inspect, true
from sqlalchemy.orm import aliased

from ..exceptions import (
    FieldNotFoundError,
    OperatorNotFoundError,
    RelationshipTraversalError,
    SpecificationError,
)
from ..specifications.operators import SpecificationOperator

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlalchemy import ColumnElement, Select

    from .hooks import ResolutionHook

logger = logging.getLogger("enrollment_ddd.persistence.compiler")

_SQL_COMPARISONS: dict[SpecificationOperator, Callable[[Any, Any], Any]] = {
    SpecificationOperator.EQ: operator.eq,
    SpecificationOperator.GT: operator.gt,
    SpecificationOperator.LT: operator.lt,
    # lower(col) LIKE '%' || lower(value) || '%', wildcards in value escaped
    SpecificationOperator.ICONTAINS: lambda col, val: col.icontains(
        val, autoescape=True
    ),
}


def apply_specification(
    stmt: Select[Any],
    model: type[Any],
    data: dict[str, Any],
    *,
    hooks: Sequence[ResolutionHook] = (),
    distinct: bool = True,
) -> Select[Any]:
    """
    Return ``stmt`` with the joins and ``WHERE`` clause ``data`` needs.

    ``stmt`` itself is not modified. An empty ``data`` adds no filtering.
    """
    compiler = _Compiler(stmt, hooks)
    if data:
        where_clause = compiler.compile(model, data, path="", scope="")
        stmt = compiler.stmt.where(where_clause)
    if distinct:
        stmt = stmt.distinct()
    logger.debug(
        "Compiled specification on %s with %d join(s)",
        model.__name__,
        len(compiler.joins),
    )
    return stmt


@dataclass
class _Compiler:
    stmt: Select[Any]
    hooks: Sequence[ResolutionHook]
    # join key (scope + dotted relationship path) -> alias
    joins: dict[str, Any] = field(default_factory=dict)

    def compile(
        self, target: Any, data: Any, *, path: str, scope: str
    ) -> ColumnElement[bool]:
        if not isinstance(data, dict):
            raise SpecificationError(
                f"Expected a dict, got {type(data).__name__}", path=path or "<root>"
            )
        op = data.get("op")
        if op == SpecificationOperator.AND:
            conditions = [
                self.compile(target, c, path=path, scope=scope)
                for c in data.get("conditions", [])
            ]
            return and_(*conditions) if conditions else true()
        if op == SpecificationOperator.ANY:
            return self._any(target, data, path=path, scope=scope)
        return self._comparison(target, data, path=path, scope=scope)

    def _any(
        self, target: Any, data: dict[str, Any], *, path: str, scope: str
    ) -> ColumnElement[bool]:
        attr = data.get("attr")
        condition = data.get("condition")
        if not attr or condition is None:
            raise SpecificationError(
                f"'any' requires 'attr' and 'condition': {data}", path=path or "<root>"
            )
        rel_attr = _relationship(target, attr, path)
        rel_path = _join_path(path, attr)
        inner_scope = f"{scope}{rel_path}#{len(self.joins)}/"
        alias = self._join(rel_attr, inner_scope)
        return self.compile(alias, condition, path=rel_path, scope=inner_scope)

    def _comparison(
        self, target: Any, data: dict[str, Any], *, path: str, scope: str
    ) -> ColumnElement[bool]:
        attr = data.get("attr")
        if not attr:
            raise SpecificationError(
                f"Specification missing 'attr': {data}", path=path or "<root>"
            )
        compare = _comparison_for(data.get("op"))
        column = self._resolve(target, attr, path=path, scope=scope)
        return compare(column, data.get("val"))  # type: ignore[no-any-return]

    def _resolve(self, target: Any, attr: str, *, path: str, scope: str) -> Any:
        for hook in self.hooks:
            expr = hook(target, attr)
            if expr is not None:
                return expr

        head, _, rest = attr.partition(".")
        if not rest:
            return _column(target, attr, path)
        rel_attr = _relationship(target, head, path)
        rel_path = _join_path(path, head)
        alias = self._join(rel_attr, scope + rel_path)
        return self._resolve(alias, rest, path=rel_path, scope=scope)

    def _join(self, rel_attr: Any, key: str) -> Any:
        alias = self.joins.get(key)
        if alias is None:
            alias = aliased(rel_attr.property.mapper.class_)
            self.stmt = self.stmt.outerjoin(rel_attr.of_type(alias))
            self.joins[key] = alias
        return alias


def _join_path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _comparison_for(op: Any) -> Callable[[Any, Any], Any]:
    try:
        return _SQL_COMPARISONS[SpecificationOperator(op)]
    except (KeyError, ValueError):
        valid = [o.value for o in SpecificationOperator]
        raise OperatorNotFoundError(str(op), valid) from None


def _relationship(target: Any, name: str, path: str) -> Any:
    mapper = inspect(target).mapper
    if name in mapper.relationships:
        return getattr(target, name)
    if name in mapper.column_attrs:
        raise RelationshipTraversalError(
            name, mapper.class_.__name__, _join_path(path, name)
        )
    raise FieldNotFoundError(
        name,
        mapper.class_.__name__,
        [prop.key for prop in mapper.attrs],
        _join_path(path, name),
    )


def _column(target: Any, name: str, path: str) -> Any:
    mapper = inspect(target).mapper
    if name in mapper.column_attrs:
        return getattr(target, name)
    if name in mapper.relationships:
        raise SpecificationError(
            f"'{name}' on '{mapper.class_.__name__}' is a relationship; "
            f"compare one of its fields or use an 'any' condition",
            path=_join_path(path, name),
        )
    raise FieldNotFoundError(
        name,
        mapper.class_.__name__,
        [prop.key for prop in mapper.attrs],
        _join_path(path, name),
    )
