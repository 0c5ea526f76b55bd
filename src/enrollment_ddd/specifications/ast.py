"""
Specification nodes.

A tree is built from three node types and serialises with ``to_dict()``
into the dictionary consumed by the SQL compiler::

    {"op": "and", "conditions": [...]}
    {"op": "icontains", "attr": "name", "val": "ann"}
    {"op": "any", "attr": "enrollments", "condition": {...}}

``is_satisfied_by`` evaluates the same tree against in-memory aggregates.
"""

from __future__ import annotations

import enum
from typing import Any

from .operators import COMPARISONS, SpecificationOperator


def resolve_field(obj: Any, attr_path: str) -> Any:
    """Follow a dotted path (``course.name``) over attributes or dict keys."""
    for part in attr_path.split("."):
        if obj is None:
            return None
        obj = obj.get(part) if isinstance(obj, dict) else getattr(obj, part, None)
    return obj


class AndSpecification:
    """All children must hold. With no children every candidate matches."""

    def __init__(self, *specifications: Any) -> None:
        self.specifications = specifications

    def is_satisfied_by(self, candidate: Any) -> bool:
        return all(spec.is_satisfied_by(candidate) for spec in self.specifications)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": SpecificationOperator.AND.value,
            "conditions": [spec.to_dict() for spec in self.specifications],
        }


class AttributeSpecification:
    """Compares one (possibly dotted) attribute with a constant."""

    def __init__(self, attr: str, op: SpecificationOperator | str, val: Any) -> None:
        self.attr = attr
        self.op = SpecificationOperator(op)
        if self.op not in COMPARISONS:
            raise ValueError(f"'{self.op.value}' is not a comparison operator")
        self.val = val

    def is_satisfied_by(self, candidate: Any) -> bool:
        return COMPARISONS[self.op](resolve_field(candidate, self.attr), self.val)

    def to_dict(self) -> dict[str, Any]:
        val = self.val.value if isinstance(self.val, enum.Enum) else self.val
        return {"op": self.op.value, "attr": self.attr, "val": val}


class AnySpecification:
    """
    Holds when one item of the collection ``attr`` satisfies ``specification``.

    Every condition nested under the node is checked against that same item,
    so ``course.name`` and ``grade`` below one node must match one enrollment.
    """

    def __init__(self, attr: str, specification: Any) -> None:
        self.attr = attr
        self.specification = specification

    def is_satisfied_by(self, candidate: Any) -> bool:
        items = resolve_field(candidate, self.attr) or ()
        return any(self.specification.is_satisfied_by(item) for item in items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": SpecificationOperator.ANY.value,
            "attr": self.attr,
            "condition": self.specification.to_dict(),
        }
