"""
Fluent builder for specification trees.

Example::

    spec = (
        SpecificationBuilder()
        .where("name", "icontains", "ann")
        .any_group("enrollments")
            .where("course.name", "icontains", "math")
            .where("grade", "=", Grade.A)
        .end_group()
        .build()
    )
    # → AND(name icontains "ann",
    #       ANY(enrollments, AND(course.name icontains "math", grade = A)))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .ast import AndSpecification, AnySpecification, AttributeSpecification

if TYPE_CHECKING:
    from .operators import SpecificationOperator


class SpecificationBuilder:
    """
    Conditions at one level are ANDed together. ``any_group(attr)`` opens a
    level whose conditions apply to one item of the collection ``attr``.
    """

    def __init__(self) -> None:
        self._specs: list[Any] = []
        # open any-groups: (collection attr, conditions)
        self._stack: list[tuple[str, list[Any]]] = []

    def where(
        self, attr: str, op: SpecificationOperator | str, val: Any
    ) -> SpecificationBuilder:
        self._current().append(AttributeSpecification(attr, op, val))
        return self

    def any_group(self, attr: str) -> SpecificationBuilder:
        self._stack.append((attr, []))
        return self

    def end_group(self) -> SpecificationBuilder:
        if not self._stack:
            raise ValueError("No open group to close")
        attr, specs = self._stack.pop()
        if not specs:
            raise ValueError(f"Group on '{attr}' has no conditions")
        inner = specs[0] if len(specs) == 1 else AndSpecification(*specs)
        self._current().append(AnySpecification(attr, inner))
        return self

    def build(self) -> AndSpecification:
        """Return the AND of every top-level condition (empty: match-all)."""
        if self._stack:
            raise ValueError(
                f"{len(self._stack)} group(s) still open, "
                f"call end_group() before build()"
            )
        return AndSpecification(*self._specs)

    def _current(self) -> list[Any]:
        return self._stack[-1][1] if self._stack else self._specs
