"""
Dynamic student filter.

Every field is optional; a field left as ``None`` adds no constraint and
the constraints that are set are combined with AND::

    StudentFilter(name="ann", age_greater_than=20).to_specification()
    # → AND(name icontains "ann", age > 20)

Course criteria are grouped under a single ``any`` node over
``enrollments``, so a name and a grade must match the same enrollment.
The enrollment count is the virtual ``enrollments_count`` field: in
memory it is ``Student.enrollments_count``, in SQL a correlated count
subquery registered by ``StudentRepository``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .domain.entities import Grade
from .specifications.builder import SpecificationBuilder
from .specifications.operators import SpecificationOperator

if TYPE_CHECKING:
    from .specifications.ast import AndSpecification


class StudentFilter(BaseModel):
    """
    Optional search criteria for students.

    Accepts snake_case field names or their camelCase aliases
    (``ageGreaterThan``, ``courseName``, ...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int | None = None
    name: str | None = None
    email: str | None = None
    age_greater_than: int | None = None
    age_less_than: int | None = None
    enrollments_count_greater_than: int | None = None
    enrollments_count_less_than: int | None = None
    course_name: str | None = None
    course_grade: Grade | None = None

    def to_specification(self) -> AndSpecification:
        """Build the AND of every criterion that is set (match-all if none)."""
        builder = SpecificationBuilder()

        if self.id is not None:
            builder.where("id", SpecificationOperator.EQ, self.id)
        if self.name is not None:
            builder.where("name", SpecificationOperator.ICONTAINS, self.name)
        if self.email is not None:
            builder.where("email", SpecificationOperator.ICONTAINS, self.email)
        if self.age_greater_than is not None:
            builder.where("age", SpecificationOperator.GT, self.age_greater_than)
        if self.age_less_than is not None:
            builder.where("age", SpecificationOperator.LT, self.age_less_than)

        if self.course_name is not None or self.course_grade is not None:
            builder.any_group("enrollments")
            if self.course_name is not None:
                builder.where(
                    "course.name", SpecificationOperator.ICONTAINS, self.course_name
                )
            if self.course_grade is not None:
                builder.where("grade", SpecificationOperator.EQ, self.course_grade)
            builder.end_group()

        if self.enrollments_count_greater_than is not None:
            builder.where(
                "enrollments_count",
                SpecificationOperator.GT,
                self.enrollments_count_greater_than,
            )
        if self.enrollments_count_less_than is not None:
            builder.where(
                "enrollments_count",
                SpecificationOperator.LT,
                self.enrollments_count_less_than,
            )

        return builder.build()
