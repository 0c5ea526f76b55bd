"""Student, Course and Enrollment aggregates."""

from __future__ import annotations

import enum

from pydantic import Field

from .aggregate import AggregateRoot


class Grade(str, enum.Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"


class Course(AggregateRoot[int]):
    name: str


class Enrollment(AggregateRoot[int]):
    """
    Links one student to one course with a grade.

    ``course`` is only populated when the repository loaded it eagerly.
    (student, course) pairs are not required to be unique.
    """

    student_id: int
    course_id: int
    grade: Grade
    course: Course | None = None


class Student(AggregateRoot[int]):
    name: str
    email: str
    age: int
    enrollments: list[Enrollment] = Field(default_factory=list)

    @property
    def enrollments_count(self) -> int:
        return len(self.enrollments)
