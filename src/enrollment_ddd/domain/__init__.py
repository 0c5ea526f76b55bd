"""Domain layer: aggregates and the specification protocol."""

from .aggregate import ID, AggregateRoot
from .entities import Course, Enrollment, Grade, Student
from .specification import ISpecification

__all__ = [
    "ID",
    "AggregateRoot",
    "Course",
    "Enrollment",
    "Grade",
    "ISpecification",
    "Student",
]
