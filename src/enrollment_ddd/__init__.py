"""Student / course / enrollment data access with dynamic student filtering."""

from .domain import Course, Enrollment, Grade, Student
from .exceptions import EnrollmentDDDError, EntityNotFoundError
from .filters import StudentFilter
from .services import StudentService

__all__ = [
    "Course",
    "Enrollment",
    "EnrollmentDDDError",
    "EntityNotFoundError",
    "Grade",
    "Student",
    "StudentFilter",
    "StudentService",
]
