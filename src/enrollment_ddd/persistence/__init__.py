from .compiler import apply_specification
from .engine import create_engine, create_session_factory, init_schema
from .hooks import ResolutionHook, relationship_count_hook
from .mapper import ModelMapper
from .models import Base, CourseModel, EnrollmentModel, StudentModel
from .repository import (
    CourseRepository,
    EnrollmentRepository,
    SQLAlchemyRepository,
    StudentRepository,
)
from .uow import SQLAlchemyUnitOfWork

__all__ = [
    "apply_specification",
    "create_engine",
    "create_session_factory",
    "init_schema",
    "ResolutionHook",
    "relationship_count_hook",
    "ModelMapper",
    "Base",
    "CourseModel",
    "EnrollmentModel",
    "StudentModel",
    "CourseRepository",
    "EnrollmentRepository",
    "SQLAlchemyRepository",
    "StudentRepository",
    "SQLAlchemyUnitOfWork",
]
