from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from enrollment_ddd.config import DatabaseSettings
from enrollment_ddd.domain import Course, Enrollment, Grade, Student
from enrollment_ddd.persistence import (
    CourseRepository,
    EnrollmentRepository,
    SQLAlchemyUnitOfWork,
    StudentRepository,
    create_engine,
    create_session_factory,
    init_schema,
)

# name -> (email, age, [(course, grade), ...])
STUDENTS: dict[str, tuple[str, int, list[tuple[str, Grade]]]] = {
    "Ann": (
        "ann@example.com",
        22,
        [("Mathematics", Grade.A), ("Physics", Grade.B)],
    ),
    "Joanna": (
        "joanna@school.edu",
        30,
        [
            ("Mathematics", Grade.B),
            ("Discrete Math", Grade.A),
            ("Chemistry", Grade.C),
        ],
    ),
    "Bob": ("bob@example.com", 20, []),
    "Carl": (
        "carl@example.com",
        25,
        [
            ("Physics", Grade.A),
            ("Chemistry", Grade.A),
            ("Mathematics", Grade.A),
            ("Discrete Math", Grade.A),
            ("Physics", Grade.B),
        ],
    ),
    "Dana": ("dana@example.com", 28, [("Chemistry", Grade.F)]),
}

COURSES = ["Mathematics", "Physics", "Chemistry", "Discrete Math"]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    eng = create_engine(DatabaseSettings())
    await init_schema(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    factory = create_session_factory(engine)
    async with factory() as sess:
        yield sess


@pytest.fixture
def uow_factory(session: AsyncSession):
    return lambda: SQLAlchemyUnitOfWork(session=session)


@pytest.fixture
def student_repo(uow_factory) -> StudentRepository:
    return StudentRepository(uow_factory=uow_factory)


@pytest.fixture
async def seeded(session: AsyncSession, uow_factory) -> dict[str, int]:
    """Seed the sample school and return student ids by name."""
    courses = CourseRepository()
    students = StudentRepository()
    enrollments = EnrollmentRepository()

    student_ids: dict[str, int] = {}
    async with uow_factory() as uow:
        course_ids = {
            name: await courses.add(Course(name=name), uow=uow) for name in COURSES
        }
        for name, (email, age, enrolled) in STUDENTS.items():
            student_id = await students.add(
                Student(name=name, email=email, age=age), uow=uow
            )
            student_ids[name] = student_id
            for course_name, grade in enrolled:
                await enrollments.add(
                    Enrollment(
                        student_id=student_id,
                        course_id=course_ids[course_name],
                        grade=grade,
                    ),
                    uow=uow,
                )

    # Start every test from an empty identity map
    session.expunge_all()
    return student_ids
