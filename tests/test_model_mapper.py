"""
Unit tests for ModelMapper.

Covers:
- Column-only writes (relationships are never written)
- Relationship depth limits
- Cycle detection in bidirectional relationships
- Error handling (MappingError wrapping)
"""

from __future__ import annotations

import pytest
from sqlalchemy import inspect

from enrollment_ddd.domain import Course, Enrollment, Grade, Student
from enrollment_ddd.exceptions import MappingError
from enrollment_ddd.persistence import (
    CourseModel,
    EnrollmentModel,
    ModelMapper,
    StudentModel,
)


@pytest.fixture
def student_model() -> StudentModel:
    math = CourseModel(id=1, name="Mathematics")
    return StudentModel(
        id=1,
        name="Ann",
        email="ann@example.com",
        age=22,
        enrollments=[
            EnrollmentModel(
                id=10, student_id=1, course_id=1, grade=Grade.A, course=math
            ),
            EnrollmentModel(
                id=11, student_id=1, course_id=1, grade=Grade.C, course=math
            ),
        ],
    )


def test_to_model_writes_columns_only():
    mapper = ModelMapper(Student, StudentModel)
    entity = Student(
        id=3,
        name="Bob",
        email="bob@example.com",
        age=20,
        enrollments=[Enrollment(student_id=3, course_id=1, grade=Grade.B)],
    )

    model = mapper.to_model(entity)

    assert isinstance(model, StudentModel)
    assert (model.id, model.name, model.email, model.age) == (
        3,
        "Bob",
        "bob@example.com",
        20,
    )
    assert "enrollments" in inspect(model).unloaded


def test_to_model_keeps_enum_members():
    mapper = ModelMapper(Enrollment, EnrollmentModel)
    model = mapper.to_model(Enrollment(student_id=1, course_id=2, grade=Grade.E))
    assert model.grade is Grade.E
    assert model.id is None


def test_depth_zero_ignores_relationships(student_model: StudentModel):
    entity = ModelMapper(Student, StudentModel).from_model(student_model)
    assert entity.name == "Ann"
    assert entity.enrollments == []


def test_loaded_relationships_are_mapped(student_model: StudentModel):
    mapper = ModelMapper(Student, StudentModel, relationship_depth=2)

    entity = mapper.from_model(student_model)

    assert entity.enrollments_count == 2
    assert [e.grade for e in entity.enrollments] == [Grade.A, Grade.C]
    assert all(e.course == Course(id=1, name="Mathematics") for e in entity.enrollments)


def test_back_reference_cycle_is_broken(student_model: StudentModel):
    # enrollments[*].student points back at the student
    assert student_model.enrollments[0].student is student_model

    mapper = ModelMapper(Student, StudentModel, relationship_depth=5)
    entity = mapper.from_model(student_model)
    assert entity.enrollments_count == 2


def test_depth_limits_nesting(student_model: StudentModel):
    mapper = ModelMapper(Student, StudentModel, relationship_depth=1)
    entity = mapper.from_model(student_model)
    assert entity.enrollments_count == 2
    assert all(e.course is None for e in entity.enrollments)


def test_from_models(student_model: StudentModel):
    mapper = ModelMapper(Course, CourseModel)
    courses = mapper.from_models(
        [CourseModel(id=1, name="Mathematics"), CourseModel(id=2, name="Physics")]
    )
    assert [c.name for c in courses] == ["Mathematics", "Physics"]


def test_invalid_row_raises_mapping_error():
    mapper = ModelMapper(Student, StudentModel)
    with pytest.raises(MappingError, match="StudentModel\\(id=9\\)"):
        mapper.from_model(StudentModel(id=9, name="Ghost", email="g@example.com"))
