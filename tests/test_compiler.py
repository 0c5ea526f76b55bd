"""Tests for compiling specification dicts into SQLAlchemy statements."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from enrollment_ddd import Grade, StudentFilter
from enrollment_ddd.exceptions import (
    FieldNotFoundError,
    OperatorNotFoundError,
    RelationshipTraversalError,
    SpecificationError,
)
from enrollment_ddd.persistence import (
    StudentModel,
    apply_specification,
    relationship_count_hook,
)

COUNT_HOOKS = [relationship_count_hook("enrollments_count", "enrollments")]


def _compile(student_filter: StudentFilter) -> str:
    stmt = apply_specification(
        select(StudentModel),
        StudentModel,
        student_filter.to_specification().to_dict(),
        hooks=COUNT_HOOKS,
    )
    return str(stmt)


def _apply(data: dict) -> str:
    return str(apply_specification(select(StudentModel), StudentModel, data))


def test_distinct_is_always_applied():
    assert str(apply_specification(select(StudentModel), StudentModel, {})).startswith(
        "SELECT DISTINCT"
    )
    assert _compile(StudentFilter()).startswith("SELECT DISTINCT")


def test_distinct_can_be_disabled():
    stmt = apply_specification(select(StudentModel), StudentModel, {}, distinct=False)
    assert "DISTINCT" not in str(stmt)


def test_scalar_criteria_need_no_join():
    sql = _compile(StudentFilter(name="ann", age_greater_than=20))
    assert "JOIN" not in sql
    assert "lower(students.name) LIKE" in sql
    assert "students.age >" in sql


def test_course_criteria_join_each_table_once():
    sql = _compile(StudentFilter(course_name="math", course_grade=Grade.A))
    assert sql.count("LEFT OUTER JOIN enrollments") == 1
    assert sql.count("LEFT OUTER JOIN courses") == 1


def test_grade_only_skips_course_join():
    sql = _compile(StudentFilter(course_grade=Grade.A))
    assert sql.count("LEFT OUTER JOIN enrollments") == 1
    assert "courses" not in sql


def test_count_criteria_use_subquery_without_join():
    sql = _compile(
        StudentFilter(enrollments_count_greater_than=1, enrollments_count_less_than=4)
    )
    assert "JOIN" not in sql
    assert sql.count("count(*)") == 2


def test_count_subquery_has_its_own_scope():
    sql = _compile(StudentFilter(course_grade=Grade.A, enrollments_count_less_than=5))
    assert sql.count("LEFT OUTER JOIN enrollments") == 1
    # The subquery counts a separate alias and correlates on students only
    subquery = sql[sql.index("(SELECT count(*)") :]
    assert "students.id" in subquery
    assert "FROM enrollments AS" in subquery


def _grade_is(grade: str) -> dict:
    return {
        "op": "any",
        "attr": "enrollments",
        "condition": {"op": "=", "attr": "grade", "val": grade},
    }


def test_each_any_node_gets_its_own_join():
    sql = _apply({"op": "and", "conditions": [_grade_is("A"), _grade_is("B")]})
    assert sql.count("LEFT OUTER JOIN enrollments") == 2


def test_joins_are_shared_inside_one_any_node():
    sql = _apply(
        {
            "op": "any",
            "attr": "enrollments",
            "condition": {
                "op": "and",
                "conditions": [
                    {"op": "icontains", "attr": "course.name", "val": "math"},
                    {"op": "=", "attr": "course.id", "val": 1},
                ],
            },
        }
    )
    assert sql.count("LEFT OUTER JOIN enrollments") == 1
    assert sql.count("LEFT OUTER JOIN courses") == 1


def test_empty_and_adds_no_filter():
    sql = _apply({"op": "and", "conditions": []})
    assert "JOIN" not in sql
    assert sql.startswith("SELECT DISTINCT")


def test_unknown_field_suggests_alternatives():
    with pytest.raises(FieldNotFoundError) as exc_info:
        _apply({"op": "=", "attr": "emial", "val": "x"})
    assert "email" in exc_info.value.suggestions
    assert exc_info.value.path == "emial"


def test_unknown_field_on_related_model():
    with pytest.raises(FieldNotFoundError) as exc_info:
        _apply({"op": "=", "attr": "enrollments.course.title", "val": "x"})
    assert exc_info.value.path == "enrollments.course.title"
    assert exc_info.value.model_name == "CourseModel"


def test_traversing_a_column_is_rejected():
    with pytest.raises(RelationshipTraversalError):
        _apply({"op": "=", "attr": "name.first", "val": "x"})


def test_comparing_a_relationship_is_rejected():
    with pytest.raises(SpecificationError, match="is a relationship"):
        _apply({"op": "=", "attr": "enrollments", "val": 1})


def test_unknown_operator_suggests_alternatives():
    with pytest.raises(OperatorNotFoundError) as exc_info:
        _apply({"op": "icontain", "attr": "name", "val": "a"})
    assert "icontains" in exc_info.value.suggestions


def test_any_requires_condition():
    with pytest.raises(SpecificationError, match="'any' requires"):
        _apply({"op": "any", "attr": "enrollments"})


def test_non_dict_node_is_rejected():
    with pytest.raises(SpecificationError, match="Expected a dict"):
        _apply({"op": "and", "conditions": ["name"]})


def test_hook_resolves_virtual_field():
    def nickname(target, attr):
        return target.name if attr == "nickname" else None

    stmt = apply_specification(
        select(StudentModel),
        StudentModel,
        {"op": "=", "attr": "nickname", "val": "Ann"},
        hooks=[nickname],
    )
    assert "students.name =" in str(stmt)
