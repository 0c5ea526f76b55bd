from sqlalchemy import Enum, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from ..domain.entities import Grade


class Base(DeclarativeBase):
    """Declarative base for all SQLAlchemy models in this package."""


class CourseModel(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, index=True)

    enrollments: Mapped[list["EnrollmentModel"]] = relationship(
        back_populates="course"
    )


class StudentModel(Base):
    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String)
    email: Mapped[str] = mapped_column(String)
    age: Mapped[int] = mapped_column(Integer)

    enrollments: Mapped[list["EnrollmentModel"]] = relationship(
        back_populates="student"
    )


class EnrollmentModel(Base):
    """
    Student ↔ course link. No unique constraint on (student_id, course_id):
    a student may enroll in the same course more than once.
    """

    __tablename__ = "enrollments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(ForeignKey("students.id"), index=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id"), index=True)
    grade: Mapped[Grade] = mapped_column(Enum(Grade))

    student: Mapped[StudentModel] = relationship(back_populates="enrollments")
    course: Mapped[CourseModel] = relationship(back_populates="enrollments")
