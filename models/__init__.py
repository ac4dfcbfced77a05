from enum import Enum as PyEnum

from sqlalchemy import Enum, ForeignKey, UniqueConstraint, Index, Integer, text
from sqlalchemy.orm import Mapped, mapped_column

from extensions import db

# ---------- Enums ----------
class TeacherType(PyEnum):
    MAIN_TEACHER = "MAIN_TEACHER"
    ASSISTANT_TEACHER = "ASSISTANT_TEACHER"


# ---------- Справочники (ведутся внешними системами) ----------
class Person(db.Model):
    ssn: Mapped[str] = mapped_column(db.String(20), primary_key=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)

    def __repr__(self):
        return f"<Person {self.ssn} {self.name}>"


class CourseTemplate(db.Model):
    course_id: Mapped[str] = mapped_column(db.String(50), primary_key=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)

    def __repr__(self):
        return f"<CourseTemplate {self.course_id}>"


class CourseInstance(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    course_id: Mapped[str] = mapped_column(ForeignKey("course_template.course_id", ondelete="RESTRICT"), nullable=False)
    semester_id: Mapped[str] = mapped_column(db.String(10), nullable=False, index=True)

    def __repr__(self):
        return f"<CourseInstance {self.id} {self.course_id}/{self.semester_id}>"


# ---------- Регистрации преподавателей ----------
class TeacherRegistration(db.Model):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ssn: Mapped[str] = mapped_column(ForeignKey("person.ssn", ondelete="CASCADE"), nullable=False)
    course_instance_id: Mapped[int] = mapped_column(
        ForeignKey("course_instance.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[TeacherType] = mapped_column(Enum(TeacherType, name="teacher_type"), nullable=False)

    __table_args__ = (
        UniqueConstraint("ssn", "course_instance_id", name="uq_teacher_registration_person_course"),
        # не более одного основного преподавателя на экземпляр курса
        Index(
            "uq_teacher_registration_main_teacher",
            "course_instance_id",
            unique=True,
            sqlite_where=text("type = 'MAIN_TEACHER'"),
            postgresql_where=text("type = 'MAIN_TEACHER'"),
        ),
    )

    def __repr__(self):
        return f"<TeacherRegistration {self.ssn} -> {self.course_instance_id} ({self.type})>"
