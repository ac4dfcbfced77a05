# blueprints/courses/services.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from data_access import UnitOfWork
from errors import AppValidationError, NotFoundError
from models import CourseInstance, CourseTemplate, Person, TeacherRegistration, TeacherType

log = logging.getLogger(__name__)

COURSE_ALREADY_HAS_A_MAIN_TEACHER = "COURSE_ALREADY_HAS_A_MAIN_TEACHER"
PERSON_ALREADY_REGISTERED_TEACHER_IN_COURSE = "PERSON_ALREADY_REGISTERED_TEACHER_IN_COURSE"

# ===== DTO =====
@dataclass
class PersonOut:
    name: str
    ssn: str

@dataclass
class CourseInstanceOut:
    name: str
    template_id: str
    course_instance_id: int
    main_teacher: str


class CoursesService:
    def __init__(self, uow: UnitOfWork, default_semester: str = "20153"):
        self.uow = uow
        self.default_semester = default_semester

        self.course_instances = uow.get_repository(CourseInstance)
        self.course_templates = uow.get_repository(CourseTemplate)
        self.teacher_registrations = uow.get_repository(TeacherRegistration)
        self.persons = uow.get_repository(Person)

    def add_teacher_to_course(self, course_instance_id: int, model) -> PersonOut:
        """
        Зарегистрировать человека преподавателем экземпляра курса.
        ``model`` — AddTeacherIn (ssn, type). Порядок проверок фиксирован:
        курс -> человек -> основной преподаватель -> повторная регистрация.
        """
        course: Optional[CourseInstance] = self.course_instances.first_by(id=course_instance_id)
        if course is None:
            raise NotFoundError("course_instance", course_instance_id)

        teacher: Optional[Person] = self.persons.first_by(ssn=model.ssn)
        if teacher is None:
            raise NotFoundError("person", model.ssn)

        registered: List[TeacherRegistration] = list(
            self.teacher_registrations.filter_by(course_instance_id=course_instance_id)
        )

        if model.type == TeacherType.MAIN_TEACHER and \
                any(r.type == TeacherType.MAIN_TEACHER for r in registered):
            log.info("registration rejected: %s (course_instance=%s)",
                     COURSE_ALREADY_HAS_A_MAIN_TEACHER, course_instance_id)
            raise AppValidationError(COURSE_ALREADY_HAS_A_MAIN_TEACHER)

        if any(r.ssn == model.ssn for r in registered):
            log.info("registration rejected: %s (course_instance=%s)",
                     PERSON_ALREADY_REGISTERED_TEACHER_IN_COURSE, course_instance_id)
            raise AppValidationError(PERSON_ALREADY_REGISTERED_TEACHER_IN_COURSE)

        out = PersonOut(name=teacher.name, ssn=teacher.ssn)
        self.teacher_registrations.add(TeacherRegistration(
            ssn=model.ssn,
            course_instance_id=course_instance_id,
            type=model.type,
        ))
        self.uow.save()
        log.info("teacher registered: course_instance=%s type=%s",
                 course_instance_id, model.type.value)
        return out

    def get_course_instances_by_semester(self, semester: Optional[str] = None) -> List[CourseInstanceOut]:
        """Экземпляры курсов семестра с именем основного преподавателя ("" если его нет)."""
        if not semester:
            semester = self.default_semester

        templates: Dict[str, CourseTemplate] = {t.course_id: t for t in self.course_templates.all()}

        courses: List[CourseInstanceOut] = []
        for ci in self.course_instances.filter_by(semester_id=semester):
            tpl = templates.get(ci.course_id)
            if tpl is None:
                # как inner join: без шаблона экземпляр не показываем
                continue
            courses.append(CourseInstanceOut(
                name=tpl.name,
                template_id=tpl.course_id,
                course_instance_id=ci.id,
                main_teacher="",
            ))

        for c in courses:
            c.main_teacher = self._main_teacher_name(c.course_instance_id)
        return courses

    def _main_teacher_name(self, course_instance_id: int) -> str:
        reg = self.teacher_registrations.first_by(
            course_instance_id=course_instance_id, type=TeacherType.MAIN_TEACHER
        )
        if reg is None:
            return ""
        person = self.persons.first_by(ssn=reg.ssn)
        return person.name if person else ""
