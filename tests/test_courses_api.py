from __future__ import annotations
import pytest

from app import create_app
from data_access import SqlAlchemyRepository
from extensions import db
from models import CourseInstance, CourseTemplate, Person, TeacherRegistration, TeacherType

@pytest.fixture()
def app_ctx():
    app = create_app("dev")
    app.config.update(TESTING=True, SQLALCHEMY_DATABASE_URI="sqlite:///:memory:", DEFAULT_SEMESTER="20153")
    with app.app_context():
        db.create_all()
        db.session.add_all([
            CourseTemplate(course_id="T-514", name="Vefþjónustur"),
            CourseTemplate(course_id="T-111", name="Forritun"),
        ])
        db.session.add_all([
            CourseInstance(id=1, course_id="T-514", semester_id="20153"),
            CourseInstance(id=2, course_id="T-111", semester_id="20153"),
            CourseInstance(id=3, course_id="T-111", semester_id="20161"),
            Person(ssn="1111111111", name="Jane"),
            Person(ssn="2222222222", name="John"),
        ])
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def client(app_ctx):
    return app_ctx.test_client()

def _add(client, course_id, ssn, type_="MAIN_TEACHER"):
    return client.post(f"/api/v1/courses/{course_id}/teachers", json={"ssn": ssn, "type": type_})

def test_add_teacher_created(client):
    r = _add(client, 1, "1111111111")
    assert r.status_code == 201
    assert r.get_json() == {"name": "Jane", "ssn": "1111111111"}
    reg = TeacherRegistration.query.one()
    assert (reg.ssn, reg.course_instance_id, reg.type) == ("1111111111", 1, TeacherType.MAIN_TEACHER)

def test_add_teacher_unknown_course_404(client):
    r = _add(client, 42, "1111111111")
    assert r.status_code == 404
    assert r.get_json() == {"error": "not_found", "entity": "course_instance"}

def test_add_teacher_unknown_person_404(client):
    r = _add(client, 1, "0000000000")
    assert r.status_code == 404
    assert r.get_json()["entity"] == "person"

def test_add_teacher_rule_violations_412(client):
    assert _add(client, 1, "1111111111").status_code == 201

    r = _add(client, 1, "1111111111", "ASSISTANT_TEACHER")
    assert r.status_code == 412
    assert r.get_json()["error"] == "PERSON_ALREADY_REGISTERED_TEACHER_IN_COURSE"

    r = _add(client, 1, "2222222222", "MAIN_TEACHER")
    assert r.status_code == 412
    assert r.get_json()["error"] == "COURSE_ALREADY_HAS_A_MAIN_TEACHER"

    assert TeacherRegistration.query.count() == 1

@pytest.mark.parametrize("body", [
    {},
    {"ssn": "1111111111"},
    {"ssn": "1111111111", "type": "HEAD_CHEF"},
    {"ssn": "   ", "type": "MAIN_TEACHER"},
])
def test_add_teacher_bad_body_422(client, body):
    r = client.post("/api/v1/courses/1/teachers", json=body)
    assert r.status_code == 422
    assert r.get_json()["error"] == "validation_error"

def test_list_courses_default_semester(client):
    _add(client, 1, "1111111111")
    r = client.get("/api/v1/courses")
    assert r.status_code == 200
    items = {c["course_instance_id"]: c for c in r.get_json()}
    assert set(items) == {1, 2}
    assert items[1] == {"name": "Vefþjónustur", "template_id": "T-514",
                        "course_instance_id": 1, "main_teacher": "Jane"}
    assert items[2]["main_teacher"] == ""

    r2 = client.get("/api/v1/courses?semester=")
    assert r2.get_json() == r.get_json()

def test_list_courses_explicit_semester(client):
    r = client.get("/api/v1/courses?semester=20161")
    assert r.status_code == 200
    assert [c["course_instance_id"] for c in r.get_json()] == [3]

def test_list_courses_empty_semester(client):
    r = client.get("/api/v1/courses?semester=19991")
    assert r.status_code == 200
    assert r.get_json() == []

def test_add_teacher_lost_race_409(client, monkeypatch):
    stage = SqlAlchemyRepository.add

    def add_with_competing_row(self, entity):
        # конкурирующий основной преподаватель попадает в ту же фиксацию
        if isinstance(entity, TeacherRegistration):
            db.session.add(TeacherRegistration(ssn="2222222222", course_instance_id=1,
                                               type=TeacherType.MAIN_TEACHER))
        stage(self, entity)

    monkeypatch.setattr(SqlAlchemyRepository, "add", add_with_competing_row)
    r = _add(client, 1, "1111111111")
    assert r.status_code == 409
    assert r.get_json() == {"error": "persistence_error"}
    assert TeacherRegistration.query.count() == 0
