# blueprints/courses/routes.py
from __future__ import annotations
from dataclasses import asdict

from flask import current_app, jsonify, request
from pydantic import ValidationError

from data_access import SqlAlchemyUnitOfWork
from errors import AppValidationError, NotFoundError, PersistenceError
from . import api_bp
from .schemas import AddTeacherIn
from .services import CoursesService

def _service(uow) -> CoursesService:
    return CoursesService(uow, default_semester=current_app.config.get("DEFAULT_SEMESTER", "20153"))

def _json_err(code: str, http: int = 400, **extra):
    body = {"error": code}
    body.update({k: v for k, v in extra.items() if v is not None})
    return jsonify(body), http

@api_bp.errorhandler(NotFoundError)
def _not_found(ex: NotFoundError):
    return _json_err("not_found", 404, entity=ex.entity)

@api_bp.errorhandler(AppValidationError)
def _precondition_failed(ex: AppValidationError):
    # код причины отдаём как есть — клиент может по нему ветвиться
    return _json_err(ex.code, 412)

@api_bp.errorhandler(PersistenceError)
def _persistence(ex: PersistenceError):
    return _json_err("persistence_error", 409)

@api_bp.get("/courses")
def api_courses_by_semester():
    semester = (request.args.get("semester") or "").strip() or None
    with SqlAlchemyUnitOfWork() as uow:
        items = _service(uow).get_course_instances_by_semester(semester)
    return jsonify([asdict(c) for c in items])

@api_bp.post("/courses/<int:course_instance_id>/teachers")
def api_add_teacher(course_instance_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = AddTeacherIn.model_validate(payload)
    except ValidationError as ve:
        return jsonify({"error": "validation_error", "detail": ve.errors(include_context=False)}), 422

    with SqlAlchemyUnitOfWork() as uow:
        out = _service(uow).add_teacher_to_course(course_instance_id, data)
    return jsonify(asdict(out)), 201
