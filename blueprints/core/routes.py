from __future__ import annotations
import json, logging
from datetime import datetime, timezone

from flask import g, jsonify, request
from flask.logging import default_handler
from werkzeug.wrappers.response import Response

from . import bp                 # используем bp из __init__.py

log = logging.getLogger(__name__)

def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": _utcnow().isoformat(timespec="milliseconds") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in ("event", "path", "method", "status", "duration_ms"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

# модульные логгеры проекта (сервисы, data_access, seed); корневой не трогаем
PROJECT_LOGGERS = ("blueprints", "data_access", "seed")

def _attach_json_handler(logger: logging.Logger) -> None:
    has_json = any(
        isinstance(h, logging.StreamHandler)
        and isinstance(getattr(h, "formatter", None), JSONFormatter)
        for h in logger.handlers
    )
    if not has_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

def _setup_structured_logging(app):
    # свой JSON-хендлер вместо стандартного flask-овского
    app.logger.removeHandler(default_handler)
    _attach_json_handler(app.logger)
    for name in PROJECT_LOGGERS:
        _attach_json_handler(logging.getLogger(name))

@bp.before_app_request
def _start_timer():
    g._req_start = _utcnow()

@bp.after_app_request
def _log_request(response: Response):
    try:
        duration_ms = int((_utcnow() - g._req_start).total_seconds() * 1000)
    except AttributeError:
        duration_ms = None
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
    }
    # логгер уже настроен в _on_register
    log.info("request handled", extra=extra)
    return response

@bp.record_once
def _on_register(state):
    _setup_structured_logging(state.app)

@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": _utcnow().isoformat(timespec="seconds") + "Z",
    })
