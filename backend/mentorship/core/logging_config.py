"""
Logging setup for the mentorship backend.

Every record emitted while a request is being served carries the
correlation id (taken from ``X-Request-ID`` or generated) and the id of the
authenticated user, so log lines from services and repositories can be tied
back to one API call without passing anything through the call stack.

Services attach their own fields through ``extra={"context": {...}}``.
"""

import json
import logging
import logging.handlers
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, g, has_request_context, request

from mentorship.core.config import Settings

CORRELATION_HEADER = "X-Request-ID"
LOG_FILE_NAME = "mentorship.log"

_TEXT_FORMAT = (
    "%(asctime)s %(levelname)-8s [%(correlation_id)s] %(name)s: %(message)s"
)


class RequestContextFilter(logging.Filter):
    """Stamp records with the correlation id and caller of the current request."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.correlation_id = g.get("correlation_id") or "-"
            record.user_id = g.get("current_user_id")
        else:
            record.correlation_id = "-"
            record.user_id = None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "-"),
        }
        user_id = getattr(record, "user_id", None)
        if user_id is not None:
            entry["user_id"] = user_id
        context = getattr(record, "context", None)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Single-line text for local development; context is appended as JSON."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT, datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if context:
            line = f"{line} {json.dumps(context, default=str)}"
        return line


def _build_handlers(settings: Settings, log_dir: Path) -> list:
    formatter = JSONFormatter() if settings.log_json or settings.is_production else TextFormatter()
    context_filter = RequestContextFilter()

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(formatter)
    handlers = [stream]

    if settings.log_to_file:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            rotating = logging.handlers.RotatingFileHandler(
                log_dir / LOG_FILE_NAME,
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            # Files are always JSON
            rotating.setFormatter(JSONFormatter())
            handlers.append(rotating)
        except OSError as e:
            sys.stderr.write(f"log file disabled: {e}\n")

    for handler in handlers:
        handler.addFilter(context_filter)
    return handlers


def setup_logging(
    settings: Settings, app: Optional[Flask] = None, log_dir: Optional[Path] = None
) -> None:
    """
    Replace the root handlers according to ``settings``.

    Args:
        settings: Supplies level, JSON switch and file logging flag
        app: When given, request hooks for correlation ids and access logs
            are registered on it
        log_dir: Directory for the rotating file (defaults to ``./logs``)
    """
    level = logging.getLevelName(str(settings.log_level).upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(level)
    for handler in _build_handlers(settings, log_dir or Path.cwd() / "logs"):
        root.addHandler(handler)

    for noisy in ("werkzeug", "urllib3", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    if app is not None:
        _register_request_hooks(app)

    logging.getLogger("mentorship").debug(
        "Logging configured",
        extra={"context": {"level": logging.getLevelName(level), "json": settings.log_json}},
    )


def _register_request_hooks(app: Flask) -> None:
    access_log = logging.getLogger("mentorship.access")

    @app.before_request
    def assign_correlation_id():
        g.correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        g.started_at = time.perf_counter()

    @app.after_request
    def write_access_log(response):
        started_at = g.get("started_at")
        if started_at is not None:
            access_log.info(
                "%s %s -> %s",
                request.method,
                request.path,
                response.status_code,
                extra={
                    "context": {
                        "status": response.status_code,
                        "duration_ms": round((time.perf_counter() - started_at) * 1000, 2),
                        "remote_addr": request.remote_addr,
                    }
                },
            )
        response.headers[CORRELATION_HEADER] = g.get("correlation_id", "")
        return response


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
