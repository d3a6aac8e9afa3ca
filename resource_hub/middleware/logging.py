"""
Structured request logging.

Each request gets an id (taken from ``X-Request-ID`` or generated) that is
echoed on the response and stamped on every log record emitted while the
request is served. Render requests also carry the block kind they asked for.
"""

import json
import logging
import re
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from datetime import datetime, timezone

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_RENDER_PATH = re.compile(r"/(?:blocks|shortcodes)/([^/]+)/render$")
_QUIET_PATHS = frozenset({"/health"})
_RECORD_FIELDS = ("method", "path", "status_code", "duration_ms", "block_kind")


def get_request_id() -> str:
    return request_id_var.get("")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record; request fields are copied when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
        }
        entry.update({field: getattr(record, field) for field in _RECORD_FIELDS if hasattr(record, field)})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, logger_name: str = "resource_hub.access"):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                self._access_log(request, 500, started, f"{type(exc).__name__}: {exc}")
                raise
            response.headers[REQUEST_ID_HEADER] = request_id
            self._access_log(request, response.status_code, started)
            return response
        finally:
            request_id_var.reset(token)

    def _access_log(self, request: Request, status_code: int, started: float, error: str | None = None) -> None:
        path = request.url.path
        if path in _QUIET_PATHS:
            return
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        extra = {"method": request.method, "path": path, "status_code": status_code, "duration_ms": duration_ms}
        match = _RENDER_PATH.search(path)
        if match:
            extra["block_kind"] = match.group(1)

        message = f"{request.method} {path} -> {status_code} in {duration_ms}ms"
        if error:
            message = f"{message} ({error})"
        self.logger.log(_level_for(status_code), message, extra=extra)


def setup_structured_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """
    Install a single stream handler on the root logger.

    Args:
        log_level: level for the root and ``resource_hub`` loggers
        json_format: emit JSON lines instead of the plain text format
    """
    level = logging.getLevelName(log_level.upper())
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("resource_hub").setLevel(level)
    for noisy in ("uvicorn", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
