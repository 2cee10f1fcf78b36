"""
Logging setup for the payroll service.

JSON lines in production, coloured console lines in development. Each
request gets a short id that is stamped on every record logged while the
request is being handled, so service and repository lines can be joined
with the access line written by RequestLoggingMiddleware.
"""

import json
import logging
import sys
import time
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from app.core.config import settings

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes every LogRecord has; anything else came in through `extra=`
_STANDARD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message",
    "request_id",
}

# Quiet by default; their INFO output duplicates ours
_NOISY_LOGGERS = ("uvicorn", "uvicorn.access", "sqlalchemy.engine", "aiosqlite", "httpx", "httpcore")


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


def get_request_id() -> Optional[str]:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Copy the current request id onto the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shippers."""

    def __init__(self, service_name: str = "payroll-backend"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": settings.ENVIRONMENT,
            "source": f"{record.module}:{record.lineno}",
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            entry["request_id"] = request_id

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Readable single-line output for a development terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        request_id = getattr(record, "request_id", None) or "-"
        line = f"{timestamp} {record.levelname:<8} [{request_id}] {record.name}: {record.getMessage()}"

        if record.exc_info:
            last = traceback.format_exception(*record.exc_info)[-1].strip()
            line = f"{line}\n  {last}"

        return f"{color}{line}{self.RESET}"


def setup_logging(
    service_name: str = "payroll-backend",
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        service_name: value of the ``service`` key in JSON output
        log_level: overrides LOG_LEVEL; defaults to DEBUG when DEBUG is on, else INFO
        json_logs: overrides JSON_LOGS; defaults to JSON in production only
    """
    level = (log_level or settings.LOG_LEVEL or ("DEBUG" if settings.DEBUG else "INFO")).upper()
    if json_logs is None:
        json_logs = settings.JSON_LOGS if settings.JSON_LOGS is not None else settings.is_production

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JSONFormatter(service_name) if json_logs else ColoredFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("payroll.logging").info(
        f"Logging configured: level={level}, format={'json' if json_logs else 'console'}"
    )


class RequestLoggingMiddleware:
    """
    ASGI middleware that tags each HTTP request with an id, returns it as
    ``X-Request-ID`` and writes one access line when the response is done.
    """

    SKIP_PATHS = ("/health", "/metrics")

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger("payroll.http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = generate_request_id()
        token = _request_id.set(request_id)
        started = time.perf_counter()
        status_code = 500

        async def send_with_request_id(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                message["headers"] = list(message.get("headers", [])) + [
                    (b"x-request-id", request_id.encode())
                ]
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            path = scope.get("path", "/")
            if path not in self.SKIP_PATHS:
                duration_ms = (time.perf_counter() - started) * 1000
                self.logger.log(
                    logging.WARNING if status_code >= 400 else logging.INFO,
                    f"{scope.get('method', '-')} {path} {status_code} {duration_ms:.1f}ms",
                    extra={"status": status_code, "duration_ms": round(duration_ms, 1)},
                )
            _request_id.reset(token)
