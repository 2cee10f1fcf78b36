"""
Tests for app/core/logging_config.py - formatters and request id propagation.
"""
import json
import logging

import pytest

from app.core import logging_config
from app.core.logging_config import (
    ColoredFormatter,
    JSONFormatter,
    RequestIdFilter,
    RequestLoggingMiddleware,
    get_request_id,
)


def _record(msg="Created employee 1", **extra):
    record = logging.LogRecord("payroll.service", logging.INFO, __file__, 10, msg, None, None)
    record.__dict__.update(extra)
    return record


class TestFormatters:
    def test_json_formatter_fields(self):
        record = _record(request_id="ab12cd34", employee_id=1)

        entry = json.loads(JSONFormatter("payroll-backend").format(record))

        assert entry["service"] == "payroll-backend"
        assert entry["logger"] == "payroll.service"
        assert entry["message"] == "Created employee 1"
        assert entry["request_id"] == "ab12cd34"
        assert entry["extra"] == {"employee_id": 1}

    def test_json_formatter_without_request(self):
        entry = json.loads(JSONFormatter().format(_record(request_id=None)))

        assert "request_id" not in entry
        assert "extra" not in entry

    def test_colored_formatter_shows_request_id(self):
        line = ColoredFormatter().format(_record(request_id="ab12cd34"))

        assert "[ab12cd34]" in line
        assert "payroll.service: Created employee 1" in line


class TestRequestLoggingMiddleware:
    @pytest.mark.asyncio
    async def test_request_id_is_visible_inside_the_request(self):
        seen = {}

        async def app(scope, receive, send):
            seen["request_id"] = get_request_id()
            record = _record()
            RequestIdFilter().filter(record)
            seen["record_id"] = record.request_id
            await send({"type": "http.response.start", "status": 200, "headers": []})
            await send({"type": "http.response.body", "body": b""})

        sent = []

        async def send(message):
            sent.append(message)

        scope = {"type": "http", "method": "GET", "path": "/employees"}
        middleware = RequestLoggingMiddleware(app)
        await middleware(scope, None, send)

        assert len(seen["request_id"]) == 8
        assert seen["record_id"] == seen["request_id"]
        assert (b"x-request-id", seen["request_id"].encode()) in sent[0]["headers"]
        assert get_request_id() is None
        assert "state" not in scope

    @pytest.mark.asyncio
    async def test_failed_request_is_logged_as_500(self, caplog):
        async def app(scope, receive, send):
            raise RuntimeError("boom")

        middleware = RequestLoggingMiddleware(app)

        with caplog.at_level(logging.INFO, logger="payroll.http"):
            with pytest.raises(RuntimeError):
                await middleware({"type": "http", "method": "DELETE", "path": "/employees/1"}, None, None)

        assert any("DELETE /employees/1 500" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_health_checks_are_not_logged(self, caplog):
        async def app(scope, receive, send):
            await send({"type": "http.response.start", "status": 200, "headers": []})

        async def send(message):
            pass

        with caplog.at_level(logging.INFO, logger="payroll.http"):
            await RequestLoggingMiddleware(app)({"type": "http", "method": "GET", "path": "/health"}, None, send)

        assert not [r for r in caplog.records if r.name == "payroll.http"]


def test_setup_logging_installs_one_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        logging_config.setup_logging(log_level="warning", json_logs=True)

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
