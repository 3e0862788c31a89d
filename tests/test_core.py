"""Error mapping, deadlines, logging and settings."""

from __future__ import annotations

import asyncio
import json
import logging

import pytest
from pydantic import ValidationError

from buzza_backend.config import Settings
from buzza_backend.core.deadline import with_deadline
from buzza_backend.core.exceptions import (
    AuthenticationError,
    BadInputError,
    BuzzaError,
    IntegrityViolationError,
    ProgramNotFoundError,
    QueryTimeoutError,
    StoreError,
    status_for,
)
from buzza_backend.core.logging import (
    ConsoleFormatter,
    StructuredFormatter,
    redact_sensitive_data,
    request_context,
)


class TestStatusMapping:
    @pytest.mark.parametrize(
        "exc, status_code",
        [
            (ProgramNotFoundError(), 404),
            (BadInputError("invalid before id"), 400),
            (AuthenticationError(), 401),
            (StoreError("query latest program files"), 500),
            (QueryTimeoutError("query latest program files: deadline exceeded"), 500),
            (IntegrityViolationError("too many results (2)"), 500),
            (BuzzaError("plain"), 500),
            (RuntimeError("boom"), 500),
        ],
    )
    def test_status_for(self, exc, status_code):
        assert status_for(exc) == status_code

    def test_unmapped_kind_defaults_to_internal(self):
        err = BuzzaError("odd")
        err.kind = "something-new"
        assert status_for(err) == 500


class TestDeadline:
    async def test_returns_value_in_time(self):
        async def quick():
            return 7

        assert await with_deadline(quick(), 1.0, "op") == 7

    async def test_timeout_raises_query_timeout(self):
        with pytest.raises(QueryTimeoutError) as excinfo:
            await with_deadline(asyncio.sleep(1), 0.01, "query activities by user id")
        assert "query activities by user id" in excinfo.value.message
        assert isinstance(excinfo.value, StoreError)

    async def test_store_errors_pass_through(self):
        async def failing():
            raise StoreError("query latest program files")

        with pytest.raises(StoreError):
            await with_deadline(failing(), 1.0, "op")


def _record(msg: str, data=None) -> logging.LogRecord:
    record = logging.LogRecord("buzza.test", logging.INFO, __file__, 1, msg, None, None)
    if data is not None:
        record.data = data
    return record


class TestLogging:
    def test_redaction(self):
        redacted = redact_sensitive_data(
            {"Authorization": "Bearer abc", "nested": {"token": "t", "keep": 1}, "items": [{"password": "p"}]}
        )
        assert redacted == {
            "Authorization": "<REDACTED>",
            "nested": {"token": "<REDACTED>", "keep": 1},
            "items": [{"password": "<REDACTED>"}],
        }

    def test_structured_formatter_includes_request_context(self):
        token = request_context.set({"request_id": "abc123", "path": "/activities"})
        try:
            line = StructuredFormatter().format(_record("hello", {"token": "secret", "n": 1}))
        finally:
            request_context.reset(token)

        payload = json.loads(line)
        assert payload["message"] == "hello"
        assert payload["request_id"] == "abc123"
        assert payload["path"] == "/activities"
        assert payload["data"] == {"token": "<REDACTED>", "n": 1}

    def test_console_formatter(self):
        line = ConsoleFormatter().format(_record("GET /health -> 200"))
        assert "GET /health -> 200" in line
        assert "buzza.test" in line


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.activity_page_size == 100
        assert settings.query_timeout_seconds == 5.0
        assert settings.auto_create_tables is True

    def test_production_does_not_create_tables(self):
        settings = Settings(_env_file=None, environment="production")
        assert settings.auto_create_tables is False

    def test_page_size_cannot_exceed_cap(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, activity_page_size=500)

    def test_rejects_bad_timeout(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, query_timeout_seconds=0)

    def test_rejects_wildcard_cors(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, cors_origins="https://a.example,*")

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"
