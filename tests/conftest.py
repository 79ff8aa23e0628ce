"""Shared test fixtures for aljeers."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from starlette.requests import Request

from aljeers.audit.logger import AccessLogger
from aljeers.models import AccessEvent, AccessEventType


@pytest.fixture
def mock_access_logger() -> MagicMock:
    return MagicMock(spec=AccessLogger)


@pytest.fixture
def access_log_path(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "access.jsonl"


def make_scope(**kwargs: object) -> dict[str, object]:
    """Factory for an HTTP ASGI scope with sensible defaults."""
    defaults: dict[str, object] = {
        "type": "http",
        "method": "GET",
        "path": "/items",
        "query_string": b"",
        "headers": [(b"host", b"test")],
        "client": ("10.0.0.1", 1234),
        "server": ("test", 80),
        "scheme": "http",
    }
    defaults.update(kwargs)
    return defaults


def make_request(**kwargs: object) -> Request:
    return Request(make_scope(**kwargs))


def make_access_event(**kwargs: object) -> AccessEvent:
    """Factory for AccessEvent with sensible defaults."""
    defaults: dict[str, object] = {
        "event_type": AccessEventType.REQUEST_WRAPPED,
        "method": "GET",
        "path": "/items",
    }
    defaults.update(kwargs)
    return AccessEvent(**defaults)  # type: ignore[arg-type]
