"""Shared Pydantic data models for aljeers."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic_core import PydanticSerializationError, to_jsonable_python

from aljeers.errors import SerializationError

# --- Response Models ---


class ResponseStructure(BaseModel):
    """Envelope placed around a result object before it is written out."""

    body: Any = None

    def to_payload(self) -> dict[str, Any]:
        try:
            return {"body": to_jsonable_python(self.body)}
        except PydanticSerializationError as exc:
            raise SerializationError(self.body, str(exc)) from exc


# --- Access Log Models ---


class AccessEventType(str, Enum):
    REQUEST_WRAPPED = "request_wrapped"
    RESPONSE_ENVELOPED = "response_enveloped"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AccessEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AccessEventType
    method: str
    path: str
    source_ip: str | None = None
    status_code: int | None = None
    details: dict[str, object] | None = None
