"""Exceptions raised by aljeers."""

from __future__ import annotations


class AljeersError(Exception):
    """Base class for aljeers errors."""


class SerializationError(AljeersError):
    """Raised when a result object cannot be represented as JSON."""

    def __init__(self, obj: object, reason: str | None = None) -> None:
        self.type_name = type(obj).__name__
        self.reason = reason
        message = f"Cannot serialize object of type {self.type_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
