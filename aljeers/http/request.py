"""Decorated request handed to downstream handlers by the JSON filter."""

from __future__ import annotations

from starlette.requests import Request, empty_receive
from starlette.types import Receive, Scope

# Scope key under which JsonFilter stores the decorated request
SCOPE_KEY = "aljeers.request"


class AljeersRequest(Request):
    """Request decorator.

    Shares the scope and receive channel of the request it wraps, so reading
    headers or the body through it is the same as reading the original.
    """

    def __init__(
        self,
        scope: Scope,
        receive: Receive = empty_receive,
        wrapped: Request | None = None,
    ) -> None:
        super().__init__(scope, receive)
        self._wrapped = wrapped

    @classmethod
    def wrap(cls, request: Request) -> AljeersRequest:
        return cls(request.scope, request.receive, wrapped=request)

    @property
    def wrapped(self) -> Request | None:
        return self._wrapped


def get_request(scope: Scope) -> AljeersRequest:
    """Return the decorated request JsonFilter stored in *scope*."""
    try:
        return scope[SCOPE_KEY]
    except KeyError:
        raise LookupError("No decorated request in scope; is JsonFilter installed?") from None
