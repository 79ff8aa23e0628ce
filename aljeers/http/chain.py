"""Explicit filter chaining for handlers that live outside an ASGI stack."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from starlette.requests import Request
from starlette.responses import Response

Endpoint = Callable[[Request], Awaitable[Response]]


class Filter(Protocol):
    async def do_filter(self, request: Request, chain: Endpoint) -> Response: ...


class FilterChain:
    """Runs *filters* in order, then *endpoint*.

    Each filter receives a continuation for the rest of the chain. The chain
    keeps no per-request state, so one instance can serve concurrent calls.
    """

    def __init__(self, filters: Sequence[Filter], endpoint: Endpoint) -> None:
        self._filters = tuple(filters)
        self._endpoint = endpoint

    async def __call__(self, request: Request) -> Response:
        return await self._dispatch(0, request)

    async def _dispatch(self, index: int, request: Request) -> Response:
        if index == len(self._filters):
            return await self._endpoint(request)

        async def call_next(req: Request) -> Response:
            return await self._dispatch(index + 1, req)

        return await self._filters[index].do_filter(request, call_next)
