"""JSON envelope response: ``{"body": <result>}`` with status 200."""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response as HTTPResponse

from aljeers.audit.logger import AccessLogger
from aljeers.http.request import SCOPE_KEY
from aljeers.models import AccessEvent, AccessEventType, ResponseStructure
from aljeers.response.base import Response


class JsonResponse(Response):
    """Envelopes a result object under ``body`` and always answers 200.

    The status does not vary with the result, so callers cannot signal
    failure through it. Use a plain Starlette response for error paths.
    """

    def get_response_structure(self) -> ResponseStructure:
        self.resp.status_code = 200
        return ResponseStructure(body=self.response_object)


Handler = Callable[[Request], Awaitable[object]]


def json_endpoint(
    handler: Handler | None = None,
    *,
    access_logger: AccessLogger | None = None,
) -> Callable[..., object]:
    """Turn ``async def handler(request) -> result`` into a Starlette endpoint.

    The handler receives the decorated request when JsonFilter is installed,
    and its return value is rendered through JsonResponse.
    """

    def decorator(func: Handler) -> Callable[[Request], Awaitable[HTTPResponse]]:
        @functools.wraps(func)
        async def endpoint(request: Request) -> HTTPResponse:
            req = request.scope.get(SCOPE_KEY, request)
            result = await func(req)
            rendered = JsonResponse(result, req).render()
            if access_logger:
                access_logger.log(AccessEvent(
                    event_type=AccessEventType.RESPONSE_ENVELOPED,
                    method=req.method,
                    path=req.url.path,
                    source_ip=req.client.host if req.client else None,
                    status_code=rendered.status_code,
                ))
            return rendered

        return endpoint

    if handler is not None:
        return decorator(handler)
    return decorator
