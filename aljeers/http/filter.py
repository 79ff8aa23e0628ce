"""ASGI middleware that substitutes a decorated request on every HTTP call."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from aljeers.audit.logger import AccessLogger
from aljeers.http.request import SCOPE_KEY, AljeersRequest
from aljeers.models import AccessEvent, AccessEventType

logger = logging.getLogger(__name__)

NextHandler = Callable[[Request], Awaitable[Response]]


class JsonFilter:
    """Wraps each inbound request in an AljeersRequest and forwards it once.

    The filter never branches or short-circuits, and exceptions raised further
    down the pipeline propagate unchanged.
    """

    def __init__(
        self,
        app: ASGIApp | None = None,
        access_logger: AccessLogger | None = None,
    ) -> None:
        self.app = app
        self.access_logger = access_logger
        self.active = False

    def bind(self, app: ASGIApp) -> JsonFilter:
        """Attach the downstream app; usable as a Starlette middleware factory."""
        self.app = app
        return self

    def startup(self) -> None:
        self.active = True
        logger.debug("JsonFilter started")

    def shutdown(self) -> None:
        self.active = False
        logger.debug("JsonFilter stopped")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if self.app is None:
            raise RuntimeError("JsonFilter has no downstream app to forward to")

        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = AljeersRequest(scope, receive)
        scope[SCOPE_KEY] = request
        self._log_wrapped(request)

        await self.app(scope, receive, send)

    async def do_filter(self, request: Request, chain: NextHandler) -> Response:
        """Wrap *request* and hand it to *chain*, returning its response."""
        wrapped = AljeersRequest.wrap(request)
        request.scope[SCOPE_KEY] = wrapped
        self._log_wrapped(wrapped)
        return await chain(wrapped)

    def _log_wrapped(self, request: AljeersRequest) -> None:
        if self.access_logger:
            self.access_logger.log(AccessEvent(
                event_type=AccessEventType.REQUEST_WRAPPED,
                method=request.method,
                path=request.url.path,
                source_ip=request.client.host if request.client else None,
            ))
