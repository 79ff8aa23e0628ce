"""Base class for response builders that turn a result object into an HTTP response."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.responses import Response as HTTPResponse

from aljeers.errors import SerializationError
from aljeers.models import ResponseStructure

logger = logging.getLogger(__name__)

# Recomputed by JSONResponse for the rendered body
_SKIPPED_HEADERS = (b"content-length", b"content-type")


class Response(ABC):
    """Holds a result object together with the active request/response pair.

    ``resp`` is a mutable carrier for the status code and headers, in the same
    way FastAPI injects a ``Response`` parameter into handlers. Anything set on
    it is copied onto the rendered response.
    """

    def __init__(
        self,
        response_object: object,
        req: Request,
        resp: HTTPResponse | None = None,
    ) -> None:
        self.response_object = response_object
        self.req = req
        self.resp = resp if resp is not None else HTTPResponse()

    @abstractmethod
    def get_response_structure(self) -> ResponseStructure:
        """Set the response status and build the envelope for the result object."""

    def render(self) -> JSONResponse:
        structure = self.get_response_structure()
        payload = structure.to_payload()
        try:
            rendered = JSONResponse(payload, status_code=self.resp.status_code)
        except (TypeError, ValueError) as exc:
            raise SerializationError(self.response_object, str(exc)) from exc

        rendered.raw_headers.extend(
            (key, value) for key, value in self.resp.raw_headers
            if key not in _SKIPPED_HEADERS
        )
        logger.debug(
            "Rendered %s for %s %s with status %d",
            type(self).__name__, self.req.method, self.req.url.path, rendered.status_code,
        )
        return rendered
