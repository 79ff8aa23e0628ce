"""JSON request filter and response envelope for ASGI applications."""

from aljeers.errors import AljeersError, SerializationError
from aljeers.http.chain import FilterChain
from aljeers.http.filter import JsonFilter
from aljeers.http.request import AljeersRequest, get_request
from aljeers.models import ResponseStructure
from aljeers.response.base import Response
from aljeers.response.json import JsonResponse, json_endpoint

__all__ = [
    # Exceptions
    "AljeersError",
    "SerializationError",
    # Request side
    "AljeersRequest",
    "FilterChain",
    "JsonFilter",
    "get_request",
    # Response side
    "JsonResponse",
    "Response",
    "ResponseStructure",
    "json_endpoint",
]
