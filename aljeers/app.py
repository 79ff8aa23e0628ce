"""FastAPI application wired with the JSON filter and envelope responses."""

from __future__ import annotations

import json
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from aljeers.audit.logger import AccessLogger
from aljeers.http.filter import JsonFilter
from aljeers.response.json import json_endpoint


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    access_log = os.environ.get("ALJEERS_ACCESS_LOG_PATH")
    access_logger = AccessLogger.from_env(access_log) if access_log else None
    return create_app(access_logger)


def create_app(access_logger: AccessLogger | None = None) -> FastAPI:
    """Create the app with the JSON filter wrapping every request."""
    json_filter = JsonFilter(access_logger=access_logger)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        json_filter.startup()
        try:
            yield
        finally:
            json_filter.shutdown()

    app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)
    app.state.json_filter = json_filter

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @json_endpoint(access_logger=access_logger)
    async def echo(request: Request) -> object:
        body = await request.body()
        if not body:
            return None
        text = body.decode(errors="replace")
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text

    app.add_route("/echo", echo, methods=["GET", "POST", "PUT"])

    # Same instance for lifespan and dispatch
    app.add_middleware(json_filter.bind)

    return app

