from __future__ import annotations

import time
import uuid
from collections.abc import Callable

import structlog
from fastapi import FastAPI, Request, Response

from db.logging import configure_logging, logger

__all__ = ["add_request_logging", "configure_logging", "logger"]


def add_request_logging(app: FastAPI) -> None:
    """One structured line per request; everything logged while handling it carries the same request_id."""

    @app.middleware("http")
    async def _request_log(request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        start = time.perf_counter()
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            resp = await call_next(request)
            logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=resp.status_code,
                latency_ms=int((time.perf_counter() - start) * 1000),
            )
        resp.headers["X-Request-ID"] = request_id
        return resp
