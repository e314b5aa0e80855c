"""Structured logging for the backend server."""

import logging
import sys
import time
import uuid
from typing import Any

import structlog
from fastapi import Request


def _add_log_level(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict["level"] = method_name
    return event_dict


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog for readable console logs on stdout."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            _add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


async def request_id_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Bind a request id to the log context and log request latency."""
    start = time.perf_counter()

    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(request_id=request_id, path=str(request.url.path))

    response = None
    try:
        response = await call_next(request)
    finally:
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        structlog.get_logger("request").info(
            "request.completed",
            method=request.method,
            status=response.status_code if response else 500,
            duration_ms=duration_ms,
        )
        structlog.contextvars.clear_contextvars()

    response.headers["x-request-id"] = request_id
    return response
