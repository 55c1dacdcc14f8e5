"""Structured logging for sitebuildr-py.

``configure_logging`` sets up structlog for the library and the content
service. The two ASGI middlewares tag every request with a correlation id and
log one line per completed request.
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from litestar.types import ASGIApp, Message, Receive, Scope, Send

CORRELATION_HEADERS = (b"x-correlation-id", b"x-request-id")


def configure_logging(*, debug: bool = False, json_logs: bool | None = None) -> None:
    """Configure structlog.

    Args:
        debug: Log at debug level instead of info.
        json_logs: Render JSON lines instead of the colored console format.
            Defaults to the ``SITEBUILDR_JSON_LOGS`` environment variable.
    """
    if json_logs is None:
        json_logs = os.environ.get("SITEBUILDR_JSON_LOGS", "").lower() in ("1", "true", "yes")

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def _correlation_id(scope: Scope) -> str:
    headers = dict(scope.get("headers", []))
    for name in CORRELATION_HEADERS:
        value = headers.get(name, b"").decode()
        if value:
            return value
    return uuid.uuid4().hex


class CorrelationIdMiddleware:
    """Tags each HTTP request with a correlation id.

    The id comes from ``X-Correlation-ID`` or ``X-Request-ID`` when the client
    sends one. It is stored in ``scope["state"]``, bound to the structlog
    context for the duration of the request and echoed in the response.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        correlation_id = _correlation_id(scope)
        scope.setdefault("state", {})["correlation_id"] = correlation_id

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [*message.get("headers", []), (b"x-correlation-id", correlation_id.encode())]
            await send(message)

        with structlog.contextvars.bound_contextvars(
            correlation_id=correlation_id,
            method=scope.get("method", ""),
            path=scope.get("path", ""),
        ):
            await self.app(scope, receive, send_with_header)


class RequestLoggingMiddleware:
    """Logs the status and duration of every HTTP request.

    Server errors are logged at error level and client errors at warning
    level. Health checks are not logged.
    """

    def __init__(self, app: ASGIApp, *, exclude_paths: set[str] | None = None) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application.
            exclude_paths: Paths that are never logged.
        """
        self.app = app
        self.exclude_paths = exclude_paths if exclude_paths is not None else {"/health"}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        logger = structlog.get_logger(__name__)
        started = time.perf_counter()
        status_code = 500

        async def send_capturing_status(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_capturing_status)
        except Exception:
            logger.exception("Unhandled error while serving request")
            raise
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            if status_code >= 500:  # noqa: PLR2004
                log = logger.error
            elif status_code >= 400:  # noqa: PLR2004
                log = logger.warning
            else:
                log = logger.info
            log("Request completed", status_code=status_code, duration_ms=elapsed_ms)


def get_middleware() -> list[Any]:
    """Logging middleware, outermost first."""
    return [CorrelationIdMiddleware, RequestLoggingMiddleware]
