"""Error handling pipeline for wren requests.

Maps HTTPError exceptions and unexpected failures to Responses, using
registered error handlers or a JSON default::

    {"statusCode": 404, "error": "Not Found", "message": "No route matches GET '/x'"}
"""

import inspect
import json as json_module
import logging
from collections.abc import Callable
from typing import Any

from wren._internal.invoke import invoke
from wren.errors import HTTPError
from wren.http.reply import Reply
from wren.http.request import Request
from wren.http.response import JSON_CONTENT_TYPE, Response
from wren.server.negotiation import complete

logger = logging.getLogger("wren.server")


def default_error_response(status: int, reason: str, message: str) -> Response:
    """JSON error body in the shape API clients expect."""
    body = {"statusCode": status, "error": reason, "message": message}
    return Response(
        body=json_module.dumps(body).encode("utf-8"),
        status=status,
        content_type=JSON_CONTENT_TYPE,
    )


def find_error_handler(
    error_handlers: dict[int | type, Callable[..., Any]],
    exc: Exception,
    status: int,
) -> Callable[..., Any] | None:
    """Most specific handler: exact exception type, then status, then base classes."""
    handler = error_handlers.get(type(exc)) or error_handlers.get(status)
    if handler is not None:
        return handler
    for cls in type(exc).__mro__[1:]:
        handler = error_handlers.get(cls)
        if handler is not None:
            return handler
    return None


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    status: int,
    *,
    redirect_status: int = 302,
) -> Response:
    """Invoke a user-registered error handler.

    Error handlers get a fresh reply (no route contract) preset to the
    error status, and may accept ``()``, ``(request)``, ``(request, reply)``
    or ``(request, reply, exc)``.
    """
    reply = Reply(request, redirect_status=redirect_status).status(status)
    arity = len(inspect.signature(handler).parameters)
    args = (request, reply, exc)[: min(arity, 3)]
    result = await invoke(handler, *args)
    return complete(reply, result)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    *,
    redirect_status: int = 302,
) -> Response:
    """Map an HTTPError to a Response using registered error handlers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    handler = find_error_handler(error_handlers, exc, exc.status)
    if handler is not None:
        try:
            return await call_error_handler(
                handler, request, exc, exc.status, redirect_status=redirect_status
            )
        except Exception:
            logger.exception("Error handler for %s failed", type(exc).__name__)
            return default_error_response(500, "Internal Server Error", "Internal Server Error")

    response = default_error_response(exc.status, exc.reason, exc.detail or exc.reason)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    *,
    debug: bool,
    redirect_status: int = 302,
) -> Response:
    """Handle unexpected exceptions (including contract violations) as 500s."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = find_error_handler(error_handlers, exc, 500)
    if handler is not None:
        try:
            return await call_error_handler(
                handler, request, exc, 500, redirect_status=redirect_status
            )
        except Exception:
            logger.exception("Error handler for %s failed", type(exc).__name__)

    message = f"{type(exc).__name__}: {exc}" if debug else "Internal Server Error"
    return default_error_response(500, "Internal Server Error", message)
