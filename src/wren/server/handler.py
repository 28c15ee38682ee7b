"""ASGI handler: translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly. Builds the Request,
matches the route, runs the route's ``on_request`` hooks and handler
against a fresh Reply, and sends the produced Response through ASGI.
"""

import logging
from collections.abc import Callable
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren.context import request_var
from wren.errors import HTTPError
from wren.http.reply import Reply
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.router import Router
from wren.server.errors import handle_http_error, handle_internal_error
from wren.server.negotiation import complete
from wren.server.sender import send_response

logger = logging.getLogger("wren.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool = False,
    redirect_status: int = 302,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    token = request_var.set(request)
    reply: Reply | None = None

    try:
        match = router.match(request.method, request.path)
        request = request.with_match(match)
        request_var.set(request)

        route = match.route
        reply = Reply(request, route.contract, redirect_status=redirect_status)

        for hook in route.request_hooks:
            await invoke(hook, request, reply)
            if reply.sent:
                break

        result = None
        if not reply.sent:
            result = await invoke(route.handler, request, reply)
        response = complete(reply, result)

    except HTTPError as exc:
        response = _already_sent(reply, exc) or await handle_http_error(
            exc, request, error_handlers, redirect_status=redirect_status
        )
    except Exception as exc:
        response = _already_sent(reply, exc) or await handle_internal_error(
            exc, request, error_handlers, debug=debug, redirect_status=redirect_status
        )
    finally:
        request_var.reset(token)

    await send_response(response, send)


def _already_sent(reply: Reply | None, exc: Exception) -> Response | None:
    """The produced response when *exc* escaped after the reply was sent."""
    if reply is None or reply.response is None:
        return None
    logger.error(
        "%s raised after the reply was sent; transmitting the sent reply",
        reply.contract.route,
        exc_info=exc,
    )
    return reply.response
