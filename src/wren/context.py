"""Request-scoped context via ContextVar.

``request_var`` holds the current ``Request`` for this task. It is set by
the ASGI handler before dispatch and reset afterwards, so code deep in a
call stack can reach the request without threading it through.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local otherwise.
    No locks needed.
"""

from contextvars import ContextVar

from wren.http.request import Request

request_var: ContextVar[Request] = ContextVar("wren_request")
"""The current request. Set by the ASGI handler before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()


def get_operation_path() -> str | None:
    """``"<METHOD> <route template>"`` of the current request, if annotated."""
    return request_var.get().operation_path
