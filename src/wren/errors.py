"""Wren exception hierarchy.

Shared across the router, App, service registration and the reply
builder so every module raises and catches the same types.
"""

from dataclasses import dataclass
from http import HTTPStatus


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when the application or a service declaration is invalid.

    Always raised during setup (route registration, ``register_service``,
    ``App._freeze()``). There is no partial recovery: the app refuses to start.
    """


class ContractViolation(WrenError):
    """Raised when a handler breaks the reply contract.

    Sending twice, sending without a status, sending without the headers
    the response schema requires, or mutating a reply after it was sent.
    These are programming errors; the server turns an uncaught one into a 500.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or by handlers. The ASGI handler catches these
    and dispatches to the matching ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)

    @property
    def reason(self) -> str:
        """Standard reason phrase for the status (``"Not Found"`` for 404)."""
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Error"


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — route exists but not for this HTTP method.

    Carries an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or f"Method not allowed. Allowed methods: {allow_value}",
            headers=(("Allow", allow_value),),
        )
