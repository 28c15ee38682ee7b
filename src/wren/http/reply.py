"""Reply builder — the only sanctioned way for a handler to respond.

A ``Reply`` is created per request and handed to the handler next to the
request. It is a small state machine::

    Idle --status()/code()--> Idle --header()/headers()--> Idle --send()/redirect()--> Sent

Any number of ``status``/``header`` calls may happen before the terminal
``send`` (or ``redirect``). ``send`` checks the route's response contract:
a status must be selected (unless exactly one is declared) and every header
the selected status's schema requires must be present. Once sent, the
reply is frozen; every further mutation raises ``ContractViolation``.

Usage::

    def list_pets(request, reply):
        pets = store.all()
        return reply.status(200).header("x-total", len(pets)).send(pets)
"""

from __future__ import annotations

from collections.abc import Generator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from wren.errors import ContractViolation
from wren.http.response import Response, serialize_payload
from wren.schema.contract import ResponseContract

if TYPE_CHECKING:
    from wren.http.request import Request

# RFC 9110: 1xx, 204 and 304 responses carry no content.
_NO_BODY = frozenset({204, 304})


@dataclass(slots=True)
class ReplyState:
    """Mutable per-request reply state. Owned by exactly one ``Reply``."""

    status: int | None = None
    headers: dict[str, Any] = field(default_factory=dict)
    sent: bool = False


@dataclass(frozen=True, slots=True)
class ReplyToken:
    """Terminal marker returned by ``send()`` and ``redirect()``.

    Awaitable (resolves to itself) so async handlers may ``await`` or
    ``return`` it interchangeably. Carries what was transmitted.
    """

    status: int
    headers: tuple[tuple[str, str], ...] = ()

    def __await__(self) -> Generator[Any, None, ReplyToken]:
        yield from ()
        return self


class Reply:
    """Fluent, single-use response builder bound to one request.

    Status and header calls return the reply itself so they chain;
    ``send`` and ``redirect`` return a ``ReplyToken``.
    """

    __slots__ = ("_contract", "_redirect_status", "_response", "_state", "request")

    def __init__(
        self,
        request: Request,
        contract: ResponseContract | None = None,
        *,
        redirect_status: int = 302,
    ) -> None:
        self.request = request
        self._contract = contract or ResponseContract(f"{request.method} {request.route_path}")
        self._redirect_status = redirect_status
        self._state = ReplyState()
        self._response: Response | None = None

    def __repr__(self) -> str:
        state = "sent" if self._state.sent else "idle"
        return f"<Reply {self._contract.route} status={self._state.status} {state}>"

    # -- Introspection --

    @property
    def sent(self) -> bool:
        """True once ``send`` or ``redirect`` has succeeded."""
        return self._state.sent

    @property
    def status_code(self) -> int | None:
        """The selected status, or ``None`` if none was selected yet."""
        return self._state.status

    @property
    def contract(self) -> ResponseContract:
        return self._contract

    @property
    def response(self) -> Response | None:
        """The produced response; ``None`` until the reply is sent."""
        return self._response

    # -- Status --

    def status(self, code: int) -> Reply:
        """Select the response status. The last call before ``send`` wins."""
        self._check_open("status")
        contract = self._contract
        if contract.declared and not contract.statuses:
            msg = f"{contract.route} - has no response; cannot select status {code}"
            raise ContractViolation(msg)
        if not contract.allows(code):
            declared = ", ".join(contract.statuses)
            msg = f"{contract.route} does not declare status {code} (declared: {declared})"
            raise ContractViolation(msg)
        self._state.status = code
        return self

    code = status

    # -- Headers --

    def header(self, name: str, value: Any) -> Reply:
        """Set one header. Names are case-insensitive and stored lower-cased."""
        self._check_open("header")
        self._state.headers[name.lower()] = value
        return self

    def headers(self, values: Mapping[str, Any]) -> Reply:
        """Set several headers at once; other accumulated headers are kept."""
        self._check_open("headers")
        for name, value in values.items():
            self._state.headers[name.lower()] = value
        return self

    def get_header(self, name: str) -> Any:
        """Value previously set for *name*, or ``None``."""
        return self._state.headers.get(name.lower())

    def get_headers(self) -> dict[str, Any]:
        """A copy of every header set so far."""
        return dict(self._state.headers)

    # -- Route identity --

    def matches(self, route: str) -> bool:
        """Whether this reply is handling *route* (``"GET /pets/{id}"``).

        Lets a handler shared between routes branch on which contract it
        is serving. Pure; never raises.
        """
        return f"{self.request.method} {self.request.route_path}" == route

    def as_reply(self) -> Reply:
        """Return the reply itself."""
        return self

    # -- Terminal operations --

    def send(self, payload: Any = None) -> ReplyToken:
        """Produce the response and mark the reply as sent.

        Raises ``ContractViolation`` if the reply was already sent, if no
        status can be determined, or if a header required by the selected
        status's schema is missing or set to ``None``.
        """
        self._check_open("send")
        status = self._resolve_status()
        self._check_required_headers(status)

        body, default_type = serialize_payload(payload)
        headers = dict(self._state.headers)
        content_type = headers.pop("content-type", None)
        if content_type is None and body:
            content_type = default_type
        if 100 <= status < 200 or status in _NO_BODY:
            body, content_type = b"", None

        self._response = Response(
            body=body,
            status=status,
            content_type=None if content_type is None else str(content_type),
            headers=_header_pairs(headers),
        )
        self._state.status = status
        self._state.sent = True
        return ReplyToken(status=status, headers=self._response.headers)

    def redirect(self, status_or_url: int | str, url: str | None = None) -> ReplyToken:
        """Redirect: ``redirect(url)`` or ``redirect(status, url)``.

        Sets the ``location`` header and sends with no body. Without an
        explicit status the selected one, else the configured redirect
        status (302), is used. The status is not checked against the
        declared responses; required headers still are.
        """
        if url is None:
            if not isinstance(status_or_url, str):
                msg = "redirect() needs a URL"
                raise TypeError(msg)
            target, status = status_or_url, self._state.status or self._redirect_status
        else:
            target, status = url, int(status_or_url)
        self._check_open("redirect")
        self._check_required_headers(status, {**self._state.headers, "location": target})
        self._state.status = status
        self._state.headers["location"] = target
        return self.send()

    # -- Internal --

    def _check_open(self, operation: str) -> None:
        if self._state.sent:
            msg = f"{self._contract.route}: reply already sent, cannot call {operation}()"
            raise ContractViolation(msg)

    def _resolve_status(self) -> int:
        if self._state.status is not None:
            return self._state.status
        if not self._contract.declared:
            return 200
        if not self._contract.statuses:
            return 204
        implicit = self._contract.implicit_status()
        if implicit is None:
            msg = f"{self._contract.route}: missing status; call status() before send()"
            raise ContractViolation(msg)
        return implicit

    def _check_required_headers(
        self, status: int, headers: Mapping[str, Any] | None = None
    ) -> None:
        present = self._state.headers if headers is None else headers
        # A header set to None has no value.
        missing = [
            name
            for name in self._contract.required_headers(status)
            if present.get(name) is None
        ]
        if missing:
            msg = (
                f"{self._contract.route}: missing headers: [ {', '.join(missing)} ]. "
                f"Please provide required headers before sending reply."
            )
            raise ContractViolation(msg)


def _header_pairs(headers: Mapping[str, Any]) -> tuple[tuple[str, str], ...]:
    """Flatten header values to string pairs; sequences repeat the header."""
    pairs: list[tuple[str, str]] = []
    for name, value in headers.items():
        if isinstance(value, list | tuple):
            pairs.extend((name, str(item)) for item in value)
        else:
            pairs.append((name, str(value)))
    return tuple(pairs)
