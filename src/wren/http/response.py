"""Outgoing HTTP response with a chainable ``.with_*()`` transformation API.

Each transformation returns a new Response. Handlers never build these
directly: the reply builder produces one on ``send()``, and the error
pipeline produces one for failed requests.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
BINARY_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    ``content_type`` of ``None`` means no Content-Type header is sent
    (empty bodies, redirects).
    """

    body: str | bytes = b""
    status: int = 200
    content_type: str | None = None
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str | None) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json_module.loads(self.body_bytes)

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or ``None``."""
        name = name.lower()
        if name == "content-type":
            return self.content_type
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None


def serialize_payload(payload: Any) -> tuple[bytes, str | None]:
    """Map a reply payload to ``(body, default content type)``.

    isinstance-based dispatch, no magic:

    1. ``None``  -> empty body, no content type
    2. ``str``   -> UTF-8, text/plain
    3. ``bytes`` -> as-is, application/octet-stream
    4. anything else -> JSON
    """
    match payload:
        case None:
            return b"", None
        case str():
            return payload.encode("utf-8"), TEXT_CONTENT_TYPE
        case bytes() | bytearray():
            return bytes(payload), BINARY_CONTENT_TYPE
        case _:
            return json_module.dumps(payload).encode("utf-8"), JSON_CONTENT_TYPE
