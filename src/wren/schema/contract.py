"""Response contract — what a route promised to respond with.

A thin, read-only view over the ``response`` map of a route's resolved
schema. The reply builder asks it three questions:

- may the handler select status N?
- which headers must be present before sending status N?
- if no status was selected, is there exactly one it can imply?

Response map keys may be ints or strings, exact (``"200"``), class
wildcards (``"2XX"``) or ``"default"``. Required headers are declared the
way documentation generators read them::

    {"200": {"type": "array", "headers": {"type": "object",
                                           "properties": {"x-total": {...}},
                                           "required": ["x-total"]}}}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ResponseContract:
    """Response contract for one route.

    ``responses is None`` means the route has no contract at all: any
    status is accepted and nothing is required. An *empty* response map
    means the route is documented as never responding.
    """

    route: str
    responses: Mapping[str, Any] | None = None

    @classmethod
    def from_schema(cls, route: str, schema: Mapping[str, Any] | None) -> ResponseContract:
        responses = schema.get("response") if schema else None
        if not isinstance(responses, Mapping):
            return cls(route)
        return cls(route, {str(k): v for k, v in responses.items()})

    @property
    def declared(self) -> bool:
        return self.responses is not None

    @property
    def statuses(self) -> tuple[str, ...]:
        return tuple(self.responses or ())

    def entry(self, status: int) -> Any:
        """Schema for *status*: exact code, then ``NXX``, then ``default``."""
        if not self.responses:
            return None
        family = status // 100
        for key in (str(status), f"{family}XX", f"{family}xx", "default"):
            if key in self.responses:
                return self.responses[key]
        return None

    def allows(self, status: int) -> bool:
        if self.responses is None:
            return True
        return self.entry(status) is not None

    def required_headers(self, status: int) -> tuple[str, ...]:
        """Lower-cased header names the schema for *status* requires."""
        entry = self.entry(status)
        if not isinstance(entry, Mapping):
            return ()
        headers = entry.get("headers")
        if not isinstance(headers, Mapping):
            return ()
        return tuple(str(name).lower() for name in headers.get("required", ()))

    def implicit_status(self) -> int | None:
        """The only declared concrete status, if there is exactly one."""
        codes = [key for key in self.statuses if key.isdigit()]
        if len(codes) == 1:
            return int(codes[0])
        return None
