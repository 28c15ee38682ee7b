"""Handler completion — turns a finished handler into a Response.

Handlers are expected to end with ``reply.send(...)`` (or ``redirect``)
and return the token. Two other endings are accepted:

1. the reply was sent                      -> the produced Response
2. a value other than ``None``/the reply    -> sent as the payload
3. ``None`` (or the reply) without a send   -> ``ContractViolation``
"""

from typing import Any

from wren.errors import ContractViolation
from wren.http.reply import Reply, ReplyToken
from wren.http.response import Response


def complete(reply: Reply, result: Any) -> Response:
    """Return the Response a finished handler produced."""
    if not reply.sent:
        if result is None or isinstance(result, Reply | ReplyToken):
            msg = f"{reply.contract.route}: handler finished without sending a reply"
            raise ContractViolation(msg)
        reply.send(result)
    assert reply.response is not None
    return reply.response
