"""HTTP client layer for apilink.

Provides the transport capability and the dispatcher that normalises its
results:

    :class:`Transport` -- verb-keyed async protocol the dispatcher calls.
    :class:`HttpxTransport` -- implementation backed by :class:`httpx.AsyncClient`.
    :func:`execute_request` -- send one request, return a
    :class:`~apilink.models.ResponseEnvelope`.

Example::

    from apilink.client import HttpxTransport, execute_request
    from apilink.models import HeaderBundle

    async with HttpxTransport() as transport:
        result = await execute_request(transport, "https://api.example.com/users", HeaderBundle())
"""

from apilink.client.dispatcher import execute_request, get_transport_request, normalize_response
from apilink.client.transport import HttpxTransport, Transport

__all__ = [
    "HttpxTransport",
    "Transport",
    "execute_request",
    "get_transport_request",
    "normalize_response",
]
