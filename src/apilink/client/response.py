"""Response decoding -- maps an :class:`httpx.Response` onto a :class:`~apilink.models.TransportResponse`.

The transport calls :func:`to_transport_response` after every successful
request. The body is decoded according to the call's ``response_type``:

* ``"json"`` or unset -- JSON if it parses, otherwise the raw text.
* ``"text"`` -- the raw text.
* ``"arraybuffer"`` / ``"blob"`` -- the raw bytes.

An empty body always decodes to ``None``.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from apilink.models import TransportResponse

BINARY_RESPONSE_TYPES = frozenset({"arraybuffer", "blob", "stream"})


def extract_response_data(response: httpx.Response, response_type: Optional[str] = None) -> Any:
    """Extract the body from an HTTP response.

    Args:
        response: The :class:`httpx.Response` to extract data from.
        response_type: Expected body type; see the module docstring.

    Returns:
        A JSON-decoded object, a ``str`` of raw text, ``bytes`` for binary
        response types, or ``None`` if the body is empty.
    """
    # Handle empty body
    if not response.content:
        return None

    if response_type in BINARY_RESPONSE_TYPES:
        return response.content

    if response_type == "text":
        return response.text

    # Try JSON first
    try:
        return response.json()
    except ValueError:
        pass

    # Fall back to text
    return response.text


def to_transport_response(response: httpx.Response, response_type: Optional[str] = None) -> TransportResponse:
    """Wrap *response* in a :class:`~apilink.models.TransportResponse`."""
    return TransportResponse(
        data=extract_response_data(response, response_type),
        status=response.status_code,
        status_text=response.reason_phrase or "",
        headers=dict(response.headers),
        url=str(response.request.url),
    )
