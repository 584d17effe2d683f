"""Request dispatch and response normalisation.

:func:`execute_request` is the single path every verb call takes once its
URL and headers are known. It hands the request to the transport's
verb-specific entry point and folds the outcome into a
:class:`~apilink.models.ResponseEnvelope`:

* success -- ``data`` holds the response payload (or the whole response
  when ``full_response`` is set);
* failure -- the exception is passed to the error interceptor, if any,
  and stored in ``error``.

Nothing here raises. Errors are data.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from apilink.client.transport import Transport
from apilink.models import HeaderBundle, ResponseEnvelope, TransportResponse

logger = logging.getLogger(__name__)

ErrorInterceptor = Callable[[BaseException], Any]

METHODS = ("get", "post", "put", "delete")


def _delete_payload(body: Any) -> Any:
    """Return the DELETE payload, unwrapping an explicit ``{"data": ...}`` envelope once."""
    if isinstance(body, Mapping) and "data" in body:
        return body["data"]
    return body


async def get_transport_request(
    transport: Transport,
    method: str,
    url: str,
    headers: HeaderBundle,
    body: Any = None,
) -> Optional[TransportResponse]:
    """Call the transport entry point matching *method*.

    DELETE carries no conventional body, so its payload travels in the
    options under ``data`` alongside the headers.

    Returns:
        The transport's response, or ``None`` for an unsupported method.
    """
    options = headers.to_options()
    method = method.lower()

    if method == "delete":
        if body is not None:
            options["data"] = _delete_payload(body)
        return await transport.delete(url, options)
    if method == "get":
        return await transport.get(url, options)
    if method == "post":
        return await transport.post(url, body, options)
    if method == "put":
        return await transport.put(url, body, options)

    logger.debug("Unsupported method %r, no request sent", method)
    return None


def has_payload(payload: Any) -> bool:
    """Return whether *payload* counts as present.

    Empty dicts and lists do; ``None``, ``""``, ``0``, ``False`` and ``b""`` do not.
    """
    if isinstance(payload, (dict, list)):
        return True
    return bool(payload)


def normalize_response(response: TransportResponse, full_response: bool = False) -> Any:
    """Return the envelope ``data`` for a successful *response*.

    With *full_response*, the result is a dict of ``status``,
    ``status_text``, ``headers`` and ``url`` plus the payload under
    ``data``. Otherwise it is the payload itself, unwrapped once when it is a
    mapping with a truthy ``data`` key. Returns ``None`` when there is no
    payload.
    """
    payload = response.data
    if not has_payload(payload):
        return None

    if full_response:
        return {**response.model_dump(exclude={"data"}), "data": payload}

    if isinstance(payload, Mapping) and payload.get("data"):
        return payload["data"]
    return payload


def _run_interceptor(error_interceptor: Optional[ErrorInterceptor], error: BaseException) -> None:
    if error_interceptor is None or not callable(error_interceptor):
        return
    try:
        error_interceptor(error)
    except Exception:
        logger.exception("Error interceptor raised while handling %r", error)


async def execute_request(
    transport: Transport,
    url: str,
    headers: HeaderBundle,
    method: str = "get",
    body: Any = None,
    full_response: bool = False,
    error_interceptor: Optional[ErrorInterceptor] = None,
) -> ResponseEnvelope:
    """Send one request and normalise the outcome into a :class:`~apilink.models.ResponseEnvelope`.

    Args:
        transport: The HTTP transport capability.
        url: Absolute request URL.
        headers: Header bundle from :func:`~apilink.headers.create_headers`.
        method: ``get``, ``post``, ``put`` or ``delete``.
        body: Request payload, if any.
        full_response: Return the whole response instead of only its payload.
        error_interceptor: Called with the exception when the request
            fails. Its return value is ignored; if it raises, the secondary
            exception is logged and the original error is still returned.

    Returns:
        The envelope. Never raises for transport failures.
    """
    envelope = ResponseEnvelope()

    try:
        response = await get_transport_request(transport, method, url, headers, body)
        if response is not None:
            envelope.data = normalize_response(response, full_response)
    except Exception as exc:
        logger.debug("%s %s failed: %s", method.upper(), url, exc)
        _run_interceptor(error_interceptor, exc)
        envelope.error = exc

    return envelope
