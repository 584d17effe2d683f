"""HTTP transport capability -- the only place apilink touches the network.

:class:`Transport` is the verb-keyed protocol the dispatcher talks to;
:class:`HttpxTransport` implements it over :class:`httpx.AsyncClient`.
Any object with the same four coroutine methods can be passed to
:class:`~apilink.api.ApiClient` instead, which is how tests and
alternative HTTP stacks plug in.

Every method takes an *options* mapping produced by
:meth:`~apilink.models.HeaderBundle.to_options` (``headers``, and
optionally ``params`` and ``response_type``). ``delete`` additionally
accepts the request payload under ``options["data"]``.

Error statuses are failures: :class:`HttpxTransport` calls
:meth:`httpx.Response.raise_for_status`, so anything outside 2xx raises
:class:`httpx.HTTPStatusError`.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

import httpx

from apilink.client.response import to_transport_response
from apilink.models import TransportResponse


@runtime_checkable
class Transport(Protocol):
    """Verb-keyed async HTTP capability."""

    async def get(self, url: str, options: Mapping[str, Any]) -> TransportResponse: ...

    async def post(self, url: str, body: Any, options: Mapping[str, Any]) -> TransportResponse: ...

    async def put(self, url: str, body: Any, options: Mapping[str, Any]) -> TransportResponse: ...

    async def delete(self, url: str, options: Mapping[str, Any]) -> TransportResponse: ...


def _body_kwargs(body: Any) -> dict[str, Any]:
    """Pick the httpx keyword for *body*: raw content for str/bytes, JSON otherwise."""
    if body is None:
        return {}
    if isinstance(body, (str, bytes)):
        return {"content": body}
    return {"json": body}


class HttpxTransport:
    """:class:`Transport` backed by :class:`httpx.AsyncClient`.

    The underlying client is created lazily on first use unless one is
    passed in. A client passed in is not closed by :meth:`aclose`; one
    created here is.

    Args:
        client: Optional pre-configured :class:`httpx.AsyncClient`.
        timeout: Request timeout in seconds for a client created here.
        verify_ssl: Verify SSL certificates for a client created here.

    Example::

        async with HttpxTransport(timeout=10) as transport:
            response = await transport.get("https://api.example.com/users", {"headers": {}})
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._verify_ssl = verify_ssl

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpxTransport:
        self._get_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Verb entry points
    # ------------------------------------------------------------------ #

    async def get(self, url: str, options: Mapping[str, Any]) -> TransportResponse:
        return await self.request("GET", url, options)

    async def post(self, url: str, body: Any, options: Mapping[str, Any]) -> TransportResponse:
        return await self.request("POST", url, options, body)

    async def put(self, url: str, body: Any, options: Mapping[str, Any]) -> TransportResponse:
        return await self.request("PUT", url, options, body)

    async def delete(self, url: str, options: Mapping[str, Any]) -> TransportResponse:
        return await self.request("DELETE", url, options, options.get("data"))

    async def request(
        self,
        method: str,
        url: str,
        options: Mapping[str, Any],
        body: Any = None,
    ) -> TransportResponse:
        """Send one request and decode the response.

        Args:
            method: HTTP method.
            url: Absolute request URL.
            options: ``headers``, ``params`` and ``response_type``.
            body: Payload; dicts and lists are sent as JSON.

        Returns:
            The decoded :class:`~apilink.models.TransportResponse`.

        Raises:
            httpx.HTTPStatusError: On a non-2xx status.
            httpx.RequestError: On network or protocol errors.
        """
        client = self._get_client()
        response = await client.request(
            method,
            url,
            headers=options.get("headers"),
            params=options.get("params"),
            **_body_kwargs(body),
        )
        response.raise_for_status()
        return to_transport_response(response, options.get("response_type"))

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify_ssl,
                follow_redirects=True,
            )
        return self._client
