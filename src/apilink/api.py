"""Public facade -- configure once, call many times.

:class:`ApiClient` owns the state every request reads: the resolved
resources, the auth configuration, and the optional error interceptor.
:meth:`ApiClient.init` replaces that state wholesale;
:meth:`ApiClient.update_placeholders` recomputes the resources from the
templates captured at ``init`` time. Each verb coroutine then runs
:func:`~apilink.resources.resolve_target`,
:func:`~apilink.headers.create_headers` and
:func:`~apilink.client.dispatcher.execute_request` and returns a
:class:`~apilink.models.ResponseEnvelope`. Verb calls never raise.

Configuration updates are plain synchronous assignments. A call already
awaiting the transport keeps the URL and headers it was built with;
calls issued afterwards see the new state.

Example::

    import apilink

    async with apilink.init(
        base_url="https://api.example.com",
        saved_urls={"user": "/users/:id"},
        jwt_token_name="API_TOKEN",
        placeholders={"id": "/42"},
    ) as api:
        result = await api.get("user")
        if result.error is None:
            print(result.data)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from apilink.auth.store import EnvironStore, KeyValueStore
from apilink.client.dispatcher import ErrorInterceptor, execute_request, has_payload
from apilink.client.transport import HttpxTransport, Transport
from apilink.headers import create_headers
from apilink.models import AuthConfig, ClientConfig, ResponseEnvelope
from apilink.resources import prepare_resources, resolve_target

logger = logging.getLogger(__name__)


class ApiClient:
    """Resource-oriented HTTP client returning ``{data, error}`` envelopes.

    Args:
        transport: HTTP transport capability. Defaults to a lazily-created
            :class:`~apilink.client.transport.HttpxTransport`.
        store: Key-value store used to resolve token names. Defaults to
            :class:`~apilink.auth.store.EnvironStore`.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        store: Optional[KeyValueStore] = None,
    ) -> None:
        self._transport: Transport = transport if transport is not None else HttpxTransport()
        self._store: KeyValueStore = store if store is not None else EnvironStore()
        self._config = ClientConfig()
        self._auth = AuthConfig()
        self._resources: dict[str, str] = {}
        self._error_interceptor: Optional[ErrorInterceptor] = None

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        error_interceptor: Optional[ErrorInterceptor] = None,
        transport: Optional[Transport] = None,
        store: Optional[KeyValueStore] = None,
    ) -> ApiClient:
        """Build and initialise a client from a :class:`~apilink.models.ClientConfig`."""
        client = cls(transport=transport, store=store)
        fields = set(ClientConfig.model_fields)
        client.init(**config.model_dump(include=fields), error_interceptor=error_interceptor)
        return client

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    def init(
        self,
        base_url: Optional[str] = None,
        saved_urls: Optional[Mapping[str, str]] = None,
        jwt_token_name: Optional[str] = None,
        auth_type: Optional[str] = "bearer",
        auth_token: Optional[str] = None,
        placeholders: Optional[Mapping[str, str]] = None,
        error_interceptor: Optional[ErrorInterceptor] = None,
    ) -> ApiClient:
        """Configure the client, replacing any previous configuration.

        Args:
            base_url: Prefix for every relative saved URL.
            saved_urls: Resource name -> path template or absolute URL.
            jwt_token_name: Token name looked up in the key-value store;
                used as the token itself when the store has no such key.
            auth_type: ``"bearer"`` (default) or ``"apikey"``.
            auth_token: Explicit token. Always wins over *jwt_token_name*.
            placeholders: Initial placeholder values.
            error_interceptor: Called with the exception of every failed
                request. Ignored unless callable.

        Returns:
            ``self``, so ``ApiClient().init(...)`` can be chained.
        """
        config = ClientConfig(
            base_url=base_url,
            saved_urls=dict(saved_urls or {}),
            jwt_token_name=jwt_token_name,
            auth_type=auth_type or "bearer",
            auth_token=auth_token,
            placeholders=dict(placeholders) if placeholders is not None else None,
        )
        self._config = config
        self._auth = AuthConfig.from_client_config(config)
        self._error_interceptor = error_interceptor if callable(error_interceptor) else None
        self._resources = prepare_resources(config.saved_urls, config.base_url, config.placeholders)
        logger.debug("Initialised client with %d resource(s)", len(self._resources))
        return self

    def update_placeholders(self, placeholders: Optional[Mapping[str, str]] = None) -> None:
        """Re-resolve every resource with new placeholder values.

        Always starts from the raw templates and base URL captured by
        :meth:`init`, so repeated calls do not compound. A falsy mapping is
        a no-op.
        """
        if not placeholders:
            return
        self._resources = prepare_resources(
            self._config.saved_urls, self._config.base_url, placeholders
        )

    @property
    def resources(self) -> dict[str, str]:
        """A copy of the currently resolved resources."""
        return dict(self._resources)

    @property
    def auth(self) -> AuthConfig:
        return self._auth

    @property
    def config(self) -> ClientConfig:
        """The configuration captured by the last :meth:`init`."""
        return self._config

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if it supports closing."""
        aclose: Optional[Callable[[], Any]] = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()

    # ------------------------------------------------------------------ #
    # Verbs
    # ------------------------------------------------------------------ #

    async def get(self, saved_url: str, **options: Any) -> ResponseEnvelope:
        """Send a GET request to *saved_url* (a resource name or absolute URL).

        Keyword options: ``params``, ``auth``, ``disable_auth``, ``path``,
        ``custom_headers``, ``response_type``, ``full_response``.
        """
        return await self._request("get", saved_url, options)

    async def post(self, saved_url: str, **options: Any) -> ResponseEnvelope:
        """Send a POST request. A missing or empty scalar ``body`` is sent as ``{}``."""
        if not has_payload(options.get("body")):
            options["body"] = {}
        return await self._request("post", saved_url, options)

    async def put(self, saved_url: str, **options: Any) -> ResponseEnvelope:
        """Send a PUT request. A missing or empty scalar ``body`` is sent as ``{}``."""
        if not has_payload(options.get("body")):
            options["body"] = {}
        return await self._request("put", saved_url, options)

    async def delete(self, saved_url: str, **options: Any) -> ResponseEnvelope:
        """Send a DELETE request. ``body`` travels as the request's ``data``."""
        return await self._request("delete", saved_url, options)

    async def _request(self, method: str, saved_url: str, options: dict[str, Any]) -> ResponseEnvelope:
        headers = create_headers(
            params=options.get("params"),
            override_token=options.get("auth"),
            disable_auth=options.get("disable_auth", False),
            custom_headers=options.get("custom_headers"),
            response_type=options.get("response_type"),
            token_name=self._auth.token,
            auth_type=self._auth.auth_type,
            store=self._store,
        )
        url = resolve_target(self._resources, saved_url, options.get("path"))
        body = options.get("body")

        return await execute_request(
            self._transport,
            url,
            headers,
            method=method,
            body=body,
            full_response=bool(options.get("full_response", False)),
            error_interceptor=self._error_interceptor,
        )


def init(
    base_url: Optional[str] = None,
    saved_urls: Optional[Mapping[str, str]] = None,
    jwt_token_name: Optional[str] = None,
    auth_type: Optional[str] = "bearer",
    auth_token: Optional[str] = None,
    placeholders: Optional[Mapping[str, str]] = None,
    error_interceptor: Optional[ErrorInterceptor] = None,
    transport: Optional[Transport] = None,
    store: Optional[KeyValueStore] = None,
) -> ApiClient:
    """Create a new :class:`ApiClient` and initialise it.

    Accepts the same configuration as :meth:`ApiClient.init` plus the
    *transport* and *store* collaborators.
    """
    client = ApiClient(transport=transport, store=store)
    return client.init(
        base_url=base_url,
        saved_urls=saved_urls,
        jwt_token_name=jwt_token_name,
        auth_type=auth_type,
        auth_token=auth_token,
        placeholders=placeholders,
        error_interceptor=error_interceptor,
    )
