"""Canonical Pydantic models shared across all apilink modules.

The models fall into two groups:

**Configuration models** -- the input to :meth:`~apilink.api.ApiClient.init`
and the on-disk shape of a profile:
    :class:`ClientConfig`, :class:`Profile`, and :class:`AuthConfig`.

**Request models** -- produced and consumed while a call is in flight:
    :class:`HeaderBundle`, :class:`TransportResponse`, and
    :class:`ResponseEnvelope`.

All models use Pydantic v2. Per-call options are deliberately *not* a
model: malformed custom headers or non-mapping params must be dropped
silently rather than rejected by validation, so they are handled by
:func:`~apilink.headers.create_headers` instead.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class ClientConfig(BaseModel):
    """Configuration accepted by :meth:`~apilink.api.ApiClient.init`.

    Example::

        ClientConfig(
            base_url="https://api.example.com",
            saved_urls={"users": "/users", "user": "/users/:id"},
            jwt_token_name="API_TOKEN",
            placeholders={"id": "/42"},
        )
    """

    base_url: Optional[str] = Field(
        default=None, description="Prefix for every relative saved URL"
    )
    saved_urls: dict[str, str] = Field(
        default_factory=dict,
        description="Resource name -> path template or absolute URL",
    )
    jwt_token_name: Optional[str] = Field(
        default=None,
        description="Name looked up in the key-value store; used verbatim when absent",
    )
    auth_type: str = Field(
        default="bearer", description="Authorization scheme: bearer, apikey"
    )
    auth_token: Optional[str] = Field(
        default=None, description="Explicit token; wins over jwt_token_name"
    )
    placeholders: Optional[dict[str, str]] = Field(
        default=None, description="Placeholder name -> replacement value"
    )


class Profile(ClientConfig):
    """A named :class:`ClientConfig` persisted at ``~/.config/apilink/profiles/<name>.json``.

    Loaded and saved by :func:`~apilink.config.load_profile` and
    :func:`~apilink.config.save_profile`.
    """

    name: str = Field(description="Profile identifier (file stem)")


class AuthConfig(BaseModel):
    """Process-wide authentication state held by an :class:`~apilink.api.ApiClient`.

    ``token`` is either an explicit token or a name to look up in the
    key-value store; :meth:`from_client_config` applies the precedence rule
    that an explicit ``auth_token`` always beats ``jwt_token_name``.
    """

    token: Optional[str] = None
    auth_type: str = "bearer"

    @classmethod
    def from_client_config(cls, config: ClientConfig) -> AuthConfig:
        token = config.auth_token or config.jwt_token_name or None
        return cls(token=token, auth_type=config.auth_type)


# --- Request / response ---


class HeaderBundle(BaseModel):
    """Headers, query params, and response type for a single call.

    ``params`` and ``response_type`` are ``None`` when omitted, and
    :meth:`to_options` leaves them out entirely so the transport never sees
    placeholder keys.
    """

    headers: dict[str, str] = Field(default_factory=dict)
    params: Optional[dict[str, Any]] = None
    response_type: Optional[str] = None

    def to_options(self) -> dict[str, Any]:
        """Return the bundle as transport options, without absent fields."""
        return self.model_dump(exclude_none=True)


class TransportResponse(BaseModel):
    """Successful result of a transport call.

    Attributes:
        data: The decoded body (JSON value, text, or bytes), ``None`` when
            the body is empty.
        status: HTTP status code.
        status_text: Reason phrase (e.g. ``"OK"``).
        headers: Response headers.
        url: The final request URL.
    """

    data: Any = None
    status: int = 200
    status_text: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    url: str = ""


class ResponseEnvelope(BaseModel):
    """Uniform result of every request made through :class:`~apilink.api.ApiClient`.

    After a completed call exactly one of ``data`` and ``error`` is set;
    both stay ``None`` only when the transport succeeded without a body.
    Callers must check ``error`` before trusting ``data``.

    Example::

        result = await client.get("users")
        if result.error is not None:
            ...
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        """Whether the call completed without an error."""
        return self.error is None
