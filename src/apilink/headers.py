"""Per-call header assembly.

:func:`create_headers` builds the :class:`~apilink.models.HeaderBundle`
for one request: the ``authorization`` header, any custom headers, query
params, and the expected response type. Malformed input is dropped, never
raised on.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from apilink.auth.schemes import authorization_value
from apilink.auth.store import KeyValueStore
from apilink.models import HeaderBundle


def resolve_token(token_name: Optional[str], store: Optional[KeyValueStore]) -> Optional[str]:
    """Look *token_name* up in *store*, falling back to the name itself.

    Returns ``None`` when no name is given.
    """
    if not token_name:
        return None
    stored = store.get_item(token_name) if store is not None else None
    return stored or token_name


def _header_entries(custom_headers: Any) -> Iterable[Any]:
    if isinstance(custom_headers, (str, bytes, Mapping)) or not isinstance(custom_headers, Iterable):
        return ()
    return custom_headers


def _header_pair(entry: Any) -> tuple[Any, Any]:
    if isinstance(entry, Mapping):
        return entry.get("key"), entry.get("value")
    return getattr(entry, "key", None), getattr(entry, "value", None)


def create_headers(
    params: Any = None,
    override_token: Optional[str] = None,
    disable_auth: Optional[bool] = False,
    custom_headers: Optional[Iterable[Any]] = None,
    response_type: Any = None,
    token_name: Optional[str] = None,
    auth_type: Optional[str] = "bearer",
    store: Optional[KeyValueStore] = None,
) -> HeaderBundle:
    """Assemble headers, params, and response type for a single call.

    Args:
        params: Query parameters. Kept only when it is a mapping.
        override_token: Per-call ``authorization`` value, used verbatim.
        disable_auth: Suppress the ``authorization`` header entirely.
        custom_headers: Sequence of ``{"key": ..., "value": ...}`` entries.
            Entries missing either part are skipped.
        response_type: Expected response type (``"json"``, ``"text"``,
            ``"arraybuffer"``, ...). Kept only when it is a string.
        token_name: Token name or literal token; see :func:`resolve_token`.
        auth_type: Selects the scheme prefix for the resolved token.
        store: Key-value store used to resolve *token_name*.

    Returns:
        A :class:`~apilink.models.HeaderBundle`.

    Example::

        bundle = create_headers(
            custom_headers=[{"key": "X-Id", "value": "5"}],
            token_name="tok123",
        )
        assert bundle.headers == {"authorization": "Bearer tok123", "X-Id": "5"}
    """
    token = resolve_token(token_name, store)
    bundle = HeaderBundle()

    if (override_token or token) and not disable_auth:
        bundle.headers["authorization"] = override_token or authorization_value(token, auth_type)

    for entry in _header_entries(custom_headers):
        key, value = _header_pair(entry)
        if key and value:
            bundle.headers[str(key)] = str(value)

    if isinstance(params, Mapping):
        bundle.params = dict(params)

    if response_type and isinstance(response_type, str):
        bundle.response_type = response_type

    return bundle
