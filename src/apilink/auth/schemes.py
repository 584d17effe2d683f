"""Authorization scheme prefixes keyed by auth type.

``bearer`` produces ``Authorization: Bearer <token>``; ``apikey`` sends the
bare token with no prefix. Anything else falls back to ``Bearer``.
"""

from __future__ import annotations

from typing import Optional

AUTHORIZATION_TYPES: dict[str, str] = {
    "bearer": "Bearer",
    "apikey": "",
}

DEFAULT_AUTH_TYPE = "bearer"


def get_auth_type(auth_type: Optional[str]) -> str:
    """Return the scheme prefix for *auth_type*.

    Args:
        auth_type: Auth type identifier such as ``"bearer"`` or ``"apikey"``.

    Returns:
        The scheme string (``"Bearer"``, or ``""`` for ``apikey``).
        Unknown or empty types return ``"Bearer"``.
    """
    if not auth_type:
        return AUTHORIZATION_TYPES[DEFAULT_AUTH_TYPE]
    return AUTHORIZATION_TYPES.get(auth_type, AUTHORIZATION_TYPES[DEFAULT_AUTH_TYPE])


def authorization_value(token: str, auth_type: Optional[str]) -> str:
    """Combine the scheme for *auth_type* with *token* into a header value."""
    return f"{get_auth_type(auth_type)} {token}".strip()
