"""Authentication helpers for apilink.

This package provides the two pieces :func:`~apilink.headers.create_headers`
needs to build an ``authorization`` header:

- :mod:`apilink.auth.schemes` -- maps an auth type (``bearer``, ``apikey``)
  to the scheme prefix placed before the token.
- :mod:`apilink.auth.store` -- the :class:`KeyValueStore` protocol used to
  resolve a token name to a token value, with :class:`EnvironStore` and
  :class:`MemoryStore` implementations.
"""

from __future__ import annotations

from apilink.auth.schemes import AUTHORIZATION_TYPES, authorization_value, get_auth_type
from apilink.auth.store import EnvironStore, KeyValueStore, MemoryStore

__all__ = [
    "AUTHORIZATION_TYPES",
    "EnvironStore",
    "KeyValueStore",
    "MemoryStore",
    "authorization_value",
    "get_auth_type",
]
