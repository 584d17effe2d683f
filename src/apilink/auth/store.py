"""Key-value lookup used to turn a token name into a token value.

:func:`~apilink.headers.create_headers` only ever *reads* from a store via
:meth:`KeyValueStore.get_item`. Writing tokens is the caller's business; the
stores here exist so an :class:`~apilink.api.ApiClient` has something
sensible to read from out of the box.

* :class:`EnvironStore` -- reads ``os.environ`` (the default).
* :class:`MemoryStore` -- an in-process dict, handy for tests and for
  applications that obtain a token at runtime.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Anything that can look up a string value by name."""

    def get_item(self, name: str) -> Optional[str]:
        """Return the value stored under *name*, or ``None``."""
        ...


class MemoryStore:
    """Dict-backed :class:`KeyValueStore`.

    Example::

        store = MemoryStore({"access-token": "tok123"})
        store.set_item("refresh-token", "r-456")
        assert store.get_item("access-token") == "tok123"
    """

    def __init__(self, items: Optional[Mapping[str, str]] = None) -> None:
        self._items: dict[str, str] = dict(items or {})

    def get_item(self, name: str) -> Optional[str]:
        return self._items.get(name)

    def set_item(self, name: str, value: str) -> None:
        self._items[name] = str(value)

    def remove_item(self, name: str) -> None:
        self._items.pop(name, None)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class EnvironStore:
    """Read-only :class:`KeyValueStore` over environment variables.

    Args:
        prefix: Optional prefix prepended to every looked-up name, e.g.
            ``EnvironStore("MYAPP_")`` resolves ``"TOKEN"`` from
            ``$MYAPP_TOKEN``.
        environ: Mapping to read from. Defaults to :data:`os.environ`,
            read at lookup time so later changes are visible.
    """

    def __init__(self, prefix: str = "", environ: Optional[Mapping[str, str]] = None) -> None:
        self._prefix = prefix
        self._environ = environ

    def get_item(self, name: str) -> Optional[str]:
        environ = os.environ if self._environ is None else self._environ
        value = environ.get(f"{self._prefix}{name}")
        return value or None
