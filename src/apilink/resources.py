"""Resource registry -- named URL templates resolved against a base URL.

A *resource* is a logical name bound to a path template (``"/users/:id"``)
or to an absolute URL. :func:`prepare_resources` turns the raw templates
into fully-resolved URLs once per :meth:`~apilink.api.ApiClient.init` or
:meth:`~apilink.api.ApiClient.update_placeholders`; :func:`resolve_target`
picks the URL for a single call.

Nothing here raises on bad input. An unknown resource name resolves to an
empty string and the failure surfaces from the transport instead.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


def is_url(text: Optional[str] = None) -> bool:
    """Return ``True`` if *text* is an absolute ``http://`` or ``https://`` URL."""
    return bool(text) and text.startswith(("http://", "https://"))


def replace_placeholders(
    url: Optional[str],
    placeholders: Optional[Mapping[str, str]],
) -> str:
    """Substitute ``/:name`` tokens in *url* with values from *placeholders*.

    The first occurrence of ``/:name`` is replaced by the value verbatim, so
    the value carries its own leading slash::

        >>> replace_placeholders("https://x.com/:ph/value", {"ph": "/a"})
        'https://x.com/a/value'

    Keys that do not appear in the URL are ignored. Both arguments are
    required: an empty URL or a ``None`` mapping yields ``""`` rather than
    the input URL.

    Args:
        url: URL or path template.
        placeholders: Placeholder name -> replacement value.

    Returns:
        The substituted URL, or ``""`` if either argument is missing.
    """
    if not url or placeholders is None:
        return ""

    for name, value in placeholders.items():
        token = f"/:{name}"
        if token in url:
            url = url.replace(token, f"{value}", 1)
    return url


def prepare_resources(
    urls_config: Optional[Mapping[str, str]] = None,
    base_url: Optional[str] = None,
    placeholders: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """Resolve every saved URL template into an absolute URL.

    Absolute templates are kept as-is; relative ones are appended to
    *base_url* verbatim (no separator is inserted). Placeholders are then
    substituted when a mapping is supplied.

    Args:
        urls_config: Resource name -> template.
        base_url: Prefix for relative templates. ``None`` is treated as ``""``.
        placeholders: Optional placeholder mapping.

    Returns:
        A new dict mapping every resource name to its resolved URL.
    """
    resources: dict[str, str] = {}
    for name, template in (urls_config or {}).items():
        url = template if is_url(template) else f"{base_url or ''}{template}"
        if placeholders is not None:
            url = replace_placeholders(url, placeholders)
        resources[name] = url

    logger.debug("Prepared %d resource(s)", len(resources))
    return resources


def resolve_target(
    resources: Optional[Mapping[str, str]],
    resource: Optional[str],
    path: Optional[str] = None,
) -> str:
    """Return the URL for one call.

    An absolute *resource* bypasses the registry. Otherwise *resource* is
    looked up in *resources*, degrading to ``""`` when missing. *path* is
    appended verbatim.
    """
    if not resource:
        url = ""
    elif is_url(resource):
        url = resource
    else:
        url = (resources or {}).get(resource, "")
        if not url:
            logger.debug("Unknown resource %r, using empty URL", resource)

    return f"{url}{path}" if path else url
