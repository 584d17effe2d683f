"""Request commands -- ``apilink get|post|put|delete`` and ``apilink resources``.

Each verb command resolves the active configuration (see
:func:`~apilink.config.resolve_config`), builds an
:class:`~apilink.api.ApiClient`, and prints the envelope: ``data`` goes to
stdout, a failed call prints its error to stderr and exits with the code
from :func:`~apilink.exceptions.classify_error`.

``RESOURCE`` is either a saved resource name or an absolute URL, so the
commands also work without any configuration::

    apilink get https://api.example.com/health
    apilink -p myapi get user --placeholder id=/42 --param expand=roles
    apilink -p myapi post users --body '{"name": "Ada"}'
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer

from apilink.api import ApiClient
from apilink.client.transport import HttpxTransport, Transport
from apilink.config import resolve_config
from apilink.exceptions import ApilinkError, InvalidUsageError, classify_error
from apilink.models import ClientConfig, ResponseEnvelope
from apilink.output import debug, error, format_response, info, print_table, suggest


# ------------------------------------------------------------------ #
# Option parsing
# ------------------------------------------------------------------ #


def parse_pairs(values: Optional[list[str]], separator: str = "=") -> dict[str, str]:
    """Parse ``key<sep>value`` strings into a dict.

    Raises:
        InvalidUsageError: If an entry has no separator or an empty key.
    """
    pairs: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition(separator)
        key = key.strip()
        if not sep or not key:
            raise InvalidUsageError(f"Expected KEY{separator}VALUE, got: {item!r}")
        pairs[key] = value.strip()
    return pairs


def parse_body(body: Optional[str]) -> Any:
    """Parse *body* as JSON if possible, returning the raw string on failure."""
    if body is None:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return body


def _make_transport() -> Transport:
    return HttpxTransport()


def _load_config(ctx: typer.Context) -> ClientConfig:
    obj = ctx.obj or {}
    config = resolve_config(
        cli_profile=obj.get("profile"),
        cli_config=obj.get("config"),
        cli_base_url=obj.get("base_url"),
    )
    if config is None:
        debug("No profile or config file, only absolute URLs will resolve")
        return ClientConfig()
    return config


def _report_error(exc: BaseException) -> None:
    debug(f"Request failed: {exc!r}")


# ------------------------------------------------------------------ #
# Shared verb implementation
# ------------------------------------------------------------------ #


def _run_request(
    ctx: typer.Context,
    method: str,
    resource: str,
    path: Optional[str],
    params: Optional[list[str]],
    headers: Optional[list[str]],
    placeholders: Optional[list[str]],
    auth: Optional[str],
    no_auth: bool,
    full: bool,
    response_type: Optional[str],
    body: Optional[str] = None,
) -> None:
    try:
        config = _load_config(ctx)
        query = parse_pairs(params)
        custom_headers = [
            {"key": key, "value": value} for key, value in parse_pairs(headers, ":").items()
        ]
        placeholder_map = parse_pairs(placeholders)
    except ApilinkError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    options: dict[str, Any] = {
        "path": path,
        "params": query or None,
        "custom_headers": custom_headers,
        "auth": auth,
        "disable_auth": no_auth,
        "full_response": full,
        "response_type": response_type,
    }
    if body is not None:
        options["body"] = parse_body(body)

    async def _call() -> ResponseEnvelope:
        client = ApiClient.from_config(
            config, error_interceptor=_report_error, transport=_make_transport()
        )
        async with client:
            client.update_placeholders(placeholder_map)
            return await getattr(client, method)(resource, **options)

    envelope = asyncio.run(_call())

    if envelope.error is not None:
        failure = classify_error(envelope.error)
        error(str(failure))
        raise typer.Exit(code=failure.exit_code)

    if full and isinstance(envelope.data, dict):
        info(f"HTTP {envelope.data.get('status')} {envelope.data.get('status_text', '')}".rstrip())
    if envelope.data is not None:
        format_response(envelope.data)


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

_RESOURCE = typer.Argument(help="Saved resource name or absolute URL.")
_PATH = typer.Option(None, "--path", help="Suffix appended to the resolved URL.")
_PARAM = typer.Option(None, "--param", help="Query parameter KEY=VALUE (repeatable).")
_HEADER = typer.Option(None, "--header", "-H", help="Extra header KEY:VALUE (repeatable).")
_PLACEHOLDER = typer.Option(
    None, "--placeholder", help="Placeholder NAME=VALUE, e.g. id=/42 (repeatable)."
)
_AUTH = typer.Option(None, "--auth", help="Authorization header value for this call.")
_NO_AUTH = typer.Option(False, "--no-auth", help="Send no authorization header.")
_FULL = typer.Option(False, "--full", help="Print status, headers and body.")
_RESPONSE_TYPE = typer.Option(
    None, "--response-type", help="Expected body type: json, text, arraybuffer."
)
_BODY = typer.Option(None, "--body", "-d", help="Request body (JSON, or raw text).")


def get_command(
    ctx: typer.Context,
    resource: str = _RESOURCE,
    path: Optional[str] = _PATH,
    param: Optional[list[str]] = _PARAM,
    header: Optional[list[str]] = _HEADER,
    placeholder: Optional[list[str]] = _PLACEHOLDER,
    auth: Optional[str] = _AUTH,
    no_auth: bool = _NO_AUTH,
    full: bool = _FULL,
    response_type: Optional[str] = _RESPONSE_TYPE,
) -> None:
    """Send a GET request."""
    _run_request(ctx, "get", resource, path, param, header, placeholder, auth, no_auth, full, response_type)


def post_command(
    ctx: typer.Context,
    resource: str = _RESOURCE,
    body: Optional[str] = _BODY,
    path: Optional[str] = _PATH,
    param: Optional[list[str]] = _PARAM,
    header: Optional[list[str]] = _HEADER,
    placeholder: Optional[list[str]] = _PLACEHOLDER,
    auth: Optional[str] = _AUTH,
    no_auth: bool = _NO_AUTH,
    full: bool = _FULL,
    response_type: Optional[str] = _RESPONSE_TYPE,
) -> None:
    """Send a POST request. Without --body an empty JSON object is sent."""
    _run_request(
        ctx, "post", resource, path, param, header, placeholder, auth, no_auth, full, response_type, body
    )


def put_command(
    ctx: typer.Context,
    resource: str = _RESOURCE,
    body: Optional[str] = _BODY,
    path: Optional[str] = _PATH,
    param: Optional[list[str]] = _PARAM,
    header: Optional[list[str]] = _HEADER,
    placeholder: Optional[list[str]] = _PLACEHOLDER,
    auth: Optional[str] = _AUTH,
    no_auth: bool = _NO_AUTH,
    full: bool = _FULL,
    response_type: Optional[str] = _RESPONSE_TYPE,
) -> None:
    """Send a PUT request. Without --body an empty JSON object is sent."""
    _run_request(
        ctx, "put", resource, path, param, header, placeholder, auth, no_auth, full, response_type, body
    )


def delete_command(
    ctx: typer.Context,
    resource: str = _RESOURCE,
    body: Optional[str] = _BODY,
    path: Optional[str] = _PATH,
    param: Optional[list[str]] = _PARAM,
    header: Optional[list[str]] = _HEADER,
    placeholder: Optional[list[str]] = _PLACEHOLDER,
    auth: Optional[str] = _AUTH,
    no_auth: bool = _NO_AUTH,
    full: bool = _FULL,
    response_type: Optional[str] = _RESPONSE_TYPE,
) -> None:
    """Send a DELETE request."""
    _run_request(
        ctx, "delete", resource, path, param, header, placeholder, auth, no_auth, full, response_type, body
    )


def resources_command(
    ctx: typer.Context,
    placeholder: Optional[list[str]] = _PLACEHOLDER,
) -> None:
    """List saved resources and the URLs they resolve to.

    Example::

        apilink -p myapi resources --placeholder id=/42
    """
    try:
        config = _load_config(ctx)
        placeholder_map = parse_pairs(placeholder)
    except ApilinkError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    client = ApiClient.from_config(config, transport=_make_transport())
    client.update_placeholders(placeholder_map)

    resolved = client.resources
    if not resolved:
        info("No saved resources.")
        suggest("Add some with: apilink profile add NAME --base-url URL --url name=/path")
        return

    rows = [[name, config.saved_urls.get(name, ""), url] for name, url in sorted(resolved.items())]
    print_table(["Resource", "Template", "URL"], rows, title="Resources")
