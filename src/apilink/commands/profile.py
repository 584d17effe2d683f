"""Profile commands -- create, inspect and remove saved client configurations.

A profile is a named :class:`~apilink.models.Profile` stored as JSON in
the apilink config directory. Select one per invocation with
``apilink -p NAME ...`` or pin it for a project with
``{"default_profile": "NAME"}`` in ``./apilink.json``.
"""

from __future__ import annotations

from typing import Optional

import typer

from apilink.exceptions import ApilinkError
from apilink.output import error, format_response, info, print_table, success, suggest


profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("list")
def profile_list() -> None:
    """List saved profiles."""
    from apilink.config import list_profiles, load_profile

    names = list_profiles()
    if not names:
        info("No profiles saved.")
        suggest("Create one with: apilink profile add NAME --base-url URL")
        return

    rows = []
    for name in names:
        try:
            profile = load_profile(name)
        except ApilinkError as exc:
            rows.append([name, f"<invalid: {exc}>", ""])
            continue
        rows.append([name, profile.base_url or "", str(len(profile.saved_urls))])
    print_table(["Name", "Base URL", "Resources"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(
    name: str = typer.Argument(help="Profile name."),
) -> None:
    """Show a profile. Explicit tokens are masked."""
    from apilink.config import load_profile

    try:
        profile = load_profile(name)
    except ApilinkError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    data = profile.model_dump(mode="json")
    if data.get("auth_token"):
        data["auth_token"] = "****"
    format_response(data)


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Base URL for relative resources."),
    url: Optional[list[str]] = typer.Option(
        None, "--url", help="Saved resource NAME=TEMPLATE, e.g. user=/users/:id (repeatable)."
    ),
    placeholder: Optional[list[str]] = typer.Option(
        None, "--placeholder", help="Default placeholder NAME=VALUE (repeatable)."
    ),
    token_name: Optional[str] = typer.Option(
        None, "--token-name", help="Environment variable holding the token."
    ),
    auth_type: str = typer.Option("bearer", "--auth-type", help="bearer or apikey."),
    from_file: Optional[str] = typer.Option(
        None, "--from-file", help="Import settings from a JSON or YAML config file."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing profile."),
) -> None:
    """Create or replace a profile.

    Example::

        apilink profile add myapi --base-url https://api.example.com \\
            --url users=/users --url user=/users/:id --token-name MYAPI_TOKEN
    """
    from apilink.commands.request import parse_pairs
    from apilink.config import load_client_config, profile_exists, save_profile
    from apilink.models import ClientConfig, Profile

    if profile_exists(name) and not force:
        error(f"Profile '{name}' already exists")
        suggest("Pass --force to overwrite it.")
        raise typer.Exit(code=2)

    try:
        base = load_client_config(from_file) if from_file else ClientConfig()
        saved_urls = {**base.saved_urls, **parse_pairs(url)}
        placeholders = parse_pairs(placeholder) or base.placeholders
    except ApilinkError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    profile = Profile(
        name=name,
        base_url=base_url or base.base_url,
        saved_urls=saved_urls,
        jwt_token_name=token_name or base.jwt_token_name,
        auth_type=auth_type if auth_type != "bearer" else base.auth_type,
        auth_token=base.auth_token,
        placeholders=placeholders,
    )
    save_profile(profile)
    success(f"Saved profile '{name}' with {len(saved_urls)} resource(s)")


@profile_app.command("remove")
def profile_remove(
    name: str = typer.Argument(help="Profile name."),
) -> None:
    """Delete a profile."""
    from apilink.config import delete_profile

    try:
        delete_profile(name)
    except ApilinkError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    success(f"Removed profile '{name}'")
