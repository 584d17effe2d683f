"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module covers everything needed to build a
:class:`~apilink.models.ClientConfig` outside of Python code:

* **Config files** -- :func:`load_client_config` reads a JSON or YAML file
  with the same keys :meth:`~apilink.api.ApiClient.init` accepts.
* **Profiles** -- One JSON file per named configuration under
  ``$XDG_CONFIG_HOME/apilink/profiles/``, each deserialised into a
  :class:`~apilink.models.Profile`. Managed via :func:`load_profile`,
  :func:`save_profile`, :func:`delete_profile`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables and project-local config into the effective
  configuration.

Tokens are never written here; profiles store a token *name* to be
resolved at request time, or an explicit token the user chose to save.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from apilink.exceptions import ConfigError
from apilink.models import ClientConfig, Profile

_APP_NAME = "apilink"
_PROJECT_CONFIG_FILENAME = "apilink.json"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/apilink/`` (default ``~/.config/apilink/``).
    On macOS/Windows: ``~/.apilink/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    """Return the profiles directory (``<config_dir>/profiles/``), creating it if necessary."""
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        # Profiles may hold an explicit token
        os.chmod(tmp_path, 0o600)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config files ---


def _parse_content(content: str, hint: str, source: str) -> dict[str, Any]:
    """Parse *content* as JSON or YAML according to *hint* (``json``, ``yaml`` or ``""``)."""
    if hint != "yaml":
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise ConfigError(f"Invalid JSON in {source}: {exc}") from exc
        else:
            return _require_mapping(data, source)

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source}: {exc}") from exc
    return _require_mapping(data, source)


def _require_mapping(data: Any, source: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ConfigError(f"Config in {source} must be a mapping, got {type(data).__name__}")
    return data


def load_client_config(source: str | Path) -> ClientConfig:
    """Load a :class:`~apilink.models.ClientConfig` from a JSON or YAML file.

    The format is chosen from the file extension (``.json``, ``.yaml``,
    ``.yml``); other extensions try JSON first, then YAML.

    Args:
        source: Path to the config file.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file is missing, unreadable, unparseable, or
            fails validation.
    """
    path = Path(source).expanduser()
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    suffix = path.suffix.lower()
    hint = "json" if suffix == ".json" else "yaml" if suffix in (".yaml", ".yml") else ""
    data = _parse_content(content, hint, str(path))

    try:
        return ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


# --- Profiles ---


def _profile_path(name: str) -> Path:
    """Path to a named profile's JSON file."""
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return all profile names found in the profiles directory, sorted alphabetically."""
    profiles_dir = get_profiles_dir()
    return sorted(p.stem for p in profiles_dir.glob("*.json") if p.is_file())


def load_profile(name: str) -> Profile:
    """Load and validate a profile from disk.

    Args:
        name: Profile name (corresponds to ``<name>.json`` in the profiles
            directory).

    Raises:
        ConfigError: If the profile file does not exist, contains invalid
            JSON, or fails validation.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return Profile.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    """Persist a profile atomically to the profiles directory."""
    data = profile.model_dump(mode="json")
    _atomic_write(_profile_path(profile.name), json.dumps(data, indent=2) + "\n")


def delete_profile(name: str) -> None:
    """Delete a profile's JSON file from disk.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./apilink.json``.

    The file typically sets ``default_profile`` so that a repository can pin
    which profile to use.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        return _require_mapping(json.loads(text), str(path))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_config: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> Optional[ClientConfig]:
    """Resolve the effective client configuration.

    The configuration source is picked in this order (first hit wins):
        1. ``cli_config`` file, then ``$APILINK_CONFIG``
        2. ``cli_profile``, then ``$APILINK_PROFILE``
        3. ``default_profile`` from ``./apilink.json``

    Overrides applied on top:
        * ``base_url``: ``cli_base_url`` > ``$APILINK_BASE_URL``
        * ``auth_token``: ``$APILINK_AUTH_TOKEN``

    Returns:
        The resolved configuration, or ``None`` when no source is configured
        and no override supplies a base URL.

    Raises:
        ConfigError: If a named file or profile cannot be loaded.
    """
    config: Optional[ClientConfig] = None

    config_file = cli_config or os.environ.get("APILINK_CONFIG")
    if config_file:
        config = load_client_config(config_file)
    else:
        profile_name = cli_profile or os.environ.get("APILINK_PROFILE")
        if profile_name is None:
            project = load_project_config()
            if project is not None:
                profile_name = project.get("default_profile")
        if profile_name:
            config = load_profile(profile_name)

    base_url = cli_base_url or os.environ.get("APILINK_BASE_URL")
    auth_token = os.environ.get("APILINK_AUTH_TOKEN")

    if config is None:
        if not base_url:
            return None
        config = ClientConfig()

    updates: dict[str, Any] = {}
    if base_url:
        updates["base_url"] = base_url
    if auth_token:
        updates["auth_token"] = auth_token
    return config.model_copy(update=updates) if updates else config
