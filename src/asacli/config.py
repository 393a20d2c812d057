"""Configuration management with XDG paths, atomic writes, and named profiles.

This module handles all persistent configuration for asacli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.asacli/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Credentials** -- a single ``config.yaml`` whose top-level keys hold the
  ``default`` profile and whose ``profiles:`` mapping holds named profiles.
  Loaded by :func:`load_credentials` and written by
  :func:`save_credentials`.
* **Environment overrides** -- ``ASA_CLIENT_ID``, ``ASA_TEAM_ID``,
  ``ASA_KEY_ID``, ``ASA_ORG_ID`` and ``ASA_PRIVATE_KEY_PATH`` always win over
  the file; ``ASA_PROFILE`` selects the profile when no flag is given.
* **Validation** -- :func:`validate_credentials` rejects incomplete
  credentials before any network call.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so that a crash never leaves a truncated file behind.
"""

from __future__ import annotations

import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

import yaml

from asacli.exceptions import ConfigError
from asacli.models import Credentials

_APP_NAME = "asacli"
_CONFIG_FILENAME = "config.yaml"
DEFAULT_PROFILE = "default"

_CREDENTIAL_FIELDS = ("client_id", "team_id", "key_id", "org_id", "private_key_path")
_ENV_PREFIX = "ASA_"


# --- Directories ---

# XDG variable and its default under $HOME, per directory kind.
_XDG_DIRS = {
    "config": ("XDG_CONFIG_HOME", Path(".config")),
    "data": ("XDG_DATA_HOME", Path(".local") / "share"),
}


def _app_dir(kind: str) -> Path:
    """Resolve and create the per-user directory of *kind* (``config``/``data``).

    Linux and the BSDs follow the XDG base directory layout; macOS and
    Windows keep everything under ``~/.asacli`` with data in ``data/``.
    """
    system = platform.system()
    if system == "Linux" or system.endswith("BSD"):
        env_var, home_default = _XDG_DIRS[kind]
        base = Path(os.environ[env_var]) if os.environ.get(env_var) else Path.home() / home_default
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if kind == "data":
            path = path / "data"
    path.mkdir(mode=0o700, parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/asacli`` (``~/.config/asacli``), or ``~/.asacli``."""
    return _app_dir("config")


def get_data_dir() -> Path:
    """``$XDG_DATA_HOME/asacli`` (``~/.local/share/asacli``), or ``~/.asacli/data``.

    Holds per-profile token caches and crash logs.
    """
    return _app_dir("data")


def get_profile_data_dir(profile: Optional[str]) -> Path:
    """Return ``<data dir>/profiles/<profile>/``, creating it if necessary."""
    path = get_data_dir() / "profiles" / (profile or DEFAULT_PROFILE)
    path.mkdir(mode=0o700, parents=True, exist_ok=True)
    return path


def config_file_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


# --- Writing ---


def atomic_write(path: Path, data: str, mode: int = 0o600) -> None:
    """Replace *path* with *data* so readers see the old or the new file, never a mix.

    The content goes to a sibling temp file whose permissions are set to
    *mode* before anything is written; it is then renamed over *path*.

    Args:
        path: Destination file; parent directories are created.
        data: Text content.
        mode: Permission bits of the final file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    tmp_path = Path(tmp.name)
    try:
        with tmp:
            os.chmod(tmp_path, mode)
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


# --- YAML document ---


def _read_document() -> dict[str, Any]:
    """Load ``config.yaml`` as a dict; a missing file yields ``{}``.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    path = config_file_path()
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a mapping")
    return data


def _section_for(document: dict[str, Any], profile: str) -> Optional[dict[str, Any]]:
    if profile == DEFAULT_PROFILE:
        return document
    profiles = document.get("profiles") or {}
    section = profiles.get(profile) if isinstance(profiles, dict) else None
    return section if isinstance(section, dict) else None


def resolve_profile_name(cli_profile: Optional[str] = None) -> str:
    """Return the active profile name.

    Precedence (high to low): ``--profile`` flag, ``ASA_PROFILE``, then
    ``default``.
    """
    if cli_profile:
        return cli_profile
    return os.environ.get(f"{_ENV_PREFIX}PROFILE") or DEFAULT_PROFILE


def list_profiles() -> list[str]:
    """Return ``default`` (when configured) plus every named profile, sorted."""
    document = _read_document()
    names: list[str] = []
    if any(document.get(key) for key in _CREDENTIAL_FIELDS):
        names.append(DEFAULT_PROFILE)
    profiles = document.get("profiles") or {}
    if isinstance(profiles, dict):
        names.extend(sorted(str(name) for name in profiles))
    return names


def load_credentials(profile: Optional[str] = None) -> Credentials:
    """Load credentials for *profile* with environment overrides applied.

    Args:
        profile: Profile name; ``None`` or ``"default"`` reads the top-level
            keys of ``config.yaml``.

    Returns:
        The resolved :class:`~asacli.models.Credentials`.  Fields may be
        empty; call :func:`validate_credentials` before using them.

    Raises:
        ConfigError: If the file is invalid or a named profile does not exist.
    """
    name = profile or DEFAULT_PROFILE
    document = _read_document()
    section = _section_for(document, name)
    if section is None:
        available = ", ".join(list_profiles()) or "none"
        raise ConfigError(
            f"Profile '{name}' not found in {config_file_path()} (available: {available})"
        )

    values: dict[str, Any] = {}
    for key in _CREDENTIAL_FIELDS:
        raw = section.get(key)
        if raw is not None and raw != "":
            values[key] = str(raw)

    # Env vars always override the file.
    for key in _CREDENTIAL_FIELDS:
        env_value = os.environ.get(f"{_ENV_PREFIX}{key.upper()}")
        if env_value:
            values[key] = env_value

    if "private_key_path" in values:
        values["private_key_path"] = expand_path(values["private_key_path"])
    return Credentials(**values)


def save_credentials(credentials: Credentials, profile: Optional[str] = None) -> Path:
    """Persist credentials under *profile*, preserving every other profile.

    Returns:
        The path of the written config file (mode ``0o600``).
    """
    name = profile or DEFAULT_PROFILE
    document = _read_document()
    values = {
        key: getattr(credentials, key) or "" for key in _CREDENTIAL_FIELDS
    }
    if name == DEFAULT_PROFILE:
        document.update(values)
    else:
        profiles = document.get("profiles")
        if not isinstance(profiles, dict):
            profiles = {}
        profiles[name] = values
        document["profiles"] = profiles

    path = config_file_path()
    atomic_write(path, yaml.safe_dump(document, default_flow_style=False, sort_keys=False))
    return path


def validate_credentials(credentials: Credentials) -> None:
    """Fail fast when credentials cannot possibly authenticate.

    Raises:
        ConfigError: If a required field is empty or the private key file
            does not exist.
    """
    missing = credentials.missing_fields()
    if missing:
        raise ConfigError(
            f"missing required config: {', '.join(missing)}\n"
            "Run 'asa-cli configure' to set up credentials"
        )
    if not Path(credentials.private_key_path).is_file():
        raise ConfigError(f"private key file not found: {credentials.private_key_path}")


def expand_path(path: str) -> str:
    """Expand a leading ``~`` to the user's home directory."""
    return str(Path(path).expanduser()) if path.startswith("~") else path
