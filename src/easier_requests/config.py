"""Configuration management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.easier-requests/`` on macOS and Windows.  See
  :func:`get_config_dir` and :func:`get_data_dir`.
* **Global config** -- a single :class:`~easier_requests.models.GlobalConfig`
  JSON file holding default request options and transport settings.
* **Precedence resolution** -- :func:`resolve_config` layers environment
  variables and CLI flags over the file.

File writes use a temp-file-then-rename strategy (:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from easier_requests.exceptions import ConfigError
from easier_requests.models import GlobalConfig

_APP_NAME = "easier-requests"
_CONFIG_FILENAME = "config.json"

ENV_THROW_ON_FAILURE = "EASIER_REQUESTS_THROW_ON_FAILURE"
ENV_BASE_URL = "EASIER_REQUESTS_BASE_URL"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

SETTABLE_KEYS = (
    "options.throw_on_failure",
    "transport.base_url",
    "transport.timeout",
    "transport.verify_ssl",
)
"""Dotted keys accepted by :func:`set_config_value`."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on platforms that follow the XDG Base Directory spec (Linux/BSD)."""
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(xdg_var: str, xdg_default: tuple[str, ...], fallback: tuple[str, ...]) -> Path:
    """Resolve and create one of the application's directories.

    On XDG platforms the directory is ``$<xdg_var>/easier-requests``, with
    ``~/<xdg_default>`` standing in for an unset or empty variable.
    Elsewhere it is ``~/.easier-requests/<fallback>``.
    """
    if _is_xdg_platform():
        base = os.environ.get(xdg_var) or Path.home().joinpath(*xdg_default)
        path = Path(base) / _APP_NAME
    else:
        path = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json``.

    ``$XDG_CONFIG_HOME/easier-requests/`` (default ``~/.config/easier-requests/``)
    on Linux/BSD, ``~/.easier-requests/`` elsewhere.
    """
    return _app_dir("XDG_CONFIG_HOME", (".config",), ())


def get_data_dir() -> Path:
    """Directory holding crash logs (under ``logs/``).

    ``$XDG_DATA_HOME/easier-requests/`` (default
    ``~/.local/share/easier-requests/``) on Linux/BSD,
    ``~/.easier-requests/data/`` elsewhere.
    """
    return _app_dir("XDG_DATA_HOME", (".local", "share"), ("data",))


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using a temp file in the same directory + rename."""
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


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration.

    Returns:
        The stored :class:`~easier_requests.models.GlobalConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist *config* atomically to the global config file."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


def set_config_value(key: str, value: str) -> GlobalConfig:
    """Update one setting in the global config file and save it.

    Args:
        key: One of :data:`SETTABLE_KEYS`.
        value: The new value as typed on the command line; validated and
            coerced by the config models.  An empty string clears
            ``transport.base_url``.

    Returns:
        The saved configuration.

    Raises:
        ConfigError: For an unknown key or a value that does not validate.
    """
    if key not in SETTABLE_KEYS:
        raise ConfigError(
            f"Unknown config key '{key}'. Valid keys: {', '.join(SETTABLE_KEYS)}"
        )
    section, name = key.split(".", 1)

    data: dict[str, Any] = load_global_config().model_dump(mode="json")
    data[section][name] = None if (key == "transport.base_url" and value == "") else value
    try:
        config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from exc

    save_global_config(config)
    return config


# --- Precedence resolution ---


def parse_bool(value: str, source: str) -> bool:
    """Interpret a yes/no style string.

    Raises:
        ConfigError: If *value* is not a recognised boolean spelling.
    """
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean {value!r} for {source}")


def resolve_config(
    cli_throw_on_failure: Optional[bool] = None,
    cli_base_url: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_throw_on_failure``, ``cli_base_url``)
        2. Environment variables (``EASIER_REQUESTS_THROW_ON_FAILURE``,
           ``EASIER_REQUESTS_BASE_URL``)
        3. User config (``~/.config/easier-requests/config.json``)
        4. Defaults

    Returns:
        A new :class:`~easier_requests.models.GlobalConfig`.
    """
    config = load_global_config()

    throw_on_failure = config.options.throw_on_failure
    env_throw = os.environ.get(ENV_THROW_ON_FAILURE)
    if env_throw:
        throw_on_failure = parse_bool(env_throw, ENV_THROW_ON_FAILURE)
    if cli_throw_on_failure is not None:
        throw_on_failure = cli_throw_on_failure

    base_url = config.transport.base_url
    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        base_url = env_base_url
    if cli_base_url is not None:
        base_url = cli_base_url

    return config.model_copy(
        update={
            "options": config.options.model_copy(update={"throw_on_failure": throw_on_failure}),
            "transport": config.transport.model_copy(update={"base_url": base_url}),
        }
    )
