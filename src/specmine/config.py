"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for specmine:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specmine/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Global config** -- A single :class:`~specmine.models.GlobalConfig`
  JSON file storing defaults (documentation site, resources, snowflakes,
  cache settings).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.
* **Curated overrides** -- :func:`load_overrides` reads the hand-fixed
  operation and model records from JSON or YAML.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
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

from specmine.exceptions import ConfigError, OverrideError
from specmine.models import CuratedOverrides, GlobalConfig

_APP_NAME = "specmine"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specmine.json"
_OVERRIDE_SUFFIXES = (".json", ".yaml", ".yml")


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specmine/`` (default ``~/.config/specmine/``).
    On macOS/Windows: ``~/.specmine/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if necessary.

    Holds fetched documentation pages. Safe to delete at any time.

    On Linux/BSD: ``$XDG_CACHE_HOME/specmine/`` (default ``~/.cache/specmine/``).
    On macOS/Windows: ``~/.specmine/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specmine/`` (default ``~/.local/share/specmine/``).
    On macOS/Windows: ``~/.specmine/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
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


def write_output_file(path: str | Path, data: str) -> None:
    """Atomically write a build artifact (the definition JSON) to *path*."""
    _atomic_write(Path(path).expanduser(), data)


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~specmine.models.GlobalConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specmine.json``.

    The file holds any subset of :class:`~specmine.models.GlobalConfig`
    fields, typically ``source`` and ``overrides`` so a repository can pin
    its documentation checkout and curated records.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_source: Optional[str] = None,
    cli_docs_url: Optional[str] = None,
    cli_overrides: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_source``, ``cli_docs_url``, ``cli_overrides``,
           ``cli_format``)
        2. Environment variables (``SPECMINE_SOURCE``, ``SPECMINE_DOCS_URL``,
           ``SPECMINE_OVERRIDES``)
        3. Project config (``./specmine.json``)
        4. User config (``~/.config/specmine/config.json``)
        5. Defaults

    Raises:
        ConfigError: If a layer fails validation.
    """
    global_cfg = load_global_config()

    project = load_project_config()
    if project:
        merged = global_cfg.model_dump(mode="json")
        merged.update(project)
        try:
            global_cfg = GlobalConfig.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    layers = (
        ("source", os.environ.get("SPECMINE_SOURCE"), cli_source),
        ("docs_url", os.environ.get("SPECMINE_DOCS_URL"), cli_docs_url),
        ("overrides", os.environ.get("SPECMINE_OVERRIDES"), cli_overrides),
    )
    for field, env_value, cli_value in layers:
        if cli_value is not None:
            setattr(global_cfg, field, cli_value)
        elif env_value:
            setattr(global_cfg, field, env_value)

    if cli_format is not None:
        global_cfg.output.format = cli_format

    return global_cfg


# --- Curated overrides ---


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hinted as YAML), then falls back to YAML.

    Raises:
        OverrideError: If the content cannot be parsed as either format or
            is not a mapping.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise OverrideError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise OverrideError(
                    f"Overrides must be a JSON/YAML object (got {type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise OverrideError(
                f"Overrides must be a JSON/YAML object (got {type(result).__name__})"
            )
        return result

    msg = "Failed to parse overrides as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise OverrideError(msg)


def _read_document(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise OverrideError(f"Failed to read overrides {path}: {exc}") from exc
    suffix = path.suffix.lower()
    hint = "json" if suffix == ".json" else "yaml" if suffix in (".yaml", ".yml") else ""
    return _parse_content(content, hint=hint)


def _find_part(directory: Path, stem: str) -> Optional[Path]:
    for suffix in _OVERRIDE_SUFFIXES:
        candidate = directory / f"{stem}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def load_overrides(path: Optional[str | Path]) -> CuratedOverrides:
    """Load curated operation and model records.

    *path* is either a directory holding ``operations.{json,yaml,yml}`` and
    ``models.{json,yaml,yml}`` (each keyed by resource, then record key), or
    a single document with top-level ``operations`` and ``models`` keys.

    Args:
        path: File or directory; ``None`` yields empty overrides.

    Returns:
        The validated :class:`~specmine.models.CuratedOverrides`.

    Raises:
        OverrideError: If the path does not exist, cannot be parsed, or the
            records fail validation.
    """
    if path is None:
        return CuratedOverrides()

    location = Path(path).expanduser()
    data: dict[str, Any]
    if location.is_dir():
        data = {}
        for stem in ("operations", "models"):
            part = _find_part(location, stem)
            if part is not None:
                data[stem] = _read_document(part)
    elif location.is_file():
        data = _read_document(location)
    else:
        raise OverrideError(f"Overrides not found: {location}")

    try:
        return CuratedOverrides.model_validate(data)
    except ValidationError as exc:
        raise OverrideError(f"Invalid overrides at {location}: {exc}") from exc
