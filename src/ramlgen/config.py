"""Configuration resolution, pre-flight validation and atomic file writes.

This module handles all configuration for ramlgen:

* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables and the project-local ``./ramlgen.json`` into one
  :class:`~ramlgen.models.GeneratorConfig`.
* **Pre-flight validation** -- :func:`validate_config` checks the output
  directory and base package before anything is generated.
* **Directory layout** -- :func:`get_data_dir` is XDG compliant on
  Linux/BSD and ``~/.ramlgen/`` elsewhere; crash logs live there.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so an interrupted run never leaves half-written
artifacts behind.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from ramlgen.exceptions import ConfigError
from ramlgen.models import GeneratorConfig

logger = logging.getLogger(__name__)

_APP_NAME = "ramlgen"
_PROJECT_CONFIG_FILENAME = "ramlgen.json"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/ramlgen/`` (default ``~/.local/share/ramlgen/``).
    On macOS/Windows: ``~/.ramlgen/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
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
        fd = None  # prevent double-close in finally
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


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./ramlgen.json``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but does not contain a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _env_flag(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable {name} must be a boolean, got '{raw}'")


# --- Precedence resolution ---


def resolve_config(
    cli_output_dir: Optional[Path] = None,
    cli_base_package: Optional[str] = None,
    cli_use_validation: Optional[bool] = None,
) -> GeneratorConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``RAMLGEN_OUTPUT_DIR``,
           ``RAMLGEN_BASE_PACKAGE``, ``RAMLGEN_USE_VALIDATION``)
        3. Project config (``./ramlgen.json``)
        4. Defaults

    Raises:
        ConfigError: If the project config or an environment value is invalid.
    """
    # 4 + 3. Defaults overlaid with project-local config
    project = load_project_config() or {}
    try:
        config = GeneratorConfig.model_validate(project)
    except ValueError as exc:
        raise ConfigError(f"Invalid project config: {exc}") from exc

    # 2. Environment variables
    env_output = os.environ.get("RAMLGEN_OUTPUT_DIR")
    if env_output:
        config.output_dir = Path(env_output)
    env_package = os.environ.get("RAMLGEN_BASE_PACKAGE")
    if env_package:
        config.base_package = env_package
    env_validation = _env_flag("RAMLGEN_USE_VALIDATION")
    if env_validation is not None:
        config.use_validation = env_validation

    # 1. CLI flags (highest precedence)
    if cli_output_dir is not None:
        config.output_dir = cli_output_dir
    if cli_base_package is not None:
        config.base_package = cli_base_package
    if cli_use_validation is not None:
        config.use_validation = cli_use_validation

    return config


# --- Validation ---


def validate_config(config: GeneratorConfig, require_output: bool = True) -> None:
    """Check *config* before a run.

    The output directory must already exist, be a directory and be
    writable. A non-empty directory is allowed but logged, since stale
    artifacts from a previous run may remain.

    Args:
        config: The configuration to check.
        require_output: Whether an output directory is needed at all.

    Raises:
        ConfigError: On the first failed check.
    """
    if not config.base_package.strip():
        raise ConfigError("base package name can't be empty")

    if not require_output:
        return

    output_dir = config.output_dir
    if output_dir is None:
        raise ConfigError("output directory can't be empty")
    if not output_dir.is_dir():
        raise ConfigError(f"{output_dir} is not a pre-existing directory")
    if not os.access(output_dir, os.W_OK):
        raise ConfigError(f"{output_dir} can't be written to")
    if any(output_dir.iterdir()):
        logger.warning(
            "Directory %s is not empty, generation will work but pre-existing "
            "files may remain and produce unexpected results",
            output_dir,
        )
