# crossrun/load_config.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # <3.11

from .exceptions import ConfigValidationError
from .package_manager import PackageManager
from .run_config import RunMode

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "crossrun.toml"

_BOOL_KEYS = ("strict", "raw", "verbose", "env_files")


@dataclass(frozen=True)
class FileConfig:
    """
    Project defaults read from crossrun.toml.
    CLI flags override these; a flag that is set always wins.
    """

    mode: RunMode = RunMode.SINGLE
    strict: bool = False
    raw: bool = False
    verbose: bool = False
    package_manager: PackageManager | None = None
    env_files: bool = False
    """Load .env files as if --env were given."""

    source: Path | None = None


def find_config(root: str | Path | None = None) -> Path | None:
    """Return crossrun.toml in root (default: cwd) if it exists."""
    path = (Path(root) if root is not None else Path.cwd()) / CONFIG_FILENAME
    return path if path.is_file() else None


def load_config(path: str | Path | BinaryIO) -> FileConfig:
    """
    Load and validate a crossrun.toml file.

    Only the [run] table is read. Unknown keys are rejected.
    """
    config_path: Path | None = None
    try:
        if not hasattr(path, "read"):
            config_path = Path(path).resolve()
            with open(config_path, "rb") as f:
                data = tomli.load(f)
        else:
            data = tomli.load(path)  # type: ignore
    except OSError as e:
        raise ConfigValidationError(f"Cannot read config: {e}") from None
    except tomli.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {config_path or 'config'}: {e}") from None

    table: dict[str, Any] = data.get("run", {})
    if not isinstance(table, dict):
        raise ConfigValidationError("[run] must be a table")

    unknown = set(table) - {"mode", "package_manager", *_BOOL_KEYS}
    if unknown:
        raise ConfigValidationError(f"Unknown keys in [run]: {sorted(unknown)}")

    for key in _BOOL_KEYS:
        if key in table and not isinstance(table[key], bool):
            raise ConfigValidationError(f"run.{key} must be true or false")

    kwargs: dict[str, Any] = {k: table[k] for k in _BOOL_KEYS if k in table}
    if "mode" in table:
        try:
            kwargs["mode"] = RunMode(table["mode"])
        except ValueError:
            raise ConfigValidationError(
                f"Invalid mode {table['mode']!r}: must be single, sequential or concurrent"
            ) from None
    if table.get("package_manager") is not None:
        kwargs["package_manager"] = PackageManager.parse(table["package_manager"])

    config = FileConfig(source=config_path, **kwargs)
    logger.debug(f"Loaded config from {config_path or 'stream'}: {config}")
    return config
