# crossrun/env_files.py
"""
.env file loading for the --env flag.

Files are loaded into os.environ without overriding variables that are
already set, so earlier files take precedence over later ones.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def env_file_names(node_env: str | None = None) -> list[str]:
    """Candidate .env files in load order."""
    node_env = node_env or os.environ.get("NODE_ENV") or "development"
    return [".env", ".env.local", f".env.{node_env}", f".env.{node_env}.local"]


def load_env_files(root: str | Path | None = None, node_env: str | None = None) -> list[str]:
    """
    Load every existing .env file from root (default: cwd).

    Returns:
        Names of the files that could not be loaded.
    """
    root = Path(root) if root is not None else Path.cwd()
    failed: list[str] = []
    for name in env_file_names(node_env):
        path = root / name
        if not path.is_file():
            continue
        try:
            load_dotenv(path, override=False, interpolate=True, encoding="utf-8")
            logger.debug(f"Loaded {path}")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to load {name}: {e}")
            failed.append(name)
    return failed
