# crossrun/script_matcher.py
"""
Glob matching of `npm:` script references against a package.json manifest.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from fnmatch import fnmatchcase
from pathlib import Path

from .exceptions import ConfigValidationError, NoScriptMatchedError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"

_GLOB_CHARS = re.compile(r"[*?\[]")


def has_glob(pattern: str) -> bool:
    """True if pattern contains a shell glob metacharacter."""
    return _GLOB_CHARS.search(pattern) is not None


def read_manifest_scripts(root: str | Path | None = None) -> list[str]:
    """
    Read the script names declared in package.json, in declaration order.

    The file is read on every call. A manifest without a `scripts` table
    yields an empty list.
    """
    path = Path(root) if root is not None else Path.cwd()
    path = path / MANIFEST_FILENAME
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigValidationError(f"Cannot read {path}: {e}") from None
    scripts = (data.get("scripts") or {}) if isinstance(data, dict) else {}
    if not isinstance(scripts, dict):
        raise ConfigValidationError(f"'scripts' in {path} must be an object")
    logger.debug(f"Read {len(scripts)} scripts from {path}")
    return list(scripts)


def match_scripts(pattern: str, declared: Iterable[str]) -> list[str]:
    """
    Match a glob pattern against declared script names.

    Supports `*`, `?` and `[...]` classes. Order follows declaration order.

    Raises:
        NoScriptMatchedError: If no declared name matches
    """
    matches = [name for name in declared if fnmatchcase(name, pattern)]
    if not matches:
        raise NoScriptMatchedError(pattern)
    logger.debug(f"Pattern '{pattern}' matched {matches}")
    return matches
