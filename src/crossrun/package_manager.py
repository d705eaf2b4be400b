# crossrun/package_manager.py
"""
Package manager detection for `npm:` script references.

Detection looks for lock files in a fixed priority order and only accepts a
package manager whose executable can be found on PATH.
"""

from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path

from .exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


class PackageManager(Enum):
    """Package managers that can run manifest scripts."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"

    @classmethod
    def parse(cls, name: str | PackageManager) -> PackageManager:
        """Coerce a name to a PackageManager, rejecting anything unknown."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            raise ConfigValidationError(f"Invalid package manager {name}") from None


# Detection priority: first entry wins when several lock files exist.
LOCK_FILES: dict[PackageManager, str] = {
    PackageManager.YARN: "yarn.lock",
    PackageManager.PNPM: "pnpm-lock.yaml",
    PackageManager.NPM: "package-lock.json",
}


def check_lock_file(root: str | Path, pm: PackageManager) -> bool:
    return (Path(root) / LOCK_FILES[pm]).exists()


def check_installation(pm: PackageManager) -> str | None:
    """Return the absolute path of the package manager executable, or None."""
    path = shutil.which(pm.value)
    logger.debug(f"Lookup of '{pm.value}' on PATH -> {path}")
    return path


def check_override(name: str | PackageManager) -> str | None:
    """
    Resolve an explicitly requested package manager.

    Raises:
        ConfigValidationError: If name is not npm, yarn or pnpm
    """
    return check_installation(PackageManager.parse(name))


def detect_package_manager(
    root: str | Path | None = None,
    fallback: PackageManager = PackageManager.NPM,
) -> str | None:
    """
    Detect the package manager for a project directory.

    Lock files are checked in the order yarn, pnpm, npm; the first one whose
    tool is installed wins. Otherwise the fallback is used if installed.

    Returns:
        Absolute path to the executable, or None when nothing is available.
        None is not an error until an `npm:` command actually needs it.
    """
    root = Path(root) if root is not None else Path.cwd()
    for pm in LOCK_FILES:
        if check_lock_file(root, pm):
            path = check_installation(pm)
            if path is not None:
                logger.debug(f"Detected {pm.value} from {LOCK_FILES[pm]} in {root}")
                return path
    path = check_installation(fallback)
    if path is None:
        logger.debug(f"No package manager available in {root}")
    return path
