# crossrun/run_config.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .exceptions import ConfigConflictError, ConfigValidationError
from .package_manager import PackageManager

logger = logging.getLogger(__name__)


class RunMode(Enum):
    """How many commands run and in which order."""

    SINGLE = "single"
    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


@dataclass(frozen=True)
class RunConfig:
    """
    Immutable configuration for one invocation.
    Created once from CLI flags (and the optional config file); never mutated.
    """

    mode: RunMode = RunMode.SINGLE
    """Single command, sequential list, or concurrent list."""

    strict: bool = False
    """Fail on unknown environment variables instead of substituting ''."""

    raw: bool = False
    """Forward child output untouched: no labels, no diagnostics."""

    verbose: bool = False
    """Echo every command line to stderr before it is spawned."""

    package_manager: PackageManager | None = None
    """
    Explicit package manager for `npm:` scripts.
    None → detect from lock files in the current directory.
    """

    def __post_init__(self) -> None:
        if not isinstance(self.mode, RunMode):
            try:
                object.__setattr__(self, "mode", RunMode(self.mode))
            except ValueError:
                logger.warning(f"Invalid config: unknown mode {self.mode!r}")
                raise ConfigValidationError(
                    f"Invalid mode {self.mode!r}: must be single, sequential or concurrent"
                ) from None
        if self.package_manager is not None:
            object.__setattr__(
                self, "package_manager", PackageManager.parse(self.package_manager)
            )

    @classmethod
    def from_flags(
        cls,
        *,
        multiple: bool = False,
        parallel: bool = False,
        strict: bool = False,
        raw: bool = False,
        verbose: bool = False,
        package_manager: str | PackageManager | None = None,
        default_mode: RunMode = RunMode.SINGLE,
    ) -> RunConfig:
        """
        Build a RunConfig from boundary flags.

        Raises:
            ConfigConflictError: If multiple and parallel are both set
        """
        if multiple and parallel:
            raise ConfigConflictError()
        if multiple:
            mode = RunMode.SEQUENTIAL
        elif parallel:
            mode = RunMode.CONCURRENT
        else:
            mode = default_mode
        return cls(
            mode=mode,
            strict=strict,
            raw=raw,
            verbose=verbose,
            package_manager=package_manager,
        )

    @property
    def prefixed(self) -> bool:
        """Multi-command modes label each output stream."""
        return self.mode is not RunMode.SINGLE
