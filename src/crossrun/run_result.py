# crossrun/run_result.py
from __future__ import annotations

import datetime
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import CrossRunError

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Possible states of a command execution."""
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class RunResult:
    """
    Outcome of a single command: success (exit code 0) or failure with a cause.

    Created by ProcessSpawner for every spawn, and by RunOrchestrator for
    references that fail to resolve before anything is spawned.
    """

    # ------------------------------------------------------------------ #
    # Identification
    # ------------------------------------------------------------------ #
    command: str = ""
    """Command line (or unresolved reference) this result belongs to."""

    label: str | None = None
    """Output prefix label, if the command was labeled."""

    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # ------------------------------------------------------------------ #
    # Outcome
    # ------------------------------------------------------------------ #
    state: RunState = RunState.PENDING

    success: bool | None = None
    """True = success, False = failed, None = still pending/running."""

    exit_code: int | None = None

    error: CrossRunError | None = None
    """Cause of failure: NonZeroExitError, SpawnFailureError, or a resolution error."""

    # ------------------------------------------------------------------ #
    # Timing
    # ------------------------------------------------------------------ #
    start_time: datetime.datetime | None = None
    end_time: datetime.datetime | None = None
    duration: datetime.timedelta | None = None

    # ------------------------------------------------------------------ #
    # State transitions
    # ------------------------------------------------------------------ #
    def mark_running(self) -> None:
        """Transition to RUNNING and record start time."""
        if self.state is not RunState.PENDING:
            logger.warning(f"Run {self.run_id[:8]} marked running from invalid state {self.state}")
        self.state = RunState.RUNNING
        self.start_time = datetime.datetime.now()
        logger.debug(f"Run {self.run_id[:8]} ('{self.command}') started")

    def mark_success(self, exit_code: int = 0) -> None:
        self.state = RunState.SUCCESS
        self.success = True
        self.exit_code = exit_code
        self._finalize()
        logger.debug(f"Run {self.run_id[:8]} ('{self.command}') succeeded in {self.duration_str}")

    def mark_failed(self, error: CrossRunError, exit_code: int | None = None) -> None:
        self.state = RunState.FAILED
        self.success = False
        self.error = error
        self.exit_code = exit_code
        self._finalize()
        logger.debug(f"Run {self.run_id[:8]} ('{self.command}') failed: {error}")

    def _finalize(self) -> None:
        self.end_time = datetime.datetime.now()
        if self.start_time:
            self.duration = self.end_time - self.start_time
        else:
            self.duration = datetime.timedelta(0)

    def raise_for_failure(self) -> None:
        """Raise the captured error if this run failed."""
        if self.error is not None:
            raise self.error

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #
    @property
    def duration_secs(self) -> float | None:
        return self.duration.total_seconds() if self.duration is not None else None

    @property
    def duration_str(self) -> str:
        """Human-readable duration (e.g. '452ms', '2.4s', '1m 23s')."""
        secs = self.duration_secs
        if secs is None:
            return "-"
        if secs < 1:
            return f"{secs * 1000:.0f}ms"
        if secs < 60:
            return f"{secs:.1f}s"
        mins, secs = divmod(secs, 60)
        return f"{int(mins)}m {secs:.0f}s"

    def __repr__(self) -> str:
        return (
            f"RunResult(id={self.run_id[:8]}, cmd='{self.command}', "
            f"state={self.state.value}, exit={self.exit_code}, dur={self.duration_str})"
        )
