# crossrun/run_orchestrator.py
"""
RunOrchestrator - top-level entry point for one crossrun invocation.

Responsibilities:
- Split leading NAME=value assignments off the arguments into the environment
- Expand variable references in every command token
- Dispatch by RunMode (single / sequential / concurrent)
- Resolve `npm:` script references through the package manager
- Aggregate per-command RunResults and raise the first failure
"""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
from collections.abc import Awaitable, Callable, Mapping, Sequence
from functools import partial
from pathlib import Path

from .env_expander import expand_env, parse_inline_env
from .exceptions import (
    ConfigValidationError,
    CrossRunError,
    NoPackageManagerError,
    NoScriptMatchedError,
)
from .output_prefix import ColorCursor, OutputPrefix, command_label, script_label
from .package_manager import check_override, detect_package_manager
from .process_spawner import CommandInvocation, ProcessSpawner
from .run_config import RunConfig, RunMode
from .run_result import RunResult
from .script_matcher import has_glob, match_scripts, read_manifest_scripts

logger = logging.getLogger(__name__)

NPM_PREFIX = "npm:"


class RunOrchestrator:
    """
    Runs the commands of one invocation according to a RunConfig.

    The environment is built once per run() call and shared read-only by
    every command; each subprocess receives its own copy.
    """

    def __init__(
        self,
        config: RunConfig,
        spawner: ProcessSpawner | None = None,
        cwd: str | Path | None = None,
        base_env: Mapping[str, str] | None = None,
    ):
        """
        Args:
            config: Immutable run configuration
            spawner: Process spawner (default: built from config.raw/verbose)
            cwd: Working directory for children, package.json and lock files
                 (default: cwd at run time)
            base_env: Inherited environment (default: os.environ at run time)
        """
        self.config = config
        self._spawner = spawner or ProcessSpawner(raw=config.raw, verbose=config.verbose)
        self._cwd = Path(cwd) if cwd is not None else None
        self._base_env = base_env

    @property
    def cwd(self) -> Path:
        return self._cwd if self._cwd is not None else Path.cwd()

    # ================================================================
    # Entry point
    # ================================================================

    async def run(self, args: Sequence[str]) -> list[RunResult]:
        """
        Run the given arguments.

        Returns:
            One RunResult per spawned command, in settlement order.

        Raises:
            UnknownVariableError: Strict expansion miss (nothing is spawned)
            CrossRunError: The first per-command failure
        """
        overrides, args = parse_inline_env(args)
        base_env = os.environ if self._base_env is None else self._base_env
        env = {**base_env, **overrides}
        if not args:
            logger.debug("Nothing to run")
            return []

        pm = self._resolve_package_manager()
        cursor = ColorCursor()
        mode = self.config.mode
        logger.debug(f"Running {len(args)} argument(s) in {mode.value} mode (pm={pm})")

        if mode is RunMode.SINGLE:
            tokens = [expand_env(arg, env, self.config.strict) for arg in args]
            results = await self._run_command(tokens, env, pm, cursor)
        else:
            commands = [self._tokenize(arg, env) for arg in args]
            commands = [tokens for tokens in commands if tokens]
            if mode is RunMode.SEQUENTIAL:
                results = await self._run_sequential(
                    [partial(self._run_command, tokens, env, pm, cursor) for tokens in commands]
                )
            else:
                results = await self._run_concurrent(
                    [self._run_command(tokens, env, pm, cursor) for tokens in commands]
                )

        _raise_first_failure(results)
        return results

    # ================================================================
    # Helpers
    # ================================================================

    def _tokenize(self, arg: str, env: Mapping[str, str]) -> list[str]:
        """Shell-split one command string and expand each token."""
        try:
            tokens = shlex.split(arg)
        except ValueError as e:
            raise ConfigValidationError(f"Cannot parse command {arg!r}: {e}") from None
        return [expand_env(token, env, self.config.strict) for token in tokens]

    def _resolve_package_manager(self) -> str | None:
        if self.config.package_manager is not None:
            return check_override(self.config.package_manager)
        return detect_package_manager(self.cwd)

    def _prefix(self, label: str, cursor: ColorCursor) -> OutputPrefix:
        slot = cursor.next_slot()
        return OutputPrefix(label=label if self.config.prefixed else None, color_slot=slot)

    async def _run_sequential(
        self, factories: Sequence[Callable[[], Awaitable[list[RunResult]]]]
    ) -> list[RunResult]:
        """Await each run in order; stop after the first failure."""
        results: list[RunResult] = []
        for factory in factories:
            batch = await factory()
            results.extend(batch)
            if any(not r.success for r in batch):
                break
        return results

    async def _run_concurrent(
        self, runs: Sequence[Awaitable[list[RunResult]]]
    ) -> list[RunResult]:
        """Start every run, wait for all of them, collect in settlement order."""
        tasks = [asyncio.ensure_future(run) for run in runs]
        results: list[RunResult] = []
        for settled in asyncio.as_completed(tasks):
            results.extend(await settled)
        return results

    # ================================================================
    # Command dispatch
    # ================================================================

    async def _run_command(
        self,
        tokens: Sequence[str],
        env: Mapping[str, str],
        pm: str | None,
        cursor: ColorCursor,
    ) -> list[RunResult]:
        if not tokens:
            return []
        command, args = tokens[0], tuple(tokens[1:])
        try:
            if command.startswith(NPM_PREFIX):
                if not pm:
                    raise NoPackageManagerError(command)
                return await self._run_package_script(
                    command[len(NPM_PREFIX):], args, env, pm, cursor
                )
        except (NoPackageManagerError, NoScriptMatchedError, ConfigValidationError) as e:
            logger.debug(f"Could not resolve '{command}': {e}")
            result = RunResult(command=" ".join(tokens))
            result.mark_failed(e)
            return [result]

        prefix = self._prefix(command_label(command), cursor)
        return [await self._spawner.spawn(CommandInvocation(command, args), env, prefix, self._cwd)]

    async def _run_package_script(
        self,
        script: str,
        args: tuple[str, ...],
        env: Mapping[str, str],
        pm: str,
        cursor: ColorCursor,
    ) -> list[RunResult]:
        """
        Run `<pm> run <script> <args>` for one script or every glob match.

        Glob matches run concurrently when the configured mode is concurrent,
        otherwise one after another.
        """
        if not has_glob(script):
            prefix = self._prefix(script_label(script), cursor)
            invocation = CommandInvocation(pm, ("run", script, *args))
            return [await self._spawner.spawn(invocation, env, prefix, self._cwd)]

        matches = match_scripts(script, read_manifest_scripts(self.cwd))
        runs = [
            (CommandInvocation(pm, ("run", name, *args)), self._prefix(script_label(name), cursor))
            for name in matches
        ]
        if self.config.mode is RunMode.CONCURRENT:
            return await self._run_concurrent(
                [self._spawn_one(invocation, env, prefix) for invocation, prefix in runs]
            )
        return await self._run_sequential(
            [partial(self._spawn_one, invocation, env, prefix) for invocation, prefix in runs]
        )

    async def _spawn_one(
        self, invocation: CommandInvocation, env: Mapping[str, str], prefix: OutputPrefix
    ) -> list[RunResult]:
        return [await self._spawner.spawn(invocation, env, prefix, self._cwd)]

    def __repr__(self) -> str:
        return f"RunOrchestrator(mode={self.config.mode.value}, cwd={self.cwd})"


def _raise_first_failure(results: Sequence[RunResult]) -> None:
    for result in results:
        if not result.success:
            result.raise_for_failure()
            raise CrossRunError(f"Command failed: {result.command}")


async def run(args: Sequence[str], config: RunConfig) -> list[RunResult]:
    """Convenience wrapper: run args with a fresh RunOrchestrator."""
    return await RunOrchestrator(config).run(args)
