# crossrun/cli.py
"""
Command-line entry point.

    crossrun [options] <command> [args...]
    crossrun -m "<command>" "<command>" ...
    crossrun -p "<command>" "<command>" ...

Option parsing stops at the first positional argument; everything after it
belongs to the command being run.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.text import Text

from . import __version__
from .env_files import load_env_files
from .exceptions import ConfigConflictError, CrossRunError
from .load_config import FileConfig, find_config, load_config
from .logging_config import setup_logging
from .run_config import RunConfig
from .run_orchestrator import RunOrchestrator

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)

CONTEXT_SETTINGS = {
    "allow_interspersed_args": False,
    "ignore_unknown_options": True,
    "help_option_names": ["-h", "--help"],
}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _fail(message: str) -> NoReturn:
    Console(stderr=True, highlight=False, markup=False, soft_wrap=True).print(
        Text(message, style="red")
    )
    raise typer.Exit(code=1)


@app.command(
    context_settings=CONTEXT_SETTINGS,
    help="Run commands with cross-platform environment variable expansion.",
)
def crossrun(
    commands: Optional[List[str]] = typer.Argument(None, help="Command and arguments to run."),
    env: bool = typer.Option(False, "--env", "-e", help="Load environment variables from .env files."),
    strict: bool = typer.Option(
        False, "--strict", "-s", help="Error on unknown environment variables during expansion."
    ),
    multiple: bool = typer.Option(False, "--multiple", "-m", help="Run multiple commands sequentially."),
    parallel: bool = typer.Option(False, "--parallel", "-p", help="Run multiple commands in parallel."),
    raw: bool = typer.Option(False, "--raw", "-r", help="Output the raw output of commands."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Output verbose information."),
    override_pm: Optional[str] = typer.Option(
        None, "--override-pm", "-o", help="Package manager to use: npm, yarn or pnpm."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to crossrun.toml (default: ./crossrun.toml if present)."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Enable debug logging at LEVEL."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    if log_level:
        try:
            setup_logging(level=log_level)
        except ValueError as e:
            _fail(f"Invalid --log-level: {e}")

    try:
        run_config, file_config = _build_config(
            config, multiple=multiple, parallel=parallel, strict=strict,
            raw=raw, verbose=verbose, override_pm=override_pm,
        )
    except CrossRunError as e:
        _fail(str(e))

    if env or file_config.env_files:
        for name in load_env_files():
            typer.echo(f"Failed to load {name}", err=True)

    orchestrator = RunOrchestrator(run_config)
    try:
        asyncio.run(orchestrator.run(commands or []))
    except CrossRunError as e:
        logger.debug(f"Run failed: {e!r}")
        if e.reported:
            raise typer.Exit(code=1)
        _fail(str(e))


def _build_config(
    config_path: Optional[Path],
    *,
    multiple: bool,
    parallel: bool,
    strict: bool,
    raw: bool,
    verbose: bool,
    override_pm: Optional[str],
) -> tuple[RunConfig, FileConfig]:
    """Merge crossrun.toml defaults with CLI flags."""
    if multiple and parallel:
        raise ConfigConflictError()
    path = config_path or find_config()
    file_config = load_config(path) if path is not None else FileConfig()
    run_config = RunConfig.from_flags(
        multiple=multiple,
        parallel=parallel,
        strict=strict or file_config.strict,
        raw=raw or file_config.raw,
        verbose=verbose or file_config.verbose,
        package_manager=override_pm or file_config.package_manager,
        default_mode=file_config.mode,
    )
    return run_config, file_config


def main() -> None:
    app(prog_name="crossrun")
