# crossrun/process_spawner.py
"""
ProcessSpawner - runs one command through the shell and streams its output.

Executes commands as local subprocesses with:
- Shell-mediated launch (pipes and chaining work inside one command string)
- Platform-specific escaping of whitespace in the executable path
- Chunk-by-chunk forwarding of stdout/stderr, optionally labeled
- One-line diagnostics for failed launches and non-zero exits
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TextIO

from rich.console import Console
from rich.text import Text

from .exceptions import CrossRunError, NonZeroExitError, SpawnFailureError
from .output_prefix import OutputPrefix, make_console
from .run_result import RunResult

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def escape_path(path: str, platform: str | None = None) -> str:
    """
    Escape whitespace in an executable path for the shell.

    POSIX shells get a backslash before each whitespace run; on Windows each
    whitespace character is wrapped in double quotes.
    """
    platform = platform or os.name
    if platform != "nt":
        return re.sub(r"(\s+)", r"\\\1", path)
    return re.sub(r"(\s)", r'"\1"', path)


@dataclass(frozen=True)
class CommandInvocation:
    """Executable plus argument tokens, already expanded."""

    executable: str
    args: tuple[str, ...] = field(default_factory=tuple)

    def command_line(self, platform: str | None = None) -> str:
        """Escaped executable followed by the arguments, space separated."""
        return " ".join([escape_path(self.executable, platform), *self.args])


class ProcessSpawner:
    """
    Launches subprocesses and forwards their output to our own streams.

    Streams default to sys.stdout / sys.stderr, looked up at spawn time.
    """

    def __init__(
        self,
        raw: bool = False,
        verbose: bool = False,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ):
        """
        Args:
            raw: Forward output untouched (no labels, no diagnostics)
            verbose: Echo each command line to stderr before spawning
            stdout: Destination for child stdout (default: sys.stdout)
            stderr: Destination for child stderr and diagnostics (default: sys.stderr)
        """
        self._raw = raw
        self._verbose = verbose
        self._stdout = stdout
        self._stderr = stderr

    async def spawn(
        self,
        invocation: CommandInvocation,
        env: Mapping[str, str],
        prefix: OutputPrefix | None = None,
        cwd: str | os.PathLike[str] | None = None,
    ) -> RunResult:
        """
        Run one command to completion.

        The child runs in cwd when given, otherwise in our own working directory.

        Returns:
            RunResult marked SUCCESS on exit code 0, otherwise FAILED with a
            NonZeroExitError or SpawnFailureError. Never raises for either.
        """
        prefix = prefix or OutputPrefix()
        command_line = invocation.command_line()
        result = RunResult(command=command_line, label=prefix.label)
        out_console = make_console(self._stdout or sys.stdout)
        err_console = make_console(self._stderr or sys.stderr)

        if self._verbose:
            prefix.write(err_console)
            err_console.print(Text(command_line, style="bright_black"))

        try:
            logger.debug(f"Launching subprocess for run {result.run_id[:8]}: {command_line}")
            process = await asyncio.create_subprocess_shell(
                command_line,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=dict(env),
                cwd=cwd,
            )
        except OSError as e:
            error = SpawnFailureError(command_line, e)
            self._report(err_console, prefix, error)
            result.mark_failed(error)
            return result

        result.mark_running()

        await asyncio.gather(
            self._pump(process.stdout, out_console, prefix),
            self._pump(process.stderr, err_console, prefix),
        )
        returncode = await process.wait()

        if returncode == 0:
            result.mark_success()
        else:
            error = NonZeroExitError(command_line, returncode)
            self._report(err_console, prefix, error)
            result.mark_failed(error, exit_code=returncode)
        return result

    async def _pump(
        self,
        reader: asyncio.StreamReader | None,
        console: Console,
        prefix: OutputPrefix,
    ) -> None:
        """
        Forward one child stream chunk by chunk until EOF.

        Bytes go to the stream's binary buffer unchanged. Streams without a
        buffer (StringIO and friends) get incrementally decoded UTF-8 text.
        """
        if reader is None:
            return
        decoder = None
        if getattr(console.file, "buffer", None) is None:
            decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            chunk = await reader.read(CHUNK_SIZE)
            if not chunk:
                break
            self._emit(console, prefix, chunk if decoder is None else decoder.decode(chunk))
        if decoder is not None:
            self._emit(console, prefix, decoder.decode(b"", final=True))

    def _emit(self, console: Console, prefix: OutputPrefix, data: bytes | str) -> None:
        if not data:
            return
        labeled = not self._raw and prefix.label is not None
        if labeled:
            prefix.write(console)
        stream = console.file
        newline = "\n"
        if isinstance(data, bytes):
            # Text layer must be drained before writing beneath it.
            stream.flush()
            stream = stream.buffer
            newline = b"\n"
        stream.write(data)
        # Every chunk gets its own label, so it must end its own line.
        if labeled and not data.endswith(newline):
            stream.write(newline)
        stream.flush()

    def _report(self, console: Console, prefix: OutputPrefix, error: CrossRunError) -> None:
        """Write a one-line red diagnostic unless running raw."""
        logger.debug(f"Command failed: {error}")
        if self._raw:
            return
        prefix.write(console)
        console.print(Text(str(error).rstrip("\n"), style="red"))
        error.reported = True

    def __repr__(self) -> str:
        return f"ProcessSpawner(raw={self._raw}, verbose={self._verbose})"
