# crossrun/output_prefix.py
"""
Colored labels for multiplexed command output.

Palette slots are handed out round-robin by a ColorCursor owned by one
orchestrator run. Slots repeat once the palette is exhausted.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.text import Text

PALETTE: tuple[str, ...] = (
    "on green",
    "on yellow",
    "on blue",
    "on magenta",
    "on cyan",
    "on red",
)


@dataclass
class ColorCursor:
    """Round-robin position in PALETTE for one run."""

    current: int = 0

    def next_slot(self) -> int:
        slot = self.current % len(PALETTE)
        self.current += 1
        return slot


@dataclass(frozen=True)
class OutputPrefix:
    """
    Label attached to one command's output stream.

    label=None means the stream is not labeled (single mode).
    """

    label: str | None = None
    color_slot: int = 0

    @property
    def style(self) -> str:
        return PALETTE[self.color_slot % len(PALETTE)]

    def render(self) -> Text:
        """Label text followed by the separator space."""
        return Text.assemble((f" {self.label} ", self.style), " ")

    def write(self, console: Console) -> None:
        if self.label is not None:
            console.print(self.render(), end="")


def command_label(executable: str) -> str:
    """Short label for a plain command: basename of its first word."""
    return executable.replace("\\", "/").rsplit("/", 1)[-1].split(" ")[0]


def script_label(script: str) -> str:
    """Short label for a package script: its first word."""
    return script.split(" ")[0]


def make_console(file) -> Console:
    """Console writing to file without markup, highlighting or wrapping."""
    return Console(
        file=file,
        highlight=False,
        markup=False,
        emoji=False,
        soft_wrap=True,
    )
