# crossrun/env_expander.py
"""
Shell-agnostic environment variable expansion.

Three reference syntaxes are understood: ``${NAME}``, ``$NAME`` and
``%NAME%``. The input is scanned once, left to right; at each position the
syntaxes are tried in that order, so braces are never reinterpreted by the
bare ``$NAME`` form and substituted values are never expanded again.

Limitation: there is no escape for a literal ``$`` or ``%`` that happens to
precede a valid name. Such text is always treated as a reference.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping

from .exceptions import UnknownVariableError

logger = logging.getLogger(__name__)

_NAME = r"[A-Za-z0-9_-]+"
# A bare $NAME cannot end in "-" so that "$A-$B" splits into two references.
_BARE_NAME = r"[A-Za-z0-9_]+(?:-+[A-Za-z0-9_]+)*"

REFERENCE_PATTERN = re.compile(
    rf"\$\{{(?P<braced>{_NAME})\}}"
    rf"|\$(?P<bare>{_BARE_NAME})"
    rf"|%(?P<percent>{_NAME})%"
)

INLINE_ENV_PATTERN = re.compile(rf"^{_NAME}=.+", re.DOTALL)


def expand_env(string: str, env: Mapping[str, str], strict: bool = False) -> str:
    """
    Substitute variable references in string using env.

    Args:
        string: Text that may contain ${NAME}, $NAME or %NAME% references
        env: Variable values
        strict: Raise on unknown names instead of substituting ''

    Raises:
        UnknownVariableError: If strict and a referenced name is not in env
    """

    def lookup(match: re.Match[str]) -> str:
        name = match.group("braced") or match.group("bare") or match.group("percent")
        if name in env:
            return env[name]
        if strict:
            raise UnknownVariableError(name)
        logger.debug(f"Variable '{name}' is not set, substituting ''")
        return ""

    return REFERENCE_PATTERN.sub(lookup, string)


def parse_inline_env(args: Iterable[str]) -> tuple[dict[str, str], list[str]]:
    """
    Split leading NAME=value assignments off an argument list.

    Returns:
        (assignments, remaining arguments). Consumption stops at the first
        argument that is not an assignment; later assignments are part of
        the command.
    """
    args = list(args)
    assignments: dict[str, str] = {}
    index = 0
    for index, arg in enumerate(args):
        if not INLINE_ENV_PATTERN.match(arg):
            break
        name, _, value = arg.partition("=")
        assignments[name] = value
    else:
        index = len(args)
    if assignments:
        logger.debug(f"Parsed {len(assignments)} inline environment assignments")
    return assignments, args[index:]
