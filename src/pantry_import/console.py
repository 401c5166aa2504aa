# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Terminal output preferences and the Rich console that honours them.

The message helpers in :mod:`pantry_import.logging` and the CLI tables render
through :func:`console_for`, so every line a command prints for one set of
preferences goes through the same console.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import cache

from rich.console import Console


def stdout_is_terminal() -> bool:
    """Return ``True`` when stdout is an interactive terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@dataclass(frozen=True, slots=True)
class OutputStyle:
    """Colour and emoji preferences for user-facing output."""

    color: bool
    emoji: bool

    @classmethod
    def detect(cls, *, color: bool | None = None, emoji: bool = True) -> OutputStyle:
        """Return preferences, enabling colour on a terminal unless ``color`` decides."""

        return cls(color=stdout_is_terminal() if color is None else color, emoji=emoji)


@cache
def console_for(style: OutputStyle) -> Console:
    """Return the shared console rendering output with ``style``.

    The console resolves ``sys.stdout`` at write time, so redirected or
    captured streams keep working after it is created.
    """

    return Console(
        color_system="auto" if style.color else None,
        no_color=not style.color,
        emoji=style.emoji,
        highlight=False,
        soft_wrap=True,
    )


__all__ = ["OutputStyle", "console_for", "stdout_is_terminal"]
