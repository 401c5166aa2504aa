# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, option parsing)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console

from ..console import OutputStyle, console_for
from ..logging import enable_verbose_logging
from ..logging import fail as core_fail
from ..logging import ok as core_ok
from ..logging import warn as core_warn


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    output: OutputStyle

    @property
    def console(self) -> Console:
        """Return the console shared with the message helpers."""

        return console_for(self.output)

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.output.emoji, use_color=self.output.color)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.output.emoji, use_color=self.output.color)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.output.emoji, use_color=self.output.color)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper."""

        typer.echo(message)


def build_cli_logger(*, emoji: bool, verbose: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided preferences.

    Args:
        emoji: Whether log output may include emoji glyphs.
        verbose: Whether library debug records should be streamed to stderr.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger rendering through the shared console for these preferences.
    """

    if verbose:
        enable_verbose_logging()
    output = OutputStyle.detect(color=False if no_color else None, emoji=emoji)
    return CLILogger(output=output)


def parse_pantry_options(values: Sequence[str]) -> dict[str, Path]:
    """Parse ``NAME=DIR`` pantry options into a mapping.

    Args:
        values: Raw option values.

    Returns:
        dict[str, Path]: Pantry locations keyed by pantry name.

    Raises:
        CLIError: If a value does not have the ``NAME=DIR`` shape.
    """

    pantries: dict[str, Path] = {}
    for value in values:
        name, sep, location = value.partition("=")
        if not sep or not name.strip() or not location.strip():
            raise CLIError(f"invalid --pantry value {value!r}; expected NAME=DIR", exit_code=2)
        pantries[name.strip()] = Path(location.strip())
    return pantries


def build_config(search_paths: Sequence[Path] | None, pantries: Sequence[str] | None) -> dict[str, object]:
    """Return importer configuration assembled from CLI options."""

    config: dict[str, object] = {}
    if search_paths:
        config["search_paths"] = list(search_paths)
    if pantries:
        config["pantries"] = parse_pantry_options(pantries)
    return config


__all__ = ["CLIError", "CLILogger", "build_cli_logger", "build_config", "parse_pantry_options"]
