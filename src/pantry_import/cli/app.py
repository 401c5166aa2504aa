# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from . import ingredients, resolve

app = typer.Typer(
    help="Resolve pantry ingredient imports for style-sheet compilers.",
    no_args_is_help=True,
    add_completion=False,
)
resolve.register(app)
ingredients.register(app)


def main() -> None:
    """Run the ``pantry-import`` command line interface."""

    app()


__all__ = ["app", "main"]
