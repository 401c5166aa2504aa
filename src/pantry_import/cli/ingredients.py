# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``ingredients`` command: list the ingredients published by a pantry."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from ..errors import ConfigError, PantryImportError
from ..importer import Importer
from ..models import Pantry
from .resolve import PASS_THROUGH
from .shared import CLILogger, build_cli_logger, build_config


def build_ingredients_table(pantry: Pantry) -> Table:
    """Return a table describing every ingredient in ``pantry``."""

    table = Table(title=f"{pantry.name} ({pantry.path})" if pantry.path else str(pantry.name))
    table.add_column("Ingredient", style="bold cyan")
    table.add_column("Entry points")
    table.add_column("Path", overflow="fold")
    for name in sorted(pantry.ingredients):
        ingredient = pantry.ingredients[name]
        entry_points = ", ".join(
            f"{kind}={entry.filename}" for kind, entry in sorted(ingredient.entry_points.items())
        )
        table.add_row(name, entry_points or "-", str(ingredient.path))
    return table


def run_ingredients(
    pantry_name: str,
    *,
    search_paths: Sequence[Path] | None = None,
    logger: CLILogger | None = None,
) -> int:
    """Discover ``pantry_name`` and render its ingredients; return an exit status."""

    logger = logger or build_cli_logger(emoji=True)
    try:
        importer: Importer[str] = Importer(PASS_THROUGH, build_config(search_paths, None))
    except ConfigError as exc:
        logger.fail(str(exc))
        return 2
    try:
        pantry = asyncio.run(importer.pantries.resolve(pantry_name))
    except PantryImportError as exc:
        logger.fail(str(exc))
        return 1
    if not pantry.ingredients:
        logger.warn(f'Pantry "{pantry_name}" publishes no ingredients')
        return 0
    logger.console.print(build_ingredients_table(pantry))
    return 0


def ingredients_command(
    pantry_name: Annotated[str, typer.Argument(help="Pantry name, e.g. '@scope/pantry'.")],
    search_paths: Annotated[
        list[Path] | None,
        typer.Option("--search-path", "-s", help="Directory searched for pantries (repeatable)."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log discovery details to stderr.")] = False,
) -> None:
    """List the ingredients a pantry publishes and their entry points."""

    logger = build_cli_logger(emoji=True, verbose=verbose)
    raise typer.Exit(code=run_ingredients(pantry_name, search_paths=search_paths, logger=logger))


def register(app: typer.Typer) -> None:
    """Register the ``ingredients`` command on ``app``."""

    app.command(name="ingredients")(ingredients_command)


__all__ = ["build_ingredients_table", "register", "run_ingredients"]
