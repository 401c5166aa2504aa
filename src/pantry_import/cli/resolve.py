# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``resolve`` command: resolve import specifiers within one session."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Final

import typer
from rich.table import Table

from ..emission import ImportSession
from ..errors import ConfigError
from ..importer import Importer
from ..results import ImportedContents, ImportedFile, ImportFailure
from .shared import CLIError, CLILogger, build_cli_logger, build_config

PASS_THROUGH: Final[str] = "pass-through"


@dataclass(frozen=True, slots=True)
class ResolutionRow:
    """One rendered line of ``resolve`` output."""

    specifier: str
    outcome: str
    detail: str

    def to_json(self) -> str:
        return json.dumps({"specifier": self.specifier, "outcome": self.outcome, "detail": self.detail})


def describe(specifier: str, result: object) -> ResolutionRow:
    """Return the display row for ``result``.

    Args:
        specifier: Import string that was resolved.
        result: Value produced by :meth:`Importer.resolve_async`.

    Returns:
        ResolutionRow: Outcome label and detail for rendering.
    """

    if isinstance(result, ImportedFile):
        return ResolutionRow(specifier, "file", result.path)
    if isinstance(result, ImportedContents):
        return ResolutionRow(specifier, "contents", repr(result.contents))
    if isinstance(result, ImportFailure):
        return ResolutionRow(specifier, "error", str(result.error))
    return ResolutionRow(specifier, PASS_THROUGH, "")


async def resolve_all(importer: Importer[str], specifiers: Sequence[str], importing_file: str) -> list[ResolutionRow]:
    """Resolve ``specifiers`` in order inside a single session."""

    importer.pantries.prefetch()
    session = ImportSession(label=importing_file)
    rows: list[ResolutionRow] = []
    for specifier in specifiers:
        result = await importer.resolve_async(specifier, importing_file, session=session)
        rows.append(describe(specifier, result))
    return rows


def run_resolve(
    specifiers: Sequence[str],
    *,
    importing_file: Path | None = None,
    search_paths: Sequence[Path] | None = None,
    pantries: Sequence[str] | None = None,
    as_json: bool = False,
    logger: CLILogger | None = None,
) -> int:
    """Resolve ``specifiers`` and render the outcomes; return an exit status.

    Args:
        specifiers: Import strings to resolve, in document order.
        importing_file: Document the imports are attributed to.
        search_paths: Directories searched for pantries.
        pantries: ``NAME=DIR`` pantry locations.
        as_json: Emit one JSON object per line instead of a table.
        logger: Optional CLI logger.

    Returns:
        int: ``0`` when every specifier resolved, ``1`` when any failed,
        ``2`` on invalid configuration.
    """

    logger = logger or build_cli_logger(emoji=True)
    origin = str((importing_file or Path.cwd() / "stdin").absolute())
    try:
        importer: Importer[str] = Importer(PASS_THROUGH, build_config(search_paths, pantries))
    except (CLIError, ConfigError) as exc:
        logger.fail(str(exc))
        return exc.exit_code if isinstance(exc, CLIError) else 2

    rows = asyncio.run(resolve_all(importer, specifiers, origin))
    if as_json:
        for row in rows:
            logger.echo(row.to_json())
    else:
        table = Table(title=f"Imports from {origin}")
        table.add_column("Specifier", style="bold")
        table.add_column("Outcome")
        table.add_column("Detail", overflow="fold")
        for row in rows:
            style = "red" if row.outcome == "error" else None
            table.add_row(row.specifier, row.outcome, row.detail, style=style)
        logger.console.print(table)

    failures = [row for row in rows if row.outcome == "error"]
    if not as_json:
        for row in failures:
            logger.fail(f'Failed to resolve "{row.specifier}": {row.detail}')
        if not failures:
            logger.ok(f"Resolved {len(rows)} import(s)")
    return 1 if failures else 0


def resolve_command(
    specifiers: Annotated[list[str], typer.Argument(help="Import specifiers to resolve, in order.")],
    importing_file: Annotated[
        Path | None,
        typer.Option("--from", help="Style document containing the imports."),
    ] = None,
    search_paths: Annotated[
        list[Path] | None,
        typer.Option("--search-path", "-s", help="Directory searched for pantries (repeatable)."),
    ] = None,
    pantries: Annotated[
        list[str] | None,
        typer.Option("--pantry", "-p", help="Pantry location as NAME=DIR (repeatable)."),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON lines.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log resolution details to stderr.")] = False,
) -> None:
    """Resolve import specifiers the way the style compiler importer would."""

    logger = build_cli_logger(emoji=not as_json, verbose=verbose)
    status = run_resolve(
        specifiers,
        importing_file=importing_file,
        search_paths=search_paths,
        pantries=pantries,
        as_json=as_json,
        logger=logger,
    )
    raise typer.Exit(code=status)


def register(app: typer.Typer) -> None:
    """Register the ``resolve`` command on ``app``."""

    app.command(name="resolve")(resolve_command)


__all__ = ["PASS_THROUGH", "ResolutionRow", "describe", "register", "resolve_all", "run_resolve"]
