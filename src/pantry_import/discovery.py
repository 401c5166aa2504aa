# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pantry discovery on the filesystem.

A pantry is a directory named after the pantry (``@namespace/pantry`` for
namespaced pantries) located inside one of the configured search paths. Each
directory beneath it that carries an ``ingredient.md`` marker is an
ingredient; its entry points are detected from conventional filenames.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .errors import PantryNotFoundError
from .models import EntryPoint, Ingredient, Pantry

LOGGER = logging.getLogger(__name__)

INGREDIENT_MARKER: Final[str] = "ingredient.md"
ENTRY_POINT_FILENAMES: Final[Mapping[str, str]] = {
    "sass": "index.scss",
    "javascript": "index.js",
    "handlebars": "index.hbs",
    "model": "model.js",
}
SKIPPED_DIRECTORIES: Final[frozenset[str]] = frozenset({"node_modules"})


@runtime_checkable
class PantryDiscovery(Protocol):
    """Turn pantry names or locations into loaded pantry descriptors."""

    async def discover(self, name: str, search_paths: Sequence[Path]) -> Pantry:
        """Return the first pantry called ``name`` found on ``search_paths``.

        Raises:
            PantryNotFoundError: If no search path contains the pantry.
        """
        ...

    async def load(self, name: str, path: Path) -> Pantry:
        """Return the pantry rooted at ``path`` registered under ``name``.

        Raises:
            PantryNotFoundError: If ``path`` is not a pantry directory.
        """
        ...


class FilesystemPantryDiscovery(PantryDiscovery):
    """Discover pantries by scanning directories on disk."""

    def __init__(self, *, entry_point_filenames: Mapping[str, str] | None = None) -> None:
        """Create the discovery strategy.

        Args:
            entry_point_filenames: Optional override of the filename used to
                detect each entry point kind.
        """

        self._entry_point_filenames = dict(entry_point_filenames or ENTRY_POINT_FILENAMES)

    async def discover(self, name: str, search_paths: Sequence[Path]) -> Pantry:
        """Search ``search_paths`` in order and load the first matching pantry.

        Args:
            name: Pantry name, optionally prefixed with ``@namespace/``.
            search_paths: Directories to search.

        Returns:
            Pantry: Loaded pantry descriptor.

        Raises:
            PantryNotFoundError: If no search path contains the pantry.
        """

        return await asyncio.to_thread(self._discover_sync, name, tuple(search_paths))

    async def load(self, name: str, path: Path) -> Pantry:
        """Load the pantry rooted at ``path``.

        Args:
            name: Name the pantry is registered under.
            path: Pantry root directory.

        Returns:
            Pantry: Loaded pantry descriptor.

        Raises:
            PantryNotFoundError: If ``path`` is not a directory.
        """

        return await asyncio.to_thread(self._load_sync, name, Path(path))

    def _discover_sync(self, name: str, search_paths: tuple[Path, ...]) -> Pantry:
        for search_path in search_paths:
            candidate = Path(search_path).joinpath(*name.split("/"))
            if candidate.is_dir():
                LOGGER.debug("pantry %s found at %s", name, candidate)
                return self._load_sync(name, candidate)
        raise PantryNotFoundError(name, search_paths)

    def _load_sync(self, name: str, path: Path) -> Pantry:
        root = Path(os.path.abspath(path))
        if not root.is_dir():
            raise PantryNotFoundError(name, (root,))
        ingredients = {
            ingredient.name: ingredient for ingredient in self._scan_ingredients(root) if ingredient.name is not None
        }
        LOGGER.debug("loaded pantry %s with %d ingredient(s)", name, len(ingredients))
        return Pantry(name=name, path=root, ingredients=ingredients)

    def _scan_ingredients(self, root: Path) -> Iterator[Ingredient]:
        for directory, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(
                entry for entry in dirnames if entry not in SKIPPED_DIRECTORIES and not entry.startswith(".")
            )
            if INGREDIENT_MARKER not in filenames:
                continue
            current = Path(directory)
            if current == root:
                continue
            yield self._build_ingredient(root, current, frozenset(filenames))

    def _build_ingredient(self, root: Path, directory: Path, filenames: frozenset[str]) -> Ingredient:
        entry_points = {
            kind: EntryPoint(filename=filename)
            for kind, filename in self._entry_point_filenames.items()
            if filename in filenames
        }
        return Ingredient(
            name=directory.relative_to(root).as_posix(),
            path=directory,
            entry_points=entry_points,
        )


__all__ = [
    "ENTRY_POINT_FILENAMES",
    "FilesystemPantryDiscovery",
    "INGREDIENT_MARKER",
    "PantryDiscovery",
]
