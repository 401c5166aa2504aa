# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions raised while resolving pantry imports."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class PantryImportError(RuntimeError):
    """Base class for every error surfaced by the importer."""


class ConfigError(PantryImportError):
    """Raised when importer configuration input is invalid."""


class PantryNotFoundError(PantryImportError):
    """Raised when a pantry cannot be located on any search path."""

    def __init__(self, pantry: str, search_paths: Sequence[Path] = ()) -> None:
        """Record the missing pantry and the locations that were searched.

        Args:
            pantry: Pantry name exactly as requested.
            search_paths: Directories inspected during discovery.
        """

        self.pantry = pantry
        self.search_paths = tuple(search_paths)
        if self.search_paths:
            searched = ", ".join(str(path) for path in self.search_paths)
            message = f'Pantry "{pantry}" not found in: {searched}'
        else:
            message = f'Pantry "{pantry}" not found'
        super().__init__(message)


class DiscoveryError(PantryImportError):
    """Raised when the discovery collaborator fails for reasons other than absence."""

    def __init__(self, pantry: str, cause: BaseException) -> None:
        self.pantry = pantry
        self.cause = cause
        super().__init__(f'Failed to discover pantry "{pantry}": {cause}')


class IngredientNotFoundError(PantryImportError):
    """Raised when a pantry does not publish the requested ingredient."""

    def __init__(self, pantry: str, ingredient: str) -> None:
        self.pantry = pantry
        self.ingredient = ingredient
        super().__init__(f'No such ingredient "{pantry}/{ingredient}"')


class NoStyleEntryPointError(PantryImportError):
    """Raised when an ingredient exists but declares no style entry point."""

    def __init__(self, pantry: str, ingredient: str, kind: str = "sass") -> None:
        self.pantry = pantry
        self.ingredient = ingredient
        self.kind = kind
        super().__init__(f'"{pantry}/{ingredient}" has no {kind.capitalize()} entry point')


__all__ = (
    "ConfigError",
    "DiscoveryError",
    "IngredientNotFoundError",
    "NoStyleEntryPointError",
    "PantryImportError",
    "PantryNotFoundError",
)
