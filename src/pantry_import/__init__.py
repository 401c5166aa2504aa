# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve pantry ingredient imports for style-sheet compilers."""

from __future__ import annotations

from importlib import metadata

from .config import ImporterConfig, load_config
from .discovery import FilesystemPantryDiscovery, PantryDiscovery
from .emission import EmissionCache, ImportSession
from .entry_points import entry_point_for
from .errors import (
    ConfigError,
    DiscoveryError,
    IngredientNotFoundError,
    NoStyleEntryPointError,
    PantryImportError,
    PantryNotFoundError,
)
from .importer import BoundImporter, Importer
from .models import EntryPoint, Ingredient, Pantry
from .pantry_cache import PantryCache
from .results import ImportedContents, ImportedFile, ImportFailure, ImportOutcome
from .specifiers import classify

try:
    __version__ = metadata.version("pantry-import")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

__all__ = [
    "BoundImporter",
    "ConfigError",
    "DiscoveryError",
    "EmissionCache",
    "EntryPoint",
    "FilesystemPantryDiscovery",
    "ImportFailure",
    "ImportOutcome",
    "ImportSession",
    "ImportedContents",
    "ImportedFile",
    "Importer",
    "ImporterConfig",
    "Ingredient",
    "IngredientNotFoundError",
    "NoStyleEntryPointError",
    "Pantry",
    "PantryCache",
    "PantryDiscovery",
    "PantryImportError",
    "PantryNotFoundError",
    "__version__",
    "classify",
    "entry_point_for",
    "load_config",
]
