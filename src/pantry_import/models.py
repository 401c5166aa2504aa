# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pantry descriptor models shared by discovery and resolution."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class EntryPoint(BaseModel):
    """Entry file declared by an ingredient for one asset kind."""

    model_config = ConfigDict(frozen=True)

    filename: str


class Ingredient(BaseModel):
    """Component published inside a pantry.

    Attributes:
        name: Ingredient name relative to its pantry, ``/`` separated when nested.
        path: Root directory of the ingredient.
        entry_points: Entry files keyed by asset kind (``sass``, ``javascript``...).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str | None = None
    path: Path
    entry_points: dict[str, EntryPoint] = Field(default_factory=dict, alias="entryPoints")

    def entry_point(self, kind: str) -> EntryPoint | None:
        """Return the entry point declared for ``kind`` when present.

        Args:
            kind: Asset kind identifier such as ``"sass"``.

        Returns:
            EntryPoint | None: Declared entry point, otherwise ``None``.
        """

        return self.entry_points.get(kind)


class Pantry(BaseModel):
    """Loaded pantry descriptor.

    Only :attr:`path` and :meth:`ingredient` are consulted while resolving
    imports; descriptors supplied by callers may omit ``path``, in which case
    relative imports are never matched against them.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    path: Path | None = None
    ingredients: dict[str, Ingredient] = Field(default_factory=dict)

    def ingredient(self, name: str) -> Ingredient | None:
        """Return the ingredient published under ``name``.

        Args:
            name: Ingredient name relative to the pantry root.

        Returns:
            Ingredient | None: Matching ingredient, otherwise ``None``.
        """

        return self.ingredients.get(name)

    def named(self, name: str) -> Pantry:
        """Return this descriptor carrying ``name`` when it has none of its own."""

        if self.name:
            return self
        return self.model_copy(update={"name": name})


__all__ = ["EntryPoint", "Ingredient", "Pantry"]
