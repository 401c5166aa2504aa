# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve ingredient names to their declared entry files."""

from __future__ import annotations

import os
from typing import Final

from .errors import IngredientNotFoundError, NoStyleEntryPointError
from .models import Pantry

STYLE_ENTRY_POINT: Final[str] = "sass"


def entry_point_for(pantry: Pantry, ingredient_name: str, kind: str = STYLE_ENTRY_POINT) -> str:
    """Return the absolute path of the ``kind`` entry point of ``ingredient_name``.

    The path is computed from the ingredient root and the declared filename;
    whether the file exists is left to the host compiler.

    Args:
        pantry: Resolved pantry descriptor.
        ingredient_name: Ingredient name relative to the pantry.
        kind: Entry point kind to look up.

    Returns:
        str: Absolute path to the entry file.

    Raises:
        IngredientNotFoundError: If the pantry has no such ingredient.
        NoStyleEntryPointError: If the ingredient declares no ``kind`` entry point.
    """

    pantry_name = pantry.name or "<unnamed>"
    ingredient = pantry.ingredient(ingredient_name)
    if ingredient is None:
        raise IngredientNotFoundError(pantry_name, ingredient_name)
    entry = ingredient.entry_point(kind)
    if entry is None:
        raise NoStyleEntryPointError(pantry_name, ingredient_name, kind)
    return os.path.abspath(os.path.join(os.fspath(ingredient.path), entry.filename))


__all__ = ["STYLE_ENTRY_POINT", "entry_point_for"]
