# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Classification of raw import specifiers.

Import strings handed over by the host compiler fall into four shapes:

* absolute paths, which the importer never handles;
* relative paths (``./x`` or ``../x``), resolved lexically against the
  directory of the importing file;
* pantry ingredient references such as ``pantry/ingredient`` or
  ``@namespace/pantry/ingredient``;
* anything else, which is left for the host compiler to interpret.

:func:`classify` is total: malformed input yields :class:`Unrecognized`
instead of raising.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Final, TypeAlias

_SEGMENT: Final[str] = r"[A-Za-z0-9_~-][A-Za-z0-9_.~-]*"
_INGREDIENT_PATTERN: Final[re.Pattern[str]] = re.compile(
    rf"^(?:@(?P<namespace>{_SEGMENT})/)?(?P<pantry>{_SEGMENT})/(?P<ingredient>{_SEGMENT}(?:/{_SEGMENT})*)$",
)
_RELATIVE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\.\.?(?:[/\\]|$)")


@dataclass(frozen=True, slots=True)
class AbsolutePath:
    """Specifier naming an absolute filesystem path."""

    path: str


@dataclass(frozen=True, slots=True)
class RelativePath:
    """Relative specifier resolved against the importing file's directory."""

    path: str


@dataclass(frozen=True, slots=True)
class PantryIngredient:
    """Reference to an ingredient published inside a pantry."""

    namespace: str | None
    pantry: str
    ingredient: str

    @property
    def pantry_name(self) -> str:
        """Return the cache key for the referenced pantry, namespace included."""

        if self.namespace is None:
            return self.pantry
        return f"@{self.namespace}/{self.pantry}"


@dataclass(frozen=True, slots=True)
class Unrecognized:
    """Specifier the importer does not understand."""

    specifier: str


ParsedReference: TypeAlias = AbsolutePath | RelativePath | PantryIngredient | Unrecognized


def parse_ingredient_path(specifier: str) -> PantryIngredient | None:
    """Parse ``[@namespace/]pantry/ingredient`` into its components.

    Args:
        specifier: Raw import string.

    Returns:
        PantryIngredient | None: Parsed reference, or ``None`` when the string
        does not have the ingredient shape.
    """

    match = _INGREDIENT_PATTERN.match(specifier)
    if match is None:
        return None
    return PantryIngredient(
        namespace=match.group("namespace"),
        pantry=match.group("pantry"),
        ingredient=match.group("ingredient"),
    )


def resolve_relative(specifier: str, importing_file: str) -> str:
    """Return the absolute path ``specifier`` names relative to ``importing_file``.

    The computation is lexical: the target may lack an extension and is never
    checked for existence.
    """

    base_dir = os.path.dirname(os.path.abspath(importing_file))
    return os.path.normpath(os.path.join(base_dir, specifier))


def classify(specifier: str, importing_file: str) -> ParsedReference:
    """Classify ``specifier`` found in the document at ``importing_file``.

    Args:
        specifier: Raw import string provided by the host compiler.
        importing_file: Path of the document containing the import.

    Returns:
        ParsedReference: Tagged reference describing the specifier.
    """

    if not isinstance(specifier, str) or not specifier:
        return Unrecognized(str(specifier))
    if os.path.isabs(specifier):
        return AbsolutePath(specifier)
    if _RELATIVE_PATTERN.match(specifier):
        if not isinstance(importing_file, str) or not importing_file:
            return Unrecognized(specifier)
        return RelativePath(resolve_relative(specifier, importing_file))
    parsed = parse_ingredient_path(specifier)
    if parsed is None:
        return Unrecognized(specifier)
    return parsed


def is_within(path: str, root: str | os.PathLike[str]) -> bool:
    """Return ``True`` when ``path`` equals ``root`` or lies underneath it.

    Both paths are normalised to absolute form; containment is decided per
    path component, so ``/a/pantry-extra`` is not inside ``/a/pantry``.
    """

    candidate = os.path.normpath(os.path.abspath(path))
    base = os.path.normpath(os.path.abspath(os.fspath(root)))
    try:
        return os.path.commonpath([candidate, base]) == base
    except ValueError:
        return False


__all__ = [
    "AbsolutePath",
    "ParsedReference",
    "PantryIngredient",
    "RelativePath",
    "Unrecognized",
    "classify",
    "is_within",
    "parse_ingredient_path",
    "resolve_relative",
]
