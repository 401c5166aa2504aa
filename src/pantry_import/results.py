# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Outcomes returned to the host compiler for a single import."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class ImportedFile:
    """Import rewritten to an absolute file the host compiler should read."""

    path: str

    def as_host_value(self) -> dict[str, str]:
        """Return the mapping shape host compilers expect for a file import."""

        return {"file": self.path}


@dataclass(frozen=True, slots=True)
class ImportedContents:
    """Import replaced by literal contents, empty for suppressed duplicates."""

    contents: str = ""

    def as_host_value(self) -> dict[str, str]:
        """Return the mapping shape host compilers expect for inline contents."""

        return {"contents": self.contents}


@dataclass(frozen=True, slots=True)
class ImportFailure:
    """Import that could not be resolved.

    Attributes:
        specifier: Import string exactly as written in the style document.
        error: Underlying failure naming the pantry and ingredient involved.
    """

    specifier: str
    error: Exception

    @property
    def message(self) -> str:
        """Return a description locating the failure in the style document."""

        return f'Failed to resolve "{self.specifier}": {self.error}'


ImportOutcome: TypeAlias = ImportedFile | ImportedContents | ImportFailure
CompletionCallback: TypeAlias = Callable[[ImportOutcome], object]

EMPTY_CONTENTS = ImportedContents("")


__all__ = [
    "CompletionCallback",
    "EMPTY_CONTENTS",
    "ImportFailure",
    "ImportOutcome",
    "ImportedContents",
    "ImportedFile",
]
