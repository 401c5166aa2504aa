# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Union

import pytest

Layout = Union[Sequence[str], Mapping[str, "Layout"]]


def scaffold(directory: Path, layout: Layout) -> None:
    """Create ``layout`` under ``directory``.

    Mappings create sub-directories; sequences create empty files.
    """

    directory.mkdir(parents=True, exist_ok=True)
    if isinstance(layout, Mapping):
        for name, child in layout.items():
            scaffold(directory / name, child)
        return
    for filename in layout:
        (directory / filename).touch()


@pytest.fixture
def scaffold_tree() -> Callable[[Path, Layout], None]:
    """Return the helper creating directory trees from nested layouts."""

    return scaffold


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    """Return a search path holding a plain and a namespaced pantry."""

    root = tmp_path / "fixtures"
    scaffold(
        root,
        {
            "pantry": {
                "ingredient": ["ingredient.md", "index.scss"],
                "scriptonly": ["ingredient.md", "index.js"],
            },
            "@namespace": {
                "pantry": {
                    "ingredient": ["ingredient.md", "index.scss"],
                },
            },
        },
    )
    return root
