# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Importer configuration models and validation."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .models import Pantry

DEFAULT_SEARCH_DIR: Final[str] = "node_modules"


def default_search_paths() -> list[Path]:
    """Return the conventional dependency directory below the working directory."""

    return [Path.cwd() / DEFAULT_SEARCH_DIR]


class ImporterConfig(BaseModel):
    """Validated importer configuration.

    Attributes:
        pantries: Pre-seeded pantries keyed by name. Values are either loaded
            descriptors or the directory a pantry should be loaded from.
        search_paths: Ordered directories searched for pantries missing from
            :attr:`pantries`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    pantries: dict[str, Pantry | Path] = Field(default_factory=dict)
    search_paths: list[Path] = Field(
        default_factory=default_search_paths,
        validation_alias=AliasChoices("search_paths", "pantrySearchPaths", "searchPaths"),
    )

    @field_validator("search_paths")
    @classmethod
    def _absolute_search_paths(cls, value: list[Path]) -> list[Path]:
        """Return ``value`` with relative entries anchored at the working directory.

        Args:
            value: Search paths supplied by the caller.

        Returns:
            list[Path]: Absolute search paths in their original order.
        """

        return [path if path.is_absolute() else Path.cwd() / path for path in value]

    @field_validator("pantries")
    @classmethod
    def _valid_pantry_names(cls, value: dict[str, Pantry | Path]) -> dict[str, Pantry | Path]:
        """Reject empty pantry names.

        Args:
            value: Pantry mapping supplied by the caller.

        Returns:
            dict[str, Pantry | Path]: The unchanged mapping.

        Raises:
            ValueError: If a pantry name is empty.
        """

        for name in value:
            if not name.strip():
                raise ValueError("pantry names must be non-empty")
        return value


def load_config(raw: ImporterConfig | Mapping[str, object] | None) -> ImporterConfig:
    """Validate ``raw`` into an :class:`ImporterConfig`.

    Args:
        raw: ``None`` for defaults, a mapping of options, or an existing config.

    Returns:
        ImporterConfig: Validated configuration.

    Raises:
        ConfigError: If ``raw`` has the wrong type or fails validation.
    """

    if raw is None:
        return ImporterConfig()
    if isinstance(raw, ImporterConfig):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigError(f"importer configuration must be a mapping, not {type(raw).__name__}")
    try:
        return ImporterConfig.model_validate(dict(raw))
    except ValidationError as exc:
        raise ConfigError(f"invalid importer configuration: {exc}") from exc


__all__ = ["DEFAULT_SEARCH_DIR", "ImporterConfig", "default_search_paths", "load_config"]
