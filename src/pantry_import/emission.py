# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Once-only emission tracking for a single compilation session."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from threading import Lock

LOGGER = logging.getLogger(__name__)


class EmissionCache:
    """Track absolute paths whose contents were already emitted.

    The set only grows: once a path is recorded every later request for it is
    suppressed until the owning session is discarded.
    """

    def __init__(self) -> None:
        self._paths: set[str] = set()
        self._lock = Lock()

    def record_or_suppress(self, path: str) -> bool:
        """Record ``path`` and report whether this is its first occurrence.

        Args:
            path: Absolute path of the file about to be emitted.

        Returns:
            bool: ``True`` the first time ``path`` is seen, ``False`` afterwards.
        """

        key = os.path.normpath(path)
        with self._lock:
            if key in self._paths:
                LOGGER.debug("suppressing repeated import of %s", key)
                return False
            self._paths.add(key)
        return True

    def paths(self) -> tuple[str, ...]:
        """Return the recorded paths in sorted order."""

        with self._lock:
            return tuple(sorted(self._paths))

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        with self._lock:
            return os.path.normpath(path) in self._paths

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths())


@dataclass(slots=True)
class ImportSession:
    """State owned by one compilation: a root document plus its transitive imports.

    Attributes:
        label: Optional description of the compilation, used in log messages.
        emitted: Paths already handed to the host compiler during the session.
    """

    label: str | None = None
    emitted: EmissionCache = field(default_factory=EmissionCache)


__all__ = ["EmissionCache", "ImportSession"]
