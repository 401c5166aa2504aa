# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Import resolution engine handed to style-sheet compilers.

The importer recognises two kinds of specifiers:

* ``pantry/ingredient`` and ``@namespace/pantry/ingredient`` are rewritten to
  the absolute path of the ingredient's Sass entry point;
* relative specifiers falling inside a known pantry are passed through the
  first time and suppressed afterwards.

Everything else yields the host compiler's pass-through sentinel. When the
pantry is already cached the answer is returned synchronously; otherwise the
call returns ``None`` and the outcome is delivered later through the
completion callback.

Every resolved path is emitted once per :class:`ImportSession`; repeated
imports resolve to empty contents so the output contains each ingredient
exactly once.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import partial
from typing import Generic, TypeVar

from .config import ImporterConfig, load_config
from .discovery import FilesystemPantryDiscovery, PantryDiscovery
from .emission import ImportSession
from .entry_points import STYLE_ENTRY_POINT, entry_point_for
from .errors import DiscoveryError, IngredientNotFoundError, NoStyleEntryPointError
from .models import Pantry
from .pantry_cache import PantryCache
from .results import EMPTY_CONTENTS, CompletionCallback, ImportedFile, ImportFailure, ImportOutcome
from .specifiers import AbsolutePath, PantryIngredient, RelativePath, Unrecognized, classify, is_within

LOGGER = logging.getLogger(__name__)

SentinelT = TypeVar("SentinelT")


class Importer(Generic[SentinelT]):
    """Resolve pantry ingredient imports for a style-sheet compiler."""

    def __init__(
        self,
        pass_through: SentinelT,
        config: ImporterConfig | Mapping[str, object] | None = None,
        *,
        discovery: PantryDiscovery | None = None,
    ) -> None:
        """Create an importer.

        Args:
            pass_through: Value the host compiler understands as "resolve this
                import yourself"; returned verbatim for specifiers the importer
                does not handle.
            config: Importer configuration, validated immediately.
            discovery: Optional discovery collaborator, defaults to
                :class:`FilesystemPantryDiscovery`.

        Pantries seeded by location start loading immediately when an event
        loop is running, otherwise on their first import.

        Raises:
            ConfigError: If ``config`` is malformed.
        """

        self.pass_through = pass_through
        self.config = load_config(config)
        self.pantries = PantryCache(
            discovery or FilesystemPantryDiscovery(),
            search_paths=self.config.search_paths,
            pantries=self.config.pantries,
        )
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            LOGGER.debug("no running event loop; seeded pantries load on first import")
        else:
            self.pantries.prefetch()

    def resolve(
        self,
        specifier: str,
        importing_file: str,
        done: CompletionCallback,
        *,
        session: ImportSession,
    ) -> SentinelT | ImportOutcome | None:
        """Resolve one import specifier.

        Args:
            specifier: Import string as written in the style document.
            importing_file: Path of the document containing the import.
            done: Callback receiving the outcome when resolution is deferred.
            session: Compilation session owning the emission cache.

        Returns:
            SentinelT | ImportOutcome | None: The pass-through sentinel, a
            synchronous outcome, or ``None`` when the outcome will be delivered
            through ``done``.
        """

        reference = classify(specifier, importing_file)
        if isinstance(reference, (AbsolutePath, Unrecognized)):
            return self.pass_through
        if isinstance(reference, RelativePath):
            return self._resolve_relative(reference, session)
        return self._resolve_ingredient(specifier, reference, done, session)

    async def resolve_async(
        self,
        specifier: str,
        importing_file: str,
        *,
        session: ImportSession,
    ) -> SentinelT | ImportOutcome:
        """Resolve ``specifier`` and wait for a deferred outcome if needed."""

        delivered: asyncio.Future[ImportOutcome] = asyncio.get_running_loop().create_future()
        result = self.resolve(specifier, importing_file, delivered.set_result, session=session)
        if result is None:
            return await delivered
        return result

    def bind(self, session: ImportSession | None = None) -> BoundImporter[SentinelT]:
        """Return a host-compatible callable bound to ``session``.

        Args:
            session: Compilation session to use; a fresh one when omitted.

        Returns:
            BoundImporter[SentinelT]: Callable taking ``(specifier, importing_file, done)``.
        """

        return BoundImporter(importer=self, session=session or ImportSession())

    def _resolve_relative(self, reference: RelativePath, session: ImportSession) -> SentinelT | ImportOutcome:
        for pantry in self.pantries.resolved():
            if pantry.path is None or not is_within(reference.path, pantry.path):
                continue
            if session.emitted.record_or_suppress(reference.path):
                return self.pass_through
            return EMPTY_CONTENTS
        return self.pass_through

    def _resolve_ingredient(
        self,
        specifier: str,
        reference: PantryIngredient,
        done: CompletionCallback,
        session: ImportSession,
    ) -> ImportOutcome | None:
        pantry = self.pantries.get(reference.pantry_name)
        if pantry is not None:
            return self._emit(specifier, pantry, reference.ingredient, session)
        LOGGER.debug("deferring %s until pantry %s is resolved", specifier, reference.pantry_name)
        future = self.pantries.request(reference.pantry_name)
        future.add_done_callback(partial(self._complete, specifier, reference, session, done))
        return None

    def _complete(
        self,
        specifier: str,
        reference: PantryIngredient,
        session: ImportSession,
        done: CompletionCallback,
        future: asyncio.Future[Pantry],
    ) -> None:
        outcome: ImportOutcome
        if future.cancelled():
            LOGGER.debug("discovery of pantry %s was cancelled", reference.pantry_name)
            outcome = ImportFailure(specifier, DiscoveryError(reference.pantry_name, asyncio.CancelledError()))
        elif (error := future.exception()) is not None:
            outcome = ImportFailure(specifier, error)
        else:
            outcome = self._emit(specifier, future.result(), reference.ingredient, session)
        done(outcome)

    def _emit(self, specifier: str, pantry: Pantry, ingredient: str, session: ImportSession) -> ImportOutcome:
        try:
            path = entry_point_for(pantry, ingredient, STYLE_ENTRY_POINT)
        except (IngredientNotFoundError, NoStyleEntryPointError) as exc:
            return ImportFailure(specifier, exc)
        if session.emitted.record_or_suppress(path):
            return ImportedFile(path)
        return EMPTY_CONTENTS


@dataclass
class BoundImporter(Generic[SentinelT]):
    """Importer bound to one compilation session, with the host call signature."""

    importer: Importer[SentinelT]
    session: ImportSession = field(default_factory=ImportSession)

    def __call__(self, specifier: str, importing_file: str, done: CompletionCallback) -> SentinelT | ImportOutcome | None:
        return self.importer.resolve(specifier, importing_file, done, session=self.session)


__all__ = ["BoundImporter", "Importer"]
