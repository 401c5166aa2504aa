# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Single-flight cache of pantry descriptors.

Each pantry name occupies one slot that is either resolved, pending, or
absent. The first request for an absent name stores a future in the pending
slot before discovery starts; later requests for the same name attach to that
future, so discovery runs at most once per name at a time. A failed discovery
clears the slot and a later request starts over.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from threading import Lock

from .discovery import PantryDiscovery
from .errors import DiscoveryError, PantryNotFoundError
from .models import Pantry

LOGGER = logging.getLogger(__name__)


class PantryCache:
    """Map pantry names to resolved descriptors or in-flight discoveries."""

    def __init__(
        self,
        discovery: PantryDiscovery,
        *,
        search_paths: Sequence[Path],
        pantries: Mapping[str, Pantry | Path] | None = None,
    ) -> None:
        """Create the cache, seeding it from ``pantries``.

        Args:
            discovery: Collaborator used to locate and load pantries.
            search_paths: Ordered directories searched for unknown names.
            pantries: Optional seed mapping. Descriptors are stored as resolved;
                paths are loaded from that location on first request.
        """

        self._discovery = discovery
        self._search_paths = tuple(search_paths)
        self._resolved: dict[str, Pantry] = {}
        self._pending: dict[str, asyncio.Future[Pantry]] = {}
        self._locations: dict[str, Path] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._lock = Lock()
        for name, seed in (pantries or {}).items():
            if isinstance(seed, Pantry):
                self._resolved[name] = seed.named(name)
            else:
                self._locations[name] = Path(seed)

    @property
    def search_paths(self) -> tuple[Path, ...]:
        """Return the directories searched for unknown pantries."""

        return self._search_paths

    def get(self, name: str) -> Pantry | None:
        """Return the resolved descriptor for ``name`` without starting discovery."""

        with self._lock:
            return self._resolved.get(name)

    def is_pending(self, name: str) -> bool:
        """Return ``True`` while a discovery for ``name`` is in flight."""

        with self._lock:
            return name in self._pending

    def resolved(self) -> tuple[Pantry, ...]:
        """Return a snapshot of every resolved descriptor."""

        with self._lock:
            return tuple(self._resolved.values())

    def request(self, name: str) -> asyncio.Future[Pantry]:
        """Return a future for the descriptor of ``name``, starting discovery if needed.

        Concurrent callers asking for the same unresolved name share one future.
        Must be called while an event loop is running.

        Args:
            name: Pantry name, namespace included.

        Returns:
            asyncio.Future[Pantry]: Future completing with the descriptor or
            failing with :class:`PantryNotFoundError` / :class:`DiscoveryError`.

        Raises:
            RuntimeError: If no event loop is running.
        """

        loop = asyncio.get_running_loop()
        with self._lock:
            pantry = self._resolved.get(name)
            if pantry is not None:
                ready: asyncio.Future[Pantry] = loop.create_future()
                ready.set_result(pantry)
                return ready
            pending = self._pending.get(name)
            if pending is not None and not pending.cancelled():
                LOGGER.debug("joining in-flight discovery of pantry %s", name)
                return pending
            future: asyncio.Future[Pantry] = loop.create_future()
            self._pending[name] = future
            location = self._locations.get(name)
        LOGGER.debug("starting discovery of pantry %s", name)
        task = loop.create_task(self._populate(name, location, future))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return future

    async def resolve(self, name: str) -> Pantry:
        """Return the descriptor for ``name``, discovering it when necessary.

        Cancelling the caller leaves the shared discovery running for every
        other waiter.
        """

        return await asyncio.shield(self.request(name))

    def prefetch(self) -> None:
        """Start loading every pantry seeded by location without waiting.

        Failures clear the slot as usual, so the first import of that pantry
        retries and reports the error.

        Raises:
            RuntimeError: If no event loop is running.
        """

        with self._lock:
            names = tuple(self._locations)
        for name in names:
            self.request(name).add_done_callback(_consume_outcome)

    async def preload(self) -> tuple[Pantry, ...]:
        """Load every pantry seeded by location.

        Returns:
            tuple[Pantry, ...]: Descriptors for the seeded locations.

        Raises:
            PantryNotFoundError: If a seeded location is not a pantry.
            DiscoveryError: If loading fails for another reason.
        """

        with self._lock:
            names = tuple(self._locations)
        futures = [asyncio.shield(self.request(name)) for name in names]
        if not futures:
            return ()
        return tuple(await asyncio.gather(*futures))

    async def _populate(self, name: str, location: Path | None, future: asyncio.Future[Pantry]) -> None:
        try:
            if location is not None:
                loaded = await self._discovery.load(name, location)
            else:
                loaded = await self._discovery.discover(name, self._search_paths)
            if not isinstance(loaded, Pantry):
                raise TypeError(f"discovery returned {type(loaded).__name__}, expected Pantry")
            pantry = loaded.named(name)
        except PantryNotFoundError as exc:
            self._fail(name, future, exc)
            return
        except Exception as exc:  # noqa: BLE001 - any collaborator failure is delivered to every waiter
            self._fail(name, future, DiscoveryError(name, exc))
            return
        except BaseException as exc:
            self._fail(name, future, DiscoveryError(name, exc))
            raise
        with self._lock:
            self._resolved[name] = pantry
            self._locations.pop(name, None)
            self._release(name, future)
        LOGGER.debug("pantry %s resolved", name)
        if not future.done():
            future.set_result(pantry)

    def _fail(self, name: str, future: asyncio.Future[Pantry], error: Exception) -> None:
        with self._lock:
            self._release(name, future)
        LOGGER.debug("discovery of pantry %s failed: %s", name, error)
        if not future.done():
            future.set_exception(error)

    def _release(self, name: str, future: asyncio.Future[Pantry]) -> None:
        # A cancelled slot may already have been replaced by a newer discovery.
        if self._pending.get(name) is future:
            del self._pending[name]


def _consume_outcome(future: asyncio.Future[Pantry]) -> None:
    if not future.cancelled() and future.exception() is not None:
        LOGGER.debug("prefetch failed: %s", future.exception())


__all__ = ["PantryCache"]
