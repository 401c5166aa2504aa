# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the import resolution engine."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

import pytest

from pantry_import.discovery import FilesystemPantryDiscovery
from pantry_import.emission import ImportSession
from pantry_import.errors import DiscoveryError, IngredientNotFoundError, NoStyleEntryPointError, PantryNotFoundError
from pantry_import.importer import Importer
from pantry_import.models import Pantry
from pantry_import.results import ImportedContents, ImportedFile, ImportFailure, ImportOutcome

NULL = "NODE_SASS_NULL"
IMPORTING_PATH = "/path/to/importing/file.scss"

MOCK_PANTRY = {
    "ingredients": {
        "ingredient": {
            "name": "ingredient",
            "path": "/path/to/pantry/ingredient",
            "entryPoints": {"sass": {"filename": "index.scss"}},
        },
        "scriptonly": {
            "path": "/path/to/pantry/scriptonly",
            "entryPoints": {"javascript": {"filename": "index.js"}},
        },
    },
}


class Recorder:
    """Completion callback capturing delivered outcomes."""

    def __init__(self) -> None:
        self.outcomes: list[ImportOutcome] = []

    def __call__(self, outcome: ImportOutcome) -> None:
        self.outcomes.append(outcome)


class CountingDiscovery(FilesystemPantryDiscovery):
    """Filesystem discovery recording every discover call."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []

    async def discover(self, name: str, search_paths: Sequence[Path]) -> Pantry:
        self.calls.append(name)
        return await super().discover(name, search_paths)


class GatedDiscovery(FilesystemPantryDiscovery):
    """Filesystem discovery that waits for the test before searching."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()
        self.loads: list[str] = []

    async def discover(self, name: str, search_paths: Sequence[Path]) -> Pantry:
        await self.release.wait()
        return await super().discover(name, search_paths)

    async def load(self, name: str, path: Path) -> Pantry:
        self.loads.append(name)
        return await super().load(name, path)


def test_absolute_paths_pass_through_synchronously() -> None:
    importer = Importer(NULL, {})
    done = Recorder()

    assert importer.resolve("/some/absolute/path", IMPORTING_PATH, done, session=ImportSession()) == NULL
    assert done.outcomes == []


def test_pass_through_value_is_returned_verbatim() -> None:
    sentinel = object()
    importer = Importer(sentinel, {})

    assert importer.bind()("/x/y.scss", IMPORTING_PATH, Recorder()) is sentinel


def test_relative_paths_outside_pantries_always_pass_through() -> None:
    bound = Importer(NULL, {"pantries": {"pantry": MOCK_PANTRY}}).bind()
    done = Recorder()

    for _ in range(3):
        assert bound("../some/other/relative/path", IMPORTING_PATH, done) == NULL
    assert done.outcomes == []


def test_unrecognized_specifiers_pass_through() -> None:
    bound = Importer(NULL, {}).bind()

    assert bound("plain-file", IMPORTING_PATH, Recorder()) == NULL
    assert bound("url(http://example.com/a.css)", IMPORTING_PATH, Recorder()) == NULL


def test_cached_pantry_rewrites_synchronously_then_suppresses() -> None:
    bound = Importer(NULL, {"pantries": {"pantry": MOCK_PANTRY}}).bind()
    done = Recorder()

    assert bound("pantry/ingredient", IMPORTING_PATH, done) == ImportedFile("/path/to/pantry/ingredient/index.scss")
    assert bound("pantry/ingredient", "/another/file.scss", done) == ImportedContents("")
    assert done.outcomes == []


def test_namespaced_cached_pantry() -> None:
    bound = Importer(NULL, {"pantries": {"@namespace/pantry": MOCK_PANTRY}}).bind()

    result = bound("@namespace/pantry/ingredient", IMPORTING_PATH, Recorder())

    assert result == ImportedFile("/path/to/pantry/ingredient/index.scss")
    assert result.as_host_value() == {"file": "/path/to/pantry/ingredient/index.scss"}


def test_spec_scenario_descriptor() -> None:
    descriptor = {"ingredients": {"ingredient": {"path": "/p/i", "entryPoints": {"sass": {"filename": "index.scss"}}}}}
    bound = Importer(NULL, {"pantries": {"pantry": descriptor}}).bind()

    assert bound("pantry/ingredient", IMPORTING_PATH, Recorder()) == ImportedFile("/p/i/index.scss")
    assert bound("pantry/ingredient", IMPORTING_PATH, Recorder()).as_host_value() == {"contents": ""}


def test_sessions_emit_independently() -> None:
    importer = Importer(NULL, {"pantries": {"pantry": MOCK_PANTRY}})

    first = importer.bind()("pantry/ingredient", IMPORTING_PATH, Recorder())
    second = importer.bind()("pantry/ingredient", IMPORTING_PATH, Recorder())

    assert isinstance(first, ImportedFile)
    assert first == second


def test_synchronous_ingredient_failures() -> None:
    bound = Importer(NULL, {"pantries": {"pantry": MOCK_PANTRY}}).bind()

    missing = bound("pantry/missing", IMPORTING_PATH, Recorder())
    no_style = bound("pantry/scriptonly", IMPORTING_PATH, Recorder())

    assert isinstance(missing, ImportFailure)
    assert isinstance(missing.error, IngredientNotFoundError)
    assert missing.message == 'Failed to resolve "pantry/missing": No such ingredient "pantry/missing"'
    assert isinstance(no_style, ImportFailure)
    assert isinstance(no_style.error, NoStyleEntryPointError)
    assert (no_style.error.pantry, no_style.error.ingredient) == ("pantry", "scriptonly")


def test_uncached_pantry_resolves_asynchronously(fixtures_dir: Path) -> None:
    async def scenario() -> tuple[object, Recorder, object]:
        bound = Importer(NULL, {"pantrySearchPaths": [fixtures_dir]}).bind()
        done = Recorder()
        delivered = asyncio.Event()

        def on_done(outcome: ImportOutcome) -> None:
            done(outcome)
            delivered.set()

        returned = bound("pantry/ingredient", IMPORTING_PATH, on_done)
        await delivered.wait()
        repeat_done = Recorder()
        repeat = bound("pantry/ingredient", IMPORTING_PATH, repeat_done)
        assert repeat_done.outcomes == []
        return returned, done, repeat

    returned, done, repeat = asyncio.run(scenario())

    assert returned is None
    assert done.outcomes == [ImportedFile(str(fixtures_dir / "pantry" / "ingredient" / "index.scss"))]
    assert repeat == ImportedContents("")


def test_namespaced_pantry_discovered_on_search_path(fixtures_dir: Path) -> None:
    async def scenario() -> object:
        importer = Importer(NULL, {"pantrySearchPaths": [fixtures_dir]})
        return await importer.resolve_async("@namespace/pantry/ingredient", IMPORTING_PATH, session=ImportSession())

    result = asyncio.run(scenario())

    assert result == ImportedFile(str(fixtures_dir / "@namespace" / "pantry" / "ingredient" / "index.scss"))


def test_missing_pantry_delivers_failure_naming_pantry(fixtures_dir: Path) -> None:
    async def scenario() -> object:
        importer = Importer(NULL, {"pantrySearchPaths": [fixtures_dir]})
        return await importer.resolve_async("@namespace/not-a-pantry/ingredient", IMPORTING_PATH, session=ImportSession())

    result = asyncio.run(scenario())

    assert isinstance(result, ImportFailure)
    assert isinstance(result.error, PantryNotFoundError)
    assert result.error.pantry == "@namespace/not-a-pantry"
    assert "@namespace/not-a-pantry/ingredient" in result.message


def test_missing_style_entry_point_delivered_asynchronously(fixtures_dir: Path) -> None:
    async def scenario() -> object:
        importer = Importer(NULL, {"pantrySearchPaths": [fixtures_dir]})
        return await importer.resolve_async("pantry/scriptonly", IMPORTING_PATH, session=ImportSession())

    result = asyncio.run(scenario())

    assert isinstance(result, ImportFailure)
    assert isinstance(result.error, NoStyleEntryPointError)
    assert "pantry/scriptonly" in str(result.error)


def test_concurrent_imports_trigger_one_discovery_in_order(fixtures_dir: Path) -> None:
    async def scenario() -> tuple[CountingDiscovery, list[tuple[int, ImportOutcome]]]:
        discovery = CountingDiscovery()
        bound = Importer(NULL, {"pantrySearchPaths": [fixtures_dir]}, discovery=discovery).bind()
        delivered: list[tuple[int, ImportOutcome]] = []
        finished = asyncio.Event()

        def callback(index: int, outcome: ImportOutcome) -> None:
            delivered.append((index, outcome))
            if len(delivered) == 3:
                finished.set()

        specifiers = ["pantry/ingredient", "pantry/scriptonly", "pantry/ingredient"]
        for index, specifier in enumerate(specifiers):
            assert bound(specifier, IMPORTING_PATH, lambda outcome, index=index: callback(index, outcome)) is None
        await finished.wait()
        return discovery, delivered

    discovery, delivered = asyncio.run(scenario())

    assert discovery.calls == ["pantry"]
    assert [index for index, _ in delivered] == [0, 1, 2]
    assert isinstance(delivered[0][1], ImportedFile)
    assert isinstance(delivered[1][1], ImportFailure)
    assert delivered[2][1] == ImportedContents("")


def test_failed_pantry_does_not_poison_other_imports(fixtures_dir: Path) -> None:
    async def scenario() -> tuple[object, object]:
        importer = Importer(NULL, {"pantrySearchPaths": [fixtures_dir]})
        session = ImportSession()
        missing, found = await asyncio.gather(
            importer.resolve_async("nowhere/ingredient", IMPORTING_PATH, session=session),
            importer.resolve_async("pantry/ingredient", IMPORTING_PATH, session=session),
        )
        return missing, found

    missing, found = asyncio.run(scenario())

    assert isinstance(missing, ImportFailure)
    assert isinstance(found, ImportedFile)


def test_relative_imports_inside_pantry_are_emitted_once(fixtures_dir: Path) -> None:
    async def scenario() -> list[object]:
        importer = Importer(NULL, {"pantrySearchPaths": [fixtures_dir]})
        session = ImportSession()
        entry = await importer.resolve_async("pantry/ingredient", IMPORTING_PATH, session=session)
        assert isinstance(entry, ImportedFile)
        bound = importer.bind(session)
        sibling = str(fixtures_dir / "pantry" / "other" / "index.scss")
        return [
            bound("./relative-import", entry.path, Recorder()),
            bound("../ingredient/relative-import", sibling, Recorder()),
            bound("../../outside", entry.path, Recorder()),
            bound("../../outside", entry.path, Recorder()),
        ]

    results = asyncio.run(scenario())

    assert results == [NULL, ImportedContents(""), NULL, NULL]


def test_descriptor_without_root_never_matches_relative_imports() -> None:
    bound = Importer(NULL, {"pantries": {"pantry": MOCK_PANTRY}}).bind()

    first = bound("./x", "/path/to/pantry/ingredient/index.scss", Recorder())
    second = bound("./x", "/path/to/pantry/ingredient/index.scss", Recorder())

    assert first == second == NULL


def test_deferred_resolution_requires_event_loop() -> None:
    bound = Importer(NULL, {"pantrySearchPaths": ["/nonexistent"]}).bind()

    with pytest.raises(RuntimeError):
        bound("pantry/ingredient", IMPORTING_PATH, Recorder())


def test_cancelled_co_waiter_does_not_drop_deferred_import(fixtures_dir: Path) -> None:
    async def scenario() -> Recorder:
        discovery = GatedDiscovery()
        importer = Importer(NULL, {"pantrySearchPaths": [fixtures_dir]}, discovery=discovery)
        done = Recorder()
        delivered = asyncio.Event()

        def on_done(outcome: ImportOutcome) -> None:
            done(outcome)
            delivered.set()

        assert importer.bind()("pantry/ingredient", IMPORTING_PATH, on_done) is None
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(importer.pantries.resolve("pantry"), 0.01)
        discovery.release.set()
        await delivered.wait()
        return done

    done = asyncio.run(scenario())

    assert done.outcomes == [ImportedFile(str(fixtures_dir / "pantry" / "ingredient" / "index.scss"))]


def test_cancelled_discovery_delivers_failure(fixtures_dir: Path) -> None:
    async def scenario() -> Recorder:
        importer = Importer(NULL, {"pantrySearchPaths": [fixtures_dir]}, discovery=GatedDiscovery())
        done = Recorder()
        delivered = asyncio.Event()

        def on_done(outcome: ImportOutcome) -> None:
            done(outcome)
            delivered.set()

        assert importer.bind()("pantry/ingredient", IMPORTING_PATH, on_done) is None
        importer.pantries.request("pantry").cancel()
        await delivered.wait()
        return done

    done = asyncio.run(scenario())

    assert len(done.outcomes) == 1
    failure = done.outcomes[0]
    assert isinstance(failure, ImportFailure)
    assert isinstance(failure.error, DiscoveryError)
    assert failure.error.pantry == "pantry"


def test_location_seeds_start_loading_with_running_loop(fixtures_dir: Path) -> None:
    async def scenario() -> tuple[GatedDiscovery, bool, object]:
        discovery = GatedDiscovery()
        importer = Importer(NULL, {"pantries": {"alias": fixtures_dir / "pantry"}}, discovery=discovery)
        started = importer.pantries.is_pending("alias")
        result = await importer.resolve_async("alias/ingredient", IMPORTING_PATH, session=ImportSession())
        return discovery, started, result

    discovery, started, result = asyncio.run(scenario())

    assert started
    assert discovery.loads == ["alias"]
    assert result == ImportedFile(str(fixtures_dir / "pantry" / "ingredient" / "index.scss"))


def test_relative_imports_inside_location_seeded_pantry(fixtures_dir: Path) -> None:
    async def scenario() -> list[object]:
        importer = Importer(NULL, {"pantries": {"alias": fixtures_dir / "pantry"}})
        session = ImportSession()
        entry = await importer.resolve_async("alias/ingredient", IMPORTING_PATH, session=session)
        assert isinstance(entry, ImportedFile)
        bound = importer.bind(session)
        return [
            bound("./partial", entry.path, Recorder()),
            bound("./partial", entry.path, Recorder()),
            bound("../../outside", entry.path, Recorder()),
            bound("../../outside", entry.path, Recorder()),
        ]

    results = asyncio.run(scenario())

    assert results == [NULL, ImportedContents(""), NULL, NULL]
