"""
Extensions store for EmmetLS

Holds the snippets, variables and syntax profiles loaded from the user's
Emmet extensions directory (``snippets.json`` and ``syntaxProfiles.json``,
or their ``.yml`` counterparts).

Design Principles:
1. Immutable snapshots (readers never see a half-loaded state)
2. Full replace on reload (no incremental merge)
3. Last started load wins (generation counter)
4. Broken files degrade to an empty override set
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml
from lsprotocol.types import DidSaveTextDocumentParams, LogMessageParams, MessageType
from pygls.uris import to_fs_path

if TYPE_CHECKING:
    from emmetls.lsp.emmet_language_server import EmmetLanguageServer
    from emmetls.lsp.text_sync_manager import TextSyncManager


SNIPPETS_SOURCE = "snippets"
PROFILES_SOURCE = "syntaxProfiles"
SOURCE_SUFFIXES = (".json", ".yml", ".yaml")


def _frozen(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ExtensionsSnapshot:
    """
    Everything loaded from one extensions directory.

    ``snippets`` is None when no directory is configured, which callers must
    tell apart from a configured directory that declares no snippets.
    """

    generation: int = 0
    path: Path | None = None
    snippets: Mapping[str, Mapping[str, str]] | None = None
    parents: Mapping[str, str] = field(default_factory=lambda: _frozen(None))
    variables: Mapping[str, str] = field(default_factory=lambda: _frozen(None))
    syntax_variables: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: _frozen(None)
    )
    profiles: Mapping[str, Any] = field(default_factory=lambda: _frozen(None))

    def resolve_snippets(self, syntax: str) -> Mapping[str, str] | None:
        """
        Snippets visible to ``syntax``.

        Walks the inheritance chain root-ward; child entries shadow parent
        entries with the same key.
        """
        from emmetls.abbreviation.syntax import inheritance_chain

        if self.snippets is None:
            return None

        resolved: dict[str, str] = {}
        for ancestor in reversed(inheritance_chain(syntax, self.parents)):
            resolved.update(self.snippets.get(ancestor, {}))
        return MappingProxyType(resolved)

    def resolve_variables(self, syntax: str) -> dict[str, str]:
        from emmetls.abbreviation.syntax import inheritance_chain

        resolved = dict(self.variables)
        for ancestor in reversed(inheritance_chain(syntax, self.parents)):
            resolved.update(self.syntax_variables.get(ancestor, {}))
        return resolved

    def get_profile(self, syntax: str) -> Any:
        return self.profiles.get(syntax)


EMPTY_SNAPSHOT = ExtensionsSnapshot()


class ExtensionsLoadError(Exception):
    """A source file exists but could not be read or parsed."""


def _read_source(directory: Path, name: str) -> dict[str, Any]:
    """
    Read ``name.json`` (or ``.yml``/``.yaml``) from ``directory``.

    A missing file is an empty source. An unreadable or malformed one raises
    ExtensionsLoadError.
    """
    for suffix in SOURCE_SUFFIXES:
        source_file = directory / f"{name}{suffix}"
        if not source_file.is_file():
            continue

        try:
            with open(source_file, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ExtensionsLoadError(f"Error while parsing the file {source_file}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ExtensionsLoadError(
                f"Expected a mapping at the top of {source_file}, got {type(data).__name__}"
            )
        return data

    return {}


def _normalize_snippets(syntax: str, snippets: Mapping[str, Any]) -> dict[str, str]:
    """Keep string snippets; wrap raw markup values as text blocks."""
    from emmetls.abbreviation.syntax import is_stylesheet

    normalized: dict[str, str] = {}
    for key, value in snippets.items():
        if not isinstance(value, str):
            continue
        # Markup snippets must be abbreviations: `<br>` becomes `{<br>}`
        if not is_stylesheet(syntax) and value.startswith("<") and value.endswith(">"):
            value = f"{{{value}}}"
        normalized[str(key)] = value
    return normalized


def load_extensions(
    directory: Path, generation: int
) -> tuple[ExtensionsSnapshot, list[str]]:
    """
    Build a snapshot from the sources in ``directory``.

    Returns the snapshot and the problems met on the way. A source that fails
    to load contributes nothing.
    """
    problems: list[str] = []

    try:
        snippets_data = _read_source(directory, SNIPPETS_SOURCE)
    except ExtensionsLoadError as e:
        problems.append(str(e))
        snippets_data = {}

    try:
        profiles_data = _read_source(directory, PROFILES_SOURCE)
    except ExtensionsLoadError as e:
        problems.append(str(e))
        profiles_data = {}

    snippets: dict[str, Mapping[str, str]] = {}
    parents: dict[str, str] = {}
    syntax_variables: dict[str, Mapping[str, str]] = {}
    variables = snippets_data.get("variables")

    for syntax, section in snippets_data.items():
        if syntax == "variables" or not isinstance(section, dict):
            continue

        if isinstance(section.get("snippets"), dict):
            snippets[syntax] = _frozen(_normalize_snippets(syntax, section["snippets"]))
        if isinstance(section.get("extends"), str):
            parents[syntax] = section["extends"]
        if isinstance(section.get("variables"), dict):
            syntax_variables[syntax] = _frozen(section["variables"])

    snapshot = ExtensionsSnapshot(
        generation=generation,
        path=directory,
        snippets=_frozen(snippets),
        parents=_frozen(parents),
        variables=_frozen(variables if isinstance(variables, dict) else None),
        syntax_variables=_frozen(syntax_variables),
        profiles=_frozen(profiles_data),
    )
    return snapshot, problems


class ExtensionsStore:
    """
    Process-wide holder of the current ExtensionsSnapshot.

    Usage:
        store = ExtensionsStore(server)
        await store.update_extensions_path("/home/me/.emmet")
        snippets = store.snapshot.resolve_snippets("scss")

        # Back to built-in defaults
        await store.update_extensions_path(None)
    """

    def __init__(self, server: EmmetLanguageServer | None = None) -> None:
        self.server = server
        self._snapshot: ExtensionsSnapshot = EMPTY_SNAPSHOT
        self._generation = 0
        self.verbose = bool(os.getenv("EMMETLS_DEBUG"))

    @property
    def snapshot(self) -> ExtensionsSnapshot:
        return self._snapshot

    def attach(self, server: EmmetLanguageServer | None) -> None:
        """Send log messages through ``server`` from now on."""
        self.server = server

    def _log(self, message_type: MessageType, message: str) -> None:
        if self.server is None:
            return
        self.server.window_log_message(
            LogMessageParams(type=message_type, message=message)
        )

    async def update_extensions_path(self, path: str | os.PathLike | None) -> None:
        """
        Reload every override from ``path``.

        None, a blank string or a path that is not an existing absolute
        directory resets to the built-in defaults. Never raises for bad
        sources.
        """
        self._generation += 1
        generation = self._generation

        raw_path = str(path).strip() if path is not None else ""
        if not raw_path:
            self._commit(ExtensionsSnapshot(generation=generation))
            return

        directory = Path(raw_path).expanduser()
        if not directory.is_absolute() or not directory.is_dir():
            self._log(
                MessageType.Warning,
                f"Emmet extensions path {raw_path} is not an absolute directory",
            )
            self._commit(ExtensionsSnapshot(generation=generation))
            return

        snapshot, problems = await asyncio.to_thread(load_extensions, directory, generation)
        for problem in problems:
            self._log(MessageType.Error, problem)

        if self._commit(snapshot) and self.verbose:
            count = sum(len(s) for s in (snapshot.snippets or {}).values())
            self._log(MessageType.Info, f"Loaded {count} custom snippets from {directory}")

    def _commit(self, snapshot: ExtensionsSnapshot) -> bool:
        """Swap in ``snapshot`` unless a newer load already landed."""
        if snapshot.generation < self._snapshot.generation:
            return False
        self._snapshot = snapshot
        return True

    def register_text_sync_hooks(self, text_sync: TextSyncManager) -> None:
        """Reload when a source file inside the extensions path is saved."""
        text_sync.add_on_save_hook(self._on_source_saved)

    async def _on_source_saved(self, params: DidSaveTextDocumentParams) -> None:
        directory = self._snapshot.path
        if directory is None:
            return

        fs_path = to_fs_path(params.text_document.uri)
        if not fs_path:
            return

        saved = Path(fs_path)
        if saved.parent == directory and saved.stem in (SNIPPETS_SOURCE, PROFILES_SOURCE):
            await self.update_extensions_path(directory)


default_store = ExtensionsStore()


async def update_extensions_path(path: str | os.PathLike | None) -> None:
    """Reload the process-wide default store."""
    await default_store.update_extensions_path(path)
