"""
Capability plugins for EmmetLS.

Each LSP feature the server answers is served by one or more capability
objects. The manager owns them, asks each whether it applies to a request
and merges what they return, so a new feature is a new plugin rather than a
change to the server module.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from lsprotocol.types import (
    CompletionItem,
    CompletionList,
    CompletionParams,
    LogMessageParams,
    MessageType,
    Position,
    TextEdit,
)
from pygls.workspace import TextDocument


if TYPE_CHECKING:
    from emmetls.lsp.emmet_language_server import EmmetLanguageServer


class Capability(ABC):
    """A plugin bound to the running server."""

    def __init__(self, server: EmmetLanguageServer) -> None:
        self.server = server

    def register(self) -> None:
        """Called once when the manager registers its plugins."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Key the manager stores this plugin under."""

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @abstractmethod
    async def can_handle(self, params) -> bool:
        """Whether this plugin has something to say about ``params``."""


class CompletionCapability(Capability):
    """Plugin answering ``textDocument/completion``."""

    @abstractmethod
    async def complete(self, params: CompletionParams) -> CompletionList:
        """
        Completion items at the requested position.

        The manager only calls this after can_handle() said yes.
        """


class ExpandCapability(Capability):
    """Plugin answering the expand-abbreviation command."""

    @abstractmethod
    def expand_at(self, doc: TextDocument, position: Position) -> TextEdit | None:
        """Edit replacing the abbreviation before ``position``, if any."""


class CapabilityManager:
    """
    Owns the capability plugins and fans requests out to them.

    Usage:
        manager = CapabilityManager(server)
        manager.register_all()
        items = await manager.handle_completion(params)
    """

    def __init__(
        self,
        server: EmmetLanguageServer,
        capabilities: dict[str, Capability] | None = None,
    ):
        self.server = server

        if capabilities is None:
            from emmetls.lsp.capabilities.emmet_capabilities import (
                EmmetCompletionCapability,
            )

            emmet = EmmetCompletionCapability(server)
            capabilities = {emmet.name: emmet}

        self.capabilities = capabilities
        self._registered = False

    def register_all(self) -> None:
        if self._registered:
            return

        for capability in self.capabilities.values():
            capability.register()

        self._registered = True

    def get_capability(self, name: str) -> Capability | None:
        return self.capabilities.get(name)

    def get_capabilities_by_type(self, capability_type: type) -> list[Capability]:
        """Plugins that are instances of ``capability_type``, in registration order."""
        return [
            capability
            for capability in self.capabilities.values()
            if isinstance(capability, capability_type)
        ]

    def _log_failure(self, capability: Capability, error: Exception) -> None:
        self.server.window_log_message(
            LogMessageParams(
                type=MessageType.Error,
                message=f"Emmet {capability.name} failed: {type(error).__name__}: {error}",
            )
        )

    async def handle_completion(self, params: CompletionParams) -> CompletionList:
        """
        Merge the items of every completion plugin that applies.

        A failing plugin is logged and skipped. The list is always marked
        incomplete so the client asks again as the abbreviation grows.
        """
        items: list[CompletionItem] = []

        for capability in self.get_capabilities_by_type(CompletionCapability):
            try:
                if await capability.can_handle(params):
                    result = await capability.complete(params)  # pyright: ignore
                    items.extend(result.items)
            except Exception as e:
                self._log_failure(capability, e)

        return CompletionList(is_incomplete=True, items=items)

    def handle_expand(self, doc: TextDocument, position: Position) -> TextEdit | None:
        """First edit produced by an expand plugin, or None."""
        for capability in self.get_capabilities_by_type(ExpandCapability):
            try:
                edit = capability.expand_at(doc, position)  # pyright: ignore
            except Exception as e:
                self._log_failure(capability, e)
                continue
            if edit is not None:
                return edit

        return None
