"""
Document save notifications.

The server does not track open documents itself (pygls keeps the workspace),
it only needs to know when a file was saved so the extensions store can
pick up edits to ``snippets.json`` made in the editor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Awaitable, Callable

from lsprotocol.types import (
    DidSaveTextDocumentParams,
    LogMessageParams,
    MessageType,
    TEXT_DOCUMENT_DID_SAVE,
)

if TYPE_CHECKING:
    from emmetls.lsp.emmet_language_server import EmmetLanguageServer


OnSaveHook = Callable[[DidSaveTextDocumentParams], Awaitable[None]]


class TextSyncManager:
    """
    Fans ``textDocument/didSave`` out to async hooks.

    Hooks run one after another in the order they were added. An exception
    in one hook is logged and the remaining hooks still run.

    Usage:
        text_sync = TextSyncManager(server)
        text_sync.register_handlers()
        server.extensions_store.register_text_sync_hooks(text_sync)
    """

    def __init__(self, server: EmmetLanguageServer) -> None:
        self.server = server
        self._on_save_hooks: list[OnSaveHook] = []

    def add_on_save_hook(self, hook: OnSaveHook) -> None:
        self._on_save_hooks.append(hook)

    async def _broadcast_on_save(self, params: DidSaveTextDocumentParams) -> None:
        for hook in self._on_save_hooks:
            try:
                await hook(params)
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Save hook {hook.__name__} failed for "
                                f"{params.text_document.uri}: {type(e).__name__}: {e}"
                    )
                )

    def register_handlers(self) -> None:
        """Register the didSave handler; call once while building the server."""

        @self.server.feature(TEXT_DOCUMENT_DID_SAVE)
        async def did_save(
            ls: EmmetLanguageServer,
            params: DidSaveTextDocumentParams,
        ) -> None:
            await self._broadcast_on_save(params)
