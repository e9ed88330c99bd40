from pygls.lsp.server import LanguageServer

from emmetls.lsp.capabilities.capabilities import CapabilityManager
from emmetls.lsp.text_sync_manager import TextSyncManager
from emmetls.settings import EmmetSettings
from emmetls.workspace.extensions import default_store


class EmmetLanguageServer(LanguageServer):
    """
    Custom Language Server with Emmet-specific attributes.

    Attributes:
        settings: Emmet options sent by the client
        extensions_store: The process-wide store of snippets/profiles loaded
            from the extensions path, shared with the functional API
    """

    def __init__(self, name: str, version: str):
        super().__init__(name, version)

        self.settings = EmmetSettings()
        self.extensions_store = default_store
        self.extensions_store.attach(self)
        self.capability_manager: CapabilityManager | None = None
        self.text_sync_manager: TextSyncManager | None = None
