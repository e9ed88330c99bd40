from lsprotocol.types import (
    INITIALIZE,
    TEXT_DOCUMENT_COMPLETION,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    CompletionList,
    CompletionParams,
    DidChangeConfigurationParams,
    InitializeParams,
    LogMessageParams,
    MessageType,
    Position,
    TextEdit,
)

from emmetls.lsp.capabilities.capabilities import CapabilityManager
from emmetls.lsp.emmet_language_server import EmmetLanguageServer
from emmetls.lsp.text_sync_manager import TextSyncManager
from emmetls.settings import EmmetSettings

UPDATE_EXTENSIONS_PATH_COMMAND = "emmet.updateExtensionsPath"
EXPAND_ABBREVIATION_COMMAND = "emmet.expandAbbreviation"


async def apply_settings(ls: EmmetLanguageServer, settings: EmmetSettings) -> None:
    """Swap in new settings and reload the extensions path if it moved."""
    previous_path = ls.settings.extensions_path
    ls.settings = settings

    if settings.extensions_path != previous_path:
        await ls.extensions_store.update_extensions_path(settings.extensions_path)


def create_server() -> EmmetLanguageServer:
    """
    Creates and returns a configured Language Server instance.

    The LanguageServer class from pygls handles:
    - JSON-RPC communication with clients (editors)
    - Request/response lifecycle
    - Notifications and event handling
    """
    server = EmmetLanguageServer("emmetls", "0.1.0")

    # Capabilities and text sync exist from the start so requests that
    # arrive before `initialize` finishes still get an answer.
    server.text_sync_manager = TextSyncManager(server)
    server.text_sync_manager.register_handlers()
    server.extensions_store.register_text_sync_hooks(server.text_sync_manager)

    server.capability_manager = CapabilityManager(server)
    server.capability_manager.register_all()

    @server.feature(INITIALIZE)
    async def initialize(ls: EmmetLanguageServer, params: InitializeParams):
        """
        Read the Emmet settings sent as initialization options.
        """
        await apply_settings(ls, EmmetSettings.from_dict(params.initialization_options))

        if ls.settings.extensions_path:
            ls.window_log_message(
                LogMessageParams(
                    MessageType.Info,
                    f"Emmet extensions path: {ls.settings.extensions_path}",
                )
            )

    @server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
    async def did_change_configuration(
        ls: EmmetLanguageServer, params: DidChangeConfigurationParams
    ):
        """Handle live config changes to the `emmet` section."""
        settings = params.settings if isinstance(params.settings, dict) else {}
        await apply_settings(ls, EmmetSettings.from_dict(settings.get("emmet", settings)))

    @server.feature(TEXT_DOCUMENT_COMPLETION)
    async def completion(ls: EmmetLanguageServer, params: CompletionParams):
        if ls.capability_manager:
            return await ls.capability_manager.handle_completion(params)
        return CompletionList(is_incomplete=False, items=[])

    # pygls unpacks `workspace/executeCommand` arguments as positional args
    @server.command(UPDATE_EXTENSIONS_PATH_COMMAND)
    async def update_extensions_path(ls: EmmetLanguageServer, path: str | None = None):
        ls.settings.extensions_path = path
        await ls.extensions_store.update_extensions_path(path)

    @server.command(EXPAND_ABBREVIATION_COMMAND)
    def expand_abbreviation(
        ls: EmmetLanguageServer, uri: str, position: dict
    ) -> TextEdit | None:
        """Expand the abbreviation before `position` in the document at `uri`."""
        if not ls.capability_manager:
            return None

        doc = ls.workspace.get_text_document(uri)
        return ls.capability_manager.handle_expand(
            doc, Position(line=position["line"], character=position["character"])
        )

    return server
