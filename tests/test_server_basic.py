"""
Basic tests for the Emmet Language Server.

These tests verify that the server can be created and has the expected features registered.
"""

import pytest
import pytest_asyncio
from lsprotocol.types import (
    INITIALIZE,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_SAVE,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    Position,
)
from pygls.workspace import TextDocument

from emmetls.abbreviation import get_expand_options, update_extensions_path
from emmetls.lsp.capabilities.emmet_capabilities import EmmetCompletionCapability
from emmetls.lsp.server import (
    EXPAND_ABBREVIATION_COMMAND,
    UPDATE_EXTENSIONS_PATH_COMMAND,
    apply_settings,
    create_server,
)
from emmetls.settings import EmmetSettings
from emmetls.workspace.extensions import default_store


@pytest_asyncio.fixture(autouse=True)
async def reset_default_store():
    """Servers share the process-wide store; leave it empty for the next test."""
    yield
    await update_extensions_path(None)
    default_store.attach(None)


def write_snippets(directory):
    (directory / "snippets.json").write_text(
        '{"html": {"snippets": {"hey": "ul>li"}}}', encoding="utf-8"
    )


def test_server_creation():
    """Test that the server can be created successfully."""
    server = create_server()
    assert server is not None
    assert server.name == "emmetls"
    assert server.version == "0.1.0"


def test_server_has_completion_feature():
    """Test that completion feature is registered."""
    server = create_server()

    # Check that completion handler is registered
    assert TEXT_DOCUMENT_COMPLETION in server.protocol.fm._features


def test_server_has_configuration_features():
    """Test that settings can arrive at initialize and later on."""
    server = create_server()

    assert INITIALIZE in server.protocol.fm._features
    assert WORKSPACE_DID_CHANGE_CONFIGURATION in server.protocol.fm._features


def test_server_has_did_save_feature():
    """Test that the text sync manager registered its save handler."""
    server = create_server()

    assert TEXT_DOCUMENT_DID_SAVE in server.protocol.fm._features
    assert len(server.text_sync_manager._on_save_hooks) == 1


def test_server_has_emmet_commands():
    """Test that both workspace commands are registered."""
    server = create_server()

    assert UPDATE_EXTENSIONS_PATH_COMMAND in server.protocol.fm.commands
    assert EXPAND_ABBREVIATION_COMMAND in server.protocol.fm.commands


def test_server_has_emmet_capability():
    server = create_server()

    capability = server.capability_manager.get_capability("emmet_completion")
    assert isinstance(capability, EmmetCompletionCapability)


@pytest.mark.asyncio
async def test_apply_settings_reloads_extensions_on_path_change(tmp_path):
    server = create_server()
    write_snippets(tmp_path)

    await apply_settings(server, EmmetSettings(extensions_path=str(tmp_path)))

    assert server.settings.extensions_path == str(tmp_path)
    assert server.extensions_store.snapshot.resolve_snippets("html") == {"hey": "ul>li"}


@pytest.mark.asyncio
async def test_apply_settings_keeps_store_when_path_unchanged(tmp_path):
    server = create_server()
    await apply_settings(server, EmmetSettings(extensions_path=str(tmp_path)))
    snapshot = server.extensions_store.snapshot

    await apply_settings(
        server,
        EmmetSettings(extensions_path=str(tmp_path), show_abbreviation_suggestions=False),
    )

    assert server.extensions_store.snapshot is snapshot
    assert server.settings.show_abbreviation_suggestions is False


def test_server_uses_process_wide_store():
    server = create_server()

    assert server.extensions_store is default_store
    assert default_store.server is server


@pytest.mark.asyncio
async def test_functional_reload_reaches_server_capability(tmp_path):
    server = create_server()
    write_snippets(tmp_path)

    await update_extensions_path(str(tmp_path))

    capability = server.capability_manager.get_capability("emmet_completion")
    doc = TextDocument("file:///a/index.html", source="hey", language_id="html")
    edit = capability.expand_at(doc, Position(line=0, character=3))
    assert edit is not None
    assert "<ul>" in edit.new_text


@pytest.mark.asyncio
async def test_server_reload_reaches_functional_api(tmp_path):
    server = create_server()
    write_snippets(tmp_path)

    await apply_settings(server, EmmetSettings(extensions_path=str(tmp_path)))

    assert get_expand_options("html").snippets == {"hey": "ul>li"}
