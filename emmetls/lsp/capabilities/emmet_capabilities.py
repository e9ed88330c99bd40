"""
Emmet-related LSP capabilities.

Provides abbreviation completion, and the expansion used by the
`emmet.expandAbbreviation` command.
"""

from pathlib import PurePosixPath
from urllib.parse import urlparse

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
    InsertTextFormat,
    Position,
    TextEdit,
)
from pygls.workspace import TextDocument

from emmetls.abbreviation.completion import (
    CompletionCandidate,
    do_complete,
    escape_non_tab_stop_dollar,
)
from emmetls.abbreviation.config import get_expand_options
from emmetls.abbreviation.engine import expand
from emmetls.abbreviation.extractor import extract_abbreviation
from emmetls.abbreviation.syntax import get_emmet_mode, is_stylesheet
from emmetls.lsp.capabilities.capabilities import (
    CompletionCapability,
    ExpandCapability,
)


def resolve_document_syntax(server, document: TextDocument) -> str | None:
    """
    Emmet syntax for a document, or None when Emmet is off for it.

    ``includeLanguages`` maps extra language ids onto Emmet syntaxes; the
    file extension is used when the client sent no language id.
    """
    settings = server.settings
    language_id = getattr(document, "language_id", None)
    if not language_id:
        language_id = PurePosixPath(urlparse(document.uri).path).suffix.lstrip(".")

    if language_id in settings.exclude_languages:
        return None

    language_id = settings.include_languages.get(language_id, language_id)
    return get_emmet_mode(language_id, settings.exclude_languages)


class EmmetCompletionCapability(CompletionCapability, ExpandCapability):
    """Provides Emmet abbreviation expansions as completion items."""

    @property
    def name(self) -> str:
        return "emmet_completion"

    @property
    def description(self) -> str:
        return "Expand Emmet abbreviations and suggest matching snippets"

    async def can_handle(self, params: CompletionParams) -> bool:
        """Check that Emmet is enabled for the document's language."""
        if not self.server.settings.expanded_abbreviation_enabled:
            return False
        doc = self.server.workspace.get_text_document(params.text_document.uri)
        return resolve_document_syntax(self.server, doc) is not None

    async def complete(self, params: CompletionParams) -> CompletionList:
        """Provide Emmet completions at the cursor."""
        doc = self.server.workspace.get_text_document(params.text_document.uri)
        syntax = resolve_document_syntax(self.server, doc)
        if syntax is None:
            return CompletionList(is_incomplete=True, items=[])

        candidates = do_complete(
            doc,
            params.position,
            syntax,
            self.server.settings,
            self.server.extensions_store.snapshot,
        )

        items = [self._to_completion_item(candidate) for candidate in candidates]
        return CompletionList(is_incomplete=True, items=items)

    def _to_completion_item(self, candidate: CompletionCandidate) -> CompletionItem:
        kind = CompletionItemKind.Text
        if self.server.settings.show_suggestions_as_snippets:
            kind = CompletionItemKind.Snippet

        return CompletionItem(
            label=candidate.label,
            kind=kind,
            detail=candidate.detail,
            documentation=candidate.documentation,
            text_edit=TextEdit(range=candidate.range, new_text=candidate.insert_text),
            insert_text_format=InsertTextFormat.Snippet,
            sort_text=f"{candidate.rank:04d}{candidate.label}",
            filter_text=candidate.filter_text,
        )

    def expand_at(self, doc: TextDocument, position: Position) -> TextEdit | None:
        """
        Expand the abbreviation before ``position`` unconditionally.

        Unlike completion there is no noise filtering: the user asked for it.
        """
        syntax = resolve_document_syntax(self.server, doc)
        if syntax is None:
            return None

        extracted = extract_abbreviation(doc, position, syntax)
        if extracted is None:
            return None

        settings = self.server.settings
        config = get_expand_options(
            syntax,
            settings.syntax_profiles,
            settings.variables,
            extracted.filters,
            settings.preferences,
            self.server.extensions_store.snapshot,
        )
        try:
            expanded_text = expand(extracted.abbreviation, config)
        except Exception:
            return None

        if not expanded_text:
            return None
        if is_stylesheet(syntax):
            expanded_text = escape_non_tab_stop_dollar(expanded_text)

        return TextEdit(range=extracted.abbreviation_range, new_text=expanded_text)
