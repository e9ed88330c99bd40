"""Emmet abbreviation extraction, validation, configuration and completion."""
from .completion import CompletionCandidate, do_complete
from .config import ExpansionConfig, emmet_snippet_field, get_expand_options
from .extractor import (
    AbbreviationText,
    ExtractedAbbreviation,
    extract_abbreviation,
    extract_abbreviation_from_text,
)
from .syntax import SyntaxFamily, get_emmet_mode, is_stylesheet
from .validator import is_abbreviation_valid
from emmetls.workspace.extensions import update_extensions_path

__all__ = [
    'AbbreviationText',
    'CompletionCandidate',
    'ExpansionConfig',
    'ExtractedAbbreviation',
    'SyntaxFamily',
    'do_complete',
    'emmet_snippet_field',
    'extract_abbreviation',
    'extract_abbreviation_from_text',
    'get_emmet_mode',
    'get_expand_options',
    'is_abbreviation_valid',
    'is_stylesheet',
    'update_extensions_path',
]
