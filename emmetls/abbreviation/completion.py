"""
Completion candidates for Emmet abbreviations.

This provides suggestions as the user types:
- the expansion of the abbreviation before the cursor
- snippets (custom, built-in and common tags) the typed text is a prefix of

and withholds expansions that are only noise, e.g. `abc` turning into
`<abc></abc>` for every word typed in a markup file.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from lsprotocol.types import Position, Range
from pygls.workspace import TextDocument

from emmetls.abbreviation.config import ExpansionConfig, get_expand_options
from emmetls.abbreviation.data import COMMONLY_USED_TAGS, HTML_TAGS, MARKUP_SNIPPET_KEYS
from emmetls.abbreviation.engine import ExpandEngine, expand
from emmetls.abbreviation.extractor import (
    FILTER_DELIMITER,
    extract_abbreviation,
    utf16_to_index,
)
from emmetls.abbreviation.syntax import SyntaxFamily
from emmetls.settings import EmmetSettings
from emmetls.workspace.extensions import ExtensionsSnapshot, default_store

EMMET_DETAIL = "Emmet Abbreviation"

TAB_STOP_PATTERN = re.compile(r"(?<!\\)\$\{\d+\}")
PLACEHOLDER_PATTERN = re.compile(r"(?<!\\)\$\{\d+:([^}]*)\}")
NON_TAB_STOP_DOLLAR_PATTERN = re.compile(r"(?<!\\)\$(?!\{\d)")

# `ul>li` or `p+a`: the last node is what snippet suggestions match against
INNER_NODE_PATTERN = re.compile(r"[>+]([\w:-]+)$")
# Custom tags may hold a single `-` or `:`
CUSTOM_TAG_PATTERN = re.compile(r"[A-Za-z\d]*[-:][A-Za-z\d]*")
WORD_WITH_PERIOD_PATTERN = re.compile(r"([A-Za-z\d]*)\.")

WHITESPACE_PATTERN = re.compile(r"\s")


@dataclass(frozen=True)
class CompletionCandidate:
    """One completion: ``insert_text`` is snippet syntax, ``documentation`` a preview."""

    label: str
    documentation: str
    insert_text: str
    rank: int
    range: Range
    detail: str = EMMET_DETAIL
    filter_text: str | None = None


def replace_tab_stops_with_cursors(text: str) -> str:
    """`${1}` becomes `|`, `${2:style}` becomes `style`."""
    text = TAB_STOP_PATTERN.sub("|", text)
    return PLACEHOLDER_PATTERN.sub(r"\1", text)


def remove_tab_stops(text: str) -> str:
    text = TAB_STOP_PATTERN.sub("", text)
    return PLACEHOLDER_PATTERN.sub(r"\1", text)


def escape_non_tab_stop_dollar(text: str) -> str:
    """Escape every `$` that does not start a `${n...}` field."""
    return NON_TAB_STOP_DOLLAR_PATTERN.sub(r"\\$", text)


def is_expanded_text_noise(
    config: ExpansionConfig, abbreviation: str, expanded_text: str
) -> bool:
    """
    Tell whether an expansion is just the user typing a word.

    Unresolved stylesheet abbreviations become an empty property, unresolved
    markup ones become a tag named after the word. Known tags, snippet keys
    and custom tags (`custom-tag`, `custom:tag`) are never noise.
    """
    if config.family is SyntaxFamily.STYLESHEET:
        after = "" if config.syntax in ("sass", "stylus") else ";"
        return expanded_text == f"{abbreviation}: ${{1}}{after}" or (
            WHITESPACE_PATTERN.sub("", expanded_text)
            == WHITESPACE_PATTERN.sub("", abbreviation) + after
        )

    if (
        abbreviation.lower() in COMMONLY_USED_TAGS
        or abbreviation in MARKUP_SNIPPET_KEYS
        or (config.snippets and abbreviation in config.snippets)
    ):
        return False

    if CUSTOM_TAG_PATTERN.fullmatch(abbreviation):
        return False

    # Sentences end with a period; only `div.` style tags are abbreviations
    if abbreviation == ".":
        return False
    if match := WORD_WITH_PERIOD_PATTERN.fullmatch(abbreviation):
        return not (match.group(1) and match.group(1) in HTML_TAGS)

    word = abbreviation.lower()
    return expanded_text.lower() == f"<{word}>${{1}}</{word}>"


def _safe_expand(
    engine: ExpandEngine, abbreviation: str, config: ExpansionConfig
) -> str | None:
    try:
        return engine(abbreviation, config)
    except Exception:
        # Anything the engine cannot expand is simply not offered
        return None


def _make_candidate(
    label: str,
    expanded_text: str,
    config: ExpansionConfig,
    abbreviation_range: Range,
    rank: int,
    filter_text: str | None = None,
) -> CompletionCandidate:
    insert_text = expanded_text
    if config.family is SyntaxFamily.STYLESHEET:
        insert_text = escape_non_tab_stop_dollar(expanded_text)

    return CompletionCandidate(
        label=label,
        documentation=replace_tab_stops_with_cursors(expanded_text),
        insert_text=insert_text,
        rank=rank,
        range=abbreviation_range,
        filter_text=filter_text,
    )


def _suggestion_keys(config: ExpansionConfig) -> list[str]:
    """Custom snippet keys and, for markup, the built-in library."""
    keys = set(config.snippets or ())
    if config.family is SyntaxFamily.MARKUP:
        keys |= MARKUP_SNIPPET_KEYS | COMMONLY_USED_TAGS
    return sorted(keys, key=lambda key: (len(key), key))


def do_complete(
    document: TextDocument,
    position: Position,
    syntax: str,
    settings: EmmetSettings | None = None,
    snapshot: ExtensionsSnapshot | None = None,
    engine: ExpandEngine = expand,
) -> list[CompletionCandidate]:
    """
    Build the ranked completion candidates at ``position``.

    Returns an empty list when there is nothing worth offering.
    """
    settings = settings or EmmetSettings()
    if not settings.expanded_abbreviation_enabled:
        return []

    extracted = extract_abbreviation(document, position, syntax)
    if extracted is None:
        return []

    abbreviation = extracted.abbreviation
    config = get_expand_options(
        syntax,
        settings.syntax_profiles,
        settings.variables,
        extracted.filters,
        settings.preferences,
        snapshot if snapshot is not None else default_store.snapshot,
    )
    stylesheet = config.family is SyntaxFamily.STYLESHEET

    # Don't expand the name of a tag being opened: `<div`
    line = document.lines[position.line]
    line_prefix = line[:utf16_to_index(line, position.character)]
    if not stylesheet and line_prefix.endswith(f"<{abbreviation}"):
        return []

    candidates: list[CompletionCandidate] = []
    seen = {abbreviation}

    expanded_text = _safe_expand(engine, abbreviation, config)
    if expanded_text and not is_expanded_text_noise(config, abbreviation, expanded_text):
        if stylesheet:
            label = remove_tab_stops(expanded_text)
            filter_text = abbreviation
        else:
            label = FILTER_DELIMITER.join((abbreviation, *extracted.filters))
            filter_text = None
        candidates.append(
            _make_candidate(
                label, expanded_text, config, extracted.abbreviation_range, 0, filter_text
            )
        )

    if not settings.show_abbreviation_suggestions:
        return candidates

    prefix = abbreviation
    if settings.match_inner_node and (match := INNER_NODE_PATTERN.search(abbreviation)):
        prefix = match.group(1)

    rank = 1
    for key in _suggestion_keys(config):
        if key == prefix or not key.startswith(prefix):
            continue

        current = abbreviation + key[len(prefix):]
        if current in seen:
            continue
        seen.add(current)

        expanded_text = _safe_expand(engine, current, config)
        if not expanded_text:
            continue

        candidates.append(
            _make_candidate(
                current,
                expanded_text,
                config,
                extracted.abbreviation_range,
                rank,
                current if stylesheet else None,
            )
        )
        rank += 1

    return candidates
