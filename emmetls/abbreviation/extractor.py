"""
Abbreviation extraction.

Finds the abbreviation that ends at the cursor on the cursor's line and splits
off any `|filter` suffix. The backward scan is py-emmet's own extractor;
filters, escapes and UTF-16 columns are handled here.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

import emmet
from lsprotocol.types import Position, Range
from pygls.workspace import TextDocument

from emmetls.abbreviation.syntax import get_emmet_mode, resolve_family
from emmetls.abbreviation.validator import is_abbreviation_valid

FILTER_DELIMITER = "|"
ESCAPE_CHAR = "\\"
ESCAPE_MASK = "_"

FILTER_NAME_PATTERN = re.compile(r"[A-Za-z0-9]+")
FILTER_SUFFIX_PATTERN = re.compile(r"(?:\|[A-Za-z0-9]*)+$")


@dataclass(frozen=True)
class AbbreviationText:
    """An abbreviation with its filter suffix split off."""

    abbreviation: str
    filters: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtractedAbbreviation:
    """An abbreviation found in a document, with the range it occupies."""

    abbreviation_range: Range
    abbreviation: str
    filters: tuple[str, ...] = ()


def utf16_to_index(line: str, character: int) -> int:
    """Convert a UTF-16 column into an index into ``line``."""
    units = 0
    for index, ch in enumerate(line):
        if units >= character:
            return index
        units += 2 if ord(ch) > 0xFFFF else 1
    return len(line)


def index_to_utf16(line: str, index: int) -> int:
    """Convert an index into ``line`` into a UTF-16 column."""
    # LSP expects UTF-16 code units for the character offset.
    return len(line[:index].encode("utf-16-le")) // 2


def extract_abbreviation_from_text(text: str | None) -> AbbreviationText | None:
    """
    Split ``text`` into the abbreviation and its filters.

    ``ul>li|bem|c`` gives ``("ul>li", ("bem", "c"))``. An escaped ``\\|`` is a
    literal ``|`` of the abbreviation; a dangling ``|`` yields no filter.
    """
    if not text or not text.strip():
        return None

    text = text.strip()
    body: list[str] = []
    separator = -1
    pos = 0

    while pos < len(text):
        ch = text[pos]
        if ch == ESCAPE_CHAR and pos + 1 < len(text):
            following = text[pos + 1]
            body.append(following if following == FILTER_DELIMITER else ch + following)
            pos += 2
            continue
        if ch == FILTER_DELIMITER:
            separator = pos
            break
        body.append(ch)
        pos += 1

    filters: list[str] = []
    if separator >= 0:
        for group in text[separator + 1:].split(FILTER_DELIMITER):
            if match := FILTER_NAME_PATTERN.match(group):
                filters.append(match.group(0))

    abbreviation = "".join(body).strip()
    if not abbreviation:
        return None

    return AbbreviationText(abbreviation=abbreviation, filters=tuple(filters))


def mask_escapes(text: str) -> str:
    """
    Replace every escape pair with two ``_``.

    The engine scanner stops at a backslash; masking keeps indices intact
    so spans found in the masked text can be cut from the original.
    """
    masked: list[str] = []
    pos = 0
    while pos < len(text):
        if text[pos] == ESCAPE_CHAR and pos + 1 < len(text):
            masked.append(ESCAPE_MASK * 2)
            pos += 2
            continue
        masked.append(text[pos])
        pos += 1
    return "".join(masked)


def split_filter_suffix(text: str) -> tuple[str, str]:
    """
    Split ``text`` before its trailing ``|filter`` groups.

    ``ul>li|bem|c`` gives ``("ul>li", "|bem|c")``. An escaped ``\\|`` never
    starts the suffix.
    """
    match = FILTER_SUFFIX_PATTERN.search(mask_escapes(text))
    if match is None:
        return text, ""
    return text[:match.start()], text[match.start():]


def find_abbreviation_start(line: str, end: int, syntax_type: str = "markup") -> int | None:
    """
    Return the index where the abbreviation ending at ``end`` starts.

    The scan itself is ``emmet.extract``: it honours brackets, quotes and
    the end of an HTML tag. Returns None when it finds nothing.
    """
    body, _ = split_filter_suffix(line[:end])
    found = emmet.extract(
        mask_escapes(body), len(body), {"lookAhead": False, "type": syntax_type}
    )
    if found is None:
        return None
    return found.location


def extract_abbreviation(
    document: TextDocument, position: Position, syntax: str | None = None
) -> ExtractedAbbreviation | None:
    """
    Extract the abbreviation that ends at ``position``.

    The scan never leaves the cursor's line and always takes the longest
    span (greedy). Returns None when nothing valid for ``syntax`` is there;
    ``syntax`` defaults to the document's language.
    """
    lines = document.lines
    if position.line < 0 or position.line >= len(lines):
        return None

    line = lines[position.line].rstrip("\r\n")
    end = utf16_to_index(line, position.character)

    if syntax is None:
        syntax = get_emmet_mode(getattr(document, "language_id", None)) or "html"

    start = find_abbreviation_start(line, end, resolve_family(syntax).value)
    if start is None or start >= end:
        return None

    extracted = extract_abbreviation_from_text(line[start:end])
    if extracted is None:
        return None

    if not is_abbreviation_valid(syntax, extracted.abbreviation):
        return None

    return ExtractedAbbreviation(
        abbreviation=extracted.abbreviation,
        filters=extracted.filters,
        abbreviation_range=Range(
            start=Position(line=position.line, character=index_to_utf16(line, start)),
            end=Position(line=position.line, character=position.character),
        ),
    )
