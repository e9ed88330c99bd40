"""
Syntax classification for Emmet abbreviations.

Every syntax id resolves to one grammar family (markup or stylesheet) and to
at most one parent syntax it inherits snippets and settings from.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from enum import Enum


class SyntaxFamily(Enum):
    """Grammar family of an Emmet syntax."""

    MARKUP = "markup"           # html, xml, jsx, pug, ...
    STYLESHEET = "stylesheet"   # css, scss, less, ...

    @property
    def validator(self) -> Callable[[str], bool]:
        """Grammar check for abbreviations of this family."""
        from emmetls.abbreviation.validator import (
            is_markup_abbreviation,
            is_stylesheet_abbreviation,
        )

        if self is SyntaxFamily.STYLESHEET:
            return is_stylesheet_abbreviation
        return is_markup_abbreviation


MARKUP_SYNTAXES: dict[str, str | None] = {
    "html": None,
    "xhtml": "html",
    "xml": "html",
    "xsl": "html",
    "jsx": "html",
    "haml": "html",
    "pug": "html",
    "slim": "html",
    "vue": "html",
}

STYLESHEET_SYNTAXES: dict[str, str | None] = {
    "css": None,
    "scss": "css",
    "sass": "css",
    "less": "css",
    "sss": "css",
    "stylus": "css",
}

# Built-in inheritance tree: syntax -> parent syntax
BUILTIN_PARENTS: dict[str, str] = {
    syntax: parent
    for syntax, parent in {**MARKUP_SYNTAXES, **STYLESHEET_SYNTAXES}.items()
    if parent
}

# Editor language ids that map onto an Emmet syntax under another name
LANGUAGE_ALIASES: dict[str, str] = {
    "typescriptreact": "jsx",
    "javascriptreact": "jsx",
    "jsx-tags": "jsx",
    "sass-indented": "sass",
    "jade": "pug",
}

JSX_LANGUAGE_PATTERN = re.compile(r"\b(typescriptreact|javascriptreact|jsx-tags)\b")


def resolve_family(syntax: str | None) -> SyntaxFamily:
    """
    Classify a syntax id.

    Unknown syntaxes are treated as markup so they still get a usable
    expansion configuration.
    """
    if syntax in STYLESHEET_SYNTAXES:
        return SyntaxFamily.STYLESHEET
    return SyntaxFamily.MARKUP


def is_stylesheet(syntax: str | None) -> bool:
    return resolve_family(syntax) is SyntaxFamily.STYLESHEET


def is_known_syntax(syntax: str | None) -> bool:
    return syntax in MARKUP_SYNTAXES or syntax in STYLESHEET_SYNTAXES


def get_emmet_mode(
    language_id: str | None, excluded_languages: Iterable[str] = ()
) -> str | None:
    """
    Map an editor language id to the Emmet syntax used to expand it.

    Returns None for excluded or unsupported languages.
    """
    if not language_id or language_id in set(excluded_languages):
        return None

    if JSX_LANGUAGE_PATTERN.search(language_id):
        return "jsx"

    language_id = LANGUAGE_ALIASES.get(language_id, language_id)
    if is_known_syntax(language_id):
        return language_id

    return None


def inheritance_chain(
    syntax: str, declared_parents: Mapping[str, str] | None = None
) -> list[str]:
    """
    Return ``syntax`` followed by its ancestors, root last.

    ``declared_parents`` overlays user declared ``extends`` entries on the
    built-in tree. A cyclic declaration stops the walk at the first syntax
    that was already visited.
    """
    parents = {**BUILTIN_PARENTS, **(declared_parents or {})}

    chain = [syntax]
    current = parents.get(syntax)
    while current and current not in chain:
        chain.append(current)
        current = parents.get(current)

    return chain
