"""
Adapter around the py-emmet expansion engine.

The rest of the package only sees ``ExpandEngine``: a callable taking an
abbreviation and an ExpansionConfig and returning the expanded text with
fields rendered by ``config.field``.
"""
from __future__ import annotations

import re
from collections.abc import Callable

import emmet

from emmetls.abbreviation.config import ExpansionConfig
from emmetls.abbreviation.syntax import SyntaxFamily

ExpandEngine = Callable[[str, ExpansionConfig], str]

# A bare `loremN` node followed by class/id/attribute modifiers. The engine
# turns such a node into plain text and drops the modifiers.
LOREM_WITH_MODIFIERS = re.compile(
    r"(?<![^>+^(])"
    r"(?P<lorem>lorem[a-z]*\d*(?:-\d*)?)"
    r"(?P<modifiers>(?:[.#][\w$@-]+|\[[^\]]*\])+)"
    r"(?P<repeat>\*\d*)?"
    r"(?=$|[+^)])",
    re.IGNORECASE,
)


def wrap_lorem_modifiers(abbreviation: str) -> str:
    """
    Move the modifiers of a bare ``loremN`` node onto an implicit element.

    ``lorem10.item`` becomes ``.item>lorem10``; inside a larger abbreviation
    the rewrite is grouped, so ``lorem.a+p`` becomes ``(.a>lorem)+p``.
    """
    def rewrite(match: re.Match) -> str:
        element = f"{match['modifiers']}{match['repeat'] or ''}>{match['lorem']}"
        if match.start() == 0 and match.end() == len(abbreviation):
            return element
        return f"({element})"

    return LOREM_WITH_MODIFIERS.sub(rewrite, abbreviation)


def expand(abbreviation: str, config: ExpansionConfig) -> str:
    """Expand ``abbreviation`` with py-emmet."""
    if config.family is SyntaxFamily.MARKUP:
        abbreviation = wrap_lorem_modifiers(abbreviation)
    return emmet.expand(abbreviation, config.to_engine_config())
