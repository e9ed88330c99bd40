"""
Grammar checks for extracted abbreviations.

Validation only answers "is this shaped like an abbreviation of the given
family". It never looks at snippet data, so a valid string may still expand
to nothing useful. Every function here is pure.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from emmetls.abbreviation.syntax import resolve_family

MAX_REPEAT = 100

MARKUP_START_CHARS = frozenset("!([#.{")
OPERATORS = frozenset(">+^")
NAME_SPECIAL_CHARS = frozenset("_-:$@%")

ATTRIBUTES_PATTERN = re.compile(
    r"""\s*(?:[^\s="'\]{}]+(?:=(?:"[^"]*"|'[^']*'|\{[^}]*\}|[^\s"'\]]*))?(?:\s+|$))*"""
)
STYLESHEET_PATTERN = re.compile(r"-?[A-Za-z!@#][A-Za-z0-9_\-:.$%!@#+,/]*")
HEX_COLOR_PATTERN = re.compile(r"#[\da-fA-F]{0,6}")
PROPERTY_HEX_COLOR_PATTERN = re.compile(r"[A-Za-z]+:?#[\da-fA-F]{0,6}(?:!important|!)?")


@dataclass(frozen=True)
class Token:
    kind: str   # "node", "op", "open", "close", "repeat"
    value: str


class AbbreviationSyntaxError(ValueError):
    """Raised by the markup tokenizer/parser; never escapes this module."""


def is_abbreviation_valid(syntax: str | None, abbreviation: str | None) -> bool:
    """
    Check that ``abbreviation`` is well formed for the family of ``syntax``.

    A purely numeric string is never an abbreviation.
    """
    if not abbreviation or abbreviation.isdigit():
        return False
    return resolve_family(syntax).validator(abbreviation)


# ===== Stylesheet grammar =====

def is_stylesheet_abbreviation(abbreviation: str) -> bool:
    if not abbreviation or abbreviation.isdigit():
        return False

    # `color:` is a property being typed, not an abbreviation
    if abbreviation.endswith(":"):
        return False

    if "#" in abbreviation:
        return bool(
            HEX_COLOR_PATTERN.fullmatch(abbreviation)
            or PROPERTY_HEX_COLOR_PATTERN.fullmatch(abbreviation)
        )

    return STYLESHEET_PATTERN.fullmatch(abbreviation) is not None


# ===== Markup grammar =====

def is_markup_abbreviation(abbreviation: str) -> bool:
    if not abbreviation or abbreviation.isdigit():
        return False

    # Doctype shorthand: `!`, `!!!`
    if abbreviation.startswith("!"):
        return set(abbreviation) == {"!"}

    if not (abbreviation[0].isalpha() or abbreviation[0] in MARKUP_START_CHARS):
        return False

    try:
        tokens = tokenize_markup(abbreviation)
        MarkupParser(tokens).parse()
    except AbbreviationSyntaxError:
        return False

    return True


def _find_closing(text: str, start: int, open_char: str, close_char: str) -> int:
    """
    Return the index of the bracket closing the one at ``start``.

    Quoted strings are skipped inside attribute blocks, braces nest inside
    text blocks and a backslash escapes the next character.
    """
    depth = 0
    quote = ""
    pos = start
    while pos < len(text):
        ch = text[pos]
        if ch == "\\":
            pos += 2
            continue
        if quote:
            if ch == quote:
                quote = ""
        elif ch in "\"'" and open_char == "[":
            quote = ch
        elif ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return pos
        pos += 1

    raise AbbreviationSyntaxError(f"Unclosed {open_char!r} at {start}")


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch in NAME_SPECIAL_CHARS


def tokenize_markup(abbreviation: str) -> list[Token]:
    """Split a markup abbreviation into node, operator, group and repeat tokens."""
    tokens: list[Token] = []
    pos = 0
    length = len(abbreviation)

    while pos < length:
        ch = abbreviation[pos]

        if ch in OPERATORS:
            end = pos + 1
            if ch == "^":
                while end < length and abbreviation[end] == "^":
                    end += 1
            tokens.append(Token("op", abbreviation[pos:end]))
            pos = end
        elif ch == "(":
            tokens.append(Token("open", ch))
            pos += 1
        elif ch == ")":
            tokens.append(Token("close", ch))
            pos += 1
        elif ch == "*":
            end = pos + 1
            while end < length and abbreviation[end].isdigit():
                end += 1
            count = abbreviation[pos + 1:end]
            if count and int(count) > MAX_REPEAT:
                raise AbbreviationSyntaxError(f"Repeat count {count} too large")
            tokens.append(Token("repeat", abbreviation[pos:end]))
            pos = end
        else:
            end = _consume_node(abbreviation, pos)
            tokens.append(Token("node", abbreviation[pos:end]))
            pos = end

    return tokens


def _consume_node(abbreviation: str, start: int) -> int:
    """Consume one element: name, `.class`, `#id`, `[attrs]` and `{text}` parts."""
    pos = start
    length = len(abbreviation)

    while pos < length:
        ch = abbreviation[pos]

        if ch == "\\" and pos + 1 < length:
            pos += 2
        elif _is_name_char(ch) or ch in ".#":
            pos += 1
        elif ch == "[":
            end = _find_closing(abbreviation, pos, "[", "]")
            if not ATTRIBUTES_PATTERN.fullmatch(abbreviation[pos + 1:end]):
                raise AbbreviationSyntaxError(f"Malformed attributes at {pos}")
            pos = end + 1
        elif ch == "{":
            pos = _find_closing(abbreviation, pos, "{", "}") + 1
        elif ch in "]}":
            raise AbbreviationSyntaxError(f"Unmatched {ch!r} at {pos}")
        else:
            break

    if pos == start:
        raise AbbreviationSyntaxError(
            f"Unexpected {abbreviation[start]!r} at {start}"
        )
    return pos


class MarkupParser:
    """
    Recursive descent check over markup tokens.

        expr  := item (op item)* ['+']
        item  := (node | '(' expr ')') repeat?
    """

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> None:
        self._expr()
        if self.pos != len(self.tokens):
            raise AbbreviationSyntaxError(
                f"Unexpected {self.tokens[self.pos].value!r}"
            )

    def _peek(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _expr(self) -> None:
        self._item(after_operator=False)

        while (token := self._peek()) and token.kind == "op":
            self.pos += 1
            following = self._peek()
            # `ul+` style snippets end with a sibling operator
            if following is None or following.kind == "close":
                if token.value != "+":
                    raise AbbreviationSyntaxError("Dangling operator")
                return
            self._item(after_operator=True)

    def _item(self, after_operator: bool) -> None:
        token = self._peek()
        if token is None:
            raise AbbreviationSyntaxError("Unexpected end of abbreviation")

        if token.kind == "node":
            self.pos += 1
        elif token.kind == "open":
            self.pos += 1
            if (inner := self._peek()) is None or inner.kind == "close":
                raise AbbreviationSyntaxError("Empty group")
            self._expr()
            if (closing := self._peek()) is None or closing.kind != "close":
                raise AbbreviationSyntaxError("Unbalanced group")
            self.pos += 1

            # A group that is not joined to anything is just text in parens
            following = self._peek()
            joined = after_operator or (
                following is not None and following.kind in ("op", "repeat")
            )
            if not joined:
                raise AbbreviationSyntaxError("Detached group")
        else:
            raise AbbreviationSyntaxError(f"Unexpected {token.value!r}")

        if (repeat := self._peek()) and repeat.kind == "repeat":
            self.pos += 1
