"""
Tests for emmetls/abbreviation/engine.py against the real py-emmet engine.
"""
from types import MappingProxyType

import pytest
from lsprotocol.types import Position
from pygls.workspace import TextDocument

from emmetls.abbreviation.completion import do_complete
from emmetls.abbreviation.config import get_expand_options
from emmetls.abbreviation.engine import expand, wrap_lorem_modifiers
from emmetls.settings import EmmetSettings
from emmetls.workspace.extensions import (
    EMPTY_SNAPSHOT,
    ExtensionsSnapshot,
    update_extensions_path,
)


def html_config(**kwargs):
    return get_expand_options("html", snapshot=EMPTY_SNAPSHOT, **kwargs)


def test_expand_nested_markup():
    expanded = expand("ul>li", html_config())

    assert "<ul>" in expanded
    assert "<li>" in expanded
    assert expanded.strip().endswith("</ul>")


def test_expand_repeat():
    expanded = expand("ul>li*3", html_config())
    assert expanded.count("<li") == 3


def test_fields_are_snippet_tab_stops():
    expanded = expand("a", html_config())
    assert "${1" in expanded


def test_expand_stylesheet():
    config = get_expand_options("css", snapshot=EMPTY_SNAPSHOT)
    assert "margin" in expand("m10", config)


def test_custom_snippet_is_used():
    snapshot = ExtensionsSnapshot(
        generation=1,
        snippets=MappingProxyType({"html": MappingProxyType({"hey": "ul>li"})}),
    )
    config = get_expand_options("html", snapshot=snapshot)

    assert "<ul>" in expand("hey", config)


def test_do_complete_with_engine():
    doc = TextDocument("file:///tmp/index.html", source="ul>li", language_id="html")

    candidates = do_complete(doc, Position(line=0, character=5), "html", snapshot=EMPTY_SNAPSHOT)

    assert candidates[0].label == "ul>li"
    assert candidates[0].rank == 0
    assert "<li>" in candidates[0].insert_text


def complete_html(text, **kwargs):
    doc = TextDocument("file:///tmp/index.html", source=text, language_id="html")
    return do_complete(doc, Position(line=0, character=len(text)), "html", **kwargs)


def test_repeated_items_preview():
    candidates = complete_html("ul>li*3", snapshot=EMPTY_SNAPSHOT)

    assert candidates[0].label == "ul>li*3"
    assert candidates[0].documentation.count("<li>|</li>") == 3


def test_lorem_word_count():
    candidates = complete_html("lorem10.item", snapshot=EMPTY_SNAPSHOT)

    preview = candidates[0].documentation
    assert preview.startswith('<div class="item">')
    assert preview.endswith("</div>")
    words = preview[len('<div class="item">'):-len("</div>")].split()
    assert len(words) == 10
    assert words[0].startswith("Lorem")


@pytest.mark.parametrize(
    "abbreviation, expected",
    [
        ("lorem10.item", ".item>lorem10"),
        ("lorem#intro", "#intro>lorem"),
        ("lorem5.a*3", ".a*3>lorem5"),
        ("ul>lorem3.item", "ul>(.item>lorem3)"),
        ("lorem.a+p", "(.a>lorem)+p"),
        ("lorem10", "lorem10"),
        ("div.item>lorem10", "div.item>lorem10"),
        ("p.lorem.item", "p.lorem.item"),
    ],
)
def test_wrap_lorem_modifiers(abbreviation, expected):
    assert wrap_lorem_modifiers(abbreviation) == expected


def test_lorem_modifiers_in_expansion():
    expanded = expand("lorem4#intro", html_config())

    assert expanded.startswith('<div id="intro">')
    assert len(expanded[len('<div id="intro">'):-len("</div>")].split()) == 4


def test_plain_word_without_suggestions_is_empty():
    settings = EmmetSettings(show_abbreviation_suggestions=False)
    assert complete_html("abc", settings=settings, snapshot=EMPTY_SNAPSHOT) == []


@pytest.mark.asyncio
async def test_completion_sees_reloaded_snippets(tmp_path):
    (tmp_path / "snippets.json").write_text(
        '{"html": {"snippets": {"hey": "ul>li"}}}', encoding="utf-8"
    )
    settings = EmmetSettings(show_abbreviation_suggestions=False)

    try:
        await update_extensions_path(None)
        await update_extensions_path(str(tmp_path))
        candidates = complete_html("hey", settings=settings)
        assert "<ul>" in candidates[0].insert_text

        await update_extensions_path(None)
        assert complete_html("hey", settings=settings) == []
    finally:
        await update_extensions_path(None)
