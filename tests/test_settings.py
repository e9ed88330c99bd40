"""
Tests for emmetls/settings.py
"""
import pytest

from emmetls.settings import EmmetSettings


def test_defaults():
    settings = EmmetSettings()

    assert settings.show_expanded_abbreviation == "always"
    assert settings.expanded_abbreviation_enabled
    assert not settings.match_inner_node
    assert settings.show_abbreviation_suggestions
    assert not settings.show_suggestions_as_snippets
    assert settings.extensions_path is None


@pytest.mark.parametrize("data", [None, [], "emmet"])
def test_from_dict_non_mapping(data):
    assert EmmetSettings.from_dict(data) == EmmetSettings()


def test_from_dict_reads_camel_case_keys():
    settings = EmmetSettings.from_dict({
        "showExpandedAbbreviation": "withInnerNode",
        "showAbbreviationSuggestions": False,
        "showSuggestionsAsSnippets": True,
        "syntaxProfiles": {"html": {"tag_case": "upper"}},
        "variables": {"lang": "de"},
        "preferences": {"bem.elementSeparator": "-"},
        "excludeLanguages": ["markdown"],
        "includeLanguages": {"vue-html": "html"},
        "extensionsPath": "/home/me/.emmet",
        "somethingElse": 1,
    })

    assert settings.match_inner_node
    assert settings.show_abbreviation_suggestions is False
    assert settings.show_suggestions_as_snippets is True
    assert settings.syntax_profiles == {"html": {"tag_case": "upper"}}
    assert settings.variables == {"lang": "de"}
    assert settings.preferences == {"bem.elementSeparator": "-"}
    assert settings.exclude_languages == ["markdown"]
    assert settings.include_languages == {"vue-html": "html"}
    assert settings.extensions_path == "/home/me/.emmet"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("never", "never"),
        (False, "never"),
        (None, "never"),
        ("off", "never"),
        ("always", "always"),
        ("withInnerNode", "withInnerNode"),
        ("bogus", "always"),
    ],
)
def test_show_expanded_abbreviation_values(value, expected):
    settings = EmmetSettings.from_dict({"showExpandedAbbreviation": value})
    assert settings.show_expanded_abbreviation == expected
    assert settings.expanded_abbreviation_enabled == (expected != "never")


def test_extensions_path_list_takes_first_entry():
    settings = EmmetSettings.from_dict({"extensionsPath": ["/a", "/b"]})
    assert settings.extensions_path == "/a"

    assert EmmetSettings.from_dict({"extensionsPath": []}).extensions_path is None
    assert EmmetSettings.from_dict({"extensionsPath": 3}).extensions_path is None
