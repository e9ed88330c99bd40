"""
Tests for emmetls/abbreviation/profile.py
"""
import pytest

from emmetls.abbreviation.profile import (
    is_legacy_profile,
    profile_to_engine_options,
    translate_profile,
)


class TestTranslateProfile:

    def test_legacy_keys(self):
        profile = {
            "tag_case": "upper",
            "attr_case": "lower",
            "attr_quotes": "single",
            "tag_nl": False,
            "inline_break": 2,
            "self_closing_tag": True,
            "compact_bool": True,
        }

        assert translate_profile(profile) == {
            "tagCase": "upper",
            "attributeCase": "lower",
            "attributeQuotes": "single",
            "format": False,
            "inlineBreak": 2,
            "selfClosingStyle": "xml",
            "compactBooleanAttributes": True,
        }

    @pytest.mark.parametrize(
        "value, expected",
        [(True, "xml"), (False, "html"), ("xhtml", "xhtml")],
    )
    def test_self_closing_tag(self, value, expected):
        assert translate_profile({"self_closing_tag": value}) == {
            "selfClosingStyle": expected
        }

    @pytest.mark.parametrize(
        "value, expected",
        [("decide", True), (True, True), (False, False)],
    )
    def test_tag_nl(self, value, expected):
        assert translate_profile({"tag_nl": value}) == {"format": expected}

    def test_unknown_case_is_cleared(self):
        assert translate_profile({"tag_case": "title"}) == {"tagCase": ""}

    def test_canonical_profile_passes_through(self):
        profile = {"tagCase": "upper", "selfClosingStyle": "xhtml"}
        assert translate_profile(profile) == profile

    def test_unknown_keys_pass_through(self):
        assert translate_profile({"tag_case": "upper", "filters": "bem"}) == {
            "tagCase": "upper",
            "filters": "bem",
        }

    def test_xhtml_shorthand(self):
        assert translate_profile("xhtml") == {"selfClosingStyle": "xhtml"}

    @pytest.mark.parametrize("profile", [None, "html", 3, ["tag_case"]])
    def test_unusable_profiles(self, profile):
        assert translate_profile(profile) == {}


def test_is_legacy_profile():
    assert is_legacy_profile({"tag_case": "upper"})
    assert not is_legacy_profile({"tagCase": "upper"})
    assert not is_legacy_profile({})


def test_profile_to_engine_options():
    options = profile_to_engine_options({
        "tagCase": "upper",
        "selfClosingStyle": "xhtml",
        "compactBooleanAttributes": True,
        "filters": "bem",
    })

    assert options == {
        "output.tagCase": "upper",
        "output.selfClosingStyle": "xhtml",
        "output.compactBoolean": True,
    }
