"""
Output profiles.

Profiles come in two key schemas: the canonical camelCase one and the legacy
underscore one (``tag_case``, ``self_closing_tag``, ...). The legacy keys are
translated once, when the expansion configuration is assembled.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

CASE_VALUES = ("lower", "upper")

# Canonical profile key -> engine option name
ENGINE_OPTION_NAMES: dict[str, str] = {
    "tagCase": "output.tagCase",
    "attributeCase": "output.attributeCase",
    "attributeQuotes": "output.attributeQuotes",
    "format": "output.format",
    "inlineBreak": "output.inlineBreak",
    "selfClosingStyle": "output.selfClosingStyle",
    "compactBooleanAttributes": "output.compactBoolean",
}


def _case(value: Any) -> str:
    return value if value in CASE_VALUES else ""


def _format(value: Any) -> bool:
    # `tag_nl: "decide"` used to mean "let the formatter decide"
    if value is True or value is False:
        return value
    return True


def _self_closing_style(value: Any) -> Any:
    if value is True:
        return "xml"
    if value is False:
        return "html"
    return value


# Legacy key -> (canonical key, value translation)
LEGACY_KEYS: dict[str, tuple[str, Any]] = {
    "tag_case": ("tagCase", _case),
    "attr_case": ("attributeCase", _case),
    "attr_quotes": ("attributeQuotes", None),
    "tag_nl": ("format", _format),
    "inline_break": ("inlineBreak", None),
    "self_closing_tag": ("selfClosingStyle", _self_closing_style),
    "compact_bool": ("compactBooleanAttributes", None),
}


def is_legacy_profile(profile: Mapping[str, Any]) -> bool:
    """Legacy profiles use underscore separated key names."""
    return any("_" in key for key in profile)


def translate_profile(profile: Any) -> dict[str, Any]:
    """
    Translate a profile into the canonical schema.

    Recognised legacy keys are renamed and their values translated, anything
    else passes through unchanged so both schemas can be mixed. The string
    ``"xhtml"`` is shorthand for ``{"selfClosingStyle": "xhtml"}``.
    """
    if isinstance(profile, str):
        return {"selfClosingStyle": "xhtml"} if profile == "xhtml" else {}

    if not isinstance(profile, Mapping):
        return {}

    if not is_legacy_profile(profile):
        return dict(profile)

    translated: dict[str, Any] = {}
    for key, value in profile.items():
        if key not in LEGACY_KEYS:
            translated[key] = value
            continue

        new_key, convert = LEGACY_KEYS[key]
        translated[new_key] = convert(value) if convert else value

    return translated


def profile_to_engine_options(profile: Mapping[str, Any]) -> dict[str, Any]:
    """Map canonical profile keys onto the expansion engine's option names."""
    return {
        ENGINE_OPTION_NAMES[key]: value
        for key, value in profile.items()
        if key in ENGINE_OPTION_NAMES
    }
