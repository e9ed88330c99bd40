"""
Expansion configuration assembly.

Layers, later ones winning on key collision:
1. built-in defaults for the syntax family
2. profile and variables loaded from the extensions directory
3. profile and variables supplied with the request
then filter addons (in filter order) and inheritance-resolved snippets.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from emmetls.abbreviation.profile import profile_to_engine_options, translate_profile
from emmetls.abbreviation.syntax import SyntaxFamily, is_known_syntax, resolve_family
from emmetls.workspace.extensions import ExtensionsSnapshot, default_store

DEFAULT_MARKUP_PROFILE: dict[str, Any] = {
    "tagCase": "",
    "attributeCase": "",
    "attributeQuotes": "double",
    "format": True,
    "inlineBreak": 3,
    "selfClosingStyle": "html",
}

# Per-syntax departures from the markup defaults
SYNTAX_PROFILE_DEFAULTS: dict[str, dict[str, Any]] = {
    "xhtml": {"selfClosingStyle": "xhtml"},
    "xml": {"selfClosingStyle": "xml"},
    "xsl": {"selfClosingStyle": "xml"},
    "jsx": {"selfClosingStyle": "xhtml"},
}

# Addons implied by the syntax itself, appended after filter addons
SYNTAX_ADDONS: dict[str, dict[str, Any]] = {
    "jsx": {"jsx": True},
}

# Syntaxes the engine has no profile for
ENGINE_SYNTAX_FALLBACKS = frozenset({"vue"})

BEM_ELEMENT_SEPARATOR = "__"
BEM_MODIFIER_SEPARATOR = "_"


def emmet_snippet_field(
    index: int,
    placeholder: str = "",
    offset: int = 0,
    line: int = 0,
    column: int = 0,
) -> str:
    """
    Render an engine field as a numbered snippet tab stop.

    The engine also passes where the field lands in the output
    (``offset``, ``line``, ``column``); tab stops do not need it.
    """
    if placeholder:
        return f"${{{index}:{placeholder}}}"
    return f"${{{index}}}"


def _bem_addon(preferences: Mapping[str, Any]) -> dict[str, str]:
    return {
        "element": preferences.get("bem.elementSeparator") or BEM_ELEMENT_SEPARATOR,
        "modifier": preferences.get("bem.modifierSeparator") or BEM_MODIFIER_SEPARATOR,
    }


# Filter name -> addon factory
FILTER_ADDONS: dict[str, Callable[[Mapping[str, Any]], Any]] = {
    "bem": _bem_addon,
    "c": lambda preferences: {"enabled": True},
    "t": lambda preferences: True,
    "jsx": lambda preferences: True,
}


def _bem_options(addon: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "bem.enabled": True,
        "bem.element": addon.get("element", BEM_ELEMENT_SEPARATOR),
        "bem.modifier": addon.get("modifier", BEM_MODIFIER_SEPARATOR),
    }


# Addon name -> engine options it turns on
ADDON_ENGINE_OPTIONS: dict[str, Callable[[Any], dict[str, Any]]] = {
    "bem": _bem_options,
    "c": lambda addon: {"comment.enabled": True},
    "jsx": lambda addon: {"jsx.enabled": True},
}


@dataclass(frozen=True)
class ExpansionConfig:
    """Everything the expansion engine needs for one request."""

    syntax: str
    family: SyntaxFamily
    profile: Mapping[str, Any]
    variables: Mapping[str, str]
    addons: Mapping[str, Any]
    snippets: Mapping[str, str] | None = None
    field: Callable[..., str] = emmet_snippet_field

    @property
    def engine_syntax(self) -> str:
        """Syntax name passed to the engine; unknown ones use the family root."""
        if is_known_syntax(self.syntax) and self.syntax not in ENGINE_SYNTAX_FALLBACKS:
            return self.syntax
        return "css" if self.family is SyntaxFamily.STYLESHEET else "html"

    def to_engine_config(self) -> dict[str, Any]:
        """Build the config mapping understood by ``emmet.expand``."""
        options = profile_to_engine_options(self.profile)
        options["output.field"] = self.field
        for name, addon in self.addons.items():
            if name in ADDON_ENGINE_OPTIONS:
                options.update(ADDON_ENGINE_OPTIONS[name](addon))

        config: dict[str, Any] = {
            "type": self.family.value,
            "syntax": self.engine_syntax,
            "options": options,
            "variables": dict(self.variables),
        }
        if self.snippets:
            config["snippets"] = dict(self.snippets)
        return config


def _profile_filters(profile: Mapping[str, Any]) -> list[str]:
    raw = profile.get("filters")
    if not isinstance(raw, str):
        return []
    return [name.strip() for name in raw.split(",") if name.strip()]


def build_addons(
    syntax: str,
    filters: Iterable[str] = (),
    preferences: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Materialize filter addons in declaration order, then syntax addons.

    A repeated name keeps its first position and takes the last value.
    """
    preferences = preferences or {}
    addons: dict[str, Any] = {}

    for name in filters:
        factory = FILTER_ADDONS.get(name)
        if factory is not None:
            addons[name] = factory(preferences)

    for name, value in SYNTAX_ADDONS.get(syntax, {}).items():
        addons[name] = value

    return addons


def get_expand_options(
    syntax: str,
    syntax_profiles: Mapping[str, Any] | None = None,
    variables: Mapping[str, str] | None = None,
    filters: Iterable[str] | None = None,
    preferences: Mapping[str, Any] | None = None,
    snapshot: ExtensionsSnapshot | None = None,
) -> ExpansionConfig:
    """
    Assemble the expansion configuration for one request.

    Unknown syntaxes get a markup configuration instead of an error. They
    keep the addons of requested filters but get no syntax addons and no
    snippets.
    """
    if snapshot is None:
        snapshot = default_store.snapshot

    family = resolve_family(syntax)
    known = is_known_syntax(syntax)

    # 1. Built-in defaults
    profile: dict[str, Any] = {}
    if family is SyntaxFamily.MARKUP:
        profile.update(DEFAULT_MARKUP_PROFILE)
        profile.update(SYNTAX_PROFILE_DEFAULTS.get(syntax, {}))
    merged_variables: dict[str, str] = {}

    # 2. Extensions directory
    profile.update(translate_profile(snapshot.get_profile(syntax)))
    merged_variables.update(snapshot.resolve_variables(syntax))

    # 3. Request overrides
    if syntax_profiles:
        profile.update(translate_profile(syntax_profiles.get(syntax)))
    if variables:
        merged_variables.update(variables)

    # 4. Addons
    requested_filters = list(filters or [])
    requested_filters += [
        name for name in _profile_filters(profile) if name not in requested_filters
    ]
    addons = build_addons(syntax, requested_filters, preferences)

    # 5. Snippets
    snippets = snapshot.resolve_snippets(syntax) if known else None

    return ExpansionConfig(
        syntax=syntax,
        family=family,
        profile=MappingProxyType(profile),
        variables=MappingProxyType(merged_variables),
        addons=MappingProxyType(addons),
        snippets=snippets,
    )
