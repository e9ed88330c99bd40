"""
Emmet settings.

Built from the client's ``initializationOptions`` and refreshed from the
``emmet`` section of ``workspace/didChangeConfiguration``. Keys follow the
editor's camelCase names; unknown keys are ignored.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

SHOW_NEVER = "never"
SHOW_ALWAYS = "always"
SHOW_WITH_INNER_NODE = "withInnerNode"

SHOW_EXPANDED_MODES = (SHOW_NEVER, SHOW_ALWAYS, SHOW_WITH_INNER_NODE)


def _show_expanded_mode(value: Any) -> str:
    if value is False or value is None or value == "off":
        return SHOW_NEVER
    if value in SHOW_EXPANDED_MODES:
        return value
    return SHOW_ALWAYS


def _mapping(value: Any) -> dict:
    return dict(value) if isinstance(value, Mapping) else {}


@dataclass
class EmmetSettings:
    """Options recognized by the completion provider."""

    show_expanded_abbreviation: str = SHOW_ALWAYS
    show_abbreviation_suggestions: bool = True
    show_suggestions_as_snippets: bool = False
    syntax_profiles: dict[str, Any] = field(default_factory=dict)
    variables: dict[str, str] = field(default_factory=dict)
    preferences: dict[str, Any] = field(default_factory=dict)
    exclude_languages: list[str] = field(default_factory=list)
    include_languages: dict[str, str] = field(default_factory=dict)
    extensions_path: str | None = None
    # Legacy profile keys are always translated; kept for client compatibility
    use_new_emmet: bool = True

    @property
    def expanded_abbreviation_enabled(self) -> bool:
        return self.show_expanded_abbreviation != SHOW_NEVER

    @property
    def match_inner_node(self) -> bool:
        return self.show_expanded_abbreviation == SHOW_WITH_INNER_NODE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> EmmetSettings:
        """Build settings from a client configuration mapping."""
        if not isinstance(data, Mapping):
            return cls()

        exclude = data.get("excludeLanguages")
        extensions_path = data.get("extensionsPath")
        if isinstance(extensions_path, list):
            extensions_path = extensions_path[0] if extensions_path else None

        return cls(
            show_expanded_abbreviation=_show_expanded_mode(
                data.get("showExpandedAbbreviation", SHOW_ALWAYS)
            ),
            show_abbreviation_suggestions=bool(
                data.get("showAbbreviationSuggestions", True)
            ),
            show_suggestions_as_snippets=bool(
                data.get("showSuggestionsAsSnippets", False)
            ),
            syntax_profiles=_mapping(data.get("syntaxProfiles")),
            variables=_mapping(data.get("variables")),
            preferences=_mapping(data.get("preferences")),
            exclude_languages=list(exclude) if isinstance(exclude, list) else [],
            include_languages=_mapping(data.get("includeLanguages")),
            extensions_path=extensions_path if isinstance(extensions_path, str) else None,
            use_new_emmet=bool(data.get("useNewEmmet", True)),
        )
