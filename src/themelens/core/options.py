"""
Tunable knobs for theme location and classification.

``ThemeOptions`` is passed explicitly into every core call; there is no module
level default state beyond the immutable ``DEFAULT_OPTIONS`` instance.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ThemeOptions(BaseModel):
    """Options shared by the resolver, classifier and editor queries."""

    constructor_names: tuple[str, ...] = Field(
        default=("createTheme", "extendTheme"),
        description="Wrapper functions whose first object argument is the theme",
    )
    styled_prefixes: tuple[str, ...] = Field(
        default=("styled",),
        description="Tag/callee text prefixes that mark a styled-component context",
    )
    max_import_depth: int = Field(
        default=1, ge=0, description="Cross-file hops followed while locating the theme"
    )
    require_styled_context: bool = Field(
        default=False,
        description="Only treat accesses inside styled tags or calls as theme accesses",
    )
    theme_identifier: str = "theme"
    props_identifier: str = "props"
    provider_names: tuple[str, ...] = ("ThemeProvider",)

    model_config = ConfigDict(frozen=True)

    def is_constructor(self, name: str) -> bool:
        return name in self.constructor_names

    def is_styled(self, text: str) -> bool:
        return any(text.startswith(prefix) for prefix in self.styled_prefixes)


DEFAULT_OPTIONS = ThemeOptions()
