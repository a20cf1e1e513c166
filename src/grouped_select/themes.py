"""Configurable themes for the grouped checkbox renderer.

The Theme dataclass holds every visual token (colors, icons) used by
``render``. Named themes can be picked from the user config or the
GROUPED_SELECT_THEME environment variable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Theme:
    """Visual theme for the prompt.

    All colors use Rich markup format (e.g., "green", "bold cyan", "dim").

    Attributes:
        name: Theme identifier.
        prefix_color: Color of the "?" prompt prefix.
        highlight_color: Color for checked choices and the done summary.
        cursor_color: Color of the cursor icon.
        header_style: Style for group headers.
        disabled_color: Color for disabled choices.
        description_color: Color for the active choice's description.
        query_color: Color of the search query.
        error_color: Color for inline errors.
        muted_color: Color for counts, help and scroll hints.

        prefix_icon: Prompt prefix while idle.
        done_icon: Prompt prefix once submitted.
        cursor_icon: Character shown next to the active row.
        checked_icon: Character for checked state.
        unchecked_icon: Character for unchecked state.
        scroll_up_icon: Character indicating more rows above.
        scroll_down_icon: Character indicating more rows below.
    """

    name: str = "default"

    # Colors
    prefix_color: str = "green"
    highlight_color: str = "cyan"
    cursor_color: str = "cyan"
    header_style: str = "bold"
    disabled_color: str = "dim"
    description_color: str = "dim"
    query_color: str = "cyan"
    error_color: str = "red"
    muted_color: str = "dim"

    # Icons
    prefix_icon: str = "?"
    done_icon: str = "✔"
    cursor_icon: str = "❯"
    checked_icon: str = "◉"
    unchecked_icon: str = "◯"
    scroll_up_icon: str = "↑"
    scroll_down_icon: str = "↓"


DEFAULT_THEME = Theme()

_THEMES: dict[str, Theme] = {
    "default": DEFAULT_THEME,
    "ascii": Theme(
        name="ascii",
        done_icon="v",
        cursor_icon=">",
        checked_icon="[x]",
        unchecked_icon="[ ]",
        scroll_up_icon="^",
        scroll_down_icon="v",
    ),
    "warm": Theme(
        name="warm",
        prefix_color="color(130)",
        highlight_color="color(136)",
        cursor_color="color(130)",
        header_style="bold color(130)",
        query_color="color(136)",
        error_color="color(124)",
        muted_color="grey50",
    ),
}


def _normalize_theme_key(value: str) -> str:
    return value.strip().lower().replace("_", "-")


def get_theme(name: str | None) -> Theme:
    """Return the named theme, or the default for unknown names."""
    if not name:
        return DEFAULT_THEME
    theme = _THEMES.get(_normalize_theme_key(name))
    if theme is None:
        logger.warning("Unknown theme %r; using default", name)
        return DEFAULT_THEME
    return theme


def theme_names() -> list[str]:
    return sorted(_THEMES)
