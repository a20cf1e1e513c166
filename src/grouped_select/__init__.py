"""Interactive grouped multi-select prompt for the terminal.

Core engine (no terminal dependency):
    normalize_groups -> filter_by_search -> navigation / selection -> build_selections,
    tied together by the pure ``session.apply(state, event)`` transition.

Interactive front end: ``GroupedCheckbox`` / ``grouped_checkbox`` (Rich + readchar).
"""

__version__ = "0.1.0"

from .normalize import GroupConfigError, normalize_groups
from .prompt import GroupedCheckbox, PromptConfig, grouped_checkbox
from .results import build_selections
from .search import filter_by_search
from .session import Event, EventKind, SessionOptions, SessionState, Status, apply, settle, start_session
from .themes import DEFAULT_THEME, Theme
from .types import (
    Choice,
    Group,
    GroupHeader,
    ItemKind,
    NormalizedChoice,
    NormalizedGroup,
    Separator,
)

__all__ = [
    "__version__",
    # Prompt
    "GroupedCheckbox",
    "PromptConfig",
    "grouped_checkbox",
    # Input types
    "Choice",
    "Group",
    "GroupConfigError",
    # View types
    "ItemKind",
    "NormalizedChoice",
    "NormalizedGroup",
    "GroupHeader",
    "Separator",
    # Engine
    "normalize_groups",
    "filter_by_search",
    "build_selections",
    "start_session",
    "apply",
    "settle",
    "Event",
    "EventKind",
    "SessionOptions",
    "SessionState",
    "Status",
    # Theming
    "Theme",
    "DEFAULT_THEME",
]
