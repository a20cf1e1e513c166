"""Keyboard input helpers and key-to-event mapping.

Raw keys come from ``readchar.readkey()``. The predicates below absorb
terminal variations; ``KeyMap`` turns a raw key into a session ``Event``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import readchar

from .search import is_query_char
from .session import Event, EventKind


def is_enter(key: str) -> bool:
    """Check if key is Enter/Return."""
    return key in (readchar.key.ENTER, "\r", "\n")


def is_escape(key: str) -> bool:
    """Check if key is Escape (handles terminal variations)."""
    return key in (readchar.key.ESC, "\x1b", "\x1b\x1b")


def is_up(key: str) -> bool:
    return key == readchar.key.UP


def is_down(key: str) -> bool:
    return key == readchar.key.DOWN


def is_backspace(key: str) -> bool:
    """Check if key is backspace (handles terminal variations)."""
    return key in (readchar.key.BACKSPACE, "\x7f", "\b")


def is_space(key: str) -> bool:
    return key == " "


def is_tab(key: str) -> bool:
    return key == readchar.key.TAB


def is_shift_tab(key: str) -> bool:
    return key == readchar.key.SHIFT_TAB


# Configurable actions. Everything else is bound to fixed keys.
BINDABLE_ACTIONS: dict[str, EventKind] = {
    "group_toggle_all": EventKind.GROUP_TOGGLE_ALL,
    "group_invert": EventKind.GROUP_INVERT,
    "global_toggle_all": EventKind.GLOBAL_TOGGLE_ALL,
    "global_invert": EventKind.GLOBAL_INVERT,
}

# Plain letters are free when there is no query to type into.
DEFAULT_PLAIN_BINDINGS: dict[str, str] = {
    "group_toggle_all": "A",
    "group_invert": "I",
    "global_toggle_all": "a",
    "global_invert": "i",
}

# Ctrl+I is Tab in a terminal, so invert uses Ctrl+R.
DEFAULT_SEARCH_BINDINGS: dict[str, str] = {
    "group_toggle_all": "ctrl+g",
    "group_invert": "ctrl+t",
    "global_toggle_all": "ctrl+a",
    "global_invert": "ctrl+r",
}

_NAMED_KEYS: dict[str, str] = {
    "tab": readchar.key.TAB,
    "shift+tab": readchar.key.SHIFT_TAB,
    "esc": readchar.key.ESC,
    "escape": readchar.key.ESC,
    "space": " ",
    "backspace": readchar.key.BACKSPACE,
}


def parse_key_name(name: str) -> str:
    """Convert a key name such as ``ctrl+a``, ``tab`` or ``A`` to the raw key.

    Raises:
        ValueError: If the name is not recognised.
    """
    if len(name) == 1:
        return name
    lowered = name.strip().lower()
    if lowered in _NAMED_KEYS:
        return _NAMED_KEYS[lowered]
    if lowered.startswith("ctrl+") and len(lowered) == 6 and lowered[5].isalpha():
        return chr(ord(lowered[5]) - ord("a") + 1)
    raise ValueError(f"Unknown key name: {name!r}")


def describe_key(name: str) -> str:
    """Short label for a key name, used in help lines."""
    return name.strip().lower() if len(name) > 1 else name


@dataclass
class KeyMap:
    """Maps raw keys to events for one prompt.

    Attributes:
        searchable: Whether printable keys edit the search query.
        bindings: Action name (see BINDABLE_ACTIONS) to key name.
    """

    searchable: bool = False
    bindings: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        defaults = DEFAULT_SEARCH_BINDINGS if self.searchable else DEFAULT_PLAIN_BINDINGS
        merged = dict(defaults)
        merged.update({k: v for k, v in self.bindings.items() if k in BINDABLE_ACTIONS})
        self.bindings = merged
        self._raw = {parse_key_name(name): BINDABLE_ACTIONS[action] for action, name in merged.items()}

    @classmethod
    def from_config(cls, searchable: bool, keys_config: Mapping[str, Mapping[str, str]] | None) -> KeyMap:
        """Build a keymap from the ``keys`` section of the user config."""
        section = (keys_config or {}).get("searchable" if searchable else "plain") or {}
        return cls(searchable=searchable, bindings=dict(section))

    def label(self, action: str) -> str:
        return describe_key(self.bindings[action])

    def event_for(self, key: str) -> Event | None:
        """Translate a raw key, or return None if it means nothing here."""
        if is_enter(key):
            return Event(EventKind.SUBMIT)
        if is_up(key):
            return Event(EventKind.MOVE_UP)
        if is_down(key):
            return Event(EventKind.MOVE_DOWN)
        if is_space(key):
            return Event(EventKind.TOGGLE_CURRENT)
        if key in self._raw:
            return Event(self._raw[key])
        if is_shift_tab(key):
            return Event(EventKind.PREVIOUS_GROUP)
        if is_tab(key):
            return Event(EventKind.NEXT_GROUP)

        if self.searchable:
            if is_backspace(key):
                return Event(EventKind.DELETE_QUERY_CHAR)
            if is_escape(key):
                return Event(EventKind.CLEAR_QUERY)
            if len(key) == 1 and is_query_char(key):
                return Event(EventKind.APPEND_QUERY_CHAR, char=key)
            return None

        # vim-style movement when letters are not query input
        if key == "k":
            return Event(EventKind.MOVE_UP)
        if key == "j":
            return Event(EventKind.MOVE_DOWN)
        return None
