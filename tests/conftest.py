"""Pytest fixtures for grouped-select tests."""

import pytest

from grouped_select.session import Event, EventKind, SessionOptions, apply, start_session
from grouped_select.types import Choice, Group


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the user config at an empty temp directory."""
    config_home = tmp_path / "xdg"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("GROUPED_SELECT_THEME", raising=False)
    return config_home / "grouped-select"


@pytest.fixture
def food_groups():
    """fruits=[apple, banana], vegetables=[carrot, broccoli]."""
    return [
        Group(key="fruits", label="Fruits", icon="🍎", choices=[Choice("apple"), Choice("banana")]),
        Group(key="vegetables", label="Vegetables", choices=[Choice("carrot"), Choice("broccoli")]),
    ]


@pytest.fixture
def make_session():
    """Factory: start a session with the given groups and options."""

    def _make(groups, **options):
        return start_session(groups, SessionOptions(**options))

    return _make


@pytest.fixture
def run_events():
    """Apply a sequence of EventKinds (or Events) to a state."""

    def _run(state, *events):
        for event in events:
            if isinstance(event, EventKind):
                event = Event(event)
            state = apply(state, event)
        return state

    return _run


@pytest.fixture
def type_query():
    """Append each character of ``text`` to the session query."""

    def _type(state, text):
        for char in text:
            state = apply(state, Event(EventKind.APPEND_QUERY_CHAR, char=char))
        return state

    return _type
