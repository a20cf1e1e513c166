"""Session state and the event transition function.

A session is one immutable ``SessionState`` record. ``apply`` maps a state
and an input event to the next state; the only side effect it has is calling
the caller's validation callback on submit. An asynchronous validation
result parks the session in ``VALIDATING`` until ``settle`` (or
``resolve_pending``) delivers the outcome.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import cached_property
from typing import Any, Callable, Union

from .navigation import find_first_selectable_index, find_next_selectable_index, get_current_group, jump_group
from .normalize import normalize_groups
from .results import build_selections, count_selected
from .search import filter_by_search, is_query_char, visible_ids
from .selection import invert_all, invert_group, toggle_all, toggle_group, toggle_item
from .types import FlatItem, Group, GroupedSelections, ItemId, ItemKind, NormalizedGroup

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "At least one selection is required"
INVALID_MESSAGE = "Invalid selection"

ValidationOutcome = Union[bool, str]
Validator = Callable[[GroupedSelections], Union[ValidationOutcome, Awaitable[ValidationOutcome]]]


class Status(str, Enum):
    """Session lifecycle."""

    IDLE = "idle"
    VALIDATING = "validating"
    DONE = "done"

    def __str__(self) -> str:
        return self.value


class EventKind(str, Enum):
    """Abstract input events, independent of the key that produced them."""

    MOVE_UP = "move-up"
    MOVE_DOWN = "move-down"
    TOGGLE_CURRENT = "toggle-current"
    SUBMIT = "submit"
    DELETE_QUERY_CHAR = "delete-query-char"
    CLEAR_QUERY = "clear-query"
    APPEND_QUERY_CHAR = "append-query-char"
    GROUP_TOGGLE_ALL = "group-toggle-all"
    GROUP_INVERT = "group-invert"
    GLOBAL_TOGGLE_ALL = "global-toggle-all"
    GLOBAL_INVERT = "global-invert"
    NEXT_GROUP = "next-group"
    PREVIOUS_GROUP = "previous-group"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Event:
    """One input event. ``char`` is only used by APPEND_QUERY_CHAR."""

    kind: EventKind
    char: str = ""


@dataclass(frozen=True)
class SessionOptions:
    searchable: bool = False
    required: bool = False
    validate: Validator | None = None


@dataclass(frozen=True)
class SessionState:
    """Everything a running prompt owns.

    ``items``/``groups`` are the canonical view; the filtered view is derived
    from them and ``query`` on access.
    """

    items: tuple[FlatItem, ...]
    groups: tuple[NormalizedGroup, ...]
    options: SessionOptions = field(default_factory=SessionOptions)
    query: str = ""
    cursor: int = 0
    status: Status = Status.IDLE
    error: str | None = None
    pending: Any = field(default=None, compare=False)
    result: GroupedSelections | None = None

    @cached_property
    def _view(self) -> tuple[list[FlatItem], list[NormalizedGroup]]:
        return filter_by_search(self.items, self.groups, self.query)

    @property
    def view_items(self) -> list[FlatItem]:
        return self._view[0]

    @property
    def view_groups(self) -> list[NormalizedGroup]:
        return self._view[1]

    @cached_property
    def visible(self) -> frozenset[ItemId]:
        return visible_ids(self.view_items)

    @property
    def active_item(self) -> FlatItem | None:
        if 0 <= self.cursor < len(self.view_items):
            return self.view_items[self.cursor]
        return None

    @property
    def active_group(self) -> NormalizedGroup | None:
        return get_current_group(self.cursor, self.view_groups)

    def selections(self) -> GroupedSelections:
        return build_selections(self.items, self.groups)


def start_session(
    groups: Iterable[Group | Mapping[str, Any]],
    options: SessionOptions | None = None,
) -> SessionState:
    """Normalize ``groups`` and place the cursor on the first stop."""
    items, normalized = normalize_groups(groups)
    state = SessionState(items=tuple(items), groups=tuple(normalized), options=options or SessionOptions())
    return replace(state, cursor=find_first_selectable_index(state.view_items))


def _with_items(state: SessionState, items: list[FlatItem]) -> SessionState:
    return replace(state, items=tuple(items))


def _set_query(state: SessionState, query: str) -> SessionState:
    return replace(state, query=query, cursor=0)


def _conclude(state: SessionState, outcome: Any, selections: GroupedSelections) -> SessionState:
    if outcome is True:
        logger.debug("Submission accepted: %d value(s)", count_selected(selections))
        return replace(state, status=Status.DONE, pending=None, error=None, result=selections)
    message = outcome if isinstance(outcome, str) and outcome else INVALID_MESSAGE
    logger.debug("Submission rejected: %s", message)
    return replace(state, status=Status.IDLE, pending=None, error=message)


def _submit(state: SessionState) -> SessionState:
    selections = state.selections()

    if state.options.required and count_selected(selections) == 0:
        return replace(state, error=REQUIRED_MESSAGE)

    validate = state.options.validate
    if validate is None:
        return _conclude(state, True, selections)

    outcome = validate(selections)
    if inspect.isawaitable(outcome):
        logger.debug("Validation deferred; session is validating")
        return replace(state, status=Status.VALIDATING, pending=outcome)
    return _conclude(state, outcome, selections)


def settle(state: SessionState, outcome: ValidationOutcome) -> SessionState:
    """Deliver the result of a deferred validation."""
    if state.status != Status.VALIDATING:
        return state
    return _conclude(state, outcome, state.selections())


async def resolve_pending(state: SessionState) -> SessionState:
    """Await a pending validation and settle the session with its outcome."""
    if state.status != Status.VALIDATING or state.pending is None:
        return state
    outcome = await state.pending
    return settle(state, outcome)


def apply(state: SessionState, event: Event) -> SessionState:
    """Return the state that follows ``event``.

    Events are ignored outside ``IDLE``. Actions with no valid target
    (empty view, disabled item, single group) leave the state unchanged
    apart from clearing a previous error.
    """
    if state.status != Status.IDLE:
        logger.debug("Ignoring %s while %s", event.kind, state.status)
        return state

    if state.error is not None:
        state = replace(state, error=None)

    kind = event.kind
    logger.debug("Event %s (cursor=%d, query=%r)", kind, state.cursor, state.query)

    if kind == EventKind.SUBMIT:
        return _submit(state)

    # Query editing
    if kind in (EventKind.APPEND_QUERY_CHAR, EventKind.DELETE_QUERY_CHAR, EventKind.CLEAR_QUERY):
        if not state.options.searchable:
            return state
        if kind == EventKind.APPEND_QUERY_CHAR:
            if len(event.char) != 1 or not is_query_char(event.char):
                return state
            return _set_query(state, state.query + event.char)
        if kind == EventKind.DELETE_QUERY_CHAR:
            return _set_query(state, state.query[:-1])
        cleared = replace(state, query="")
        return replace(cleared, cursor=find_first_selectable_index(cleared.view_items))

    view_items = state.view_items
    if not view_items:
        return state

    if kind == EventKind.MOVE_UP:
        return replace(state, cursor=find_next_selectable_index(view_items, state.cursor, -1))
    if kind == EventKind.MOVE_DOWN:
        return replace(state, cursor=find_next_selectable_index(view_items, state.cursor, 1))
    if kind == EventKind.NEXT_GROUP:
        return replace(state, cursor=jump_group(state.cursor, state.view_groups, 1))
    if kind == EventKind.PREVIOUS_GROUP:
        return replace(state, cursor=jump_group(state.cursor, state.view_groups, -1))

    if kind == EventKind.TOGGLE_CURRENT:
        item = state.active_item
        if item is None:
            return state
        if item.kind == ItemKind.GROUP_HEADER:
            return _with_items(state, toggle_group(state.items, item.group_key, state.visible))
        if item.kind == ItemKind.CHOICE:
            return _with_items(state, toggle_item(state.items, item, state.visible))
        return state

    if kind == EventKind.GLOBAL_TOGGLE_ALL:
        return _with_items(state, toggle_all(state.items, state.visible))
    if kind == EventKind.GLOBAL_INVERT:
        return _with_items(state, invert_all(state.items, state.visible))

    if kind in (EventKind.GROUP_TOGGLE_ALL, EventKind.GROUP_INVERT):
        group = state.active_group
        if group is None:
            return state
        if kind == EventKind.GROUP_TOGGLE_ALL:
            return _with_items(state, toggle_group(state.items, group.key, state.visible))
        return _with_items(state, invert_group(state.items, group.key, state.visible))

    return state
