"""Type definitions for grouped-select.

Raw input types (Choice, Group), the normalized entries that make up a flat
view (NormalizedChoice, GroupHeader, Separator) and the per-view group table
(NormalizedGroup). Every flat entry carries an explicit ``kind`` discriminant
so navigation and filtering code can dispatch on it directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class ItemKind(str, Enum):
    """Discriminant for entries of a flat view."""

    CHOICE = "choice"
    GROUP_HEADER = "group-header"
    SEPARATOR = "separator"

    def __str__(self) -> str:
        return self.value


# ── raw input ─────────────────────────────────────────────────────────────


@dataclass
class Choice:
    """A selectable value as supplied by the caller."""

    value: Any
    name: str | None = None
    description: str | None = None
    short: str | None = None
    disabled: bool | str = False
    checked: bool = False


@dataclass
class Group:
    """A labeled group of choices. ``key`` must be unique across groups."""

    key: str
    label: str
    icon: str | None = None
    choices: list[Choice] = field(default_factory=list)


# ── flat view entries ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class NormalizedChoice:
    """A choice with every optional field resolved.

    The only entry that holds selection state. Instances are immutable;
    toggling produces a replacement.
    """

    value: Any
    name: str
    short: str
    group_key: str
    group_index: int
    index_in_group: int
    description: str | None = None
    disabled: bool | str = False
    checked: bool = False
    kind: ItemKind = field(default=ItemKind.CHOICE, init=False)

    @property
    def item_id(self) -> tuple[Any, str]:
        """Identity of this choice across canonical and filtered views."""
        return (self.value, self.group_key)

    @property
    def disabled_reason(self) -> str | None:
        if isinstance(self.disabled, str):
            return self.disabled
        return None


@dataclass(frozen=True)
class GroupHeader:
    """Synthetic navigable heading for a group."""

    group_key: str
    label: str
    icon: str | None = None
    kind: ItemKind = field(default=ItemKind.GROUP_HEADER, init=False)


@dataclass(frozen=True)
class Separator:
    """Non-navigable visual divider."""

    line: str = "─" * 20
    kind: ItemKind = field(default=ItemKind.SEPARATOR, init=False)


FlatItem = Union[NormalizedChoice, GroupHeader, Separator]

ItemId = tuple[Any, str]


@dataclass(frozen=True)
class NormalizedGroup:
    """A group's metadata and bounds within one flat view.

    ``start_index`` is the header's index, ``end_index`` the index of the
    last member choice (equal to ``start_index`` for an empty group).
    """

    key: str
    label: str
    start_index: int
    end_index: int
    icon: str | None = None
    choices: tuple[NormalizedChoice, ...] = ()

    def contains(self, index: int) -> bool:
        return self.start_index <= index <= self.end_index


GroupedSelections = dict[str, list[Any]]
