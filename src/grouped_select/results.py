"""Reduction of the canonical view into the submitted value."""

from __future__ import annotations

from collections.abc import Sequence

from .types import FlatItem, GroupedSelections, ItemKind, NormalizedGroup


def build_selections(items: Sequence[FlatItem], groups: Sequence[NormalizedGroup]) -> GroupedSelections:
    """Map every declared group key to the values of its checked choices.

    Values keep their original choice order; a group without selections
    maps to an empty list.
    """
    selections: GroupedSelections = {group.key: [] for group in groups}
    for item in items:
        if item.kind == ItemKind.CHOICE and item.checked and item.group_key in selections:
            selections[item.group_key].append(item.value)
    return selections


def count_selected(selections: GroupedSelections) -> int:
    """Total number of selected values across groups."""
    return sum(len(values) for values in selections.values())
