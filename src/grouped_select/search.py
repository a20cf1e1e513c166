"""Text filtering of a canonical flat view.

``filter_by_search`` is a pure projection: it never changes selection
state, it only decides which entries are shown and reachable.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from .types import FlatItem, GroupHeader, ItemId, ItemKind, NormalizedChoice, NormalizedGroup

_QUERY_CHAR_RE = re.compile(r"^[a-zA-Z0-9\-_./\s]$")


def is_query_char(char: str) -> bool:
    """Return True if ``char`` may be appended to the search query."""
    return bool(_QUERY_CHAR_RE.match(char))


def matches_query(choice: NormalizedChoice, query: str) -> bool:
    """Case-insensitive substring match on the choice's display name."""
    if not query:
        return True
    return query.lower() in choice.name.lower()


def filter_by_search(
    flat_items: Sequence[FlatItem],
    groups: Sequence[NormalizedGroup],
    query: str,
) -> tuple[list[FlatItem], list[NormalizedGroup]]:
    """Derive the filtered view for ``query``.

    Group metadata and order come from ``groups``; member choices are read
    from ``flat_items`` so the result always carries the latest checked
    state. Groups without a match are left out entirely.

    Returns:
        Tuple of (filtered_items, filtered_groups) with bounds recomputed
        for the filtered view. Both are empty when nothing matches.
    """
    filtered_items: list[FlatItem] = []
    filtered_groups: list[NormalizedGroup] = []

    for group in groups:
        matching = [
            item
            for item in flat_items
            if item.kind == ItemKind.CHOICE
            and item.group_key == group.key
            and matches_query(item, query)
        ]
        if not matching:
            continue

        start_index = len(filtered_items)
        filtered_items.append(GroupHeader(group_key=group.key, label=group.label, icon=group.icon))
        filtered_items.extend(matching)
        filtered_groups.append(
            NormalizedGroup(
                key=group.key,
                label=group.label,
                icon=group.icon,
                start_index=start_index,
                end_index=len(filtered_items) - 1,
                choices=tuple(matching),
            )
        )

    return filtered_items, filtered_groups


def visible_ids(view_items: Sequence[FlatItem]) -> frozenset[ItemId]:
    """Collect the identities of every choice present in a view."""
    return frozenset(item.item_id for item in view_items if item.kind == ItemKind.CHOICE)
