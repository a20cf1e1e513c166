"""Cursor movement over a flat view."""

from __future__ import annotations

from collections.abc import Sequence

from .types import FlatItem, ItemKind, NormalizedGroup


def is_selectable(item: FlatItem) -> bool:
    """Return True if the cursor may rest on ``item``.

    Group headers and enabled choices are stops; separators and disabled
    choices are skipped.
    """
    if item.kind == ItemKind.GROUP_HEADER:
        return True
    if item.kind == ItemKind.CHOICE:
        return not item.disabled
    return False


def find_next_selectable_index(items: Sequence[FlatItem], current: int, direction: int) -> int:
    """Scan from ``current + direction`` for the next stop, wrapping around.

    Returns ``current`` unchanged when no entry is selectable and -1 for an
    empty view.
    """
    length = len(items)
    if length == 0:
        return -1

    index = current + direction
    for _ in range(length):
        index %= length
        if is_selectable(items[index]):
            return index
        index += direction
    return current


def find_first_selectable_index(items: Sequence[FlatItem]) -> int:
    """Return the first stop scanning forward from the top, else 0."""
    found = find_next_selectable_index(items, -1, 1)
    return found if found >= 0 else 0


def get_current_group(cursor: int, groups: Sequence[NormalizedGroup]) -> NormalizedGroup | None:
    """Return the group whose bounds contain ``cursor``."""
    for group in groups:
        if group.contains(cursor):
            return group
    return None


def jump_group(cursor: int, groups: Sequence[NormalizedGroup], direction: int) -> int:
    """Move to the header of the next (+1) or previous (-1) group, cyclically.

    No-op with fewer than two groups or a cursor outside every group.
    """
    if len(groups) < 2:
        return cursor
    current = get_current_group(cursor, groups)
    if current is None:
        return cursor
    position = next(i for i, g in enumerate(groups) if g.key == current.key)
    return groups[(position + direction) % len(groups)].start_index
