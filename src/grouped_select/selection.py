"""Toggle and invert operations on the canonical view.

Every operation returns a new list and only touches choices that are enabled
and present in the ``visible`` identity set, so an active filter scopes the
change to what the operator can see.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Sequence
from dataclasses import replace

from .types import FlatItem, ItemId, ItemKind, NormalizedChoice, NormalizedGroup


def _eligible(item: FlatItem, visible: Collection[ItemId], group_key: str | None = None) -> bool:
    if item.kind != ItemKind.CHOICE or item.disabled:
        return False
    if group_key is not None and item.group_key != group_key:
        return False
    return item.item_id in visible


def _apply(
    items: Sequence[FlatItem],
    visible: Collection[ItemId],
    group_key: str | None,
    update: Callable[[NormalizedChoice], bool],
) -> list[FlatItem]:
    result: list[FlatItem] = []
    for item in items:
        if _eligible(item, visible, group_key):
            checked = update(item)
            if checked != item.checked:
                item = replace(item, checked=checked)
        result.append(item)
    return result


def _uniform_toggle(
    items: Sequence[FlatItem], visible: Collection[ItemId], group_key: str | None
) -> list[FlatItem]:
    scope = [item for item in items if _eligible(item, visible, group_key)]
    if not scope:
        return list(items)
    target = not all(item.checked for item in scope)
    return _apply(items, visible, group_key, lambda _: target)


def toggle_item(items: Sequence[FlatItem], target: FlatItem, visible: Collection[ItemId]) -> list[FlatItem]:
    """Flip the canonical copy of ``target``.

    No-op unless ``target`` is an enabled choice in ``visible``.
    """
    if not _eligible(target, visible):
        return list(items)
    return _apply(items, {target.item_id}, target.group_key, lambda c: not c.checked)


def toggle_group(items: Sequence[FlatItem], group_key: str, visible: Collection[ItemId]) -> list[FlatItem]:
    """Check every visible enabled member of a group, or uncheck them if all are checked."""
    return _uniform_toggle(items, visible, group_key)


def invert_group(items: Sequence[FlatItem], group_key: str, visible: Collection[ItemId]) -> list[FlatItem]:
    """Flip each visible enabled member of a group independently."""
    return _apply(items, visible, group_key, lambda c: not c.checked)


def toggle_all(items: Sequence[FlatItem], visible: Collection[ItemId]) -> list[FlatItem]:
    """Uniform-target toggle across every visible group."""
    return _uniform_toggle(items, visible, None)


def invert_all(items: Sequence[FlatItem], visible: Collection[ItemId]) -> list[FlatItem]:
    """Flip every visible enabled choice independently."""
    return _apply(items, visible, None, lambda c: not c.checked)


def group_stats(group: NormalizedGroup) -> tuple[int, int]:
    """Count (selected, total) enabled members of a group in its view."""
    enabled = [c for c in group.choices if not c.disabled]
    return sum(1 for c in enabled if c.checked), len(enabled)


def overall_stats(items: Sequence[FlatItem]) -> tuple[int, int]:
    """Count (selected, total) enabled choices in a view."""
    enabled = [item for item in items if item.kind == ItemKind.CHOICE and not item.disabled]
    return sum(1 for c in enabled if c.checked), len(enabled)
