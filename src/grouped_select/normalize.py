"""Normalization of raw grouped input into a canonical flat view."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .types import Choice, FlatItem, Group, GroupHeader, NormalizedChoice, NormalizedGroup

logger = logging.getLogger(__name__)


class GroupConfigError(ValueError):
    """Raised when the grouped input cannot be normalized."""


def _coerce_choice(raw: Any) -> Choice:
    if isinstance(raw, Choice):
        return raw
    if isinstance(raw, Mapping):
        if "value" not in raw:
            raise GroupConfigError(f"Choice is missing 'value': {dict(raw)!r}")
        return Choice(
            value=raw["value"],
            name=raw.get("name"),
            description=raw.get("description"),
            short=raw.get("short"),
            disabled=raw.get("disabled", False) or False,
            checked=bool(raw.get("checked", False)),
        )
    return Choice(value=raw)


def _coerce_group(raw: Any) -> Group:
    if isinstance(raw, Group):
        return raw
    if isinstance(raw, Mapping):
        if "key" not in raw:
            raise GroupConfigError(f"Group is missing 'key': {dict(raw)!r}")
        key = str(raw["key"])
        return Group(
            key=key,
            label=str(raw.get("label", key)),
            icon=raw.get("icon"),
            choices=[_coerce_choice(c) for c in raw.get("choices") or []],
        )
    raise GroupConfigError(f"Unsupported group entry: {raw!r}")


def normalize_groups(
    groups: Iterable[Group | Mapping[str, Any]],
) -> tuple[list[FlatItem], list[NormalizedGroup]]:
    """Build the canonical flat view and its group table.

    For each group, in order: one GroupHeader followed by one
    NormalizedChoice per input choice.

    Args:
        groups: Group instances or mappings with the same keys.

    Returns:
        Tuple of (flat_items, normalized_groups).

    Raises:
        GroupConfigError: On duplicate group keys, unhashable choice values
            or entries that cannot be read as a group/choice.
    """
    flat_items: list[FlatItem] = []
    normalized: list[NormalizedGroup] = []
    seen_keys: set[str] = set()

    for group_index, raw_group in enumerate(groups):
        group = _coerce_group(raw_group)
        if group.key in seen_keys:
            raise GroupConfigError(f"Duplicate group key: {group.key!r}")
        seen_keys.add(group.key)

        start_index = len(flat_items)
        flat_items.append(GroupHeader(group_key=group.key, label=group.label, icon=group.icon))

        members: list[NormalizedChoice] = []
        seen_values: set[Any] = set()
        for index_in_group, raw_choice in enumerate(group.choices):
            choice = _coerce_choice(raw_choice)
            try:
                hash(choice.value)
            except TypeError as e:
                raise GroupConfigError(
                    f"Choice value in group {group.key!r} is not hashable: {choice.value!r}"
                ) from e
            if choice.value in seen_values:
                logger.warning(
                    "Group %r has duplicate value %r; both entries toggle together",
                    group.key,
                    choice.value,
                )
            seen_values.add(choice.value)

            name = choice.name if choice.name is not None else str(choice.value)
            member = NormalizedChoice(
                value=choice.value,
                name=name,
                short=choice.short if choice.short is not None else name,
                description=choice.description,
                disabled=choice.disabled if choice.disabled else False,
                checked=bool(choice.checked),
                group_key=group.key,
                group_index=group_index,
                index_in_group=index_in_group,
            )
            members.append(member)
            flat_items.append(member)

        normalized.append(
            NormalizedGroup(
                key=group.key,
                label=group.label,
                icon=group.icon,
                start_index=start_index,
                end_index=len(flat_items) - 1,
                choices=tuple(members),
            )
        )

    logger.debug("Normalized %d group(s) into %d flat item(s)", len(normalized), len(flat_items))
    return flat_items, normalized
