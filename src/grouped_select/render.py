"""Rich markup rendering of a session.

Rendering only reads the session; it never changes selection state. The
only thing it tracks between frames is the scroll window (``Pager``).
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.markup import escape

from .keys import KeyMap
from .results import count_selected
from .selection import group_stats, overall_stats
from .session import SessionState, Status
from .themes import DEFAULT_THEME, Theme
from .types import FlatItem, ItemKind, NormalizedGroup


@dataclass
class Pager:
    """Scroll window that keeps the cursor visible."""

    page_size: int = 15
    offset: int = 0

    def window(self, cursor: int, total: int) -> tuple[int, int]:
        """Return the visible [start, end) range for ``cursor``."""
        if total == 0:
            return 0, 0
        if total <= self.page_size:
            self.offset = 0
            return 0, total

        cursor = max(0, min(cursor, total - 1))
        if cursor < self.offset:
            self.offset = cursor
        elif cursor >= self.offset + self.page_size:
            self.offset = cursor - self.page_size + 1
        self.offset = min(self.offset, total - self.page_size)
        return self.offset, self.offset + self.page_size


def _tag(style: str, text: str) -> str:
    return f"[{style}]{text}[/{style}]"


def _header_line(group: NormalizedGroup | None, label: str, icon: str | None, theme: Theme) -> str:
    title = escape(f"{icon} {label}" if icon else label)
    line = _tag(theme.header_style, title)
    if group is not None:
        selected, total = group_stats(group)
        line += " " + _tag(theme.muted_color, f"({selected}/{total})")
    return line


def _choice_line(item: FlatItem, theme: Theme) -> str:
    if item.checked:
        checkbox = _tag(theme.highlight_color, escape(theme.checked_icon))
    else:
        checkbox = escape(theme.unchecked_icon)

    name = escape(item.name)
    if item.disabled:
        reason = item.disabled_reason
        text = f"{name} ({escape(reason)})" if reason else name
        return f"{checkbox} {_tag(theme.disabled_color, text)}"
    if item.checked:
        return f"{checkbox} {_tag(theme.highlight_color, name)}"
    return f"{checkbox} {name}"


def render_rows(
    state: SessionState,
    pager: Pager,
    theme: Theme = DEFAULT_THEME,
) -> list[str]:
    """Render the visible window of the filtered view."""
    items = state.view_items
    groups_by_key = {group.key: group for group in state.view_groups}
    start, end = pager.window(state.cursor, len(items))

    lines: list[str] = []
    if start > 0:
        lines.append(_tag(theme.muted_color, f"  {theme.scroll_up_icon} {start} more"))

    for index in range(start, end):
        item = items[index]
        is_active = index == state.cursor
        cursor = _tag(theme.cursor_color, theme.cursor_icon) if is_active else " "

        if item.kind == ItemKind.GROUP_HEADER:
            if index > start:
                lines.append("")
            header = _header_line(groups_by_key.get(item.group_key), item.label, item.icon, theme)
            lines.append(f"{cursor} {header}")
        elif item.kind == ItemKind.CHOICE:
            lines.append(f"{cursor}   {_choice_line(item, theme)}")
            if is_active and item.description:
                lines.append(f"      {_tag(theme.description_color, escape(item.description))}")
        elif item.kind == ItemKind.SEPARATOR:
            lines.append(f"  {_tag(theme.muted_color, escape(item.line))}")

    remaining = len(items) - end
    if remaining > 0:
        lines.append(_tag(theme.muted_color, f"  {theme.scroll_down_icon} {remaining} more"))
    return lines


def help_text(keymap: KeyMap) -> str:
    parts = [
        "space: select",
        f"{keymap.label('global_toggle_all')}: toggle all",
        f"{keymap.label('global_invert')}: invert",
        f"{keymap.label('group_toggle_all')}: toggle group",
        f"{keymap.label('group_invert')}: invert group",
        "tab: next group",
    ]
    if keymap.searchable:
        parts.append("type to search")
    return "(" + ", ".join(parts) + ")"


def render_prompt(
    state: SessionState,
    message: str,
    keymap: KeyMap,
    pager: Pager,
    theme: Theme = DEFAULT_THEME,
    help_mode: str = "auto",
) -> str:
    """Render the full prompt as Rich markup."""
    if state.status == Status.DONE:
        total = count_selected(state.result or {})
        summary = f"{total} item{'s' if total != 1 else ''} selected"
        return (
            f"{_tag(theme.prefix_color, theme.done_icon)} {_tag('bold', escape(message))} "
            f"{_tag(theme.highlight_color, summary)}"
        )

    head = f"{_tag(theme.prefix_color, theme.prefix_icon)} {_tag('bold', escape(message))}"
    selected, total = overall_stats(state.items)
    head += " " + _tag(theme.muted_color, f"({selected}/{total})")
    if keymap.searchable and state.query:
        head += " " + _tag(theme.query_color, escape(f"[{state.query}]"))

    lines = [head]
    if not state.view_items:
        lines.append(_tag(theme.muted_color, "  No matches found"))
    else:
        lines.extend(render_rows(state, pager, theme))

    if help_mode == "always" or (help_mode == "auto" and state.status == Status.IDLE):
        lines.append(_tag(theme.muted_color, escape(help_text(keymap))))

    if state.status == Status.VALIDATING:
        lines.append(_tag(theme.muted_color, "Validating…"))

    if state.error:
        lines.append(_tag(theme.error_color, escape(state.error)))

    return "\n".join(lines)
