"""Interactive grouped checkbox prompt using Rich.Live.

Example:
    from grouped_select import Choice, Group, grouped_checkbox

    picked = grouped_checkbox(
        "Pick some food",
        groups=[
            Group("fruits", "Fruits", choices=[Choice("apple"), Choice("banana")]),
            Group("vegetables", "Vegetables", choices=[Choice("carrot")]),
        ],
        searchable=True,
    )
    # {"fruits": ["apple"], "vegetables": []}
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable

import readchar
from rich.console import Console
from rich.live import Live
from rich.text import Text

from .config import load_config
from .keys import KeyMap
from .render import Pager, render_prompt
from .session import SessionOptions, SessionState, Status, Validator, apply, resolve_pending, start_session
from .themes import Theme, get_theme
from .types import Group, GroupedSelections

logger = logging.getLogger(__name__)


def discard_pending_input() -> None:
    """Drop keys typed while the prompt was not reading (e.g. during validation)."""
    if not sys.stdin.isatty():
        return
    if sys.platform == "win32":
        import msvcrt

        while msvcrt.kbhit():
            msvcrt.getwch()
        return

    import termios

    termios.tcflush(sys.stdin, termios.TCIFLUSH)


@dataclass
class PromptConfig:
    """Caller-facing prompt settings.

    Attributes:
        message: Question shown on the first line.
        groups: Group instances or mappings with the same keys.
        searchable: Printable keys edit a live search query.
        page_size: Rows shown at once (None = user config value).
        required: Refuse to submit with nothing selected.
        validate: Called with the selections on submit; returns True, an
            error string/False, or an awaitable of either.
        theme: Theme instance or theme name (None = user config value).
    """

    message: str
    groups: Sequence[Group | Mapping[str, Any]]
    searchable: bool = False
    page_size: int | None = None
    required: bool = False
    validate: Validator | None = None
    theme: Theme | str | None = None


class GroupedCheckbox:
    """Blocking grouped multi-select prompt.

    Keyboard controls (search disabled / enabled):
        - Up/Down (and j/k without search): Navigate
        - Space: Toggle choice, or the whole group on its header
        - Tab / Shift+Tab: Jump to next / previous group
        - a, i / Ctrl+A, Ctrl+R: Toggle all / invert all visible
        - A, I / Ctrl+G, Ctrl+T: Toggle / invert the current group
        - Typing, Backspace, Esc: Edit or clear the search query
        - Enter: Submit
        - Ctrl+C: Abort (show() returns None)
    """

    def __init__(
        self,
        config: PromptConfig,
        console: Console | None = None,
        user_config: dict[str, Any] | None = None,
        read_key: Callable[[], str] | None = None,
        discard_input: Callable[[], None] | None = None,
    ):
        settings = user_config if user_config is not None else load_config()

        self.config = config
        self.console = console or Console(highlight=False)
        self.keymap = KeyMap.from_config(config.searchable, settings.get("keys"))
        if isinstance(config.theme, Theme):
            self.theme = config.theme
        else:
            self.theme = get_theme(config.theme or settings.get("theme"))
        self.pager = Pager(page_size=config.page_size or settings.get("page_size", 15))
        self.help_mode = settings.get("help_mode", "auto")
        self._read_key = read_key or readchar.readkey
        self._discard_input = discard_input or discard_pending_input

        self.state: SessionState = start_session(
            config.groups,
            SessionOptions(
                searchable=config.searchable,
                required=config.required,
                validate=config.validate,
            ),
        )

    def render(self) -> Text:
        """Render the current state as Rich Text."""
        markup = render_prompt(
            self.state,
            self.config.message,
            self.keymap,
            self.pager,
            theme=self.theme,
            help_mode=self.help_mode,
        )
        return Text.from_markup(markup)

    def handle_key(self, key: str) -> None:
        """Apply one raw key to the session."""
        event = self.keymap.event_for(key)
        if event is None:
            return
        self.state = apply(self.state, event)

    def _await_validation(self, live: Live) -> None:
        live.update(self.render(), refresh=True)
        self.state = asyncio.run(resolve_pending(self.state))
        # Input is ignored while validating.
        self._discard_input()

    def show(self) -> GroupedSelections | None:
        """Display the prompt and block until submitted or aborted.

        Returns:
            Mapping of every group key to its selected values, or None if
            the operator pressed Ctrl+C.
        """
        with Live(self.render(), console=self.console, auto_refresh=False) as live:
            while self.state.status != Status.DONE:
                try:
                    key = self._read_key()
                    self.handle_key(key)
                    if self.state.status == Status.VALIDATING:
                        self._await_validation(live)
                except (KeyboardInterrupt, EOFError):
                    logger.debug("Prompt aborted")
                    return None

                live.update(self.render(), refresh=True)

        return self.state.result


def grouped_checkbox(
    message: str,
    groups: Sequence[Group | Mapping[str, Any]],
    *,
    searchable: bool = False,
    page_size: int | None = None,
    required: bool = False,
    validate: Validator | None = None,
    theme: Theme | str | None = None,
    console: Console | None = None,
) -> GroupedSelections | None:
    """Show a grouped checkbox prompt and return the selections."""
    config = PromptConfig(
        message=message,
        groups=groups,
        searchable=searchable,
        page_size=page_size,
        required=required,
        validate=validate,
        theme=theme,
    )
    return GroupedCheckbox(config, console=console).show()
