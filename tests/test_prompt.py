"""Tests for the interactive prompt loop with scripted keys."""

import asyncio
import sys
from io import StringIO

import readchar
from rich.console import Console

from grouped_select.config import DEFAULT_CONFIG
from grouped_select.prompt import GroupedCheckbox, PromptConfig, discard_pending_input
from grouped_select.session import Status
from grouped_select.themes import get_theme


def _scripted(keys):
    """read_key replacement: yields keys, then behaves like Ctrl+C."""
    return _scripted_from(list(keys))


def _scripted_from(remaining):
    """Like _scripted, but reads from a list the test can still change."""

    def _read():
        if not remaining:
            raise KeyboardInterrupt
        return remaining.pop(0)

    return _read


def _prompt(config, keys, user_config=None):
    output = StringIO()
    prompt = GroupedCheckbox(
        config,
        console=Console(file=output, width=100),
        user_config=user_config if user_config is not None else DEFAULT_CONFIG,
        read_key=_scripted(keys),
    )
    return prompt, output


class TestShow:
    def test_select_and_submit(self, food_groups):
        prompt, output = _prompt(
            PromptConfig(message="Food?", groups=food_groups),
            [readchar.key.DOWN, " ", "\t", "A", "\r"],
        )
        result = prompt.show()
        assert result == {"fruits": ["apple"], "vegetables": ["carrot", "broccoli"]}
        assert "3 items selected" in output.getvalue()

    def test_search_then_select(self, food_groups):
        prompt, _ = _prompt(
            PromptConfig(message="Food?", groups=food_groups, searchable=True),
            ["b", "r", readchar.key.DOWN, " ", readchar.key.ESC, "\r"],
        )
        assert prompt.show() == {"fruits": [], "vegetables": ["broccoli"]}

    def test_ctrl_bindings_in_search_mode(self, food_groups):
        prompt, _ = _prompt(
            PromptConfig(message="Food?", groups=food_groups, searchable=True),
            ["a", readchar.key.CTRL_A, readchar.key.ESC, "\r"],
        )
        # "a" hides broccoli, so toggle-all only reaches the other three.
        assert prompt.show() == {"fruits": ["apple", "banana"], "vegetables": ["carrot"]}

    def test_abort_returns_none(self, food_groups):
        prompt, _ = _prompt(PromptConfig(message="Food?", groups=food_groups), [" "])
        assert prompt.show() is None
        assert prompt.state.status == Status.IDLE

    def test_required_keeps_prompt_open(self, food_groups):
        prompt, _ = _prompt(
            PromptConfig(message="Food?", groups=food_groups, required=True),
            ["\r", readchar.key.DOWN, " ", "\r"],
        )
        assert prompt.show() == {"fruits": ["apple"], "vegetables": []}

    def test_required_error_is_rendered(self, food_groups):
        prompt, _ = _prompt(PromptConfig(message="Food?", groups=food_groups, required=True), [])
        prompt.handle_key("\r")
        assert prompt.state.status == Status.IDLE
        assert "At least one selection is required" in prompt.render().plain

    def test_async_validation(self, food_groups):
        calls = []

        async def validate(selections):
            await asyncio.sleep(0)
            calls.append(selections)
            return len(calls) > 1 or "try again"

        prompt, _ = _prompt(
            PromptConfig(message="Food?", groups=food_groups, validate=validate),
            ["\r", "\r"],
        )
        assert prompt.show() == {"fruits": [], "vegetables": []}
        assert len(calls) == 2

    def test_ctrl_c_during_validation_aborts(self, food_groups):
        async def validate(selections):
            raise KeyboardInterrupt

        prompt, _ = _prompt(
            PromptConfig(message="Food?", groups=food_groups, validate=validate),
            ["\r"],
        )
        assert prompt.show() is None

    def test_keys_typed_while_validating_are_dropped(self, food_groups):
        keys = ["\r", "\r"]
        calls = []

        async def validate(selections):
            calls.append(selections)
            return len(calls) > 1 or "try again"

        def discard():
            # The second Enter arrived during validation.
            keys.pop(0)

        prompt = GroupedCheckbox(
            PromptConfig(message="Food?", groups=food_groups, validate=validate),
            console=Console(file=StringIO()),
            user_config=DEFAULT_CONFIG,
            read_key=_scripted_from(keys),
            discard_input=discard,
        )
        assert prompt.show() is None
        assert len(calls) == 1
        assert prompt.state.error == "try again"

    def test_unmapped_keys_ignored(self, food_groups):
        prompt, _ = _prompt(PromptConfig(message="Food?", groups=food_groups), ["x", "\r"])
        assert prompt.show() == {"fruits": [], "vegetables": []}


class TestSettings:
    def test_theme_and_page_size_from_user_config(self, food_groups):
        user_config = dict(DEFAULT_CONFIG, theme="ascii", page_size=4)
        prompt, _ = _prompt(PromptConfig(message="Food?", groups=food_groups), [], user_config=user_config)
        assert prompt.theme is get_theme("ascii")
        assert prompt.pager.page_size == 4

    def test_explicit_settings_win(self, food_groups):
        user_config = dict(DEFAULT_CONFIG, theme="ascii", page_size=4)
        prompt, _ = _prompt(
            PromptConfig(message="Food?", groups=food_groups, theme="warm", page_size=9),
            [],
            user_config=user_config,
        )
        assert prompt.theme.name == "warm"
        assert prompt.pager.page_size == 9

    def test_key_overrides_from_user_config(self, food_groups):
        user_config = dict(DEFAULT_CONFIG, keys={"plain": {"global_toggle_all": "t"}})
        prompt, _ = _prompt(
            PromptConfig(message="Food?", groups=food_groups),
            ["t", "\r"],
            user_config=user_config,
        )
        assert prompt.show() == {"fruits": ["apple", "banana"], "vegetables": ["carrot", "broccoli"]}

    def test_loads_user_config_file_by_default(self, food_groups, isolated_config):
        isolated_config.mkdir(parents=True)
        (isolated_config / "config.yaml").write_text("theme: ascii\n")
        prompt = GroupedCheckbox(
            PromptConfig(message="Food?", groups=food_groups),
            console=Console(file=StringIO()),
            read_key=_scripted([]),
        )
        assert prompt.theme.name == "ascii"


def test_discard_pending_input_skips_non_tty(monkeypatch):
    monkeypatch.setattr(sys, "stdin", StringIO("queued keys"))
    discard_pending_input()
    assert sys.stdin.read() == "queued keys"
