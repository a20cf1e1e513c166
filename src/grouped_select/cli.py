"""Command-line interface for grouped-select.

Reads groups from a YAML or JSON file, runs the prompt and prints the
selections on stdout.

Choices file format:

    groups:
      - key: fruits
        label: Fruits
        icon: "🍎"
        choices:
          - apple
          - {value: banana, checked: true}
          - {value: cherry, disabled: "out of season"}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console

from . import __version__
from .config import load_config
from .normalize import GroupConfigError
from .prompt import GroupedCheckbox, PromptConfig
from .themes import theme_names

logger = logging.getLogger(__name__)

EXIT_ABORTED = 130


def load_groups(path: Path) -> list[Any]:
    """Read the groups list from a choices file.

    Raises:
        GroupConfigError: If the file cannot be read or has no groups list.
    """
    try:
        content = path.read_text()
    except OSError as e:
        raise GroupConfigError(f"Cannot read {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise GroupConfigError(f"Cannot parse {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("groups")
    if not isinstance(data, list):
        raise GroupConfigError(f"{path}: expected a list of groups")
    return data


def format_selections(selections: dict[str, list[Any]], output: str) -> str:
    if output == "yaml":
        return yaml.safe_dump(selections, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return json.dumps(selections, indent=2, ensure_ascii=False, default=str)


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grouped-select",
        description="Pick values from grouped lists in the terminal.",
    )
    parser.add_argument("choices_file", type=Path, help="YAML or JSON file with the groups")
    parser.add_argument("-m", "--message", default="Select items", help="Prompt message")
    parser.add_argument("-s", "--search", action="store_true", help="Enable type-to-search")
    parser.add_argument("-r", "--required", action="store_true", help="Require at least one selection")
    parser.add_argument("--page-size", type=positive_int, default=None, help="Rows shown at once")
    parser.add_argument("--theme", choices=theme_names(), default=None, help="Color theme")
    parser.add_argument("-o", "--output", choices=("json", "yaml"), default="json", help="Output format")
    parser.add_argument("--debug", action="store_true", help="Log debug output to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        groups = load_groups(args.choices_file)
        prompt = GroupedCheckbox(
            PromptConfig(
                message=args.message,
                groups=groups,
                searchable=args.search,
                page_size=args.page_size,
                required=args.required,
                theme=args.theme,
            ),
            console=Console(stderr=True, highlight=False),
            user_config=load_config(),
        )
    except GroupConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    selections = prompt.show()
    if selections is None:
        return EXIT_ABORTED

    print(format_selections(selections, args.output).rstrip("\n"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
