"""YAML user configuration for grouped-select.

Location: $XDG_CONFIG_HOME/grouped-select/config.yaml
(~/.config/grouped-select/config.yaml by default). Values found there are
deep-merged over DEFAULT_CONFIG; a missing or broken file means defaults.
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .keys import BINDABLE_ACTIONS, DEFAULT_PLAIN_BINDINGS, DEFAULT_SEARCH_BINDINGS, parse_key_name

logger = logging.getLogger(__name__)

HELP_MODES = ("always", "never", "auto")

DEFAULT_CONFIG: dict[str, Any] = {
    "page_size": 15,
    "help_mode": "auto",
    "theme": "default",
    "keys": {
        "plain": dict(DEFAULT_PLAIN_BINDINGS),
        "searchable": dict(DEFAULT_SEARCH_BINDINGS),
    },
}


def get_config_dir() -> Path:
    """Get the grouped-select config directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(xdg_config) / "grouped-select"


def get_config_path() -> Path:
    """Get the path to config.yaml."""
    return get_config_dir() / "config.yaml"


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _is_key_name(name: Any) -> bool:
    if not isinstance(name, str):
        return False
    try:
        parse_key_name(name)
    except ValueError:
        return False
    return True


def _sanitize(cfg: dict[str, Any]) -> dict[str, Any]:
    """Replace invalid values with defaults, logging each one."""
    page_size = cfg.get("page_size")
    if not isinstance(page_size, int) or isinstance(page_size, bool) or page_size < 1:
        logger.warning("Ignoring invalid page_size %r", page_size)
        cfg["page_size"] = DEFAULT_CONFIG["page_size"]

    if cfg.get("help_mode") not in HELP_MODES:
        logger.warning("Ignoring invalid help_mode %r", cfg.get("help_mode"))
        cfg["help_mode"] = DEFAULT_CONFIG["help_mode"]

    if not isinstance(cfg.get("theme"), str):
        cfg["theme"] = DEFAULT_CONFIG["theme"]

    keys = cfg.get("keys")
    if not isinstance(keys, dict):
        keys = copy.deepcopy(DEFAULT_CONFIG["keys"])
    for mode in ("plain", "searchable"):
        section = keys.get(mode)
        if not isinstance(section, dict):
            keys[mode] = dict(DEFAULT_CONFIG["keys"][mode])
            continue
        for action, name in list(section.items()):
            if action not in BINDABLE_ACTIONS:
                logger.warning("Unknown key action %r in %s bindings", action, mode)
                del section[action]
                continue
            if not _is_key_name(name):
                logger.warning("Invalid key %r for %s; using default", name, action)
                section[action] = DEFAULT_CONFIG["keys"][mode][action]
    cfg["keys"] = keys
    return cfg


def _read_config_file(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Could not read %s: %s", config_path, e)
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: top level is not a mapping", config_path)
        return {}
    return data


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load the user config, falling back to defaults.

    GROUPED_SELECT_THEME, when set, overrides the configured theme name.
    """
    data = _read_config_file(path or get_config_path())
    cfg = _sanitize(_deep_merge(copy.deepcopy(DEFAULT_CONFIG), data))
    env_theme = os.environ.get("GROUPED_SELECT_THEME")
    if env_theme:
        cfg["theme"] = env_theme
    return cfg


def save_config(cfg: dict[str, Any], path: Path | None = None) -> None:
    """Write the user config as YAML."""
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.dump(cfg, f, default_flow_style=False, sort_keys=False)
