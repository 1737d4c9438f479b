# src/mailcheck/core/managers/config_manager.py
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from mailcheck.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

_TRUE_STRINGS = ("1", "true", "yes", "on")


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Returns a copy of `base` with `override` merged in, section by section."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_settings(path: Path) -> Dict[str, Any]:
    """Reads one settings file. Missing or broken files count as empty."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load %s: %s", path, e, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.error("Ignoring %s: top level must be an object", path)
        return {}
    return data


def _coerce(value: Any, like: Any) -> Any:
    """Casts `value` to the type of `like` (the value it replaces)."""
    if like is None or isinstance(value, type(like)):
        return value
    if isinstance(like, bool) and isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return type(like)(value)


class ConfigManager:
    """
    Singleton holding the mailcheck settings.

    Two layers: the packaged settings.json with every default, and an optional
    ~/.mailcheck/settings.json whose sections override the defaults key by key.
    Changes made with set_nested() live in memory until reset().
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._config = {}
            cls._instance.reset()
        return cls._instance

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Dotted lookup, e.g. 'link_checker.timeout'.
        Missing keys and explicit nulls both yield `default`.
        """
        value: Any = self._config
        for key in key_path.split('.'):
            if not isinstance(value, dict):
                return default
            value = value.get(key)
        return default if value is None else value

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        In-memory update, e.g. ('spelling.strategy', 'heuristic').
        Strings from the command line are cast to the type of the value they replace.
        """
        *parents, leaf = key_path.split('.')
        section = self._config
        for key in parents:
            section = section.setdefault(key, {})
            if not isinstance(section, dict):
                logger.error("Cannot set '%s': '%s' is not a section.", key_path, key)
                return False

        try:
            value = _coerce(value, section.get(leaf))
        except (ValueError, TypeError):
            logger.warning("Could not cast value for '%s', storing it as given.", key_path)

        section[leaf] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def reset(self) -> None:
        """Reloads both settings layers from disk, dropping in-memory changes."""
        defaults_file = PathUtils.get_settings_file()
        if not defaults_file.exists():
            logger.warning("settings.json not found at %s. Using empty config.", defaults_file)

        config = _read_settings(defaults_file)
        user_file = PathUtils.get_user_settings_file()
        overrides = _read_settings(user_file)
        if overrides:
            logger.debug("Applying user settings from %s", user_file)
            config = deep_merge(config, overrides)

        self._config = config
        logger.debug("Configuration (re)loaded.")


# The global singleton instance that the entire application will use.
config_manager = ConfigManager()
