"""Manages configuration for textguard.

This module is responsible for loading, managing, and saving the application's
configuration settings. It aggregates settings from default values, TOML files,
and environment variables, and turns them into the `RuleSet` and
`CharacterClasses` used by the validator.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

import tomli_w

from .charsets import SHARED, CharacterClasses
from .errors import ConfigError
from .ruleset import BOOL_FIELDS, COUNT_FIELDS, RuleSet
from ..validators.presets import get_preset

logger = logging.getLogger(__name__)

# The default path for the user-specific global configuration file.
USER_CONFIG_PATH = Path.home() / ".config" / "textguard" / "config.toml"

# The project-level configuration file looked up in the working directory.
PROJECT_CONFIG_NAME = "textguard.toml"


class Config:
    """Handles the configuration for the textguard application.

    This class loads configuration from multiple sources with a defined
    precedence:
    1.  Default values (lowest precedence).
    2.  Project-specific `textguard.toml` file.
    3.  User-level `~/.config/textguard/config.toml` file.
    4.  A custom configuration file specified at runtime.
    5.  Environment variables (highest precedence).

    Attributes:
        DEFAULT_CONFIG (Dict[str, Any]): A dictionary containing the default
            configuration values.
    """

    DEFAULT_CONFIG = {
        "preset": "",  # Name of a preset in textguard.validators.PRESETS.
        "colors": True,
        "verbose": False,
        "characters": {},  # Optional "special", "ambiguous", "similar" overrides.
        "rules": {},  # RuleSet fields layered on top of the preset.
    }

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initializes the configuration manager.

        Args:
            config_path (Optional[Path]): An optional path to a specific
                configuration file to load. If provided, it takes precedence
                over default file locations.
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self._load_config(config_path)

    def _load_config(self, config_path: Optional[Path] = None) -> None:
        if config_path:
            self._load_file_config(Path(config_path))
        else:
            self._load_default_configs()

        self._load_env_config()

    def _load_default_configs(self) -> None:
        """Loads configs from standard locations if they exist."""
        project_config = Path.cwd() / PROJECT_CONFIG_NAME
        if project_config.exists():
            self._load_file_config(project_config)

        if USER_CONFIG_PATH.exists():
            self._load_file_config(USER_CONFIG_PATH)

    def _merge_configs(self, base: Dict[str, Any], new: Dict[str, Any]) -> None:
        """Recursively merges a new config dict into a base dict."""
        for key, value in new.items():
            if isinstance(value, dict) and key in base and isinstance(base[key], dict):
                self._merge_configs(base[key], value)
            else:
                base[key] = value

    def _load_file_config(self, config_path: Path) -> None:
        """Loads and merges configuration from a TOML file.

        A file that cannot be read or parsed is skipped with a warning.

        Args:
            config_path (Path): The path to the TOML configuration file.
        """
        try:
            with open(config_path, "rb") as f:
                file_config = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Could not load config from {config_path}: {e}")
            return
        self._merge_configs(self.config, file_config)
        logger.debug(f"Loaded config from {config_path}")

    def _load_env_config(self) -> None:
        """Loads and merges configuration from environment variables."""
        env_mapping = {
            "TEXTGUARD_PRESET": "preset",
            "TEXTGUARD_COLORS": "colors",
            "TEXTGUARD_VERBOSE": "verbose",
            "TEXTGUARD_SPECIAL_CHARACTERS": "characters.special",
            "TEXTGUARD_AMBIGUOUS_CHARACTERS": "characters.ambiguous",
            "TEXTGUARD_SIMILAR_CHARACTERS": "characters.similar",
            "TEXTGUARD_MIN_LENGTH": "rules.min_length",
            "TEXTGUARD_ALLOW_EMPTY": "rules.allow_empty",
            "TEXTGUARD_ALLOW_SPACES": "rules.allow_spaces",
            "TEXTGUARD_ILLEGAL_WORDS": "rules.illegal_words",
            "TEXTGUARD_REQUIRED_PATTERN": "rules.required_pattern",
        }

        for env_var, config_key in env_mapping.items():
            value = os.getenv(env_var)
            if value is not None:
                self._set_nested_key(config_key, value)

    def _set_nested_key(self, key_path: str, value: str) -> None:
        """Sets a value in the config dict using a dot-separated path.

        Values from environment variables are always strings, so they are
        cast according to the key they target.

        Args:
            key_path (str): The dot-separated key (e.g., "rules.min_length").
            value (str): The string value from the environment variable.
        """
        keys = key_path.split('.')
        target_config = self.config
        for key in keys[:-1]:
            if key not in target_config or not isinstance(target_config[key], dict):
                target_config[key] = {}
            target_config = target_config[key]

        leaf_key = keys[-1]
        try:
            target_config[leaf_key] = self.parse_value(key_path, value)
        except ValueError as e:
            logger.warning(f"Ignoring {key_path}: {e}")

    @staticmethod
    def parse_value(key_path: str, value: str) -> Any:
        """Casts a string (from the environment or the CLI) for the key it targets.

        Boolean and integer keys are converted, `illegal_words` is split on
        commas, and everything else, including character sets made only of
        digits, stays a string.

        Args:
            key_path (str): The dot-separated key (e.g., "rules.min_length").
            value (str): The raw string value.

        Returns:
            Any: The typed value.

        Raises:
            ValueError: If a boolean or integer key gets an unparsable value.
        """
        leaf_key = key_path.split('.')[-1]

        # Type casting based on the key
        if leaf_key in ("colors", "verbose") + BOOL_FIELDS:
            lowered = value.strip().lower()
            if lowered in ("true", "1", "yes", "on"):
                return True
            if lowered in ("false", "0", "no", "off"):
                return False
            raise ValueError(f"invalid boolean value {value!r}")
        if leaf_key in ("min_length",) + COUNT_FIELDS:
            try:
                return int(value)
            except ValueError:
                raise ValueError(f"invalid integer value {value!r}") from None
        if leaf_key == "illegal_words":
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieves a configuration value using a dot-separated key.

        Args:
            key (str): The dot-separated key (e.g., "rules.allow_spaces").
            default (Any): The default value to return if the key is not found.

        Returns:
            Any: The configuration value or the default.
        """
        keys = key.split('.')
        value = self.config
        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Sets a configuration value in memory.

        Args:
            key (str): The dot-separated key (e.g., "rules.allow_spaces").
            value (Any): The value to set.
        """
        keys = key.split('.')
        target_config = self.config
        for k in keys[:-1]:
            target_config = target_config.setdefault(k, {})
        target_config[keys[-1]] = value

    def character_classes(self) -> CharacterClasses:
        """Returns the configured character classes.

        Returns:
            CharacterClasses: The shared instance when nothing is overridden,
            otherwise an instance pinning the configured sets.
        """
        characters = self.get("characters", {}) or {}
        if not isinstance(characters, dict):
            raise ConfigError(f"'characters' must be a table, got {characters!r}")
        unknown = set(characters) - {"special", "ambiguous", "similar"}
        if unknown:
            raise ConfigError(f"Unknown character class(es): {', '.join(sorted(unknown))}")
        if not characters:
            return SHARED
        for name, chars in characters.items():
            if isinstance(chars, str):
                continue
            if not isinstance(chars, list) or not all(isinstance(c, str) for c in chars):
                raise ConfigError(f"Character class '{name}' expects a string or a list of strings, got {chars!r}")
        return CharacterClasses(
            special=characters.get("special"),
            ambiguous=characters.get("ambiguous"),
            similar=characters.get("similar"),
        )

    def ruleset(self, preset: Optional[str] = None) -> RuleSet:
        """Builds the RuleSet described by this configuration.

        Args:
            preset (Optional[str]): Overrides the configured preset name.

        Returns:
            RuleSet: The preset (or permissive defaults) with the `rules`
            table applied on top.

        Raises:
            ConfigError: If the preset or a rule is invalid.
        """
        preset_name = preset if preset is not None else self.get("preset")
        base = RuleSet()
        if preset_name:
            try:
                base = get_preset(preset_name)
            except KeyError as e:
                raise ConfigError(e.args[0]) from e

        return RuleSet.from_mapping(self.get("rules", {}) or {}, base=base,
                                    character_classes=self.character_classes())

    def _get_user_config(self) -> Dict[str, Any]:
        """Loads and returns the contents of the user config file.

        Returns:
            Dict[str, Any]: The user configuration dictionary, or an empty
            dict if the file doesn't exist or fails to parse.
        """
        if not USER_CONFIG_PATH.exists():
            return {}
        try:
            with open(USER_CONFIG_PATH, "rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Ignoring unreadable user config {USER_CONFIG_PATH}: {e}")
            return {}

    def save_user_config(self) -> None:
        """Saves the current configuration to the user config file.

        Only settings that differ from the defaults are persisted.

        Raises:
            IOError: If the configuration file cannot be written.
        """
        user_config = self._get_user_config()

        for key, value in self.config.items():
            if key not in self.DEFAULT_CONFIG or value != self.DEFAULT_CONFIG[key]:
                user_config[key] = value

        try:
            USER_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
            with open(USER_CONFIG_PATH, "wb") as f:
                tomli_w.dump(user_config, f)
        except (OSError, TypeError) as e:
            raise IOError(f"Failed to save configuration to {USER_CONFIG_PATH}: {e}") from e

    @staticmethod
    def reset_user_config() -> bool:
        """Deletes the user config file.

        Returns:
            bool: True if a file was removed, False if there was none.
        """
        if not USER_CONFIG_PATH.exists():
            return False
        USER_CONFIG_PATH.unlink()
        return True

    def __str__(self) -> str:
        return f"Config({self.config})"
