import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from textguard.core.config import Config
from textguard.core.errors import ConfigError
from textguard.core import charsets
from textguard.core.ruleset import RuleSet


def clean_env():
    """Returns a patcher for os.environ without any TEXTGUARD_* variables."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("TEXTGUARD_")}
    return patch.dict(os.environ, env, clear=True)


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        self.user_config = Path(self.tmp_dir.name) / "user" / "config.toml"
        patcher = patch("textguard.core.config.USER_CONFIG_PATH", self.user_config)
        patcher.start()
        self.addCleanup(patcher.stop)
        env_patcher = clean_env()
        env_patcher.start()
        self.addCleanup(env_patcher.stop)

    def write_config(self, content):
        path = Path(self.tmp_dir.name) / "textguard.toml"
        path.write_text(content, encoding="utf-8")
        return path

    def test_defaults(self):
        config = Config(config_path=self.write_config(""))
        self.assertEqual(config.get("preset"), "")
        self.assertEqual(config.get("rules"), {})
        self.assertEqual(config.get("missing.key", "fallback"), "fallback")
        self.assertEqual(config.ruleset(), RuleSet())

    def test_file_config(self):
        path = self.write_config(
            'preset = "password_good"\n'
            '\n'
            '[characters]\n'
            'special = "x"\n'
            '\n'
            '[rules]\n'
            'min_length = 12\n'
            'illegal_words = ["password", "qwerty"]\n'
        )
        config = Config(config_path=path)
        rules = config.ruleset()
        self.assertEqual(rules.min_length, 12)
        self.assertEqual(rules.required_numbers, 1)
        self.assertFalse(rules.allow_spaces)
        self.assertEqual(rules.illegal_words, ("password", "qwerty"))
        self.assertEqual(rules.character_classes.special, frozenset("x"))
        self.assertEqual(rules.character_classes.ambiguous, frozenset(charsets.AMBIGUOUS_CHARACTERS))

    def test_preset_argument_overrides_config(self):
        config = Config(config_path=self.write_config('preset = "password_good"\n'))
        self.assertEqual(config.ruleset("email").required_numbers, 0)
        self.assertIsNotNone(config.ruleset("email").required_pattern)

    def test_env_config(self):
        with patch.dict(os.environ, {
            "TEXTGUARD_PRESET": "email",
            "TEXTGUARD_ALLOW_SPACES": "false",
            "TEXTGUARD_MIN_LENGTH": "4",
            "TEXTGUARD_ILLEGAL_WORDS": "foo, bar,",
            "TEXTGUARD_SIMILAR_CHARACTERS": "01",
        }):
            config = Config(config_path=self.write_config('[rules]\nallow_spaces = true\n'))

        self.assertEqual(config.get("preset"), "email")
        self.assertIs(config.get("rules.allow_spaces"), False)
        self.assertEqual(config.get("rules.min_length"), 4)
        self.assertEqual(config.get("rules.illegal_words"), ["foo", "bar"])
        self.assertEqual(config.character_classes().similar, frozenset("01"))

    def test_invalid_env_integer_is_ignored(self):
        with patch.dict(os.environ, {"TEXTGUARD_MIN_LENGTH": "ten"}):
            with self.assertLogs("textguard.core.config", level="WARNING"):
                config = Config(config_path=self.write_config(""))
        self.assertIsNone(config.get("rules.min_length"))

    def test_unreadable_file_is_skipped(self):
        path = self.write_config("this is = = not toml")
        with self.assertLogs("textguard.core.config", level="WARNING"):
            config = Config(config_path=path)
        self.assertEqual(config.get("preset"), "")

    def test_invalid_rules(self):
        config = Config(config_path=self.write_config('preset = "phone"\n'))
        with self.assertRaises(ConfigError):
            config.ruleset()

        config = Config(config_path=self.write_config('[rules]\nallow_tabs = false\n'))
        with self.assertRaises(ConfigError):
            config.ruleset()

        config = Config(config_path=self.write_config('[characters]\nemoji = "x"\n'))
        with self.assertRaises(ConfigError):
            config.character_classes()

    def test_save_and_reset_user_config(self):
        config = Config(config_path=self.write_config(""))
        config.set("rules.allow_spaces", False)
        config.save_user_config()

        with open(self.user_config, "rb") as f:
            saved = tomllib.load(f)
        self.assertEqual(saved, {"rules": {"allow_spaces": False}})

        reloaded = Config()
        self.assertFalse(reloaded.ruleset().allow_spaces)

        self.assertTrue(Config.reset_user_config())
        self.assertFalse(self.user_config.exists())
        self.assertFalse(Config.reset_user_config())

    def test_character_class_types(self):
        config = Config(config_path=self.write_config('[characters]\nspecial = 5\n'))
        with self.assertRaises(ConfigError):
            config.character_classes()
        with self.assertRaises(ConfigError):
            config.ruleset()

        config = Config(config_path=self.write_config('characters = "abc"\n'))
        with self.assertRaises(ConfigError):
            config.character_classes()

        config = Config(config_path=self.write_config('[characters]\nspecial = ["a", "b"]\nsimilar = "10"\n'))
        classes = config.character_classes()
        self.assertEqual(classes.special, frozenset("ab"))
        self.assertEqual(classes.similar, frozenset("10"))

    def test_parse_value(self):
        self.assertEqual(Config.parse_value("characters.similar", "10"), "10")
        self.assertEqual(Config.parse_value("rules.invalid_characters", "0123"), "0123")
        self.assertEqual(Config.parse_value("rules.min_length", "7"), 7)
        self.assertIs(Config.parse_value("rules.allow_spaces", "Off"), False)
        self.assertIs(Config.parse_value("colors", "yes"), True)
        self.assertEqual(Config.parse_value("rules.illegal_words", "a, b"), ["a", "b"])
        with self.assertRaises(ValueError):
            Config.parse_value("rules.min_length", "seven")
        with self.assertRaises(ValueError):
            Config.parse_value("rules.allow_spaces", "maybe")


if __name__ == '__main__':
    unittest.main()
