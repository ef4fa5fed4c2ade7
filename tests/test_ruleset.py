import dataclasses
import re
import unittest

from textguard.core.charsets import SHARED, CharacterClasses
from textguard.core.errors import ConfigError, Error
from textguard.core.ruleset import RuleSet, RuleSetBuilder
from textguard.core.validator import scan


class TestRuleSetBuilder(unittest.TestCase):

    def test_defaults(self):
        rules = RuleSet.builder().build()
        self.assertEqual(rules, RuleSet())
        self.assertEqual(rules.min_length, -1)
        self.assertTrue(rules.allow_empty)
        self.assertTrue(rules.allow_repeated_characters)
        self.assertTrue(rules.ignore_words_case)
        self.assertIsNone(rules.required_pattern)
        self.assertIs(rules.character_classes, SHARED)

    def test_setters_chain(self):
        builder = RuleSetBuilder()
        self.assertIs(builder.allow_spaces(False), builder)
        self.assertIs(builder.required_numbers(2).with_min_length(4), builder)

    def test_build_returns_independent_instances(self):
        builder = RuleSet.builder().allow_spaces(False)
        first = builder.build()
        second = builder.build()
        self.assertIsNot(first, second)
        self.assertEqual(first, second)

        builder.allow_spaces(True)
        third = builder.build()
        self.assertFalse(first.allow_spaces)
        self.assertTrue(third.allow_spaces)

    def test_rule_set_is_immutable(self):
        rules = RuleSet()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            rules.allow_spaces = False

    def test_min_length_is_checked_on_build(self):
        builder = RuleSet.builder().with_min_length(-2)
        with self.assertRaises(ValueError):
            builder.build()
        self.assertEqual(RuleSet.builder().with_min_length(0).build().min_length, 0)

    def test_negative_required_count(self):
        with self.assertRaises(ValueError):
            RuleSet.builder().required_lowercase(-1).build()

    def test_words(self):
        rules = RuleSet.builder().without_words("foo", "bar").build()
        self.assertEqual(rules.illegal_words, ("foo", "bar"))
        self.assertTrue(rules.ignore_words_case)

        rules = RuleSet.builder().without_words("foo", ignore_case=False).build()
        self.assertFalse(rules.ignore_words_case)

    def test_characters_are_split(self):
        rules = (RuleSet.builder()
                 .without_characters("ab", "c")
                 .require_characters("@.", "@")
                 .build())
        self.assertEqual(rules.invalid_characters, frozenset("abc"))
        self.assertEqual(rules.required_characters, ("@", "."))

    def test_pattern(self):
        rules = RuleSet.builder().require_pattern(r"\d+").build()
        self.assertIsInstance(rules.required_pattern, re.Pattern)

        compiled = re.compile("x", re.IGNORECASE)
        rules = RuleSet.builder().require_pattern(compiled).build()
        self.assertIs(rules.required_pattern, compiled)

    def test_from_ruleset(self):
        classes = CharacterClasses(special="!")
        base = (RuleSet.builder()
                .allow_spaces(False)
                .with_character_classes(classes)
                .build())
        derived = RuleSetBuilder.from_ruleset(base).with_min_length(3).build()
        self.assertFalse(derived.allow_spaces)
        self.assertEqual(derived.min_length, 3)
        self.assertIs(derived.character_classes, classes)
        self.assertEqual(base.min_length, -1)

    def test_pattern_given_as_string_to_constructor(self):
        rules = RuleSet(required_pattern=r"\d")
        self.assertIsInstance(rules.required_pattern, re.Pattern)
        errors = []
        scan("abc", errors, rules)
        self.assertEqual(errors, [Error.REQUIRED_PATTERN])

        with self.assertRaises(TypeError):
            RuleSet(required_pattern=5)


class TestRuleSetMapping(unittest.TestCase):

    def test_round_trip(self):
        rules = (RuleSet.builder()
                 .with_min_length(8)
                 .allow_spaces(False)
                 .without_characters("<>")
                 .without_words("admin", ignore_case=False)
                 .require_characters("@")
                 .require_pattern(r"\w+@\w+\.\w+")
                 .required_numbers(2)
                 .build())
        data = rules.to_dict()
        self.assertEqual(data["invalid_characters"], "<>")
        self.assertEqual(data["illegal_words"], ["admin"])
        self.assertEqual(data["required_pattern"], r"\w+@\w+\.\w+")
        self.assertEqual(RuleSet.from_mapping(data), rules)

    def test_overlay_on_base(self):
        base = RuleSet.builder().required_numbers(1).build()
        rules = RuleSet.from_mapping({"min_length": 12, "illegal_words": "qwerty"}, base=base)
        self.assertEqual(rules.required_numbers, 1)
        self.assertEqual(rules.min_length, 12)
        self.assertEqual(rules.illegal_words, ("qwerty",))

    def test_empty_pattern_clears_it(self):
        base = RuleSet.builder().require_pattern("x").build()
        self.assertIsNone(RuleSet.from_mapping({"required_pattern": ""}, base=base).required_pattern)

    def test_invalid_mappings(self):
        bad = [
            {"no_such_rule": True},
            {"allow_spaces": "no"},
            {"min_length": "3"},
            {"min_length": True},
            {"min_length": -4},
            {"required_pattern": "("},
            {"required_pattern": 3},
            {"illegal_words": [1, 2]},
        ]
        for mapping in bad:
            with self.assertRaises(ConfigError, msg=str(mapping)):
                RuleSet.from_mapping(mapping)


class TestError(unittest.TestCase):

    def test_equality_uses_kind(self):
        self.assertEqual(Error("SPACE", "custom message"), Error.SPACE)
        self.assertNotEqual(Error("NO_DATE", "Spaces are not allowed"), Error.SPACE)
        self.assertEqual(len({Error.EMPTY, Error("EMPTY", "x")}), 1)

    def test_str_and_repr(self):
        self.assertEqual(str(Error.EMPTY), "Text is empty")
        self.assertEqual(repr(Error.EMPTY), "Error('EMPTY', 'Text is empty')")

    def test_catalog(self):
        catalog = Error.catalog()
        self.assertEqual(len(catalog), 18)
        self.assertEqual(catalog[0], Error.EMPTY)
        self.assertEqual(catalog[-1], Error.REQUIRED_SPECIAL)


if __name__ == '__main__':
    unittest.main()
