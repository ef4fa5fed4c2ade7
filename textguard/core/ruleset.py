"""Declarative rule sets consumed by the text validator.

A `RuleSet` is an immutable snapshot of which character classes, lengths,
patterns, and words a text may (or must) contain. Rule sets are normally
assembled with the fluent `RuleSetBuilder`:

    rules = (RuleSet.builder()
             .allow_spaces(False)
             .required_numbers(1)
             .with_min_length(8)
             .build())
"""

import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, Mapping, Optional, Pattern, Tuple, Union

from .charsets import SHARED, CharacterClasses
from .errors import ConfigError

PatternLike = Union[str, Pattern[str]]

BOOL_FIELDS = (
    "allow_empty",
    "allow_spaces",
    "allow_numbers",
    "allow_lowercase",
    "allow_uppercase",
    "allow_special_characters",
    "allow_ambiguous_characters",
    "allow_similar_characters",
    "allow_repeated_characters",
    "ignore_words_case",
)
COUNT_FIELDS = (
    "required_numbers",
    "required_lowercase",
    "required_uppercase",
    "required_special_characters",
)


def _chars(values: Iterable[str]) -> Tuple[str, ...]:
    """Flattens strings into single characters, dropping duplicates but keeping order."""
    seen = []
    for value in values:
        for c in value:
            if c not in seen:
                seen.append(c)
    return tuple(seen)


def _compile(pattern: Optional[PatternLike]) -> Optional[Pattern[str]]:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


@dataclass(frozen=True)
class RuleSet:
    """An immutable bundle of validation constraints.

    The defaults are fully permissive: every character class is allowed, no
    minimum length (`-1`) and nothing is required.
    """

    min_length: int = -1
    allow_empty: bool = True
    allow_spaces: bool = True
    allow_numbers: bool = True
    allow_lowercase: bool = True
    allow_uppercase: bool = True
    allow_special_characters: bool = True
    allow_ambiguous_characters: bool = True
    allow_similar_characters: bool = True
    allow_repeated_characters: bool = True
    invalid_characters: frozenset = frozenset()
    required_characters: Tuple[str, ...] = ()
    illegal_words: Tuple[str, ...] = ()
    ignore_words_case: bool = True
    required_pattern: Optional[Pattern[str]] = None
    required_numbers: int = 0
    required_lowercase: int = 0
    required_uppercase: int = 0
    required_special_characters: int = 0
    character_classes: CharacterClasses = field(default=SHARED, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.required_pattern, str):
            object.__setattr__(self, "required_pattern", re.compile(self.required_pattern))
        elif self.required_pattern is not None and not isinstance(self.required_pattern, re.Pattern):
            raise TypeError(f"required_pattern must be a str or re.Pattern, got {self.required_pattern!r}")
        if self.min_length < -1:
            raise ValueError(f"min_length must be -1 (disabled) or >= 0, got {self.min_length}")
        for name in COUNT_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    @staticmethod
    def builder() -> "RuleSetBuilder":
        """Returns a new builder with permissive defaults."""
        return RuleSetBuilder()

    def to_dict(self) -> Dict[str, Any]:
        """Returns a plain, serializable view of the rules.

        Character collections become strings and the pattern becomes its
        source, so the result round-trips through `from_mapping`.
        """
        data: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == "character_classes":
                continue
            value = getattr(self, f.name)
            if f.name == "invalid_characters":
                value = "".join(sorted(value))
            elif f.name == "required_characters":
                value = "".join(value)
            elif f.name == "illegal_words":
                value = list(value)
            elif f.name == "required_pattern":
                value = value.pattern if value is not None else None
            data[f.name] = value
        return data

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], base: Optional["RuleSet"] = None,
                     character_classes: Optional[CharacterClasses] = None) -> "RuleSet":
        """Builds a RuleSet from configuration keys (e.g. a TOML `[rules]` table).

        Args:
            mapping: Keys named after the RuleSet fields.
            base: Rules to start from; keys in `mapping` override them.
            character_classes: Overrides the character classes of `base`.

        Returns:
            RuleSet: The combined rules.

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type.
        """
        builder = RuleSetBuilder.from_ruleset(base) if base is not None else RuleSetBuilder()
        if character_classes is not None:
            builder.with_character_classes(character_classes)

        for key, value in mapping.items():
            if key in BOOL_FIELDS:
                if not isinstance(value, bool):
                    raise ConfigError(f"Rule '{key}' expects a boolean, got {value!r}")
                builder._set(key, value)
            elif key in COUNT_FIELDS or key == "min_length":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigError(f"Rule '{key}' expects an integer, got {value!r}")
                builder._set(key, value)
            elif key == "invalid_characters":
                builder.without_characters(*_as_strings(key, value))
            elif key == "required_characters":
                builder.require_characters(*_as_strings(key, value))
            elif key == "illegal_words":
                words = [value] if isinstance(value, str) else _as_strings(key, value)
                builder._set("illegal_words", tuple(words))
            elif key == "required_pattern":
                if value in (None, ""):
                    builder._set("required_pattern", None)
                    continue
                if not isinstance(value, str):
                    raise ConfigError(f"Rule '{key}' expects a string, got {value!r}")
                try:
                    builder.require_pattern(value)
                except re.error as e:
                    raise ConfigError(f"Rule '{key}' is not a valid regular expression: {e}") from e
            else:
                raise ConfigError(f"Unknown rule '{key}'")

        try:
            return builder.build()
        except ValueError as e:
            raise ConfigError(str(e)) from e


def _as_strings(key: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigError(f"Rule '{key}' expects a string or a list of strings, got {value!r}")


class RuleSetBuilder:
    """Fluent builder for `RuleSet`.

    Every setter returns the builder itself. Setters store values without
    checking them; `build()` is where out-of-range values are rejected. The
    builder stays usable after `build()`, and each call returns a new,
    independent RuleSet.
    """

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}

    @classmethod
    def from_ruleset(cls, rules: RuleSet) -> "RuleSetBuilder":
        """Starts a builder pre-filled with the values of `rules`."""
        builder = cls()
        builder._values = {f.name: getattr(rules, f.name) for f in fields(rules)}
        return builder

    def _set(self, name: str, value: Any) -> "RuleSetBuilder":
        self._values[name] = value
        return self

    def with_min_length(self, min_length: int) -> "RuleSetBuilder":
        """Sets the minimum length, -1 to disable (the default)."""
        return self._set("min_length", min_length)

    def allow_empty(self, value: bool) -> "RuleSetBuilder":
        return self._set("allow_empty", value)

    def allow_spaces(self, value: bool) -> "RuleSetBuilder":
        return self._set("allow_spaces", value)

    def allow_numbers(self, value: bool) -> "RuleSetBuilder":
        return self._set("allow_numbers", value)

    def allow_lowercase(self, value: bool) -> "RuleSetBuilder":
        return self._set("allow_lowercase", value)

    def allow_uppercase(self, value: bool) -> "RuleSetBuilder":
        return self._set("allow_uppercase", value)

    def allow_special_characters(self, value: bool) -> "RuleSetBuilder":
        """Special characters are defined by the rule set's character classes."""
        return self._set("allow_special_characters", value)

    def allow_ambiguous_characters(self, value: bool) -> "RuleSetBuilder":
        return self._set("allow_ambiguous_characters", value)

    def allow_similar_characters(self, value: bool) -> "RuleSetBuilder":
        return self._set("allow_similar_characters", value)

    def allow_repeated_characters(self, value: bool) -> "RuleSetBuilder":
        """Disallows using any character more than once when False."""
        return self._set("allow_repeated_characters", value)

    def without_characters(self, *characters: str) -> "RuleSetBuilder":
        """Marks the given characters as invalid, replacing any previous set."""
        return self._set("invalid_characters", frozenset(_chars(characters)))

    def without_words(self, *words: str, ignore_case: bool = True) -> "RuleSetBuilder":
        """Marks the given words as illegal.

        Args:
            *words: Words the text must not contain, checked in this order.
            ignore_case: Whether the comparison ignores case. Defaults to True.
        """
        self._values["illegal_words"] = tuple(words)
        return self._set("ignore_words_case", ignore_case)

    def require_characters(self, *characters: str) -> "RuleSetBuilder":
        """Sets characters that must each appear at least once."""
        return self._set("required_characters", _chars(characters))

    def require_pattern(self, pattern: Optional[PatternLike]) -> "RuleSetBuilder":
        """Sets a regular expression the text must contain a match for."""
        return self._set("required_pattern", _compile(pattern))

    def required_numbers(self, count: int) -> "RuleSetBuilder":
        return self._set("required_numbers", count)

    def required_lowercase(self, count: int) -> "RuleSetBuilder":
        return self._set("required_lowercase", count)

    def required_uppercase(self, count: int) -> "RuleSetBuilder":
        return self._set("required_uppercase", count)

    def required_special_characters(self, count: int) -> "RuleSetBuilder":
        return self._set("required_special_characters", count)

    def with_character_classes(self, character_classes: CharacterClasses) -> "RuleSetBuilder":
        """Uses per-instance character classes instead of the shared ones."""
        return self._set("character_classes", character_classes)

    def build(self) -> RuleSet:
        """Returns a new RuleSet with the values set so far.

        Raises:
            ValueError: If `min_length` is below -1 or a required count is
                negative.
        """
        return RuleSet(**self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"

