"""Runs the rule-driven scan and the pre/post validation hook pipeline.

This module holds the two halves of a validation pass:
1.  `scan`, the built-in pre-validation step that evaluates every rule of a
    `RuleSet` in a single left-to-right pass over the text.
2.  `TextValidator`, which clears its error list on every text change, runs
    the pre-validate hook (the scan by default), then the optional
    post-validate hook, and finally notifies an optional result listener.

The error list is rebuilt from scratch on every pass and always reflects
the most recent text only.
"""

import logging
from typing import Callable, List, Optional

from .base_validator import BaseValidator
from .charsets import is_lowercase, is_number, is_uppercase
from .errors import Error
from .ruleset import RuleSet, RuleSetBuilder

# Initialize a logger for this module.
logger = logging.getLogger(__name__)

PreValidateHook = Callable[[str, List[Error]], None]
PostValidateHook = Callable[[str, List[Error], "TextValidator"], None]
ResultListener = Callable[[List[Error]], None]


def scan(text: str, errors: List[Error], rules: RuleSet) -> None:
    """Checks `text` against `rules`, appending errors in detection order.

    Length checks run first, then each character is classified in index
    order, then the whole-text checks (illegal words, required characters,
    required pattern, required counts) run. Every error kind is reported at
    most once per pass. The repeated-character check looks ahead from each
    index, so it is quadratic in the text length.

    NUMBER, LOWERCASE, UPPERCASE, and SPECIAL_CHARACTER are skipped when the
    same kind is already in `errors`, including entries that were there
    before the scan started. The other per-character checks use flags local
    to this call.

    Args:
        text (str): The full text to check.
        errors (List[Error]): The list to append to. Existing entries are
            kept.
        rules (RuleSet): The constraints to check.
    """
    classes = rules.character_classes
    special_set = classes.special
    ambiguous_set = classes.ambiguous
    similar_set = classes.similar

    size = len(text)
    numbers = lowercases = uppercases = specials = 0

    # A flag starts as True when its check is disabled, so it never fires.
    invalid_seen = not rules.invalid_characters
    space_seen = rules.allow_spaces
    ambiguous_seen = rules.allow_ambiguous_characters
    similar_seen = rules.allow_similar_characters
    repeated_seen = rules.allow_repeated_characters

    if size == 0 and not rules.allow_empty:
        errors.append(Error.EMPTY)

    if rules.min_length != -1 and size < rules.min_length:
        errors.append(Error.MIN_LENGTH)

    for i, c in enumerate(text):
        if not invalid_seen and c in rules.invalid_characters:
            errors.append(Error.INVALID_CHARACTER)
            invalid_seen = True

        if not space_seen and c == " ":
            errors.append(Error.SPACE)
            space_seen = True

        if is_number(c):
            if not rules.allow_numbers and Error.NUMBER not in errors:
                errors.append(Error.NUMBER)
            numbers += 1

        if is_lowercase(c):
            if not rules.allow_lowercase and Error.LOWERCASE not in errors:
                errors.append(Error.LOWERCASE)
            lowercases += 1

        if is_uppercase(c):
            if not rules.allow_uppercase and Error.UPPERCASE not in errors:
                errors.append(Error.UPPERCASE)
            uppercases += 1

        if c in special_set:
            if not rules.allow_special_characters and Error.SPECIAL_CHARACTER not in errors:
                errors.append(Error.SPECIAL_CHARACTER)
            specials += 1

        if not ambiguous_seen and c in ambiguous_set:
            errors.append(Error.AMBIGUOUS_CHARACTER)
            ambiguous_seen = True

        if not similar_seen and c in similar_set:
            errors.append(Error.SIMILAR)
            similar_seen = True

        if not repeated_seen and text.find(c, i + 1) != -1:
            errors.append(Error.REPEATED)
            repeated_seen = True

    if rules.illegal_words:
        haystack = text.lower() if rules.ignore_words_case else text
        for word in rules.illegal_words:
            needle = word.lower() if rules.ignore_words_case else word
            if needle in haystack:
                errors.append(Error.ILLEGAL_WORD)
                break

    for c in rules.required_characters:
        if c not in text:
            errors.append(Error.REQUIRED_CHARACTERS)
            break

    if rules.required_pattern is not None and rules.required_pattern.search(text) is None:
        errors.append(Error.REQUIRED_PATTERN)

    if numbers < rules.required_numbers:
        errors.append(Error.REQUIRED_NUMBERS)

    if lowercases < rules.required_lowercase:
        errors.append(Error.REQUIRED_LOWERCASE)

    if uppercases < rules.required_uppercase:
        errors.append(Error.REQUIRED_UPPERCASE)

    if specials < rules.required_special_characters:
        errors.append(Error.REQUIRED_SPECIAL)


class TextValidator(BaseValidator):
    """Validates text on every change using a RuleSet and two hooks.

    The pre-validate hook defaults to `scan` over `rules`. Replacing it drops
    the built-in checks unless the replacement calls `scan` itself. The
    post-validate hook is optional and receives the collected errors and
    this validator, e.g. to add custom errors or surface the first message.

    A validator is meant for sequential use from one thread. Callers that
    trigger passes concurrently must synchronize access themselves.

    Attributes:
        rules (RuleSet): The constraints used by the default pre-validate hook.
        on_post_validate (Optional[PostValidateHook]): Runs after pre-validate.
        on_result (Optional[ResultListener]): Called with the errors once a
            pass is complete.
    """

    name = "TextValidator"
    description = "Checks text against a declarative rule set."

    def __init__(
        self,
        rules: Optional[RuleSet] = None,
        pre_validate: Optional[PreValidateHook] = None,
        post_validate: Optional[PostValidateHook] = None,
        on_result: Optional[ResultListener] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(name)
        self.rules = rules if rules is not None else RuleSet()
        self._pre_validate = pre_validate
        self.on_post_validate = post_validate
        self.on_result = on_result

    @staticmethod
    def builder() -> "ValidatorBuilder":
        """Returns a builder whose `build()` produces a TextValidator."""
        return ValidatorBuilder()

    @property
    def on_pre_validate(self) -> PreValidateHook:
        """The pre-validate hook; `scan` over `rules` unless replaced."""
        if self._pre_validate is not None:
            return self._pre_validate
        return self.default_pre_validate

    @on_pre_validate.setter
    def on_pre_validate(self, hook: Optional[PreValidateHook]) -> None:
        self._pre_validate = hook

    def default_pre_validate(self, text: str, errors: List[Error]) -> None:
        """Runs the built-in scan with this validator's rules."""
        scan(text, errors, self.rules)

    def _validate(self, text: str) -> None:
        self.on_pre_validate(text, self.errors)
        if self.on_post_validate is not None:
            self.on_post_validate(text, self.errors, self)
        logger.debug(f"{self.name}: {len(text)} chars -> {[e.kind for e in self.errors]}")
        if self.on_result is not None:
            self.on_result(self.errors)

    def on_text_changed(self, text: Optional[str], start: int = 0, before: int = 0, count: int = 0) -> List[Error]:
        """Entry point for UI text-change events.

        Args:
            text (Optional[str]): The full current text. None is treated as
                an empty string.
            start (int): Unused. Kept for text-watcher compatibility.
            before (int): Unused. Kept for text-watcher compatibility.
            count (int): Unused. Kept for text-watcher compatibility.

        Returns:
            List[Error]: The errors for `text`.
        """
        return self.validate("" if text is None else str(text))

    def check_errors(self, text: Optional[str] = None) -> List[Error]:
        """Re-validates `text`, or the last validated text when omitted."""
        if text is None:
            text = self.text if self.text is not None else ""
        return self.validate(text)

    def has_errors(self, text: Optional[str] = None) -> bool:
        """Forces a validation pass and reports whether it found errors."""
        return bool(self.check_errors(text))

    def copy(self) -> "TextValidator":
        """Returns a validator with the same rules and hooks and no errors."""
        return type(self)(
            self.rules,
            pre_validate=self._pre_validate,
            post_validate=self.on_post_validate,
            on_result=self.on_result,
            name=self.name,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, errors={self.errors!r})"


class ValidatorBuilder(RuleSetBuilder):
    """A RuleSetBuilder that also takes hooks and builds a TextValidator."""

    def __init__(self) -> None:
        super().__init__()
        self._pre_validate: Optional[PreValidateHook] = None
        self._post_validate: Optional[PostValidateHook] = None
        self._on_result: Optional[ResultListener] = None

    def on_pre_validate(self, hook: PreValidateHook) -> "ValidatorBuilder":
        """Replaces the built-in scan with `hook`."""
        self._pre_validate = hook
        return self

    def on_post_validate(self, hook: PostValidateHook) -> "ValidatorBuilder":
        self._post_validate = hook
        return self

    def on_result(self, listener: ResultListener) -> "ValidatorBuilder":
        self._on_result = listener
        return self

    def build_rules(self) -> RuleSet:
        """Returns just the RuleSet configured so far."""
        return super().build()

    def build(self) -> TextValidator:
        return TextValidator(
            self.build_rules(),
            pre_validate=self._pre_validate,
            post_validate=self._post_validate,
            on_result=self._on_result,
        )
