"""Reference rule sets for emails, passwords, and ISO-8601 datetimes."""

from typing import Dict

from ..core.ruleset import RuleSet

# Matches "word@word.word" anywhere in the text.
EMAIL_REGEX = r"\w+@\w+\.\w+"

# Only "yyyy-mm-dd hh:mm:ss"; other ISO-8601 forms are not recognised.
SIMPLE_DATE_REGEX = r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}"

# No spaces, must contain "@" and "." and match EMAIL_REGEX.
EMAIL = (RuleSet.builder()
         .require_pattern(EMAIL_REGEX)
         .allow_spaces(False)
         .require_characters("@", ".")
         .build())

# No spaces, not empty, at least one lowercase, uppercase, and number.
PASSWORD_GOOD = (RuleSet.builder()
                 .allow_spaces(False)
                 .required_lowercase(1)
                 .required_uppercase(1)
                 .required_numbers(1)
                 .allow_empty(False)
                 .build())

# No spaces, not empty, at least 10 characters, 3 lowercase, 3 uppercase,
# 3 numbers, and 1 special character.
PASSWORD_BEST = (RuleSet.builder()
                 .allow_spaces(False)
                 .required_lowercase(3)
                 .required_uppercase(3)
                 .required_numbers(3)
                 .required_special_characters(1)
                 .allow_empty(False)
                 .with_min_length(10)
                 .build())

ISO_8601_DATETIME = (RuleSet.builder()
                     .require_pattern(SIMPLE_DATE_REGEX)
                     .allow_lowercase(False)
                     .allow_uppercase(False)
                     .build())

PRESETS: Dict[str, RuleSet] = {
    "email": EMAIL,
    "password_good": PASSWORD_GOOD,
    "password_best": PASSWORD_BEST,
    "iso_8601_datetime": ISO_8601_DATETIME,
}


def get_preset(name: str) -> RuleSet:
    """Looks up a preset by name, ignoring case and dashes.

    Raises:
        KeyError: If no preset has that name.
    """
    key = name.strip().lower().replace("-", "_")
    try:
        return PRESETS[key]
    except KeyError:
        raise KeyError(f"Unknown preset '{name}'. Available presets: {', '.join(PRESETS)}") from None
