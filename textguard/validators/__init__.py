"""Ready-made rule sets for common kinds of input.

Each preset is an ordinary `RuleSet` composed with the builder; they carry no
logic of their own and can be extended with `RuleSetBuilder.from_ruleset`.
"""
from .presets import (
    EMAIL,
    EMAIL_REGEX,
    ISO_8601_DATETIME,
    PASSWORD_BEST,
    PASSWORD_GOOD,
    PRESETS,
    SIMPLE_DATE_REGEX,
    get_preset,
)
