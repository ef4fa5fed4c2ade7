"""textguard: declarative text validation.

This package checks strings against a configurable rule set (allowed and
required character classes, lengths, patterns, and word lists) and reports
an ordered list of validation errors, with pre/post hooks for custom logic.
"""

from .core.errors import ConfigError, Error
from .core.charsets import CharacterClasses, configure
from .core.ruleset import RuleSet, RuleSetBuilder
from .core.validator import TextValidator, ValidatorBuilder, scan
from .validators.presets import EMAIL, ISO_8601_DATETIME, PASSWORD_BEST, PASSWORD_GOOD, get_preset

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__license__",
    "CharacterClasses",
    "ConfigError",
    "EMAIL",
    "Error",
    "ISO_8601_DATETIME",
    "PASSWORD_BEST",
    "PASSWORD_GOOD",
    "RuleSet",
    "RuleSetBuilder",
    "TextValidator",
    "ValidatorBuilder",
    "configure",
    "get_preset",
    "scan",
]
