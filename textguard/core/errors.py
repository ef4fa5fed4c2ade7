"""Validation error values reported by the text validators.

Validation failures are plain data rather than exceptions: every scan pass
produces a (possibly empty) ordered list of `Error` values. The built-in
catalog lives as class attributes on `Error`; callers can add their own
kinds by creating new instances with a different `kind`.
"""

from typing import List


class Error:
    """A single validation failure.

    Two errors are considered equal when they share the same `kind`, which
    is what the scan relies on when it checks whether an error has already
    been reported during the current pass.

    Attributes:
        kind (str): A stable identifier for the error (e.g., "EMPTY").
        message (str): A human-readable description shown to users.
    """

    __slots__ = ("kind", "message")

    def __init__(self, kind: str, message: str) -> None:
        self.kind = kind
        self.message = message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Error):
            return NotImplemented
        return self.kind == other.kind

    def __hash__(self) -> int:
        return hash(self.kind)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"Error({self.kind!r}, {self.message!r})"

    @classmethod
    def catalog(cls) -> List["Error"]:
        """Returns the built-in errors in declaration order."""
        return [getattr(cls, kind) for kind in BUILTIN_KINDS]


BUILTIN_KINDS = (
    "EMPTY",
    "INVALID_CHARACTER",
    "SPACE",
    "MIN_LENGTH",
    "ILLEGAL_WORD",
    "NUMBER",
    "SPECIAL_CHARACTER",
    "UPPERCASE",
    "LOWERCASE",
    "SIMILAR",
    "AMBIGUOUS_CHARACTER",
    "REPEATED",
    "REQUIRED_CHARACTERS",
    "REQUIRED_PATTERN",
    "REQUIRED_NUMBERS",
    "REQUIRED_LOWERCASE",
    "REQUIRED_UPPERCASE",
    "REQUIRED_SPECIAL",
)

Error.EMPTY = Error("EMPTY", "Text is empty")
Error.INVALID_CHARACTER = Error("INVALID_CHARACTER", "Invalid character")
Error.SPACE = Error("SPACE", "Spaces are not allowed")
Error.MIN_LENGTH = Error("MIN_LENGTH", "Minimum length not met")
Error.ILLEGAL_WORD = Error("ILLEGAL_WORD", "Illegal word")
Error.NUMBER = Error("NUMBER", "Numbers are not allowed")
Error.SPECIAL_CHARACTER = Error("SPECIAL_CHARACTER", "Special characters are not allowed")
Error.UPPERCASE = Error("UPPERCASE", "Uppercase letters are not allowed")
Error.LOWERCASE = Error("LOWERCASE", "Lowercase letters are not allowed")
Error.SIMILAR = Error("SIMILAR", "Similar characters are not allowed")
Error.AMBIGUOUS_CHARACTER = Error("AMBIGUOUS_CHARACTER", "Ambiguous characters are not allowed")
Error.REPEATED = Error("REPEATED", "Repeated characters are not allowed")
Error.REQUIRED_CHARACTERS = Error("REQUIRED_CHARACTERS", "Missing required characters")
Error.REQUIRED_PATTERN = Error("REQUIRED_PATTERN", "Required pattern is not matched")
Error.REQUIRED_NUMBERS = Error("REQUIRED_NUMBERS", "Required number of numbers is not met")
Error.REQUIRED_LOWERCASE = Error("REQUIRED_LOWERCASE", "Required number of lowercase letters is not met")
Error.REQUIRED_UPPERCASE = Error("REQUIRED_UPPERCASE", "Required number of uppercase letters is not met")
Error.REQUIRED_SPECIAL = Error("REQUIRED_SPECIAL", "Required number of special characters is not met")


class ConfigError(ValueError):
    """Raised when a rule configuration (file, mapping, or env) is malformed."""
