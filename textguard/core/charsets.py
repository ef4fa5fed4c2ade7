"""Character classes used by the scan.

The special, ambiguous, and similar sets are process-wide settings. They can
be replaced at any time with `configure()`, and every `CharacterClasses`
instance that leaves a field unset picks up the new value on its next scan.
There is no locking: mutate these once at startup, not while other threads
are validating.

Digits and letters are fixed ASCII ranges and are not configurable.
"""

from typing import Iterable, Optional, Union

SPECIAL_CHARACTERS = "!#$%&+*/,.<>=?@^_~"
AMBIGUOUS_CHARACTERS = "$&%,./<>_^~"
SIMILAR_CHARACTERS = "1l0OoiI"

NUMBERS = "0123456789"
LOWERCASE_ALPHABET = "abcdefghijklmnopqrstuvwxyz"
UPPERCASE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

CharsLike = Union[str, Iterable[str]]


def _join(chars: CharsLike) -> str:
    return chars if isinstance(chars, str) else "".join(chars)


def configure(special: Optional[CharsLike] = None, ambiguous: Optional[CharsLike] = None,
              similar: Optional[CharsLike] = None) -> None:
    """Replaces the shared character classes.

    Args:
        special: New special characters, or None to keep the current ones.
        ambiguous: New ambiguous characters, or None to keep the current ones.
        similar: New similar characters, or None to keep the current ones.
    """
    global SPECIAL_CHARACTERS, AMBIGUOUS_CHARACTERS, SIMILAR_CHARACTERS
    if special is not None:
        SPECIAL_CHARACTERS = _join(special)
    if ambiguous is not None:
        AMBIGUOUS_CHARACTERS = _join(ambiguous)
    if similar is not None:
        SIMILAR_CHARACTERS = _join(similar)


def is_number(c: str) -> bool:
    return "0" <= c <= "9"


def is_lowercase(c: str) -> bool:
    return "a" <= c <= "z"


def is_uppercase(c: str) -> bool:
    return "A" <= c <= "Z"


class CharacterClasses:
    """The special/ambiguous/similar sets seen by one RuleSet.

    A field left as None defers to the module-level value at scan time, so
    the default instance (`SHARED`) follows `configure()`. Passing explicit
    characters, or calling `frozen()`, pins the sets for this instance only.
    """

    def __init__(self, special: Optional[CharsLike] = None, ambiguous: Optional[CharsLike] = None,
                 similar: Optional[CharsLike] = None) -> None:
        self._special = frozenset(_join(special)) if special is not None else None
        self._ambiguous = frozenset(_join(ambiguous)) if ambiguous is not None else None
        self._similar = frozenset(_join(similar)) if similar is not None else None

    @property
    def special(self) -> frozenset:
        return self._special if self._special is not None else frozenset(SPECIAL_CHARACTERS)

    @property
    def ambiguous(self) -> frozenset:
        return self._ambiguous if self._ambiguous is not None else frozenset(AMBIGUOUS_CHARACTERS)

    @property
    def similar(self) -> frozenset:
        return self._similar if self._similar is not None else frozenset(SIMILAR_CHARACTERS)

    @property
    def is_shared(self) -> bool:
        """True when every set still follows the module-level values."""
        return self._special is None and self._ambiguous is None and self._similar is None

    def frozen(self) -> "CharacterClasses":
        """Returns a copy pinned to the sets as they are right now."""
        return CharacterClasses(self.special, self.ambiguous, self.similar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CharacterClasses):
            return NotImplemented
        return (self._special, self._ambiguous, self._similar) == (
            other._special, other._ambiguous, other._similar)

    def __hash__(self) -> int:
        return hash((self._special, self._ambiguous, self._similar))

    def __repr__(self) -> str:
        if self.is_shared:
            return "CharacterClasses(shared)"
        return (f"CharacterClasses(special={''.join(sorted(self.special))!r}, "
                f"ambiguous={''.join(sorted(self.ambiguous))!r}, "
                f"similar={''.join(sorted(self.similar))!r})")


SHARED = CharacterClasses()
