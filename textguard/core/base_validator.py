"""
Base validator class that all text validators inherit from.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .errors import Error


class BaseValidator(ABC):
    """Abstract base class for text validators.

    A validator turns one text value into an ordered list of `Error` values.
    The list is transient: `validate` clears it before every pass, so it
    always describes the most recently validated text and nothing else.
    Subclasses implement `_validate` and append findings to `self.errors`.

    Attributes:
        name (str): The display name of the validator.
        description (str): A brief explanation of what the validator checks.
    """

    name: str = "UnnamedValidator"
    description: str = "No description provided"

    def __init__(self, name: Optional[str] = None) -> None:
        if name is not None:
            self.name = name
        self.errors: List[Error] = []
        self.text: Optional[str] = None

    def validate(self, text: str) -> List[Error]:
        """Runs a full validation pass over `text`.

        Args:
            text (str): The complete current text (not a diff).

        Returns:
            List[Error]: The errors found, in detection order. This is the
            same list object as `self.errors`.
        """
        self.text = text
        self.errors.clear()
        self._validate(text)
        return self.errors

    @abstractmethod
    def _validate(self, text: str) -> None:
        """Populates `self.errors` for `text`.

        The error list has already been cleared when this is called.
        """
        raise NotImplementedError("Subclasses must implement _validate()")

    @property
    def is_valid(self) -> bool:
        """True when the last pass produced no errors."""
        return not self.errors

    @property
    def first_error(self) -> Optional[Error]:
        """The error a UI should display, or None when valid."""
        return self.errors[0] if self.errors else None

    def result(self) -> Dict[str, Any]:
        """Returns the outcome of the last pass as a plain dictionary.

        Returns:
            Dict[str, Any]: The validator's name and description, the text
            that was validated, and the error messages and kinds.
        """
        return {
            "name": self.name,
            "description": self.description,
            "text": self.text,
            "valid": self.is_valid,
            "errors": [error.message for error in self.errors],
            "kinds": [error.kind for error in self.errors],
        }
