"""Exception types raised by signbank."""

from __future__ import annotations


class SignbankError(Exception):
    """Base class for signbank errors."""


class LandmarkValidationError(SignbankError, ValueError):
    """Raised when a landmark payload is structurally invalid.

    Raised at the input boundary, before any matching is attempted.

    Attributes:
        errors: Mapping of field name to a list of messages, e.g.
            ``{"landmarks": ["At least 21 landmark points are required"]}``.
    """

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        summary = "; ".join(
            f"{field}: {' '.join(messages)}" for field, messages in self.errors.items()
        )
        super().__init__(summary or "Validation failed")

    @classmethod
    def single(cls, field: str, message: str) -> LandmarkValidationError:
        return cls({field: [message]})


class GestureNotFoundError(SignbankError, KeyError):
    """Raised when a gesture id or name is not in the library."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Gesture not found"


class SampleNotFoundError(SignbankError, KeyError):
    """Raised when a training sample id is not in the library."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Training sample not found"


class DuplicateGestureError(SignbankError, ValueError):
    """Raised when adding a gesture whose name is already taken."""


__all__ = [
    "SignbankError",
    "LandmarkValidationError",
    "GestureNotFoundError",
    "SampleNotFoundError",
    "DuplicateGestureError",
]
