"""Exceptions raised by rendering operations."""

from __future__ import annotations

__all__ = [
    "PietError",
    "InvalidInputError",
    "NotSupportedError",
    "UnimplementedError",
    "MissingFeatureError",
    "StackUnbalanceError",
    "BackendError",
    "MissingFontError",
    "FontLoadingFailedError",
]


class PietError(Exception):
    """Base class for errors that can occur while rendering 2D graphics."""

    message = "Rendering error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.message)


class InvalidInputError(PietError):
    """A function was passed an invalid input."""

    message = "Invalid input"


class NotSupportedError(PietError):
    """Something is impossible on the current platform."""

    message = "Not supported on the current backend"


class UnimplementedError(PietError):
    """Something is possible, but not yet implemented."""

    message = "This functionality is not yet implemented for this backend"


class MissingFeatureError(PietError):
    """A required feature is not available."""

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"Missing feature '{feature}'")


class StackUnbalanceError(PietError):
    """A stack pop failed."""

    message = "Stack unbalanced"


class BackendError(PietError):
    """The backend failed unexpectedly."""

    def __init__(self, cause: BaseException | str) -> None:
        self.cause = cause
        super().__init__(f"Backend error: {cause}")


class MissingFontError(PietError):
    """A font could not be found."""

    message = "A font could not be found"


class FontLoadingFailedError(PietError):
    """Font data could not be loaded."""

    message = "A font could not be loaded"