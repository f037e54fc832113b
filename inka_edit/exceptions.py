"""Package-specific exception types."""

from __future__ import annotations


class LineTooLongError(ValueError):
    """Raised when a line exceeds the configured maximum length.

    Args:
        line_number: One-based index of the offending line.
        max_line_length: Maximum allowed line length in characters.
    """

    def __init__(self, line_number: int, max_line_length: int):
        self.line_number = line_number
        self.max_line_length = max_line_length
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Line {self.line_number} exceeds maximum allowed length "
            f"of {self.max_line_length} characters"
        )


class InkaError(ValueError):
    """Base class for card detection and editing-mode errors.

    Every failure raised by the core is an expected, recoverable condition;
    callers surface the message and leave the document alone.
    """


class DetectionError(InkaError):
    """Raised when no card can be located at a line.

    Args:
        line_number: One-based line the lookup started from.
    """

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        super().__init__(message)


class NotInSectionError(DetectionError):
    """Raised when a line lies outside every ``---`` delimited section."""

    def __init__(self, line_number: int):
        super().__init__(
            line_number,
            f"Line {line_number} is not within an inka section (between --- markers)",
        )


class NoQuestionFoundError(DetectionError):
    """Raised when no numbered question precedes a line within its section."""

    def __init__(self, line_number: int):
        super().__init__(
            line_number,
            f"Could not find a numbered question above line {line_number}",
        )


class EditingModeError(InkaError):
    """Base class for errors about the editing-mode marker region."""


class AlreadyEditingError(EditingModeError):
    """Raised when entering editing mode while markers are already present."""

    def __init__(self):
        super().__init__("Already in inka editing mode")


class NotEditingError(EditingModeError):
    """Raised when exiting editing mode without a complete marker region."""

    def __init__(self):
        super().__init__("Not currently in inka editing mode")


class StrayMarkerError(EditingModeError):
    """Raised when entering editing mode while a marker line is already present.

    Args:
        line_number: One-based line holding the marker.
        marker: The marker text found on that line.
    """

    def __init__(self, line_number: int, marker: str):
        self.line_number = line_number
        self.marker = marker
        super().__init__(
            f"Line {line_number} already contains the editing marker {marker}; "
            "remove it before entering inka editing mode"
        )
