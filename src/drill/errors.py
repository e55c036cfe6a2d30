"""Error types raised by the study core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from src.drill.session_builder import SelectionCriteria


class DrillError(Exception):
    """Base class for recoverable study-core failures."""


class EmptySelection(DrillError):
    """No cards remained after the selection criteria were applied."""

    def __init__(self, criteria: "SelectionCriteria", *, filtered_by_difficulty: bool = False) -> None:
        self.criteria = criteria
        self.filtered_by_difficulty = filtered_by_difficulty
        if filtered_by_difficulty:
            message = f"No hard cards left in chapter {criteria.chapter} for this selection."
        else:
            message = f"No cards found in chapter {criteria.chapter} for this selection."
        super().__init__(message)


class InvalidGrade(DrillError, ValueError):
    """A grade outside the 0-5 quality scale was submitted."""

    def __init__(self, quality: Any) -> None:
        self.quality = quality
        super().__init__(f"Quality must be an integer between 0 and 5, got {quality!r}.")


class NoIncorrectResults(DrillError):
    """Retry was requested for a session without any incorrect answers."""


class SessionNotActive(DrillError):
    """The requested operation does not fit the session's current state."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or "The study session is not active.")


class EmptyAnswer(DrillError, ValueError):
    """A typed or spoken answer was blank after trimming."""
