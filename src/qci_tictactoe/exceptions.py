"""QCI exception classes."""

from typing import Any, Optional


class QCIError(Exception):
    """Base exception for all QCI errors."""

    pass


class IllegalMoveError(QCIError):
    """Raised when a mark is placed on an occupied, out-of-range or disabled cell."""

    def __init__(self, position: Any, reason: str) -> None:
        self.position = position
        self.reason = reason
        super().__init__(f"Illegal move at {position}: {reason}")


class NoLegalMoveError(QCIError):
    """Raised when a move is requested but no legal cell remains."""

    pass


class SelectionInvariantError(QCIError):
    """Raised when move selection lands on a cell that cannot be played."""

    def __init__(self, position: Any, fallback: Optional[Any] = None) -> None:
        self.position = position
        self.fallback = fallback
        message = f"Selected position {position} is not a legal move"
        if fallback is not None:
            message += f"; falling back to {fallback}"
        super().__init__(message)


class TurnSequenceError(QCIError):
    """Raised when an opponent turn skips or repeats a step."""

    pass


class ConfigurationError(QCIError):
    """Raised when configuration is invalid."""

    pass
