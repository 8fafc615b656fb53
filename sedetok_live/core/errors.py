"""Exceptions raised by the live game core."""

from __future__ import annotations


class LiveGameError(Exception):
    """Base class for live game failures."""


class GameNotFoundError(LiveGameError):
    """Raised when a PIN or game id does not resolve to a game."""


class GameFinishedError(LiveGameError):
    """Raised when joining a game that has already finished."""


class InvalidTransitionError(LiveGameError):
    """Raised when a host action would move the game status backwards."""


class DuplicatePlayerError(LiveGameError):
    """Raised when the display name is already taken inside the game."""


class PlayerNotFoundError(LiveGameError):
    pass


class QuestionNotFoundError(LiveGameError):
    pass


class GameNotActiveError(LiveGameError):
    """Raised when an answer arrives while the game is not in progress."""


class TransientBackendError(LiveGameError):
    """Retryable transport failure between a client and the game store."""


class AccessCodeNotFoundError(LiveGameError):
    pass


class EventNotStartedError(LiveGameError):
    pass


class EventEndedError(LiveGameError):
    pass


class AuthenticationRequiredError(LiveGameError):
    """Raised when an evaluation event needs a logged-in user.

    `return_path` is where the login screen should send the user back to.
    """

    def __init__(self, message: str, return_path: str) -> None:
        super().__init__(message)
        self.return_path = return_path


class AttemptLimitError(LiveGameError):
    """Raised when a user retries an event that allows a single attempt."""


class QuestionImportError(Exception):
    """Raised when a question file cannot be parsed."""
