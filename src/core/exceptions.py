"""
Custom exceptions shared by all layers.

Every error is non-fatal: it is raised to the caller, and the match it was raised for is left unchanged.
"""

from src.core.shared_types import ErrorKind


class GameError(Exception):
    """Top-level exception. Catch this one to handle any rejection coming out of the engine or service."""

    kind: ErrorKind = ErrorKind.INVALID_STATE


class NotYourTurnError(GameError):
    kind = ErrorKind.NOT_YOUR_TURN


class OutOfBoundsError(GameError):
    kind = ErrorKind.OUT_OF_BOUNDS


class IllegalStepError(GameError):
    kind = ErrorKind.ILLEGAL_STEP


class NoWallsRemainingError(GameError):
    kind = ErrorKind.NO_WALLS_REMAINING


class WallOverlapError(GameError):
    kind = ErrorKind.WALL_OVERLAP


class PathBlockedError(GameError):
    kind = ErrorKind.PATH_BLOCKED


class InvalidStateError(GameError):
    """Wrong status for the action, empty history, too few players, or a malformed record."""

    kind = ErrorKind.INVALID_STATE


class InvalidRequestError(GameError):
    """Raised by the API models when a request cannot be interpreted."""

    kind = ErrorKind.INVALID_STATE


class RepositoryError(GameError):
    """The requested match does not exist in the repository."""

    kind = ErrorKind.INVALID_STATE


ERRORS_BY_KIND: dict[ErrorKind, type[GameError]] = {
    ErrorKind.NOT_YOUR_TURN: NotYourTurnError,
    ErrorKind.OUT_OF_BOUNDS: OutOfBoundsError,
    ErrorKind.ILLEGAL_STEP: IllegalStepError,
    ErrorKind.NO_WALLS_REMAINING: NoWallsRemainingError,
    ErrorKind.WALL_OVERLAP: WallOverlapError,
    ErrorKind.PATH_BLOCKED: PathBlockedError,
    ErrorKind.INVALID_STATE: InvalidStateError,
}
