"""Exception hierarchy for the backtracking visualizer.

All package-specific exceptions inherit from :class:`PuzzleError` so that
callers can catch a single base class. A search that exhausts every branch
is not an error: it is reported as ``success=False`` on the solve result.
"""


class PuzzleError(Exception):
    """Base exception for all puzzle operations."""


class MalformedBoardError(PuzzleError, ValueError):
    """Raised when a board has the wrong shape, an unsupported size or a
    cell value outside the range allowed for its puzzle kind.

    This is a precondition violation; callers are expected to fix their
    input rather than retry.
    """


class MalformedEventError(PuzzleError, ValueError):
    """Raised when a serialized event record cannot be decoded."""


class UnknownPuzzleKindError(PuzzleError, ValueError):
    """Raised when a puzzle kind name is not one of the supported kinds."""


class InvalidUserMoveError(PuzzleError):
    """Raised when an interactive move breaks the structural rules of the
    puzzle (editing a given Sudoku clue, an unreachable knight square, ...).

    The board is left untouched, so the caller can simply report the move
    and carry on.
    """

    def __init__(self, message: str, row: int = -1, col: int = -1):
        super().__init__(message)
        self.row = row
        self.col = col
