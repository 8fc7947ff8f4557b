"""
Hint generation: solve a private copy of the player's board and point at
the first cell where the player still differs from that solution.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .board import Board, Position, PuzzleKind, validate_board
from .constraints import QUEEN, get_rule
from .solver import solve


HINT_TIMEOUT_SECONDS = 5.0

PLACE = "place"
MOVE = "move"
SOLVED = "solved"


@dataclass(frozen=True)
class Hint:
    row: Optional[int]
    col: Optional[int]
    value: Optional[int]
    action: str
    reason: str

    @property
    def position(self) -> Optional[Position]:
        if self.row is None:
            return None
        return (self.row, self.col)


def get_hint(board: Board, kind: Union[PuzzleKind, str],
             timeout_seconds: Optional[float] = HINT_TIMEOUT_SECONDS,
             verbose: bool = False) -> Optional[Hint]:
    """
    Suggest the next move for ``board``.

    Returns a hint with action "solved" when the board is already a solution,
    and None when no solution can be reached from the current state (or the
    search ran out of time). The caller's board is never modified.
    """
    kind = PuzzleKind.parse(kind)
    validate_board(board, kind)

    if get_rule(kind).is_goal(board):
        return Hint(None, None, None, SOLVED, "The puzzle is already solved")

    result = solve(board, kind, timeout_seconds=timeout_seconds)
    if not result.success:
        if verbose:
            reason = "timed out" if result.timed_out else "unsolvable from this state"
            print(f"No hint for {kind.value}: {reason}")
        return None

    solution = result.board

    if kind == PuzzleKind.SUDOKU:
        for row, col, value in board.cells():
            if value != solution[row, col]:
                return Hint(row, col, solution[row, col], PLACE,
                            "This number completes the constraint requirements for this position")

    elif kind == PuzzleKind.NQUEENS:
        for row in range(board.size):
            if QUEEN not in board.row(row):
                col = solution.row(row).index(QUEEN)
                return Hint(row, col, QUEEN, PLACE,
                            "Place a queen here - no conflicts with existing queens")

    else:
        last_move = board.max_value()
        target = solution.find(last_move + 1)
        if target is not None:
            if last_move:
                current = board.find(last_move)
                reason = f"Valid knight move from ({current[0] + 1}, {current[1] + 1})"
            else:
                reason = "Start the tour here"
            return Hint(target[0], target[1], last_move + 1, MOVE, reason)

    return None
