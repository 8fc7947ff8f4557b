"""
Progress and violation scoring for interactive play

Everything here is recomputed from scratch on each call; the board is the
only input.
"""

from dataclasses import dataclass
from typing import Optional, Set, Union

from .board import Board, Position, PuzzleKind, validate_board, value_range
from .constraints import QUEEN, get_rule, is_knight_move
from .errors import InvalidUserMoveError, MalformedBoardError


def find_violations(board: Board, kind: Union[PuzzleKind, str]) -> Set[Position]:
    """
    Cells whose value breaks the puzzle's constraints.

    Each filled cell is cleared on a scratch copy and its value re-checked
    against the rest of the board.
    """
    rule = get_rule(kind)
    scratch = board.copy()
    violations: Set[Position] = set()

    for row, col in board.filled_cells():
        value = scratch[row, col]
        scratch[row, col] = 0
        if not rule.is_legal(scratch, row, col, value):
            violations.add((row, col))
        scratch[row, col] = value

    return violations


def calculate_progress(board: Board, kind: Union[PuzzleKind, str]) -> float:
    """Completion percentage 0-100"""
    kind = PuzzleKind.parse(kind)
    size = board.size

    if kind == PuzzleKind.SUDOKU:
        done, total = board.count_filled(), size * size
    elif kind == PuzzleKind.NQUEENS:
        done, total = board.count_value(QUEEN), size
    else:
        done, total = board.count_filled(), size * size

    return min(100.0, done / total * 100) if total else 0.0


@dataclass
class UserMoveResult:
    """Board after an interactive move plus the freshly scored state"""
    board: Board
    position: Position
    violations: Set[Position]
    progress: float
    is_solved: bool
    placed_value: int = 0   # value written by the move, 0 if the move cleared the cell
    removed_value: int = 0  # value the move overwrote or cleared, 0 if the cell was empty


def _given_at(givens: Optional[Board], row: int, col: int) -> bool:
    return givens is not None and givens[row, col] != 0


def apply_user_move(board: Board, position: Position, kind: Union[PuzzleKind, str],
                    value: Optional[int] = None, givens: Optional[Board] = None) -> UserMoveResult:
    """
    Apply one interactive move to a copy of ``board``.

    - Sudoku: write ``value`` (0 clears); cells fixed in ``givens`` are locked.
    - N-Queens: toggle a queen on the clicked cell.
    - Knight's Tour: move the knight to the clicked square; it must be empty
      and one jump from the square holding the highest move number.

    Structurally impossible moves raise InvalidUserMoveError before anything
    is changed.
    """
    kind = PuzzleKind.parse(kind)
    validate_board(board, kind)
    row, col = position
    if not board.in_bounds(row, col):
        raise MalformedBoardError(f"Position ({row},{col}) outside {board.size}x{board.size} board")

    updated = board.copy()
    previous = board[row, col]

    if kind == PuzzleKind.SUDOKU:
        low, high = value_range(kind, board.size)
        if value is None or not low <= value <= high:
            raise MalformedBoardError(f"Sudoku value must be {low}..{high}, got {value!r}")
        if _given_at(givens, row, col):
            raise InvalidUserMoveError(f"Cell ({row},{col}) is a given clue", row, col)
        updated[row, col] = value
        placed = value

    elif kind == PuzzleKind.NQUEENS:
        placed = 0 if previous == QUEEN else QUEEN
        updated[row, col] = placed

    else:
        last_move = board.max_value()
        if previous != 0:
            raise InvalidUserMoveError(f"Square ({row},{col}) was already visited", row, col)
        if last_move > 0:
            current = board.find(last_move)
            if not is_knight_move(current[0], current[1], row, col):
                raise InvalidUserMoveError(
                    f"({row},{col}) is not a knight move from ({current[0]},{current[1]})", row, col
                )
        placed = last_move + 1
        updated[row, col] = placed

    return UserMoveResult(
        board=updated,
        position=(row, col),
        violations=find_violations(updated, kind),
        progress=calculate_progress(updated, kind),
        is_solved=get_rule(kind).is_goal(updated),
        placed_value=placed,
        removed_value=previous,
    )
