"""
Constraint checking for the three puzzle kinds

Each rule is a bundle of pure static checks over a board snapshot:
 - is_legal(board, row, col, value): may ``value`` go into (row, col) now?
 - is_goal(board): is the board a finished, valid solution?

Rules never leave a mutation behind; whole-board checks work on a scratch copy.
"""

from typing import Dict, List, Tuple, Type, Union

from .board import Board, Position, PuzzleKind, SUDOKU_SIZE


# Fixed enumeration order for knight offsets; ties under Warnsdorff keep it.
KNIGHT_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
)

QUEEN = 1


def is_knight_move(from_row: int, from_col: int, to_row: int, to_col: int) -> bool:
    """True if the two squares are one knight jump apart"""
    row_diff = abs(to_row - from_row)
    col_diff = abs(to_col - from_col)
    return (row_diff == 2 and col_diff == 1) or (row_diff == 1 and col_diff == 2)


def knight_destinations(board: Board, row: int, col: int) -> List[Position]:
    """Empty on-board squares reachable from (row, col), in offset order"""
    out = []
    for dr, dc in KNIGHT_OFFSETS:
        nr, nc = row + dr, col + dc
        if board.in_bounds(nr, nc) and board[nr, nc] == 0:
            out.append((nr, nc))
    return out


# -----------------------------------------------------------------------------
# Rules
# -----------------------------------------------------------------------------
class ConstraintRule:
    """Base rule; subclasses provide the two checks."""
    kind: PuzzleKind

    @staticmethod
    def is_legal(board: Board, row: int, col: int, value: int) -> bool:
        raise NotImplementedError

    @staticmethod
    def is_goal(board: Board) -> bool:
        raise NotImplementedError


class SudokuRule(ConstraintRule):
    kind = PuzzleKind.SUDOKU

    @staticmethod
    def is_legal(board: Board, row: int, col: int, value: int) -> bool:
        """Row, column and 3x3 box must not already contain ``value``"""
        if value in board.row(row):
            return False
        if value in board.column(col):
            return False

        box_row = (row // 3) * 3
        box_col = (col // 3) * 3
        if value in board.block(box_row, box_col, 3):
            return False

        return True

    @staticmethod
    def is_goal(board: Board) -> bool:
        """No empty cell, and every cell re-validates with itself removed"""
        if board.size != SUDOKU_SIZE or board.count_filled() != SUDOKU_SIZE * SUDOKU_SIZE:
            return False

        scratch = board.copy()
        for row, col, value in board.cells():
            scratch[row, col] = 0
            ok = SudokuRule.is_legal(scratch, row, col, value)
            scratch[row, col] = value
            if not ok:
                return False
        return True


class NQueensRule(ConstraintRule):
    kind = PuzzleKind.NQUEENS

    @staticmethod
    def is_legal(board: Board, row: int, col: int, value: int = QUEEN) -> bool:
        """
        No other queen in ``row``, and no queen above it in the same column or
        on either diagonal.
        """
        size = board.size

        for j in range(size):
            if j != col and board[row, j] == QUEEN:
                return False

        for i in range(row):
            if board[i, col] == QUEEN:
                return False

        i, j = row - 1, col - 1
        while i >= 0 and j >= 0:
            if board[i, j] == QUEEN:
                return False
            i, j = i - 1, j - 1

        i, j = row - 1, col + 1
        while i >= 0 and j < size:
            if board[i, j] == QUEEN:
                return False
            i, j = i - 1, j + 1

        return True

    @staticmethod
    def is_goal(board: Board) -> bool:
        """Exactly one queen in every row, each one legal"""
        if any(board.row(row).count(QUEEN) != 1 for row in range(board.size)):
            return False
        queens = board.filled_cells()
        return all(NQueensRule.is_legal(board, row, col) for row, col in queens)


class KnightsTourRule(ConstraintRule):
    kind = PuzzleKind.KNIGHTS

    @staticmethod
    def is_legal(board: Board, row: int, col: int, value: int) -> bool:
        """
        Move ``value`` may land on (row, col) if the square is empty and a
        knight jump away from the square holding move ``value - 1``.
        Move 1 is the starting square and only needs to be empty.
        """
        if not board.in_bounds(row, col) or board[row, col] != 0:
            return False
        if value == 1:
            return True

        previous = board.find(value - 1)
        if previous is None:
            return False
        return is_knight_move(previous[0], previous[1], row, col)

    @staticmethod
    def is_goal(board: Board) -> bool:
        """Every move number 1..S^2 appears exactly once"""
        total = board.size * board.size
        return sorted(board.to_flat()) == list(range(1, total + 1))


RULES: Dict[PuzzleKind, Type[ConstraintRule]] = {
    PuzzleKind.SUDOKU: SudokuRule,
    PuzzleKind.NQUEENS: NQueensRule,
    PuzzleKind.KNIGHTS: KnightsTourRule,
}


def get_rule(kind: Union[PuzzleKind, str]) -> Type[ConstraintRule]:
    return RULES[PuzzleKind.parse(kind)]
