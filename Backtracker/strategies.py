"""
Search strategies: the per-puzzle capability set the backtracking engine runs on.

A strategy answers four questions for the engine and nothing else:
 - which depth the next decision happens at,
 - whether the board is fully assigned at that depth,
 - which (row, col, value) candidates to try, in order,
 - how to apply and undo a candidate.
Legality and the goal test come from the puzzle's ConstraintRule.
"""

from typing import List, Tuple, Type, Union

from .board import Board, PuzzleKind
from .constraints import (
    ConstraintRule,
    KnightsTourRule,
    NQueensRule,
    QUEEN,
    SudokuRule,
    knight_destinations,
)


Candidate = Tuple[int, int, int]  # (row, col, value)

KNIGHT_START = (0, 0)


class SearchStrategy:
    """Shared apply/undo; subclasses define depth, completion and ordering."""
    kind: PuzzleKind
    rule: Type[ConstraintRule]
    # Emit BacktrackRow when every candidate at a depth has failed
    signals_exhaustion: bool = False

    def root_parent_depth(self, board: Board) -> int:
        """Depth reported as the caller of the first search level"""
        return -1

    def depth(self, board: Board, parent_depth: int) -> int:
        return parent_depth + 1

    def is_complete(self, board: Board, depth: int) -> bool:
        raise NotImplementedError

    def candidates(self, board: Board, depth: int) -> List[Candidate]:
        raise NotImplementedError

    def apply(self, board: Board, candidate: Candidate) -> None:
        row, col, value = candidate
        board[row, col] = value

    def undo(self, board: Board, candidate: Candidate) -> None:
        row, col, _ = candidate
        board[row, col] = 0

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class SudokuSearch(SearchStrategy):
    """First empty cell in row-major order, values 1..9 ascending.

    Depth counts the cells filled by this search so far.
    """
    kind = PuzzleKind.SUDOKU
    rule = SudokuRule

    def is_complete(self, board: Board, depth: int) -> bool:
        return board.first_empty() is None

    def candidates(self, board: Board, depth: int) -> List[Candidate]:
        row, col = board.first_empty()
        return [(row, col, value) for value in range(1, 10)]


class NQueensSearch(SearchStrategy):
    """First row without a queen, columns ascending. Depth is the row index."""
    kind = PuzzleKind.NQUEENS
    rule = NQueensRule
    signals_exhaustion = True

    @staticmethod
    def _open_row(board: Board) -> int:
        for row in range(board.size):
            if QUEEN not in board.row(row):
                return row
        return board.size

    def root_parent_depth(self, board: Board) -> int:
        return self._open_row(board) - 1

    def depth(self, board: Board, parent_depth: int) -> int:
        return self._open_row(board)

    def is_complete(self, board: Board, depth: int) -> bool:
        return depth >= board.size

    def candidates(self, board: Board, depth: int) -> List[Candidate]:
        return [(depth, col, QUEEN) for col in range(board.size)]


class KnightsTourSearch(SearchStrategy):
    """
    Depth is the move number being placed. Candidates are the empty squares
    a knight jump away from the previous move, ordered by Warnsdorff's rule
    (fewest onward moves first); ties keep the fixed offset order.
    """
    kind = PuzzleKind.KNIGHTS
    rule = KnightsTourRule

    def __init__(self, use_warnsdorff: bool = True):
        self.use_warnsdorff = use_warnsdorff

    def root_parent_depth(self, board: Board) -> int:
        return board.max_value()

    def depth(self, board: Board, parent_depth: int) -> int:
        return board.max_value() + 1

    def is_complete(self, board: Board, depth: int) -> bool:
        return depth == board.size * board.size + 1

    def candidates(self, board: Board, depth: int) -> List[Candidate]:
        if depth == 1:
            row, col = KNIGHT_START
            return [(row, col, 1)] if board[row, col] == 0 else []

        current = board.find(depth - 1)
        if current is None:
            return []

        moves = knight_destinations(board, current[0], current[1])
        if self.use_warnsdorff:
            # sorted() is stable, so equal accessibility keeps offset order
            moves = sorted(moves, key=lambda m: self._accessibility(board, m[0], m[1]))
        return [(row, col, depth) for row, col in moves]

    @staticmethod
    def _accessibility(board: Board, row: int, col: int) -> int:
        return len(knight_destinations(board, row, col))

    def __repr__(self):
        return f"KnightsTourSearch(use_warnsdorff={self.use_warnsdorff})"


def make_strategy(kind: Union[PuzzleKind, str], use_warnsdorff: bool = True) -> SearchStrategy:
    kind = PuzzleKind.parse(kind)
    if kind == PuzzleKind.SUDOKU:
        return SudokuSearch()
    if kind == PuzzleKind.NQUEENS:
        return NQueensSearch()
    return KnightsTourSearch(use_warnsdorff=use_warnsdorff)
