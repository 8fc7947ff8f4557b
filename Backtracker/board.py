"""
Core board representation shared by every puzzle kind
"""
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np

from .errors import MalformedBoardError, UnknownPuzzleKindError


Position = Tuple[int, int]

SUDOKU_SIZE = 9
MIN_BOARD_SIZE = 4
MAX_BOARD_SIZE = 12

INT16_MIN, INT16_MAX = -32768, 32767


def _integer_grid(cells) -> np.ndarray:
    """Cells as an int16 array; anything that is not already integral is rejected"""
    try:
        raw = np.asarray(cells)
    except (ValueError, TypeError) as e:
        raise MalformedBoardError(f"Board cells are not a rectangular integer grid: {e}") from None

    if raw.size == 0:
        return raw.astype(np.int16)
    if raw.dtype.kind not in "iu":
        raise MalformedBoardError(f"Board cells must be integers, got {raw.dtype} values")
    if raw.min() < INT16_MIN or raw.max() > INT16_MAX:
        raise MalformedBoardError("Board cell value out of range")
    return raw.astype(np.int16)


def check_board_size(size: int) -> int:
    """N-Queens and Knight's Tour boards are 4x4 .. 12x12"""
    if not MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE:
        raise MalformedBoardError(f"Board size must be {MIN_BOARD_SIZE}..{MAX_BOARD_SIZE}, got {size}")
    return size


class PuzzleKind(str, Enum):
    """The three supported constraint puzzles"""
    SUDOKU = "sudoku"
    NQUEENS = "nqueens"
    KNIGHTS = "knights"

    @classmethod
    def parse(cls, kind: Union["PuzzleKind", str]) -> "PuzzleKind":
        """Accept either an enum member or its string value"""
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).strip().lower())
        except ValueError:
            raise UnknownPuzzleKindError(f"Unknown puzzle kind: {kind!r}") from None


class Board:
    """
    Square grid of small integers, 0 marks an empty cell.

    The grid shape is fixed at construction; the only mutation is
    single-cell assignment through ``board[row, col] = value``.
    """

    def __init__(self, cells):
        grid = _integer_grid(cells)
        if grid.ndim != 2 or grid.shape[0] == 0 or grid.shape[0] != grid.shape[1]:
            raise MalformedBoardError(f"Board must be a non-empty square grid, got shape {grid.shape}")

        self._grid = grid

    @classmethod
    def empty(cls, size: int) -> "Board":
        """Create an all-zero board"""
        if size < 1:
            raise MalformedBoardError(f"Board size must be positive, got {size}")
        return cls(np.zeros((size, size), dtype=np.int16))

    @classmethod
    def from_flat(cls, size: int, cells: List[int]) -> "Board":
        """Rebuild a board from its flat row-major serialization"""
        if size < 1 or len(cells) != size * size:
            raise MalformedBoardError(
                f"Flat board has {len(cells)} cells, expected {size}x{size}={size * size}"
            )
        return cls(_integer_grid(cells).reshape(size, size))

    @property
    def size(self) -> int:
        return int(self._grid.shape[0])

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def _check_position(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise MalformedBoardError(f"Position ({row},{col}) outside {self.size}x{self.size} board")

    def __getitem__(self, position: Position) -> int:
        row, col = position
        self._check_position(row, col)
        return int(self._grid[row, col])

    def __setitem__(self, position: Position, value: int) -> None:
        row, col = position
        self._check_position(row, col)
        self._grid[row, col] = value

    # -------------------------------------------------------------------------
    # Copy / restore
    # -------------------------------------------------------------------------
    def copy(self) -> "Board":
        """Independent working copy"""
        return Board(self._grid.copy())

    def restore(self, other: "Board") -> None:
        """Overwrite every cell with the contents of a same-sized board"""
        if other.size != self.size:
            raise MalformedBoardError(f"Cannot restore {self.size}x{self.size} board from {other.size}x{other.size}")
        self._grid[:, :] = other._grid

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def cells(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (row, col, value) in row-major order"""
        for row in range(self.size):
            for col in range(self.size):
                yield row, col, int(self._grid[row, col])

    def filled_cells(self) -> List[Position]:
        return [(int(r), int(c)) for r, c in np.argwhere(self._grid != 0)]

    def first_empty(self) -> Optional[Position]:
        """First empty cell in row-major order"""
        hits = np.argwhere(self._grid == 0)
        if len(hits) == 0:
            return None
        return int(hits[0][0]), int(hits[0][1])

    def count_filled(self) -> int:
        return int(np.count_nonzero(self._grid))

    def count_value(self, value: int) -> int:
        return int(np.count_nonzero(self._grid == value))

    def find(self, value: int) -> Optional[Position]:
        """First cell holding ``value`` in row-major order"""
        hits = np.argwhere(self._grid == value)
        if len(hits) == 0:
            return None
        return int(hits[0][0]), int(hits[0][1])

    def max_value(self) -> int:
        return int(self._grid.max())

    def row(self, row: int) -> List[int]:
        return self._grid[row].tolist()

    def column(self, col: int) -> List[int]:
        return self._grid[:, col].tolist()

    def block(self, top: int, left: int, span: int) -> List[int]:
        """Values of the span x span square whose corner is (top, left)"""
        return self._grid[top:top + span, left:left + span].flatten().tolist()

    def as_array(self) -> np.ndarray:
        """Read-only snapshot of the grid"""
        snapshot = self._grid.copy()
        snapshot.setflags(write=False)
        return snapshot

    def to_list(self) -> List[List[int]]:
        return [[int(v) for v in row] for row in self._grid]

    def to_flat(self) -> List[int]:
        return [int(v) for v in self._grid.flatten()]

    def __eq__(self, other) -> bool:
        return isinstance(other, Board) and np.array_equal(self._grid, other._grid)

    def __repr__(self):
        return f"Board(size={self.size}, filled={self.count_filled()})"

    def __str__(self):
        width = len(str(self.max_value())) if self.count_filled() else 1
        lines = []
        for row in self._grid:
            lines.append(" ".join(str(int(v)).rjust(width) if v else "·".rjust(width) for v in row))
        return "\n".join(lines)


def value_range(kind: PuzzleKind, size: int) -> Tuple[int, int]:
    """Inclusive (min, max) cell value for a puzzle kind"""
    if kind == PuzzleKind.SUDOKU:
        return 0, 9
    if kind == PuzzleKind.NQUEENS:
        return 0, 1
    return 0, size * size


def validate_board(board: Board, kind: Union[PuzzleKind, str]) -> Board:
    """
    Fail fast on a board that cannot belong to ``kind``.

    Checks the dimension (9x9 for Sudoku, 4..12 otherwise) and that every
    cell value lies within the range of the puzzle kind. Returns the board
    unchanged.
    """
    kind = PuzzleKind.parse(kind)
    if not isinstance(board, Board):
        raise MalformedBoardError(f"Expected a Board, got {type(board).__name__}")

    if kind == PuzzleKind.SUDOKU:
        if board.size != SUDOKU_SIZE:
            raise MalformedBoardError(
                f"Sudoku board must be {SUDOKU_SIZE}x{SUDOKU_SIZE}, got {board.size}x{board.size}"
            )
    else:
        check_board_size(board.size)

    low, high = value_range(kind, board.size)
    grid = board.as_array()
    bad = np.argwhere((grid < low) | (grid > high))
    if len(bad):
        r, c = int(bad[0][0]), int(bad[0][1])
        raise MalformedBoardError(
            f"Cell ({r},{c}) holds {int(grid[r, c])}, outside {low}..{high} for {kind.value}"
        )
    return board
