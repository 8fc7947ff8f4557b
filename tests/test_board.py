import numpy as np
import pytest

from Backtracker.board import Board, PuzzleKind, validate_board, value_range
from Backtracker.errors import MalformedBoardError, UnknownPuzzleKindError


def test_empty_board():
    board = Board.empty(6)
    assert board.size == 6
    assert board.count_filled() == 0
    assert board.first_empty() == (0, 0)


def test_non_square_board_is_rejected():
    with pytest.raises(MalformedBoardError):
        Board([[0, 0, 0], [0, 0, 0]])


def test_ragged_board_is_rejected():
    with pytest.raises(MalformedBoardError):
        Board([[0, 0], [0]])


def test_from_flat_checks_length():
    with pytest.raises(MalformedBoardError):
        Board.from_flat(3, [0] * 8)


def test_from_flat_is_row_major():
    board = Board.from_flat(2, [1, 2, 3, 4])
    assert board[0, 1] == 2
    assert board[1, 0] == 3
    assert board.to_flat() == [1, 2, 3, 4]


def test_single_cell_assignment():
    board = Board.empty(4)
    board[2, 3] = 1
    assert board[2, 3] == 1
    assert board.filled_cells() == [(2, 3)]


def test_out_of_bounds_access():
    board = Board.empty(4)
    with pytest.raises(MalformedBoardError):
        board[4, 0] = 1
    with pytest.raises(MalformedBoardError):
        board[0, -1]


def test_copy_is_independent():
    board = Board.empty(4)
    clone = board.copy()
    clone[0, 0] = 1
    assert board[0, 0] == 0
    assert clone != board


def test_restore():
    board = Board.empty(4)
    other = Board.empty(4)
    other[1, 1] = 1
    board.restore(other)
    assert board == other

    with pytest.raises(MalformedBoardError):
        board.restore(Board.empty(5))


def test_as_array_is_read_only():
    board = Board.empty(4)
    grid = board.as_array()
    with pytest.raises(ValueError):
        grid[0, 0] = 1
    assert isinstance(grid, np.ndarray)


def test_find_and_max(knights_board):
    knights_board[1, 2] = 2
    assert knights_board.max_value() == 2
    assert knights_board.find(2) == (1, 2)
    assert knights_board.find(3) is None


def test_slices(sudoku_board):
    assert sudoku_board.row(0) == [5, 3, 0, 0, 7, 0, 0, 0, 0]
    assert sudoku_board.column(0) == [5, 6, 0, 8, 4, 7, 0, 0, 0]
    assert sudoku_board.block(0, 0, 3) == [5, 3, 0, 6, 0, 0, 0, 9, 8]


def test_str_marks_empty_cells():
    board = Board.empty(4)
    board[0, 0] = 1
    assert str(board).splitlines()[0] == "1 · · ·"


def test_parse_kind():
    assert PuzzleKind.parse("SUDOKU") == PuzzleKind.SUDOKU
    assert PuzzleKind.parse(PuzzleKind.KNIGHTS) == PuzzleKind.KNIGHTS

    with pytest.raises(UnknownPuzzleKindError):
        PuzzleKind.parse("chess")


def test_value_ranges():
    assert value_range(PuzzleKind.SUDOKU, 9) == (0, 9)
    assert value_range(PuzzleKind.NQUEENS, 8) == (0, 1)
    assert value_range(PuzzleKind.KNIGHTS, 5) == (0, 25)


def test_validate_sudoku_dimension():
    with pytest.raises(MalformedBoardError):
        validate_board(Board.empty(8), PuzzleKind.SUDOKU)


def test_validate_cell_range(sudoku_board):
    validate_board(sudoku_board, "sudoku")

    sudoku_board[0, 2] = 10
    with pytest.raises(MalformedBoardError):
        validate_board(sudoku_board, "sudoku")

    board = Board.empty(5)
    board[0, 0] = 26
    with pytest.raises(MalformedBoardError):
        validate_board(board, "knights")

    board = Board.empty(4)
    board[0, 0] = 2
    with pytest.raises(MalformedBoardError):
        validate_board(board, "nqueens")


def test_malformed_board_is_a_value_error():
    with pytest.raises(ValueError):
        validate_board(Board.empty(8), "sudoku")


def test_non_integer_cells_are_rejected():
    with pytest.raises(MalformedBoardError):
        Board([[1.7, 0], [0, 0]])
    with pytest.raises(MalformedBoardError):
        Board([["1", "0"], ["0", "0"]])
    with pytest.raises(MalformedBoardError):
        Board.from_flat(2, [1.0, 0, 0, 0])


def test_cells_outside_int16_are_rejected():
    with pytest.raises(MalformedBoardError):
        Board([[40000, 0], [0, 0]])


def test_numpy_integer_grid_is_accepted():
    board = Board(np.ones((4, 4), dtype=np.int64))
    assert board.count_filled() == 16


def test_validate_board_size_range():
    validate_board(Board.empty(4), "nqueens")
    validate_board(Board.empty(12), "knights")
    with pytest.raises(MalformedBoardError):
        validate_board(Board.empty(2), "nqueens")
    with pytest.raises(MalformedBoardError):
        validate_board(Board.empty(13), "knights")
