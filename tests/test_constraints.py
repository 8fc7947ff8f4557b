from Backtracker.board import Board
from Backtracker.constraints import (
    KnightsTourRule,
    NQueensRule,
    SudokuRule,
    get_rule,
    is_knight_move,
    knight_destinations,
)


def test_sudoku_row_column_box(sudoku_board):
    assert not SudokuRule.is_legal(sudoku_board, 0, 2, 5)   # row
    assert not SudokuRule.is_legal(sudoku_board, 0, 2, 8)   # column
    assert not SudokuRule.is_legal(sudoku_board, 0, 2, 9)   # box
    assert SudokuRule.is_legal(sudoku_board, 0, 2, 1)
    assert SudokuRule.is_legal(sudoku_board, 0, 2, 4)


def test_sudoku_goal(sudoku_board, sudoku_solution):
    assert SudokuRule.is_goal(sudoku_solution)
    assert not SudokuRule.is_goal(sudoku_board)

    broken = sudoku_solution.copy()
    broken[0, 0], broken[0, 1] = broken[0, 1], broken[0, 0]
    assert not SudokuRule.is_goal(broken)


def test_sudoku_goal_leaves_board_untouched(sudoku_solution):
    before = sudoku_solution.copy()
    SudokuRule.is_goal(sudoku_solution)
    assert sudoku_solution == before


def test_nqueens_checks_rows_above():
    board = Board.empty(4)
    board[0, 1] = 1
    assert not NQueensRule.is_legal(board, 1, 0)   # diagonal
    assert not NQueensRule.is_legal(board, 1, 1)   # column
    assert not NQueensRule.is_legal(board, 1, 2)   # diagonal
    assert NQueensRule.is_legal(board, 1, 3)
    assert NQueensRule.is_legal(board, 2, 0)


def test_nqueens_goal():
    board = Board.empty(4)
    for row, col in enumerate([1, 3, 0, 2]):
        board[row, col] = 1
    assert NQueensRule.is_goal(board)

    board[3, 2] = 0
    assert not NQueensRule.is_goal(board)
    board[3, 1] = 1
    assert not NQueensRule.is_goal(board)


def test_knight_move_geometry():
    assert is_knight_move(0, 0, 1, 2)
    assert is_knight_move(3, 3, 1, 2)
    assert not is_knight_move(0, 0, 1, 1)
    assert not is_knight_move(0, 0, 2, 2)


def test_knight_destinations_in_offset_order(knights_board):
    assert knight_destinations(knights_board, 0, 0) == [(1, 2), (2, 1)]

    knights_board[1, 2] = 2
    assert knight_destinations(knights_board, 0, 0) == [(2, 1)]


def test_knights_legality(knights_board):
    assert KnightsTourRule.is_legal(knights_board, 2, 1, 2)
    assert not KnightsTourRule.is_legal(knights_board, 1, 1, 2)
    assert not KnightsTourRule.is_legal(knights_board, 0, 0, 2)
    assert not KnightsTourRule.is_legal(knights_board, 5, 5, 2)
    # no move 2 on the board yet
    assert not KnightsTourRule.is_legal(knights_board, 3, 3, 3)
    assert KnightsTourRule.is_legal(Board.empty(5), 4, 4, 1)


def test_knights_goal():
    board = Board.from_flat(4, list(range(1, 17)))
    assert KnightsTourRule.is_goal(board)

    board[3, 3] = 0
    assert not KnightsTourRule.is_goal(board)


def test_get_rule_by_name():
    assert get_rule("nqueens") is NQueensRule
    assert get_rule("knights") is KnightsTourRule


def test_nqueens_same_row_is_illegal():
    board = Board.empty(4)
    board[0, 0] = 1
    assert not NQueensRule.is_legal(board, 0, 3)
    # a queen does not attack itself
    assert NQueensRule.is_legal(board, 0, 0)


def test_nqueens_goal_needs_one_queen_per_row():
    board = Board.empty(5)
    for row, col in [(0, 0), (0, 4), (2, 1), (2, 3), (4, 2)]:
        board[row, col] = 1
    assert not NQueensRule.is_goal(board)
