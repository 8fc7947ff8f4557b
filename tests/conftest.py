import pytest

from Backtracker.board import Board
from Backtracker.puzzle import SUDOKU_EASY_TEMPLATE


SUDOKU_EASY_SOLUTION = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]


@pytest.fixture
def sudoku_board():
    return Board(SUDOKU_EASY_TEMPLATE)


@pytest.fixture
def sudoku_solution():
    return Board(SUDOKU_EASY_SOLUTION)


@pytest.fixture
def knights_board():
    board = Board.empty(5)
    board[0, 0] = 1
    return board
