"""
Puzzle setup: starting boards from templates or random fill, and JSON fixtures
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .board import (
    Board,
    PuzzleKind,
    SUDOKU_SIZE,
    check_board_size,
    validate_board,
)
from .constraints import SudokuRule
from .errors import MalformedBoardError
from .strategies import KNIGHT_START


DIFFICULTIES = ('easy', 'medium', 'hard')

# Canonical easy puzzle shown when the visualizer starts
SUDOKU_EASY_TEMPLATE = [
    [5, 3, 0, 0, 7, 0, 0, 0, 0],
    [6, 0, 0, 1, 9, 5, 0, 0, 0],
    [0, 9, 8, 0, 0, 0, 0, 6, 0],
    [8, 0, 0, 0, 6, 0, 0, 0, 3],
    [4, 0, 0, 8, 0, 3, 0, 0, 1],
    [7, 0, 0, 0, 2, 0, 0, 0, 6],
    [0, 6, 0, 0, 0, 0, 2, 8, 0],
    [0, 0, 0, 4, 1, 9, 0, 0, 5],
    [0, 0, 0, 0, 8, 0, 0, 7, 9],
]

# Cells blanked out of a random full grid
CELLS_TO_REMOVE = {'easy': 40, 'medium': 50, 'hard': 60}

NQUEENS_SIZES = {'easy': 4, 'medium': 6, 'hard': 8}
KNIGHTS_SIZES = {'easy': 5, 'medium': 6, 'hard': 8}


def _check_difficulty(difficulty: str) -> str:
    difficulty = difficulty.strip().lower()
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Unknown difficulty {difficulty!r}, expected one of {DIFFICULTIES}")
    return difficulty


def initialize(kind: Union[PuzzleKind, str], difficulty: str = 'easy',
               size: Optional[int] = None, seed: Optional[int] = None) -> Board:
    """
    Starting board for a puzzle.

    Sudoku: always the canonical template for 'easy' (``seed`` is ignored),
    a seeded random fill with 50 / 60 blanks for 'medium' / 'hard'
    (``size`` must be None or 9).
    N-Queens: empty board. Knight's Tour: empty board with move 1 on (0,0).
    Without an explicit size the difficulty picks one.
    """
    kind = PuzzleKind.parse(kind)
    difficulty = _check_difficulty(difficulty)

    if kind == PuzzleKind.SUDOKU:
        if size is not None and size != SUDOKU_SIZE:
            raise MalformedBoardError(f"Sudoku is always {SUDOKU_SIZE}x{SUDOKU_SIZE}, got size {size}")
        if difficulty == 'easy':
            return Board(SUDOKU_EASY_TEMPLATE)
        return generate_random_sudoku(difficulty, seed=seed)

    if kind == PuzzleKind.NQUEENS:
        return Board.empty(check_board_size(size or NQUEENS_SIZES[difficulty]))

    board = Board.empty(check_board_size(size or KNIGHTS_SIZES[difficulty]))
    board[KNIGHT_START] = 1
    return board


# -----------------------------------------------------------------------------
# Random Sudoku
# -----------------------------------------------------------------------------
def _fill_sudoku(board: Board, rng: np.random.Generator) -> bool:
    cell = board.first_empty()
    if cell is None:
        return True
    row, col = cell
    for num in rng.permutation(np.arange(1, 10)):
        num = int(num)
        if SudokuRule.is_legal(board, row, col, num):
            board[row, col] = num
            if _fill_sudoku(board, rng):
                return True
            board[row, col] = 0
    return False


def generate_random_sudoku(difficulty: str = 'medium', seed: Optional[int] = None) -> Board:
    """Fill an empty grid with shuffled digits, then blank cells by difficulty"""
    difficulty = _check_difficulty(difficulty)
    rng = np.random.default_rng(seed)

    board = Board.empty(SUDOKU_SIZE)
    _fill_sudoku(board, rng)

    for pos in rng.permutation(SUDOKU_SIZE * SUDOKU_SIZE)[:CELLS_TO_REMOVE[difficulty]]:
        board[int(pos) // SUDOKU_SIZE, int(pos) % SUDOKU_SIZE] = 0
    return board


# -----------------------------------------------------------------------------
# JSON fixtures
# -----------------------------------------------------------------------------
@dataclass
class PuzzleFixture:
    name: str
    kind: PuzzleKind
    board: Board
    difficulty: str = 'easy'


def board_to_dict(board: Board) -> dict:
    """Flat serialization: explicit dimension plus row-major cells"""
    return {'size': board.size, 'cells': board.to_flat()}


def board_from_dict(data: dict) -> Board:
    try:
        size, cells = int(data['size']), list(data['cells'])
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedBoardError(f"Board record needs 'size' and 'cells': {e}") from None
    return Board.from_flat(size, cells)


def load_puzzle(json_path: Union[str, Path]) -> PuzzleFixture:
    """Load a puzzle fixture: {"kind": ..., "size": S, "cells": [...], "difficulty": ...}"""
    path = Path(json_path)
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    kind = PuzzleKind.parse(data.get('kind', ''))
    board = validate_board(board_from_dict(data), kind)
    return PuzzleFixture(
        name=data.get('name', path.stem),
        kind=kind,
        board=board,
        difficulty=data.get('difficulty', 'easy'),
    )


def save_puzzle(fixture: PuzzleFixture, json_path: Union[str, Path]) -> None:
    record = {'name': fixture.name, 'kind': fixture.kind.value, 'difficulty': fixture.difficulty}
    record.update(board_to_dict(fixture.board))
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(record, f, indent=2)
