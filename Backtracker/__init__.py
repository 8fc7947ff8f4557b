"""
DFS Backtracking Visualizer Package

A traced backtracking engine for Sudoku, N-Queens and Knight's Tour, with
recursion-tree reconstruction from the event log.
"""

from .board import Board, PuzzleKind, validate_board
from .constraints import get_rule, SudokuRule, NQueensRule, KnightsTourRule
from .events import Try, Place, Reject, Backtrack, BacktrackRow, EventKind, event_to_dict, event_from_dict
from .errors import (
    PuzzleError,
    MalformedBoardError,
    MalformedEventError,
    UnknownPuzzleKindError,
    InvalidUserMoveError,
)
from .puzzle import initialize, load_puzzle
from .solver import BacktrackingSolver, SolveResult, solve
from .playback import step, replay
from .tree import DecisionTree, TreeNode, build_tree, build_user_tree
from .scoring import apply_user_move, calculate_progress, find_violations
from .hints import Hint, get_hint
from .session import PuzzleSession
from .output import SolutionFormatter

__version__ = "1.0.0"
__all__ = [
    'Board',
    'PuzzleKind',
    'validate_board',
    'get_rule',
    'SudokuRule',
    'NQueensRule',
    'KnightsTourRule',
    'Try',
    'Place',
    'Reject',
    'Backtrack',
    'BacktrackRow',
    'EventKind',
    'event_to_dict',
    'event_from_dict',
    'PuzzleError',
    'MalformedBoardError',
    'MalformedEventError',
    'UnknownPuzzleKindError',
    'InvalidUserMoveError',
    'initialize',
    'load_puzzle',
    'BacktrackingSolver',
    'SolveResult',
    'solve',
    'step',
    'replay',
    'DecisionTree',
    'TreeNode',
    'build_tree',
    'build_user_tree',
    'apply_user_move',
    'calculate_progress',
    'find_violations',
    'Hint',
    'get_hint',
    'PuzzleSession',
    'SolutionFormatter',
]
