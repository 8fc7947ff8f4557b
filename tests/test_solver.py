import pytest

from Backtracker.board import Board
from Backtracker.constraints import KnightsTourRule, NQueensRule, SudokuRule
from Backtracker.diagnostics import check_log
from Backtracker.errors import MalformedBoardError
from Backtracker.events import Backtrack, BacktrackRow, EventKind, Place, Reject, Try
from Backtracker.puzzle import SUDOKU_EASY_TEMPLATE
from Backtracker.solver import BacktrackingSolver, solve
from Backtracker.strategies import NQueensSearch


def queen_columns(board):
    return [row.index(1) for row in board.to_list()]


def test_canonical_sudoku(sudoku_board, sudoku_solution):
    result = solve(sudoku_board, "sudoku")
    assert result.success
    assert result.board.count_filled() == 81
    assert SudokuRule.is_goal(result.board)
    assert result.board == sudoku_solution
    assert check_log(result.events) == []


def test_sudoku_trace_starts_at_first_empty_cell(sudoku_board):
    events = solve(sudoku_board, "sudoku").events
    assert events[0] == Try(0, 2, 0, 1, True)
    assert events[1] == Place(0, 2, 0, 1)


def test_sudoku_depth_counts_search_levels(sudoku_board):
    events = solve(sudoku_board, "sudoku").events
    placed = [e for e in events if e.kind == EventKind.PLACE]
    assert min(e.depth for e in placed) == 0
    assert max(e.depth for e in placed) == 81 - sudoku_board.count_filled() - 1


def test_caller_board_is_untouched(sudoku_board):
    before = sudoku_board.copy()
    solve(sudoku_board, "sudoku")
    assert sudoku_board == before


def test_result_unpacks():
    success, events = solve(Board.empty(4), "nqueens")
    assert success
    assert events


def test_nqueens_four():
    result = solve(Board.empty(4), "nqueens")
    assert result.success
    assert queen_columns(result.board) == [1, 3, 0, 2]


def test_nqueens_four_trace():
    events = solve(Board.empty(4), "nqueens").events
    assert events[:8] == [
        Try(0, 0, 0, 1, True), Place(0, 0, 0, 1),
        Try(1, 0, 1, 1, False), Reject(1, 0, 1, 1),
        Try(1, 1, 1, 1, False), Reject(1, 1, 1, 1),
        Try(1, 2, 1, 1, True), Place(1, 2, 1, 1),
    ]
    # every column of row 2 is attacked, so row 2 is exhausted
    for i, col in enumerate(range(4)):
        assert events[8 + 2 * i] == Try(2, col, 2, 1, False)
        assert events[9 + 2 * i] == Reject(2, col, 2, 1)
    assert events[16] == BacktrackRow(2, 3, 1, 2)
    assert events[17] == Backtrack(1, 2, 1, 1)


def test_backtrack_row_is_reported_at_callers_depth():
    events = solve(Board.empty(6), "nqueens").events
    rows = [e for e in events if e.kind == EventKind.BACKTRACK_ROW]
    assert rows
    assert all(e.depth == e.exhausted_depth - 1 for e in rows)
    assert all(e.row == e.exhausted_depth for e in rows)


@pytest.mark.parametrize("size", [4, 5, 6, 7, 8])
def test_nqueens_sizes(size):
    result = solve(Board.empty(size), "nqueens")
    assert result.success
    assert result.board.count_filled() == size
    assert NQueensRule.is_goal(result.board)
    assert check_log(result.events) == []


def test_nqueens_continues_from_placed_rows():
    board = Board.empty(4)
    board[0, 1] = 1
    result = solve(board, "nqueens")
    assert result.success
    assert result.events[0].depth == 1
    assert queen_columns(result.board) == [1, 3, 0, 2]


@pytest.mark.parametrize("size", [5, 8])
def test_knights_tour(size):
    board = Board.empty(size)
    board[0, 0] = 1
    result = solve(board, "knights", timeout_seconds=60)
    assert result.success
    assert KnightsTourRule.is_goal(result.board)
    assert result.board[0, 0] == 1
    # the starting move is on the board already and is not traced
    assert result.events[0].depth == 2
    assert check_log(result.events) == []


def test_knights_tour_four_fails_cleanly():
    board = Board.empty(4)
    board[0, 0] = 1
    result = solve(board, "knights")
    assert not result.success
    assert not result.timed_out
    assert result.events
    assert board.count_filled() == 1
    assert result.board.count_filled() == 1
    assert not any(e.kind == EventKind.BACKTRACK_ROW for e in result.events)


@pytest.mark.parametrize("kind, board", [
    ("nqueens", Board.empty(6)),
    ("sudoku", Board(SUDOKU_EASY_TEMPLATE)),
])
def test_every_failed_try_is_rejected(kind, board):
    events = solve(board, kind).events
    assert any(e.kind == EventKind.TRY and not e.is_valid for e in events)
    for i, event in enumerate(events):
        if event.kind == EventKind.TRY:
            follower = events[i + 1]
            assert follower.kind == (EventKind.PLACE if event.is_valid else EventKind.REJECT)
            assert follower.position == event.position
            assert (follower.depth, follower.value) == (event.depth, event.value)


def test_conflicting_board_fails_without_searching(sudoku_board):
    sudoku_board[0, 2] = 5
    result = solve(sudoku_board, "sudoku")
    assert not result.success
    assert result.events == []


def test_timeout():
    result = solve(Board.empty(8), "nqueens", timeout_seconds=-1)
    assert not result.success
    assert result.timed_out
    assert result.stats['timed_out']


def test_wrong_sudoku_size():
    with pytest.raises(MalformedBoardError):
        solve(Board.empty(8), "sudoku")


def test_stats_match_log():
    solver = BacktrackingSolver(NQueensSearch())
    result = solver.solve(Board.empty(6))
    kinds = [e.kind for e in result.events]
    assert result.stats['tries'] == kinds.count(EventKind.TRY)
    assert result.stats['placements'] == kinds.count(EventKind.PLACE)
    assert result.stats['rejections'] == kinds.count(EventKind.REJECT)
    assert result.stats['backtracks'] == kinds.count(EventKind.BACKTRACK)
    assert result.stats['row_backtracks'] == kinds.count(EventKind.BACKTRACK_ROW)
    assert result.stats['elapsed'] >= 0


def test_verbose_prints_statistics(capsys):
    solve(Board.empty(4), "nqueens", verbose=True)
    out = capsys.readouterr().out
    assert "Solving Statistics" in out
    assert "Puzzle solved" in out


def test_queens_sharing_a_row_fail_without_searching():
    board = Board.empty(4)
    board[0, 0] = 1
    board[0, 3] = 1
    result = solve(board, "nqueens")
    assert not result.success
    assert result.events == []


def test_board_size_outside_range():
    with pytest.raises(MalformedBoardError):
        solve(Board.empty(13), "nqueens")
    with pytest.raises(MalformedBoardError):
        solve(Board.empty(3), "knights")
