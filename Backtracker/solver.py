"""
Backtracking search engine with step-trace instrumentation

One depth-first search drives all three puzzles. At every level it asks the
strategy for ordered candidates and, for each one:
 1. emits Try (with the legality verdict),
 2. emits Reject and moves on if the candidate is illegal,
 3. otherwise applies it, emits Place and recurses,
 4. on a failed subtree undoes it and emits Backtrack.
Strategies that signal exhaustion get a BacktrackRow once every candidate
at a level has failed.

The engine never touches the caller's board: it searches a private copy and
hands that copy back on the result.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from .board import Board, PuzzleKind, validate_board
from .events import Backtrack, BacktrackRow, Event, Place, Reject, Try
from .scoring import find_violations
from .strategies import SearchStrategy, make_strategy


class _SearchTimeout(Exception):
    """Unwinds the recursion when the time budget runs out."""


@dataclass
class SolveResult:
    """Outcome of one search run. Unpacks as ``success, events``."""
    kind: PuzzleKind
    success: bool
    events: List[Event]
    board: Board
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def timed_out(self) -> bool:
        return bool(self.stats.get('timed_out'))

    def __iter__(self) -> Iterator:
        yield self.success
        yield self.events


class BacktrackingSolver:
    def __init__(self, strategy: SearchStrategy, verbose: bool = False,
                 timeout_seconds: Optional[float] = None, progress_interval: int = 10000):
        self.strategy = strategy
        self.rule = strategy.rule
        self.verbose = verbose
        self.timeout = timeout_seconds
        self.progress_interval = progress_interval
        self.events: List[Event] = []
        self.board: Optional[Board] = None
        self.stats: Dict[str, Any] = {}
        self._reset_stats()

    def _reset_stats(self) -> None:
        self.stats = {
            'calls': 0,
            'tries': 0,
            'placements': 0,
            'rejections': 0,
            'backtracks': 0,
            'row_backtracks': 0,
            'max_depth': 0,
            'elapsed': 0.0,
            'timed_out': False,
        }

    # -------------------------------------------------------------------------
    # Main solving driver
    # -------------------------------------------------------------------------
    def solve(self, board: Board) -> SolveResult:
        kind = self.strategy.kind
        validate_board(board, kind)

        self.board = board.copy()
        self.events = []
        self._reset_stats()
        self.start_time = time.time()

        if self.verbose:
            print(f"Starting backtracking search: {kind.value} {board.size}x{board.size}")
            print(f"Strategy: {self.strategy!r}\n")

        # A board that already breaks its constraints can never reach the goal;
        # searching it would only enumerate every completion.
        violations = find_violations(self.board, kind)
        if violations:
            if self.verbose:
                print(f"✗ Board already violates constraints at {sorted(violations)}")
            return self._result(False)

        try:
            success = self._search(self.strategy.root_parent_depth(self.board), 0)
        except _SearchTimeout:
            success = False
            self.stats['timed_out'] = True
        self.stats['elapsed'] = time.time() - self.start_time

        if self.verbose:
            if success:
                print("\n✓ Puzzle solved!")
            elif self.stats['timed_out']:
                print(f"\n✗ Gave up after {self.timeout}s")
            else:
                print("\n✗ No solution found")
            self._print_stats()

        return self._result(success)

    def _result(self, success: bool) -> SolveResult:
        if not self.stats['elapsed']:
            self.stats['elapsed'] = time.time() - self.start_time
        return SolveResult(
            kind=self.strategy.kind,
            success=success,
            events=list(self.events),
            board=self.board,
            stats=dict(self.stats),
        )

    # -------------------------------------------------------------------------
    # Depth-first search
    # -------------------------------------------------------------------------
    def _search(self, parent_depth: int, level: int) -> bool:
        strategy, board = self.strategy, self.board
        depth = strategy.depth(board, parent_depth)

        self.stats['calls'] += 1
        if self.timeout is not None and time.time() - self.start_time > self.timeout:
            raise _SearchTimeout()

        if strategy.is_complete(board, depth):
            return self.rule.is_goal(board)

        self.stats['max_depth'] = max(self.stats['max_depth'], level)

        if self.verbose and self.stats['calls'] % self.progress_interval == 0:
            print(f"  Progress: filled {board.count_filled()}/{board.size * board.size} | "
                  f"Events: {len(self.events)} | Backtracks: {self.stats['backtracks']} | Depth: {depth}")

        last = None
        for candidate in strategy.candidates(board, depth):
            row, col, value = candidate
            last = candidate

            legal = self.rule.is_legal(board, row, col, value)
            self.events.append(Try(row, col, depth, value, legal))
            self.stats['tries'] += 1

            if not legal:
                self.events.append(Reject(row, col, depth, value))
                self.stats['rejections'] += 1
                continue

            strategy.apply(board, candidate)
            self.events.append(Place(row, col, depth, value))
            self.stats['placements'] += 1

            if self.verbose and level < 3:
                print(f"{'  ' * level}Placing {value} at ({row},{col}) [depth {depth}]")

            if self._search(depth, level + 1):
                return True

            strategy.undo(board, candidate)
            self.events.append(Backtrack(row, col, depth, value))
            self.stats['backtracks'] += 1

            if self.verbose and level < 3:
                print(f"{'  ' * level}  Backtrack from ({row},{col})")

        if strategy.signals_exhaustion and last is not None:
            self.events.append(BacktrackRow(last[0], last[1], parent_depth, depth))
            self.stats['row_backtracks'] += 1

        return False

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------
    def _print_stats(self) -> None:
        """Print solving statistics."""
        print("\nSolving Statistics:")
        print(f"  Events: {len(self.events)}")
        print(f"  Tries: {self.stats['tries']}")
        print(f"  Placements: {self.stats['placements']}")
        print(f"  Rejections: {self.stats['rejections']}")
        print(f"  Backtracks: {self.stats['backtracks']}")
        if self.strategy.signals_exhaustion:
            print(f"  Exhausted levels: {self.stats['row_backtracks']}")
        print(f"  Max recursion level: {self.stats['max_depth']}")
        print(f"  Time: {self.stats['elapsed']:.3f}s")


def solve(board: Board, kind: Union[PuzzleKind, str], verbose: bool = False,
          use_warnsdorff: bool = True, timeout_seconds: Optional[float] = None) -> SolveResult:
    """Run one complete search over a copy of ``board`` and return its event log"""
    strategy = make_strategy(kind, use_warnsdorff=use_warnsdorff)
    return BacktrackingSolver(strategy, verbose=verbose, timeout_seconds=timeout_seconds).solve(board)
