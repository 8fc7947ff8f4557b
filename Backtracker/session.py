"""
A puzzle session: the live board plus everything a front end needs to drive
it (solve trace, playback cursor, player moves, hints, statistics).

The session is the single owner of its board. Automatic solving works on a
copy and only reaches the live board through apply_solution().
"""

import time
from typing import Dict, List, Optional, Set, Union

from .board import Board, Position, PuzzleKind
from .events import Backtrack, Event, Place, Reject, Try
from .hints import Hint, get_hint
from .playback import PlaybackStats, playback_stats, replay, step
from .puzzle import initialize
from .scoring import UserMoveResult, apply_user_move, calculate_progress, find_violations
from .solver import SolveResult, solve
from .tree import DecisionTree, build_tree, build_user_tree


class PuzzleSession:
    def __init__(self, kind: Union[PuzzleKind, str], difficulty: str = 'easy',
                 size: Optional[int] = None, seed: Optional[int] = None,
                 use_warnsdorff: bool = True, verbose: bool = False):
        self.kind = PuzzleKind.parse(kind)
        self.difficulty = difficulty
        self.size = size
        self.seed = seed
        self.use_warnsdorff = use_warnsdorff
        self.verbose = verbose
        self.reset()

    def reset(self) -> None:
        """Fresh starting board; drops any trace and player history"""
        self.board = initialize(self.kind, self.difficulty, self.size, self.seed)
        self.givens: Optional[Board] = self.board.copy() if self.kind == PuzzleKind.SUDOKU else None

        self.result: Optional[SolveResult] = None
        self.events: List[Event] = []
        self.cursor = 0
        self.playback_board = self.board.copy()
        self.current_event: Optional[Event] = None
        self.violations: Set[Position] = set()

        self.user_moves = 0
        self.user_events: List[Event] = []
        self._user_depths: Dict[Position, int] = {}
        self.progress = calculate_progress(self.board, self.kind)
        self.max_progress = self.progress
        self.is_user_solved = False
        self.start_time = time.time()

    # -------------------------------------------------------------------------
    # Automatic solving and playback
    # -------------------------------------------------------------------------
    def solve(self, timeout_seconds: Optional[float] = None) -> SolveResult:
        """Search from the live board and rewind playback to the start of the new log"""
        self.result = solve(self.board, self.kind, verbose=self.verbose,
                            use_warnsdorff=self.use_warnsdorff, timeout_seconds=timeout_seconds)
        self.events = self.result.events
        self.cursor = 0
        self.playback_board = self.board.copy()
        self.current_event = None
        self.violations = set()
        self.start_time = time.time()
        return self.result

    def step(self) -> bool:
        """Advance playback by one event; returns whether more events remain"""
        outcome = step(self.events, self.cursor, self.playback_board)
        self.cursor = outcome.cursor
        self.playback_board = outcome.board
        self.current_event = outcome.event
        self.violations = outcome.violations
        return outcome.has_more

    def play(self, max_steps: Optional[int] = None) -> int:
        """Step until the log ends or ``max_steps`` events were played; returns the count"""
        played = 0
        while self.cursor < len(self.events) and (max_steps is None or played < max_steps):
            self.step()
            played += 1
        return played

    def seek(self, cursor: int) -> None:
        """Jump playback to any point of the log"""
        self.cursor = max(0, min(cursor, len(self.events)))
        self.playback_board = replay(self.board, self.events, self.cursor)
        self.current_event = self.events[self.cursor - 1] if self.cursor else None
        self.violations = set()

    def apply_solution(self) -> bool:
        """Copy the solved board onto the live board (instant solve)"""
        if self.result is None or not self.result.success:
            return False
        self.board = self.result.board.copy()
        self.progress = calculate_progress(self.board, self.kind)
        self.max_progress = max(self.max_progress, self.progress)
        return True

    def tree(self) -> DecisionTree:
        """Recursion tree of the events played so far"""
        return build_tree(self.events[:self.cursor])

    def full_tree(self) -> DecisionTree:
        return build_tree(self.events)

    @property
    def stats(self) -> PlaybackStats:
        success = self.result is not None and self.result.success and self.cursor == len(self.events)
        return playback_stats(self.events, self.cursor, success, time.time() - self.start_time)

    # -------------------------------------------------------------------------
    # Interactive play
    # -------------------------------------------------------------------------
    def click(self, row: int, col: int, value: Optional[int] = None) -> UserMoveResult:
        """Apply a player move to the live board; invalid moves raise and change nothing"""
        outcome = apply_user_move(self.board, (row, col), self.kind, value=value, givens=self.givens)
        self.board = outcome.board
        self.violations = outcome.violations
        self.progress = outcome.progress
        self.max_progress = max(self.max_progress, outcome.progress)
        self.is_user_solved = outcome.is_solved
        self.user_moves += 1
        self._record_user_move(outcome)
        return outcome

    def _record_user_move(self, outcome: UserMoveResult) -> None:
        row, col = outcome.position

        if outcome.removed_value and outcome.position in self._user_depths:
            depth = self._user_depths.pop(outcome.position)
            self.user_events.append(Backtrack(row, col, depth, outcome.removed_value))

        if outcome.placed_value:
            depth = max(self._user_depths.values(), default=-1) + 1
            valid = outcome.position not in outcome.violations
            self.user_events.append(Try(row, col, depth, outcome.placed_value, valid))
            if valid:
                self.user_events.append(Place(row, col, depth, outcome.placed_value))
                self._user_depths[outcome.position] = depth
            else:
                self.user_events.append(Reject(row, col, depth, outcome.placed_value))

    def user_tree(self) -> DecisionTree:
        return build_user_tree(self.user_events)

    def hint(self) -> Optional[Hint]:
        return get_hint(self.board, self.kind, verbose=self.verbose)

    def current_violations(self) -> Set[Position]:
        return find_violations(self.board, self.kind)

    def __repr__(self):
        return (f"PuzzleSession(kind={self.kind.value}, size={self.board.size}, "
                f"events={len(self.events)}, cursor={self.cursor}, user_moves={self.user_moves})")
