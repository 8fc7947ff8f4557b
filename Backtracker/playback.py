"""
Step-by-step playback of an event log onto a board

The cursor is plain data passed in and handed back; nothing here keeps
state between calls. Stopping playback is just not calling step() again.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Set

from .board import Board, Position
from .events import Backtrack, Event, Place


@dataclass
class StepResult:
    cursor: int
    event: Optional[Event]
    board: Board
    violations: Set[Position]
    has_more: bool


def apply_event(board: Board, event: Event) -> None:
    """Mirror one event onto ``board`` in place; only Place and Backtrack change cells"""
    if isinstance(event, Place):
        board[event.row, event.col] = event.value
    elif isinstance(event, Backtrack):
        board[event.row, event.col] = 0


def step(events: Sequence[Event], cursor: int, board: Board) -> StepResult:
    """
    Apply ``events[cursor]`` to a copy of ``board``.

    Past the end of the log (including an empty log) this is a no-op that
    reports ``has_more=False``. The cell of a failed Try or a Reject is
    reported as the current violation.
    """
    if cursor < 0:
        raise ValueError(f"Playback cursor must be >= 0, got {cursor}")

    if cursor >= len(events):
        return StepResult(cursor=len(events), event=None, board=board.copy(),
                          violations=set(), has_more=False)

    event = events[cursor]
    updated = board.copy()
    apply_event(updated, event)

    violations: Set[Position] = set()
    if not event.is_valid and not event.is_backtracking:
        violations.add(event.position)

    return StepResult(cursor=cursor + 1, event=event, board=updated,
                      violations=violations, has_more=cursor + 1 < len(events))


def replay(board: Board, events: Sequence[Event], upto: Optional[int] = None) -> Board:
    """Board after the first ``upto`` events (all of them by default), for scrubbing"""
    result = board.copy()
    for event in events[:upto]:
        apply_event(result, event)
    return result


@dataclass
class PlaybackStats:
    states_explored: int
    total_states: int
    backtrack_count: int
    solutions_found: int
    recursion_depth: int
    time_elapsed: float = 0.0

    @property
    def efficiency(self) -> float:
        """Solutions per explored state, as a percentage"""
        if not self.states_explored:
            return 0.0
        return self.solutions_found / self.states_explored * 100


def playback_stats(events: Sequence[Event], cursor: int, success: bool,
                   time_elapsed: float = 0.0) -> PlaybackStats:
    """Statistics for the part of the log already played"""
    played = events[:cursor]
    return PlaybackStats(
        states_explored=len(played),
        total_states=len(events),
        backtrack_count=sum(1 for e in played if e.is_backtracking),
        solutions_found=1 if success else 0,
        recursion_depth=max((e.depth for e in played), default=0),
        time_elapsed=time_elapsed,
    )
