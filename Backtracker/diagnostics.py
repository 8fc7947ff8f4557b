"""
Diagnostics for search runs: what the event log says about how the search went
"""

from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .events import Event, EventKind
from .scoring import calculate_progress
from .solver import SolveResult
from .tree import build_tree


def summarize_events(events: Sequence[Event]) -> Dict:
    """Counts per event kind, depth range and the busiest depths"""
    kinds = Counter(e.kind.value for e in events)
    per_depth = Counter(e.depth for e in events if e.kind == EventKind.TRY)
    placements = kinds.get(EventKind.PLACE.value, 0)
    backtracks = kinds.get(EventKind.BACKTRACK.value, 0)

    return {
        'events': len(events),
        'kinds': {k.value: kinds.get(k.value, 0) for k in EventKind},
        'min_depth': min((e.depth for e in events), default=0),
        'max_depth': max((e.depth for e in events), default=0),
        'tries_per_depth': dict(sorted(per_depth.items())),
        'busiest_depths': [d for d, _ in per_depth.most_common(3)],
        'backtrack_ratio': backtracks / placements if placements else 0.0,
    }


def check_log(events: Sequence[Event]) -> List[str]:
    """
    Problems with the ordering of a log, empty if it is well formed:
     - Place / Reject must directly follow a Try on the same cell and depth
       whose verdict matches
     - Backtrack must close the most recent open Place at its depth
    """
    problems = []
    open_places: Dict[int, Event] = {}

    for i, event in enumerate(events):
        prev = events[i - 1] if i else None

        if event.kind in (EventKind.PLACE, EventKind.REJECT):
            expected_valid = event.kind == EventKind.PLACE
            if (prev is None or prev.kind != EventKind.TRY or prev.position != event.position
                    or prev.depth != event.depth or prev.is_valid != expected_valid):
                problems.append(f"#{i} {event.kind.value} at {event.position} without a matching try")

        if event.kind == EventKind.PLACE:
            open_places[event.depth] = event
        elif event.kind == EventKind.BACKTRACK:
            placed = open_places.pop(event.depth, None)
            if placed is None or placed.position != event.position:
                problems.append(f"#{i} backtrack at {event.position} closes no open place at depth {event.depth}")

    return problems


class SolverDiagnostics:
    """Printable summaries of a finished search"""

    @staticmethod
    def print_summary(start_size: int, result: SolveResult, output_dir: Optional[Path] = None) -> Dict:
        summary = summarize_events(result.events)
        tree = build_tree(result.events)

        print(f"\n{'='*60}")
        print("SEARCH DIAGNOSTICS")
        print(f"{'='*60}")
        print(f"Puzzle: {result.kind.value} {start_size}x{start_size}")
        print(f"Events: {summary['events']}")
        for kind, count in summary['kinds'].items():
            print(f"  {kind:15s} {count}")
        print(f"Depth range: {summary['min_depth']}..{summary['max_depth']}")
        print(f"Tree: {len(tree)} nodes, {len(tree.root_ids)} roots, height {tree.height()}")
        print(f"Backtracks per placement: {summary['backtrack_ratio']:.2f}")

        if not result.success:
            completion = calculate_progress(result.board, result.kind)
            print(f"\nCompletion when stopped: {completion:.1f}%")
            if result.timed_out:
                print("\n⚠️  TIMEOUT - Didn't exhaust search space")
            else:
                print("\n⚠️  SEARCH EXHAUSTED - No solution exists from this start")
        elif summary['kinds'][EventKind.BACKTRACK.value] == 0:
            print("\n✓ Solved without a single backtrack")

        problems = check_log(result.events)
        if problems:
            print(f"\n⚠️  {len(problems)} ordering problem(s) in the log, first: {problems[0]}")

        if output_dir is not None:
            print(f"\nOutputs in: {output_dir}")
        print(f"{'='*60}\n")

        return summary
