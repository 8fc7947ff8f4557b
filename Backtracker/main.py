#!/usr/bin/env python3
"""
Backtracking Visualizer - Main Entry Point

Usage:
    python -m Backtracker.main sudoku [easy|medium|hard]
    python -m Backtracker.main nqueens 8
    python -m Backtracker.main knights 5
    python -m Backtracker.main data/json/sudoku_easy.json
    python -m Backtracker.main --play nqueens 4
    python -m Backtracker.main --compare 6
    python -m Backtracker.main   # Solves all puzzles in data/json/
"""

import sys
import time
import traceback
from pathlib import Path
from typing import List, Optional, Tuple

from .board import Board, PuzzleKind
from .diagnostics import SolverDiagnostics
from .errors import PuzzleError
from .events import describe_event
from .output import SolutionFormatter
from .puzzle import DIFFICULTIES, initialize, load_puzzle
from .session import PuzzleSession
from .solver import SolveResult, solve
from .tree import build_tree

# ============================================================================
# CONFIGURATION
# ============================================================================
PUZZLE_PATH = "data/json/sudoku_easy.json"   # Puzzle to solve by default
OUTPUT_DIR = "data/debug"                    # Base output directory
SOLVE_ALL = True                             # Solve every JSON puzzle in data/json/
VERBOSE = True                               # Print the search trace and diagnostics for single puzzles

USE_WARNSDORFF = True
# Order knight moves by fewest onward moves (Warnsdorff's rule)
# - True: tours on 5x5..8x8 are found with little or no backtracking
# - False: plain offset order, only practical on small boards

TIMEOUT_SECONDS = 60
# Maximum time to spend on a single search

SAVE_TREE = True
# Include the reconstructed recursion tree in solution.json and write tree.json

PLAYBACK_STEPS = 40
# Events printed by --play before the final board is shown
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent


def solve_puzzle(board: Board, kind: PuzzleKind, name: str, output_dir: Optional[str] = None,
                 verbose: bool = True, use_warnsdorff: bool = USE_WARNSDORFF,
                 timeout_seconds: float = TIMEOUT_SECONDS) -> Tuple[bool, Optional[SolveResult]]:
    """
    Solve one board and save the trace.

    Args:
        board: Starting board
        kind: Puzzle kind of the board
        name: Label used for the output directory
        output_dir: Directory for output files (default: data/debug/<name>/)
        verbose: Print detailed solving progress
        use_warnsdorff: Enable Warnsdorff ordering for Knight's Tour
        timeout_seconds: Maximum solving time in seconds
    """
    if output_dir is None:
        output_dir = PROJECT_ROOT / OUTPUT_DIR / name
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"\n{'='*60}")
    print(f"Solving: {name} ({kind.value} {board.size}x{board.size})")
    print(f"Output directory: {output_dir}")
    print(f"{'='*60}")

    try:
        if verbose:
            print(SolutionFormatter.format_grid_visualization(board, "START BOARD"))
            print()

        result = solve(board, kind, verbose=verbose, use_warnsdorff=use_warnsdorff,
                       timeout_seconds=timeout_seconds)

        SolutionFormatter.save_solution(board, result, str(output_dir / "solution.json"), include_tree=SAVE_TREE)
        SolutionFormatter.save_human_readable(board, result, str(output_dir / "solution.txt"))
        if SAVE_TREE:
            SolutionFormatter.save_tree(build_tree(result.events), str(output_dir / "tree.json"))

        if result.success:
            print(f"\n{'='*60}")
            print("SUCCESS! Puzzle solved ✓")
            print(f"{'='*60}")
            if verbose:
                print(SolutionFormatter.format_grid_visualization(result.board, "SOLUTION"))
        else:
            print(f"\n{'='*60}")
            print("FAILED: No solution from this start ✗")
            print(f"{'='*60}")
            if result.timed_out:
                print(f"\n💡 Tip: The search hit the {timeout_seconds}s limit; try a smaller board")
            elif kind == PuzzleKind.KNIGHTS and not use_warnsdorff:
                print("\n💡 Tip: Try setting USE_WARNSDORFF = True")

        if verbose:
            SolverDiagnostics.print_summary(board.size, result, output_dir)

        return result.success, result

    except KeyboardInterrupt:
        print(f"\n\n{'='*60}")
        print("⚠ Solving interrupted by user (Ctrl+C)")
        print(f"{'='*60}")
        return False, None

    except PuzzleError as e:
        print(f"\nError while solving {name}: {e}")
        traceback.print_exc()
        return False, None


def solve_puzzle_file(input_path: str, output_dir: Optional[str] = None, verbose: bool = True,
                      use_warnsdorff: bool = USE_WARNSDORFF,
                      timeout_seconds: float = TIMEOUT_SECONDS) -> Tuple[bool, Optional[SolveResult]]:
    """Load a JSON fixture and solve it"""
    fixture = load_puzzle(input_path)
    return solve_puzzle(fixture.board, fixture.kind, fixture.name, output_dir=output_dir, verbose=verbose,
                        use_warnsdorff=use_warnsdorff, timeout_seconds=timeout_seconds)


def solve_all_puzzles(data_dir: Optional[str] = None, output_dir: Optional[str] = None,
                      use_warnsdorff: bool = USE_WARNSDORFF,
                      timeout_seconds: float = TIMEOUT_SECONDS):
    """
    Solve all puzzles in data/json/ (or a specified directory)
    """
    if data_dir is None:
        data_dir = PROJECT_ROOT / "data" / "json"

    data_path = Path(data_dir)
    if not data_path.exists():
        print(f"Error: Directory not found: {data_dir}")
        return []

    json_files = sorted(data_path.glob("*.json"))
    if not json_files:
        print(f"No JSON puzzles found in {data_dir}")
        return []

    print(f"\nFound {len(json_files)} puzzle(s) to solve")
    print("\nSolver Configuration:")
    print(f"  Warnsdorff ordering: {'ON' if use_warnsdorff else 'OFF'}")
    print(f"  Timeout per puzzle: {timeout_seconds}s\n")

    results = []

    for i, json_file in enumerate(json_files, 1):
        print(f"\n[{i}/{len(json_files)}] Solving {json_file.name}...")

        solved, result = solve_puzzle_file(
            str(json_file),
            output_dir=output_dir,
            verbose=False,
            use_warnsdorff=use_warnsdorff,
            timeout_seconds=timeout_seconds
        )

        results.append({
            'file': json_file.name,
            'solved': bool(solved),
            'events': len(result.events) if result else None,
            'backtracks': result.stats['backtracks'] if result else None,
            'elapsed': result.stats['elapsed'] if result else None,
        })

        status = "✓ SOLVED" if solved else "✗ FAILED"
        print(f"  {status}")

    # ---------------------------
    # Print summary
    # ---------------------------
    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    solved_count = sum(1 for r in results if r['solved'])
    solve_rate = solved_count / len(results) * 100

    for r in results:
        status = "✓" if r['solved'] else "✗"
        print(f"{status} {r['file']:30s}", end="")
        if r['events'] is not None:
            print(f" - {r['events']} events, {r['backtracks']} backtracks, {r['elapsed']:.2f}s")
        else:
            print(" - Error")

    print(f"\n{'='*60}")
    print(f"Solved: {solved_count}/{len(results)} ({solve_rate:.1f}%)")
    print(f"{'='*60}")
    return results


def run_comparison_test(size: int, timeout_seconds: float = 20):
    """
    Knight's Tour with and without Warnsdorff ordering on the same board.
    """
    board = initialize(PuzzleKind.KNIGHTS, size=size)
    configs = [('Warnsdorff', True), ('Offset order', False)]

    print(f"\n{'='*60}")
    print(f"COMPARISON TEST: Knight's Tour {size}x{size}")
    print(f"{'='*60}\n")

    rows = []
    for label, use_warnsdorff in configs:
        print(f"--- Testing: {label} ---")
        result = solve(board, PuzzleKind.KNIGHTS, use_warnsdorff=use_warnsdorff, timeout_seconds=timeout_seconds)
        status = "SOLVED" if result.success else ("TIMEOUT" if result.timed_out else "FAILED")
        rows.append((label, status, len(result.events), result.stats['backtracks'], result.stats['elapsed']))
        print(f"{status} - {result.stats['backtracks']} backtracks")

    print(f"\n{'Configuration':<15} {'Result':<10} {'Events':<10} {'Backtr.':<10} {'Time':<8}")
    print(f"{'-'*15} {'-'*10} {'-'*10} {'-'*10} {'-'*8}")
    for label, status, events, backtracks, elapsed in rows:
        print(f"{label:<15} {status:<10} {events:<10} {backtracks:<10} {elapsed:<8.2f}")
    print(f"\n{'='*60}")
    return rows


def run_playback(kind: PuzzleKind, difficulty: str = 'easy', size: Optional[int] = None,
                 steps: int = PLAYBACK_STEPS, delay: float = 0.0):
    """Solve, then print the first events one step at a time"""
    session = PuzzleSession(kind, difficulty=difficulty, size=size)
    result = session.solve(timeout_seconds=TIMEOUT_SECONDS)
    print(f"\n{kind.value}: {len(result.events)} events, {'solved' if result.success else 'unsolved'}\n")

    while session.cursor < min(steps, len(session.events)):
        has_more = session.step()
        print(f"{session.cursor:5d}  {describe_event(session.current_event)}")
        if delay:
            time.sleep(delay)
        if not has_more:
            break

    print(SolutionFormatter.format_grid_visualization(session.playback_board, f"BOARD AFTER {session.cursor} EVENTS"))
    print("\nTree so far:")
    print(session.tree().render(limit=steps))
    stats = session.stats
    print(f"\nExplored {stats.states_explored}/{stats.total_states} states, "
          f"{stats.backtrack_count} backtracks, depth {stats.recursion_depth}")
    return session


def _parse_target(args: List[str]) -> Tuple[PuzzleKind, str, Optional[int]]:
    """<kind> [difficulty|size]"""
    kind = PuzzleKind.parse(args[0])
    difficulty, size = 'easy', None
    if len(args) > 1:
        if args[1].isdigit():
            size = int(args[1])
        elif args[1] in DIFFICULTIES:
            difficulty = args[1]
        else:
            raise ValueError(f"Expected a difficulty {DIFFICULTIES} or a board size, got {args[1]!r}")
    return kind, difficulty, size


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = list(sys.argv[1:] if argv is None else argv)

    try:
        if args:
            command = args[0]

            if command in ("--compare", "-c"):
                size = int(args[1]) if len(args) > 1 else 6
                run_comparison_test(size)
                return 0

            if command in ("--play", "-p"):
                if len(args) < 2:
                    print("Usage: python -m Backtracker.main --play <kind> [difficulty|size]")
                    return 1
                kind, difficulty, size = _parse_target(args[1:])
                run_playback(kind, difficulty, size)
                return 0

            if command.endswith(".json"):
                input_file = Path(command)
                if not input_file.is_absolute():
                    input_file = PROJECT_ROOT / input_file
                if not input_file.exists():
                    print(f"Error: File not found: {input_file}")
                    return 1
                solved, _ = solve_puzzle_file(str(input_file), verbose=VERBOSE)
                return 0 if solved else 2

            kind, difficulty, size = _parse_target(args)
            board = initialize(kind, difficulty, size)
            name = f"{kind.value}_{size or difficulty}"
            solved, _ = solve_puzzle(board, kind, name, verbose=VERBOSE)
            return 0 if solved else 2

        if SOLVE_ALL:
            print("SOLVE_ALL mode enabled - solving all puzzles in data/json/")
            solve_all_puzzles()
            return 0

        print(f"Using configured PUZZLE_PATH: {PUZZLE_PATH}")
        solved, _ = solve_puzzle_file(str(PROJECT_ROOT / PUZZLE_PATH), verbose=VERBOSE)
        return 0 if solved else 2

    except (PuzzleError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
