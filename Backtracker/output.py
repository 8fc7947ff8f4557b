import json
from datetime import datetime
from typing import Dict, Optional

from .board import Board
from .constraints import get_rule
from .events import events_to_dicts
from .puzzle import board_to_dict
from .scoring import calculate_progress
from .solver import SolveResult
from .tree import DecisionTree, build_tree


class SolutionFormatter:
    """Formats search runs for output"""

    @staticmethod
    def format_solution_json(start: Board, result: SolveResult, include_tree: bool = False) -> Dict:
        """
        Format a search run as JSON: puzzle info, stats, boards, full event log
        and optionally the reconstructed tree
        """
        solution = {
            'puzzle_info': {
                'kind': result.kind.value,
                'size': start.size,
                'solved': result.success,
                'valid_solution': get_rule(result.kind).is_goal(result.board),
                'progress': calculate_progress(result.board, result.kind),
                'timestamp': datetime.now().isoformat()
            },
            'solving_stats': result.stats,
            'start_board': board_to_dict(start),
            'final_board': board_to_dict(result.board),
            'events': events_to_dicts(result.events),
        }

        if include_tree:
            solution['tree'] = build_tree(result.events).to_dicts()

        return solution

    @staticmethod
    def format_solution_human_readable(start: Board, result: SolveResult, max_events: int = 200) -> str:
        """
        Format a search run as human-readable text
        """
        lines = []
        lines.append("=" * 60)
        lines.append(f"{result.kind.value.upper()} SEARCH TRACE")
        lines.append("=" * 60)
        lines.append(f"\nBoard {start.size}x{start.size}, {start.count_filled()} cells filled at start")
        lines.append(f"Result: {'solved' if result.success else 'no solution'}"
                     f"{' (timed out)' if result.timed_out else ''}")
        lines.append(f"Recorded {len(result.events)} events\n")

        lines.append("RECURSION TREE:")
        lines.append("-" * 60)
        tree = build_tree(result.events)
        lines.append(tree.render(limit=max_events))

        lines.append("\n" + "=" * 60)
        lines.append("STATISTICS:")
        lines.append("-" * 60)
        for key, value in result.stats.items():
            if isinstance(value, float):
                value = f"{value:.3f}"
            lines.append(f"{key:15s} {value}")
        lines.append("=" * 60)

        return "\n".join(lines)

    @staticmethod
    def format_grid_visualization(board: Board, title: Optional[str] = None) -> str:
        """
        Create a text-based grid visualization.
        """
        lines = []
        lines.append(f"\n{title or 'GRID VISUALIZATION'}:")
        width = len(str(board.size * board.size))

        lines.append("-" * (board.size * (width + 1) + 3))
        for row in board.to_list():
            lines.append("  " + " ".join(str(v).rjust(width) if v else "·".rjust(width) for v in row))
        lines.append("-" * (board.size * (width + 1) + 3))

        return "\n".join(lines)

    @staticmethod
    def save_solution(start: Board, result: SolveResult, output_path: str, include_tree: bool = True):
        """
        Save a search run to a JSON file
        """
        solution = SolutionFormatter.format_solution_json(start, result, include_tree=include_tree)

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(solution, f, indent=2)

        print(f"\n✓ Trace saved to: {output_path}")

    @staticmethod
    def save_human_readable(start: Board, result: SolveResult, output_path: str):
        """
        Save human-readable trace to a text file
        """
        text = SolutionFormatter.format_solution_human_readable(start, result)
        text += "\n\n" + SolutionFormatter.format_grid_visualization(result.board, "FINAL BOARD")

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text)

        print(f"✓ Human-readable trace saved to: {output_path}")

    @staticmethod
    def save_tree(tree: DecisionTree, output_path: str):
        """
        Save a reconstructed tree as nested JSON records
        """
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(tree.to_dicts(), f, indent=2)

        print(f"✓ Tree saved to: {output_path}")
