"""
Recursion tree reconstruction from a flat event log

The search engine records no structure, only events. The tree is rebuilt
here with a parent stack indexed by depth. Stack entries are Place nodes
with strictly increasing depth, and every new node is attached to the stack
top, so a pre-order walk of the result always yields the input events in
their original order.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .events import Event, EventKind, describe_event, event_to_dict


@dataclass
class TreeNode:
    """One event in the tree; children are ids into the owning DecisionTree"""
    id: int
    event: Event
    depth: int
    children: List[int] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.event.is_valid

    @property
    def is_backtrack(self) -> bool:
        return self.event.is_backtracking

    @property
    def kind(self) -> EventKind:
        return self.event.kind


class DecisionTree:
    """Arena of TreeNodes; node ids are the positions of their events in the log"""

    def __init__(self):
        self.nodes: List[TreeNode] = []
        self.root_ids: List[int] = []

    def _attach(self, event: Event, parent: Optional[TreeNode]) -> TreeNode:
        node = TreeNode(id=len(self.nodes), event=event, depth=event.depth)
        self.nodes.append(node)
        if parent is None:
            self.root_ids.append(node.id)
        else:
            parent.children.append(node.id)
        return node

    @property
    def roots(self) -> List[TreeNode]:
        return [self.nodes[i] for i in self.root_ids]

    def node(self, node_id: int) -> TreeNode:
        return self.nodes[node_id]

    def children(self, node: TreeNode) -> List[TreeNode]:
        return [self.nodes[i] for i in node.children]

    def walk(self) -> Iterator[Tuple[TreeNode, int]]:
        """Pre-order traversal yielding (node, nesting level)"""
        pending = [(i, 0) for i in reversed(self.root_ids)]
        while pending:
            node_id, level = pending.pop()
            node = self.nodes[node_id]
            yield node, level
            for child in reversed(node.children):
                pending.append((child, level + 1))

    def flatten(self) -> List[Event]:
        """Events in depth-first pre-order"""
        return [node.event for node, _ in self.walk()]

    def height(self) -> int:
        return max((level + 1 for _, level in self.walk()), default=0)

    def __len__(self):
        return len(self.nodes)

    def __eq__(self, other) -> bool:
        return isinstance(other, DecisionTree) and self.to_dicts() == other.to_dicts()

    def __repr__(self):
        return f"DecisionTree(nodes={len(self.nodes)}, roots={len(self.root_ids)})"

    # -------------------------------------------------------------------------
    # Serialization / display
    # -------------------------------------------------------------------------
    def _node_dict(self, node: TreeNode) -> Dict[str, Any]:
        return {
            'id': node.id,
            'event': event_to_dict(node.event),
            'depth': node.depth,
            'is_valid': node.is_valid,
            'is_backtrack': node.is_backtrack,
            'children': [self._node_dict(c) for c in self.children(node)],
        }

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [self._node_dict(root) for root in self.roots]

    def render(self, max_level: Optional[int] = None, limit: Optional[int] = None) -> str:
        """Indented outline of the tree, optionally cut at a nesting level or node count"""
        lines = []
        for node, level in self.walk():
            if max_level is not None and level > max_level:
                continue
            if limit is not None and len(lines) >= limit:
                lines.append("...")
                break
            marker = "✓" if node.is_valid else ("↩" if node.is_backtrack else "✗")
            lines.append(f"{'  ' * level}{marker} {describe_event(node.event)}")
        return "\n".join(lines)


def build_tree(events: Sequence[Event]) -> DecisionTree:
    """
    Rebuild the recursion tree for a log prefix.

    - Try: child of the stack top
    - Place: drop entries at depth >= D, child of the top, then pushed
    - Reject: drop entries at depth >= D, child of the top
    - Backtrack / BacktrackRow: drop entries deeper than D, child of the top,
      then drop entries at or beyond the backtracked depth

    Pure function of ``events``: calling it twice on the same prefix gives
    equal trees.
    """
    tree = DecisionTree()
    stack: List[TreeNode] = []

    for event in events:
        depth = event.depth

        if event.kind in (EventKind.PLACE, EventKind.REJECT):
            while stack and stack[-1].depth >= depth:
                stack.pop()
        elif event.is_backtracking:
            while stack and stack[-1].depth > depth:
                stack.pop()

        node = tree._attach(event, stack[-1] if stack else None)

        if event.kind == EventKind.PLACE:
            stack.append(node)
        elif event.is_backtracking:
            while stack and stack[-1].depth >= event.backtracked_depth:
                stack.pop()

    return tree


def build_user_tree(user_events: Sequence[Event]) -> DecisionTree:
    """Tree of the player's own moves, built by the same rules as the search tree"""
    return build_tree(user_events)
