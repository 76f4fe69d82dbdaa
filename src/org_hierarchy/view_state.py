"""Expand/collapse and selection state for the hierarchy view.

State is keyed by position id, never by node object, so it survives the
tree being rebuilt after every filter or search change.
"""

from typing import Iterable, Iterator, List, Optional, Set, Tuple

from src.org_hierarchy.models import TreeNode


class ViewState:
    """Collapsed node ids plus at most one selected node id.

    A node not in the collapsed set is expanded.
    """

    def __init__(
        self,
        collapsed: Optional[Iterable[str]] = None,
        selected: Optional[str] = None,
    ):
        self._collapsed: Set[str] = set(collapsed or ())
        self._selected = selected

    @property
    def collapsed_ids(self) -> frozenset:
        return frozenset(self._collapsed)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected

    def is_collapsed(self, node_id: str) -> bool:
        return node_id in self._collapsed

    def is_expanded(self, node_id: str) -> bool:
        return node_id not in self._collapsed

    def toggle(self, node_id: str):
        """Flip *node_id* between collapsed and expanded."""
        if node_id in self._collapsed:
            self._collapsed.discard(node_id)
        else:
            self._collapsed.add(node_id)

    def expand_all(self):
        """Expand every node."""
        self._collapsed.clear()

    def collapse_all(self, ids_with_children: Iterable[str]):
        """Collapse exactly the given ids (nodes that have children)."""
        self._collapsed = set(ids_with_children)

    def select(self, node_id: Optional[str]):
        """Replace the selection; ``None`` clears it."""
        self._selected = node_id


def visible_nodes(
    roots: Iterable[TreeNode], view_state: ViewState
) -> Iterator[Tuple[int, TreeNode]]:
    """Yield ``(depth, node)`` for every node shown under *view_state*.

    Children of a collapsed node are skipped; the collapsed node itself is
    still shown.
    """
    stack: List[Tuple[int, TreeNode]] = [(0, r) for r in reversed(list(roots))]
    seen = set()
    while stack:
        depth, node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield depth, node
        if view_state.is_expanded(node.node_id):
            stack.extend((depth + 1, c) for c in reversed(node.children))
