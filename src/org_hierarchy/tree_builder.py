"""Build a reporting hierarchy from flat position records.

Each position names the position it reports to. The builder turns that
back-reference into an owning tree: every node owns its children, and the
reference is only used as a join key while attaching nodes.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List

from src.org_hierarchy.models import Position, TreeNode

logger = logging.getLogger(__name__)


def _seniority_key(node: TreeNode) -> int:
    """Sort key placing senior (higher level) roles first."""
    return -(node.position.classification_level or 0)


def iter_subtree(node: TreeNode) -> Iterator[TreeNode]:
    """Yield *node* and its descendants in pre-order.

    Each node is yielded at most once, even if the structure was corrupted
    into a cycle.
    """
    seen = set()
    stack = [node]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        # Reverse so children come out in their stored order
        stack.extend(reversed(current.children))


@dataclass
class Forest:
    """Ordered root nodes plus an id -> node lookup."""

    roots: List[TreeNode] = field(default_factory=list)
    by_id: Dict[str, TreeNode] = field(default_factory=dict)

    def node_count(self) -> int:
        """Number of nodes reachable from the roots."""
        return sum(1 for root in self.roots for _ in iter_subtree(root))

    def ids_with_children(self) -> List[str]:
        """Ids of every reachable node that has at least one child."""
        return [
            node.node_id
            for root in self.roots
            for node in iter_subtree(root)
            if node.has_children
        ]

    def ancestors_of(self, position_id: str) -> List[str]:
        """Ids of the ancestors of *position_id*, direct parent first.

        Stops at a root, at a reference that does not resolve, or when a
        reference would revisit an id already on the chain.
        """
        node = self.by_id.get(position_id)
        if node is None:
            return []

        ancestors: List[str] = []
        seen = {position_id}
        parent_id = node.position.reporting_to_position_id
        while parent_id and parent_id in self.by_id and parent_id not in seen:
            ancestors.append(parent_id)
            seen.add(parent_id)
            parent_id = self.by_id[parent_id].position.reporting_to_position_id
        return ancestors


def build_tree(positions: Iterable[Position]) -> Forest:
    """Convert flat positions into a forest of owning tree nodes.

    Pass 1 creates one node per position. Pass 2 attaches each node to its
    parent when ``reporting_to_position_id`` resolves to a known node;
    otherwise the node becomes a root. References to ids missing from the
    input (e.g. after filtering by unit) are roots, not errors.

    Children are then ordered by descending classification level, ties kept
    in input order.

    Args:
        positions: Position records with unique ``position_id`` values.
            When an id repeats, the first occurrence wins.

    Returns:
        :class:`Forest` with the ordered roots and the id lookup.
    """
    by_id: Dict[str, TreeNode] = {}
    order: List[TreeNode] = []
    for position in positions:
        if position.position_id in by_id:
            logger.warning(
                "Duplicate position id %s ignored", position.position_id
            )
            continue
        node = TreeNode(position=position)
        by_id[position.position_id] = node
        order.append(node)

    roots: List[TreeNode] = []
    orphaned = 0
    for node in order:
        parent_id = node.position.reporting_to_position_id
        parent = by_id.get(parent_id) if parent_id else None
        if parent is None or parent is node:
            if parent_id:
                orphaned += 1
            roots.append(node)
        else:
            parent.children.append(node)

    for node in order:
        if len(node.children) > 1:
            node.children.sort(key=_seniority_key)

    forest = Forest(roots=roots, by_id=by_id)

    reachable = forest.node_count()
    if reachable < len(order):
        logger.warning(
            "%d position(s) unreachable from any root (cyclic reporting)",
            len(order) - reachable,
        )

    logger.debug(
        "Built hierarchy: %d positions, %d roots (%d with unresolved parent)",
        len(order), len(roots), orphaned,
    )
    return forest
