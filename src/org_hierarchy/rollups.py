"""Bottom-up rollups of salary and headcount over hierarchy subtrees."""

import logging
from typing import Dict, Iterable, Optional

from src.org_hierarchy.models import Rollup, TreeNode

logger = logging.getLogger(__name__)


def compute_rollups(
    node: TreeNode,
    into: Optional[Dict[str, Rollup]] = None,
) -> Rollup:
    """Compute the rollup of *node* and every descendant.

    Post-order: a node's rollup is its own contribution plus the rollups of
    its children. The walk uses an explicit stack, and each node is claimed
    by the first parent that reaches it. A node reached again (only possible
    if the input was corrupted into a cycle or a shared child) is treated as
    already counted, so totals are never doubled and the walk terminates.

    Args:
        node: Root of the subtree to aggregate.
        into: Optional map that receives ``{position_id: Rollup}`` for every
            node in the subtree.

    Returns:
        The rollup of *node*.
    """
    results: Dict[int, Rollup] = {}
    owner: Dict[int, int] = {id(node): 0}
    stack = [(node, False)]

    while stack:
        current, children_done = stack.pop()
        if children_done:
            total = Rollup.for_position(current.position)
            for child in current.children:
                if owner.get(id(child)) == id(current):
                    total = total + results[id(child)]
            results[id(current)] = total
            if into is not None:
                into[current.node_id] = total
            continue

        stack.append((current, True))
        for child in current.children:
            if id(child) in owner:
                logger.debug(
                    "Node %s already counted, skipping under %s",
                    child.node_id, current.node_id,
                )
                continue
            owner[id(child)] = id(current)
            stack.append((child, False))

    return results[id(node)]


def compute_forest_rollups(roots: Iterable[TreeNode]) -> Dict[str, Rollup]:
    """Rollups for every node of a forest, keyed by position id."""
    rollups: Dict[str, Rollup] = {}
    count = 0
    for root in roots:
        compute_rollups(root, into=rollups)
        count += 1
    logger.debug(
        "Computed rollups for %d nodes across %d roots", len(rollups), count
    )
    return rollups


def total_rollup(roots: Iterable[TreeNode]) -> Rollup:
    """Aggregate rollup across all roots of a forest."""
    total = Rollup()
    for root in roots:
        total = total + compute_rollups(root)
    return total
