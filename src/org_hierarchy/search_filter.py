"""Subtree-preserving search over a position hierarchy.

A node survives the search when it matches the query itself or when any of
its descendants does, so every match keeps its chain of ancestors.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from src.org_hierarchy.models import Rollup, TreeNode
from src.org_hierarchy.rollups import compute_forest_rollups

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Pruned forest with rollups recomputed for its new shape."""

    roots: List[TreeNode] = field(default_factory=list)
    rollups: Dict[str, Rollup] = field(default_factory=dict)
    match_ids: List[str] = field(default_factory=list)


def _normalize_query(query: Optional[str]) -> str:
    return (query or "").strip().lower()


def node_matches(node: TreeNode, query: str) -> bool:
    """Whether the node's own fields contain *query*, case-insensitively."""
    q = _normalize_query(query)
    if not q:
        return False
    p = node.position
    return any(
        value and q in value.lower()
        for value in (
            p.incumbent_name,
            p.position_title,
            p.classification,
            p.position_id,
        )
    )


def _prune(node: TreeNode, q: str, match_ids: List[str]) -> Optional[TreeNode]:
    """Post-order prune of one subtree; each node is decided exactly once."""
    kept: Dict[int, TreeNode] = {}
    decided = set()
    stack = [(node, False)]

    while stack:
        current, children_done = stack.pop()
        if not children_done:
            if id(current) in decided:
                continue
            decided.add(id(current))
            stack.append((current, True))
            stack.extend(
                (child, False)
                for child in current.children
                if id(child) not in decided
            )
            continue

        kept_children = [
            kept[id(child)] for child in current.children if id(child) in kept
        ]
        is_match = node_matches(current, q)
        if is_match:
            match_ids.append(current.node_id)
        if is_match or kept_children:
            kept[id(current)] = TreeNode(
                position=current.position, children=kept_children
            )

    return kept.get(id(node))


def filter_tree(node: TreeNode, query: Optional[str]) -> Optional[TreeNode]:
    """Prune *node*'s subtree down to matches and their ancestors.

    An empty or whitespace-only query returns *node* itself, unchanged.
    Otherwise a new tree is returned in which every kept node keeps only its
    kept children (order preserved); ``None`` when nothing in the subtree
    matches. The input tree is never modified.
    """
    q = _normalize_query(query)
    if not q:
        return node
    return _prune(node, q, [])


def filter_forest(roots: Iterable[TreeNode], query: Optional[str]) -> List[TreeNode]:
    """Apply :func:`filter_tree` to every root, dropping empty results."""
    roots = list(roots)
    q = _normalize_query(query)
    if not q:
        return roots
    pruned = []
    for root in roots:
        result = _prune(root, q, [])
        if result is not None:
            pruned.append(result)
    return pruned


def search_forest(roots: Iterable[TreeNode], query: Optional[str]) -> SearchResult:
    """Filter a forest and recompute rollups on the pruned result.

    Rollups computed on the unfiltered forest are not reused: subtree
    membership changes when nodes are pruned.
    """
    roots = list(roots)
    q = _normalize_query(query)
    match_ids: List[str] = []

    if not q:
        pruned = roots
    else:
        pruned = []
        for root in roots:
            result = _prune(root, q, match_ids)
            if result is not None:
                pruned.append(result)

    rollups = compute_forest_rollups(pruned)
    logger.debug(
        "Search %r: %d match(es), %d of %d roots kept",
        q, len(match_ids), len(pruned), len(roots),
    )
    return SearchResult(roots=pruned, rollups=rollups, match_ids=match_ids)
