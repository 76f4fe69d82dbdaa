from src.org_hierarchy.models import Location, Position, Rollup, TreeNode
from src.org_hierarchy.rollups import (
    compute_forest_rollups,
    compute_rollups,
    total_rollup,
)
from src.org_hierarchy.search_filter import (
    SearchResult,
    filter_forest,
    filter_tree,
    search_forest,
)
from src.org_hierarchy.tree_builder import Forest, build_tree, iter_subtree
from src.org_hierarchy.view_state import ViewState, visible_nodes

__all__ = [
    "Forest",
    "Location",
    "Position",
    "Rollup",
    "SearchResult",
    "TreeNode",
    "ViewState",
    "build_tree",
    "compute_forest_rollups",
    "compute_rollups",
    "filter_forest",
    "filter_tree",
    "iter_subtree",
    "search_forest",
    "total_rollup",
    "visible_nodes",
]
