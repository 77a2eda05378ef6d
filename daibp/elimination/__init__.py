"""
Elimination module: ordering heuristics and junction-tree layout.
"""

from daibp.elimination.heuristics import (
    elimination_cost_min_fill,
    elimination_choice_min_fill,
    elimination_cost_min_neighbors,
    elimination_choice_min_neighbors,
    elimination_cost_min_weight,
    elimination_choice_min_weight,
)
from daibp.elimination.jtree import (
    maximal_cliques,
    junction_tree,
    has_running_intersection,
    rooted_edges,
    tree_width,
)

__all__ = [
    "elimination_cost_min_fill",
    "elimination_choice_min_fill",
    "elimination_cost_min_neighbors",
    "elimination_choice_min_neighbors",
    "elimination_cost_min_weight",
    "elimination_choice_min_weight",
    "maximal_cliques",
    "junction_tree",
    "has_running_intersection",
    "rooted_edges",
    "tree_width",
]
