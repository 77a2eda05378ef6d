"""
daibp/elimination/jtree.py

Laying elimination cliques out as a junction tree.

The cliques produced by variable elimination are (after dropping
non-maximal ones) the maximal cliques of a triangulated graph; a maximum
spanning tree of their intersection graph, weighted by separator size,
satisfies the running-intersection property.
"""

from __future__ import annotations

from itertools import combinations
from typing import Iterable, List, Optional, Tuple

import networkx as nx

from daibp.core.var import VarSet
from daibp.topology.clustergraph import ClusterGraph


def maximal_cliques(cliques: Iterable[VarSet]) -> List[VarSet]:
    """Drop duplicate and non-maximal cliques, keeping the original order."""
    return ClusterGraph(cliques).erase_non_maximal().to_vector()


def junction_tree(cliques: Iterable[VarSet]) -> nx.Graph:
    """
    Build a junction tree over the maximal cliques.

    Args:
        cliques: Elimination cliques, e.g. ClusterGraph.var_elim(...).clusters

    Returns:
        Tree with integer nodes carrying a "clique" attribute and edges
        carrying "separator" (VarSet) and "weight" (separator size)
    """
    cls = maximal_cliques(cliques)
    g = nx.Graph()
    for k, cl in enumerate(cls):
        g.add_node(k, clique=cl)
    for a, b in combinations(range(len(cls)), 2):
        sep = cls[a] & cls[b]
        g.add_edge(a, b, separator=sep, weight=len(sep))
    if g.number_of_nodes() <= 1:
        return g
    return nx.maximum_spanning_tree(g, weight="weight")


def has_running_intersection(tree: nx.Graph) -> bool:
    """True iff, for every variable, the cliques containing it form a connected subtree."""
    if tree.number_of_nodes() == 0:
        return True
    if not nx.is_tree(tree):
        return False
    scope = VarSet(*(data["clique"] for _, data in tree.nodes(data=True)))
    for v in scope:
        holding = [n for n, data in tree.nodes(data=True) if v in data["clique"]]
        if not nx.is_connected(tree.subgraph(holding)):
            return False
    return True


def rooted_edges(tree: nx.Graph, root: Optional[int] = None) -> List[Tuple[int, int]]:
    """
    Edges of the tree as (parent, child) pairs in breadth-first order from root.

    Passing messages along these edges in order and then in reverse order is
    a collect/distribute schedule.
    """
    if tree.number_of_nodes() == 0:
        return []
    if root is None:
        root = min(tree.nodes())
    return list(nx.bfs_edges(tree, root))


def tree_width(cliques: Iterable[VarSet]) -> int:
    """Largest clique size minus one (-1 for no cliques)."""
    return max((len(cl) for cl in cliques), default=0) - 1
