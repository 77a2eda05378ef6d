"""
Topology module: bipartite graphs, factor graphs and cluster graphs.
"""

from daibp.topology.bipartite import BipartiteGraph, Neighbor
from daibp.topology.factorgraph import FactorGraph
from daibp.topology.clustergraph import ClusterGraph, EliminationChoice

__all__ = [
    "BipartiteGraph",
    "Neighbor",
    "FactorGraph",
    "ClusterGraph",
    "EliminationChoice",
]
