"""
daibp/elimination/heuristics.py

Greedy elimination-order heuristics for ClusterGraph.var_elim.

A heuristic is any callable (cluster graph, remaining variable indices) ->
variable index. Ties are broken by the lowest variable index so that
orderings are reproducible.
"""

from __future__ import annotations

from typing import Set

from daibp.core.errors import DaiError, ErrorKind
from daibp.topology.clustergraph import ClusterGraph


def elimination_cost_min_fill(cl: ClusterGraph, i: int) -> int:
    """
    Cost of eliminating variable i under the MinFill criterion.

    The adjacency graph connects two variables iff some cluster contains both.
    The cost is the number of edges eliminating i would add to it, i.e. the
    number of pairs of neighbors of i that are not yet adjacent.
    """
    nbs = sorted(cl.G.delta1(i))
    cost = 0
    for k, i1 in enumerate(nbs):
        for i2 in nbs[k + 1:]:
            if not cl.adj(i1, i2):
                cost += 1
    return cost


def elimination_choice_min_fill(cl: ClusterGraph, remaining: Set[int]) -> int:
    """Remaining variable with the lowest MinFill cost (lowest index on ties)."""
    if not remaining:
        raise DaiError(ErrorKind.INTERNAL_ERROR, "no variables left to eliminate")
    best = None
    best_cost = None
    for i in sorted(remaining):
        c = elimination_cost_min_fill(cl, i)
        if best_cost is None or c < best_cost:
            best, best_cost = i, c
    return best


def elimination_cost_min_neighbors(cl: ClusterGraph, i: int) -> int:
    """Number of variables adjacent to i."""
    return len(cl.G.delta1(i))


def elimination_choice_min_neighbors(cl: ClusterGraph, remaining: Set[int]) -> int:
    """Remaining variable with the fewest neighbors (lowest index on ties)."""
    if not remaining:
        raise DaiError(ErrorKind.INTERNAL_ERROR, "no variables left to eliminate")
    return min(sorted(remaining), key=lambda i: elimination_cost_min_neighbors(cl, i))


def elimination_cost_min_weight(cl: ClusterGraph, i: int) -> int:
    """Number of joint states of the clique Delta(i)."""
    return cl.Delta(i).nr_states()


def elimination_choice_min_weight(cl: ClusterGraph, remaining: Set[int]) -> int:
    """Remaining variable whose elimination clique has the fewest states (lowest index on ties)."""
    if not remaining:
        raise DaiError(ErrorKind.INTERNAL_ERROR, "no variables left to eliminate")
    return min(sorted(remaining), key=lambda i: elimination_cost_min_weight(cl, i))
