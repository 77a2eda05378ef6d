"""
daibp/topology/clustergraph.py

Cluster graph: a hypergraph with variables as nodes and clusters (VarSets)
as hyperedges, stored as a bipartite graph between variable indices and
cluster indices.

Invariant: variable i is a neighbor of cluster I in G iff vars[i] is in
clusters[I].

Variable elimination on a cluster graph only tracks the interactions it
creates: eliminating variable i merges every cluster containing i into the
clique Delta(i) and leaves delta(i) behind. The sequence of cliques is what
junction-tree style algorithms are built from.
"""

from __future__ import annotations

import copy
import logging
from typing import Callable, Iterable, List, Optional, Sequence, Set

from daibp.core.errors import DaiError, ErrorKind
from daibp.core.var import Var, VarSet
from daibp.topology.bipartite import BipartiteGraph

logger = logging.getLogger(__name__)

# (cluster graph, remaining variable indices) -> variable index to eliminate
EliminationChoice = Callable[["ClusterGraph", Set[int]], int]


class ClusterGraph:
    """
    Hypergraph of variable clusters.

    Attributes:
        G: Bipartite graph, variables in layer 1 and clusters in layer 2
        vars: Variables, index-addressed
        clusters: Clusters, index-addressed; no two are equal
    """

    def __init__(self, clusters: Optional[Iterable[VarSet]] = None):
        self.G = BipartiteGraph()
        self.vars: List[Var] = []
        self.clusters: List[VarSet] = []
        if clusters is not None:
            for cl in clusters:
                self.insert(cl)

    def copy(self) -> "ClusterGraph":
        return copy.deepcopy(self)

    def to_vector(self) -> List[VarSet]:
        return list(self.clusters)

    def size(self) -> int:
        """Number of clusters."""
        return self.G.nr_nodes2()

    def __len__(self) -> int:
        return self.size()

    def find_var(self, n: Var) -> int:
        """Index of variable n, or len(vars) if absent."""
        for i, v in enumerate(self.vars):
            if v == n:
                return i
        return len(self.vars)

    def Delta(self, i: int) -> VarSet:
        """Union of the clusters containing variable i."""
        return VarSet(*(self.clusters[I.node] for I in self.G.nb1(i)))

    def delta(self, i: int) -> VarSet:
        """Union of the clusters containing variable i, without i itself."""
        return self.Delta(i) - self.vars[i]

    def adj(self, i1: int, i2: int) -> bool:
        """True iff some cluster contains both variables i1 and i2."""
        for I in self.G.nb1(i1):
            if any(j.node == i2 for j in self.G.nb2(I.node)):
                return True
        return False

    def is_maximal(self, I: int) -> bool:
        """True iff cluster I is not strictly contained in another cluster."""
        if not 0 <= I < self.G.nr_nodes2():
            raise DaiError(ErrorKind.INTERNAL_ERROR, f"cluster {I} out of range")
        cl_I = self.clusters[I]
        # only clusters sharing a variable with I can contain it
        for i in self.G.nb2(I):
            for J in self.G.nb1(i.node):
                if J.node != I and cl_I <= self.clusters[J.node]:
                    return False
        return True

    def insert(self, cl: VarSet) -> None:
        """Add cluster cl unless an equal cluster exists; new variables are appended."""
        if cl in self.clusters:
            return
        self.clusters.append(cl)
        nbs = []
        for n in cl:
            i = self.find_var(n)
            if i == len(self.vars):
                self.G.add_node1()
                self.vars.append(n)
            nbs.append(i)
        self.G.add_node2(nbs)

    def _erase_cluster(self, I: int) -> None:
        del self.clusters[I]
        self.G.erase_node2(I)

    def erase_non_maximal(self) -> "ClusterGraph":
        """Erase every cluster contained in another one."""
        I = 0
        while I < self.G.nr_nodes2():
            if not self.is_maximal(I):
                self._erase_cluster(I)
            else:
                I += 1
        return self

    def erase_subsuming(self, i: int) -> "ClusterGraph":
        """Erase every cluster containing variable i."""
        while self.G.nb1(i):
            self._erase_cluster(self.G.nb1(i)[0].node)
        return self

    def _eliminate(self, i: int, result: "ClusterGraph") -> None:
        clique = self.Delta(i)
        if clique:
            result.insert(clique)
        rest = self.delta(i)
        if rest:
            self.insert(rest)
        self.erase_subsuming(i)
        self.erase_non_maximal()

    def var_elim(self, choose: EliminationChoice) -> "ClusterGraph":
        """
        Variable elimination, keeping only the interactions it creates.

        Args:
            choose: Returns the index of the next variable to eliminate, given
                the working cluster graph and the remaining variable indices

        Returns:
            New cluster graph whose clusters are the elimination cliques, in
            elimination order (up to duplicate cliques, which insert drops)
        """
        cl = self.copy()
        cl.erase_non_maximal()

        result = ClusterGraph()
        remaining = set(range(len(self.vars)))
        while remaining:
            i = choose(cl, remaining)
            if i not in remaining:
                raise DaiError(ErrorKind.INTERNAL_ERROR, f"elimination choice {i} is not a remaining variable")
            logger.debug("eliminating %s (clique %r)", cl.vars[i], cl.Delta(i))
            cl._eliminate(i, result)
            remaining.discard(i)
        return result

    def var_elim_sequence(self, elim_seq: Sequence[Var]) -> "ClusterGraph":
        """Variable elimination along a fixed variable order."""
        cl = self.copy()
        cl.erase_non_maximal()

        result = ClusterGraph()
        for n in elim_seq:
            i = cl.find_var(n)
            if i == len(cl.vars):
                raise DaiError(ErrorKind.INTERNAL_ERROR, f"{n} is not a variable of the cluster graph")
            logger.debug("eliminating %s (clique %r)", n, cl.Delta(i))
            cl._eliminate(i, result)
        return result

    def var_elim_min_fill(self) -> "ClusterGraph":
        from daibp.elimination.heuristics import elimination_choice_min_fill
        return self.var_elim(elimination_choice_min_fill)

    def __str__(self) -> str:
        return "(" + ", ".join(repr(cl) for cl in self.clusters) + ")"

    def __repr__(self) -> str:
        return f"ClusterGraph(vars={len(self.vars)}, clusters={len(self.clusters)})"
