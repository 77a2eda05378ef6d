"""
daibp/topology/bipartite.py

Two-layer graph with index-stable adjacency lists.

Layer-1 nodes are variables; layer-2 nodes are factors or clusters. Each
adjacency entry is a Neighbor recording where the edge sits in both lists, so
message arrays indexed by (node, local slot) can find the reverse slot in O(1).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Set

import networkx as nx
import numpy as np
import scipy.sparse as sp
from scipy.sparse.csgraph import connected_components

from daibp.core.errors import DaiError, ErrorKind


@dataclass
class Neighbor:
    """
    One entry of an adjacency list.

    Attributes:
        iter: Position of this entry in its owner's list
        node: Index of the neighboring node (in the other layer)
        dual: Position of the owner in the neighbor's list
    """
    iter: int
    node: int
    dual: int

    def __int__(self) -> int:
        return self.node


class BipartiteGraph:
    """Bipartite graph between layer-1 and layer-2 nodes."""

    def __init__(self, nr1: int = 0, edges: Iterable = ()):
        self._nb1: List[List[Neighbor]] = [[] for _ in range(nr1)]
        self._nb2: List[List[Neighbor]] = []
        for n1, n2 in edges:
            while n2 >= len(self._nb2):
                self._nb2.append([])
            self.add_edge(n1, n2)

    def _check1(self, n1: int) -> None:
        if not 0 <= n1 < len(self._nb1):
            raise DaiError(ErrorKind.INTERNAL_ERROR, f"layer-1 node {n1} out of range")

    def _check2(self, n2: int) -> None:
        if not 0 <= n2 < len(self._nb2):
            raise DaiError(ErrorKind.INTERNAL_ERROR, f"layer-2 node {n2} out of range")

    def nr_nodes1(self) -> int:
        return len(self._nb1)

    def nr_nodes2(self) -> int:
        return len(self._nb2)

    def nr_edges(self) -> int:
        return sum(len(nbs) for nbs in self._nb1)

    def nb1(self, n1: int) -> List[Neighbor]:
        """Neighbors (layer-2 nodes) of layer-1 node n1."""
        self._check1(n1)
        return self._nb1[n1]

    def nb2(self, n2: int) -> List[Neighbor]:
        """Neighbors (layer-1 nodes) of layer-2 node n2."""
        self._check2(n2)
        return self._nb2[n2]

    def add_node1(self) -> int:
        self._nb1.append([])
        return len(self._nb1) - 1

    def add_node2(self, nbs: Iterable[int] = ()) -> int:
        """Add a layer-2 node connected to the given layer-1 nodes."""
        n2 = len(self._nb2)
        self._nb2.append([])
        for n1 in nbs:
            self.add_edge(n1, n2)
        return n2

    def add_edge(self, n1: int, n2: int, check: bool = True) -> None:
        """Connect n1 and n2; with check, an existing edge is left alone."""
        self._check1(n1)
        self._check2(n2)
        if check and any(nb.node == n2 for nb in self._nb1[n1]):
            return
        it1 = len(self._nb1[n1])
        it2 = len(self._nb2[n2])
        self._nb1[n1].append(Neighbor(iter=it1, node=n2, dual=it2))
        self._nb2[n2].append(Neighbor(iter=it2, node=n1, dual=it1))

    def erase_node2(self, n2: int) -> None:
        """Remove layer-2 node n2; nodes above it shift down by one."""
        self._check2(n2)
        del self._nb2[n2]
        for n1, nbs in enumerate(self._nb1):
            kept = [nb for nb in nbs if nb.node != n2]
            for it, nb in enumerate(kept):
                if nb.node > n2:
                    nb.node -= 1
                nb.iter = it
            self._nb1[n1] = kept
        self._fix_duals()

    def _fix_duals(self) -> None:
        for n1, nbs in enumerate(self._nb1):
            for nb in nbs:
                for nb2 in self._nb2[nb.node]:
                    if nb2.node == n1:
                        nb.dual = nb2.iter
                        nb2.dual = nb.iter
                        break

    def delta1(self, n1: int) -> Set[int]:
        """Layer-1 nodes sharing a layer-2 neighbor with n1, excluding n1."""
        result = set()
        for I in self.nb1(n1):
            for j in self._nb2[I.node]:
                result.add(j.node)
        result.discard(n1)
        return result

    def delta2(self, n2: int) -> Set[int]:
        """Layer-2 nodes sharing a layer-1 neighbor with n2, excluding n2."""
        result = set()
        for i in self.nb2(n2):
            for J in self._nb1[i.node]:
                result.add(J.node)
        result.discard(n2)
        return result

    def _adjacency(self) -> sp.csr_matrix:
        n1 = len(self._nb1)
        n = n1 + len(self._nb2)
        rows, cols = [], []
        for i, nbs in enumerate(self._nb1):
            for nb in nbs:
                rows.append(i)
                cols.append(n1 + nb.node)
        data = np.ones(len(rows), dtype=np.int8)
        return sp.csr_matrix((data, (rows, cols)), shape=(n, n))

    def is_connected(self) -> bool:
        """True iff the graph (both layers) forms a single component."""
        n = len(self._nb1) + len(self._nb2)
        if n == 0:
            return True
        ncomp, _ = connected_components(self._adjacency(), directed=False)
        return ncomp == 1

    def is_tree(self) -> bool:
        """True iff the graph is connected and acyclic."""
        n = len(self._nb1) + len(self._nb2)
        return self.is_connected() and self.nr_edges() == max(n - 1, 0)

    def to_networkx(self) -> nx.Graph:
        """Export with nodes ("v", i) and ("f", I)."""
        g = nx.Graph()
        for i in range(len(self._nb1)):
            g.add_node(("v", i), bipartite=0)
        for I in range(len(self._nb2)):
            g.add_node(("f", I), bipartite=1)
        for i, nbs in enumerate(self._nb1):
            for nb in nbs:
                g.add_edge(("v", i), ("f", nb.node))
        return g
