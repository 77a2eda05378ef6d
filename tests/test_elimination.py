"""
Tests for elimination heuristics and junction-tree layout.
"""

import networkx as nx
import pytest

from daibp.core.var import Var, VarSet
from daibp.elimination.heuristics import (
    elimination_cost_min_fill,
    elimination_choice_min_fill,
    elimination_choice_min_neighbors,
    elimination_choice_min_weight,
)
from daibp.elimination.jtree import (
    has_running_intersection,
    junction_tree,
    maximal_cliques,
    rooted_edges,
    tree_width,
)
from daibp.topology.clustergraph import ClusterGraph


X = [Var(k, 2) for k in range(16)]


def vs(*labels):
    return VarSet(*(X[k] for k in labels))


def grid_clusters(n):
    """Pairwise clusters of an n x n grid; variable r*n + c."""
    out = []
    for r in range(n):
        for c in range(n):
            k = r * n + c
            if c + 1 < n:
                out.append(vs(k, k + 1))
            if r + 1 < n:
                out.append(vs(k, k + n))
    return out


class TestMinFillCost:
    def test_single_clique_costs_nothing(self):
        cl = ClusterGraph([vs(0, 1, 2, 3, 4)])
        for i in range(len(cl.vars)):
            assert elimination_cost_min_fill(cl, i) == 0

    def test_chain(self):
        cl = ClusterGraph([vs(0, 1), vs(1, 2), vs(2, 3)])
        assert [elimination_cost_min_fill(cl, i) for i in range(4)] == [0, 1, 1, 0]

    def test_star_center(self):
        cl = ClusterGraph([vs(0, 1), vs(0, 2), vs(0, 3), vs(0, 4)])
        # 4 leaves, none adjacent: C(4, 2) fill edges
        assert elimination_cost_min_fill(cl, 0) == 6
        assert elimination_cost_min_fill(cl, 1) == 0

    def test_ties_go_to_lowest_index(self):
        cycle = ClusterGraph([vs(0, 1), vs(1, 2), vs(2, 3), vs(3, 0)])
        assert elimination_choice_min_fill(cycle, {0, 1, 2, 3}) == 0
        assert elimination_choice_min_fill(cycle, {3, 2}) == 2


class TestOtherHeuristics:
    def test_min_neighbors_prefers_leaves(self):
        cl = ClusterGraph([vs(0, 1), vs(0, 2), vs(0, 3)])
        assert elimination_choice_min_neighbors(cl, {0, 1, 2, 3}) == 1

    def test_min_weight_counts_states(self):
        big = Var(9, 5)
        cl = ClusterGraph([VarSet(X[0], big), vs(0, 1)])
        # Delta(x0) has 2*2*5 states, Delta(x9) 10, Delta(x1) 4
        assert elimination_choice_min_weight(cl, {0, 1, 2}) == 2


class TestVarElimMinFill:
    def test_chain_cliques(self):
        cl = ClusterGraph([vs(0, 1), vs(1, 2), vs(2, 3)])
        result = cl.var_elim(elimination_choice_min_fill)
        assert result.to_vector() == [vs(0, 1), vs(1, 2), vs(2, 3), vs(3)]

    def test_cycle_cliques(self):
        cl = ClusterGraph([vs(0, 1), vs(1, 2), vs(2, 3), vs(3, 0)])
        result = cl.var_elim_min_fill()
        assert result.to_vector() == [vs(0, 1, 3), vs(1, 2, 3), vs(2, 3), vs(3)]
        assert tree_width(result.clusters) == 2

    @pytest.mark.parametrize("n", [2, 3, 4])
    def test_grid_cliques_cover_everything(self, n):
        clusters = grid_clusters(n)
        cl = ClusterGraph(clusters)
        result = cl.var_elim_min_fill()

        # one clique per eliminated variable
        assert len(result) == n * n
        assert VarSet(*result.clusters) == VarSet(*clusters)
        # every original cluster lies inside some clique
        for c in clusters:
            assert any(c <= q for q in result.clusters)

    def test_each_variable_eliminated_once(self):
        clusters = grid_clusters(3)
        cl = ClusterGraph(clusters)
        eliminated = []

        def recording_choice(g, remaining):
            i = elimination_choice_min_fill(g, remaining)
            eliminated.append(g.vars[i])
            return i

        cl.var_elim(recording_choice)
        assert sorted(eliminated) == sorted(cl.vars)
        assert len(set(eliminated)) == len(eliminated)


class TestJunctionTree:
    def test_cycle_junction_tree(self):
        cl = ClusterGraph([vs(0, 1), vs(1, 2), vs(2, 3), vs(3, 0)])
        tree = junction_tree(cl.var_elim_min_fill().clusters)
        assert tree.number_of_nodes() == 2
        assert tree.number_of_edges() == 1
        (a, b, data), = tree.edges(data=True)
        assert data["separator"] == vs(1, 3)
        assert has_running_intersection(tree)

    @pytest.mark.parametrize("n", [3, 4])
    def test_grid_junction_tree(self, n):
        cliques = ClusterGraph(grid_clusters(n)).var_elim_min_fill().clusters
        tree = junction_tree(cliques)
        assert nx.is_tree(tree)
        assert tree.number_of_nodes() == len(maximal_cliques(cliques))
        assert has_running_intersection(tree)

    def test_running_intersection_violation(self):
        tree = nx.Graph()
        tree.add_node(0, clique=vs(0, 1))
        tree.add_node(1, clique=vs(2, 3))
        tree.add_node(2, clique=vs(0, 2))
        tree.add_edge(0, 1)
        tree.add_edge(1, 2)
        assert not has_running_intersection(tree)

    def test_rooted_edges(self):
        cliques = ClusterGraph([vs(0, 1), vs(1, 2), vs(2, 3)]).var_elim_min_fill().clusters
        tree = junction_tree(cliques)
        edges = rooted_edges(tree, 0)
        assert len(edges) == tree.number_of_nodes() - 1
        seen = {0}
        for parent, child in edges:
            assert parent in seen
            seen.add(child)

    def test_single_clique(self):
        tree = junction_tree([vs(0, 1, 2)])
        assert tree.number_of_nodes() == 1
        assert has_running_intersection(tree)
        assert rooted_edges(tree) == []
