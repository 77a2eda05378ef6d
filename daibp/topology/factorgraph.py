"""
daibp/topology/factorgraph.py

Factor graph: variables, factor tables and their bipartite incidence.

Variables are the sorted union of all factor scopes; variable i and factor I
are adjacent iff var(i) is in the scope of factor(I).
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple, Union

import numpy as np

from daibp.core.errors import DaiError, ErrorKind
from daibp.core.var import Var, VarSet
from daibp.tensor.factor import Factor
from daibp.topology.bipartite import BipartiteGraph, Neighbor


class FactorGraph:
    """
    Collection of factors with variable/factor adjacency.

    Attributes:
        G: Bipartite graph, variables in layer 1 and factors in layer 2
        vars: Variables in label order
        factors: Factor tables, in insertion order
    """

    def __init__(self, factors: Sequence[Factor] = ()):
        self.factors: List[Factor] = [f.copy() for f in factors]
        scope = VarSet(*(f.vars for f in self.factors))
        self.vars: List[Var] = list(scope)
        self._var_index: Dict[int, int] = {v.label: i for i, v in enumerate(self.vars)}
        self.G = BipartiteGraph(len(self.vars))
        for f in self.factors:
            self.G.add_node2(self._var_index[v.label] for v in f.vars)

    @staticmethod
    def from_tables(
        var_domains: Dict[str, int],
        factors: Dict[str, Tuple[Tuple[str, ...], np.ndarray]],
    ) -> Tuple["FactorGraph", Dict[str, Var]]:
        """
        Build from named variables and named factor tables.

        Args:
            var_domains: Map from variable name to domain size
            factors: Map from factor name to (scope, tensor); tensor axes follow scope order

        Returns:
            (factor graph, map from variable name to Var). Labels follow sorted names.
        """
        names = sorted(var_domains)
        named = {n: Var(k, int(var_domains[n])) for k, n in enumerate(names)}
        fs = []
        for fname in sorted(factors):
            scope, table = factors[fname]
            scope = tuple(scope)
            missing = [v for v in scope if v not in named]
            if missing:
                raise ValueError(f"factor {fname}: unknown variables {missing}")
            arr = np.asarray(table, dtype=np.float64)
            expected = tuple(named[v].states for v in scope)
            if arr.shape != expected:
                raise ValueError(f"factor {fname}: table shape {arr.shape} != {expected}")
            # reorder axes from the given scope order to label order
            order = sorted(range(len(scope)), key=lambda k: named[scope[k]].label)
            fs.append(Factor(VarSet(named[v] for v in scope), np.transpose(arr, axes=order)))
        return FactorGraph(fs), named

    def copy(self) -> "FactorGraph":
        return FactorGraph(self.factors)

    def nr_vars(self) -> int:
        return len(self.vars)

    def nr_factors(self) -> int:
        return len(self.factors)

    def nr_edges(self) -> int:
        return self.G.nr_edges()

    def var(self, i: int) -> Var:
        return self.vars[i]

    def factor(self, I: int) -> Factor:
        return self.factors[I]

    def nb_v(self, i: int) -> List[Neighbor]:
        """Factors adjacent to variable i."""
        return self.G.nb1(i)

    def nb_f(self, I: int) -> List[Neighbor]:
        """Variables adjacent to factor I."""
        return self.G.nb2(I)

    def find_var(self, v: Var) -> int:
        try:
            return self._var_index[v.label]
        except KeyError:
            raise DaiError(ErrorKind.INTERNAL_ERROR, f"{v} is not a variable of this factor graph") from None

    def find_factor(self, ns: VarSet) -> int:
        """Index of the first factor whose scope is exactly `ns`, or -1."""
        for I, f in enumerate(self.factors):
            if f.vars == ns:
                return I
        return -1

    def clusters(self) -> List[VarSet]:
        """Factor scopes, in factor order."""
        return [f.vars for f in self.factors]

    def is_connected(self) -> bool:
        return self.G.is_connected()

    def is_tree(self) -> bool:
        return self.G.is_tree()

    def clamp(self, v: Union[Var, int], state: int) -> None:
        """Multiply every factor containing `v` by a delta on `state`."""
        i = v if isinstance(v, int) else self.find_var(v)
        var = self.vars[i]
        if not 0 <= state < var.states:
            raise ValueError(f"cannot clamp {var} to state {state}: it has {var.states} states")
        delta = np.zeros(var.states)
        delta[state] = 1.0
        mask = Factor(var, delta)
        for I in self.nb_v(i):
            f = self.factors[I.node]
            self.factors[I.node] = Factor(f.vars, f.p * mask.aligned(f.vars))

    def __repr__(self) -> str:
        return f"FactorGraph(vars={self.nr_vars()}, factors={self.nr_factors()})"
