"""
daibp/solver.py

High-level entry points on named variables and factor tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from daibp.elimination.heuristics import elimination_choice_min_fill
from daibp.infer.bp import BP
from daibp.topology.clustergraph import ClusterGraph
from daibp.topology.factorgraph import FactorGraph

DEFAULT_BP_PROPERTIES: Dict[str, Any] = {
    "tol": 1e-9,
    "maxiter": 1000,
    "logdomain": False,
    "updates": "SEQFIX",
}


@dataclass
class BPResult:
    """Result from running BP."""
    marginals: Dict[str, np.ndarray]
    log_z: float
    max_diff: float
    iterations: int
    converged: bool


def run_bp(
    var_domains: Dict[str, int],
    factors: Dict[str, Tuple[Tuple[str, ...], np.ndarray]],
    evidence: Optional[Dict[str, int]] = None,
    **props: Any,
) -> BPResult:
    """
    Run loopy BP on a named factor graph.

    Args:
        var_domains: Map from variable name to domain size
        factors: Map from factor name to (scope, tensor)
        evidence: Optional map from variable name to observed state
        **props: BP properties overriding DEFAULT_BP_PROPERTIES

    Returns:
        BPResult with single-variable marginals and the Bethe logZ

    Example:
        >>> var_domains = {"A": 2, "B": 2}
        >>> factors = {
        ...     "f1": (("A",), np.array([0.3, 0.7])),
        ...     "f2": (("A", "B"), np.array([[0.9, 0.1], [0.2, 0.8]])),
        ... }
        >>> result = run_bp(var_domains, factors, updates="PARALL")
        >>> print(result.marginals["B"])
    """
    fg, named = FactorGraph.from_tables(var_domains, factors)
    opts = dict(DEFAULT_BP_PROPERTIES)
    opts.update(props)
    bp = BP(fg, opts)
    for name, state in (evidence or {}).items():
        bp.clamp(named[name], state)
    maxdiff = bp.run()

    in_graph = {v.label for v in bp.fg().vars}
    marginals = {}
    for name, v in named.items():
        if v.label in in_graph:
            marginals[name] = bp.belief(v).p
    return BPResult(
        marginals=marginals,
        log_z=bp.log_z(),
        max_diff=bp.max_diff(),
        iterations=bp.iterations(),
        converged=maxdiff <= bp.props.tol,
    )


def compute_marginals(
    var_domains: Dict[str, int],
    factors: Dict[str, Tuple[Tuple[str, ...], np.ndarray]],
    **kwargs: Any,
) -> Dict[str, np.ndarray]:
    """Map from variable name to BP marginal (variables in no factor are left out)."""
    return run_bp(var_domains, factors, **kwargs).marginals


def elimination_cliques(
    var_domains: Dict[str, int],
    factors: Dict[str, Tuple[Tuple[str, ...], np.ndarray]],
) -> List[Tuple[str, ...]]:
    """
    MinFill elimination cliques, as sorted tuples of variable names.

    Args:
        var_domains: Map from variable name to domain size
        factors: Map from factor name to (scope, tensor)
    """
    fg, named = FactorGraph.from_tables(var_domains, factors)
    by_label: Dict[int, str] = {v.label: n for n, v in named.items()}
    cliques = ClusterGraph(fg.clusters()).var_elim(elimination_choice_min_fill)
    return [tuple(sorted(by_label[v.label] for v in cl)) for cl in cliques.clusters]
