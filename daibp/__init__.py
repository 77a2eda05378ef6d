"""
daibp: Discrete Approximate Inference with Belief Propagation

Loopy belief propagation and cluster-graph variable elimination on discrete
factor graphs.

Key components:
- core: Variables, variable sets, error kinds and property sets
- tensor: Factor tables over variable sets
- topology: Bipartite graphs, factor graphs and cluster graphs
- elimination: Elimination-order heuristics (MinFill) and junction trees
- infer: Inference algorithm interface, loopy BP and exact enumeration
- solver: High-level API on named variables and factors
"""

__version__ = "1.0.0"
__author__ = "daibp Team"

from daibp.core.errors import DaiError, ErrorKind, error_description
from daibp.core.properties import BPProperties, PropertySet, UpdateType
from daibp.core.var import Var, VarSet
from daibp.tensor.factor import Factor
from daibp.topology.bipartite import BipartiteGraph
from daibp.topology.factorgraph import FactorGraph
from daibp.topology.clustergraph import ClusterGraph
from daibp.elimination.heuristics import elimination_cost_min_fill, elimination_choice_min_fill
from daibp.elimination.jtree import junction_tree, has_running_intersection
from daibp.infer import BP, ExactInf, InfAlg, new_inference_algorithm
from daibp.solver import run_bp, compute_marginals, elimination_cliques, BPResult

__all__ = [
    # Core
    "DaiError",
    "ErrorKind",
    "error_description",
    "BPProperties",
    "PropertySet",
    "UpdateType",
    "Var",
    "VarSet",
    # Tables and graphs
    "Factor",
    "BipartiteGraph",
    "FactorGraph",
    "ClusterGraph",
    # Elimination
    "elimination_cost_min_fill",
    "elimination_choice_min_fill",
    "junction_tree",
    "has_running_intersection",
    # Inference
    "BP",
    "ExactInf",
    "InfAlg",
    "new_inference_algorithm",
    # Solver
    "run_bp",
    "compute_marginals",
    "elimination_cliques",
    "BPResult",
]
