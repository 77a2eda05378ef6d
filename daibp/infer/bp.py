"""
daibp/infer/bp.py

Loopy belief propagation.

One message is stored per (variable i, local factor slot _I) edge: the
message from factor nb_v(i)[_I] to variable i. Variable-to-factor messages
are never stored; they are formed on the fly as the product of the other
messages flowing into the variable.

Schedules:
  - PARALL: compute every new message from the current ones, then apply all
  - SEQFIX: visit edges in a fixed order, applying each update immediately
  - SEQRND: as SEQFIX, with the order permuted every pass
  - SEQMAX: repeatedly update the edge with the largest residual

Convergence is measured on single-variable beliefs: after each pass maxdiff
is the largest L-infinity change of any variable belief.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple, Union

import numpy as np
from scipy.special import logsumexp

from daibp.core.errors import DaiError, ErrorKind
from daibp.core.properties import BPProperties, UpdateType
from daibp.core.var import Var, VarSet
from daibp.infer.base import InfAlg
from daibp.tensor.factor import Factor, dist_linf, kl_dist
from daibp.topology.factorgraph import FactorGraph

logger = logging.getLogger(__name__)


@dataclass
class EdgeProp:
    """
    State of one variable/factor edge.

    Attributes:
        index: index[r] is the state of the variable in flat factor state r
        message: Current factor -> variable message
        new_message: Most recently computed message, not yet applied
        residual: Distance between new_message and message
    """
    index: np.ndarray
    message: np.ndarray
    new_message: np.ndarray
    residual: float = 0.0


def _normalize(p: np.ndarray) -> np.ndarray:
    z = np.sum(p)
    if z == 0.0 or not np.isfinite(z):
        raise DaiError(ErrorKind.NOT_NORMALIZABLE, f"message sums to {z}")
    return p / z


class BP(InfAlg):
    """
    Loopy belief propagation on a factor graph.

    Args:
        fg: Factor graph (copied)
        opts: Mapping or "[key=value,...]" string with the BP properties
            maxiter, tol, logdomain, updates (mandatory) and verbose,
            damping, seed (optional)

    Raises:
        DaiError: For a malformed property set, before any message exists
    """

    name = "BP"

    def __init__(self, fg: FactorGraph, opts: Union[Mapping[str, Any], str]):
        self.props = BPProperties.from_options(opts)
        super().__init__(fg)
        self._maxdiff = 0.0
        self._iters = 0
        self._rng = np.random.default_rng(self.props.seed)
        self._edges: List[List[EdgeProp]] = []
        self._construct()
        self.init()

    def _construct(self) -> None:
        fg = self._fg
        self._edges = []
        for i in range(fg.nr_vars()):
            states = fg.var(i).states
            row = []
            for I in fg.nb_v(i):
                row.append(EdgeProp(
                    index=fg.factor(I.node).states_of(fg.var(i)),
                    message=np.ones(states),
                    new_message=np.ones(states),
                ))
            self._edges.append(row)

    # Accessors

    def edge(self, i: int, _I: int) -> EdgeProp:
        return self._edges[i][_I]

    def message(self, i: int, _I: int) -> np.ndarray:
        return self._edges[i][_I].message

    def new_message(self, i: int, _I: int) -> np.ndarray:
        return self._edges[i][_I].new_message

    def residual(self, i: int, _I: int) -> float:
        return self._edges[i][_I].residual

    def max_diff(self) -> float:
        """Largest final maxdiff over the runs since the last init."""
        return self._maxdiff

    def iterations(self) -> int:
        """Number of passes of the last run."""
        return self._iters

    def identify(self) -> str:
        return f"{self.name}{self.props.to_property_set()}"

    # Initialization

    def _neutral(self) -> float:
        return 0.0 if self.props.logdomain else 1.0

    def _reset_edge(self, e: EdgeProp) -> None:
        c = self._neutral()
        e.message = np.full(e.message.shape, c)
        e.new_message = np.full(e.new_message.shape, c)
        e.residual = 0.0

    def init(self, ns: Optional[Union[Var, VarSet]] = None) -> None:
        """Reset messages to neutral; with `ns`, only the edges of those variables."""
        if ns is None:
            for row in self._edges:
                for e in row:
                    self._reset_edge(e)
            self._rng = np.random.default_rng(self.props.seed)
        else:
            if isinstance(ns, Var):
                ns = VarSet(ns)
            for n in ns:
                for e in self._edges[self._fg.find_var(n)]:
                    self._reset_edge(e)
        self._maxdiff = 0.0
        self._iters = 0

    # Message updates

    def _prod_incoming(self, j: int, skip_I: int, newest: bool) -> np.ndarray:
        """Product of the messages into variable j from all factors but skip_I."""
        fg = self._fg
        prod = np.full(fg.var(j).states, self._neutral())
        for J in fg.nb_v(j):
            if J.node == skip_I:
                continue
            e = self._edges[j][J.iter]
            m = e.new_message if newest else e.message
            if self.props.logdomain:
                prod = prod + m
            else:
                prod = prod * m
        return prod

    def _factor_times_incoming(self, I: int, skip_i: Optional[int], newest: bool) -> np.ndarray:
        """Flat table of factor I times the messages into it from its variables except skip_i."""
        fg = self._fg
        prod = fg.factor(I).p.ravel().copy()
        if self.props.logdomain:
            with np.errstate(divide="ignore"):
                prod = np.log(prod)
        for j in fg.nb_f(I):
            if j.node == skip_i:
                continue
            prod_j = self._prod_incoming(j.node, I, newest)
            ind = self._edges[j.node][j.dual].index
            if self.props.logdomain:
                prod += prod_j[ind]
            else:
                prod *= prod_j[ind]
        if self.props.logdomain:
            m = np.max(prod)
            if not np.isfinite(m):
                raise DaiError(ErrorKind.NOT_NORMALIZABLE, f"factor {I} has no mass left")
            prod = np.exp(prod - m)
        return prod

    def calc_new_message(self, i: int, _I: int) -> None:
        """Compute the message from factor nb_v(i)[_I] to variable i into new_message."""
        fg = self._fg
        I = fg.nb_v(i)[_I].node
        e = self._edges[i][_I]
        prod = self._factor_times_incoming(I, i, newest=False)
        marg = _normalize(np.bincount(e.index, weights=prod, minlength=fg.var(i).states))
        if self.props.logdomain:
            with np.errstate(divide="ignore"):
                e.new_message = np.log(marg)
        else:
            e.new_message = marg

    def update_message(self, i: int, _I: int) -> None:
        """Apply new_message to message, damped if damping > 0."""
        e = self._edges[i][_I]
        d = self.props.damping
        if d == 0.0:
            e.message = e.new_message.copy()
        elif self.props.logdomain:
            m = d * e.message + (1.0 - d) * e.new_message
            e.message = m - logsumexp(m)
        else:
            e.message = _normalize(np.power(e.message, d) * np.power(e.new_message, 1.0 - d))

    def find_max_residual(self) -> Tuple[int, int]:
        """Edge (i, _I) with the largest residual."""
        best = (0, 0)
        best_r = -1.0
        for i, row in enumerate(self._edges):
            for _I, e in enumerate(row):
                if e.residual > best_r:
                    best, best_r = (i, _I), e.residual
        return best

    def _update_residual(self, i: int, _I: int) -> None:
        e = self._edges[i][_I]
        if self.props.logdomain:
            # equal entries, -inf included, contribute nothing
            with np.errstate(invalid="ignore"):
                diff = np.abs(e.new_message - e.message)
            diff[e.new_message == e.message] = 0.0
            e.residual = float(np.max(diff)) if diff.size else 0.0
        else:
            e.residual = dist_linf(e.new_message, e.message)

    # Main loop

    def _all_edges(self) -> List[Tuple[int, int]]:
        """Edges (i, _I) grouped by factor."""
        fg = self._fg
        return [(j.node, j.dual) for I in range(fg.nr_factors()) for j in fg.nb_f(I)]

    def _pass_seqmax(self) -> None:
        fg = self._fg
        for _ in range(fg.nr_edges()):
            i, _I = self.find_max_residual()
            if self._edges[i][_I].residual < self.props.tol:
                break
            self.update_message(i, _I)
            self._edges[i][_I].residual = 0.0
            # messages J -> j with J in nb(i) \ I and j in nb(J) \ i read the updated one
            for J in fg.nb_v(i):
                if J.iter == _I:
                    continue
                for j in fg.nb_f(J.node):
                    if j.node == i:
                        continue
                    self.calc_new_message(j.node, j.dual)
                    self._update_residual(j.node, j.dual)

    def run(self) -> float:
        """
        Pass over the graph until maxdiff <= tol or maxiter passes are done.

        Returns:
            maxdiff of the last pass (1.0 if no pass was made). Not reaching
            tol is not an error; check max_diff() and iterations().
        """
        tic = time.perf_counter()
        fg = self._fg
        updates = self.props.updates
        old_beliefs = [self.belief_v(i).p for i in range(fg.nr_vars())]

        update_seq: List[Tuple[int, int]] = []
        if updates is UpdateType.SEQMAX:
            for i, _I in self._all_edges():
                self.calc_new_message(i, _I)
                self._update_residual(i, _I)
        else:
            update_seq = self._all_edges()

        maxdiff = 1.0
        it = 0
        while it < self.props.maxiter and maxdiff > self.props.tol:
            if updates is UpdateType.SEQMAX:
                self._pass_seqmax()
            elif updates is UpdateType.PARALL:
                for i, _I in update_seq:
                    self.calc_new_message(i, _I)
                for i, _I in update_seq:
                    self.update_message(i, _I)
            else:
                if updates is UpdateType.SEQRND:
                    update_seq = [update_seq[k] for k in self._rng.permutation(len(update_seq))]
                for i, _I in update_seq:
                    self.calc_new_message(i, _I)
                    self.update_message(i, _I)

            maxdiff = 0.0
            for i in range(fg.nr_vars()):
                b = self.belief_v(i).p
                maxdiff = max(maxdiff, dist_linf(b, old_beliefs[i]))
                old_beliefs[i] = b
            it += 1
            if self.props.verbose >= 3:
                logger.debug("%s::run: maxdiff %g after %d passes", self.name, maxdiff, it)

        self._iters = it
        self._maxdiff = max(self._maxdiff, maxdiff)
        if self.props.verbose >= 1:
            elapsed = time.perf_counter() - tic
            if maxdiff > self.props.tol:
                logger.warning(
                    "%s::run: not converged within %d passes (%.3f seconds), final maxdiff %g",
                    self.name, self.props.maxiter, elapsed, maxdiff,
                )
            else:
                logger.info("%s::run: converged in %d passes (%.3f seconds)", self.name, it, elapsed)
        return maxdiff

    # Beliefs

    def belief_v(self, i: int) -> Factor:
        """Belief of the i'th variable."""
        prod = self._prod_incoming(i, -1, newest=True)
        if self.props.logdomain:
            m = np.max(prod)
            if not np.isfinite(m):
                raise DaiError(ErrorKind.NOT_NORMALIZABLE, f"belief of {self._fg.var(i)}")
            prod = np.exp(prod - m)
        return Factor(self._fg.var(i), prod).normalized()

    def belief_f(self, I: int) -> Factor:
        """Belief of the I'th factor."""
        prod = self._factor_times_incoming(I, None, newest=True)
        return Factor(self._fg.factor(I).vars, prod).normalized()

    def belief(self, ns: Union[Var, VarSet]) -> Factor:
        """
        Belief of a variable, or of a set contained in some factor's scope.

        Raises:
            DaiError: BELIEF_NOT_REPRESENTABLE if no factor contains `ns`
        """
        if isinstance(ns, Var):
            return self.belief_v(self._fg.find_var(ns))
        if len(ns) == 1:
            return self.belief_v(self._fg.find_var(ns[0]))
        for I, f in enumerate(self._fg.factors):
            if ns <= f.vars:
                return self.belief_f(I).marginal(ns)
        raise DaiError(ErrorKind.BELIEF_NOT_REPRESENTABLE, f"no factor contains {ns!r}")

    def beliefs(self) -> List[Factor]:
        """Variable beliefs followed by factor beliefs."""
        fg = self._fg
        return [self.belief_v(i) for i in range(fg.nr_vars())] + [
            self.belief_f(I) for I in range(fg.nr_factors())
        ]

    def log_z(self) -> float:
        """
        Bethe approximation of the log partition sum:

            sum_i (1 - |nb(i)|) H(b_i) - sum_I KL(b_I || f_I)
        """
        fg = self._fg
        s = 0.0
        for i in range(fg.nr_vars()):
            s += (1.0 - len(fg.nb_v(i))) * self.belief_v(i).entropy()
        for I in range(fg.nr_factors()):
            s -= kl_dist(self.belief_f(I), fg.factor(I))
        return s
