"""
daibp/tensor/factor.py

Non-negative tables over a VarSet.

The table axes follow the canonical VarSet order (sorted labels), so two
factors over the same VarSet always line up axis by axis. Products over
different scopes are aligned by transposing and inserting singleton axes.
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np

from daibp.core.errors import DaiError, ErrorKind
from daibp.core.var import Var, VarSet


class Factor:
    """
    A table over the joint states of a VarSet.

    Attributes:
        vars: Scope of the factor
        p: Array of shape vars.shape()
    """

    def __init__(self, vars_: Union[Var, VarSet], table: Optional[np.ndarray] = None):
        if isinstance(vars_, Var):
            vars_ = VarSet(vars_)
        self.vars = vars_
        shape = vars_.shape()
        if table is None:
            self.p = np.ones(shape, dtype=np.float64)
        else:
            arr = np.asarray(table, dtype=np.float64)
            if arr.size != vars_.nr_states():
                raise ValueError(
                    f"Factor over {vars_}: table has {arr.size} entries, expected {vars_.nr_states()}"
                )
            self.p = arr.reshape(shape).copy()

    def copy(self) -> "Factor":
        return Factor(self.vars, self.p)

    def states_of(self, v: Var) -> np.ndarray:
        """
        Reindexing table: entry r is the state of `v` in flat table state r.

        Summing a flattened table with np.bincount over this index
        marginalizes it onto `v`.
        """
        labels = self.vars.labels()
        if v.label not in labels:
            raise DaiError(ErrorKind.INTERNAL_ERROR, f"{v} not in factor scope {self.vars}")
        axis = labels.index(v.label)
        shape = self.vars.shape()
        return np.unravel_index(np.arange(self.vars.nr_states()), shape)[axis].astype(np.intp)

    def total(self) -> float:
        return float(np.sum(self.p))

    def normalized(self) -> "Factor":
        z = self.total()
        if z == 0.0 or not np.isfinite(z):
            raise DaiError(ErrorKind.NOT_NORMALIZABLE, f"factor over {self.vars} sums to {z}")
        return Factor(self.vars, self.p / z)

    def marginal(self, ns: Union[Var, VarSet], normed: bool = True) -> "Factor":
        """Sum out every variable not in `ns`."""
        if isinstance(ns, Var):
            ns = VarSet(ns)
        if not ns <= self.vars:
            raise DaiError(ErrorKind.INTERNAL_ERROR, f"{ns} is not contained in {self.vars}")
        keep = set(ns.labels())
        axes = tuple(k for k, v in enumerate(self.vars) if v.label not in keep)
        out = Factor(ns, np.sum(self.p, axis=axes) if axes else self.p)
        return out.normalized() if normed else out

    def entropy(self) -> float:
        """Shannon entropy of the (assumed normalized) table, natural log."""
        q = self.p[self.p > 0.0]
        return float(-np.sum(q * np.log(q)))

    def aligned(self, target: VarSet) -> np.ndarray:
        """Broadcastable view of the table with axes in `target` order."""
        labels = self.vars.labels()
        pos = {lab: k for k, lab in enumerate(labels)}
        order = [pos[lab] for lab in target.labels() if lab in pos]
        data = np.transpose(self.p, axes=order) if order else self.p
        shape = [v.states if v.label in pos else 1 for v in target]
        return data.reshape(tuple(shape))

    def __mul__(self, other: "Factor") -> "Factor":
        scope = self.vars | other.vars
        return Factor(scope, self.aligned(scope) * other.aligned(scope))

    def __repr__(self) -> str:
        return f"Factor({self.vars!r}, {self.p.ravel().tolist()})"


def dist_linf(p: np.ndarray, q: np.ndarray) -> float:
    """Largest absolute componentwise difference."""
    if p.size == 0:
        return 0.0
    return float(np.max(np.abs(np.asarray(p) - np.asarray(q))))


def kl_dist(p: Factor, q: Factor) -> float:
    """
    KL(p || q) = sum p log(p / q); terms with p == 0 contribute nothing.

    `q` need not be normalized. Mass of p where q == 0 gives +inf.
    """
    if p.vars != q.vars:
        raise DaiError(ErrorKind.INTERNAL_ERROR, f"KL between {p.vars} and {q.vars}")
    mask = p.p > 0.0
    a = p.p[mask]
    b = q.p[mask]
    if np.any(b == 0.0):
        return float("inf")
    return float(np.sum(a * (np.log(a) - np.log(b))))
