"""
daibp/infer/exact.py

Exact inference by brute-force enumeration of the joint table.

Only usable on small graphs; it serves as the reference for approximate
algorithms.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

import numpy as np

from daibp.core.errors import DaiError, ErrorKind
from daibp.core.properties import PropertySet, _as_int
from daibp.core.var import Var, VarSet
from daibp.infer.base import InfAlg
from daibp.tensor.factor import Factor
from daibp.topology.factorgraph import FactorGraph

logger = logging.getLogger(__name__)


class ExactInf(InfAlg):
    """Multiply all factors together and marginalize."""

    name = "EXACT"

    def __init__(self, fg: FactorGraph, opts: Union[Mapping[str, Any], str, None] = None):
        if opts is None:
            opts = {}
        elif isinstance(opts, str):
            opts = PropertySet.parse(opts)
        for key in opts:
            if key != "verbose":
                raise DaiError(ErrorKind.UNKNOWN_PROPERTY_TYPE, f"EXACT does not recognize {key!r}")
        super().__init__(fg)
        self.verbose = _as_int("verbose", opts.get("verbose", 0))
        if self.verbose < 0:
            raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"verbose={self.verbose} must be non-negative")
        self._joint: Optional[Factor] = None
        self._z = 0.0

    def identify(self) -> str:
        return f"{self.name}[verbose={self.verbose}]"

    def init(self, ns: Optional[Union[Var, VarSet]] = None) -> None:
        self._joint = None
        self._z = 0.0

    def run(self) -> float:
        joint = Factor(VarSet())
        for f in self._fg.factors:
            joint = joint * f
        self._z = joint.total()
        self._joint = joint.normalized()
        if self.verbose >= 1:
            logger.info("%s::run: Z = %g over %d joint states", self.name, self._z, joint.p.size)
        return 0.0

    def _require_run(self) -> Factor:
        if self._joint is None:
            self.run()
        return self._joint

    def belief(self, ns: Union[Var, VarSet]) -> Factor:
        return self._require_run().marginal(ns)

    def beliefs(self) -> List[Factor]:
        fg = self._fg
        return [self.belief(v) for v in fg.vars] + [self.belief(f.vars) for f in fg.factors]

    def log_z(self) -> float:
        self._require_run()
        return float(np.log(self._z))

    def max_diff(self) -> float:
        return 0.0

    def iterations(self) -> int:
        return 1
