"""
daibp/infer/base.py

Common interface of inference algorithms on a factor graph.

Each algorithm owns a private copy of the factor graph, so clamping evidence
inside one algorithm never affects the caller's graph or another algorithm.
Queries an algorithm cannot answer raise DaiError(NOT_IMPLEMENTED).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Union

from daibp.core.errors import DaiError, ErrorKind
from daibp.core.var import Var, VarSet
from daibp.tensor.factor import Factor
from daibp.topology.factorgraph import FactorGraph


class InfAlg(ABC):
    """Approximate or exact inference algorithm on a factor graph."""

    name: str = ""

    def __init__(self, fg: FactorGraph):
        self._fg = fg.copy()

    def fg(self) -> FactorGraph:
        """The algorithm's own copy of the factor graph."""
        return self._fg

    @abstractmethod
    def identify(self) -> str:
        """Name and properties, for logging."""

    @abstractmethod
    def init(self, ns: Optional[Union[Var, VarSet]] = None) -> None:
        """Reset internal state (only the parts touching `ns`, if given)."""

    @abstractmethod
    def run(self) -> float:
        """Run inference; returns the final maximum belief change."""

    @abstractmethod
    def belief(self, ns: Union[Var, VarSet]) -> Factor:
        """Normalized belief over a variable or a set of variables."""

    @abstractmethod
    def beliefs(self) -> List[Factor]:
        """All beliefs the algorithm maintains."""

    def log_z(self) -> float:
        """Estimate of the log partition sum."""
        raise DaiError(ErrorKind.NOT_IMPLEMENTED, f"{self.name} does not estimate logZ")

    def max_diff(self) -> float:
        raise DaiError(ErrorKind.NOT_IMPLEMENTED, f"{self.name} does not track maxdiff")

    def iterations(self) -> int:
        raise DaiError(ErrorKind.NOT_IMPLEMENTED, f"{self.name} does not count iterations")

    def clamp(self, v: Var, state: int) -> None:
        """Clamp `v` to `state` in the algorithm's factor graph and reset what it touches."""
        self._fg.clamp(v, state)
        self.init(VarSet(v))

    def __repr__(self) -> str:
        return self.identify()
