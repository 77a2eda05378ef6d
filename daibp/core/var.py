"""
daibp/core/var.py

Discrete variables and canonically ordered variable sets.

A Var is identified by its integer label alone; two Vars with the same label
are the same variable and callers must keep their state counts consistent.
A VarSet is immutable and sorted by label, so it can be used as a dictionary
key for factors and clusters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Tuple, Union


@dataclass(frozen=True, order=True)
class Var:
    """Discrete random variable with `states` possible values."""
    label: int
    states: int = field(compare=False)

    def __post_init__(self):
        if self.states < 1:
            raise ValueError(f"Var x{self.label}: states must be positive, got {self.states}")

    def __str__(self) -> str:
        return f"x{self.label}"


class VarSet:
    """
    Set of variables kept in canonical (label) order.

    Supports | (union), & (intersection), - (difference with a Var or VarSet)
    and the subset tests <=, <, >=, >.
    """

    __slots__ = ("_vars",)

    def __init__(self, *vars_: Union[Var, Iterable[Var]]):
        items = {}
        for v in vars_:
            if isinstance(v, Var):
                items[v.label] = v
            else:
                for w in v:
                    items[w.label] = w
        self._vars: Tuple[Var, ...] = tuple(items[k] for k in sorted(items))

    @staticmethod
    def _coerce(other: Union[Var, "VarSet"]) -> "VarSet":
        if isinstance(other, VarSet):
            return other
        if isinstance(other, Var):
            return VarSet(other)
        return NotImplemented

    def __or__(self, other: Union[Var, "VarSet"]) -> "VarSet":
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return VarSet(self._vars, other._vars)

    def __and__(self, other: Union[Var, "VarSet"]) -> "VarSet":
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        keep = set(other.labels())
        return VarSet(v for v in self._vars if v.label in keep)

    def __sub__(self, other: Union[Var, "VarSet"]) -> "VarSet":
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        drop = set(other.labels())
        return VarSet(v for v in self._vars if v.label not in drop)

    def issubset(self, other: "VarSet") -> bool:
        return set(self.labels()) <= set(other.labels())

    def issuperset(self, other: "VarSet") -> bool:
        return other.issubset(self)

    def __le__(self, other: "VarSet") -> bool:
        return self.issubset(other)

    def __lt__(self, other: "VarSet") -> bool:
        return len(self) < len(other) and self.issubset(other)

    def __ge__(self, other: "VarSet") -> bool:
        return self.issuperset(other)

    def __gt__(self, other: "VarSet") -> bool:
        return len(self) > len(other) and self.issuperset(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VarSet):
            return NotImplemented
        return self.labels() == other.labels()

    def __hash__(self) -> int:
        return hash(self.labels())

    def __contains__(self, v: object) -> bool:
        if not isinstance(v, Var):
            return False
        return any(w.label == v.label for w in self._vars)

    def __iter__(self) -> Iterator[Var]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __getitem__(self, k: int) -> Var:
        return self._vars[k]

    def __bool__(self) -> bool:
        return bool(self._vars)

    def labels(self) -> Tuple[int, ...]:
        return tuple(v.label for v in self._vars)

    def shape(self) -> Tuple[int, ...]:
        return tuple(v.states for v in self._vars)

    def nr_states(self) -> int:
        """Number of joint states (1 for the empty set)."""
        n = 1
        for v in self._vars:
            n *= v.states
        return n

    def __repr__(self) -> str:
        return "{" + ",".join(str(v) for v in self._vars) + "}"
