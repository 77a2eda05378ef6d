"""
Inference module: algorithm interface, BP, exact enumeration, and a factory
that builds algorithms by name.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Tuple, Type, Union

from daibp.core.errors import DaiError, ErrorKind
from daibp.core.properties import PropertySet
from daibp.infer.base import InfAlg
from daibp.infer.bp import BP, EdgeProp
from daibp.infer.exact import ExactInf
from daibp.topology.factorgraph import FactorGraph

ALGORITHMS: Dict[str, Type[InfAlg]] = {
    BP.name: BP,
    ExactInf.name: ExactInf,
}


def parse_name_and_properties(text: str) -> Tuple[str, PropertySet]:
    """Split "BP[tol=1e-9,...]" into ("BP", PropertySet)."""
    s = text.strip()
    k = s.find("[")
    if k < 0:
        return s, PropertySet()
    return s[:k].strip(), PropertySet.parse(s[k:])


def new_inference_algorithm(
    name: str,
    fg: FactorGraph,
    opts: Union[Mapping[str, Any], str, None] = None,
) -> InfAlg:
    """
    Construct an inference algorithm by name.

    Raises:
        DaiError: UNKNOWN_DAI_ALGORITHM for an unregistered name, or the
            algorithm's own configuration error
    """
    try:
        cls = ALGORITHMS[name]
    except KeyError:
        raise DaiError(ErrorKind.UNKNOWN_DAI_ALGORITHM, repr(name)) from None
    return cls(fg, opts if opts is not None else {})


__all__ = [
    "InfAlg",
    "BP",
    "EdgeProp",
    "ExactInf",
    "ALGORITHMS",
    "parse_name_and_properties",
    "new_inference_algorithm",
]
