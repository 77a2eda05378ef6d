"""
Core module: variables, errors and configuration.
"""

from daibp.core.errors import DaiError, ErrorKind, error_description
from daibp.core.properties import BPProperties, PropertySet, UpdateType
from daibp.core.var import Var, VarSet

__all__ = [
    "DaiError",
    "ErrorKind",
    "error_description",
    "BPProperties",
    "PropertySet",
    "UpdateType",
    "Var",
    "VarSet",
]
