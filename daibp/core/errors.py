"""
daibp/core/errors.py

Error kinds and the exception that carries them.

Every failure raised by the library is a DaiError tagged with an ErrorKind.
Non-convergence of an iterative algorithm is not an error; it is reported
through max_diff() / iterations().
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Kinds of failure."""
    NOT_IMPLEMENTED = 0
    UNKNOWN_DAI_ALGORITHM = 1
    UNKNOWN_PROPERTY_TYPE = 2
    MALFORMED_PROPERTY = 3
    UNKNOWN_ENUM_VALUE = 4
    CANNOT_READ_FILE = 5
    CANNOT_WRITE_FILE = 6
    INVALID_FACTORGRAPH_FILE = 7
    NOT_ALL_PROPERTIES_SPECIFIED = 8
    MULTIPLE_UNDO = 9
    FACTORGRAPH_NOT_CONNECTED = 10
    IMPOSSIBLE_TYPECAST = 11
    INTERNAL_ERROR = 12
    NOT_NORMALIZABLE = 13
    BELIEF_NOT_REPRESENTABLE = 14


def error_description(kind: ErrorKind) -> str:
    """Human-readable description of an error kind."""
    if kind is ErrorKind.NOT_IMPLEMENTED:
        return "This feature is not implemented"
    if kind is ErrorKind.UNKNOWN_DAI_ALGORITHM:
        return "Unknown DAI algorithm"
    if kind is ErrorKind.UNKNOWN_PROPERTY_TYPE:
        return "Unknown Property type"
    if kind is ErrorKind.MALFORMED_PROPERTY:
        return "Malformed Property"
    if kind is ErrorKind.UNKNOWN_ENUM_VALUE:
        return "Unknown ENUM value"
    if kind is ErrorKind.CANNOT_READ_FILE:
        return "Cannot read file"
    if kind is ErrorKind.CANNOT_WRITE_FILE:
        return "Cannot write file"
    if kind is ErrorKind.INVALID_FACTORGRAPH_FILE:
        return "Invalid FactorGraph file"
    if kind is ErrorKind.NOT_ALL_PROPERTIES_SPECIFIED:
        return "Not all mandatory Properties specified"
    if kind is ErrorKind.MULTIPLE_UNDO:
        return "Multiple undo levels unsupported"
    if kind is ErrorKind.FACTORGRAPH_NOT_CONNECTED:
        return "FactorGraph is not connected"
    if kind is ErrorKind.IMPOSSIBLE_TYPECAST:
        return "Impossible typecast"
    if kind is ErrorKind.INTERNAL_ERROR:
        return "Internal error"
    if kind is ErrorKind.NOT_NORMALIZABLE:
        return "Quantity not normalizable"
    if kind is ErrorKind.BELIEF_NOT_REPRESENTABLE:
        return "Quantity not representable by the message set"
    raise ValueError(f"Unknown error kind: {kind!r}")


class DaiError(Exception):
    """
    Exception tagged with an ErrorKind.

    Attributes:
        kind: What went wrong
        detail: Optional context (offending key, value, index, ...)
    """

    def __init__(self, kind: ErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        msg = error_description(kind)
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
