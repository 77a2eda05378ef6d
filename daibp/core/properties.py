"""
daibp/core/properties.py

Property sets and typed algorithm configuration.

A PropertySet is a plain key -> value mapping whose values may be typed or
strings; it can be parsed from and printed as "[key1=value1,key2=value2]".
BPProperties validates a PropertySet against the keys BP recognizes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Optional, Union

from daibp.core.errors import DaiError, ErrorKind


class PropertySet(dict):
    """Mapping of property names to values, printable in bracket form."""

    @staticmethod
    def parse(text: str) -> "PropertySet":
        """
        Parse "[key=value,...]" (brackets optional) into a PropertySet.

        Values are kept as strings; typed conversion happens when an
        algorithm reads its properties.
        """
        s = text.strip()
        if s.startswith("["):
            if not s.endswith("]"):
                raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"unterminated property set {text!r}")
            s = s[1:-1]
        props = PropertySet()
        for part in s.split(","):
            part = part.strip()
            if not part:
                continue
            if "=" not in part:
                raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"expected key=value, got {part!r}")
            key, value = part.split("=", 1)
            key = key.strip()
            if not key:
                raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"empty key in {part!r}")
            props[key] = value.strip()
        return props

    def __str__(self) -> str:
        return "[" + ",".join(f"{k}={_format_value(v)}" for k, v in self.items()) + "]"


def _format_value(v: Any) -> str:
    if isinstance(v, Enum):
        return v.name
    if isinstance(v, bool):
        return "1" if v else "0"
    return str(v)


class UpdateType(Enum):
    """Message update schedules."""
    SEQFIX = 0
    SEQRND = 1
    SEQMAX = 2
    PARALL = 3


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"{key}={value!r} is not an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"{key}={value!r} is not an integer")


def _as_float(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"{key}={value!r} is not a number")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            pass
    raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"{key}={value!r} is not a number")


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in ("1", "true", "yes", "on"):
            return True
        if v in ("0", "false", "no", "off"):
            return False
    raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"{key}={value!r} is not a boolean")


def _as_enum(key: str, value: Any, enum_type: type) -> Enum:
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        try:
            return enum_type[value.strip().upper()]
        except KeyError:
            pass
    raise DaiError(ErrorKind.UNKNOWN_ENUM_VALUE, f"{key}={value!r}, expected one of {[e.name for e in enum_type]}")


@dataclass(frozen=True)
class BPProperties:
    """
    Validated BP configuration.

    Attributes:
        maxiter: Maximum number of passes
        tol: Convergence threshold on the largest belief change in a pass
        logdomain: Do message arithmetic in log space
        updates: Update schedule
        verbose: Logging verbosity (0 = silent)
        damping: Interpolation weight of the old message, in [0, 1)
        seed: Seed of the SEQRND permutation generator
    """
    maxiter: int
    tol: float
    logdomain: bool
    updates: UpdateType
    verbose: int = 0
    damping: float = 0.0
    seed: Optional[int] = None

    MANDATORY = ("maxiter", "tol", "logdomain", "updates")

    @staticmethod
    def from_options(opts: Union[Mapping[str, Any], str]) -> "BPProperties":
        """
        Build from a mapping or a "[key=value,...]" string.

        Raises:
            DaiError: UNKNOWN_PROPERTY_TYPE for an unrecognized key,
                NOT_ALL_PROPERTIES_SPECIFIED for a missing mandatory key,
                MALFORMED_PROPERTY for a bad value,
                UNKNOWN_ENUM_VALUE for an unknown update schedule.
        """
        if isinstance(opts, str):
            opts = PropertySet.parse(opts)

        known = {f.name for f in fields(BPProperties)}
        for key in opts:
            if key not in known:
                raise DaiError(ErrorKind.UNKNOWN_PROPERTY_TYPE, f"BP does not recognize {key!r}")
        for key in BPProperties.MANDATORY:
            if key not in opts:
                raise DaiError(ErrorKind.NOT_ALL_PROPERTIES_SPECIFIED, f"BP requires {key!r}")

        maxiter = _as_int("maxiter", opts["maxiter"])
        tol = _as_float("tol", opts["tol"])
        logdomain = _as_bool("logdomain", opts["logdomain"])
        updates = _as_enum("updates", opts["updates"], UpdateType)
        verbose = _as_int("verbose", opts.get("verbose", 0))
        damping = _as_float("damping", opts.get("damping", 0.0))
        seed = opts.get("seed")
        if seed is not None:
            seed = _as_int("seed", seed)

        if maxiter < 0:
            raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"maxiter={maxiter} must be non-negative")
        if not (math.isfinite(tol) and tol >= 0.0):
            raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"tol={tol} must be finite and non-negative")
        if verbose < 0:
            raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"verbose={verbose} must be non-negative")
        if not 0.0 <= damping < 1.0:
            raise DaiError(ErrorKind.MALFORMED_PROPERTY, f"damping={damping} must lie in [0, 1)")

        return BPProperties(
            maxiter=maxiter,
            tol=tol,
            logdomain=logdomain,
            updates=updates,
            verbose=verbose,
            damping=damping,
            seed=seed,
        )

    def to_property_set(self) -> PropertySet:
        props = PropertySet()
        props["verbose"] = self.verbose
        props["maxiter"] = self.maxiter
        props["tol"] = self.tol
        props["logdomain"] = self.logdomain
        props["damping"] = self.damping
        props["updates"] = self.updates
        if self.seed is not None:
            props["seed"] = self.seed
        return props
