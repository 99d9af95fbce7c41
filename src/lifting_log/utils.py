"""Utility functions."""
import math
import re
from typing import Optional, Union

Number = Union[int, float]

NAN = float("nan")

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_FLOAT_PREFIX_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_SLUG_RE = re.compile(r"[^a-z0-9]+")


def to_int(s: Optional[str]) -> Optional[int]:
    """Convert string to int, returning None if conversion fails."""
    try:
        return int(s) if s is not None else None
    except (TypeError, ValueError):
        return None


def is_nan(value: Optional[Number]) -> bool:
    """True for the NaN sentinel, False for None and ordinary numbers."""
    return isinstance(value, float) and math.isnan(value)


def read_number(token: str) -> Number:
    """Read a whole token as a number.

    "5" -> 5, "5.5" -> 5.5, anything else -> NaN.
    """
    token = token.strip()
    if _INT_RE.match(token):
        return int(token)
    if _FLOAT_RE.match(token):
        return float(token)
    return NAN


def read_count(token: str) -> Number:
    """Read a set count; only whole integers are counts, anything else is NaN."""
    value = to_int(token.strip()) if _INT_RE.match(token.strip()) else None
    return NAN if value is None else value


def read_float_prefix(token: str) -> float:
    """Read the leading numeric part of a token ("135lbs" -> 135.0), NaN if none."""
    match = _FLOAT_PREFIX_RE.match(token.strip())
    if not match:
        return NAN
    return float(match.group(0))


def reps_or_zero(reps: Optional[Number]) -> Number:
    """Reps as used by volume and lookahead math: missing or NaN counts as 0."""
    if reps is None or is_nan(reps):
        return 0
    return reps


def slugify(name: str) -> str:
    """Lowercase slug with runs of non-alphanumerics collapsed to '_'."""
    return _SLUG_RE.sub("_", name.lower())
