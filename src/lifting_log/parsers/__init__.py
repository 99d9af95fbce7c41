"""Set-notation parsing."""

from .notation import (
    NotationParser,
    TimedScheme,
    UniformCountScheme,
    ExplicitListScheme,
    RepsScheme,
    cyclic_weight,
    first_weight_fallback,
    parse_notation,
    parse_scheme,
)

__all__ = [
    "NotationParser",
    "TimedScheme",
    "UniformCountScheme",
    "ExplicitListScheme",
    "RepsScheme",
    "cyclic_weight",
    "first_weight_fallback",
    "parse_notation",
    "parse_scheme",
]
