"""
Notation Parser

Parses compact set-notation strings into ordered SetEntry records:

    "4 x 5 @ 95,135,155,155"      uniform count, 4 sets of 5
    "5,5,3,3 @ 135,185,225,255"   explicit rep list
    "1 x 11:00 @ 135"             timed sets

Malformed numeric tokens never raise: they become NaN and a warning is
logged, so one bad row cannot stop a historical import.
"""

import logging
import re
from typing import Annotated, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field

from lifting_log.models import SetEntry
from lifting_log.utils import Number, is_nan, read_count, read_float_prefix, read_number

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Reps-spec productions
# ---------------------------------------------------------------------------


class TimedScheme(BaseModel):
    """Timed form, "<N> x <MM:SS>": N duration sets."""
    kind: Literal["timed"] = "timed"
    count: Number
    duration_label: str


class UniformCountScheme(BaseModel):
    """Uniform-count form, "<N> x <R>": N sets of R reps."""
    kind: Literal["uniform_count"] = "uniform_count"
    count: Number
    reps: Number


class ExplicitListScheme(BaseModel):
    """Explicit-list form, "r1,r2,...,rK": one set per listed rep count."""
    kind: Literal["explicit_list"] = "explicit_list"
    reps: List[Number] = Field(default_factory=list)


AnyScheme = Union[TimedScheme, UniformCountScheme, ExplicitListScheme]

RepsScheme = Annotated[
    AnyScheme,
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Weight resolution policies
# ---------------------------------------------------------------------------


def cyclic_weight(index: int, weights: Sequence[float]) -> float:
    """Reuse the weight list cyclically; no weights means 0."""
    if not weights:
        return 0.0
    return weights[index % len(weights)]


def first_weight_fallback(index: int, weights: Sequence[float]) -> float:
    """Timed sets: cycle like cyclic_weight, but a zero or NaN slot takes the first weight."""
    if not weights:
        return 0.0
    weight = weights[index % len(weights)]
    if weight == 0 or is_nan(weight):
        return weights[0]
    return weight


class NotationParser:
    """Parser for one exercise's set-notation string"""

    WEIGHT_SEPARATOR = "@"
    LIST_SEPARATOR = ","
    COUNT_SEPARATOR_PATTERN = re.compile(r"[xX]")
    TIME_MARKER = ":"

    def split_notation(self, notation: str) -> Tuple[str, Optional[str]]:
        """Split "<repsSpec> @ <weightSpec>" into its two halves."""
        reps_spec, sep, weight_spec = notation.partition(self.WEIGHT_SEPARATOR)
        if not sep or not weight_spec.strip():
            return reps_spec.strip(), None
        return reps_spec.strip(), weight_spec.strip()

    def parse_scheme(self, reps_spec: str) -> AnyScheme:
        """Decide the production by lookahead: ':' is timed, 'x' is uniform, else a list."""
        reps_spec = reps_spec.strip()

        if self.TIME_MARKER in reps_spec:
            parts = self.COUNT_SEPARATOR_PATTERN.split(reps_spec, maxsplit=1)
            if len(parts) == 1:
                self._warn_token(reps_spec, "missing set count in timed notation")
                return TimedScheme(count=float("nan"), duration_label=reps_spec)
            count_token, label = parts
            return TimedScheme(
                count=self._count(count_token, reps_spec),
                duration_label=label.strip(),
            )

        if self.COUNT_SEPARATOR_PATTERN.search(reps_spec):
            count_token, reps_token = self.COUNT_SEPARATOR_PATTERN.split(reps_spec, maxsplit=1)
            return UniformCountScheme(
                count=self._count(count_token, reps_spec),
                reps=self._reps(reps_token, reps_spec),
            )

        return ExplicitListScheme(
            reps=[self._reps(token, reps_spec) for token in reps_spec.split(self.LIST_SEPARATOR)]
        )

    def parse_weights(self, weight_spec: Optional[str]) -> List[float]:
        """Comma-separated weights; no weight part gives an empty list."""
        if not weight_spec:
            return []
        weights = []
        for token in weight_spec.split(self.LIST_SEPARATOR):
            weight = read_float_prefix(token)
            if is_nan(weight):
                self._warn_token(weight_spec, f"unreadable weight {token.strip()!r}")
            weights.append(weight)
        return weights

    def parse(self, notation: str) -> List[SetEntry]:
        """Parse a notation string into sets numbered from 0 in parse order."""
        reps_spec, weight_spec = self.split_notation(notation)
        scheme = self.parse_scheme(reps_spec)
        weights = self.parse_weights(weight_spec)
        return self.expand(scheme, weights)

    def expand(
        self,
        scheme: AnyScheme,
        weights: Sequence[float],
    ) -> List[SetEntry]:
        """Turn a parsed production plus weights into SetEntry records."""
        if isinstance(scheme, TimedScheme):
            return [
                SetEntry(
                    order=i,
                    duration_label=scheme.duration_label,
                    weight=first_weight_fallback(i, weights),
                )
                for i in range(self._set_count(scheme.count))
            ]

        if isinstance(scheme, UniformCountScheme):
            return [
                SetEntry(order=i, reps=scheme.reps, weight=cyclic_weight(i, weights))
                for i in range(self._set_count(scheme.count))
            ]

        return [
            SetEntry(order=i, reps=reps, weight=cyclic_weight(i, weights))
            for i, reps in enumerate(scheme.reps)
        ]

    def _count(self, token: str, context: str) -> Number:
        count = read_count(token)
        if is_nan(count):
            self._warn_token(context, f"unreadable set count {token.strip()!r}")
        return count

    def _reps(self, token: str, context: str) -> Number:
        reps = read_number(token)
        if is_nan(reps):
            self._warn_token(context, f"unreadable reps {token.strip()!r}")
        return reps

    @staticmethod
    def _set_count(count: Number) -> int:
        if is_nan(count) or count < 0:
            return 0
        return int(count)

    @staticmethod
    def _warn_token(context: str, problem: str):
        logger.warning(f"Malformed notation {context!r}: {problem}")


_default_parser = NotationParser()


def parse_notation(notation: str) -> List[SetEntry]:
    """Parse one notation string with the shared parser."""
    return _default_parser.parse(notation)


def parse_scheme(reps_spec: str) -> AnyScheme:
    """Expose the grammar production chosen for a reps spec."""
    return _default_parser.parse_scheme(reps_spec)
