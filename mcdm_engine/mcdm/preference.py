# -*- coding: utf-8 -*-
"""
PROMETHEE Preference Functions
==============================

Six generalised criteria mapping a performance gap ``d`` to a preference
degree P(d) in [0, 1]:

- Type I   usual     P = 1 if d > 0
- Type II  quasi     P = 1 if d > q
- Type III linear    P = d / p on (0, p), 1 beyond
- Type IV  level     0 up to p/2, 0.5 up to p, 1 beyond
- Type V   v-shape   P = d / p on (0, p), 1 beyond
- Type VI  gaussian  P = 1 - exp(-d² / 2s²)

``d`` is always oriented so that ``d > 0`` means "a is preferred to b".
A threshold of zero turns linear, level, v-shape and gaussian into the
usual criterion.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..exceptions import ConfigurationError


class Direction(Enum):
    """Optimisation direction of a criterion."""
    BENEFIT = "benefit"
    COST = "cost"

    @classmethod
    def parse(cls, value: Union[str, 'Direction']) -> 'Direction':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown criterion direction: {value!r} (expected 'benefit' or 'cost')"
            ) from None


class PreferenceType(Enum):
    """Supported preference functions for PROMETHEE."""
    USUAL = "usual"           # Type I
    QUASI = "quasi"           # Type II: indifference threshold
    LINEAR = "linear"         # Type III: preference threshold
    LEVEL = "level"           # Type IV: two-step level
    VSHAPE = "v-shape"        # Type V
    GAUSSIAN = "gaussian"     # Type VI

    @classmethod
    def parse(cls, value: Union[str, 'PreferenceType']) -> 'PreferenceType':
        if isinstance(value, cls):
            return value
        tag = str(value).strip().lower().replace("_", "-")
        if tag == "vshape":
            tag = "v-shape"
        try:
            return cls(tag)
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ConfigurationError(
                f"Unknown preference function: {value!r} (expected one of {valid})"
            ) from None


@dataclass(frozen=True)
class PreferenceFunction:
    """A preference function kind together with its threshold."""
    kind: PreferenceType = PreferenceType.USUAL
    threshold: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'kind', PreferenceType.parse(self.kind))
        threshold = float(self.threshold)
        if not math.isfinite(threshold) or threshold < 0:
            raise ConfigurationError(
                f"Preference threshold must be a finite value >= 0, got {self.threshold}"
            )
        object.__setattr__(self, 'threshold', threshold)

    def __call__(self, d: float) -> float:
        """Preference degree for an oriented gap ``d``."""
        kind, t = self.kind, self.threshold

        if kind is PreferenceType.USUAL:
            return 1.0 if d > 0 else 0.0

        elif kind is PreferenceType.QUASI:
            return 1.0 if d > t else 0.0

        elif kind is PreferenceType.LINEAR or kind is PreferenceType.VSHAPE:
            if d <= 0:
                return 0.0
            if t == 0 or d >= t:
                return 1.0
            return d / t

        elif kind is PreferenceType.LEVEL:
            if t == 0:
                return 1.0 if d > 0 else 0.0
            if d <= t / 2:
                return 0.0
            if d >= t:
                return 1.0
            return 0.5

        elif kind is PreferenceType.GAUSSIAN:
            if d <= 0:
                return 0.0
            if t == 0:
                return 1.0
            return 1.0 - math.exp(-(d * d) / (2 * t * t))

        raise ConfigurationError(f"Unhandled preference function: {kind}")


def oriented_difference(value_a: float, value_b: float,
                        direction: Union[str, Direction]) -> float:
    """Gap of ``a`` over ``b``; positive means ``a`` is better."""
    if Direction.parse(direction) is Direction.BENEFIT:
        return value_a - value_b
    return value_b - value_a


def preference(value_a: float,
               value_b: float,
               direction: Union[str, Direction],
               kind: Union[str, PreferenceType] = PreferenceType.USUAL,
               threshold: float = 0.0) -> float:
    """
    Preference degree of ``a`` over ``b`` on one criterion.

    Parameters
    ----------
    value_a, value_b : float
        Performances of the two alternatives
    direction : str or Direction
        'benefit' (higher is better) or 'cost' (lower is better)
    kind : str or PreferenceType
        Preference function tag
    threshold : float
        Function parameter (q, p or s), must be >= 0

    Returns
    -------
    float
        Degree in [0, 1]
    """
    d = oriented_difference(value_a, value_b, direction)
    return PreferenceFunction(kind, threshold)(d)
