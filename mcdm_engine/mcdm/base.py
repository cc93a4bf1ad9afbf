# -*- coding: utf-8 -*-
"""
Decision Problem Model
======================

Immutable snapshots of a decision problem:

- :class:`Criterion` - weighted criterion with direction and the
  method-specific parameters of PROMETHEE (preference function) and
  ELECTRE (veto threshold)
- :class:`DecisionProblem` - alternatives, criteria and the n × m
  performance matrix
- :class:`PairwiseComparisonMatrix` - reciprocal judgement matrix for AHP
- :class:`AHPProblem` - criteria matrix plus one alternatives matrix per
  criterion

All invariants are checked on construction; arrays are stored read-only.
"""

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ..exceptions import ConfigurationError, ValidationError
from .preference import Direction, PreferenceFunction, PreferenceType

WEIGHT_SUM_TOLERANCE = 0.01
RECIPROCAL_TOLERANCE = 1e-2
MIN_ALTERNATIVES = 2
MIN_CRITERIA = 2


# Saaty's fundamental scale of absolute numbers
SAATY_SCALE: Dict[int, str] = {
    1: "Equal importance",
    2: "Intermediate value",
    3: "Moderate importance",
    4: "Intermediate value",
    5: "Strong importance",
    6: "Intermediate value",
    7: "Very strong importance",
    8: "Intermediate value",
    9: "Extreme importance",
}


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=float, copy=True)
    array.setflags(write=False)
    return array


def _as_number(value, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (Real, np.number)):
        raise ValidationError(f"{where}: value {value!r} is not numeric")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{where}: value {value!r} is not numeric") from None
    if not math.isfinite(number):
        raise ValidationError(f"{where}: value {value!r} is not finite")
    return number


def _check_unique(names: Sequence[str], kind: str) -> None:
    seen, duplicates = set(), []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    if duplicates:
        raise ValidationError(f"Duplicate {kind} names: {duplicates}")


@dataclass(frozen=True)
class Criterion:
    """A weighted decision criterion."""
    name: str
    weight: float
    direction: Direction = Direction.BENEFIT
    preference_type: PreferenceType = PreferenceType.USUAL
    threshold: float = 0.0
    veto_threshold: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, 'name', str(self.name))
        object.__setattr__(self, 'direction', Direction.parse(self.direction))
        weight = _as_number(self.weight, f"Criterion '{self.name}' weight")
        if not 0.0 <= weight <= 1.0:
            raise ConfigurationError(
                f"Criterion '{self.name}' weight must be in [0, 1], got {weight}"
            )
        object.__setattr__(self, 'weight', weight)

        # Normalises the tag and rejects negative thresholds
        function = PreferenceFunction(self.preference_type, self.threshold)
        object.__setattr__(self, 'preference_type', function.kind)
        object.__setattr__(self, 'threshold', function.threshold)

        if self.veto_threshold is not None:
            veto = _as_number(self.veto_threshold,
                              f"Criterion '{self.name}' veto threshold")
            if veto < 0:
                raise ConfigurationError(
                    f"Criterion '{self.name}' veto threshold must be >= 0, got {veto}"
                )
            object.__setattr__(self, 'veto_threshold', veto)

    @property
    def is_benefit(self) -> bool:
        return self.direction is Direction.BENEFIT

    @property
    def preference_function(self) -> PreferenceFunction:
        return PreferenceFunction(self.preference_type, self.threshold)

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'weight': self.weight,
            'direction': self.direction.value,
            'preference_type': self.preference_type.value,
            'threshold': self.threshold,
            'veto_threshold': self.veto_threshold,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Criterion':
        """Build a criterion from a record; accepts the camelCase keys of
        exported documents as well."""
        if 'name' not in data or 'weight' not in data:
            raise ValidationError(f"Criterion record needs 'name' and 'weight': {data}")
        return cls(
            name=data['name'],
            weight=data['weight'],
            direction=data.get('direction', data.get('type', Direction.BENEFIT)),
            preference_type=data.get('preference_type',
                                     data.get('preferenceType', PreferenceType.USUAL)),
            threshold=data.get('threshold', 0.0),
            veto_threshold=data.get('veto_threshold', data.get('vetoThreshold')),
        )


def _coerce_criteria(criteria) -> Tuple[Criterion, ...]:
    coerced = []
    for c in criteria:
        coerced.append(c if isinstance(c, Criterion) else Criterion.from_dict(c))
    return tuple(coerced)


@dataclass(frozen=True)
class DecisionProblem:
    """
    Immutable decision problem snapshot.

    Parameters
    ----------
    alternatives : Sequence[str]
        Alternative names; order is display and tie-break order
    criteria : Sequence[Criterion or dict]
        Criteria records
    performance : array-like
        n × m matrix, row i holds alternative i's scores
    weight_tolerance : float
        Allowed deviation of the weight sum from 1
    """
    alternatives: Tuple[str, ...]
    criteria: Tuple[Criterion, ...]
    performance: np.ndarray = field(repr=False, compare=False)
    weight_tolerance: float = field(default=WEIGHT_SUM_TOLERANCE, compare=False)

    def __post_init__(self):
        alternatives = tuple(str(a) for a in self.alternatives)
        criteria = _coerce_criteria(self.criteria)
        n, m = len(alternatives), len(criteria)
        _check_unique([c.name for c in criteria], 'criterion')

        if n < MIN_ALTERNATIVES:
            raise ConfigurationError(
                f"At least {MIN_ALTERNATIVES} alternatives are required, got {n}"
            )
        if m < MIN_CRITERIA:
            raise ConfigurationError(
                f"At least {MIN_CRITERIA} criteria are required, got {m}"
            )

        rows = self.performance
        if isinstance(rows, pd.DataFrame):
            rows = rows.values.tolist()
        elif isinstance(rows, np.ndarray):
            rows = rows.tolist()
        rows = list(rows)
        if len(rows) != n:
            raise ValidationError(
                f"Performance matrix has {len(rows)} rows, expected {n} (one per alternative)"
            )
        matrix = np.empty((n, m), dtype=float)
        for i, row in enumerate(rows):
            row = list(row)
            if len(row) != m:
                raise ValidationError(
                    f"Performance row {i} ('{alternatives[i]}') has {len(row)} values, "
                    f"expected {m} (one per criterion)"
                )
            for j, value in enumerate(row):
                matrix[i, j] = _as_number(
                    value, f"Performance[{i}][{j}] ('{alternatives[i]}', '{criteria[j].name}')"
                )

        object.__setattr__(self, 'alternatives', alternatives)
        object.__setattr__(self, 'criteria', criteria)
        object.__setattr__(self, 'performance', _frozen(matrix))
        self.check_weights(self.weight_tolerance)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def n_alternatives(self) -> int:
        return len(self.alternatives)

    @property
    def n_criteria(self) -> int:
        return len(self.criteria)

    @property
    def criterion_names(self) -> List[str]:
        return [c.name for c in self.criteria]

    @property
    def weights(self) -> np.ndarray:
        return np.array([c.weight for c in self.criteria], dtype=float)

    @property
    def directions(self) -> List[Direction]:
        return [c.direction for c in self.criteria]

    def check_weights(self, tolerance: float = WEIGHT_SUM_TOLERANCE) -> None:
        """Raise ValidationError unless weights sum to 1 within ``tolerance``."""
        total = float(sum(c.weight for c in self.criteria))
        if abs(total - 1.0) > tolerance:
            raise ValidationError(
                f"Weights must sum to 1.0 (current sum: {total:.3f}, tolerance {tolerance})"
            )

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.performance.copy(),
                            index=list(self.alternatives),
                            columns=self.criterion_names)

    @classmethod
    def from_dataframe(cls, data: pd.DataFrame,
                       criteria: Sequence[Union[Criterion, Dict]],
                       weight_tolerance: float = WEIGHT_SUM_TOLERANCE) -> 'DecisionProblem':
        """
        Build a problem from an alternatives × criteria frame.

        Columns are matched to criteria by name, so column order may differ.
        """
        criteria = _coerce_criteria(criteria)
        missing = [c.name for c in criteria if c.name not in data.columns]
        if missing:
            raise ValidationError(f"Performance table is missing criteria columns: {missing}")
        ordered = data[[c.name for c in criteria]]
        return cls(
            alternatives=tuple(str(a) for a in ordered.index),
            criteria=criteria,
            performance=ordered.values.tolist(),
            weight_tolerance=weight_tolerance,
        )

    def without_alternative(self, index: int) -> 'DecisionProblem':
        """New snapshot with the alternative at ``index`` removed."""
        if not 0 <= index < self.n_alternatives:
            raise IndexError(f"Alternative index {index} out of range")
        keep = [i for i in range(self.n_alternatives) if i != index]
        return DecisionProblem(
            alternatives=tuple(self.alternatives[i] for i in keep),
            criteria=self.criteria,
            performance=self.performance[keep, :],
            weight_tolerance=self.weight_tolerance,
        )

    def to_dict(self) -> Dict:
        return {
            'alternatives': list(self.alternatives),
            'criteria': [c.to_dict() for c in self.criteria],
            'performance': self.performance.tolist(),
        }


# =============================================================================
# AHP inputs
# =============================================================================

@dataclass(frozen=True)
class PairwiseComparisonMatrix:
    """
    Square reciprocal judgement matrix.

    ``values[i][j]`` states how strongly item i is preferred to item j on
    Saaty's 1-9 scale; ``values[j][i]`` must equal ``1 / values[i][j]``.
    """
    labels: Tuple[str, ...]
    values: np.ndarray = field(repr=False, compare=False)
    tolerance: float = field(default=RECIPROCAL_TOLERANCE, compare=False)

    def __post_init__(self):
        labels = tuple(str(label) for label in self.labels)
        rows = self.values.tolist() if isinstance(self.values, np.ndarray) else list(self.values)
        k = len(labels)
        if len(rows) != k:
            raise ValidationError(
                f"Comparison matrix has {len(rows)} rows, expected {k} for labels {list(labels)}"
            )
        matrix = np.empty((k, k), dtype=float)
        for i, row in enumerate(rows):
            row = list(row)
            if len(row) != k:
                raise ValidationError(
                    f"Comparison matrix row {i} has {len(row)} values, expected {k} (matrix must be square)"
                )
            for j, value in enumerate(row):
                matrix[i, j] = _as_number(value, f"Comparison[{i}][{j}]")

        if (matrix <= 0).any():
            i, j = np.argwhere(matrix <= 0)[0]
            raise ValidationError(
                f"Comparison[{i}][{j}] = {matrix[i, j]} must be strictly positive"
            )
        diagonal = np.diag(matrix)
        if not np.allclose(diagonal, 1.0, rtol=0.0, atol=self.tolerance):
            i = int(np.argmax(np.abs(diagonal - 1.0)))
            raise ValidationError(f"Comparison[{i}][{i}] = {diagonal[i]} must be 1")
        product = matrix * matrix.T
        if not np.allclose(product, 1.0, rtol=0.0, atol=self.tolerance):
            i, j = np.argwhere(~np.isclose(product, 1.0, rtol=0.0, atol=self.tolerance))[0]
            raise ValidationError(
                f"Comparison matrix is not reciprocal: M[{i}][{j}] = {matrix[i, j]} "
                f"but M[{j}][{i}] = {matrix[j, i]}"
            )

        object.__setattr__(self, 'labels', labels)
        object.__setattr__(self, 'values', _frozen(matrix))

    @property
    def size(self) -> int:
        return len(self.labels)

    @classmethod
    def identity(cls, labels: Sequence[str]) -> 'PairwiseComparisonMatrix':
        """All items judged equally important."""
        k = len(labels)
        return cls(tuple(labels), np.ones((k, k)))

    @classmethod
    def from_judgements(cls, labels: Sequence[str],
                        judgements: Dict[Tuple[int, int], float]) -> 'PairwiseComparisonMatrix':
        """
        Build a reciprocal matrix from judgements ``{(i, j): value}``.

        Pairs that are not given default to 1 (equal importance).
        """
        k = len(labels)
        matrix = np.ones((k, k))
        for (i, j), value in judgements.items():
            if i == j:
                raise ValidationError(f"Judgement ({i}, {j}) compares an item with itself")
            value = _as_number(value, f"Judgement ({i}, {j})")
            if value <= 0:
                raise ValidationError(f"Judgement ({i}, {j}) = {value} must be strictly positive")
            matrix[i, j] = value
            matrix[j, i] = 1.0 / value
        return cls(tuple(labels), matrix)

    def with_judgement(self, i: int, j: int, value: float) -> 'PairwiseComparisonMatrix':
        """Copy with ``M[i][j] = value`` and ``M[j][i] = 1 / value``."""
        if i == j:
            raise ValidationError("The diagonal of a comparison matrix is fixed at 1")
        value = _as_number(value, f"Judgement ({i}, {j})")
        if value <= 0:
            raise ValidationError(f"Judgement ({i}, {j}) = {value} must be strictly positive")
        matrix = self.values.copy()
        matrix[i, j] = value
        matrix[j, i] = 1.0 / value
        return PairwiseComparisonMatrix(self.labels, matrix, self.tolerance)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.values.copy(), index=list(self.labels), columns=list(self.labels))


def _coerce_matrix(matrix, labels: Sequence[str], tolerance: float) -> PairwiseComparisonMatrix:
    if isinstance(matrix, PairwiseComparisonMatrix):
        if matrix.size != len(labels):
            raise ValidationError(
                f"Comparison matrix over {list(matrix.labels)} has size {matrix.size}, "
                f"expected {len(labels)}"
            )
        return matrix
    return PairwiseComparisonMatrix(tuple(labels), matrix, tolerance)


@dataclass(frozen=True)
class AHPProblem:
    """
    AHP hierarchy: goal → criteria → alternatives.

    Parameters
    ----------
    alternatives : Sequence[str]
        Alternative names (n >= 2)
    criteria : Sequence[str]
        Criterion names (m >= 2)
    criteria_matrix : PairwiseComparisonMatrix or array-like
        m × m comparisons between criteria
    alternative_matrices : Sequence[PairwiseComparisonMatrix or array-like]
        One n × n comparison matrix per criterion, in criteria order
    """
    alternatives: Tuple[str, ...]
    criteria: Tuple[str, ...]
    criteria_matrix: PairwiseComparisonMatrix = field(repr=False)
    alternative_matrices: Tuple[PairwiseComparisonMatrix, ...] = field(repr=False)
    tolerance: float = field(default=RECIPROCAL_TOLERANCE, compare=False)

    def __post_init__(self):
        alternatives = tuple(str(a) for a in self.alternatives)
        criteria = tuple(c.name if isinstance(c, Criterion) else str(c) for c in self.criteria)
        _check_unique(criteria, 'criterion')
        if len(alternatives) < MIN_ALTERNATIVES:
            raise ConfigurationError(
                f"At least {MIN_ALTERNATIVES} alternatives are required, got {len(alternatives)}"
            )
        if len(criteria) < MIN_CRITERIA:
            raise ConfigurationError(
                f"At least {MIN_CRITERIA} criteria are required, got {len(criteria)}"
            )

        criteria_matrix = _coerce_matrix(self.criteria_matrix, criteria, self.tolerance)
        matrices = list(self.alternative_matrices)
        if len(matrices) != len(criteria):
            raise ValidationError(
                f"Expected one alternatives matrix per criterion ({len(criteria)}), got {len(matrices)}"
            )
        alternative_matrices = tuple(
            _coerce_matrix(matrix, alternatives, self.tolerance) for matrix in matrices
        )

        object.__setattr__(self, 'alternatives', alternatives)
        object.__setattr__(self, 'criteria', criteria)
        object.__setattr__(self, 'criteria_matrix', criteria_matrix)
        object.__setattr__(self, 'alternative_matrices', alternative_matrices)

    @property
    def n_alternatives(self) -> int:
        return len(self.alternatives)

    @property
    def n_criteria(self) -> int:
        return len(self.criteria)

    def to_dict(self) -> Dict:
        return {
            'alternatives': list(self.alternatives),
            'criteria': list(self.criteria),
            'criteria_matrix': self.criteria_matrix.values.tolist(),
            'alternative_matrices': [m.values.tolist() for m in self.alternative_matrices],
        }


# =============================================================================
# Ranking helpers
# =============================================================================

def stable_descending_order(scores: np.ndarray) -> np.ndarray:
    """Indices sorting ``scores`` high to low; ties keep input order."""
    return np.argsort(-np.asarray(scores, dtype=float), kind='stable')


def ranks_from_order(order: np.ndarray) -> np.ndarray:
    """Rank (1 = best) of each position given a best-first order."""
    ranks = np.empty(len(order), dtype=int)
    ranks[order] = np.arange(1, len(order) + 1)
    return ranks
