# -*- coding: utf-8 -*-
"""
AHP: Analytic Hierarchy Process
================================

Pairwise-comparison method (Saaty, 1980).

Mathematical Steps:
1. Priority vector of a k × k comparison matrix M: normalise each column
   by its sum, then average each row
2. Consistency: lambda_max = mean((M·w) / w), CI = (lambda_max - k)/(k - 1),
   CR = CI / RI(k); CR < 0.1 is acceptable
3. Synthesis: Score(a) = sum_c W_c · L_c(a) with W from the criteria
   matrix and L_c from the alternatives matrix of criterion c
4. Rank by Score (higher is better)
"""

import logging
import math
import numpy as np
import pandas as pd
from typing import Dict, List, Union
from dataclasses import dataclass

from .base import (
    AHPProblem, PairwiseComparisonMatrix,
    stable_descending_order, ranks_from_order,
)

logger = logging.getLogger(__name__)

# Saaty's random consistency index, indexed by matrix order
RANDOM_INDEX = [0.0, 0.0, 0.58, 0.90, 1.12, 1.24, 1.32, 1.41, 1.45, 1.49]
CR_ACCEPTANCE = 0.1
CI_ZERO_TOLERANCE = 1e-9


def random_index(k: int) -> float:
    """RI(k); orders beyond the table use the last entry."""
    if k < 0:
        raise ValueError(f"Matrix order must be non-negative, got {k}")
    return RANDOM_INDEX[k] if k < len(RANDOM_INDEX) else RANDOM_INDEX[-1]


@dataclass
class ConsistencyResult:
    """Consistency diagnostics of one comparison matrix."""
    lambda_max: float
    ci: float
    ri: float
    cr: float                       # NaN when undefined
    is_consistent: bool

    def to_dict(self) -> Dict:
        return {
            'lambda_max': self.lambda_max,
            'ci': self.ci,
            'ri': self.ri,
            'cr': None if math.isnan(self.cr) else self.cr,
            'is_consistent': self.is_consistent,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ConsistencyResult':
        cr = data['cr']
        return cls(
            lambda_max=float(data['lambda_max']),
            ci=float(data['ci']),
            ri=float(data['ri']),
            cr=float('nan') if cr is None else float(cr),
            is_consistent=bool(data['is_consistent']),
        )


def priority_vector(matrix: Union[PairwiseComparisonMatrix, np.ndarray]) -> np.ndarray:
    """Approximate principal eigenvector (column-normalised row means)."""
    values = matrix.values if isinstance(matrix, PairwiseComparisonMatrix) else np.asarray(matrix, dtype=float)
    column_sums = values.sum(axis=0)
    normalized = values / column_sums
    return normalized.sum(axis=1) / values.shape[0]


def consistency(matrix: Union[PairwiseComparisonMatrix, np.ndarray],
                weights: np.ndarray,
                cr_acceptance: float = CR_ACCEPTANCE) -> ConsistencyResult:
    """
    Consistency index and ratio of ``matrix`` given its priority vector.

    For orders with RI = 0 (k <= 1) the ratio is 0 when CI is zero and
    NaN otherwise.
    """
    values = matrix.values if isinstance(matrix, PairwiseComparisonMatrix) else np.asarray(matrix, dtype=float)
    k = values.shape[0]
    weighted_sum = values @ weights
    lambda_max = float(np.mean(weighted_sum / weights))
    ci = (lambda_max - k) / (k - 1) if k > 1 else 0.0
    ri = random_index(k)

    if ri > 0:
        cr = ci / ri
    elif abs(ci) <= CI_ZERO_TOLERANCE:
        cr = 0.0
    else:
        cr = float('nan')

    return ConsistencyResult(
        lambda_max=lambda_max,
        ci=ci,
        ri=ri,
        cr=cr,
        is_consistent=bool(cr < cr_acceptance) if not math.isnan(cr) else False,
    )


@dataclass
class AHPResult:
    """Result container for AHP calculation."""
    ranking: pd.DataFrame                          # Best first: alternative, score, rank, position
    criteria_weights: pd.Series                    # W over criteria
    local_scores: pd.DataFrame                     # alternatives × criteria, L_c(a)
    overall_scores: pd.Series                      # Score(a) in input order
    criteria_consistency: ConsistencyResult
    alternative_consistency: Dict[str, ConsistencyResult]

    @property
    def final_ranks(self) -> pd.Series:
        ranks = np.empty(len(self.ranking), dtype=int)
        ranks[self.ranking['position'].values] = self.ranking['rank'].values
        return pd.Series(ranks, index=self.overall_scores.index, name='Rank')

    @property
    def is_consistent(self) -> bool:
        """True when every comparison matrix passes the CR check."""
        return self.criteria_consistency.is_consistent and all(
            c.is_consistent for c in self.alternative_consistency.values()
        )

    def inconsistent_matrices(self) -> List[str]:
        """Names of matrices failing the CR check ('criteria' for the top level)."""
        names = [] if self.criteria_consistency.is_consistent else ['criteria']
        names.extend(name for name, c in self.alternative_consistency.items()
                     if not c.is_consistent)
        return names

    def top_n(self, n: int = 10) -> pd.DataFrame:
        return self.ranking.head(n)

    def to_dict(self) -> Dict:
        return {
            'ranking': [
                {
                    'alternative': row.alternative,
                    'score': float(row.score),
                    'rank': int(row.rank),
                    'position': int(row.position),
                }
                for row in self.ranking.itertuples(index=False)
            ],
            'alternatives': self.overall_scores.index.tolist(),
            'criteria': self.criteria_weights.index.tolist(),
            'criteria_weights': self.criteria_weights.tolist(),
            'alternative_scores': self.local_scores.T.values.tolist(),
            'overall_scores': self.overall_scores.tolist(),
            'consistency': {
                'criteria': self.criteria_consistency.to_dict(),
                'alternatives': [c.to_dict() for c in self.alternative_consistency.values()],
            },
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'AHPResult':
        alternatives = list(data['alternatives'])
        criteria = list(data['criteria'])
        return cls(
            ranking=pd.DataFrame(data['ranking'],
                                 columns=['alternative', 'score', 'rank', 'position']),
            criteria_weights=pd.Series(data['criteria_weights'], index=criteria,
                                       name='Weight', dtype=float),
            local_scores=pd.DataFrame(np.array(data['alternative_scores'], dtype=float).T,
                                      index=alternatives, columns=criteria),
            overall_scores=pd.Series(data['overall_scores'], index=alternatives,
                                     name='Score', dtype=float),
            criteria_consistency=ConsistencyResult.from_dict(data['consistency']['criteria']),
            alternative_consistency={
                name: ConsistencyResult.from_dict(c)
                for name, c in zip(criteria, data['consistency']['alternatives'])
            },
        )


class AHPCalculator:
    """
    Analytic Hierarchy Process calculator.

    Parameters
    ----------
    cr_acceptance : float
        Consistency ratio below which a matrix is considered consistent

    Examples
    --------
    >>> from mcdm_engine.mcdm import AHPProblem, AHPCalculator
    >>> problem = AHPProblem(
    ...     alternatives=['A', 'B'],
    ...     criteria=['Cost', 'Quality'],
    ...     criteria_matrix=[[1, 2], [0.5, 1]],
    ...     alternative_matrices=[[[1, 3], [1/3, 1]], [[1, 1/2], [2, 1]]],
    ... )
    >>> AHPCalculator().calculate(problem).ranking['alternative'].tolist()
    ['A', 'B']

    References
    ----------
    Saaty, T.L. (1980). The Analytic Hierarchy Process. McGraw-Hill.
    """

    def __init__(self, cr_acceptance: float = CR_ACCEPTANCE):
        self.cr_acceptance = cr_acceptance

    def calculate(self, problem: AHPProblem) -> AHPResult:
        """
        Calculate AHP priorities and ranking.

        Parameters
        ----------
        problem : AHPProblem
            Criteria matrix and one alternatives matrix per criterion

        Returns
        -------
        AHPResult
        """
        alternatives = list(problem.alternatives)
        criteria = list(problem.criteria)

        # Criteria weights
        criteria_weights = priority_vector(problem.criteria_matrix)
        criteria_consistency = consistency(problem.criteria_matrix, criteria_weights,
                                           self.cr_acceptance)
        self._report(criteria_consistency, 'criteria')

        # Local priorities per criterion
        local = np.zeros((len(alternatives), len(criteria)))
        alternative_consistency = {}
        for c, (name, matrix) in enumerate(zip(criteria, problem.alternative_matrices)):
            local[:, c] = priority_vector(matrix)
            alternative_consistency[name] = consistency(matrix, local[:, c], self.cr_acceptance)
            self._report(alternative_consistency[name], name)

        # Synthesis
        scores = local @ criteria_weights

        order = stable_descending_order(scores)
        ranks = ranks_from_order(order)
        ranking = pd.DataFrame({
            'alternative': [alternatives[i] for i in order],
            'score': scores[order],
            'rank': ranks[order],
            'position': order,
        })

        return AHPResult(
            ranking=ranking,
            criteria_weights=pd.Series(criteria_weights, index=criteria, name='Weight'),
            local_scores=pd.DataFrame(local, index=alternatives, columns=criteria),
            overall_scores=pd.Series(scores, index=alternatives, name='Score'),
            criteria_consistency=criteria_consistency,
            alternative_consistency=alternative_consistency,
        )

    def _report(self, result: ConsistencyResult, name: str) -> None:
        if result.is_consistent:
            logger.debug(f"AHP '{name}' matrix: CR={result.cr:.4f} (lambda_max={result.lambda_max:.4f})")
        else:
            logger.warning(
                f"AHP '{name}' matrix is inconsistent: CR={result.cr:.4f} "
                f"(acceptance < {self.cr_acceptance})"
            )
