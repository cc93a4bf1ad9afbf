# -*- coding: utf-8 -*-
"""
PROMETHEE Implementation
=========================

PROMETHEE (Preference Ranking Organization METHod for Enrichment Evaluations)
Outranking MCDM method based on pairwise comparisons with preference functions.

Includes:
- PROMETHEE II: Complete ranking (net flow Phi)
- PROMETHEE I: Partial preorder from (Phi+, Phi-)
"""

import logging
import numpy as np
import pandas as pd
from typing import Callable, Dict, List, Optional
from dataclasses import dataclass

from .base import (
    DecisionProblem, WEIGHT_SUM_TOLERANCE,
    stable_descending_order, ranks_from_order,
)
from .preference import oriented_difference

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]


@dataclass
class PROMETHEEResult:
    """Result container for PROMETHEE calculation."""
    ranking: pd.DataFrame                        # Best first: alternative, phi_plus, phi_minus, phi_net, rank
    phi_positive: pd.Series                      # Positive outranking flow (leaving flow)
    phi_negative: pd.Series                      # Negative outranking flow (entering flow)
    phi_net: pd.Series                           # Net flow (Phi+ - Phi-)
    preference_matrix: pd.DataFrame              # Aggregated preference matrix pi(a,b)
    criterion_preferences: Dict[str, pd.DataFrame]  # P_j(a,b) per criterion
    partial_preorder: Dict[str, List[str]]       # PROMETHEE I: a -> alternatives it outranks
    weights: Dict[str, float]
    preference_functions: Dict[str, str]

    @property
    def alternatives(self) -> List[str]:
        return self.phi_net.index.tolist()

    @property
    def final_ranks(self) -> pd.Series:
        """Rank per alternative in input order."""
        ranks = np.empty(len(self.ranking), dtype=int)
        ranks[self.ranking['position'].values] = self.ranking['rank'].values
        return pd.Series(ranks, index=self.phi_net.index, name='Rank')

    def top_n(self, n: int = 10) -> pd.DataFrame:
        """Get top n alternatives."""
        return self.ranking.head(n)

    def get_outranking_relations(self) -> pd.DataFrame:
        """Pairwise PROMETHEE I relations (outranks / indifferent / incomparable)."""
        names = self.alternatives
        plus = self.phi_positive.values
        minus = self.phi_negative.values
        relations = []

        for i, a in enumerate(names):
            for j, b in enumerate(names):
                if i == j:
                    continue
                if _outranks(plus[i], minus[i], plus[j], minus[j]):
                    relation = 'outranks'
                elif plus[i] == plus[j] and minus[i] == minus[j]:
                    relation = 'indifferent'
                elif _outranks(plus[j], minus[j], plus[i], minus[i]):
                    relation = 'outranked'
                else:
                    relation = 'incomparable'
                relations.append({'From': a, 'To': b, 'Relation': relation})

        return pd.DataFrame(relations)

    def to_dict(self) -> Dict:
        return {
            'ranking': [
                {
                    'alternative': row.alternative,
                    'phi_plus': float(row.phi_plus),
                    'phi_minus': float(row.phi_minus),
                    'phi_net': float(row.phi_net),
                    'rank': int(row.rank),
                    'position': int(row.position),
                }
                for row in self.ranking.itertuples(index=False)
            ],
            'flows': {
                'positive': self.phi_positive.tolist(),
                'negative': self.phi_negative.tolist(),
                'net': self.phi_net.tolist(),
            },
            'aggregated_matrix': self.preference_matrix.values.tolist(),
            'preference_matrices': {
                name: matrix.values.tolist()
                for name, matrix in self.criterion_preferences.items()
            },
            'partial_preorder': {k: list(v) for k, v in self.partial_preorder.items()},
            'alternatives': self.alternatives,
            'weights': dict(self.weights),
            'preference_functions': dict(self.preference_functions),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'PROMETHEEResult':
        names = list(data['alternatives'])
        flows = data['flows']
        return cls(
            ranking=pd.DataFrame(
                data['ranking'],
                columns=['alternative', 'phi_plus', 'phi_minus', 'phi_net', 'rank', 'position'],
            ),
            phi_positive=pd.Series(flows['positive'], index=names, name='Phi+', dtype=float),
            phi_negative=pd.Series(flows['negative'], index=names, name='Phi-', dtype=float),
            phi_net=pd.Series(flows['net'], index=names, name='Phi_net', dtype=float),
            preference_matrix=pd.DataFrame(data['aggregated_matrix'], index=names,
                                           columns=names, dtype=float),
            criterion_preferences={
                name: pd.DataFrame(matrix, index=names, columns=names, dtype=float)
                for name, matrix in data['preference_matrices'].items()
            },
            partial_preorder={k: list(v) for k, v in data['partial_preorder'].items()},
            weights=dict(data['weights']),
            preference_functions=dict(data['preference_functions']),
        )


def _outranks(plus_a: float, minus_a: float, plus_b: float, minus_b: float) -> bool:
    # Phi+(a) >= Phi+(b) and Phi-(a) <= Phi-(b), at least one strict
    return (plus_a >= plus_b and minus_a <= minus_b and
            (plus_a > plus_b or minus_a < minus_b))


class PROMETHEECalculator:
    """
    PROMETHEE II calculator.

    Preference functions and thresholds are taken from each criterion of
    the :class:`DecisionProblem`.

    Parameters
    ----------
    weight_tolerance : float
        Allowed deviation of the weight sum from 1.0

    Examples
    --------
    >>> from mcdm_engine.mcdm import DecisionProblem, Criterion, PROMETHEECalculator
    >>> problem = DecisionProblem(
    ...     alternatives=['A', 'B'],
    ...     criteria=[Criterion('Quality', 0.5), Criterion('Speed', 0.5)],
    ...     performance=[[10, 1], [5, 2]],
    ... )
    >>> result = PROMETHEECalculator().calculate(problem)
    >>> result.ranking['alternative'].tolist()
    ['A', 'B']
    """

    def __init__(self, weight_tolerance: float = WEIGHT_SUM_TOLERANCE):
        self.weight_tolerance = weight_tolerance

    def calculate(self,
                  problem: DecisionProblem,
                  progress: Optional[ProgressCallback] = None) -> PROMETHEEResult:
        """
        Calculate PROMETHEE I and II rankings.

        Parameters
        ----------
        problem : DecisionProblem
            Alternatives, criteria (with preference functions) and performances
        progress : callable, optional
            ``progress(stage, fraction)`` called at fixed milestones

        Returns
        -------
        PROMETHEEResult
        """
        notify = progress or (lambda stage, fraction: None)

        # Step 1: Fail fast on weights
        problem.check_weights(self.weight_tolerance)
        notify("validated", 0.0)

        alternatives = list(problem.alternatives)
        n, m = problem.n_alternatives, problem.n_criteria
        perf = problem.performance
        logger.debug(f"PROMETHEE II: {n} alternatives × {m} criteria")

        # Step 2: Pairwise preference indices for each criterion
        criterion_matrices = []
        for j, criterion in enumerate(problem.criteria):
            criterion_matrices.append(
                self._calculate_criterion_preference(perf[:, j], criterion)
            )
            notify(f"criterion:{criterion.name}", 0.1 + 0.6 * (j + 1) / m)

        # Step 3: Aggregated preference matrix pi(a,b)
        preference_matrix = np.zeros((n, n))
        for criterion, matrix in zip(problem.criteria, criterion_matrices):
            preference_matrix += criterion.weight * matrix
        # weights may sum slightly above 1 within tolerance
        preference_matrix = np.minimum(preference_matrix, 1.0)
        notify("aggregated", 0.8)

        # Step 4: Outranking flows (diagonal is zero, so full sums are k != i sums)
        phi_plus = preference_matrix.sum(axis=1) / (n - 1)
        phi_minus = preference_matrix.sum(axis=0) / (n - 1)
        phi_net = phi_plus - phi_minus
        notify("flows", 0.9)

        # Step 5: Stable ranking by net flow
        order = stable_descending_order(phi_net)
        ranks = ranks_from_order(order)
        ranking = pd.DataFrame({
            'alternative': [alternatives[i] for i in order],
            'phi_plus': phi_plus[order],
            'phi_minus': phi_minus[order],
            'phi_net': phi_net[order],
            'rank': ranks[order],
            'position': order,
        })

        # Step 6: PROMETHEE I partial preorder
        partial_preorder = self._calculate_partial_preorder(alternatives, phi_plus, phi_minus)
        notify("ranked", 1.0)

        logger.debug(
            f"PROMETHEE II: best '{ranking['alternative'].iloc[0]}' "
            f"(phi={ranking['phi_net'].iloc[0]:.4f})"
        )

        return PROMETHEEResult(
            ranking=ranking,
            phi_positive=pd.Series(phi_plus, index=alternatives, name='Phi+'),
            phi_negative=pd.Series(phi_minus, index=alternatives, name='Phi-'),
            phi_net=pd.Series(phi_net, index=alternatives, name='Phi_net'),
            preference_matrix=pd.DataFrame(preference_matrix,
                                           index=alternatives, columns=alternatives),
            criterion_preferences={
                c.name: pd.DataFrame(matrix, index=alternatives, columns=alternatives)
                for c, matrix in zip(problem.criteria, criterion_matrices)
            },
            partial_preorder=partial_preorder,
            weights={c.name: c.weight for c in problem.criteria},
            preference_functions={c.name: c.preference_type.value for c in problem.criteria},
        )

    def _calculate_criterion_preference(self, values: np.ndarray, criterion) -> np.ndarray:
        """Calculate pairwise preference matrix for a single criterion."""
        n = len(values)
        pref_matrix = np.zeros((n, n))
        pref_func = criterion.preference_function

        for i in range(n):
            for k in range(n):
                if i != k:
                    d = oriented_difference(values[i], values[k], criterion.direction)
                    pref_matrix[i, k] = pref_func(d)

        return pref_matrix

    def _calculate_partial_preorder(self,
                                    alternatives: List[str],
                                    phi_plus: np.ndarray,
                                    phi_minus: np.ndarray) -> Dict[str, List[str]]:
        """Calculate PROMETHEE I partial preorder relations."""
        preorder = {a: [] for a in alternatives}

        for i, a in enumerate(alternatives):
            for k, b in enumerate(alternatives):
                if i != k and _outranks(phi_plus[i], phi_minus[i], phi_plus[k], phi_minus[k]):
                    preorder[a].append(b)

        return preorder
