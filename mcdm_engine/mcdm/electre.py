# -*- coding: utf-8 -*-
"""
ELECTRE I: ELimination Et Choix Traduisant la REalité
=====================================================

Outranking method with concordance and discordance analysis (Roy, 1968).

Mathematical Steps:
1. Concordance C(a,b) = sum of weights of criteria on which a is at least
   as good as b; C(a,a) = 1
2. Discordance D(a,b) = max over criteria where b is strictly better of
   min(1, gap / veto); D(a,a) = 0
3. a outranks b  iff  C(a,b) >= c_threshold and D(a,b) <= d_threshold
4. Net dominance = #outranked - #outranked_by; rank by net dominance
5. Kernel = alternatives outranked by no other alternative
"""

import logging
import numpy as np
import pandas as pd
from typing import Dict, List
from dataclasses import dataclass

from ..exceptions import ConfigurationError
from .base import (
    DecisionProblem, WEIGHT_SUM_TOLERANCE,
    stable_descending_order, ranks_from_order,
)
from .preference import oriented_difference

logger = logging.getLogger(__name__)

DEFAULT_CONCORDANCE_THRESHOLD = 0.7
DEFAULT_DISCORDANCE_THRESHOLD = 0.3


@dataclass
class ELECTREResult:
    """Result container for ELECTRE I calculation."""
    concordance: pd.DataFrame          # C(a,b)
    discordance: pd.DataFrame          # D(a,b)
    outranking: pd.DataFrame           # Boolean S(a,b)
    dominance: pd.DataFrame            # Input order: alternative, outranks, outranked_by, net_dominance
    ranking: pd.DataFrame              # Best first, plus rank and position
    kernel: List[str]
    concordance_threshold: float
    discordance_threshold: float

    @property
    def alternatives(self) -> List[str]:
        return self.dominance['alternative'].tolist()

    @property
    def final_ranks(self) -> pd.Series:
        ranks = np.empty(len(self.ranking), dtype=int)
        ranks[self.ranking['position'].values] = self.ranking['rank'].values
        return pd.Series(ranks, index=self.alternatives, name='Rank')

    def outranked_by(self, alternative: str) -> List[str]:
        """Alternatives that outrank ``alternative``."""
        column = self.outranking[alternative]
        return column[column].index.tolist()

    def top_n(self, n: int = 10) -> pd.DataFrame:
        return self.ranking.head(n)

    def to_dict(self) -> Dict:
        return {
            'concordance_matrix': self.concordance.values.tolist(),
            'discordance_matrix': self.discordance.values.tolist(),
            'outranking_matrix': self.outranking.values.astype(bool).tolist(),
            'dominance_scores': [
                {
                    'alternative': row.alternative,
                    'outranks': int(row.outranks),
                    'outranked_by': int(row.outranked_by),
                    'net_dominance': int(row.net_dominance),
                }
                for row in self.dominance.itertuples(index=False)
            ],
            'ranking': [
                {
                    'alternative': row.alternative,
                    'net_dominance': int(row.net_dominance),
                    'rank': int(row.rank),
                    'position': int(row.position),
                }
                for row in self.ranking.itertuples(index=False)
            ],
            'kernel': list(self.kernel),
            'thresholds': {
                'concordance': self.concordance_threshold,
                'discordance': self.discordance_threshold,
            },
            'alternatives': self.alternatives,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ELECTREResult':
        names = list(data['alternatives'])
        dominance = pd.DataFrame(
            data['dominance_scores'],
            columns=['alternative', 'outranks', 'outranked_by', 'net_dominance'],
        )
        ranking = pd.DataFrame(
            data['ranking'],
            columns=['alternative', 'net_dominance', 'rank', 'position'],
        )
        positions = ranking['position'].values
        ranking.insert(1, 'outranks', dominance['outranks'].values[positions])
        ranking.insert(2, 'outranked_by', dominance['outranked_by'].values[positions])
        return cls(
            concordance=pd.DataFrame(data['concordance_matrix'], index=names,
                                     columns=names, dtype=float),
            discordance=pd.DataFrame(data['discordance_matrix'], index=names,
                                     columns=names, dtype=float),
            outranking=pd.DataFrame(data['outranking_matrix'], index=names,
                                    columns=names, dtype=bool),
            dominance=dominance,
            ranking=ranking,
            kernel=list(data['kernel']),
            concordance_threshold=float(data['thresholds']['concordance']),
            discordance_threshold=float(data['thresholds']['discordance']),
        )


class ELECTRECalculator:
    """
    ELECTRE I calculator.

    Every criterion of the problem must define ``veto_threshold``. A veto
    threshold of 0 turns any strict disadvantage into full discordance.

    Parameters
    ----------
    concordance_threshold : float
        Minimum concordance for outranking, in [0, 1]
    discordance_threshold : float
        Maximum discordance for outranking, in [0, 1]
    weight_tolerance : float
        Allowed deviation of the weight sum from 1.0
    """

    def __init__(self,
                 concordance_threshold: float = DEFAULT_CONCORDANCE_THRESHOLD,
                 discordance_threshold: float = DEFAULT_DISCORDANCE_THRESHOLD,
                 weight_tolerance: float = WEIGHT_SUM_TOLERANCE):
        for label, value in (('Concordance', concordance_threshold),
                             ('Discordance', discordance_threshold)):
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(
                    f"{label} threshold must be in [0, 1], got {value}"
                )
        self.concordance_threshold = float(concordance_threshold)
        self.discordance_threshold = float(discordance_threshold)
        self.weight_tolerance = weight_tolerance

    def calculate(self, problem: DecisionProblem) -> ELECTREResult:
        """
        Build the outranking relation, dominance ranking and kernel.

        Parameters
        ----------
        problem : DecisionProblem
            Criteria must carry veto thresholds

        Returns
        -------
        ELECTREResult
        """
        problem.check_weights(self.weight_tolerance)
        missing = [c.name for c in problem.criteria if c.veto_threshold is None]
        if missing:
            raise ConfigurationError(f"ELECTRE needs a veto threshold for criteria: {missing}")

        alternatives = list(problem.alternatives)
        n = problem.n_alternatives
        logger.debug(f"ELECTRE I: {n} alternatives × {problem.n_criteria} criteria")

        concordance = self._calculate_concordance(problem)
        discordance = self._calculate_discordance(problem)

        outranking = ((concordance >= self.concordance_threshold) &
                      (discordance <= self.discordance_threshold))
        np.fill_diagonal(outranking, False)

        outranks = outranking.sum(axis=1).astype(int)
        outranked_by = outranking.sum(axis=0).astype(int)
        net_dominance = outranks - outranked_by

        dominance = pd.DataFrame({
            'alternative': alternatives,
            'outranks': outranks,
            'outranked_by': outranked_by,
            'net_dominance': net_dominance,
        })

        order = stable_descending_order(net_dominance)
        ranks = ranks_from_order(order)
        ranking = dominance.iloc[order].reset_index(drop=True)
        ranking['rank'] = ranks[order]
        ranking['position'] = order

        kernel = [a for a, count in zip(alternatives, outranked_by) if count == 0]
        if not kernel:
            logger.warning(
                "ELECTRE I kernel is empty: every alternative is outranked "
                "(cyclic outranking relation)"
            )
        else:
            logger.debug(f"ELECTRE I kernel: {kernel}")

        return ELECTREResult(
            concordance=pd.DataFrame(concordance, index=alternatives, columns=alternatives),
            discordance=pd.DataFrame(discordance, index=alternatives, columns=alternatives),
            outranking=pd.DataFrame(outranking, index=alternatives, columns=alternatives),
            dominance=dominance,
            ranking=ranking,
            kernel=kernel,
            concordance_threshold=self.concordance_threshold,
            discordance_threshold=self.discordance_threshold,
        )

    def _calculate_concordance(self, problem: DecisionProblem) -> np.ndarray:
        """Weight share of criteria on which a is at least as good as b."""
        n = problem.n_alternatives
        perf = problem.performance
        concordance = np.ones((n, n))

        for a in range(n):
            for b in range(n):
                if a == b:
                    continue
                total = 0.0
                for j, criterion in enumerate(problem.criteria):
                    if oriented_difference(perf[a, j], perf[b, j], criterion.direction) >= 0:
                        total += criterion.weight
                # weights may sum slightly above 1 within tolerance
                concordance[a, b] = min(1.0, total)

        return concordance

    def _calculate_discordance(self, problem: DecisionProblem) -> np.ndarray:
        """Largest veto-scaled disadvantage of a against b."""
        n = problem.n_alternatives
        perf = problem.performance
        discordance = np.zeros((n, n))

        for a in range(n):
            for b in range(n):
                if a == b:
                    continue
                worst = 0.0
                for j, criterion in enumerate(problem.criteria):
                    gap = oriented_difference(perf[b, j], perf[a, j], criterion.direction)
                    if gap <= 0:
                        continue
                    veto = criterion.veto_threshold
                    worst = max(worst, 1.0 if veto == 0 else min(1.0, gap / veto))
                discordance[a, b] = worst

        return discordance
