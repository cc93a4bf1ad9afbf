# -*- coding: utf-8 -*-
"""
Ranking Agreement
=================

Rank correlation between rankings of the same alternatives produced by
different methods (or by the same method under different parameters).
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, List, Union
from dataclasses import dataclass
from scipy import stats

from ..exceptions import ValidationError
from ..logger import get_module_logger

logger = get_module_logger('analysis.agreement')


@dataclass
class AgreementResult:
    """Pairwise rank correlations between methods."""
    ranks: pd.DataFrame              # alternatives × methods
    spearman: pd.DataFrame           # methods × methods, Spearman rho
    kendall: pd.DataFrame            # methods × methods, Kendall tau
    top_choices: Dict[str, str]      # method -> rank-1 alternative

    @property
    def methods(self) -> List[str]:
        return self.ranks.columns.tolist()

    @property
    def unanimous_top(self) -> bool:
        """True when every method puts the same alternative first."""
        return len(set(self.top_choices.values())) == 1

    def mean_spearman(self) -> float:
        """Average off-diagonal Spearman correlation."""
        values = self.spearman.values
        mask = ~np.eye(len(values), dtype=bool)
        return float(values[mask].mean()) if mask.any() else 1.0

    def summary(self) -> str:
        lines = [
            f"\n{'='*60}",
            "RANKING AGREEMENT",
            f"{'='*60}",
            f"Methods: {', '.join(self.methods)}",
            f"Mean Spearman rho: {self.mean_spearman():.4f}",
            f"Unanimous top choice: {'YES ✓' if self.unanimous_top else 'NO ✗'}",
        ]
        for method, top in self.top_choices.items():
            lines.append(f"  {method}: {top}")
        lines.append("=" * 60)
        return "\n".join(lines)


def _as_ranks(ranking: Union[pd.Series, Any]) -> pd.Series:
    # Result objects expose final_ranks; plain Series are used as given
    if isinstance(ranking, pd.Series):
        return ranking
    return ranking.final_ranks


def compare_rankings(rankings: Dict[str, Union[pd.Series, Any]]) -> AgreementResult:
    """
    Compare rankings of the same alternatives.

    Parameters
    ----------
    rankings : Dict[str, pd.Series or result]
        Method name to rank Series (index = alternatives, 1 = best) or to a
        result object exposing ``final_ranks``

    Returns
    -------
    AgreementResult
    """
    if len(rankings) < 2:
        raise ValidationError(f"At least 2 rankings are required, got {len(rankings)}")

    series = {name: _as_ranks(r) for name, r in rankings.items()}
    reference_name, reference = next(iter(series.items()))
    alternatives = set(reference.index)
    for name, ranks in series.items():
        if set(ranks.index) != alternatives or len(ranks) != len(reference):
            raise ValidationError(
                f"Ranking '{name}' covers different alternatives than '{reference_name}'"
            )

    ranks = pd.DataFrame({name: s.reindex(reference.index) for name, s in series.items()})
    methods = ranks.columns.tolist()
    k = len(methods)
    rho = np.eye(k)
    tau = np.eye(k)

    for i in range(k):
        for j in range(i + 1, k):
            a, b = ranks.iloc[:, i].values, ranks.iloc[:, j].values
            rho[i, j] = rho[j, i] = stats.spearmanr(a, b)[0]
            tau[i, j] = tau[j, i] = stats.kendalltau(a, b)[0]

    top_choices = {name: str(ranks[name].idxmin()) for name in methods}
    logger.debug(f"Compared {k} rankings of {len(ranks)} alternatives")

    return AgreementResult(
        ranks=ranks,
        spearman=pd.DataFrame(rho, index=methods, columns=methods),
        kendall=pd.DataFrame(tau, index=methods, columns=methods),
        top_choices=top_choices,
    )
