# -*- coding: utf-8 -*-
"""
Output Management for MCDM Results
==================================

Provides the ``OutputManager`` class for persisting a finished analysis
into an organised directory structure::

    outputs/
    ├── results/   result documents (JSON) and rankings (CSV)
    └── logs/      log files written by the pipeline

Result documents carry the result record plus ``method``,
``alternatives``, ``criteria`` and an ISO ``timestamp``.
"""

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from datetime import datetime

from .config import Config, MethodType, get_config
from .mcdm import AHPResult, ELECTREResult, PROMETHEEResult

RESULT_TYPES = {
    MethodType.PROMETHEE: PROMETHEEResult,
    MethodType.AHP: AHPResult,
    MethodType.ELECTRE: ELECTREResult,
}


def _json_safe(obj: Any) -> Any:
    """Replace non-finite floats by None so the document stays valid JSON."""
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if isinstance(obj, dict):
        return {k: _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_json_safe(v) for v in obj]
    return obj


# =========================================================================
# OutputManager
# =========================================================================

class OutputManager:
    """Manages structured output to ``results/`` and ``logs/``."""

    def __init__(self, base_output_dir: Union[str, Path] = 'outputs',
                 config: Optional[Config] = None):
        self.config = config or get_config()
        self.base_dir = Path(base_output_dir)
        self.results_dir = self.base_dir / 'results'
        self.logs_dir = self.base_dir / 'logs'
        self._setup_directories()
        self.timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')

    def _setup_directories(self) -> None:
        for d in [self.results_dir, self.logs_dir]:
            d.mkdir(parents=True, exist_ok=True)

    # -----------------------------------------------------------------
    # Result export
    # -----------------------------------------------------------------

    def save_result(
        self,
        method: Union[str, MethodType],
        result: Union[PROMETHEEResult, AHPResult, ELECTREResult],
        alternatives: List[str],
        criteria: List[str],
    ) -> Dict[str, str]:
        """Save the result document (JSON) and its ranking (CSV)."""
        method = MethodType(method) if not isinstance(method, MethodType) else method
        saved = {'json': self.save_result_json(method, result, alternatives, criteria)}
        if self.config.output.save_csv:
            saved['ranking'] = self.save_ranking_csv(method, result)
        return saved

    def save_result_json(
        self,
        method: MethodType,
        result: Any,
        alternatives: List[str],
        criteria: List[str],
    ) -> str:
        now = datetime.now()
        document = dict(result.to_dict())
        document.update({
            'method': method.value,
            'alternatives': list(alternatives),
            'criteria': list(criteria),
            'timestamp': now.isoformat(),
        })
        path = self.results_dir / f"{method.value}_results_{now.strftime('%Y-%m-%d')}.json"
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(_json_safe(document), f, indent=self.config.output.json_indent)
        return str(path)

    def save_ranking_csv(self, method: MethodType, result: Any) -> str:
        path = self.results_dir / f'{method.value}_ranking.csv'
        result.ranking.to_csv(path, index=False,
                              float_format=self.config.output.csv_float_format)
        return str(path)

    # -----------------------------------------------------------------
    # Result import
    # -----------------------------------------------------------------

    def load_result(self, filepath: Union[str, Path]) -> Tuple[MethodType, Any]:
        """Read a result document written by :meth:`save_result_json`."""
        with open(filepath, 'r', encoding='utf-8') as f:
            document = json.load(f)
        method = MethodType(document['method'])
        return method, RESULT_TYPES[method].from_dict(document)

    # -----------------------------------------------------------------
    # Execution summary
    # -----------------------------------------------------------------

    def save_execution_summary(self, method: MethodType, execution_time: float) -> str:
        summary = {
            'timestamp': datetime.now().isoformat(),
            'method': method.value,
            'execution_time_seconds': round(execution_time, 4),
        }
        path = self.results_dir / 'execution_summary.json'
        with open(path, 'w') as f:
            json.dump(summary, f, indent=2)
        return str(path)

    def save_config_snapshot(self, config: Config) -> str:
        path = self.results_dir / 'config_snapshot.json'
        config.save(path)
        return str(path)


# =========================================================================
# Factory
# =========================================================================

def create_output_manager(output_dir: Union[str, Path] = 'outputs',
                          config: Optional[Config] = None) -> OutputManager:
    """Factory function to create an OutputManager."""
    return OutputManager(output_dir, config)
