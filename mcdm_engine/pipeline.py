# -*- coding: utf-8 -*-
"""MCDM pipeline orchestrator: load a problem, run one engine, export results."""

import time
import logging
import pandas as pd
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union
from dataclasses import dataclass, field

from .config import Config, MethodType, get_config
from .exceptions import ConfigurationError, MCDMError, ValidationError
from .logger import setup_logger, log_context, log_execution, timed_operation
from .data_loader import ProblemDocument, ProblemLoader
from .output_manager import OutputManager
from .analysis import AgreementResult, compare_rankings
from .mcdm import (
    AHPCalculator, AHPResult, DecisionProblem,
    ELECTRECalculator, ELECTREResult,
    PROMETHEECalculator, PROMETHEEResult,
)

ProblemSource = Union[str, Path, Dict[str, Any], ProblemDocument]
METHOD_TAGS = {m.value for m in MethodType}


@dataclass
class PipelineResult:
    """Container for one analysis run."""
    method: MethodType
    document: ProblemDocument
    result: Union[PROMETHEEResult, AHPResult, ELECTREResult]
    saved_files: Dict[str, str] = field(default_factory=dict)
    execution_time: float = 0.0

    @property
    def ranking(self) -> pd.DataFrame:
        return self.result.ranking

    @property
    def best(self) -> str:
        return str(self.result.ranking['alternative'].iloc[0])

    def summary(self) -> str:
        lines = [
            f"\n{'='*60}",
            f"{self.method.value.upper()} RESULTS",
            f"{'='*60}",
            f"Source: {self.document.source or '<in-memory>'}",
            f"Alternatives: {len(self.document.alternatives)}",
            f"Criteria: {len(self.document.criteria)}",
            f"Best alternative: {self.best}",
        ]
        if isinstance(self.result, ELECTREResult):
            lines.append(f"Kernel: {', '.join(self.result.kernel) or '(empty)'}")
        elif isinstance(self.result, AHPResult):
            cr = self.result.criteria_consistency.cr
            lines.append(f"Criteria CR: {cr:.4f}"
                         f" ({'consistent' if self.result.is_consistent else 'inconsistent'})")
        lines.append("=" * 60)
        return "\n".join(lines)


class DecisionPipeline:
    """
    Runs one decision method on a problem and exports the result.

    Parameters
    ----------
    config : Config, optional
        Pipeline configuration, defaults to the global configuration
    save : bool
        Write result files and the debug log under ``config.output_dir``
    """

    def __init__(self, config: Optional[Config] = None, save: bool = True):
        self.config = config or get_config()
        self.save = save

        log_file = self.config.logging.log_file
        if save:
            self.config.paths.ensure_directories()
            if log_file is None:
                log_file = self.config.paths.logs_dir / 'debug.log'
        self.logger = setup_logger(
            level=self.config.logging.level,
            log_file=log_file,
            json_file=self.config.logging.json_file,
            console=self.config.logging.console,
            use_colors=self.config.logging.use_colors,
        )
        self.loader = ProblemLoader(self.config)
        self.output_manager = OutputManager(self.config.output_dir, self.config) if save else None

    def run(self, source: ProblemSource) -> PipelineResult:
        """
        Execute a full analysis.

        Parameters
        ----------
        source : str, Path, dict or ProblemDocument
            JSON problem file, sample tag ('promethee', 'ahp', 'electre'),
            parsed document or an already loaded problem

        Returns
        -------
        PipelineResult
        """
        start_time = time.time()
        try:
            document = self._load(source)
            with log_context(method=document.method.value):
                self.logger.info("=" * 60)
                self.logger.info(f"MCDM ANALYSIS: {document.method.value.upper()}")
                self.logger.info("=" * 60)

                with timed_operation(self.logger, f"{document.method.value} engine"):
                    result = self._run_engine(document)

                saved = {}
                if self.save:
                    saved = self.output_manager.save_result(
                        document.method, result, document.alternatives, document.criteria,
                    )
                    for kind, path in saved.items():
                        self.logger.info(f"Saved {kind}: {path}")

                execution_time = time.time() - start_time
                if self.save:
                    self.output_manager.save_execution_summary(document.method, execution_time)
                self.logger.info(
                    f"Best alternative: {result.ranking['alternative'].iloc[0]} "
                    f"({execution_time:.3f}s)"
                )
        except MCDMError as e:
            self.logger.error(f"Analysis failed: {e}")
            raise

        return PipelineResult(
            method=document.method,
            document=document,
            result=result,
            saved_files=saved,
            execution_time=execution_time,
        )

    def compare(self,
                source: ProblemSource,
                methods: Sequence[Union[str, MethodType]] = ('promethee', 'electre')) -> AgreementResult:
        """
        Rank one performance-matrix problem with several methods and
        measure how far the rankings agree.
        """
        document = self._load(source)
        if not isinstance(document.problem, DecisionProblem):
            raise ValidationError("Method comparison needs a performance-matrix problem")

        rankings = {}
        for method in methods:
            method = MethodType(method) if not isinstance(method, MethodType) else method
            variant = ProblemDocument(method, document.problem, self._parameters_for(method, document),
                                      document.source)
            with log_context(method=method.value):
                rankings[method.value] = self._run_engine(variant).final_ranks

        agreement = compare_rankings(rankings)
        self.logger.info(f"Mean Spearman rho across {len(rankings)} methods: "
                         f"{agreement.mean_spearman():.4f}")
        return agreement

    def _load(self, source: ProblemSource) -> ProblemDocument:
        if isinstance(source, ProblemDocument):
            return source
        if isinstance(source, dict):
            return self.loader.from_dict(source)
        if isinstance(source, str) and source.strip().lower() in METHOD_TAGS:
            return self.loader.sample(source)
        return self.loader.load(source)

    def _parameters_for(self, method: MethodType, document: ProblemDocument) -> Dict[str, float]:
        if method is MethodType.ELECTRE:
            return {
                'concordance_threshold': document.parameters.get(
                    'concordance_threshold', self.config.electre.concordance_threshold),
                'discordance_threshold': document.parameters.get(
                    'discordance_threshold', self.config.electre.discordance_threshold),
            }
        return {}

    @log_execution(level=logging.DEBUG)
    def _run_engine(self, document: ProblemDocument):
        method = document.method
        tolerance = self.config.validation.weight_tolerance

        if method is MethodType.PROMETHEE:
            calculator = PROMETHEECalculator(weight_tolerance=tolerance)
            return calculator.calculate(document.problem, progress=self._progress)

        elif method is MethodType.AHP:
            calculator = AHPCalculator(cr_acceptance=self.config.ahp.cr_acceptance)
            return calculator.calculate(document.problem)

        elif method is MethodType.ELECTRE:
            parameters = self._parameters_for(method, document)
            calculator = ELECTRECalculator(
                concordance_threshold=parameters['concordance_threshold'],
                discordance_threshold=parameters['discordance_threshold'],
                weight_tolerance=tolerance,
            )
            return calculator.calculate(document.problem)

        raise ConfigurationError(f"Unhandled method: {method}")

    def _progress(self, stage: str, fraction: float) -> None:
        self.logger.debug(f"  [{fraction:5.0%}] {stage}")


def run_analysis(source: ProblemSource,
                 config: Optional[Config] = None,
                 save: bool = True) -> PipelineResult:
    """Convenience function to run one analysis."""
    return DecisionPipeline(config, save=save).run(source)
