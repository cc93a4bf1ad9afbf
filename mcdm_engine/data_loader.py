# -*- coding: utf-8 -*-
"""Decision problem loading: JSON documents, CSV tables and built-in samples."""

import json
import copy
import pandas as pd
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union
from dataclasses import dataclass, field

from .config import Config, MethodType, get_config
from .exceptions import ConfigurationError, ValidationError
from .logger import get_logger
from .mcdm.base import AHPProblem, Criterion, DecisionProblem


# Built-in example problems, one per method
SAMPLE_PROBLEMS: Dict[str, Dict[str, Any]] = {
    'promethee': {
        'method': 'promethee',
        'alternatives': ['Alternative A', 'Alternative B', 'Alternative C'],
        'criteria': [
            {'name': 'Cost', 'weight': 0.3, 'direction': 'cost',
             'preference_type': 'linear', 'threshold': 1000},
            {'name': 'Quality', 'weight': 0.4, 'direction': 'benefit',
             'preference_type': 'v-shape', 'threshold': 2},
            {'name': 'Time', 'weight': 0.3, 'direction': 'cost',
             'preference_type': 'quasi', 'threshold': 5},
        ],
        'performance': [
            [15000, 8, 25],
            [12000, 9, 30],
            [18000, 7, 20],
        ],
    },
    'ahp': {
        'method': 'ahp',
        'alternatives': ['Supplier A', 'Supplier B', 'Supplier C'],
        'criteria': ['Cost', 'Quality', 'Delivery Time'],
        'criteria_matrix': [
            [1, 3, 5],
            [1 / 3, 1, 2],
            [1 / 5, 1 / 2, 1],
        ],
        'alternative_matrices': [
            [[1, 2, 4], [1 / 2, 1, 3], [1 / 4, 1 / 3, 1]],
            [[1, 1 / 3, 2], [3, 1, 4], [1 / 2, 1 / 4, 1]],
            [[1, 4, 2], [1 / 4, 1, 1 / 2], [1 / 2, 2, 1]],
        ],
    },
    'electre': {
        'method': 'electre',
        'alternatives': ['Project A', 'Project B', 'Project C', 'Project D'],
        'criteria': [
            {'name': 'Cost', 'weight': 0.3, 'direction': 'cost', 'veto_threshold': 5000},
            {'name': 'Quality', 'weight': 0.4, 'direction': 'benefit', 'veto_threshold': 3},
            {'name': 'Risk', 'weight': 0.3, 'direction': 'cost', 'veto_threshold': 2},
        ],
        'performance': [
            [15000, 8, 4],
            [12000, 9, 6],
            [18000, 7, 3],
            [14000, 8, 5],
        ],
        'concordance_threshold': 0.7,
        'discordance_threshold': 0.3,
    },
}


@dataclass
class ProblemDocument:
    """A loaded problem together with its method and method parameters."""
    method: MethodType
    problem: Union[DecisionProblem, AHPProblem]
    parameters: Dict[str, float] = field(default_factory=dict)
    source: Optional[str] = None

    @property
    def alternatives(self) -> List[str]:
        return list(self.problem.alternatives)

    @property
    def criteria(self) -> List[str]:
        if isinstance(self.problem, AHPProblem):
            return list(self.problem.criteria)
        return self.problem.criterion_names


class ProblemLoader:
    """Builds validated decision problems from documents and tables."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()
        self.logger = get_logger()

    def load(self, filepath: Union[str, Path]) -> ProblemDocument:
        """Load a JSON problem document."""
        filepath = Path(filepath)
        self.logger.info(f"Loading problem from {filepath}")
        with open(filepath, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValidationError(f"{filepath} is not valid JSON: {e}") from e
        document = self.from_dict(data)
        document.source = str(filepath)
        return document

    def from_dict(self, data: Dict[str, Any]) -> ProblemDocument:
        """Build a problem from a parsed document."""
        if not isinstance(data, dict):
            raise ValidationError(f"Problem document must be an object, got {type(data).__name__}")
        if 'method' not in data:
            raise ValidationError("Problem document has no 'method' field")
        method = self._parse_method(data['method'])
        self._require(data, ['alternatives', 'criteria'])

        if method is MethodType.AHP:
            self._require(data, ['criteria_matrix', 'alternative_matrices'])
            problem = AHPProblem(
                alternatives=data['alternatives'],
                criteria=[self._criterion_name(c) for c in data['criteria']],
                criteria_matrix=data['criteria_matrix'],
                alternative_matrices=data['alternative_matrices'],
                tolerance=self.config.validation.reciprocal_tolerance,
            )
            parameters = {}
        else:
            self._require(data, ['performance'])
            criteria = [self._criterion(record, method) for record in data['criteria']]
            problem = DecisionProblem(
                alternatives=data['alternatives'],
                criteria=criteria,
                performance=data['performance'],
                weight_tolerance=self.config.validation.weight_tolerance,
            )
            parameters = {}
            if method is MethodType.ELECTRE:
                parameters = {
                    'concordance_threshold': float(data.get(
                        'concordance_threshold', self.config.electre.concordance_threshold)),
                    'discordance_threshold': float(data.get(
                        'discordance_threshold', self.config.electre.discordance_threshold)),
                }

        self.logger.info(
            f"✓ Loaded {method.value} problem: {problem.n_alternatives} alternatives, "
            f"{problem.n_criteria} criteria"
        )
        return ProblemDocument(method=method, problem=problem, parameters=parameters)

    def load_performance_csv(self,
                             filepath: Union[str, Path],
                             criteria: Sequence[Union[Criterion, Dict]]) -> DecisionProblem:
        """
        Load an alternatives × criteria table.

        The first column holds the alternative names; remaining columns are
        matched to ``criteria`` by name.
        """
        filepath = Path(filepath)
        self.logger.info(f"Loading performance table from {filepath}")
        df = pd.read_csv(filepath, index_col=0)
        df.index = df.index.astype(str)
        return DecisionProblem.from_dataframe(
            df, criteria, weight_tolerance=self.config.validation.weight_tolerance)

    def sample(self, method: Union[str, MethodType]) -> ProblemDocument:
        """Built-in example problem for ``method``."""
        method = self._parse_method(method)
        document = self.from_dict(copy.deepcopy(SAMPLE_PROBLEMS[method.value]))
        document.source = f"sample:{method.value}"
        return document

    def _criterion(self, record: Union[Criterion, Dict], method: MethodType) -> Criterion:
        if isinstance(record, Criterion):
            return record
        if not isinstance(record, dict):
            raise ValidationError(f"Criterion record must be an object, got {record!r}")
        record = dict(record)
        if method is MethodType.PROMETHEE and not (
                'preference_type' in record or 'preferenceType' in record):
            record['preference_type'] = self.config.promethee.default_preference
            record.setdefault('threshold', self.config.promethee.default_threshold)
        return Criterion.from_dict(record)

    @staticmethod
    def _criterion_name(record: Union[str, Criterion, Dict]) -> Union[str, Criterion]:
        if isinstance(record, dict):
            if 'name' not in record:
                raise ValidationError(f"Criterion record needs a 'name': {record}")
            return record['name']
        return record

    @staticmethod
    def _parse_method(value: Union[str, MethodType]) -> MethodType:
        if isinstance(value, MethodType):
            return value
        try:
            return MethodType(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in MethodType)
            raise ConfigurationError(
                f"Unknown method: {value!r} (expected one of {valid})"
            ) from None

    @staticmethod
    def _require(data: Dict[str, Any], keys: List[str]) -> None:
        missing = [k for k in keys if k not in data]
        if missing:
            raise ValidationError(f"Problem document is missing fields: {missing}")


def load_problem(filepath: Union[str, Path], config: Optional[Config] = None) -> ProblemDocument:
    """Convenience function to load a JSON problem document."""
    return ProblemLoader(config).load(filepath)


def problem_from_dict(data: Dict[str, Any], config: Optional[Config] = None) -> ProblemDocument:
    return ProblemLoader(config).from_dict(data)


def load_performance_csv(filepath: Union[str, Path],
                         criteria: Sequence[Union[Criterion, Dict]],
                         config: Optional[Config] = None) -> DecisionProblem:
    return ProblemLoader(config).load_performance_csv(filepath, criteria)


def load_sample(method: Union[str, MethodType], config: Optional[Config] = None) -> ProblemDocument:
    """Built-in example problem ('promethee', 'ahp' or 'electre')."""
    return ProblemLoader(config).sample(method)
