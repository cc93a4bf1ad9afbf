# -*- coding: utf-8 -*-
"""
MCDM Engine: Multi-Criteria Decision Making
===========================================

Ranks a finite set of alternatives scored against weighted criteria with
one of three methods: PROMETHEE II, AHP or ELECTRE I.

Package Structure
-----------------
mcdm_engine/
├── mcdm/
│   ├── base.py         # DecisionProblem, Criterion, PairwiseComparisonMatrix
│   ├── preference.py   # Six PROMETHEE preference functions
│   ├── promethee.py    # PROMETHEE II (and I)
│   ├── ahp.py          # Analytic Hierarchy Process
│   └── electre.py      # ELECTRE I
│
├── analysis/
│   └── agreement.py    # Rank agreement between methods
│
├── config.py           # Dataclass configuration
├── logger.py           # Logging setup
├── exceptions.py       # ValidationError, ConfigurationError
├── data_loader.py      # JSON / CSV problems, built-in samples
├── output_manager.py   # JSON / CSV result export
└── pipeline.py         # Load → run → export

Quick Start
-----------
>>> from mcdm_engine import run_analysis, get_default_config
>>> result = run_analysis('promethee', get_default_config(), save=False)
>>> print(result.summary())
"""

from .config import Config, MethodType, get_default_config, get_config, set_config, reset_config
from .exceptions import MCDMError, ValidationError, ConfigurationError
from .logger import (
    setup_logger,
    get_logger,
    get_module_logger,
    LoggerFactory,
    log_execution,
    log_context,
    timed_operation,
)
from .data_loader import (
    ProblemDocument, ProblemLoader,
    load_problem, problem_from_dict, load_performance_csv, load_sample,
)
from .pipeline import DecisionPipeline, PipelineResult, run_analysis
from .output_manager import OutputManager, create_output_manager

__version__ = '1.0.0'

__all__ = [
    # Configuration
    'Config',
    'MethodType',
    'get_default_config',
    'get_config',
    'set_config',
    'reset_config',

    # Errors
    'MCDMError',
    'ValidationError',
    'ConfigurationError',

    # Logging
    'setup_logger',
    'get_logger',
    'get_module_logger',
    'LoggerFactory',
    'log_execution',
    'log_context',
    'timed_operation',

    # Problem loading
    'ProblemDocument',
    'ProblemLoader',
    'load_problem',
    'problem_from_dict',
    'load_performance_csv',
    'load_sample',

    # Pipeline
    'DecisionPipeline',
    'run_analysis',
    'PipelineResult',

    # Output Management
    'OutputManager',
    'create_output_manager',
]
