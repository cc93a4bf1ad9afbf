# -*- coding: utf-8 -*-
"""
Multi-Criteria Decision Making Module
=====================================

Outranking and aggregation methods over an immutable decision problem.

Submodules
----------
base
    DecisionProblem, Criterion, PairwiseComparisonMatrix, AHPProblem
preference
    The six PROMETHEE preference functions
promethee
    PROMETHEE II complete ranking (with PROMETHEE I partial preorder)
ahp
    Analytic Hierarchy Process with consistency diagnostics
electre
    ELECTRE I outranking relation and kernel

Usage
-----
>>> from mcdm_engine.mcdm import DecisionProblem, Criterion, PROMETHEECalculator
>>> from mcdm_engine.mcdm import AHPProblem, AHPCalculator, ELECTRECalculator
"""

from .preference import (
    Direction, PreferenceType, PreferenceFunction,
    preference, oriented_difference,
)
from .base import (
    Criterion, DecisionProblem, PairwiseComparisonMatrix, AHPProblem,
    SAATY_SCALE, WEIGHT_SUM_TOLERANCE, RECIPROCAL_TOLERANCE,
    stable_descending_order, ranks_from_order,
)
from .promethee import PROMETHEECalculator, PROMETHEEResult
from .ahp import (
    AHPCalculator, AHPResult, ConsistencyResult,
    RANDOM_INDEX, random_index, priority_vector, consistency,
)
from .electre import ELECTRECalculator, ELECTREResult


__all__ = [
    # Preference functions
    'Direction',
    'PreferenceType',
    'PreferenceFunction',
    'preference',
    'oriented_difference',

    # Problem model
    'Criterion',
    'DecisionProblem',
    'PairwiseComparisonMatrix',
    'AHPProblem',
    'SAATY_SCALE',
    'WEIGHT_SUM_TOLERANCE',
    'RECIPROCAL_TOLERANCE',
    'stable_descending_order',
    'ranks_from_order',

    # Methods
    'PROMETHEECalculator', 'PROMETHEEResult',
    'AHPCalculator', 'AHPResult', 'ConsistencyResult',
    'RANDOM_INDEX', 'random_index', 'priority_vector', 'consistency',
    'ELECTRECalculator', 'ELECTREResult',
]


def get_all_calculators():
    """
    Get dictionary of all MCDM calculators.

    Returns
    -------
    Dict[str, class]
        Calculator classes keyed by method tag
    """
    return {
        'promethee': PROMETHEECalculator,
        'ahp': AHPCalculator,
        'electre': ELECTRECalculator,
    }
