"""
Pytest configuration and fixtures for MCDM engine tests.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from mcdm_engine.config import reset_config
from mcdm_engine.logger import LoggerFactory
from mcdm_engine.mcdm import AHPProblem, Criterion, DecisionProblem


@pytest.fixture(autouse=True)
def clean_state():
    """Fresh global configuration and logger handlers for every test."""
    reset_config()
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()
    reset_config()


@pytest.fixture
def tie_problem():
    """Two alternatives that split two equally weighted criteria."""
    return DecisionProblem(
        alternatives=['A', 'B'],
        criteria=[Criterion('c1', 0.5), Criterion('c2', 0.5)],
        performance=[[10, 1], [5, 2]],
    )


@pytest.fixture
def electre_pair_problem():
    """A dominates B on both criteria; vetoes are never triggered against A."""
    return DecisionProblem(
        alternatives=['A', 'B'],
        criteria=[
            Criterion('c1', 0.6, 'benefit', veto_threshold=5),
            Criterion('c2', 0.4, 'cost', veto_threshold=2),
        ],
        performance=[[10, 3], [7, 5]],
    )


@pytest.fixture
def supplier_problem():
    """Supplier selection with three preference function types."""
    return DecisionProblem(
        alternatives=['Alternative A', 'Alternative B', 'Alternative C'],
        criteria=[
            Criterion('Cost', 0.3, 'cost', 'linear', 1000),
            Criterion('Quality', 0.4, 'benefit', 'v-shape', 2),
            Criterion('Time', 0.3, 'cost', 'quasi', 5),
        ],
        performance=[
            [15000, 8, 25],
            [12000, 9, 30],
            [18000, 7, 20],
        ],
    )


@pytest.fixture
def project_problem():
    """Project selection with veto thresholds."""
    return DecisionProblem(
        alternatives=['Project A', 'Project B', 'Project C', 'Project D'],
        criteria=[
            Criterion('Cost', 0.3, 'cost', veto_threshold=5000),
            Criterion('Quality', 0.4, 'benefit', veto_threshold=3),
            Criterion('Risk', 0.3, 'cost', veto_threshold=2),
        ],
        performance=[
            [15000, 8, 4],
            [12000, 9, 6],
            [18000, 7, 3],
            [14000, 8, 5],
        ],
    )


@pytest.fixture
def supplier_ahp_problem():
    """Three suppliers compared pairwise under three criteria."""
    return AHPProblem(
        alternatives=['Supplier A', 'Supplier B', 'Supplier C'],
        criteria=['Cost', 'Quality', 'Delivery Time'],
        criteria_matrix=[[1, 3, 5], [1 / 3, 1, 2], [1 / 5, 1 / 2, 1]],
        alternative_matrices=[
            [[1, 2, 4], [1 / 2, 1, 3], [1 / 4, 1 / 3, 1]],
            [[1, 1 / 3, 2], [3, 1, 4], [1 / 2, 1 / 4, 1]],
            [[1, 4, 2], [1 / 4, 1, 1 / 2], [1 / 2, 2, 1]],
        ],
    )
