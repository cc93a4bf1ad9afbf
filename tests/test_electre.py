# -*- coding: utf-8 -*-
"""Tests for the ELECTRE I engine."""

import logging

import numpy as np
import pandas as pd
import pytest

from mcdm_engine.exceptions import ConfigurationError, ValidationError
from mcdm_engine.mcdm import Criterion, DecisionProblem, ELECTRECalculator, ELECTREResult


@pytest.fixture
def project_result(project_problem):
    return ELECTRECalculator(0.7, 0.3).calculate(project_problem)


class TestOutranking:

    def test_dominating_pair(self, electre_pair_problem):
        result = ELECTRECalculator(0.7, 0.3).calculate(electre_pair_problem)

        assert result.concordance.loc['A', 'B'] == pytest.approx(1.0)
        assert result.discordance.loc['A', 'B'] == 0.0
        assert result.outranking.loc['A', 'B']
        assert result.concordance.loc['B', 'A'] == pytest.approx(0.0)
        assert not result.outranking.loc['B', 'A']
        assert result.kernel == ['A']

        dominance = result.dominance.set_index('alternative')
        assert dominance.loc['A', 'net_dominance'] == 1
        assert dominance.loc['B', 'net_dominance'] == -1
        assert result.ranking['alternative'].tolist() == ['A', 'B']
        assert result.final_ranks.tolist() == [1, 2]

    def test_project_selection(self, project_result):
        assert project_result.concordance.loc['Project A', 'Project D'] == pytest.approx(0.7)
        assert project_result.discordance.loc['Project A', 'Project D'] == pytest.approx(0.2)
        # Project A is better on risk by a full veto step
        assert project_result.discordance.loc['Project B', 'Project A'] == 1.0

        assert project_result.outranking.values.sum() == 1
        assert project_result.outranking.loc['Project A', 'Project D']
        assert project_result.kernel == ['Project A', 'Project B', 'Project C']
        assert project_result.ranking['alternative'].tolist() == [
            'Project A', 'Project B', 'Project C', 'Project D']
        assert project_result.outranked_by('Project D') == ['Project A']

    def test_matrix_ranges(self, project_result):
        c = project_result.concordance.values
        d = project_result.discordance.values
        assert ((c >= 0) & (c <= 1)).all()
        assert ((d >= 0) & (d <= 1)).all()
        np.testing.assert_array_equal(np.diag(c), 1.0)
        np.testing.assert_array_equal(np.diag(d), 0.0)
        assert not np.diag(project_result.outranking.values).any()

    def test_ties_count_as_concordant(self):
        problem = DecisionProblem(
            alternatives=['A', 'B'],
            criteria=[Criterion('x', 0.5, veto_threshold=1), Criterion('y', 0.5, veto_threshold=1)],
            performance=[[3, 3], [3, 3]],
        )
        result = ELECTRECalculator().calculate(problem)
        assert result.concordance.loc['A', 'B'] == 1.0
        assert result.outranking.loc['A', 'B'] and result.outranking.loc['B', 'A']

    def test_concordance_capped_at_one(self):
        problem = DecisionProblem(
            alternatives=['A', 'B'],
            criteria=[Criterion('x', 0.505, veto_threshold=1), Criterion('y', 0.5, veto_threshold=1)],
            performance=[[1, 1], [1, 1]],
        )
        result = ELECTRECalculator().calculate(problem)
        np.testing.assert_array_equal(result.concordance.values, np.ones((2, 2)))

    def test_looser_weight_tolerance(self):
        problem = DecisionProblem(
            alternatives=['A', 'B'],
            criteria=[Criterion('x', 0.5, veto_threshold=5), Criterion('y', 0.53, veto_threshold=5)],
            performance=[[2, 2], [1, 1]],
            weight_tolerance=0.05,
        )
        result = ELECTRECalculator(weight_tolerance=0.05).calculate(problem)
        assert result.kernel == ['A']

    def test_duplicate_criteria_rejected(self):
        with pytest.raises(ValidationError, match='Duplicate criterion names'):
            DecisionProblem(
                alternatives=['A', 'B'],
                criteria=[Criterion('x', 0.5, veto_threshold=1), Criterion('x', 0.5, veto_threshold=1)],
                performance=[[1, 2], [2, 1]],
            )

    def test_zero_veto_is_full_discordance(self):
        problem = DecisionProblem(
            alternatives=['A', 'B'],
            criteria=[Criterion('x', 0.5, veto_threshold=0), Criterion('y', 0.5, veto_threshold=10)],
            performance=[[1, 5], [1.5, 5]],
        )
        result = ELECTRECalculator().calculate(problem)
        assert result.discordance.loc['A', 'B'] == 1.0
        assert result.discordance.loc['B', 'A'] == 0.0


class TestKernel:

    def test_removing_kernel_member_keeps_others(self, project_problem, project_result):
        calculator = ELECTRECalculator(0.7, 0.3)
        for member in project_result.kernel:
            index = project_problem.alternatives.index(member)
            reduced = calculator.calculate(project_problem.without_alternative(index))
            dominance = reduced.dominance.set_index('alternative')
            for other in project_result.kernel:
                if other != member:
                    assert dominance.loc[other, 'outranked_by'] == 0

    def test_cyclic_relation_gives_empty_kernel(self, caplog):
        problem = DecisionProblem(
            alternatives=['A', 'B', 'C'],
            criteria=[
                Criterion('x', 0.34, veto_threshold=100),
                Criterion('y', 0.33, veto_threshold=100),
                Criterion('z', 0.33, veto_threshold=100),
            ],
            performance=[[3, 2, 1], [1, 3, 2], [2, 1, 3]],
        )
        with caplog.at_level(logging.WARNING):
            result = ELECTRECalculator(0.3, 1.0).calculate(problem)

        assert result.kernel == []
        assert 'kernel is empty' in caplog.text


class TestValidation:

    def test_missing_veto(self, supplier_problem):
        with pytest.raises(ConfigurationError, match='veto'):
            ELECTRECalculator().calculate(supplier_problem)

    @pytest.mark.parametrize('concordance, discordance', [(1.2, 0.3), (0.7, -0.1)])
    def test_thresholds_outside_unit_interval(self, concordance, discordance):
        with pytest.raises(ConfigurationError, match='threshold'):
            ELECTRECalculator(concordance, discordance)


class TestSerialisation:

    def test_round_trip(self, project_result):
        restored = ELECTREResult.from_dict(project_result.to_dict())

        np.testing.assert_array_equal(restored.concordance.values, project_result.concordance.values)
        np.testing.assert_array_equal(restored.discordance.values, project_result.discordance.values)
        np.testing.assert_array_equal(restored.outranking.values, project_result.outranking.values)
        pd.testing.assert_frame_equal(restored.ranking, project_result.ranking, check_dtype=False)
        pd.testing.assert_frame_equal(restored.dominance, project_result.dominance, check_dtype=False)
        assert restored.kernel == project_result.kernel
        assert restored.concordance_threshold == 0.7
        assert restored.discordance_threshold == 0.3
