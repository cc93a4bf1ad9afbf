# -*- coding: utf-8 -*-
"""Tests for PROMETHEE II (and the PROMETHEE I partial preorder)."""

import numpy as np
import pytest

from mcdm_engine.exceptions import ValidationError
from mcdm_engine.mcdm import Criterion, DecisionProblem, PROMETHEECalculator, PROMETHEEResult


@pytest.fixture
def supplier_result(supplier_problem):
    return PROMETHEECalculator().calculate(supplier_problem)


class TestFlows:

    def test_split_criteria_tie(self, tie_problem):
        result = PROMETHEECalculator().calculate(tie_problem)

        assert result.preference_matrix.loc['A', 'B'] == pytest.approx(0.5)
        assert result.preference_matrix.loc['B', 'A'] == pytest.approx(0.5)
        np.testing.assert_allclose(result.phi_positive.values, [0.5, 0.5])
        np.testing.assert_allclose(result.phi_negative.values, [0.5, 0.5])
        np.testing.assert_allclose(result.phi_net.values, [0.0, 0.0])
        assert result.ranking['alternative'].tolist() == ['A', 'B']
        assert result.ranking['rank'].tolist() == [1, 2]

    def test_supplier_flows(self, supplier_result):
        np.testing.assert_allclose(supplier_result.phi_positive.values, [0.25, 0.6, 0.15])
        np.testing.assert_allclose(supplier_result.phi_negative.values, [0.25, 0.15, 0.6])
        np.testing.assert_allclose(supplier_result.phi_net.values, [0.0, 0.45, -0.45], atol=1e-12)
        assert supplier_result.ranking['alternative'].tolist() == [
            'Alternative B', 'Alternative A', 'Alternative C']

    def test_criterion_matrices(self, supplier_result):
        cost = supplier_result.criterion_preferences['Cost']
        assert cost.loc['Alternative B', 'Alternative A'] == 1.0
        assert cost.loc['Alternative A', 'Alternative B'] == 0.0
        quality = supplier_result.criterion_preferences['Quality']
        assert quality.loc['Alternative B', 'Alternative A'] == pytest.approx(0.5)
        time = supplier_result.criterion_preferences['Time']
        # A gap of exactly q is still indifference
        assert time.loc['Alternative A', 'Alternative B'] == 0.0
        assert time.loc['Alternative C', 'Alternative B'] == 1.0

    def test_flow_balance(self, supplier_result):
        assert supplier_result.phi_positive.sum() == pytest.approx(supplier_result.phi_negative.sum())
        assert supplier_result.phi_net.sum() == pytest.approx(0.0, abs=1e-12)
        np.testing.assert_array_equal(np.diag(supplier_result.preference_matrix.values), 0.0)

    def test_identical_alternatives_keep_input_order(self):
        problem = DecisionProblem(
            alternatives=['X', 'Y', 'Z'],
            criteria=[Criterion('c1', 0.5), Criterion('c2', 0.5)],
            performance=[[1, 1], [1, 1], [1, 1]],
        )
        result = PROMETHEECalculator().calculate(problem)
        assert result.ranking['alternative'].tolist() == ['X', 'Y', 'Z']
        assert result.final_ranks.tolist() == [1, 2, 3]

    def test_input_not_mutated(self, supplier_problem):
        before = supplier_problem.performance.copy()
        PROMETHEECalculator().calculate(supplier_problem)
        np.testing.assert_array_equal(supplier_problem.performance, before)

    def test_weight_tolerance_checked_by_engine(self):
        problem = DecisionProblem(
            alternatives=['A', 'B'],
            criteria=[Criterion('c1', 0.5), Criterion('c2', 0.505)],
            performance=[[1, 2], [2, 1]],
        )
        with pytest.raises(ValidationError, match='sum'):
            PROMETHEECalculator(weight_tolerance=0.001).calculate(problem)

    def test_looser_weight_tolerance(self):
        problem = DecisionProblem(
            alternatives=['A', 'B'],
            criteria=[Criterion('c1', 0.5), Criterion('c2', 0.53)],
            performance=[[2, 1], [1, 2]],
            weight_tolerance=0.05,
        )
        result = PROMETHEECalculator(weight_tolerance=0.05).calculate(problem)
        assert result.preference_matrix.loc['B', 'A'] == pytest.approx(0.53)

    def test_aggregated_preference_capped_at_one(self):
        problem = DecisionProblem(
            alternatives=['A', 'B'],
            criteria=[Criterion('c1', 0.505), Criterion('c2', 0.5)],
            performance=[[2, 2], [1, 1]],
        )
        result = PROMETHEECalculator().calculate(problem)
        values = result.preference_matrix.values
        assert ((values >= 0) & (values <= 1)).all()
        assert result.preference_matrix.loc['A', 'B'] == 1.0
        assert result.phi_positive['A'] == 1.0

    def test_duplicate_criteria_rejected(self):
        with pytest.raises(ValidationError, match='Duplicate criterion names'):
            DecisionProblem(
                alternatives=['A', 'B'],
                criteria=[Criterion('c', 0.5), Criterion('c', 0.5)],
                performance=[[1, 2], [2, 1]],
            )

    def test_one_preference_matrix_per_criterion(self, supplier_result):
        assert list(supplier_result.criterion_preferences) == ['Cost', 'Quality', 'Time']
        assert len(supplier_result.to_dict()['weights']) == 3


class TestPartialPreorder:

    def test_supplier_preorder(self, supplier_result):
        preorder = supplier_result.partial_preorder
        assert preorder['Alternative B'] == ['Alternative A', 'Alternative C']
        assert preorder['Alternative A'] == ['Alternative C']
        assert preorder['Alternative C'] == []

    def test_relations_table(self, supplier_result):
        relations = supplier_result.get_outranking_relations()
        lookup = {(r.From, r.To): r.Relation for r in relations.itertuples(index=False)}
        assert lookup[('Alternative B', 'Alternative A')] == 'outranks'
        assert lookup[('Alternative A', 'Alternative B')] == 'outranked'
        assert len(relations) == 6

    def test_tie_is_indifference(self, tie_problem):
        relations = PROMETHEECalculator().calculate(tie_problem).get_outranking_relations()
        assert set(relations['Relation']) == {'indifferent'}


class TestProgress:

    def test_milestones(self, supplier_problem):
        calls = []
        PROMETHEECalculator().calculate(supplier_problem,
                                        progress=lambda stage, f: calls.append((stage, f)))
        stages = [s for s, _ in calls]
        fractions = [f for _, f in calls]

        assert stages[0] == 'validated'
        assert stages[-1] == 'ranked'
        assert 'criterion:Quality' in stages
        assert fractions == sorted(fractions)
        assert fractions[-1] == 1.0

    def test_progress_does_not_change_result(self, supplier_problem):
        plain = PROMETHEECalculator().calculate(supplier_problem)
        tracked = PROMETHEECalculator().calculate(supplier_problem, progress=lambda s, f: None)
        np.testing.assert_array_equal(plain.phi_net.values, tracked.phi_net.values)


class TestSerialisation:

    def test_round_trip(self, supplier_result):
        restored = PROMETHEEResult.from_dict(supplier_result.to_dict())

        assert restored.phi_net.tolist() == supplier_result.phi_net.tolist()
        assert restored.phi_positive.tolist() == supplier_result.phi_positive.tolist()
        np.testing.assert_array_equal(restored.preference_matrix.values,
                                      supplier_result.preference_matrix.values)
        np.testing.assert_array_equal(restored.criterion_preferences['Time'].values,
                                      supplier_result.criterion_preferences['Time'].values)
        assert restored.ranking['alternative'].tolist() == supplier_result.ranking['alternative'].tolist()
        assert restored.final_ranks.tolist() == supplier_result.final_ranks.tolist()
        assert restored.partial_preorder == supplier_result.partial_preorder
        assert restored.preference_functions == {
            'Cost': 'linear', 'Quality': 'v-shape', 'Time': 'quasi'}

    def test_top_n(self, supplier_result):
        assert supplier_result.top_n(1)['alternative'].tolist() == ['Alternative B']
