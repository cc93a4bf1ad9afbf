# -*- coding: utf-8 -*-
"""Tests for problem loading and result export."""

import json

import numpy as np
import pandas as pd
import pytest

from mcdm_engine.config import MethodType, get_default_config
from mcdm_engine.data_loader import (
    SAMPLE_PROBLEMS, load_performance_csv, load_problem, load_sample, problem_from_dict,
)
from mcdm_engine.exceptions import ConfigurationError, ValidationError
from mcdm_engine.mcdm import (
    AHPCalculator, AHPProblem, Criterion, ELECTRECalculator,
    PreferenceType, PROMETHEECalculator,
)
from mcdm_engine.output_manager import OutputManager, create_output_manager


class TestProblemLoader:

    @pytest.mark.parametrize('method', ['promethee', 'ahp', 'electre'])
    def test_samples(self, method):
        document = load_sample(method)
        assert document.method is MethodType(method)
        assert document.source == f'sample:{method}'
        assert len(document.alternatives) >= 3

    def test_sample_is_not_shared(self):
        load_sample('promethee')
        assert SAMPLE_PROBLEMS['promethee']['criteria'][0]['preference_type'] == 'linear'

    def test_electre_sample_thresholds(self):
        document = load_sample('electre')
        assert document.parameters == {'concordance_threshold': 0.7, 'discordance_threshold': 0.3}

    def test_load_problem_file(self, tmp_path):
        path = tmp_path / 'problem.json'
        path.write_text(json.dumps(SAMPLE_PROBLEMS['promethee']))
        document = load_problem(path)
        assert document.source == str(path)
        assert document.criteria == ['Cost', 'Quality', 'Time']
        assert document.problem.criteria[1].preference_type is PreferenceType.VSHAPE

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'broken.json'
        path.write_text('{"method": ')
        with pytest.raises(ValidationError, match='not valid JSON'):
            load_problem(path)

    def test_missing_fields(self):
        with pytest.raises(ValidationError, match='performance'):
            problem_from_dict({'method': 'electre', 'alternatives': ['A', 'B'],
                               'criteria': [{'name': 'x', 'weight': 1}]})

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError, match='Unknown method'):
            problem_from_dict({'method': 'topsis', 'alternatives': [], 'criteria': []})

    def test_promethee_defaults_from_config(self):
        config = get_default_config()
        config.promethee.default_preference = PreferenceType.LINEAR
        config.promethee.default_threshold = 2.0
        document = problem_from_dict({
            'method': 'promethee',
            'alternatives': ['A', 'B'],
            'criteria': [{'name': 'x', 'weight': 0.5}, {'name': 'y', 'weight': 0.5,
                                                      'preference_type': 'usual'}],
            'performance': [[1, 2], [2, 1]],
        }, config)
        x, y = document.problem.criteria
        assert x.preference_type is PreferenceType.LINEAR
        assert x.threshold == 2.0
        assert y.preference_type is PreferenceType.USUAL

    def test_config_weight_tolerance(self):
        config = get_default_config()
        config.validation.weight_tolerance = 0.001
        with pytest.raises(ValidationError):
            problem_from_dict({
                'method': 'promethee',
                'alternatives': ['A', 'B'],
                'criteria': [{'name': 'x', 'weight': 0.5}, {'name': 'y', 'weight': 0.505}],
                'performance': [[1, 2], [2, 1]],
            }, config)

    def test_config_weight_tolerance_can_loosen(self):
        document = {
            'method': 'promethee',
            'alternatives': ['A', 'B'],
            'criteria': [{'name': 'x', 'weight': 0.5}, {'name': 'y', 'weight': 0.53}],
            'performance': [[1, 2], [2, 1]],
        }
        with pytest.raises(ValidationError, match='1.030'):
            problem_from_dict(document)

        config = get_default_config()
        config.validation.weight_tolerance = 0.05
        problem = problem_from_dict(document, config).problem
        assert problem.weight_tolerance == 0.05
        PROMETHEECalculator(weight_tolerance=0.05).calculate(problem)

    def test_ahp_criterion_record_without_name(self):
        data = dict(SAMPLE_PROBLEMS['ahp'])
        data['criteria'] = [{'name': 'Cost'}, {'label': 'Quality'}, {'name': 'Delivery Time'}]
        with pytest.raises(ValidationError, match="needs a 'name'"):
            problem_from_dict(data)

    def test_ahp_document_accepts_criterion_records(self):
        data = dict(SAMPLE_PROBLEMS['ahp'])
        data['criteria'] = [{'name': c} for c in data['criteria']]
        document = problem_from_dict(data)
        assert isinstance(document.problem, AHPProblem)
        assert document.criteria == ['Cost', 'Quality', 'Delivery Time']

    def test_performance_csv(self, tmp_path):
        path = tmp_path / 'scores.csv'
        pd.DataFrame({'Alternative': ['A', 'B', 'C'], 'Risk': [3, 1, 2], 'Gain': [5, 9, 7]}) \
            .to_csv(path, index=False)
        problem = load_performance_csv(path, [
            Criterion('Gain', 0.6, veto_threshold=5),
            Criterion('Risk', 0.4, 'cost', veto_threshold=5),
        ])
        assert problem.alternatives == ('A', 'B', 'C')
        np.testing.assert_array_equal(problem.performance, [[5, 3], [9, 1], [7, 2]])
        result = ELECTRECalculator().calculate(problem)
        assert result.ranking['alternative'].iloc[0] == 'B'


class TestOutputManager:

    def test_directories(self, tmp_path):
        manager = create_output_manager(tmp_path / 'out')
        assert manager.results_dir.exists()
        assert manager.logs_dir.exists()

    def test_save_and_load_promethee(self, tmp_path, supplier_problem):
        result = PROMETHEECalculator().calculate(supplier_problem)
        manager = OutputManager(tmp_path)
        saved = manager.save_result('promethee', result, list(supplier_problem.alternatives),
                                    supplier_problem.criterion_names)

        document = json.loads(open(saved['json']).read())
        assert document['method'] == 'promethee'
        assert document['criteria'] == ['Cost', 'Quality', 'Time']
        assert 'timestamp' in document
        assert 'promethee_results_' in saved['json']

        ranking = pd.read_csv(saved['ranking'])
        assert ranking['alternative'].tolist() == result.ranking['alternative'].tolist()

        method, restored = manager.load_result(saved['json'])
        assert method is MethodType.PROMETHEE
        assert restored.phi_net.tolist() == result.phi_net.tolist()

    def test_save_ahp_and_electre(self, tmp_path, supplier_ahp_problem, project_problem):
        manager = OutputManager(tmp_path)
        ahp = AHPCalculator().calculate(supplier_ahp_problem)
        electre = ELECTRECalculator().calculate(project_problem)

        saved_ahp = manager.save_result(MethodType.AHP, ahp, list(supplier_ahp_problem.alternatives),
                                        list(supplier_ahp_problem.criteria))
        saved_electre = manager.save_result(MethodType.ELECTRE, electre,
                                            list(project_problem.alternatives),
                                            project_problem.criterion_names)

        _, restored_ahp = manager.load_result(saved_ahp['json'])
        _, restored_electre = manager.load_result(saved_electre['json'])
        assert restored_ahp.overall_scores.tolist() == ahp.overall_scores.tolist()
        assert restored_electre.kernel == electre.kernel

    def test_csv_export_can_be_disabled(self, tmp_path, tie_problem):
        config = get_default_config()
        config.output.save_csv = False
        manager = OutputManager(tmp_path, config)
        saved = manager.save_result('promethee', PROMETHEECalculator().calculate(tie_problem),
                                    ['A', 'B'], ['c1', 'c2'])
        assert set(saved) == {'json'}
