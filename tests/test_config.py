"""Test suite for task configuration, material models and solution sizing."""

import numpy as np
import pytest

from fem_solid.core.config import (
    ConfigurationError,
    ElementKind,
    MaterialModel,
    Precision,
    SolutionSizing,
    TaskConfig,
    TaskType,
)
from fem_solid.core.material import IsotropicMaterial, ModelType
from fem_solid.elements import TETRA10


# =============================================================================
# Material models
# =============================================================================


class TestMaterialModel:
    def test_defaults(self):
        model = MaterialModel()
        assert model.model == ModelType.A5
        assert model.lam == 100.0
        assert model.mu == 100.0

    def test_coerces_tag_and_parameters(self):
        model = MaterialModel("compressible_neohookean", [1, 2])
        assert model.model == ModelType.COMPRESSIBLE_NEOHOOKEAN
        assert model.parameters == (1.0, 2.0)

    def test_from_engineering(self):
        model = MaterialModel.from_engineering(E=1.0, nu=0.25)
        assert model.lam == pytest.approx(0.4)
        assert model.mu == pytest.approx(0.4)

    def test_from_material(self):
        steel = IsotropicMaterial(name="steel", E=210e9, nu=0.3)
        model = MaterialModel.from_material(steel)
        assert model.parameters == pytest.approx(steel.lame_parameters)

    def test_from_dict(self):
        model = MaterialModel.from_dict({"type": "A5", "parameters": [3, 4]})
        assert model.parameters == (3.0, 4.0)
        assert MaterialModel.from_dict({"E": 1.0, "nu": 0.25}).mu == pytest.approx(0.4)
        assert MaterialModel.from_dict({}) == MaterialModel()

    @pytest.mark.parametrize(
        "parameters",
        [
            (100.0,),
            (100.0, 0.0),
            (100.0, -1.0),
            (-100.0, 10.0),
            tuple(float(i + 1) for i in range(11)),
            ("a", "b"),
        ],
    )
    def test_invalid_parameters(self, parameters):
        with pytest.raises(ConfigurationError):
            MaterialModel(ModelType.A5, parameters)

    def test_unknown_model(self):
        with pytest.raises(ConfigurationError):
            MaterialModel("A6", (1.0, 1.0))

    def test_invalid_engineering_constants(self):
        with pytest.raises(ConfigurationError):
            MaterialModel.from_engineering(E=1.0, nu=0.5)

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)


# =============================================================================
# Task configuration
# =============================================================================


class TestTaskConfig:
    def test_defaults(self):
        task = TaskConfig()
        assert task.task_type == TaskType.CARTESIAN3D
        assert task.element_kind == ElementKind.TETRAHEDRA10
        assert task.dof == 3
        assert task.gauss_points_count == 5
        assert task.load_increments_count == 0
        assert task.desired_tolerance == 1e-8
        assert task.modified_newton is True
        assert task.dtype == np.float64

    def test_immutable(self):
        task = TaskConfig()
        with pytest.raises(AttributeError):
            task.dof = 2

    def test_precision(self):
        assert TaskConfig(precision="single").dtype == np.float32
        assert TaskConfig(precision=Precision.DOUBLE).dtype == np.float64

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"dof": 0},
            {"dof": 4},
            {"gauss_points_count": 0},
            {"load_increments_count": -1},
            {"desired_tolerance": 0.0},
            {"linesearch_max": -1},
            {"element_kind": "TETRAHEDRA4"},
            {"task_type": "AXISYMMETRIC"},
            {"precision": "half"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            TaskConfig(**kwargs)

    def test_from_dict_nested_solution(self):
        task = TaskConfig.from_dict(
            {
                "element_kind": "tetrahedra10",
                "gauss_points_count": 4,
                "model": {"type": "A5", "parameters": [10, 5]},
                "solution": {
                    "load_increments_count": 20,
                    "desired_tolerance": 1e-6,
                    "modified_newton": False,
                    "linesearch_max": 3,
                    "arclength_max": 2,
                },
            }
        )
        assert task.gauss_points_count == 4
        assert task.model.parameters == (10.0, 5.0)
        assert task.load_increments_count == 20
        assert task.desired_tolerance == 1e-6
        assert task.modified_newton is False
        assert task.linesearch_max == 3
        assert task.arclength_max == 2

    def test_from_dict_rejects_non_mapping(self):
        with pytest.raises(ConfigurationError):
            TaskConfig.from_dict(["dof", 3])

    def test_from_dict_rejects_bad_number(self):
        with pytest.raises(ConfigurationError):
            TaskConfig.from_dict({"dof": "three"})

    def test_yaml_round_trip(self, tmp_path):
        task = TaskConfig(
            model=MaterialModel("COMPRESSIBLE_NEOHOOKEAN", (12.5, 3.25)),
            gauss_points_count=4,
            load_increments_count=7,
            desired_tolerance=1e-9,
            linesearch_max=2,
            modified_newton=False,
            precision="single",
        )
        path = tmp_path / "task.yaml"
        task.save_yaml(path)
        assert TaskConfig.from_yaml(path) == task

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TaskConfig.from_yaml(tmp_path / "missing.yaml")

    def test_validate_warnings(self):
        assert TaskConfig().validate() == []
        warnings = TaskConfig(
            model=MaterialModel("COMPRESSIBLE_NEOHOOKEAN", (1.0, 1.0)),
            load_increments_count=10,
        ).validate()
        assert len(warnings) == 2

    def test_str(self):
        text = str(TaskConfig())
        assert "TETRAHEDRA10" in text
        assert "A5" in text


# =============================================================================
# Solution sizing
# =============================================================================


class TestSolutionSizing:
    def test_create(self):
        sizing = SolutionSizing.create(TaskConfig(gauss_points_count=4), TETRA10(), 27)
        assert sizing.nodes_per_element == 10
        assert sizing.gauss_points_count == 4
        assert sizing.msize == 81

    def test_declared_nodes_per_element(self):
        SolutionSizing.create(TaskConfig(), TETRA10(), 10, nodes_per_element=10)
        with pytest.raises(ConfigurationError):
            SolutionSizing.create(TaskConfig(), TETRA10(), 10, nodes_per_element=4)

    def test_point_count_mismatch(self):
        with pytest.raises(ConfigurationError):
            SolutionSizing.create(TaskConfig(gauss_points_count=11), TETRA10(), 10)

    @pytest.mark.parametrize("dof", [1, 2])
    def test_dof_mismatch(self, dof):
        with pytest.raises(ConfigurationError):
            SolutionSizing.create(TaskConfig(dof=dof), TETRA10(), 10)
