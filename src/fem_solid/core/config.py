"""
Task Configuration Module.

This module provides the validated, immutable description of a solution task:
element kind, degrees of freedom, material model and quadrature order, together
with the parameters carried for the outer nonlinear driver.

Example YAML configuration (``task`` section of an input file):
    task:
      task_type: "CARTESIAN3D"
      element_kind: "TETRAHEDRA10"
      dof: 3
      gauss_points_count: 4
      precision: "double"

      model:
        type: "A5"
        parameters: [100.0, 100.0]   # lambda, mu

      solution:
        load_increments_count: 10
        desired_tolerance: 1.0e-8
        modified_newton: true
        linesearch_max: 5
        arclength_max: 0
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

import numpy as np
import yaml

from fem_solid.core.material import MAX_MATERIAL_PARAMETERS, IsotropicMaterial, ModelType

if TYPE_CHECKING:
    from fem_solid.elements.elements import IsoparametricElement

E = TypeVar("E", bound=Enum)


class ConfigurationError(ValueError):
    """Unsupported or inconsistent task configuration.

    Raised while loading a task or constructing a solver. No partially
    configured solver is ever returned.
    """


# =============================================================================
# Enumerations
# =============================================================================


class TaskType(str, Enum):
    """Type of the task to solve."""

    CARTESIAN3D = "CARTESIAN3D"


class ElementKind(str, Enum):
    """Supported element kinds."""

    TETRAHEDRA10 = "TETRAHEDRA10"


class Precision(str, Enum):
    """Floating point value type used by the assembly engine."""

    DOUBLE = "double"
    SINGLE = "single"

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(np.float64 if self is Precision.DOUBLE else np.float32)


def _coerce_enum(enum_cls: Type[E], value: Any, what: str) -> E:
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    for member in enum_cls:
        if member.value.lower() == text.lower() or member.name.lower() == text.lower():
            return member
    valid = [m.value for m in enum_cls]
    raise ConfigurationError(f"Invalid {what}: {value}. Valid: {valid}")


# =============================================================================
# Configuration Data Classes
# =============================================================================


@dataclass(frozen=True)
class MaterialModel:
    """
    Material model variant with its ordered numeric parameters.

    Both implemented models take the Lamé constants as their first two
    parameters: ``parameters = (λ, μ, ...)``.

    Parameters
    ----------
    model : ModelType or str
        Model tag.
    parameters : tuple of float
        Ordered model parameters, at most ``MAX_MATERIAL_PARAMETERS``.
    """

    model: ModelType = ModelType.A5
    parameters: Tuple[float, ...] = (100.0, 100.0)

    def __post_init__(self):
        object.__setattr__(self, "model", _coerce_enum(ModelType, self.model, "material model"))
        try:
            parameters = tuple(float(p) for p in self.parameters)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Material parameters must be numbers: {self.parameters}"
            ) from None
        object.__setattr__(self, "parameters", parameters)

        if len(parameters) < 2:
            raise ConfigurationError(
                f"Model {self.model.value} requires at least 2 parameters (lambda, mu), "
                f"got {len(parameters)}"
            )
        if len(parameters) > MAX_MATERIAL_PARAMETERS:
            raise ConfigurationError(
                f"At most {MAX_MATERIAL_PARAMETERS} material parameters are allowed, "
                f"got {len(parameters)}"
            )
        if self.mu <= 0:
            raise ConfigurationError(f"Shear modulus mu must be positive: {self.mu}")
        if 3 * self.lam + 2 * self.mu <= 0:
            raise ConfigurationError(
                f"Bulk modulus must be positive: lambda={self.lam}, mu={self.mu}"
            )

    @property
    def lam(self) -> float:
        return self.parameters[0]

    @property
    def mu(self) -> float:
        return self.parameters[1]

    @classmethod
    def from_material(
        cls, material: IsotropicMaterial, model: Union[ModelType, str] = ModelType.A5
    ) -> "MaterialModel":
        """Build a model from the engineering constants of an isotropic material."""
        return cls(model=model, parameters=material.lame_parameters)

    @classmethod
    def from_engineering(
        cls, E: float, nu: float, model: Union[ModelType, str] = ModelType.A5
    ) -> "MaterialModel":
        """Build a model from Young's modulus and Poisson's ratio."""
        try:
            material = IsotropicMaterial(name="Material", E=float(E), nu=float(nu))
        except ValueError as e:
            raise ConfigurationError(str(e)) from None
        return cls.from_material(material, model)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MaterialModel":
        """Create a model from either ``parameters`` or ``E``/``nu`` entries."""
        model = data.get("type", data.get("model", ModelType.A5))
        if "parameters" in data:
            return cls(model=model, parameters=tuple(data["parameters"]))
        if "E" in data and "nu" in data:
            return cls.from_engineering(data["E"], data["nu"], model)
        return cls(model=model)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.model.value, "parameters": list(self.parameters)}


@dataclass(frozen=True)
class TaskConfig:
    """Complete task configuration.

    The nonlinear driver fields (load increments, tolerance, line search,
    arc length, modified Newton) are validated and carried for the external
    incremental solve; the assembly engine does not consume them.
    """

    element_kind: ElementKind = ElementKind.TETRAHEDRA10
    dof: int = 3
    model: MaterialModel = field(default_factory=MaterialModel)
    gauss_points_count: int = 5
    task_type: TaskType = TaskType.CARTESIAN3D
    load_increments_count: int = 0
    desired_tolerance: float = 1e-8
    linesearch_max: int = 0
    arclength_max: int = 0
    modified_newton: bool = True
    precision: Precision = Precision.DOUBLE

    def __post_init__(self):
        object.__setattr__(
            self, "element_kind", _coerce_enum(ElementKind, self.element_kind, "element kind")
        )
        object.__setattr__(self, "task_type", _coerce_enum(TaskType, self.task_type, "task type"))
        object.__setattr__(self, "precision", _coerce_enum(Precision, self.precision, "precision"))
        if isinstance(self.model, dict):
            object.__setattr__(self, "model", MaterialModel.from_dict(self.model))

        if not 1 <= int(self.dof) <= 3:
            raise ConfigurationError(f"dof must be in 1..3: {self.dof}")
        if int(self.gauss_points_count) <= 0:
            raise ConfigurationError(
                f"gauss_points_count must be positive: {self.gauss_points_count}"
            )
        if self.load_increments_count < 0:
            raise ConfigurationError(
                f"load_increments_count must be non-negative: {self.load_increments_count}"
            )
        if self.desired_tolerance <= 0:
            raise ConfigurationError(
                f"desired_tolerance must be positive: {self.desired_tolerance}"
            )
        if self.linesearch_max < 0 or self.arclength_max < 0:
            raise ConfigurationError("linesearch_max and arclength_max must be non-negative")

    @property
    def dtype(self) -> np.dtype:
        return self.precision.dtype

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "TaskConfig":
        """Load the ``task`` section of a YAML file.

        Parameters
        ----------
        yaml_path : str or Path
            Path to the YAML file.

        Returns
        -------
        TaskConfig
            Validated configuration object.

        Raises
        ------
        FileNotFoundError
            If the YAML file does not exist.
        ConfigurationError
            If the configuration is invalid.
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data.get("task", data))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskConfig":
        """Create configuration from dictionary.

        Parameters
        ----------
        data : dict
            The ``task`` mapping. Nonlinear driver settings may be given
            flat or nested under ``solution``.

        Returns
        -------
        TaskConfig
            Validated configuration object.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"Task configuration must be a mapping, got {type(data)}")

        solution_data = data.get("solution", {}) or {}

        def solution(key: str, default: Any) -> Any:
            return solution_data.get(key, data.get(key, default))

        try:
            return cls(
                element_kind=data.get("element_kind", ElementKind.TETRAHEDRA10),
                dof=int(data.get("dof", 3)),
                model=MaterialModel.from_dict(data.get("model", {}) or {}),
                gauss_points_count=int(data.get("gauss_points_count", 5)),
                task_type=data.get("task_type", TaskType.CARTESIAN3D),
                load_increments_count=int(solution("load_increments_count", 0)),
                desired_tolerance=float(solution("desired_tolerance", 1e-8)),
                linesearch_max=int(solution("linesearch_max", 0)),
                arclength_max=int(solution("arclength_max", 0)),
                modified_newton=bool(solution("modified_newton", True)),
                precision=data.get("precision", Precision.DOUBLE),
            )
        except (TypeError, ValueError) as e:
            if isinstance(e, ConfigurationError):
                raise
            raise ConfigurationError(f"Invalid task configuration: {e}") from None

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        return {
            "task_type": self.task_type.value,
            "element_kind": self.element_kind.value,
            "dof": self.dof,
            "gauss_points_count": self.gauss_points_count,
            "precision": self.precision.value,
            "model": self.model.to_dict(),
            "solution": {
                "load_increments_count": self.load_increments_count,
                "desired_tolerance": self.desired_tolerance,
                "modified_newton": self.modified_newton,
                "linesearch_max": self.linesearch_max,
                "arclength_max": self.arclength_max,
            },
        }

    def save_yaml(self, yaml_path: Union[str, Path]) -> None:
        """Save configuration to YAML file under a ``task`` key."""
        with open(yaml_path, "w") as f:
            yaml.dump({"task": self.to_dict()}, f, default_flow_style=False, sort_keys=False)

    def validate(self) -> List[str]:
        """Validate the complete configuration.

        Returns
        -------
        list of str
            List of validation warnings (empty if all OK).
        """
        warnings = []
        if self.load_increments_count or self.linesearch_max or self.arclength_max:
            warnings.append(
                "Nonlinear driver settings are carried only; "
                "local stiffness assembly does not iterate on them"
            )
        if self.model.model == ModelType.COMPRESSIBLE_NEOHOOKEAN:
            warnings.append(
                "Neo-Hookean tangent is evaluated in the reference configuration (F = I)"
            )
        if self.precision == Precision.SINGLE:
            warnings.append("Single precision raises the degenerate-Jacobian threshold")
        return warnings

    def __str__(self) -> str:
        """Human-readable string representation."""
        params = ", ".join(f"{p:g}" for p in self.model.parameters)
        lines = [
            "Task Configuration",
            "=" * 40,
            f"Task: {self.task_type.value}",
            f"Element: {self.element_kind.value} ({self.gauss_points_count} gauss points)",
            f"DOF per node: {self.dof}",
            f"Model: {self.model.model.value} ({params})",
            f"Precision: {self.precision.value}",
            f"Load increments: {self.load_increments_count} "
            f"(tolerance={self.desired_tolerance:g}, modified Newton={self.modified_newton})",
        ]
        return "\n".join(lines)


@dataclass(frozen=True)
class SolutionSizing:
    """Derived solution parameters.

    Attributes
    ----------
    nodes_per_element : int
        Number of nodes per element, fixed by the element kind.
    gauss_points_count : int
        Number of quadrature points per element.
    msize : int
        Size of the global system, ``node_count * dof``.
    """

    nodes_per_element: int
    gauss_points_count: int
    msize: int

    @classmethod
    def create(
        cls,
        task: TaskConfig,
        element: "IsoparametricElement",
        node_count: int,
        nodes_per_element: Optional[int] = None,
    ) -> "SolutionSizing":
        """Validate the task against the element kind's fixed tables.

        Parameters
        ----------
        task : TaskConfig
            Task configuration.
        element : IsoparametricElement
            Element kind implementation selected by ``task.element_kind``.
        node_count : int
            Number of nodes in the geometry.
        nodes_per_element : int, optional
            Nodes per element declared by the input, if any.

        Raises
        ------
        ConfigurationError
            On a nodes-per-element, dof or quadrature order mismatch.
        """
        if nodes_per_element is not None and nodes_per_element != element.nodes_count:
            raise ConfigurationError(
                f"{element.name} requires {element.nodes_count} nodes per element, "
                f"got {nodes_per_element}"
            )
        if task.dof != element.spatial_dimension:
            raise ConfigurationError(
                f"{element.name} requires {element.spatial_dimension} dof per node, "
                f"got {task.dof}"
            )
        if task.gauss_points_count not in element.supported_quadratures:
            raise ConfigurationError(
                f"No {task.gauss_points_count}-point quadrature for {element.name}. "
                f"Valid: {list(element.supported_quadratures)}"
            )
        return cls(
            nodes_per_element=element.nodes_count,
            gauss_points_count=task.gauss_points_count,
            msize=node_count * task.dof,
        )
