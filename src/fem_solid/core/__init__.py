"""
Core module for fem-solid.

Provides task configuration, materials, geometry, boundary conditions and
the global stiffness scatter.
"""

from .bc import BoundaryConditions, DirichletCondition, PrescribedBoundaryType, PrescribedNode
from .config import (
    ConfigurationError,
    ElementKind,
    MaterialModel,
    Precision,
    SolutionSizing,
    TaskConfig,
    TaskType,
)
from .material import IsotropicMaterial, ModelType

__all__ = [
    "BoundaryConditions",
    "DirichletCondition",
    "PrescribedBoundaryType",
    "PrescribedNode",
    "ConfigurationError",
    "ElementKind",
    "MaterialModel",
    "Precision",
    "SolutionSizing",
    "TaskConfig",
    "TaskType",
    "IsotropicMaterial",
    "ModelType",
]
