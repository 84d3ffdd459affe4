from abc import ABC, abstractmethod
from typing import Dict, Tuple, Type

import numpy as np

from fem_solid.core.config import ConfigurationError, ElementKind


class IsoparametricElement(ABC):
    """Shape-function and quadrature tables of one element kind.

    An element kind is stateless: nodal coordinates are supplied per element
    by the caller, so a single instance serves every element of a mesh.

    Attributes
    ----------
    name : str
        Element kind name (e.g., "TETRA10").
    nodes_count : int
        Number of nodes per element.
    spatial_dimension : int
        Number of local coordinates, equal to the dof per node it supports.
    supported_quadratures : tuple of int
        Point counts accepted by ``integration_points``.
    """

    name: str = ""
    nodes_count: int = 0
    spatial_dimension: int = 0
    supported_quadratures: Tuple[int, ...] = ()

    @abstractmethod
    def integration_points(self, points_count: int) -> Tuple[np.ndarray, np.ndarray]:
        """Quadrature points (n_points × dim) and weights (n_points,)."""

    @abstractmethod
    def shape_functions(self, *local: float) -> np.ndarray:
        """Shape function values (nodes_count,) at a local point."""

    @abstractmethod
    def shape_function_derivatives(self, *local: float) -> Tuple[np.ndarray, ...]:
        """One (nodes_count,) derivative array per local axis."""

    def shape_function(self, i: int, *local: float) -> float:
        """Value of shape function ``i``; 0.0 for an out-of-range node."""
        if not 0 <= i < self.nodes_count:
            return 0.0
        return float(self.shape_functions(*local)[i])

    def shape_function_derivative(self, i: int, axis: int, *local: float) -> float:
        """Derivative of shape function ``i`` along ``axis``; 0.0 when out of range."""
        if not 0 <= i < self.nodes_count or not 0 <= axis < self.spatial_dimension:
            return 0.0
        return float(self.shape_function_derivatives(*local)[axis][i])

    def __repr__(self):
        return f"<{type(self).__name__} nodes={self.nodes_count}>"


class ElementFactory:
    @staticmethod
    def get_element(element_kind: ElementKind) -> IsoparametricElement:
        """Return the element implementation registered for ``element_kind``.

        Raises
        ------
        ConfigurationError
            If no implementation is registered for the kind.
        """
        from .SOLID import TETRA10

        ELEMENT_MAP: Dict[ElementKind, Type[IsoparametricElement]] = {
            ElementKind.TETRAHEDRA10: TETRA10,
        }

        try:
            element = ELEMENT_MAP[ElementKind(element_kind)]
        except (KeyError, ValueError):
            raise ConfigurationError(f"Unsupported element kind: {element_kind}") from None
        return element()
