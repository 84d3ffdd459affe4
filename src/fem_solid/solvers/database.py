"""Precomputed shape-function tables at the quadrature points."""

import logging
from dataclasses import dataclass
from typing import Iterator, List

import numpy as np

from fem_solid.elements.elements import IsoparametricElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GaussPoint:
    """
    Quadrature point with the shape-function values evaluated at it.

    Attributes
    ----------
    weight : float
        Quadrature weight (already divided by the reference volume factor).
    local : np.ndarray
        Local coordinates (3,).
    forms : np.ndarray
        Shape function values (n_nodes,).
    dforms : np.ndarray
        Shape function derivatives (dof × n_nodes), row ``i`` along local axis ``i``.
    """

    weight: float
    local: np.ndarray
    forms: np.ndarray
    dforms: np.ndarray


class GaussPointDatabase:
    """Shape-function values and derivatives at every quadrature point.

    The tables are evaluated once by ``build`` and shared read-only by all
    elements afterwards.

    Parameters
    ----------
    element : IsoparametricElement
        Element kind supplying shape functions and quadrature.
    points_count : int
        Number of quadrature points.
    dtype : numpy dtype
        Value type of the tables.
    """

    def __init__(
        self,
        element: IsoparametricElement,
        points_count: int,
        dtype=np.float64,
    ):
        self.element = element
        self.points_count = points_count
        self.dof = element.spatial_dimension
        self.dtype = np.dtype(dtype)
        self._points: List[GaussPoint] = []
        self.built = False

    def build(self) -> "GaussPointDatabase":
        """Evaluate the tables. A second call is a no-op."""
        if self.built:
            return self

        points, weights = self.element.integration_points(self.points_count)
        for weight, local in zip(weights, points):
            local = np.array(local, dtype=self.dtype)
            forms = np.asarray(self.element.shape_functions(*local), dtype=self.dtype)
            dforms = np.array(self.element.shape_function_derivatives(*local), dtype=self.dtype)
            for array in (local, forms, dforms):
                array.setflags(write=False)
            self._points.append(GaussPoint(self.dtype.type(weight), local, forms, dforms))

        self.built = True
        logger.debug(
            "Gauss point database built: %s, %d points, %d dof",
            self.element.name,
            len(self._points),
            self.dof,
        )
        return self

    def _require_built(self):
        if not self.built:
            raise RuntimeError("Gauss point database accessed before build()")

    def __len__(self) -> int:
        self._require_built()
        return len(self._points)

    def __getitem__(self, index: int) -> GaussPoint:
        self._require_built()
        return self._points[index]

    def __iter__(self) -> Iterator[GaussPoint]:
        self._require_built()
        return iter(self._points)

    def __repr__(self):
        return (
            f"<GaussPointDatabase element={self.element.name} "
            f"points={self.points_count} built={self.built}>"
        )
