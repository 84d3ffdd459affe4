"""Isoparametric map from local shape-function derivatives to physical gradients."""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from fem_solid.core.linalg import inv3x3
from fem_solid.solvers.database import GaussPoint


@dataclass
class ShapeGradients:
    """
    Physical shape-function gradients at one quadrature point.

    Attributes
    ----------
    grad : np.ndarray
        ∂N/∂x (dof × n_nodes).
    det_j : float
        Signed Jacobian determinant.
    inv_j : np.ndarray
        Inverse Jacobian (3×3).
    """

    grad: np.ndarray
    det_j: float
    inv_j: np.ndarray


@dataclass(frozen=True)
class DegenerateJacobian:
    """A quadrature point whose Jacobian is not invertible."""

    element: int
    gauss_point: int
    det_j: float


def shape_gradients(
    coords: np.ndarray,
    gauss_point: GaussPoint,
    element: int = -1,
    gauss_index: int = -1,
    eps: Optional[float] = None,
) -> Union[ShapeGradients, DegenerateJacobian]:
    """Shape-function gradients in physical coordinates.

    The Jacobian is ``J = dforms @ coords`` so that ``J[i, j] = ∂x_j/∂ξ_i``
    and the gradients are ``J⁻¹ @ dforms``.

    Parameters
    ----------
    coords : np.ndarray
        Nodal coordinates of the element (n_nodes × 3), in element node order.
    gauss_point : GaussPoint
        Tabulated shape-function derivatives.
    element, gauss_index : int
        Element and quadrature point indices, recorded on degeneracy.
    eps : float, optional
        Degeneracy threshold for ``|det J|``. Defaults to the machine
        epsilon of the table value type.

    Returns
    -------
    ShapeGradients or DegenerateJacobian
        Gradients, or the degeneracy record when ``|det J| <= eps``. An
        inverted element (negative determinant) is not degenerate.
    """
    dforms = gauss_point.dforms
    J = dforms @ np.asarray(coords, dtype=dforms.dtype)
    if eps is None:
        eps = np.finfo(dforms.dtype).eps

    inv_j, det_j = inv3x3(J, eps)
    if inv_j is None:
        return DegenerateJacobian(element, gauss_index, float(det_j))

    return ShapeGradients(grad=inv_j @ dforms, det_j=float(det_j), inv_j=inv_j)
