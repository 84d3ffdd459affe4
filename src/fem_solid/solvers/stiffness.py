"""Local element stiffness by quadrature of the constitutive contraction.

For each quadrature point the contribution to the element matrix is

    K[a·dof + i, b·dof + j] += Σ_kl ∂N_a/∂x_k · C_ikjl · ∂N_b/∂x_l · w · |det J|

Degenerate quadrature points are skipped and reported with the element
instead of raising.
"""

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from fem_solid.solvers.database import GaussPointDatabase
from fem_solid.solvers.gradients import DegenerateJacobian, shape_gradients


@dataclass
class LocalStiffness:
    """
    Element stiffness matrix with its local-to-global map.

    Attributes
    ----------
    element : int
        Element index.
    matrix : np.ndarray
        Symmetric stiffness matrix (n·dof × n·dof).
    node_ids : np.ndarray
        Global node indices of the element (n,).
    global_dofs : np.ndarray
        Global DOF of each matrix row/column: ``node_ids[a] * dof + i``.
    """

    element: int
    matrix: np.ndarray
    node_ids: np.ndarray
    global_dofs: np.ndarray


@dataclass
class DegenerateElement:
    """
    Element with at least one non-invertible Jacobian.

    Attributes
    ----------
    element : int
        Element index.
    failures : tuple of DegenerateJacobian
        One record per skipped quadrature point.
    node_ids : np.ndarray
        Global node indices of the element.
    partial : np.ndarray
        Stiffness summed over the healthy quadrature points only.
    """

    element: int
    failures: Tuple[DegenerateJacobian, ...]
    node_ids: np.ndarray
    partial: np.ndarray


class DegenerateElementError(RuntimeError):
    """Raised by strict callers on the first degenerate element."""

    def __init__(self, result: DegenerateElement):
        self.result = result
        dets = ", ".join(f"gp {f.gauss_point}: {f.det_j:.3e}" for f in result.failures)
        super().__init__(
            f"Element {result.element} has a degenerate Jacobian ({dets}), "
            f"nodes {list(result.node_ids)}"
        )


def stiffness_contribution(grad: np.ndarray, C: np.ndarray, scale: float) -> np.ndarray:
    """Contribution of one quadrature point.

    Parameters
    ----------
    grad : np.ndarray
        Physical shape-function gradients (dof × n).
    C : np.ndarray
        Constitutive tensor (dof, dof, dof, dof).
    scale : float
        Quadrature weight times ``|det J|``.

    Returns
    -------
    np.ndarray
        Matrix (n·dof × n·dof).
    """
    dof, n = grad.shape
    return np.einsum("ka,ikjl,lb->aibj", grad, C, grad).reshape(n * dof, n * dof) * scale


def global_dofs(node_ids: np.ndarray, dof: int) -> np.ndarray:
    """Global DOF indices of an element, node-major."""
    node_ids = np.asarray(node_ids, dtype=np.int64)
    return (node_ids[:, None] * dof + np.arange(dof)).ravel()


def local_stiffness(
    element: int,
    node_ids: np.ndarray,
    coords: np.ndarray,
    database: GaussPointDatabase,
    C: np.ndarray,
) -> Union[LocalStiffness, DegenerateElement]:
    """Integrate the stiffness matrix of one element.

    Parameters
    ----------
    element : int
        Element index.
    node_ids : np.ndarray
        Global node indices of the element (n,).
    coords : np.ndarray
        Nodal coordinates gathered through ``node_ids`` (n × 3).
    database : GaussPointDatabase
        Built shape-function tables.
    C : np.ndarray
        Constitutive tensor.

    Returns
    -------
    LocalStiffness or DegenerateElement
    """
    dof = database.dof
    n = len(node_ids)
    K = np.zeros((n * dof, n * dof), dtype=database.dtype)
    failures = []

    for gi, gp in enumerate(database):
        g = shape_gradients(coords, gp, element, gi)
        if isinstance(g, DegenerateJacobian):
            failures.append(g)
            continue
        K += stiffness_contribution(g.grad, C, gp.weight * abs(g.det_j))

    if failures:
        return DegenerateElement(element, tuple(failures), np.asarray(node_ids), K)
    return LocalStiffness(element, K, np.asarray(node_ids), global_dofs(node_ids, dof))
