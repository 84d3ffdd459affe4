"""3D Solid Volumetric Elements for Finite-Strain Analysis

Implements the isoparametric tables of 3D solid elements: shape functions,
their local derivatives and the quadrature rules they are integrated with.

Elements supported:
- TETRA10: 10-node quadratic tetrahedron

Formulation:
    Local stiffness: K = ∫ ∇N · C · ∇N dΩ

where:
    ∇N: Shape function gradients in physical coordinates (3 × n_nodes)
    C: Fourth-order constitutive tensor (3 × 3 × 3 × 3)
"""

from abc import abstractmethod
from typing import Tuple

import numpy as np

from fem_solid.elements.elements import IsoparametricElement
from fem_solid.elements.quadrature import TETRAHEDRON_POINT_COUNTS, tetrahedron_rule


class SolidElement(IsoparametricElement):
    """Base class for 3D solid volumetric elements.

    Node numbering and local coordinate systems are defined by subclasses.
    Each node carries the displacement vector U = (Ux, Uy, Uz).
    """

    spatial_dimension = 3

    @abstractmethod
    def local_nodes(self) -> np.ndarray:
        """Local coordinates of the element nodes (n_nodes × 3)."""


# =============================================================================
# TETRAHEDRON Elements
# =============================================================================


class TETRA10(SolidElement):
    """10-node quadratic tetrahedron element.

    Node ordering:
        Corners: 0 (anchor, L0 = 1 - r - s - t), 1 (r), 2 (s), 3 (t)
        Edge midpoints: 4 (0-1), 5 (1-2), 6 (0-2), 7 (0-3), 8 (1-3), 9 (2-3)

                       s
                     .
                    ,/
                   /
               2
             ,/|`\\
           ,/  |  `\\
          ,6   '.   `5
        ,/      9    `\\
      ,/        |      `\\
     0--------4--'.-------1 --> r
      `\\.        |      ,/
         `\\.     |    ,8
            `7.  '. ,/
               `\\. |/
                  `3
                     `\\.
                        ` t

    Natural coordinates: r, s, t ∈ [0, 1] with r + s + t ≤ 1
    """

    name = "TETRA10"
    nodes_count = 10
    supported_quadratures = TETRAHEDRON_POINT_COUNTS

    # Corner pair of each mid-edge node 4..9
    EDGES = ((0, 1), (1, 2), (0, 2), (0, 3), (1, 3), (2, 3))

    def integration_points(self, points_count: int = 4) -> Tuple[np.ndarray, np.ndarray]:
        """4- or 5-point integration rule for quadratic tetrahedron."""
        weights, points = tetrahedron_rule(points_count)
        return points, weights

    def local_nodes(self) -> np.ndarray:
        corners = np.array(
            [
                [0.0, 0.0, 0.0],
                [1.0, 0.0, 0.0],
                [0.0, 1.0, 0.0],
                [0.0, 0.0, 1.0],
            ]
        )
        midpoints = np.array([(corners[a] + corners[b]) / 2 for a, b in self.EDGES])
        return np.vstack([corners, midpoints])

    def shape_functions(self, r: float, s: float, t: float) -> np.ndarray:
        """Quadratic tetrahedral shape functions."""
        L0 = 1 - r - s - t
        L1 = r
        L2 = s
        L3 = t

        return np.array(
            [
                L0 * (2 * L0 - 1),  # N0
                L1 * (2 * L1 - 1),  # N1
                L2 * (2 * L2 - 1),  # N2
                L3 * (2 * L3 - 1),  # N3
                4 * L0 * L1,  # N4 - edge 0-1
                4 * L1 * L2,  # N5 - edge 1-2
                4 * L2 * L0,  # N6 - edge 0-2
                4 * L0 * L3,  # N7 - edge 0-3
                4 * L1 * L3,  # N8 - edge 1-3
                4 * L2 * L3,  # N9 - edge 2-3
            ]
        )

    def shape_function_derivatives(
        self, r: float, s: float, t: float
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Derivatives of quadratic tetrahedral shape functions.

        Returns
        -------
        dN_dr, dN_ds, dN_dt : np.ndarray
            Derivatives with respect to each local coordinate (10,)
        """
        L = (1 - r - s - t, r, s, t)

        # dL/d(r,s,t)
        dL = (
            np.array([-1, -1, -1]),
            np.array([1, 0, 0]),
            np.array([0, 1, 0]),
            np.array([0, 0, 1]),
        )

        dN = np.zeros((10, 3))

        # Corner nodes
        for i in range(4):
            dN[i] = (4 * L[i] - 1) * dL[i]

        # Edge midpoints
        for k, (a, b) in enumerate(self.EDGES, start=4):
            dN[k] = 4 * (L[b] * dL[a] + L[a] * dL[b])

        return dN[:, 0], dN[:, 1], dN[:, 2]
