"""Nodal coordinates and element connectivity."""

from dataclasses import dataclass
from itertools import permutations
from typing import Dict, Tuple

import numpy as np

from fem_solid.elements.SOLID import TETRA10


@dataclass
class Geometry:
    """
    Mesh geometry shared read-only by the assembly engine.

    Parameters
    ----------
    nodes : np.ndarray
        Nodal coordinates (N × 3).
    elements : np.ndarray
        Element connectivity (E × n) as 0-based node indices.
    """

    nodes: np.ndarray
    elements: np.ndarray

    def __post_init__(self):
        nodes = np.array(self.nodes, dtype=np.float64)
        if nodes.ndim == 1 and nodes.size in (0, 3):
            nodes = nodes.reshape(-1, 3)
        if nodes.ndim != 2 or nodes.shape[1] != 3:
            raise ValueError(
                f"Nodes must be an (N, 3) array of coordinates, got shape {nodes.shape}"
            )
        self.nodes = nodes
        elements = np.asarray(self.elements, dtype=np.int64)
        if elements.ndim == 1:
            elements = elements.reshape(0, 0) if elements.size == 0 else elements.reshape(1, -1)
        self.elements = np.array(elements)
        self.nodes.setflags(write=False)
        self.elements.setflags(write=False)

    @property
    def node_count(self) -> int:
        return self.nodes.shape[0]

    @property
    def element_count(self) -> int:
        return self.elements.shape[0]

    def validate(self, nodes_per_element: int) -> None:
        """Check connectivity width and node index range.

        Raises
        ------
        ValueError
            If an element does not list exactly ``nodes_per_element`` nodes.
        IndexError
            If an element references a node outside ``[0, node_count)``.
        """
        if self.element_count and self.elements.shape[1] != nodes_per_element:
            raise ValueError(
                f"Elements must have {nodes_per_element} nodes, got {self.elements.shape[1]}"
            )
        bad = np.argwhere((self.elements < 0) | (self.elements >= self.node_count))
        if bad.size:
            e, k = bad[0]
            raise IndexError(
                f"Element {e} node {k} references node {self.elements[e, k]}, "
                f"valid range is [0, {self.node_count})"
            )

    @classmethod
    def box(
        cls,
        lx: float = 1.0,
        ly: float = 1.0,
        lz: float = 1.0,
        nx: int = 1,
        ny: int = 1,
        nz: int = 1,
    ) -> "Geometry":
        """Structured TETRA10 mesh of the box ``[0, lx] × [0, ly] × [0, lz]``.

        Every hexahedral cell is split into 6 tetrahedra sharing its main
        diagonal. Mid-edge nodes are shared between neighbouring elements.

        Parameters
        ----------
        lx, ly, lz : float
            Box dimensions.
        nx, ny, nz : int
            Number of cells along each axis.

        Returns
        -------
        Geometry
            Mesh with ``6 * nx * ny * nz`` positively oriented elements.
        """
        if min(nx, ny, nz) < 1:
            raise ValueError(f"Cell counts must be positive: {(nx, ny, nz)}")

        xs = np.linspace(0.0, lx, nx + 1)
        ys = np.linspace(0.0, ly, ny + 1)
        zs = np.linspace(0.0, lz, nz + 1)
        Z, Y, X = np.meshgrid(zs, ys, xs, indexing="ij")
        nodes = list(np.column_stack([X.ravel(), Y.ravel(), Z.ravel()]))

        def vertex(i: int, j: int, k: int) -> int:
            return i + (nx + 1) * (j + (ny + 1) * k)

        midpoints: Dict[Tuple[int, int], int] = {}

        def midpoint(a: int, b: int) -> int:
            key = (min(a, b), max(a, b))
            if key not in midpoints:
                midpoints[key] = len(nodes)
                nodes.append((nodes[a] + nodes[b]) / 2)
            return midpoints[key]

        elements = []
        for k in range(nz):
            for j in range(ny):
                for i in range(nx):
                    for order in permutations(range(3)):
                        offset = np.zeros(3, dtype=int)
                        corners = [vertex(i, j, k)]
                        for axis in order:
                            offset[axis] += 1
                            corners.append(vertex(i + offset[0], j + offset[1], k + offset[2]))

                        x0, x1, x2, x3 = (nodes[c] for c in corners)
                        if np.dot(x1 - x0, np.cross(x2 - x0, x3 - x0)) < 0:
                            corners[1], corners[2] = corners[2], corners[1]

                        edges = [midpoint(corners[a], corners[b]) for a, b in TETRA10.EDGES]
                        elements.append(corners + edges)

        return cls(nodes=np.array(nodes), elements=np.array(elements))

    def __repr__(self):
        return f"<Geometry nodes={self.node_count} elements={self.element_count}>"
