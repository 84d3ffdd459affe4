"""
Example: Uniaxial stretch of a TETRA10 block

A box is meshed with quadratic tetrahedra, the global stiffness is
assembled and a prescribed stretch on the x = L face is solved with SciPy.
Symmetry planes x = 0, y = 0 and z = 0 leave the lateral faces free, so the
exact solution is a homogeneous uniaxial stress state with reaction
force E * (delta / L) * A.
"""

import logging

import numpy as np
from scipy.sparse.linalg import spsolve

from fem_solid.core.assembler import MeshAssembler
from fem_solid.core.bc import BoundaryConditions, PrescribedNode
from fem_solid.core.config import MaterialModel, TaskConfig
from fem_solid.core.geometry import Geometry
from fem_solid.solvers import FeaSolver

logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")

E, NU = 210e3, 0.3
LX, LY, LZ = 2.0, 1.0, 0.5
DELTA = 1e-3


def symmetry_conditions(geometry: Geometry) -> BoundaryConditions:
    """Symmetry planes on the minimum faces, stretch on the x = LX face."""
    prescribed = []
    for node, (x, y, z) in enumerate(geometry.nodes):
        mask = ""
        values = [0.0, 0.0, 0.0]
        if np.isclose(x, 0.0):
            mask += "x"
        elif np.isclose(x, LX):
            mask += "x"
            values[0] = DELTA
        if np.isclose(y, 0.0):
            mask += "y"
        if np.isclose(z, 0.0):
            mask += "z"
        if mask:
            prescribed.append(PrescribedNode(node=node, values=tuple(values), type=mask))
    return BoundaryConditions(tuple(prescribed))


def main():
    geometry = Geometry.box(LX, LY, LZ, nx=4, ny=2, nz=1)
    boundary = symmetry_conditions(geometry)
    task = TaskConfig(model=MaterialModel.from_engineering(E, NU), gauss_points_count=4)

    solver = FeaSolver(task, geometry, boundary)
    K = MeshAssembler(solver).assemble_stiffness_matrix()

    fixed = boundary.fixed_dofs(task.dof)
    fixed_dofs = np.array(sorted(fixed))
    free_dofs = np.setdiff1d(np.arange(solver.msize), fixed_dofs)

    u = np.zeros(solver.msize)
    u[fixed_dofs] = [fixed[d] for d in fixed_dofs]
    rhs = -K[free_dofs][:, fixed_dofs] @ u[fixed_dofs]
    u[free_dofs] = spsolve(K[free_dofs][:, free_dofs].tocsc(), rhs)

    reactions = K @ u
    loaded = [d for d in fixed_dofs if d % 3 == 0 and fixed[d] == DELTA]
    force = reactions[loaded].sum()
    expected = E * DELTA / LX * LY * LZ

    displacements = u.reshape(-1, 3)
    lateral = displacements[np.isclose(geometry.nodes[:, 1], LY), 1].mean()

    print("=" * 70)
    print("Uniaxial stretch of a TETRA10 block")
    print("=" * 70)
    print(f"  Elements: {geometry.element_count}, nodes: {geometry.node_count}")
    print(f"  Reaction force: {force:.6e} (exact {expected:.6e})")
    print(f"  Lateral contraction at y = LY: {lateral:.6e} (exact {-NU * DELTA / LX * LY:.6e})")


if __name__ == "__main__":
    main()
