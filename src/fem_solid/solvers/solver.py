import logging
from typing import Iterator, Optional, Union

import numpy as np

from fem_solid.constitutive.elasticity import constitutive_tensor, tensor_to_voigt
from fem_solid.core.bc import BoundaryConditions
from fem_solid.core.config import SolutionSizing, TaskConfig
from fem_solid.core.geometry import Geometry
from fem_solid.core.helpers import format_matrix
from fem_solid.elements import ElementFactory
from fem_solid.solvers.database import GaussPointDatabase
from fem_solid.solvers.gradients import DegenerateJacobian, ShapeGradients, shape_gradients
from fem_solid.solvers.stiffness import DegenerateElement, LocalStiffness, local_stiffness

logger = logging.getLogger(__name__)


class FeaSolver:
    """
    Element assembly engine for one solution task.

    Construction validates the task against the element kind, builds the
    Gauss point database once and evaluates the constitutive tensor in the
    reference configuration. Afterwards every array it holds is read-only,
    so elements may be assembled in any order or concurrently.

    Parameters
    ----------
    task : TaskConfig
        Validated task configuration.
    geometry : Geometry
        Nodal coordinates and element connectivity.
    boundary : BoundaryConditions, optional
        Prescribed nodes, carried for the external solve.
    nodes_per_element : int, optional
        Nodes per element declared by the input, checked against the element kind.

    Attributes
    ----------
    element : IsoparametricElement
        Element kind implementation.
    sizing : SolutionSizing
        Derived solution parameters.
    database : GaussPointDatabase
        Built shape-function tables.
    C : np.ndarray
        Constitutive tensor (dof, dof, dof, dof).

    Raises
    ------
    ConfigurationError
        If the task is inconsistent with the element kind.
    """

    def __init__(
        self,
        task: TaskConfig,
        geometry: Geometry,
        boundary: Optional[BoundaryConditions] = None,
        nodes_per_element: Optional[int] = None,
    ):
        self.task = task
        self.geometry = geometry
        self.boundary = boundary if boundary is not None else BoundaryConditions()
        self.element = ElementFactory.get_element(task.element_kind)
        self.sizing = SolutionSizing.create(
            task, self.element, geometry.node_count, nodes_per_element
        )
        geometry.validate(self.sizing.nodes_per_element)
        self.boundary.validate(geometry.node_count)

        self.dtype = task.dtype
        self.coordinates = geometry.nodes.astype(self.dtype)
        self.coordinates.setflags(write=False)

        self.database = GaussPointDatabase(
            self.element, self.sizing.gauss_points_count, self.dtype
        ).build()

        # Reference configuration: no displacement field is held here
        self.C = constitutive_tensor(task.model, F=None, dof=task.dof, dtype=self.dtype)

        logger.info(
            "Solver ready: %s, %d elements, %d nodes, msize=%d, %d gauss points, model %s",
            self.element.name,
            geometry.element_count,
            geometry.node_count,
            self.sizing.msize,
            self.sizing.gauss_points_count,
            task.model.model.value,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Constitutive matrix (Voigt):\n%s", format_matrix(tensor_to_voigt(self.C)))

    @property
    def element_count(self) -> int:
        return self.geometry.element_count

    @property
    def msize(self) -> int:
        return self.sizing.msize

    def shape_gradients(
        self, element: int, gauss_index: int
    ) -> Union[ShapeGradients, DegenerateJacobian]:
        """Physical shape-function gradients of ``element`` at one quadrature point."""
        coords = self.coordinates[self.geometry.elements[element]]
        return shape_gradients(coords, self.database[gauss_index], element, gauss_index)

    def assemble(self, element: int) -> Union[LocalStiffness, DegenerateElement]:
        """
        Local stiffness matrix of one element.

        Parameters
        ----------
        element : int
            0-based element index.

        Returns
        -------
        LocalStiffness or DegenerateElement
            The matrix with its local-to-global map, or the degeneracy
            record when a Jacobian is not invertible at some quadrature point.
        """
        node_ids = self.geometry.elements[element]
        result = local_stiffness(
            element, node_ids, self.coordinates[node_ids], self.database, self.C
        )
        if isinstance(result, LocalStiffness) and logger.isEnabledFor(logging.DEBUG):
            logger.debug("Element %d local stiffness:\n%s", element, format_matrix(result.matrix))
        return result

    def iter_assemble(self) -> Iterator[Union[LocalStiffness, DegenerateElement]]:
        """Assemble every element in order."""
        for element in range(self.element_count):
            yield self.assemble(element)

    def __repr__(self):
        return (
            f"<FeaSolver element={self.element.name} elements={self.element_count} "
            f"msize={self.msize}>"
        )
