import logging
from typing import List

import numpy as np
import scipy.sparse as sp

from fem_solid.solvers.solver import FeaSolver
from fem_solid.solvers.stiffness import DegenerateElement, DegenerateElementError

logger = logging.getLogger(__name__)


class MeshAssembler:
    def __init__(self, solver: FeaSolver, strict: bool = False):
        """
        Global stiffness assembler using SciPy sparse matrices.

        Parameters
        ----------
        solver : FeaSolver
            Element assembly engine supplying local matrices.
        strict : bool
            Raise ``DegenerateElementError`` on the first degenerate
            element instead of recording it.

        Attributes
        ----------
        dofs_count : int
            Total number of degrees of freedom in the system
        failures : list of DegenerateElement
            Elements left out of the global matrix
        _dofs_array : np.ndarray
            Element-to-DOF connectivity array
        _ke_array : np.ndarray
            Precomputed local stiffness matrices

        Raises
        ------
        DegenerateElementError
            In strict mode, for the first degenerate element.
        """
        self.solver = solver
        self.strict = strict
        self.dofs_per_node: int = solver.task.dof
        self.dofs_count: int = solver.msize
        self.failures: List[DegenerateElement] = []
        self._dofs_array: np.ndarray = None
        self._ke_array: np.ndarray = None
        self._precompute_elements()

    def _precompute_elements(self):
        """Precompute element matrices and DOF connectivity arrays."""
        size = self.solver.sizing.nodes_per_element * self.dofs_per_node
        dofs_list = []
        ke_list = []

        for result in self.solver.iter_assemble():
            if isinstance(result, DegenerateElement):
                if self.strict:
                    raise DegenerateElementError(result)
                logger.warning(
                    "Element %d skipped: degenerate Jacobian at gauss points %s (det %s)",
                    result.element,
                    [f.gauss_point for f in result.failures],
                    ", ".join(f"{f.det_j:.3e}" for f in result.failures),
                )
                self.failures.append(result)
                continue

            dofs_list.append(result.global_dofs)
            ke_list.append(result.matrix)

        self._dofs_array = np.array(dofs_list, dtype=np.int64).reshape(-1, size)
        self._ke_array = np.array(ke_list, dtype=self.solver.dtype).reshape(-1, size, size)

    @property
    def assembled_count(self) -> int:
        return self._dofs_array.shape[0]

    def assemble_stiffness_matrix(self) -> sp.csr_matrix:
        """
        Assemble the global stiffness matrix.

        Returns
        -------
        scipy.sparse.csr_matrix
            Sparse stiffness matrix (dofs_count × dofs_count)

        Notes
        -----
        Entries sharing a (row, column) pair are summed.
        """
        size = self._dofs_array.shape[1]
        rows = np.repeat(self._dofs_array, size, axis=1).ravel()
        cols = np.tile(self._dofs_array, (1, size)).ravel()
        data = self._ke_array.reshape(-1)

        K = sp.coo_matrix(
            (data, (rows, cols)), shape=(self.dofs_count, self.dofs_count)
        ).tocsr()
        K.sum_duplicates()
        logger.info(
            "Global stiffness assembled: %d elements, msize=%d, nnz=%d, %d failures",
            self.assembled_count,
            self.dofs_count,
            K.nnz,
            len(self.failures),
        )
        return K
