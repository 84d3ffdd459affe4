from typing import List, Optional

import numpy as np


def _shown_indices(total: int, max_size: int) -> List[Optional[int]]:
    """Indices kept after truncation, with ``None`` marking the elided middle."""
    if total <= max_size:
        return list(range(total))
    head = max_size // 2
    tail = max_size - head - 1
    return list(range(head)) + [None] + list(range(total - tail, total))


def format_matrix(matrix: np.ndarray, max_size: int = 8, cell_width: int = 11) -> str:
    """
    Format a 2D array as an index-labelled table string with truncation.

    Row and column headers carry the original indices, so truncated dumps of
    local stiffness matrices can still be matched to DOF numbers.

    Parameters
    ----------
    matrix : np.ndarray
        Input array to format.
    max_size : int, optional
        Maximum number of rows/columns to show, by default 8
    cell_width : int, optional
        Width of each numeric cell, by default 11

    Returns
    -------
    str
        Table with ``...`` standing in for the truncated middle rows and
        columns. Entries below 1e-10 in magnitude are left blank.
    """
    matrix = np.atleast_2d(np.asarray(matrix, dtype=np.float64))
    rows = _shown_indices(matrix.shape[0], max_size)
    cols = _shown_indices(matrix.shape[1], max_size)
    label_width = max(len(str(max(matrix.shape))), 3)

    def cell(i: Optional[int], j: Optional[int]) -> str:
        if i is None or j is None:
            return f"{'...':>{cell_width}}"
        val = matrix[i, j]
        return f"{val:{cell_width}.3e}" if abs(val) > 1e-10 else " " * cell_width

    header = " " * label_width + " |" + "".join(
        f"{'...' if j is None else j:>{cell_width + 1}}" for j in cols
    )
    lines = [header, "-" * len(header)]
    for i in rows:
        label = "..." if i is None else str(i)
        lines.append(f"{label:>{label_width}} |" + "".join(" " + cell(i, j) for j in cols))
    return "\n".join(lines)
