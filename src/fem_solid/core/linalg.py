"""Closed-form 3×3 linear algebra used by the Jacobian transform."""

from typing import Optional, Tuple

import numpy as np


def det3x3(m: np.ndarray) -> float:
    """Determinant of a 3×3 matrix as the triple product ``m0 · (m1 × m2)``."""
    return (
        m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
        - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
        + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
    )


def inv3x3(m: np.ndarray, eps: Optional[float] = None) -> Tuple[Optional[np.ndarray], float]:
    """Invert a 3×3 matrix through its adjugate.

    Parameters
    ----------
    m : np.ndarray
        Matrix to invert (3×3).
    eps : float, optional
        Degeneracy threshold. Defaults to the machine epsilon of ``m.dtype``.

    Returns
    -------
    inverse : np.ndarray or None
        Inverse matrix, or None when ``|det| <= eps``.
    det : float
        Signed determinant, returned in both cases.
    """
    m = np.asarray(m)
    dtype = m.dtype if np.issubdtype(m.dtype, np.floating) else np.dtype(np.float64)
    if eps is None:
        eps = np.finfo(dtype).eps

    det = det3x3(m)
    if abs(det) <= eps:
        return None, det

    # Adjugate is the transposed cofactor matrix
    adj = np.array(
        [
            [
                m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1],
                m[0, 2] * m[2, 1] - m[0, 1] * m[2, 2],
                m[0, 1] * m[1, 2] - m[0, 2] * m[1, 1],
            ],
            [
                m[1, 2] * m[2, 0] - m[1, 0] * m[2, 2],
                m[0, 0] * m[2, 2] - m[0, 2] * m[2, 0],
                m[0, 2] * m[1, 0] - m[0, 0] * m[1, 2],
            ],
            [
                m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0],
                m[0, 1] * m[2, 0] - m[0, 0] * m[2, 1],
                m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0],
            ],
        ],
        dtype=dtype,
    )
    return adj / det, det
