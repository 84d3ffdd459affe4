"""
Fourth-order constitutive tensors for isotropic solids.

All builders are pure functions returning read-only arrays of shape
``(dof, dof, dof, dof)`` indexed as ``C[i, j, k, l]``.

Linear isotropic (model A5):
    C_ijkl = λ δ_ij δ_kl + μ (δ_ik δ_jl + δ_il δ_jk)

Compressible Neo-Hookean spatial tangent (Bonet & Wood):
    c_ijkl = λ' δ_ij δ_kl + μ' (δ_ik δ_jl + δ_il δ_jk)
    λ' = λ / J,  μ' = (μ - λ ln J) / J,  J = det F
"""

from typing import Optional, Tuple

import numpy as np

from fem_solid.core.config import MaterialModel
from fem_solid.core.material import ModelType

# Voigt index pairs in the order (00, 11, 22, 01, 12, 02)
VOIGT_PAIRS: Tuple[Tuple[int, int], ...] = ((0, 0), (1, 1), (2, 2), (0, 1), (1, 2), (0, 2))


def _isotropic_tensor(lam: float, mu: float, dof: int, dtype) -> np.ndarray:
    d = np.eye(dof, dtype=dtype)
    C = lam * np.einsum("ij,kl->ijkl", d, d) + mu * (
        np.einsum("ik,jl->ijkl", d, d) + np.einsum("il,jk->ijkl", d, d)
    )
    C = C.astype(dtype, copy=False)
    C.setflags(write=False)
    return C


def linear_elastic_tensor(lam: float, mu: float, dof: int = 3, dtype=np.float64) -> np.ndarray:
    """Isotropic linear elastic tensor.

    Parameters
    ----------
    lam, mu : float
        Lamé constants λ and μ.
    dof : int
        Number of spatial dimensions.
    dtype : numpy dtype
        Value type of the result.

    Returns
    -------
    np.ndarray
        Read-only tensor (dof, dof, dof, dof).
    """
    return _isotropic_tensor(lam, mu, dof, dtype)


def neo_hookean_tensor(
    lam: float, mu: float, F: Optional[np.ndarray] = None, dof: int = 3, dtype=np.float64
) -> np.ndarray:
    """Spatial tangent of the compressible Neo-Hookean model.

    Parameters
    ----------
    lam, mu : float
        Lamé constants λ and μ.
    F : np.ndarray, optional
        Deformation gradient (dof × dof). Defaults to the identity.

    Returns
    -------
    np.ndarray
        Read-only tensor (dof, dof, dof, dof). Equal to the linear elastic
        tensor when ``F`` is the identity.

    Raises
    ------
    ValueError
        If ``det F <= 0``.
    """
    if F is None:
        F = np.eye(dof)
    F = np.asarray(F, dtype=np.float64)
    if F.shape != (dof, dof):
        raise ValueError(f"Deformation gradient must be {dof}x{dof}, got {F.shape}")

    J = float(np.linalg.det(F))
    if J <= 0:
        raise ValueError(f"Deformation gradient must have positive determinant, got {J}")

    lam_j = lam / J
    mu_j = (mu - lam * np.log(J)) / J
    return _isotropic_tensor(lam_j, mu_j, dof, dtype)


def constitutive_tensor(
    model: MaterialModel, F: Optional[np.ndarray] = None, dof: int = 3, dtype=np.float64
) -> np.ndarray:
    """Constitutive tensor of ``model`` at deformation gradient ``F``."""
    if model.model == ModelType.A5:
        return linear_elastic_tensor(model.lam, model.mu, dof, dtype)
    if model.model == ModelType.COMPRESSIBLE_NEOHOOKEAN:
        return neo_hookean_tensor(model.lam, model.mu, F, dof, dtype)
    raise ValueError(f"Unsupported material model: {model.model}")


def tensor_to_voigt(C: np.ndarray) -> np.ndarray:
    """6×6 Voigt matrix of a 3D fourth-order tensor.

    Rows and columns follow ``VOIGT_PAIRS``.
    """
    C = np.asarray(C)
    if C.shape != (3, 3, 3, 3):
        raise ValueError(f"Voigt form requires a (3, 3, 3, 3) tensor, got {C.shape}")

    D = np.zeros((6, 6), dtype=C.dtype)
    for a, (i, j) in enumerate(VOIGT_PAIRS):
        for b, (k, l) in enumerate(VOIGT_PAIRS):
            D[a, b] = C[i, j, k, l]
    return D
