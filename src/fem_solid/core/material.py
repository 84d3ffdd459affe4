from dataclasses import dataclass
from enum import Enum
from typing import Tuple

MAX_MATERIAL_PARAMETERS = 10


class ModelType(str, Enum):
    """Material model tag."""

    A5 = "A5"  # linear isotropic, parameters (λ, μ)
    COMPRESSIBLE_NEOHOOKEAN = "COMPRESSIBLE_NEOHOOKEAN"


@dataclass
class IsotropicMaterial:
    """
    Class representing an isotropic material with uniform properties in all directions.

    Parameters
    ----------
    name : str
        The name of the material.
    E : float
        Young's Modulus of the material.
    nu : float
        Poisson's ratio of the material.
    rho : float
        Density of the material.
    """

    name: str
    E: float
    nu: float
    rho: float = 0.0

    def __post_init__(self):
        if self.E <= 0:
            raise ValueError(f"Young's modulus must be positive: {self.E}")
        if not -1 < self.nu < 0.5:
            raise ValueError(f"Poisson's ratio must be in (-1, 0.5): {self.nu}")

    @property
    def lame_parameters(self) -> Tuple[float, float]:
        """Lamé constants.

        Returns
        -------
        tuple of float
            (λ, μ) with λ = Eν / ((1+ν)(1-2ν)) and μ = E / (2(1+ν))
        """
        lambd = self.E * self.nu / ((1 + self.nu) * (1 - 2 * self.nu))
        mu = self.E / (2 * (1 + self.nu))
        return lambd, mu
