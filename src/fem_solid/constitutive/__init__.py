"""
Constitutive models package for fem_solid.

This package contains the fourth-order constitutive tensors of the supported
material models.
"""

from fem_solid.constitutive.elasticity import (
    VOIGT_PAIRS,
    constitutive_tensor,
    linear_elastic_tensor,
    neo_hookean_tensor,
    tensor_to_voigt,
)

__all__ = [
    "VOIGT_PAIRS",
    "constitutive_tensor",
    "linear_elastic_tensor",
    "neo_hookean_tensor",
    "tensor_to_voigt",
]
