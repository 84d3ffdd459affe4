from .elements import ElementFactory, IsoparametricElement
from .quadrature import QuadratureRule, tetrahedron_rule
from .SOLID import TETRA10, SolidElement

__all__ = [
    "ElementFactory",
    "IsoparametricElement",
    "QuadratureRule",
    "tetrahedron_rule",
    "SolidElement",
    "TETRA10",
]
