from .database import GaussPoint, GaussPointDatabase
from .gradients import DegenerateJacobian, ShapeGradients, shape_gradients
from .solver import FeaSolver
from .stiffness import DegenerateElement, DegenerateElementError, LocalStiffness

__all__ = [
    "GaussPoint",
    "GaussPointDatabase",
    "DegenerateJacobian",
    "ShapeGradients",
    "shape_gradients",
    "FeaSolver",
    "DegenerateElement",
    "DegenerateElementError",
    "LocalStiffness",
]
