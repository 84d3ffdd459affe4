"""fem-solid: element assembly engine for 3D solids discretised with 10-node tetrahedra."""

__version__ = "0.1.0"
