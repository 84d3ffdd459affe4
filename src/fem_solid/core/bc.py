"""
Prescribed displacement boundary conditions for 3D solid problems.
"""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Dict, Iterable, List, Tuple, Union

import numpy as np


class PrescribedBoundaryType(IntFlag):
    """Bitmask of the constrained displacement components of a node."""

    FREE = 0
    X = 1
    Y = 2
    Z = 4
    XY = X | Y
    XZ = X | Z
    YZ = Y | Z
    XYZ = X | Y | Z

    @classmethod
    def parse(cls, value: Union[int, str, "PrescribedBoundaryType"]) -> "PrescribedBoundaryType":
        """Parse an integer mask 0..7 or a name such as ``"xyz"``."""
        if isinstance(value, str):
            text = value.strip().upper()
            if text.isdigit():
                return cls.parse(int(text))
            text = text.removeprefix("PRESCRIBED")
            text = "".join(c for c in text if c not in "_-| ")
            if text in ("", "FREE", "NONE"):
                return cls.FREE
            if set(text) - set("XYZ"):
                raise ValueError(f"Invalid prescribed boundary type: {value}")
            mask = cls.FREE
            for c in text:
                mask |= cls[c]
            return mask
        value = int(value)
        if not 0 <= value <= 7:
            raise ValueError(f"Prescribed boundary type must be in 0..7: {value}")
        return cls(value)

    @property
    def components(self) -> Tuple[int, ...]:
        """Constrained component indices (0 = x, 1 = y, 2 = z)."""
        return tuple(i for i, flag in enumerate((1, 2, 4)) if self & flag)


class DirichletCondition:
    """Represents a Dirichlet boundary condition (fixed DOFs) in a FEM system.

    Parameters
    ----------
    dofs : Iterable[int]
        Global degree of freedom indices (0-based) where the condition is applied.
    value : float
        Fixed displacement value imposed on the specified DOFs.

    Examples
    --------
    >>> bc = DirichletCondition([0, 1], 0.0)  # Fix DOFs 0 and 1 at 0 displacement
    """

    def __init__(self, dofs: Iterable[int], value: float):
        self.dofs = tuple(sorted(set(dofs)))
        self.value = value

    def __repr__(self):
        return f"<DirichletCondition dofs={self.dofs} value={self.value}>"


@dataclass(frozen=True)
class PrescribedNode:
    """Prescribed displacement of one node.

    Parameters
    ----------
    node : int
        0-based node index.
    values : tuple of float
        Displacement (x, y, z). Only components selected by ``type`` are imposed.
    type : PrescribedBoundaryType
        Constrained components.
    """

    node: int
    values: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    type: PrescribedBoundaryType = PrescribedBoundaryType.XYZ

    def __post_init__(self):
        values = tuple(float(v) for v in self.values)
        if len(values) != 3:
            raise ValueError(f"Prescribed node {self.node} needs 3 values, got {len(values)}")
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "type", PrescribedBoundaryType.parse(self.type))


@dataclass(frozen=True)
class BoundaryConditions:
    """Prescribed nodes carried untouched to the external solve."""

    prescribed: Tuple[PrescribedNode, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "prescribed", tuple(self.prescribed))

    def __len__(self) -> int:
        return len(self.prescribed)

    def __iter__(self):
        return iter(self.prescribed)

    def validate(self, node_count: int) -> None:
        """Raise IndexError when a prescribed node is outside ``[0, node_count)``."""
        for p in self.prescribed:
            if not 0 <= p.node < node_count:
                raise IndexError(
                    f"Prescribed node {p.node} out of range, valid range is [0, {node_count})"
                )

    def fixed_dofs(self, dof: int = 3) -> Dict[int, float]:
        """Map of constrained global DOF index to prescribed value.

        Components beyond ``dof`` are ignored. Later entries for the same
        DOF must agree with earlier ones.

        Raises
        ------
        ValueError
            If two entries prescribe conflicting values on the same DOF.
        """
        fixed: Dict[int, float] = {}
        for p in self.prescribed:
            for c in p.type.components:
                if c >= dof:
                    continue
                gdof = p.node * dof + c
                value = p.values[c]
                if gdof in fixed and not np.isclose(fixed[gdof], value):
                    raise ValueError(
                        f"Conflicting values for DOF {gdof}: {fixed[gdof]} vs {value}"
                    )
                fixed[gdof] = value
        return fixed

    def to_dirichlet(self, dof: int = 3) -> List[DirichletCondition]:
        """Group ``fixed_dofs`` by value into Dirichlet conditions."""
        by_value: Dict[float, List[int]] = {}
        for gdof, value in self.fixed_dofs(dof).items():
            by_value.setdefault(value, []).append(gdof)
        return [DirichletCondition(dofs, value) for value, dofs in sorted(by_value.items())]
