"""Gauss quadrature rules on the unit tetrahedron.

Weights are pre-divided by 6 (the reference volume), so that summing
``w * f`` over a rule integrates ``f`` over the unit tetrahedron directly.
"""

from typing import NamedTuple, Tuple

import numpy as np

from fem_solid.core.config import ConfigurationError


class QuadratureRule(NamedTuple):
    """Quadrature weights (n,) and local points (n, 3)."""

    weights: np.ndarray
    points: np.ndarray


def _four_point_rule() -> QuadratureRule:
    a = (5 + 3 * np.sqrt(5)) / 20
    b = (5 - np.sqrt(5)) / 20

    points = np.array(
        [
            [a, b, b],
            [b, a, b],
            [b, b, a],
            [b, b, b],
        ]
    )
    weights = np.full(4, 1 / 24)
    return QuadratureRule(weights, points)


def _five_point_rule() -> QuadratureRule:
    points = np.array(
        [
            [1 / 4, 1 / 4, 1 / 4],
            [1 / 2, 1 / 6, 1 / 6],
            [1 / 6, 1 / 2, 1 / 6],
            [1 / 6, 1 / 6, 1 / 2],
            [1 / 6, 1 / 6, 1 / 6],
        ]
    )
    # Centroid weight is negative; the rule is still exact to degree 3
    weights = np.array([-4 / 5, 9 / 20, 9 / 20, 9 / 20, 9 / 20]) / 6
    return QuadratureRule(weights, points)


_TETRAHEDRON_RULES = {4: _four_point_rule, 5: _five_point_rule}

TETRAHEDRON_POINT_COUNTS: Tuple[int, ...] = tuple(sorted(_TETRAHEDRON_RULES))


def tetrahedron_rule(points_count: int) -> QuadratureRule:
    """Return the tetrahedron rule with ``points_count`` points.

    Raises
    ------
    ConfigurationError
        If no rule with that many points exists.
    """
    try:
        builder = _TETRAHEDRON_RULES[points_count]
    except KeyError:
        raise ConfigurationError(
            f"No {points_count}-point tetrahedron rule. Valid: {list(TETRAHEDRON_POINT_COUNTS)}"
        ) from None
    return builder()
