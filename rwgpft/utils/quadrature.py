"""
Quadrature rules for boundary element integration.

This module provides integration points and weights for:
- Gauss-Legendre quadrature on the unit interval
- Symmetric triangle rules of low order (Strang and Fix)
- Conical (collapsed Gauss-Jacobi) triangle rules of arbitrary order
"""

import numpy as np
from typing import Tuple
from scipy.special import roots_jacobi, roots_legendre


def gauss_legendre01(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Gauss-Legendre nodes and weights on the interval [0, 1].

    Parameters
    ----------
    n : int
        Number of integration points

    Returns
    -------
    x : np.ndarray, shape (n,)
        Integration nodes in (0, 1)
    w : np.ndarray, shape (n,)
        Integration weights, sum(w) = 1
    """
    if n < 1:
        raise ValueError("Number of nodes must be >= 1")
    x, w = roots_legendre(n)
    return 0.5 * (x + 1.0), 0.5 * w


def _orbit(a, b):
    """Barycentric orbit (a, b, b) and its permutations as unit-triangle (x, y)."""
    if a == b:
        return [(a, a)]
    return [(b, b), (a, b), (b, a)]


# number of points -> list of (a, b, weight) orbits, weights summing to 1
_SYMMETRIC_RULES = {
    1: [(1 / 3, 1 / 3, 1.0)],
    3: [(0.0, 0.5, 1 / 3)],
    4: [(1 / 3, 1 / 3, -27 / 48), (0.6, 0.2, 25 / 48)],
    7: [(1 / 3, 1 / 3, 9 / 40),
        ((9 + 2 * np.sqrt(15)) / 21, (6 - np.sqrt(15)) / 21, (155 - np.sqrt(15)) / 1200),
        ((9 - 2 * np.sqrt(15)) / 21, (6 + np.sqrt(15)) / 21, (155 + np.sqrt(15)) / 1200)],
}


def triangle_unit_set(rule: int = 7) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Symmetric quadrature rule on the unit triangle (0,0), (1,0), (0,1).

    Parameters
    ----------
    rule : int, optional
        Number of points: 1 (centroid, degree 1), 3 (edge midpoints,
        degree 2), 4 (degree 3) or 7 (Strang and Fix, degree 5)

    Returns
    -------
    x, y : np.ndarray
        Point coordinates
    w : np.ndarray
        Weights with sum(w) = 1; integrals over a physical triangle are
        area * sum(w * f)
    """
    if rule not in _SYMMETRIC_RULES:
        raise ValueError("Quadrature rule {} not implemented. "
                         "Available rules: {}".format(rule, sorted(_SYMMETRIC_RULES)))

    pts, wts = [], []
    for a, b, weight in _SYMMETRIC_RULES[rule]:
        orbit = _orbit(a, b)
        pts += orbit
        wts += [weight] * len(orbit)

    pts = np.array(pts)
    return pts[:, 0], pts[:, 1], np.array(wts)


def triangle_conical(n: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Collapsed Gauss-Jacobi product rule with n x n points on the unit triangle.

    Exact for polynomials up to degree 2n - 1. Weights sum to 1.
    """
    # x = s, y = (1 - s) t with Jacobian (1 - s)
    u, wu = roots_jacobi(n, 1.0, 0.0)
    s = 0.5 * (1.0 + u)
    t, wt = gauss_legendre01(n)

    x = np.repeat(s, n)
    y = np.outer(1.0 - s, t).ravel()
    w = np.outer(wu, wt).ravel() / 2.0

    return x, y, w


def triangle_rule(order: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Triangle cubature rule exact for polynomials of the given degree.

    Low orders use the symmetric rules of `triangle_unit_set`, higher orders
    a conical product rule.

    Parameters
    ----------
    order : int
        Polynomial degree to integrate exactly

    Returns
    -------
    x, y, w : np.ndarray
        Points in the unit triangle and weights normalized to sum 1
    """
    if order <= 1:
        return triangle_unit_set(1)
    if order == 2:
        return triangle_unit_set(3)
    if order == 3:
        return triangle_unit_set(4)
    if order <= 5:
        return triangle_unit_set(7)
    return triangle_conical((order + 2) // 2)


def panel_points(verts: np.ndarray,
        x: np.ndarray,
        y: np.ndarray) -> np.ndarray:
    """
    Map unit-triangle coordinates onto a panel with vertices verts (3, 3).
    """
    v0, v1, v2 = verts
    return v0 + np.outer(x, v1 - v0) + np.outer(y, v2 - v0)
