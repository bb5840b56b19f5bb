"""
Numerical utilities: constants and triangle quadrature.
"""

from .constants import ZVAC, TENTHIRDS, NUMPFT, C_LIGHT, EV2OMEGA
from .quadrature import triangle_unit_set, triangle_rule, gauss_legendre01


__all__ = [
    'ZVAC', 'TENTHIRDS', 'NUMPFT', 'C_LIGHT', 'EV2OMEGA',
    'triangle_unit_set', 'triangle_rule', 'gauss_legendre01',
]
