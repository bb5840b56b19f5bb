"""
Matrix elements of the equivalence-principle PFT trace.
"""

from dataclasses import dataclass, field, fields

import numpy as np


def _cvec():
    return np.zeros(3, dtype=complex)


@dataclass
class EPPFTElements:
    """Integrals of basis function b_a against the reduced fields (e, h) of b_b.

    be, bh              <b_a, e>, <b_a, h>
    divbe, divbh        int (div b_a) e, int (div b_a) h
    bxe, bxh            int b_a x e, int b_a x h
    divbrxe, divbrxh    int (div b_a) (r x e), int (div b_a) (r x h)
    rxbxe, rxbxh        int r x (b_a x e), int r x (b_a x h)

    with r measured from the torque center of the surface of b_a.
    """
    be: complex = 0j
    bh: complex = 0j
    divbe: np.ndarray = field(default_factory=_cvec)
    divbh: np.ndarray = field(default_factory=_cvec)
    bxe: np.ndarray = field(default_factory=_cvec)
    bxh: np.ndarray = field(default_factory=_cvec)
    divbrxe: np.ndarray = field(default_factory=_cvec)
    divbrxh: np.ndarray = field(default_factory=_cvec)
    rxbxe: np.ndarray = field(default_factory=_cvec)
    rxbxh: np.ndarray = field(default_factory=_cvec)

    def __add__(self, other):
        return EPPFTElements(**{f.name: getattr(self, f.name) + getattr(other, f.name)
                                for f in fields(self)})

    def __mul__(self, scale):
        return EPPFTElements(**{f.name: scale * getattr(self, f.name)
                                for f in fields(self)})

    __rmul__ = __mul__
