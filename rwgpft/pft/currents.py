"""
Surface-current states consumed by the PFT traces.

A current state is either a coefficient vector of a solved scattering
problem or a correlation matrix of the same degrees of freedom (thermal
and fluctuation problems).  Both expose `products`, which returns the
four bilinear current products of a basis-function pair

    KK = conj(k_a) k_b,  KN = conj(k_a) n_b,
    NK = conj(n_a) k_b,  NN = conj(n_a) n_b,

with k and n the physical electric and magnetic surface-current
coefficients (n = -ZVAC times the stored magnetic coefficient).
"""

import numpy as np

from ..utils.constants import ZVAC


class CurrentVector(object):
    """
    Solution vector of surface-current coefficients.

    Parameters
    ----------
    kn : array_like, shape (ndof,)
        Coefficients in geometry order.  Surfaces carrying magnetic
        currents store [k_0, -n_0/ZVAC, k_1, -n_1/ZVAC, ...]; PEC surfaces
        store [k_0, k_1, ...].

    Examples
    --------
    >>> currents = CurrentVector(np.ones(geo.ndof))
    """

    def __init__(self, kn):
        self.kn = np.asarray(kn, dtype=complex).ravel()

    @property
    def ndof(self):
        return self.kn.size

    def coefficients(self, geo, ns, ne):
        """
        Physical (k, n) coefficients of basis function ne on surface ns.
        """
        off = geo.offset[ns]
        if geo.is_pec(ns):
            return self.kn[off + ne], 0j
        return self.kn[off + 2 * ne], -ZVAC * self.kn[off + 2 * ne + 1]

    def products(self, geo, ns, nea, neb):
        ka, na = self.coefficients(geo, ns, nea)
        kb, nb = self.coefficients(geo, ns, neb)
        cka, cna = np.conj(ka), np.conj(na)
        return cka * kb, cka * nb, cna * kb, cna * nb

    def __repr__(self):
        return f"CurrentVector(ndof={self.ndof})"


class CurrentCorrelation(object):
    """
    Correlation matrix of surface-current coefficients.

    Parameters
    ----------
    sigma : array_like, shape (ndof, ndof)
        sigma[i, j] = <x_i conj(x_j)> for the physical current coefficients
        x (electric k and magnetic n, interleaved as in CurrentVector).
        The entries are used as given; no ZVAC rescaling is applied.
    """

    def __init__(self, sigma):
        sigma = np.asarray(sigma, dtype=complex)
        if sigma.ndim != 2 or sigma.shape[0] != sigma.shape[1]:
            raise ValueError(f"correlation matrix must be square, got shape {sigma.shape}")
        self.sigma = sigma

    @property
    def ndof(self):
        return self.sigma.shape[0]

    def products(self, geo, ns, nea, neb):
        off = geo.offset[ns]
        s = self.sigma
        if geo.is_pec(ns):
            return s[off + neb, off + nea], 0j, 0j, 0j
        ia, ib = off + 2 * nea, off + 2 * neb
        return s[ib, ia], s[ib + 1, ia], s[ib, ia + 1], s[ib + 1, ia + 1]

    @classmethod
    def from_vector(cls, currents, geo):
        """
        Rank-one correlation x x^H built from a CurrentVector, with the
        magnetic entries converted to physical n.
        """
        x = currents.kn.copy()
        for ns in range(geo.nsurfaces):
            if geo.is_pec(ns):
                continue
            off = geo.offset[ns]
            ne = geo.surfaces[ns].nedges
            x[off + 1:off + 2 * ne:2] *= -ZVAC
        return cls(np.outer(x, np.conj(x)))

    def __repr__(self):
        return f"CurrentCorrelation(ndof={self.ndof})"


def check_currents(currents, geo=None):
    """
    Validate a current state.

    Raises
    ------
    ValueError
        If no current state is given or its size does not match the geometry
    TypeError
        If currents is neither a CurrentVector nor a CurrentCorrelation
    """
    if currents is None:
        raise ValueError("a current state (CurrentVector or CurrentCorrelation) is required")
    if not isinstance(currents, (CurrentVector, CurrentCorrelation)):
        raise TypeError(
            f"currents must be CurrentVector or CurrentCorrelation, "
            f"got {type(currents).__name__}")
    if geo is not None and currents.ndof != geo.ndof:
        raise ValueError(
            f"current state has {currents.ndof} degrees of freedom, "
            f"geometry has {geo.ndof}")
    return currents
