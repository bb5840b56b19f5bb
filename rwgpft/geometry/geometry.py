"""
Collection of RWG surfaces embedded in material regions.
"""

import numpy as np

from ..materials import MatPEC
from .surface import RWGSurface


class RWGGeometry:
    """
    Surfaces separating homogeneous material regions.

    Parameters
    ----------
    materials : list of material objects
        Region materials (MatConst, MatDrude, MatTable, MatPEC).  Region 0
        is conventionally the exterior medium.
    surfaces : RWGSurface or list of RWGSurface
        Surfaces of the geometry
    inout : array_like, shape (nsurfaces, 2)
        For each surface: [outside_region, inside_region] (0-indexed).
        An inside index of -1 marks a surface without interior region.

    Attributes
    ----------
    offset : ndarray, shape (nsurfaces,)
        Index of the first degree of freedom of each surface in the
        global current vector
    ndof : int
        Total number of degrees of freedom

    Notes
    -----
    Surfaces bounding a PEC region (or no region at all) carry one
    electric degree of freedom per edge.  All other surfaces carry two per
    edge: the electric coefficient followed by the magnetic coefficient,
    which stores -N / ZVAC for a magnetic surface current N.

    Examples
    --------
    >>> s = trisphere(60, 1.0)
    >>> geo = RWGGeometry([MatConst(), MatDrude.gold()], [s], [[0, 1]])
    """

    def __init__(self, materials, surfaces, inout):
        if isinstance(surfaces, RWGSurface):
            surfaces = [surfaces]
        self.materials = list(materials)
        self.surfaces = list(surfaces)
        self.inout = np.atleast_2d(np.asarray(inout, dtype=int))

        if self.inout.shape != (len(self.surfaces), 2):
            raise ValueError(
                f"inout must have shape ({len(self.surfaces)}, 2), "
                f"got {self.inout.shape}"
            )
        nmat = len(self.materials)
        if np.any(self.inout[:, 0] < 0) or np.any(self.inout >= nmat):
            raise ValueError("inout references undefined regions")

        ndof = [s.nedges * (1 if self.is_pec(i) else 2)
                for i, s in enumerate(self.surfaces)]
        self.offset = np.concatenate([[0], np.cumsum(ndof)[:-1]]).astype(int)
        self.ndof = int(np.sum(ndof))

    @property
    def nsurfaces(self):
        """Number of surfaces."""
        return len(self.surfaces)

    def valid_surface(self, ns):
        """True if ns indexes a surface of this geometry."""
        return isinstance(ns, (int, np.integer)) and 0 <= ns < self.nsurfaces

    def has_interior(self, ns):
        """True if surface ns bounds an interior region."""
        return self.inout[ns, 1] >= 0

    def is_pec(self, ns):
        """True if surface ns carries only electric currents."""
        nr_in = self.inout[ns, 1]
        return nr_in < 0 or isinstance(self.materials[nr_in], MatPEC)

    def eps_mu(self, nr, omega):
        """
        Permittivity and permeability of region nr at angular frequency omega.
        """
        return self.materials[nr](omega)

    def wavenumber(self, nr, omega):
        """
        Wavenumber k = omega * sqrt(eps * mu) in region nr.
        """
        eps, mu = self.eps_mu(nr, omega)
        return omega * np.sqrt(eps * mu)

    def __repr__(self):
        return (f"RWGGeometry(nsurfaces={self.nsurfaces}, "
                f"nregions={len(self.materials)}, ndof={self.ndof})")
