"""
Power, force and torque from overlap integrals (OPFT).

Absorbed power, force and torque on a surface follow from surface
integrals of the currents against the total fields just outside the
surface.  The tangential fields are the surface currents themselves, so
the integrals reduce to overlaps between basis functions, which are
non-zero only for basis functions sharing a panel.
"""

import logging
import warnings

import numpy as np

from ..utils.constants import ZVAC, TENTHIRDS, NUMPFT
from ..misc.options import getpftoptions
from .currents import CurrentVector, check_currents
from .overlap import get_overlaps, overlapping_edges
from .reduction import fold_edges

logger = logging.getLogger(__name__)


def extinction(geo, ns, currents, rhs):
    """
    Extinction (total power removed from the incident field) of surface ns.

    Parameters
    ----------
    geo : RWGGeometry
    ns : int
    currents : CurrentVector
    rhs : array_like, shape (ndof,)
        Right-hand side vector, see `assemble_rhs`

    Returns
    -------
    ext : float
    by_edge : ndarray, shape (nedges,)
    """
    rhs = np.asarray(rhs, dtype=complex).ravel()
    if rhs.size != geo.ndof:
        raise ValueError(f"rhs has {rhs.size} entries, geometry has {geo.ndof} "
                         "degrees of freedom")

    off = geo.offset[ns]
    pec = geo.is_pec(ns)
    nedges = geo.surfaces[ns].nedges
    by_edge = np.zeros(nedges)

    for ne in range(nedges):
        k, n = currents.coefficients(geo, ns, ne)
        if pec:
            by_edge[ne] = 0.5 * np.real(np.conj(k) * (-ZVAC * rhs[off + ne]))
        else:
            v_e = -ZVAC * rhs[off + 2 * ne]
            v_h = -rhs[off + 2 * ne + 1]
            by_edge[ne] = 0.5 * np.real(np.conj(k) * v_e + np.conj(n) * v_h)

    return by_edge.sum(), by_edge


def opft(geo, ns, omega, currents, rhs=None, by_edge=False, op=None, **kwargs):
    """
    Power, force and torque on surface ns from the overlap formulation.

    Parameters
    ----------
    geo : RWGGeometry
    ns : int
        Surface index
    omega : float or complex
        Angular frequency in units of c / length-unit
    currents : CurrentVector or CurrentCorrelation
    rhs : array_like, optional
        Right-hand side of the scattering problem.  With a CurrentVector
        it gives the extinction and hence the scattered power.
    by_edge : bool, optional
        Also return the per-edge breakdown
    op : dict, optional
        Options ('nthreads')
    **kwargs
        Additional options

    Returns
    -------
    pft : ndarray, shape (8,)
        [P_abs, P_scat, Fx, Fy, Fz, Tx, Ty, Tz]; P_scat is 0 unless the
        extinction is available
    by_edge : ndarray, shape (7, nedges)
        Per-edge breakdown of [P_abs, F, T] (only if by_edge is set)
    """
    op = getpftoptions(op, **kwargs)
    check_currents(currents)

    if not geo.valid_surface(ns):
        warnings.warn(f"opft: invalid surface index {ns} "
                      f"(geometry has {geo.nsurfaces} surfaces); returning zeros")
        if by_edge:
            return np.zeros(NUMPFT + 1), np.zeros((NUMPFT, 0))
        return np.zeros(NUMPFT + 1)

    check_currents(currents, geo)
    surface = geo.surfaces[ns]

    eps, mu = geo.eps_mu(geo.inout[ns, 0], omega)
    k2 = omega ** 2 * eps * mu
    zz = ZVAC * np.sqrt(mu / eps)
    pre = 0.25 * TENTHIRDS

    n = surface.nedges
    logger.info("OPFT on surface '%s' (%d edges, %d threads)",
                surface.label, n, op['nthreads'])

    def row(nea):
        out = np.zeros(NUMPFT)
        for neb in overlapping_edges(surface, nea):
            ov = get_overlaps(surface, nea, neb)
            kk, kn, nk, nn = currents.products(geo, ns, nea, neb)

            out[0] += 0.25 * np.real((kn - nk) * ov.cross)
            fac = -(kk * zz + nn / zz)
            twist = (nk - kn) * 2.0 / (1j * omega)
            out[1:4] += pre * np.real(fac * (ov.bullet - ov.nabla_nabla / k2)
                                      + twist * ov.times_nabla)
            out[4:7] += pre * np.real(fac * (ov.rx_bullet - ov.rx_nabla_nabla / k2)
                                      + twist * ov.rx_times_nabla)
        return out

    total, rows = fold_edges(row, n, op['nthreads'])

    pft = np.zeros(NUMPFT + 1)
    pft[0] = total[0]
    pft[2:] = total[1:]

    if rhs is not None and isinstance(currents, CurrentVector):
        ext, _ = extinction(geo, ns, currents, rhs)
        pft[1] = ext - pft[0]
    elif rhs is not None:
        logger.debug("opft: extinction needs a CurrentVector; P_scat left at 0")

    if by_edge:
        return pft, rows
    return pft
