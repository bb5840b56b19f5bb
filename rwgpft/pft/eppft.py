"""
Power, force and torque from the equivalence principle (EPPFT).

The scattered (exterior) or total (interior) fields are represented by the
surface currents radiating in the homogeneous medium on one side of the
surface; power, force and torque follow from surface integrals of the
currents against these fields.  For basis-function pairs this reduces to
the EPPFT matrix elements <b_a, e_b>, <b_a, h_b>, ... which are evaluated
by cubature, with Taylor-Duffy integration of the singular panel pairs.
"""

import logging
import warnings

import numpy as np

from ..utils.constants import ZVAC, TENTHIRDS, NUMPFT
from ..utils.quadrature import triangle_rule, panel_points
from ..greenfun import panel_fields
from ..misc.options import getpftoptions
from .currents import check_currents
from .elements import EPPFTElements
from .overlap import get_overlaps, overlapping_edges
from .reduction import fold_edges
from .taylor_duffy import td_elements

logger = logging.getLogger(__name__)


def cubature_elements(sa, nea, sb, neb, k, op=None, mask=None):
    """
    EPPFT matrix elements by cubature over the panels of basis function nea.

    Parameters
    ----------
    sa, sb : RWGSurface
        Surfaces of the two basis functions
    nea, neb : int
        Edge indices
    k : complex
        Wavenumber of the medium
    op : dict, optional
        Options ('order', 'npol', 'RelCutoff')
    mask : array_like of bool, shape (2, 2), optional
        mask[A][B] omits the contribution of panel A of nea against panel B
        of neb (0 = positive, 1 = negative panel)

    Returns
    -------
    EPPFTElements
    """
    op = getpftoptions(op)
    xq, yq, wq = triangle_rule(op['order'])
    x0 = sa.torque_center

    el = EPPFTElements()
    for A, sign_a in ((0, 1.0), (1, -1.0)):
        pa = sa.edge_panels[nea, A]
        if pa < 0:
            continue
        pts = panel_points(sa.panel_verts(pa), xq, yq)
        e = np.zeros(pts.shape, dtype=complex)
        h = np.zeros(pts.shape, dtype=complex)

        for B, sign_b in ((0, 1.0), (1, -1.0)):
            pb = sb.edge_panels[neb, B]
            if pb < 0 or (mask is not None and mask[A][B]):
                continue
            eb, hb = panel_fields(sb.panel_verts(pb), sb.hub(neb, B),
                                  sb.length[neb], pts, k, op)
            e += sign_b * eb
            h += sign_b * hb

        # area * (L / 2A) * w; divergence weight is twice that
        w = sign_a * 0.5 * sa.length[nea] * wq
        bvec = pts - sa.hub(nea, A)
        rvec = pts - x0
        bxe = np.cross(bvec, e)
        bxh = np.cross(bvec, h)

        el = el + EPPFTElements(
            be=w @ np.sum(bvec * e, axis=1),
            bh=w @ np.sum(bvec * h, axis=1),
            divbe=2.0 * (w @ e),
            divbh=2.0 * (w @ h),
            bxe=w @ bxe,
            bxh=w @ bxh,
            divbrxe=2.0 * (w @ np.cross(rvec, e)),
            divbrxh=2.0 * (w @ np.cross(rvec, h)),
            rxbxe=w @ np.cross(rvec, bxe),
            rxbxh=w @ np.cross(rvec, bxh),
        )
    return el


def get_eppft_matrix_elements(sa, nea, sb, neb, k, op=None):
    """
    EPPFT matrix elements of a basis-function pair.

    Panel pairs sharing one or more vertices on the same surface are
    integrated with the Taylor-Duffy method and masked out of the cubature,
    unless op['force_cubature'] is set.

    Returns
    -------
    EPPFTElements
    """
    op = getpftoptions(op)
    mask = [[False, False], [False, False]]
    singular = EPPFTElements()
    nsingular = 0

    if sa is sb and not op['force_cubature']:
        ll = sa.length[nea] * sa.length[neb]
        for A in range(2):
            pa = sa.edge_panels[nea, A]
            if pa < 0:
                continue
            for B in range(2):
                pb = sa.edge_panels[neb, B]
                if pb < 0:
                    continue
                ncv, va, vb = sa.assess_panel_pair(pa, pb)
                if ncv == 0:
                    continue
                mask[A][B] = True
                nsingular += 1
                sign = 1.0 if A == B else -1.0
                singular = singular + (sign * ll) * td_elements(
                    va, vb, ncv, sa.hub(nea, A), sa.hub(neb, B),
                    sa.torque_center, k, op['td_order'])
        logger.debug("edge pair (%d, %d): %d singular panel pairs", nea, neb, nsingular)

    return cubature_elements(sa, nea, sb, neb, k, op, mask) + singular


def _zero_result(nedges, by_edge):
    if by_edge:
        return np.zeros(NUMPFT), np.zeros((NUMPFT, nedges))
    return np.zeros(NUMPFT)


def eppft(geo, ns, omega, currents, exterior=True, by_edge=False, op=None, **kwargs):
    """
    Absorbed power, force and torque on surface ns from the
    equivalence-principle formulation.

    Parameters
    ----------
    geo : RWGGeometry
    ns : int
        Surface index
    omega : float or complex
        Angular frequency in units of c / length-unit
    currents : CurrentVector or CurrentCorrelation
        Surface currents of the whole geometry
    exterior : bool, optional
        Integrate over the fields in the exterior (True) or interior medium
    by_edge : bool, optional
        Also return the contribution of each source basis function
    op : dict, optional
        Options ('order', 'td_order', 'npol', 'RelCutoff',
        'force_cubature', 'nthreads')
    **kwargs
        Additional options

    Returns
    -------
    pft : ndarray, shape (7,)
        [P_abs, Fx, Fy, Fz, Tx, Ty, Tz]; force in nN and torque in nN*um
        for micron meshes and fields in V/um
    by_edge : ndarray, shape (7, nedges)
        Per-edge breakdown (only if by_edge is set); its row sums equal pft

    Notes
    -----
    Surfaces without interior region or with PEC interior are not
    supported: a warning is issued and zeros are returned.
    """
    op = getpftoptions(op, **kwargs)
    check_currents(currents)

    if not geo.valid_surface(ns):
        warnings.warn(f"eppft: invalid surface index {ns} "
                      f"(geometry has {geo.nsurfaces} surfaces); returning zeros")
        return _zero_result(0, by_edge)

    surface = geo.surfaces[ns]
    if geo.is_pec(ns):
        warnings.warn(f"eppft: not available for PEC or open surface "
                      f"'{surface.label}'; returning zeros")
        return _zero_result(surface.nedges, by_edge)

    check_currents(currents, geo)

    nr_out, nr_in = geo.inout[ns]
    eps_out, mu_out = geo.eps_mu(nr_out, omega)
    eps_in, mu_in = geo.eps_mu(nr_in, omega)
    if exterior:
        sign = 1.0
        eps, mu = eps_out, mu_out
        gamma_e = gamma_m = 0.0
    else:
        sign = -1.0
        eps, mu = eps_in, mu_in
        gamma_e = (1.0 / eps_in - 1.0 / eps_out) * ZVAC
        gamma_m = (1.0 / mu_in - 1.0 / mu_out) / ZVAC

    k = omega * np.sqrt(eps * mu)
    zrel = np.sqrt(mu / eps)
    kz = k * ZVAC * zrel
    koz = k / (ZVAC * zrel)

    pee, pem, pme, pmm = 0.5j * kz, -0.5, 0.5, 0.5j * koz

    t = TENTHIRDS
    fee1, fee2 = -0.5 * t * kz / omega, 0.5 * t * ZVAC
    fem1, fem2 = 0.5 * t / (1j * omega), 0.5 * t * 1j * koz * ZVAC
    fme1, fme2 = -0.5 * t / (1j * omega), -0.5 * t * 1j * kz / ZVAC
    fmm1, fmm2 = -0.5 * t * koz / omega, 0.5 * t / ZVAC
    fee3 = 0.25 * t * gamma_e / omega ** 2
    fmm3 = 0.25 * t * gamma_m / omega ** 2
    fem3 = -0.25 * t * gamma_m * ZVAC / (1j * omega)
    fme3 = 0.25 * t * gamma_e / (1j * omega * ZVAC)

    n = surface.nedges
    logger.info("EPPFT on surface '%s' (%s, %d edges, %d threads)",
                surface.label, 'exterior' if exterior else 'interior', n, op['nthreads'])

    def row(nea):
        out = np.zeros(NUMPFT)
        for neb in range(n):
            kk, kn, nk, nn = currents.products(geo, ns, nea, neb)
            el = get_eppft_matrix_elements(surface, nea, surface, neb, k, op)

            out[0] += sign * np.real(kk * pee * el.be + kn * pem * el.bh
                                     + nk * pme * el.bh + nn * pmm * el.be)
            out[1:4] += sign * np.real(kk * (fee1 * el.divbe + fee2 * el.bxh)
                                       + kn * (fem1 * el.divbh + fem2 * el.bxe)
                                       + nk * (fme1 * el.divbh + fme2 * el.bxe)
                                       + nn * (fmm1 * el.divbe + fmm2 * el.bxh))
            out[4:7] += sign * np.real(kk * (fee1 * el.divbrxe + fee2 * el.rxbxh)
                                       + kn * (fem1 * el.divbrxh + fem2 * el.rxbxe)
                                       + nk * (fme1 * el.divbrxh + fme2 * el.rxbxe)
                                       + nn * (fmm1 * el.divbrxe + fmm2 * el.rxbxh))

        if not exterior:
            # surface-charge corrections of the interior stress tensor
            for neb in overlapping_edges(surface, nea):
                kk, kn, nk, nn = currents.products(geo, ns, nea, neb)
                ov = get_overlaps(surface, nea, neb)
                out[1:4] -= np.real((fee3 * kk + fmm3 * nn) * ov.nabla_nabla
                                    + (fem3 * kn + fme3 * nk) * ov.times_nabla)
                out[4:7] -= np.real((fee3 * kk + fmm3 * nn) * ov.rx_nabla_nabla
                                    + (fem3 * kn + fme3 * nk) * ov.rx_times_nabla)
        return out

    total, rows = fold_edges(row, n, op['nthreads'])
    if by_edge:
        return total, rows
    return total
