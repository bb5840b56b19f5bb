"""
Reduced potentials and fields of RWG half-basis functions.

For the half-RWG b(y) = L/(2A) (y - Q) on a panel with area A and hub Q,
the reduced potentials at an observation point x are

    p(x) = L/A      int G(x - y) dS
    a(x) = L/(2A)   int G(x - y) (y - Q) dS

with G(r) = exp(ikr) / (4 pi r), and the reduced fields are

    e = a + grad p / k^2,        h = curl a.

Points far from the panel (relative to its bounding radius) use direct
cubature.  Near points subtract the static 1/R part, integrate it in
closed form and integrate the smooth remainder on a Duffy split of the
panel about the projected observation point.
"""

import numpy as np

from ..utils.constants import FOURPI
from ..utils.quadrature import triangle_rule, panel_points, gauss_legendre01
from ..misc.options import getpftoptions
from .static import panel_frame, laplace_panel_integrals


def helmholtz_kernels(r, k):
    """
    Green function and its radial derivative factor.

    Returns
    -------
    G : ndarray
        exp(ikr) / (4 pi r)
    phi : ndarray
        (ikr - 1) exp(ikr) / (4 pi r^3), so that grad_x G = (x - y) phi
    """
    ikr = 1j * k * r
    eikr = np.exp(ikr)
    G = eikr / (FOURPI * r)
    phi = (ikr - 1) * eikr / (FOURPI * r ** 3)
    return G, phi


def _smooth_parts(r, k):
    """
    Kernel remainders after subtracting the static singularities.

    Returns
    -------
    gs : ndarray
        (exp(ikr) - 1) / (4 pi r)
    phis : ndarray
        ((ikr - 1) exp(ikr) + 1) / (4 pi r^3)
    """
    z = 1j * k * r
    small = np.abs(z) < 0.5
    zs = np.where(small, z, 0.0)

    # exp(z) - 1 = sum_{n>=1} z^n / n!
    # (z - 1) exp(z) + 1 = sum_{n>=2} (n - 1) z^n / n!
    em1 = np.zeros_like(zs)
    pm1 = np.zeros_like(zs)
    term = np.ones_like(zs)
    for n in range(1, 20):
        term = term * zs / n
        em1 = em1 + term
        pm1 = pm1 + (n - 1) * term

    ez = np.exp(z)
    em1 = np.where(small, em1, ez - 1)
    pm1 = np.where(small, pm1, (z - 1) * ez + 1)

    return em1 / (FOURPI * r), pm1 / (FOURPI * r ** 3)


def _split_rule(verts, rho, nvec, npol):
    """
    Duffy split of a triangle about the points rho (in the panel plane).

    Each sub-triangle (rho, v_i, v_i+1) is mapped from the unit square with
    the radial coordinate collapsed at rho.  Signed sub-triangle areas make
    the rule valid for rho outside the panel.

    Returns
    -------
    y : ndarray, shape (n, 3 * npol**2, 3)
        Integration points
    w : ndarray, shape (n, 3 * npol**2)
        Integration weights (including area elements)
    """
    s, ws = gauss_legendre01(npol)
    t, wt = gauss_legendre01(npol)
    S = np.repeat(s, npol)
    T = np.tile(t, npol)
    W = np.repeat(ws, npol) * np.tile(wt, npol) * S

    ys, wts = [], []
    for i in range(3):
        a = verts[i][np.newaxis, :] - rho
        b = verts[(i + 1) % 3] - verts[i]
        jac = np.cross(a, b) @ nvec
        y = rho[:, np.newaxis, :] + S[np.newaxis, :, np.newaxis] * (
            a[:, np.newaxis, :] + T[np.newaxis, :, np.newaxis] * b)
        ys.append(y)
        wts.append(W[np.newaxis, :] * jac[:, np.newaxis])

    return np.concatenate(ys, axis=1), np.concatenate(wts, axis=1)


def _direct_integrals(x, y, w, k, second):
    R = x[:, np.newaxis, :] - y[np.newaxis, :, :]
    r = np.linalg.norm(R, axis=2)
    G, phi = helmholtz_kernels(r, k)

    S0 = G @ w
    W = np.einsum('nm,nmi,m->ni', G, R, w)
    V0 = np.einsum('nm,nmi,m->ni', phi, R, w)

    U = D2 = None
    if second:
        psi = (3 - 3j * k * r - (k * r) ** 2) * np.exp(1j * k * r) / (FOURPI * r ** 5)
        U = np.einsum('nm,nmi,nmj,m->nij', phi, R, R, w)
        D2 = (np.einsum('nm,nmi,nmj,m->nij', psi, R, R, w)
              + (phi @ w)[:, np.newaxis, np.newaxis] * np.eye(3))
    return S0, W, V0, U, D2


def _near_integrals(verts, x, k, npol, second):
    nvec = panel_frame(verts)[0]
    I0, gradI0, J, d, rho = laplace_panel_integrals(verts, x)

    y, w = _split_rule(verts, rho, nvec, npol)
    R = x[:, np.newaxis, :] - y
    r = np.linalg.norm(R, axis=2)
    gs, phis = _smooth_parts(r, k)

    # int (x - y)/R dS = d n I0 - int (y - rho)/R dS
    Wstat = d[:, np.newaxis] * I0[:, np.newaxis] * nvec - J

    S0 = I0 / FOURPI + np.sum(w * gs, axis=1)
    W = Wstat / FOURPI + np.einsum('nm,nmi->ni', w * gs, R)
    V0 = gradI0 / FOURPI + np.einsum('nm,nmi->ni', w * phis, R)

    U = D2 = None
    if second:
        # weakly singular after the split; second derivatives are not regularized
        G, phi = helmholtz_kernels(r, k)
        psi = (3 - 3j * k * r - (k * r) ** 2) * np.exp(1j * k * r) / (FOURPI * r ** 5)
        U = np.einsum('nm,nmi,nmj->nij', w * phi, R, R)
        D2 = (np.einsum('nm,nmi,nmj->nij', w * psi, R, R)
              + np.sum(w * phi, axis=1)[:, np.newaxis, np.newaxis] * np.eye(3))
    return S0, W, V0, U, D2


def panel_integrals(verts, x, k, op=None, second=False):
    """
    Kernel integrals of a panel at observation points.

    Parameters
    ----------
    verts : ndarray, shape (3, 3)
        Panel vertices
    x : ndarray, shape (n, 3)
        Observation points
    k : complex
        Wavenumber
    op : dict, optional
        Options ('order', 'npol', 'RelCutoff')
    second : bool, optional
        Also return the tensor integrals U and D2

    Returns
    -------
    S0 : ndarray, shape (n,)
        int G dS
    W : ndarray, shape (n, 3)
        int (x - y) G dS
    V0 : ndarray, shape (n, 3)
        int grad_x G dS = int (x - y) phi dS
    U : ndarray, shape (n, 3, 3) or None
        int (x - y)_i (x - y)_j phi dS
    D2 : ndarray, shape (n, 3, 3) or None
        int d_i d_j G dS
    """
    op = getpftoptions(op)
    verts = np.asarray(verts, dtype=float)
    x = np.atleast_2d(np.asarray(x, dtype=float))
    n = x.shape[0]

    center = verts.mean(axis=0)
    radius = np.max(np.linalg.norm(verts - center, axis=1))
    near = np.linalg.norm(x - center, axis=1) < op['RelCutoff'] * radius

    S0 = np.zeros(n, dtype=complex)
    W = np.zeros((n, 3), dtype=complex)
    V0 = np.zeros((n, 3), dtype=complex)
    U = np.zeros((n, 3, 3), dtype=complex) if second else None
    D2 = np.zeros((n, 3, 3), dtype=complex) if second else None

    parts = []
    if np.any(~near):
        area = panel_frame(verts)[1]
        xq, yq, wq = triangle_rule(op['order'])
        y = panel_points(verts, xq, yq)
        parts.append((~near, _direct_integrals(x[~near], y, area * wq, k, second)))
    if np.any(near):
        parts.append((near, _near_integrals(verts, x[near], k, op['npol'], second)))

    for mask, (s0, w, v0, u, d2) in parts:
        S0[mask] = s0
        W[mask] = w
        V0[mask] = v0
        if second:
            U[mask] = u
            D2[mask] = d2

    return S0, W, V0, U, D2


def panel_potentials(verts, hub, length, x, k, op=None):
    """
    Reduced potentials of the half-RWG function on a panel.

    Parameters
    ----------
    verts : ndarray, shape (3, 3)
        Panel vertices
    hub : ndarray, shape (3,)
        Hub vertex (opposite the RWG edge)
    length : float
        RWG edge length
    x : ndarray, shape (n, 3)
        Observation points
    k : complex
        Wavenumber
    op : dict, optional
        Options

    Returns
    -------
    p : ndarray, shape (n,)
        Scalar potential
    a : ndarray, shape (n, 3)
        Vector potential
    dp : ndarray, shape (n, 3)
        Gradient of p
    da : ndarray, shape (n, 3, 3)
        da[:, i, j] = d_i a_j
    ddp : ndarray, shape (n, 3, 3)
        Second derivatives of p (direct cubature, inaccurate on the panel)
    """
    x = np.atleast_2d(np.asarray(x, dtype=float))
    area = panel_frame(verts)[1]
    S0, W, V0, U, D2 = panel_integrals(verts, x, k, op, second=True)

    xq = x - np.asarray(hub, dtype=float)
    pre = length / (2 * area)

    p = 2 * pre * S0
    a = pre * (xq * S0[:, np.newaxis] - W)
    dp = 2 * pre * V0
    da = pre * (V0[:, :, np.newaxis] * xq[:, np.newaxis, :] - U)
    ddp = 2 * pre * D2

    return p, a, dp, da, ddp


def panel_fields(verts, hub, length, x, k, op=None):
    """
    Reduced fields e = a + grad p / k^2 and h = curl a of a half-RWG function.

    Parameters are the same as for `panel_potentials`.

    Returns
    -------
    e, h : ndarray, shape (n, 3)
    """
    x = np.atleast_2d(np.asarray(x, dtype=float))
    area = panel_frame(verts)[1]
    S0, W, V0, _, _ = panel_integrals(verts, x, k, op)

    xq = x - np.asarray(hub, dtype=float)
    pre = length / (2 * area)

    a = pre * (xq * S0[:, np.newaxis] - W)
    e = a + 2 * pre * V0 / k ** 2
    h = pre * np.cross(V0, xq)

    return e, h


def get_reduced_fields(surface, ne, x, k, op=None):
    """
    Reduced fields of the full RWG basis function ne of a surface.

    Parameters
    ----------
    surface : RWGSurface
    ne : int
        Edge index
    x : ndarray, shape (n, 3)
        Observation points
    k : complex
        Wavenumber
    op : dict, optional

    Returns
    -------
    e, h : ndarray, shape (n, 3)
    """
    x = np.atleast_2d(np.asarray(x, dtype=float))
    e = np.zeros(x.shape, dtype=complex)
    h = np.zeros(x.shape, dtype=complex)

    for side, sign in ((0, 1.0), (1, -1.0)):
        np_ = surface.edge_panels[ne, side]
        if np_ < 0:
            continue
        ep, hp = panel_fields(surface.panel_verts(np_), surface.hub(ne, side),
                              surface.length[ne], x, k, op)
        e += sign * ep
        h += sign * hp

    return e, h
