"""
Closed-form integrals of the static kernel 1/R over a flat triangle.

With R = |x - y|, y on the panel, rho the projection of x onto the panel
plane and d the signed height of x above it, the routines return

    I0   = int 1/R dS
    grad = grad_x int 1/R dS
    J    = int (y - rho)/R dS

using the edge-based line-integral representation of Wilton et al.
(IEEE Trans. Antennas Propag. 32, 276 (1984)).
"""

import numpy as np


def panel_frame(verts):
    """
    Unit normal, area and edge data of a triangle.

    Returns
    -------
    nvec : ndarray, shape (3,)
        Unit normal (right-hand rule for the vertex order)
    area : float
    lhat : ndarray, shape (3, 3)
        Unit tangents of edges v0->v1, v1->v2, v2->v0
    mhat : ndarray, shape (3, 3)
        Outward in-plane edge normals
    elen : ndarray, shape (3,)
        Edge lengths
    """
    verts = np.asarray(verts, dtype=float)
    nvec = np.cross(verts[1] - verts[0], verts[2] - verts[0])
    area2 = np.linalg.norm(nvec)
    nvec = nvec / area2

    lvec = np.roll(verts, -1, axis=0) - verts
    elen = np.linalg.norm(lvec, axis=1)
    lhat = lvec / elen[:, np.newaxis]
    mhat = np.cross(lhat, nvec)

    return nvec, 0.5 * area2, lhat, mhat, elen


def laplace_panel_integrals(verts, x, tol=1e-10):
    """
    Static potential integrals of a triangle.

    Parameters
    ----------
    verts : ndarray, shape (3, 3)
        Panel vertices
    x : ndarray, shape (n, 3)
        Observation points
    tol : float, optional
        Points closer to the panel plane than tol times the longest edge
        are treated as lying in the plane; the normal gradient then takes
        its principal value.

    Returns
    -------
    I0 : ndarray, shape (n,)
    grad : ndarray, shape (n, 3)
    J : ndarray, shape (n, 3)
    d : ndarray, shape (n,)
        Signed height above the panel plane
    rho : ndarray, shape (n, 3)
        Projection of x onto the panel plane
    """
    verts = np.asarray(verts, dtype=float)
    x = np.atleast_2d(np.asarray(x, dtype=float))

    nvec, _, lhat, mhat, elen = panel_frame(verts)
    size = elen.max()

    d = (x - verts[0]) @ nvec
    d = np.where(np.abs(d) < tol * size, 0.0, d)
    rho = x - d[:, np.newaxis] * nvec

    pa = verts[np.newaxis, :, :] - rho[:, np.newaxis, :]
    pb = np.roll(verts, -1, axis=0)[np.newaxis, :, :] - rho[:, np.newaxis, :]

    lp = np.einsum('nej,ej->ne', pb, lhat)
    lm = np.einsum('nej,ej->ne', pa, lhat)
    t0 = np.einsum('nej,ej->ne', pa, mhat)

    ad = np.abs(d)[:, np.newaxis]
    r02 = t0 ** 2 + ad ** 2
    rp = np.sqrt(lp ** 2 + r02)
    rm = np.sqrt(lm ** 2 + r02)

    with np.errstate(divide='ignore', invalid='ignore'):
        # second form avoids cancellation when rho lies behind the edge
        f2 = np.where(lp + lm >= 0,
                      np.log((rp + lp) / (rm + lm)),
                      np.log((rm - lm) / (rp - lp)))
        beta = np.where(
            r02 > (1e-14 * size) ** 2,
            np.arctan(t0 * lp / (r02 + ad * rp)) - np.arctan(t0 * lm / (r02 + ad * rm)),
            0.0)

    I0 = np.sum(t0 * f2 - ad * beta, axis=1)
    grad = -f2 @ mhat - (np.sign(d) * np.sum(beta, axis=1))[:, np.newaxis] * nvec
    J = 0.5 * (r02 * f2 + rp * lp - rm * lm) @ mhat

    return I0, grad, J, d, rho
