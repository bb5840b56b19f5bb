"""
Plane wave excitation and right-hand side assembly.
"""

import numpy as np

from ..utils.constants import ZVAC
from ..utils.quadrature import triangle_rule, panel_points
from ..misc.options import getpftoptions


class PlaneWave:
    """
    Plane wave incident field.

    Parameters
    ----------
    pol : array_like, shape (3,)
        Polarization (complex amplitude of E, in V/length-unit)
    dir : array_like, shape (3,)
        Propagation direction
    medium : int, optional
        Region the wave propagates in (0-indexed, default 0)

    Notes
    -----
    E = pol exp(i k dir . x),  H = dir x E / Z  with Z = ZVAC sqrt(mu / eps).

    Examples
    --------
    >>> exc = PlaneWave([1, 0, 0], [0, 0, 1])
    >>> E, H = exc.fields(geo, np.zeros((1, 3)), 1.0)
    """

    name = 'planewave'

    def __init__(self, pol, dir, medium=0):
        pol = np.asarray(pol, dtype=complex).ravel()
        dir = np.asarray(dir, dtype=float).ravel()
        if pol.shape != (3,) or dir.shape != (3,):
            raise ValueError("pol and dir must be 3-vectors")

        self.dir = dir / np.linalg.norm(dir)
        if np.abs(np.dot(pol, self.dir)) > 1e-10 * np.linalg.norm(pol):
            raise ValueError("Polarization and direction must be orthogonal")
        self.pol = pol
        self.medium = medium

    def fields(self, geo, x, omega):
        """
        Incident fields at points x.

        Parameters
        ----------
        geo : RWGGeometry
            Supplies the material of the propagation medium
        x : ndarray, shape (n, 3)
        omega : float or complex

        Returns
        -------
        E, H : ndarray, shape (n, 3)
        """
        eps, mu = geo.eps_mu(self.medium, omega)
        k = omega * np.sqrt(eps * mu)
        z = ZVAC * np.sqrt(mu / eps)

        x = np.atleast_2d(np.asarray(x, dtype=float))
        phase = np.exp(1j * k * (x @ self.dir))
        E = phase[:, np.newaxis] * self.pol
        H = np.cross(self.dir, E) / z
        return E, H

    def __repr__(self):
        return f"PlaneWave(pol={self.pol}, dir={self.dir}, medium={self.medium})"


def _edge_projections(surface, ne, fields, xq, yq, wq):
    """
    <b, F> for each field F returned by fields(points), over both panels.
    """
    out = None
    for side, sign in ((0, 1.0), (1, -1.0)):
        np_ = surface.edge_panels[ne, side]
        if np_ < 0:
            continue
        pts = panel_points(surface.panel_verts(np_), xq, yq)
        # area * L / (2 area) * w
        w = sign * 0.5 * surface.length[ne] * wq
        bvec = pts - surface.hub(ne, side)
        vals = [w @ np.sum(bvec * f, axis=1) for f in fields(pts)]
        out = vals if out is None else [a + b for a, b in zip(out, vals)]
    return out


def assemble_rhs(geo, excitation, omega, op=None):
    """
    Right-hand side vector of the surface-current problem.

    Parameters
    ----------
    geo : RWGGeometry
    excitation : PlaneWave
        Any object with a fields(geo, x, omega) -> (E, H) method
    omega : float or complex
    op : dict, optional
        Options ('order')

    Returns
    -------
    rhs : ndarray, shape (ndof,)
        rhs_E = -<b, E> / ZVAC for every electric and rhs_H = -<b, H> for
        every magnetic degree of freedom.  Surfaces not bounding the
        excitation medium get zero entries; surfaces with the medium
        on their inside get the negative projections.
    """
    op = getpftoptions(op)
    xq, yq, wq = triangle_rule(op['order'])
    rhs = np.zeros(geo.ndof, dtype=complex)

    def fields(pts):
        return excitation.fields(geo, pts, omega)

    for ns, surface in enumerate(geo.surfaces):
        nr_out, nr_in = geo.inout[ns]
        if nr_out == excitation.medium:
            sign = 1.0
        elif nr_in == excitation.medium:
            sign = -1.0
        else:
            continue

        off = geo.offset[ns]
        pec = geo.is_pec(ns)
        for ne in range(surface.nedges):
            be, bh = _edge_projections(surface, ne, fields, xq, yq, wq)
            if pec:
                rhs[off + ne] = -sign * be / ZVAC
            else:
                rhs[off + 2 * ne] = -sign * be / ZVAC
                rhs[off + 2 * ne + 1] = -sign * bh

    return rhs
