"""
Closed-form overlap integrals between RWG basis functions.

Overlaps only involve products of basis functions (and of their
divergences) on a common panel; they are polynomial integrals over a
triangle and are evaluated exactly.
"""

from dataclasses import dataclass, field, fields

import numpy as np


def _vec():
    return np.zeros(3)


@dataclass
class Overlaps:
    """Overlap integrals of a basis-function pair (f_a, f_b).

    overlap         int f_a . f_b
    cross           int f_a . (n x f_b)
    bullet          int n (f_a . f_b)
    nabla_nabla     int n (div f_a)(div f_b)
    times_nabla     int (n x f_a)(div f_b)
    rx_bullet       int (r x n)(f_a . f_b)
    rx_nabla_nabla  int (r x n)(div f_a)(div f_b)
    rx_times_nabla  int r x (n x f_a)(div f_b)

    with r measured from the torque center of the surface.
    """
    overlap: float = 0.0
    cross: float = 0.0
    bullet: np.ndarray = field(default_factory=_vec)
    nabla_nabla: np.ndarray = field(default_factory=_vec)
    times_nabla: np.ndarray = field(default_factory=_vec)
    rx_bullet: np.ndarray = field(default_factory=_vec)
    rx_nabla_nabla: np.ndarray = field(default_factory=_vec)
    rx_times_nabla: np.ndarray = field(default_factory=_vec)

    def __add__(self, other):
        return Overlaps(**{f.name: getattr(self, f.name) + getattr(other, f.name)
                           for f in fields(self)})

    def as_array(self):
        """
        The 20 overlaps as a flat array.

        Order: overlap, cross, then (bullet, nabla_nabla, times_nabla) for
        x, y, z, then (rx_bullet, rx_nabla_nabla, rx_times_nabla) for x, y, z.
        """
        out = np.zeros(20)
        out[0] = self.overlap
        out[1] = self.cross
        for i in range(3):
            out[2 + 3 * i:5 + 3 * i] = (self.bullet[i], self.nabla_nabla[i], self.times_nabla[i])
            out[11 + 3 * i:14 + 3 * i] = (self.rx_bullet[i], self.rx_nabla_nabla[i],
                                         self.rx_times_nabla[i])
        return out


def panel_overlaps(surface, np_, iqa, iqb, sign, ll, torque_center=None):
    """
    Contribution of one common panel to the overlaps of two basis functions.

    Parameters
    ----------
    surface : RWGSurface
    np_ : int
        Common panel
    iqa, iqb : int
        Positions (0, 1, 2) of the hub vertices of f_a and f_b in the panel
    sign : float
        Product of the polarities of f_a and f_b on the panel
    ll : float
        Product of the edge lengths
    torque_center : ndarray, shape (3,), optional
        Origin for the rx_* overlaps (default: surface.torque_center)

    Returns
    -------
    Overlaps
    """
    if torque_center is None:
        torque_center = surface.torque_center
    verts = surface.panel_verts(np_)
    z = surface.nvec[np_]

    qa = verts[iqa]
    qb = verts[iqb]
    l1 = verts[(iqa + 1) % 3] - qa
    l2 = verts[(iqa + 2) % 3] - verts[(iqa + 1) % 3]
    dq = qa - qb
    qa_t = qa - torque_center

    zxl1 = np.cross(z, l1)
    zxl2 = np.cross(z, l2)
    zxq = np.cross(z, qa_t)

    pre = sign * ll / (2.0 * surface.area[np_])

    l1l1, l1l2, l2l2 = l1 @ l1, l1 @ l2, l2 @ l2
    l1dq, l2dq = l1 @ dq, l2 @ dq

    times_factor = (2.0 * l1 + l2) @ np.cross(z, dq) / 6.0
    bf1 = (l1l1 + l1l2) / 4.0 + l1dq / 3.0 + l2l2 / 12.0 + l2dq / 6.0
    bf2 = (l1l1 + l1l2) / 5.0 + l1dq / 4.0 + l2l2 / 15.0 + l2dq / 8.0
    bf3 = l1l1 / 10.0 + 2.0 * l1l2 / 15.0 + l1dq / 8.0 + l2l2 / 20.0 + l2dq / 12.0
    ncf = (l1l1 + l1l2) / 2.0 + l2l2 / 6.0

    return Overlaps(
        overlap=pre * bf1,
        cross=pre * times_factor,
        bullet=pre * bf1 * z,
        nabla_nabla=2.0 * pre * z,
        times_nabla=pre * (2.0 * zxl1 + zxl2) / 3.0,
        rx_bullet=-pre * (zxq * bf1 + zxl1 * bf2 + zxl2 * bf3),
        rx_nabla_nabla=-pre * (2.0 * zxq + 4.0 * zxl1 / 3.0 + 2.0 * zxl2 / 3.0),
        rx_times_nabla=pre * (z * ncf + 2.0 * np.cross(qa_t, zxl1) / 3.0
                              + np.cross(qa_t, zxl2) / 3.0),
    )


def get_overlaps(surface, nea, neb):
    """
    Overlap integrals between basis functions nea and neb of a surface.

    Up to four panel combinations contribute: each panel of nea that is
    also a panel of neb, with sign +1 for equal and -1 for opposite
    polarities.  Pairs without a common panel give exact zeros.

    Parameters
    ----------
    surface : RWGSurface
    nea, neb : int
        Edge indices

    Returns
    -------
    Overlaps
    """
    ll = surface.length[nea] * surface.length[neb]
    pa = surface.edge_panels[nea]
    pb = surface.edge_panels[neb]
    ha = surface.edge_hubs[nea]
    hb = surface.edge_hubs[neb]

    result = Overlaps()
    for a, sa in ((0, 1.0), (1, -1.0)):
        if pa[a] < 0:
            continue
        for b, sb in ((0, 1.0), (1, -1.0)):
            if pb[b] == pa[a]:
                result = result + panel_overlaps(surface, pa[a], ha[a], hb[b], sa * sb, ll)
    return result


def get_overlap(surface, nea, neb):
    """
    Simple and crossed overlaps of two basis functions.

    Returns
    -------
    overlap : float
        int f_a . f_b
    cross : float
        int f_a . (n x f_b)
    """
    ov = get_overlaps(surface, nea, neb)
    return ov.overlap, ov.cross


def overlapping_edges(surface, ne):
    """
    Basis functions that may overlap with basis function ne.

    Returns ne itself followed by the other basis functions on each of its
    panels (at most five entries).  Every edge with a non-zero overlap is
    among them.
    """
    result = [ne]
    for side in range(2):
        np_ = surface.edge_panels[ne, side]
        if np_ < 0:
            continue
        hub = surface.edge_hubs[ne, side]
        for i in (1, 2):
            other = surface.panel_edges[np_, (hub + i) % 3]
            if other >= 0 and other not in result:
                result.append(int(other))
    return result
