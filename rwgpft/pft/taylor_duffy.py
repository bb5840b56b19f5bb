"""
Taylor-Duffy integration of singular panel pairs.

For two panels sharing a vertex, an edge or all three vertices the
four-dimensional integral

    I = int_Ta int_Tb [ P(x, y) G(|x - y|) + Q(x, y) phi(|x - y|) ] dy dx

has an integrable singularity at x = y.  Both panels are mapped onto the
reference triangle {0 <= x2 <= x1 <= 1} with the common vertex at the
origin,

    chi(x1, x2) = P0 + x1 (P1 - P0) + x2 (P2 - P1),

and the product domain is split into sub-regions (6 for identical panels,
5 for a common edge, 2 for a common vertex) on each of which
x = P0 + xi u_x(eta), y = P0 + xi u_y(eta) with a radial variable xi and
three bounded angular variables eta (Sauter and Schwab, Boundary Element
Methods, ch. 5).  The integrand then becomes a polynomial in xi times
G(xi R) or phi(xi R) with R = |u_x - u_y|, and the xi integral is done in
closed form through the exponential moments

    I_n(z) = int_0^1 t^n exp(z t) dt.

The eta integrals are smooth and use tensor Gauss-Legendre rules.
"""

import numpy as np

from ..utils.constants import FOURPI
from ..utils.quadrature import gauss_legendre01
from ..greenfun.static import panel_frame
from .elements import EPPFTElements


def exp_moments(z, nmax):
    """
    Exponential moments I_n(z) = int_0^1 t^n exp(z t) dt.

    Small arguments use the power series, larger ones the upward
    recurrence I_n = (exp(z) - n I_{n-1}) / z.

    Parameters
    ----------
    z : array_like
        Complex arguments
    nmax : int
        Highest moment

    Returns
    -------
    moments : ndarray, shape (nmax + 1,) + z.shape
    """
    z = np.asarray(z, dtype=complex)
    small = np.abs(z) < 2.0
    zs = np.where(small, z, 0.0)
    zl = np.where(small, 1.0, z)

    series = np.zeros((nmax + 1,) + z.shape, dtype=complex)
    term = np.ones_like(zs)
    for m in range(40):
        if m > 0:
            term = term * zs / m
        for n in range(nmax + 1):
            series[n] += term / (n + m + 1)

    rec = np.zeros_like(series)
    ez = np.exp(zl)
    moment = (ez - 1.0) / zl
    rec[0] = moment
    for n in range(1, nmax + 1):
        moment = (ez - n * moment) / zl
        rec[n] = moment

    return np.where(small[np.newaxis], series, rec)


class XiPoly(object):
    """
    Polynomial sum_n c_n xi^n in the radial variable.

    Coefficients are arrays over the angular quadrature nodes, shape (m,)
    for scalar and (m, 3) for vector valued polynomials.
    """

    def __init__(self, coeffs):
        self.coeffs = [np.asarray(c) for c in coeffs]

    @classmethod
    def linear(cls, c0, c1):
        """c0 + xi c1 with a node-independent c0."""
        c1 = np.asarray(c1)
        return cls([np.broadcast_to(np.asarray(c0), c1.shape), c1])

    @classmethod
    def constant(cls, value, like):
        """Scalar constant on the nodes of another polynomial."""
        return cls([np.full(like.coeffs[0].shape[0], value)])

    @property
    def degree(self):
        return len(self.coeffs) - 1

    def _convolve(self, other, fn):
        out = [None] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            for j, b in enumerate(other.coeffs):
                c = fn(a, b)
                out[i + j] = c if out[i + j] is None else out[i + j] + c
        return XiPoly(out)

    def dot(self, other):
        return self._convolve(other, lambda a, b: np.sum(a * b, axis=-1))

    def cross(self, other):
        return self._convolve(other, np.cross)

    def __sub__(self, const):
        return XiPoly([self.coeffs[0] - const] + self.coeffs[1:])

    def __mul__(self, scale):
        return XiPoly([scale * c for c in self.coeffs])

    __rmul__ = __mul__


class KernelTerm(object):
    """
    Integrand g(xi) G + f(xi) phi; either part may be absent (None).
    """

    def __init__(self, g=None, f=None):
        self.g = g
        self.f = f

    @property
    def degree(self):
        return max(p.degree for p in (self.g, self.f) if p is not None)

    def map(self, fn):
        """Apply fn to both polynomial parts."""
        return KernelTerm(None if self.g is None else fn(self.g),
                          None if self.f is None else fn(self.f))

    def __mul__(self, scale):
        return self.map(lambda p: p * scale)

    __rmul__ = __mul__


def _regions(ncv, e1, e2, e3):
    """
    Sub-regions of the reference product domain.

    Yields (xhat, yhat, jac): reference coordinates of both points divided
    by xi, and the Jacobian divided by xi^3.
    """
    one = np.ones_like(e1)

    if ncv == 3:
        jac = e1 ** 2 * e2
        for xh, yh in (
                ((one, 1 - e1 + e1 * e2), (1 - e1 * e2 * e3, 1 - e1)),
                ((one, e1 * (1 - e2 + e2 * e3)), (1 - e1 * e2, e1 * (1 - e2))),
                ((1 - e1 * e2 * e3, e1 * (1 - e2 * e3)), (one, e1 * (1 - e2)))):
            yield xh, yh, jac
            yield yh, xh, jac

    elif ncv == 2:
        yield (one, e1 * e3), (1 - e1 * e2, e1 * (1 - e2)), e1 ** 2
        jac = e1 ** 2 * e2
        yield (one, e1), (1 - e1 * e2 * e3, e1 * e2 * (1 - e3)), jac
        yield (1 - e1 * e2, e1 * (1 - e2)), (one, e1 * e2 * e3), jac
        yield (1 - e1 * e2 * e3, e1 * e2 * (1 - e3)), (one, e1), jac
        yield (1 - e1 * e2 * e3, e1 * (1 - e2 * e3)), (one, e1 * e2), jac

    elif ncv == 1:
        xh, yh = (one, e1), (e2, e2 * e3)
        yield xh, yh, e2
        yield yh, xh, e2

    else:
        raise ValueError(f"Taylor-Duffy needs 1, 2 or 3 common vertices, got {ncv}")


def _contract(term, mg, mf, w):
    out = 0
    for part, moments in ((term.g, mg), (term.f, mf)):
        if part is None:
            continue
        for n, c in enumerate(part.coeffs):
            out = out + np.tensordot(w * moments[n], c, axes=(0, 0))
    return out


def taylor_duffy(va, vb, ncv, k, integrand, order=6):
    """
    Singular four-dimensional panel-pair integral.

    Parameters
    ----------
    va, vb : ndarray, shape (3, 3)
        Panel vertices with the ncv common vertices first and in the same
        order (see RWGSurface.assess_panel_pair)
    ncv : int
        Number of common vertices (1, 2 or 3)
    k : complex
        Wavenumber
    integrand : callable
        integrand(x, y, d) -> list of KernelTerm.  x, y and d = x - y are
        passed as linear XiPoly objects.
    order : int, optional
        Gauss-Legendre points per angular direction

    Returns
    -------
    values : list
        int_Ta int_Tb of each returned term (complex scalars or 3-vectors)

    Examples
    --------
    >>> gg = taylor_duffy(v, v, 3, k,
    ...                   lambda x, y, d: [KernelTerm(g=XiPoly.constant(1.0, d))])
    """
    va = np.asarray(va, dtype=float)
    vb = np.asarray(vb, dtype=float)
    p0 = va[0]

    t, wt = gauss_legendre01(order)
    e1, e2, e3 = (a.ravel() for a in np.meshgrid(t, t, t, indexing='ij'))
    w = (wt[:, None, None] * wt[None, :, None] * wt[None, None, :]).ravel()

    total = None
    for xh, yh, jac in _regions(ncv, e1, e2, e3):
        ux = np.outer(xh[0], va[1] - va[0]) + np.outer(xh[1], va[2] - va[1])
        uy = np.outer(yh[0], vb[1] - vb[0]) + np.outer(yh[1], vb[2] - vb[1])
        dvec = ux - uy
        r = np.linalg.norm(dvec, axis=1)

        terms = integrand(XiPoly.linear(p0, ux), XiPoly.linear(p0, uy),
                          XiPoly.linear(np.zeros(3), dvec))
        nmax = max(term.degree for term in terms)

        # int_0^1 xi^(n+3) G(xi r) dxi and int_0^1 xi^(n+3) phi(xi r) dxi
        z = 1j * k * r
        mom = exp_moments(z, nmax + 2)
        mg = mom[2:nmax + 3] / (FOURPI * r)
        mf = (z * mom[1:nmax + 2] - mom[:nmax + 1]) / (FOURPI * r ** 3)

        vals = [_contract(term, mg, mf, w * jac) for term in terms]
        total = vals if total is None else [a + b for a, b in zip(total, vals)]

    scale = 4.0 * panel_frame(va)[1] * panel_frame(vb)[1]
    return [scale * v for v in total]


def td_elements(va, vb, ncv, qa, qb, x0, k, order=6):
    """
    EPPFT matrix elements of a singular pair of half-RWG functions.

    Both half-RWG functions are taken with positive polarity and the result
    is divided by the product of the edge lengths.

    Parameters
    ----------
    va, vb : ndarray, shape (3, 3)
        Panels as returned by assess_panel_pair
    ncv : int
        Number of common vertices
    qa, qb : ndarray, shape (3,)
        Hub vertices
    x0 : ndarray, shape (3,)
        Torque center
    k : complex
        Wavenumber
    order : int, optional

    Returns
    -------
    EPPFTElements
    """
    qa = np.asarray(qa, dtype=float)
    qb = np.asarray(qb, dtype=float)
    x0 = np.asarray(x0, dtype=float)

    def integrand(x, y, d):
        xa = x - qa
        yb = y - qb
        rx = x - x0
        eps = KernelTerm(g=yb, f=d * (2.0 / k ** 2))
        eta = KernelTerm(f=d.cross(yb))
        xa_eps = eps.map(xa.cross)
        xa_eta = eta.map(xa.cross)
        return [
            eps.map(xa.dot),
            eta.map(xa.dot),
            2.0 * eps,
            2.0 * eta,
            xa_eps,
            xa_eta,
            2.0 * eps.map(rx.cross),
            2.0 * eta.map(rx.cross),
            xa_eps.map(rx.cross),
            xa_eta.map(rx.cross),
        ]

    vals = taylor_duffy(va, vb, ncv, k, integrand, order)
    scale = 1.0 / (4.0 * panel_frame(va)[1] * panel_frame(vb)[1])
    return EPPFTElements(*[scale * v for v in vals])
