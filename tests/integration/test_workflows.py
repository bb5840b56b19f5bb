"""
Integration tests for complete workflows

A gold particle is excited by a plane wave, the right-hand side is
assembled and both PFT formulations are evaluated on a current state.
"""

import numpy as np
import pytest

from rwgpft import (RWGGeometry, MatConst, MatDrude, PlaneWave, assemble_rhs,
                    CurrentVector, CurrentCorrelation, get_pft, pftoptions)
from rwgpft.geometry import trisphere, tritetrahedron
from rwgpft.utils.constants import EV2OMEGA


def _make_workflow(surface):
    geo = RWGGeometry([MatConst(), MatDrude.gold()], [surface], [[0, 1]])
    omega = 2.4 * EV2OMEGA
    rhs = assemble_rhs(geo, PlaneWave([1, 0, 0], [0, 0, 1]), omega)
    # any current state will do; scale the excitation into one
    rng = np.random.default_rng(11)
    currents = CurrentVector(rhs * (1 + 0.3 * rng.standard_normal(geo.ndof)))
    return geo, omega, rhs, currents


def _rotation_z(deg):
    c, s = np.cos(np.radians(deg)), np.sin(np.radians(deg))
    return np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]])


def test_gold_sphere_opft_workflow():
    """
    Plane wave on a gold sphere: right-hand side, extinction and OPFT.
    """
    geo, omega, rhs, currents = _make_workflow(trisphere(20, 0.05))
    op = pftoptions(nthreads = 2)

    pft, rows = get_pft(geo, 0, omega, currents, rhs = rhs, by_edge = True, op = op)
    assert np.all(np.isfinite(pft))
    assert rows.shape == (7, geo.surfaces[0].nedges)
    np.testing.assert_allclose(rows.sum(axis = 1), np.r_[pft[0], pft[2:]],
                               rtol = 1e-10, atol = 1e-10 * np.abs(pft).max())

    corr = CurrentCorrelation.from_vector(currents, geo)
    pft_corr = get_pft(geo, 0, omega, corr, op = op)
    assert pft_corr[1] == 0.0
    np.testing.assert_allclose(pft_corr[2:], pft[2:], rtol = 1e-10,
                               atol = 1e-10 * np.abs(pft[2:]).max())


def test_gold_tetrahedron_eppft_workflow():
    """
    Both EPPFT media on a small gold body with low-order integration.
    """
    geo, omega, rhs, currents = _make_workflow(tritetrahedron(0.05))
    op = pftoptions(order = 5, td_order = 4, nthreads = 2)

    exterior = get_pft(geo, 0, omega, currents, method = 'eppft', op = op)
    interior = get_pft(geo, 0, omega, currents, method = 'eppft', exterior = False, op = op)
    assert exterior.shape == interior.shape == (7,)
    assert np.all(np.isfinite(exterior))
    assert np.all(np.isfinite(interior))


@pytest.mark.parametrize('method', ['opft', 'eppft'])
def test_rigid_motion(method):
    """
    Moving the body together with its torque center leaves the force and
    torque of a fixed current state unchanged (translation) or rotated
    with the body (rotation).
    """
    op = pftoptions(order = 5, td_order = 4, nthreads = 1)
    geo, omega, _, currents = _make_workflow(tritetrahedron(0.05))
    ref = get_pft(geo, 0, omega, currents, method = method, op = op)
    ft = -6

    geo.surfaces[0].shift([0.02, -0.01, 0.03])
    moved = get_pft(geo, 0, omega, currents, method = method, op = op)
    scale = np.abs(ref[ft:]).max()
    np.testing.assert_allclose(moved[ft:], ref[ft:], rtol = 1e-8, atol = 1e-8 * scale)

    geo.surfaces[0].rot(90)
    turned = get_pft(geo, 0, omega, currents, method = method, op = op)
    rot = _rotation_z(90)
    np.testing.assert_allclose(turned[ft:ft + 3], rot @ ref[ft:ft + 3], rtol = 1e-8,
                               atol = 1e-8 * scale)
    np.testing.assert_allclose(turned[ft + 3:], rot @ ref[ft + 3:], rtol = 1e-8,
                               atol = 1e-8 * scale)
