import warnings

import numpy as np
import pytest

from rwgpft.geometry import RWGGeometry, tritetrahedron, triplate
from rwgpft.materials import MatConst, MatPEC
from rwgpft.excitation import PlaneWave, assemble_rhs
from rwgpft.misc import pftoptions
from rwgpft.pft import (CurrentVector, CurrentCorrelation, eppft, opft, get_pft,
                        extinction, get_overlap)
from rwgpft.utils.constants import ZVAC, TENTHIRDS


# ============================================================================
# Helpers
# ============================================================================

OMEGA = 1.7


def _make_geometry():
    return RWGGeometry([MatConst(), MatConst(2.0)], [tritetrahedron()], [[0, 1]])


def _make_currents(geo, seed=3):
    rng = np.random.default_rng(seed)
    return CurrentVector(rng.standard_normal(geo.ndof) + 1j * rng.standard_normal(geo.ndof))


def _make_options(**kwargs):
    return pftoptions(order = 5, td_order = 4, npol = 6, nthreads = 1, **kwargs)


def _assert_close(a, b, rel=1e-10):
    b = np.asarray(b)
    np.testing.assert_allclose(a, b, rtol = rel, atol = rel * np.abs(b).max())


def _catch(fn, *args, **kwargs):
    with warnings.catch_warnings(record = True) as caught:
        warnings.simplefilter('always')
        result = fn(*args, **kwargs)
    return result, caught


# ============================================================================
# OPFT
# ============================================================================

class TestOPFT(object):

    def test_two_triangle_plate(self):
        # single RWG function across the diagonal of a PEC unit square
        geo = RWGGeometry([MatConst()], [triplate()], [[0, -1]])
        omega = 1.0
        pft = opft(geo, 0, omega, CurrentVector([1.0]))
        assert pft.shape == (8,)
        assert pft[0] == pytest.approx(0.0, abs = 1e-14)
        assert pft[1] == 0.0
        fz = 0.25 * TENTHIRDS * (-ZVAC) * (2.0 / 3.0 - 8.0 / omega ** 2)
        np.testing.assert_allclose(pft[2:4], 0.0, atol = 1e-10)
        assert pft[4] == pytest.approx(fz, rel = 1e-12)
        assert pft[7] == pytest.approx(0.0, abs = 1e-10)

    @pytest.mark.parametrize('nx', [1, 2])
    def test_dielectric_plate_power(self, nx):
        # absorbed power is 1/4 Re((KN - NK) cross) summed over overlapping pairs
        geo = RWGGeometry([MatConst(), MatConst(2.0)], [triplate(nx, 1)], [[0, 1]])
        s = geo.surfaces[0]
        currents = _make_currents(geo, seed = 7)
        pft = opft(geo, 0, OMEGA, currents, op = _make_options())

        expected = 0.0
        for nea in range(s.nedges):
            for neb in range(s.nedges):
                _, kn, nk, _ = currents.products(geo, 0, nea, neb)
                expected += 0.25 * np.real((kn - nk) * get_overlap(s, nea, neb)[1])
        assert pft[0] == pytest.approx(expected, rel = 1e-12, abs = 1e-12)
        if nx == 1:
            # the only basis function has no crossed self-overlap
            assert expected == pytest.approx(0.0, abs = 1e-12)
        else:
            assert abs(expected) > 1e-6

    def test_by_edge_sums_to_total(self):
        geo = _make_geometry()
        pft, rows = opft(geo, 0, OMEGA, _make_currents(geo), by_edge = True,
                         op = _make_options())
        assert rows.shape == (7, 6)
        _assert_close(rows.sum(axis = 1), np.r_[pft[0], pft[2:]])

    def test_threads_agree(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        serial = opft(geo, 0, OMEGA, currents, op = _make_options())
        threaded = opft(geo, 0, OMEGA, currents, op = _make_options(), nthreads = 3)
        _assert_close(threaded, serial)

    def test_quadratic_in_currents(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        pft = opft(geo, 0, OMEGA, currents, op = _make_options())
        pft2 = opft(geo, 0, OMEGA, CurrentVector(2.0 * currents.kn), op = _make_options())
        _assert_close(pft2, 4.0 * pft)

    def test_correlation_matches_vector(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        corr = CurrentCorrelation.from_vector(currents, geo)
        a = opft(geo, 0, OMEGA, currents, op = _make_options())
        b = opft(geo, 0, OMEGA, corr, op = _make_options())
        _assert_close(b, a)

    def test_invalid_surface_index(self):
        geo = _make_geometry()
        pft, caught = _catch(opft, geo, 5, OMEGA, _make_currents(geo))
        assert len(caught) == 1
        np.testing.assert_array_equal(pft, np.zeros(8))


# ============================================================================
# Extinction and scattered power
# ============================================================================

class TestExtinction(object):

    def _make_problem(self):
        geo = _make_geometry()
        rhs = assemble_rhs(geo, PlaneWave([1, 0, 0], [0, 0, 1]), OMEGA, _make_options())
        return geo, rhs, _make_currents(geo)

    def test_scattered_power(self):
        geo, rhs, currents = self._make_problem()
        pft = opft(geo, 0, OMEGA, currents, rhs = rhs, op = _make_options())
        ext, by_edge = extinction(geo, 0, currents, rhs)
        assert by_edge.shape == (6,)
        assert ext == pytest.approx(by_edge.sum())
        assert pft[1] == pytest.approx(ext - pft[0], rel = 1e-12, abs = 1e-12)

    def test_correlation_has_no_scattered_power(self):
        geo, rhs, currents = self._make_problem()
        corr = CurrentCorrelation.from_vector(currents, geo)
        pft = opft(geo, 0, OMEGA, corr, rhs = rhs, op = _make_options())
        assert pft[1] == 0.0

    def test_rhs_size_mismatch(self):
        geo, rhs, currents = self._make_problem()
        with pytest.raises(ValueError):
            extinction(geo, 0, currents, rhs[:-1])


# ============================================================================
# EPPFT
# ============================================================================

class TestEPPFT(object):

    def test_shapes_and_finite(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        for exterior in (True, False):
            pft, rows = eppft(geo, 0, OMEGA, currents, exterior = exterior, by_edge = True,
                              op = _make_options())
            assert pft.shape == (7,)
            assert rows.shape == (7, 6)
            assert np.all(np.isfinite(pft))
            _assert_close(rows.sum(axis = 1), pft)

    def test_threads_agree(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        serial = eppft(geo, 0, OMEGA, currents, op = _make_options())
        threaded = eppft(geo, 0, OMEGA, currents, op = _make_options(), nthreads = 3)
        _assert_close(threaded, serial)

    def test_quadratic_in_currents(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        pft = eppft(geo, 0, OMEGA, currents, op = _make_options())
        pft3 = eppft(geo, 0, OMEGA, CurrentVector(3.0 * currents.kn), op = _make_options())
        _assert_close(pft3, 9.0 * pft)

    def test_correlation_matches_vector(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        corr = CurrentCorrelation.from_vector(currents, geo)
        for exterior in (True, False):
            a = eppft(geo, 0, OMEGA, currents, exterior = exterior, op = _make_options())
            b = eppft(geo, 0, OMEGA, corr, exterior = exterior, op = _make_options())
            _assert_close(b, a)

    def test_pec_surface_warns_once(self):
        geo = RWGGeometry([MatConst(), MatPEC()], tritetrahedron(), [[0, 1]])
        pft, caught = _catch(eppft, geo, 0, OMEGA, CurrentVector(np.ones(geo.ndof)),
                             op = _make_options())
        assert len(caught) == 1
        np.testing.assert_array_equal(pft, np.zeros(7))

    def test_open_surface_warns_once(self):
        geo = RWGGeometry([MatConst()], [tritetrahedron()], [[0, -1]])
        currents = CurrentVector(np.ones(geo.ndof))
        pft, caught = _catch(eppft, geo, 0, OMEGA, currents, op = _make_options())
        assert len(caught) == 1
        np.testing.assert_array_equal(pft, np.zeros(7))

        (pft, rows), caught = _catch(eppft, geo, 0, OMEGA, currents, by_edge = True,
                                     op = _make_options())
        assert len(caught) == 1
        np.testing.assert_array_equal(pft, np.zeros(7))
        np.testing.assert_array_equal(rows, np.zeros((7, geo.surfaces[0].nedges)))

    def test_invalid_surface_index(self):
        geo = _make_geometry()
        (pft, rows), caught = _catch(eppft, geo, -1, OMEGA, _make_currents(geo),
                                     by_edge = True)
        assert len(caught) == 1
        np.testing.assert_array_equal(pft, np.zeros(7))
        assert rows.shape == (7, 0)


# ============================================================================
# Current states and dispatch
# ============================================================================

class TestCurrents(object):

    def test_missing_currents(self):
        geo = _make_geometry()
        with pytest.raises(ValueError):
            opft(geo, 0, OMEGA, None)
        with pytest.raises(ValueError):
            eppft(geo, 0, OMEGA, None)

    def test_wrong_type(self):
        geo = _make_geometry()
        with pytest.raises(TypeError):
            opft(geo, 0, OMEGA, np.ones(geo.ndof))

    def test_size_mismatch(self):
        geo = _make_geometry()
        with pytest.raises(ValueError):
            opft(geo, 0, OMEGA, CurrentVector(np.ones(geo.ndof + 2)))

    def test_correlation_must_be_square(self):
        with pytest.raises(ValueError):
            CurrentCorrelation(np.ones((3, 4)))

    def test_products(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        kk, kn, nk, nn = currents.products(geo, 0, 1, 2)
        ka, na = currents.kn[2], -ZVAC * currents.kn[3]
        kb, nb = currents.kn[4], -ZVAC * currents.kn[5]
        assert kk == pytest.approx(np.conj(ka) * kb)
        assert kn == pytest.approx(np.conj(ka) * nb)
        assert nk == pytest.approx(np.conj(na) * kb)
        assert nn == pytest.approx(np.conj(na) * nb)


class TestGetPFT(object):

    def test_dispatch(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        op = _make_options()
        np.testing.assert_array_equal(get_pft(geo, 0, OMEGA, currents, op = op),
                                      opft(geo, 0, OMEGA, currents, op = op))
        np.testing.assert_array_equal(
            get_pft(geo, 0, OMEGA, currents, method = 'EPPFT', exterior = False, op = op),
            eppft(geo, 0, OMEGA, currents, exterior = False, op = op))

    def test_by_edge_shapes(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        pft, rows = get_pft(geo, 0, OMEGA, currents, by_edge = True, op = _make_options())
        assert pft.shape == (8,)
        assert rows.shape == (7, 6)

    def test_unknown_method(self):
        geo = _make_geometry()
        with pytest.raises(ValueError):
            get_pft(geo, 0, OMEGA, _make_currents(geo), method = 'maxwell')

    def test_exterior_rejected_for_opft(self):
        geo = _make_geometry()
        for exterior in (True, False):
            with pytest.raises(ValueError):
                get_pft(geo, 0, OMEGA, _make_currents(geo), exterior = exterior,
                        op = _make_options())

    def test_exterior_defaults_to_true_for_eppft(self):
        geo = _make_geometry()
        currents = _make_currents(geo)
        op = _make_options()
        np.testing.assert_array_equal(get_pft(geo, 0, OMEGA, currents, method = 'eppft', op = op),
                                      eppft(geo, 0, OMEGA, currents, exterior = True, op = op))


# ============================================================================
# Excitation
# ============================================================================

class TestPlaneWave(object):

    def test_orthogonality(self):
        with pytest.raises(ValueError):
            PlaneWave([1, 0, 1], [0, 0, 1])

    def test_fields(self):
        geo = _make_geometry()
        exc = PlaneWave([1, 0, 0], [0, 0, 2])
        E, H = exc.fields(geo, np.array([[0.0, 0.0, 0.5]]), np.pi)
        np.testing.assert_allclose(E[0], [1j, 0, 0], atol = 1e-14)
        np.testing.assert_allclose(H[0], [0, 1j / ZVAC, 0], atol = 1e-14)

    def test_static_rhs(self):
        # for omega -> 0 the projections reduce to the integral of each basis function
        geo = _make_geometry()
        s = geo.surfaces[0]
        pol = np.array([0.3, -1.0, 0.5])
        direction = np.array([1.0, 0.3, 0.0])
        direction /= np.linalg.norm(direction)
        pol = pol - (pol @ direction) * direction
        rhs = assemble_rhs(geo, PlaneWave(pol, direction), 1e-9)

        h = np.cross(direction, pol) / ZVAC
        for ne in range(s.nedges):
            bint = np.zeros(3)
            for side, sign in ((0, 1.0), (1, -1.0)):
                centroid = s.panel_verts(s.edge_panels[ne, side]).mean(axis = 0)
                bint += sign * 0.5 * s.length[ne] * (centroid - s.hub(ne, side))
            assert rhs[2 * ne] == pytest.approx(-(bint @ pol) / ZVAC, rel = 1e-7, abs = 1e-12)
            assert rhs[2 * ne + 1] == pytest.approx(-(bint @ h), rel = 1e-7, abs = 1e-12)

    def test_other_medium_is_skipped(self):
        geo = RWGGeometry([MatConst(), MatConst(2.0), MatConst(3.0)],
                          [tritetrahedron()], [[0, 1]])
        rhs = assemble_rhs(geo, PlaneWave([1, 0, 0], [0, 0, 1], medium = 2), OMEGA)
        np.testing.assert_array_equal(rhs, 0.0)
