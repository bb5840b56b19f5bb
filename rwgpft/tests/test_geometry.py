import numpy as np
import pytest

from rwgpft.geometry import RWGSurface, RWGGeometry, trisphere, tritetrahedron, triplate
from rwgpft.materials import MatConst, MatPEC


# ============================================================================
# Helper: check the RWG data structures of a surface
# ============================================================================

def _validate_edges(s):
    for ne in range(s.nedges):
        ev = set(s.edge_verts[ne])
        for side in range(2):
            p = s.edge_panels[ne, side]
            if p < 0:
                continue
            face = list(s.faces[p])
            # the edge belongs to the panel, the hub does not lie on it
            assert ev <= set(face)
            assert face[s.edge_hubs[ne, side]] not in ev
            assert s.panel_edges[p, s.edge_hubs[ne, side]] == ne
        L = np.linalg.norm(np.diff(s.verts[s.edge_verts[ne]], axis = 0))
        assert s.length[ne] == pytest.approx(L)


class TestRWGSurface(object):

    def test_tetrahedron(self):
        s = tritetrahedron(2.0)
        assert s.npanels == 4
        assert s.nedges == 6
        assert np.all(s.edge_panels >= 0)
        assert np.all(s.edge_panels[:, 0] < s.edge_panels[:, 1])
        np.testing.assert_allclose(s.length, 2.0)
        np.testing.assert_allclose(s.area, np.sqrt(3.0))
        _validate_edges(s)

    def test_outward_normals(self):
        s = trisphere(40)
        assert np.all(np.sum(s.pos * s.nvec, axis = 1) > 0)
        assert s.nedges == 3 * s.npanels // 2
        _validate_edges(s)

    def test_plate_interior_edge_only(self):
        s = triplate()
        assert s.npanels == 2
        assert s.nedges == 1
        assert s.length[0] == pytest.approx(np.sqrt(2.0))
        np.testing.assert_allclose(s.nvec, [[0, 0, 1], [0, 0, 1]])

    def test_plate_with_boundary(self):
        s = triplate(include_boundary = True)
        assert s.nedges == 5
        assert sum(s.is_half_rwg(ne) for ne in range(s.nedges)) == 4
        _validate_edges(s)

    def test_non_manifold(self):
        verts = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, -1, 0], [0, 0, 1]], dtype = float)
        faces = np.array([[0, 1, 2], [1, 0, 3], [0, 1, 4]])
        with pytest.raises(ValueError):
            RWGSurface(verts, faces)

    def test_bad_faces(self):
        with pytest.raises(ValueError):
            RWGSurface(np.eye(3), np.array([[0, 1, 2, 0]]))
        with pytest.raises(ValueError):
            RWGSurface(np.eye(3), np.array([[0, 1, 3]]))

    def test_degenerate_panel(self):
        verts = np.array([[0, 0, 0], [1, 0, 0], [2, 0, 0]], dtype = float)
        with pytest.raises(ValueError):
            RWGSurface(verts, np.array([[0, 1, 2]]))

    def test_assess_panel_pair(self):
        s = tritetrahedron()
        ncv, va, vb = s.assess_panel_pair(0, 0)
        assert ncv == 3
        ncv, va, vb = s.assess_panel_pair(0, 1)
        assert ncv == 2
        np.testing.assert_allclose(va[:2], vb[:2])
        assert not np.allclose(va[2], vb[2])

    def test_assess_common_vertex(self):
        s = trisphere(40)
        found = {}
        for pb in range(s.npanels):
            ncv, va, vb = s.assess_panel_pair(0, pb)
            found.setdefault(ncv, (va, vb))
        assert set(found) == {0, 1, 2, 3}
        va, vb = found[1]
        np.testing.assert_allclose(va[0], vb[0])

    def test_shift_and_rot_move_torque_center(self):
        s = tritetrahedron()
        area = s.area.copy()
        s.shift([1.0, 0.0, 0.0]).rot(90)
        np.testing.assert_allclose(s.torque_center, [0.0, 1.0, 0.0], atol = 1e-12)
        np.testing.assert_allclose(s.area, area)

    def test_scale(self):
        s = tritetrahedron(1.0).scale(2.0)
        np.testing.assert_allclose(s.length, 2.0)


class TestRWGGeometry(object):

    def _make_geometry(self):
        materials = [MatConst(), MatConst(2.0)]
        return RWGGeometry(materials, [tritetrahedron(), triplate()], [[0, 1], [0, -1]])

    def test_offsets(self):
        geo = self._make_geometry()
        assert geo.ndof == 2 * 6 + 1
        np.testing.assert_array_equal(geo.offset, [0, 12])
        assert not geo.is_pec(0)
        assert geo.is_pec(1)
        assert geo.has_interior(0)
        assert not geo.has_interior(1)

    def test_pec_material(self):
        geo = RWGGeometry([MatConst(), MatPEC()], tritetrahedron(), [[0, 1]])
        assert geo.is_pec(0)
        assert geo.ndof == 6

    def test_valid_surface(self):
        geo = self._make_geometry()
        assert geo.valid_surface(1)
        assert not geo.valid_surface(2)
        assert not geo.valid_surface(-1)

    def test_wavenumber(self):
        geo = self._make_geometry()
        assert geo.wavenumber(1, 3.0) == pytest.approx(3.0 * np.sqrt(2.0))

    def test_bad_inout(self):
        with pytest.raises(ValueError):
            RWGGeometry([MatConst()], [tritetrahedron()], [[0, 1]])
        with pytest.raises(ValueError):
            RWGGeometry([MatConst()], [tritetrahedron()], [[0, 0], [0, 0]])
