"""
Triangulated surface carrying RWG basis functions.
"""

import numpy as np
from scipy.linalg import expm


class RWGSurface(object):
    """
    Panels and RWG edges of a discretized boundary.

    Every interior edge shared by two triangles defines one RWG basis
    function

        b(x) = +L / (2 A+) (x - Q+)     on the positive panel,
        b(x) = -L / (2 A-) (x - Q-)     on the negative panel,

    with L the edge length, A the panel areas and Q the hub vertices
    opposite the edge.  Boundary edges of open surfaces become half-RWG
    functions (no negative panel) when include_boundary is set.

    Parameters
    ----------
    verts : ndarray, shape (nverts, 3)
        Vertex coordinates [x, y, z]
    faces : ndarray, shape (npanels, 3)
        Triangle connectivity (0-indexed vertex indices).  The vertex order
        defines the panel normal (right-hand rule).
    label : str, optional
        Name used in log messages
    include_boundary : bool, optional
        Keep boundary edges as half-RWG functions (default False)

    Attributes
    ----------
    verts : ndarray, shape (nverts, 3)
    faces : ndarray, shape (npanels, 3)
    pos : ndarray, shape (npanels, 3)
        Panel centroids
    nvec : ndarray, shape (npanels, 3)
        Unit panel normals
    area : ndarray, shape (npanels,)
        Panel areas
    radius : ndarray, shape (npanels,)
        Radius of the sphere around the centroid enclosing each panel
    edge_verts : ndarray, shape (nedges, 2)
        Vertex indices of the shared edge
    edge_panels : ndarray, shape (nedges, 2)
        Positive and negative panel (-1 if absent)
    edge_hubs : ndarray, shape (nedges, 2)
        Position (0, 1, 2) of the hub vertex within each panel (-1 if absent)
    length : ndarray, shape (nedges,)
        Edge lengths, equal to the flux of the basis function across the edge
    panel_edges : ndarray, shape (npanels, 3)
        Basis function opposite each panel vertex (-1 if none)
    torque_center : ndarray, shape (3,)
        Reference point for torques; follows shift and rot

    Examples
    --------
    >>> verts = np.array([[0,0,0], [1,0,0], [0,1,0], [0,0,1]])
    >>> faces = np.array([[0,2,1], [0,1,3], [0,3,2], [1,2,3]])
    >>> s = RWGSurface(verts, faces)
    >>> print(f"Surface: {s.npanels} panels, {s.nedges} edges")
    """

    def __init__(self, verts, faces, label=None, include_boundary=False):
        verts = np.asarray(verts, dtype=float)
        faces = np.asarray(faces)

        if verts.ndim != 2 or verts.shape[1] != 3:
            raise ValueError("verts must have shape (nverts, 3)")
        if faces.ndim != 2 or faces.shape[1] != 3:
            raise ValueError("faces must have shape (npanels, 3) (triangles only)")
        if faces.size and (faces.min() < 0 or faces.max() >= len(verts)):
            raise ValueError("faces reference vertices out of range")

        self.verts = verts
        self.faces = faces.astype(int)
        self.label = label if label is not None else 'surface'
        self.include_boundary = include_boundary
        self.torque_center = np.zeros(3)

        self._norm()
        self._init_edges()

    # ==================== Properties ====================

    @property
    def npanels(self):
        """Number of panels."""
        return self.faces.shape[0]

    @property
    def nedges(self):
        """Number of RWG basis functions."""
        return self.edge_verts.shape[0]

    @property
    def nverts(self):
        """Number of vertices."""
        return self.verts.shape[0]

    # ==================== Geometry computation ====================

    def _norm(self):
        """
        Compute centroids, normals, areas and bounding radii of the panels.
        """
        v0 = self.verts[self.faces[:, 0]]
        v1 = self.verts[self.faces[:, 1]]
        v2 = self.verts[self.faces[:, 2]]

        self.pos = (v0 + v1 + v2) / 3.0

        nvec = np.cross(v1 - v0, v2 - v0)
        nrm = np.linalg.norm(nvec, axis=1)
        if np.any(nrm <= 0):
            raise ValueError("Surface contains degenerate panels")

        self.area = 0.5 * nrm
        self.nvec = nvec / nrm[:, np.newaxis]
        self.radius = self.bradius()

    def _init_edges(self):
        """
        Find the unique edges and set up the RWG basis functions.

        The positive panel of an edge is the lower-indexed adjoining panel.
        """
        faces = self.faces
        nf = self.npanels

        # Edge opposite vertex i of each face
        pairs = np.vstack([
            np.column_stack([faces[:, (i + 1) % 3], faces[:, (i + 2) % 3]])
            for i in range(3)
        ])
        face_idx = np.tile(np.arange(nf), 3)
        opp = np.repeat(np.arange(3), nf)

        sorted_pairs = np.sort(pairs, axis=1)
        net, inv, counts = np.unique(sorted_pairs, axis=0,
                                     return_inverse=True, return_counts=True)
        inv = np.asarray(inv).ravel()

        if np.any(counts > 2):
            raise ValueError("Surface mesh has non-manifold edges "
                             "(shared by more than two panels)")

        # Group occurrences per unique edge, lowest panel first
        order = np.lexsort((face_idx, inv))
        starts = np.cumsum(counts) - counts
        first = order[starts]

        keep = counts == 2
        if self.include_boundary:
            keep = keep | (counts == 1)
        ind = np.flatnonzero(keep)

        second = np.full(len(counts), -1)
        two = counts == 2
        second[two] = order[starts[two] + 1]

        first = first[ind]
        second = second[ind]
        ne = len(ind)

        self.edge_verts = net[ind]
        self.edge_panels = np.full((ne, 2), -1, dtype=int)
        self.edge_hubs = np.full((ne, 2), -1, dtype=int)
        self.edge_panels[:, 0] = face_idx[first]
        self.edge_hubs[:, 0] = opp[first]

        has_minus = second >= 0
        self.edge_panels[has_minus, 1] = face_idx[second[has_minus]]
        self.edge_hubs[has_minus, 1] = opp[second[has_minus]]

        ev = self.verts[self.edge_verts]
        self.length = np.linalg.norm(ev[:, 1] - ev[:, 0], axis=1)

        self.panel_edges = np.full((nf, 3), -1, dtype=int)
        for i in range(2):
            m = self.edge_panels[:, i] >= 0
            self.panel_edges[self.edge_panels[m, i], self.edge_hubs[m, i]] = np.flatnonzero(m)

    def bradius(self):
        """
        Minimal radius for spheres around the centroids enclosing the panels.

        Returns
        -------
        r : ndarray, shape (npanels,)
        """
        r = np.zeros(self.npanels)
        for i in range(3):
            vert_coords = self.verts[self.faces[:, i]]
            r = np.maximum(r, np.linalg.norm(self.pos - vert_coords, axis=1))
        return r

    # ==================== Panel and edge access ====================

    def panel_verts(self, np_):
        """Vertex coordinates (3, 3) of panel np_."""
        return self.verts[self.faces[np_]]

    def hub(self, ne, side=0):
        """Hub vertex coordinates of edge ne on its positive (0) or negative (1) panel."""
        return self.verts[self.faces[self.edge_panels[ne, side], self.edge_hubs[ne, side]]]

    def is_half_rwg(self, ne):
        """True if edge ne is a boundary half-RWG function."""
        return self.edge_panels[ne, 1] < 0

    def assess_panel_pair(self, pa, pb):
        """
        Count the common vertices of two panels on this surface.

        Parameters
        ----------
        pa, pb : int
            Panel indices

        Returns
        -------
        ncv : int
            Number of common vertices (0, 1, 2 or 3)
        va, vb : ndarray, shape (3, 3)
            Vertex coordinates of both panels, reordered so that the
            common vertices come first and in the same order
        """
        fa = list(self.faces[pa])
        fb = list(self.faces[pb])
        common = [v for v in fa if v in fb]
        ncv = len(common)

        if ncv == 0:
            return 0, self.verts[fa], self.verts[fb]
        if ncv == 3:
            return 3, self.verts[fa], self.verts[fa]

        rest_a = [v for v in fa if v not in common]
        rest_b = [v for v in fb if v not in common]
        return ncv, self.verts[common + rest_a], self.verts[common + rest_b]

    # ==================== Geometry transformations ====================

    def shift(self, vec):
        """
        Shift (translate) surface together with its torque center.

        Parameters
        ----------
        vec : array_like, shape (3,)
            Translation vector

        Returns
        -------
        self : RWGSurface
            Shifted surface
        """
        vec = np.asarray(vec, dtype=float)
        self.verts = self.verts + vec
        self.torque_center = self.torque_center + vec
        self._norm()
        return self

    def rot(self, angle, dir=None):
        """
        Rotate surface and torque center about the origin.

        Parameters
        ----------
        angle : float
            Rotation angle in degrees
        dir : array_like, shape (3,), optional
            Rotation axis (default: z-axis [0,0,1])

        Returns
        -------
        self : RWGSurface
            Rotated surface
        """
        if dir is None:
            dir = np.array([0, 0, 1])
        dir = np.asarray(dir, dtype=float)
        dir = dir / np.linalg.norm(dir)

        angle_rad = angle * np.pi / 180

        # Rotation generators (skew-symmetric matrices)
        j1 = np.array([[0, 0, 0], [0, 0, -1], [0, 1, 0]], dtype=float)
        j2 = np.array([[0, 0, 1], [0, 0, 0], [-1, 0, 0]], dtype=float)
        j3 = np.array([[0, -1, 0], [1, 0, 0], [0, 0, 0]], dtype=float)

        R = expm(-angle_rad * (dir[0]*j1 + dir[1]*j2 + dir[2]*j3))

        self.verts = self.verts @ R
        self.torque_center = self.torque_center @ R
        self._norm()
        return self

    def scale(self, factor):
        """
        Scale vertex coordinates about the origin.
        """
        self.verts = self.verts * factor
        self.torque_center = self.torque_center * factor
        self._norm()
        self.length = self.length * abs(factor)
        return self

    # ==================== String representations ====================

    def __repr__(self):
        return f"RWGSurface('{self.label}', npanels={self.npanels}, nedges={self.nedges})"

    def __str__(self):
        return (
            f"RWGSurface '{self.label}':\n"
            f"  Vertices: {self.nverts}\n"
            f"  Panels: {self.npanels}\n"
            f"  Edges: {self.nedges}\n"
            f"  Torque center: {self.torque_center}"
        )
