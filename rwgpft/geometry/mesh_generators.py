"""
Mesh generation functions for simple test bodies.
"""

import numpy as np
from scipy.spatial import ConvexHull
from .surface import RWGSurface


def trisphere(n, radius=1.0, **kwargs):
    """
    Generate a triangulated sphere.

    Vertices are distributed on a Fibonacci spiral and connected through
    their convex hull; faces are oriented with outward normals.

    Parameters
    ----------
    n : int
        Number of vertices (>= 4)
    radius : float, optional
        Sphere radius. Default: 1.0
    **kwargs : dict
        Additional arguments passed to RWGSurface

    Returns
    -------
    s : RWGSurface
        Closed triangulated sphere centered at the origin

    Examples
    --------
    >>> s = trisphere(42, 0.5)
    """
    if n < 4:
        raise ValueError("trisphere needs at least 4 vertices")

    verts = _fibonacci_sphere(n)
    faces = _orient_outward(verts, ConvexHull(verts).simplices)

    kwargs.setdefault('label', 'sphere')
    return RWGSurface(radius * verts, faces, **kwargs)


def _fibonacci_sphere(n):
    """
    Generate n points uniformly distributed on unit sphere
    using Fibonacci spiral.

    Parameters
    ----------
    n : int
        Number of points

    Returns
    -------
    points : ndarray, shape (n, 3)
        Points on unit sphere
    """
    indices = np.arange(0, n, dtype=float) + 0.5

    phi = np.arccos(1 - 2 * indices / n)  # Latitude
    theta = np.pi * (1 + 5**0.5) * indices  # Golden angle spiral

    x = np.sin(phi) * np.cos(theta)
    y = np.sin(phi) * np.sin(theta)
    z = np.cos(phi)

    points = np.column_stack([x, y, z])

    # Normalize to ensure points are exactly on unit sphere
    points = points / np.linalg.norm(points, axis=1, keepdims=True)

    return points


def _orient_outward(verts, faces):
    """
    Flip faces of a star-shaped closed mesh so that normals point away
    from the vertex centroid.
    """
    faces = np.array(faces, dtype=int)
    center = verts.mean(axis=0)
    v0, v1, v2 = (verts[faces[:, i]] for i in range(3))
    nvec = np.cross(v1 - v0, v2 - v0)
    inward = np.sum(nvec * ((v0 + v1 + v2) / 3 - center), axis=1) < 0
    faces[inward] = faces[inward][:, [0, 2, 1]]
    return faces


def tritetrahedron(size=1.0, **kwargs):
    """
    Generate a regular tetrahedron with outward normals.

    Parameters
    ----------
    size : float, optional
        Edge length. Default: 1.0
    **kwargs : dict
        Additional arguments passed to RWGSurface

    Returns
    -------
    s : RWGSurface
        Closed surface with 4 panels and 6 edges
    """
    verts = np.array([
        [1, 1, 1],
        [1, -1, -1],
        [-1, 1, -1],
        [-1, -1, 1],
    ], dtype=float) * size / (2 * np.sqrt(2))
    faces = _orient_outward(verts, [[0, 1, 2], [0, 1, 3], [0, 2, 3], [1, 2, 3]])

    kwargs.setdefault('label', 'tetrahedron')
    return RWGSurface(verts, faces, **kwargs)


def triplate(nx=1, ny=1, lx=1.0, ly=1.0, **kwargs):
    """
    Generate a flat rectangular plate in the xy-plane.

    Each grid cell is split along its diagonal into two triangles with
    normals along +z.

    Parameters
    ----------
    nx, ny : int
        Number of grid cells along x and y
    lx, ly : float
        Plate dimensions; the plate spans [0, lx] x [0, ly]
    **kwargs : dict
        Additional arguments passed to RWGSurface

    Returns
    -------
    s : RWGSurface
        Open surface

    Examples
    --------
    >>> s = triplate()   # two triangles sharing one edge
    """
    x = np.linspace(0, lx, nx + 1)
    y = np.linspace(0, ly, ny + 1)
    xx, yy = np.meshgrid(x, y)
    verts = np.column_stack([xx.ravel(), yy.ravel(), np.zeros(xx.size)])

    faces = []
    for j in range(ny):
        for i in range(nx):
            v00 = j * (nx + 1) + i
            v10 = v00 + 1
            v01 = v00 + nx + 1
            v11 = v01 + 1
            faces.append([v00, v10, v11])
            faces.append([v00, v11, v01])

    kwargs.setdefault('label', 'plate')
    return RWGSurface(verts, np.array(faces), **kwargs)
