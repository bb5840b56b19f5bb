"""
Geometry and mesh generation module.

Classes:
- RWGSurface: Triangulated surface with RWG basis functions
- RWGGeometry: Surfaces embedded in material regions

Functions:
- trisphere: Generate triangulated sphere
- tritetrahedron: Generate regular tetrahedron
- triplate: Generate flat rectangular plate
"""

from .surface import RWGSurface
from .geometry import RWGGeometry
from .mesh_generators import trisphere, tritetrahedron, triplate

__all__ = [
    "RWGSurface",
    "RWGGeometry",
    "trisphere",
    "tritetrahedron",
    "triplate",
]
