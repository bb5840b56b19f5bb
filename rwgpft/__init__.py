"""
RWGPFT - power, force and torque from RWG surface currents

Main modules:
- materials: Region materials (MatConst, MatDrude, MatTable, MatPEC)
- geometry: RWG surfaces, geometries and mesh generation
- greenfun: Static panel integrals and near-field potentials
- excitation: Plane wave incident fields and right-hand sides
- pft: Overlap (OPFT) and equivalence-principle (EPPFT) formulations
- misc: Option handling
"""

__version__ = "0.1.0"

from .materials import MatConst, MatDrude, MatTable, MatPEC
from .geometry import RWGSurface, RWGGeometry, trisphere, tritetrahedron, triplate
from .excitation import PlaneWave, assemble_rhs
from .pft import (CurrentVector, CurrentCorrelation, Overlaps, EPPFTElements,
                  get_overlaps, get_overlap, eppft, opft, get_pft)
from .misc import pftoptions, getpftoptions
from .utils.constants import ZVAC, TENTHIRDS

__all__ = [
    "MatConst",
    "MatDrude",
    "MatTable",
    "MatPEC",
    "RWGSurface",
    "RWGGeometry",
    "trisphere",
    "tritetrahedron",
    "triplate",
    "PlaneWave",
    "assemble_rhs",
    "CurrentVector",
    "CurrentCorrelation",
    "Overlaps",
    "EPPFTElements",
    "get_overlaps",
    "get_overlap",
    "eppft",
    "opft",
    "get_pft",
    "pftoptions",
    "getpftoptions",
    "ZVAC",
    "TENTHIRDS",
]
