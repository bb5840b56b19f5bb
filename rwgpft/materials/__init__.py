"""
Material models.

Classes:
- MatConst: Constant permittivity and permeability
- MatTable: Tabulated permittivity with interpolation
- MatDrude: Drude model permittivity
- MatPEC: Perfect electric conductor
"""

from .mat_const import MatConst, MatPEC
from .mat_table import MatTable
from .mat_drude import MatDrude

__all__ = [
    "MatConst",
    "MatPEC",
    "MatTable",
    "MatDrude",
]
