"""
Incident fields.
"""

from .planewave import PlaneWave, assemble_rhs

__all__ = ['PlaneWave', 'assemble_rhs']
