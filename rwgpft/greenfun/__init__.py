"""
Green function integrals over flat triangular panels.

Functions:
- laplace_panel_integrals: closed-form static integrals
- panel_integrals: Helmholtz kernel integrals with near-field refinement
- panel_potentials, panel_fields: reduced potentials and fields of half-RWGs
- get_reduced_fields: reduced fields of a full RWG function
"""

from .static import panel_frame, laplace_panel_integrals
from .nearfield import (
    helmholtz_kernels, panel_integrals, panel_potentials, panel_fields,
    get_reduced_fields,
)

__all__ = [
    'panel_frame', 'laplace_panel_integrals',
    'helmholtz_kernels', 'panel_integrals', 'panel_potentials', 'panel_fields',
    'get_reduced_fields',
]
