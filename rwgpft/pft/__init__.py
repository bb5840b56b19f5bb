"""
Power, force and torque from RWG surface currents.
"""

from .currents import CurrentVector, CurrentCorrelation, check_currents
from .elements import EPPFTElements
from .overlap import Overlaps, panel_overlaps, get_overlaps, get_overlap, overlapping_edges
from .taylor_duffy import exp_moments, XiPoly, KernelTerm, taylor_duffy, td_elements
from .reduction import fold_edges
from .eppft import cubature_elements, get_eppft_matrix_elements, eppft
from .opft import extinction, opft
from .dispatch import get_pft

__all__ = [
    'CurrentVector', 'CurrentCorrelation', 'check_currents',
    'EPPFTElements',
    'Overlaps', 'panel_overlaps', 'get_overlaps', 'get_overlap', 'overlapping_edges',
    'exp_moments', 'XiPoly', 'KernelTerm', 'taylor_duffy', 'td_elements',
    'fold_edges',
    'cubature_elements', 'get_eppft_matrix_elements', 'eppft',
    'extinction', 'opft',
    'get_pft',
]
