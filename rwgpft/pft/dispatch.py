"""
Common entry point for the PFT formulations.
"""

from .eppft import eppft
from .opft import opft


def get_pft(geo, ns, omega, currents, method='opft', rhs=None, by_edge=False,
        op=None, **kwargs):
    """
    Power, force and torque on surface ns.

    Parameters
    ----------
    geo : RWGGeometry
    ns : int
        Surface index
    omega : float or complex
        Angular frequency in units of c / length-unit
    currents : CurrentVector or CurrentCorrelation
    method : {'opft', 'eppft'}, optional
        Formulation (default 'opft')
    rhs : array_like, optional
        Right-hand side vector, used by 'opft' for the scattered power
    by_edge : bool, optional
        Also return the per-edge breakdown
    op : dict, optional
        Options
    **kwargs
        Additional options ('exterior' selects the EPPFT medium)

    Returns
    -------
    pft : ndarray
        (8,) for 'opft', (7,) for 'eppft'
    by_edge : ndarray, shape (7, nedges)
        Only if by_edge is set

    Raises
    ------
    ValueError
        For an unknown method, or if 'exterior' is given with 'opft'
    """
    method = method.lower()
    exterior = kwargs.pop('exterior', None)
    if method == 'opft':
        if exterior is not None:
            raise ValueError("'exterior' applies to method 'eppft' only; "
                             "opft always uses the exterior medium")
        return opft(geo, ns, omega, currents, rhs=rhs, by_edge=by_edge, op=op, **kwargs)
    if method == 'eppft':
        exterior = True if exterior is None else exterior
        return eppft(geo, ns, omega, currents, exterior=exterior, by_edge=by_edge,
                     op=op, **kwargs)
    raise ValueError(f"Unknown PFT method '{method}' (use 'opft' or 'eppft')")
