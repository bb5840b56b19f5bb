"""
PFT options handling.

Options are plain dictionaries; `pftoptions` supplies defaults and
`getpftoptions` merges option dictionaries and keyword pairs.
"""

import os
from typing import Any, Dict, List, Optional


FORCE_CUBATURE_ENV = 'RWGPFT_FORCE_CUBATURE'

_MISSING = object()


def _env_flag(name: str) -> bool:
    value = os.environ.get(name, '')
    return value.strip().lower() not in ('', '0', 'false', 'no', 'off')


def pftoptions(op: Optional[Dict[str, Any]] = None,
        **kwargs: Any) -> Dict[str, Any]:
    """
    Set standard options for PFT calculations.

    Parameters
    ----------
    op : dict, optional
        Option dictionary from previous call
    **kwargs : dict
        Additional property name-value pairs

    Returns
    -------
    op : dict
        Dictionary with standard or user-defined options

    Notes
    -----
    The environment variable RWGPFT_FORCE_CUBATURE is read here, once,
    and stored as the explicit option 'force_cubature'.  Integration
    routines never consult the environment themselves.
    """
    if op is None:
        op = {}
        op['order'] = 9
        op['td_order'] = 6
        op['npol'] = 8
        op['RelCutoff'] = 3
        op['force_cubature'] = _env_flag(FORCE_CUBATURE_ENV)
        op['nthreads'] = os.cpu_count() or 1

    op.update(kwargs)
    return op


def getpftoptions(*args: Any,
        **kwargs: Any) -> Dict[str, Any]:
    """
    Get options for PFT calculations.

    Processes arguments in order: dicts are merged, lists of strings trigger
    substructure extraction, and keyword pairs are added directly.  Missing
    keys are filled from `pftoptions`.

    Parameters
    ----------
    *args : dicts, lists, or key-value pairs
    **kwargs : additional keyword arguments

    Returns
    -------
    op : dict
    """
    op = pftoptions()
    subs = []
    queue = iter(args)

    for arg in queue:
        if isinstance(arg, dict):
            op.update(arg)
        elif isinstance(arg, str):
            # 'name', value pair; a trailing name without value is dropped
            value = next(queue, _MISSING)
            if value is not _MISSING:
                op[arg] = value
        elif isinstance(arg, (list, tuple)):
            subs = list(arg)
        op = _extract_subs(op, subs)

    op.update(kwargs)
    return op


def _extract_subs(op: Dict[str, Any],
        subs: List[str]) -> Dict[str, Any]:
    """
    Copy the entries of the named sub-dictionaries to the top level.
    """
    for name in subs:
        if isinstance(op.get(name), dict):
            op.update(op[name])
    return op
