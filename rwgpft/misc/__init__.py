"""
Miscellaneous utilities: option handling.
"""

from .options import pftoptions, getpftoptions, FORCE_CUBATURE_ENV


__all__ = [
    'pftoptions', 'getpftoptions', 'FORCE_CUBATURE_ENV',
]
