"""
Frequency-independent materials.
"""

import numpy as np


class MatConst(object):
    """
    Constant permittivity and permeability.

    Parameters
    ----------
    eps : float or complex
        Relative permittivity
    mu : float or complex, optional
        Relative permeability (default 1)

    Examples
    --------
    >>> vacuum = MatConst()
    >>> glass = MatConst(2.25)
    >>> eps, mu = glass(1.0)
    """

    def __init__(self, eps=1.0, mu=1.0, name=None):
        self.eps = eps
        self.mu = mu
        self.name = name

    def __call__(self, omega):
        """
        Get permittivity and permeability.

        Parameters
        ----------
        omega : float or array_like
            Angular frequency in units of c / length-unit

        Returns
        -------
        eps, mu : complex or ndarray
            Relative permittivity and permeability (same shape as omega)
        """
        if np.ndim(omega) == 0:
            return complex(self.eps), complex(self.mu)

        omega = np.asarray(omega)
        eps = np.full(omega.shape, self.eps, dtype=complex)
        mu = np.full(omega.shape, self.mu, dtype=complex)
        return eps, mu

    def wavenumber(self, omega):
        """
        Wavenumber k = omega * sqrt(eps * mu) in the medium.
        """
        eps, mu = self(omega)
        return omega * np.sqrt(eps * mu)

    def __repr__(self):
        if self.name:
            return f"MatConst('{self.name}', eps={self.eps}, mu={self.mu})"
        return f"MatConst(eps={self.eps}, mu={self.mu})"


class MatPEC(object):
    """
    Perfect electric conductor.

    Surfaces whose interior region is filled with MatPEC carry only an
    electric surface current.  Evaluating the material parameters of a
    PEC region is an error.
    """

    name = 'PEC'

    def __call__(self, omega):
        raise ValueError("Material parameters of a PEC region are undefined")

    def __repr__(self):
        return "MatPEC()"
