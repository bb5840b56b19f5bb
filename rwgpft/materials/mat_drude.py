"""
Drude model permittivity.
"""

import numpy as np

from ..utils.constants import EV2OMEGA


class MatDrude:
    """
    Drude model permittivity with unit permeability.

    Formula:
        eps = eps0 - wp^2 / (w * (w + i*gamma))

    where w is the angular frequency in units of c / length-unit.

    Parameters
    ----------
    eps0 : float
        Background dielectric constant (high-frequency limit)
    wp : float
        Plasma frequency (same units as w)
    gamma : float
        Damping rate (same units as w)

    Examples
    --------
    >>> gold = MatDrude.gold()
    >>> eps, mu = gold(3.0)

    Notes
    -----
    Common Drude parameters, converted from eV:
    - Gold (Au):   eps0=9.5,  wp=8.95 eV, gamma=0.069 eV
    - Silver (Ag): eps0=3.7,  wp=9.17 eV, gamma=0.021 eV
    """

    def __init__(self, eps0, wp, gamma, name=None):
        self.eps0 = eps0
        self.wp = wp
        self.gamma = gamma
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
        eps : complex or ndarray
            Drude permittivity
        mu : complex or ndarray
            Relative permeability (1)
        """
        w = np.asarray(omega, dtype=float)
        eps = self.eps0 - self.wp**2 / (w * (w + 1j * self.gamma))
        mu = np.ones_like(eps)

        if np.ndim(omega) == 0:
            return complex(eps), complex(mu)
        return eps, mu

    def wavenumber(self, omega):
        """
        Wavenumber k = omega * sqrt(eps * mu) in the medium.
        """
        eps, mu = self(omega)
        return omega * np.sqrt(eps * mu)

    @classmethod
    def from_ev(cls, eps0, wp_ev, gamma_ev, name=None):
        """
        Create Drude model from plasma frequency and damping in eV.
        """
        return cls(eps0, wp_ev * EV2OMEGA, gamma_ev * EV2OMEGA, name=name)

    @classmethod
    def gold(cls):
        """
        Drude model for gold (Au), length unit micron.
        """
        return cls.from_ev(eps0=9.5, wp_ev=8.95, gamma_ev=0.069, name='Au')

    @classmethod
    def silver(cls):
        """
        Drude model for silver (Ag), length unit micron.
        """
        return cls.from_ev(eps0=3.7, wp_ev=9.17, gamma_ev=0.021, name='Ag')

    def __repr__(self):
        if self.name:
            return f"MatDrude('{self.name}', eps0={self.eps0}, wp={self.wp}, gamma={self.gamma})"
        return f"MatDrude(eps0={self.eps0}, wp={self.wp}, gamma={self.gamma})"
