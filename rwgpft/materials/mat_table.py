"""
Tabulated permittivity with interpolation.
"""

import numpy as np
from scipy.interpolate import CubicSpline
import os
from ..utils.constants import EV2OMEGA


class MatTable:
    """
    Interpolate from tabulated values of the refractive index.

    Reads tabulated refractive-index data from file and provides
    frequency-dependent permittivity through spline interpolation.

    Parameters
    ----------
    filename : str
        Path to data file.
        File format: "energy(eV) n k" per line
        - energy: photon energy in eV
        - n: refractive index (real part)
        - k: refractive index (imaginary part)
        Lines starting with '%' or '#' are comments.

    Examples
    --------
    >>> gold = MatTable('gold.dat')
    >>> eps, mu = gold(2.5)
    """

    def __init__(self, filename):
        if not os.path.exists(filename):
            raise FileNotFoundError(f"Material data file not found: {filename}")

        # Read data file
        data = []
        with open(filename, 'r') as f:
            for line in f:
                line = line.strip()
                # Skip comments and empty lines
                if line.startswith('%') or line.startswith('#') or not line:
                    continue
                try:
                    values = [float(x) for x in line.split()]
                    if len(values) >= 3:
                        data.append(values[:3])
                except ValueError:
                    continue

        if len(data) < 2:
            raise ValueError(f"No valid data found in {filename}")

        data = np.array(data)
        omega = data[:, 0] * EV2OMEGA

        sort_idx = np.argsort(omega)
        self.omega = omega[sort_idx]
        n = data[sort_idx, 1]
        k = data[sort_idx, 2]

        self.ni = CubicSpline(self.omega, n)
        self.ki = CubicSpline(self.omega, k)

        self.filename = os.path.basename(filename)

    def __call__(self, omega):
        """
        Interpolate permittivity; the permeability is 1.

        Parameters
        ----------
        omega : float or array_like
            Angular frequency in units of c / micron

        Returns
        -------
        eps : complex or ndarray
            Interpolated permittivity eps = (n + ik)^2
        mu : complex or ndarray
            Relative permeability (1)
        """
        w = np.asarray(omega, dtype=float)

        wmin, wmax = self.omega.min(), self.omega.max()
        if np.any(w < wmin) or np.any(w > wmax):
            raise ValueError(
                f"Frequency out of range. Valid range: "
                f"{wmin:.4g} - {wmax:.4g}, "
                f"requested: {w.min():.4g} - {w.max():.4g}"
            )

        eps = (self.ni(w) + 1j * self.ki(w)) ** 2
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

    def __repr__(self):
        return f"MatTable('{self.filename}')"
