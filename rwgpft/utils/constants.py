"""
Physical constants and unit conventions.

Angular frequencies are measured in units of c / (length unit), i.e.
3e14 rad/s for meshes given in microns, so that the vacuum wavenumber
equals omega.
"""

import numpy as np

# Impedance of free space (Ohm)
ZVAC = 376.73031346177

# Rescales force and torque from natural units to nN and nN*um
TENTHIRDS = 10.0 / 3.0

# Number of entries in a PFT vector (power, force, torque)
NUMPFT = 7

# Speed of light (um/s)
C_LIGHT = 2.99792458e14

# Photon energy in eV to angular frequency in units of c/um
EV2OMEGA = 1.0 / (6.582119569e-16 * C_LIGHT)

# 4 pi in the denominator of the Helmholtz Green function
FOURPI = 4.0 * np.pi
