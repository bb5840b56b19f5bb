"""
Pytest configuration for RWGPFT tests
"""

import numpy as np
import pytest


@pytest.fixture
def rtol():
    """Relative tolerance for numerical comparisons"""
    return 1e-10


@pytest.fixture
def atol():
    """Absolute tolerance for numerical comparisons"""
    return 1e-12


def assert_allclose_complex(a, b, rtol=1e-10, atol=1e-12):
    """Assert two complex arrays are close"""
    a = np.asarray(a)
    b = np.asarray(b)
    np.testing.assert_allclose(a.real, b.real, rtol=rtol, atol=atol, err_msg="Real parts differ")
    np.testing.assert_allclose(a.imag, b.imag, rtol=rtol, atol=atol, err_msg="Imaginary parts differ")
