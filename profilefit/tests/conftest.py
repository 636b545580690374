"""Shared fixtures for the profilefit test suite.

Provides sample configuration text, synthetic profiles and helpers to
write them into temporary files.
"""

import os

import numpy as np
import pytest

# Force determinism BEFORE any JAX imports
os.environ.setdefault("JAX_PLATFORM_NAME", "cpu")
os.environ.setdefault("XLA_FLAGS", "--xla_cpu_enable_fast_math=false")


# ---------------------------------------------------------------------------
# Sample configuration files
# ---------------------------------------------------------------------------

BASIC_CONFIG = """\
# Sample configuration: exponential disk plus Gaussian nucleus
GAIN        4.5
ZP          20.0

X0          0.0         fixed

FUNCTION Exponential-1D
mu_0        18.0        15,22     # central surface brightness
h           10.0        1,50

FUNCTION Gaussian-1D
mu_0        17.0        14,22
sigma       1.5         0.1,5
"""

TWO_SET_CONFIG = """\
X0   0.0   fixed
FUNCTION Sersic-1D
n      2.0
mu_e   20.0
r_e    15.0

X0   40.0
FUNCTION Delta-1D
mu_0   16.0
FUNCTION Sech2-1D
mu_0   19.0
h      3.0
"""


@pytest.fixture
def basic_config_text():
    return BASIC_CONFIG


@pytest.fixture
def two_set_config_text():
    return TWO_SET_CONFIG


@pytest.fixture
def write_file(tmp_path):
    """Write *text* to tmp_path/<name> and return the path."""
    def _write(name, text):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write


# ---------------------------------------------------------------------------
# Synthetic profiles
# ---------------------------------------------------------------------------

def exponential_mu(r, mu_0, h):
    """Surface brightness of an exponential disk: mu_0 + 1.0857 r / h."""
    return mu_0 + 2.5 * np.log10(np.e) * np.abs(r) / h


@pytest.fixture(name="exponential_mu")
def exponential_mu_fixture():
    return exponential_mu


@pytest.fixture
def exponential_profile():
    """(r, mu, err) for an exponential disk with mu_0 = 18, h = 10."""
    r = np.linspace(0.0, 60.0, 61)
    mu = exponential_mu(r, 18.0, 10.0)
    err = np.full_like(r, 0.05)
    return r, mu, err


EXPONENTIAL_FIT_CONFIG = """\
ZP   20.0
X0   0.0   fixed
FUNCTION Exponential-1D
mu_0   19.0   15,22
h      20.0   1,50
"""


@pytest.fixture
def exponential_fit_config_text():
    return EXPONENTIAL_FIT_CONFIG
