"""profilefit: 1-D surface-brightness profile fitting.

Configuration files describe which profile components to use, their initial
parameter values and optional limits; a differential-evolution driver fits
them to an observed profile.
"""

from profilefit.utils.jax_setup import ensure_jax_x64

# Float64 precision for all JAX operations (magnitudes span many decades)
ensure_jax_x64()

# Version
__version__ = "0.1.0"
