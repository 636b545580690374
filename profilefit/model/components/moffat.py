"""Moffat profile parameterized by FWHM and beta.

I(r) = I_0 / [1 + (r / alpha)^2]^beta,  alpha = FWHM / (2 sqrt(2^(1/beta) - 1))
"""

from profilefit.utils.jax_setup import ensure_jax_x64
ensure_jax_x64()

import jax
import jax.numpy as jnp

from profilefit.model.components.base import Component1D, intensity_from_mu


@jax.jit
def moffat_profile(dx, I_0, fwhm, beta):
    alpha = 0.5 * fwhm / jnp.sqrt(2.0 ** (1.0 / beta) - 1.0)
    return I_0 / (1.0 + (dx / alpha) ** 2) ** beta


class Moffat1D(Component1D):
    short_name = "Moffat-1D"
    PARAM_NAMES = ["mu_0", "fwhm", "beta"]

    def _profile(self, dx, params):
        mu_0, fwhm, beta = params
        return moffat_profile(dx, intensity_from_mu(mu_0, self.zero_point), fwhm, beta)
