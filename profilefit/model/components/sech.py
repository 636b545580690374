"""Hyperbolic-secant profiles, mostly used for vertical disk structure.

Sech-1D:     I(z) = I_0 sech(z / h)
Sech2-1D:    I(z) = I_0 sech^2(z / h)
vdKSech-1D:  I(z) = I_0 sech^(2/alpha)(alpha z / (2 z_0))   (van der Kruit 1988)
"""

from profilefit.utils.jax_setup import ensure_jax_x64
ensure_jax_x64()

import jax
import jax.numpy as jnp

from profilefit.model.components.base import Component1D, intensity_from_mu


@jax.jit
def sech_profile(dx, I_0, h):
    return I_0 / jnp.cosh(dx / h)


@jax.jit
def sech2_profile(dx, I_0, h):
    sech = 1.0 / jnp.cosh(dx / h)
    return I_0 * sech * sech


@jax.jit
def vdk_sech_profile(dx, I_0, z_0, alpha):
    sech = 1.0 / jnp.cosh(alpha * dx / (2.0 * z_0))
    return I_0 * sech ** (2.0 / alpha)


class Sech1D(Component1D):
    short_name = "Sech-1D"
    PARAM_NAMES = ["mu_0", "h"]

    def _profile(self, dx, params):
        mu_0, h = params
        return sech_profile(dx, intensity_from_mu(mu_0, self.zero_point), h)


class Sech21D(Component1D):
    short_name = "Sech2-1D"
    PARAM_NAMES = ["mu_0", "h"]

    def _profile(self, dx, params):
        mu_0, h = params
        return sech2_profile(dx, intensity_from_mu(mu_0, self.zero_point), h)


class VdKSech1D(Component1D):
    short_name = "vdKSech-1D"
    PARAM_NAMES = ["mu_0", "z_0", "alpha"]

    def _profile(self, dx, params):
        mu_0, z_0, alpha = params
        return vdk_sech_profile(dx, intensity_from_mu(mu_0, self.zero_point), z_0, alpha)
