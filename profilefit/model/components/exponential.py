"""Exponential and broken-exponential profiles.

Exponential-1D:        I(r) = I_0 exp(-r / h)
BrokenExponential-1D:  I(r) = S I_0 exp(-r / h1) [1 + exp(alpha (r - r_b))]^((1/alpha)(1/h1 - 1/h2))
                       with S = (1 + exp(-alpha r_b))^(-(1/alpha)(1/h1 - 1/h2))
                       (Erwin, Pohlen & Beckman 2008)
"""

from profilefit.utils.jax_setup import ensure_jax_x64
ensure_jax_x64()

import jax
import jax.numpy as jnp

from profilefit.model.components.base import Component1D, intensity_from_mu


@jax.jit
def exponential_profile(dx, I_0, h):
    return I_0 * jnp.exp(-jnp.abs(dx) / h)


@jax.jit
def broken_exponential_profile(dx, I_0, h1, h2, r_b, alpha):
    r = jnp.abs(dx)
    exponent = (1.0 / alpha) * (1.0 / h1 - 1.0 / h2)
    # log-space so alpha * (r - r_b) >> 1 does not overflow
    log_S = -exponent * jnp.logaddexp(0.0, -alpha * r_b)
    log_I = (jnp.log(I_0) + log_S - r / h1
             + exponent * jnp.logaddexp(0.0, alpha * (r - r_b)))
    return jnp.exp(log_I)


class Exponential1D(Component1D):
    short_name = "Exponential-1D"
    PARAM_NAMES = ["mu_0", "h"]

    def _profile(self, dx, params):
        mu_0, h = params
        return exponential_profile(dx, intensity_from_mu(mu_0, self.zero_point), h)


class BrokenExponential1D(Component1D):
    short_name = "BrokenExponential-1D"
    PARAM_NAMES = ["mu_0", "h1", "h2", "r_b", "alpha"]

    def _profile(self, dx, params):
        mu_0, h1, h2, r_b, alpha = params
        I_0 = intensity_from_mu(mu_0, self.zero_point)
        return broken_exponential_profile(dx, I_0, h1, h2, r_b, alpha)
