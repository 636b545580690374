"""Gaussian profiles: symmetric, and with separate inner/outer widths."""

from profilefit.utils.jax_setup import ensure_jax_x64
ensure_jax_x64()

import jax
import jax.numpy as jnp

from profilefit.model.components.base import Component1D, intensity_from_mu


@jax.jit
def gaussian_profile(dx, I_0, sigma):
    return I_0 * jnp.exp(-(dx * dx) / (2.0 * sigma * sigma))


@jax.jit
def gaussian_two_side_profile(dx, I_0, sigma_left, sigma_right):
    sigma = jnp.where(dx < 0.0, sigma_left, sigma_right)
    return I_0 * jnp.exp(-(dx * dx) / (2.0 * sigma * sigma))


class Gaussian1D(Component1D):
    short_name = "Gaussian-1D"
    PARAM_NAMES = ["mu_0", "sigma"]

    def _profile(self, dx, params):
        mu_0, sigma = params
        return gaussian_profile(dx, intensity_from_mu(mu_0, self.zero_point), sigma)


class Gaussian2Side1D(Component1D):
    """Gaussian with ``sigma_left`` for x < x0 and ``sigma_right`` otherwise."""

    short_name = "Gaussian2Side-1D"
    PARAM_NAMES = ["mu_0", "sigma_left", "sigma_right"]

    def _profile(self, dx, params):
        mu_0, sigma_left, sigma_right = params
        I_0 = intensity_from_mu(mu_0, self.zero_point)
        return gaussian_two_side_profile(dx, I_0, sigma_left, sigma_right)
