"""Delta-function component: all light in the pixel containing x0."""

from profilefit.utils.jax_setup import ensure_jax_x64
ensure_jax_x64()

import jax
import jax.numpy as jnp

from profilefit.model.components.base import Component1D, intensity_from_mu


@jax.jit
def delta_profile(dx, I_0):
    return jnp.where(jnp.abs(dx) < 0.5, I_0, 0.0)


class Delta1D(Component1D):
    short_name = "Delta-1D"
    PARAM_NAMES = ["mu_0"]

    def _profile(self, dx, params):
        (mu_0,) = params
        return delta_profile(dx, intensity_from_mu(mu_0, self.zero_point))
