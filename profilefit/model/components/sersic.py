"""
Sersic and core-Sersic profiles
===============================

Sersic-1D:       I(r) = I_e exp(-b_n [(r / r_e)^(1/n) - 1])
Core-Sersic-1D:  I(r) = I' [1 + (r_b / r)^alpha]^(gamma/alpha)
                        exp(-b_n [(r^alpha + r_b^alpha) / r_e^alpha]^(1/(alpha n)))
                 I'   = I_b 2^(-gamma/alpha) exp(b_n (2^(1/alpha) r_b / r_e)^(1/n))
                 (Graham et al. 2003; Trujillo et al. 2004)

b_n uses the Ciotti & Bertin (1999) series for n > 0.36 and the
MacArthur, Courteau & Holtzman (2003) polynomial below that.
"""

from profilefit.utils.jax_setup import ensure_jax_x64
ensure_jax_x64()

import jax
import jax.numpy as jnp

from profilefit.model.components.base import Component1D, intensity_from_mu

# MacArthur et al. (2003) polynomial coefficients, n <= 0.36
_A0_M03 = 0.01945
_A1_M03 = -0.8902
_A2_M03 = 10.95
_A3_M03 = -19.67
_A4_M03 = 13.43

# Smallest radius used by the core-Sersic inner power law
_R_MIN = 1e-10


@jax.jit
def calculate_bn(n):
    """Sersic b_n such that r_e encloses half the total light."""
    n2 = n * n
    ciotti_bertin = (2.0 * n - 0.333333333333333 + 0.009876543209876543 / n
                     + 0.0018028610621203215 / n2 + 0.00011409410586365319 / (n2 * n)
                     - 7.1510122958919723e-05 / (n2 * n2))
    macarthur = _A0_M03 + _A1_M03 * n + _A2_M03 * n2 + _A3_M03 * n2 * n + _A4_M03 * n2 * n2
    return jnp.where(n > 0.36, ciotti_bertin, macarthur)


@jax.jit
def sersic_profile(dx, n, I_e, r_e):
    r = jnp.abs(dx)
    b_n = calculate_bn(n)
    return I_e * jnp.exp(-b_n * ((r / r_e) ** (1.0 / n) - 1.0))


@jax.jit
def core_sersic_profile(dx, n, I_b, r_e, r_b, alpha, gamma):
    r = jnp.maximum(jnp.abs(dx), _R_MIN)
    b_n = calculate_bn(n)
    I_prime = (I_b * 2.0 ** (-gamma / alpha)
               * jnp.exp(b_n * (2.0 ** (1.0 / alpha) * r_b / r_e) ** (1.0 / n)))
    inner = (1.0 + (r_b / r) ** alpha) ** (gamma / alpha)
    outer = jnp.exp(-b_n * ((r ** alpha + r_b ** alpha) / r_e ** alpha) ** (1.0 / (alpha * n)))
    return I_prime * inner * outer


class Sersic1D(Component1D):
    short_name = "Sersic-1D"
    PARAM_NAMES = ["n", "mu_e", "r_e"]

    def _profile(self, dx, params):
        n, mu_e, r_e = params
        return sersic_profile(dx, n, intensity_from_mu(mu_e, self.zero_point), r_e)


class CoreSersic1D(Component1D):
    short_name = "Core-Sersic-1D"
    PARAM_NAMES = ["n", "mu_b", "r_e", "r_b", "alpha", "gamma"]

    def _profile(self, dx, params):
        n, mu_b, r_e, r_b, alpha, gamma = params
        I_b = intensity_from_mu(mu_b, self.zero_point)
        return core_sersic_profile(dx, n, I_b, r_e, r_b, alpha, gamma)
