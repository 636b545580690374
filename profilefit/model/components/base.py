"""
Base Protocol and shared machinery for 1-D profile components
=============================================================

Every component type exposes the same small capability set:

- ``short_name`` / ``parameter_names()``: identity and canonical parameter
  order (the order parameter lines must follow in a configuration file)
- ``setup(params, offset, x0)``: copy this component's slice of the flat
  parameter vector into its own buffer and record the set centre
- ``get_value(x)``: intensity at position(s) ``x``

``ProfileComponent`` is a Protocol (structural subtyping) so third-party
components only need the right methods; ``Component1D`` is the concrete
base the built-in types share.
"""

from typing import List, Protocol, Sequence, runtime_checkable

from profilefit.utils.jax_setup import ensure_jax_x64
ensure_jax_x64()

import jax.numpy as jnp
import numpy as np

from profilefit.utils.constants import DEFAULT_ZERO_POINT


@runtime_checkable
class ProfileComponent(Protocol):
    """Protocol for profile components."""

    short_name: str
    n_params: int

    def parameter_names(self) -> List[str]:
        ...

    def setup(self, params: Sequence[float], offset: int, x0: float) -> None:
        ...

    def get_value(self, x) -> np.ndarray:
        ...


def intensity_from_mu(mu, zero_point):
    """Convert surface brightness (mag/arcsec^2) to intensity: 10**(0.4 (ZP - mu))."""
    return 10.0 ** (0.4 * (zero_point - mu))


class Component1D:
    """
    Base class for built-in 1-D components.

    Subclasses set ``short_name`` and ``PARAM_NAMES`` and implement
    ``_profile(dx, params)`` returning intensity as a JAX array, where
    ``dx = x - x0`` and ``params`` is the component's parameter buffer.
    """

    short_name: str = ""
    PARAM_NAMES: List[str] = []

    def __init__(self, zero_point: float = DEFAULT_ZERO_POINT):
        self.zero_point = zero_point
        self.x0 = 0.0
        self.params = np.zeros(len(self.PARAM_NAMES), dtype=np.float64)

    @classmethod
    def get_class_short_name(cls) -> str:
        return cls.short_name

    @property
    def n_params(self) -> int:
        return len(self.PARAM_NAMES)

    def parameter_names(self) -> List[str]:
        return list(self.PARAM_NAMES)

    def setup(self, params: Sequence[float], offset: int, x0: float) -> None:
        """Load ``params[offset:offset + n_params]`` and the set centre ``x0``."""
        chunk = np.asarray(params[offset:offset + self.n_params], dtype=np.float64)
        if len(chunk) != self.n_params:
            raise ValueError(
                f"{self.short_name} needs {self.n_params} parameters starting at "
                f"index {offset}, only {len(chunk)} available"
            )
        self.params[:] = chunk
        self.x0 = float(x0)

    def get_value(self, x) -> np.ndarray:
        dx = jnp.asarray(x, dtype=jnp.float64) - self.x0
        return np.asarray(self._profile(dx, jnp.asarray(self.params)))

    def _profile(self, dx, params):
        raise NotImplementedError

    def __repr__(self) -> str:
        values = ", ".join(f"{n}={v:g}" for n, v in zip(self.PARAM_NAMES, self.params))
        return f"{type(self).__name__}({values})"
