"""Derive differential-evolution search intervals from parameter bounds."""

from typing import Optional, Sequence, Tuple

import numpy as np

from profilefit.errors import MissingBoundsError
from profilefit.io.config_reader import ParameterBound


def derive_search_intervals(
    params: Sequence[float],
    bounds: Sequence[ParameterBound],
    names: Optional[Sequence[str]] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Turn per-parameter bounds into finite [lower, upper] arrays.

    FIXED parameters collapse to [value, value]; LIMITED parameters use
    their limits.

    Parameters
    ----------
    params : sequence of float
        Current parameter values (used for FIXED parameters).
    bounds : sequence of ParameterBound
        One bound per parameter.
    names : sequence of str, optional
        Parameter labels for the error message.

    Returns
    -------
    lower, upper : np.ndarray

    Raises
    ------
    ValueError
        If *params* and *bounds* differ in length.
    MissingBoundsError
        If any parameter is FREE (lists all of them).
    """
    if len(params) != len(bounds):
        raise ValueError(
            f"got {len(params)} parameter values but {len(bounds)} bound specifications"
        )

    free = [i for i, bound in enumerate(bounds) if bound.is_free]
    if free:
        raise MissingBoundsError(free, names)

    lower = np.empty(len(params), dtype=np.float64)
    upper = np.empty(len(params), dtype=np.float64)
    for i, (value, bound) in enumerate(zip(params, bounds)):
        if bound.is_fixed:
            lower[i] = upper[i] = value
        else:
            lower[i], upper[i] = bound.lower, bound.upper
    return lower, upper
