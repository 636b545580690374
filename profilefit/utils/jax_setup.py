"""Centralized JAX configuration for profilefit.

Profile components are written with ``jax.numpy`` and must run in float64.
``ensure_jax_x64()`` is the single place that flips the switch.

Usage:
    from profilefit.utils.jax_setup import ensure_jax_x64
    ensure_jax_x64()  # Call before any JAX operations

Design:
    - ensure_jax_x64() is idempotent (safe to call multiple times)
    - The function only imports JAX when called, not at module import
"""

import logging

logger = logging.getLogger(__name__)

# Track if we've already configured (avoid duplicate calls)
_jax_configured = False


def ensure_jax_x64() -> bool:
    """Ensure JAX is configured for float64 precision.

    Returns
    -------
    bool
        True if JAX was configured (or already configured), False if JAX
        is not available.

    Examples
    --------
    >>> from profilefit.utils.jax_setup import ensure_jax_x64
    >>> ensure_jax_x64()
    True
    """
    global _jax_configured

    if _jax_configured:
        return True

    try:
        import jax

        jax.config.update('jax_enable_x64', True)

        logger.debug("JAX float64 precision enabled")
        _jax_configured = True
        return True

    except ImportError:
        logger.warning("JAX not available - profilefit requires JAX for profile evaluation")
        return False


def assert_jax_x64() -> None:
    """Assert that JAX float64 mode is enabled.

    Raises
    ------
    RuntimeError
        If JAX is not configured or x64 mode is not enabled.
    """
    if not _jax_configured:
        raise RuntimeError(
            "JAX not configured. Call ensure_jax_x64() before using JAX operations."
        )

    import jax.numpy as jnp
    if jnp.asarray(1.0).dtype != jnp.float64:
        raise RuntimeError(
            "JAX x64 mode not enabled. This should not happen if "
            "ensure_jax_x64() was called."
        )
