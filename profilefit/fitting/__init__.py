"""Fitting drivers for profilefit."""

from .bounds import derive_search_intervals
from .diff_evolution import (
    DEConfig,
    DEResult,
    DESolver,
    DEStrategy,
    FIT_POLICY,
    diff_evoln_fit,
)

__all__ = [
    'derive_search_intervals',
    'DEConfig',
    'DEResult',
    'DESolver',
    'DEStrategy',
    'FIT_POLICY',
    'diff_evoln_fit',
]
