"""
Profile Components
==================

Built-in 1-D radial/vertical profile components. Each one owns a parameter
buffer and evaluates intensity as a function of position relative to its
function set's centre.

Usage:
    from profilefit.model.components import BUILTIN_COMPONENTS, Gaussian1D

    g = Gaussian1D(zero_point=25.0)
    g.setup([0.0, 20.0, 3.0], offset=1, x0=0.0)
    g.get_value([0.0, 1.0, 2.0])

Adding a component type:
1. Subclass Component1D (or implement the ProfileComponent protocol)
2. Append the class to BUILTIN_COMPONENTS below
"""

from .base import Component1D, ProfileComponent, intensity_from_mu
from .exponential import Exponential1D, BrokenExponential1D
from .gaussian import Gaussian1D, Gaussian2Side1D
from .moffat import Moffat1D
from .sersic import Sersic1D, CoreSersic1D, calculate_bn
from .delta import Delta1D
from .sech import Sech1D, Sech21D, VdKSech1D


# Registration order is the listing order in help output
BUILTIN_COMPONENTS = (
    Exponential1D,
    Gaussian1D,
    Gaussian2Side1D,
    Moffat1D,
    Sersic1D,
    CoreSersic1D,
    BrokenExponential1D,
    Delta1D,
    Sech1D,
    Sech21D,
    VdKSech1D,
)


__all__ = [
    'Component1D',
    'ProfileComponent',
    'intensity_from_mu',
    'calculate_bn',
    'Exponential1D',
    'Gaussian1D',
    'Gaussian2Side1D',
    'Moffat1D',
    'Sersic1D',
    'CoreSersic1D',
    'BrokenExponential1D',
    'Delta1D',
    'Sech1D',
    'Sech21D',
    'VdKSech1D',
    'BUILTIN_COMPONENTS',
]
