"""
Component Registry - construct profile components from their short names.

A registry maps short names (as written after ``FUNCTION`` in a
configuration file) to zero-argument constructors. Registries are cheap
explicit objects: build one with :func:`build_registry` whenever it is
needed and pass it to its consumers; there is no module-level mutable map.

Usage
-----
>>> registry = build_registry(zero_point=25.0)
>>> registry.list_names()[:2]
['Exponential-1D', 'Gaussian-1D']
>>> gauss = registry.create('Gaussian-1D')
>>> gauss.parameter_names()
['mu_0', 'sigma']

To add a component type, append its class to
``profilefit.model.components.BUILTIN_COMPONENTS``, or pass
``extra=[(name, constructor)]`` to :func:`build_registry`.
"""

import functools
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from profilefit.errors import UnknownComponentError
from profilefit.model.components import BUILTIN_COMPONENTS, ProfileComponent
from profilefit.utils.constants import DEFAULT_ZERO_POINT

logger = logging.getLogger(__name__)

# Type alias for clarity
Constructor = Callable[[], ProfileComponent]


class ComponentRegistry:
    """Ordered name -> constructor table.

    Iteration and :meth:`list_names` follow registration order, so help
    output is identical from run to run.
    """

    def __init__(self):
        self._constructors: Dict[str, Constructor] = {}

    def register(self, name: str, constructor: Constructor) -> None:
        """Associate *name* with a zero-argument *constructor*.

        Re-registering a name replaces the earlier constructor but keeps its
        original position in the listing order.
        """
        if name in self._constructors:
            logger.debug("Component '%s' re-registered; replacing constructor", name)
        self._constructors[name] = constructor

    def create(self, name: str, position: Optional[int] = None) -> ProfileComponent:
        """Return a new, independently owned instance of component *name*.

        Parameters
        ----------
        name : str
            Component short name.
        position : int, optional
            Index of the request within a function list, reported on failure.

        Raises
        ------
        UnknownComponentError
            If *name* is not registered.
        """
        try:
            constructor = self._constructors[name]
        except KeyError:
            raise UnknownComponentError(name, position, self.list_names()) from None
        return constructor()

    def list_names(self) -> List[str]:
        """Registered short names, in registration order."""
        return list(self._constructors)

    def parameter_names(self, name: str) -> List[str]:
        """Canonical parameter order for component *name*."""
        return self.create(name).parameter_names()

    def describe(self) -> List[Tuple[str, List[str]]]:
        """(short name, parameter names) for every registered component."""
        return [(name, self.parameter_names(name)) for name in self._constructors]

    def __contains__(self, name: str) -> bool:
        return name in self._constructors

    def __len__(self) -> int:
        return len(self._constructors)

    def __iter__(self):
        return iter(self._constructors)


def build_registry(
    zero_point: float = DEFAULT_ZERO_POINT,
    extra: Iterable[Tuple[str, Constructor]] = (),
) -> ComponentRegistry:
    """Build a registry holding the built-in component types.

    Parameters
    ----------
    zero_point : float
        Magnitude zero point handed to every component created.
    extra : iterable of (name, constructor), optional
        Additional component types, registered after the built-ins.

    Returns
    -------
    ComponentRegistry
        A fresh registry; calling this repeatedly gives equal registries.
    """
    registry = ComponentRegistry()
    for cls in BUILTIN_COMPONENTS:
        registry.register(cls.get_class_short_name(),
                          functools.partial(cls, zero_point=zero_point))
    for name, constructor in extra:
        registry.register(name, constructor)
    return registry


def format_function_list(registry: ComponentRegistry) -> str:
    """One-line comma-separated list of component names."""
    return "Available function/components:\n" + ", ".join(registry.list_names()) + "."


def format_function_parameters(registry: ComponentRegistry) -> str:
    """FUNCTION blocks with parameter names, suitable for pasting into a config file."""
    blocks = []
    for name, params in registry.describe():
        blocks.append("\n".join([f"FUNCTION {name}"] + params))
    return "\n\n".join(blocks) + "\n"
