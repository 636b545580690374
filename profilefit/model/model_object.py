"""
Model assembly and evaluation for 1-D profiles
==============================================

A ``ModelObject`` holds an ordered list of components grouped into function
sets. Each set shares one centre ``X0``; the flat parameter vector is laid
out set by set as::

    [X0, <params of function 1>, <params of function 2>, ..., X0, ...]

The model sums component intensities and reports surface brightness
``mu = ZP - 2.5 log10(I)``. ``evaluate_cost`` returns chi-squared against a
data profile and is what the differential-evolution driver minimizes.

Usage:
    spec = read_config_file_with_limits("config.txt")
    model = assemble_model(spec, zero_point=25.0)
    model.set_data(r, mu, mu_err)
    chi2 = model.evaluate_cost(spec.parameters)
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from profilefit.errors import ParameterCountError, ProfileDataError
from profilefit.io.config_reader import ParsedFunction, ParsedModelSpec
from profilefit.model.components import ProfileComponent
from profilefit.model.registry import ComponentRegistry, build_registry
from profilefit.utils.constants import DEFAULT_ZERO_POINT, X0_KEYWORD
from profilefit.utils.jax_setup import assert_jax_x64

logger = logging.getLogger(__name__)


class ModelObject:
    """Composite 1-D profile model.

    Parameters
    ----------
    zero_point : float
        Magnitude zero point used when converting intensity to mu.
    """

    def __init__(self, zero_point: float = DEFAULT_ZERO_POINT):
        self.zero_point = zero_point
        self.functions: List[ProfileComponent] = []
        self.set_starts: List[int] = []
        self._param_names: List[str] = []
        self.x: Optional[np.ndarray] = None
        self.y: Optional[np.ndarray] = None
        self.errors: Optional[np.ndarray] = None

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def add_function(self, component: ProfileComponent) -> None:
        self.functions.append(component)

    def add_functions(
        self,
        names: Sequence[str],
        set_starts: Sequence[int],
        registry: Optional[ComponentRegistry] = None,
    ) -> "ModelObject":
        """Create components by name and group them into function sets.

        Parameters
        ----------
        names : sequence of str
            Component short names, in configuration order.
        set_starts : sequence of int
            Index into *names* at which each function set begins.
        registry : ComponentRegistry, optional
            Registry to construct from; a fresh built-in one by default.

        Raises
        ------
        UnknownComponentError
            Naming the first unregistered component and its position.
        RuntimeError
            If JAX float64 mode is not enabled.
        """
        # components evaluate in float64
        assert_jax_x64()
        if registry is None:
            registry = build_registry(zero_point=self.zero_point)

        for position, name in enumerate(names):
            logger.info("\tFunction: %s", name)
            self.add_function(registry.create(name, position=position))

        self.define_function_sets(set_starts)
        self.populate_parameter_names()
        return self

    def define_function_sets(self, set_starts: Sequence[int]) -> None:
        """Record where each function set begins.

        Raises
        ------
        ValueError
            If the indices do not start at 0, decrease, or run past the
            function list.
        """
        starts = [int(s) for s in set_starts]
        if not starts or starts[0] != 0:
            raise ValueError(f"first function set must start at function 0, got {starts}")
        if any(b < a for a, b in zip(starts, starts[1:])):
            raise ValueError(f"function set starts must be non-decreasing, got {starts}")
        if starts[-1] > len(self.functions):
            raise ValueError(
                f"function set start {starts[-1]} beyond the {len(self.functions)} functions"
            )
        self.set_starts = starts

    def populate_parameter_names(self) -> None:
        names = []
        for _, components in self.iter_sets():
            names.append(X0_KEYWORD)
            for component in components:
                names.extend(component.parameter_names())
        self._param_names = names

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def n_sets(self) -> int:
        return len(self.set_starts)

    def iter_sets(self) -> Iterator[Tuple[int, List[ProfileComponent]]]:
        """Yield (set index, components of that set)."""
        ends = self.set_starts[1:] + [len(self.functions)]
        for k, (start, end) in enumerate(zip(self.set_starts, ends)):
            yield k, self.functions[start:end]

    def total_parameter_count(self) -> int:
        return self.n_sets + sum(f.n_params for f in self.functions)

    def parameter_names(self) -> List[str]:
        return list(self._param_names)

    def check_parameter_count(self, n_params: int) -> None:
        """Raise ParameterCountError unless *n_params* matches the model."""
        expected = self.total_parameter_count()
        if n_params != expected:
            raise ParameterCountError(
                f"number of input parameters ({n_params}) does not equal "
                f"required number of parameters for specified functions ({expected})"
            )

    def check_function_parameter_counts(self, parsed: Sequence[ParsedFunction]) -> None:
        """Compare each component's parameter count with the parsed file.

        Raises
        ------
        ParameterCountError
            Naming the FUNCTION line whose parameter lines do not match.
        """
        for component, entry in zip(self.functions, parsed):
            if component.n_params != entry.n_params:
                raise ParameterCountError(
                    f"line {entry.line_number}: {entry.name} expects "
                    f"{component.n_params} parameters ({', '.join(component.parameter_names())}), "
                    f"found {entry.n_params}"
                )

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def set_data(self, x, y, errors=None) -> None:
        """Attach the observed profile the cost is computed against."""
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if x.shape != y.shape or x.ndim != 1:
            raise ProfileDataError(
                f"x and y must be 1-D arrays of equal length, got {x.shape} and {y.shape}"
            )
        if errors is not None:
            errors = np.asarray(errors, dtype=np.float64)
            if errors.shape != x.shape:
                raise ProfileDataError(
                    f"errors shape {errors.shape} does not match data shape {x.shape}"
                )
            if np.any(errors <= 0):
                raise ProfileDataError("profile errors must be positive")
        self.x, self.y, self.errors = x, y, errors

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def compute_intensity(self, params: Sequence[float], x=None) -> np.ndarray:
        """Total intensity of all components at *x* (defaults to the data x)."""
        params = np.asarray(params, dtype=np.float64)
        self.check_parameter_count(len(params))
        if x is None:
            if self.x is None:
                raise ProfileDataError("no x values given and no profile data attached")
            x = self.x
        x = np.asarray(x, dtype=np.float64)

        total = np.zeros_like(x)
        offset = 0
        for _, components in self.iter_sets():
            x0 = params[offset]
            offset += 1
            for component in components:
                component.setup(params, offset, x0)
                offset += component.n_params
                total = total + component.get_value(x)
        return total

    def compute_profile(self, params: Sequence[float], x=None) -> np.ndarray:
        """Model surface brightness mu = ZP - 2.5 log10(I)."""
        intensity = self.compute_intensity(params, x)
        with np.errstate(divide='ignore', invalid='ignore'):
            return self.zero_point - 2.5 * np.log10(intensity)

    def evaluate_cost(self, params: Sequence[float]) -> float:
        """Chi-squared of the model against the attached data.

        Unit weights are used when no errors were given. Non-finite model
        values (e.g. zero intensity) give an infinite cost.
        """
        if self.y is None:
            raise ProfileDataError("no profile data attached; call set_data() first")
        model = self.compute_profile(params)
        if not np.all(np.isfinite(model)):
            return np.inf
        residuals = self.y - model
        if self.errors is not None:
            residuals = residuals / self.errors
        return float(np.sum(residuals * residuals))

    __call__ = evaluate_cost


def assemble_model(
    spec: ParsedModelSpec,
    registry: Optional[ComponentRegistry] = None,
    zero_point: float = DEFAULT_ZERO_POINT,
) -> ModelObject:
    """Build a ModelObject from a parsed configuration and validate its size.

    Raises
    ------
    UnknownComponentError
        If a component name is not registered.
    ParameterCountError
        If a FUNCTION block or the whole file has the wrong number of
        parameter lines.
    """
    model = ModelObject(zero_point=zero_point)
    model.add_functions(spec.function_names, spec.set_starts, registry=registry)
    model.check_function_parameter_counts(spec.functions)
    model.check_parameter_count(spec.n_parameters)
    return model
