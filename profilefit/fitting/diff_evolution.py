"""
Differential Evolution fitting
==============================

Population-based, derivative-free global minimization (Storn & Price 1997).

Two layers:

- :class:`DESolver` is a generic minimizer. It is configured with a
  :class:`DEConfig` value (strategy, weight F, crossover probability CR,
  population factor) and minimizes any ``cost(params) -> float`` callable
  inside finite per-parameter intervals.
- :func:`diff_evoln_fit` is the fitting driver. It derives the intervals
  from the parsed parameter bounds, runs the fixed policy
  (rand-to-best/1/exp, F = 0.85, CR = 1.0, population = 10 x n_params) for
  exactly ``max_generations`` generations, and writes the best vector back
  into the caller's parameter buffer.

There is no convergence test: the loop always runs the full generation
budget.

Usage:
    spec = read_config_file_with_limits("config.txt")
    model = assemble_model(spec)
    model.set_data(r, mu, err)
    params = np.array(spec.parameters)
    result = diff_evoln_fit(params, spec.bounds, model.evaluate_cost, 600, seed=1)
    # params now holds the best-fit values
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

import numpy as np

from profilefit.fitting.bounds import derive_search_intervals
from profilefit.io.config_reader import ParameterBound
from profilefit.utils.constants import (
    DE_CROSSOVER,
    DE_POPULATION_FACTOR,
    DE_REPORT_INTERVAL,
    DE_STRATEGY,
    DE_WEIGHT,
)

logger = logging.getLogger(__name__)

CostFunc = Callable[[np.ndarray], float]
ProgressFunc = Callable[[int, np.ndarray, float], None]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class DEStrategy(Enum):
    """Mutation scheme / crossover pairs from Storn's DE reference code."""
    BEST_1_EXP = "best/1/exp"
    RAND_1_EXP = "rand/1/exp"
    RAND_TO_BEST_1_EXP = "rand-to-best/1/exp"
    BEST_2_EXP = "best/2/exp"
    RAND_2_EXP = "rand/2/exp"
    BEST_1_BIN = "best/1/bin"
    RAND_1_BIN = "rand/1/bin"
    RAND_TO_BEST_1_BIN = "rand-to-best/1/bin"
    BEST_2_BIN = "best/2/bin"
    RAND_2_BIN = "rand/2/bin"

    @property
    def mutation(self) -> str:
        return self.value.rsplit("/", 1)[0]

    @property
    def exponential(self) -> bool:
        return self.value.endswith("/exp")


# Distinct population members (other than the target) each mutation draws
_DONORS_NEEDED = {
    "best/1": 2,
    "rand/1": 3,
    "rand-to-best/1": 2,
    "best/2": 4,
    "rand/2": 5,
}


@dataclass(frozen=True)
class DEConfig:
    """Control parameters for :class:`DESolver`.

    Attributes
    ----------
    strategy : DEStrategy
        Mutation/crossover scheme.
    weight : float
        Differential weighting factor F.
    crossover : float
        Crossover probability CR in [0, 1].
    population_factor : int
        Population size is ``population_factor * n_params``.
    """
    strategy: DEStrategy = DEStrategy(DE_STRATEGY)
    weight: float = DE_WEIGHT
    crossover: float = DE_CROSSOVER
    population_factor: int = DE_POPULATION_FACTOR

    def __post_init__(self):
        if not 0.0 <= self.crossover <= 1.0:
            raise ValueError(f"crossover probability must lie in [0, 1], got {self.crossover}")
        if self.weight <= 0.0:
            raise ValueError(f"weighting factor must be positive, got {self.weight}")
        if self.population_factor < 1:
            raise ValueError(f"population factor must be >= 1, got {self.population_factor}")


FIT_POLICY = DEConfig()
"""The fixed policy used by :func:`diff_evoln_fit`."""


@dataclass
class DEResult:
    """Outcome of a differential-evolution run.

    Attributes
    ----------
    x : np.ndarray
        Best parameter vector found.
    energy : float
        Cost at ``x``.
    generations : int
        Generations completed.
    n_evaluations : int
        Total calls to the cost function.
    population_size : int
    time : float
        Wall-clock seconds spent.
    """
    x: np.ndarray
    energy: float
    generations: int
    n_evaluations: int
    population_size: int
    time: float = 0.0


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------

class DESolver:
    """Generic differential-evolution minimizer over a box.

    Parameters
    ----------
    lower, upper : array_like
        Finite interval ends; ``lower[i] == upper[i]`` pins parameter i.
    config : DEConfig, optional
        Control parameters (defaults to the fitting policy).
    seed : int or np.random.Generator, optional
        Source of randomness; runs with equal seeds are identical.
    """

    def __init__(self, lower, upper, config: DEConfig = FIT_POLICY, seed=None):
        self.lower = np.asarray(lower, dtype=np.float64)
        self.upper = np.asarray(upper, dtype=np.float64)
        if self.lower.shape != self.upper.shape or self.lower.ndim != 1:
            raise ValueError("lower and upper must be 1-D arrays of equal length")
        if self.lower.size == 0:
            raise ValueError("nothing to optimize: zero parameters")
        if not (np.all(np.isfinite(self.lower)) and np.all(np.isfinite(self.upper))):
            raise ValueError("differential evolution needs finite bounds for every parameter")
        if np.any(self.lower > self.upper):
            raise ValueError("every lower bound must be <= its upper bound")

        self.config = config
        self.dim = self.lower.size
        self.pop_size = config.population_factor * self.dim
        donors = _DONORS_NEEDED[config.strategy.mutation]
        if self.pop_size < donors + 1:
            raise ValueError(
                f"population of {self.pop_size} too small for strategy "
                f"{config.strategy.value} (needs at least {donors + 1})"
            )

        self.rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)
        self.population: Optional[np.ndarray] = None
        self.energies: Optional[np.ndarray] = None
        self.best: Optional[np.ndarray] = None
        self.best_energy = np.inf
        self.n_evaluations = 0

    # -- population -------------------------------------------------------

    def _random_within_bounds(self, size) -> np.ndarray:
        return self.lower + self.rng.random(size) * (self.upper - self.lower)

    def _evaluate(self, cost: CostFunc, trial: np.ndarray) -> float:
        self.n_evaluations += 1
        energy = float(cost(trial))
        # NaN would never lose a comparison
        return energy if not np.isnan(energy) else np.inf

    def initialize(self, cost: CostFunc) -> None:
        """Seed the population uniformly within bounds and evaluate it."""
        self.population = self._random_within_bounds((self.pop_size, self.dim))
        self.energies = np.array([self._evaluate(cost, member) for member in self.population])
        i_best = int(np.argmin(self.energies))
        self.best = self.population[i_best].copy()
        self.best_energy = float(self.energies[i_best])

    # -- trial generation -------------------------------------------------

    def _crossover_mask(self) -> np.ndarray:
        mask = np.zeros(self.dim, dtype=bool)
        n = int(self.rng.integers(self.dim))
        cr = self.config.crossover
        if self.config.strategy.exponential:
            length = 0
            while True:
                mask[n] = True
                n = (n + 1) % self.dim
                length += 1
                if not (self.rng.random() < cr and length < self.dim):
                    break
        else:
            for length in range(self.dim):
                if self.rng.random() < cr or length == self.dim - 1:
                    mask[n] = True
                n = (n + 1) % self.dim
        return mask

    def _mutant(self, i: int) -> np.ndarray:
        mutation = self.config.strategy.mutation
        f = self.config.weight
        candidates = np.delete(np.arange(self.pop_size), i)
        r = self.rng.choice(candidates, size=_DONORS_NEEDED[mutation], replace=False)
        p = self.population
        target = p[i]

        if mutation == "best/1":
            return self.best + f * (p[r[0]] - p[r[1]])
        if mutation == "rand/1":
            return p[r[0]] + f * (p[r[1]] - p[r[2]])
        if mutation == "rand-to-best/1":
            return target + f * (self.best - target) + f * (p[r[0]] - p[r[1]])
        if mutation == "best/2":
            return self.best + f * (p[r[0]] + p[r[1]] - p[r[2]] - p[r[3]])
        return p[r[4]] + f * (p[r[0]] + p[r[1]] - p[r[2]] - p[r[3]])

    def make_trial(self, i: int) -> np.ndarray:
        """Build the trial vector for population member *i*."""
        trial = self.population[i].copy()
        mask = self._crossover_mask()
        trial[mask] = self._mutant(i)[mask]

        # out-of-bounds coordinates are redrawn inside the box
        outside = (trial < self.lower) | (trial > self.upper)
        if np.any(outside):
            trial[outside] = self._random_within_bounds(self.dim)[outside]
        return trial

    # -- main loop --------------------------------------------------------

    def solve(
        self,
        cost: CostFunc,
        max_generations: int,
        progress: Optional[ProgressFunc] = None,
        report_interval: int = DE_REPORT_INTERVAL,
    ) -> DEResult:
        """Minimize *cost* for exactly *max_generations* generations.

        Parameters
        ----------
        cost : callable
            ``cost(params) -> float``; NaN is treated as +inf.
        max_generations : int
            Generation budget (0 evaluates the initial population only).
        progress : callable, optional
            ``progress(generation, best_x, best_energy)`` called every
            *report_interval* generations, in addition to the log message.
        report_interval : int
            Generations between progress reports.

        Returns
        -------
        DEResult
        """
        if max_generations < 0:
            raise ValueError(f"max_generations must be >= 0, got {max_generations}")

        start_time = time.time()
        self.initialize(cost)

        for generation in range(max_generations):
            for i in range(self.pop_size):
                trial = self.make_trial(i)
                energy = self._evaluate(cost, trial)
                if energy < self.energies[i]:
                    self.population[i] = trial
                    self.energies[i] = energy
                    if energy < self.best_energy:
                        self.best = trial.copy()
                        self.best_energy = energy

            if generation % report_interval == 0:
                logger.info("Generation %d: energy = %f", generation, self.best_energy)
                if progress is not None:
                    progress(generation, self.best.copy(), self.best_energy)

        return DEResult(
            x=self.best.copy(),
            energy=self.best_energy,
            generations=max_generations,
            n_evaluations=self.n_evaluations,
            population_size=self.pop_size,
            time=time.time() - start_time,
        )


# ---------------------------------------------------------------------------
# Fitting driver
# ---------------------------------------------------------------------------

def diff_evoln_fit(
    params,
    bounds: Sequence[ParameterBound],
    cost: CostFunc,
    max_generations: int,
    *,
    seed=None,
    names: Optional[Sequence[str]] = None,
    progress: Optional[ProgressFunc] = None,
) -> DEResult:
    """Fit by differential evolution and write the best vector into *params*.

    Parameters
    ----------
    params : np.ndarray or list of float
        Initial parameter values; overwritten in place with the best fit.
        Untouched if the call fails.
    bounds : sequence of ParameterBound
        One per parameter. Every parameter must be FIXED or LIMITED.
    cost : callable
        ``cost(params) -> float`` to minimize (e.g. ``model.evaluate_cost``).
    max_generations : int
        Exact number of generations to run.
    seed : int or np.random.Generator, optional
        Random seed for reproducible fits.
    names : sequence of str, optional
        Parameter labels, used in error messages.
    progress : callable, optional
        Passed through to :meth:`DESolver.solve`.

    Returns
    -------
    DEResult

    Raises
    ------
    MissingBoundsError
        If any parameter is FREE; raised before any evaluation.
    """
    lower, upper = derive_search_intervals(params, bounds, names)

    solver = DESolver(lower, upper, config=FIT_POLICY, seed=seed)
    logger.info(
        "Differential evolution: %d parameters, population %d, %d generations (%s, F=%g, CR=%g)",
        solver.dim, solver.pop_size, max_generations,
        FIT_POLICY.strategy.value, FIT_POLICY.weight, FIT_POLICY.crossover,
    )

    result = solver.solve(cost, max_generations, progress=progress)

    if isinstance(params, np.ndarray):
        params[:] = result.x
    else:
        params[:] = [float(v) for v in result.x]

    logger.info(
        "DE finished: best energy = %f after %d evaluations (%.2f s)",
        result.energy, result.n_evaluations, result.time,
    )
    return result
