#!/usr/bin/env python3
"""
profilefit Command-Line Interface
=================================

Fit a 1-D surface-brightness profile with differential evolution.

Usage:
    profilefit config.txt profile.dat
    profilefit config.txt profile.dat --generations 1000 --seed 42 -o bestfit.txt
    profilefit --list-functions
    profilefit --list-parameters > template.txt
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from profilefit.errors import ProfileFitError
from profilefit.fitting.diff_evolution import diff_evoln_fit
from profilefit.io.config_reader import read_config_file_with_limits
from profilefit.io.config_writer import write_config
from profilefit.io.profile_reader import read_profile
from profilefit.model.model_object import assemble_model
from profilefit.model.options import FitSettings, apply_config_options
from profilefit.model.registry import (
    build_registry,
    format_function_list,
    format_function_parameters,
)

logger = logging.getLogger("profilefit")


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        value = -1
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got '{text}'")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='profilefit',
        description='Fit a 1-D surface-brightness profile by differential evolution',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fit using settings from the config file
  profilefit config.txt profile.dat

  # Longer run, reproducible, save best-fit config
  profilefit config.txt profile.dat --generations 1000 --seed 42 -o bestfit.txt

  # Template config listing every component and its parameters
  profilefit --list-parameters > template.txt

Every parameter in the config file needs limits ("lower,upper") or the
"fixed" flag: differential evolution searches a finite box.

Config-file options (before the first X0 line):
  ZP / ZEROPOINT  magnitude zero point
  GENERATIONS     generation budget
  SEED            random seed
Command-line values override config-file values.

Environment Variable:
  PROFILEFIT_SEED : default random seed
        """
    )

    parser.add_argument('config_file', type=str, nargs='?',
                        help='configuration file describing the model')
    parser.add_argument('profile_file', type=str, nargs='?',
                        help='profile data: columns x, mu [, error]')

    parser.add_argument('--generations', type=int, default=None,
                        help='number of DE generations to run')
    parser.add_argument('--seed', type=_non_negative_int, default=None,
                        help='random seed for reproducible fits')
    parser.add_argument('--zero-point', type=float, default=None,
                        help='magnitude zero point')

    parser.add_argument('--output', '-o', type=str,
                        help='write best-fit parameters as a config file')

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('--quiet', '-q', action='store_true',
                           help='only report warnings and errors')
    verbosity.add_argument('--debug', action='store_true',
                           help='verbose diagnostic output')

    parser.add_argument('--list-functions', action='store_true',
                        help='list available component names and exit')
    parser.add_argument('--list-parameters', action='store_true',
                        help='list components with their parameter names and exit')
    return parser


def _configure_logging(args) -> None:
    level = logging.INFO
    if args.quiet:
        level = logging.WARNING
    elif args.debug:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(message)s', stream=sys.stdout)


def run_fit(args) -> int:
    settings = FitSettings.from_environment()
    settings.override(
        max_generations=args.generations,
        seed=args.seed,
        zero_point=args.zero_point,
    )

    spec = read_config_file_with_limits(args.config_file, mode_2d=settings.mode_2d)
    apply_config_options(spec.options, settings)

    if settings.max_generations <= 0:
        raise ProfileFitError(f"generations must be positive, got {settings.max_generations}")

    registry = build_registry(zero_point=settings.zero_point)
    model = assemble_model(spec, registry=registry, zero_point=settings.zero_point)

    x, y, errors = read_profile(args.profile_file)
    model.set_data(x, y, errors)
    logger.info("Read %d profile points from %s", len(x), args.profile_file)

    params = np.array(spec.parameters, dtype=np.float64)
    names = model.parameter_names()
    initial_cost = model.evaluate_cost(params)
    logger.info("Initial fit statistic: %g", initial_cost)

    result = diff_evoln_fit(
        params, spec.bounds, model.evaluate_cost, settings.max_generations,
        seed=settings.seed, names=names,
    )

    n_free = sum(1 for b in spec.bounds if not b.is_fixed)
    dof = len(x) - n_free
    print("\nBest-fit parameters:")
    for name, value in zip(names, params):
        print(f"  {name:<12s} = {value:.10g}")
    print(f"\nFinal chi^2 = {result.energy:.6g}")
    if dof > 0:
        print(f"Reduced chi^2 = {result.energy / dof:.6g} ({dof} degrees of freedom)")
    print(f"Generations: {result.generations}, function evaluations: {result.n_evaluations}")

    if args.output:
        write_config(
            args.output, model, params, bounds=spec.bounds, options=spec.options,
            header=[
                f"Best-fit parameters from profilefit (config {Path(args.config_file).name},"
                f" profile {Path(args.profile_file).name})",
                f"chi^2 = {result.energy:.6g}",
            ],
        )
        print(f"Best-fit configuration written to {args.output}")

    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    if args.list_functions or args.list_parameters:
        registry = build_registry()
        if args.list_functions:
            print(format_function_list(registry))
        if args.list_parameters:
            print(format_function_parameters(registry), end="")
        return 0

    if not args.config_file or not args.profile_file:
        parser.error("config_file and profile_file are required unless listing functions")

    for path in (args.config_file, args.profile_file):
        if not Path(path).exists():
            print(f"Error: file not found: {path}", file=sys.stderr)
            return 1

    try:
        return run_fit(args)
    except ProfileFitError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
