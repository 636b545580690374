"""Runtime fit settings and the handler for configuration-file options.

Option lines in a configuration file (``KEYWORD value``) are collected by
the parser without interpretation. :func:`apply_config_options` turns the
recognized ones into :class:`FitSettings` fields. Values already set on
the command line win over the file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Set

from profilefit.errors import ConfigFileError
from profilefit.io.config_reader import GlobalOption
from profilefit.utils.constants import (
    DEFAULT_MAX_GENERATIONS,
    DEFAULT_ZERO_POINT,
    SEED_ENV_VAR,
)

logger = logging.getLogger(__name__)


@dataclass
class FitSettings:
    """Settings for one fit.

    Attributes
    ----------
    zero_point : float
        Magnitude zero point for mu <-> intensity conversion.
    max_generations : int
        Differential-evolution generation budget.
    seed : int or None
        Random seed; None draws fresh entropy.
    mode_2d : bool
        Whether configuration files must pair every X0 with a Y0.
    overridden : set of str
        Fields set on the command line; config-file values for these are ignored.
    """
    zero_point: float = DEFAULT_ZERO_POINT
    max_generations: int = DEFAULT_MAX_GENERATIONS
    seed: Optional[int] = None
    mode_2d: bool = False
    overridden: Set[str] = field(default_factory=set)

    @classmethod
    def from_environment(cls, **kwargs) -> "FitSettings":
        """Build settings, taking a default seed from $PROFILEFIT_SEED."""
        settings = cls(**kwargs)
        env_seed = os.environ.get(SEED_ENV_VAR)
        if settings.seed is None and env_seed:
            try:
                seed = int(env_seed)
            except ValueError:
                seed = -1
            if seed < 0:
                logger.warning("Ignoring %s=%r (not a non-negative integer)", SEED_ENV_VAR, env_seed)
            else:
                settings.seed = seed
        return settings

    def override(self, **values) -> None:
        """Set fields from the command line and mark them as overriding the file."""
        for name, value in values.items():
            if value is None:
                continue
            if not hasattr(self, name):
                raise AttributeError(f"FitSettings has no field '{name}'")
            setattr(self, name, value)
            self.overridden.add(name)


def _to_float(option: GlobalOption) -> float:
    try:
        return float(option.value)
    except ValueError:
        raise ConfigFileError(
            f"{option.name} should be a number, got '{option.value}'",
            line_number=option.line_number or None, token=option.value,
        ) from None


def _to_int(option: GlobalOption, minimum: Optional[int] = None) -> int:
    try:
        value = int(option.value)
    except ValueError:
        value = None
    if value is None or (minimum is not None and value < minimum):
        kind = {None: "an integer", 0: "a non-negative integer", 1: "a positive integer"}.get(
            minimum, f"an integer >= {minimum}")
        raise ConfigFileError(
            f"{option.name} should be {kind}, got '{option.value}'",
            line_number=option.line_number or None, token=option.value,
        )
    return value


# keyword -> (FitSettings field, converter)
_OPTION_HANDLERS: Dict[str, tuple] = {
    'ZP': ('zero_point', _to_float),
    'ZEROPOINT': ('zero_point', _to_float),
    'GENERATIONS': ('max_generations', lambda opt: _to_int(opt, minimum=1)),
    'SEED': ('seed', lambda opt: _to_int(opt, minimum=0)),
}


def apply_config_options(options: Iterable[GlobalOption], settings: FitSettings) -> FitSettings:
    """Apply configuration-file options to *settings* (modified in place).

    Parameters
    ----------
    options : iterable of GlobalOption
        Options in file order; later duplicates win.
    settings : FitSettings
        Settings to update.

    Returns
    -------
    FitSettings
        The same *settings* object.

    Raises
    ------
    ConfigFileError
        If a recognized keyword has an invalid value.
    """
    for option in options:
        handler = _OPTION_HANDLERS.get(option.name.upper())
        if handler is None:
            logger.info('Unknown keyword ("%s") in config file ignored', option.name)
            continue

        field_name, convert = handler
        value = convert(option)
        if field_name in settings.overridden:
            logger.info(
                "%s value in config file ignored (using command-line value %s)",
                option.name, getattr(settings, field_name),
            )
            continue
        logger.info("Value from config file: %s = %s", field_name, value)
        setattr(settings, field_name, value)

    return settings
