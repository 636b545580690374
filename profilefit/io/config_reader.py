"""Parser for profilefit configuration files.

A configuration file has two sections:

1. An optional pre-amble of ``KEYWORD value`` option lines.
2. The function section, starting at the first line whose first token is
   ``X0``.  Each ``X0`` line (followed by a ``Y0`` line in 2-D mode) opens a
   new function set; ``FUNCTION <name>`` lines declare components and every
   other line is a parameter line ``<name> <value> [<limit-spec>]``.

``limit-spec`` is either the literal ``fixed`` or ``<lower>,<upper>``.

Two parser variants share preprocessing, option handling and structural
validation:

- :func:`parse_config` with ``read_limits=False`` (or
  :func:`read_config_file`) keeps only the parameter values;
- :func:`parse_config` with ``read_limits=True`` (or
  :func:`read_config_file_with_limits`) also builds a
  :class:`ParameterBound` for every parameter and reports whether any
  limit-spec appeared in the file.

Any fatal problem raises a :class:`~profilefit.errors.ConfigFileError`
subclass carrying the original 1-based line number where one applies;
nothing is returned from a failed parse.

Example
-------
>>> spec = parse_config('''
... ZP   20.0
... X0   0.0   fixed
... FUNCTION Exponential-1D
... mu_0  18.5  15,22
... h     10    1,50
... ''')
>>> spec.function_names
['Exponential-1D']
>>> spec.parameters
[0.0, 18.5, 10.0]
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Iterable, List, NamedTuple, Optional, Union

from profilefit.errors import (
    BoundValidationError,
    ConfigFileError,
    IncompleteXYError,
    InvalidValueError,
    NoFunctionSectionError,
    NoFunctionsError,
    StructuralConfigError,
)
from profilefit.utils.constants import (
    COMMENT_CHAR,
    FIXED_KEYWORD,
    FUNCTION_KEYWORD,
    LIMIT_SEPARATOR,
    X0_KEYWORD,
    Y0_KEYWORD,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Parsed data model
# ---------------------------------------------------------------------------

class BoundKind(Enum):
    """How a parameter may move during a fit."""
    FREE = auto()
    FIXED = auto()
    LIMITED = auto()


@dataclass(frozen=True)
class ParameterBound:
    """Bound specification for a single parameter.

    Attributes
    ----------
    kind : BoundKind
        FREE, FIXED or LIMITED.
    lower, upper : float or None
        Interval ends; only set for LIMITED.
    """
    kind: BoundKind = BoundKind.FREE
    lower: Optional[float] = None
    upper: Optional[float] = None

    def __post_init__(self):
        if self.kind is BoundKind.LIMITED:
            if self.lower is None or self.upper is None:
                raise ValueError("LIMITED bound needs both lower and upper values")
            if self.lower > self.upper:
                raise ValueError(
                    f"lower limit ({self.lower:g}) must be <= upper limit ({self.upper:g})"
                )
        elif self.lower is not None or self.upper is not None:
            raise ValueError(f"{self.kind.name} bound cannot carry limits")

    @classmethod
    def free(cls) -> "ParameterBound":
        return cls(BoundKind.FREE)

    @classmethod
    def fixed(cls) -> "ParameterBound":
        return cls(BoundKind.FIXED)

    @classmethod
    def limited(cls, lower: float, upper: float) -> "ParameterBound":
        return cls(BoundKind.LIMITED, float(lower), float(upper))

    @property
    def is_free(self) -> bool:
        return self.kind is BoundKind.FREE

    @property
    def is_fixed(self) -> bool:
        return self.kind is BoundKind.FIXED

    @property
    def is_limited(self) -> bool:
        return self.kind is BoundKind.LIMITED

    def contains(self, value: float) -> bool:
        """True if *value* is admissible under this bound (always for FREE/FIXED)."""
        if self.is_limited:
            return self.lower <= value <= self.upper
        return True

    def to_limit_spec(self) -> str:
        """Render as the configuration-file limit-spec ('' for FREE)."""
        if self.is_fixed:
            return FIXED_KEYWORD
        if self.is_limited:
            return f"{self.lower:.10g}{LIMIT_SEPARATOR}{self.upper:.10g}"
        return ""


@dataclass(frozen=True)
class GlobalOption:
    """A ``KEYWORD value`` line from the pre-amble."""
    name: str
    value: str
    line_number: int = 0


@dataclass
class ParsedFunction:
    """A ``FUNCTION`` declaration and the parameter lines that follow it.

    Attributes
    ----------
    name : str
        Component short name as written in the file.
    line_number : int
        Line of the FUNCTION declaration.
    param_start : int
        Index into the flat parameter list of this function's first parameter.
    n_params : int
        Number of parameter lines between this declaration and the next
        FUNCTION or X0 line.
    """
    name: str
    line_number: int
    param_start: int
    n_params: int = 0


@dataclass
class ParsedModelSpec:
    """Complete output of one parse.

    ``parameters``, ``bounds`` and ``parameter_labels`` are one-to-one.
    ``set_starts[k]`` is the index into ``functions`` at which function set
    ``k`` begins; the next start (or the end of ``functions``) ends it.

    The parser fills the lists while parsing and never touches them after
    returning. Consumers treat the result as read-only; code that needs a
    working parameter vector copies ``parameters`` first (as the CLI and
    :func:`~profilefit.fitting.diff_evolution.diff_evoln_fit` callers do).
    """
    functions: List[ParsedFunction] = field(default_factory=list)
    parameters: List[float] = field(default_factory=list)
    bounds: List[ParameterBound] = field(default_factory=list)
    parameter_labels: List[str] = field(default_factory=list)
    set_starts: List[int] = field(default_factory=list)
    options: List[GlobalOption] = field(default_factory=list)
    limits_found: bool = False
    mode_2d: bool = False

    @property
    def function_names(self) -> List[str]:
        return [f.name for f in self.functions]

    @property
    def n_parameters(self) -> int:
        return len(self.parameters)

    def function_sets(self) -> List[List[ParsedFunction]]:
        """Group ``functions`` by function set."""
        ends = self.set_starts[1:] + [len(self.functions)]
        return [self.functions[s:e] for s, e in zip(self.set_starts, ends)]


# ---------------------------------------------------------------------------
# Line preprocessing
# ---------------------------------------------------------------------------

class _Line(NamedTuple):
    number: int
    tokens: List[str]

    @property
    def keyword(self) -> str:
        return self.tokens[0]


def _preprocess(raw_lines: Iterable[str]) -> List[_Line]:
    """Strip comments and whitespace; keep non-empty lines with their numbers."""
    lines = []
    for number, raw in enumerate(raw_lines, start=1):
        text = raw.split(COMMENT_CHAR, 1)[0].strip()
        if text:
            lines.append(_Line(number, text.split()))
    return lines


def _parse_float(token: str, line_number: int, what: str = "value") -> float:
    """Convert a numeric token, accepting Fortran-style 'D' exponents.

    Raises
    ------
    InvalidValueError
        If the token is not a finite number.
    """
    try:
        value = float(token)
    except ValueError:
        try:
            value = float(token.replace('D', 'E').replace('d', 'e'))
        except ValueError:
            raise InvalidValueError(
                f"cannot interpret '{token}' as a numeric {what}",
                line_number=line_number, token=token,
            ) from None
    if not math.isfinite(value):
        raise InvalidValueError(
            f"{what} '{token}' is not finite", line_number=line_number, token=token,
        )
    return value


# ---------------------------------------------------------------------------
# Structural validation
# ---------------------------------------------------------------------------

def _vet_config(lines: List[_Line], mode_2d: bool) -> int:
    """Locate the function section and check its basic shape.

    Returns the index (into *lines*) of the first X0 line.

    Raises
    ------
    NoFunctionSectionError
        No X0 line anywhere.
    IncompleteXYError
        2-D mode and the first X0 line is not followed by Y0.
    NoFunctionsError
        No FUNCTION line at or after the first X0 line.
    """
    start = next((i for i, line in enumerate(lines) if line.keyword == X0_KEYWORD), None)
    if start is None:
        raise NoFunctionSectionError()

    if mode_2d:
        if start + 1 >= len(lines) or lines[start + 1].keyword != Y0_KEYWORD:
            raise IncompleteXYError(lines[start].number)

    if not any(line.keyword == FUNCTION_KEYWORD for line in lines[start:]):
        raise NoFunctionsError()

    return start


def _parse_options(lines: List[_Line]) -> List[GlobalOption]:
    options = []
    for line in lines:
        if len(line.tokens) != 2:
            logger.warning(
                "Ignoring malformed option on line %d (expected 'KEYWORD value'): %s",
                line.number, " ".join(line.tokens),
            )
            continue
        options.append(GlobalOption(line.tokens[0], line.tokens[1], line.number))
    return options


# ---------------------------------------------------------------------------
# Per-parameter-line handlers (the only difference between variants)
# ---------------------------------------------------------------------------

def _split_parameter_line(line: _Line):
    if len(line.tokens) < 2:
        raise StructuralConfigError(
            f"parameter line needs a name and a value, got '{' '.join(line.tokens)}'",
            line_number=line.number, token=line.tokens[0],
        )
    name = line.tokens[0]
    return name, _parse_float(line.tokens[1], line.number, f"value for '{name}'")


def _add_parameter(line: _Line, spec: ParsedModelSpec) -> None:
    """Value-only handler: any limit-spec is ignored."""
    name, value = _split_parameter_line(line)
    spec.parameter_labels.append(name)
    spec.parameters.append(value)
    spec.bounds.append(ParameterBound.free())


def _parse_limit_spec(token: str, name: str, value: float, line_number: int) -> ParameterBound:
    if token == FIXED_KEYWORD:
        return ParameterBound.fixed()

    pieces = token.split(LIMIT_SEPARATOR)
    if len(pieces) != 2:
        raise BoundValidationError(
            f"unrecognized limit specification '{token}' for '{name}' "
            f"(expected '{FIXED_KEYWORD}' or 'lower,upper')",
            parameter_name=name, line_number=line_number, token=token,
        )
    try:
        lower = _parse_float(pieces[0], line_number, "lower limit")
        upper = _parse_float(pieces[1], line_number, "upper limit")
    except InvalidValueError as err:
        raise BoundValidationError(
            f"malformed limits '{token}' for '{name}': {err.message}",
            parameter_name=name, line_number=line_number, token=token,
        ) from None

    if lower > upper:
        raise BoundValidationError(
            f"first parameter limit for '{name}' ({lower:g}) must be <= second limit ({upper:g})",
            parameter_name=name, line_number=line_number, token=token,
        )
    if not lower <= value <= upper:
        raise BoundValidationError(
            f"initial parameter value for '{name}' ({value:g}) must lie between "
            f"the limits ({lower:g},{upper:g})",
            parameter_name=name, line_number=line_number, token=token,
        )
    return ParameterBound.limited(lower, upper)


def _add_parameter_and_limit(line: _Line, spec: ParsedModelSpec) -> None:
    """Full handler: builds a ParameterBound from the optional third token."""
    name, value = _split_parameter_line(line)
    if len(line.tokens) > 2:
        bound = _parse_limit_spec(line.tokens[2], name, value, line.number)
        spec.limits_found = True
    else:
        bound = ParameterBound.free()
    spec.parameter_labels.append(name)
    spec.parameters.append(value)
    spec.bounds.append(bound)


# ---------------------------------------------------------------------------
# Function section
# ---------------------------------------------------------------------------

def _parse_function_section(
    lines: List[_Line],
    mode_2d: bool,
    spec: ParsedModelSpec,
    add_parameter: Callable[[_Line, ParsedModelSpec], None],
) -> None:
    i = 0
    n_lines = len(lines)
    current: Optional[ParsedFunction] = None

    while i < n_lines:
        line = lines[i]

        if line.keyword == X0_KEYWORD:
            spec.set_starts.append(len(spec.functions))
            current = None
            add_parameter(line, spec)
            i += 1
            if mode_2d:
                if i >= n_lines or lines[i].keyword != Y0_KEYWORD:
                    raise IncompleteXYError(line.number)
                add_parameter(lines[i], spec)
                i += 1
            continue

        if line.keyword == FUNCTION_KEYWORD:
            if len(line.tokens) < 2:
                raise StructuralConfigError(
                    "FUNCTION line has no component name",
                    line_number=line.number, token=FUNCTION_KEYWORD,
                )
            current = ParsedFunction(line.tokens[1], line.number, len(spec.parameters))
            spec.functions.append(current)
            i += 1
            continue

        add_parameter(line, spec)
        if current is not None:
            current.n_params += 1
        i += 1


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_config(
    text: Union[str, Iterable[str]],
    mode_2d: bool = False,
    read_limits: bool = True,
) -> ParsedModelSpec:
    """Parse configuration text into a :class:`ParsedModelSpec`.

    Parameters
    ----------
    text : str or iterable of str
        Whole file contents, or an iterable of lines (e.g. an open file).
    mode_2d : bool, default False
        If True every X0 line must be immediately followed by a Y0 line.
    read_limits : bool, default True
        If False, limit-specs are ignored and every bound is FREE.

    Returns
    -------
    ParsedModelSpec

    Raises
    ------
    ConfigFileError
        On any structural, numeric or limit problem.
    """
    if isinstance(text, str):
        text = text.splitlines()
    lines = _preprocess(text)

    start = _vet_config(lines, mode_2d)

    spec = ParsedModelSpec(mode_2d=mode_2d)
    spec.options = _parse_options(lines[:start])

    handler = _add_parameter_and_limit if read_limits else _add_parameter
    _parse_function_section(lines[start:], mode_2d, spec, handler)

    logger.debug(
        "Parsed %d option(s), %d function(s) in %d set(s), %d parameter(s)",
        len(spec.options), len(spec.functions), len(spec.set_starts), len(spec.parameters),
    )
    return spec


def _read_config(path: Union[Path, str], mode_2d: bool, read_limits: bool) -> ParsedModelSpec:
    try:
        with open(path, encoding="utf-8") as f:
            return parse_config(f, mode_2d=mode_2d, read_limits=read_limits)
    except UnicodeDecodeError as err:
        raise ConfigFileError(
            f"configuration file {path} is not valid UTF-8 text "
            f"(byte {err.object[err.start:err.start + 1]!r} at offset {err.start})"
        ) from None


def read_config_file(path: Union[Path, str], mode_2d: bool = False) -> ParsedModelSpec:
    """Read a configuration file, ignoring parameter limits."""
    return _read_config(path, mode_2d, read_limits=False)


def read_config_file_with_limits(path: Union[Path, str], mode_2d: bool = False) -> ParsedModelSpec:
    """Read a configuration file including parameter limits.

    ``spec.limits_found`` reports whether any limit-spec was present.
    """
    return _read_config(path, mode_2d, read_limits=True)
