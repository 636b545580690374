"""Exception types raised by profilefit.

Every failure the package detects on its own is a ``ProfileFitError``, so
entry points can report them uniformly. The more specific classes also
derive from the builtin the caller would naturally expect (``ValueError``
for bad input, ``KeyError`` for an unknown component name).
"""

from typing import Optional, Sequence


class ProfileFitError(Exception):
    """Base class for all profilefit errors."""


# ---------------------------------------------------------------------------
# Configuration file errors
# ---------------------------------------------------------------------------

class ConfigFileError(ProfileFitError, ValueError):
    """A configuration file could not be parsed.

    Attributes
    ----------
    line_number : int or None
        1-based line number in the original file, when the problem can be
        traced to a single line.
    token : str or None
        The offending token, if any.
    """

    def __init__(self, message: str, line_number: Optional[int] = None,
                 token: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        self.token = token

    def __str__(self) -> str:
        if self.line_number is not None:
            return f"line {self.line_number}: {self.message}"
        return self.message


class StructuralConfigError(ConfigFileError):
    """The overall layout of the file is wrong."""


class NoFunctionSectionError(StructuralConfigError):
    """No X0 line, so the function section never starts."""

    def __init__(self):
        super().__init__(
            'unable to find start of function section (no "X0" line found)'
        )


class NoFunctionsError(StructuralConfigError):
    """A function section exists but declares no FUNCTION."""

    def __init__(self):
        super().__init__("no FUNCTION lines found in function section")


class IncompleteXYError(StructuralConfigError):
    """In 2-D mode an X0 line is not immediately followed by a Y0 line."""

    def __init__(self, line_number: int):
        super().__init__(
            "X0 specification must be followed by a Y0 specification on the next line",
            line_number=line_number, token="X0",
        )


class BoundValidationError(ConfigFileError):
    """A parameter limit is malformed or inconsistent with its value."""

    def __init__(self, message: str, parameter_name: str, line_number: int,
                 token: Optional[str] = None):
        super().__init__(message, line_number=line_number, token=token)
        self.parameter_name = parameter_name


class InvalidValueError(ConfigFileError):
    """A numeric token could not be converted to a float."""


# ---------------------------------------------------------------------------
# Model assembly errors
# ---------------------------------------------------------------------------

class UnknownComponentError(ProfileFitError, KeyError):
    """A component name is not present in the registry."""

    def __init__(self, name: str, position: Optional[int] = None,
                 known: Sequence[str] = ()):
        self.name = name
        self.position = position
        self.known = list(known)
        super().__init__(name)

    def __str__(self) -> str:
        where = f" (function #{self.position + 1})" if self.position is not None else ""
        msg = f"unidentified function name '{self.name}'{where}"
        if self.known:
            msg += f". Available: {', '.join(self.known)}"
        return msg


class ParameterCountError(ProfileFitError, ValueError):
    """The parsed parameter list does not match what the model needs."""


# ---------------------------------------------------------------------------
# Fitting errors
# ---------------------------------------------------------------------------

class MissingBoundsError(ProfileFitError, ValueError):
    """Differential evolution needs a finite interval for every parameter.

    Attributes
    ----------
    indices : list of int
        Positions of the parameters that have neither limits nor a fixed flag.
    """

    def __init__(self, indices: Sequence[int], names: Optional[Sequence[str]] = None):
        self.indices = list(indices)
        names = list(names or ())
        labels = ", ".join(
            f"{names[i]} (#{i})" if i < len(names) else f"#{i}" for i in self.indices
        )
        super().__init__(
            "parameter limits must be supplied for all parameters when using "
            f"differential evolution; missing for: {labels}"
        )


# ---------------------------------------------------------------------------
# Data errors
# ---------------------------------------------------------------------------

class ProfileDataError(ProfileFitError, ValueError):
    """A profile data file could not be read."""
