"""Writer for profilefit configuration files.

Writes a model and a parameter vector back out in the configuration-file
grammar, so the best-fit result of one run can be the starting point of
the next. Parameter limits are preserved when given.
"""

from datetime import datetime
from pathlib import Path
from typing import IO, List, Optional, Sequence, Union

from profilefit.io.config_reader import GlobalOption, ParameterBound
from profilefit.utils.constants import FUNCTION_KEYWORD, X0_KEYWORD


def _fmt_line(name: str, value: float, bound: Optional[ParameterBound] = None) -> str:
    """Format a single parameter line: NAME VALUE [LIMIT-SPEC]."""
    line = f"{name:<12s}{value:<20.10g}"
    if bound is not None:
        spec = bound.to_limit_spec()
        if spec:
            line += f"  {spec}"
    return line.rstrip()


def format_config(
    model,
    params: Sequence[float],
    bounds: Optional[Sequence[ParameterBound]] = None,
    options: Sequence[GlobalOption] = (),
    header: Optional[Sequence[str]] = None,
) -> str:
    """Render *model* with *params* as configuration-file text.

    Parameters
    ----------
    model : ModelObject
        Supplies function sets, component names and parameter labels.
    params : sequence of float
        Flat parameter vector (length ``model.total_parameter_count()``).
    bounds : sequence of ParameterBound, optional
        Limit-specs to write alongside the values.
    options : sequence of GlobalOption
        Pre-amble option lines.
    header : sequence of str, optional
        Comment lines placed at the top (without the leading '#').
    """
    model.check_parameter_count(len(params))
    if bounds is not None and len(bounds) != len(params):
        raise ValueError(f"got {len(params)} values but {len(bounds)} bounds")

    lines: List[str] = []
    if header is None:
        header = [f"Best-fit parameters written {datetime.now().isoformat(timespec='seconds')}"]
    lines.extend(f"# {text}" for text in header)

    if options:
        lines.append("")
        lines.extend(f"{opt.name}  {opt.value}" for opt in options)

    i = 0

    def _next(name):
        nonlocal i
        text = _fmt_line(name, params[i], bounds[i] if bounds is not None else None)
        i += 1
        return text

    for _, components in model.iter_sets():
        lines.append("")
        lines.append(_next(X0_KEYWORD))
        for component in components:
            lines.append(f"{FUNCTION_KEYWORD} {component.short_name}")
            for name in component.parameter_names():
                lines.append(_next(name))

    return "\n".join(lines) + "\n"


def write_config(
    dest: Union[Path, str, IO[str]],
    model,
    params: Sequence[float],
    bounds: Optional[Sequence[ParameterBound]] = None,
    options: Sequence[GlobalOption] = (),
    header: Optional[Sequence[str]] = None,
) -> None:
    """Write :func:`format_config` output to a path or open text stream."""
    text = format_config(model, params, bounds=bounds, options=options, header=header)
    if hasattr(dest, "write"):
        dest.write(text)
    else:
        Path(dest).write_text(text)
