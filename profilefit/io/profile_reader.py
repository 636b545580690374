"""Reader for 1-D profile data files.

Whitespace-separated columns ``x  y  [error]``; ``#`` starts a comment.
Extra columns beyond the third are ignored.
"""

from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

from profilefit.errors import ProfileDataError


def read_profile(
    path: Union[Path, str],
) -> Tuple[np.ndarray, np.ndarray, Optional[np.ndarray]]:
    """Read a profile file.

    Returns
    -------
    x, y : np.ndarray
    errors : np.ndarray or None
        None when the file has only two columns.

    Raises
    ------
    ProfileDataError
        If the file is missing, empty, or not numeric.
    """
    path = Path(path)
    if not path.exists():
        raise ProfileDataError(f"profile file not found: {path}")

    try:
        data = np.loadtxt(path, comments='#', ndmin=2)
    except ValueError as err:
        raise ProfileDataError(f"cannot read profile file {path}: {err}") from None

    if data.size == 0:
        raise ProfileDataError(f"profile file {path} contains no data")
    if data.shape[1] < 2:
        raise ProfileDataError(f"profile file {path} needs at least two columns (x y)")

    errors = data[:, 2].copy() if data.shape[1] >= 3 else None
    return data[:, 0].copy(), data[:, 1].copy(), errors
