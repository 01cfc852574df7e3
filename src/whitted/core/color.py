"""RGB color helpers.

Colors are float64 numpy arrays of shape (3,), unbounded above; tone mapping
happens only when an image is written or displayed.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import numpy.typing as npt

Color = npt.NDArray[np.float64]


def color(r: float = 0.0, g: float = 0.0, b: float = 0.0) -> Color:
    return np.array((r, g, b), dtype=np.float64)


def as_color(value: Sequence[float] | Color) -> Color:
    """Convert a 3-element sequence into a fresh float64 color."""
    array = np.array(value, dtype=np.float64).reshape(-1)
    if array.shape != (3,):
        raise ValueError(f"A color needs 3 channels, got {array.shape[0]}")
    return array


def is_black(c: Color) -> bool:
    return not np.any(c != 0.0)


def channel_sum(c: Color) -> float:
    return float(c[0] + c[1] + c[2])


BLACK = color(0.0, 0.0, 0.0)
WHITE = color(1.0, 1.0, 1.0)
BLACK.flags.writeable = False
WHITE.flags.writeable = False
