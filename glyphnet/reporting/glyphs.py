"""Text rendering of glyph brightness buffers."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

BRIGHTNESS_LEVELS: Sequence[str] = ("  ", "`,", "::", "[]", "WM")


def render_brightness(buffer, width: int | None = None, height: int | None = None) -> str:
    """Render a row-major brightness buffer in ``[0, 1]`` as text.

    Each cell becomes two characters picked from :data:`BRIGHTNESS_LEVELS`.
    Square buffers may omit ``width`` and ``height``.
    """

    values = np.asarray(buffer, dtype=np.float64).reshape(-1)
    if width is None and height is None:
        side = math.isqrt(values.shape[0])
        if side * side != values.shape[0]:
            raise ValueError(f"cannot infer a square shape for {values.shape[0]} cells")
        width = height = side
    elif width is None:
        width = values.shape[0] // height
    elif height is None:
        height = values.shape[0] // width
    if width * height != values.shape[0]:
        raise ValueError(f"{width}x{height} does not match {values.shape[0]} cells")

    levels = len(BRIGHTNESS_LEVELS)
    indices = np.clip((values * levels).astype(np.int64), 0, levels - 1).reshape(height, width)
    return "\n".join("".join(BRIGHTNESS_LEVELS[i] for i in row) for row in indices)
