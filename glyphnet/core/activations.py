"""Activation utilities for glyphnet."""

from __future__ import annotations

import numpy as np

from .types import Array


def shifted_tanh(x: Array, out: Array | None = None) -> Array:
    """Return ``0.5 * (tanh(x) + 1)``, a tanh rescaled onto ``(0, 1)``."""

    y = np.tanh(x, out=out)
    y += 1.0
    y *= 0.5
    return y


def shifted_tanh_deriv_from_output(y: Array) -> Array:
    """Derivative of :func:`shifted_tanh` expressed through its output ``y``."""

    return 2.0 * y * (1.0 - y)
