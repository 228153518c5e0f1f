"""Deterministic SplitMix64 pseudo-random number generator.

The generator carries a single 64-bit state word.  :meth:`Prng.next` is the
only operation that advances it; every bounded draw is derived from that
stream, and each ``peek*`` variant computes the same value from a copy of the
state.  Identical seeds always produce identical sequences, which is what
makes :meth:`glyphnet.core.network.Network.randomize` reproducible.

See http://xoroshiro.di.unimi.it/splitmix64.c for the reference algorithm.
"""

from __future__ import annotations

from typing import Tuple

_MASK64 = (1 << 64) - 1
_GOLDEN_GAMMA = 0x9E3779B97F4A7C15
_MIX1 = 0xBF58476D1CE4E5B9
_MIX2 = 0x94D049BB133111EB


def _splitmix64(state: int) -> Tuple[int, int]:
    """Return ``(new_state, output)`` for one SplitMix64 step."""

    state = (state + _GOLDEN_GAMMA) & _MASK64
    z = state
    z = ((z ^ (z >> 30)) * _MIX1) & _MASK64
    z = ((z ^ (z >> 27)) * _MIX2) & _MASK64
    return state, z ^ (z >> 31)


def _check_range(lo, hi) -> None:
    if not hi > lo:
        raise ValueError(f"Empty range: expected lo < hi, got lo={lo!r}, hi={hi!r}")


class Prng:
    """SplitMix64 generator with quantised uniform helpers.

    Parameters
    ----------
    seed:
        Initial state.  Reduced modulo ``2**64``, so negative Python ints wrap
        the same way an unsigned 64-bit conversion would.
    bits:
        Width of the values returned by :meth:`next`.  Results are the low
        ``bits`` bits of the mixed 64-bit word.
    """

    def __init__(self, seed: int, *, bits: int = 64) -> None:
        if not 1 <= bits <= 64:
            raise ValueError(f"bits must be within [1, 64], got {bits}")
        self._state = int(seed) & _MASK64
        self._bits = bits
        self._mask = (1 << bits) - 1

    @property
    def state(self) -> int:
        return self._state

    @property
    def bits(self) -> int:
        return self._bits

    def next(self) -> int:
        self._state, value = _splitmix64(self._state)
        return value & self._mask

    def peek(self) -> int:
        _, value = _splitmix64(self._state)
        return value & self._mask

    def next_int(self, lo: int, hi: int) -> int:
        """Return an integer in ``[lo, hi)`` as ``lo + next() % (hi - lo)``."""

        _check_range(lo, hi)
        return lo + self.next() % (hi - lo)

    def peek_int(self, lo: int, hi: int) -> int:
        _check_range(lo, hi)
        return lo + self.peek() % (hi - lo)

    def next_float(self, lo: float = 0.0, hi: float = 1.0, steps: int = 1024) -> float:
        """Return one of ``steps`` evenly spaced values in ``[lo, hi)``.

        The draw is quantised: the granularity is ``(hi - lo) / steps``.
        """

        _check_range(lo, hi)
        if steps <= 0:
            raise ValueError(f"steps must be positive, got {steps}")
        return lo + (self.next() % steps) * (hi - lo) / float(steps)

    def peek_float(self, lo: float = 0.0, hi: float = 1.0, steps: int = 1024) -> float:
        _check_range(lo, hi)
        if steps <= 0:
            raise ValueError(f"steps must be positive, got {steps}")
        return lo + (self.peek() % steps) * (hi - lo) / float(steps)

    def __repr__(self) -> str:
        return f"Prng(state={self._state:#018x}, bits={self._bits})"


__all__ = ["Prng"]
