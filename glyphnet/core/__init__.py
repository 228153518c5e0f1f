"""Core numerical primitives for glyphnet."""

from . import activations, network, prng, types

__all__ = ["activations", "network", "prng", "types"]
