"""Pure in-memory record sets."""

from __future__ import annotations

import numpy as np

from .records import RecordSet, one_hot


def make_xor_records() -> RecordSet:
    """The four XOR examples with a single target output."""

    records = RecordSet(2, 1)
    for a in (0.0, 1.0):
        for b in (0.0, 1.0):
            records.add([a, b], [float(a != b)])
    return records


def make_stroke_records(
    width: int = 16,
    height: int = 16,
    classes: int = 10,
    per_class: int = 4,
    seed: int = 0,
    noise: float = 0.1,
) -> RecordSet:
    """Glyph-like buffers where class ``c`` is a vertical stroke in column band ``c``.

    Columns are split into ``classes`` bands; each example lights its band at
    full brightness over a random run of rows and adds uniform background
    noise of amplitude ``noise``.
    """

    if classes > width:
        raise ValueError(f"cannot place {classes} strokes in {width} columns")
    rng = np.random.default_rng(seed)
    bands = np.array_split(np.arange(width), classes)
    records = RecordSet(width * height, classes)
    for label, band in enumerate(bands):
        for _ in range(per_class):
            glyph = rng.uniform(0.0, noise, size=(height, width))
            top = int(rng.integers(0, height // 4 + 1))
            bottom = int(rng.integers(height - height // 4, height + 1))
            glyph[top:bottom, band] = 1.0
            records.add(glyph.reshape(-1), one_hot(label, classes))
    return records


__all__ = ["make_stroke_records", "make_xor_records"]
