"""Metric helpers for online training."""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np

from ..core.network import Network
from ..core.types import Array
from ..data.records import RecordSet


def squared_error(predictions: Array, targets: Array) -> float:
    """Sum of squared differences between two vectors."""

    diff = np.asarray(targets, dtype=np.float64) - np.asarray(predictions, dtype=np.float64)
    return float(np.sum(diff * diff))


def select_option(outputs: Array) -> Tuple[int, float]:
    """Return ``(index, certainty)`` of the strongest output.

    Scanning starts at index 0 with certainty 0 and only a strictly larger
    value replaces the current pick, so ties resolve to the lowest index.
    """

    selected, certainty = 0, 0.0
    for index, value in enumerate(np.asarray(outputs, dtype=np.float64)):
        if value > certainty:
            selected, certainty = index, float(value)
    return selected, certainty


def evaluate(network: Network, records: RecordSet) -> Dict[str, float]:
    """Mean squared error and argmax accuracy of ``network`` over ``records``."""

    if len(records) == 0:
        return {"loss": 0.0, "accuracy": 0.0}
    errors = []
    hits = 0
    for record in records:
        outputs = network.compute_output(record.inputs)
        errors.append(squared_error(outputs, record.outputs))
        predicted, _ = select_option(outputs)
        expected, _ = select_option(record.outputs)
        hits += int(predicted == expected)
    return {
        "loss": float(np.mean(errors)),
        "accuracy": hits / len(records),
    }


__all__ = ["evaluate", "select_option", "squared_error"]
