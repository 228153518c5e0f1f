"""Editing state for a bound network: inputs, targets and example records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

import numpy as np

from ..core.network import Network
from ..core.types import Array
from ..data import records as record_io
from ..data.records import RecordSet, one_hot
from .metrics import select_option

logger = logging.getLogger(__name__)

MIN_LEARNING_RATE = 0.01
MAX_LEARNING_RATE = 1.0


def _resized(vector: Array, size: int) -> Array:
    out = np.zeros(size, dtype=np.float64)
    count = min(size, vector.shape[0])
    out[:count] = vector[:count]
    return out


class NetworkEditor:
    """Hold the working input/target vectors and records for one network.

    The editor does not own the network; :meth:`rebind` points it at another
    instance and resizes the working buffers to the new topology.
    """

    def __init__(self, network: Network, learning_rate: float = 0.1) -> None:
        self._network = network
        self.learning_rate = learning_rate
        self.learn_continuously = False
        self.inputs = np.zeros(network.input_count, dtype=np.float64)
        self.target_outputs = np.zeros(network.output_count, dtype=np.float64)
        self.records = RecordSet(network.input_count, network.output_count)

    @property
    def network(self) -> Network:
        return self._network

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @learning_rate.setter
    def learning_rate(self, value: float) -> None:
        if not MIN_LEARNING_RATE <= value <= MAX_LEARNING_RATE:
            raise ValueError(
                f"learning_rate must lie in [{MIN_LEARNING_RATE}, {MAX_LEARNING_RATE}], got {value}"
            )
        self._learning_rate = float(value)

    def rebind(self, network: Network) -> None:
        self._network = network
        self.inputs = _resized(self.inputs, network.input_count)
        self.target_outputs = _resized(self.target_outputs, network.output_count)
        if not self.records.fits(network.input_count, network.output_count):
            logger.info("Dropping %d records that do not fit the new topology", len(self.records))
            self.records = RecordSet(network.input_count, network.output_count)

    def set_inputs(self, values) -> None:
        """Copy the leading values of ``values`` into the working inputs."""

        values = np.asarray(values, dtype=np.float64).reshape(-1)
        count = min(values.shape[0], self.inputs.shape[0])
        self.inputs[:count] = values[:count]

    def set_target(self, index: int) -> None:
        self.target_outputs = one_hot(index, self._network.output_count)

    def set_target_outputs(self, values) -> None:
        values = np.asarray(values, dtype=np.float64).reshape(-1)
        if values.shape[0] != self._network.output_count:
            raise ValueError(
                f"expected {self._network.output_count} target outputs, got {values.shape[0]}"
            )
        self.target_outputs = values.copy()

    def randomize(self, seed: int | None = None) -> int:
        if seed is None:
            return self._network.randomize_from_clock()
        self._network.randomize(seed)
        return seed

    def step(self) -> None:
        self._network.learn(self.inputs, self.target_outputs, self._learning_rate)

    def tick(self) -> bool:
        """Learn once if continuous learning is on; return whether it did."""

        if self.learn_continuously:
            self.step()
            return True
        return False

    def compute_output(self) -> Array:
        return self._network.compute_output(self.inputs)

    def classify(self, inputs=None) -> Tuple[int, float]:
        source = self.inputs if inputs is None else inputs
        return select_option(self._network.compute_output(source))

    def add_record(self, inputs, outputs) -> None:
        self.records.add(inputs, outputs)

    def load_records(self, path: str | Path) -> bool:
        try:
            self.records = record_io.load_records(
                path, self._network.input_count, self._network.output_count
            )
        except (OSError, ValueError) as exc:
            logger.warning("Could not load records from %s: %s", path, exc)
            return False
        return True

    def save_records(self, path: str | Path) -> bool:
        try:
            record_io.save_records(path, self.records)
        except OSError as exc:
            logger.warning("Could not save records to %s: %s", path, exc)
            return False
        return True


__all__ = ["NetworkEditor"]
