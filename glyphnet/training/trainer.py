"""Epoch loop of single-example learning steps over a record set."""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np

from ..core.network import Network
from ..core.types import RunResult
from ..data.records import RecordSet
from .metrics import evaluate

_MASK64 = (1 << 64) - 1


def _epoch_rng(seed: int, epoch: int) -> np.random.Generator:
    # Seeds wrap modulo 2**64, as in Prng.
    return np.random.default_rng([int(seed) & _MASK64, epoch])


class Trainer:
    """Run deterministic online training with metric callbacks.

    Each epoch visits every record once, calling :meth:`Network.learn` per
    record, then evaluates the whole set and emits ``loss`` (mean squared
    error) and ``accuracy`` (argmax agreement) to the callbacks.
    """

    def __init__(
        self,
        network: Network,
        rate: float,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        if not 0.0 < rate <= 1.0:
            raise ValueError(f"rate must lie in (0, 1], got {rate}")
        self.network = network
        self.rate = float(rate)
        self.callbacks = list(callbacks or [])

    def run(
        self,
        records: RecordSet,
        epochs: int,
        seed: int,
        *,
        shuffle: bool = True,
    ) -> RunResult:
        if epochs <= 0:
            raise ValueError(f"epochs must be positive, got {epochs}")
        if not records.fits(self.network.input_count, self.network.output_count):
            raise ValueError(
                "record shape does not match network topology: "
                f"records {records.input_count}->{records.output_count}, "
                f"network {self.network.input_count}->{self.network.output_count}"
            )

        history: list[dict] = []
        steps = 0
        try:
            for epoch in range(1, epochs + 1):
                order = np.arange(len(records))
                if shuffle:
                    order = _epoch_rng(seed, epoch).permutation(len(records))
                for index in order:
                    record = records[int(index)]
                    self.network.learn(record.inputs, record.outputs, self.rate)
                    steps += 1
                metrics = evaluate(self.network, records)
                history.append({"epoch": epoch, **metrics})
                self._emit_epoch(epoch, metrics)
        finally:
            for callback in self.callbacks:
                if hasattr(callback, "close"):
                    callback.close()  # type: ignore[attr-defined]
        return RunResult(epochs=epochs, steps=steps, history=history)

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["Trainer"]
