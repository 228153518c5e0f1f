"""Core typing contracts for glyphnet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class Topology:
    """Shape of a fully-connected network: input width plus layer widths."""

    input_count: int
    layer_sizes: Sequence[int]

    @property
    def output_count(self) -> int:
        return int(self.layer_sizes[-1])

    @property
    def max_layer_size(self) -> int:
        return max([int(self.input_count), *(int(size) for size in self.layer_sizes)])


@dataclass(frozen=True)
class TrainingRecord:
    """A single labelled example: network inputs and the desired outputs."""

    inputs: Array
    outputs: Array

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", np.array(self.inputs, dtype=np.float64).reshape(-1))
        object.__setattr__(self, "outputs", np.array(self.outputs, dtype=np.float64).reshape(-1))


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`glyphnet.training.trainer.Trainer.run`."""

    epochs: int
    steps: int
    metrics_path: str = ""
    manifest_path: str = ""
    history: List[dict] = field(default_factory=list)
