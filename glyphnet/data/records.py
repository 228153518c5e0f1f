"""Collections of labelled training records and their CSV form."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

import numpy as np
import pandas as pd

from ..core.types import Array, TrainingRecord

logger = logging.getLogger(__name__)

INPUT_PREFIX = "in_"
OUTPUT_PREFIX = "out_"


def one_hot(index: int, size: int) -> Array:
    """Return a target vector of length ``size`` with ``1.0`` at ``index``."""

    if not 0 <= index < size:
        raise ValueError(f"index {index} out of range for {size} outputs")
    out = np.zeros(size, dtype=np.float64)
    out[index] = 1.0
    return out


class RecordSet:
    """Ordered, appendable set of records sharing one network topology."""

    def __init__(self, input_count: int, output_count: int, records: Iterable[TrainingRecord] = ()) -> None:
        self.input_count = int(input_count)
        self.output_count = int(output_count)
        self._records: List[TrainingRecord] = []
        for record in records:
            self.append(record)

    def add(self, inputs, outputs) -> TrainingRecord:
        record = TrainingRecord(inputs=inputs, outputs=outputs)
        self.append(record)
        return record

    def append(self, record: TrainingRecord) -> None:
        if record.inputs.shape[0] != self.input_count:
            raise ValueError(
                f"record has {record.inputs.shape[0]} inputs, expected {self.input_count}"
            )
        if record.outputs.shape[0] != self.output_count:
            raise ValueError(
                f"record has {record.outputs.shape[0]} outputs, expected {self.output_count}"
            )
        self._records.append(record)

    def clear(self) -> None:
        self._records.clear()

    def fits(self, input_count: int, output_count: int) -> bool:
        return self.input_count == input_count and self.output_count == output_count

    def as_arrays(self) -> Tuple[Array, Array]:
        """Stack the records into ``(inputs, outputs)`` matrices."""

        if not self._records:
            return (
                np.zeros((0, self.input_count), dtype=np.float64),
                np.zeros((0, self.output_count), dtype=np.float64),
            )
        X = np.stack([record.inputs for record in self._records])
        Y = np.stack([record.outputs for record in self._records])
        return X, Y

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TrainingRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> TrainingRecord:
        return self._records[index]


def _columns(input_count: int, output_count: int) -> List[str]:
    return [f"{INPUT_PREFIX}{i}" for i in range(input_count)] + [
        f"{OUTPUT_PREFIX}{i}" for i in range(output_count)
    ]


def save_records(path: str | Path, records: RecordSet) -> str:
    """Write ``records`` as CSV with ``in_*`` then ``out_*`` columns."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    X, Y = records.as_arrays()
    frame = pd.DataFrame(
        np.hstack([X, Y]), columns=_columns(records.input_count, records.output_count)
    )
    frame.to_csv(path, index=False, float_format="%.17g")
    logger.info("Saved %d records to %s", len(records), path)
    return str(path)


def load_records(
    path: str | Path,
    input_count: int | None = None,
    output_count: int | None = None,
) -> RecordSet:
    """Read a CSV written by :func:`save_records`.

    When ``input_count`` / ``output_count`` are given the file must match
    them exactly.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Record file not found: {path}")
    frame = pd.read_csv(path, float_precision="round_trip")
    in_cols = [c for c in frame.columns if str(c).startswith(INPUT_PREFIX)]
    out_cols = [c for c in frame.columns if str(c).startswith(OUTPUT_PREFIX)]
    if list(frame.columns) != _columns(len(in_cols), len(out_cols)):
        raise ValueError(f"Unexpected column layout in {path}")
    if input_count is not None and len(in_cols) != input_count:
        raise ValueError(f"{path} holds {len(in_cols)} inputs per record, expected {input_count}")
    if output_count is not None and len(out_cols) != output_count:
        raise ValueError(f"{path} holds {len(out_cols)} outputs per record, expected {output_count}")

    X = frame[in_cols].to_numpy(dtype=np.float64)
    Y = frame[out_cols].to_numpy(dtype=np.float64)
    records = RecordSet(len(in_cols), len(out_cols))
    for inputs, outputs in zip(X, Y):
        records.add(inputs, outputs)
    logger.info("Loaded %d records from %s", len(records), path)
    return records


__all__ = ["RecordSet", "load_records", "one_hot", "save_records"]
