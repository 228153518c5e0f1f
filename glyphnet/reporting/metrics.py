"""Per-epoch training metric files.

Every row follows one schema, :data:`EPOCH_FIELDS`: the epoch number, the
split it was measured on, the mean squared error over the record set
(``loss``) and the argmax agreement (``accuracy``).  JSON lines additionally
carry the run seed and the code revision.
"""

from __future__ import annotations

import csv
import json
import subprocess
from pathlib import Path
from typing import Dict, Mapping

EPOCH_FIELDS = ("epoch", "split", "loss", "accuracy")


def git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except Exception:  # pragma: no cover - git may be unavailable in tests
        return "unknown"


def epoch_row(epoch: int, split: str, metrics: Mapping[str, float]) -> Dict[str, object]:
    """Build one schema row; ``metrics`` must hold ``loss`` and ``accuracy``."""

    missing = [name for name in ("loss", "accuracy") if name not in metrics]
    if missing:
        raise KeyError(f"epoch metrics lack {', '.join(missing)}")
    return {
        "epoch": int(epoch),
        "split": split,
        "loss": float(metrics["loss"]),
        "accuracy": float(metrics["accuracy"]),
    }


class _EpochFile:
    def __init__(self, path: str | Path, split: str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.split = split

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        row = epoch_row(epoch, self.split, metrics)
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            self._write(handle, row)

    def _write(self, handle, row: Dict[str, object]) -> None:
        raise NotImplementedError

    __call__ = on_epoch


class JsonlSink(_EpochFile):
    """One JSON object per epoch, tagged with the run seed and git revision."""

    def __init__(
        self,
        path: str | Path,
        *,
        split: str = "train",
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        super().__init__(path, split)
        self.tags = {"seed": seed, "sha": sha or git_sha()}

    def _write(self, handle, row: Dict[str, object]) -> None:
        handle.write(json.dumps({**row, **self.tags}) + "\n")


class CsvSink(_EpochFile):
    """CSV with a header of :data:`EPOCH_FIELDS` in that order."""

    def _write(self, handle, row: Dict[str, object]) -> None:
        writer = csv.DictWriter(handle, fieldnames=EPOCH_FIELDS)
        if handle.tell() == 0:
            writer.writeheader()
        writer.writerow(row)


__all__ = ["CsvSink", "EPOCH_FIELDS", "JsonlSink", "epoch_row", "git_sha"]
