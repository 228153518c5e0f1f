"""Headless training curve for loss and accuracy."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping


class PlotAdapter:
    """Record per-epoch loss and accuracy; draw ``loss.png`` on close.

    The figure has two stacked panels sharing the epoch axis.  Nothing is
    collected or written unless ``enable_plots`` is set.
    """

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.epochs: List[int] = []
        self.losses: List[float] = []
        self.accuracies: List[float] = []

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if not self.enable_plots:
            return
        self.epochs.append(int(epoch))
        self.losses.append(float(metrics["loss"]))
        self.accuracies.append(float(metrics.get("accuracy", 0.0)))

    def close(self) -> Path | None:
        if not self.enable_plots or not self.epochs:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        fig, (loss_ax, acc_ax) = plt.subplots(2, 1, sharex=True, figsize=(6, 6))
        loss_ax.plot(self.epochs, self.losses, color="tab:red")
        loss_ax.set_ylabel("Mean squared error")
        acc_ax.plot(self.epochs, self.accuracies, color="tab:blue")
        acc_ax.set_ylim(0.0, 1.05)
        acc_ax.set_ylabel("Accuracy")
        acc_ax.set_xlabel("Epoch")
        fig.suptitle("Training curve")
        self.run_dir.mkdir(parents=True, exist_ok=True)
        path = self.run_dir / "loss.png"
        fig.savefig(path)
        plt.close(fig)
        return path

    __call__ = on_epoch
