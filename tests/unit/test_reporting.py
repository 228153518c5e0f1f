import csv
import json

import pytest

from glyphnet.reporting.metrics import EPOCH_FIELDS, CsvSink, JsonlSink, epoch_row
from glyphnet.reporting.plots import PlotAdapter


def test_epoch_row_schema():
    row = epoch_row(2, "train", {"loss": 0.5, "accuracy": 1, "extra": 3.0})
    assert tuple(row) == EPOCH_FIELDS
    assert row == {"epoch": 2, "split": "train", "loss": 0.5, "accuracy": 1.0}
    with pytest.raises(KeyError):
        epoch_row(1, "train", {"loss": 0.5})


def test_jsonl_sink_tags_rows(tmp_path):
    sink = JsonlSink(tmp_path / "m.jsonl", seed=11, sha="abc")
    sink.on_epoch(1, {"loss": 0.25, "accuracy": 0.5})
    sink(2, {"loss": 0.125, "accuracy": 0.75})
    rows = [json.loads(line) for line in (tmp_path / "m.jsonl").read_text().splitlines()]
    assert rows[1] == {
        "epoch": 2,
        "split": "train",
        "loss": 0.125,
        "accuracy": 0.75,
        "seed": 11,
        "sha": "abc",
    }


def test_csv_sink_header_order(tmp_path):
    sink = CsvSink(tmp_path / "m.csv", split="val")
    sink.on_epoch(1, {"accuracy": 0.5, "loss": 0.25})
    sink.on_epoch(2, {"accuracy": 1.0, "loss": 0.0})
    with (tmp_path / "m.csv").open(newline="") as handle:
        reader = csv.reader(handle)
        rows = list(reader)
    assert rows[0] == list(EPOCH_FIELDS)
    assert rows[2] == ["2", "val", "0.0", "1.0"]


def test_plot_adapter_draws_loss_and_accuracy(tmp_path):
    pytest.importorskip("matplotlib")
    adapter = PlotAdapter(tmp_path / "run", enable_plots=True)
    adapter.on_epoch(1, {"loss": 0.4, "accuracy": 0.25})
    adapter.on_epoch(2, {"loss": 0.2, "accuracy": 0.75})
    assert adapter.accuracies == [0.25, 0.75]
    path = adapter.close()
    assert path == tmp_path / "run" / "loss.png"
    assert path.exists()


def test_plot_adapter_disabled_writes_nothing(tmp_path):
    adapter = PlotAdapter(tmp_path / "run")
    adapter.on_epoch(1, {"loss": 0.4, "accuracy": 0.25})
    assert adapter.close() is None
    assert not (tmp_path / "run").exists()
