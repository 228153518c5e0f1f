from typing import Mapping

import numpy as np
import pytest

from glyphnet.core.network import Network
from glyphnet.data.records import RecordSet
from glyphnet.data.synthetic import make_stroke_records, make_xor_records
from glyphnet.training.trainer import Trainer


class _Capture:
    def __init__(self) -> None:
        self.history: list[tuple[int, Mapping[str, float]]] = []
        self.closed = False

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.history.append((epoch, dict(metrics)))

    def close(self) -> None:
        self.closed = True


def test_trainer_emits_metrics_per_epoch():
    network = Network(2, [4, 1])
    network.randomize(7)
    capture = _Capture()
    plain: list[int] = []
    trainer = Trainer(network, rate=0.5, callbacks=[capture, lambda epoch, _: plain.append(epoch)])
    result = trainer.run(make_xor_records(), epochs=3, seed=0)
    assert result.epochs == 3
    assert result.steps == 12
    assert [epoch for epoch, _ in capture.history] == [1, 2, 3]
    assert plain == [1, 2, 3]
    assert capture.closed
    assert result.history[-1]["loss"] == capture.history[-1][1]["loss"]


def test_training_is_reproducible():
    def run():
        network = Network(64, [8, 4])
        network.randomize(1337)
        records = make_stroke_records(width=8, height=8, classes=4, per_class=3, seed=1)
        Trainer(network, rate=0.1).run(records, epochs=4, seed=9)
        return network.state_dict()

    first, second = run(), run()
    for key in first:
        np.testing.assert_array_equal(first[key], second[key])


def test_training_reduces_loss_on_strokes():
    network = Network(64, [8, 4])
    network.randomize(1337)
    records = make_stroke_records(width=8, height=8, classes=4, per_class=3, seed=1)
    result = Trainer(network, rate=0.2).run(records, epochs=60, seed=0)
    losses = [entry["loss"] for entry in result.history]
    assert losses[-1] < losses[0]
    assert 0.0 <= result.history[-1]["accuracy"] <= 1.0


def test_trainer_rejects_bad_arguments():
    network = Network(2, [1])
    with pytest.raises(ValueError):
        Trainer(network, rate=0.0)
    trainer = Trainer(network, rate=0.1)
    with pytest.raises(ValueError):
        trainer.run(make_xor_records(), epochs=0, seed=0)
    with pytest.raises(ValueError):
        trainer.run(RecordSet(3, 1), epochs=1, seed=0)


def test_negative_seed_wraps_and_stays_reproducible():
    def run(seed):
        network = Network(2, [4, 1])
        network.randomize(seed)
        result = Trainer(network, rate=0.5).run(make_xor_records(), epochs=2, seed=seed)
        return result, network.state_dict()

    result, first = run(-5)
    assert result.steps == 8
    _, second = run(-5)
    _, wrapped = run(2**64 - 5)
    for key in first:
        np.testing.assert_array_equal(first[key], second[key])
        np.testing.assert_array_equal(first[key], wrapped[key])


def test_callbacks_closed_when_learning_fails(monkeypatch):
    network = Network(2, [4, 1])
    network.randomize(7)
    capture = _Capture()

    def broken_learn(*_args, **_kwargs):
        raise RuntimeError("learning failed")

    monkeypatch.setattr(network, "learn", broken_learn)
    with pytest.raises(RuntimeError):
        Trainer(network, rate=0.5, callbacks=[capture]).run(make_xor_records(), epochs=2, seed=0)
    assert capture.closed
    assert capture.history == []
