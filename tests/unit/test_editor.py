import numpy as np
import pytest

from glyphnet.core.network import Network
from glyphnet.training.editor import NetworkEditor


def _editor(rate=0.1):
    network = Network(4, [3, 2])
    network.randomize(1337)
    return NetworkEditor(network, learning_rate=rate)


def test_buffers_follow_topology():
    editor = _editor()
    assert editor.inputs.shape == (4,)
    assert editor.target_outputs.shape == (2,)
    assert not editor.learn_continuously


@pytest.mark.parametrize("rate", [0.0, 0.005, 1.01])
def test_learning_rate_bounds(rate):
    with pytest.raises(ValueError):
        _editor(rate)


def test_set_inputs_copies_leading_values():
    editor = _editor()
    editor.set_inputs([1.0, 2.0])
    np.testing.assert_array_equal(editor.inputs, [1.0, 2.0, 0.0, 0.0])
    editor.set_inputs([5.0, 6.0, 7.0, 8.0, 9.0])
    np.testing.assert_array_equal(editor.inputs, [5.0, 6.0, 7.0, 8.0])


def test_targets():
    editor = _editor()
    editor.set_target(1)
    np.testing.assert_array_equal(editor.target_outputs, [0.0, 1.0])
    editor.set_target_outputs([0.3, 0.7])
    np.testing.assert_array_equal(editor.target_outputs, [0.3, 0.7])
    with pytest.raises(ValueError):
        editor.set_target_outputs([1.0])


def test_step_and_tick_learn():
    editor = _editor(rate=0.5)
    editor.set_inputs([0.2, 0.4, 0.6, 0.8])
    editor.set_target(0)
    before = editor.network.state_dict()
    assert editor.tick() is False
    np.testing.assert_array_equal(editor.network.state_dict()["W0"], before["W0"])

    editor.learn_continuously = True
    assert editor.tick() is True
    assert not np.array_equal(editor.network.state_dict()["W1"], before["W1"])

    error_before = np.sum((editor.target_outputs - editor.compute_output()) ** 2)
    for _ in range(50):
        editor.step()
    assert np.sum((editor.target_outputs - editor.compute_output()) ** 2) < error_before


def test_randomize_with_and_without_seed(monkeypatch):
    editor = _editor()
    assert editor.randomize(5) == 5
    reference = Network(4, [3, 2])
    reference.randomize(5)
    np.testing.assert_array_equal(editor.network.weights[0], reference.weights[0])

    monkeypatch.setattr("time.time", lambda: 1234.5)
    assert editor.randomize() == 1234


def test_classify_picks_strongest_output():
    editor = _editor()
    outputs = editor.network.compute_output(editor.inputs)
    index, certainty = editor.classify()
    assert index == int(np.argmax(outputs))
    assert certainty == pytest.approx(float(outputs.max()))


def test_rebind_resizes_and_drops_unfit_records():
    editor = _editor()
    editor.set_inputs([1.0, 2.0, 3.0, 4.0])
    editor.add_record([0.0, 0.1, 0.2, 0.3], [1.0, 0.0])

    same_shape = Network(4, [5, 2])
    editor.rebind(same_shape)
    assert editor.network is same_shape
    assert len(editor.records) == 1

    wider = Network(6, [3, 3])
    editor.rebind(wider)
    np.testing.assert_array_equal(editor.inputs, [1.0, 2.0, 3.0, 4.0, 0.0, 0.0])
    assert editor.target_outputs.shape == (3,)
    assert len(editor.records) == 0
    assert editor.records.fits(6, 3)


def test_record_files(tmp_path):
    editor = _editor()
    editor.add_record([0.0, 0.1, 0.2, 0.3], [1.0, 0.0])
    editor.add_record([0.3, 0.2, 0.1, 0.0], [0.0, 1.0])
    path = tmp_path / "examples.csv"
    assert editor.save_records(path)

    fresh = _editor()
    assert fresh.load_records(path)
    assert len(fresh.records) == 2
    assert not fresh.load_records(tmp_path / "missing.csv")
    assert len(fresh.records) == 2

    mismatched = NetworkEditor(Network(3, [2]))
    assert not mismatched.load_records(path)
