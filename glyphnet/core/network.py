"""Fully-connected feedforward network with online backpropagation."""

from __future__ import annotations

import time
from typing import Callable, List, Mapping, Sequence, Tuple

import numpy as np

from .activations import shifted_tanh, shifted_tanh_deriv_from_output
from .prng import Prng
from .types import Array, Topology


def _readonly(array: Array) -> Array:
    view = array.view()
    view.flags.writeable = False
    return view


def _as_vector(values, name: str) -> Array:
    vector = np.asarray(values, dtype=np.float64)
    if vector.ndim != 1:
        raise ValueError(f"{name} must be a flat vector, got shape {vector.shape}")
    return vector


class Network:
    """Multilayer perceptron with a fixed topology.

    Layer ``i`` owns a weight matrix of shape ``(layer_sizes[i], previous)``
    where ``previous`` is the width of layer ``i - 1`` (or ``input_count`` for
    the first layer), and one bias per neuron.  Parameters start at zero; call
    :meth:`randomize` or :meth:`randomize_from_clock` before use.

    Instances are not safe for concurrent use: :meth:`compute_output` reuses
    two scratch buffers allocated at construction.
    """

    def __init__(self, input_count: int, layer_sizes: Sequence[int]) -> None:
        sizes = [int(size) for size in layer_sizes]
        if not sizes:
            raise ValueError("layer_sizes must contain at least one layer")
        if int(input_count) <= 0:
            raise ValueError(f"input_count must be positive, got {input_count}")
        if any(size <= 0 for size in sizes):
            raise ValueError(f"layer sizes must be positive, got {sizes}")

        self._weights: List[Array] = []
        self._biases: List[Array] = []
        previous = int(input_count)
        max_layer_size = previous
        for size in sizes:
            self._weights.append(np.zeros((size, previous), dtype=np.float64))
            self._biases.append(np.zeros(size, dtype=np.float64))
            previous = size
            max_layer_size = max(max_layer_size, size)
        self._max_layer_size = max_layer_size

        # Double buffer for layer-to-layer propagation in compute_output.
        self._front = np.zeros(max_layer_size, dtype=np.float64)
        self._back = np.zeros(max_layer_size, dtype=np.float64)

    # ------------------------------------------------------------------
    # Introspection

    @property
    def weights(self) -> Tuple[Array, ...]:
        return tuple(_readonly(W) for W in self._weights)

    @property
    def biases(self) -> Tuple[Array, ...]:
        return tuple(_readonly(b) for b in self._biases)

    @property
    def max_layer_size(self) -> int:
        return self._max_layer_size

    @property
    def input_count(self) -> int:
        return int(self._weights[0].shape[1])

    @property
    def output_count(self) -> int:
        return int(self._weights[-1].shape[0])

    @property
    def layer_sizes(self) -> Tuple[int, ...]:
        return tuple(int(W.shape[0]) for W in self._weights)

    @property
    def layer_count(self) -> int:
        return len(self._weights)

    @property
    def topology(self) -> Topology:
        return Topology(input_count=self.input_count, layer_sizes=self.layer_sizes)

    def parameter_count(self) -> int:
        return int(sum(W.size + b.size for W, b in zip(self._weights, self._biases)))

    # ------------------------------------------------------------------
    # Initialisation

    def randomize(self, seed: int) -> None:
        """Fill every parameter with quantised uniform draws from ``[-1, 1)``.

        All weights are drawn first (layer, neuron, input order), then all
        biases (layer, neuron order).
        """

        rng = Prng(seed)
        for params in (self._weights, self._biases):
            for array in params:
                flat = np.fromiter(
                    (rng.next_float(-1.0, 1.0) for _ in range(array.size)),
                    dtype=np.float64,
                    count=array.size,
                )
                array[...] = flat.reshape(array.shape)

    def randomize_from_clock(self, clock: Callable[[], float] | None = None) -> int:
        """Randomise using the whole-second reading of ``clock`` as the seed.

        ``clock`` defaults to :func:`time.time`.  Calls within the same second
        produce identical parameters.  Returns the seed that was used.
        """

        seed = int((clock or time.time)())
        self.randomize(seed)
        return seed

    # ------------------------------------------------------------------
    # Inference

    def compute_output_for_layer(self, layer_index: int, inputs: Array, outputs: Array) -> None:
        """Write ``activation(bias + weights @ inputs)`` for one layer.

        Only the leading ``len(weights[layer_index][0])`` entries of ``inputs``
        are read and only the leading ``layer_sizes[layer_index]`` entries of
        ``outputs`` are written, so both may be longer scratch buffers.
        """

        if not 0 <= layer_index < len(self._weights):
            raise IndexError(f"layer_index {layer_index} out of range for {len(self._weights)} layers")
        W = self._weights[layer_index]
        b = self._biases[layer_index]
        neuron_count, input_count = W.shape

        inputs = _as_vector(inputs, "inputs")
        if inputs.shape[0] < input_count:
            raise ValueError(
                f"layer {layer_index} expects at least {input_count} inputs, got {inputs.shape[0]}"
            )
        if not isinstance(outputs, np.ndarray) or outputs.ndim != 1:
            raise ValueError("outputs must be a flat numpy array")
        if not np.issubdtype(outputs.dtype, np.floating) or not outputs.flags.writeable:
            raise ValueError(f"outputs must be a writeable float array, got {outputs.dtype}")
        if outputs.shape[0] < neuron_count:
            raise ValueError(
                f"layer {layer_index} writes {neuron_count} outputs, buffer holds {outputs.shape[0]}"
            )
        if np.may_share_memory(inputs, outputs):
            raise ValueError("inputs and outputs must not share memory")

        target = outputs[:neuron_count]
        np.matmul(W, inputs[:input_count], out=target)
        target += b
        shifted_tanh(target, out=target)

    def compute_output(self, inputs) -> Array:
        """Run a full forward pass and return a fresh vector of outputs."""

        x = self._check_inputs(inputs)
        front, back = self._front, self._back
        front[: x.shape[0]] = x
        for layer_index in range(len(self._weights)):
            self.compute_output_for_layer(layer_index, front, back)
            front, back = back, front
        # After the final swap the last layer's outputs sit in ``front``.
        return front[: self.output_count].copy()

    # ------------------------------------------------------------------
    # Learning

    def learn(self, inputs, target_outputs, rate: float) -> None:
        """Nudge parameters towards ``target_outputs`` with one backprop step."""

        if not 0.0 < rate <= 1.0:
            raise ValueError(f"rate must lie in (0, 1], got {rate}")
        x = self._check_inputs(inputs)
        targets = _as_vector(target_outputs, "target_outputs")
        if targets.shape[0] != self.output_count:
            raise ValueError(
                f"expected {self.output_count} target outputs, got {targets.shape[0]}"
            )

        layer_outputs: List[Array] = []
        layer_input = x
        for layer_index, W in enumerate(self._weights):
            out = np.empty(W.shape[0], dtype=np.float64)
            self.compute_output_for_layer(layer_index, layer_input, out)
            layer_outputs.append(out)
            layer_input = out

        error = targets - layer_outputs[-1]
        for layer_index in reversed(range(len(self._weights))):
            W = self._weights[layer_index]
            b = self._biases[layer_index]
            layer_input = layer_outputs[layer_index - 1] if layer_index else x
            derivative = shifted_tanh_deriv_from_output(layer_outputs[layer_index])
            # Error for the previous layer uses the weights before correction.
            next_error = W.T @ error
            scale = rate * error * derivative
            W += np.outer(scale, layer_input)
            b += scale
            error = next_error

    # ------------------------------------------------------------------
    # Parameter migration

    def state_dict(self) -> Mapping[str, Array]:
        state = {f"W{idx}": W.copy() for idx, W in enumerate(self._weights)}
        state.update({f"b{idx}": b.copy() for idx, b in enumerate(self._biases)})
        return state

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        staged: List[Tuple[Array, Array]] = []
        for idx, (W, b) in enumerate(zip(self._weights, self._biases)):
            for key, current in ((f"W{idx}", W), (f"b{idx}", b)):
                if key not in state:
                    raise KeyError(f"Missing parameter {key} in state dict")
                value = np.asarray(state[key], dtype=np.float64)
                if value.shape != current.shape:
                    raise ValueError(f"{key} has shape {value.shape}, expected {current.shape}")
                staged.append((current, value))
        for current, value in staged:
            current[...] = value

    def copy(self) -> "Network":
        clone = Network(self.input_count, self.layer_sizes)
        clone.load_state_dict(self.state_dict())
        return clone

    def _check_inputs(self, inputs) -> Array:
        x = _as_vector(inputs, "inputs")
        if x.shape[0] != self.input_count:
            raise ValueError(f"expected {self.input_count} inputs, got {x.shape[0]}")
        return x

    def __repr__(self) -> str:
        return f"Network(input_count={self.input_count}, layer_sizes={list(self.layer_sizes)})"


__all__ = ["Network"]
