"""
network.py
~~~~~~~~~~

A fully-connected feedforward neural network trained with the generalized
delta rule. Training is plain online gradient descent: every sample runs a
forward pass, a backward pass and an in-place parameter update before the
next sample is seen.

Layer ``l`` (for ``l >= 1``) owns a weight matrix of shape
``(sizes[l], sizes[l-1])`` and a bias vector of shape ``(sizes[l],)``,
stored at index ``l - 1`` of ``weights`` and ``biases``. Layer 0 is the
input and has no parameters.
"""

import time
import logging
import numbers
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import numpy as np

from bpnet.activations import Activation, ArrayFunction, resolve_activation
from bpnet.config import (
    DEFAULT_ERROR_THRESHOLD,
    DEFAULT_LEARNING_RATE,
    DEFAULT_MAX_ITERATIONS,
    TrainingConfig,
    validate_hyperparameters
)
from bpnet.exceptions import InvalidInput, InvalidTopology

logger = logging.getLogger(__name__)

EpochCallback = Callable[[Dict[str, Any]], None]


@dataclass(frozen=True)
class TrainingResult:
    """Outcome of a call to ``Network.train``."""

    epochs: int
    error: Optional[float]
    converged: bool


def _check_sizes(sizes: Any, layer_count: Optional[int]) -> List[int]:
    """Validate layer widths and return them as a list of ints."""
    if (isinstance(sizes, (str, bytes))
            or not isinstance(sizes, (SequenceABC, np.ndarray))):
        raise InvalidTopology(
            f"Layer sizes must be a sequence of integers, got {type(sizes).__name__}"
        )
    if layer_count is not None and layer_count != len(sizes):
        raise InvalidTopology(
            f"Declared {layer_count} layers but got {len(sizes)} sizes"
        )
    if len(sizes) < 2:
        raise InvalidTopology(
            f"Network needs at least an input and an output layer, got {len(sizes)}"
        )
    for size in sizes:
        if (isinstance(size, bool)
                or not isinstance(size, numbers.Integral)
                or size < 1):
            raise InvalidTopology(
                f"Layer sizes must be positive integers, got {list(sizes)}"
            )
    return [int(size) for size in sizes]


def _as_vector(values: Any, width: int, what: str) -> np.ndarray:
    """Copy ``values`` into a 1-D float array of length ``width``."""
    try:
        vector = np.array(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"{what} is not a numeric vector: {e}") from e

    if vector.ndim != 1 or vector.shape[0] != width:
        raise InvalidInput(
            f"{what} must be a vector of length {width}, "
            f"got shape {vector.shape}"
        )
    return vector


class Network:
    """
    Feedforward network with per-sample backpropagation.

    Example:
        >>> net = Network([2, 6, 1], learning_rate=0.5, max_iterations=5000)
        >>> result = net.train([[0, 0], [0, 1]], [[0], [1]])
        >>> net.predict([0, 1])
    """

    def __init__(
        self,
        sizes: Sequence[int],
        activation: Union[Activation, ArrayFunction, None] = None,
        activation_derivative: Optional[ArrayFunction] = None,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        error_threshold: float = DEFAULT_ERROR_THRESHOLD,
        layer_count: Optional[int] = None,
        seed: Optional[int] = None
    ):
        """
        Create a network with weights and biases drawn uniformly from [0, 1).

        Args:
            sizes: Width of every layer, input first and output last
            activation: Activation strategy, or a plain function paired
                with ``activation_derivative``. Defaults to the sigmoid.
            activation_derivative: Derivative of ``activation``, called
                with the activation value rather than the weighted sum
            learning_rate: Step size applied to every update (> 0)
            max_iterations: Maximum number of training epochs (>= 0)
            error_threshold: Training stops once an epoch's cumulative
                error is strictly below this value (>= 0)
            layer_count: Optional declared number of layers, checked
                against ``len(sizes)``
            seed: Seed for parameter initialization

        Raises:
            InvalidTopology: If the layer sizes are malformed
            InvalidHyperparameter: If a hyperparameter is out of range
            ValueError: If the activation arguments are incomplete
        """
        try:
            self._sizes = _check_sizes(sizes, layer_count)
            validate_hyperparameters(
                learning_rate, max_iterations, error_threshold
            )
        except ValueError as e:
            logger.warning(f"Rejected network configuration: {e}")
            raise

        self._activation = resolve_activation(activation, activation_derivative)
        self._learning_rate = float(learning_rate)
        self._max_iterations = int(max_iterations)
        self._error_threshold = float(error_threshold)

        rng = np.random.default_rng(seed)
        self.weights: List[np.ndarray] = [
            rng.random((n_out, n_in))
            for n_in, n_out in zip(self._sizes[:-1], self._sizes[1:])
        ]
        self.biases: List[np.ndarray] = [
            rng.random(n_out) for n_out in self._sizes[1:]
        ]

        logger.info(
            f"Created network with architecture {self._sizes}, "
            f"activation={self._activation.name}, "
            f"learning_rate={self._learning_rate}, "
            f"max_iterations={self._max_iterations}, "
            f"error_threshold={self._error_threshold}"
        )

    @classmethod
    def from_config(
        cls,
        sizes: Sequence[int],
        config: TrainingConfig,
        **kwargs: Any
    ) -> 'Network':
        """Create a network using the hyperparameters in ``config``."""
        return cls(sizes, **config.as_kwargs(), **kwargs)

    @property
    def sizes(self) -> List[int]:
        return list(self._sizes)

    @property
    def num_layers(self) -> int:
        return len(self._sizes)

    @property
    def activation(self) -> Activation:
        return self._activation

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @property
    def error_threshold(self) -> float:
        return self._error_threshold

    def __repr__(self) -> str:
        return (
            f"Network(sizes={self._sizes}, activation={self._activation!r}, "
            f"learning_rate={self._learning_rate})"
        )

    # ========================================================================
    # FORWARD PASS
    # ========================================================================

    def forward(self, x: Sequence[float]) -> List[np.ndarray]:
        """
        Propagate one sample through the network.

        Args:
            x: Input vector of length ``sizes[0]``

        Returns:
            list: Activation trace; entry 0 is a copy of the input and
            entry ``l`` holds the outputs of layer ``l``

        Raises:
            InvalidInput: If ``x`` is not a vector of the input width
        """
        return self._forward(self._input_vector(x))

    def predict(self, x: Sequence[float]) -> np.ndarray:
        """Return the output layer's activations for ``x``."""
        return self.forward(x)[-1]

    def _forward(self, x: np.ndarray) -> List[np.ndarray]:
        trace = [x]
        for w, b in zip(self.weights, self.biases):
            trace.append(self._activation.function(w @ trace[-1] + b))
        return trace

    # ========================================================================
    # BACKWARD PASS
    # ========================================================================

    def compute_deltas(
        self,
        target: Sequence[float],
        trace: Sequence[np.ndarray]
    ) -> List[np.ndarray]:
        """
        Back-propagate the output error into per-neuron deltas.

        Args:
            target: Desired output vector of length ``sizes[-1]``
            trace: Activation trace produced by ``forward`` for the same sample

        Returns:
            list: ``L - 1`` arrays; entry ``l - 1`` holds the deltas of layer ``l``

        Raises:
            InvalidInput: If the target or trace does not fit the network
        """
        d = self._target_vector(target)
        self._check_trace(trace)
        return self._deltas(d, [np.asarray(layer, dtype=float) for layer in trace])

    def _deltas(
        self,
        d: np.ndarray,
        trace: Sequence[np.ndarray]
    ) -> List[np.ndarray]:
        fd = self._activation.derivative
        output = trace[-1]

        deltas = [(d - output) * fd(output)]
        # Hidden layers L-2 down to 1; weights[l] belongs to layer l + 1.
        for l in range(self.num_layers - 2, 0, -1):
            downstream = self.weights[l].T @ deltas[0]
            deltas.insert(0, fd(trace[l]) * downstream)
        return deltas

    def update(
        self,
        trace: Sequence[np.ndarray],
        deltas: Sequence[np.ndarray]
    ) -> None:
        """
        Apply one step of the delta rule to every weight and bias, in place.

        Args:
            trace: Activation trace of the sample
            deltas: Deltas computed from the same trace
        """
        self._check_trace(trace)
        if len(deltas) != self.num_layers - 1:
            raise InvalidInput(
                f"Expected {self.num_layers - 1} delta vectors, got {len(deltas)}"
            )
        for delta, size in zip(deltas, self._sizes[1:]):
            if np.shape(delta) != (size,):
                raise InvalidInput(
                    f"Delta vector has shape {np.shape(delta)}, expected ({size},)"
                )
        self._update(
            [np.asarray(layer, dtype=float) for layer in trace],
            [np.asarray(delta, dtype=float) for delta in deltas]
        )

    def _update(
        self,
        trace: Sequence[np.ndarray],
        deltas: Sequence[np.ndarray]
    ) -> None:
        miu = self._learning_rate
        for w, b, delta, activation_in in zip(
                self.weights, self.biases, deltas, trace[:-1]):
            w += miu * np.outer(delta, activation_in)
            b += miu * delta

    # ========================================================================
    # TRAINING
    # ========================================================================

    def train(
        self,
        inputs: Sequence[Sequence[float]],
        targets: Sequence[Sequence[float]],
        callback: Optional[EpochCallback] = None
    ) -> TrainingResult:
        """
        Train on every sample in order until the error threshold or the
        iteration budget is reached.

        Each epoch sums half the squared output error of every sample,
        measured before that sample's update. Training stops as soon as
        that sum is strictly below ``error_threshold``.

        Args:
            inputs: Input vectors
            targets: Target vectors, parallel to ``inputs``
            callback: Called after each epoch with a dict holding
                'epoch', 'total_epochs', 'error' and 'elapsed_time'

        Returns:
            TrainingResult: Epochs run, last epoch error and whether the
            threshold was met

        Raises:
            InvalidInput: If the sample counts differ or any vector has
                the wrong width
        """
        samples = self._training_samples(inputs, targets)

        start_time = time.time()
        epochs_run = 0
        epoch_error: Optional[float] = None
        converged = False

        for epoch in range(self._max_iterations):
            epoch_error = 0.0
            for x, d in samples:
                trace = self._forward(x)
                deltas = self._deltas(d, trace)
                self._update(trace, deltas)
                epoch_error += 0.5 * float(np.sum((d - trace[-1]) ** 2))

            epochs_run = epoch + 1
            logger.debug(f"Epoch {epochs_run}/{self._max_iterations}: error {epoch_error}")

            if callback is not None:
                callback({
                    'epoch': epochs_run,
                    'total_epochs': self._max_iterations,
                    'error': epoch_error,
                    'elapsed_time': time.time() - start_time
                })

            if epoch_error < self._error_threshold:
                converged = True
                break

        logger.info(
            f"Training finished after {epochs_run} epochs: "
            f"error={epoch_error}, converged={converged}"
        )
        return TrainingResult(
            epochs=epochs_run, error=epoch_error, converged=converged
        )

    def sample_error(self, x: Sequence[float], d: Sequence[float]) -> float:
        """Half the squared error of the current output for one sample."""
        target = self._target_vector(d)
        output = self.predict(x)
        return 0.5 * float(np.sum((target - output) ** 2))

    def total_error(
        self,
        inputs: Sequence[Sequence[float]],
        targets: Sequence[Sequence[float]]
    ) -> float:
        """Sum of ``sample_error`` over a dataset, without training."""
        return sum(
            self.sample_error(x, d)
            for x, d in self._training_samples(inputs, targets)
        )

    # ========================================================================
    # VALIDATION
    # ========================================================================

    def _input_vector(self, x: Any) -> np.ndarray:
        try:
            return _as_vector(x, self._sizes[0], 'Input')
        except InvalidInput as e:
            logger.warning(f"Rejected input: {e}")
            raise

    def _target_vector(self, d: Any) -> np.ndarray:
        try:
            return _as_vector(d, self._sizes[-1], 'Target')
        except InvalidInput as e:
            logger.warning(f"Rejected target: {e}")
            raise

    def _check_trace(self, trace: Sequence[np.ndarray]) -> None:
        if len(trace) != self.num_layers:
            raise InvalidInput(
                f"Activation trace must have {self.num_layers} layers, "
                f"got {len(trace)}"
            )
        for l, (layer, size) in enumerate(zip(trace, self._sizes)):
            if np.shape(layer) != (size,):
                raise InvalidInput(
                    f"Activation trace layer {l} has shape {np.shape(layer)}, "
                    f"expected ({size},)"
                )

    def _training_samples(self, inputs: Any, targets: Any) -> List[tuple]:
        inputs = list(inputs)
        targets = list(targets)
        if len(inputs) != len(targets):
            logger.warning(
                f"Rejected training set: {len(inputs)} inputs "
                f"but {len(targets)} targets"
            )
            raise InvalidInput(
                f"Got {len(inputs)} inputs but {len(targets)} targets"
            )
        return [
            (self._input_vector(x), self._target_vector(d))
            for x, d in zip(inputs, targets)
        ]
