"""
activations.py
~~~~~~~~~~~~~~

Squashing functions and their derivatives.

The derivative of every activation is expressed in terms of the
already-computed activation value ``a``, not the pre-activation sum.
For the logistic sigmoid this gives ``a * (1 - a)``. Caller-supplied
pairs must follow the same convention.
"""

from typing import Callable, Optional, Union

import numpy as np

ArrayFunction = Callable[[np.ndarray], np.ndarray]


class Activation:
    """An activation function paired with its derivative."""

    name = 'activation'

    def function(self, x: np.ndarray) -> np.ndarray:
        """Map pre-activation sums to activations."""
        raise NotImplementedError

    def derivative(self, a: np.ndarray) -> np.ndarray:
        """Derivative of the activation, given the activation value."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Sigmoid(Activation):
    """Logistic sigmoid, the default activation."""

    name = 'sigmoid'

    def function(self, x: np.ndarray) -> np.ndarray:
        # exp overflows to inf for large negative x, giving the correct 0.0
        with np.errstate(over='ignore'):
            return 1.0 / (1.0 + np.exp(-x))

    def derivative(self, a: np.ndarray) -> np.ndarray:
        return a * (1.0 - a)


class CustomActivation(Activation):
    """Wraps a caller-supplied ``(fn, fd)`` pair."""

    name = 'custom'

    def __init__(self, fn: ArrayFunction, fd: ArrayFunction):
        """
        Args:
            fn: Activation function applied to pre-activation sums
            fd: Derivative, called with the post-activation value
        """
        self.fn = fn
        self.fd = fd

    def function(self, x: np.ndarray) -> np.ndarray:
        return np.asarray(self.fn(x), dtype=float)

    def derivative(self, a: np.ndarray) -> np.ndarray:
        return np.asarray(self.fd(a), dtype=float)

    def __repr__(self) -> str:
        return f"CustomActivation(fn={self.fn!r}, fd={self.fd!r})"


def resolve_activation(
    activation: Union[Activation, ArrayFunction, None] = None,
    derivative: Optional[ArrayFunction] = None
) -> Activation:
    """
    Pick the activation strategy for a network.

    Args:
        activation: ``None`` for the sigmoid default, an ``Activation``
            instance, or a plain function
        derivative: Derivative function; required when ``activation`` is
            a plain function and not allowed otherwise

    Returns:
        Activation: The strategy the network will use

    Raises:
        ValueError: If the combination of arguments is incomplete
    """
    if isinstance(activation, Activation):
        if derivative is not None:
            raise ValueError(
                "activation_derivative must not be given together with "
                "an Activation instance"
            )
        return activation

    if activation is None and derivative is None:
        return Sigmoid()

    if activation is None or derivative is None:
        raise ValueError(
            "activation and activation_derivative must be supplied together"
        )

    if not callable(activation) or not callable(derivative):
        raise ValueError("activation and activation_derivative must be callable")

    return CustomActivation(activation, derivative)
