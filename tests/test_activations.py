"""
test_activations.py
~~~~~~~~~~~~~~~~~~~

Unit tests for activation strategies and how the network uses them.
"""

import pytest
import os
import sys
import warnings

import numpy as np

# Add repository root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bpnet import Activation, CustomActivation, Network, Sigmoid
from bpnet.activations import resolve_activation


@pytest.mark.unit
class TestSigmoid:
    """Test the default activation pair."""

    def test_function_values(self):
        """Test sigmoid at a few known points."""
        sigmoid = Sigmoid()
        assert sigmoid.function(np.array([0.0]))[0] == 0.5
        assert np.isclose(sigmoid.function(np.array([2.0]))[0], 1 / (1 + np.exp(-2.0)))

    def test_derivative_takes_activation(self):
        """Test that the derivative is a * (1 - a) of the activation value."""
        sigmoid = Sigmoid()
        a = np.array([0.5, 0.2, 0.9])
        assert np.allclose(sigmoid.derivative(a), a * (1 - a))

    def test_saturates_without_warnings(self):
        """Test that extreme sums saturate to 0 and 1 without overflow warnings."""
        sigmoid = Sigmoid()
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            values = sigmoid.function(np.array([-1000.0, 1000.0]))
        assert np.array_equal(values, [0.0, 1.0])

    def test_network_predicts_extreme_input_without_warnings(self):
        """Test that a forward pass with a huge negative sum raises no warning."""
        net = Network([1, 1], seed=0)
        net.weights[0][:] = [[1.0]]
        net.biases[0][:] = [0.0]
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            output = net.predict([-1000.0])
        assert output[0] == 0.0

    def test_base_class_is_abstract(self):
        """Test that the base strategy has no implementation."""
        with pytest.raises(NotImplementedError):
            Activation().function(np.zeros(1))
        with pytest.raises(NotImplementedError):
            Activation().derivative(np.zeros(1))


@pytest.mark.unit
class TestResolveActivation:
    """Test the choice between the default and a caller-supplied pair."""

    def test_default_is_sigmoid(self):
        assert isinstance(resolve_activation(), Sigmoid)

    def test_instance_passes_through(self):
        sigmoid = Sigmoid()
        assert resolve_activation(sigmoid) is sigmoid

    def test_function_pair(self):
        activation = resolve_activation(np.tanh, lambda a: 1 - a ** 2)
        assert isinstance(activation, CustomActivation)
        assert np.allclose(activation.function(np.array([0.3])), np.tanh(0.3))

    @pytest.mark.parametrize('fn, fd', [
        (np.tanh, None),
        (None, lambda a: 1 - a ** 2),
        ('tanh', 'tanh_prime'),
        (Sigmoid(), lambda a: a),
    ])
    def test_incomplete_pair_rejected(self, fn, fd):
        """Test that half a pair or non-callables raise ValueError."""
        with pytest.raises(ValueError):
            resolve_activation(fn, fd)

    def test_network_rejects_incomplete_pair(self):
        with pytest.raises(ValueError):
            Network([2, 1], activation=np.tanh)


@pytest.mark.unit
class TestCustomActivationInNetwork:
    """Test that a network honors a caller-supplied pair."""

    def test_forward_uses_custom_function(self):
        """Test that forward applies the supplied function."""
        net = Network([2, 3, 1], activation=np.tanh,
                      activation_derivative=lambda a: 1 - a ** 2, seed=6)
        x = np.array([0.4, -0.7])
        trace = net.forward(x)
        hidden = np.tanh(net.weights[0] @ x + net.biases[0])
        assert np.allclose(trace[1], hidden)
        assert np.allclose(trace[2], np.tanh(net.weights[1] @ hidden + net.biases[1]))

    def test_derivative_receives_activations(self):
        """Test that the derivative is called with post-activation values."""
        seen = []

        def derivative(a):
            seen.append(np.array(a, copy=True))
            return a * (1 - a)

        net = Network([2, 3, 1], activation=Sigmoid().function,
                      activation_derivative=derivative, seed=6)
        trace = net.forward([0.4, 0.7])
        net.compute_deltas([1.0], trace)

        # Output layer first, then the hidden layer.
        assert len(seen) == 2
        assert np.array_equal(seen[0], trace[2])
        assert np.array_equal(seen[1], trace[1])

    def test_activation_instance(self):
        """Test passing an Activation subclass directly."""

        class Identity(Activation):
            name = 'identity'

            def function(self, x):
                return x

            def derivative(self, a):
                return np.ones_like(a)

        net = Network([2, 1], activation=Identity(), seed=0)
        net.weights[0][:] = [[1.0, 2.0]]
        net.biases[0][:] = [0.5]
        assert np.allclose(net.predict([1.0, 1.0]), [3.5])
