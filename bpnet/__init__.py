"""
bpnet package
~~~~~~~~~~~~~

Fully-connected feedforward neural network trained by backpropagation.
Contains the network engine, activation functions, error types,
and environment-driven configuration.
"""

from bpnet.activations import Activation, CustomActivation, Sigmoid
from bpnet.config import TrainingConfig, configure_logging
from bpnet.exceptions import (
    BPNetError,
    InvalidHyperparameter,
    InvalidInput,
    InvalidTopology
)
from bpnet.network import Network, TrainingResult

__version__ = "1.0.0"

__all__ = [
    'Activation',
    'BPNetError',
    'CustomActivation',
    'InvalidHyperparameter',
    'InvalidInput',
    'InvalidTopology',
    'Network',
    'Sigmoid',
    'TrainingConfig',
    'TrainingResult',
    'configure_logging',
]
