"""
exceptions.py
~~~~~~~~~~~~~

Errors raised at the public API boundary of the network.
"""


class BPNetError(Exception):
    """Base class for all errors raised by bpnet."""


class InvalidTopology(BPNetError, ValueError):
    """Layer widths or layer count do not describe a valid network."""


class InvalidInput(BPNetError, ValueError):
    """A sample or target vector does not match the expected layer width."""


class InvalidHyperparameter(BPNetError, ValueError):
    """Learning rate, iteration budget or error threshold is out of range."""
