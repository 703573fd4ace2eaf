#!/usr/bin/env python3
"""
Train a small network on an XOR-like dataset and print its predictions.

Usage:
    python scripts/xor_demo.py

The script will:
1. Build a [2, 6, 1] network with hyperparameters from the environment
2. Train it on twelve noisy XOR samples
3. Print the trained network's outputs for the four corners
"""

import os
import sys
from typing import List, Tuple

# Allow running from a source checkout without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bpnet import Network, TrainingConfig, configure_logging

SAMPLES: List[Tuple[List[float], List[float]]] = [
    ([0, 0], [0]), ([0, 1], [1]), ([1, 0], [1]), ([1, 1], [0]),
    ([0.1, 0.1], [0]), ([0.1, 0.9], [1]), ([0.94, 0.11], [1]),
    ([0.92, 0.83], [0]), ([0.23, 0.13], [0]), ([0.13, 0.98], [1]),
    ([0.92, 0.11], [1]), ([0.92, 0.91], [0]),
]


def main() -> int:
    configure_logging()

    config = TrainingConfig.from_env()
    if 'BPNET_MAX_ITERATIONS' not in os.environ:
        config = TrainingConfig(
            learning_rate=config.learning_rate,
            max_iterations=5000,
            error_threshold=config.error_threshold
        )

    net = Network.from_config([2, 6, 1], config)

    inputs = [x for x, _ in SAMPLES]
    targets = [d for _, d in SAMPLES]
    result = net.train(inputs, targets)

    print(f"Trained for {result.epochs} epochs "
          f"(error {result.error}, converged={result.converged})")
    for corner in ([0, 1], [0, 0], [1, 1], [1, 0]):
        print(f"   {corner} -> {net.predict(corner)[0]:.4f}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
