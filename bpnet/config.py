"""
config.py
~~~~~~~~~

Environment-driven configuration for training hyperparameters and logging.

Recognized environment variables:
- LOG_LEVEL: logging level name, defaults to INFO
- BPNET_LEARNING_RATE: learning rate, defaults to 0.5
- BPNET_MAX_ITERATIONS: maximum number of epochs, defaults to 500
- BPNET_ERROR_THRESHOLD: convergence threshold, defaults to 0.0001
"""

import os
import logging
import numbers
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from bpnet.exceptions import InvalidHyperparameter

logger = logging.getLogger(__name__)

DEFAULT_LEARNING_RATE = 0.5
DEFAULT_MAX_ITERATIONS = 500
DEFAULT_ERROR_THRESHOLD = 0.0001


def configure_logging(level: Optional[str] = None) -> None:
    """
    Set up logging for applications built on bpnet.

    The library itself only creates module loggers; scripts call this
    once at startup.

    Args:
        level: Level name such as 'DEBUG'. Falls back to the LOG_LEVEL
            environment variable, then to INFO.
    """
    log_level_str = (level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logging.getLogger('bpnet').setLevel(log_level)


def validate_hyperparameters(
    learning_rate: Any,
    max_iterations: Any,
    error_threshold: Any
) -> None:
    """
    Check that training hyperparameters are in range.

    Raises:
        InvalidHyperparameter: If any value is out of range or of the wrong type
    """
    if (isinstance(learning_rate, bool)
            or not isinstance(learning_rate, numbers.Real)
            or not learning_rate > 0):
        raise InvalidHyperparameter(
            f"learning_rate must be a positive number, got {learning_rate!r}"
        )
    if (isinstance(max_iterations, bool)
            or not isinstance(max_iterations, numbers.Integral)
            or max_iterations < 0):
        raise InvalidHyperparameter(
            f"max_iterations must be a non-negative integer, "
            f"got {max_iterations!r}"
        )
    if (isinstance(error_threshold, bool)
            or not isinstance(error_threshold, numbers.Real)
            or not error_threshold >= 0):
        raise InvalidHyperparameter(
            f"error_threshold must be a non-negative number, "
            f"got {error_threshold!r}"
        )


def _read_env(name: str, convert, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return convert(raw.strip())
    except ValueError:
        raise InvalidHyperparameter(
            f"Environment variable {name}={raw!r} is not a valid "
            f"{convert.__name__}"
        ) from None


@dataclass(frozen=True)
class TrainingConfig:
    """Hyperparameters fixed for the lifetime of a network."""

    learning_rate: float = DEFAULT_LEARNING_RATE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    error_threshold: float = DEFAULT_ERROR_THRESHOLD

    def __post_init__(self):
        validate_hyperparameters(
            self.learning_rate, self.max_iterations, self.error_threshold
        )

    @classmethod
    def from_env(cls, prefix: str = 'BPNET_') -> 'TrainingConfig':
        """
        Build a config from environment variables.

        Args:
            prefix: Prefix for the variable names

        Returns:
            TrainingConfig: Config with unset variables left at their defaults

        Raises:
            InvalidHyperparameter: If a variable cannot be parsed or is out of range
        """
        config = cls(
            learning_rate=_read_env(
                f'{prefix}LEARNING_RATE', float, DEFAULT_LEARNING_RATE
            ),
            max_iterations=_read_env(
                f'{prefix}MAX_ITERATIONS', int, DEFAULT_MAX_ITERATIONS
            ),
            error_threshold=_read_env(
                f'{prefix}ERROR_THRESHOLD', float, DEFAULT_ERROR_THRESHOLD
            )
        )
        logger.debug(f"Loaded training config from environment: {config}")
        return config

    def as_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments accepted by ``Network``."""
        return asdict(self)
