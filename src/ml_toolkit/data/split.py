from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..configs.base import SplitConfig
from ..errors import ConfigurationError, DimensionalityError
from ..instrumentation.logger import RunLogger
from .dataset import load_labels, load_matrix, save_labels, save_matrix


@dataclass
class SplitResult:
    """Train/test partition of a column-major dataset and its optional labels."""

    train: np.ndarray
    test: np.ndarray
    train_labels: Optional[np.ndarray] = None
    test_labels: Optional[np.ndarray] = None
    train_indices: Optional[np.ndarray] = None
    test_indices: Optional[np.ndarray] = None


SEED_MODULUS = 2**64


def resolve_seed(seed: Optional[int]) -> int:
    """Return ``seed``, or the current time when it is zero or missing."""
    return int(seed) if seed else int(time.time())


def seeded_generator(seed: int) -> np.random.Generator:
    # Negative seeds wrap around like an unsigned cast, so they stay reproducible.
    return np.random.default_rng(int(seed) % SEED_MODULUS)


def holdout_size(num_points: int, test_ratio: float) -> int:
    """Number of test points for ``test_ratio``, rounding halves up."""
    return int(math.floor(test_ratio * num_points + 0.5))


class DataSplitter:
    """Randomly partitions points (columns) into a training and a test set.

    The splitter owns its random generator. A zero seed is replaced by the
    current time once, at construction, so ``splitter.seed`` always holds the
    value that reproduces the run.
    """

    def __init__(self, seed: int = 0) -> None:
        self.seed = resolve_seed(seed)
        self._rng = seeded_generator(self.seed)

    def split(
        self,
        dataset: np.ndarray,
        test_ratio: float,
        labels: Optional[np.ndarray] = None,
    ) -> SplitResult:
        if not 0.0 <= test_ratio <= 1.0:
            raise ConfigurationError(
                f"test_ratio must be between 0.0 and 1.0; got {test_ratio}."
            )
        data = np.asarray(dataset)
        if data.ndim != 2:
            raise DimensionalityError(f"Dataset must be a 2-D matrix; got {data.ndim} dimensions.")
        num_points = data.shape[1]
        if num_points == 0:
            raise DimensionalityError("Dataset contains no points.")
        label_vector = None
        if labels is not None:
            label_vector = np.asarray(labels).ravel()
            if label_vector.shape[0] != num_points:
                raise DimensionalityError(
                    f"Number of labels ({label_vector.shape[0]}) must match "
                    f"number of points ({num_points})."
                )

        order = self._rng.permutation(num_points)
        train_count = num_points - holdout_size(num_points, test_ratio)
        train_indices = order[:train_count]
        test_indices = order[train_count:]

        return SplitResult(
            train=data[:, train_indices],
            test=data[:, test_indices],
            train_labels=None if label_vector is None else label_vector[train_indices],
            test_labels=None if label_vector is None else label_vector[test_indices],
            train_indices=train_indices,
            test_indices=test_indices,
        )


def split_dataset(
    dataset: np.ndarray,
    test_ratio: float,
    seed: int = 0,
    labels: Optional[np.ndarray] = None,
) -> SplitResult:
    return DataSplitter(seed).split(dataset, test_ratio, labels=labels)


class SplitWorkflow:
    """Loads a dataset, splits it, and saves whichever outputs were requested."""

    def __init__(self, config: SplitConfig, logger: Optional[RunLogger] = None) -> None:
        self.config = config
        self.logger = logger or RunLogger()

    def run(self) -> SplitResult:
        config = self.config
        config.validate(self.logger)
        splitter = DataSplitter(config.seed)
        self.logger.info(f"Using random seed {splitter.seed}.")

        data = load_matrix(config.input_file)
        labels = None
        if config.input_labels_file is not None:
            labels = load_labels(config.input_labels_file)

        result = splitter.split(data, config.resolved_test_ratio, labels=labels)
        self.logger.info(f"Training data contains {result.train.shape[1]} points.")
        self.logger.info(f"Test data contains {result.test.shape[1]} points.")

        if config.training_file is not None:
            save_matrix(config.training_file, result.train)
        if config.test_file is not None:
            save_matrix(config.test_file, result.test)
        if labels is not None:
            if config.training_labels_file is not None:
                save_labels(config.training_labels_file, result.train_labels)
            if config.test_labels_file is not None:
                save_labels(config.test_labels_file, result.test_labels)
        return result
