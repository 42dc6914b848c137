from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..configs.base import AdaBoostConfig
from ..data.dataset import as_integer_labels, load_labels, load_matrix, save_labels
from ..instrumentation.logger import RunLogger
from .models import AdaBoostModel, WeakLearnerType


@dataclass
class AdaBoostResult:
    model: AdaBoostModel
    predictions: Optional[np.ndarray] = None


class AdaBoostWorkflow:
    """Train or load an AdaBoost model, classify a test set, and save the results."""

    def __init__(self, config: AdaBoostConfig, logger: Optional[RunLogger] = None) -> None:
        self.config = config
        self.logger = logger or RunLogger()

    def run(self) -> AdaBoostResult:
        config = self.config
        config.validate(self.logger)

        if config.training_file is not None:
            model = self._train_model()
        else:
            model = AdaBoostModel.load(config.input_model_file)
            self.logger.info(
                f"Loaded {model.weak_learner_type.value} model with dimensionality "
                f"{model.dimensionality}."
            )

        predictions = None
        if config.test_file is not None:
            test_data = load_matrix(config.test_file)
            with self.logger.timed("adaboost_classification"):
                predictions = model.predict(test_data)

        if predictions is not None and config.output_file is not None:
            save_labels(config.output_file, predictions)
        if config.output_model_file is not None:
            model.save(config.output_model_file)
        return AdaBoostResult(model=model, predictions=predictions)

    def _train_model(self) -> AdaBoostModel:
        config = self.config
        data, raw_labels = self._load_training_set()
        model = AdaBoostModel(WeakLearnerType.parse(config.resolved_weak_learner))
        with self.logger.timed("adaboost_training"):
            model.fit(data, raw_labels, config.resolved_iterations, config.resolved_tolerance)
        ensemble = model.ensemble
        rounds = 0 if ensemble is None else len(ensemble.learners)
        self.logger.info(f"Trained {rounds} weak learner(s) over {len(model.mappings)} classes.")
        return model

    def _load_training_set(self) -> Tuple[np.ndarray, np.ndarray]:
        config = self.config
        data = load_matrix(config.training_file)
        if config.labels_file is not None:
            return data, as_integer_labels(load_labels(config.labels_file))
        self.logger.info("Using the last dimension of training set as labels.")
        return data[:-1, :], as_integer_labels(data[-1, :])
