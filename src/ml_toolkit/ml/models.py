from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, Union

import numpy as np
from sklearn.base import clone
from sklearn.linear_model import Perceptron
from sklearn.tree import DecisionTreeClassifier

from ..errors import ConfigurationError, DimensionalityError, ModelFormatError
from .persistence import load_bundle, save_bundle

MODEL_ARCHIVE_NAME = "adaboost_model"
# Upper bound on boosting rounds when iterations=0 asks for convergence.
MAX_CONVERGENCE_ROUNDS = 10000
PERCEPTRON_MAX_ITERATIONS = 1000


class WeakLearnerType(str, Enum):
    DECISION_STUMP = "decision_stump"
    PERCEPTRON = "perceptron"

    @classmethod
    def parse(cls, value: Union[str, "WeakLearnerType"]) -> "WeakLearnerType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown weak learner type '{value}'; must be 'decision_stump' or 'perceptron'."
            ) from exc


def normalize_labels(labels: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Map labels onto 0..K-1 in order of first appearance.

    Returns the normalized labels and the mapping table, where
    ``mappings[i]`` is the original label behind normalized label ``i``.
    """
    labels = np.asarray(labels).ravel()
    unique, first_index, inverse = np.unique(labels, return_index=True, return_inverse=True)
    order = np.argsort(first_index, kind="stable")
    rank = np.empty_like(order)
    rank[order] = np.arange(order.size)
    return rank[inverse.ravel()].astype(np.int64), unique[order]


def revert_labels(normalized: np.ndarray, mappings: np.ndarray) -> np.ndarray:
    normalized = np.asarray(normalized, dtype=np.int64).ravel()
    mappings = np.asarray(mappings)
    if normalized.size and (normalized.min() < 0 or normalized.max() >= mappings.size):
        raise ModelFormatError(
            f"Label index outside of the mapping table (size {mappings.size})."
        )
    return mappings[normalized]


@dataclass
class BoostedEnsemble:
    """Weighted vote over weak learners trained by ``boost``."""

    num_classes: int
    learners: List[Any] = field(default_factory=list)
    alphas: List[float] = field(default_factory=list)
    training_errors: List[float] = field(default_factory=list)

    weak_learner_type: ClassVar[WeakLearnerType]

    @classmethod
    def build_weak_learner(cls) -> Any:
        raise NotImplementedError

    @classmethod
    def train(
        cls,
        points: np.ndarray,
        labels: np.ndarray,
        num_classes: int,
        iterations: int,
        tolerance: float,
    ) -> "BoostedEnsemble":
        ensemble = cls(num_classes=num_classes)
        if num_classes > 1:
            boost(ensemble, cls.build_weak_learner(), points, labels, iterations, tolerance)
        return ensemble

    def classify(self, points: np.ndarray) -> np.ndarray:
        if points.shape[0] == 0:
            return np.empty(0, dtype=np.int64)
        votes = np.zeros((points.shape[0], self.num_classes), dtype=float)
        rows = np.arange(points.shape[0])
        for learner, alpha in zip(self.learners, self.alphas):
            votes[rows, np.asarray(learner.predict(points), dtype=np.int64)] += alpha
        return votes.argmax(axis=1).astype(np.int64)


@dataclass
class DecisionStumpEnsemble(BoostedEnsemble):
    weak_learner_type: ClassVar[WeakLearnerType] = WeakLearnerType.DECISION_STUMP

    @classmethod
    def build_weak_learner(cls) -> DecisionTreeClassifier:
        return DecisionTreeClassifier(max_depth=1, random_state=0)


@dataclass
class PerceptronEnsemble(BoostedEnsemble):
    weak_learner_type: ClassVar[WeakLearnerType] = WeakLearnerType.PERCEPTRON

    @classmethod
    def build_weak_learner(cls) -> Perceptron:
        return Perceptron(max_iter=PERCEPTRON_MAX_ITERATIONS, random_state=0)


Ensemble = Union[DecisionStumpEnsemble, PerceptronEnsemble]

ENSEMBLE_TYPES: Dict[WeakLearnerType, Type[BoostedEnsemble]] = {
    WeakLearnerType.DECISION_STUMP: DecisionStumpEnsemble,
    WeakLearnerType.PERCEPTRON: PerceptronEnsemble,
}
PAYLOAD_KEYS: Dict[WeakLearnerType, str] = {
    WeakLearnerType.DECISION_STUMP: "adaboost_ds",
    WeakLearnerType.PERCEPTRON: "adaboost_p",
}


def boost(
    ensemble: BoostedEnsemble,
    prototype: Any,
    points: np.ndarray,
    labels: np.ndarray,
    iterations: int,
    tolerance: float,
) -> None:
    """Multi-class (SAMME) AdaBoost over clones of ``prototype``.

    ``points`` is row-per-point. Training stops after ``iterations`` rounds
    (``MAX_CONVERGENCE_ROUNDS`` when zero), once the weighted training error
    changes by less than ``tolerance`` between rounds, or when a learner is
    perfect or no better than chance.
    """
    num_points = points.shape[0]
    weights = np.full(num_points, 1.0 / num_points)
    max_rounds = iterations if iterations > 0 else MAX_CONVERGENCE_ROUNDS
    chance_error = 1.0 - 1.0 / ensemble.num_classes
    previous_error: Optional[float] = None

    for _ in range(max_rounds):
        learner = clone(prototype)
        learner.fit(points, labels, sample_weight=weights)
        incorrect = np.asarray(learner.predict(points)) != labels
        error = float(np.dot(weights, incorrect))

        if previous_error is not None and abs(error - previous_error) < tolerance:
            break
        ensemble.training_errors.append(error)

        if error <= 0.0:
            ensemble.learners.append(learner)
            ensemble.alphas.append(1.0)
            break
        if error >= chance_error:
            if not ensemble.learners:
                ensemble.learners.append(learner)
                ensemble.alphas.append(1.0)
            break

        alpha = math.log((1.0 - error) / error) + math.log(ensemble.num_classes - 1.0)
        ensemble.learners.append(learner)
        ensemble.alphas.append(alpha)
        weights = weights * np.exp(alpha * incorrect)
        weights /= weights.sum()
        previous_error = error


class AdaBoostModel:
    """AdaBoost classifier backed by exactly one kind of weak-learner ensemble.

    Data matrices are column-major: one column per point. ``classify`` returns
    normalized labels and ``predict`` maps them back through ``mappings``.
    """

    def __init__(
        self,
        weak_learner_type: Union[str, WeakLearnerType] = WeakLearnerType.DECISION_STUMP,
        mappings: Optional[np.ndarray] = None,
    ) -> None:
        self._requested_type = WeakLearnerType.parse(weak_learner_type)
        self.mappings = np.asarray(mappings) if mappings is not None else np.empty(0, dtype=np.int64)
        self.dimensionality = 0
        self.ensemble: Optional[Ensemble] = None

    @property
    def weak_learner_type(self) -> WeakLearnerType:
        """Tag of the owned ensemble, or the type the next training run will use."""
        if self.ensemble is not None:
            return self.ensemble.weak_learner_type
        return self._requested_type

    @property
    def is_trained(self) -> bool:
        return self.ensemble is not None

    @property
    def decision_stump_ensemble(self) -> Optional[DecisionStumpEnsemble]:
        return self.ensemble if isinstance(self.ensemble, DecisionStumpEnsemble) else None

    @property
    def perceptron_ensemble(self) -> Optional[PerceptronEnsemble]:
        return self.ensemble if isinstance(self.ensemble, PerceptronEnsemble) else None

    def fit(
        self,
        data: np.ndarray,
        labels: np.ndarray,
        iterations: int = 1000,
        tolerance: float = 1e-10,
        weak_learner_type: Optional[Union[str, WeakLearnerType]] = None,
    ) -> "AdaBoostModel":
        """Normalize arbitrary labels, remember the mapping, and train."""
        normalized, self.mappings = normalize_labels(labels)
        self.train(data, normalized, iterations, tolerance, weak_learner_type)
        return self

    def train(
        self,
        data: np.ndarray,
        labels: np.ndarray,
        iterations: int,
        tolerance: float,
        weak_learner_type: Optional[Union[str, WeakLearnerType]] = None,
    ) -> None:
        """Train a fresh ensemble, replacing whichever one the model owned.

        ``weak_learner_type`` switches the kind of ensemble for this and later
        runs; by default the model keeps its current type.
        """
        data = np.asarray(data, dtype=float)
        labels = np.asarray(labels, dtype=np.int64).ravel()
        if data.ndim != 2:
            raise DimensionalityError(f"Training data must be a 2-D matrix; got {data.ndim}-D.")
        if data.shape[1] != labels.shape[0]:
            raise DimensionalityError(
                f"Number of labels ({labels.shape[0]}) must match number of training points "
                f"({data.shape[1]})."
            )
        if labels.size == 0:
            raise DimensionalityError("Training data contains no points.")
        if labels.min() < 0:
            raise ValueError("Labels passed to train() must be normalized; use fit() instead.")
        if iterations < 0:
            raise ConfigurationError(f"Invalid number of iterations ({iterations}).")

        requested = (
            self.weak_learner_type
            if weak_learner_type is None
            else WeakLearnerType.parse(weak_learner_type)
        )
        self.dimensionality = data.shape[0]
        self.ensemble = None
        self._requested_type = requested
        ensemble_cls = ENSEMBLE_TYPES[requested]
        self.ensemble = ensemble_cls.train(  # type: ignore[assignment]
            data.T, labels, int(labels.max()) + 1, iterations, tolerance
        )

    def classify(self, test_data: np.ndarray) -> np.ndarray:
        test_data = np.asarray(test_data, dtype=float)
        if self.ensemble is None:
            raise DimensionalityError(
                "Model has not been trained or loaded (dimensionality 0); cannot classify."
            )
        if test_data.ndim != 2 or test_data.shape[0] != self.dimensionality:
            rows = test_data.shape[0] if test_data.ndim else 0
            raise DimensionalityError(
                f"Test data dimensionality ({rows}) must be the same as the model "
                f"dimensionality ({self.dimensionality})!"
            )
        return self.ensemble.classify(test_data.T)

    def predict(self, test_data: np.ndarray) -> np.ndarray:
        return revert_labels(self.classify(test_data), self.mappings)

    def to_state(self) -> Dict[str, Any]:
        if self.ensemble is None:
            raise ModelFormatError("Cannot serialize an untrained AdaBoost model.")
        return {
            "mappings": self.mappings,
            "weak_learner_type": self.weak_learner_type.value,
            PAYLOAD_KEYS[self.weak_learner_type]: self.ensemble,
            "dimensionality": self.dimensionality,
        }

    def load_state(self, state: Dict[str, Any]) -> None:
        self.ensemble = None
        if not isinstance(state, dict):
            raise ModelFormatError("Malformed AdaBoost model: expected a mapping.")
        raw_type = state.get("weak_learner_type")
        try:
            weak_learner_type = WeakLearnerType(raw_type)
        except ValueError as exc:
            raise ModelFormatError(f"Unknown weak learner type '{raw_type}' in model.") from exc

        payload_key = PAYLOAD_KEYS[weak_learner_type]
        ensemble = state.get(payload_key)
        if not isinstance(ensemble, ENSEMBLE_TYPES[weak_learner_type]):
            raise ModelFormatError(f"Model is missing its '{payload_key}' ensemble.")
        try:
            mappings = np.asarray(state["mappings"])
            dimensionality = int(state["dimensionality"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ModelFormatError(f"Malformed AdaBoost model: {exc}") from exc

        self._requested_type = weak_learner_type
        self.mappings = mappings
        self.dimensionality = dimensionality
        self.ensemble = ensemble

    def save(self, path: Path) -> None:
        save_bundle(self.to_state(), path, MODEL_ARCHIVE_NAME)

    def load_from(self, path: Path) -> "AdaBoostModel":
        self.load_state(load_bundle(path, MODEL_ARCHIVE_NAME))
        return self

    @classmethod
    def load(cls, path: Path) -> "AdaBoostModel":
        return cls().load_from(path)
