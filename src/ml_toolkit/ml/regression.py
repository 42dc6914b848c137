from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
from sklearn.linear_model import ElasticNet, Lars, LassoLars, Ridge

from ..configs.base import LarsConfig
from ..data.dataset import load_matrix, save_matrix
from ..errors import DimensionalityError, ModelFormatError
from ..instrumentation.logger import RunLogger
from .persistence import load_bundle, save_bundle

MODEL_ARCHIVE_NAME = "lars_model"


class LarsModel:
    """L1/L2-regularized least squares without an intercept.

    Minimizes ``0.5 ||X b - y||^2 + lambda1 ||b||_1 + 0.5 lambda2 ||b||^2`` with
    one row of ``X`` per point. The scikit-learn estimator is chosen from the
    penalties: LARS when both are zero, LASSO-LARS for a pure L1 penalty,
    ridge for a pure L2 penalty and elastic net otherwise.
    """

    def __init__(self, lambda1: float = 0.0, lambda2: float = 0.0, use_cholesky: bool = False) -> None:
        self.lambda1 = float(lambda1)
        self.lambda2 = float(lambda2)
        self.use_cholesky = bool(use_cholesky)
        self.estimator: Any = None
        self.dimensionality = 0

    @property
    def beta(self) -> np.ndarray:
        if self.estimator is None:
            return np.zeros(self.dimensionality)
        return np.asarray(self.estimator.coef_, dtype=float).ravel()

    def train(self, covariates: np.ndarray, responses: np.ndarray) -> np.ndarray:
        X = np.asarray(covariates, dtype=float)
        y = np.asarray(responses, dtype=float).ravel()
        if X.ndim != 2:
            raise DimensionalityError(f"Covariates must be a 2-D matrix; got {X.ndim}-D.")
        if y.shape[0] != X.shape[0]:
            raise DimensionalityError(
                f"Number of responses ({y.shape[0]}) must be equal to number of rows of X "
                f"({X.shape[0]})!"
            )
        if y.shape[0] == 0:
            raise DimensionalityError("Covariates contain no points.")
        estimator = self._build_estimator(X.shape[0])
        estimator.fit(X, y)
        self.estimator = estimator
        self.dimensionality = X.shape[1]
        return self.beta

    def predict(self, points: np.ndarray) -> np.ndarray:
        X = np.asarray(points, dtype=float)
        if self.estimator is None or X.ndim != 2 or X.shape[1] != self.dimensionality:
            columns = X.shape[1] if X.ndim == 2 else 0
            raise DimensionalityError(
                f"Dimensionality of test set ({columns}) is not equal to the dimensionality "
                f"of the model ({self.dimensionality})!"
            )
        return np.asarray(self.estimator.predict(X), dtype=float).ravel()

    def _build_estimator(self, num_points: int):
        precompute = not self.use_cholesky
        if self.lambda1 > 0 and self.lambda2 > 0:
            total = self.lambda1 + self.lambda2
            return ElasticNet(
                alpha=total / num_points,
                l1_ratio=self.lambda1 / total,
                fit_intercept=False,
                precompute=precompute,
                max_iter=10000,
            )
        if self.lambda1 > 0:
            return LassoLars(
                alpha=self.lambda1 / num_points, fit_intercept=False, precompute=precompute
            )
        if self.lambda2 > 0:
            return Ridge(alpha=self.lambda2, fit_intercept=False)
        return Lars(fit_intercept=False, precompute=precompute)

    def to_state(self) -> Dict[str, Any]:
        if self.estimator is None:
            raise ModelFormatError("Cannot serialize an untrained LARS model.")
        return {
            "lambda1": self.lambda1,
            "lambda2": self.lambda2,
            "use_cholesky": self.use_cholesky,
            "estimator": self.estimator,
            "dimensionality": self.dimensionality,
        }

    def load_state(self, state: Dict[str, Any]) -> None:
        try:
            self.lambda1 = float(state["lambda1"])
            self.lambda2 = float(state["lambda2"])
            self.use_cholesky = bool(state["use_cholesky"])
            self.estimator = state["estimator"]
            self.dimensionality = int(state["dimensionality"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ModelFormatError(f"Malformed LARS model: {exc}") from exc

    def save(self, path: Path) -> None:
        save_bundle(self.to_state(), path, MODEL_ARCHIVE_NAME)

    @classmethod
    def load(cls, path: Path) -> "LarsModel":
        model = cls()
        model.load_state(load_bundle(path, MODEL_ARCHIVE_NAME))
        return model


@dataclass
class LarsResult:
    model: LarsModel
    predictions: Optional[np.ndarray] = None


class LarsWorkflow:
    """Train or load a LARS model, regress on a test set, and save the results."""

    def __init__(self, config: LarsConfig, logger: Optional[RunLogger] = None) -> None:
        self.config = config
        self.logger = logger or RunLogger()

    def run(self) -> LarsResult:
        config = self.config
        config.validate(self.logger)

        if config.input_file is not None:
            # Covariates stay row-per-point, the orientation the regressors expect.
            covariates = load_matrix(config.input_file, transpose=False)
            responses = _as_response_vector(load_matrix(config.responses_file, transpose=False))
            model = LarsModel(config.lambda1, config.lambda2, config.use_cholesky)
            with self.logger.timed("lars_training"):
                model.train(covariates, responses)
        else:
            model = LarsModel.load(config.input_model_file)

        predictions = None
        if config.test_file is not None:
            self.logger.info("Regressing on test points.")
            test_points = load_matrix(config.test_file, transpose=False)
            predictions = model.predict(test_points)

        if predictions is not None and config.output_predictions_file is not None:
            save_matrix(config.output_predictions_file, predictions.reshape(-1, 1), transpose=False)
        if config.output_model_file is not None:
            model.save(config.output_model_file)
        return LarsResult(model=model, predictions=predictions)


def _as_response_vector(matrix: np.ndarray) -> np.ndarray:
    if matrix.shape[0] == 1:
        matrix = matrix.T
    if matrix.shape[1] > 1:
        raise DimensionalityError("Only one column or row allowed in responses file!")
    return matrix[:, 0]
