from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
from sklearn.mixture import GaussianMixture

from ..configs.base import GmmGenerateConfig
from ..data.dataset import save_matrix
from ..data.split import resolve_seed, seeded_generator
from ..errors import ModelFormatError
from ..instrumentation.logger import RunLogger
from .persistence import load_bundle, save_bundle

MODEL_ARCHIVE_NAME = "gmm"


def save_gmm(gmm: GaussianMixture, path: Path) -> None:
    save_bundle(gmm, path, MODEL_ARCHIVE_NAME)


def load_gmm(path: Path) -> GaussianMixture:
    gmm = load_bundle(path, MODEL_ARCHIVE_NAME)
    if not isinstance(gmm, GaussianMixture) or not hasattr(gmm, "means_"):
        raise ModelFormatError(f"'{path}' does not contain a fitted GaussianMixture.")
    return gmm


def component_covariance(gmm: GaussianMixture, component: int) -> np.ndarray:
    """Full covariance matrix of one component, whatever ``covariance_type`` was fitted."""
    dimensionality = gmm.means_.shape[1]
    kind = gmm.covariance_type
    if kind == "full":
        return gmm.covariances_[component]
    if kind == "tied":
        return gmm.covariances_
    if kind == "diag":
        return np.diag(gmm.covariances_[component])
    if kind == "spherical":
        return np.eye(dimensionality) * gmm.covariances_[component]
    raise ModelFormatError(f"Unsupported covariance type '{kind}'.")


class GmmSampler:
    """Draws independent points from a fitted Gaussian mixture.

    Each point first picks a component according to ``weights_`` and is then
    drawn from that component's normal distribution.
    """

    def __init__(self, gmm: GaussianMixture, seed: int = 0) -> None:
        self.gmm = gmm
        self.seed = resolve_seed(seed)
        self._rng = seeded_generator(self.seed)

    @property
    def dimensionality(self) -> int:
        return int(self.gmm.means_.shape[1])

    def sample(self, count: int) -> np.ndarray:
        """Return ``count`` points as columns of a ``(dimensionality, count)`` matrix."""
        samples = np.empty((self.dimensionality, count), dtype=float)
        weights = np.asarray(self.gmm.weights_, dtype=float)
        components = self._rng.choice(weights.size, size=count, p=weights / weights.sum())
        for column, component in enumerate(components):
            samples[:, column] = self._rng.multivariate_normal(
                self.gmm.means_[component], component_covariance(self.gmm, component)
            )
        return samples


class GmmGenerateWorkflow:
    """Load a GMM and write the requested number of samples."""

    def __init__(self, config: GmmGenerateConfig, logger: Optional[RunLogger] = None) -> None:
        self.config = config
        self.logger = logger or RunLogger()

    def run(self) -> np.ndarray:
        config = self.config
        config.validate(self.logger)
        sampler = GmmSampler(load_gmm(config.input_model_file), config.seed)
        count = int(config.samples)
        self.logger.info(f"Generating {count} samples...")
        samples = sampler.sample(count)
        if config.output_file is not None:
            save_matrix(config.output_file, samples)
        return samples
