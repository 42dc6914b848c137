from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
from hmmlearn.base import BaseHMM

from ..configs.base import HmmGenerateConfig
from ..data.dataset import save_labels, save_matrix
from ..data.split import resolve_seed
from ..errors import ConfigurationError, ModelFormatError
from ..instrumentation.logger import RunLogger
from .persistence import load_bundle, save_bundle

MODEL_ARCHIVE_NAME = "hmm_model"
# hmmlearn draws from the legacy RandomState, which takes 32-bit seeds.
LEGACY_SEED_MODULUS = 2**32


def save_hmm(hmm: BaseHMM, path: Path) -> None:
    save_bundle(hmm, path, MODEL_ARCHIVE_NAME)


def load_hmm(path: Path) -> BaseHMM:
    hmm = load_bundle(path, MODEL_ARCHIVE_NAME)
    if not isinstance(hmm, BaseHMM) or not hasattr(hmm, "transmat_"):
        raise ModelFormatError(f"'{path}' does not contain a fitted hidden Markov model.")
    return hmm


@dataclass
class HmmSequence:
    """Observations (one column per step) and the hidden states behind them."""

    observations: np.ndarray
    states: np.ndarray


class HmmSequenceGenerator:
    """Draws observation and hidden state sequences from a fitted HMM."""

    def __init__(self, hmm: BaseHMM, seed: int = 0) -> None:
        self.hmm = hmm
        self.seed = resolve_seed(seed)
        self._random_state = np.random.RandomState(self.seed % LEGACY_SEED_MODULUS)

    @property
    def num_states(self) -> int:
        return int(np.asarray(self.hmm.transmat_).shape[0])

    def generate(self, length: int, start_state: int = 0) -> HmmSequence:
        if not 0 <= start_state < self.num_states:
            raise ConfigurationError(
                f"Invalid start state ({start_state}); must be between 0 and number of "
                f"states ({self.num_states})!"
            )
        if length == 0:
            dimensionality = int(getattr(self.hmm, "n_features", 1) or 1)
            return HmmSequence(np.empty((dimensionality, 0)), np.empty(0, dtype=np.int64))
        observations, states = self.hmm.sample(
            length, random_state=self._random_state, currstate=start_state
        )
        return HmmSequence(
            observations=np.asarray(observations).T,
            states=np.asarray(states, dtype=np.int64),
        )


class HmmGenerateWorkflow:
    """Load an HMM and save a generated observation and state sequence."""

    def __init__(self, config: HmmGenerateConfig, logger: Optional[RunLogger] = None) -> None:
        self.config = config
        self.logger = logger or RunLogger()

    def run(self) -> HmmSequence:
        config = self.config
        config.validate(self.logger)
        generator = HmmSequenceGenerator(load_hmm(config.model_file), config.seed)
        length = int(config.length)
        self.logger.info(f"Generating sequence of length {length}...")
        sequence = generator.generate(length, config.start_state)

        if config.output_file is not None:
            save_matrix(config.output_file, sequence.observations)
        if config.state_file is not None:
            save_labels(config.state_file, sequence.states)
        return sequence
