import numpy as np
import pytest
from hmmlearn.hmm import GaussianHMM

from ml_toolkit.configs.base import HmmGenerateConfig
from ml_toolkit.data.dataset import load_labels, load_matrix
from ml_toolkit.errors import ConfigurationError, ModelFormatError
from ml_toolkit.experiments.runner import run_program
from ml_toolkit.ml.hidden_markov import (
    HmmGenerateWorkflow,
    HmmSequenceGenerator,
    load_hmm,
    save_hmm,
)
from ml_toolkit.ml.persistence import save_bundle


def _gaussian_hmm(transmat=None):
    hmm = GaussianHMM(n_components=3, covariance_type="diag")
    hmm.startprob_ = np.array([0.6, 0.3, 0.1])
    hmm.transmat_ = (
        np.array([[0.7, 0.2, 0.1], [0.3, 0.5, 0.2], [0.3, 0.3, 0.4]])
        if transmat is None
        else transmat
    )
    hmm.means_ = np.array([[0.0, 0.0], [3.0, -3.0], [5.0, 10.0]])
    hmm.covars_ = np.full((3, 2), 0.5)
    return hmm


class TestHmmSequenceGenerator:

    def test_shapes_and_state_range(self):
        sequence = HmmSequenceGenerator(_gaussian_hmm(), seed=4).generate(25)

        assert sequence.observations.shape == (2, 25)
        assert sequence.states.shape == (25,)
        assert set(sequence.states) <= {0, 1, 2}

    def test_seeded_runs_repeat(self):
        first = HmmSequenceGenerator(_gaussian_hmm(), seed=8).generate(15)
        second = HmmSequenceGenerator(_gaussian_hmm(), seed=8).generate(15)

        np.testing.assert_array_equal(first.observations, second.observations)
        np.testing.assert_array_equal(first.states, second.states)

    def test_negative_seed_is_reproducible(self):
        first = HmmSequenceGenerator(_gaussian_hmm(), seed=-3).generate(10)
        second = HmmSequenceGenerator(_gaussian_hmm(), seed=-3).generate(10)
        np.testing.assert_array_equal(first.states, second.states)

    def test_sequence_begins_in_start_state(self):
        sticky = _gaussian_hmm(transmat=np.eye(3))
        sequence = HmmSequenceGenerator(sticky, seed=1).generate(12, start_state=2)
        np.testing.assert_array_equal(sequence.states, np.full(12, 2))

    @pytest.mark.parametrize("start_state", [-1, 3, 10])
    def test_invalid_start_state(self, start_state):
        with pytest.raises(ConfigurationError):
            HmmSequenceGenerator(_gaussian_hmm(), seed=1).generate(5, start_state=start_state)

    def test_zero_length(self):
        sequence = HmmSequenceGenerator(_gaussian_hmm(), seed=1).generate(0)
        assert sequence.observations.shape == (2, 0)
        assert sequence.states.shape == (0,)


class TestHmmGenerateWorkflow:

    def test_writes_observations_and_states(self, tmp_path, logger):
        save_hmm(_gaussian_hmm(), tmp_path / "hmm.pkl")
        config = HmmGenerateConfig(
            model_file=tmp_path / "hmm.pkl",
            length=9,
            output_file=tmp_path / "obs.csv",
            state_file=tmp_path / "states.csv",
            seed=6,
        )

        sequence = HmmGenerateWorkflow(config, logger).run()
        np.testing.assert_allclose(load_matrix(tmp_path / "obs.csv"), sequence.observations)
        np.testing.assert_array_equal(load_labels(tmp_path / "states.csv"), sequence.states)
        assert logger.warnings == []

    def test_no_outputs_warns(self, tmp_path, logger):
        save_hmm(_gaussian_hmm(), tmp_path / "hmm.pkl")
        config = HmmGenerateConfig(model_file=tmp_path / "hmm.pkl", length=4, seed=2)

        HmmGenerateWorkflow(config, logger).run()
        assert any("Neither --output_file nor --state_file" in w for w in logger.warnings)

    def test_invalid_start_state_saves_nothing(self, tmp_path, logger):
        save_hmm(_gaussian_hmm(), tmp_path / "hmm.pkl")
        config = HmmGenerateConfig(
            model_file=tmp_path / "hmm.pkl",
            length=4,
            start_state=3,
            output_file=tmp_path / "obs.csv",
            seed=2,
        )

        with pytest.raises(ConfigurationError):
            HmmGenerateWorkflow(config, logger).run()
        assert not (tmp_path / "obs.csv").exists()

    def test_length_is_required(self, tmp_path, logger):
        config = HmmGenerateConfig(model_file=tmp_path / "hmm.pkl")
        with pytest.raises(ConfigurationError):
            HmmGenerateWorkflow(config, logger).run()

    def test_negative_length(self, tmp_path, logger):
        config = HmmGenerateConfig(model_file=tmp_path / "hmm.pkl", length=-1)
        with pytest.raises(ConfigurationError):
            config.validate(logger)

    def test_rejects_non_hmm_archive(self, tmp_path):
        save_bundle({"startprob": [1.0]}, tmp_path / "hmm.pkl", "hmm_model")
        with pytest.raises(ModelFormatError):
            load_hmm(tmp_path / "hmm.pkl")

    def test_runner_exits_on_bad_start_state(self, tmp_path, console):
        save_hmm(_gaussian_hmm(), tmp_path / "hmm.pkl")
        with pytest.raises(SystemExit) as excinfo:
            run_program(
                "hmm_generate",
                None,
                {"model_file": tmp_path / "hmm.pkl", "length": 3, "start_state": 7, "seed": 1},
                console,
            )
        assert excinfo.value.code == 1
        assert "Invalid start state" in console.file.getvalue()
