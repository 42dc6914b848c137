import numpy as np
import pytest
from sklearn.linear_model import ElasticNet, Lars, LassoLars, Ridge

from ml_toolkit.configs.base import LarsConfig
from ml_toolkit.data.dataset import load_matrix, save_matrix
from ml_toolkit.errors import DimensionalityError
from ml_toolkit.ml.regression import LarsModel, LarsWorkflow


@pytest.fixture
def regression_data():
    rng = np.random.default_rng(4)
    X = rng.normal(size=(30, 3))
    beta = np.array([1.0, -2.0, 0.5])
    return X, X @ beta, beta


@pytest.mark.parametrize(
    "lambda1, lambda2, estimator_cls",
    [(0.0, 0.0, Lars), (0.5, 0.0, LassoLars), (0.0, 0.5, Ridge), (0.5, 0.5, ElasticNet)],
)
def test_estimator_follows_penalties(regression_data, lambda1, lambda2, estimator_cls):
    X, y, _ = regression_data
    model = LarsModel(lambda1, lambda2)
    model.train(X, y)
    assert isinstance(model.estimator, estimator_cls)
    assert model.beta.shape == (3,)


def test_unregularized_fit_recovers_coefficients(regression_data):
    X, y, beta = regression_data
    model = LarsModel()
    np.testing.assert_allclose(model.train(X, y), beta, atol=1e-6)
    np.testing.assert_allclose(model.predict(X), y, atol=1e-6)


def test_response_length_mismatch(regression_data):
    X, y, _ = regression_data
    with pytest.raises(DimensionalityError):
        LarsModel().train(X, y[:-1])


def test_predict_checks_dimensionality(regression_data):
    X, y, _ = regression_data
    model = LarsModel()
    model.train(X, y)
    with pytest.raises(DimensionalityError):
        model.predict(np.zeros((4, 2)))


def test_round_trip(tmp_path, regression_data):
    X, y, _ = regression_data
    model = LarsModel(lambda1=0.1, use_cholesky=True)
    model.train(X, y)
    model.save(tmp_path / "lars.pkl")

    restored = LarsModel.load(tmp_path / "lars.pkl")
    assert restored.lambda1 == 0.1
    assert restored.use_cholesky is True
    np.testing.assert_array_equal(restored.predict(X), model.predict(X))


def test_workflow_with_deprecated_flag(tmp_path, logger, regression_data):
    X, y, _ = regression_data
    save_matrix(tmp_path / "x.csv", X, transpose=False)
    save_matrix(tmp_path / "y.csv", y.reshape(1, -1), transpose=False)
    save_matrix(tmp_path / "test.csv", X[:5], transpose=False)

    config = LarsConfig(
        input_file=tmp_path / "x.csv",
        responses_file=tmp_path / "y.csv",
        test_file=tmp_path / "test.csv",
        output_predictions=tmp_path / "predictions.csv",
        output_model_file=tmp_path / "lars.pkl",
    )
    result = LarsWorkflow(config, logger).run()

    saved = load_matrix(tmp_path / "predictions.csv", transpose=False)
    assert saved.shape == (5, 1)
    np.testing.assert_allclose(saved[:, 0], result.predictions)
    assert (tmp_path / "lars.pkl").exists()


def test_workflow_rejects_wide_responses(tmp_path, logger, regression_data):
    X, y, _ = regression_data
    save_matrix(tmp_path / "x.csv", X, transpose=False)
    save_matrix(tmp_path / "y.csv", np.vstack([y, y]).T, transpose=False)

    config = LarsConfig(input_file=tmp_path / "x.csv", responses_file=tmp_path / "y.csv")
    with pytest.raises(DimensionalityError):
        LarsWorkflow(config, logger).run()
