import io

import numpy as np
import pytest
from rich.console import Console

from ml_toolkit.instrumentation.logger import RunLogger


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def logger(console):
    return RunLogger(console)


@pytest.fixture
def two_class_data():
    """Column-major points in two well separated clusters, labelled 2 and 9."""
    rng = np.random.default_rng(0)
    left = rng.normal(loc=-5.0, scale=0.5, size=(2, 20))
    right = rng.normal(loc=5.0, scale=0.5, size=(2, 20))
    data = np.hstack([left, right])
    labels = np.array([2] * 20 + [9] * 20)
    return data, labels


@pytest.fixture
def three_class_data():
    rng = np.random.default_rng(1)
    centers = [-10.0, 0.0, 10.0]
    data = np.hstack([rng.normal(loc=c, scale=0.3, size=(2, 15)) for c in centers])
    labels = np.repeat([2, 5, 9], 15)
    return data, labels
