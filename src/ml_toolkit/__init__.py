"""Command-line front-ends for data splitting, boosting, regression, and sampling."""

from .configs.base import (
    AdaBoostConfig,
    GmmGenerateConfig,
    HmmGenerateConfig,
    LarsConfig,
    SplitConfig,
    load_adaboost_config,
    load_gmm_generate_config,
    load_hmm_generate_config,
    load_lars_config,
    load_split_config,
)
from .data.split import DataSplitter, SplitResult, SplitWorkflow, split_dataset
from .errors import (
    ConfigurationError,
    DatasetIOError,
    DimensionalityError,
    ModelFormatError,
    ToolkitError,
)
from .ml.hidden_markov import HmmGenerateWorkflow, HmmSequenceGenerator
from .ml.mixture import GmmGenerateWorkflow, GmmSampler
from .ml.models import AdaBoostModel, WeakLearnerType, normalize_labels, revert_labels
from .ml.regression import LarsModel, LarsWorkflow
from .ml.training import AdaBoostWorkflow

__all__ = [
    "AdaBoostConfig",
    "AdaBoostModel",
    "AdaBoostWorkflow",
    "ConfigurationError",
    "DataSplitter",
    "DatasetIOError",
    "DimensionalityError",
    "GmmGenerateConfig",
    "GmmGenerateWorkflow",
    "GmmSampler",
    "HmmGenerateConfig",
    "HmmGenerateWorkflow",
    "HmmSequenceGenerator",
    "LarsConfig",
    "LarsModel",
    "LarsWorkflow",
    "ModelFormatError",
    "SplitConfig",
    "SplitResult",
    "SplitWorkflow",
    "ToolkitError",
    "WeakLearnerType",
    "load_adaboost_config",
    "load_gmm_generate_config",
    "load_hmm_generate_config",
    "load_lars_config",
    "load_split_config",
    "normalize_labels",
    "revert_labels",
    "split_dataset",
]
