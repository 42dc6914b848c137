from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Type, TypeVar

import yaml

from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..instrumentation.logger import RunLogger

DEFAULT_TEST_RATIO = 0.2
DEFAULT_ITERATIONS = 1000
DEFAULT_TOLERANCE = 1e-10
DEFAULT_WEAK_LEARNER = "decision_stump"
WEAK_LEARNER_NAMES = ("decision_stump", "perceptron")

ConfigT = TypeVar("ConfigT")


def _expand_path(value: Optional[str | Path]) -> Optional[Path]:
    if value is None or value == "":
        return None
    return Path(value).expanduser().resolve()


class _ConfigMixin:
    """Shared dict/YAML construction for option dataclasses."""

    @classmethod
    def from_dict(cls: Type[ConfigT], raw: Dict[str, Any]) -> ConfigT:
        known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown option(s) for {cls.__name__}: {', '.join(unknown)}."
            )
        return cls(**raw)

    def merged(self: ConfigT, overrides: Dict[str, Any]) -> ConfigT:
        """Return a copy where every non-None override replaces the stored value."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}  # type: ignore[arg-type]
        values.update({key: value for key, value in overrides.items() if value is not None})
        return type(self)(**values)


@dataclass
class SplitConfig(_ConfigMixin):
    input_file: Optional[Path] = None
    training_file: Optional[Path] = None
    test_file: Optional[Path] = None
    input_labels_file: Optional[Path] = None
    training_labels_file: Optional[Path] = None
    test_labels_file: Optional[Path] = None
    test_ratio: Optional[float] = None
    seed: int = 0

    def __post_init__(self) -> None:
        self.input_file = _expand_path(self.input_file)
        self.training_file = _expand_path(self.training_file)
        self.test_file = _expand_path(self.test_file)
        self.input_labels_file = _expand_path(self.input_labels_file)
        self.training_labels_file = _expand_path(self.training_labels_file)
        self.test_labels_file = _expand_path(self.test_labels_file)
        self.seed = int(self.seed or 0)

    @property
    def resolved_test_ratio(self) -> float:
        return DEFAULT_TEST_RATIO if self.test_ratio is None else float(self.test_ratio)

    def validate(self, logger: "RunLogger") -> None:
        if self.input_file is None:
            raise ConfigurationError("--input_file (-i) must be specified.")
        if self.training_file is None:
            logger.warn("--training_file (-t) is not specified; no training set will be saved!")
        if self.test_file is None:
            logger.warn("--test_file (-T) is not specified; no test set will be saved!")

        if self.input_labels_file is not None:
            if self.training_labels_file is None:
                logger.warn(
                    "--training_labels_file (-l) is not specified; "
                    "no training set labels will be saved!"
                )
            if self.test_labels_file is None:
                logger.warn(
                    "--test_labels_file (-L) is not specified; no test set labels will be saved!"
                )
        else:
            if self.training_labels_file is not None:
                logger.warn(
                    "--training_labels_file ignored because --input_labels_file is not specified."
                )
            if self.test_labels_file is not None:
                logger.warn(
                    "--test_labels_file ignored because --input_labels_file is not specified."
                )

        if self.test_ratio is not None:
            if not 0.0 <= float(self.test_ratio) <= 1.0:
                raise ConfigurationError(
                    "Invalid parameter for test_ratio; --test_ratio must be between 0.0 and 1.0."
                )
        else:
            logger.warn(
                f"You did not specify --test_ratio, so it will be automatically set to "
                f"{DEFAULT_TEST_RATIO}."
            )


@dataclass
class AdaBoostConfig(_ConfigMixin):
    training_file: Optional[Path] = None
    labels_file: Optional[Path] = None
    input_model_file: Optional[Path] = None
    output_model_file: Optional[Path] = None
    test_file: Optional[Path] = None
    output_file: Optional[Path] = None
    iterations: Optional[int] = None
    tolerance: Optional[float] = None
    weak_learner: Optional[str] = None

    def __post_init__(self) -> None:
        self.training_file = _expand_path(self.training_file)
        self.labels_file = _expand_path(self.labels_file)
        self.input_model_file = _expand_path(self.input_model_file)
        self.output_model_file = _expand_path(self.output_model_file)
        self.test_file = _expand_path(self.test_file)
        self.output_file = _expand_path(self.output_file)
        if self.weak_learner is not None:
            self.weak_learner = str(self.weak_learner).lower()

    @property
    def resolved_iterations(self) -> int:
        return DEFAULT_ITERATIONS if self.iterations is None else int(self.iterations)

    @property
    def resolved_tolerance(self) -> float:
        return DEFAULT_TOLERANCE if self.tolerance is None else float(self.tolerance)

    @property
    def resolved_weak_learner(self) -> str:
        return self.weak_learner or DEFAULT_WEAK_LEARNER

    def validate(self, logger: "RunLogger") -> None:
        has_training = self.training_file is not None
        has_model = self.input_model_file is not None
        if has_training and has_model:
            raise ConfigurationError(
                "Only one of --training_file or --input_model_file may be specified!"
            )
        if not has_training and not has_model:
            raise ConfigurationError(
                "Either --training_file or --input_model_file must be specified!"
            )
        if self.resolved_weak_learner not in WEAK_LEARNER_NAMES:
            raise ConfigurationError(
                f"Unknown weak learner type '{self.resolved_weak_learner}'; "
                "must be 'decision_stump' or 'perceptron'."
            )
        if self.labels_file is not None and not has_training:
            logger.warn("--labels_file ignored, because --training_file was not passed.")
        if self.resolved_iterations < 0:
            raise ConfigurationError(
                f"Invalid number of iterations ({self.resolved_iterations}) specified! "
                "Must be greater than 0."
            )
        if has_model and self.weak_learner is not None:
            logger.warn("--weak_learner ignored because --input_model_file is specified.")
        if self.tolerance is not None and not has_training:
            logger.warn("--tolerance ignored, because --training_file was not passed.")
        if self.iterations is not None and not has_training:
            logger.warn("--iterations ignored, because --training_file was not passed.")
        if self.output_model_file is None and self.output_file is None:
            logger.warn(
                "Neither --output_model_file nor --output_file are specified; "
                "no results will be saved."
            )
        if self.output_file is not None and self.test_file is None:
            logger.warn("--output_file ignored because --test_file is not specified.")


@dataclass
class LarsConfig(_ConfigMixin):
    input_file: Optional[Path] = None
    responses_file: Optional[Path] = None
    input_model_file: Optional[Path] = None
    output_model_file: Optional[Path] = None
    test_file: Optional[Path] = None
    output_predictions: Optional[Path] = None
    output_predictions_file: Optional[Path] = None
    lambda1: float = 0.0
    lambda2: float = 0.0
    use_cholesky: bool = False

    def __post_init__(self) -> None:
        self.input_file = _expand_path(self.input_file)
        self.responses_file = _expand_path(self.responses_file)
        self.input_model_file = _expand_path(self.input_model_file)
        self.output_model_file = _expand_path(self.output_model_file)
        self.test_file = _expand_path(self.test_file)
        self.output_predictions = _expand_path(self.output_predictions)
        self.output_predictions_file = _expand_path(self.output_predictions_file)
        self.lambda1 = float(self.lambda1 or 0.0)
        self.lambda2 = float(self.lambda2 or 0.0)
        self.use_cholesky = bool(self.use_cholesky)

    def validate(self, logger: "RunLogger") -> None:
        # The deprecated spelling is folded into output_predictions_file here so
        # that the workflow only ever reads one field.
        if self.output_predictions is not None and self.output_predictions_file is not None:
            raise ConfigurationError(
                "Cannot specify both --output_predictions and --output_predictions_file!"
            )
        if self.output_predictions is not None:
            logger.warn(
                "--output_predictions is deprecated; use --output_predictions_file instead."
            )
            self.output_predictions_file = self.output_predictions
            self.output_predictions = None

        if self.input_file is not None and self.responses_file is None:
            raise ConfigurationError(
                "--input_file (-i) is specified, but --responses_file (-r) is not!"
            )
        if self.responses_file is not None and self.input_file is None:
            raise ConfigurationError(
                "--responses_file (-r) is specified, but --input_file (-i) is not!"
            )
        if self.input_file is None and self.input_model_file is None:
            raise ConfigurationError(
                "No input data specified (with --input_file (-i) and --responses_file (-r)), "
                "and no input model specified (with --input_model_file (-m))!"
            )
        if self.input_file is not None and self.input_model_file is not None:
            raise ConfigurationError(
                "Both --input_file (-i) and --input_model_file (-m) are specified, "
                "but only one may be specified!"
            )
        if self.lambda1 < 0 or self.lambda2 < 0:
            raise ConfigurationError("--lambda1 and --lambda2 must be non-negative!")

        if self.output_predictions_file is None and self.output_model_file is None:
            logger.warn(
                "--output_predictions_file (-o) and --output_model_file (-M) are not specified; "
                "no results will be saved!"
            )
        if self.output_predictions_file is not None and self.test_file is None:
            logger.warn(
                "--output_predictions_file (-o) specified, but --test_file (-t) is not; "
                "no results will be saved."
            )
        if self.test_file is not None and self.output_predictions_file is None:
            logger.warn(
                "--test_file (-t) specified, but --output_predictions_file (-o) is not; "
                "no results will be saved."
            )


@dataclass
class GmmGenerateConfig(_ConfigMixin):
    input_model_file: Optional[Path] = None
    samples: Optional[int] = None
    output_file: Optional[Path] = None
    seed: int = 0

    def __post_init__(self) -> None:
        self.input_model_file = _expand_path(self.input_model_file)
        self.output_file = _expand_path(self.output_file)
        self.seed = int(self.seed or 0)

    def validate(self, logger: "RunLogger") -> None:
        if self.input_model_file is None:
            raise ConfigurationError("--input_model_file (-m) must be specified.")
        if self.samples is None:
            raise ConfigurationError("--samples (-n) must be specified.")
        if int(self.samples) < 0:
            raise ConfigurationError("Parameter to --samples must be greater than 0!")
        if self.output_file is None:
            logger.warn("--output_file (-o) is not specified; no results will be saved!")


@dataclass
class HmmGenerateConfig(_ConfigMixin):
    model_file: Optional[Path] = None
    length: Optional[int] = None
    start_state: int = 0
    output_file: Optional[Path] = None
    state_file: Optional[Path] = None
    seed: int = 0

    def __post_init__(self) -> None:
        self.model_file = _expand_path(self.model_file)
        self.output_file = _expand_path(self.output_file)
        self.state_file = _expand_path(self.state_file)
        self.start_state = int(self.start_state or 0)
        self.seed = int(self.seed or 0)

    def validate(self, logger: "RunLogger") -> None:
        if self.model_file is None:
            raise ConfigurationError("--model_file (-m) must be specified.")
        if self.length is None:
            raise ConfigurationError("--length (-l) must be specified.")
        if int(self.length) < 0:
            raise ConfigurationError(
                f"Invalid sequence length ({self.length}); must be non-negative."
            )
        if self.output_file is None and self.state_file is None:
            logger.warn(
                "Neither --output_file nor --state_file are specified; no output will be saved!"
            )


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.expanduser().open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping.")
    return raw


def load_split_config(path: Path) -> SplitConfig:
    return SplitConfig.from_dict(_load_yaml(path))


def load_adaboost_config(path: Path) -> AdaBoostConfig:
    return AdaBoostConfig.from_dict(_load_yaml(path))


def load_lars_config(path: Path) -> LarsConfig:
    return LarsConfig.from_dict(_load_yaml(path))


def load_gmm_generate_config(path: Path) -> GmmGenerateConfig:
    return GmmGenerateConfig.from_dict(_load_yaml(path))


def load_hmm_generate_config(path: Path) -> HmmGenerateConfig:
    return HmmGenerateConfig.from_dict(_load_yaml(path))
