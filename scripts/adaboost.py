#!/usr/bin/env python

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from ml_toolkit.experiments.runner import run_program


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Train an AdaBoost model with decision stump or perceptron weak learners, or load "
            "one with --input_model_file, then classify --test_file. Without --labels_file the "
            "last dimension of the training set is used as the labels."
        )
    )
    parser.add_argument("--config", type=Path, help="Optional YAML file with default options.")
    parser.add_argument("-t", "--training_file", type=Path, help="A file containing the training set.")
    parser.add_argument(
        "-l", "--labels_file", type=Path, help="A file containing labels for the training set."
    )
    parser.add_argument(
        "-m", "--input_model_file", type=Path, help="File containing input AdaBoost model."
    )
    parser.add_argument(
        "-M", "--output_model_file", type=Path, help="File to save trained AdaBoost model to."
    )
    parser.add_argument("-T", "--test_file", type=Path, help="A file containing the test set.")
    parser.add_argument(
        "-o",
        "--output_file",
        type=Path,
        help="The file in which the predicted labels for the test set will be written.",
    )
    parser.add_argument(
        "-i",
        "--iterations",
        type=int,
        help="The maximum number of boosting iterations to be run (0 runs until convergence).",
    )
    parser.add_argument(
        "-e",
        "--tolerance",
        type=float,
        help="The tolerance for change in values of the weighted error during training.",
    )
    parser.add_argument(
        "-w",
        "--weak_learner",
        help="The type of weak learner to use: 'decision_stump', or 'perceptron'.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    overrides = vars(args)
    config_path = overrides.pop("config")
    run_program("adaboost", config_path, overrides)


if __name__ == "__main__":
    main()
