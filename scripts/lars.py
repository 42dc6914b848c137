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
            "Train a LARS/LASSO/Elastic Net model from --input_file and --responses_file, or "
            "load one with --input_model_file, and regress on --test_file."
        )
    )
    parser.add_argument("--config", type=Path, help="Optional YAML file with default options.")
    parser.add_argument("-i", "--input_file", type=Path, help="File containing covariates (X).")
    parser.add_argument(
        "-r", "--responses_file", type=Path, help="File containing y (responses/observations)."
    )
    parser.add_argument("-m", "--input_model_file", type=Path, help="File to load model from.")
    parser.add_argument("-M", "--output_model_file", type=Path, help="File to save model to.")
    parser.add_argument(
        "-t", "--test_file", type=Path, help="File containing points to regress on (test points)."
    )
    parser.add_argument(
        "--output_predictions",
        type=Path,
        help="Deprecated spelling of --output_predictions_file.",
    )
    parser.add_argument(
        "-o",
        "--output_predictions_file",
        type=Path,
        help="If --test_file is specified, this file is where the predicted responses will be saved.",
    )
    parser.add_argument(
        "-l", "--lambda1", type=float, help="Regularization parameter for l1-norm penalty."
    )
    parser.add_argument(
        "-L", "--lambda2", type=float, help="Regularization parameter for l2-norm penalty."
    )
    parser.add_argument(
        "-c",
        "--use_cholesky",
        action="store_true",
        default=None,
        help="Do not precompute the full Gram matrix.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    overrides = vars(args)
    config_path = overrides.pop("config")
    run_program("lars", config_path, overrides)


if __name__ == "__main__":
    main()
