#!/usr/bin/env python

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Allow running without installing the package
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from ml_toolkit.experiments.runner import run_program


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Split a dataset (and optionally its labels) into a training set and a test set. "
            "Points are randomly reordered before the split; --test_ratio sets the fraction "
            "that goes to the test set (default 0.2)."
        )
    )
    parser.add_argument("--config", type=Path, help="Optional YAML file with default options.")
    parser.add_argument("-i", "--input_file", type=Path, help="File containing data.")
    parser.add_argument("-t", "--training_file", type=Path, help="File name to save train data.")
    parser.add_argument("-T", "--test_file", type=Path, help="File name to save test data.")
    parser.add_argument("-I", "--input_labels_file", type=Path, help="File containing labels.")
    parser.add_argument(
        "-l", "--training_labels_file", type=Path, help="File name to save train labels."
    )
    parser.add_argument("-L", "--test_labels_file", type=Path, help="File name to save test labels.")
    parser.add_argument(
        "-r", "--test_ratio", type=float, help="Ratio of test set; defaults to 0.2 if not set."
    )
    parser.add_argument("-s", "--seed", type=int, help="Random seed (0 for the current time).")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    overrides = vars(args)
    config_path = overrides.pop("config")
    run_program("preprocess_split", config_path, overrides)


if __name__ == "__main__":
    main()
