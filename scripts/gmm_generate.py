#!/usr/bin/env python

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from ml_toolkit.experiments.runner import run_program


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate samples from a pre-trained Gaussian mixture model."
    )
    parser.add_argument("--config", type=Path, help="Optional YAML file with default options.")
    parser.add_argument(
        "-m", "--input_model_file", type=Path, help="File containing input GMM model."
    )
    parser.add_argument("-n", "--samples", type=int, help="Number of samples to generate.")
    parser.add_argument("-o", "--output_file", type=Path, help="File to save output samples in.")
    parser.add_argument("-s", "--seed", type=int, help="Random seed (0 for the current time).")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    overrides = vars(args)
    config_path = overrides.pop("config")
    run_program("gmm_generate", config_path, overrides)


if __name__ == "__main__":
    main()
