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
            "Generate a random observation sequence and hidden state sequence from a "
            "pre-trained hidden Markov model."
        )
    )
    parser.add_argument("--config", type=Path, help="Optional YAML file with default options.")
    parser.add_argument("-m", "--model_file", type=Path, help="File containing HMM.")
    parser.add_argument("-l", "--length", type=int, help="Length of sequence to generate.")
    parser.add_argument("-t", "--start_state", type=int, help="Starting state of sequence.")
    parser.add_argument(
        "-o", "--output_file", type=Path, help="File to save observation sequence to."
    )
    parser.add_argument(
        "-S", "--state_file", type=Path, help="File to save hidden state sequence to."
    )
    parser.add_argument("-s", "--seed", type=int, help="Random seed (0 for the current time).")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    overrides = vars(args)
    config_path = overrides.pop("config")
    run_program("hmm_generate", config_path, overrides)


if __name__ == "__main__":
    main()
