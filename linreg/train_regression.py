"""
Fit ``y = w * x + b`` by batch gradient descent on a two-column CSV file.

Run from the directory holding ``data/simple_regression.csv`` as:

    python -m linreg
    linreg-train --data other.csv --holdout-rows 20 --seed 7

On success a single line ``<weight> * x + <bias>`` is printed. Read and
training failures print their own message and exit with status 1.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

import torch

from .config import TrainingConfig
from .dataset import DEFAULT_DATA_PATH, RegressionDataset, load_flat_dataset
from .errors import DataAccessError, RegressionError
from .trainer import fit


def _build_parser() -> argparse.ArgumentParser:
    defaults = TrainingConfig()
    parser = argparse.ArgumentParser(description="Linear regression by batch gradient descent")
    parser.add_argument(
        "--data",
        type=Path,
        default=DEFAULT_DATA_PATH,
        help="CSV file with an x,y header (relative to the working directory)",
    )
    parser.add_argument("--delimiter", type=str, default=",", help="Field delimiter")
    parser.add_argument("--epochs", type=int, default=defaults.epochs, help="Number of epochs")
    parser.add_argument(
        "--learning-rate", type=float, default=defaults.learning_rate, help="Gradient step size"
    )
    parser.add_argument(
        "--holdout-rows",
        type=int,
        default=defaults.holdout_rows,
        help="Trailing rows kept out of training",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for the initial weight draw (random if omitted)"
    )
    parser.add_argument(
        "--initial-weight",
        type=float,
        default=None,
        help="Start from this weight instead of a random draw",
    )
    parser.add_argument(
        "--log-every", type=int, default=0, help="Print the training SSE every N epochs"
    )
    parser.add_argument("--verbose", action="store_true", help="Print loading and split details")
    return parser


def main(argv: List[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    args = _build_parser().parse_args(argv)

    try:
        if args.verbose:
            data = RegressionDataset(args.data, delimiter=args.delimiter).flat()
        else:
            data = load_flat_dataset(args.data, delimiter=args.delimiter)
    except DataAccessError as err:
        print(f"error reading csv: {err}")
        raise SystemExit(1)

    generator = torch.Generator()
    if args.seed is not None:
        generator.manual_seed(args.seed)
    else:
        generator.seed()

    try:
        config = TrainingConfig(
            holdout_rows=args.holdout_rows,
            learning_rate=args.learning_rate,
            epochs=args.epochs,
            log_every=args.log_every,
        )
        initial_weights = None
        if args.initial_weight is not None:
            initial_weights = torch.tensor([args.initial_weight], dtype=torch.float32)
        result = fit(data, config=config, generator=generator, initial_weights=initial_weights)
    except (RegressionError, ValueError) as err:
        print(f"error running example: {err}")
        raise SystemExit(1)

    if args.verbose:
        print(
            f"Trained on {result.blocks.train_rows} row(s), held out {result.blocks.holdout_rows} "
            f"(epochs={config.epochs}, lr={config.learning_rate})"
        )
        if not result.model.is_finite():
            print("Warning: fitted parameters are not finite; try a smaller learning rate")

    print(result.model.describe())


if __name__ == "__main__":
    main()
