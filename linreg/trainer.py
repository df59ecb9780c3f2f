"""
Batch gradient descent for a linear model on tabular (feature, target) rows.

The trainer is a pure function of (data, initial parameters, config): the only
random step, the initial weight draw, takes an explicit ``torch.Generator``.

Gradients are the raw sums ``X^T . error`` and ``sum(lr * error)``, not
averaged over the number of rows, so the effective step grows with the size of
the training block. Results from earlier runs depend on this.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import torch

from . import tensor_ops as ops
from .config import TrainingConfig
from .model import LinearModel


@dataclass
class SplitBlocks:
    """Training rows and the trailing held-out rows of the design matrix."""
    train_x: torch.Tensor
    train_y: torch.Tensor
    holdout_x: torch.Tensor  # Kept for callers; never scored during training
    holdout_y: torch.Tensor

    @property
    def train_rows(self) -> int:
        return int(self.train_x.shape[0])

    @property
    def holdout_rows(self) -> int:
        return int(self.holdout_x.shape[0])


@dataclass
class TrainingResult:
    model: LinearModel
    initial_model: LinearModel
    blocks: SplitBlocks
    epochs: int


def split_blocks(data: Sequence[float] | torch.Tensor, config: TrainingConfig) -> SplitBlocks:
    """
    Reshape the flat ``[x0, y0, x1, y1, ...]`` sequence and split it into blocks.

    Raises:
        MalformedInputError: empty input or a length that is not a whole number of rows.
        InsufficientDataError: ``config.holdout_rows`` is not below the row count.
    """
    matrix = ops.reshape_rows(data, config.column_count)
    config.check_rows(matrix.shape[0])

    train, holdout = ops.split_rows(matrix, config.holdout_rows)
    train_x, train_y = ops.split_columns(train, config.feature_count)
    holdout_x, holdout_y = ops.split_columns(holdout, config.feature_count)
    return SplitBlocks(train_x=train_x, train_y=train_y, holdout_x=holdout_x, holdout_y=holdout_y)


def init_parameters(
    config: TrainingConfig,
    generator: Optional[torch.Generator] = None,
    initial_weights: Optional[torch.Tensor] = None,
) -> LinearModel:
    """
    Bias starts at 1.0. Weights are drawn from U[0, 1) and scaled by
    ``sqrt(2 / feature_count)`` unless ``initial_weights`` is given.
    """
    bias = torch.ones(1, 1, dtype=ops.DTYPE)
    if initial_weights is not None:
        weights = ops.as_float32(initial_weights).reshape(config.feature_count, 1).clone()
    else:
        draw = torch.rand(config.feature_count, 1, generator=generator, dtype=ops.DTYPE)
        weights = draw * math.sqrt(2.0 / config.feature_count)
    return LinearModel(weights=weights, bias=bias)


def run_epoch(model: LinearModel, x: torch.Tensor, y: torch.Tensor, learning_rate: float) -> None:
    """One predict -> error -> gradient -> update pass. Mutates ``model`` in place."""
    y_pred = model.predict(x)
    error = ops.subtract(y_pred, y)
    gradient = ops.matmul(ops.transpose(x), error)

    model.weights -= learning_rate * gradient
    model.bias -= ops.sum_all(learning_rate * error)


def fit(
    data: Sequence[float] | torch.Tensor,
    config: Optional[TrainingConfig] = None,
    generator: Optional[torch.Generator] = None,
    initial_weights: Optional[torch.Tensor] = None,
) -> TrainingResult:
    """
    Train on the leading rows of ``data`` for exactly ``config.epochs`` epochs.

    Args:
        data: Flat row-major values, ``feature_count`` features then the target per row.
        config: Hyperparameters; defaults to ``TrainingConfig()``.
        generator: Random source for the initial weight draw.
        initial_weights: Skip the draw and start from these weights.

    Returns:
        TrainingResult with the fitted model, the starting model and the split blocks.
        Non-finite parameters are returned as-is; see ``LinearModel.is_finite``.
    """
    config = config or TrainingConfig()
    blocks = split_blocks(data, config)

    model = init_parameters(config, generator=generator, initial_weights=initial_weights)
    initial_model = model.clone()

    for epoch in range(1, config.epochs + 1):
        run_epoch(model, blocks.train_x, blocks.train_y, config.learning_rate)
        if config.log_every and epoch % config.log_every == 0:
            sse = model.sum_squared_error(blocks.train_x, blocks.train_y)
            print(
                f"  Epoch {epoch}/{config.epochs} - sse={sse:.6f} "
                f"(w={model.weight:.6f}, b={model.intercept:.6f})",
                flush=True,
            )

    return TrainingResult(
        model=model,
        initial_model=initial_model,
        blocks=blocks,
        epochs=config.epochs,
    )


__all__ = [
    "SplitBlocks",
    "TrainingResult",
    "split_blocks",
    "init_parameters",
    "run_epoch",
    "fit",
]
