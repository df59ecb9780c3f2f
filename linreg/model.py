from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import torch

from . import tensor_ops as ops


def format_float32(value: float) -> str:
    """Shortest text that round-trips as a float32, e.g. ``43.436935``."""
    return str(np.float32(value))


@dataclass
class LinearModel:
    """
    Parameters of ``y = X . weights + bias``.

    Attributes:
        weights: (feature_count, 1) float32 tensor.
        bias: (1, 1) float32 tensor.
    """
    weights: torch.Tensor
    bias: torch.Tensor

    @property
    def weight(self) -> float:
        """Slope of the first (and usually only) feature."""
        return float(self.weights[0, 0].item())

    @property
    def intercept(self) -> float:
        return float(self.bias[0, 0].item())

    def predict(self, x: torch.Tensor) -> torch.Tensor:
        """Predict one target per row of ``x`` (shape ``n x feature_count``)."""
        return ops.add_row_broadcast(ops.matmul(x, self.weights), self.bias)

    def sum_squared_error(self, x: torch.Tensor, y: torch.Tensor) -> float:
        error = ops.subtract(self.predict(x), y)
        return float(ops.sum_all(error * error).item())

    def is_finite(self) -> bool:
        return bool(torch.isfinite(self.weights).all() and torch.isfinite(self.bias).all())

    def clone(self) -> "LinearModel":
        return LinearModel(weights=self.weights.clone(), bias=self.bias.clone())

    def describe(self) -> str:
        return f"{format_float32(self.weight)} * x + {format_float32(self.intercept)}"


__all__ = ["LinearModel", "format_float32"]
