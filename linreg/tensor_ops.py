"""
Small dense-matrix primitives used by the gradient-descent loop.

Every function works on 2-D ``torch.float32`` tensors (the flat input to
``reshape_rows`` is the only 1-D one), checks shapes up front and never
promotes to another dtype, so an epoch is single precision end to end.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import torch

from .errors import MalformedInputError


DTYPE = torch.float32


def as_float32(values: Sequence[float] | torch.Tensor) -> torch.Tensor:
    if isinstance(values, torch.Tensor):
        return values.detach().to(DTYPE)
    return torch.tensor(list(values), dtype=DTYPE)


def _require_matrix(name: str, t: torch.Tensor) -> None:
    if t.dim() != 2:
        raise ValueError(f"{name} must be a 2-D matrix, got shape {tuple(t.shape)}")
    if t.dtype != DTYPE:
        raise ValueError(f"{name} must be {DTYPE}, got {t.dtype}")


def reshape_rows(flat: Sequence[float] | torch.Tensor, ncols: int) -> torch.Tensor:
    """
    Reshape a flat sequence row-major into a ``rows x ncols`` matrix.

    Raises:
        MalformedInputError: if the sequence is empty or its length is not a
            multiple of ``ncols``.
    """
    data = as_float32(flat).reshape(-1)
    length = data.numel()
    if length == 0:
        raise MalformedInputError("cannot build a matrix from an empty sequence")
    if length % ncols != 0:
        raise MalformedInputError(
            f"sequence of length {length} does not split into rows of {ncols} columns"
        )
    return data.reshape(length // ncols, ncols).clone()


def split_rows(matrix: torch.Tensor, tail_rows: int) -> Tuple[torch.Tensor, torch.Tensor]:
    """Split into (leading rows, last ``tail_rows`` rows), both owned copies."""
    _require_matrix("matrix", matrix)
    nrows = matrix.shape[0]
    if not 0 <= tail_rows <= nrows:
        raise ValueError(f"cannot take {tail_rows} tail rows from a {nrows}-row matrix")
    cut = nrows - tail_rows
    return matrix[:cut].clone(), matrix[cut:].clone()


def split_columns(matrix: torch.Tensor, leading_cols: int) -> Tuple[torch.Tensor, torch.Tensor]:
    """Split into (first ``leading_cols`` columns, remaining columns)."""
    _require_matrix("matrix", matrix)
    ncols = matrix.shape[1]
    if not 0 < leading_cols < ncols:
        raise ValueError(f"cannot split {ncols} columns after column {leading_cols}")
    return matrix[:, :leading_cols].clone(), matrix[:, leading_cols:].clone()


def matmul(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    _require_matrix("a", a)
    _require_matrix("b", b)
    if a.shape[1] != b.shape[0]:
        raise ValueError(
            f"shape mismatch for product: {tuple(a.shape)} x {tuple(b.shape)}"
        )
    return a @ b


def transpose(matrix: torch.Tensor) -> torch.Tensor:
    _require_matrix("matrix", matrix)
    return matrix.t().contiguous()


def add_row_broadcast(matrix: torch.Tensor, row: torch.Tensor) -> torch.Tensor:
    """Add a ``1 x ncols`` row to every row of ``matrix``."""
    _require_matrix("matrix", matrix)
    _require_matrix("row", row)
    if row.shape != (1, matrix.shape[1]):
        raise ValueError(
            f"row of shape {tuple(row.shape)} cannot be broadcast over {tuple(matrix.shape)}"
        )
    return matrix + row


def subtract(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    _require_matrix("a", a)
    _require_matrix("b", b)
    if a.shape != b.shape:
        raise ValueError(f"cannot subtract {tuple(b.shape)} from {tuple(a.shape)}")
    return a - b


def sum_all(matrix: torch.Tensor) -> torch.Tensor:
    """Sum every element into a ``1 x 1`` matrix."""
    _require_matrix("matrix", matrix)
    return matrix.sum().reshape(1, 1)


__all__ = [
    "DTYPE",
    "as_float32",
    "reshape_rows",
    "split_rows",
    "split_columns",
    "matmul",
    "transpose",
    "add_row_broadcast",
    "subtract",
    "sum_all",
]
