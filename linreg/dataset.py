"""
Dataset loading for regression training data.

This module turns a delimited text file with an ``x,y`` header into:
    - a list of `Record` rows (file order preserved),
    - the flat float32 tensor ``[x0, y0, x1, y1, ...]`` consumed by the trainer,
    - a PyTorch `Dataset` view yielding one row per sample.

Loading is all-or-nothing: any problem with the file raises `DataAccessError`
and no partial data is returned.
"""

from __future__ import annotations

import csv
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence

import torch
from torch.utils.data import Dataset

from .errors import DataAccessError
from .tensor_ops import DTYPE


DEFAULT_DATA_PATH = Path("data") / "simple_regression.csv"
FIELDNAMES = ("x", "y")

# Decimal or exponent notation, or inf/infinity/nan; no digit separators or padding
NUMBER_RE = re.compile(
    r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Record:
    x: float
    y: float


def _parse_float(value: str, field: str, line_no: int) -> float:
    if NUMBER_RE.fullmatch(value) is None:
        raise DataAccessError(f"line {line_no}: field {field!r} is not numeric: {value!r}")
    return float(value)


def load_records(path: str | Path, delimiter: str = ",") -> List[Record]:
    """
    Read every row of a two-column ``x,y`` file.

    Raises:
        DataAccessError: missing/unreadable file, header other than exactly ``x`` and
            ``y``, rows with a different number of fields, or non-numeric values.
    """
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8", newline="") as f:
            try:
                reader = csv.reader(f, delimiter=delimiter)
            except (TypeError, csv.Error) as exc:
                raise DataAccessError(f"invalid delimiter {delimiter!r}: {exc}") from exc
            header = next(reader, None)
            if header is None:
                raise DataAccessError(f"{p}: file is empty")
            header = [name.strip() for name in header]
            if sorted(header) != sorted(FIELDNAMES):
                raise DataAccessError(f"{p}: expected columns {list(FIELDNAMES)}, got {header}")
            x_idx, y_idx = header.index("x"), header.index("y")

            records: List[Record] = []
            for row in reader:
                if not row:
                    continue
                if len(row) != len(header):
                    raise DataAccessError(
                        f"line {reader.line_num}: expected {len(header)} fields, got {len(row)}"
                    )
                records.append(
                    Record(
                        x=_parse_float(row[x_idx], "x", reader.line_num),
                        y=_parse_float(row[y_idx], "y", reader.line_num),
                    )
                )
    except OSError as exc:
        raise DataAccessError(f"cannot read {p}: {exc}") from exc
    except (csv.Error, UnicodeDecodeError) as exc:
        raise DataAccessError(f"{p}: {exc}") from exc

    return records


def flatten_records(records: Sequence[Record]) -> torch.Tensor:
    flat: List[float] = []
    for record in records:
        flat.extend([record.x, record.y])
    return torch.tensor(flat, dtype=DTYPE)


def load_flat_dataset(path: str | Path = DEFAULT_DATA_PATH, delimiter: str = ",") -> torch.Tensor:
    """Load ``path`` (relative paths resolve against the working directory) as a flat tensor."""
    return flatten_records(load_records(path, delimiter=delimiter))


class RegressionDataset(Dataset):
    """
    PyTorch Dataset over the rows of a regression CSV file.

    All rows are parsed once at construction; ``__getitem__`` returns a dict of
    scalar float32 tensors so the dataset can also be fed to a DataLoader.
    """

    def __init__(self, path: str | Path = DEFAULT_DATA_PATH, delimiter: str = ",") -> None:
        super().__init__()
        self.path = Path(path)
        print(f"Loading {self.path}...", flush=True)
        self._records: List[Record] = load_records(self.path, delimiter=delimiter)
        print(f"  → {len(self._records)} row(s)", flush=True)

    def __len__(self) -> int:  # type: ignore[override]
        return len(self._records)

    def __getitem__(self, idx: int) -> Dict[str, torch.Tensor]:  # type: ignore[override]
        record = self._records[idx]
        return {
            'x': torch.tensor(record.x, dtype=DTYPE),
            'y': torch.tensor(record.y, dtype=DTYPE),
        }

    @property
    def records(self) -> List[Record]:
        return list(self._records)

    def flat(self) -> torch.Tensor:
        return flatten_records(self._records)


__all__ = [
    "DEFAULT_DATA_PATH",
    "Record",
    "load_records",
    "flatten_records",
    "load_flat_dataset",
    "RegressionDataset",
]
