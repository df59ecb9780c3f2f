from pathlib import Path
from typing import Callable, List, Tuple

import pytest


def linear_rows(n: int, slope: float = 5.0, intercept: float = 2.0, step: float = 0.05) -> List[Tuple[float, float]]:
    return [(i * step, slope * i * step + intercept) for i in range(n)]


def flat(rows: List[Tuple[float, float]]) -> List[float]:
    return [value for row in rows for value in row]


@pytest.fixture
def write_csv(tmp_path) -> Callable[..., Path]:
    def _write(text: str, name: str = "data.csv") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def regression_csv(write_csv) -> Path:
    lines = ["x,y"] + [f"{x},{y}" for x, y in linear_rows(200)]
    return write_csv("\n".join(lines) + "\n")
