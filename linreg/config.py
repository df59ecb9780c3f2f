import math
from dataclasses import dataclass

from .errors import InsufficientDataError


@dataclass(frozen=True)
class TrainingConfig:
    """Hyperparameters for a gradient-descent run."""
    feature_count: int = 1  # Predictor columns; the target is always the last column
    holdout_rows: int = 60  # Trailing rows reserved from training
    learning_rate: float = 0.0001
    epochs: int = 100
    log_every: int = 0  # Print the training SSE every N epochs (0 = silent)

    def __post_init__(self) -> None:
        if self.feature_count < 1:
            raise ValueError(f"feature_count must be >= 1, got {self.feature_count}")
        if self.holdout_rows < 0:
            raise ValueError(f"holdout_rows must be >= 0, got {self.holdout_rows}")
        if not math.isfinite(self.learning_rate) or self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be a positive number, got {self.learning_rate}")
        if self.epochs < 1:
            raise ValueError(f"epochs must be >= 1, got {self.epochs}")
        if self.log_every < 0:
            raise ValueError(f"log_every must be >= 0, got {self.log_every}")

    @property
    def column_count(self) -> int:
        return self.feature_count + 1

    def check_rows(self, total_rows: int) -> int:
        """Return the number of training rows, failing if none would remain."""
        if self.holdout_rows >= total_rows:
            raise InsufficientDataError(
                f"holdout_rows ({self.holdout_rows}) must be smaller than the "
                f"number of rows ({total_rows})"
            )
        return total_rows - self.holdout_rows


__all__ = ["TrainingConfig"]
