"""Univariate linear regression trained by batch gradient descent."""

from .config import TrainingConfig
from .dataset import RegressionDataset, load_flat_dataset, load_records
from .errors import DataAccessError, InsufficientDataError, MalformedInputError, RegressionError
from .model import LinearModel
from .trainer import TrainingResult, fit

__all__ = [
    "TrainingConfig",
    "RegressionDataset",
    "load_flat_dataset",
    "load_records",
    "RegressionError",
    "DataAccessError",
    "MalformedInputError",
    "InsufficientDataError",
    "LinearModel",
    "TrainingResult",
    "fit",
]
