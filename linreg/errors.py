class RegressionError(Exception):
    """Base class for failures of a training run."""


class DataAccessError(RegressionError):
    """The dataset file is missing, unreadable, or not a two-column numeric table."""


class MalformedInputError(RegressionError, ValueError):
    """The flat numeric sequence cannot be reshaped into whole rows."""


class InsufficientDataError(RegressionError, ValueError):
    """The held-out block leaves no rows for training."""


__all__ = [
    "RegressionError",
    "DataAccessError",
    "MalformedInputError",
    "InsufficientDataError",
]
