"""Exception classes for the Naive Bayes filter."""


class BayesFilterError(Exception):
    """Base exception for bayes-filter errors."""
    pass


class InvalidInputError(BayesFilterError, ValueError):
    """Raised when training or classification input is malformed."""
    pass


class DegenerateModelError(BayesFilterError, ValueError):
    """Raised when there are no vocabulary tokens to train on."""
    pass


class NotTrainedError(BayesFilterError, RuntimeError):
    """Raised when a filter is used for inference before it is trained."""
    pass


class ConfigurationError(BayesFilterError, ValueError):
    """Raised when configuration is invalid."""
    pass
