"""bayes-filter -- binary Naive Bayes text filtering."""

__version__ = "0.1.0"

from .bayes import NaiveBayesFilter, classify, cross_validate, log_scores, train
from .concurrent_set import (
    ConcurrentSet,
    ReadWriteLock,
    complement,
    difference,
    intersection,
    union,
)
from .config import Settings, configure_logging
from .evaluation import ClassificationMetrics, compute_metrics, stratified_k_fold
from .exceptions import (
    BayesFilterError,
    ConfigurationError,
    DegenerateModelError,
    InvalidInputError,
    NotTrainedError,
)
from .models import (
    ClassificationResult,
    ClassProbabilityModel,
    Label,
    LabeledCorpus,
    VectorEncoding,
)
from .vocabulary import build_vocabulary, load_corpus, vectorize, vectorize_all

__all__ = [
    # Core
    "NaiveBayesFilter",
    "train",
    "classify",
    "log_scores",
    # Vocabulary
    "build_vocabulary",
    "vectorize",
    "vectorize_all",
    "load_corpus",
    # Sets
    "ConcurrentSet",
    "ReadWriteLock",
    "union",
    "difference",
    "intersection",
    "complement",
    # Models
    "ClassProbabilityModel",
    "ClassificationResult",
    "Label",
    "LabeledCorpus",
    "VectorEncoding",
    # Evaluation
    "ClassificationMetrics",
    "compute_metrics",
    "cross_validate",
    "stratified_k_fold",
    # Configuration
    "Settings",
    "configure_logging",
    # Errors
    "BayesFilterError",
    "InvalidInputError",
    "DegenerateModelError",
    "NotTrainedError",
    "ConfigurationError",
]
