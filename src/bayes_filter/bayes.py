"""Multinomial Naive Bayes training and classification for two classes.

Training uses additive (Laplace) smoothing: every word count starts at 1
and each class's word total starts at 2, so no word ends up with zero
probability in either class. Probabilities are stored as natural logs and
classification sums them, which avoids floating-point underflow on large
vocabularies.

Note that documents are vectorized with presence encoding by default while
the smoothing formula is the multinomial (frequency) one. The behaviour is
kept as-is; ``VectorEncoding.FREQUENCY`` switches to true counts.

Example::

    docs = [["love", "my", "dalmation"], ["stupid", "garbage"]]
    nb = NaiveBayesFilter()
    nb.fit(docs, [0, 1])
    nb.classify(["stupid", "dog"]).label  # Label.SENSITIVE
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from .config import Settings
from .evaluation import ClassificationMetrics, compute_metrics, stratified_k_fold
from .exceptions import DegenerateModelError, InvalidInputError, NotTrainedError
from .models import ClassificationResult, ClassProbabilityModel, LabeledCorpus, Label
from .numeric import (
    add_arrays,
    array_sum,
    array_sum_float,
    log_divide,
    multiply_arrays,
    ones,
    safe_log,
)
from .vocabulary import Document, build_vocabulary, vectorize_all

logger = logging.getLogger(__name__)

# Denominator pseudo-count: one per category
_BASE_TOTAL = 2


# ---------------------------------------------------------------------------
# Trainer / Classifier
# ---------------------------------------------------------------------------

def train(
    vectors: Sequence[Sequence[int]],
    labels: Sequence[int],
) -> ClassProbabilityModel:
    """Fit smoothed per-class word log-probabilities and the class prior.

    Args:
        vectors: Document vectors, all of the same non-zero length.
        labels: 0/1 label per vector.

    Returns:
        ClassProbabilityModel with ``prior`` equal to the fraction of
        labels that are 1.

    Raises:
        InvalidInputError: On an empty corpus, zero-length vectors,
            mismatched counts or lengths, or labels other than 0 and 1.
    """
    corpus = LabeledCorpus.from_lists(vectors, labels)
    width = corpus.width

    prior = array_sum(corpus.labels) / len(corpus)

    num0 = ones(width)
    num1 = ones(width)
    total0 = _BASE_TOTAL
    total1 = _BASE_TOTAL
    for vec, label in zip(corpus.vectors, corpus.labels):
        if label == Label.NORMAL:
            num0 = add_arrays(num0, vec)
            total0 += array_sum(vec)
        else:
            num1 = add_arrays(num1, vec)
            total1 += array_sum(vec)

    logger.debug(
        f"Trained on {len(corpus)} documents, {width} tokens, "
        f"prior={prior:.4f}, totals=({total0}, {total1})"
    )
    return ClassProbabilityModel(
        log_prob0=tuple(log_divide(num0, total0)),
        log_prob1=tuple(log_divide(num1, total1)),
        prior=prior,
    )


def log_scores(
    vector: Sequence[int],
    model: ClassProbabilityModel,
) -> tuple[float, float]:
    """Return the unnormalised log posterior ``(score0, score1)``.

    Raises:
        InvalidInputError: If the vector length differs from the model's.
    """
    if len(vector) != model.size:
        raise InvalidInputError(
            f"vector has length {len(vector)}, model expects {model.size}"
        )
    score0 = array_sum_float(multiply_arrays(vector, model.log_prob0)) + safe_log(1.0 - model.prior)
    score1 = array_sum_float(multiply_arrays(vector, model.log_prob1)) + safe_log(model.prior)
    return score0, score1


def classify(vector: Sequence[int], model: ClassProbabilityModel) -> int:
    """Predict 1 when class 1 scores strictly higher, else 0."""
    score0, score1 = log_scores(vector, model)
    return 1 if score1 > score0 else 0


def _posteriors(score0: float, score1: float) -> dict[int, float]:
    """Normalise two log scores into probabilities (log-sum-exp)."""
    max_score = max(score0, score1)
    exp0 = math.exp(score0 - max_score)
    exp1 = math.exp(score1 - max_score)
    total = exp0 + exp1
    return {0: exp0 / total, 1: exp1 / total}


# ---------------------------------------------------------------------------
# Pipeline (High-Level API)
# ---------------------------------------------------------------------------

class NaiveBayesFilter:
    """Train/classify pipeline over tokenized documents.

    Builds the vocabulary, vectorizes, trains and classifies. After
    ``fit`` the vocabulary and model are read-only and may be shared by
    concurrent ``classify`` calls.

    Args:
        settings: Optional runtime settings (vector encoding, defaults for
            cross-validation). Defaults to ``Settings()``.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or Settings()
        # (vocabulary, model), swapped in one assignment
        self._state: Optional[tuple[tuple[str, ...], ClassProbabilityModel]] = None

    @property
    def is_trained(self) -> bool:
        return self._state is not None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def vocabulary(self) -> tuple[str, ...]:
        return self._require_state()[0]

    @property
    def model(self) -> ClassProbabilityModel:
        return self._require_state()[1]

    def fit(
        self,
        documents: Sequence[Document],
        labels: Sequence[int],
    ) -> ClassificationMetrics:
        """Train the filter and return metrics on the training set.

        Raises:
            InvalidInputError: If documents and labels are empty or differ
                in length.
            DegenerateModelError: If the documents contain no tokens.
        """
        if len(documents) != len(labels):
            raise InvalidInputError(
                f"documents ({len(documents)}) and labels ({len(labels)}) must have same length"
            )
        if not documents:
            raise InvalidInputError("training corpus is empty")

        vocabulary = build_vocabulary(*documents)
        if not vocabulary:
            raise DegenerateModelError("vocabulary is empty; no tokens to classify on")

        vectors = vectorize_all(vocabulary, documents, self._settings.encoding)
        model = train(vectors, labels)
        self._state = (tuple(vocabulary), model)
        logger.info(
            f"Filter trained on {len(documents)} documents with {len(vocabulary)} tokens"
        )

        predictions = [classify(vec, model) for vec in vectors]
        return compute_metrics(labels, predictions)

    def classify(self, document: Document) -> ClassificationResult:
        """Classify one tokenized document.

        Raises:
            NotTrainedError: If ``fit`` has not been called.
        """
        return self.classify_batch([document])[0]

    def classify_batch(self, documents: Sequence[Document]) -> list[ClassificationResult]:
        vocabulary, model = self._require_state()
        results = []
        for vec in vectorize_all(vocabulary, documents, self._settings.encoding):
            score0, score1 = log_scores(vec, model)
            results.append(ClassificationResult(
                label=Label(1 if score1 > score0 else 0),
                log_scores={0: score0, 1: score1},
                probabilities=_posteriors(score0, score1),
            ))
        return results

    def predict(self, documents: Sequence[Document]) -> list[int]:
        """Predicted 0/1 label per document."""
        return [int(r.label) for r in self.classify_batch(documents)]

    def evaluate(
        self,
        documents: Sequence[Document],
        labels: Sequence[int],
        k: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> list[ClassificationMetrics]:
        """Run stratified k-fold cross-validation with this filter's settings."""
        return cross_validate(
            documents,
            labels,
            k=k if k is not None else self._settings.cv_folds,
            settings=self._settings,
            seed=seed if seed is not None else self._settings.seed,
        )

    def most_informative_features(
        self,
        label: int,
        top_n: int = 20,
    ) -> list[tuple[str, float]]:
        """Tokens whose log-probability most favours ``label`` over the other class.

        Returns:
            ``(token, log_ratio)`` tuples sorted by ratio, descending.
        """
        vocabulary, model = self._require_state()
        if label not in (Label.NORMAL, Label.SENSITIVE):
            raise InvalidInputError(f"labels must be 0 or 1, got {label!r}")

        if label == Label.SENSITIVE:
            target, other = model.log_prob1, model.log_prob0
        else:
            target, other = model.log_prob0, model.log_prob1

        ratios = [
            (token, round(t - o, 4))
            for token, t, o in zip(vocabulary, target, other)
        ]
        ratios.sort(key=lambda x: x[1], reverse=True)
        return ratios[:top_n]

    def _require_state(self) -> tuple[tuple[str, ...], ClassProbabilityModel]:
        state = self._state
        if state is None:
            raise NotTrainedError("Filter not trained. Call fit() first.")
        return state


# ---------------------------------------------------------------------------
# Cross-Validation
# ---------------------------------------------------------------------------

def cross_validate(
    documents: Sequence[Document],
    labels: Sequence[int],
    k: int = 5,
    settings: Optional[Settings] = None,
    seed: int = 42,
) -> list[ClassificationMetrics]:
    """Run stratified k-fold cross-validation.

    Each fold builds its own vocabulary from its training documents;
    test-fold tokens outside it are ignored.

    Args:
        documents: Tokenized documents.
        labels: 0/1 label per document.
        k: Number of folds.
        settings: Settings passed to each fold's filter.
        seed: Random seed for fold generation.

    Returns:
        List of ClassificationMetrics (one per fold).
    """
    if len(documents) != len(labels):
        raise InvalidInputError(
            f"documents ({len(documents)}) and labels ({len(labels)}) must have same length"
        )

    folds = stratified_k_fold(labels, k=k, seed=seed)
    results: list[ClassificationMetrics] = []

    for fold_idx, (train_idx, test_idx) in enumerate(folds):
        nb = NaiveBayesFilter(settings)
        nb.fit([documents[i] for i in train_idx], [labels[i] for i in train_idx])
        predictions = nb.predict([documents[i] for i in test_idx])
        metrics = compute_metrics([labels[i] for i in test_idx], predictions)
        logger.debug(f"Fold {fold_idx + 1}/{k}: accuracy={metrics.accuracy:.4f}")
        results.append(metrics)

    return results
