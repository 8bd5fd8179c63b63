"""Evaluation metrics and fold generation for binary classification."""

from __future__ import annotations

import random
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Sequence

from .exceptions import InvalidInputError
from .models import Label

_CLASSES = (Label.NORMAL, Label.SENSITIVE)


@dataclass
class ClassificationMetrics:
    """Scores for one set of 0/1 predictions, keyed by label.

    Attributes:
        accuracy: Overall accuracy.
        per_class: Per-label precision, recall, F1 scores.
        macro_precision: Unweighted mean precision across both labels.
        macro_recall: Unweighted mean recall across both labels.
        macro_f1: Unweighted mean F1 across both labels.
        weighted_f1: Support-weighted mean F1.
        confusion_matrix: ``{true: {predicted: count}}``.
        support: Per-label sample counts in the true labels.
    """

    accuracy: float = 0.0
    per_class: dict[int, dict[str, float]] = field(default_factory=dict)
    macro_precision: float = 0.0
    macro_recall: float = 0.0
    macro_f1: float = 0.0
    weighted_f1: float = 0.0
    confusion_matrix: dict[int, dict[int, int]] = field(default_factory=dict)
    support: dict[int, int] = field(default_factory=dict)


def compute_metrics(
    y_true: Sequence[int],
    y_pred: Sequence[int],
) -> ClassificationMetrics:
    """Compute binary classification metrics.

    Both labels are always reported, even when one never occurs.

    Raises:
        InvalidInputError: If the sequences differ in length or contain a
            label other than 0 or 1.
    """
    if len(y_true) != len(y_pred):
        raise InvalidInputError("y_true and y_pred must have the same length")
    for label in (*y_true, *y_pred):
        if label not in _CLASSES:
            raise InvalidInputError(f"labels must be 0 or 1, got {label!r}")

    classes = [int(c) for c in _CLASSES]
    n = len(y_true)

    cm: dict[int, dict[int, int]] = {c: {c2: 0 for c2 in classes} for c in classes}
    for true, pred in zip(y_true, y_pred):
        cm[int(true)][int(pred)] += 1

    correct = sum(cm[c][c] for c in classes)
    accuracy = correct / n if n > 0 else 0.0

    support = Counter(int(t) for t in y_true)
    per_class: dict[int, dict[str, float]] = {}
    for cls in classes:
        other = 1 - cls
        tp = cm[cls][cls]
        fp = cm[other][cls]
        fn = cm[cls][other]

        precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
        recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
        f1 = (
            2 * precision * recall / (precision + recall)
            if (precision + recall) > 0
            else 0.0
        )
        per_class[cls] = {"precision": precision, "recall": recall, "f1": f1}

    macro_p = sum(m["precision"] for m in per_class.values()) / len(classes)
    macro_r = sum(m["recall"] for m in per_class.values()) / len(classes)
    macro_f1 = sum(m["f1"] for m in per_class.values()) / len(classes)

    weighted_f1 = (
        sum(per_class[cls]["f1"] * support.get(cls, 0) for cls in classes) / n
        if n > 0
        else 0.0
    )

    return ClassificationMetrics(
        accuracy=accuracy,
        per_class=per_class,
        macro_precision=macro_p,
        macro_recall=macro_r,
        macro_f1=macro_f1,
        weighted_f1=weighted_f1,
        confusion_matrix=cm,
        support={cls: support.get(cls, 0) for cls in classes},
    )


def stratified_k_fold(
    labels: Sequence[int],
    k: int = 5,
    seed: int = 42,
) -> list[tuple[list[int], list[int]]]:
    """Generate stratified k-fold train/test index splits.

    Each fold gets roughly the same label mix as the full dataset.

    Args:
        labels: Label per sample.
        k: Number of folds.
        seed: Random seed for reproducibility.

    Returns:
        List of ``(train_indices, test_indices)`` tuples.
    """
    if k < 2:
        raise InvalidInputError(f"k must be >= 2, got {k}")
    if len(labels) < k:
        raise InvalidInputError(f"cannot split {len(labels)} samples into {k} folds")

    rng = random.Random(seed)

    class_indices: dict[int, list[int]] = defaultdict(list)
    for idx, label in enumerate(labels):
        class_indices[label].append(idx)

    for indices in class_indices.values():
        rng.shuffle(indices)

    # Continue the round-robin across labels so small classes don't all land in fold 0
    fold_assignments: list[int] = [0] * len(labels)
    offset = 0
    for cls in sorted(class_indices):
        for i, idx in enumerate(class_indices[cls]):
            fold_assignments[idx] = (offset + i) % k
        offset += len(class_indices[cls])

    folds: list[tuple[list[int], list[int]]] = []
    for fold_idx in range(k):
        test_indices = [i for i, f in enumerate(fold_assignments) if f == fold_idx]
        train_indices = [i for i, f in enumerate(fold_assignments) if f != fold_idx]
        folds.append((train_indices, test_indices))

    return folds
