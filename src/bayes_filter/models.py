"""Data models for training and classification."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Mapping, Sequence

from .exceptions import DegenerateModelError, InvalidInputError
from .numeric import round_decimal


class Label(IntEnum):
    """Binary class labels."""

    NORMAL = 0
    SENSITIVE = 1


class VectorEncoding(str, Enum):
    """How token occurrences are written into a document vector."""

    PRESENCE = "presence"
    FREQUENCY = "frequency"


def _check_label(label: int) -> None:
    if label not in (Label.NORMAL, Label.SENSITIVE):
        raise InvalidInputError(f"labels must be 0 or 1, got {label!r}")


@dataclass(frozen=True)
class LabeledCorpus:
    """Document vectors paired positionally with 0/1 labels.

    Validates on construction so that anything holding a ``LabeledCorpus``
    can rely on equal counts, equal vector lengths and binary labels.
    """

    vectors: tuple[tuple[int, ...], ...]
    labels: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.vectors) != len(self.labels):
            raise InvalidInputError(
                f"vectors ({len(self.vectors)}) and labels ({len(self.labels)}) "
                "must have same length"
            )
        if not self.vectors:
            raise InvalidInputError("training corpus is empty")

        width = len(self.vectors[0])
        if width == 0:
            raise InvalidInputError("document vectors have length 0")
        for idx, vec in enumerate(self.vectors):
            if len(vec) != width:
                raise InvalidInputError(
                    f"vector {idx} has length {len(vec)}, expected {width}"
                )
        for label in self.labels:
            _check_label(label)

    @classmethod
    def from_lists(
        cls,
        vectors: Sequence[Sequence[int]],
        labels: Sequence[int],
    ) -> "LabeledCorpus":
        return cls(
            vectors=tuple(tuple(v) for v in vectors),
            labels=tuple(labels),
        )

    @property
    def width(self) -> int:
        """Vector length, equal to the vocabulary size."""
        return len(self.vectors[0])

    def __len__(self) -> int:
        return len(self.labels)


@dataclass(frozen=True)
class ClassProbabilityModel:
    """Smoothed per-class log word probabilities plus the class prior.

    Attributes:
        log_prob0: Natural-log word probabilities for class 0.
        log_prob1: Natural-log word probabilities for class 1.
        prior: Fraction of training labels equal to 1.
    """

    log_prob0: tuple[float, ...]
    log_prob1: tuple[float, ...]
    prior: float

    def __post_init__(self) -> None:
        if len(self.log_prob0) != len(self.log_prob1):
            raise InvalidInputError(
                f"log_prob0 ({len(self.log_prob0)}) and log_prob1 "
                f"({len(self.log_prob1)}) must have same length"
            )
        if not self.log_prob0:
            raise DegenerateModelError("model has no vocabulary tokens")
        if not 0.0 <= self.prior <= 1.0:
            raise InvalidInputError(f"prior must be in [0, 1], got {self.prior}")

    @property
    def size(self) -> int:
        return len(self.log_prob0)

    def probabilities(self, label: int) -> list[float]:
        """Exponentiated word probabilities for one class."""
        _check_label(label)
        log_probs = self.log_prob1 if label == Label.SENSITIVE else self.log_prob0
        return [math.exp(lp) for lp in log_probs]


@dataclass(frozen=True)
class ClassificationResult:
    """Result of classifying a single document.

    ``log_scores`` and ``probabilities`` are stored as read-only mappings.
    """

    label: Label
    log_scores: Mapping[int, float] = field(default_factory=dict)
    probabilities: Mapping[int, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "log_scores", MappingProxyType(dict(self.log_scores)))
        object.__setattr__(self, "probabilities", MappingProxyType(dict(self.probabilities)))

    @property
    def confidence(self) -> float:
        return self.probabilities.get(int(self.label), 0.0)

    @property
    def is_sensitive(self) -> bool:
        return self.label == Label.SENSITIVE

    def to_dict(self) -> dict:
        """Plain-dict view; a ``-inf`` log score (one-class training) becomes ``None``."""
        return {
            "label": int(self.label),
            "label_name": self.label.name.lower(),
            "confidence": round_decimal(self.confidence, 4),
            "log_scores": {
                k: round_decimal(v, 4) if math.isfinite(v) else None
                for k, v in sorted(self.log_scores.items())
            },
            "probabilities": {
                k: round_decimal(v, 4) for k, v in sorted(self.probabilities.items())
            },
        }
