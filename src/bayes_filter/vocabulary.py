"""Vocabulary construction and document vectorization.

A vocabulary is the sorted, deduplicated union of every token in the
training documents. Sorting makes index ``i`` name the same token every
time the same training set is processed, whatever order the documents or
their tokens arrive in.

Documents are already tokenized: each is a sequence of strings compared
by exact equality.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Sequence

from .concurrent_set import ConcurrentSet
from .exceptions import InvalidInputError
from .models import VectorEncoding

logger = logging.getLogger(__name__)

Document = Sequence[str]


def build_vocabulary(*documents: Document) -> list[str]:
    """Return the sorted list of distinct tokens across ``documents``.

    Args:
        *documents: Token sequences.

    Returns:
        Each distinct token exactly once, in lexicographic order.
    """
    seen = ConcurrentSet()
    for doc in documents:
        seen.add(*doc)
    vocabulary = seen.to_sorted_list()
    logger.debug(f"Built vocabulary of {len(vocabulary)} tokens from {len(documents)} documents")
    return vocabulary


def _index(vocabulary: Sequence[str]) -> dict[str, list[int]]:
    """Map each token to every position it holds in ``vocabulary``."""
    positions: dict[str, list[int]] = defaultdict(list)
    for idx, token in enumerate(vocabulary):
        positions[token].append(idx)
    return positions


def _encode(
    positions: dict[str, list[int]],
    width: int,
    document: Document,
    encoding: VectorEncoding,
) -> list[int]:
    vec = [0] * width
    for token in document:
        for idx in positions.get(token, ()):
            if encoding == VectorEncoding.FREQUENCY:
                vec[idx] += 1
            else:
                vec[idx] = 1
    return vec


def vectorize(
    vocabulary: Sequence[str],
    document: Document,
    encoding: VectorEncoding = VectorEncoding.PRESENCE,
) -> list[int]:
    """Encode one document against a vocabulary.

    With the default presence encoding, position ``i`` is 1 when
    ``vocabulary[i]`` occurs at least once in the document, else 0.
    Tokens missing from the vocabulary are ignored.

    Args:
        vocabulary: Token list defining the vector positions.
        document: Token sequence to encode.
        encoding: Presence (0/1) or frequency (occurrence count).

    Returns:
        Integer vector of length ``len(vocabulary)``.
    """
    return _encode(_index(vocabulary), len(vocabulary), document, VectorEncoding(encoding))


def vectorize_all(
    vocabulary: Sequence[str],
    documents: Iterable[Document],
    encoding: VectorEncoding = VectorEncoding.PRESENCE,
) -> list[list[int]]:
    """Encode many documents, building the token index only once."""
    positions = _index(vocabulary)
    encoding = VectorEncoding(encoding)
    return [_encode(positions, len(vocabulary), doc, encoding) for doc in documents]


def load_corpus(
    labels: Sequence[int],
    *documents: Document,
) -> tuple[list[list[str]], list[int]]:
    """Bundle tokenized documents with their label vector.

    Raises:
        InvalidInputError: If the number of documents and labels differ.
    """
    if len(documents) != len(labels):
        raise InvalidInputError(
            f"documents ({len(documents)}) and labels ({len(labels)}) must have same length"
        )
    return [list(doc) for doc in documents], list(labels)
