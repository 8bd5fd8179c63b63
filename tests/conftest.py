"""Shared test fixtures for bayes-filter tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def dalmation_corpus() -> tuple[list[list[str]], list[int]]:
    """Two-document corpus: one normal, one sensitive."""
    docs = [["love", "my", "dalmation"], ["stupid", "garbage"]]
    labels = [0, 1]
    return docs, labels


@pytest.fixture
def posting_corpus() -> tuple[list[list[str]], list[int]]:
    """Six short forum postings, three of them abusive."""
    docs = [
        ["my", "dog", "has", "flea", "problems", "help", "please"],
        ["maybe", "not", "take", "him", "to", "dog", "park", "stupid"],
        ["my", "dalmation", "is", "so", "cute", "i", "love", "him"],
        ["stop", "posting", "stupid", "worthless", "garbage"],
        ["mr", "licks", "ate", "my", "steak", "how", "to", "stop", "him"],
        ["quit", "buying", "worthless", "dog", "food", "stupid"],
    ]
    labels = [0, 1, 0, 1, 0, 1]
    return docs, labels


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep BAYES_FILTER_* variables from the host out of every test."""
    for name in (
        "BAYES_FILTER_ENCODING",
        "BAYES_FILTER_LOG_LEVEL",
        "BAYES_FILTER_CV_FOLDS",
        "BAYES_FILTER_SEED",
    ):
        monkeypatch.delenv(name, raising=False)
