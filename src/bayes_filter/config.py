"""
Configuration for the bayes-filter library.

Settings are read from environment variables; the CLI loads a ``.env``
file first so the same variables can live there.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from rich.logging import RichHandler

from .exceptions import ConfigurationError
from .models import VectorEncoding

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _int_from_env(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        encoding: Document vector encoding. Presence is the default;
            frequency counts are opt-in.
        log_level: Level name used by ``configure_logging``.
        cv_folds: Default number of cross-validation folds.
        seed: Default random seed for fold assignment.
    """

    encoding: VectorEncoding = VectorEncoding.PRESENCE
    log_level: str = "WARNING"
    cv_folds: int = 5
    seed: int = 42

    def __post_init__(self) -> None:
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level!r}"
            )
        if self.cv_folds < 2:
            raise ConfigurationError(f"cv_folds must be >= 2, got {self.cv_folds}")

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from ``BAYES_FILTER_*`` environment variables."""
        raw_encoding = os.getenv("BAYES_FILTER_ENCODING", cls.encoding.value).strip().lower()
        try:
            encoding = VectorEncoding(raw_encoding)
        except ValueError:
            choices = ", ".join(e.value for e in VectorEncoding)
            raise ConfigurationError(
                f"BAYES_FILTER_ENCODING must be one of {choices}, got {raw_encoding!r}"
            ) from None

        return cls(
            encoding=encoding,
            log_level=os.getenv("BAYES_FILTER_LOG_LEVEL", cls.log_level).strip().upper(),
            cv_folds=_int_from_env("BAYES_FILTER_CV_FOLDS", cls.cv_folds, minimum=2),
            seed=_int_from_env("BAYES_FILTER_SEED", cls.seed, minimum=0),
        )


def configure_logging(level: str = "WARNING") -> None:
    """Route ``bayes_filter`` log records through a rich handler."""
    logger = logging.getLogger("bayes_filter")
    logger.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(show_path=False, rich_tracebacks=False))
    logger.propagate = False
