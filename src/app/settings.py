"""Configuration helpers for the vocabulary drill runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from src.drill.session_builder import BROAD_REVIEW_WINDOW, TARGETED_PRACTICE_WINDOW


def _read_positive_int(name: str, default: int) -> int:
    try:
        value = int(os.getenv(name, str(default)))
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer.") from exc
    if value < 1:
        raise RuntimeError(f"{name} must be a positive integer.")
    return value


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    broad_review_window: int
    targeted_practice_window: int
    shuffle_seed: Optional[int]
    starter_vocabulary_path: Optional[Path]

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Via Latina")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        broad_review_window = _read_positive_int("BROAD_REVIEW_WINDOW", BROAD_REVIEW_WINDOW)
        targeted_practice_window = _read_positive_int("TARGETED_PRACTICE_WINDOW", TARGETED_PRACTICE_WINDOW)

        raw_seed = os.getenv("SHUFFLE_SEED")
        shuffle_seed: Optional[int] = None
        if raw_seed:
            try:
                shuffle_seed = int(raw_seed)
            except ValueError as exc:
                raise RuntimeError("SHUFFLE_SEED must be an integer.") from exc

        raw_path = os.getenv("STARTER_VOCABULARY_PATH")
        starter_vocabulary_path = Path(raw_path).expanduser() if raw_path else None

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            broad_review_window=broad_review_window,
            targeted_practice_window=targeted_practice_window,
            shuffle_seed=shuffle_seed,
            starter_vocabulary_path=starter_vocabulary_path,
        )
