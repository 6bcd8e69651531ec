"""
Engine Configuration

Environment-driven settings for the session store, the word generator and
the progression thresholds. Values are read from the process environment
(optionally populated from a .env file) and fall back to built-in defaults.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "wordy-learning-session"
DEFAULT_DEBOUNCE_MS = 500
DEFAULT_MAX_AGE_MS = 7 * 24 * 60 * 60 * 1000  # 7 days
DEFAULT_VERSION = "1.0"
DEFAULT_MAX_RECORD_BYTES = 1024 * 1024  # 1MB
DEFAULT_HISTORY_COMPACT_LIMIT = 50

DEFAULT_WORDS_PER_SESSION = 20
DEFAULT_REVIEW_RATIO = 0.3


@dataclass(frozen=True)
class ProgressionThresholds:
    """
    Word-count thresholds shared by stage selection and progression display.

    easy_focus         : words_completed < easy_threshold
    mixed_easy_medium  : easy_threshold <= words_completed < medium_threshold
    mixed_medium_hard  : medium_threshold <= words_completed < hard_threshold
    all_difficulties   : words_completed >= hard_threshold
    """
    easy_threshold: int = 50
    medium_threshold: int = 100
    hard_window: int = 50
    master_milestone_step: int = 100

    def __post_init__(self):
        if not 0 < self.easy_threshold < self.medium_threshold:
            raise ValueError(
                f"Thresholds must satisfy 0 < easy < medium "
                f"(got easy={self.easy_threshold}, medium={self.medium_threshold})"
            )
        if self.hard_window <= 0 or self.master_milestone_step <= 0:
            raise ValueError("hard_window and master_milestone_step must be positive")

    @property
    def hard_threshold(self) -> int:
        return self.medium_threshold + self.hard_window


@dataclass
class StoreSettings:
    """Settings for SessionStore persistence."""
    storage_key: str = DEFAULT_STORAGE_KEY
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    max_age_ms: int = DEFAULT_MAX_AGE_MS
    version: str = DEFAULT_VERSION
    max_record_bytes: int = DEFAULT_MAX_RECORD_BYTES
    history_compact_limit: int = DEFAULT_HISTORY_COMPACT_LIMIT


@dataclass(frozen=True)
class GeneratorSettings:
    """Settings for WordSessionGenerator."""
    words_per_session: int = DEFAULT_WORDS_PER_SESSION
    review_ratio: float = DEFAULT_REVIEW_RATIO

    def __post_init__(self):
        if self.words_per_session <= 0:
            raise ValueError("words_per_session must be positive")
        if not 0.0 <= self.review_ratio <= 1.0:
            raise ValueError("review_ratio must be between 0 and 1")


_env_loaded = False


def _ensure_env_loaded():
    global _env_loaded
    if not _env_loaded:
        load_dotenv()
        _env_loaded = True


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"⚠️ [Config] Invalid integer for {name}={raw!r}, using default {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"⚠️ [Config] Invalid number for {name}={raw!r}, using default {default}")
        return default


def load_store_settings() -> StoreSettings:
    """Build StoreSettings from WORDY_* environment variables."""
    _ensure_env_loaded()
    return StoreSettings(
        storage_key=os.getenv("WORDY_STORAGE_KEY", DEFAULT_STORAGE_KEY),
        debounce_ms=_env_int("WORDY_DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS),
        max_age_ms=_env_int("WORDY_MAX_AGE_MS", DEFAULT_MAX_AGE_MS),
        version=os.getenv("WORDY_SESSION_VERSION", DEFAULT_VERSION),
        max_record_bytes=_env_int("WORDY_MAX_RECORD_BYTES", DEFAULT_MAX_RECORD_BYTES),
        history_compact_limit=_env_int("WORDY_HISTORY_COMPACT_LIMIT", DEFAULT_HISTORY_COMPACT_LIMIT),
    )


def load_generator_settings() -> GeneratorSettings:
    """Build GeneratorSettings from WORDY_* environment variables."""
    _ensure_env_loaded()
    return GeneratorSettings(
        words_per_session=_env_int("WORDY_WORDS_PER_SESSION", DEFAULT_WORDS_PER_SESSION),
        review_ratio=_env_float("WORDY_REVIEW_RATIO", DEFAULT_REVIEW_RATIO),
    )


def load_progression_thresholds() -> ProgressionThresholds:
    """Build ProgressionThresholds from WORDY_* environment variables."""
    _ensure_env_loaded()
    return ProgressionThresholds(
        easy_threshold=_env_int("WORDY_EASY_THRESHOLD", 50),
        medium_threshold=_env_int("WORDY_MEDIUM_THRESHOLD", 100),
        hard_window=_env_int("WORDY_HARD_WINDOW", 50),
        master_milestone_step=_env_int("WORDY_MASTER_MILESTONE_STEP", 100),
    )


def get_storage_dir(default: Optional[str] = None) -> str:
    """Directory used by file-backed storage (WORDY_STORAGE_DIR)."""
    _ensure_env_loaded()
    return os.getenv("WORDY_STORAGE_DIR", default or os.path.join(os.getcwd(), ".wordy_storage"))
