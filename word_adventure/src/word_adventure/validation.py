"""
Stored Record Validation

Schema for the persisted session record and the compatibility gate applied
before any stored, broadcast or imported record is accepted.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "activeTab",
    "selectedCategory",
    "learningMode",
    "rememberedWords",
    "forgottenWords",
    "lastUpdated",
)

WordIdValue = Union[int, str]


class WordHistoryModel(BaseModel):
    """Per-word interaction record as stored."""
    model_config = ConfigDict(extra="allow")

    wordId: WordIdValue
    timesShown: int = Field(default=0, ge=0)
    consecutiveCorrect: int = Field(default=0, ge=0)
    averageAccuracy: float = Field(default=0.0, ge=0.0, le=100.0)
    lastRating: Optional[str] = None
    lastSeen: int = Field(default=0, ge=0)
    nextReviewAt: int = Field(default=0, ge=0)


class StoredSessionRecord(BaseModel):
    """Persisted SessionData record. Unknown keys from newer minor versions are kept."""
    model_config = ConfigDict(extra="allow")

    activeTab: str
    selectedCategory: str
    learningMode: str
    rememberedWords: List[WordIdValue]
    forgottenWords: List[WordIdValue]
    lastUpdated: int = Field(ge=0)
    currentWordIndex: int = Field(default=0, ge=0)
    excludedWordIds: List[WordIdValue] = Field(default_factory=list)
    sessionNumber: int = Field(default=1, ge=1)
    dashboardSessionNumber: int = Field(default=1, ge=1)
    userWordHistory: Dict[str, WordHistoryModel] = Field(default_factory=dict)
    sessionStartTime: Optional[int] = Field(default=None, ge=0)
    version: Optional[str] = None


def parse_major_version(version: Any) -> Optional[int]:
    """Major component of a "major.minor" version string, or None if unparsable."""
    if not isinstance(version, str) or not version.strip():
        return None
    major = version.strip().split(".")[0]
    try:
        return int(major)
    except ValueError:
        return None


def parse_session_record(candidate: Any, expected_version: str) -> Optional[Dict[str, Any]]:
    """
    Validate a candidate record and return it with values coerced to their
    schema types (e.g. `"1000"` -> `1000`).

    Args:
        candidate: Decoded JSON value
        expected_version: Version the running code writes (e.g. "1.0")

    Returns:
        The normalised record, or None unless all required fields are
        present, the schema validates and, when a version is present, its
        major component matches.
    """
    if not isinstance(candidate, dict):
        return None

    missing = [name for name in REQUIRED_FIELDS if name not in candidate]
    if missing:
        logger.debug(f"🔍 [Validation] Record missing required fields: {missing}")
        return None

    if candidate.get("version") is not None:
        stored_major = parse_major_version(candidate["version"])
        expected_major = parse_major_version(expected_version)
        if stored_major is None or stored_major != expected_major:
            logger.info(
                f"ℹ️ [Validation] Version mismatch: stored={candidate['version']!r}, "
                f"expected={expected_version!r}"
            )
            return None

    try:
        record = StoredSessionRecord.model_validate(candidate)
    except ValidationError as e:
        logger.debug(f"🔍 [Validation] Schema validation failed: {e.error_count()} error(s)")
        return None

    return record.model_dump()


def is_valid_session_data(candidate: Any, expected_version: str) -> bool:
    """True if `candidate` may be accepted as SessionData."""
    return parse_session_record(candidate, expected_version) is not None
