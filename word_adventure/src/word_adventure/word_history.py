"""
Per-Word Interaction History

Tracks how a learner has done on each word and when it should come back
for review.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from word_adventure.catalog import Word, WordId

HOUR_MS = 60 * 60 * 1000

MIN_COOLDOWN_HOURS = 4
MAX_COOLDOWN_HOURS = 72
DIFFICULTY_MULTIPLIER = {"easy": 1.0, "medium": 1.5, "hard": 2.0}
OVERUSE_SHOWN_COUNT = 5

RATING_REMEMBERED = "remembered"
RATING_FORGOTTEN = "forgotten"


@dataclass(frozen=True)
class WordHistory:
    """Interaction record for one word."""
    word_id: WordId
    times_shown: int = 0
    consecutive_correct: int = 0
    average_accuracy: float = 0.0  # 0-100
    last_rating: Optional[str] = None  # "remembered" or "forgotten"
    last_seen: int = 0  # epoch ms
    next_review_at: int = 0  # epoch ms

    def is_due(self, now_ms: int) -> bool:
        return now_ms >= self.next_review_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wordId": self.word_id,
            "timesShown": self.times_shown,
            "consecutiveCorrect": self.consecutive_correct,
            "averageAccuracy": self.average_accuracy,
            "lastRating": self.last_rating,
            "lastSeen": self.last_seen,
            "nextReviewAt": self.next_review_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordHistory":
        return cls(
            word_id=data["wordId"],
            times_shown=data.get("timesShown", 0),
            consecutive_correct=data.get("consecutiveCorrect", 0),
            average_accuracy=data.get("averageAccuracy", 0.0),
            last_rating=data.get("lastRating"),
            last_seen=data.get("lastSeen", 0),
            next_review_at=data.get("nextReviewAt", 0),
        )


def calculate_cooldown_hours(
    difficulty: str,
    was_correct: bool,
    consecutive_correct: int,
    average_accuracy: float,
    times_shown: int
) -> float:
    """
    Hours until a word should be shown again.

    Correct answers push the word further out (longer streaks and higher
    accuracy mean longer rest); wrong answers bring it back sooner.
    """
    hours = MIN_COOLDOWN_HOURS * DIFFICULTY_MULTIPLIER.get(difficulty, 1.0)

    if was_correct:
        hours *= 1 + consecutive_correct * 0.5 + average_accuracy / 100
    else:
        hours *= 0.5

    if times_shown > OVERUSE_SHOWN_COUNT:
        hours *= 1.5

    return max(MIN_COOLDOWN_HOURS, min(MAX_COOLDOWN_HOURS, hours))


def update_word_history(
    existing: Optional[WordHistory],
    word: Word,
    was_correct: bool,
    now_ms: int
) -> WordHistory:
    """Return the history record after one more attempt at `word`."""
    current = existing or WordHistory(word_id=word.id)

    consecutive = current.consecutive_correct + 1 if was_correct else 0
    times_shown = current.times_shown + 1

    previous_total = current.average_accuracy * current.times_shown
    average = (previous_total + (100 if was_correct else 0)) / times_shown

    cooldown = calculate_cooldown_hours(
        word.difficulty, was_correct, consecutive, average, times_shown
    )

    return replace(
        current,
        times_shown=times_shown,
        consecutive_correct=consecutive,
        average_accuracy=average,
        last_rating=RATING_REMEMBERED if was_correct else RATING_FORGOTTEN,
        last_seen=now_ms,
        next_review_at=now_ms + int(cooldown * HOUR_MS),
    )
