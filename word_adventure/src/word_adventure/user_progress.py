"""
User Progress Projection

Read-only view of a learner's SessionData handed to the word generator.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

from word_adventure.catalog import WordCatalog, WordId
from word_adventure.config import ProgressionThresholds
from word_adventure.progression import STAGE_HEADLINE_DIFFICULTY, determine_progression_stage
from word_adventure.session_state import SessionData


@dataclass(frozen=True)
class UserProgress:
    """Cumulative learner progress."""
    words_completed: int = 0
    current_difficulty: str = "easy"
    remembered_words: FrozenSet[WordId] = field(default_factory=frozenset)
    forgotten_words: FrozenSet[WordId] = field(default_factory=frozenset)
    excluded_words: FrozenSet[WordId] = field(default_factory=frozenset)  # never offered again
    category_progress: Dict[str, int] = field(default_factory=dict)


def build_user_progress(
    session: SessionData,
    catalog: WordCatalog,
    thresholds: Optional[ProgressionThresholds] = None
) -> UserProgress:
    """
    Derive UserProgress from stored session state.

    words_completed counts every word the learner has rated at least once,
    category_progress counts remembered words per catalog category.
    Excluded words are carried through so the generator can skip them.
    """
    remembered = frozenset(session.remembered_words)
    forgotten = frozenset(session.forgotten_words)
    words_completed = len(remembered | forgotten)

    category_progress: Dict[str, int] = {}
    for word_id in remembered:
        word = catalog.get(word_id)
        if word is not None:
            category_progress[word.category] = category_progress.get(word.category, 0) + 1

    stage = determine_progression_stage(words_completed, thresholds)

    return UserProgress(
        words_completed=words_completed,
        current_difficulty=STAGE_HEADLINE_DIFFICULTY[stage],
        remembered_words=remembered,
        forgotten_words=forgotten,
        excluded_words=frozenset(session.excluded_word_ids),
        category_progress=category_progress,
    )
