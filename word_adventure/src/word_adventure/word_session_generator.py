"""
Dashboard Word Session Generator

Builds the next batch of vocabulary for a learner.

Algorithm:
- Stage comes from words completed (easy -> easy+medium -> medium+hard -> all)
- Each difficulty bucket skips mastered and excluded words and reserves a
  share of its slots for previously forgotten words
- Buckets are combined and shuffled; a thin catalog is topped up with any
  unmastered words regardless of difficulty
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple, TypeVar

from word_adventure.catalog import Word, WordCatalog, WordId
from word_adventure.config import GeneratorSettings, ProgressionThresholds
from word_adventure.progression import (
    STAGE_DIFFICULTY_MIX,
    STAGE_HEADLINE_DIFFICULTY,
    ProgressionInfo,
    ProgressionStage,
    determine_progression_stage,
    get_progression_info,
)
from word_adventure.user_progress import UserProgress

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InvalidProgressError(ValueError):
    """Generator input failed validation."""


@dataclass(frozen=True)
class SessionInfo:
    """Metadata describing a generated session."""
    difficulty: str
    categories_used: Tuple[str, ...]
    session_number: int
    progression_stage: ProgressionStage
    total_words_generated: int


@dataclass(frozen=True)
class DashboardWordSession:
    """A generated batch of words. Never mutated after it is returned."""
    words: Tuple[Word, ...]
    session_info: SessionInfo

    def to_dict(self) -> Dict[str, Any]:
        return {
            "words": [word.to_dict() for word in self.words],
            "sessionInfo": {
                "difficulty": self.session_info.difficulty,
                "categoriesUsed": list(self.session_info.categories_used),
                "sessionNumber": self.session_info.session_number,
                "progressionStage": self.session_info.progression_stage.value,
                "totalWordsGenerated": self.session_info.total_words_generated,
            },
        }


class WordSessionGenerator:
    """
    Pure generator from (UserProgress, session number) to DashboardWordSession.

    Holds only configuration and an RNG; the catalog is read, never written.
    """

    def __init__(
        self,
        catalog: WordCatalog,
        thresholds: Optional[ProgressionThresholds] = None,
        settings: Optional[GeneratorSettings] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize generator.

        Args:
            catalog: Word catalog to draw from
            thresholds: Stage thresholds (defaults: 50 / 100 / 150)
            settings: Session size and review ratio (defaults: 20 / 0.3)
            rng: Random source; pass a seeded Random for reproducible sessions
        """
        self.catalog = catalog
        self.thresholds = thresholds or ProgressionThresholds()
        self.settings = settings or GeneratorSettings()
        self.rng = rng or random.Random()

    @property
    def words_per_session(self) -> int:
        return self.settings.words_per_session

    def generate_dashboard_session(
        self,
        progress: UserProgress,
        session_number: int = 1
    ) -> DashboardWordSession:
        """
        Generate the next dashboard session.

        Args:
            progress: Learner's cumulative progress
            session_number: Positive session counter, echoed in session_info

        Returns:
            DashboardWordSession with at most words_per_session words
        """
        self._validate(progress, session_number)

        stage = determine_progression_stage(progress.words_completed, self.thresholds)
        # Mastered and excluded words are never offered
        skipped = set(progress.remembered_words) | set(progress.excluded_words)
        forgotten = set(progress.forgotten_words)

        selected: List[Word] = []
        for difficulty, share in STAGE_DIFFICULTY_MIX[stage]:
            target = self._bucket_size(share)
            selected.extend(
                self._select_words_by_difficulty(difficulty, skipped, forgotten, target)
            )

        selected = self._shuffle(selected)

        if len(selected) < self.words_per_session:
            selected.extend(
                self._fill_remaining_slots(selected, self.words_per_session - len(selected), skipped)
            )

        words = tuple(selected[: self.words_per_session])
        categories_used = tuple(dict.fromkeys(word.category for word in words))

        if len(words) < self.words_per_session:
            logger.warning(
                f"⚠️ [WordSessionGenerator] Catalog too small: generated {len(words)} of "
                f"{self.words_per_session} words (stage={stage.value})"
            )
        logger.debug(
            f"🎲 [WordSessionGenerator] Session {session_number}: stage={stage.value}, "
            f"words={len(words)}, categories={len(categories_used)}"
        )

        return DashboardWordSession(
            words=words,
            session_info=SessionInfo(
                difficulty=STAGE_HEADLINE_DIFFICULTY[stage],
                categories_used=categories_used,
                session_number=session_number,
                progression_stage=stage,
                total_words_generated=len(words),
            ),
        )

    def get_progression_info(self, words_completed: int) -> ProgressionInfo:
        """Display info for the dashboard, using this generator's thresholds."""
        if isinstance(words_completed, bool) or not isinstance(words_completed, int) or words_completed < 0:
            raise InvalidProgressError(f"words_completed must be a non-negative integer (got {words_completed!r})")
        return get_progression_info(words_completed, self.thresholds)

    def _validate(self, progress: UserProgress, session_number: int):
        if not isinstance(progress, UserProgress):
            raise InvalidProgressError(f"Expected UserProgress, got {type(progress).__name__}")
        completed = progress.words_completed
        if isinstance(completed, bool) or not isinstance(completed, int) or completed < 0:
            raise InvalidProgressError(f"words_completed must be a non-negative integer (got {completed!r})")
        if isinstance(session_number, bool) or not isinstance(session_number, int) or session_number < 1:
            raise InvalidProgressError(f"session_number must be a positive integer (got {session_number!r})")

    def _bucket_size(self, share: float) -> int:
        # Epsilon keeps 20 * 0.7 from flooring to 13
        return math.floor(self.words_per_session * share + 1e-9)

    def _select_words_by_difficulty(
        self,
        difficulty: str,
        skipped: Set[WordId],
        forgotten: Set[WordId],
        max_words: int
    ) -> List[Word]:
        """
        Pick up to `max_words` of one difficulty.

        A review_ratio share of slots goes to forgotten words and the rest to
        new ones. A short partition leaves its slots empty here; the session
        is topped up later by _fill_remaining_slots.
        """
        candidates = [w for w in self.catalog.by_difficulty(difficulty) if w.id not in skipped]

        forgotten_candidates = [w for w in candidates if w.id in forgotten]
        new_candidates = [w for w in candidates if w.id not in forgotten]

        forgotten_count = math.floor(max_words * self.settings.review_ratio + 1e-9)
        new_count = max_words - forgotten_count

        selected_forgotten = self._shuffle(forgotten_candidates)[:forgotten_count]
        selected_new = self._shuffle(new_candidates)[:new_count]

        return selected_forgotten + selected_new

    def _fill_remaining_slots(
        self,
        existing: Iterable[Word],
        slots_needed: int,
        skipped: Set[WordId]
    ) -> List[Word]:
        """Any unmastered, non-excluded, not-yet-selected words, irrespective of difficulty."""
        existing_ids = {word.id for word in existing}
        available = [
            word for word in self.catalog
            if word.id not in existing_ids and word.id not in skipped
        ]
        return self._shuffle(available)[:slots_needed]

    def _shuffle(self, items: Sequence[T]) -> List[T]:
        """Shuffled copy (Fisher-Yates via Random.shuffle)."""
        shuffled = list(items)
        self.rng.shuffle(shuffled)
        return shuffled
