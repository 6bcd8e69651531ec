"""
Difficulty Progression

Maps how many words a learner has completed to a progression stage, the
difficulty mix for that stage, and the display info shown on the dashboard.
Stage selection and display read the same ProgressionThresholds.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from word_adventure.config import ProgressionThresholds

DEFAULT_THRESHOLDS = ProgressionThresholds()


class ProgressionStage(Enum):
    """Progression stages, in the order a learner moves through them."""
    EASY_FOCUS = "easy_focus"
    MIXED_EASY_MEDIUM = "mixed_easy_medium"
    MIXED_MEDIUM_HARD = "mixed_medium_hard"
    ALL_DIFFICULTIES = "all_difficulties"  # Terminal


# (difficulty, share of the session) buckets per stage
STAGE_DIFFICULTY_MIX: Dict[ProgressionStage, Tuple[Tuple[str, float], ...]] = {
    ProgressionStage.EASY_FOCUS: (("easy", 1.0),),
    ProgressionStage.MIXED_EASY_MEDIUM: (("easy", 0.7), ("medium", 0.3)),
    ProgressionStage.MIXED_MEDIUM_HARD: (("medium", 0.5), ("hard", 0.5)),
    ProgressionStage.ALL_DIFFICULTIES: (("easy", 0.3), ("medium", 0.4), ("hard", 0.3)),
}

STAGE_HEADLINE_DIFFICULTY: Dict[ProgressionStage, str] = {
    ProgressionStage.EASY_FOCUS: "easy",
    ProgressionStage.MIXED_EASY_MEDIUM: "medium",
    ProgressionStage.MIXED_MEDIUM_HARD: "hard",
    ProgressionStage.ALL_DIFFICULTIES: "medium",
}

STAGE_LABELS: Dict[ProgressionStage, Tuple[str, str]] = {
    ProgressionStage.EASY_FOCUS: (
        "Foundation Building", "Mastering easy words from all categories"),
    ProgressionStage.MIXED_EASY_MEDIUM: (
        "Skill Development", "Mixing easy and medium difficulty words"),
    ProgressionStage.MIXED_MEDIUM_HARD: (
        "Challenge Mode", "Tackling medium and hard words"),
    ProgressionStage.ALL_DIFFICULTIES: (
        "Master Level", "Balanced mix of all difficulty levels"),
}


@dataclass(frozen=True)
class ProgressionInfo:
    """Dashboard display info for a learner's progression."""
    stage: ProgressionStage
    stage_label: str
    description: str
    next_milestone: int
    progress: float  # percent toward next_milestone

    def to_dict(self) -> Dict[str, object]:
        return {
            "stage": self.stage_label,
            "description": self.description,
            "nextMilestone": self.next_milestone,
            "progress": self.progress,
        }


def determine_progression_stage(
    words_completed: int,
    thresholds: Optional[ProgressionThresholds] = None
) -> ProgressionStage:
    """
    Stage for a completed-word count.

    Recomputed on every call; a learner whose progress is cleared drops
    back to an earlier stage.
    """
    t = thresholds or DEFAULT_THRESHOLDS
    if words_completed < t.easy_threshold:
        return ProgressionStage.EASY_FOCUS
    elif words_completed < t.medium_threshold:
        return ProgressionStage.MIXED_EASY_MEDIUM
    elif words_completed < t.hard_threshold:
        return ProgressionStage.MIXED_MEDIUM_HARD
    return ProgressionStage.ALL_DIFFICULTIES


def get_progression_info(
    words_completed: int,
    thresholds: Optional[ProgressionThresholds] = None
) -> ProgressionInfo:
    """Label, description, next milestone and percent-to-milestone for display."""
    t = thresholds or DEFAULT_THRESHOLDS
    stage = determine_progression_stage(words_completed, t)
    label, description = STAGE_LABELS[stage]

    if stage is ProgressionStage.EASY_FOCUS:
        next_milestone = t.easy_threshold
        progress = words_completed / t.easy_threshold * 100
    elif stage is ProgressionStage.MIXED_EASY_MEDIUM:
        next_milestone = t.medium_threshold
        progress = (words_completed - t.easy_threshold) / (t.medium_threshold - t.easy_threshold) * 100
    elif stage is ProgressionStage.MIXED_MEDIUM_HARD:
        next_milestone = t.hard_threshold
        progress = (words_completed - t.medium_threshold) / t.hard_window * 100
    else:
        next_milestone = words_completed + t.master_milestone_step
        progress = 100.0

    return ProgressionInfo(
        stage=stage,
        stage_label=label,
        description=description,
        next_milestone=next_milestone,
        progress=max(0.0, min(100.0, progress)),
    )
