"""
Session State Data Model

Defines the SessionData dataclass holding a learner's in-progress state,
plus conversion to and from the stored JSON record format.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Set

from word_adventure.catalog import WordId
from word_adventure.validation import WordHistoryModel
from word_adventure.word_history import WordHistory


@dataclass
class SessionData:
    """Learner state for one learner/browser pairing."""
    # Navigation state, opaque to the store
    active_tab: str = "dashboard"
    selected_category: str = ""
    learning_mode: str = "selector"  # "cards", "matching", "selector"
    current_word_index: int = 0
    # Progress tracking
    remembered_words: Set[WordId] = field(default_factory=set)
    forgotten_words: Set[WordId] = field(default_factory=set)
    excluded_word_ids: Set[WordId] = field(default_factory=set)
    session_number: int = 1
    dashboard_session_number: int = 1
    user_word_history: Dict[WordId, WordHistory] = field(default_factory=dict)
    # Timestamps (epoch ms)
    last_updated: int = 0
    session_start_time: int = 0
    version: str = "1.0"

    def copy(self) -> "SessionData":
        """Copy with fresh containers so callers cannot mutate store state."""
        return replace(
            self,
            remembered_words=set(self.remembered_words),
            forgotten_words=set(self.forgotten_words),
            excluded_word_ids=set(self.excluded_word_ids),
            user_word_history=dict(self.user_word_history),
        )


# snake_case attribute -> camelCase record key
FIELD_TO_KEY = {
    "active_tab": "activeTab",
    "selected_category": "selectedCategory",
    "learning_mode": "learningMode",
    "current_word_index": "currentWordIndex",
    "remembered_words": "rememberedWords",
    "forgotten_words": "forgottenWords",
    "excluded_word_ids": "excludedWordIds",
    "session_number": "sessionNumber",
    "dashboard_session_number": "dashboardSessionNumber",
    "user_word_history": "userWordHistory",
    "last_updated": "lastUpdated",
    "session_start_time": "sessionStartTime",
    "version": "version",
}
KEY_TO_FIELD = {key: name for name, key in FIELD_TO_KEY.items()}

SET_FIELDS = ("remembered_words", "forgotten_words", "excluded_word_ids")

# Stamped by the store, never taken from callers
STORE_MANAGED_FIELDS = ("last_updated", "session_start_time")


def _id_sort_key(word_id: WordId):
    return (isinstance(word_id, str), word_id)


def create_default_session(now_ms: int, version: str = "1.0") -> SessionData:
    """Fresh record for a browser with no stored session."""
    return SessionData(last_updated=now_ms, session_start_time=now_ms, version=version)


def normalize_field_name(name: str) -> str:
    """Accept either the attribute name or the record key."""
    if name in FIELD_TO_KEY:
        return name
    if name in KEY_TO_FIELD:
        return KEY_TO_FIELD[name]
    raise KeyError(f"Unknown session field: {name}")


def coerce_field_value(name: str, value: Any) -> Any:
    """Convert a partial-update value into the attribute's Python type."""
    if name in SET_FIELDS:
        return set(value or ())
    if name == "user_word_history":
        return history_from_record(value or {})
    return value


def history_from_record(raw: Any) -> Dict[WordId, WordHistory]:
    """
    Rebuild the history mapping; word ids come from each entry, not the JSON key.

    Raw entries are checked against WordHistoryModel, so a malformed entry
    raises pydantic.ValidationError (a ValueError).
    """
    if isinstance(raw, Mapping):
        items = raw.values()
    else:
        # [[id, entry], ...] pairs
        items = [entry for _, entry in raw]
    history: Dict[WordId, WordHistory] = {}
    for entry in items:
        if isinstance(entry, WordHistory):
            record = entry
        else:
            record = WordHistory.from_dict(WordHistoryModel.model_validate(entry).model_dump())
        history[record.word_id] = record
    return history


def session_to_dict(session: SessionData) -> Dict[str, Any]:
    """
    Convert SessionData to the stored record format.

    Args:
        session: SessionData object

    Returns:
        JSON-ready dictionary with camelCase keys
    """
    return {
        "activeTab": session.active_tab,
        "selectedCategory": session.selected_category,
        "learningMode": session.learning_mode,
        "currentWordIndex": session.current_word_index,
        "rememberedWords": sorted(session.remembered_words, key=_id_sort_key),
        "forgottenWords": sorted(session.forgotten_words, key=_id_sort_key),
        "excludedWordIds": sorted(session.excluded_word_ids, key=_id_sort_key),
        "sessionNumber": session.session_number,
        "dashboardSessionNumber": session.dashboard_session_number,
        "userWordHistory": {
            str(word_id): entry.to_dict()
            for word_id, entry in session.user_word_history.items()
        },
        "lastUpdated": session.last_updated,
        "sessionStartTime": session.session_start_time,
        "version": session.version,
    }


def dict_to_session(data: Mapping[str, Any], defaults: SessionData) -> SessionData:
    """
    Merge a stored record over default values.

    Args:
        data: Record from storage (already validated)
        defaults: SessionData supplying values for missing keys

    Returns:
        SessionData object
    """
    session = defaults.copy()
    for attr in fields(SessionData):
        key = FIELD_TO_KEY[attr.name]
        if key in data and data[key] is not None:
            setattr(session, attr.name, coerce_field_value(attr.name, data[key]))
    return session
