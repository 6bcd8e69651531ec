"""Learning-session persistence and word-progression engine"""
from .session_store import SessionStore
from .word_session_generator import WordSessionGenerator, DashboardWordSession

__all__ = ["SessionStore", "WordSessionGenerator", "DashboardWordSession"]
