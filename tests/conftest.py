"""
Shared fixtures: a manual clock and a manual timer scheduler so debounce and
expiry behaviour can be driven deterministically.
"""

import os
import sys

import pytest

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(project_root, "word_adventure", "src"))

from word_adventure.catalog import load_default_catalog
from word_adventure.storage import InMemoryStorage

# 2025-01-04T14:13:20Z
BASE_TIME_MS = 1_736_000_000_000


class ManualClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, now_ms: int = BASE_TIME_MS):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int):
        self.now_ms += ms


class ManualTimer:
    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """call_later() look-alike whose timers fire only on fire_all()."""

    def __init__(self):
        self.timers = []

    def call_later(self, delay: float, callback) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self):
        return [t for t in self.timers if not t.cancelled]

    def fire_all(self) -> int:
        fired = 0
        while self.active:
            timer = self.active[0]
            self.timers.remove(timer)
            timer.callback()
            fired += 1
        return fired


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def catalog():
    return load_default_catalog()


def make_record(**overrides):
    """A valid stored record; keyword arguments replace fields."""
    record = {
        "activeTab": "learning",
        "selectedCategory": "animals",
        "learningMode": "cards",
        "currentWordIndex": 3,
        "rememberedWords": [1, 2],
        "forgottenWords": [3],
        "excludedWordIds": [],
        "sessionNumber": 2,
        "dashboardSessionNumber": 1,
        "userWordHistory": {},
        "lastUpdated": BASE_TIME_MS,
        "sessionStartTime": BASE_TIME_MS - 60_000,
        "version": "1.0",
    }
    record.update(overrides)
    return record


@pytest.fixture
def record_factory():
    return make_record
