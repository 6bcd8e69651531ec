"""
Unit tests for SessionStore.

Debounce, expiry and cross-context adoption are driven by a manual clock and
scheduler, so no test depends on wall time except the event-loop test.
"""

import asyncio
import json
import os
import sys
from dataclasses import fields

import pytest

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "word_adventure", "src"))

from word_adventure.channel import ChangeEvent, InProcessChannel
from word_adventure.config import StoreSettings
from word_adventure.session_state import SessionData
from word_adventure.session_store import SessionStore
from word_adventure.storage import InMemoryStorage, StorageError

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS


class UnreadableStorage(InMemoryStorage):
    def get_item(self, key):
        raise StorageError("storage unavailable")


class ReadOnlyStorage(InMemoryStorage):
    def set_item(self, key, value):
        raise StorageError("storage is read-only")


@pytest.fixture
def make_store(storage, clock, scheduler):
    """Build initialised stores sharing the fixture storage, clock and scheduler."""
    created = []

    def factory(**kwargs):
        kwargs.setdefault("storage", storage)
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("scheduler", scheduler)
        store = SessionStore(**kwargs)
        store.init()
        created.append(store)
        return store

    yield factory
    for store in created:
        store.dispose()


class TestDebouncedWrites:
    """Changes apply in memory immediately and reach storage once per burst."""

    def test_burst_of_updates_writes_once(self, make_store, storage, clock, scheduler):
        store = make_store()
        for index in range(5):
            clock.advance(100)
            store.update(current_word_index=index)

        assert storage.write_count == 0
        assert store.data.current_word_index == 4
        assert len(scheduler.active) == 1

        scheduler.fire_all()

        assert storage.write_count == 1
        stored = json.loads(storage.get_item(store.key))
        assert stored["currentWordIndex"] == 4
        assert stored["lastUpdated"] >= clock()

    def test_debounce_window_comes_from_settings(self, make_store, scheduler):
        store = make_store(settings=StoreSettings(debounce_ms=250))
        store.update(selected_category="space")

        assert scheduler.active[0].delay == pytest.approx(0.25)

    def test_flush_on_unload_writes_pending_change(self, make_store, storage, scheduler):
        store = make_store()
        store.update(selected_category="food")
        assert storage.get_item(store.key) is None

        assert store.on_unload() is True

        assert json.loads(storage.get_item(store.key))["selectedCategory"] == "food"
        assert not store.has_pending_write
        assert scheduler.fire_all() == 0
        assert storage.write_count == 1

    def test_flush_without_pending_write_is_noop(self, make_store, storage):
        store = make_store()
        assert store.flush() is False
        assert storage.write_count == 0

    def test_dispose_flushes(self, storage, clock, scheduler):
        store = SessionStore(storage, clock=clock, scheduler=scheduler)
        store.init()
        store.update(learning_mode="matching")

        store.dispose()

        assert json.loads(storage.get_item(store.key))["learningMode"] == "matching"

    def test_writes_through_without_event_loop(self, storage, clock):
        store = SessionStore(storage, clock=clock)
        store.init()

        store.update(selected_category="weather")

        assert storage.write_count == 1
        assert not store.has_pending_write

    def test_last_saved_time_tracks_successful_write(self, make_store, clock, scheduler):
        store = make_store()
        assert store.last_saved_time is None

        store.update(active_tab="progress")
        clock.advance(500)
        scheduler.fire_all()

        assert store.last_saved_time == clock()


class TestLoad:
    """Restoring, discarding and expiring stored records."""

    def test_empty_storage_gives_defaults(self, make_store, clock):
        store = make_store()
        session = store.data

        assert session.active_tab == "dashboard"
        assert session.learning_mode == "selector"
        assert session.remembered_words == set()
        assert session.session_number == 1
        assert session.last_updated == clock()
        assert session.session_start_time == clock()

    def test_valid_record_is_restored(self, make_store, storage, record_factory):
        storage.set_item("wordy-learning-session", json.dumps(record_factory()))

        session = make_store().data

        assert session.selected_category == "animals"
        assert session.remembered_words == {1, 2}
        assert session.forgotten_words == {3}
        assert session.current_word_index == 3
        assert session.session_number == 2

    def test_string_word_ids_are_kept(self, make_store, storage, record_factory):
        storage.set_item("wordy-learning-session", json.dumps(
            record_factory(rememberedWords=["w-1", 2], forgottenWords=["w-9"])
        ))

        session = make_store().data

        assert session.remembered_words == {"w-1", 2}
        assert session.forgotten_words == {"w-9"}

    def test_initial_data_overrides_defaults(self, make_store):
        store = make_store(initial_data={"activeTab": "learning", "learning_mode": "cards"})

        assert store.data.active_tab == "learning"
        assert store.data.learning_mode == "cards"

    def test_expired_record_is_deleted(self, make_store, storage, clock, record_factory):
        max_age = StoreSettings().max_age_ms
        storage.set_item("wordy-learning-session", json.dumps(
            record_factory(lastUpdated=clock() - max_age - 1)
        ))

        session = make_store().data

        assert session.selected_category == ""
        assert session.remembered_words == set()
        assert storage.get_item("wordy-learning-session") is None

    def test_record_just_inside_max_age_is_kept(self, make_store, storage, clock, record_factory):
        max_age = StoreSettings().max_age_ms
        storage.set_item("wordy-learning-session", json.dumps(
            record_factory(lastUpdated=clock() - (max_age - 1))
        ))

        session = make_store().data

        assert session.selected_category == "animals"
        assert storage.get_item("wordy-learning-session") is not None

    def test_custom_max_age(self, make_store, storage, clock, record_factory):
        storage.set_item("wordy-learning-session", json.dumps(
            record_factory(lastUpdated=clock() - 2 * DAY_MS)
        ))

        session = make_store(settings=StoreSettings(max_age_ms=DAY_MS)).data

        assert session.selected_category == ""

    @pytest.mark.parametrize("version,accepted", [
        ("1.0", True),
        ("1.7", True),
        ("2.0", False),
        ("0.9", False),
        ("banana", False),
    ])
    def test_version_gate(self, make_store, storage, record_factory, version, accepted):
        storage.set_item("wordy-learning-session", json.dumps(record_factory(version=version)))

        session = make_store().data

        assert (session.selected_category == "animals") is accepted
        assert (storage.get_item("wordy-learning-session") is not None) is accepted

    def test_record_without_version_is_accepted(self, make_store, storage, record_factory):
        record = record_factory()
        del record["version"]
        storage.set_item("wordy-learning-session", json.dumps(record))

        assert make_store().data.selected_category == "animals"

    def test_corrupt_json_is_deleted(self, make_store, storage):
        storage.set_item("wordy-learning-session", "{not json")

        session = make_store().data

        assert session.active_tab == "dashboard"
        assert storage.get_item("wordy-learning-session") is None

    def test_record_missing_required_field_is_deleted(self, make_store, storage, record_factory):
        record = record_factory()
        del record["learningMode"]
        storage.set_item("wordy-learning-session", json.dumps(record))

        assert make_store().data.learning_mode == "selector"
        assert storage.get_item("wordy-learning-session") is None

    def test_storage_read_error_gives_defaults(self, clock, scheduler):
        store = SessionStore(UnreadableStorage(), clock=clock, scheduler=scheduler)

        session = store.init()

        assert session.active_tab == "dashboard"

    def test_overlapping_sets_are_repaired_on_load(self, make_store, storage, record_factory):
        storage.set_item("wordy-learning-session", json.dumps(
            record_factory(rememberedWords=[1, 2], forgottenWords=[2, 3])
        ))

        session = make_store().data

        assert session.remembered_words == {1, 2}
        assert session.forgotten_words == {3}


class TestUpdate:
    """Partial updates, stamping and the remembered/forgotten invariant."""

    def test_accepts_attribute_and_record_names(self, make_store):
        store = make_store()
        store.update({"selectedCategory": "music"}, learning_mode="cards")

        assert store.data.selected_category == "music"
        assert store.data.learning_mode == "cards"

    def test_unknown_field_raises(self, make_store):
        store = make_store()
        with pytest.raises(KeyError):
            store.update(favourite_colour="blue")

    def test_caller_timestamps_are_ignored(self, make_store, clock):
        store = make_store()
        store.update(lastUpdated=5, session_start_time=7, selected_category="food")

        assert store.data.last_updated >= clock()
        assert store.data.session_start_time == clock()

    def test_stamps_strictly_increase(self, make_store, clock):
        store = make_store()
        store.update(current_word_index=1)
        first = store.data.last_updated
        store.update(current_word_index=2)
        second = store.data.last_updated
        clock.advance(-10 * MINUTE_MS)
        store.update(current_word_index=3)

        assert first < second < store.data.last_updated

    def test_forgetting_a_remembered_word_moves_it(self, make_store):
        store = make_store()
        store.update(remembered_words={1, 2})
        store.update(forgotten_words={2, 3})

        assert store.data.remembered_words == {1}
        assert store.data.forgotten_words == {2, 3}

    def test_word_in_both_sets_at_once_stays_remembered(self, make_store):
        store = make_store()
        store.save_progress({1, 2}, {2, 3}, 0)

        assert store.data.remembered_words == {1, 2}
        assert store.data.forgotten_words == {3}

    def test_data_is_a_copy(self, make_store):
        store = make_store()
        snapshot = store.data
        snapshot.remembered_words.add(99)

        assert 99 not in store.data.remembered_words

    def test_listeners_see_changes_until_removed(self, make_store):
        store = make_store()
        seen = []
        remove = store.add_listener(lambda session: seen.append(session.selected_category))

        store.update(selected_category="space")
        remove()
        store.update(selected_category="food")

        assert seen == ["space"]


class TestClear:
    def test_clear_removes_record_and_resets(self, make_store, storage, clock, scheduler):
        store = make_store()
        store.update(selected_category="animals", remembered_words={1})
        store.flush()
        clock.advance(1000)

        session = store.clear()

        assert storage.get_item(store.key) is None
        assert session.remembered_words == set()
        assert session.selected_category == ""
        assert session.session_start_time == clock()
        assert store.last_saved_time is None

    def test_clear_cancels_pending_write(self, make_store, storage, scheduler):
        store = make_store()
        store.update(selected_category="animals")

        store.clear()
        scheduler.fire_all()

        assert storage.get_item(store.key) is None
        assert storage.write_count == 0


class TestHandleChange:
    """Last-writer-wins adoption of sibling snapshots."""

    @pytest.mark.parametrize("order", [("newer", "older"), ("older", "newer")])
    def test_newest_snapshot_wins_in_any_order(self, make_store, clock, record_factory, order):
        store = make_store()
        snapshots = {
            "newer": record_factory(selectedCategory="space", lastUpdated=clock() + 500),
            "older": record_factory(selectedCategory="food", lastUpdated=clock() + 200),
        }

        for name in order:
            store.handle_change(ChangeEvent(key=store.key, data=snapshots[name], origin="tab-b"))

        assert store.data.selected_category == "space"
        assert store.data.last_updated == clock() + 500

    def test_stale_snapshot_is_ignored(self, make_store, clock, record_factory):
        store = make_store()
        store.update(selected_category="music")

        adopted = store.handle_change(ChangeEvent(
            key=store.key,
            data=record_factory(lastUpdated=clock() - MINUTE_MS),
            origin="tab-b",
        ))

        assert adopted is False
        assert store.data.selected_category == "music"

    def test_adopting_cancels_pending_write(self, make_store, storage, clock, scheduler, record_factory):
        store = make_store()
        store.update(selected_category="music")

        store.handle_change(ChangeEvent(
            key=store.key,
            data=record_factory(lastUpdated=clock() + 500),
            origin="tab-b",
        ))
        scheduler.fire_all()

        assert not store.has_pending_write
        assert storage.write_count == 0
        assert store.data.selected_category == "animals"

    def test_other_key_own_origin_and_invalid_data_are_ignored(self, make_store, clock, record_factory):
        store = make_store(origin="tab-a")
        newer = record_factory(lastUpdated=clock() + 500)

        assert not store.handle_change(ChangeEvent(key="other-key", data=newer, origin="tab-b"))
        assert not store.handle_change(ChangeEvent(key=store.key, data=newer, origin="tab-a"))
        assert not store.handle_change(ChangeEvent(
            key=store.key, data={"lastUpdated": clock() + 900}, origin="tab-b"
        ))
        assert store.data.selected_category == ""

    def test_init_subscribes_once(self, make_store):
        channel = InProcessChannel()
        store = make_store(channel=channel)
        store.init()

        assert channel.subscriber_count == 1
        store.dispose()
        assert channel.subscriber_count == 0


class TestStorageFailures:
    def test_quota_exceeded_keeps_memory_state(self, make_store, clock):
        store = make_store(storage=InMemoryStorage(quota_bytes=10))
        store.update(selected_category="animals")

        assert store.flush() is False
        assert store.data.selected_category == "animals"
        assert store.last_saved_time is None

    def test_quota_exceeded_retries_with_compacted_history(self, make_store, catalog, clock):
        storage = InMemoryStorage()
        store = make_store(storage=storage, settings=StoreSettings(history_compact_limit=2))
        for word_id in range(1, 7):
            clock.advance(1000)
            store.record_word_result(catalog.get(word_id), True)

        compacted = json.dumps(store._compact(store._snapshot()))
        storage.quota_bytes = len(store.key) + len(compacted.encode("utf-8")) + 16

        assert store.flush() is True
        stored = json.loads(storage.get_item(store.key))
        assert set(stored["userWordHistory"]) == {"5", "6"}
        # In-memory history is not trimmed
        assert len(store.data.user_word_history) == 6

    def test_oversized_record_is_compacted(self, make_store, storage, catalog, clock):
        store = make_store(settings=StoreSettings(max_record_bytes=200, history_compact_limit=2))
        for word_id in range(1, 6):
            clock.advance(1000)
            store.record_word_result(catalog.get(word_id), word_id % 2 == 0)

        store.flush()

        stored = json.loads(storage.get_item(store.key))
        assert set(stored["userWordHistory"]) == {"4", "5"}

    def test_write_error_is_not_raised(self, make_store):
        store = make_store(storage=ReadOnlyStorage())
        store.update(selected_category="animals")

        assert store.flush() is False


class TestExportImport:
    def _populate(self, store, catalog):
        store.save_learning_state("learning", "space", "matching")
        store.record_word_result(catalog.get(1), True)
        store.record_word_result(catalog.get(2), False)
        store.record_word_result(catalog.get(3), True)
        store.start_next_session()
        store.update(dashboard_session_number=3, excluded_word_ids={7})

    def test_export_filename_and_payload(self, make_store, catalog):
        store = make_store()
        self._populate(store, catalog)

        filename, payload = store.export_session()

        assert filename == "wordy-session-2025-01-04.json"
        record = json.loads(payload)
        assert record["selectedCategory"] == "space"
        assert record["rememberedWords"] == [1, 3]
        assert record["version"] == "1.0"

    def test_round_trip_preserves_session(self, make_store, catalog, clock):
        source = make_store()
        self._populate(source, catalog)
        _, payload = source.export_session()

        target_storage = InMemoryStorage()
        target = make_store(storage=target_storage)
        clock.advance(HOUR_MS)

        assert target.import_session(payload) is True

        imported = target.data
        exported = source.data
        for attr in fields(SessionData):
            if attr.name in ("last_updated", "version"):
                continue
            assert getattr(imported, attr.name) == getattr(exported, attr.name), attr.name
        assert imported.last_updated >= clock()
        assert json.loads(target_storage.get_item(target.key))["lastUpdated"] == imported.last_updated

    def test_export_and_import_through_files(self, make_store, catalog, tmp_path):
        source = make_store()
        self._populate(source, catalog)

        path = source.export_to_file(tmp_path)

        assert path == tmp_path / "wordy-session-2025-01-04.json"
        target = make_store(storage=InMemoryStorage())
        assert target.import_from_file(path) is True
        assert target.data.remembered_words == {1, 3}

    @pytest.mark.parametrize("payload", [
        "not json at all",
        "[1, 2, 3]",
        json.dumps({"activeTab": "learning"}),
    ])
    def test_invalid_import_leaves_state_unchanged(self, make_store, payload):
        store = make_store()
        store.update(selected_category="nature")

        assert store.import_session(payload) is False
        assert store.data.selected_category == "nature"

    def test_import_of_other_major_version_is_rejected(self, make_store, record_factory):
        store = make_store()
        assert store.import_session(record_factory(version="2.0")) is False

    def test_import_missing_file(self, make_store, tmp_path):
        store = make_store()
        assert store.import_from_file(tmp_path / "missing.json") is False

    def test_failed_import_write_restores_state(self, make_store, record_factory, scheduler):
        store = make_store(storage=ReadOnlyStorage())
        store.update(selected_category="nature")

        assert store.import_session(json.dumps(record_factory())) is False
        assert store.data.selected_category == "nature"
        assert store.has_pending_write


class TestLearningHelpers:
    def test_record_word_result_moves_word_and_tracks_history(self, make_store, catalog):
        store = make_store()
        word = catalog.get(1)

        store.record_word_result(word, True)
        assert store.data.remembered_words == {1}

        store.record_word_result(word, False)
        session = store.data
        assert session.remembered_words == set()
        assert session.forgotten_words == {1}
        history = session.user_word_history[1]
        assert history.times_shown == 2
        assert history.average_accuracy == pytest.approx(50.0)
        assert history.last_rating == "forgotten"

    def test_save_and_restore_progress(self, make_store):
        store = make_store()
        store.save_progress([1, 2], [5], 4)

        assert store.restore_progress() == {
            "remembered_words": {1, 2},
            "forgotten_words": {5},
            "current_word_index": 4,
        }

    def test_session_stats(self, make_store, clock):
        store = make_store()
        store.save_progress({1, 2, 3}, {4}, 5)
        store.start_next_session()
        clock.advance(30 * MINUTE_MS)

        assert store.get_session_stats() == {
            "total_words_learned": 3,
            "total_time_spent": 30,
            "sessions_completed": 1,
            "accuracy": 75,
        }
        assert store.data.current_word_index == 0

    def test_stats_for_new_learner(self, make_store):
        assert make_store().get_session_stats()["accuracy"] == 0

    def test_restore_message_requires_progress(self, make_store):
        store = make_store()
        assert store.has_stored_progress() is False
        assert store.get_restore_message() is None

    def test_restore_message_minutes(self, make_store, clock):
        store = make_store()
        store.save_learning_state("learning", "animals", "cards")
        store.save_progress({1, 2}, set(), 1)
        clock.advance(5 * MINUTE_MS)

        assert store.get_restore_message() == (
            "Welcome back! You've learned 2 words in animals. "
            "Your last session was 5 minutes ago. "
            "Would you like to continue where you left off?"
        )

    def test_restore_message_hours_and_days(self, make_store, clock):
        store = make_store()
        store.save_progress({1}, set(), 0)

        clock.advance(3 * HOUR_MS)
        assert "You've learned 1 word. Your last session was 3 hours ago." in store.get_restore_message()

        clock.advance(2 * DAY_MS)
        assert "Your last session was 2 days ago." in store.get_restore_message()


class TestEventLoopScheduling:
    @pytest.mark.asyncio
    async def test_debounce_on_running_loop(self):
        storage = InMemoryStorage()
        store = SessionStore(storage, settings=StoreSettings(debounce_ms=50))
        store.init()

        store.update(selected_category="animals")
        store.update(selected_category="space")
        assert storage.write_count == 0

        await asyncio.sleep(0.2)

        assert storage.write_count == 1
        assert json.loads(storage.get_item(store.key))["selectedCategory"] == "space"
        store.dispose()


class TestRecordNormalisation:
    """Numeric strings accepted by validation reach the store as numbers."""

    def test_load_with_string_last_updated(self, make_store, storage, clock, record_factory):
        storage.set_item("wordy-learning-session", json.dumps(
            record_factory(lastUpdated=str(clock()), currentWordIndex="3")
        ))

        store = make_store()
        session = store.data

        assert session.selected_category == "animals"
        assert session.last_updated == clock()
        assert session.current_word_index == 3
        assert store.has_stored_progress() is True
        assert store.session_age_ms == 0

    def test_handle_change_with_string_last_updated(self, make_store, clock, record_factory):
        store = make_store()
        snapshot = record_factory(selectedCategory="space", lastUpdated=str(clock() + 500))

        assert store.handle_change(ChangeEvent(key=store.key, data=snapshot, origin="tab-b")) is True
        assert store.data.last_updated == clock() + 500

        stale = record_factory(selectedCategory="food", lastUpdated=str(clock() + 100))
        assert store.handle_change(ChangeEvent(key=store.key, data=stale, origin="tab-b")) is False
        assert store.data.selected_category == "space"

    def test_import_with_string_numbers(self, make_store, storage, catalog, record_factory):
        store = make_store()
        record = record_factory(
            currentWordIndex="3",
            sessionNumber="2",
            userWordHistory={
                "1": {"wordId": 1, "timesShown": "2", "averageAccuracy": "50", "lastSeen": "1000"},
            },
        )

        assert store.import_session(json.dumps(record)) is True

        session = store.data
        assert session.current_word_index == 3
        assert session.session_number == 2
        assert session.user_word_history[1].times_shown == 2
        assert json.loads(storage.get_item(store.key))["currentWordIndex"] == 3
        assert store.get_session_stats()["sessions_completed"] == 1

        store.record_word_result(catalog.get(1), True)
        history = store.data.user_word_history[1]
        assert history.times_shown == 3
        assert history.average_accuracy == pytest.approx(200 / 3)

    def test_update_rejects_malformed_history(self, make_store, scheduler):
        store = make_store()

        with pytest.raises(ValueError):
            store.update(user_word_history={"1": {"timesShown": 1}})

        assert store.data.user_word_history == {}
        assert not store.has_pending_write

    def test_update_normalises_history_entries(self, make_store):
        store = make_store()
        store.update(userWordHistory={"7": {"wordId": 7, "timesShown": "4", "consecutiveCorrect": 2}})

        history = store.data.user_word_history[7]
        assert history.times_shown == 4
        assert history.consecutive_correct == 2
