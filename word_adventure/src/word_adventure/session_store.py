"""
Session Store for State Persistence

Owns the in-memory SessionData for one learner/browser pairing and keeps
durable storage in step with it:
- update() applies changes in memory immediately and debounces the write
- records older than max_age, corrupt, or from another major version are
  replaced with defaults
- snapshots from sibling contexts are adopted last-writer-wins by lastUpdated
- flush()/dispose() write any pending change straight away (unload hook)

Storage failures never escape this class; they are logged and the in-memory
state stays authoritative for the current context.
"""

import asyncio
import json
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from word_adventure.catalog import Word, WordId
from word_adventure.channel import ChangeChannel, ChangeEvent
from word_adventure.config import StoreSettings
from word_adventure.logger import get_logger
from word_adventure.session_state import (
    STORE_MANAGED_FIELDS,
    SessionData,
    coerce_field_value,
    create_default_session,
    dict_to_session,
    normalize_field_name,
    session_to_dict,
)
from word_adventure.storage import DurableStorage, StorageError, StorageQuotaExceededError
from word_adventure.validation import parse_session_record
from word_adventure.word_history import update_word_history

logger = get_logger(__name__)

SessionListener = Callable[[SessionData], None]


def _system_clock_ms() -> int:
    return int(time.time() * 1000)


class SessionStore:
    """
    Single source of truth for SessionData within one context.

    Everything is injected so tests can run isolated instances: the storage
    backend, an optional change channel shared with sibling stores, a clock
    returning epoch milliseconds and a scheduler exposing
    `call_later(seconds, callback)` whose handle has `cancel()`. Without a
    scheduler the running asyncio loop is used; with no loop at all writes
    happen immediately.
    """

    def __init__(
        self,
        storage: DurableStorage,
        channel: Optional[ChangeChannel] = None,
        settings: Optional[StoreSettings] = None,
        initial_data: Optional[Mapping[str, Any]] = None,
        clock: Optional[Callable[[], int]] = None,
        scheduler: Any = None,
        origin: Optional[str] = None
    ):
        """
        Initialize SessionStore.

        Args:
            storage: Durable storage backend
            channel: Change channel shared with sibling contexts (optional)
            settings: Key, debounce window, max age and version
            initial_data: Partial SessionData applied over built-in defaults
            clock: Callable returning epoch milliseconds
            scheduler: Timer source for the debounced write (optional)
            origin: Identifier of this context on the channel
        """
        self.storage = storage
        self.channel = channel
        self.settings = settings or StoreSettings()
        self.initial_data = dict(initial_data or {})
        self.clock = clock or _system_clock_ms
        self.scheduler = scheduler
        self.origin = origin or uuid.uuid4().hex

        self._data = self._create_defaults(self._now())
        self._pending_handle = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._listeners: List[SessionListener] = []
        self._initialized = False
        self.last_saved_time: Optional[int] = None

    # ==================== Lifecycle ====================

    def init(self) -> SessionData:
        """Load the stored record and start listening to sibling contexts."""
        if self._initialized:
            return self.data
        session = self.load()
        if self.channel is not None:
            self._unsubscribe = self.channel.subscribe(self.origin, self.handle_change)
        self._initialized = True
        return session

    def dispose(self):
        """Flush pending writes and stop listening. Safe to call twice."""
        self.flush()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._initialized = False

    def on_unload(self) -> bool:
        """Hook for context teardown: persist any pending write now."""
        return self.flush()

    # ==================== Accessors ====================

    @property
    def key(self) -> str:
        return self.settings.storage_key

    @property
    def data(self) -> SessionData:
        """Copy of the current in-memory record."""
        return self._data.copy()

    @property
    def has_pending_write(self) -> bool:
        return self._pending_handle is not None

    @property
    def session_age_ms(self) -> int:
        return max(0, self._now() - self._data.last_updated)

    def add_listener(self, listener: SessionListener) -> Callable[[], None]:
        """Call `listener` with a copy of the record after every in-memory change."""
        self._listeners.append(listener)

        def remove():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ==================== Core operations ====================

    def load(self) -> SessionData:
        """
        Read the stored record into memory.

        Falls back to a fresh default record (and deletes what was stored)
        when the record is missing, unreadable, invalid, from another major
        version, or older than max_age.

        Returns:
            Copy of the loaded SessionData
        """
        now = self._now()
        defaults = self._create_defaults(now)

        try:
            raw = self.storage.get_item(self.key)
        except StorageError as e:
            logger.error("❌ [SessionStore] Error reading session from storage", error=e)
            self._replace_data(defaults)
            return self.data

        if raw is None:
            logger.debug(f"🔍 [SessionStore] No stored session under {self.key!r}, using defaults")
            self._replace_data(defaults)
            return self.data

        try:
            candidate = json.loads(raw)
        except ValueError as e:
            logger.warning("⚠️ [SessionStore] Stored session is not valid JSON, discarding", data={"error": str(e)})
            self._discard_stored_record()
            self._replace_data(defaults)
            return self.data

        record = parse_session_record(candidate, self.settings.version)
        if record is None:
            logger.warning("⚠️ [SessionStore] Stored session failed validation, discarding")
            self._discard_stored_record()
            self._replace_data(defaults)
            return self.data

        age = now - record["lastUpdated"]
        if age > self.settings.max_age_ms:
            logger.info(
                "ℹ️ [SessionStore] Session expired, clearing old data",
                data={"age_ms": age, "max_age_ms": self.settings.max_age_ms},
            )
            self._discard_stored_record()
            self._replace_data(defaults)
            return self.data

        session = dict_to_session(record, defaults)
        self._enforce_disjoint(session, set(), set())
        self._replace_data(session)
        logger.info(
            "💾 [SessionStore] Restored session",
            data={"age_ms": age, "remembered": len(session.remembered_words),
                  "forgotten": len(session.forgotten_words)},
        )
        return self.data

    def update(self, partial: Optional[Mapping[str, Any]] = None, **changes) -> SessionData:
        """
        Merge changes into the in-memory record and schedule a durable write.

        Field names may be attribute names (`selected_category`) or record
        keys (`selectedCategory`). `last_updated` and `session_start_time`
        are stamped by the store and ignored if supplied.

        Returns:
            Copy of the updated SessionData

        Raises:
            KeyError: if a field name is unknown
            ValueError: if a user_word_history entry is malformed
        """
        merged: Dict[str, Any] = dict(partial or {})
        merged.update(changes)

        normalized: Dict[str, Any] = {}
        for name, value in merged.items():
            attr = normalize_field_name(name)
            if attr in STORE_MANAGED_FIELDS:
                continue
            normalized[attr] = coerce_field_value(attr, value)

        previous = self._data
        session = previous.copy()
        for attr, value in normalized.items():
            setattr(session, attr, value)

        self._enforce_disjoint(
            session,
            session.remembered_words - previous.remembered_words,
            session.forgotten_words - previous.forgotten_words,
        )
        session.last_updated = self._next_stamp()

        self._data = session
        self._schedule_write()
        self._notify_listeners()
        return self.data

    def clear(self) -> SessionData:
        """Delete the stored record now and reset memory to fresh defaults."""
        self._cancel_pending()
        self._discard_stored_record()
        self._replace_data(self._create_defaults(self._now()))
        self.last_saved_time = None
        logger.info("💾 [SessionStore] Session cleared")
        return self.data

    def flush(self) -> bool:
        """
        Perform a pending debounced write immediately.

        Returns:
            True if a pending write was persisted, False if nothing was pending
            or the write failed
        """
        if self._pending_handle is None:
            return False
        self._cancel_pending()
        return self._write_now()

    def handle_change(self, event: ChangeEvent) -> bool:
        """
        Consider a snapshot published by another context.

        The snapshot replaces the in-memory record wholesale when it is for
        this key, passes validation and carries a strictly newer lastUpdated.
        Arrival order does not matter; only timestamps do.

        Returns:
            True if the snapshot was adopted
        """
        if event.key != self.key or event.origin == self.origin:
            return False

        record = parse_session_record(event.data, self.settings.version)
        if record is None:
            logger.warning(f"⚠️ [SessionStore] Ignoring invalid snapshot from {event.origin[:8]}")
            return False

        incoming = record["lastUpdated"]
        if incoming <= self._data.last_updated:
            logger.debug(
                "🔍 [SessionStore] Ignoring stale snapshot",
                data={"incoming": incoming, "current": self._data.last_updated},
            )
            return False

        # The sibling already persisted this snapshot; our pending write is superseded
        self._cancel_pending()
        session = dict_to_session(record, self._create_defaults(self._now()))
        self._enforce_disjoint(session, set(), set())
        self._replace_data(session)
        logger.info(
            "💾 [SessionStore] Adopted newer session from another context",
            data={"origin": event.origin[:8], "lastUpdated": incoming},
        )
        return True

    # ==================== Export / import ====================

    def export_session(self) -> Tuple[str, str]:
        """
        Dump the stored record for download.

        Returns:
            (filename, json_text) where filename is date-stamped
        """
        self.flush()
        payload = None
        try:
            payload = self.storage.get_item(self.key)
        except StorageError as e:
            logger.warning(f"⚠️ [SessionStore] Could not read stored session for export: {e}")

        if payload is None:
            payload = json.dumps(self._snapshot())

        date = datetime.fromtimestamp(self._now() / 1000, tz=timezone.utc)
        return f"wordy-session-{date:%Y-%m-%d}.json", payload

    def export_to_file(self, directory: Union[str, Path]) -> Optional[Path]:
        """Write the export into `directory`; returns the file path or None on failure."""
        filename, payload = self.export_session()
        path = Path(directory) / filename
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as e:
            logger.error("❌ [SessionStore] Export failed", error=e)
            return None
        logger.success(f"[SessionStore] Exported session to {path}")
        return path

    def import_session(self, source: Union[str, bytes, Mapping[str, Any]]) -> bool:
        """
        Replace the session with an exported record.

        The record must pass the same validation as stored data. Nothing is
        applied unless the record validates and is written to storage. The
        import counts as a write, so lastUpdated is stamped now.

        Returns:
            True on success
        """
        try:
            if isinstance(source, (str, bytes)):
                candidate = json.loads(source)
            else:
                candidate = dict(source)
        except (ValueError, TypeError) as e:
            logger.warning("⚠️ [SessionStore] Import rejected: unreadable JSON", data={"error": str(e)})
            return False

        record = parse_session_record(candidate, self.settings.version)
        if record is None:
            logger.warning("⚠️ [SessionStore] Import rejected: record failed validation")
            return False

        previous = self._data
        had_pending = self.has_pending_write
        self._cancel_pending()
        session = dict_to_session(record, self._create_defaults(self._now()))
        self._enforce_disjoint(session, set(), set())
        session.last_updated = self._next_stamp()
        self._data = session

        if not self._write_now():
            self._data = previous
            if had_pending:
                self._schedule_write()
            logger.warning("⚠️ [SessionStore] Import rejected: record could not be stored")
            return False

        self._notify_listeners()
        logger.success("[SessionStore] Session imported")
        return True

    def import_from_file(self, path: Union[str, Path]) -> bool:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"⚠️ [SessionStore] Import rejected: cannot read {path}: {e}")
            return False
        return self.import_session(text)

    # ==================== Learning helpers ====================

    def record_word_result(self, word: Word, remembered: bool) -> SessionData:
        """Mark a word remembered or forgotten and update its history."""
        history = dict(self._data.user_word_history)
        history[word.id] = update_word_history(
            history.get(word.id), word, remembered, self._now()
        )
        remembered_words = set(self._data.remembered_words)
        forgotten_words = set(self._data.forgotten_words)
        if remembered:
            remembered_words.add(word.id)
            forgotten_words.discard(word.id)
        else:
            forgotten_words.add(word.id)
            remembered_words.discard(word.id)
        return self.update(
            remembered_words=remembered_words,
            forgotten_words=forgotten_words,
            user_word_history=history,
        )

    def save_progress(
        self,
        remembered_words: Iterable[WordId],
        forgotten_words: Iterable[WordId],
        current_word_index: int
    ) -> SessionData:
        return self.update(
            remembered_words=set(remembered_words),
            forgotten_words=set(forgotten_words),
            current_word_index=current_word_index,
        )

    def restore_progress(self) -> Dict[str, Any]:
        return {
            "remembered_words": set(self._data.remembered_words),
            "forgotten_words": set(self._data.forgotten_words),
            "current_word_index": self._data.current_word_index,
        }

    def save_learning_state(self, active_tab: str, selected_category: str, learning_mode: str) -> SessionData:
        return self.update(
            active_tab=active_tab,
            selected_category=selected_category,
            learning_mode=learning_mode,
        )

    def start_next_session(self) -> SessionData:
        """Begin a new session block."""
        return self.update(
            session_number=self._data.session_number + 1,
            current_word_index=0,
        )

    def get_session_stats(self) -> Dict[str, int]:
        """Words learned, minutes spent, sessions completed and accuracy percent."""
        remembered = len(self._data.remembered_words)
        attempts = remembered + len(self._data.forgotten_words)
        minutes = round((self._now() - self._data.session_start_time) / 1000 / 60)
        return {
            "total_words_learned": remembered,
            "total_time_spent": max(0, minutes),
            "sessions_completed": self._data.session_number - 1,
            "accuracy": round(remembered / attempts * 100) if attempts else 0,
        }

    def has_stored_progress(self) -> bool:
        session = self._data
        return bool(
            session.remembered_words
            or session.forgotten_words
            or session.selected_category
            or session.current_word_index > 0
        )

    def get_restore_message(self) -> Optional[str]:
        """Welcome-back text for a learner returning to saved progress."""
        if not self.has_stored_progress():
            return None

        session = self._data
        words_learned = len(session.remembered_words)
        minutes = round((self._now() - session.last_updated) / 1000 / 60)

        message = "Welcome back! "
        if words_learned > 0:
            message += f"You've learned {words_learned} word{'s' if words_learned != 1 else ''}"
            if session.selected_category:
                message += f" in {session.selected_category}"
            message += ". "

        if minutes < 60:
            message += f"Your last session was {minutes} minute{'s' if minutes != 1 else ''} ago."
        elif minutes < 24 * 60:
            hours = round(minutes / 60)
            message += f"Your last session was {hours} hour{'s' if hours != 1 else ''} ago."
        else:
            days = round(minutes / 60 / 24)
            message += f"Your last session was {days} day{'s' if days != 1 else ''} ago."

        message += " Would you like to continue where you left off?"
        return message

    # ==================== Internals ====================

    def _now(self) -> int:
        return int(self.clock())

    def _next_stamp(self) -> int:
        """Write clock: wall time, but always after the previous stamp."""
        return max(self._now(), self._data.last_updated + 1)

    def _create_defaults(self, now: int) -> SessionData:
        session = create_default_session(now, self.settings.version)
        for name, value in self.initial_data.items():
            attr = normalize_field_name(name)
            if attr in STORE_MANAGED_FIELDS:
                continue
            setattr(session, attr, coerce_field_value(attr, value))
        return session

    @staticmethod
    def _enforce_disjoint(session: SessionData, newly_remembered: set, newly_forgotten: set):
        """
        Keep remembered and forgotten words apart.

        A word newly moved into one set leaves the other. Any overlap left
        after that (including a word added to both at once) is resolved in
        favour of remembered.
        """
        session.remembered_words -= (newly_forgotten - newly_remembered)
        session.forgotten_words -= session.remembered_words

    def _replace_data(self, session: SessionData):
        self._data = session
        self._notify_listeners()

    def _notify_listeners(self):
        for listener in list(self._listeners):
            try:
                listener(self._data.copy())
            except Exception as e:
                logger.error("❌ [SessionStore] Session listener failed", error=e)

    def _resolve_scheduler(self):
        if self.scheduler is not None:
            return self.scheduler
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _schedule_write(self):
        """Trailing-edge debounce: every call restarts the window."""
        self._cancel_pending()
        scheduler = self._resolve_scheduler()
        if scheduler is None:
            self._write_now()
            return
        self._pending_handle = scheduler.call_later(
            self.settings.debounce_ms / 1000, self._on_debounce_elapsed
        )

    def _on_debounce_elapsed(self):
        self._pending_handle = None
        self._write_now()

    def _cancel_pending(self):
        if self._pending_handle is not None:
            self._pending_handle.cancel()
            self._pending_handle = None

    def _snapshot(self) -> Dict[str, Any]:
        snapshot = session_to_dict(self._data)
        snapshot["version"] = self.settings.version
        return snapshot

    def _compact(self, snapshot: Dict[str, Any]) -> Dict[str, Any]:
        """Keep only the most recently seen word histories."""
        history = snapshot.get("userWordHistory") or {}
        limit = self.settings.history_compact_limit
        if len(history) <= limit:
            return snapshot
        recent = sorted(history.items(), key=lambda item: item[1].get("lastSeen", 0))[-limit:]
        compacted = dict(snapshot)
        compacted["userWordHistory"] = dict(recent)
        return compacted

    def _write_now(self) -> bool:
        """Serialize and store the in-memory record, then notify siblings."""
        self._pending_handle = None
        snapshot = self._snapshot()
        try:
            payload = json.dumps(snapshot)
        except (TypeError, ValueError) as e:
            logger.error("❌ [SessionStore] Session is not serializable, skipping write", error=e)
            return False

        if len(payload.encode("utf-8")) > self.settings.max_record_bytes:
            logger.warning(
                "⚠️ [SessionStore] Session exceeds maximum size, compacting history",
                data={"bytes": len(payload.encode("utf-8")), "max_bytes": self.settings.max_record_bytes},
            )
            snapshot = self._compact(snapshot)
            payload = json.dumps(snapshot)

        try:
            self.storage.set_item(self.key, payload)
        except StorageQuotaExceededError as e:
            compacted = self._compact(snapshot)
            if compacted is snapshot:
                logger.error("❌ [SessionStore] Storage quota exceeded, session not persisted", error=e)
                return False
            try:
                snapshot = compacted
                self.storage.set_item(self.key, json.dumps(snapshot))
            except StorageError as retry_error:
                logger.error("❌ [SessionStore] Storage quota exceeded after compaction", error=retry_error)
                return False
        except StorageError as e:
            logger.error("❌ [SessionStore] Error saving session to storage", error=e)
            return False

        self.last_saved_time = self._now()
        if self.channel is not None:
            self.channel.publish(ChangeEvent(key=self.key, data=snapshot, origin=self.origin))
        return True

    def _discard_stored_record(self):
        try:
            self.storage.remove_item(self.key)
        except StorageError as e:
            logger.error("❌ [SessionStore] Error deleting stored session", error=e)
