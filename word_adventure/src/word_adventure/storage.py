"""
Durable Key-Value Storage

Synchronous string storage keyed by name, the per-browser equivalent of
local storage. SessionStore is the only writer of its key.
"""

import errno
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote, unquote


class StorageError(Exception):
    """Storage backend could not complete an operation."""


class StorageQuotaExceededError(StorageError):
    """Write rejected because the storage is full."""


class DurableStorage(ABC):
    """Interface for durable per-browser storage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...

    @abstractmethod
    def keys(self) -> List[str]:
        ...


class InMemoryStorage(DurableStorage):
    """
    Dict-backed storage.

    Several stores may share one instance to behave like tabs of the same
    browser. `quota_bytes` caps the total UTF-8 size of keys plus values.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._items: Dict[str, str] = {}
        self.write_count = 0

    def _size_with(self, key: str, value: str) -> int:
        total = 0
        for existing_key, existing_value in self._items.items():
            if existing_key == key:
                continue
            total += len(existing_key.encode("utf-8")) + len(existing_value.encode("utf-8"))
        return total + len(key.encode("utf-8")) + len(value.encode("utf-8"))

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None and self._size_with(key, value) > self.quota_bytes:
            raise StorageQuotaExceededError(
                f"Writing {key!r} would exceed quota of {self.quota_bytes} bytes"
            )
        self._items[key] = value
        self.write_count += 1

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items.keys())


class JsonFileStorage(DurableStorage):
    """
    One file per key under a directory.

    Writes go to a temp file that replaces the target, so a crash never
    leaves a half-written record behind.
    """

    SUFFIX = ".json"

    def __init__(self, directory: str):
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create storage directory {self.directory}: {e}") from e

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}{self.SUFFIX}"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=str(self.directory), suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(value)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            if e.errno in (errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)):
                raise StorageQuotaExceededError(f"No space left writing {path}") from e
            raise StorageError(f"Cannot write {path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Cannot remove {path}: {e}") from e

    def keys(self) -> List[str]:
        return [
            unquote(p.name[: -len(self.SUFFIX)])
            for p in self.directory.glob(f"*{self.SUFFIX}")
        ]
