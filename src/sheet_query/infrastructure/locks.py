"""Mutual-exclusion primitives guarding the backing store.

A lock is anything with ``acquire(timeout_ms) -> bool`` and ``release()``.
``acquire`` returns ``False`` when the wait bound elapses; the runner turns
that into :class:`~sheet_query.models.errors.LockTimeoutError`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Protocol, runtime_checkable

import filelock


@runtime_checkable
class Lock(Protocol):
    def acquire(self, timeout_ms: int) -> bool: ...

    def release(self) -> None: ...


class ThreadLock:
    """In-process lock; one holder across all threads of this interpreter."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def acquire(self, timeout_ms: int) -> bool:
        return self._lock.acquire(timeout=max(timeout_ms, 0) / 1000)

    def release(self) -> None:
        self._lock.release()

    @property
    def locked(self) -> bool:
        return self._lock.locked()


class FileLock:
    """Cross-process lock backed by a lock file next to the workbook."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = filelock.FileLock(str(self.path))

    def acquire(self, timeout_ms: int) -> bool:
        try:
            self._lock.acquire(timeout=max(timeout_ms, 0) / 1000)
        except filelock.Timeout:
            return False
        return True

    def release(self) -> None:
        self._lock.release()

    @property
    def locked(self) -> bool:
        return self._lock.is_locked


__all__ = ["FileLock", "Lock", "ThreadLock"]
