from __future__ import annotations

import threading

from sheet_query.infrastructure.locks import FileLock, Lock, ThreadLock


def test_thread_lock_excludes_other_threads():
    lock = ThreadLock()
    assert lock.acquire(0)
    assert lock.locked

    outcome = []
    worker = threading.Thread(target=lambda: outcome.append(lock.acquire(20)))
    worker.start()
    worker.join()

    assert outcome == [False]
    lock.release()
    assert not lock.locked
    assert lock.acquire(0)
    lock.release()


def test_file_lock_times_out_while_held(tmp_path):
    path = tmp_path / "book.xlsx.lock"
    first = FileLock(path)
    second = FileLock(path)

    assert first.acquire(0)
    assert first.locked
    try:
        outcome = []
        worker = threading.Thread(target=lambda: outcome.append(second.acquire(20)))
        worker.start()
        worker.join()
        assert outcome == [False]
    finally:
        first.release()

    assert not first.locked
    assert second.acquire(100)
    second.release()


def test_locks_satisfy_protocol(tmp_path):
    assert isinstance(ThreadLock(), Lock)
    assert isinstance(FileLock(tmp_path / "x.lock"), Lock)
