"""Per-candidate write serialization.

Assignment and submission for the same candidate must not interleave inside
this process.  ``candidate_lock`` hands out one ``threading.Lock`` per
candidate id and drops it again once nobody holds or waits on it.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

_registry_lock = threading.Lock()
_locks: dict[str, threading.Lock] = {}
_waiters: dict[str, int] = {}


@contextmanager
def candidate_lock(candidate_id: str) -> Iterator[None]:
    """Hold the lock for ``candidate_id`` for the duration of the block."""
    with _registry_lock:
        lock = _locks.setdefault(candidate_id, threading.Lock())
        _waiters[candidate_id] = _waiters.get(candidate_id, 0) + 1

    lock.acquire()
    try:
        yield
    finally:
        lock.release()
        with _registry_lock:
            _waiters[candidate_id] -= 1
            if _waiters[candidate_id] == 0:
                del _waiters[candidate_id]
                del _locks[candidate_id]


def held_candidate_locks() -> int:
    """Number of candidate ids that currently have a lock entry."""
    with _registry_lock:
        return len(_locks)
