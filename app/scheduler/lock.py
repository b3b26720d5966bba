"""Counter-sync concurrency lock using threading.Lock.

Prevents overlapping runs of the campaign counter reconciliation.  Uses a
non-blocking acquire -- if the lock is already held, the caller gets False
and skips the run.
"""

from __future__ import annotations

import threading
from uuid import UUID

_sync_lock = threading.Lock()
_current_run_id: UUID | None = None


def acquire_sync_lock(run_id: UUID) -> bool:
    """Try to acquire the sync lock for the given run.

    Returns True if the lock was acquired, False if already held.
    """
    global _current_run_id
    if _sync_lock.acquire(blocking=False):
        _current_run_id = run_id
        return True
    return False


def release_sync_lock() -> None:
    """Release the sync lock.  Only the holder calls this, from ``finally``."""
    global _current_run_id
    if _sync_lock.locked():
        _current_run_id = None
        _sync_lock.release()


def get_current_run_id() -> UUID | None:
    """Return the run_id of the sync currently executing, or None."""
    return _current_run_id


def is_sync_running() -> bool:
    return _current_run_id is not None
