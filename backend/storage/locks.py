"""Per-session mutation locks.

Every read-modify-write of a session's game state (end turn, feature edits,
lore notes) runs under that session's lock, so only one mutation per slug is
in flight at a time. Different sessions don't block each other.

The HTTP app and the MCP server run as separate processes over the same data
dir, so the lock has two layers:
  - an asyncio.Lock per slug, ordering coroutines inside one process
  - an fcntl.flock on data/locks/<slug>.lock, ordering processes
"""

import asyncio
import fcntl
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from .core import data_dir

LOCK_TIMEOUT = 10.0
_POLL_INTERVAL = 0.01

_locks: dict[str, asyncio.Lock] = {}


class FileLock:
    """Exclusive cross-process lock on a lock file."""

    def __init__(self, lock_path: Path, timeout: float = LOCK_TIMEOUT):
        self.lock_path = lock_path
        self.timeout = timeout
        self.lock_file = None

    def try_acquire(self) -> bool:
        if self.lock_file is None:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
            self.lock_file = open(self.lock_path, "a")
        try:
            fcntl.flock(self.lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            return False
        return True

    def release(self) -> None:
        if self.lock_file:
            fcntl.flock(self.lock_file.fileno(), fcntl.LOCK_UN)
            self.lock_file.close()
            self.lock_file = None

    def _timed_out(self, start: float) -> None:
        if time.monotonic() - start > self.timeout:
            self.release()
            raise TimeoutError(f"Could not acquire lock on {self.lock_path} within {self.timeout}s")

    def __enter__(self):
        start = time.monotonic()
        while not self.try_acquire():
            self._timed_out(start)
            time.sleep(_POLL_INTERVAL)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    async def acquire_async(self) -> None:
        start = time.monotonic()
        while not self.try_acquire():
            self._timed_out(start)
            await asyncio.sleep(_POLL_INTERVAL)


def _lock_path(slug: str) -> Path:
    return data_dir() / "locks" / f"{slug}.lock"


def _process_lock(slug: str) -> asyncio.Lock:
    lock = _locks.get(slug)
    if lock is None:
        lock = _locks[slug] = asyncio.Lock()
    return lock


def session_file_lock(slug: str) -> FileLock:
    """Blocking cross-process lock, for scripts that mutate outside the event loop."""
    return FileLock(_lock_path(slug))


@asynccontextmanager
async def session_lock(slug: str) -> AsyncIterator[None]:
    async with _process_lock(slug):
        file_lock = session_file_lock(slug)
        await file_lock.acquire_async()
        try:
            yield
        finally:
            file_lock.release()


def drop_lock(slug: str) -> None:
    """Forget a deleted session's locks."""
    _locks.pop(slug, None)
    _lock_path(slug).unlink(missing_ok=True)


def reset_locks() -> None:
    _locks.clear()
