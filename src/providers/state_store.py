import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

logger = logging.getLogger(__name__)


class StateStoreError(Exception):
    """Base class for state store failures."""


class StateLoadError(StateStoreError):
    """Raised when a stored record exists but cannot be read."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Failed to load state for '{key}': {reason}")
        self.key = key


class StateSaveError(StateStoreError):
    """Raised when a record cannot be written."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Failed to save state for '{key}': {reason}")
        self.key = key


def conversation_key(conversation_id: str) -> str:
    return f"conversation!{conversation_id}"


def user_key(user_id: str) -> str:
    return f"user!{user_id}"


class StateStoring(ABC):
    """
    Key-value persistence for conversation and user records.

    Reads and writes of a single key are serialized; the last write wins.
    There are no transactions across keys.
    """

    @abstractmethod
    async def load(self, key: str) -> Dict[str, Any]:
        """Return the stored values for key, or an empty dict when absent."""
        pass

    @abstractmethod
    async def save(self, key: str, values: Dict[str, Any]) -> bool:
        """Store values under key. Raises StateSaveError on failure."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove key. Returns False when nothing was stored."""
        pass


class KeyLocks:
    """
    Lazily created asyncio locks, one per key.

    A lock is dropped as soon as its last holder or waiter leaves, so only
    keys that are in use right now take up memory.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._holders: Dict[str, int] = {}

    @asynccontextmanager
    async def __call__(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class MemoryStateStore(StateStoring):
    """
    Volatile in-process store, meant for development and tests.

    Values are deep-copied on the way in and out, so callers never share
    mutable state with the store or with each other.
    """

    def __init__(self):
        self._records: Dict[str, Dict[str, Any]] = {}
        self._locks = KeyLocks()
        self.fail_saves = False

    async def load(self, key: str) -> Dict[str, Any]:
        async with self._locks(key):
            return copy.deepcopy(self._records.get(key, {}))

    async def save(self, key: str, values: Dict[str, Any]) -> bool:
        async with self._locks(key):
            if self.fail_saves:
                raise StateSaveError(key, "saves are disabled")
            self._records[key] = copy.deepcopy(values)
            logger.debug(f"Saved state for {key}")
            return True

    async def delete(self, key: str) -> bool:
        async with self._locks(key):
            return self._records.pop(key, None) is not None

    def __contains__(self, key: str) -> bool:
        return key in self._records
