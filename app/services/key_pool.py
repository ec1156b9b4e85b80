"""
Round-robin pool of API credentials.
"""
import threading
from typing import Optional, Sequence

from loguru import logger


class ApiKeyPool:
    """
    Ordered set of API keys with a rotation cursor.

    The cursor is always a valid index; rotation is the only mutator. Rotation
    is compare-and-swap: callers pass the index they used, and the cursor only
    advances if no other request moved it in the meantime.
    """

    def __init__(self, keys: Sequence[str]):
        cleaned = [k.strip() for k in keys if k and k.strip()]
        if not cleaned:
            raise ValueError("ApiKeyPool requires at least one API key")
        self._keys: tuple[str, ...] = tuple(cleaned)
        self._index = 0
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        return len(self._keys)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current_key(self) -> str:
        return self._keys[self._index]

    def current(self) -> tuple[int, str]:
        """Current cursor and its key, read together."""
        with self._lock:
            return self._index, self._keys[self._index]

    def rotate(self, from_index: Optional[int] = None) -> int:
        """
        Advance the cursor to the next key.

        Args:
            from_index: The index the caller failed on. If the cursor has
                already moved past it, no further rotation happens.

        Returns:
            The cursor after the call.
        """
        with self._lock:
            if from_index is not None and from_index != self._index:
                return self._index
            self._index = (self._index + 1) % len(self._keys)
            logger.info(f"Rotated to API key {self._index + 1}/{len(self._keys)}")
            return self._index
