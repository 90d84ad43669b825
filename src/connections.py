# src/connections.py
# ─────────────────────────────────────────────────────────────────────────────
# Process-wide store of live Cloud Foundry sessions, keyed by user identity.
# One entry per user; an entry only exists after a successful login.
# Concurrent requests for the same identity race on that entry: last writer wins.

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Hashable


class ConnectionManager:
    """
    Thread-safe mapping ``identity -> CloudFoundry session``.

    Sessions live until the process exits or they are removed. Passing a
    positive ``max_connections`` bounds the store; the entry stored longest
    ago is dropped to make room for a new identity.

    Example:
        store.put("bob", cf)
        cf = store.get("bob")
    """

    def __init__(self, max_connections: int = 0):
        if max_connections < 0:
            raise ValueError("max_connections must be >= 0")
        self._max = max_connections
        self._lock = threading.Lock()
        self._data: OrderedDict[Hashable, Any] = OrderedDict()

    def put(self, identity: Hashable, session: Any) -> None:
        """Stores `session` for `identity`, replacing any previous one."""
        if identity is None:
            raise ValueError("identity must not be None")
        with self._lock:
            self._data.pop(identity, None)
            self._data[identity] = session
            if self._max and len(self._data) > self._max:
                self._data.popitem(last=False)

    def get(self, identity: Hashable | None) -> Any:
        """Returns the session stored for `identity`, or None if not found."""
        if identity is None:
            return None
        with self._lock:
            return self._data.get(identity)

    def remove(self, identity: Hashable) -> Any:
        """Drops the entry for `identity` and returns it (None if absent)."""
        with self._lock:
            return self._data.pop(identity, None)

    def clear(self) -> None:
        """Clears the entire store (useful for test resets)."""
        with self._lock:
            self._data.clear()

    def keys(self) -> list[Hashable]:
        with self._lock:
            return list(self._data.keys())

    def as_dict(self) -> dict[Hashable, Any]:
        """Return a snapshot copy of the underlying mapping."""
        with self._lock:
            return dict(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._data
