# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""In-memory session store with TTL-based expiry."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from datetime import timedelta


class InMemorySessionStore:
    """In-memory session store with TTL support and asyncio.Lock for safety.

    Suitable for development, testing, and single-process deployments.
    Expired entries are dropped lazily on access and by :meth:`purge_expired`.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: dict[str, tuple[bytes, float]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def save(self, key: str, value: bytes, ttl: timedelta) -> None:
        async with self._lock:
            self._store[key] = (bytes(value), self._clock() + ttl.total_seconds())

    async def load(self, key: str) -> bytes | None:
        """Return the stored bytes, or ``None`` if missing or expired."""
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None

            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._store[key]
                return None

            return value

    async def clear(self, key: str) -> None:
        async with self._lock:
            self._store.pop(key, None)

    async def verify_connection(self) -> None:
        return None

    async def purge_expired(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        async with self._lock:
            now = self._clock()
            expired = [k for k, (_, expires_at) in self._store.items() if now >= expires_at]
            for k in expired:
                del self._store[k]
            return len(expired)

    def __len__(self) -> int:
        return len(self._store)
