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
"""Redis-backed session store."""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Any

from redis.exceptions import RedisError

from sessionvault.kernel.exceptions import StoreBackendException

_logger = logging.getLogger(__name__)


class RedisSessionStore:
    """Session store backed by a ``redis.asyncio.Redis``-like client.

    Values are stored as raw bytes with ``SET ... EX``; Redis expires them
    on its own, so the client must be created without ``decode_responses``.
    Keys can be namespaced with *key_prefix*.
    Driver errors surface as :class:`StoreBackendException`.
    """

    def __init__(self, client: Any, key_prefix: str = "") -> None:
        self._client = client
        self._key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    async def save(self, key: str, value: bytes, ttl: timedelta) -> None:
        ex = max(1, math.ceil(ttl.total_seconds()))
        try:
            await self._client.set(self._key(key), value, ex=ex)
        except RedisError as exc:
            _logger.warning("Redis session write failed: %s", type(exc).__name__)
            raise StoreBackendException("error saving redis session", code="STORE_WRITE") from exc

    async def load(self, key: str) -> bytes | None:
        try:
            raw = await self._client.get(self._key(key))
        except RedisError as exc:
            _logger.warning("Redis session read failed: %s", type(exc).__name__)
            raise StoreBackendException("error loading redis session", code="STORE_READ") from exc
        return raw

    async def clear(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except RedisError as exc:
            _logger.warning("Redis session delete failed: %s", type(exc).__name__)
            raise StoreBackendException("error clearing redis session", code="STORE_DELETE") from exc

    async def verify_connection(self) -> None:
        """PING the server."""
        try:
            await self._client.ping()
        except RedisError as exc:
            raise StoreBackendException("unable to reach redis", code="STORE_UNAVAILABLE") from exc

    async def close(self) -> None:
        await self._client.aclose()
