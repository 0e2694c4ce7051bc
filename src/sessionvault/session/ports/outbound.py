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
"""Outbound ports of the session subsystem: persistence and cookie transport."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SessionStore(Protocol):
    """Key/value persistence for encrypted session payloads.

    All session backends (in-memory, Redis, etc.) must implement this protocol.

    - ``load`` returns ``None`` when the key is unknown or its TTL has
      elapsed; the two cases are indistinguishable.
    - ``clear`` on a missing key is not an error.
    - Backend failures raise
      :class:`~sessionvault.kernel.exceptions.StoreBackendException`.
    """

    async def save(self, key: str, value: bytes, ttl: timedelta) -> None: ...

    async def load(self, key: str) -> bytes | None: ...

    async def clear(self, key: str) -> None: ...

    async def verify_connection(self) -> None: ...


@runtime_checkable
class CookieBuilder(Protocol):
    """Transport of the logical session cookie value.

    Implementations own signing, size splitting and cookie attributes.
    ``request`` and ``response`` are Starlette-compatible objects.
    """

    def decode(self, request: Any) -> str:
        """Return the verified cookie value.

        Raises:
            NoCookieException: no session cookie on the request.
            CookieDecodeException: a cookie is present but invalid.
        """
        ...

    def encode(self, response: Any, request: Any, value: str, expires_at: datetime) -> None:
        """Write *value* to the response, expiring at *expires_at*."""
        ...

    def clear(self, response: Any, request: Any) -> None:
        """Expire every session cookie part on the response."""
        ...
