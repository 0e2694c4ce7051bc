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
"""SessionState — the authenticated user state persisted behind a ticket."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from sessionvault.kernel.exceptions import SessionDecodeException

_DATETIME_FIELDS = ("created_at", "expires_on")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionState:
    """Identity claims and tokens for one browser session.

    The session manager only interprets ``created_at``; everything else is
    carried as-is through :meth:`to_bytes` / :meth:`from_bytes`.
    """

    created_at: datetime | None = None
    expires_on: datetime | None = None
    access_token: str | None = None
    id_token: str | None = None
    refresh_token: str | None = None
    email: str | None = None
    user: str | None = None
    preferred_username: str | None = None
    groups: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def stamp_created_at(self, now: datetime) -> bool:
        """Set ``created_at`` to *now* unless already set. Returns ``True`` if stamped."""
        if self.created_at is not None:
            return False
        self.created_at = now
        return True

    def age(self, now: datetime) -> timedelta:
        if self.created_at is None:
            return timedelta(0)
        return now - self.created_at

    def is_expired(self, now: datetime) -> bool:
        """Whether the access token expiry (``expires_on``) has passed."""
        return self.expires_on is not None and self.expires_on < now

    def to_bytes(self) -> bytes:
        data = asdict(self)
        for name in _DATETIME_FIELDS:
            if data[name] is not None:
                data[name] = data[name].isoformat()
        return json.dumps(data, separators=(",", ":"), sort_keys=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes) -> SessionState:
        try:
            data = json.loads(raw.decode("utf-8"))
            if not isinstance(data, dict):
                raise TypeError("session payload is not an object")
            for name in _DATETIME_FIELDS:
                if data.get(name) is not None:
                    data[name] = datetime.fromisoformat(data[name])
            return cls(**data)
        except (UnicodeDecodeError, ValueError, TypeError) as exc:
            raise SessionDecodeException(
                "stored session could not be decoded",
                code="SESSION_DECODE",
            ) from exc
