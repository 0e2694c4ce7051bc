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
"""Bindable options for the session cookie and store."""

from __future__ import annotations

from datetime import timedelta
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from sessionvault.core.config import config_properties


@config_properties(prefix="sessionvault.session.cookie")
class CookieOptions(BaseModel):
    """Session cookie settings.

    ``expire`` is the session lifetime: the cookie expires and the store
    entry's TTL runs out ``expire`` after the session's ``created_at``.
    ``max_size`` bounds a single Set-Cookie value; longer values are split
    across ``<name>_0``, ``<name>_1``, ...
    """

    name: str = Field(default="_oauth2_proxy", min_length=1, pattern=r"^[A-Za-z0-9_\-]+$")
    secret: str = Field(min_length=16, repr=False)
    domain: str | None = None
    path: str = "/"
    expire: timedelta = timedelta(hours=168)
    secure: bool = True
    httponly: bool = True
    samesite: Literal["lax", "strict", "none"] | None = "lax"
    max_size: int = Field(default=4000, ge=256)

    @field_validator("expire", mode="before")
    @classmethod
    def _seconds_from_string(cls, value: object) -> object:
        # Environment overrides arrive as strings; bare numbers mean seconds.
        if isinstance(value, str):
            try:
                return timedelta(seconds=float(value))
            except (ValueError, OverflowError):
                return value
        return value


@config_properties(prefix="sessionvault.session.store")
class StoreOptions(BaseModel):
    type: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = ""
