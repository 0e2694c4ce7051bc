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
"""Shared fixtures for session tests: Starlette requests, a cookie jar, fakes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from http.cookies import SimpleCookie
from typing import Any

import pytest
from starlette.requests import Request
from starlette.responses import Response

from sessionvault.kernel.exceptions import CookieWriteException
from sessionvault.session.adapters.cookie import SignedCookieBuilder
from sessionvault.session.adapters.memory import InMemorySessionStore
from sessionvault.session.manager import SessionManager
from sessionvault.session.options import CookieOptions

SECRET = "0123456789abcdef0123456789abcdef"


def build_request(cookies: dict[str, str] | None = None) -> Request:
    headers: list[tuple[bytes, bytes]] = []
    if cookies:
        header = "; ".join(f"{k}={v}" for k, v in cookies.items())
        headers.append((b"cookie", header.encode("latin-1")))
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": headers,
    }
    return Request(scope)


def set_cookies(response: Response) -> SimpleCookie:
    """Parse every Set-Cookie header on *response*."""
    parsed: SimpleCookie = SimpleCookie()
    for header in response.headers.getlist("set-cookie"):
        parsed.load(header)
    return parsed


class CookieJar:
    """Minimal browser: remembers cookies across responses."""

    def __init__(self) -> None:
        self.cookies: dict[str, str] = {}

    def request(self) -> Request:
        return build_request(self.cookies)

    def absorb(self, response: Response) -> None:
        for name, morsel in set_cookies(response).items():
            if morsel["max-age"] == "0" or not morsel.value:
                self.cookies.pop(name, None)
            else:
                self.cookies[name] = morsel.value


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class MonotonicClock:
    def __init__(self) -> None:
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value


class RecordingCookieBuilder:
    """Wraps a real builder, counting clears and optionally failing them."""

    def __init__(self, inner: SignedCookieBuilder) -> None:
        self._inner = inner
        self.clear_calls = 0
        self.encode_calls = 0
        self.fail_clear = False

    def decode(self, request: Any) -> str:
        return self._inner.decode(request)

    def encode(self, response: Any, request: Any, value: str, expires_at: datetime) -> None:
        self.encode_calls += 1
        self._inner.encode(response, request, value, expires_at)

    def clear(self, response: Any, request: Any) -> None:
        self.clear_calls += 1
        if self.fail_clear:
            raise CookieWriteException("cookie jar is read-only", code="COOKIE_CLEAR")
        self._inner.clear(response, request)


@pytest.fixture
def cookie_options() -> CookieOptions:
    return CookieOptions(name="_session", secret=SECRET, expire=timedelta(hours=1))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime.now(timezone.utc).replace(microsecond=0))


@pytest.fixture
def monotonic() -> MonotonicClock:
    return MonotonicClock()


@pytest.fixture
def store(monotonic: MonotonicClock) -> InMemorySessionStore:
    return InMemorySessionStore(clock=monotonic)


@pytest.fixture
def cookie_builder(cookie_options: CookieOptions, clock: FakeClock) -> RecordingCookieBuilder:
    return RecordingCookieBuilder(SignedCookieBuilder(cookie_options, clock=clock))


@pytest.fixture
def manager(
    store: InMemorySessionStore,
    cookie_builder: RecordingCookieBuilder,
    cookie_options: CookieOptions,
    clock: FakeClock,
) -> SessionManager:
    return SessionManager(store, cookie_builder, cookie_options, clock=clock)


@pytest.fixture
def jar() -> CookieJar:
    return CookieJar()


@pytest.fixture
def make_request():
    return build_request


@pytest.fixture
def parse_set_cookies():
    return set_cookies


@pytest.fixture
def jar_factory():
    return CookieJar
