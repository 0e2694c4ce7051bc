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
"""Signed, size-split session cookies for Starlette requests and responses."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from http.cookies import CookieError
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, TimestampSigner

from sessionvault.kernel.exceptions import CookieDecodeException, CookieWriteException, NoCookieException
from sessionvault.session.options import CookieOptions
from sessionvault.session.state import utcnow

_logger = logging.getLogger(__name__)


class SignedCookieBuilder:
    """CookieBuilder that signs values with itsdangerous and splits large ones.

    The value is signed with a :class:`~itsdangerous.TimestampSigner` keyed by
    the cookie secret and salted with the cookie name, so a value minted for
    one cookie name does not verify under another. Signatures older than
    ``options.expire`` are rejected.

    A signed value longer than ``options.max_size`` is written as
    ``<name>_0``, ``<name>_1``, ... and reassembled in order on decode.
    """

    def __init__(self, options: CookieOptions, clock: Callable[[], datetime] = utcnow) -> None:
        self._options = options
        self._clock = clock
        self._signer = TimestampSigner(
            options.secret,
            salt=options.name,
            digest_method=hashlib.sha256,
        )

    @property
    def name(self) -> str:
        return self._options.name

    def _part_name(self, index: int) -> str:
        return f"{self._options.name}_{index}"

    def _request_part_names(self, request: Any) -> list[str]:
        """Names of the split cookie parts present on *request*, in order."""
        cookies = request.cookies
        names: list[str] = []
        index = 0
        while self._part_name(index) in cookies:
            names.append(self._part_name(index))
            index += 1
        return names

    def _read_raw(self, request: Any) -> str:
        cookies = request.cookies
        value = cookies.get(self._options.name)
        if value:
            return str(value)
        parts = self._request_part_names(request)
        joined = "".join(cookies[n] for n in parts)
        if not joined:
            raise NoCookieException("no session cookie on request", code="SESSION_NO_COOKIE")
        return joined

    def decode(self, request: Any) -> str:
        raw = self._read_raw(request)
        max_age = int(self._options.expire.total_seconds())
        try:
            return self._signer.unsign(raw, max_age=max_age).decode("utf-8")
        except SignatureExpired as exc:
            raise CookieDecodeException("session cookie has expired", code="COOKIE_EXPIRED") from exc
        except BadSignature as exc:
            raise CookieDecodeException("session cookie failed validation", code="COOKIE_INVALID") from exc
        except UnicodeDecodeError as exc:
            raise CookieDecodeException("session cookie is not valid text", code="COOKIE_INVALID") from exc

    def encode(self, response: Any, request: Any, value: str, expires_at: datetime) -> None:
        expires_at = expires_at.astimezone(timezone.utc)
        max_age = int((expires_at - self._clock()).total_seconds())
        if max_age <= 0:
            raise CookieWriteException("session cookie would already be expired", code="COOKIE_WRITE")

        signed = self._signer.sign(value).decode("utf-8")
        size = self._options.max_size
        chunks = [signed[i : i + size] for i in range(0, len(signed), size)]

        try:
            if len(chunks) == 1:
                self._set(response, self._options.name, signed, max_age, expires_at)
                stale = self._request_part_names(request)
            else:
                for index, chunk in enumerate(chunks):
                    self._set(response, self._part_name(index), chunk, max_age, expires_at)
                stale = self._request_part_names(request)[len(chunks) :]
                if self._options.name in request.cookies:
                    stale.append(self._options.name)
            for name in stale:
                self._delete(response, name)
        except (CookieError, ValueError) as exc:
            raise CookieWriteException("error setting session cookie", code="COOKIE_WRITE") from exc

        if len(chunks) > 1:
            _logger.debug("Session cookie split into %d parts", len(chunks))

    def clear(self, response: Any, request: Any) -> None:
        try:
            self._delete(response, self._options.name)
            for name in self._request_part_names(request):
                self._delete(response, name)
        except (CookieError, ValueError) as exc:
            raise CookieWriteException("error clearing session cookie", code="COOKIE_CLEAR") from exc

    def _set(self, response: Any, name: str, value: str, max_age: int, expires_at: datetime) -> None:
        opts = self._options
        response.set_cookie(
            key=name,
            value=value,
            max_age=max_age,
            expires=expires_at,
            path=opts.path,
            domain=opts.domain,
            secure=opts.secure,
            httponly=opts.httponly,
            samesite=opts.samesite,
        )

    def _delete(self, response: Any, name: str) -> None:
        opts = self._options
        response.delete_cookie(
            key=name,
            path=opts.path,
            domain=opts.domain,
            secure=opts.secure,
            httponly=opts.httponly,
            samesite=opts.samesite,
        )
