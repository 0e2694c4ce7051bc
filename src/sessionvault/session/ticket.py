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
"""Session tickets — the credential that stands in for a session in the cookie.

A ticket is an ``id`` and a ``secret``:

- ``id`` is ``<cookie name>-<64 hex chars>`` and is the store key. It is
  the only part of a ticket ever at rest unencrypted.
- ``secret`` is 32 random bytes that only travel inside the signed cookie.
  The payload key is derived from it per ticket (see
  :mod:`sessionvault.session.crypto`) and is never stored.

The cookie carries ``<id>.<base64url(secret)>``; no session content.
"""

from __future__ import annotations

import base64
import binascii
import enum
import re
import secrets
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from sessionvault.kernel.exceptions import (
    InvalidSessionException,
    NoCookieException,
    SessionExpiredException,
    SessionNotFoundException,
    TicketCreationException,
    TicketDecodeException,
)
from sessionvault.session import crypto
from sessionvault.session.options import CookieOptions
from sessionvault.session.ports.outbound import CookieBuilder
from sessionvault.session.state import SessionState

ID_BYTES = 32
SECRET_BYTES = 32

SaveFunc = Callable[[str, bytes, timedelta], Awaitable[None]]
LoadFunc = Callable[[str], Awaitable[bytes | None]]
ClearFunc = Callable[[str], Awaitable[None]]


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64decode(text: str) -> bytes:
    if not re.fullmatch(r"[A-Za-z0-9_\-]*", text):
        raise ValueError("not base64url")
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


@dataclass(frozen=True)
class Ticket:
    """An immutable id/secret pair for one session lifetime."""

    id: str
    secret: bytes = field(repr=False)

    @classmethod
    def new(cls, options: CookieOptions) -> Ticket:
        """Mint a ticket with a fresh random id and an independent random secret."""
        try:
            raw_id = secrets.token_bytes(ID_BYTES)
            secret = secrets.token_bytes(SECRET_BYTES)
        except OSError as exc:
            raise TicketCreationException("random source unavailable", code="TICKET_CREATE") from exc
        return cls(id=f"{options.name}-{raw_id.hex()}", secret=secret)

    # -- cookie encoding -----------------------------------------------------

    def encode(self) -> str:
        return f"{self.id}.{_b64encode(self.secret)}"

    @classmethod
    def decode(cls, value: str, options: CookieOptions) -> Ticket:
        """Parse a cookie value produced by :meth:`encode`.

        Raises:
            TicketDecodeException: wrong shape, foreign id, or bad secret.
        """
        parts = value.split(".")
        if len(parts) != 2:
            raise TicketDecodeException("failed to decode ticket", code="TICKET_DECODE")
        ticket_id, encoded_secret = parts

        id_pattern = re.escape(options.name) + "-[0-9a-f]{%d}" % (ID_BYTES * 2)
        if not re.fullmatch(id_pattern, ticket_id):
            raise TicketDecodeException("failed to decode ticket id", code="TICKET_DECODE")

        try:
            secret = _b64decode(encoded_secret)
        except (ValueError, binascii.Error) as exc:
            raise TicketDecodeException("failed to decode ticket secret", code="TICKET_DECODE") from exc
        if len(secret) != SECRET_BYTES:
            raise TicketDecodeException("failed to decode ticket secret", code="TICKET_DECODE")

        return cls(id=ticket_id, secret=secret)

    @classmethod
    def from_request(cls, request: Any, cookie_builder: CookieBuilder, options: CookieOptions) -> Ticket:
        """Read and parse the ticket carried by *request*'s session cookie.

        Raises:
            NoCookieException: the request has no session cookie.
            TicketDecodeException: the cookie is invalid, tampered or malformed.
        """
        value = cookie_builder.decode(request)
        return cls.decode(value, options)

    # -- store payload -------------------------------------------------------

    def _key(self) -> bytes:
        return crypto.derive_key(self.secret, self.id)

    def _associated_data(self) -> bytes:
        return self.id.encode("utf-8")

    async def save_session(
        self,
        state: SessionState,
        writer: SaveFunc,
        options: CookieOptions,
        now: datetime,
    ) -> None:
        """Encrypt *state* and hand it to *writer* under this ticket's id.

        The TTL is the session's remaining validity, ``created_at + expire - now``.
        A session not yet stamped with ``created_at`` gets the full ``expire``.
        Store errors propagate unchanged.
        """
        ttl = remaining_validity(state, options, now)
        if ttl <= timedelta(0):
            raise SessionExpiredException("session has already expired", code="SESSION_EXPIRED")

        sealed = crypto.seal(self._key(), state.to_bytes(), self._associated_data())
        await writer(self.id, sealed, ttl)

    async def load_session(self, reader: LoadFunc) -> SessionState:
        """Fetch this ticket's payload via *reader*, decrypt and decode it.

        Raises:
            SessionNotFoundException: nothing stored (or the entry expired).
            SessionDecryptException: ciphertext fails authentication.
            SessionDecodeException: plaintext is not a session.
        """
        sealed = await reader(self.id)
        if sealed is None:
            raise SessionNotFoundException("no session stored for ticket", code="SESSION_NOT_FOUND")
        plaintext = crypto.open_sealed(self._key(), sealed, self._associated_data())
        return SessionState.from_bytes(plaintext)

    async def clear_session(self, deleter: ClearFunc) -> None:
        await deleter(self.id)

    # -- cookie I/O ----------------------------------------------------------

    def set_cookie(
        self,
        response: Any,
        request: Any,
        state: SessionState,
        cookie_builder: CookieBuilder,
        options: CookieOptions,
    ) -> None:
        if state.created_at is None:
            raise ValueError("session must be stamped with created_at before setting its cookie")
        cookie_builder.encode(response, request, self.encode(), state.created_at + options.expire)

    @staticmethod
    def clear_cookie(response: Any, request: Any, cookie_builder: CookieBuilder) -> None:
        """Expire the session cookie. Safe when no cookie was ever set."""
        cookie_builder.clear(response, request)


def remaining_validity(state: SessionState, options: CookieOptions, now: datetime) -> timedelta:
    if state.created_at is None:
        return options.expire
    return state.created_at + options.expire - now


class TicketStatus(enum.Enum):
    OK = "ok"
    NO_SESSION = "no_session"
    INVALID = "invalid"


@dataclass(frozen=True)
class TicketLookup:
    """Outcome of reading a ticket from a request.

    Exactly one of ``ticket`` (for ``OK``) or ``error`` (otherwise) is set.
    """

    status: TicketStatus
    ticket: Ticket | None = None
    error: InvalidSessionException | None = None

    @property
    def ok(self) -> bool:
        return self.status is TicketStatus.OK


def read_ticket(request: Any, cookie_builder: CookieBuilder, options: CookieOptions) -> TicketLookup:
    """Decode the request's ticket into a :class:`TicketLookup`.

    Only "no usable ticket" conditions are captured; any other error raised
    by the cookie builder propagates.
    """
    try:
        ticket = Ticket.from_request(request, cookie_builder, options)
    except NoCookieException as exc:
        return TicketLookup(TicketStatus.NO_SESSION, error=exc)
    except TicketDecodeException as exc:
        return TicketLookup(TicketStatus.INVALID, error=exc)
    return TicketLookup(TicketStatus.OK, ticket=ticket)
