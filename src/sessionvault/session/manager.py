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
"""SessionManager — ticket-based session persistence over a SessionStore."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sessionvault.kernel.exceptions import CookieWriteException, TicketDecodeException
from sessionvault.session.options import CookieOptions
from sessionvault.session.ports.outbound import CookieBuilder, SessionStore
from sessionvault.session.state import SessionState, utcnow
from sessionvault.session.ticket import Ticket, TicketStatus, read_ticket

_logger = logging.getLogger(__name__)


class SessionManager:
    """Saves, loads and clears sessions referenced by an encrypted ticket cookie.

    The manager keeps no per-request state: every call decodes the ticket
    from the request, talks to the injected store and cookie builder, and
    returns. It is safe to share one instance across concurrent requests
    as long as the collaborators are.
    """

    def __init__(
        self,
        store: SessionStore,
        cookie_builder: CookieBuilder,
        options: CookieOptions,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self._cookie_builder = cookie_builder
        self._options = options
        self._clock = clock

    async def save(self, response: Any, request: Any, state: SessionState) -> None:
        """Persist *state* and point the response's session cookie at it.

        Reuses the request's ticket when it decodes, otherwise mints a new
        one. ``state.created_at`` is stamped only if unset. The cookie is
        written only after the store accepted the payload.
        """
        now = self._clock()
        state.stamp_created_at(now)

        lookup = read_ticket(request, self._cookie_builder, self._options)
        ticket = lookup.ticket
        if lookup.status is TicketStatus.INVALID:
            _logger.debug("Replacing unusable session ticket: %s", lookup.error)
        if ticket is None:
            ticket = Ticket.new(self._options)

        await ticket.save_session(state, self.store.save, self._options, now)
        ticket.set_cookie(response, request, state, self._cookie_builder, self._options)

    async def load(self, request: Any) -> SessionState:
        """Load the session referenced by *request*'s cookie.

        Raises:
            InvalidSessionException: no cookie, bad ticket, nothing stored,
                or the payload failed decryption.
            StoreBackendException: the store could not be read.
        """
        ticket = Ticket.from_request(request, self._cookie_builder, self._options)
        return await ticket.load_session(self.store.load)

    async def clear(self, response: Any, request: Any) -> None:
        """Remove the session cookie and the stored session it references.

        A request without a session cookie is not an error. A present but
        undecodable cookie is still cleared, then reported.
        """
        lookup = read_ticket(request, self._cookie_builder, self._options)

        ticket = lookup.ticket
        if ticket is None:
            self._clear_cookie(response, request)
            if lookup.status is TicketStatus.NO_SESSION:
                return
            raise TicketDecodeException(
                "error decoding ticket to clear session",
                code="TICKET_DECODE",
            ) from lookup.error

        self._clear_cookie(response, request)
        await ticket.clear_session(self.store.clear)

    async def verify_connection(self) -> None:
        await self.store.verify_connection()

    def _clear_cookie(self, response: Any, request: Any) -> None:
        try:
            Ticket.clear_cookie(response, request, self._cookie_builder)
        except CookieWriteException:
            raise
        except Exception as exc:
            raise CookieWriteException("error creating cookie to clear session", code="COOKIE_CLEAR") from exc
