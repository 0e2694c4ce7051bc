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
"""SessionMiddleware — loads the ticket-backed session for every HTTP request."""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from sessionvault.kernel.exceptions import InfrastructureException, InvalidSessionException
from sessionvault.session.manager import SessionManager

_logger = logging.getLogger(__name__)


class SessionMiddleware:
    """Pure ASGI middleware that sets ``request.state.session``.

    The attribute holds the loaded :class:`SessionState`, or ``None`` when
    the request carries no valid session. Handlers persist changes with
    ``await manager.save(response, request, state)`` and log out with
    ``await manager.clear(response, request)``; the manager is also exposed
    as ``request.state.session_manager``.

    Store failures are not downgraded to "no session": they are logged and
    re-raised.
    """

    def __init__(self, app: ASGIApp, manager: SessionManager) -> None:
        self.app = app
        self._manager = manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive, send)
        request.state.session_manager = self._manager
        try:
            request.state.session = await self._manager.load(request)
        except InvalidSessionException as exc:
            _logger.debug("No valid session for %s: %s", request.url.path, exc.code)
            request.state.session = None
        except InfrastructureException:
            _logger.warning("Session store unavailable while loading %s", request.url.path)
            raise

        await self.app(scope, receive, send)
