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
"""sessionvault session — ticket-based server-side sessions with pluggable stores.

Import concrete store types from the adapter package::

    from sessionvault.session.adapters.memory import InMemorySessionStore
    from sessionvault.session.adapters.redis import RedisSessionStore
"""

from sessionvault.session.adapters.cookie import SignedCookieBuilder
from sessionvault.session.factory import create_session_manager, create_session_store
from sessionvault.session.manager import SessionManager
from sessionvault.session.middleware import SessionMiddleware
from sessionvault.session.options import CookieOptions, StoreOptions
from sessionvault.session.ports.outbound import CookieBuilder, SessionStore
from sessionvault.session.state import SessionState
from sessionvault.session.ticket import Ticket, TicketLookup, TicketStatus, read_ticket

__all__ = [
    "CookieBuilder",
    "CookieOptions",
    "SessionManager",
    "SessionMiddleware",
    "SessionState",
    "SessionStore",
    "SignedCookieBuilder",
    "StoreOptions",
    "Ticket",
    "TicketLookup",
    "TicketStatus",
    "create_session_manager",
    "create_session_store",
    "read_ticket",
]
