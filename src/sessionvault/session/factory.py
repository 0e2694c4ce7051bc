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
"""Builds the session subsystem from configuration."""

from __future__ import annotations

import importlib.util
import logging

from sessionvault.core.config import Config
from sessionvault.logging.structlog_adapter import StructlogAdapter
from sessionvault.session.adapters.cookie import SignedCookieBuilder
from sessionvault.session.adapters.memory import InMemorySessionStore
from sessionvault.session.manager import SessionManager
from sessionvault.session.options import CookieOptions, StoreOptions
from sessionvault.session.ports.outbound import SessionStore

_logger = logging.getLogger(__name__)


def create_session_store(config: Config) -> SessionStore:
    """Return the store selected by ``sessionvault.session.store.type``.

    Falls back to the in-memory store when ``redis`` is requested but the
    ``redis`` package is not installed.
    """
    options = config.bind(StoreOptions)

    if options.type == "redis":
        if importlib.util.find_spec("redis") is not None:
            import redis.asyncio as aioredis

            from sessionvault.session.adapters.redis import RedisSessionStore

            client = aioredis.from_url(options.redis_url)  # type: ignore[no-untyped-call,unused-ignore]
            return RedisSessionStore(client=client, key_prefix=options.key_prefix)
        _logger.warning("Redis session store requested but redis is not installed; using memory")

    return InMemorySessionStore()


def create_session_manager(
    config: Config,
    store: SessionStore | None = None,
    *,
    configure_logging: bool = False,
) -> SessionManager:
    """Wire a :class:`SessionManager` from configuration.

    With ``configure_logging`` the structlog pipeline (including credential
    redaction) is set up from ``sessionvault.logging`` first.

    Raises:
        ValueError: the cookie options fail validation (e.g. missing secret).
    """
    if configure_logging:
        StructlogAdapter().configure(config)
    cookie_options = config.bind(CookieOptions)
    return SessionManager(
        store=store if store is not None else create_session_store(config),
        cookie_builder=SignedCookieBuilder(cookie_options),
        options=cookie_options,
    )
