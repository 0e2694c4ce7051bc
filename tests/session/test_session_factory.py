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
"""Tests for building the session subsystem from Config."""

from __future__ import annotations

from datetime import timedelta

import logging

import pytest
import structlog

from sessionvault.core.config import Config
from sessionvault.logging.structlog_adapter import redact_sensitive
from sessionvault.session.adapters.memory import InMemorySessionStore
from sessionvault.session.adapters.redis import RedisSessionStore
from sessionvault.session.factory import create_session_manager, create_session_store
from sessionvault.session.manager import SessionManager
from sessionvault.session.options import CookieOptions, StoreOptions


def _config(**session) -> Config:
    base = {"cookie": {"secret": "0123456789abcdef"}}
    base.update(session)
    return Config({"sessionvault": {"session": base}})


class TestCookieOptionsBinding:
    def test_defaults(self):
        options = _config().bind(CookieOptions)
        assert options.name == "_oauth2_proxy"
        assert options.expire == timedelta(hours=168)
        assert options.samesite == "lax"
        assert options.secure is True

    def test_expire_in_seconds(self):
        options = _config(cookie={"secret": "0123456789abcdef", "expire": 900}).bind(CookieOptions)
        assert options.expire == timedelta(minutes=15)

    def test_missing_secret_fails_fast(self):
        with pytest.raises(ValueError, match="CookieOptions"):
            Config({}).bind(CookieOptions)

    def test_short_secret_rejected(self):
        with pytest.raises(ValueError):
            _config(cookie={"secret": "short"}).bind(CookieOptions)

    def test_invalid_samesite_rejected(self):
        with pytest.raises(ValueError):
            _config(cookie={"secret": "0123456789abcdef", "samesite": "sometimes"}).bind(CookieOptions)

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("SESSIONVAULT_SESSION_COOKIE_SECRET", "from-the-environment")
        assert Config({}).bind(CookieOptions).secret == "from-the-environment"

    def test_secret_not_in_repr(self):
        assert "0123456789abcdef" not in repr(_config().bind(CookieOptions))


class TestCreateSessionStore:
    def test_memory_by_default(self):
        assert isinstance(create_session_store(Config({})), InMemorySessionStore)

    def test_redis(self):
        config = _config(store={"type": "redis", "redis_url": "redis://cache:6379/1", "key_prefix": "sv:"})
        store = create_session_store(config)
        assert isinstance(store, RedisSessionStore)

    def test_store_options(self):
        options = _config(store={"type": "redis", "key_prefix": "sv:"}).bind(StoreOptions)
        assert options.type == "redis"
        assert options.key_prefix == "sv:"


class TestCreateSessionManager:
    def test_wires_manager(self):
        manager = create_session_manager(_config())
        assert isinstance(manager, SessionManager)
        assert isinstance(manager.store, InMemorySessionStore)

    def test_uses_given_store(self):
        store = InMemorySessionStore()
        assert create_session_manager(_config(), store=store).store is store

    def test_packaged_defaults_require_secret(self, monkeypatch):
        monkeypatch.delenv("SESSIONVAULT_COOKIE_SECRET", raising=False)
        monkeypatch.delenv("SESSIONVAULT_SESSION_COOKIE_SECRET", raising=False)
        with pytest.raises(ValueError):
            create_session_manager(Config.defaults())

    def test_packaged_defaults_with_secret(self, monkeypatch):
        monkeypatch.setenv("SESSIONVAULT_COOKIE_SECRET", "a-long-enough-cookie-secret")
        manager = create_session_manager(Config.defaults())
        assert isinstance(manager.store, InMemorySessionStore)

    def test_leaves_logging_alone_by_default(self):
        structlog.reset_defaults()
        create_session_manager(_config())
        assert redact_sensitive not in structlog.get_config()["processors"]

    def test_configures_redacting_logging(self):
        config = Config(
            {
                "sessionvault": {
                    "session": {"cookie": {"secret": "0123456789abcdef"}},
                    "logging": {"level": {"root": "INFO", "sessionvault.session": "DEBUG"}},
                }
            }
        )
        try:
            create_session_manager(config, configure_logging=True)
            assert redact_sensitive in structlog.get_config()["processors"]
            assert logging.getLogger("sessionvault.session").level == logging.DEBUG
        finally:
            structlog.reset_defaults()
            logging.getLogger("sessionvault.session").setLevel(logging.NOTSET)
