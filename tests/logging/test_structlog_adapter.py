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
"""Tests for StructlogAdapter and the credential-redacting processor."""

import json
import logging

import structlog

from sessionvault.core.config import Config
from sessionvault.logging.port import LoggingPort
from sessionvault.logging.structlog_adapter import REDACTED, StructlogAdapter, redact_sensitive


class TestStructlogAdapterConformance:
    def test_implements_logging_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_reads_root_level_and_format(self):
        adapter = StructlogAdapter()
        config = Config({"sessionvault": {"logging": {"format": "json", "level": {"root": "debug"}}}})
        adapter.configure(config)
        assert adapter._root_level == "DEBUG"
        assert adapter._format == "json"

    def test_configure_applies_module_levels(self):
        adapter = StructlogAdapter()
        config = Config(
            {"sessionvault": {"logging": {"level": {"root": "INFO", "sessionvault.session": "DEBUG"}}}}
        )
        adapter.configure(config)
        assert adapter._module_levels == {"sessionvault.session": "DEBUG"}
        assert logging.getLogger("sessionvault.session").level == logging.DEBUG

    def test_packaged_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config.defaults())
        assert adapter._format == "console"


class TestStructlogAdapterLoggers:
    def test_get_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("sessionvault.test")
        assert callable(getattr(logger, "info", None))

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("sessionvault.session.manager", "warning")
        assert logging.getLogger("sessionvault.session.manager").level == logging.WARNING


class TestRedactSensitive:
    def test_masks_credential_keys(self):
        event = {
            "event": "session saved",
            "ticket_id": "_oauth2_proxy-abcd",
            "cookie_value": "signed",
            "secret": "s3cr3t",
            "derived_key": "k",
            "access_token": "at",
            "path": "/oauth2/callback",
        }
        result = redact_sensitive(None, "info", event)
        assert result["event"] == "session saved"
        assert result["path"] == "/oauth2/callback"
        for name in ("ticket_id", "cookie_value", "secret", "derived_key", "access_token"):
            assert result[name] == REDACTED

    def test_redaction_runs_before_rendering(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"sessionvault": {"logging": {"format": "json"}}}))
        processors = adapter._processors()
        assert redact_sensitive in processors
        assert processors.index(redact_sensitive) < len(processors) - 1

    def test_json_rendering_is_redacted(self):
        event = redact_sensitive(None, "info", {"event": "x", "secret": "s3cr3t"})
        rendered = structlog.processors.JSONRenderer()(None, "info", event)
        assert "s3cr3t" not in rendered
        assert json.loads(rendered)["secret"] == REDACTED
