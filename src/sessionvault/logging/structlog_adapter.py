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
"""StructlogAdapter — LoggingPort implementation using structlog.

sessionvault modules log through ``logging.getLogger(__name__)``; this
adapter renders those records (and structlog loggers obtained from
:meth:`StructlogAdapter.get_logger`) as console or JSON output, and masks
any event key that looks like credential material.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from sessionvault.core.config import Config

REDACTED = "**redacted**"

_SENSITIVE_MARKERS = ("secret", "ticket", "cookie", "key", "token", "password")


def redact_sensitive(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """structlog processor masking values whose key names a credential."""
    for name in list(event_dict):
        if name == "event":
            continue
        lowered = name.lower()
        if any(marker in lowered for marker in _SENSITIVE_MARKERS):
            event_dict[name] = REDACTED
    return event_dict


class StructlogAdapter:
    """Default logging adapter backed by structlog."""

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        """Configure structlog from ``sessionvault.logging``."""
        level_section = dict(config.get_section("sessionvault.logging.level"))
        self._root_level = str(level_section.pop("root", "INFO")).upper()
        self._module_levels = {k: str(v).upper() for k, v in level_section.items()}
        self._format = str(config.get("sessionvault.logging.format", "console")).lower()

        self._setup_structlog()
        for module, level in self._module_levels.items():
            self.set_level(module, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def _processors(self) -> list[structlog.types.Processor]:
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]
        if self._format == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())
        return processors

    def _setup_structlog(self) -> None:
        log_level = getattr(logging, self._root_level, logging.INFO)

        structlog.configure(
            processors=self._processors(),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=log_level,
            force=True,
        )
