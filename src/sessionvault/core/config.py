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
"""Layered configuration: packaged defaults, YAML/TOML files, profiles and env vars."""

from __future__ import annotations

import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

T = TypeVar("T")

_ROOT_KEY = "sessionvault"
_ENV_PREFIX = "SESSIONVAULT_"
_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10

_CONFIG_PROPERTIES_ATTR = "__sessionvault_config_prefix__"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a pydantic model as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="sessionvault.session.cookie")
        class CookieOptions(BaseModel):
            name: str = "_oauth2_proxy"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def env_key_for(key: str) -> str:
    """Return the environment variable that overrides *key*.

    ``sessionvault.session.cookie.name`` -> ``SESSIONVAULT_SESSION_COOKIE_NAME``
    """
    base = key.removeprefix(f"{_ROOT_KEY}.")
    return _ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (``SESSIONVAULT_SECTION_KEY``)
    2. Profile overlays, then the main config file
    3. Packaged defaults (``sessionvault-defaults.yaml``)
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Config sources that were merged, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load *path* (YAML or TOML) on top of the packaged defaults.

        For each active profile, ``<stem>-<profile><suffix>`` next to *path*
        is merged in order when it exists. A missing *path* is not an error;
        the defaults (and env vars) still apply.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_defaults()
            sources.append("sessionvault-defaults.yaml (defaults)")

        if path.is_file():
            data = cls._deep_merge(data, cls._load_config_data(path))
            sources.append(str(path))

            for profile in active_profiles or []:
                profile_path = path.with_name(f"{path.stem}-{profile}{path.suffix}")
                if profile_path.is_file():
                    data = cls._deep_merge(data, cls._load_config_data(profile_path))
                    sources.append(f"{profile_path} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @classmethod
    def defaults(cls) -> Config:
        """Return a Config holding only the packaged defaults."""
        instance = cls(cls._load_defaults())
        instance._loaded_sources = ["sessionvault-defaults.yaml (defaults)"]
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f) or {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_defaults() -> dict[str, Any]:
        defaults_file = importlib.resources.files("sessionvault.resources").joinpath(
            "sessionvault-defaults.yaml"
        )
        with importlib.resources.as_file(defaults_file) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge *override* into *base*; override values win."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        String values may contain ``${ENV_VAR}``, ``${other.config.key}`` or
        ``${key:default}`` placeholders.
        """
        env_val = os.environ.get(env_key_for(key))
        if env_val is not None:
            return env_val

        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve_placeholders(value)
        return value

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        if _depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Circular placeholder reference while resolving '{value}'")

        def _replace(match: re.Match[str]) -> str:
            inner = match.group(1)
            ref_key, sep, default_val = inner.partition(":")

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            current = self._lookup(ref_key)
            if current is not None:
                resolved = str(current)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if sep:
                return cast(str, default_val)

            raise ValueError(f"Cannot resolve placeholder '${{{inner}}}': not found in environment or config")

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Return the mapping stored under *prefix*, with env var overrides applied.

        Only keys already present in the section (or declared on a bound
        model) can be overridden; see :meth:`bind`.
        """
        section = self._lookup(prefix)
        if not isinstance(section, dict):
            return {}
        resolved: dict[str, Any] = {}
        for key, value in section.items():
            env_val = os.environ.get(env_key_for(f"{prefix}.{key}"))
            if env_val is not None:
                resolved[key] = env_val
            elif isinstance(value, str) and "${" in value:
                resolved[key] = self._resolve_placeholders(value)
            else:
                resolved[key] = value
        return resolved

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a ``@config_properties`` pydantic model."""
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        if not (isinstance(config_cls, type) and issubclass(config_cls, BaseModel)):
            raise ValueError(f"{config_cls.__name__} must be a pydantic BaseModel to be bound")

        section = self.get_section(prefix)
        for name in config_cls.model_fields:
            if name not in section:
                env_val = os.environ.get(env_key_for(f"{prefix}.{name}"))
                if env_val is not None:
                    section[name] = env_val
        try:
            return cast(T, config_cls.model_validate(section))
        except ValidationError as exc:
            raise ValueError(
                f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}"
            ) from exc
