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
"""Unified exception hierarchy for sessionvault.

All errors inherit from SessionVaultException so callers can catch the
whole family, or branch on the two main categories:

- InvalidSessionException: the request has no usable session (missing
  cookie, tampered ticket, expired or evicted store entry, failed
  decryption). Callers treat every subclass as "not logged in".
- InfrastructureException: a collaborator failed (store backend, cookie
  writer, random source). These are reported, never downgraded to
  "no session".

Messages and context never carry ticket secrets, derived keys or store keys.
"""

from __future__ import annotations


class SessionVaultException(Exception):
    """Base exception for all sessionvault errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "SESSION_NOT_FOUND").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# ---------------------------------------------------------------------------
# No valid session
# ---------------------------------------------------------------------------


class InvalidSessionException(SessionVaultException):
    """The request does not carry a usable session."""


class NoCookieException(InvalidSessionException):
    """The request carries no session cookie at all."""


class TicketDecodeException(InvalidSessionException):
    """A session cookie is present but cannot be turned into a ticket."""


class CookieDecodeException(TicketDecodeException):
    """The cookie failed its signature or age check."""


class SessionNotFoundException(InvalidSessionException):
    """The ticket is well-formed but the store holds no entry for it."""


class SessionDecryptException(InvalidSessionException):
    """The stored ciphertext failed authenticated decryption."""


class SessionDecodeException(InvalidSessionException):
    """Bytes could not be deserialized into a SessionState."""


class SessionExpiredException(InvalidSessionException):
    """The session has no remaining validity and cannot be persisted."""


# ---------------------------------------------------------------------------
# Collaborator failures
# ---------------------------------------------------------------------------


class InfrastructureException(SessionVaultException):
    """Infrastructure failures: store backend, cookie transport, entropy."""


class StoreBackendException(InfrastructureException):
    """The session store could not complete a read, write or delete."""


class CookieWriteException(InfrastructureException):
    """A session cookie could not be set or cleared on the response."""


class TicketCreationException(InfrastructureException):
    """A new ticket could not be minted."""
