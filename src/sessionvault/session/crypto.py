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
"""Per-ticket payload encryption.

The ticket secret is never used as a key directly: an AES-256-GCM key is
derived from it with HKDF-SHA256, bound to the ticket id through the HKDF
``info`` parameter. The ticket id is also the AEAD associated data, so a
ciphertext copied under another store key fails authentication.

Sealed layout: ``nonce (12 bytes) || ciphertext || tag (16 bytes)``.
"""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from sessionvault.kernel.exceptions import SessionDecryptException

KEY_SIZE = 32
NONCE_SIZE = 12
_TAG_SIZE = 16
_INFO_PREFIX = b"sessionvault ticket v1:"


def derive_key(secret: bytes, ticket_id: str) -> bytes:
    """Derive the payload key for *ticket_id* from its *secret*."""
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=None,
        info=_INFO_PREFIX + ticket_id.encode("utf-8"),
    )
    return hkdf.derive(secret)


def seal(key: bytes, plaintext: bytes, associated_data: bytes) -> bytes:
    nonce = os.urandom(NONCE_SIZE)
    return nonce + AESGCM(key).encrypt(nonce, plaintext, associated_data)


def open_sealed(key: bytes, sealed: bytes, associated_data: bytes) -> bytes:
    """Authenticate and decrypt *sealed*.

    Raises:
        SessionDecryptException: the data is truncated, was tampered with,
            or was sealed under a different key or associated data.
    """
    if len(sealed) < NONCE_SIZE + _TAG_SIZE:
        raise SessionDecryptException("stored session is truncated", code="SESSION_CRYPTO")
    nonce, ciphertext = sealed[:NONCE_SIZE], sealed[NONCE_SIZE:]
    try:
        return AESGCM(key).decrypt(nonce, ciphertext, associated_data)
    except InvalidTag as exc:
        raise SessionDecryptException("stored session failed authentication", code="SESSION_CRYPTO") from exc
