"""Shared-password verification using argon2id."""

from __future__ import annotations

import hmac
import logging
import secrets

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw

from starburst.core.model import (
    DEFAULT_ITERATIONS,
    DEFAULT_MEMORY_COST_KIB,
    DEFAULT_PARALLELISM,
    Credential,
)

HASH_LENGTH = 32
SALT_BYTES = 16
LOGGER = logging.getLogger(__name__)


def hash_password(
    password: str,
    salt: str,
    *,
    memory_cost_kib: int = DEFAULT_MEMORY_COST_KIB,
    iterations: int = DEFAULT_ITERATIONS,
    parallelism: int = DEFAULT_PARALLELISM,
) -> str:
    """Hash ``password`` with argon2id and return the raw digest as lowercase hex.

    Raises:
        argon2.exceptions.HashingError: if the cost parameters or salt are
            rejected by argon2 (e.g. zero iterations or a salt under 8 bytes).
    """
    raw = hash_secret_raw(
        secret=password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        time_cost=iterations,
        memory_cost=memory_cost_kib,
        parallelism=parallelism,
        hash_len=HASH_LENGTH,
        type=Type.ID,
    )
    return raw.hex()


def generate_salt() -> str:
    return secrets.token_hex(SALT_BYTES)


def verify_password(candidate: str, credential: Credential | None) -> bool:
    """Return True when ``candidate`` hashes to the configured digest.

    With no credential configured every candidate is denied.
    """
    if credential is None or not credential.hash or not credential.salt:
        return False

    try:
        digest = hash_password(
            candidate,
            credential.salt,
            memory_cost_kib=credential.memory_cost_kib,
            iterations=credential.iterations,
            parallelism=credential.parallelism,
        )
    except (HashingError, OverflowError) as exc:
        LOGGER.warning("Password hashing rejected the configured cost parameters: %s", exc)
        return False

    return hmac.compare_digest(digest.encode("ascii"), credential.hash.lower().encode("ascii"))
