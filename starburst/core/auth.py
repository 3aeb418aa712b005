"""Basic-Auth header parsing for the shared wake password."""

from __future__ import annotations

import base64
import binascii

from starburst.core.credentials import verify_password
from starburst.core.model import Credential

BASIC_PREFIX = "Basic "


def extract_password(header_value: str | None) -> str | None:
    """Return the password half of a ``Basic`` header, or None if malformed.

    The user name is ignored; only one shared password exists.
    """
    if header_value is None or not header_value.startswith(BASIC_PREFIX):
        return None

    try:
        decoded = base64.b64decode(header_value[len(BASIC_PREFIX):], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    _, sep, password = decoded.partition(":")
    if not sep:
        return None
    return password


def authorize(header_value: str | None, credential: Credential | None) -> bool:
    if credential is None:
        return False
    password = extract_password(header_value)
    if password is None:
        return False
    return verify_password(password, credential)
