"""Notice identity keys."""

from __future__ import annotations

import hashlib
import re

MAX_NOTICE_KEY_LENGTH = 191
DERIVED_HASH_LENGTH = 10

_TAG_PATTERN = re.compile(r"<[^>]*>")
_OCTET_PATTERN = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE_PATTERN = re.compile(r"[\r\n\t ]+")
_CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def derive_notice_key(severity: str, message: str) -> str:
    """Build a deterministic key from a notice's severity and message.

    Identical messages of the same severity share a key, so dismissing one
    dismisses every notice with that text.
    """
    digest = hashlib.md5(message.encode("utf-8"), usedforsecurity=False).hexdigest()
    return f"{severity}:{digest[:DERIVED_HASH_LENGTH]}"


def sanitize_notice_key(raw_value: str) -> str:
    """Normalize a client-supplied key the way text form fields are cleaned."""
    value = _TAG_PATTERN.sub("", raw_value)
    value = _OCTET_PATTERN.sub("", value)
    value = _CONTROL_PATTERN.sub("", value)
    value = _WHITESPACE_PATTERN.sub(" ", value)
    return value.strip()


def is_valid_notice_key(notice_key: str) -> bool:
    return 0 < len(notice_key) <= MAX_NOTICE_KEY_LENGTH
