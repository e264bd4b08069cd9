"""Credential hashing utilities."""
from __future__ import annotations

import hashlib
import hmac


def hash_key(user_key: str) -> str:
    """Return a SHA-256 hash of the provided user key."""
    return hashlib.sha256(user_key.encode("utf-8")).hexdigest()


def key_matches(user_key: str, hashed_key: str) -> bool:
    """Return True if `user_key` hashes to `hashed_key`.

    The comparison runs in constant time so token prefixes cannot be probed.
    """
    return hmac.compare_digest(hash_key(user_key), hashed_key)
