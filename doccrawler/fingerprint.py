from __future__ import annotations

import hashlib


def fingerprint(text: str) -> str:
    """SHA-256 of the UTF-8 text as 64 lowercase hex characters."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
