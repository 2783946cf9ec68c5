"""Content hashing for target descriptors."""

from __future__ import annotations

import hashlib
import json

from perfaudit.constants.cache import CONTENT_HASH_LENGTH
from perfaudit.model import Target


def content_hash(target: Target) -> str:
    """Return a stable hash of (url, device, sorted categories).

    Category order never changes the result.
    """
    payload = {
        "url": target.url,
        "device": target.device,
        "categories": sorted(set(target.categories)),
    }
    blob = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()[:CONTENT_HASH_LENGTH]
