"""
Hashing utilities for cache validation.
"""

from __future__ import annotations

import hashlib
import json

from pydantic import BaseModel


def sha256_hash(content: str | bytes) -> str:
    """Return the SHA-256 hex digest of the given content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def fingerprint(model: BaseModel) -> str:
    """Digest of a model's canonical JSON (sorted keys), stable across runs."""
    payload = json.dumps(model.model_dump(mode="json"), sort_keys=True, ensure_ascii=False)
    return sha256_hash(payload)
