from .logger import setup_logging
from .hashing import sha256_hash, fingerprint

__all__ = ["setup_logging", "sha256_hash", "fingerprint"]
