"""Alert storage module for the alarm file.

Provides plain-text storage for alerts:
- One pipe-delimited line per alert (see codec)
- Atomic rewrites for removal and replacement
- Malformed lines are skipped on read, never fatal
"""

from .codec import decode, encode, DELIMITER
from .store import AlertStore

__all__ = [
    "AlertStore",
    "decode",
    "encode",
    "DELIMITER",
]
