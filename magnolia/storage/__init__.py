"""
Magnolia Storage - Key-value persistence for portal collections.

This module provides:
- KeyValueStore: the load/save capability every repository depends on
- SQLiteStore: file-backed store
- MemoryStore: in-process store
- ensure_seeded: write default datasets on first start
"""

from .base import (
    KeyValueStore,
    USERS_KEY,
    COURSES_KEY,
    EXAMS_KEY,
    ATTEMPTS_KEY,
    VIDEOS_KEY,
    PROGRESS_KEY,
)
from .memory import MemoryStore
from .sqlite import SQLiteStore, DEFAULT_STORE_DIR, DEFAULT_STORE_DB
from .seed import ensure_seeded, SEEDED_KEYS

__all__ = [
    "KeyValueStore",
    "USERS_KEY",
    "COURSES_KEY",
    "EXAMS_KEY",
    "ATTEMPTS_KEY",
    "VIDEOS_KEY",
    "PROGRESS_KEY",
    "MemoryStore",
    "SQLiteStore",
    "DEFAULT_STORE_DIR",
    "DEFAULT_STORE_DB",
    "ensure_seeded",
    "SEEDED_KEYS",
]
