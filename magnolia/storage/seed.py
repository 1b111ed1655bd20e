"""Explicit first-start seeding of the default datasets."""

import logging
from typing import Optional

from magnolia.utils.seed_loader import load_seed

from .base import COURSES_KEY, USERS_KEY, VIDEOS_KEY, KeyValueStore


logger = logging.getLogger(__name__)

# storage key -> seed dataset name
SEEDED_KEYS = {
    USERS_KEY: "users",
    COURSES_KEY: "courses",
    VIDEOS_KEY: "videos",
}


def ensure_seeded(store: KeyValueStore, seeds: Optional[dict[str, str]] = None) -> list[str]:
    """
    Write default datasets under keys that hold nothing yet.

    Existing values, including empty lists, are left alone.

    Returns:
        Keys that were seeded
    """
    seeded = []
    for key, name in (seeds or SEEDED_KEYS).items():
        if store.load(key) is not None:
            continue
        records = load_seed(name)
        store.save(key, records)
        logger.info(f"Seeded '{key}' with {len(records)} default records")
        seeded.append(key)
    return seeded
