"""
Key-value store capability.

The portal persists each entity type as one JSON array under a fixed key.
Reads and writes are whole-collection: load, mutate in memory, save back.
There is no locking, so concurrent writers to the same key lose updates
(last write wins).
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


# Fixed storage keys, one JSON array each
USERS_KEY = "magnolia_users"
COURSES_KEY = "magnolia_courses"
EXAMS_KEY = "magnolia_exams"
ATTEMPTS_KEY = "magnolia_exam_attempts"
VIDEOS_KEY = "magnolia_videos"
PROGRESS_KEY = "magnolia_course_progress"


class KeyValueStore(ABC):
    """
    Synchronous string-keyed store of JSON values.

    Implementations raise StoreUnavailableError when the backing storage
    cannot be reached.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        """Return the decoded JSON value for key, or None if absent."""

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Replace the value stored under key."""

    def load_list(self, key: str) -> list:
        """Load a JSON array. Absent or non-array values read as empty."""
        value = self.load(key)
        return value if isinstance(value, list) else []
