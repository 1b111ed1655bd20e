"""Video lesson repository."""

from magnolia.schemas import Video
from magnolia.storage import VIDEOS_KEY

from .base import JsonCollection


class VideoRepository(JsonCollection[Video]):
    key = VIDEOS_KEY
    model = Video

    def get_by_category(self, category: str) -> list[Video]:
        return [v for v in self._load() if v.category == category]
