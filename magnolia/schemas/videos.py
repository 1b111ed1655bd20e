"""Video lesson schemas."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class VideoCategory(str, Enum):
    GROUND = "ground"
    FLIGHT = "flight"
    SAFETY = "safety"
    SYSTEMS = "systems"


class VideoBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    category: VideoCategory
    duration: str = ""  # "mm:ss" label
    date: str  # YYYY-MM-DD
    video_url: str = Field(..., min_length=1)
    thumbnail: Optional[str] = None
    instructor: Optional[str] = None


class Video(VideoBase):
    id: str


class VideoPatch(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[VideoCategory] = None
    duration: Optional[str] = None
    date: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail: Optional[str] = None
    instructor: Optional[str] = None
