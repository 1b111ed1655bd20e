"""Presentation import schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class Slide(BaseModel):
    number: int = Field(..., ge=1)
    content: str = ""
    images: list[str] = []  # data URIs


class SlideImportResult(BaseModel):
    slides: list[Slide] = []
    error: Optional[str] = None
    details: Optional[str] = None

    @property
    def total_slides(self) -> int:
        return len(self.slides)

    @property
    def success(self) -> bool:
        return self.error is None
