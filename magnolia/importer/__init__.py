"""Magnolia Importer - Turn uploaded presentations into slide content."""

from .pptx import import_presentation, decode_payload, extract_slide

__all__ = ["import_presentation", "decode_payload", "extract_slide"]
