"""
Presentation importer - Extract slide text and images from a .pptx payload.

A .pptx file is a zip archive. Slides live at ppt/slides/slideN.xml, their
image relationships at ppt/slides/_rels/slideN.xml.rels and the images
under ppt/media/.
"""

import base64
import binascii
import html
import io
import logging
import re
import zipfile
from typing import Optional

from magnolia.schemas import Slide, SlideImportResult


logger = logging.getLogger(__name__)

SLIDE_PATH_RE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")
TEXT_RUN_RE = re.compile(r"<a:t(?:\s[^>]*)?>([^<]*)</a:t>")
EMBED_RE = re.compile(r'r:embed="([^"]+)"')

IMAGE_TYPES = {".png": "png", ".gif": "gif"}  # anything else is sent as jpeg


def decode_payload(file_data: str) -> bytes:
    """Decode base64, dropping a data-URI prefix if present."""
    if "," in file_data:
        file_data = file_data.split(",", 1)[1]
    return base64.b64decode(file_data, validate=False)


def image_data_uri(path: str, data: bytes) -> str:
    suffix = path[path.rfind("."):].lower() if "." in path else ""
    image_type = IMAGE_TYPES.get(suffix, "jpeg")
    return f"data:image/{image_type};base64,{base64.b64encode(data).decode('ascii')}"


def relationship_target(rels_xml: str, rel_id: str) -> Optional[str]:
    """Target path for a relationship ID, resolved against the ppt/ root."""
    match = re.search(rf'Id="{re.escape(rel_id)}"[^>]*Target="([^"]+)"', rels_xml)
    if not match:
        return None
    return match.group(1).replace("..", "ppt", 1)


def extract_slide(archive: zipfile.ZipFile, path: str, slide_number: int, position: int) -> Slide:
    """
    Pull text runs and embedded images for one slide.

    Args:
        archive: Open .pptx archive
        path: Slide XML path inside the archive
        slide_number: N from slideN.xml, used to find the relationships file
        position: 1-based position in the imported deck
    """
    names = set(archive.namelist())
    xml = archive.read(path).decode("utf-8", errors="replace")

    texts = [html.unescape(t) for t in TEXT_RUN_RE.findall(xml) if t]
    refs = EMBED_RE.findall(xml)

    rels_path = f"ppt/slides/_rels/slide{slide_number}.xml.rels"
    images = []
    if rels_path in names:
        rels_xml = archive.read(rels_path).decode("utf-8", errors="replace")
        media_paths = [relationship_target(rels_xml, ref) for ref in refs]
    else:
        media_paths = [f"ppt/media/{ref}" for ref in refs]

    for media_path in media_paths:
        if media_path and media_path in names:
            images.append(image_data_uri(media_path, archive.read(media_path)))

    return Slide(number=position, content="\n".join(texts), images=images)


def import_presentation(file_data: str) -> SlideImportResult:
    """
    Convert a base64 .pptx payload into ordered slides.

    Args:
        file_data: Base64 archive, optionally as a data URI

    Returns:
        SlideImportResult; on failure `error` is set and slides is empty
    """
    if not file_data:
        return SlideImportResult(error="No file data provided")

    try:
        archive = zipfile.ZipFile(io.BytesIO(decode_payload(file_data)))
    except (binascii.Error, ValueError, zipfile.BadZipFile) as e:
        logger.error(f"Error converting PPTX: {e}")
        return SlideImportResult(error="Failed to convert PPTX file", details=str(e))

    with archive:
        slide_paths = []
        for name in archive.namelist():
            match = SLIDE_PATH_RE.match(name)
            if match:
                slide_paths.append((int(match.group(1)), name))
        slide_paths.sort()

        slides = []
        try:
            for position, (number, path) in enumerate(slide_paths, start=1):
                slides.append(extract_slide(archive, path, number, position))
        except (KeyError, zipfile.BadZipFile) as e:
            logger.error(f"Error converting PPTX: {e}")
            return SlideImportResult(error="Failed to convert PPTX file", details=str(e))

    logger.info(f"Imported {len(slides)} slides")
    return SlideImportResult(slides=slides)
