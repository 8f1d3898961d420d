# src/extraction/image_extractor.py — v2
"""Image extractor: OCR over an uploaded image.

The upload is written to a temporary file for the engine; the file is
removed when recognition finishes, whether it succeeded or failed.
"""

from __future__ import annotations

import logging
import mimetypes
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from medtranslate.core.errors import ExtractionError
from medtranslate.core.models import DocumentSource, UploadedFile
from medtranslate.extraction.base_extractor import BaseExtractor
from medtranslate.extraction.ocr_engine import OcrEngine

logger = logging.getLogger(__name__)


@contextmanager
def temporary_image(upload: UploadedFile) -> Iterator[Path]:
    """Write the upload to a temp file and yield its path; always delete it."""
    suffix = Path(upload.filename).suffix or mimetypes.guess_extension(upload.mime_type) or ""
    fd, name = tempfile.mkstemp(prefix="medtranslate-ocr-", suffix=suffix)
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(upload.data)
        yield path
    finally:
        path.unlink(missing_ok=True)


class ImageExtractor(BaseExtractor):
    """Extractor for ``image/*`` uploads."""

    def __init__(self, ocr_engine: OcrEngine) -> None:
        self._ocr = ocr_engine

    @property
    def source(self) -> DocumentSource:
        return DocumentSource.IMAGE

    def accepts(self, mime_type: str) -> bool:
        return mime_type.lower().startswith("image/")

    async def extract(self, upload: UploadedFile) -> str:
        """Run OCR on the uploaded image."""
        try:
            with temporary_image(upload) as path:
                text = await self._ocr.recognize(path)
        except Exception as e:
            raise ExtractionError(f"OCR failed for {upload.filename!r}: {e}") from e
        logger.debug("Recognized %d characters in %s", len(text), upload.filename)
        return text.strip()
