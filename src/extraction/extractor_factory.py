# src/extraction/extractor_factory.py — v3
"""Content extractor: dispatch an upload to the extractor for its MIME type."""

from __future__ import annotations

import logging

from medtranslate.core.errors import UnsupportedFileType
from medtranslate.core.models import DocumentSource, UploadedFile
from medtranslate.extraction.base_extractor import BaseExtractor
from medtranslate.extraction.image_extractor import ImageExtractor
from medtranslate.extraction.ocr_engine import OcrEngine
from medtranslate.extraction.pdf_extractor import PdfExtractor

logger = logging.getLogger(__name__)


class ContentExtractor:
    """Routes PDF uploads to PyMuPDF and images to OCR."""

    def __init__(
        self,
        ocr_engine: OcrEngine,
        extractors: list[BaseExtractor] | None = None,
    ) -> None:
        self._extractors = extractors or [PdfExtractor(), ImageExtractor(ocr_engine)]

    def resolve(self, mime_type: str) -> BaseExtractor:
        """Extractor for a MIME type.

        Raises:
            UnsupportedFileType: If no extractor accepts it.
        """
        for extractor in self._extractors:
            if extractor.accepts(mime_type):
                return extractor
        raise UnsupportedFileType(mime_type)

    def source_for(self, mime_type: str) -> DocumentSource:
        return self.resolve(mime_type).source

    async def extract(self, upload: UploadedFile) -> str:
        """Extract raw text from an uploaded file.

        Raises:
            UnsupportedFileType: For MIME types other than application/pdf and image/*.
            ExtractionError: If decoding or OCR fails.
        """
        extractor = self.resolve(upload.mime_type)
        logger.info("Extracting %s (%s)", upload.filename, upload.mime_type)
        return await extractor.extract(upload)
