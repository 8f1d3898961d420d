# src/extraction/pdf_extractor.py — v2
"""PDF extractor using PyMuPDF (fitz).

Pages are decoded in order on a worker thread; page texts are joined with
newlines and the result is stripped.
"""

from __future__ import annotations

import asyncio
import logging

from medtranslate.core.errors import ExtractionError
from medtranslate.core.models import DocumentSource, UploadedFile
from medtranslate.extraction.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


class PdfExtractor(BaseExtractor):
    """Extractor for PDF uploads."""

    @property
    def source(self) -> DocumentSource:
        return DocumentSource.PDF

    def accepts(self, mime_type: str) -> bool:
        return mime_type.lower() == PDF_MIME_TYPE

    async def extract(self, upload: UploadedFile) -> str:
        """Extract text from every page of a PDF."""
        try:
            pages = await asyncio.to_thread(self._read_pages, upload.data)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Failed to read PDF {upload.filename!r}: {e}") from e
        logger.debug("Extracted %d pages from %s", len(pages), upload.filename)
        return "\n".join(pages).strip()

    @staticmethod
    def _read_pages(data: bytes) -> list[str]:
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for PDF extraction: pip install pymupdf"
            ) from e

        with fitz.open(stream=data, filetype="pdf") as doc:
            return [page.get_text("text").rstrip("\n") for page in doc]
