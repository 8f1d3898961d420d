# src/extraction/base_extractor.py — v2
"""Abstract extractor interface for uploaded file formats."""

from __future__ import annotations

from abc import ABC, abstractmethod

from medtranslate.core.models import DocumentSource, UploadedFile


class BaseExtractor(ABC):
    """Turns one kind of uploaded file into raw text."""

    @property
    @abstractmethod
    def source(self) -> DocumentSource:
        """Document source recorded for files this extractor handles."""

    @abstractmethod
    def accepts(self, mime_type: str) -> bool:
        """Whether this extractor handles the given MIME type."""

    @abstractmethod
    async def extract(self, upload: UploadedFile) -> str:
        """Extract raw text.

        Raises:
            ExtractionError: If the file cannot be decoded or recognized.
        """
