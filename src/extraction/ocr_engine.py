# src/extraction/ocr_engine.py — v1
"""OCR engine handle shared by all image extractions.

The engine starts lazily on first use, is released exactly once by close(),
and refuses work afterwards. Recognition is blocking, so it runs on a
single worker thread owned by the engine.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

logger = logging.getLogger(__name__)


class OcrEngine(ABC):
    """Recognizes text in an image file."""

    @abstractmethod
    async def recognize(self, image_path: Path) -> str:
        """Return the text recognized in the image."""

    @abstractmethod
    async def close(self) -> None:
        """Release the engine. Safe to call more than once."""


class TesseractOcrEngine(OcrEngine):
    """OCR through the Tesseract binary via pytesseract."""

    def __init__(
        self,
        language: str = "eng",
        tesseract_cmd: str | None = None,
        timeout_s: float = 60.0,
    ) -> None:
        self._language = language
        self._tesseract_cmd = tesseract_cmd or None
        self._timeout_s = timeout_s
        self._executor: ThreadPoolExecutor | None = None
        self._start_lock = asyncio.Lock()
        self._closed = False

    @property
    def started(self) -> bool:
        return self._executor is not None

    @property
    def closed(self) -> bool:
        return self._closed

    async def recognize(self, image_path: Path) -> str:
        executor = await self._ensure_started()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(executor, self._recognize_sync, image_path)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._executor is not None:
            executor, self._executor = self._executor, None
            await asyncio.to_thread(executor.shutdown, True)
            logger.info("OCR engine released")

    async def _ensure_started(self) -> ThreadPoolExecutor:
        if self._closed:
            raise RuntimeError("OCR engine used after close()")
        async with self._start_lock:
            if self._executor is None:
                import pytesseract

                if self._tesseract_cmd:
                    pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd
                version = await asyncio.to_thread(pytesseract.get_tesseract_version)
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="ocr"
                )
                logger.info("OCR engine started (tesseract %s, lang=%s)", version, self._language)
            return self._executor

    def _recognize_sync(self, image_path: Path) -> str:
        import pytesseract
        from PIL import Image

        with Image.open(image_path) as image:
            return pytesseract.image_to_string(
                image, lang=self._language, timeout=self._timeout_s
            )
