from abc import ABC, abstractmethod


class BaseOcrEngine(ABC):
    """Contract for OCR adapters."""

    @abstractmethod
    def recognize(self, image_bytes: bytes, language: str = "eng") -> str:
        """Convert an encoded raster image into text.

        Args:
            image_bytes: PNG/JPEG/WEBP content.
            language: OCR language code.

        Returns:
            Recognized text, stripped.

        Raises:
            OcrEngineNotReadyError: if the engine is still loading.
            OcrError: if recognition fails.
        """
