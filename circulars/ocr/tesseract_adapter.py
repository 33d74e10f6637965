import io

import pytesseract
from PIL import Image, UnidentifiedImageError

from circulars.logging.logger import Log
from circulars.ocr.base import BaseOcrEngine
from circulars.ocr.exceptions import OcrEngineNotReadyError, OcrError
from circulars.ocr.loader import OcrEngineLoader


def probe_tesseract() -> str:
    """Raise if the tesseract binary is unavailable; return its version."""
    return str(pytesseract.get_tesseract_version())


class TesseractOcrAdapter(BaseOcrEngine):
    """Recognizes text with Tesseract through pytesseract."""

    def __init__(
        self,
        loader: OcrEngineLoader,
        *,
        ready_timeout_seconds: float = 6.0,
        poll_interval_seconds: float = 0.15,
    ) -> None:
        self._loader = loader
        self._ready_timeout_seconds = ready_timeout_seconds
        self._poll_interval_seconds = poll_interval_seconds

    def recognize(self, image_bytes: bytes, language: str = "eng") -> str:
        if not self._loader.wait_until_ready(
            self._ready_timeout_seconds, self._poll_interval_seconds
        ):
            if self._loader.has_failed():
                raise OcrError(f"OCR engine failed to load: {self._loader.failure}")
            raise OcrEngineNotReadyError("OCR engine not ready")
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                text = pytesseract.image_to_string(image, lang=language)
        except UnidentifiedImageError as exc:
            raise OcrError(f"Unreadable image: {exc}") from exc
        except pytesseract.TesseractError as exc:
            raise OcrError(f"Tesseract failed: {exc}") from exc
        except OSError as exc:
            # Truncated image data and a missing tesseract binary both land here.
            raise OcrError(f"OCR failed: {exc}") from exc
        Log.debug(f"OCR recognized {len(text)} chars ({language})")
        return text.strip()
