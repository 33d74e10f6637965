from circulars.documents.models import ExtractionResult
from circulars.logging.logger import Log
from circulars.ocr.base import BaseOcrEngine


class ImageTextExtractor:
    """Images have no text layer; they go straight to OCR."""

    def __init__(self, ocr_engine: BaseOcrEngine, *, ocr_language: str = "eng") -> None:
        self._ocr_engine = ocr_engine
        self._ocr_language = ocr_language

    def extract(self, image_bytes: bytes) -> ExtractionResult:
        text = self._ocr_engine.recognize(image_bytes, self._ocr_language).strip()
        Log.info(f"OCR extracted {len(text)} chars from image")
        return ExtractionResult(text=text, page_count=1, used_ocr=True)
