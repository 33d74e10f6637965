from circulars.documents.detector import DocumentFormat, detect_format, is_legacy_word
from circulars.documents.exceptions import UnsupportedFormatError
from circulars.documents.models import ExtractionResult, UploadedDocument
from circulars.extraction.exceptions import (
    EXTRACTION_FAILED_MESSAGE,
    ExtractionError,
    LegacyWordFormatError,
)
from circulars.extraction.image_extractor import ImageTextExtractor
from circulars.extraction.pdf_text_extractor import PdfTextExtractor
from circulars.extraction.word_extractor import DocxTextExtractor
from circulars.logging.logger import Log
from circulars.ocr.exceptions import OcrEngineNotReadyError, OcrError


class TextExtractionEngine:
    """Dispatches an upload to the extractor for its format."""

    def __init__(
        self,
        pdf_extractor: PdfTextExtractor,
        word_extractor: DocxTextExtractor | None,
        image_extractor: ImageTextExtractor,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._word_extractor = word_extractor
        self._image_extractor = image_extractor

    def extract(
        self,
        document: UploadedDocument,
        document_format: DocumentFormat | None = None,
    ) -> ExtractionResult:
        """Extract text from an upload.

        Raises:
            UnsupportedFormatError: if the format cannot be handled here.
            LegacyWordFormatError: for binary .doc files.
            OcrEngineNotReadyError: if OCR is needed but still loading.
            ExtractionError: for any decoding or rendering failure; no
                partial text is ever returned.
        """
        if document_format is None:
            document_format = detect_format(document.mime_type, document.filename)
        try:
            return self._dispatch(document, document_format)
        except (LegacyWordFormatError, OcrEngineNotReadyError):
            raise
        except (ExtractionError, OcrError) as exc:
            Log.error(f"Extraction failed for '{document.filename}': {exc}")
            raise ExtractionError(EXTRACTION_FAILED_MESSAGE) from exc

    def _dispatch(self, document: UploadedDocument, document_format: DocumentFormat) -> ExtractionResult:
        if document_format is DocumentFormat.PDF:
            return self._pdf_extractor.extract(document.content)
        if document_format is DocumentFormat.IMAGE:
            return self._image_extractor.extract(document.content)
        if document_format is DocumentFormat.WORD_DOC:
            if is_legacy_word(document.mime_type, document.filename):
                raise LegacyWordFormatError()
            if self._word_extractor is None:
                raise UnsupportedFormatError("Word documents are extracted by the server")
            return self._word_extractor.extract(document.content)
        raise UnsupportedFormatError(f"Unsupported file type: {document.mime_type or document.filename}")
