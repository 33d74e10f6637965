"""Two-pass PDF text extraction: embedded text layer first, OCR fallback second."""

from circulars.documents.models import ExtractionResult
from circulars.extraction.policy import (
    DirectPassOutcome,
    ExtractionState,
    ScanPolicy,
    next_state,
)
from circulars.logging.logger import Log
from circulars.ocr.base import BaseOcrEngine
from circulars.pdf.base import BasePdfExtractor, PdfDocument

PAGE_SEPARATOR = "\n\n"


class PdfTextExtractor:
    """Runs the DIRECT_EXTRACTING -> OCR_FALLBACK -> DONE state machine.

    Pages are processed strictly in order, one at a time, so page N always
    precedes page N+1 in the output.
    """

    def __init__(
        self,
        backend: BasePdfExtractor,
        ocr_engine: BaseOcrEngine,
        *,
        policy: ScanPolicy | None = None,
        ocr_language: str = "eng",
    ) -> None:
        self._backend = backend
        self._ocr_engine = ocr_engine
        self._policy = policy or ScanPolicy()
        self._ocr_language = ocr_language

    def extract(self, pdf_bytes: bytes) -> ExtractionResult:
        with self._backend.open(pdf_bytes) as document:
            state = ExtractionState.DIRECT_EXTRACTING
            text = ""
            used_ocr = False
            while state is not ExtractionState.DONE:
                if state is ExtractionState.DIRECT_EXTRACTING:
                    direct = self._direct_pass(document)
                    Log.debug(
                        f"Direct pass read {direct.pages_read} of {document.page_count} pages "
                        f"(scanned={direct.suspected_scanned})"
                    )
                    text = direct.text
                    state = next_state(state, self._policy, direct)
                else:
                    Log.info(
                        f"PDF appears to be scanned, running OCR on {document.page_count} pages"
                    )
                    text = self._ocr_pass(document)
                    used_ocr = True
                    state = next_state(state, self._policy)
            page_count = document.page_count
        text = text.strip()
        Log.info(f"Extracted {len(text)} chars from {page_count} PDF pages (ocr={used_ocr})")
        return ExtractionResult(text=text, page_count=page_count, used_ocr=used_ocr)

    def _direct_pass(self, document: PdfDocument) -> DirectPassOutcome:
        parts: list[str] = []
        for index in range(document.page_count):
            page_text = document.page_text(index).strip()
            if self._policy.page_looks_scanned(page_text):
                return DirectPassOutcome(
                    text=PAGE_SEPARATOR.join(parts),
                    pages_read=index + 1,
                    suspected_scanned=True,
                    all_pages_cleared=False,
                )
            parts.append(page_text)
        return DirectPassOutcome(
            text=PAGE_SEPARATOR.join(parts),
            pages_read=document.page_count,
            suspected_scanned=False,
            all_pages_cleared=document.page_count > 0,
        )

    def _ocr_pass(self, document: PdfDocument) -> str:
        parts: list[str] = []
        for index in range(document.page_count):
            image = document.render_page(index, self._policy.render_scale)
            parts.append(self._ocr_engine.recognize(image, self._ocr_language).strip())
        return PAGE_SEPARATOR.join(parts)
