import io

import pdfplumber

from circulars.pdf.base import BasePdfExtractor, PdfDocument
from circulars.pdf.exceptions import PdfExtractionError

_BASE_RESOLUTION_DPI = 72


class _PdfPlumberDocument(PdfDocument):
    def __init__(self, pdf: pdfplumber.PDF) -> None:
        self._pdf = pdf

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    def page_text(self, index: int) -> str:
        try:
            return self._pdf.pages[index].extract_text() or ""
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber text extraction failed on page {index + 1}: {exc}") from exc

    def render_page(self, index: int, scale: float) -> bytes:
        try:
            page_image = self._pdf.pages[index].to_image(resolution=int(_BASE_RESOLUTION_DPI * scale))
            buf = io.BytesIO()
            page_image.original.save(buf, format="PNG")
            return buf.getvalue()
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber rendering failed on page {index + 1}: {exc}") from exc

    def close(self) -> None:
        self._pdf.close()


class PdfPlumberAdapter(BasePdfExtractor):
    """Reads and rasterizes PDF pages using pdfplumber."""

    def open(self, pdf_bytes: bytes) -> PdfDocument:
        try:
            pdf = pdfplumber.open(io.BytesIO(pdf_bytes))
            # Touch the page tree so broken or encrypted files fail here.
            _ = len(pdf.pages)
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not open document: {exc}") from exc
        return _PdfPlumberDocument(pdf)
