import pymupdf

from circulars.pdf.base import BasePdfExtractor, PdfDocument
from circulars.pdf.exceptions import PdfExtractionError


class _PyMuPdfDocument(PdfDocument):
    def __init__(self, doc: pymupdf.Document) -> None:
        self._doc = doc

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def page_text(self, index: int) -> str:
        try:
            return self._doc[index].get_text() or ""
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf text extraction failed on page {index + 1}: {exc}") from exc

    def render_page(self, index: int, scale: float) -> bytes:
        try:
            pixmap = self._doc[index].get_pixmap(matrix=pymupdf.Matrix(scale, scale), alpha=False)
            return pixmap.tobytes("png")
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf rendering failed on page {index + 1}: {exc}") from exc

    def close(self) -> None:
        self._doc.close()


class PyMuPdfAdapter(BasePdfExtractor):
    """Reads and rasterizes PDF pages using PyMuPDF."""

    def open(self, pdf_bytes: bytes) -> PdfDocument:
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf could not open document: {exc}") from exc
        if doc.needs_pass:
            doc.close()
            raise PdfExtractionError("PDF is password protected")
        return _PyMuPdfDocument(doc)
