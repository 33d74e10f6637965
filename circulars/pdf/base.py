from abc import ABC, abstractmethod
from types import TracebackType


class PdfDocument(ABC):
    """An opened PDF whose pages can be read or rendered one at a time."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages in the document."""

    @abstractmethod
    def page_text(self, index: int) -> str:
        """Return the embedded text layer of a zero-based page."""

    @abstractmethod
    def render_page(self, index: int, scale: float) -> bytes:
        """Rasterize a zero-based page to PNG bytes at the given upscale factor."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying document handle."""

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class BasePdfExtractor(ABC):
    """Contract for all PDF backends."""

    @abstractmethod
    def open(self, pdf_bytes: bytes) -> PdfDocument:
        """Open PDF bytes for page-by-page access.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            A PdfDocument; use it as a context manager.

        Raises:
            PdfExtractionError: if the bytes are not a readable PDF or the
                document is password protected.
        """
