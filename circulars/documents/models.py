from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedDocument:
    """A file selected by the user; lives only for one extraction request."""

    content: bytes
    mime_type: str
    filename: str

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ExtractionResult:
    """Best-effort plain-text transcription of one document."""

    text: str
    page_count: int | None = None
    used_ocr: bool = False
