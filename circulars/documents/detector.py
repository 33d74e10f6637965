"""Classifies uploads by declared MIME type, falling back to the file name."""

import re
from enum import Enum

from circulars.documents.exceptions import UnsupportedFormatError


class DocumentFormat(str, Enum):
    PDF = "pdf"
    WORD_DOC = "word"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
LEGACY_DOC_MIME_TYPE = "application/msword"

ACCEPTED_MIME_TYPES: dict[str, DocumentFormat] = {
    "application/pdf": DocumentFormat.PDF,
    DOCX_MIME_TYPE: DocumentFormat.WORD_DOC,
    LEGACY_DOC_MIME_TYPE: DocumentFormat.WORD_DOC,
    "image/png": DocumentFormat.IMAGE,
    "image/jpeg": DocumentFormat.IMAGE,
    "image/jpg": DocumentFormat.IMAGE,
    "image/webp": DocumentFormat.IMAGE,
}

_GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream", "binary/octet-stream"})

_EXTENSION_PATTERNS: list[tuple[re.Pattern[str], DocumentFormat]] = [
    (re.compile(r"\.pdf$", re.IGNORECASE), DocumentFormat.PDF),
    (re.compile(r"\.docx?$", re.IGNORECASE), DocumentFormat.WORD_DOC),
    (re.compile(r"\.(png|jpe?g|webp)$", re.IGNORECASE), DocumentFormat.IMAGE),
]

UNSUPPORTED_MESSAGE = "Please upload a valid PDF, Word document, or image file"


def _normalize_mime(mime_type: str | None) -> str:
    return (mime_type or "").split(";", 1)[0].strip().lower()


def detect_format(mime_type: str | None, filename: str | None) -> DocumentFormat:
    """Return the document format for an upload.

    The MIME type decides when it is specific; absent or generic MIME types
    fall back to extension matching.
    """
    mime = _normalize_mime(mime_type)
    if mime not in _GENERIC_MIME_TYPES:
        detected = ACCEPTED_MIME_TYPES.get(mime)
        if detected is not None:
            return detected
    name = (filename or "").strip()
    for pattern, document_format in _EXTENSION_PATTERNS:
        if pattern.search(name):
            return document_format
    return DocumentFormat.UNSUPPORTED


def is_legacy_word(mime_type: str | None, filename: str | None) -> bool:
    """True for the binary Word 97-2003 format, which is never parsed."""
    mime = _normalize_mime(mime_type)
    if mime == DOCX_MIME_TYPE:
        return False
    if mime == LEGACY_DOC_MIME_TYPE:
        return True
    return (filename or "").lower().endswith(".doc")


def ensure_supported(mime_type: str | None, filename: str | None) -> DocumentFormat:
    """Detect the format or raise before any extraction is attempted.

    Raises:
        UnsupportedFormatError: if the upload is not PDF, Word or image.
    """
    document_format = detect_format(mime_type, filename)
    if document_format is DocumentFormat.UNSUPPORTED:
        raise UnsupportedFormatError(UNSUPPORTED_MESSAGE)
    return document_format
