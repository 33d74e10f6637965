EXTRACTION_FAILED_MESSAGE = (
    "Failed to extract text. The file may be corrupted or password protected."
)
LEGACY_DOC_MESSAGE = "DOC format not supported on server. Please convert to DOCX and retry."


class ExtractionError(Exception):
    """Raised when a document cannot be decoded or rendered into text."""


class WordExtractionError(ExtractionError):
    """Raised when a DOCX package cannot be parsed."""


class LegacyWordFormatError(ExtractionError):
    """Raised for binary .doc uploads, which must be converted to DOCX first."""

    def __init__(self, message: str = LEGACY_DOC_MESSAGE) -> None:
        super().__init__(message)
