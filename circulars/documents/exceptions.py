class DocumentValidationError(Exception):
    """Raised when an upload is rejected before or after extraction.

    Recoverable: callers reset the file input only, never the whole session.
    """


class EmptySelectionError(DocumentValidationError):
    """Raised when no file (or an empty file) was provided."""


class UnsupportedFormatError(DocumentValidationError):
    """Raised when the file is neither a PDF, a Word document nor an image."""


class NotACircularError(DocumentValidationError):
    """Raised when extracted text does not resemble a regulatory circular."""
